"""Shared fixtures: program rows and an in-memory Hevy account."""

import pytest

from program_sync.client import HevyAPIError
from program_sync.types import CsvRow, ParsedExercise


HEADER = "WEEK,DAY,EXERCISE,SETS,REPS,% TM,WEIGHT (kg),ACTUAL REPS,RPE,NOTES"


def make_row(week="1", day="A - Squat Day", exercise="Back Squat", sets="5", reps="5",
             percent_tm="", weight="100", notes=""):
    return CsvRow(week=week, day=day, exercise=exercise, sets=sets, reps=reps,
                  percent_tm=percent_tm, weight=weight, notes=notes)


def make_exercise(name="Back Squat", sets=5, reps=5, weight=100.0, percent_tm="", notes=""):
    return ParsedExercise(name=name, sets=sets, reps=reps, percent_tm=percent_tm,
                          weight=weight, notes=notes)


class FakeHevyClient:
    """In-memory stand-in for HevyClient. Records every call."""

    def __init__(self, templates=(), folders=(), routines=(), fail_on=None, bare_folder_ids=False):
        self.store = {
            "exercise_templates": [dict(t) for t in templates],
            "routine_folders": [dict(f) for f in folders],
            "routines": [dict(r) for r in routines],
        }
        self.calls = []
        self.fail_on = fail_on  # (method, resource) that answers 500
        self.bare_folder_ids = bare_folder_ids
        self._next_id = 1000

    def _new_id(self):
        self._next_id += 1
        return self._next_id

    def _check(self, method, resource):
        if self.fail_on == (method, resource):
            raise HevyAPIError(method, resource, 500, '{"error": "boom"}')

    @property
    def mutations(self):
        return [c for c in self.calls if c[0] in ("POST", "PUT")]

    def list_all(self, resource, page_size=None):
        self.calls.append(("GET", resource, None))
        self._check("GET", resource)
        return [dict(item) for item in self.store[resource]]

    def fetch_exercise_templates(self):
        return self.list_all("exercise_templates")

    def fetch_routine_folders(self):
        return self.list_all("routine_folders")

    def fetch_routines(self):
        return self.list_all("routines")

    def create(self, resource, payload):
        self.calls.append(("POST", resource, payload))
        self._check("POST", resource)

        if resource == "exercise_templates":
            exercise = payload["exercise"]
            obj = {"id": f"tmpl-{self._new_id()}", "title": exercise["title"], "is_custom": True}
            self.store[resource].append(obj)
            # Real API sometimes answers with only the id
            return {"id": obj["id"]}

        if resource == "routine_folders":
            obj = {"id": self._new_id(), "title": payload["routine_folder"]["title"]}
            self.store[resource].append(obj)
            if self.bare_folder_ids:
                return {"id": obj["id"]}
            return {"routine_folder": obj}

        routine = payload["routine"]
        obj = {"id": f"rt-{self._new_id()}", "title": routine["title"],
               "folder_id": routine["folder_id"], "exercises": routine["exercises"]}
        self.store[resource].append(obj)
        return {"routine": [obj]}

    def update(self, resource, object_id, payload):
        self.calls.append(("PUT", f"{resource}/{object_id}", payload))
        self._check("PUT", resource)
        for obj in self.store[resource]:
            if obj["id"] == object_id:
                obj.update(payload["routine"])
                return {"routine": [obj]}
        raise HevyAPIError("PUT", f"{resource}/{object_id}", 404, "not found")

    def close(self):
        pass


@pytest.fixture
def catalog():
    """Remote exercise templates in catalog order."""
    return [
        {"id": "T1", "title": "Barbell Squat", "type": "weight_reps"},
        {"id": "T2", "title": "Barbell Bench Press", "type": "weight_reps"},
        {"id": "T3", "title": "Deadlift (Barbell)", "type": "weight_reps"},
        {"id": "T4", "title": "Pull Up", "type": "bodyweight_reps"},
        {"id": "T5", "title": "Plank", "type": "duration"},
    ]


@pytest.fixture
def fake_client(catalog):
    return FakeHevyClient(templates=catalog)


@pytest.fixture
def program_csv(tmp_path):
    """Two weeks plus the week-16 marker, written as the sheet exports it."""
    lines = [
        HEADER,
        '1,A - Squat Day,Back Squat,5,5,75%,100,,,Belt on top set',
        '1,A - Squat Day,Pause Squat (3 sec),3,3,60%,80,,,',
        '1,B - Bench Day,Bench Press,3,AMRAP,80%,90,,,',
        '1,B - Bench Day,Light accessories,0,-,-,Select,,,Pick 2-3',
        '',
        '2,A - Squat Day,Back Squat,5,5,77.5%,102.5,,,',
        '2,B - Bench Day,Pull Up,3,Easy,-,BW,,,',
        '16,A - Test Day,UPDATE TRAINING MAXES,-,-,-,-,,,',
    ]
    path = tmp_path / "program.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path

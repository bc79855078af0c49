"""
Remote reconciliation.

Plans the folder/routine/exercise operations that bring the remote account
in line with the program, then applies them in order.

Natural keys:
- folder:  title ("Week <n> - <program title>")
- routine: (title, folder_id)

Planning is pure: it reads a RemoteSnapshot and returns Operations. Applying
a plan is the only step that talks to the API, and it appends newly created
objects to the snapshot so later lookups in the same run see them.

Limitation: the routine update endpoint does not accept folder_id, so a
routine is never moved between folders. A routine that exists under another
folder is left alone and a new one is created in the week's folder.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .matcher import custom_exercise_payload, mark_created
from .sets import build_routine_exercise
from .types import (
    ExerciseMapping, ExerciseTemplate, ParsedDay, ParsedWeek,
    RemoteFolder, RemoteRoutine,
)

logger = logging.getLogger(__name__)

FOLDERS = "routine_folders"
ROUTINES = "routines"
EXERCISE_TEMPLATES = "exercise_templates"


def folder_title(week_number: int, program_title: str) -> str:
    return f"Week {week_number} - {program_title}"


# =============================================================================
# Snapshot
# =============================================================================

class RemoteSnapshot:
    """Remote objects known to this run. Grows as objects are created."""

    def __init__(self, templates: Optional[List[ExerciseTemplate]] = None,
                 folders: Optional[List[RemoteFolder]] = None,
                 routines: Optional[List[RemoteRoutine]] = None):
        self.templates = list(templates or [])
        self.folders = list(folders or [])
        self.routines = list(routines or [])

    @classmethod
    def from_api(cls, templates: Iterable[Dict] = (), folders: Iterable[Dict] = (),
                 routines: Iterable[Dict] = ()) -> 'RemoteSnapshot':
        return cls(
            templates=[ExerciseTemplate.from_api(t) for t in templates],
            folders=[RemoteFolder.from_api(f) for f in folders],
            routines=[RemoteRoutine.from_api(r) for r in routines],
        )

    def find_folder(self, title: str) -> Optional[RemoteFolder]:
        for folder in self.folders:
            if folder.title == title:
                return folder
        return None

    def find_routine(self, title: str, folder_id) -> Optional[RemoteRoutine]:
        for routine in self.routines:
            if routine.title == title and routine.folder_id == folder_id:
                return routine
        return None

    def add_template(self, template: ExerciseTemplate):
        self.templates.append(template)

    def add_folder(self, folder: RemoteFolder):
        self.folders.append(folder)

    def add_routine(self, routine: RemoteRoutine):
        self.routines.append(routine)


# =============================================================================
# Plan
# =============================================================================

CREATE = "create"
UPDATE = "update"
REUSE = "reuse"
SKIP = "skip"


@dataclass
class Operation:
    """One intended change (or deliberate non-change) to the remote account."""
    action: str  # create, update, reuse, skip
    resource: str  # routine_folders, routines, exercise_templates
    title: str
    payload: Optional[Dict[str, Any]] = None
    target_id: Optional[Any] = None  # existing object for update/reuse
    folder_title: Optional[str] = None  # owning folder for routines
    week: Optional[int] = None
    skipped_exercises: List[str] = field(default_factory=list)
    detail: str = ""

    @property
    def is_mutation(self) -> bool:
        return self.action in (CREATE, UPDATE)


@dataclass
class SyncPlan:
    operations: List[Operation] = field(default_factory=list)

    def count(self, action: str, resource: str) -> int:
        return sum(1 for op in self.operations if op.action == action and op.resource == resource)

    @property
    def mutations(self) -> List[Operation]:
        return [op for op in self.operations if op.is_mutation]


@dataclass
class SyncStats:
    exercises_created: int = 0
    folders_created: int = 0
    folders_reused: int = 0
    routines_created: int = 0
    routines_updated: int = 0
    routines_skipped: int = 0


def plan_exercise_creations(mapping: Dict[str, ExerciseMapping]) -> List[Operation]:
    """One create per mapping still waiting for a remote exercise."""
    return [
        Operation(
            action=CREATE,
            resource=EXERCISE_TEMPLATES,
            title=name,
            payload=custom_exercise_payload(name),
        )
        for name, entry in mapping.items()
        if entry.needs_creation
    ]


def build_day_exercises(day: ParsedDay, mapping: Dict[str, ExerciseMapping]):
    """Routine exercise entries for a day, plus the names left out."""
    exercises = []
    skipped = []

    for exercise in day.exercises:
        entry = mapping.get(exercise.name)
        if entry is None or entry.needs_creation:
            logger.info("Skipping unmapped exercise: %s", exercise.name)
            skipped.append(exercise.name)
            continue

        routine_exercise = build_routine_exercise(exercise, entry.template_id)
        if routine_exercise is None:
            logger.info("Skipping exercise with no sets: %s", exercise.name)
            skipped.append(exercise.name)
            continue

        exercises.append(routine_exercise)

    return exercises, skipped


def plan_week(week: ParsedWeek, mapping: Dict[str, ExerciseMapping],
              snapshot: RemoteSnapshot, program_title: str) -> List[Operation]:
    """Folder operation for the week followed by one operation per day."""
    title = folder_title(week.number, program_title)
    folder = snapshot.find_folder(title)

    if folder is None:
        operations = [Operation(
            action=CREATE,
            resource=FOLDERS,
            title=title,
            payload={"routine_folder": {"title": title}},
            week=week.number,
        )]
    else:
        operations = [Operation(action=REUSE, resource=FOLDERS, title=title,
                                target_id=folder.id, week=week.number)]

    # Routines already planned in this folder, by title
    planned: Dict[str, Operation] = {}

    for day in week.days:
        exercises, skipped = build_day_exercises(day, mapping)

        if not exercises:
            operations.append(Operation(
                action=SKIP,
                resource=ROUTINES,
                title=day.name,
                folder_title=title,
                week=week.number,
                skipped_exercises=skipped,
                detail="no exercises to add",
            ))
            continue

        routine = {
            "title": day.name,
            "notes": f"Week {week.number}",
            "exercises": exercises,
        }

        existing = snapshot.find_routine(day.name, folder.id) if folder else None
        earlier = planned.get(day.name)
        if existing is not None or earlier is not None:
            # PUT /routines/{id} does not accept folder_id. A routine created
            # earlier in this run has no id yet; apply_plan looks it up.
            op = Operation(
                action=UPDATE,
                resource=ROUTINES,
                title=day.name,
                payload={"routine": routine},
                target_id=existing.id if existing is not None else earlier.target_id,
                folder_title=title,
                week=week.number,
                skipped_exercises=skipped,
            )
        else:
            routine["folder_id"] = folder.id if folder else None
            op = Operation(
                action=CREATE,
                resource=ROUTINES,
                title=day.name,
                payload={"routine": routine},
                folder_title=title,
                week=week.number,
                skipped_exercises=skipped,
            )
        operations.append(op)
        planned.setdefault(day.name, op)

    return operations


def plan_sync(weeks: Iterable[ParsedWeek], mapping: Dict[str, ExerciseMapping],
              snapshot: RemoteSnapshot, program_title: str) -> SyncPlan:
    plan = SyncPlan()
    for week in weeks:
        plan.operations.extend(plan_week(week, mapping, snapshot, program_title))
    return plan


# =============================================================================
# Apply
# =============================================================================

def _unwrap(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    # Responses wrap the object ({"routine": {...}}), sometimes in a list
    obj = data.get(key, data)
    if isinstance(obj, list):
        obj = obj[0] if obj else {}
    return obj


def register_exercises(operations: List[Operation], client, mapping: Dict[str, ExerciseMapping],
                       snapshot: RemoteSnapshot, progress=None) -> int:
    """Create the planned exercise templates and repoint their mappings."""
    created = 0
    for op in operations:
        logger.info("Creating exercise template: %s", op.title)
        data = client.create(EXERCISE_TEMPLATES, op.payload)
        template_data = _unwrap(data, "exercise_template")
        exercise = op.payload["exercise"]
        template = ExerciseTemplate(
            id=str(template_data["id"]),
            title=template_data.get("title", exercise["title"]),
            type=template_data.get("type", exercise["exercise_type"]),
            primary_muscle_group=template_data.get("primary_muscle_group", exercise["muscle_group"]),
            equipment=template_data.get("equipment", exercise["equipment_category"]),
            is_custom=True,
        )
        snapshot.add_template(template)
        mark_created(mapping, op.title, template)
        created += 1
        if progress is not None:
            progress.update(1)
    return created


def apply_plan(plan: SyncPlan, client, snapshot: RemoteSnapshot) -> SyncStats:
    """Execute plan operations in order. Any API error aborts the run."""
    stats = SyncStats()

    for op in plan.operations:
        if op.resource == FOLDERS:
            if op.action == REUSE:
                logger.info("Folder already exists: %s", op.title)
                stats.folders_reused += 1
                continue
            logger.info("Creating folder: %s", op.title)
            data = client.create(FOLDERS, op.payload)
            created = _unwrap(data, "routine_folder")
            # Bare-id responses carry no title
            folder = RemoteFolder(id=created["id"], title=created.get("title") or op.title)
            snapshot.add_folder(folder)
            stats.folders_created += 1

        elif op.resource == ROUTINES:
            if op.action == SKIP:
                logger.info("No exercises to add, skipping routine: %s (week %s)", op.title, op.week)
                stats.routines_skipped += 1
                continue

            folder = snapshot.find_folder(op.folder_title)

            if op.action == UPDATE:
                target_id = op.target_id
                if target_id is None:
                    routine = snapshot.find_routine(op.title, folder.id) if folder else None
                    if routine is None:
                        raise ValueError(f"Routine not found for update: {op.title!r} in {op.folder_title}")
                    target_id = routine.id
                logger.info("Updating routine: %s (week %s)", op.title, op.week)
                client.update(ROUTINES, target_id, op.payload)
                stats.routines_updated += 1
                continue

            if folder is None:
                raise ValueError(f"Folder not found for routine {op.title!r}: {op.folder_title}")

            payload = copy.deepcopy(op.payload)
            payload["routine"]["folder_id"] = folder.id

            logger.info("Creating routine: %s (week %s)", op.title, op.week)
            data = client.create(ROUTINES, payload)
            routine = _unwrap(data, "routine")
            snapshot.add_routine(RemoteRoutine(id=str(routine["id"]), title=op.title, folder_id=folder.id))
            stats.routines_created += 1

    return stats

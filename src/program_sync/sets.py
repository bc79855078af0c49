"""
Set and notes synthesis for routine exercises.
"""

from typing import Any, Dict, List, Optional

from .types import AMRAP, BODYWEIGHT, EASY, SELECT, ParsedExercise


def build_sets(exercise: ParsedExercise) -> List[Dict[str, Any]]:
    """
    Expand one prescription into its working sets.

    Zero sets when the set count is 0 or the athlete picks the weight.
    Otherwise `sets` identical entries:
        weight_kg: None for BW, the number if numeric, absent if unknown
        reps: None for AMRAP/Easy (carried in notes), the number, absent if unknown
    """
    if exercise.sets == 0 or exercise.weight == SELECT:
        return []

    template: Dict[str, Any] = {"type": "normal"}

    if exercise.weight == BODYWEIGHT:
        template["weight_kg"] = None
    elif isinstance(exercise.weight, (int, float)):
        template["weight_kg"] = exercise.weight

    if exercise.reps in (AMRAP, EASY):
        template["reps"] = None
    elif isinstance(exercise.reps, int):
        template["reps"] = exercise.reps

    return [dict(template) for _ in range(exercise.sets)]


def build_exercise_notes(exercise: ParsedExercise) -> str:
    """'<pct> TM - <notes>', either part optional."""
    parts = []
    if exercise.percent_tm and exercise.percent_tm != "-":
        parts.append(f"{exercise.percent_tm} TM")
    if exercise.notes:
        parts.append(exercise.notes)
    return " - ".join(parts)


def build_annotation(exercise: ParsedExercise) -> str:
    """Exercise notes with the AMRAP / Easy reps prefix applied."""
    notes = build_exercise_notes(exercise)
    if exercise.reps == AMRAP:
        return f"AMRAP - {notes}" if notes else "AMRAP"
    if exercise.reps == EASY:
        return f"Easy reps - {notes}" if notes else "Easy reps"
    return notes


def build_routine_exercise(exercise: ParsedExercise, template_id: str) -> Optional[Dict[str, Any]]:
    """Routine exercise entry, or None when the prescription has no sets."""
    sets = build_sets(exercise)
    if not sets:
        return None

    entry: Dict[str, Any] = {
        "exercise_template_id": template_id,
        "superset_id": None,
    }
    notes = build_annotation(exercise)
    if notes:
        entry["notes"] = notes
    entry["sets"] = sets
    return entry


def describe_prescription(exercise: ParsedExercise) -> str:
    """Short text like '5x5 @ 100kg' for dry-run listings."""
    if exercise.weight == BODYWEIGHT:
        weight = "BW"
    elif isinstance(exercise.weight, (int, float)):
        weight = f"{exercise.weight:g}kg"
    else:
        weight = "?"
    reps = exercise.reps if exercise.reps is not None else "?"
    return f"{exercise.sets}x{reps} @ {weight}"

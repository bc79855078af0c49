"""
Static exercise reference data for the 15-week powerlifting program.

- CUSTOM_EXERCISES: variants the program prescribes by name that the remote
  catalog does not ship (pause/deficit variants, backoff and test slots).
- EXPLICIT_MAPPINGS: program name -> remote catalog title where the phrasing
  differs.
- SKIP_NAMES: rows that are administrative markers, not exercises.
"""

from typing import Dict, Optional

from .types import CustomExercise


_SQUAT_SECONDARY = ("glutes", "hamstrings")
_PRESS_SECONDARY = ("triceps", "shoulders")
_PULL_SECONDARY = ("hamstrings", "glutes")


CUSTOM_EXERCISES = (
    # Squat variants
    CustomExercise("Pause Squat (3 sec)", "weight_reps", "barbell", "quads", _SQUAT_SECONDARY),
    CustomExercise("Pause Squat (2 sec)", "weight_reps", "barbell", "quads", _SQUAT_SECONDARY),
    CustomExercise("Pause Squat (1 sec)", "weight_reps", "barbell", "quads", _SQUAT_SECONDARY),

    # Bench variants
    CustomExercise("Larsen Press (feet up)", "weight_reps", "barbell", "chest", _PRESS_SECONDARY),
    CustomExercise('Spoto Press (1" pause)', "weight_reps", "barbell", "chest", _PRESS_SECONDARY),
    CustomExercise("Close Grip Bench", "weight_reps", "barbell", "triceps", ("chest", "shoulders")),

    # Deadlift variants
    CustomExercise("Deficit Deadlift (5cm)", "weight_reps", "barbell", "back", _PULL_SECONDARY),
    CustomExercise("Deficit Deadlift (2.5cm)", "weight_reps", "barbell", "back", _PULL_SECONDARY),
    CustomExercise("Paused Deadlift (below knee)", "weight_reps", "barbell", "back", _PULL_SECONDARY),

    # Accessories
    CustomExercise("Inverted Row (Rings)", "bodyweight_reps", "other", "back", ("biceps",)),
    CustomExercise("Cable Crunch", "weight_reps", "cable", "abs"),
    CustomExercise("Face Pull", "weight_reps", "cable", "shoulders", ("back",)),
    CustomExercise("Pec Deck", "weight_reps", "machine", "chest"),
    CustomExercise("Tricep Extension", "weight_reps", "cable", "triceps"),
    CustomExercise("Cable Row", "weight_reps", "cable", "back", ("biceps",)),

    # Backoff sets
    CustomExercise("Back Squat (backoff)", "weight_reps", "barbell", "quads", _SQUAT_SECONDARY),
    CustomExercise("Bench Press (backoff)", "weight_reps", "barbell", "chest", _PRESS_SECONDARY),
    CustomExercise("Deadlift (backoff)", "weight_reps", "barbell", "back", _PULL_SECONDARY),

    # Deload / taper
    CustomExercise("Light Squat", "weight_reps", "barbell", "quads", _SQUAT_SECONDARY),
    CustomExercise("Light Bench", "weight_reps", "barbell", "chest", _PRESS_SECONDARY),
    CustomExercise("Light Deadlift", "weight_reps", "barbell", "back", _PULL_SECONDARY),
    CustomExercise("Light accessories", "weight_reps", "other", "other"),
    CustomExercise("Light accessories only", "weight_reps", "other", "other"),

    # Test week
    CustomExercise("Back Squat - NEW 1RM", "weight_reps", "barbell", "quads", _SQUAT_SECONDARY),
    CustomExercise("Bench Press - NEW 1RM", "weight_reps", "barbell", "chest", _PRESS_SECONDARY),
    CustomExercise("Deadlift - NEW 1RM", "weight_reps", "barbell", "back", _PULL_SECONDARY),
    CustomExercise("Optional: 2nd attempt", "weight_reps", "barbell", "other"),
)


EXPLICIT_MAPPINGS = {
    "back squat": "Barbell Squat",
    "bench press": "Barbell Bench Press",
    "deadlift": "Deadlift (Barbell)",
    "romanian deadlift": "Romanian Deadlift (Barbell)",
    "front squat": "Front Squat (Barbell)",
    "leg press": "Leg Press (Machine)",
    "leg extension": "Leg Extension (Machine)",
    "pull up": "Pull Up",
    "chest dip": "Dip",
    "incline db press": "Incline Dumbbell Bench Press",
    "seated cable row": "Seated Cable Row",
    "barbell curl": "Barbell Curl",
    "barbell row": "Barbell Row",
    "lateral raise": "Lateral Raise (Dumbbell)",
    "hanging leg raise": "Hanging Leg Raise",
    "tricep extension (cable)": "Triceps Pushdown",
}


SKIP_NAMES = frozenset({
    "",
    "-",
    "UPDATE TRAINING MAXES",
    "Begin next 16-week cycle",
})


# Program muscle names -> remote API muscle_group values
MUSCLE_GROUP_MAP = {
    "quads": "quadriceps",
    "hamstrings": "hamstrings",
    "glutes": "glutes",
    "calves": "calves",
    "chest": "chest",
    "back": "lats",
    "shoulders": "shoulders",
    "biceps": "biceps",
    "triceps": "triceps",
    "abs": "abdominals",
    "forearms": "forearms",
    "other": "other",
}

# Program equipment names -> remote API equipment_category values
EQUIPMENT_MAP = {
    "barbell": "barbell",
    "dumbbell": "dumbbell",
    "machine": "machine",
    "cable": "machine",  # no cable category remotely
    "bodyweight": "none",
    "other": "other",
}


_CUSTOM_BY_TITLE: Dict[str, CustomExercise] = {c.title.lower(): c for c in CUSTOM_EXERCISES}


def get_custom_exercise(title: str) -> Optional[CustomExercise]:
    """Case-insensitive lookup in CUSTOM_EXERCISES."""
    return _CUSTOM_BY_TITLE.get(title.lower())


def get_override_title(name: str) -> Optional[str]:
    return EXPLICIT_MAPPINGS.get(name.lower())


def is_skipped_name(name: Optional[str]) -> bool:
    """True for blank rows and administrative markers."""
    if name is None:
        return True
    return name.strip() in SKIP_NAMES

"""
Exercise name matching.

Maps each program exercise name to a remote exercise template. Tiers are
tried in order and the first one that returns a mapping wins:

- skip:     blank rows and administrative markers (no mapping at all)
- override: EXPLICIT_MAPPINGS title present in the catalog
- custom:   CUSTOM_EXERCISES entry (reuse remote copy, else needs creation)
- exact:    case-insensitive title equality
- fuzzy:    best bigram similarity >= threshold
- fallback: needs creation under the program's own name
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .catalog import (
    EQUIPMENT_MAP, MUSCLE_GROUP_MAP,
    get_custom_exercise, get_override_title, is_skipped_name,
)
from .types import NEEDS_CREATION, ExerciseMapping, ExerciseTemplate

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 0.6

# Returned by the skip tier to drop a name without mapping it
SKIP = object()


# =============================================================================
# Similarity
# =============================================================================

def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def similarity(first: str, second: str) -> float:
    """
    Sørensen-Dice coefficient over character bigrams, whitespace ignored.

    Examples:
        similarity("bench press", "bench press") -> 1.0
        similarity("squat", "squats") -> 0.888...
    """
    first = "".join(first.split())
    second = "".join(second.split())

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    overlap = sum((_bigrams(first) & _bigrams(second)).values())
    return 2.0 * overlap / (len(first) + len(second) - 2)


def find_best_match(name: str, candidates: Sequence[str]) -> Tuple[Optional[int], float]:
    """Index and score of the best candidate; ties go to the earliest."""
    best_index = None
    best_score = 0.0
    for index, candidate in enumerate(candidates):
        score = similarity(name, candidate)
        if best_index is None or score > best_score:
            best_index, best_score = index, score
    return best_index, best_score


# =============================================================================
# Resolution Tiers
# =============================================================================

def _mapped(name: str, template: ExerciseTemplate, score: float = 1.0, is_custom: bool = False) -> ExerciseMapping:
    return ExerciseMapping(
        csv_name=name,
        template_id=template.id,
        template_title=template.title,
        match_score=score,
        is_custom=is_custom,
    )


def _needs_creation(name: str) -> ExerciseMapping:
    return ExerciseMapping(
        csv_name=name,
        template_id=NEEDS_CREATION,
        template_title=name,
        match_score=0.0,
        is_custom=True,
    )


def find_template(title: str, templates: Iterable[ExerciseTemplate]) -> Optional[ExerciseTemplate]:
    """First template whose title matches case-insensitively."""
    wanted = title.lower()
    for template in templates:
        if template.title.lower() == wanted:
            return template
    return None


def resolve_skip(name, templates, threshold):
    if is_skipped_name(name):
        return SKIP
    return None


def resolve_override(name, templates, threshold):
    override = get_override_title(name)
    if override is None:
        return None
    template = find_template(override, templates)
    if template is None:
        logger.debug("Override %r -> %r not in catalog", name, override)
        return None
    return _mapped(name, template)


def resolve_custom(name, templates, threshold):
    custom = get_custom_exercise(name)
    if custom is None:
        return None
    existing = find_template(name, templates)
    if existing is not None:
        return _mapped(name, existing, is_custom=True)
    return _needs_creation(name)


def resolve_exact(name, templates, threshold):
    template = find_template(name, templates)
    if template is None:
        return None
    return _mapped(name, template)


def resolve_fuzzy(name, templates, threshold):
    titles = [t.title.lower() for t in templates]
    index, score = find_best_match(name.lower(), titles)
    if index is None or score < threshold:
        return None
    return _mapped(name, templates[index], score=score)


def resolve_fallback(name, templates, threshold):
    return _needs_creation(name)


RESOLUTION_TIERS = (
    resolve_skip,
    resolve_override,
    resolve_custom,
    resolve_exact,
    resolve_fuzzy,
    resolve_fallback,
)


def resolve_exercise(name: str, templates: List[ExerciseTemplate],
                     threshold: float = FUZZY_THRESHOLD) -> Optional[ExerciseMapping]:
    """Run the tiers for one name. Returns None for skipped names."""
    for tier in RESOLUTION_TIERS:
        result = tier(name, templates, threshold)
        if result is SKIP:
            return None
        if result is not None:
            return result
    return None  # unreachable, fallback always decides


def build_exercise_mapping(names: Iterable[str], templates: List[ExerciseTemplate],
                           threshold: float = FUZZY_THRESHOLD) -> Dict[str, ExerciseMapping]:
    """
    Resolve every distinct program name against the remote catalog.

    Args:
        names: Program exercise names (duplicates are ignored)
        templates: Remote exercise templates, in catalog order
        threshold: Minimum similarity for a fuzzy match

    Returns:
        Dict keyed by program name. Skipped names are absent.
    """
    templates = list(templates)
    mapping = {}
    for name in names:
        if name in mapping:
            continue
        resolved = resolve_exercise(name, templates, threshold)
        if resolved is not None:
            mapping[name] = resolved
    return mapping


def pending_creations(mapping: Dict[str, ExerciseMapping]) -> List[str]:
    """Names still waiting for a remote exercise, in mapping order."""
    return [name for name, m in mapping.items() if m.needs_creation]


# =============================================================================
# Custom Exercise Registration
# =============================================================================

def custom_exercise_payload(title: str) -> Dict:
    """Request body for registering an exercise template."""
    definition = get_custom_exercise(title)
    if definition is None:
        exercise = {
            "title": title,
            "exercise_type": "weight_reps",
            "muscle_group": "other",
            "equipment_category": "other",
        }
    else:
        exercise = {
            "title": definition.title,
            "exercise_type": definition.type,
            "muscle_group": MUSCLE_GROUP_MAP.get(definition.primary_muscle, "other"),
            "equipment_category": EQUIPMENT_MAP.get(definition.equipment, "other"),
        }
        secondary = [MUSCLE_GROUP_MAP.get(m, "other") for m in definition.secondary_muscles]
        if secondary:
            exercise["other_muscles"] = secondary
    return {"exercise": exercise}


def mark_created(mapping: Dict[str, ExerciseMapping], name: str, template: ExerciseTemplate) -> ExerciseMapping:
    """Point a needs-creation mapping at the newly registered template."""
    entry = mapping[name]
    entry.template_id = template.id
    entry.template_title = template.title
    entry.match_score = 1.0
    entry.is_custom = True
    return entry

"""
Program spreadsheet parsing.

Turns the flat CSV export (one row per exercise prescription) into
Week -> Day -> Exercise structure.

Expected headers:
    WEEK, DAY, EXERCISE, SETS, REPS, % TM, WEIGHT (kg), ACTUAL REPS, RPE, NOTES

DAY is "<code> - <name>", e.g. "A - Squat Day".
"""

import csv
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .types import (
    AMRAP, BODYWEIGHT, EASY, SELECT,
    CsvRow, ParsedDay, ParsedExercise, ParsedWeek, Reps, Weight,
)

logger = logging.getLogger(__name__)

DAY_SEPARATOR = " - "


def read_program_csv(path) -> List[CsvRow]:
    """Read the program CSV export into rows."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Program CSV not found: {path}")

    rows = []
    with open(path, newline='', encoding='utf-8-sig') as f:
        reader = csv.DictReader(f)
        for record in reader:
            # Skip fully blank lines
            if not any((v or '').strip() for v in record.values() if isinstance(v, str)):
                continue
            rows.append(CsvRow.from_record(record))

    logger.debug("Read %d rows from %s", len(rows), path)
    return rows


# =============================================================================
# Cell Decoding
# =============================================================================

def parse_weight(cell: Optional[str]) -> Weight:
    """
    Decode the WEIGHT (kg) cell.

    Examples:
        "BW" -> BODYWEIGHT
        "Select", "-" -> SELECT
        "100" -> 100.0
        "abc", "" -> None
    """
    value = (cell or '').strip()
    if value == BODYWEIGHT:
        return BODYWEIGHT
    if value in (SELECT, '-'):
        return SELECT
    match = re.match(r'^[+-]?(\d+(\.\d*)?|\.\d+)', value)
    if not match:
        return None
    return float(match.group(0))


def parse_reps(cell: Optional[str]) -> Reps:
    """
    Decode the REPS cell.

    Examples:
        "AMRAP" -> AMRAP
        "Easy" -> EASY
        "5" -> 5
        "-", "abc" -> None
    """
    value = (cell or '').strip()
    if value in (AMRAP, EASY):
        return value
    if value == '-':
        return None
    return _leading_int(value)


def parse_set_count(cell: Optional[str]) -> int:
    """Decode the SETS cell; anything non-numeric counts as zero sets."""
    count = _leading_int((cell or '').strip())
    return count if count and count > 0 else 0


def parse_week_number(cell: Optional[str]) -> Optional[int]:
    return _leading_int((cell or '').strip())


def _leading_int(value: str) -> Optional[int]:
    # "5", "5 reps", "-3" parse; "abc" and "" do not
    match = re.match(r'^[+-]?\d+', value)
    if not match:
        return None
    return int(match.group(0))


def split_day_label(label: str) -> Tuple[str, str]:
    """'A - Squat Day' -> ('A', 'Squat Day'). No separator -> (label, label)."""
    parts = label.split(DAY_SEPARATOR, 1)
    code = parts[0]
    name = parts[1] if len(parts) > 1 and parts[1] else code
    return code, name


# =============================================================================
# Grouping
# =============================================================================

def parse_exercise(row: CsvRow) -> ParsedExercise:
    return ParsedExercise(
        name=row.exercise,
        sets=parse_set_count(row.sets),
        reps=parse_reps(row.reps),
        percent_tm=row.percent_tm.strip(),
        weight=parse_weight(row.weight),
        notes=row.notes.strip(),
    )


def group_by_week_and_day(rows: Iterable[CsvRow], max_week: int = 15) -> List[ParsedWeek]:
    """
    Group rows into weeks and days.

    Rows with an unparseable week or one outside 1..max_week are dropped.
    Days are keyed by the full DAY label and keep first-seen order.
    Weeks are returned in ascending order.
    """
    weeks: Dict[int, Dict[str, List[ParsedExercise]]] = {}
    dropped = 0

    for row in rows:
        week_number = parse_week_number(row.week)
        if week_number is None or not 1 <= week_number <= max_week:
            dropped += 1
            continue

        days = weeks.setdefault(week_number, {})
        days.setdefault(row.day, []).append(parse_exercise(row))

    if dropped:
        logger.debug("Dropped %d rows outside weeks 1-%d", dropped, max_week)

    result = []
    for week_number in sorted(weeks):
        parsed_days = []
        for label, exercises in weeks[week_number].items():
            code, name = split_day_label(label)
            parsed_days.append(ParsedDay(code=code, name=name, exercises=exercises))
        result.append(ParsedWeek(number=week_number, days=parsed_days))

    return result


# =============================================================================
# Selection
# =============================================================================

def parse_week_range(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Parse a --week argument.

    Examples:
        "3" -> (3, 3)
        "1-3" -> (1, 3)
        None -> None
    """
    if value is None or not str(value).strip():
        return None

    match = re.match(r'^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$', str(value))
    if not match:
        raise ValueError(f"Invalid week range: {value!r} (expected N or N-M)")

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    if end < start:
        raise ValueError(f"Invalid week range: {value!r} (end before start)")
    return start, end


def filter_weeks(weeks: List[ParsedWeek], week_range: Optional[Tuple[int, int]]) -> List[ParsedWeek]:
    """Keep weeks inside the inclusive range; None keeps everything."""
    if week_range is None:
        return list(weeks)
    start, end = week_range
    return [w for w in weeks if start <= w.number <= end]


def unique_exercise_names(weeks: Iterable[ParsedWeek]) -> List[str]:
    """Distinct exercise names in first-seen order."""
    seen = {}
    for week in weeks:
        for day in week.days:
            for exercise in day.exercises:
                seen.setdefault(exercise.name, None)
    return list(seen)

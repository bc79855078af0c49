"""Tests for program CSV parsing and week/day grouping.

Run with: pytest tests/test_parser.py -v
"""

import pytest

from conftest import make_row
from program_sync.parser import (
    filter_weeks,
    group_by_week_and_day,
    parse_reps,
    parse_set_count,
    parse_week_range,
    parse_weight,
    read_program_csv,
    split_day_label,
    unique_exercise_names,
)
from program_sync.types import AMRAP, BODYWEIGHT, EASY, SELECT


# =============================================================================
# CELL DECODING
# =============================================================================

class TestParseWeight:

    def test_bodyweight(self):
        assert parse_weight("BW") == BODYWEIGHT

    @pytest.mark.parametrize("cell", ["Select", "-"])
    def test_athlete_selects(self, cell):
        assert parse_weight(cell) == SELECT

    def test_numeric(self):
        assert parse_weight("100") == 100.0

    def test_decimal(self):
        assert parse_weight("102.5") == 102.5

    @pytest.mark.parametrize("cell", ["abc", "", None])
    def test_no_value(self, cell):
        assert parse_weight(cell) is None


class TestParseReps:

    def test_symbols_preserved(self):
        assert parse_reps("AMRAP") == AMRAP
        assert parse_reps("Easy") == EASY

    def test_dash_is_no_value(self):
        assert parse_reps("-") is None

    def test_integer(self):
        assert parse_reps("5") == 5

    def test_non_numeric_is_no_value(self):
        assert parse_reps("lots") is None


class TestParseSetCount:

    def test_integer(self):
        assert parse_set_count("3") == 3

    @pytest.mark.parametrize("cell", ["-", "", "abc"])
    def test_non_numeric_is_zero(self, cell):
        assert parse_set_count(cell) == 0


class TestSplitDayLabel:

    def test_code_and_name(self):
        assert split_day_label("A - Squat Day") == ("A", "Squat Day")

    def test_name_with_separator_kept_whole(self):
        assert split_day_label("C - Deadlift - Heavy") == ("C", "Deadlift - Heavy")

    def test_no_separator(self):
        assert split_day_label("Rest") == ("Rest", "Rest")


# =============================================================================
# GROUPING
# =============================================================================

class TestGroupByWeekAndDay:

    def test_drops_week_above_fifteen(self):
        rows = [make_row(week="1"), make_row(week="16", exercise="UPDATE TRAINING MAXES")]
        weeks = group_by_week_and_day(rows)
        assert [w.number for w in weeks] == [1]
        names = unique_exercise_names(weeks)
        assert "UPDATE TRAINING MAXES" not in names

    def test_drops_unparseable_week(self):
        rows = [make_row(week="abc", exercise="Ghost Row"), make_row(week="2")]
        weeks = group_by_week_and_day(rows)
        assert [w.number for w in weeks] == [2]
        assert "Ghost Row" not in unique_exercise_names(weeks)

    def test_days_keyed_by_full_label(self):
        rows = [
            make_row(day="A - Squat Day", exercise="Back Squat"),
            make_row(day="A - Bench Day", exercise="Bench Press"),
        ]
        week = group_by_week_and_day(rows)[0]
        assert [d.name for d in week.days] == ["Squat Day", "Bench Day"]
        assert [d.code for d in week.days] == ["A", "A"]

    def test_day_order_is_first_seen(self):
        rows = [
            make_row(day="B - Bench Day", exercise="Bench Press"),
            make_row(day="A - Squat Day", exercise="Back Squat"),
            make_row(day="B - Bench Day", exercise="Barbell Row"),
        ]
        week = group_by_week_and_day(rows)[0]
        assert [d.name for d in week.days] == ["Bench Day", "Squat Day"]
        assert [e.name for e in week.days[0].exercises] == ["Bench Press", "Barbell Row"]

    def test_weeks_sorted_ascending(self):
        rows = [make_row(week="3"), make_row(week="1"), make_row(week="2")]
        assert [w.number for w in group_by_week_and_day(rows)] == [1, 2, 3]

    def test_exercise_fields_decoded(self):
        row = make_row(sets="3", reps="AMRAP", percent_tm="80%", weight="BW", notes=" slow ")
        exercise = group_by_week_and_day([row])[0].days[0].exercises[0]
        assert exercise.sets == 3
        assert exercise.reps == AMRAP
        assert exercise.percent_tm == "80%"
        assert exercise.weight == BODYWEIGHT
        assert exercise.notes == "slow"

    def test_custom_max_week(self):
        rows = [make_row(week="4"), make_row(week="5")]
        assert [w.number for w in group_by_week_and_day(rows, max_week=4)] == [4]


class TestUniqueExerciseNames:

    def test_first_seen_order_without_duplicates(self):
        rows = [
            make_row(week="1", exercise="Back Squat"),
            make_row(week="1", exercise="Bench Press", day="B - Bench Day"),
            make_row(week="2", exercise="Back Squat"),
        ]
        assert unique_exercise_names(group_by_week_and_day(rows)) == ["Back Squat", "Bench Press"]


# =============================================================================
# WEEK SELECTION
# =============================================================================

class TestWeekRange:

    def test_single_week(self):
        assert parse_week_range("3") == (3, 3)

    def test_range(self):
        assert parse_week_range("1-3") == (1, 3)

    def test_none(self):
        assert parse_week_range(None) is None

    @pytest.mark.parametrize("value", ["abc", "3-1", "1-2-3"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_week_range(value)

    def test_filter_is_inclusive(self):
        rows = [make_row(week=str(n)) for n in range(1, 6)]
        weeks = filter_weeks(group_by_week_and_day(rows), (2, 4))
        assert [w.number for w in weeks] == [2, 3, 4]

    def test_filter_none_keeps_all(self):
        rows = [make_row(week=str(n)) for n in range(1, 4)]
        assert len(filter_weeks(group_by_week_and_day(rows), None)) == 3


# =============================================================================
# CSV READING
# =============================================================================

class TestReadProgramCsv:

    def test_reads_rows_and_skips_blank_lines(self, program_csv):
        rows = read_program_csv(program_csv)
        assert len(rows) == 7
        assert rows[0].exercise == "Back Squat"
        assert rows[0].percent_tm == "75%"
        assert rows[0].weight == "100"
        assert rows[0].notes == "Belt on top set"

    def test_grouped_program(self, program_csv):
        weeks = group_by_week_and_day(read_program_csv(program_csv))
        assert [w.number for w in weeks] == [1, 2]
        assert [d.name for d in weeks[0].days] == ["Squat Day", "Bench Day"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_program_csv(tmp_path / "nope.csv")

    def test_missing_column_reads_empty(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("WEEK,DAY,EXERCISE\n1,A - Squat Day,Back Squat\n", encoding="utf-8")
        row = read_program_csv(path)[0]
        assert row.sets == ""
        assert row.weight == ""

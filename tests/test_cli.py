"""Tests for the program-sync command.

Run with: pytest tests/test_cli.py -v
"""

import pytest
from click.testing import CliRunner

from conftest import FakeHevyClient
from program_sync import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def no_key(monkeypatch):
    monkeypatch.delenv("HEVY_API_KEY", raising=False)
    monkeypatch.delenv("HEVY_API_BASE", raising=False)


class TestDryRun:

    def test_without_key_plans_everything(self, runner, program_csv, no_key):
        result = runner.invoke(cli.main, ["--csv", str(program_csv), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "DRY RUN" in result.output
        assert "Week 1 - 15 Week Periodized Program (create)" in result.output
        assert "Week 2 - 15 Week Periodized Program (create)" in result.output
        assert "Back Squat: 5x5 @ 100kg" in result.output
        assert "skipped: Light accessories" in result.output

    def test_single_week(self, runner, program_csv, no_key):
        result = runner.invoke(cli.main, ["--csv", str(program_csv), "--dry-run", "--week", "2"])

        assert result.exit_code == 0, result.output
        assert "Processing weeks 2-2" in result.output
        assert "Week 1 - 15 Week Periodized Program" not in result.output

    def test_with_key_reads_account(self, runner, program_csv, catalog, monkeypatch):
        fake = FakeHevyClient(templates=catalog)
        monkeypatch.setenv("HEVY_API_KEY", "secret")
        monkeypatch.setattr(cli, "HevyClient", lambda *args, **kwargs: fake)

        result = runner.invoke(cli.main, ["--csv", str(program_csv), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert fake.mutations == []
        assert "Back Squat → Barbell Squat" in result.output


class TestLiveRun:

    def test_missing_key_exits_1(self, runner, program_csv, no_key):
        result = runner.invoke(cli.main, ["--csv", str(program_csv)])
        assert result.exit_code == 1
        assert "HEVY_API_KEY" in result.output

    def test_import(self, runner, program_csv, catalog, monkeypatch):
        fake = FakeHevyClient(templates=catalog)
        monkeypatch.setenv("HEVY_API_KEY", "secret")
        monkeypatch.setattr(cli, "HevyClient", lambda *args, **kwargs: fake)

        result = runner.invoke(cli.main, ["--csv", str(program_csv)])

        assert result.exit_code == 0, result.output
        assert "Import complete" in result.output
        assert "Routines created: 4" in result.output
        assert len(fake.store["routine_folders"]) == 2

    def test_api_error_exits_1(self, runner, program_csv, catalog, monkeypatch):
        fake = FakeHevyClient(templates=catalog, fail_on=("GET", "exercise_templates"))
        monkeypatch.setenv("HEVY_API_KEY", "secret")
        monkeypatch.setattr(cli, "HevyClient", lambda *args, **kwargs: fake)

        result = runner.invoke(cli.main, ["--csv", str(program_csv)])

        assert result.exit_code == 1
        assert "API GET exercise_templates failed: 500" in result.output


class TestUsageErrors:

    @pytest.mark.parametrize("week", ["abc", "5-2"])
    def test_bad_week(self, runner, program_csv, no_key, week):
        result = runner.invoke(cli.main, ["--csv", str(program_csv), "--week", week, "--dry-run"])
        assert result.exit_code == 2

    def test_missing_config_file(self, runner, program_csv, tmp_path, no_key):
        result = runner.invoke(cli.main, ["--csv", str(program_csv), "--dry-run",
                                          "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 2

    def test_missing_csv_file(self, runner, tmp_path, no_key):
        result = runner.invoke(cli.main, ["--csv", str(tmp_path / "missing.csv"), "--dry-run"])
        assert result.exit_code == 1
        assert "Error" in result.output

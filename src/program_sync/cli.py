"""
Program Sync - CLI Interface

Usage:
    program-sync --csv program.csv              # Sync all weeks (1-15)
    program-sync --csv program.csv --week 3     # Single week
    program-sync --csv program.csv --week 1-4   # Week range
    program-sync --csv program.csv --dry-run    # Plan only, no changes
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .client import HevyAPIError, HevyClient, get_api_key
from .parser import parse_week_range
from .pipeline import SyncResult, load_program, sync_program
from .reconciler import CREATE, FOLDERS, ROUTINES, SKIP, UPDATE
from .sets import build_annotation, describe_prescription
from .types import SIMULATED_PREFIX, SyncConfig

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


# =============================================================================
# Output
# =============================================================================

def print_mapping(result: SyncResult):
    click.echo("\nExercise mapping results:")
    for name, entry in result.mapping.items():
        if entry.template_id.startswith(SIMULATED_PREFIX):
            click.echo(f"  📝 {name} → {entry.template_title} (custom, will be created)")
        elif entry.is_custom:
            click.echo(f"  📝 {name} → {entry.template_title} (custom)")
        elif entry.match_score < 1:
            click.echo(f"  !  {name} → {entry.template_title} ({round(entry.match_score * 100)}% match)")
        else:
            click.echo(f"  ✓ {name} → {entry.template_title}")


def print_dry_run(result: SyncResult):
    click.echo("\n📋 DRY RUN SUMMARY:")
    click.echo("===================")

    print_mapping(result)

    click.echo("\nFolders:")
    for op in result.plan.operations:
        if op.resource == FOLDERS:
            marker = "create" if op.action == CREATE else "exists"
            click.echo(f"  📁 {op.title} ({marker})")

    click.echo("\nRoutines:")
    exercises_by_day = {
        (week.number, day.name): day.exercises
        for week in result.weeks
        for day in week.days
    }
    for op in result.plan.operations:
        if op.resource != ROUTINES:
            continue
        if op.action == SKIP:
            click.echo(f"\n  Week {op.week}: {op.title} (skipped, {op.detail})")
            continue
        verb = "create" if op.action == CREATE else "update"
        exercises = exercises_by_day.get((op.week, op.title), [])
        click.echo(f"\n  Week {op.week}: 📋 {op.title} ({verb}, {len(op.payload['routine']['exercises'])} exercises)")
        for exercise in exercises:
            if exercise.name in op.skipped_exercises:
                continue
            notes = build_annotation(exercise)
            suffix = f" ({notes})" if notes else ""
            click.echo(f"     - {exercise.name}: {describe_prescription(exercise)}{suffix}")
        for name in op.skipped_exercises:
            click.echo(f"     i  skipped: {name}")

    mutations = result.plan.mutations
    click.echo(f"\n{len(result.exercise_operations)} exercises to create, "
               f"{result.plan.count(CREATE, FOLDERS)} folders to create, "
               f"{result.plan.count(CREATE, ROUTINES)} routines to create, "
               f"{result.plan.count(UPDATE, ROUTINES)} routines to update "
               f"({len(mutations) + len(result.exercise_operations)} API writes)")
    click.echo("\n✅ Dry run complete. Use without --dry-run to execute.\n")


def print_summary(result: SyncResult):
    stats = result.stats
    click.echo("\n" + "=" * 48)
    click.echo("✅ Import complete!")
    click.echo(f"   Exercises created: {stats.exercises_created}")
    click.echo(f"   Folders created: {stats.folders_created}")
    click.echo(f"   Routines created: {stats.routines_created}")
    click.echo(f"   Routines updated: {stats.routines_updated}")
    click.echo("=" * 48 + "\n")


# =============================================================================
# Command
# =============================================================================

@click.command()
@click.option('--csv', 'csv_path', type=click.Path(path_type=Path), help='Program CSV export')
@click.option('--week', 'week_arg', type=str, help='Week or inclusive range, e.g. 3 or 1-4')
@click.option('--dry-run', is_flag=True, help='Plan changes without touching the account')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to program_sync.yaml')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def main(csv_path: Optional[Path], week_arg: Optional[str], dry_run: bool,
         config_path: Optional[Path], verbose: bool):
    """Import a periodized program into Hevy routines and folders."""
    configure_logging(verbose)
    config = SyncConfig.from_yaml(config_path)

    try:
        week_range = parse_week_range(week_arg)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--week')

    csv_path = csv_path or (Path(config.csv_path) if config.csv_path else None)
    if csv_path is None:
        raise click.UsageError("No program CSV given (use --csv or program.csv_path in config)")

    click.echo(f"🏋 Hevy Routine Import - {config.program_title}")
    click.echo("================================================")
    if dry_run:
        click.echo("🔍 DRY RUN MODE - No changes will be made")
    if week_range:
        click.echo(f"📅 Processing weeks {week_range[0]}-{week_range[1]}\n")
    else:
        click.echo(f"📅 Processing all weeks (1-{config.max_week})\n")

    client = None
    try:
        if dry_run:
            try:
                client = HevyClient(get_api_key(), config=config)
            except ValueError:
                logger.info("No HEVY_API_KEY, planning against an empty account")
        else:
            client = HevyClient(get_api_key(), config=config)

        weeks = load_program(csv_path, config, week_range)
        result = sync_program(weeks, client=client, config=config, simulate=dry_run)

    except (HevyAPIError, ValueError, FileNotFoundError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    finally:
        if client is not None:
            client.close()

    if dry_run:
        print_dry_run(result)
    else:
        print_mapping(result)
        print_summary(result)


if __name__ == "__main__":
    main()

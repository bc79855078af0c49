"""
Program Sync - End-to-end run.

CSV rows -> weeks/days -> exercise mapping -> exercise registration
-> remote snapshot -> plan -> apply.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tqdm import tqdm

from .client import HevyClient
from .matcher import build_exercise_mapping, mark_created
from .parser import filter_weeks, group_by_week_and_day, read_program_csv, unique_exercise_names
from .reconciler import (
    Operation, RemoteSnapshot, SyncPlan, SyncStats,
    apply_plan, plan_exercise_creations, plan_sync, register_exercises,
)
from .types import SIMULATED_PREFIX, ExerciseMapping, ExerciseTemplate, ParsedWeek, SyncConfig

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    weeks: List[ParsedWeek]
    mapping: Dict[str, ExerciseMapping]
    exercise_operations: List[Operation]
    plan: SyncPlan
    stats: SyncStats = field(default_factory=SyncStats)
    simulated: bool = False


def load_program(csv_path, config: Optional[SyncConfig] = None,
                 week_range: Optional[Tuple[int, int]] = None) -> List[ParsedWeek]:
    """Read and group the program CSV, keeping only the selected weeks."""
    config = config or SyncConfig()

    logger.info("Parsing CSV file: %s", csv_path)
    rows = read_program_csv(csv_path)
    logger.info("Found %d rows", len(rows))

    weeks = filter_weeks(group_by_week_and_day(rows, max_week=config.max_week), week_range)
    logger.info("Found %d weeks to process", len(weeks))
    return weeks


def simulate_exercise_creations(operations: List[Operation], mapping: Dict[str, ExerciseMapping]):
    """Give pending exercises placeholder ids so the dry-run plan includes them."""
    for op in operations:
        title = op.payload["exercise"]["title"]
        mark_created(mapping, op.title, ExerciseTemplate(id=f"{SIMULATED_PREFIX}{op.title}", title=title, is_custom=True))


def sync_program(weeks: List[ParsedWeek], client: Optional[HevyClient] = None,
                 config: Optional[SyncConfig] = None, simulate: bool = False,
                 show_progress: bool = True) -> SyncResult:
    """
    Sync parsed weeks to the remote account.

    Args:
        weeks: Output of load_program
        client: API client. Optional when simulating; without one the plan is
            made against an empty account.
        config: Sync configuration
        simulate: Plan everything, mutate nothing
        show_progress: Show a progress bar while registering exercises

    Returns:
        SyncResult with mapping, plan and counts
    """
    config = config or SyncConfig()
    if client is None and not simulate:
        raise ValueError("An API client is required unless simulating")

    names = unique_exercise_names(weeks)
    logger.info("Found %d unique exercises", len(names))

    snapshot = RemoteSnapshot()
    if client is not None:
        logger.info("Fetching exercise templates...")
        snapshot = RemoteSnapshot.from_api(templates=client.fetch_exercise_templates())
        logger.info("Found %d existing templates", len(snapshot.templates))

    logger.info("Building exercise mapping...")
    mapping = build_exercise_mapping(names, snapshot.templates, threshold=config.fuzzy_threshold)
    for name, entry in mapping.items():
        if not entry.is_custom and entry.match_score < 1:
            logger.warning("Fuzzy match: %s -> %s (%d%%)", name, entry.template_title,
                           round(entry.match_score * 100))

    creations = plan_exercise_creations(mapping)
    stats = SyncStats()

    if creations:
        if simulate:
            simulate_exercise_creations(creations, mapping)
        else:
            logger.info("Creating %d custom exercises...", len(creations))
            with tqdm(total=len(creations), desc="Creating exercises", unit="exercise",
                      disable=not show_progress) as progress:
                stats.exercises_created = register_exercises(creations, client, mapping, snapshot, progress)

    if client is not None:
        logger.info("Fetching existing folders...")
        snapshot.folders = RemoteSnapshot.from_api(folders=client.fetch_routine_folders()).folders
        logger.info("Found %d existing folders", len(snapshot.folders))

        logger.info("Fetching existing routines...")
        snapshot.routines = RemoteSnapshot.from_api(routines=client.fetch_routines()).routines
        logger.info("Found %d existing routines", len(snapshot.routines))

    plan = plan_sync(weeks, mapping, snapshot, config.program_title)

    if simulate:
        logger.info("Dry run: %d operations planned, none applied", len(plan.mutations))
    else:
        logger.info("Creating folders and routines...")
        applied = apply_plan(plan, client, snapshot)
        applied.exercises_created = stats.exercises_created
        stats = applied

    return SyncResult(
        weeks=weeks,
        mapping=mapping,
        exercise_operations=creations,
        plan=plan,
        stats=stats,
        simulated=simulate,
    )

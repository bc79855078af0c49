"""
Program Sync

Imports a multi-week periodized strength program (CSV export) into Hevy as
one routine folder per week and one routine per training day.

Usage:
    program-sync --csv program.csv --dry-run
    program-sync --csv program.csv --week 1-4

Public API:
    - load_program: Parse and filter the program CSV
    - sync_program: Resolve exercises, plan and apply remote changes
    - build_exercise_mapping: Match program exercise names to templates
    - HevyClient: API transport
"""

from .types import SyncConfig, ParsedWeek, ParsedDay, ParsedExercise, ExerciseMapping
from .matcher import build_exercise_mapping
from .client import HevyClient, HevyAPIError
from .pipeline import load_program, sync_program, SyncResult

__all__ = [
    # Primary API
    'load_program',
    'sync_program',
    'build_exercise_mapping',
    'HevyClient',
    'HevyAPIError',
    # Types
    'SyncConfig',
    'SyncResult',
    'ParsedWeek',
    'ParsedDay',
    'ParsedExercise',
    'ExerciseMapping',
]

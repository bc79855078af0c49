"""
Program Sync - Type Definitions

Dataclasses, sentinel values and configuration for the program importer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

import yaml


# =============================================================================
# Sentinels
# =============================================================================

# Weight cell symbols
BODYWEIGHT = "BW"
SELECT = "Select"

# Rep cell symbols
AMRAP = "AMRAP"
EASY = "Easy"

# Template id for mappings that still need a remote exercise
NEEDS_CREATION = "__NEEDS_CREATION__"

# Placeholder id prefix for exercises registered during a dry run
SIMULATED_PREFIX = "simulated:"

EXERCISE_TYPES = (
    "weight_reps",
    "bodyweight_reps",
    "weighted_bodyweight",
    "duration",
    "distance_duration",
    "weight_distance",
)

Weight = Union[float, str, None]
Reps = Union[int, str, None]


# =============================================================================
# Configuration
# =============================================================================

CONFIG_PATH = Path(__file__).parent.parent.parent / 'config' / 'program_sync.yaml'


def load_config_yaml(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file, return empty dict if not found."""
    config_path = Path(config_path) if config_path else CONFIG_PATH
    if config_path.exists():
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    return {}


@dataclass
class SyncConfig:
    """Configuration for the program sync.

    Loads from config/program_sync.yaml if available, else uses defaults.
    """

    # Remote API
    api_base: str = "https://api.hevyapp.com/v1"
    page_size: int = 100  # exercise_templates only; folders/routines use server default
    timeout: int = 30

    # Rate limiting (seconds)
    mutation_delay: float = 0.2  # After every create/update
    page_delay: float = 0.1  # Between pages of a listing

    # Program
    program_title: str = "15 Week Periodized Program"
    max_week: int = 15  # Week 16 is the "begin next cycle" marker
    csv_path: Optional[str] = None

    # Matching
    fuzzy_threshold: float = 0.6

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> 'SyncConfig':
        """Load config from YAML file."""
        yaml_config = load_config_yaml(config_path)

        kwargs = {}

        if 'api' in yaml_config:
            api = yaml_config['api']
            kwargs['api_base'] = api.get('base_url', cls.api_base)
            kwargs['page_size'] = api.get('page_size', 100)
            kwargs['timeout'] = api.get('timeout', 30)

        if 'rate_limit' in yaml_config:
            rl = yaml_config['rate_limit']
            kwargs['mutation_delay'] = rl.get('mutation_delay', 0.2)
            kwargs['page_delay'] = rl.get('page_delay', 0.1)

        if 'program' in yaml_config:
            prog = yaml_config['program']
            kwargs['program_title'] = prog.get('title', cls.program_title)
            kwargs['max_week'] = prog.get('max_week', 15)
            kwargs['csv_path'] = prog.get('csv_path')

        if 'matching' in yaml_config:
            kwargs['fuzzy_threshold'] = yaml_config['matching'].get('fuzzy_threshold', 0.6)

        return cls(**kwargs)


# =============================================================================
# Program Data
# =============================================================================

@dataclass(frozen=True)
class CsvRow:
    """One raw row of the program spreadsheet. All fields are strings."""
    week: str
    day: str
    exercise: str
    sets: str = ''
    reps: str = ''
    percent_tm: str = ''
    weight: str = ''
    actual_reps: str = ''
    rpe: str = ''
    notes: str = ''

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'CsvRow':
        """Build from a csv.DictReader record keyed by the sheet headers."""
        def cell(key):
            value = record.get(key)
            return value if value is not None else ''

        return cls(
            week=cell('WEEK'),
            day=cell('DAY'),
            exercise=cell('EXERCISE'),
            sets=cell('SETS'),
            reps=cell('REPS'),
            percent_tm=cell('% TM'),
            weight=cell('WEIGHT (kg)'),
            actual_reps=cell('ACTUAL REPS'),
            rpe=cell('RPE'),
            notes=cell('NOTES'),
        )


@dataclass
class ParsedExercise:
    """One exercise occurrence within a day."""
    name: str
    sets: int
    reps: Reps = None  # int, AMRAP, EASY or None
    percent_tm: str = ''
    weight: Weight = None  # float, BODYWEIGHT, SELECT or None
    notes: str = ''


@dataclass
class ParsedDay:
    """A training day, e.g. code "A", name "Squat Day"."""
    code: str
    name: str
    exercises: List[ParsedExercise] = field(default_factory=list)


@dataclass
class ParsedWeek:
    number: int
    days: List[ParsedDay] = field(default_factory=list)


# =============================================================================
# Exercise Identity
# =============================================================================

@dataclass
class ExerciseTemplate:
    """Exercise template from the remote catalog."""
    id: str
    title: str
    type: str = "weight_reps"
    primary_muscle_group: str = "other"
    secondary_muscle_groups: List[str] = field(default_factory=list)
    equipment: str = "other"
    is_custom: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'ExerciseTemplate':
        return cls(
            id=str(data['id']),
            title=data.get('title', ''),
            type=data.get('type') or "weight_reps",
            primary_muscle_group=data.get('primary_muscle_group') or "other",
            secondary_muscle_groups=list(data.get('secondary_muscle_groups') or []),
            equipment=data.get('equipment') or "other",
            is_custom=bool(data.get('is_custom', False)),
        )


@dataclass
class ExerciseMapping:
    """Resolution of one program-side exercise name."""
    csv_name: str
    template_id: str
    template_title: str
    match_score: float
    is_custom: bool

    @property
    def needs_creation(self) -> bool:
        return self.template_id == NEEDS_CREATION


@dataclass(frozen=True)
class CustomExercise:
    """Exercise variant the program uses that the remote catalog lacks by default."""
    title: str
    type: str
    equipment: str
    primary_muscle: str
    secondary_muscles: tuple = ()


# =============================================================================
# Remote Objects
# =============================================================================

@dataclass
class RemoteFolder:
    id: int
    title: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RemoteFolder':
        return cls(id=data['id'], title=data.get('title', ''))


@dataclass
class RemoteRoutine:
    """Routine identity is (title, folder_id)."""
    id: str
    title: str
    folder_id: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RemoteRoutine':
        return cls(id=str(data['id']), title=data.get('title', ''), folder_id=data.get('folder_id'))

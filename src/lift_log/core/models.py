"""
Data models for lift-log.

Plain dataclasses for workouts, exercises and sets plus the read-only view
records returned by the analytics functions.  Relationships are expressed
by containment (Workout → Exercise → WorkoutSet) or by value keys
(exercise names, pyramid/superset tags), never by object references.

Numeric fields are clamped at construction rather than rejected.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Iterable, Literal

from .config import RIR_MAX, RIR_MIN, WELLNESS_MAX, WELLNESS_MIN

DayType = Literal[
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
]
DAY_TYPES: tuple[str, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
)

PyramidScheme = Literal["ascending", "ascending-descending"]
SuggestionType = Literal["weight", "reps", "same"]
TrainingZone = Literal[
    "maximal-strength", "strength-hypertrophy", "hypertrophy", "endurance"
]
MeasurementType = Literal["arms", "thighs", "chest", "waist", "calves", "neck"]
MEASUREMENT_TYPES: tuple[str, ...] = ("arms", "thighs", "chest", "waist", "calves", "neck")


@dataclass
class WorkoutSet:
    """
    One performed (or planned) block of repetitions.

    A set is counted by the analytics only when ``completed`` is True.
    Sets sharing a ``pyramid_id`` form one round of a generated pyramid.
    """

    id: str
    set_number: int
    reps: int = 0
    weight: float = 0.0
    rest_time: int | None = None  # seconds
    rir: int | None = None  # reps in reserve, 0-10
    completed: bool = False
    pyramid_id: str | None = None

    def __post_init__(self) -> None:
        """Clamp out-of-range values."""
        self.reps = max(0, int(self.reps))
        self.weight = max(0.0, float(self.weight))
        if self.rest_time is not None:
            self.rest_time = max(0, int(self.rest_time))
        if self.rir is not None:
            self.rir = max(RIR_MIN, min(RIR_MAX, int(self.rir)))

    @property
    def is_blank(self) -> bool:
        """True while the set still holds its default, unfilled values."""
        return self.weight == 0 and self.reps == 0

    @property
    def volume(self) -> float:
        """weight × reps for completed sets, 0 otherwise."""
        return self.weight * self.reps if self.completed else 0.0


@dataclass
class Exercise:
    """
    One movement within a workout.

    ``name`` is free text; it is matched case-insensitively across
    workouts and against the movement catalog.
    """

    id: str
    name: str
    sets: list[WorkoutSet] = field(default_factory=list)
    rm: float | None = None  # known or entered rep max
    notes: str | None = None
    exercise_order: int = 0
    superset_group: int | None = None

    def __post_init__(self) -> None:
        if self.rm is not None and self.rm <= 0:
            self.rm = None
        if self.superset_group is not None and self.superset_group < 1:
            self.superset_group = None

    @property
    def key(self) -> str:
        """Case-insensitive join key used to match exercises across workouts."""
        return exercise_key(self.name)

    @property
    def completed_sets(self) -> list[WorkoutSet]:
        return [s for s in self.sets if s.completed]


@dataclass
class Workout:
    """
    One training session.

    ``date`` is an ISO-8601 date or datetime string.  Exercises are
    displayed by ``exercise_order``, not by list position.
    """

    id: str
    date: str
    day_type: DayType
    session_name: str
    exercises: list[Exercise] = field(default_factory=list)
    general_notes: str | None = None
    duration: int | None = None  # minutes
    completed: bool = False

    def __post_init__(self) -> None:
        if self.day_type not in DAY_TYPES:
            raise ValueError(f"Invalid day_type: {self.day_type}")
        if self.duration is not None:
            self.duration = max(0, int(self.duration))

    def find_exercise(self, name: str) -> Exercise | None:
        """Return the first exercise whose name matches case-insensitively."""
        wanted = exercise_key(name)
        for exercise in self.exercises:
            if exercise.key == wanted:
                return exercise
        return None


@dataclass
class DayProgram:
    """A named template of exercise names for one weekday."""

    id: str
    day_type: DayType
    session_name: str
    focus: str = ""
    exercises: list[str] = field(default_factory=list)
    is_custom: bool = False


@dataclass
class Goal:
    """Target weight for an exercise, referenced by name."""

    id: str
    exercise_name: str
    target_weight: float


@dataclass
class BodyWeight:
    """A dated body-weight measurement."""

    id: str
    date: str  # YYYY-MM-DD
    weight: float


@dataclass
class Measurement:
    """A dated body circumference in centimetres."""

    id: str
    date: str  # YYYY-MM-DD
    type: MeasurementType
    value: float  # cm

    def __post_init__(self) -> None:
        if self.type not in MEASUREMENT_TYPES:
            raise ValueError(f"Invalid measurement type: {self.type}")
        self.value = max(0.0, float(self.value))


@dataclass
class Wellness:
    """
    How the athlete felt on a given day.

    Ratings run from 1 (poor) to 5 (great); soreness from 1 (none) to 5
    (very sore).  Out-of-range ratings are clamped.
    """

    id: str
    date: str  # YYYY-MM-DD
    sleep_quality: int = 3
    energy_level: int = 3
    muscle_soreness: int = 3
    notes: str | None = None

    def __post_init__(self) -> None:
        self.sleep_quality = _clamp_rating(self.sleep_quality)
        self.energy_level = _clamp_rating(self.energy_level)
        self.muscle_soreness = _clamp_rating(self.muscle_soreness)


def _clamp_rating(value: int) -> int:
    return max(WELLNESS_MIN, min(WELLNESS_MAX, int(value)))


def exercise_key(name: str) -> str:
    """Normalize an exercise name for case-insensitive matching."""
    return name.strip().lower()


def generate_id() -> str:
    """Default opaque identifier factory."""
    return uuid.uuid4().hex


def renumber_sets(sets: Iterable[WorkoutSet]) -> list[WorkoutSet]:
    """Return copies of the sets numbered 1..n in list order."""
    return [
        s if s.set_number == i else replace(s, set_number=i)
        for i, s in enumerate(sets, start=1)
    ]


# =============================================================================
# Derived view records
# =============================================================================


@dataclass
class Suggestion:
    """Load adjustment proposed for the next appearance of an exercise."""

    type: SuggestionType
    value: float
    label: str


@dataclass
class LastSessionResult:
    """Sets from the most recent completed session plus the derived suggestion."""

    last_sets: list[WorkoutSet]
    suggestion: Suggestion


@dataclass
class SetGroup:
    """
    Display unit for an exercise's sets.

    Normal sets: ``pyramid_ids`` is empty and ``round_count`` is 0.
    Pyramid rounds with identical rep patterns collapse into one group.
    """

    pyramid_ids: list[str]
    sets: list[WorkoutSet]
    reps_pattern: str = ""
    round_count: int = 0

    @property
    def is_pyramid(self) -> bool:
        return bool(self.pyramid_ids)

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.sets if s.completed)


@dataclass
class RenderGroup:
    """Exercises rendered together; ``superset_group`` is None for standalone ones."""

    superset_group: int | None
    exercises: list[Exercise]


@dataclass
class WeeklyVolume:
    """Completed volume for one ISO week."""

    year: int
    week: int
    volume: float

    @property
    def key(self) -> str:
        return f"{self.year}-{self.week}"

    @property
    def label(self) -> str:
        return f"W{self.week}"


@dataclass
class DeloadStatus:
    """Outcome of the rolling deload heuristic."""

    due: bool
    recent_weeks: list[WeeklyVolume]
    mean_volume: float
    consecutive_weeks: int


@dataclass
class StreakStats:
    current: int
    best: int
    training_days: int


@dataclass
class CalendarCell:
    """One day of the training heatmap."""

    date: str  # YYYY-MM-DD
    volume: float
    sessions: list[str]
    tier: int  # 0 = rest, 1-3 = increasing volume


@dataclass
class CalendarHeatmap:
    cells: list[CalendarCell]
    low_threshold: float
    high_threshold: float
    training_days: int
    best_streak: int
    month_columns: list[tuple[int, int]]  # (week column, month number)

    @property
    def weeks(self) -> list[list[CalendarCell]]:
        """Cells chunked into Monday-first week columns."""
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]


@dataclass
class ExerciseStats:
    max_weight: float = 0.0
    total_reps: int = 0
    volume: float = 0.0


@dataclass
class ExerciseComparison:
    name: str
    a: ExerciseStats
    b: ExerciseStats

    @property
    def weight_diff(self) -> float:
        return self.b.max_weight - self.a.max_weight

    @property
    def reps_diff(self) -> int:
        return self.b.total_reps - self.a.total_reps

    @property
    def volume_diff(self) -> float:
        return self.b.volume - self.a.volume


@dataclass
class SessionComparison:
    exercises: list[ExerciseComparison]
    total_volume_a: float
    total_volume_b: float

    @property
    def volume_delta(self) -> float:
        return self.total_volume_b - self.total_volume_a


@dataclass
class TrainingSummary:
    total_sessions: int
    completed_sessions: int
    total_volume: float
    total_sets: int
    total_reps: int
    total_duration: int = 0  # minutes, completed sessions
    unique_exercises: int = 0
    most_worked_exercise: str | None = None
    most_worked_sessions: int = 0


@dataclass
class MonthlyActivity:
    month: str  # YYYY-MM
    sessions: int


@dataclass
class WeekComparison:
    this_week_sessions: int
    last_week_sessions: int
    this_week_volume: float
    last_week_volume: float
    volume_change_percent: int


@dataclass
class PersonalRecord:
    name: str
    max_weight: float = 0.0
    max_weight_date: str = ""
    max_1rm: int = 0
    max_volume: float = 0.0


@dataclass
class GoalProgress:
    goal: Goal
    best_weight: float
    percent: int

    @property
    def achieved(self) -> bool:
        return self.percent >= 100


@dataclass
class WeightStats:
    current: float
    minimum: float
    maximum: float
    delta_30_days: float | None


@dataclass
class MeasurementStats:
    type: MeasurementType
    current: float
    date: str
    delta: float | None  # against the newest entry at least 30 days older


@dataclass
class WellnessStats:
    entries: int
    average_sleep: float
    average_energy: float
    average_soreness: float
    latest: Wellness

"""
One-rep-max estimation and training-zone classification.

The Epley estimate is the single estimator used wherever lifts with
different rep counts are compared (records, strength curve).
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from .calendar import DateLike, filter_window, round_half_up, sort_by_date
from .config import (
    EPLEY_REPS_DIVISOR,
    RM_TABLE_PERCENTAGES,
    ZONE_ENDURANCE_MIN,
    ZONE_HYPERTROPHY_MIN,
    ZONE_MAX_STRENGTH_MIN,
    ZONE_STRENGTH_HYPERTROPHY_MIN,
)
from .models import PersonalRecord, TrainingZone, Workout, WorkoutSet, exercise_key

ZONE_LABELS: dict[str, str] = {
    "maximal-strength": "Maximal strength",
    "strength-hypertrophy": "Strength / hypertrophy",
    "hypertrophy": "Hypertrophy",
    "endurance": "Endurance",
}


def estimate_1rm(weight: float, reps: int) -> float:
    """
    Estimate one-rep max with the Epley formula.

    1RM = round(weight × (1 + reps/30))

    Args:
        weight: Load lifted
        reps: Repetitions performed with that load

    Returns:
        weight unchanged for a single, 0 when reps or weight is 0,
        otherwise the rounded Epley estimate
    """
    if reps == 1:
        return weight
    if reps <= 0 or weight <= 0:
        return 0
    return round_half_up(weight * (1 + reps / EPLEY_REPS_DIVISOR))


def percent_of_rm(weight: float, rm: float | None) -> int | None:
    """
    Express weight as a rounded percentage of a known RM.

    Returns:
        Percentage, or None when no positive RM is known
    """
    if rm is None or rm <= 0:
        return None
    return round_half_up(weight / rm * 100)


def classify_zone(percent: float | None) -> TrainingZone | None:
    """
    Map a %RM to its training zone (lower bounds inclusive).

    ≥90 maximal-strength, 80-89 strength-hypertrophy, 70-79 hypertrophy,
    60-69 endurance; anything lower has no zone.
    """
    if percent is None:
        return None
    if percent >= ZONE_MAX_STRENGTH_MIN:
        return "maximal-strength"
    if percent >= ZONE_STRENGTH_HYPERTROPHY_MIN:
        return "strength-hypertrophy"
    if percent >= ZONE_HYPERTROPHY_MIN:
        return "hypertrophy"
    if percent >= ZONE_ENDURANCE_MIN:
        return "endurance"
    return None


def load_for_percent(rm: float, percent: float) -> float:
    """Load corresponding to ``percent`` of ``rm``, rounded to 0.1."""
    if rm <= 0:
        return 0.0
    return round_half_up(rm * percent / 100 * 10) / 10


@dataclass
class PercentageRow:
    percent: int
    load: float
    zone: TrainingZone | None


def percentage_table(
    rm: float,
    percentages: Sequence[int] = RM_TABLE_PERCENTAGES,
) -> list[PercentageRow]:
    """Reference loads for a range of percentages of ``rm``."""
    return [PercentageRow(p, load_for_percent(rm, p), classify_zone(p)) for p in percentages]


def best_estimated_1rm(sets: Iterable[WorkoutSet]) -> float:
    """Highest Epley estimate among completed, loaded sets (0 if none)."""
    best: float = 0
    for s in sets:
        if s.completed and s.weight > 0 and s.reps > 0:
            best = max(best, estimate_1rm(s.weight, s.reps))
    return best


def personal_records(workouts: Iterable[Workout]) -> list[PersonalRecord]:
    """
    Best completed weight, estimated 1RM and single-session volume per exercise.

    Exercises are keyed case-insensitively; the first spelling seen is
    used for display.  Exercises never lifted with load are omitted.

    Returns:
        Records sorted by max weight, heaviest first
    """
    records: dict[str, PersonalRecord] = {}

    for workout in workouts:
        for exercise in workout.exercises:
            if not exercise.name.strip():
                continue
            loaded = [s for s in exercise.sets if s.completed and s.weight > 0]
            session_max = max((s.weight for s in loaded), default=0.0)
            session_1rm = max((estimate_1rm(s.weight, s.reps) for s in loaded), default=0)
            session_volume = sum(s.weight * s.reps for s in loaded)

            record = records.setdefault(exercise.key, PersonalRecord(name=exercise.name))
            if session_max > record.max_weight:
                record.max_weight = session_max
                record.max_weight_date = workout.date
            if session_1rm > record.max_1rm:
                record.max_1rm = session_1rm
            if session_volume > record.max_volume:
                record.max_volume = session_volume

    ranked = [r for r in records.values() if r.max_weight > 0]
    ranked.sort(key=lambda r: r.max_weight, reverse=True)
    return ranked


@dataclass
class CurvePoint:
    date: str
    values: dict[str, float]  # exercise name → best estimated 1RM


def strength_curve(
    workouts: Iterable[Workout],
    names: Sequence[str],
    months: int = 0,
    now: DateLike | None = None,
) -> list[CurvePoint]:
    """
    Best estimated 1RM per selected exercise, one point per workout.

    Only workouts in the window that contain at least one of the selected
    exercises produce a point; points are chronological.
    """
    wanted = {exercise_key(n): n for n in names}
    points: list[CurvePoint] = []

    for workout in sort_by_date(filter_window(workouts, months, now)):
        values: dict[str, float] = {}
        for key, name in wanted.items():
            exercise = workout.find_exercise(key)
            if exercise is not None:
                values[name] = best_estimated_1rm(exercise.sets)
        if values:
            points.append(CurvePoint(date=workout.date, values=values))

    return points

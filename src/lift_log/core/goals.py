"""
Goal progress and body-tracking statistics (weight, measurements, wellness).
"""

from datetime import date, timedelta
from typing import Iterable, Sequence

from .calendar import DateLike, round_half_up, to_date
from .config import BODY_WEIGHT_DELTA_DAYS, GOAL_PERCENT_CAP, WELLNESS_AVERAGE_DAYS
from .models import (
    MEASUREMENT_TYPES,
    BodyWeight,
    Goal,
    GoalProgress,
    Measurement,
    MeasurementStats,
    Wellness,
    WellnessStats,
    Workout,
    WeightStats,
    exercise_key,
)


def best_weight(workouts: Iterable[Workout], exercise_name: str) -> float:
    """Heaviest completed set ever recorded for an exercise (case-insensitive)."""
    wanted = exercise_key(exercise_name)
    best = 0.0
    for workout in workouts:
        for exercise in workout.exercises:
            if exercise.key != wanted:
                continue
            for s in exercise.completed_sets:
                best = max(best, s.weight)
    return best


def progress_percent(best: float, target: float) -> int:
    """min(100, round(best/target × 100)); 0 for a non-positive target."""
    if target <= 0:
        return 0
    return min(GOAL_PERCENT_CAP, round_half_up(best / target * 100))


def goal_progress(goals: Iterable[Goal], workouts: Iterable[Workout]) -> list[GoalProgress]:
    """Progress of each goal against the full workout history."""
    workouts = list(workouts)
    progress = []
    for goal in goals:
        best = best_weight(workouts, goal.exercise_name)
        progress.append(
            GoalProgress(goal=goal, best_weight=best, percent=progress_percent(best, goal.target_weight))
        )
    return progress


def weight_stats(
    entries: Sequence[BodyWeight],
    today: DateLike | None = None,
    delta_days: int = BODY_WEIGHT_DELTA_DAYS,
) -> WeightStats | None:
    """
    Summary of body-weight measurements.

    The delta compares the latest entry with the newest entry recorded at
    least ``delta_days`` days before ``today``.

    Returns:
        WeightStats, or None when there are no entries
    """
    if not entries:
        return None
    newest_first = sorted(entries, key=lambda e: to_date(e.date), reverse=True)
    current = newest_first[0].weight
    cutoff = (to_date(today) if today is not None else date.today()) - timedelta(days=delta_days)
    old = next((e for e in newest_first if to_date(e.date) <= cutoff), None)

    return WeightStats(
        current=current,
        minimum=min(e.weight for e in entries),
        maximum=max(e.weight for e in entries),
        delta_30_days=current - old.weight if old is not None else None,
    )


def measurement_stats(
    entries: Sequence[Measurement],
    today: DateLike | None = None,
    delta_days: int = BODY_WEIGHT_DELTA_DAYS,
) -> list[MeasurementStats]:
    """
    Latest value and change per measurement type.

    Types without entries are omitted; the rest follow the canonical type
    order.  The delta uses the same rule as ``weight_stats``.
    """
    cutoff = (to_date(today) if today is not None else date.today()) - timedelta(days=delta_days)
    stats = []
    for kind in MEASUREMENT_TYPES:
        newest_first = sorted(
            (e for e in entries if e.type == kind),
            key=lambda e: to_date(e.date),
            reverse=True,
        )
        if not newest_first:
            continue
        latest = newest_first[0]
        old = next((e for e in newest_first if to_date(e.date) <= cutoff), None)
        stats.append(
            MeasurementStats(
                type=latest.type,
                current=latest.value,
                date=latest.date,
                delta=latest.value - old.value if old is not None else None,
            )
        )
    return stats


def wellness_stats(
    entries: Sequence[Wellness],
    today: DateLike | None = None,
    days: int = WELLNESS_AVERAGE_DAYS,
) -> WellnessStats | None:
    """
    Average ratings over the last ``days`` days (today included).

    Returns:
        WellnessStats, or None when no entry falls in the window
    """
    end = to_date(today) if today is not None else date.today()
    start = end - timedelta(days=days - 1)
    recent = sorted(
        (e for e in entries if start <= to_date(e.date) <= end),
        key=lambda e: to_date(e.date),
    )
    if not recent:
        return None

    def average(values: list[int]) -> float:
        return round_half_up(sum(values) / len(values) * 10) / 10

    return WellnessStats(
        entries=len(recent),
        average_sleep=average([e.sleep_quality for e in recent]),
        average_energy=average([e.energy_level for e in recent]),
        average_soreness=average([e.muscle_soreness for e in recent]),
        latest=recent[-1],
    )

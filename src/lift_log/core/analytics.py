"""
Training-load analytics.

Volume, deload detection, streaks, the calendar heatmap and session
comparison.  Every function takes the workout history as input and
returns fresh view records; volume counts completed sets only.
"""

import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Mapping, Sequence

from .calendar import (
    DateLike,
    date_key,
    filter_window,
    iso_week_key,
    monday_of,
    months_ago,
    round_half_up,
    sort_by_date,
    to_date,
)
from .config import (
    CALENDAR_DAYS,
    CALENDAR_HIGH_FALLBACK,
    CALENDAR_HIGH_PERCENTILE,
    CALENDAR_LOW_FALLBACK,
    CALENDAR_LOW_PERCENTILE,
    DELOAD_WEEK_RATIO,
    DELOAD_WINDOW_WEEKS,
    MONTHLY_ACTIVITY_MONTHS,
    STREAK_LOOKBACK_DAYS,
    UNKNOWN_CATEGORY,
)
from .models import (
    CalendarCell,
    CalendarHeatmap,
    DeloadStatus,
    Exercise,
    ExerciseComparison,
    ExerciseStats,
    MonthlyActivity,
    SessionComparison,
    StreakStats,
    TrainingSummary,
    WeekComparison,
    WeeklyVolume,
    Workout,
    WorkoutSet,
)


def _today(today: DateLike | None) -> date:
    return to_date(today) if today is not None else date.today()


# =============================================================================
# Volume
# =============================================================================


def set_volume(s: WorkoutSet) -> float:
    """weight × reps of a completed set, else 0."""
    return s.weight * s.reps if s.completed else 0.0


def exercise_volume(exercise: Exercise) -> float:
    return sum(set_volume(s) for s in exercise.sets)


def workout_volume(workout: Workout) -> float:
    return sum(exercise_volume(e) for e in workout.exercises)


def weekly_volume(
    workouts: Iterable[Workout],
    months: int = 0,
    now: DateLike | None = None,
) -> list[WeeklyVolume]:
    """
    Completed volume per ISO week, chronological.

    Every workout in the window places its week in the result, so a week
    with only unfinished sets reports 0.

    Args:
        workouts: Workout history
        months: Trailing window in calendar months (0 = all history)
        now: Window end (defaults to the current date)

    Returns:
        One WeeklyVolume per (iso_week_year, iso_week) present
    """
    buckets: dict[tuple[int, int], float] = defaultdict(float)
    for workout in filter_window(workouts, months, now):
        buckets[iso_week_key(workout.date)] += workout_volume(workout)
    return [WeeklyVolume(year=y, week=w, volume=v) for (y, w), v in sorted(buckets.items())]


def average_weekly_volume(weeks: Sequence[WeeklyVolume]) -> int:
    if not weeks:
        return 0
    return round_half_up(sum(w.volume for w in weeks) / len(weeks))


# =============================================================================
# Deload detection
# =============================================================================


def _consecutive_weeks(keys: Sequence[tuple[int, int]]) -> int:
    """Length of the unbroken run of ISO weeks ending at the latest key."""
    if not keys:
        return 0
    mondays = {date.fromisocalendar(y, w, 1) for y, w in keys}
    current = max(mondays)
    count = 0
    while current in mondays:
        count += 1
        current -= timedelta(days=7)
    return count


def deload_status(
    workouts: Iterable[Workout],
    window_weeks: int = DELOAD_WINDOW_WEEKS,
    week_ratio: float = DELOAD_WEEK_RATIO,
) -> DeloadStatus:
    """
    Rolling deload heuristic over completed workouts.

    The last ``window_weeks`` ISO weeks with a completed workout are
    inspected.  A deload is due when there are enough of them, all carry
    volume, and none fell below ``week_ratio`` × their mean (i.e. no
    lighter week was taken recently).
    """
    completed = [w for w in workouts if w.completed]
    weeks = weekly_volume(completed)
    recent = weeks[-window_weeks:] if window_weeks > 0 else []
    consecutive = _consecutive_weeks([(w.year, w.week) for w in weeks])

    if window_weeks <= 0 or len(weeks) < window_weeks:
        return DeloadStatus(False, recent, 0.0, consecutive)

    mean = sum(w.volume for w in recent) / len(recent)
    if any(w.volume <= 0 for w in recent):
        return DeloadStatus(False, recent, mean, consecutive)

    had_light_week = any(w.volume < mean * week_ratio for w in recent)
    return DeloadStatus(not had_light_week, recent, mean, consecutive)


def deload_due(workouts: Iterable[Workout], **kwargs) -> bool:
    return deload_status(workouts, **kwargs).due


# =============================================================================
# Streaks
# =============================================================================


def completed_dates(workouts: Iterable[Workout]) -> set[date]:
    """Distinct calendar dates with at least one completed workout."""
    return {to_date(w.date) for w in workouts if w.completed}


def current_streak(workouts: Iterable[Workout], today: DateLike | None = None) -> int:
    """
    Consecutive trained days ending today.

    If today has no completed workout yet the count starts from
    yesterday, so an unfinished day does not break the streak.
    """
    dates = completed_dates(workouts)
    day = _today(today)
    if day not in dates:
        day -= timedelta(days=1)
    count = 0
    while day in dates:
        count += 1
        day -= timedelta(days=1)
    return count


def best_streak(
    workouts: Iterable[Workout],
    today: DateLike | None = None,
    lookback_days: int = STREAK_LOOKBACK_DAYS,
) -> int:
    """Longest run of consecutive trained days within the lookback window."""
    return _best_run(completed_dates(workouts), _today(today), lookback_days)


def _best_run(dates: set[date], end: date, lookback_days: int) -> int:
    best = run = 0
    day = end
    for _ in range(lookback_days):
        if day in dates:
            run += 1
            best = max(best, run)
        else:
            run = 0
        day -= timedelta(days=1)
    return best


def streak_stats(
    workouts: Iterable[Workout],
    today: DateLike | None = None,
    lookback_days: int = STREAK_LOOKBACK_DAYS,
) -> StreakStats:
    workouts = list(workouts)
    return StreakStats(
        current=current_streak(workouts, today),
        best=best_streak(workouts, today, lookback_days),
        training_days=len(completed_dates(workouts)),
    )


# =============================================================================
# Calendar heatmap
# =============================================================================


def _percentile(sorted_values: Sequence[float], fraction: float, fallback: float) -> float:
    if not sorted_values:
        return fallback
    value = sorted_values[math.floor(len(sorted_values) * fraction)]
    return value or fallback


def volume_tier(volume: float, low: float, high: float) -> int:
    """0 for rest days, then 1-3; a value on a threshold takes the lower tier."""
    if volume <= 0:
        return 0
    if volume <= low:
        return 1
    if volume <= high:
        return 2
    return 3


def calendar_heatmap(
    workouts: Iterable[Workout],
    today: DateLike | None = None,
    days: int = CALENDAR_DAYS,
) -> CalendarHeatmap:
    """
    Per-day volume grid for the trailing ``days`` days.

    The grid starts on the Monday on or before the window start and ends
    today.  Tier thresholds are the 33rd and 66th percentiles of the
    nonzero daily volumes inside the grid.

    Returns:
        CalendarHeatmap with one cell per day, chronological
    """
    workouts = [w for w in workouts if w.completed]
    end = _today(today)
    start = monday_of(end - timedelta(days=max(days, 1) - 1))

    volumes: dict[date, float] = defaultdict(float)
    sessions: dict[date, list[str]] = defaultdict(list)
    for workout in sort_by_date(workouts):
        day = to_date(workout.date)
        if start <= day <= end:
            volumes[day] += workout_volume(workout)
            sessions[day].append(workout.session_name)

    nonzero = sorted(v for v in volumes.values() if v > 0)
    low = _percentile(nonzero, CALENDAR_LOW_PERCENTILE, CALENDAR_LOW_FALLBACK)
    high = _percentile(nonzero, CALENDAR_HIGH_PERCENTILE, CALENDAR_HIGH_FALLBACK)

    cells: list[CalendarCell] = []
    month_columns: list[tuple[int, int]] = []
    last_month = None
    day = start
    while day <= end:
        if day.month != last_month:
            month_columns.append((len(cells) // 7, day.month))
            last_month = day.month
        volume = volumes.get(day, 0.0)
        cells.append(
            CalendarCell(
                date=day.isoformat(),
                volume=volume,
                sessions=list(sessions.get(day, [])),
                tier=volume_tier(volume, low, high),
            )
        )
        day += timedelta(days=1)

    return CalendarHeatmap(
        cells=cells,
        low_threshold=low,
        high_threshold=high,
        training_days=len(completed_dates(workouts)),
        best_streak=_best_run(completed_dates(workouts), end, days),
        month_columns=month_columns,
    )


# =============================================================================
# Session comparison
# =============================================================================


def exercise_stats(exercise: Exercise | None) -> ExerciseStats:
    """Max weight, total reps and volume over completed sets (zeros if absent)."""
    if exercise is None:
        return ExerciseStats()
    stats = ExerciseStats()
    for s in exercise.completed_sets:
        stats.max_weight = max(stats.max_weight, s.weight)
        stats.total_reps += s.reps
        stats.volume += s.weight * s.reps
    return stats


def compare_sessions(a: Workout, b: Workout) -> SessionComparison:
    """
    Exercise-by-exercise comparison of two sessions.

    Exercises are matched case-insensitively, in order of first
    appearance (session a first).  An exercise missing from one session
    has zero stats there.
    """
    names: dict[str, str] = {}
    for exercise in [*a.exercises, *b.exercises]:
        names.setdefault(exercise.key, exercise.name)

    rows = [
        ExerciseComparison(
            name=name,
            a=exercise_stats(a.find_exercise(key)),
            b=exercise_stats(b.find_exercise(key)),
        )
        for key, name in names.items()
    ]
    return SessionComparison(
        exercises=rows,
        total_volume_a=sum(r.a.volume for r in rows),
        total_volume_b=sum(r.b.volume for r in rows),
    )


def session_names(workouts: Iterable[Workout]) -> list[str]:
    """Distinct session names, sorted."""
    return sorted({w.session_name for w in workouts})


def sessions_named(workouts: Iterable[Workout], name: str) -> list[Workout]:
    """Completed sessions with the given name, newest first."""
    matching = [w for w in workouts if w.completed and w.session_name == name]
    return sort_by_date(matching, newest_first=True)


# =============================================================================
# Summaries
# =============================================================================


def training_summary(workouts: Iterable[Workout]) -> TrainingSummary:
    """
    Whole-log totals.

    Volume, sets and reps count completed loaded sets of every workout.
    Duration, distinct exercises and the most-worked exercise look at
    completed sessions only; exercise names are matched
    case-insensitively and the first spelling seen is reported.  Ties for
    most-worked go to the exercise seen first.
    """
    workouts = sort_by_date(workouts)
    volume = 0.0
    sets = reps = 0
    for workout in workouts:
        for exercise in workout.exercises:
            for s in exercise.sets:
                if s.completed and s.weight > 0 and s.reps > 0:
                    volume += s.weight * s.reps
                    sets += 1
                    reps += s.reps

    completed = [w for w in workouts if w.completed]
    names: dict[str, str] = {}
    counts: dict[str, int] = defaultdict(int)
    for workout in completed:
        for exercise in workout.exercises:
            names.setdefault(exercise.key, exercise.name)
            counts[exercise.key] += 1
    top = max(counts, key=lambda k: counts[k], default=None)

    return TrainingSummary(
        total_sessions=len(workouts),
        completed_sessions=len(completed),
        total_volume=volume,
        total_sets=sets,
        total_reps=reps,
        total_duration=sum(w.duration or 0 for w in completed),
        unique_exercises=len(names),
        most_worked_exercise=names[top] if top is not None else None,
        most_worked_sessions=counts[top] if top is not None else 0,
    )


def monthly_activity(
    workouts: Iterable[Workout],
    today: DateLike | None = None,
    months: int = MONTHLY_ACTIVITY_MONTHS,
) -> list[MonthlyActivity]:
    """
    Completed sessions per calendar month, oldest month first.

    Covers the month containing ``today`` and the ``months - 1`` before it.
    """
    end = _today(today)
    buckets: dict[tuple[int, int], int] = {}
    for i in range(months - 1, -1, -1):
        in_month = months_ago(end, i)
        buckets[(in_month.year, in_month.month)] = 0
    for workout in workouts:
        if not workout.completed:
            continue
        day = to_date(workout.date)
        if (day.year, day.month) in buckets:
            buckets[(day.year, day.month)] += 1
    return [MonthlyActivity(month=f"{y}-{m:02d}", sessions=n) for (y, m), n in buckets.items()]


def week_comparison(workouts: Iterable[Workout], today: DateLike | None = None) -> WeekComparison:
    """
    This ISO week (Monday to today) against the previous one.

    The percent change is rounded and reported as 0 when last week had
    no volume.
    """
    this_monday = monday_of(_today(today))
    last_monday = this_monday - timedelta(days=7)

    this_week: list[Workout] = []
    last_week: list[Workout] = []
    for workout in workouts:
        day = to_date(workout.date)
        if day >= this_monday:
            this_week.append(workout)
        elif day >= last_monday:
            last_week.append(workout)

    this_volume = sum(workout_volume(w) for w in this_week)
    last_volume = sum(workout_volume(w) for w in last_week)
    change = round_half_up((this_volume - last_volume) / last_volume * 100) if last_volume > 0 else 0

    return WeekComparison(
        this_week_sessions=len(this_week),
        last_week_sessions=len(last_week),
        this_week_volume=this_volume,
        last_week_volume=last_volume,
        volume_change_percent=change,
    )


def muscle_frequency(
    workouts: Iterable[Workout],
    categories: Mapping[str, str],
    months: int = 0,
    now: DateLike | None = None,
) -> list[tuple[str, int]]:
    """
    Distinct training days per muscle category.

    Args:
        workouts: Workout history
        categories: Lower-cased exercise name → category
        months: Trailing window (0 = all history)
        now: Window end

    Returns:
        (category, days) pairs, most frequent first; names missing from
        the catalog count under "Other"
    """
    days: dict[str, set[str]] = defaultdict(set)
    for workout in filter_window(workouts, months, now):
        key = date_key(workout.date)
        for exercise in workout.exercises:
            days[categories.get(exercise.key, UNKNOWN_CATEGORY)].add(key)
    return sorted(((c, len(d)) for c, d in days.items()), key=lambda item: item[1], reverse=True)


def recent_progress(workouts: Iterable[Workout]) -> list[tuple[str, float, float]]:
    """
    Max completed weight of the latest session vs the one before, per exercise.

    Returns:
        (name, previous, current) for exercises lifted with load in both
        sessions, largest improvement first
    """
    ordered = sort_by_date(workouts, newest_first=True)
    names: dict[str, str] = {}
    for workout in ordered:
        for exercise in workout.exercises:
            if exercise.name.strip():
                names.setdefault(exercise.key, exercise.name)

    progress: list[tuple[str, float, float]] = []
    for key, name in names.items():
        found = [w.find_exercise(key) for w in ordered if w.find_exercise(key) is not None]
        if len(found) < 2:
            continue
        current = exercise_stats(found[0]).max_weight
        previous = exercise_stats(found[1]).max_weight
        if current > 0 and previous > 0:
            progress.append((name, previous, current))

    progress.sort(key=lambda p: p[2] - p[1], reverse=True)
    return progress


"""
Progression suggestions.

Looks at the most recent completed session containing an exercise and
proposes the load for its next appearance, based on the reps in reserve
reported for every set.
"""

from dataclasses import replace
from typing import Iterable

from .calendar import sort_by_date
from .config import PROGRESSION_MIN_RIR, PROGRESSION_REP_STEP, PROGRESSION_WEIGHT_STEP
from .models import Exercise, LastSessionResult, Suggestion, Workout, WorkoutSet

SAME_LOAD_LABEL = "Same load"


def _format_step(value: float) -> str:
    return f"{value:g}"


def same_load() -> Suggestion:
    return Suggestion(type="same", value=0, label=SAME_LOAD_LABEL)


def weight_increase(step: float = PROGRESSION_WEIGHT_STEP) -> Suggestion:
    return Suggestion(type="weight", value=step, label=f"+{_format_step(step)}kg")


def reps_increase(step: int = PROGRESSION_REP_STEP) -> Suggestion:
    label = f"+{step} rep" if step == 1 else f"+{step} reps"
    return Suggestion(type="reps", value=step, label=label)


def find_last_exercise(workouts: Iterable[Workout], name: str) -> tuple[Workout, Exercise] | None:
    """
    Most recent completed workout containing the exercise (case-insensitive).

    Returns:
        (workout, exercise) or None if the exercise was never completed
    """
    if not name.strip():
        return None
    completed = [w for w in workouts if w.completed]
    for workout in sort_by_date(completed, newest_first=True):
        exercise = workout.find_exercise(name)
        if exercise is not None:
            return workout, exercise
    return None


def suggest_from_sets(
    sets: list[WorkoutSet],
    weight_step: float = PROGRESSION_WEIGHT_STEP,
    rep_step: int = PROGRESSION_REP_STEP,
    min_rir: int = PROGRESSION_MIN_RIR,
) -> Suggestion:
    """
    Suggestion for the sets of one exercise in one session.

    Only completed sets are inspected.  The load is kept unless every set
    was completed with RIR reported; then a minimum RIR of at least
    ``min_rir`` adds weight and anything lower adds reps.
    """
    completed = [s for s in sets if s.completed]
    if not completed:
        return same_load()

    all_completed = len(completed) == len(sets)
    all_have_rir = all(s.rir is not None for s in completed)
    if not (all_completed and all_have_rir):
        return same_load()

    lowest = min(s.rir for s in completed)  # type: ignore[type-var]
    if lowest >= min_rir:
        return weight_increase(weight_step)
    return reps_increase(rep_step)


def last_session(
    workouts: Iterable[Workout],
    name: str,
    weight_step: float = PROGRESSION_WEIGHT_STEP,
    rep_step: int = PROGRESSION_REP_STEP,
    min_rir: int = PROGRESSION_MIN_RIR,
) -> LastSessionResult | None:
    """
    Sets of the last completed session for an exercise plus a suggestion.

    Args:
        workouts: Full workout history
        name: Exercise name, matched case-insensitively
        weight_step: Load added for a "weight" suggestion
        rep_step: Reps added for a "reps" suggestion
        min_rir: Lowest RIR that still allows adding load

    Returns:
        LastSessionResult, or None when there is no prior completed
        session or the prior exercise has no sets
    """
    found = find_last_exercise(workouts, name)
    if found is None:
        return None
    _, exercise = found
    if not exercise.sets:
        return None
    suggestion = suggest_from_sets(exercise.sets, weight_step, rep_step, min_rir)
    return LastSessionResult(last_sets=list(exercise.sets), suggestion=suggestion)


def suggest(workouts: Iterable[Workout], name: str, **kwargs) -> Suggestion | None:
    """Shortcut returning only the suggestion of last_session()."""
    result = last_session(workouts, name, **kwargs)
    return result.suggestion if result is not None else None


def apply_suggestion(exercise: Exercise, last: LastSessionResult) -> Exercise:
    """
    Pre-fill blank sets of a new exercise from the previous session.

    Correspondence is by position in the set list.  Sets the user already
    started filling (weight or reps non-zero) and sets beyond the previous
    session's length are left untouched.

    Returns:
        New Exercise; the input is not modified
    """
    suggestion = last.suggestion
    sets: list[WorkoutSet] = []
    for i, current in enumerate(exercise.sets):
        if i >= len(last.last_sets) or not current.is_blank:
            sets.append(current)
            continue
        prior = last.last_sets[i]
        weight, reps = prior.weight, prior.reps
        if suggestion.type == "weight":
            weight = prior.weight + suggestion.value
        elif suggestion.type == "reps":
            reps = prior.reps + int(suggestion.value)
        sets.append(replace(current, weight=weight, reps=reps))
    return replace(exercise, sets=sets)

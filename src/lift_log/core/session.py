"""
Session construction and editing.

Builds workouts from day programs and applies the edits made while a
session is in progress.  Every function returns new values; nothing is
modified in place.  Identifier generation is injected through ``new_id``
so construction is deterministic under test.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Iterable, Sequence

from .calendar import DateLike, parse_timestamp
from .config import DEFAULT_SETS_PER_EXERCISE, RIR_MAX, RIR_MIN
from .models import (
    DayProgram,
    Exercise,
    Workout,
    WorkoutSet,
    generate_id,
    renumber_sets,
)

IdFactory = Callable[[], str]

_UNSET = object()


def _timestamp(when: DateLike | None) -> str:
    moment = parse_timestamp(when) if when is not None else datetime.now()
    return moment.isoformat(timespec="seconds")


def new_set(set_number: int, new_id: IdFactory = generate_id) -> WorkoutSet:
    """An empty, uncompleted set."""
    return WorkoutSet(id=new_id(), set_number=set_number)


def default_sets(count: int = DEFAULT_SETS_PER_EXERCISE, new_id: IdFactory = generate_id) -> list[WorkoutSet]:
    return [new_set(i, new_id) for i in range(1, count + 1)]


def new_exercise(
    name: str,
    exercise_order: int,
    set_count: int = DEFAULT_SETS_PER_EXERCISE,
    new_id: IdFactory = generate_id,
) -> Exercise:
    return Exercise(
        id=new_id(),
        name=name.strip(),
        sets=default_sets(set_count, new_id),
        exercise_order=exercise_order,
    )


def program_for_day(programs: Iterable[DayProgram], day_type: str) -> DayProgram | None:
    """First program scheduled on a weekday, or None."""
    return next((p for p in programs if p.day_type == day_type), None)


def create_workout(
    day_type: str,
    program: DayProgram | None = None,
    when: DateLike | None = None,
    set_count: int = DEFAULT_SETS_PER_EXERCISE,
    new_id: IdFactory = generate_id,
) -> Workout:
    """
    Start a workout from a day program.

    Each program exercise gets ``set_count`` empty sets and its position
    as exercise_order.  Without a program the workout is empty and named
    "Session <day>".

    Args:
        day_type: Weekday tag of the session
        program: Template to copy exercise names from
        when: Session timestamp (defaults to now)
        set_count: Empty sets per exercise
        new_id: Identifier factory

    Returns:
        New, uncompleted Workout
    """
    names = program.exercises if program is not None else []
    exercises = [new_exercise(name, i, set_count, new_id) for i, name in enumerate(names)]
    session_name = program.session_name if program is not None and program.session_name else f"Session {day_type}"
    return Workout(
        id=new_id(),
        date=_timestamp(when),
        day_type=day_type,  # type: ignore[arg-type]
        session_name=session_name,
        exercises=exercises,
        completed=False,
    )


# =============================================================================
# Exercise editing
# =============================================================================


def _map_exercise(workout: Workout, exercise_id: str, fn: Callable[[Exercise], Exercise]) -> Workout:
    exercises = [fn(e) if e.id == exercise_id else e for e in workout.exercises]
    return replace(workout, exercises=exercises)


def add_exercise(
    workout: Workout,
    name: str,
    set_count: int = DEFAULT_SETS_PER_EXERCISE,
    new_id: IdFactory = generate_id,
) -> Workout:
    """Append an exercise with empty sets after the current last one."""
    if not name.strip():
        return workout
    order = max((e.exercise_order for e in workout.exercises), default=-1) + 1
    exercise = new_exercise(name, order, set_count, new_id)
    return replace(workout, exercises=[*workout.exercises, exercise])


def delete_exercise(workout: Workout, exercise_id: str) -> Workout:
    return replace(workout, exercises=[e for e in workout.exercises if e.id != exercise_id])


def replace_exercise(workout: Workout, exercise: Exercise) -> Workout:
    """Swap in an edited exercise with the same id."""
    return _map_exercise(workout, exercise.id, lambda _: exercise)


def rename_exercise(workout: Workout, exercise_id: str, name: str) -> Workout:
    """
    Rename an exercise in this workout only.

    History is matched by name, so earlier sessions keep the old name and
    no longer feed suggestions or records for the new one.
    """
    if not name.strip():
        return workout
    return _map_exercise(workout, exercise_id, lambda e: replace(e, name=name.strip()))


def move_exercise(workout: Workout, exercise_id: str, offset: int) -> Workout:
    """
    Move an exercise up (negative offset) or down in display order.

    The exercise swaps exercise_order with the neighbour at the target
    position; out-of-range moves leave the workout unchanged.
    """
    ordered = sorted(workout.exercises, key=lambda e: e.exercise_order)
    index = next((i for i, e in enumerate(ordered) if e.id == exercise_id), None)
    if index is None:
        return workout
    target = index + offset
    if offset == 0 or not 0 <= target < len(ordered):
        return workout

    a, b = ordered[index], ordered[target]
    swapped = {a.id: b.exercise_order, b.id: a.exercise_order}
    exercises = [
        replace(e, exercise_order=swapped[e.id]) if e.id in swapped else e
        for e in workout.exercises
    ]
    return replace(workout, exercises=exercises)


def normalize_exercise_order(workout: Workout) -> Workout:
    """Reassign exercise_order 0..n-1 following the current display order."""
    ordered = sorted(workout.exercises, key=lambda e: e.exercise_order)
    positions = {e.id: i for i, e in enumerate(ordered)}
    exercises = [replace(e, exercise_order=positions[e.id]) for e in workout.exercises]
    return replace(workout, exercises=exercises)


def set_rm(workout: Workout, exercise_id: str, rm: float | None) -> Workout:
    return _map_exercise(workout, exercise_id, lambda e: replace(e, rm=rm))


def set_notes(workout: Workout, exercise_id: str, notes: str | None) -> Workout:
    return _map_exercise(workout, exercise_id, lambda e: replace(e, notes=notes or None))


# =============================================================================
# Set editing
# =============================================================================


def add_set(exercise: Exercise, new_id: IdFactory = generate_id) -> Exercise:
    """Append an empty set numbered after the existing ones."""
    return replace(exercise, sets=[*exercise.sets, new_set(len(exercise.sets) + 1, new_id)])


def delete_set(exercise: Exercise, set_id: str) -> Exercise:
    """Remove a set and renumber the survivors 1..n."""
    return replace(exercise, sets=renumber_sets(s for s in exercise.sets if s.id != set_id))


def update_set(
    exercise: Exercise,
    set_id: str,
    *,
    reps: int | None = None,
    weight: float | None = None,
    rest_time=_UNSET,
    rir=_UNSET,
    completed: bool | None = None,
) -> Exercise:
    """
    Edit one set's fields, clamping values into range.

    Weight, reps and rest are floored at 0 and RIR is clamped to 0-10.
    Pass ``rest_time=None`` or ``rir=None`` to clear those fields.
    """
    def edit(s: WorkoutSet) -> WorkoutSet:
        changes: dict = {}
        if reps is not None:
            changes["reps"] = max(0, reps)
        if weight is not None:
            changes["weight"] = max(0.0, weight)
        if rest_time is not _UNSET:
            changes["rest_time"] = None if rest_time is None else max(0, rest_time)
        if rir is not _UNSET:
            changes["rir"] = None if rir is None else max(RIR_MIN, min(RIR_MAX, rir))
        if completed is not None:
            changes["completed"] = completed
        return replace(s, **changes)

    return replace(exercise, sets=[edit(s) if s.id == set_id else s for s in exercise.sets])


def step_weight(exercise: Exercise, set_id: str, delta: float) -> Exercise:
    """Adjust one set's weight by delta, never below 0."""
    return replace(
        exercise,
        sets=[
            replace(s, weight=max(0.0, s.weight + delta)) if s.id == set_id else s
            for s in exercise.sets
        ],
    )


def copy_weight_to_all(exercise: Exercise, set_id: str) -> Exercise:
    """Copy one set's weight to every set of the exercise."""
    source = next((s for s in exercise.sets if s.id == set_id), None)
    if source is None:
        return exercise
    return replace(exercise, sets=[replace(s, weight=source.weight) for s in exercise.sets])


def complete_all_sets(exercise: Exercise, completed: bool = True) -> Exercise:
    return replace(exercise, sets=[replace(s, completed=completed) for s in exercise.sets])


def finish_workout(workout: Workout, completed: bool = True, when: DateLike | None = None) -> Workout:
    """Stamp the save time and completion flag on a workout."""
    return replace(workout, date=_timestamp(when), completed=completed)


# =============================================================================
# Programs
# =============================================================================


def save_as_program(
    workout: Workout,
    custom_programs: Sequence[DayProgram],
    selected: DayProgram | None = None,
    new_id: IdFactory = generate_id,
) -> list[DayProgram]:
    """
    Store a workout's exercise list as a day program.

    A selected default program is never changed: a custom copy with the
    new exercise list is added instead.  A selected custom program is
    updated.  With no selection a new custom program is created for the
    workout's day.

    Returns:
        The new list of custom programs
    """
    if not workout.exercises:
        return list(custom_programs)
    ordered = sorted(workout.exercises, key=lambda e: e.exercise_order)
    names = [e.name for e in ordered]

    if selected is not None and selected.is_custom:
        return [replace(p, exercises=names) if p.id == selected.id else p for p in custom_programs]
    if selected is not None:
        copy = replace(selected, id=new_id(), exercises=names, is_custom=True)
        return [*custom_programs, copy]

    program = DayProgram(
        id=new_id(),
        day_type=workout.day_type,
        session_name=workout.session_name,
        focus="",
        exercises=names,
        is_custom=True,
    )
    return [*custom_programs, program]


def delete_program(custom_programs: Sequence[DayProgram], program_id: str) -> list[DayProgram]:
    """Remove a custom program; default programs cannot be deleted."""
    return [p for p in custom_programs if p.id != program_id]


# =============================================================================
# Draft
# =============================================================================


@dataclass
class SessionDraft:
    """An in-progress workout and when it was last edited."""

    workout: Workout
    updated_at: str


def start_draft(workout: Workout, now: DateLike | None = None) -> SessionDraft:
    return SessionDraft(workout=workout, updated_at=_timestamp(now))


def touch_draft(draft: SessionDraft, workout: Workout, now: DateLike | None = None) -> SessionDraft:
    """Replace the draft's workout after an edit."""
    return replace(draft, workout=workout, updated_at=_timestamp(now))

"""
Superset grouping.

Exercises carry an optional ``superset_group`` number; exercises sharing
a number are performed back-to-back and rendered together.
"""

from dataclasses import replace
from typing import Sequence

from .models import Exercise, RenderGroup, Workout


def assign_superset_group(workout: Workout, exercise_id: str, group: int | None) -> Workout:
    """
    Put one exercise into a superset group, or take it out with None.

    Non-positive group numbers are treated as None.  Other members of the
    old or new group are untouched.

    Returns:
        New Workout; unchanged copy if exercise_id is unknown
    """
    if group is not None and group < 1:
        group = None
    exercises = [
        replace(e, superset_group=group) if e.id == exercise_id else e
        for e in workout.exercises
    ]
    return replace(workout, exercises=exercises)


def render_groups(exercises: Sequence[Exercise]) -> list[RenderGroup]:
    """
    Partition exercises into render groups.

    Exercises are ordered by exercise_order.  Ungrouped exercises stand
    alone; every exercise sharing a superset number joins one group placed
    where the first of them appears.
    """
    ordered = sorted(exercises, key=lambda e: e.exercise_order)
    groups: list[RenderGroup] = []
    by_number: dict[int, RenderGroup] = {}

    for exercise in ordered:
        number = exercise.superset_group
        if number is None:
            groups.append(RenderGroup(superset_group=None, exercises=[exercise]))
        elif number in by_number:
            by_number[number].exercises.append(exercise)
        else:
            group = RenderGroup(superset_group=number, exercises=[exercise])
            by_number[number] = group
            groups.append(group)

    return groups


def superset_groups_in_use(workout: Workout) -> list[int]:
    """Distinct superset numbers present in a workout, ascending."""
    return sorted({e.superset_group for e in workout.exercises if e.superset_group is not None})

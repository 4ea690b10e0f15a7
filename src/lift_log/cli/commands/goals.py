"""
Goal and body-tracking commands: goals, body weight, circumference
measurements and daily wellness ratings.
"""

import json
from dataclasses import asdict
from datetime import date
from typing import Annotated, Optional

import typer

from ...core.config import WELLNESS_AVERAGE_DAYS, WELLNESS_MAX, WELLNESS_MIN
from ...core.goals import goal_progress, measurement_stats, weight_stats, wellness_stats
from ...core.models import MEASUREMENT_TYPES, BodyWeight, Goal, Measurement, Wellness, generate_id
from ...io.serializers import ValidationError, validate_date, validate_measurement_type
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store, load_workouts


@app.command("goal-add")
def goal_add(
    exercise_name: Annotated[str, typer.Argument(help="Exercise name (matched case-insensitively)")],
    target_weight: Annotated[float, typer.Argument(help="Target weight in kg")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Set a target weight for an exercise.
    """
    store = get_store(data_dir)
    load_workouts(store)

    if not exercise_name.strip():
        views.print_error("Exercise name cannot be empty")
        raise typer.Exit(1)
    if target_weight <= 0:
        views.print_error("Target weight must be positive")
        raise typer.Exit(1)

    goal = Goal(id=generate_id(), exercise_name=exercise_name.strip(), target_weight=target_weight)
    try:
        store.add_goal(goal)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Goal added: {goal.exercise_name} {target_weight:g} kg ({goal.id[:8]})")


@app.command()
def goals(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show progress towards every goal.
    """
    store = get_store(data_dir)
    workouts = load_workouts(store)
    try:
        progress = goal_progress(store.load_goals(), workouts)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        data = [
            {
                "id": p.goal.id,
                "exercise_name": p.goal.exercise_name,
                "target_weight": p.goal.target_weight,
                "best_weight": p.best_weight,
                "percent": p.percent,
                "achieved": p.achieved,
            }
            for p in progress
        ]
        print(json.dumps(data, indent=2))
        return

    views.print_goals(progress)


@app.command("goal-delete")
def goal_delete(
    goal_id: Annotated[str, typer.Argument(help="Goal ID or unique prefix (see 'goals')")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a goal.
    """
    store = get_store(data_dir)
    try:
        matches = [g for g in store.load_goals() if g.id.startswith(goal_id)]
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if len(matches) != 1:
        views.print_error(f"Goal ID '{goal_id}' matches {len(matches)} goals")
        raise typer.Exit(1)

    store.delete_goal(matches[0].id)
    views.print_success(f"Deleted goal: {matches[0].exercise_name} {matches[0].target_weight:g} kg")


@app.command("weight-add")
def weight_add(
    weight: Annotated[float, typer.Argument(help="Body weight in kg")],
    on: Annotated[
        Optional[str],
        typer.Option("--date", help="Measurement date (YYYY-MM-DD, default: today)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Record a body-weight measurement (one per day; a second entry replaces the first).
    """
    store = get_store(data_dir)
    if weight <= 0:
        views.print_error("Body weight must be positive")
        raise typer.Exit(1)

    try:
        day = validate_date(on) if on is not None else date.today().isoformat()
        store.add_body_weight(BodyWeight(id=generate_id(), date=day, weight=weight))
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Recorded {weight:g} kg on {day}")


@app.command()
def weight(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show body-weight statistics.
    """
    store = get_store(data_dir)
    try:
        entries = store.load_body_weights()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    stats = weight_stats(entries)

    if json_out:
        data = {
            "stats": asdict(stats) if stats is not None else None,
            "entries": [{"date": e.date, "weight": e.weight} for e in entries],
        }
        print(json.dumps(data, indent=2))
        return

    views.print_weight_stats(stats)


def _entry_day(on: str | None) -> str:
    try:
        return validate_date(on) if on is not None else date.today().isoformat()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command("measure-add")
def measure_add(
    kind: Annotated[str, typer.Argument(help=f"Measurement type: {', '.join(MEASUREMENT_TYPES)}")],
    value: Annotated[float, typer.Argument(help="Circumference in cm")],
    on: Annotated[
        Optional[str],
        typer.Option("--date", help="Measurement date (YYYY-MM-DD, default: today)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Record a body measurement (one per type and day; a second entry replaces the first).
    """
    store = get_store(data_dir)
    if value <= 0:
        views.print_error("Measurement must be positive")
        raise typer.Exit(1)
    day = _entry_day(on)

    try:
        entry = Measurement(id=generate_id(), date=day, type=validate_measurement_type(kind.lower()), value=value)
        store.add_measurement(entry)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Recorded {entry.type} {value:g} cm on {day} ({entry.id[:8]})")


@app.command()
def measures(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the latest value and 30-day change of every measurement type.
    """
    store = get_store(data_dir)
    try:
        entries = store.load_measurements()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    stats = measurement_stats(entries)

    if json_out:
        data = {
            "stats": [asdict(s) for s in stats],
            "entries": [asdict(e) for e in entries],
        }
        print(json.dumps(data, indent=2))
        return

    views.print_measurements(stats)


@app.command("measure-delete")
def measure_delete(
    entry_id: Annotated[str, typer.Argument(help="Measurement ID or unique prefix (see 'measures --json')")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a body measurement.
    """
    store = get_store(data_dir)
    try:
        matches = [e for e in store.load_measurements() if e.id.startswith(entry_id)]
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if len(matches) != 1:
        views.print_error(f"Measurement ID '{entry_id}' matches {len(matches)} entries")
        raise typer.Exit(1)

    store.delete_measurement(matches[0].id)
    views.print_success(f"Deleted {matches[0].type} {matches[0].value:g} cm on {matches[0].date}")


@app.command("wellness-add")
def wellness_add(
    sleep: Annotated[
        int,
        typer.Option("--sleep", min=WELLNESS_MIN, max=WELLNESS_MAX, help="Sleep quality, 1 (poor) to 5 (great)"),
    ] = 3,
    energy: Annotated[
        int,
        typer.Option("--energy", min=WELLNESS_MIN, max=WELLNESS_MAX, help="Energy level, 1 (low) to 5 (high)"),
    ] = 3,
    soreness: Annotated[
        int,
        typer.Option("--soreness", min=WELLNESS_MIN, max=WELLNESS_MAX, help="Muscle soreness, 1 (none) to 5 (very sore)"),
    ] = 3,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Free-text notes"),
    ] = None,
    on: Annotated[
        Optional[str],
        typer.Option("--date", help="Entry date (YYYY-MM-DD, default: today)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Record how you feel today (a second entry for the same day updates the first).
    """
    store = get_store(data_dir)
    day = _entry_day(on)
    entry = Wellness(
        id=generate_id(),
        date=day,
        sleep_quality=sleep,
        energy_level=energy,
        muscle_soreness=soreness,
        notes=notes.strip() if notes and notes.strip() else None,
    )
    try:
        store.add_wellness(entry)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Recorded wellness on {day}: sleep {sleep}, energy {energy}, soreness {soreness}")


@app.command()
def wellness(
    days: Annotated[
        int,
        typer.Option("--days", min=1, help="Days to average, ending today"),
    ] = WELLNESS_AVERAGE_DAYS,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show average sleep, energy and soreness ratings.
    """
    store = get_store(data_dir)
    try:
        entries = store.load_wellness()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    stats = wellness_stats(entries, days=days)

    if json_out:
        data = {
            "stats": asdict(stats) if stats is not None else None,
            "entries": [asdict(e) for e in entries],
        }
        print(json.dumps(data, indent=2))
        return

    views.print_wellness(stats, days)


@app.command("wellness-delete")
def wellness_delete(
    entry_id: Annotated[str, typer.Argument(help="Wellness entry ID or unique prefix (see 'wellness --json')")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a wellness entry.
    """
    store = get_store(data_dir)
    try:
        matches = [e for e in store.load_wellness() if e.id.startswith(entry_id)]
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if len(matches) != 1:
        views.print_error(f"Wellness entry ID '{entry_id}' matches {len(matches)} entries")
        raise typer.Exit(1)

    store.delete_wellness(matches[0].id)
    views.print_success(f"Deleted wellness entry for {matches[0].date}")

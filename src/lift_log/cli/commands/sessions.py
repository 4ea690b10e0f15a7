"""Session commands: init, log, history, delete."""

import json
from dataclasses import replace
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.calendar import day_type_for, filter_window
from ...core.models import WorkoutSet, generate_id
from ...core.session import (
    add_exercise,
    create_workout,
    finish_workout,
    replace_exercise,
)
from ...io.serializers import ValidationError, parse_sets_string, validate_date, workout_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, app, day_program, get_programs, get_store, load_workouts


@app.command()
def init(data_dir: DataDirOption = None) -> None:
    """
    Create the data directory and an empty workout log.
    """
    store = get_store(data_dir)
    if store.exists():
        views.print_info(f"Workout log already exists: {store.workouts_path}")
        return
    store.init()
    views.print_success(f"Initialized workout log at {store.workouts_path}")


@app.command()
def log(
    exercise: Annotated[
        list[str],
        typer.Option("--exercise", "-e", help="Exercise name (repeat once per exercise)"),
    ],
    sets: Annotated[
        list[str],
        typer.Option(
            "--sets",
            "-s",
            help="Sets for the matching --exercise: WEIGHTxREPS[@RIR][/REST], comma-separated",
        ),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Session date (YYYY-MM-DD, default: today)"),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Session name (default: the day's program name)"),
    ] = None,
    duration: Annotated[
        Optional[int],
        typer.Option("--duration", help="Session length in minutes"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="General notes"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a completed workout in one go.

    Example: lift-log log -e "Bench press" -s "80x8@2, 80x8@2" -e Dip -s "0x12, 0x10"
    """
    store = get_store(data_dir)
    load_workouts(store)

    if len(exercise) != len(sets):
        views.print_error("Give one --sets value for every --exercise")
        raise typer.Exit(1)

    try:
        when = validate_date(date) if date is not None else None
        parsed = [parse_sets_string(s) for s in sets]
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    moment = when if when is not None else datetime.now()
    workout = create_workout(day_type_for(moment), when=moment)
    program = day_program(get_programs(store), workout.day_type)
    session_name = name or (program.session_name if program is not None else workout.session_name)
    workout = replace(workout, session_name=session_name, general_notes=notes, duration=duration)

    for exercise_name, entries in zip(exercise, parsed):
        workout = add_exercise(workout, exercise_name, set_count=0)
        added = workout.exercises[-1]
        added_sets = [
            WorkoutSet(
                id=generate_id(),
                set_number=i,
                reps=reps,
                weight=weight,
                rest_time=rest,
                rir=rir,
                completed=True,
            )
            for i, (weight, reps, rir, rest) in enumerate(entries, 1)
        ]
        workout = replace_exercise(workout, replace(added, sets=added_sets))

    workout = finish_workout(workout, completed=True, when=workout.date)
    store.save_workout(workout)

    if json_out:
        print(json.dumps(workout_to_dict(workout), indent=2))
        return

    views.print_success(f"Logged {workout.session_name} on {workout.date[:10]} ({workout.id[:8]})")
    views.print_workout(workout)


@app.command()
def history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show only the most recent N workouts"),
    ] = None,
    months: Annotated[
        int,
        typer.Option("--months", "-m", help="Trailing period in months (0 = all)"),
    ] = 0,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show workout history.
    """
    store = get_store(data_dir)
    workouts = filter_window(load_workouts(store), months)
    if limit is not None and limit > 0:
        workouts = workouts[-limit:]

    if json_out:
        print(json.dumps([workout_to_dict(w) for w in workouts], indent=2))
        return

    views.print_history(workouts)


@app.command()
def delete(
    workout_id: Annotated[str, typer.Argument(help="Workout ID or unique prefix (see 'history')")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a workout by ID.
    """
    store = get_store(data_dir)
    load_workouts(store)

    try:
        workout = store.get_workout(workout_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if workout is None:
        views.print_error(f"No workout with ID '{workout_id}'")
        raise typer.Exit(1)

    if not yes and not views.confirm_action(f"Delete {workout.date[:10]} ({workout.session_name})?"):
        views.print_info("Cancelled.")
        return

    store.delete_workout(workout.id)
    views.print_success(f"Deleted workout {workout.id[:8]}: {workout.date[:10]} ({workout.session_name})")

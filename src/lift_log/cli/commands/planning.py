"""
Planning commands: the session draft, progression suggestions, pyramids,
day programs and the exercise catalog.

A draft is the workout currently being filled in.  It is saved to
``draft.json`` after every edit and becomes a logged workout with
``draft-finish``.  Exercises are addressed by the number shown in
``draft-show`` (or by name) and sets by their set number.
"""

import json
from dataclasses import asdict, replace
from datetime import date
from typing import Annotated, Optional

import typer

from ...core.calendar import day_type_for
from ...core.catalog import load_catalog, search_catalog
from ...core.config import (
    PYRAMID_MAX_REPS_LIMIT,
    PYRAMID_MAX_REST_BETWEEN_ROUNDS,
    PYRAMID_MAX_REST_BETWEEN_SETS,
    PYRAMID_MAX_ROUNDS,
    PYRAMID_MAX_TOTAL_SETS,
)
from ...core.engine.config_loader import Settings
from ...core.models import DAY_TYPES, Exercise, Workout, WorkoutSet, exercise_key
from ...core.progression import apply_suggestion, last_session
from ...core.pyramid import (
    PYRAMID_SCHEMES,
    PyramidConfig,
    apply_pyramid,
    config_for_edit,
    delete_pyramid_group,
    expand_group,
    group_sets_for_display,
    override_rep,
    parse_pattern,
    reconfigure,
    regenerate,
    update_pyramid_group,
)
from ...core.session import (
    SessionDraft,
    add_exercise,
    add_set,
    complete_all_sets,
    copy_weight_to_all,
    create_workout,
    delete_exercise,
    delete_program,
    delete_set,
    finish_workout,
    move_exercise,
    normalize_exercise_order,
    rename_exercise,
    replace_exercise,
    save_as_program,
    set_notes,
    set_rm,
    start_draft,
    step_weight,
    touch_draft,
    update_set,
)
from ...core.superset import assign_superset_group, render_groups, superset_groups_in_use
from ...io.serializers import ValidationError, draft_to_dict, parse_reps_pattern, program_to_dict
from ...io.workout_store import DraftStore
from .. import views
from ..app import (
    DataDirOption,
    JsonOption,
    app,
    day_program,
    get_draft_store,
    get_programs,
    get_settings,
    get_store,
    load_workouts,
)


def _load_draft(data_dir) -> tuple[DraftStore, SessionDraft]:
    drafts = get_draft_store(data_dir)
    try:
        draft = drafts.restore()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if draft is None:
        views.print_error("No session in progress.")
        views.print_info("Run 'lift-log draft-start' to begin one.")
        raise typer.Exit(1)
    return drafts, draft


def _save_draft(drafts: DraftStore, draft: SessionDraft, workout: Workout) -> SessionDraft:
    draft = touch_draft(draft, workout)
    drafts.save(draft)
    return draft


def _display_order(workout: Workout) -> list[Exercise]:
    """Exercises in the order draft-show numbers them."""
    return [e for group in render_groups(workout.exercises) for e in group.exercises]


def _resolve_exercise(workout: Workout, ref: str) -> Exercise:
    ordered = _display_order(workout)
    if ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(ordered):
            return ordered[index]
        views.print_error(f"No exercise #{ref} (the draft has {len(ordered)})")
        raise typer.Exit(1)
    exercise = workout.find_exercise(ref)
    if exercise is None:
        views.print_error(f"No exercise named '{ref}' in the draft")
        raise typer.Exit(1)
    return exercise


def _resolve_set(exercise: Exercise, number: int) -> WorkoutSet:
    for s in exercise.sets:
        if s.set_number == number:
            return s
    views.print_error(f"{exercise.name} has no set {number} (it has {len(exercise.sets)})")
    raise typer.Exit(1)


def _prefill(exercise: Exercise, history: list[Workout], settings: Settings) -> Exercise:
    last = last_session(
        history,
        exercise.name,
        weight_step=settings.weight_step,
        rep_step=settings.rep_step,
        min_rir=settings.min_rir_for_weight,
    )
    return apply_suggestion(exercise, last) if last is not None else exercise


ExerciseArgument = Annotated[
    str,
    typer.Argument(help="Exercise number from draft-show, or its name"),
]


# =============================================================================
# Draft lifecycle
# =============================================================================


@app.command("draft-start")
def draft_start(
    day: Annotated[
        Optional[str],
        typer.Option("--day", help=f"Day program to use: {', '.join(DAY_TYPES)} (default: today)"),
    ] = None,
    program_id: Annotated[
        Optional[str],
        typer.Option("--program", "-p", help="Program ID (see 'programs'); overrides --day"),
    ] = None,
    empty: Annotated[
        bool,
        typer.Option("--empty", help="Start without exercises"),
    ] = False,
    set_count: Annotated[
        Optional[int],
        typer.Option("--sets", "-s", min=0, help="Empty sets per exercise (default from settings)"),
    ] = None,
    prefill: Annotated[
        bool,
        typer.Option("--prefill/--no-prefill", help="Fill sets from the last session plus the suggestion"),
    ] = True,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace a draft that is already in progress"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Start a new session draft from a day program.
    """
    store = get_store(data_dir)
    history = load_workouts(store)
    drafts = get_draft_store(data_dir)
    settings = get_settings()

    if drafts.exists() and not force:
        views.print_error("A session is already in progress.")
        views.print_info("Finish it with 'draft-finish', drop it with 'draft-discard', or pass --force.")
        raise typer.Exit(1)

    programs = get_programs(store)
    if program_id is not None:
        matches = [p for p in programs if p.id.startswith(program_id)]
        if len(matches) != 1:
            views.print_error(f"Program ID '{program_id}' matches {len(matches)} programs")
            raise typer.Exit(1)
        program = matches[0]
        day_type = program.day_type
    else:
        if day is not None and day.lower() not in DAY_TYPES:
            views.print_error(f"Invalid day: {day}. Must be one of {', '.join(DAY_TYPES)}")
            raise typer.Exit(1)
        day_type = day.lower() if day is not None else day_type_for(date.today())
        program = day_program(programs, day_type)

    workout = create_workout(
        day_type,
        program=None if empty else program,
        set_count=set_count if set_count is not None else settings.default_sets,
    )
    if prefill:
        for exercise in workout.exercises:
            workout = replace_exercise(workout, _prefill(exercise, history, settings))

    drafts.save(start_draft(workout))
    views.print_success(f"Started {workout.session_name}")
    views.print_workout(workout)


@app.command("draft-show")
def draft_show(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the session in progress.
    """
    _, draft = _load_draft(data_dir)
    if json_out:
        print(json.dumps(draft_to_dict(draft), indent=2))
        return
    views.print_workout(draft.workout)
    views.console.print(f"[dim]Last edited {draft.updated_at}[/dim]")


@app.command("draft-finish")
def draft_finish(
    incomplete: Annotated[
        bool,
        typer.Option("--incomplete", help="Save without marking the session completed"),
    ] = False,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="General notes for the session"),
    ] = None,
    duration: Annotated[
        Optional[int],
        typer.Option("--duration", min=0, help="Session length in minutes"),
    ] = None,
    save_program: Annotated[
        bool,
        typer.Option("--save-program", help="Store this exercise list as the day's program"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Save the draft to the workout log and clear it.
    """
    store = get_store(data_dir)
    load_workouts(store)
    drafts, draft = _load_draft(data_dir)

    workout = draft.workout
    if notes is not None:
        workout = replace(workout, general_notes=notes or None)
    if duration is not None:
        workout = replace(workout, duration=duration)
    workout = finish_workout(normalize_exercise_order(workout), completed=not incomplete)

    store.save_workout(workout)
    drafts.discard()

    if save_program:
        programs = get_programs(store)
        selected = day_program(programs, workout.day_type)
        custom = [p for p in programs if p.is_custom]
        store.save_custom_programs(save_as_program(workout, custom, selected))
        views.print_info(f"Saved exercise list as the {workout.day_type} program")

    status = "completed" if workout.completed else "saved (not completed)"
    views.print_success(f"{workout.session_name} {status} ({workout.id[:8]})")


@app.command("draft-discard")
def draft_discard(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Throw away the session in progress.
    """
    drafts = get_draft_store(data_dir)
    if not drafts.exists():
        views.print_info("No session in progress.")
        return
    if not yes and not views.confirm_action("Discard the session in progress?"):
        views.print_info("Cancelled.")
        return
    drafts.discard()
    views.print_success("Draft discarded.")


# =============================================================================
# Draft editing
# =============================================================================


@app.command("draft-add")
def draft_add(
    name: Annotated[str, typer.Argument(help="Exercise name")],
    set_count: Annotated[
        Optional[int],
        typer.Option("--sets", "-s", min=0, help="Empty sets to create (default from settings)"),
    ] = None,
    prefill: Annotated[
        bool,
        typer.Option("--prefill/--no-prefill", help="Fill sets from the last session plus the suggestion"),
    ] = True,
    data_dir: DataDirOption = None,
) -> None:
    """
    Add an exercise to the end of the draft.
    """
    store = get_store(data_dir)
    history = load_workouts(store)
    drafts, draft = _load_draft(data_dir)
    settings = get_settings()

    if not name.strip():
        views.print_error("Exercise name cannot be empty")
        raise typer.Exit(1)

    workout = add_exercise(
        draft.workout,
        name,
        set_count=set_count if set_count is not None else settings.default_sets,
    )
    if prefill:
        workout = replace_exercise(workout, _prefill(workout.exercises[-1], history, settings))

    _save_draft(drafts, draft, workout)
    views.print_workout(workout)


@app.command("draft-edit")
def draft_edit(
    exercise_ref: ExerciseArgument,
    rename: Annotated[
        Optional[str],
        typer.Option("--rename", help="New name (earlier sessions keep the old one)"),
    ] = None,
    rm: Annotated[
        Optional[float],
        typer.Option("--rm", min=0, help="Known rep max in kg (0 clears it)"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Exercise notes (empty string clears them)"),
    ] = None,
    up: Annotated[
        bool,
        typer.Option("--up", help="Move one place up"),
    ] = False,
    down: Annotated[
        bool,
        typer.Option("--down", help="Move one place down"),
    ] = False,
    remove: Annotated[
        bool,
        typer.Option("--remove", help="Remove the exercise from the draft"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Rename, reorder, annotate or remove a draft exercise.
    """
    drafts, draft = _load_draft(data_dir)
    workout = draft.workout
    exercise = _resolve_exercise(workout, exercise_ref)

    if remove:
        workout = normalize_exercise_order(delete_exercise(workout, exercise.id))
        _save_draft(drafts, draft, workout)
        views.print_success(f"Removed {exercise.name}")
        return

    if rename is not None:
        workout = rename_exercise(workout, exercise.id, rename)
    if rm is not None:
        workout = set_rm(workout, exercise.id, rm or None)
    if notes is not None:
        workout = set_notes(workout, exercise.id, notes)
    if up or down:
        workout = move_exercise(workout, exercise.id, -1 if up else 1)

    _save_draft(drafts, draft, workout)
    views.print_workout(workout)


@app.command("draft-set")
def draft_set(
    exercise_ref: ExerciseArgument,
    set_number: Annotated[
        Optional[int],
        typer.Argument(help="Set number (omit with --add or --all-done)"),
    ] = None,
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", "-r", help="Reps performed"),
    ] = None,
    weight: Annotated[
        Optional[float],
        typer.Option("--weight", "-w", help="Load in kg"),
    ] = None,
    rest: Annotated[
        Optional[int],
        typer.Option("--rest", help="Rest after the set in seconds"),
    ] = None,
    rir: Annotated[
        Optional[int],
        typer.Option("--rir", help="Reps in reserve (0-10)"),
    ] = None,
    done: Annotated[
        Optional[bool],
        typer.Option("--done/--undone", help="Mark the set completed or not"),
    ] = None,
    inc: Annotated[
        bool,
        typer.Option("--inc", help="Add one weight increment"),
    ] = False,
    dec: Annotated[
        bool,
        typer.Option("--dec", help="Remove one weight increment"),
    ] = False,
    copy_weight: Annotated[
        bool,
        typer.Option("--copy-weight", help="Copy this set's weight to every set"),
    ] = False,
    add: Annotated[
        bool,
        typer.Option("--add", help="Append an empty set"),
    ] = False,
    remove: Annotated[
        bool,
        typer.Option("--remove", help="Delete the set"),
    ] = False,
    all_done: Annotated[
        bool,
        typer.Option("--all-done", help="Mark every set of the exercise completed"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Edit the sets of a draft exercise.

    Examples:
      lift-log draft-set 1 2 -w 80 -r 8 --rir 2 --done
      lift-log draft-set "Bench press" --add
    """
    drafts, draft = _load_draft(data_dir)
    settings = get_settings()
    exercise = _resolve_exercise(draft.workout, exercise_ref)

    if add:
        exercise = add_set(exercise)
    elif all_done:
        exercise = complete_all_sets(exercise)
    else:
        if set_number is None:
            views.print_error("Give a set number (or use --add / --all-done)")
            raise typer.Exit(1)
        target = _resolve_set(exercise, set_number)
        if remove:
            exercise = delete_set(exercise, target.id)
        else:
            changes: dict = {"reps": reps, "weight": weight, "completed": done}
            if rest is not None:
                changes["rest_time"] = rest
            if rir is not None:
                changes["rir"] = rir
            exercise = update_set(exercise, target.id, **changes)
            if inc or dec:
                delta = settings.weight_increment if inc else -settings.weight_increment
                exercise = step_weight(exercise, target.id, delta)
            if copy_weight:
                exercise = copy_weight_to_all(exercise, target.id)

    workout = replace_exercise(draft.workout, exercise)
    _save_draft(drafts, draft, workout)
    views.console.print(views.format_exercise_table(exercise, _display_order(workout).index(exercise) + 1))


@app.command("draft-suggest")
def draft_suggest(
    exercise_ref: ExerciseArgument,
    data_dir: DataDirOption = None,
) -> None:
    """
    Fill a draft exercise's blank sets from its last session plus the suggestion.
    """
    store = get_store(data_dir)
    history = load_workouts(store)
    drafts, draft = _load_draft(data_dir)
    settings = get_settings()
    exercise = _resolve_exercise(draft.workout, exercise_ref)

    last = last_session(
        history,
        exercise.name,
        weight_step=settings.weight_step,
        rep_step=settings.rep_step,
        min_rir=settings.min_rir_for_weight,
    )
    views.print_last_session(exercise.name, last)
    if last is None:
        return

    workout = replace_exercise(draft.workout, apply_suggestion(exercise, last))
    _save_draft(drafts, draft, workout)
    views.print_success(f"Applied '{last.suggestion.label}' to the blank sets of {exercise.name}")


@app.command("draft-superset")
def draft_superset(
    exercise_ref: ExerciseArgument,
    group: Annotated[
        int,
        typer.Argument(help="Superset number (0 removes the exercise from its superset)"),
    ],
    data_dir: DataDirOption = None,
) -> None:
    """
    Put a draft exercise into a superset.
    """
    drafts, draft = _load_draft(data_dir)
    exercise = _resolve_exercise(draft.workout, exercise_ref)
    workout = assign_superset_group(draft.workout, exercise.id, group)
    _save_draft(drafts, draft, workout)

    in_use = superset_groups_in_use(workout)
    views.print_info(f"Supersets in use: {', '.join(map(str, in_use)) if in_use else 'none'}")
    views.print_workout(workout)


# =============================================================================
# Pyramids
# =============================================================================


def _parse_overrides(overrides: list[str] | None) -> list[tuple[int, int]]:
    """Parse "SET=REPS" overrides (1-based set positions)."""
    parsed = []
    for item in overrides or []:
        index, sep, value = item.partition("=")
        if not sep or not index.strip().isdigit() or not value.strip().isdigit():
            raise ValidationError(f"Invalid override '{item}'. Use SET=REPS, e.g. 4=12")
        parsed.append((int(index) - 1, int(value)))
    return parsed


def _build_reps(
    base: PyramidConfig,
    base_reps: list[int],
    pattern: str | None,
    overrides: list[str] | None,
    **changes,
) -> tuple[PyramidConfig, list[int]]:
    changes = {k: v for k, v in changes.items() if v is not None}
    config, reps = reconfigure(base, base_reps, **changes)
    if pattern is not None:
        reps = parse_reps_pattern(pattern)
    for index, value in _parse_overrides(overrides):
        reps = override_rep(reps, index, value)
    return config, reps


SchemeOption = Annotated[
    Optional[str],
    typer.Option("--scheme", help=f"Pyramid scheme: {', '.join(PYRAMID_SCHEMES)}"),
]
MaxRepsOption = Annotated[
    Optional[int],
    typer.Option("--max-reps", "-m", min=1, max=PYRAMID_MAX_REPS_LIMIT, help="Reps at the peak"),
]
TotalSetsOption = Annotated[
    Optional[int],
    typer.Option("--sets", "-s", min=1, max=PYRAMID_MAX_TOTAL_SETS, help="Sets per round"),
]
RoundsOption = Annotated[
    Optional[int],
    typer.Option("--rounds", min=1, max=PYRAMID_MAX_ROUNDS, help="Number of rounds"),
]
RestSetsOption = Annotated[
    Optional[int],
    typer.Option("--rest-sets", min=0, max=PYRAMID_MAX_REST_BETWEEN_SETS, help="Rest between sets (s)"),
]
RestRoundsOption = Annotated[
    Optional[int],
    typer.Option("--rest-rounds", min=0, max=PYRAMID_MAX_REST_BETWEEN_ROUNDS, help="Rest between rounds (s)"),
]
PatternOption = Annotated[
    Optional[str],
    typer.Option("--pattern", help="Explicit rep pattern, e.g. 3-5-8-10-8-5-3"),
]
OverrideOption = Annotated[
    Optional[list[str]],
    typer.Option("--override", "-o", help="Set one entry manually: SET=REPS (repeatable)"),
]


@app.command()
def pyramid(
    scheme: SchemeOption = None,
    max_reps: MaxRepsOption = None,
    total_sets: TotalSetsOption = None,
    rounds: RoundsOption = None,
    rest_sets: RestSetsOption = None,
    rest_rounds: RestRoundsOption = None,
    pattern: PatternOption = None,
    override: OverrideOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Preview a pyramid rep pattern without touching the draft.
    """
    settings = get_settings()
    base = PyramidConfig(
        rest_between_sets=settings.pyramid_rest_between_sets,
        rest_between_rounds=settings.pyramid_rest_between_rounds,
    )
    try:
        config, reps = _build_reps(
            base,
            regenerate(base),
            pattern,
            override,
            scheme=scheme,
            max_reps=max_reps,
            total_sets=total_sets,
            rounds=rounds,
            rest_between_sets=rest_sets,
            rest_between_rounds=rest_rounds,
        )
    except (ValidationError, ValueError, IndexError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({"scheme": config.scheme, "reps": reps, "rounds": config.rounds}, indent=2))
        return
    views.print_pyramid(reps, config.rounds, config.rest_between_sets, config.rest_between_rounds)


@app.command("draft-pyramid")
def draft_pyramid(
    exercise_ref: ExerciseArgument,
    scheme: SchemeOption = None,
    max_reps: MaxRepsOption = None,
    total_sets: TotalSetsOption = None,
    rounds: RoundsOption = None,
    rest_sets: RestSetsOption = None,
    rest_rounds: RestRoundsOption = None,
    pattern: PatternOption = None,
    override: OverrideOption = None,
    group: Annotated[
        Optional[int],
        typer.Option("--group", "-g", min=1, help="Edit pyramid group N of the exercise instead of adding one"),
    ] = None,
    remove: Annotated[
        bool,
        typer.Option("--remove", help="Delete the group given with --group"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Add a pyramid to a draft exercise, or edit or remove an existing one.

    A new pyramid replaces the exercise's untouched empty sets.  Editing a
    group keeps each set's weight, RIR and completion where it survives.
    """
    drafts, draft = _load_draft(data_dir)
    settings = get_settings()
    exercise = _resolve_exercise(draft.workout, exercise_ref)

    try:
        if group is None:
            if remove:
                raise ValidationError("--remove needs --group")
            base = PyramidConfig(
                rest_between_sets=settings.pyramid_rest_between_sets,
                rest_between_rounds=settings.pyramid_rest_between_rounds,
            )
            config, reps = _build_reps(
                base, regenerate(base), pattern, override,
                scheme=scheme, max_reps=max_reps, total_sets=total_sets, rounds=rounds,
                rest_between_sets=rest_sets, rest_between_rounds=rest_rounds,
            )
            exercise = apply_pyramid(
                exercise, reps, config.rounds, config.rest_between_sets, config.rest_between_rounds
            )
        else:
            groups = [g for g in group_sets_for_display(exercise.sets) if g.is_pyramid]
            if group > len(groups):
                raise ValidationError(f"{exercise.name} has {len(groups)} pyramid group(s)")
            target = groups[group - 1]
            if remove:
                exercise = delete_pyramid_group(exercise, target.pyramid_ids)
            else:
                current = parse_pattern(target.reps_pattern)
                rounds_sets = expand_group(target)[0][1]
                base = replace(
                    config_for_edit(current),
                    rest_between_sets=(
                        rounds_sets[0].rest_time
                        if rounds_sets[0].rest_time is not None
                        else settings.pyramid_rest_between_sets
                    ),
                    rest_between_rounds=settings.pyramid_rest_between_rounds,
                )
                config, reps = _build_reps(
                    base, current, pattern, override,
                    scheme=scheme, max_reps=max_reps, total_sets=total_sets,
                    rest_between_sets=rest_sets, rest_between_rounds=rest_rounds,
                )
                exercise = update_pyramid_group(
                    exercise, target.pyramid_ids, reps,
                    config.rest_between_sets, config.rest_between_rounds,
                )
    except (ValidationError, ValueError, IndexError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    workout = replace_exercise(draft.workout, exercise)
    _save_draft(drafts, draft, workout)
    views.console.print(views.format_exercise_table(exercise, _display_order(workout).index(exercise) + 1))


# =============================================================================
# Suggestions and programs
# =============================================================================


@app.command()
def suggest(
    name: Annotated[str, typer.Argument(help="Exercise name")],
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the last session of an exercise and the suggested progression.
    """
    store = get_store(data_dir)
    history = load_workouts(store)
    settings = get_settings()

    last = last_session(
        history,
        name,
        weight_step=settings.weight_step,
        rep_step=settings.rep_step,
        min_rir=settings.min_rir_for_weight,
    )

    if json_out:
        data = None
        if last is not None:
            data = {
                "suggestion": {
                    "type": last.suggestion.type,
                    "value": last.suggestion.value,
                    "label": last.suggestion.label,
                },
                "last_sets": [
                    {"set_number": s.set_number, "weight": s.weight, "reps": s.reps,
                     "rir": s.rir, "completed": s.completed}
                    for s in last.last_sets
                ],
            }
        print(json.dumps(data, indent=2))
        return

    views.print_last_session(name, last)


@app.command()
def programs(
    day: Annotated[
        Optional[str],
        typer.Option("--day", help="Only show programs for this weekday"),
    ] = None,
    delete: Annotated[
        Optional[str],
        typer.Option("--delete", help="Delete a custom program by ID"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List day programs, or delete a custom one.
    """
    store = get_store(data_dir)
    all_programs = get_programs(store)

    if delete is not None:
        custom = [p for p in all_programs if p.is_custom]
        matches = [p for p in custom if p.id.startswith(delete)]
        if len(matches) != 1:
            views.print_error(f"No single custom program matches '{delete}' (default programs cannot be deleted)")
            raise typer.Exit(1)
        store.save_custom_programs(delete_program(custom, matches[0].id))
        views.print_success(f"Deleted program {matches[0].session_name}")
        return

    if day is not None:
        all_programs = [p for p in all_programs if p.day_type == day.lower()]

    if json_out:
        print(json.dumps([program_to_dict(p) for p in all_programs], indent=2))
        return
    views.print_programs(all_programs)


@app.command()
def catalog(
    query: Annotated[
        Optional[str],
        typer.Argument(help="Filter by name, muscle group or equipment"),
    ] = None,
    favorites_only: Annotated[
        bool,
        typer.Option("--favorites", "-f", help="Only show favourite exercises"),
    ] = False,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List catalogued exercises (bundled list plus ~/.lift-log/exercises.yaml).
    """
    try:
        favorites = {exercise_key(n) for n in get_store(data_dir).load_favorites()}
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    entries = load_catalog()
    if query:
        entries = search_catalog(entries, query)
    if favorites_only:
        entries = [e for e in entries if exercise_key(e.name) in favorites]

    if json_out:
        print(json.dumps([{**asdict(e), "favorite": exercise_key(e.name) in favorites} for e in entries], indent=2))
        return
    views.print_catalog(entries, favorites)


@app.command()
def favorite(
    name: Annotated[str, typer.Argument(help="Exercise name (matched case-insensitively)")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Mark an exercise as favourite, or unmark it if it already is one.
    """
    if not name.strip():
        views.print_error("Exercise name cannot be empty")
        raise typer.Exit(1)
    try:
        added = get_store(data_dir).toggle_favorite(name)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if added:
        views.print_success(f"Added {name.strip()} to favourites")
    else:
        views.print_info(f"Removed {name.strip()} from favourites")

"""Analysis commands: volume, deload, streak, calendar, compare, records, 1rm, strength, summary."""

import json
from dataclasses import asdict
from datetime import date
from typing import Annotated, Optional

import typer

from ...core.analytics import (
    average_weekly_volume,
    calendar_heatmap,
    compare_sessions,
    deload_status,
    monthly_activity,
    muscle_frequency,
    recent_progress,
    session_names,
    sessions_named,
    streak_stats,
    training_summary,
    week_comparison,
    weekly_volume,
)
from ...core.calendar import date_key, round_to_increment
from ...core.catalog import category_map, load_catalog
from ...core.config import PERIOD_OPTIONS
from ...core.onerm import (
    ZONE_LABELS,
    classify_zone,
    estimate_1rm,
    percent_of_rm,
    percentage_table,
    personal_records,
    strength_curve,
)
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, JsonOption, app, get_settings, get_store, load_workouts

MonthsOption = Annotated[
    Optional[int],
    typer.Option(
        "--months",
        "-m",
        help=f"Trailing period in months, one of {', '.join(map(str, PERIOD_OPTIONS))} (0 = all)",
    ),
]


def _period(months: int | None) -> int:
    """Resolve --months against the configured default and allowed values."""
    if months is None:
        return get_settings().default_period_months
    if months not in PERIOD_OPTIONS:
        views.print_error(f"Unsupported period: {months}. Choose one of {', '.join(map(str, PERIOD_OPTIONS))}")
        raise typer.Exit(1)
    return months


@app.command()
def volume(
    months: MonthsOption = None,
    width: Annotated[
        int,
        typer.Option("--width", help="Maximum bar width"),
    ] = 40,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show completed training volume per ISO week.
    """
    workouts = load_workouts(get_store(data_dir))
    weeks = weekly_volume(workouts, _period(months))
    average = average_weekly_volume(weeks)

    if json_out:
        data = {
            "weeks": [{"week": w.key, "volume": w.volume} for w in weeks],
            "average": average,
        }
        print(json.dumps(data, indent=2))
        return

    views.print_volume_chart(weeks, average, width)


@app.command()
def deload(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Check whether a deload week is due.
    """
    workouts = load_workouts(get_store(data_dir))
    settings = get_settings()
    status = deload_status(
        workouts,
        window_weeks=settings.deload_window_weeks,
        week_ratio=settings.deload_week_ratio,
    )

    if json_out:
        data = {
            "due": status.due,
            "mean_volume": round(status.mean_volume, 1),
            "consecutive_weeks": status.consecutive_weeks,
            "recent_weeks": [{"week": w.key, "volume": w.volume} for w in status.recent_weeks],
        }
        print(json.dumps(data, indent=2))
        return

    views.print_deload(status)


@app.command()
def streak(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show current and best training-day streaks.
    """
    workouts = load_workouts(get_store(data_dir))
    stats = streak_stats(workouts, lookback_days=get_settings().streak_lookback_days)

    if json_out:
        print(json.dumps(asdict(stats), indent=2))
        return

    views.print_streak(stats)


@app.command()
def calendar(
    days: Annotated[
        Optional[int],
        typer.Option("--days", min=7, help="Days to show, ending today (default from settings)"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show a training calendar heatmap of daily volume.
    """
    workouts = load_workouts(get_store(data_dir))
    heatmap = calendar_heatmap(workouts, days=days if days is not None else get_settings().calendar_days)

    if json_out:
        data = {
            "low_threshold": heatmap.low_threshold,
            "high_threshold": heatmap.high_threshold,
            "training_days": heatmap.training_days,
            "best_streak": heatmap.best_streak,
            "days": [asdict(c) for c in heatmap.cells if c.volume > 0],
        }
        print(json.dumps(data, indent=2))
        return

    views.print_heatmap(heatmap)


@app.command()
def compare(
    first: Annotated[
        Optional[str],
        typer.Argument(help="Earlier workout ID (or prefix)"),
    ] = None,
    second: Annotated[
        Optional[str],
        typer.Argument(help="Later workout ID (or prefix)"),
    ] = None,
    session: Annotated[
        Optional[str],
        typer.Option("--session", "-s", help="Compare the two latest completed sessions with this name"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Compare two sessions exercise by exercise.

    Either give two workout IDs or --session NAME.  Without arguments the
    session names available for comparison are listed.
    """
    store = get_store(data_dir)
    workouts = load_workouts(store)

    if session is not None:
        candidates = sessions_named(workouts, session)
        if len(candidates) < 2:
            views.print_error(f"Need two completed '{session}' sessions, found {len(candidates)}")
            raise typer.Exit(1)
        a, b = candidates[1], candidates[0]
    elif first is not None and second is not None:
        try:
            a, b = store.get_workout(first), store.get_workout(second)
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        if a is None or b is None:
            views.print_error(f"Workout not found: {first if a is None else second}")
            raise typer.Exit(1)
    else:
        names = session_names(w for w in workouts if w.completed)
        if not names:
            views.print_info("No completed sessions yet.")
            return
        views.print_info("Sessions: " + ", ".join(names))
        views.print_info("Run 'lift-log compare --session NAME' or pass two workout IDs.")
        return

    comparison = compare_sessions(a, b)

    if json_out:
        data = {
            "a": a.id,
            "b": b.id,
            "exercises": [
                {
                    "name": row.name,
                    "a": asdict(row.a),
                    "b": asdict(row.b),
                    "weight_diff": row.weight_diff,
                    "reps_diff": row.reps_diff,
                    "volume_diff": row.volume_diff,
                }
                for row in comparison.exercises
            ],
            "total_volume_a": comparison.total_volume_a,
            "total_volume_b": comparison.total_volume_b,
            "volume_delta": comparison.volume_delta,
        }
        print(json.dumps(data, indent=2))
        return

    views.print_comparison(
        comparison,
        f"{a.session_name} {date_key(a.date)}",
        f"{b.session_name} {date_key(b.date)}",
    )


@app.command()
def records(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show personal records per exercise.
    """
    workouts = load_workouts(get_store(data_dir))
    prs = personal_records(workouts)

    if json_out:
        print(json.dumps([asdict(r) for r in prs], indent=2))
        return

    views.print_records(prs)


@app.command("1rm")
def one_rep_max(
    weight: Annotated[float, typer.Argument(help="Load lifted in kg")],
    reps: Annotated[int, typer.Argument(help="Reps performed with that load")] = 1,
    json_out: JsonOption = False,
) -> None:
    """
    Estimate a one-rep max (Epley) and show training loads by percentage.

    With reps = 1 the weight is taken as the known 1RM.
    """
    if weight < 0 or reps < 0:
        views.print_error("Weight and reps must be non-negative")
        raise typer.Exit(1)

    rm = estimate_1rm(weight, reps)
    rows = percentage_table(rm)
    increment = get_settings().weight_increment

    if json_out:
        data = {
            "weight": weight,
            "reps": reps,
            "estimated_1rm": rm,
            "table": [
                {
                    "percent": row.percent,
                    "load": row.load,
                    "plate_load": round_to_increment(row.load, increment),
                    "zone": row.zone,
                }
                for row in rows
            ],
        }
        print(json.dumps(data, indent=2))
        return

    if rm <= 0:
        views.print_warning("Nothing to estimate from an empty set.")
        return

    views.console.print(f"Estimated 1RM: [bold]{rm:g} kg[/bold]")
    if reps > 1:
        percent = percent_of_rm(weight, rm)
        zone = classify_zone(percent)
        zone_label = ZONE_LABELS[zone] if zone is not None else "below 60%"
        views.console.print(f"[dim]{weight:g} kg × {reps} is {percent}% of it ({zone_label})[/dim]")
    views.print_percentage_table(rm, rows)


@app.command()
def strength(
    names: Annotated[list[str], typer.Argument(help="Exercise names to chart")],
    months: MonthsOption = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the estimated 1RM of exercises session by session.
    """
    workouts = load_workouts(get_store(data_dir))
    points = strength_curve(workouts, names, _period(months))

    if json_out:
        print(json.dumps([asdict(p) for p in points], indent=2))
        return

    views.print_strength_curve(points, names)


@app.command()
def summary(
    months: MonthsOption = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Overview of the whole log.

    Totals, this week against last, recent progress, muscle-group
    frequency over the period and completed sessions per calendar month.
    """
    workouts = load_workouts(get_store(data_dir))
    period = _period(months)

    totals = training_summary(workouts)
    week = week_comparison(workouts, date.today())
    progress = recent_progress(workouts)
    frequency = muscle_frequency(workouts, category_map(load_catalog()), period)
    monthly = monthly_activity(workouts, date.today())

    if json_out:
        data = {
            "summary": asdict(totals),
            "week": asdict(week),
            "recent_progress": [
                {"name": n, "previous": prev, "current": cur} for n, prev, cur in progress
            ],
            "muscle_frequency": dict(frequency),
            "monthly_activity": [asdict(m) for m in monthly],
        }
        print(json.dumps(data, indent=2))
        return

    views.print_summary(totals, week, progress, frequency, monthly)

"""
Rich-based views for CLI output.

Formats workouts, drafts, analytics and goals as tables and text blocks.
"""

from typing import Collection, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.analytics import workout_volume
from ..core.ascii_plot import create_heatmap, create_simple_bar_chart, create_weekly_volume_chart
from ..core.calendar import date_key
from ..core.catalog import CatalogEntry
from ..core.config import DELOAD_VOLUME_REDUCTION
from ..core.models import (
    CalendarHeatmap,
    DayProgram,
    DeloadStatus,
    Exercise,
    GoalProgress,
    LastSessionResult,
    MeasurementStats,
    MonthlyActivity,
    PersonalRecord,
    SessionComparison,
    StreakStats,
    TrainingSummary,
    WeekComparison,
    WeeklyVolume,
    WeightStats,
    WellnessStats,
    Workout,
    WorkoutSet,
    exercise_key,
)
from ..core.onerm import (
    ZONE_LABELS,
    CurvePoint,
    PercentageRow,
    classify_zone,
    percent_of_rm,
)
from ..core.pyramid import group_sets_for_display, total_reps
from ..core.superset import render_groups

console = Console()


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


def _fmt_delta(value: float, suffix: str = "") -> str:
    if value > 0:
        return f"[green]+{value:g}{suffix}[/green]"
    if value < 0:
        return f"[red]{value:g}{suffix}[/red]"
    return f"0{suffix}"


# =============================================================================
# Workouts and drafts
# =============================================================================


def format_history_table(workouts: Sequence[Workout]) -> Table:
    """
    Create a Rich table displaying workout history.

    Args:
        workouts: Workouts to display, in display order

    Returns:
        Rich Table object
    """
    table = Table(title="Training History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Day", style="magenta")
    table.add_column("Session")
    table.add_column("Exercises", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Volume(kg)", justify="right", style="bold")
    table.add_column("Done", justify="center")
    table.add_column("ID", style="dim")

    for i, workout in enumerate(workouts, 1):
        done_sets = sum(len(e.completed_sets) for e in workout.exercises)
        all_sets = sum(len(e.sets) for e in workout.exercises)
        table.add_row(
            str(i),
            date_key(workout.date),
            workout.day_type,
            workout.session_name,
            str(len(workout.exercises)),
            f"{done_sets}/{all_sets}",
            f"{workout_volume(workout):,.0f}",
            "✓" if workout.completed else "-",
            workout.id[:8],
        )

    return table


def print_history(workouts: Sequence[Workout]) -> None:
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_history_table(workouts))


def _set_row(s: WorkoutSet, rm: float | None, round_label: str = "") -> list[str]:
    percent = percent_of_rm(s.weight, rm) if s.weight > 0 else None
    zone = classify_zone(percent)
    return [
        str(s.set_number),
        round_label,
        _fmt_weight(s.weight),
        str(s.reps),
        str(s.rir) if s.rir is not None else "-",
        f"{s.rest_time}s" if s.rest_time is not None else "-",
        f"{percent}%" if percent is not None else "-",
        ZONE_LABELS[zone] if zone is not None else "",
        "✓" if s.completed else "",
    ]


def format_exercise_table(exercise: Exercise, position: int) -> Table:
    """
    Table of one exercise's sets, pyramid rounds collapsed into groups.

    Args:
        exercise: Exercise to display
        position: 1-based position shown in the title

    Returns:
        Rich Table object
    """
    title = f"{position}. {exercise.name}"
    if exercise.rm:
        title += f"  (RM {_fmt_weight(exercise.rm)} kg)"
    table = Table(title=title, title_justify="left", show_edge=False)

    table.add_column("Set", justify="right", style="dim")
    table.add_column("Pyramid", style="magenta")
    table.add_column("kg", justify="right")
    table.add_column("Reps", justify="right", style="bold")
    table.add_column("RIR", justify="right")
    table.add_column("Rest", justify="right")
    table.add_column("%RM", justify="right")
    table.add_column("Zone", style="cyan")
    table.add_column("Done", justify="center")

    for g, group in enumerate(group_sets_for_display(exercise.sets), 1):
        label = ""
        if group.is_pyramid:
            label = f"G{g} {group.reps_pattern}"
            if group.round_count > 1:
                label += f" ×{group.round_count}"
        for i, s in enumerate(group.sets):
            table.add_row(*_set_row(s, exercise.rm, label if i == 0 else ""))

    return table


def print_workout(workout: Workout) -> None:
    """
    Print a workout or draft with supersets and pyramid groups.

    Exercises are numbered by display order; those numbers are what the
    draft commands accept.
    """
    console.print()
    console.print(
        f"[bold cyan]{workout.session_name}[/bold cyan]  "
        f"[dim]{date_key(workout.date)} ({workout.day_type})[/dim]"
    )
    if not workout.exercises:
        console.print("[yellow]No exercises yet.[/yellow]")
        return

    position = 0
    for group in render_groups(workout.exercises):
        if group.superset_group is not None:
            console.print(f"\n[bold magenta]Superset {group.superset_group}[/bold magenta]")
        for exercise in group.exercises:
            position += 1
            console.print(format_exercise_table(exercise, position))
            if exercise.notes:
                console.print(f"  [dim]Notes: {exercise.notes}[/dim]")

    console.print()
    console.print(f"Volume so far: [bold]{workout_volume(workout):,.0f} kg[/bold]")
    if workout.general_notes:
        console.print(f"[dim]{workout.general_notes}[/dim]")


def print_last_session(name: str, last: LastSessionResult | None) -> None:
    """Print the previous sets of an exercise and the suggested progression."""
    if last is None:
        console.print(f"[yellow]No completed session with '{name}' yet.[/yellow]")
        return

    table = Table(title=f"Last session: {name}", title_justify="left")
    table.add_column("Set", justify="right", style="dim")
    table.add_column("kg", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("RIR", justify="right")
    table.add_column("Done", justify="center")
    for s in last.last_sets:
        table.add_row(
            str(s.set_number),
            _fmt_weight(s.weight),
            str(s.reps),
            str(s.rir) if s.rir is not None else "-",
            "✓" if s.completed else "",
        )
    console.print(table)
    console.print(f"Suggestion: [bold green]{last.suggestion.label}[/bold green]")


def print_pyramid(reps: Sequence[int], rounds: int, rest_between_sets: int, rest_between_rounds: int) -> None:
    pattern = "-".join(str(r) for r in reps)
    console.print(f"Pattern: [bold]{pattern}[/bold]")
    console.print(
        f"Rounds: {rounds}   Total reps: {total_reps(reps, rounds)}   "
        f"Rest: {rest_between_sets}s between sets, {rest_between_rounds}s between rounds"
    )


def print_programs(programs: Sequence[DayProgram]) -> None:
    table = Table(title="Day Programs")
    table.add_column("ID", style="dim")
    table.add_column("Day", style="magenta")
    table.add_column("Session", style="cyan")
    table.add_column("Exercises")
    table.add_column("Custom", justify="center")
    for p in programs:
        table.add_row(p.id[:12], p.day_type, p.session_name, ", ".join(p.exercises), "✓" if p.is_custom else "")
    console.print(table)


def print_catalog(entries: Sequence[CatalogEntry], favorites: Collection[str] = ()) -> None:
    """Catalog table; exercises whose key is in ``favorites`` get a star."""
    if not entries:
        console.print("[yellow]No matching exercises.[/yellow]")
        return
    table = Table(title="Exercise Catalog")
    table.add_column("Exercise", style="cyan")
    table.add_column("Muscle group", style="magenta")
    table.add_column("Equipment")
    for e in entries:
        star = " [yellow]★[/yellow]" if exercise_key(e.name) in favorites else ""
        table.add_row(escape(e.name) + star, e.category, e.equipment)
    console.print(table)


# =============================================================================
# Analytics
# =============================================================================


def print_volume_chart(weeks: Sequence[WeeklyVolume], average: int, width: int = 40) -> None:
    console.print(create_weekly_volume_chart(weeks, width))
    if weeks:
        console.print()
        console.print(f"Average weekly volume: [bold]{average:,} kg[/bold]")


def print_deload(status: DeloadStatus) -> None:
    if status.due:
        console.print("[bold yellow]Deload recommended[/bold yellow]")
        console.print(
            f"Volume has stayed near {status.mean_volume:,.0f} kg/week "
            f"for the last {len(status.recent_weeks)} weeks without a lighter week."
        )
        console.print(f"Plan a lighter week at about {status.mean_volume * (1 - DELOAD_VOLUME_REDUCTION):,.0f} kg.")
    else:
        console.print("[green]No deload needed yet.[/green]")
    console.print(f"Consecutive training weeks: {status.consecutive_weeks}")
    for w in status.recent_weeks:
        console.print(f"  {w.label}: {w.volume:,.0f} kg")


def print_streak(stats: StreakStats) -> None:
    console.print(f"Current streak: [bold]{stats.current}[/bold] days")
    console.print(f"Best streak:    [bold]{stats.best}[/bold] days")
    console.print(f"Training days:  {stats.training_days}")


def print_heatmap(heatmap: CalendarHeatmap) -> None:
    console.print(create_heatmap(heatmap))
    console.print()
    console.print(f"Training days: {heatmap.training_days}   Best streak: {heatmap.best_streak}")


def print_comparison(comparison: SessionComparison, label_a: str, label_b: str) -> None:
    table = Table(title=f"{label_a}  →  {label_b}")
    table.add_column("Exercise", style="cyan")
    table.add_column("Max kg", justify="right")
    table.add_column("Δ kg", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Δ reps", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Δ volume", justify="right")

    for row in comparison.exercises:
        table.add_row(
            row.name,
            f"{_fmt_weight(row.a.max_weight)} → {_fmt_weight(row.b.max_weight)}",
            _fmt_delta(row.weight_diff),
            f"{row.a.total_reps} → {row.b.total_reps}",
            _fmt_delta(row.reps_diff),
            f"{row.a.volume:,.0f} → {row.b.volume:,.0f}",
            _fmt_delta(row.volume_diff),
        )
    console.print(table)
    console.print(
        f"Total volume: {comparison.total_volume_a:,.0f} → {comparison.total_volume_b:,.0f} kg "
        f"({_fmt_delta(comparison.volume_delta, ' kg')})"
    )


def print_records(records: Sequence[PersonalRecord]) -> None:
    if not records:
        console.print("[yellow]No loaded sets completed yet.[/yellow]")
        return
    table = Table(title="Personal Records")
    table.add_column("Exercise", style="cyan")
    table.add_column("Max kg", justify="right", style="bold")
    table.add_column("Date")
    table.add_column("Est. 1RM", justify="right")
    table.add_column("Best volume", justify="right")
    for r in records:
        table.add_row(
            r.name,
            _fmt_weight(r.max_weight),
            date_key(r.max_weight_date) if r.max_weight_date else "-",
            _fmt_weight(r.max_1rm),
            f"{r.max_volume:,.0f}",
        )
    console.print(table)


def print_percentage_table(rm: float, rows: Sequence[PercentageRow]) -> None:
    table = Table(title=f"Training loads for 1RM {_fmt_weight(rm)} kg")
    table.add_column("%", justify="right")
    table.add_column("kg", justify="right", style="bold")
    table.add_column("Zone", style="cyan")
    for row in rows:
        table.add_row(f"{row.percent}%", f"{row.load:g}", ZONE_LABELS[row.zone] if row.zone else "")
    console.print(table)


def print_strength_curve(points: Sequence[CurvePoint], names: Sequence[str]) -> None:
    if not points:
        console.print("[yellow]No sessions with these exercises in the period.[/yellow]")
        return
    table = Table(title="Estimated 1RM")
    table.add_column("Date", style="cyan")
    for name in names:
        table.add_column(name, justify="right")
    for point in points:
        table.add_row(
            date_key(point.date),
            *(_fmt_weight(point.values[n]) if n in point.values else "-" for n in names),
        )
    console.print(table)


def print_summary(
    summary: TrainingSummary,
    week: WeekComparison,
    progress: Sequence[tuple[str, float, float]],
    frequency: Sequence[tuple[str, int]],
    monthly: Sequence[MonthlyActivity] = (),
) -> None:
    """Print the dashboard-style overview of the whole log."""
    lines = [
        "Summary",
        f"- Sessions: {summary.total_sessions} ({summary.completed_sessions} completed)",
        f"- Volume: {summary.total_volume:,.0f} kg over {summary.total_sets} sets, {summary.total_reps} reps",
        f"- Exercises practised: {summary.unique_exercises}",
    ]
    if summary.most_worked_exercise is not None:
        lines.append(f"- Most worked: {escape(summary.most_worked_exercise)} ({summary.most_worked_sessions} sessions)")
    if summary.total_duration > 0:
        lines.append(f"- Time trained: {summary.total_duration // 60}h {summary.total_duration % 60}min")
    lines += [
        f"- This week: {week.this_week_sessions} sessions, {week.this_week_volume:,.0f} kg",
        f"- Last week: {week.last_week_sessions} sessions, {week.last_week_volume:,.0f} kg"
        f"  ({week.volume_change_percent:+d}%)",
    ]
    console.print("\n".join(lines))

    if progress:
        console.print()
        table = Table(title="Recent progress", title_justify="left")
        table.add_column("Exercise", style="cyan")
        table.add_column("Previous", justify="right")
        table.add_column("Latest", justify="right", style="bold")
        table.add_column("Δ", justify="right")
        for name, previous, current in progress:
            table.add_row(name, _fmt_weight(previous), _fmt_weight(current), _fmt_delta(current - previous))
        console.print(table)

    if frequency:
        console.print()
        console.print(
            create_simple_bar_chart(
                [c for c, _ in frequency],
                [float(d) for _, d in frequency],
                width=30,
                title="Training days per muscle group",
                value_format="{:.0f}",
            )
        )

    if monthly:
        console.print()
        console.print(
            create_simple_bar_chart(
                [m.month for m in monthly],
                [float(m.sessions) for m in monthly],
                width=30,
                title="Completed sessions per month",
                value_format="{:.0f}",
            )
        )


# =============================================================================
# Goals and body tracking
# =============================================================================


def print_goals(progress: Sequence[GoalProgress]) -> None:
    if not progress:
        console.print("[yellow]No goals set.[/yellow]")
        return
    table = Table(title="Goals")
    table.add_column("ID", style="dim")
    table.add_column("Exercise", style="cyan")
    table.add_column("Best", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right", style="bold")
    for p in progress:
        pct = f"[green]{p.percent}% ✓[/green]" if p.achieved else f"{p.percent}%"
        table.add_row(
            p.goal.id[:8],
            p.goal.exercise_name,
            _fmt_weight(p.best_weight),
            _fmt_weight(p.goal.target_weight),
            pct,
        )
    console.print(table)


def print_weight_stats(stats: WeightStats | None) -> None:
    if stats is None:
        console.print("[yellow]No body-weight entries yet.[/yellow]")
        return
    lines = [
        f"Current: [bold]{stats.current:g} kg[/bold]",
        f"Min: {stats.minimum:g} kg   Max: {stats.maximum:g} kg",
    ]
    if stats.delta_30_days is not None:
        lines.append(f"30-day change: {_fmt_delta(round(stats.delta_30_days, 1), ' kg')}")
    console.print("\n".join(lines))


def print_measurements(stats: Sequence[MeasurementStats]) -> None:
    if not stats:
        console.print("[yellow]No body measurements yet.[/yellow]")
        return
    table = Table(title="Body measurements")
    table.add_column("Type", style="cyan")
    table.add_column("Latest (cm)", justify="right", style="bold")
    table.add_column("Date")
    table.add_column("30-day Δ", justify="right")
    for s in stats:
        delta = _fmt_delta(round(s.delta, 1), " cm") if s.delta is not None else "-"
        table.add_row(s.type, _fmt_weight(s.current), s.date, delta)
    console.print(table)


def print_wellness(stats: WellnessStats | None, days: int) -> None:
    if stats is None:
        console.print(f"[yellow]No wellness entries in the last {days} days.[/yellow]")
        return
    latest = stats.latest
    lines = [
        f"Last {days} days ({stats.entries} entries)",
        f"- Sleep: {stats.average_sleep:g}/5   Energy: {stats.average_energy:g}/5   Soreness: {stats.average_soreness:g}/5",
        f"Latest ({latest.date}): sleep {latest.sleep_quality}, energy {latest.energy_level}, "
        f"soreness {latest.muscle_soreness}",
    ]
    if latest.notes:
        lines.append(f"[dim]{escape(latest.notes)}[/dim]")
    console.print("\n".join(lines))


# =============================================================================
# Messages
# =============================================================================


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{escape(message)}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(escape(f"{message} [y/N]: "))
    return response.lower() in ("y", "yes")

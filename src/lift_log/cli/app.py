"""Shared Typer app object, shared option types, and store utilities."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.engine.config_loader import Settings, load_settings
from ..core.catalog import load_default_programs, merge_programs
from ..core.models import DayProgram, Workout
from ..core.session import program_for_day
from ..io.serializers import ValidationError
from ..io.workout_store import DraftStore, WorkoutStore, get_default_data_dir
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Data directory (default: $LIFT_LOG_HOME or ~/.lift-log)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="lift-log",
    help="Strength-training log: sessions, pyramids, progression and analytics.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log store and config activity to stderr"),
    ] = False,
) -> None:
    """
    Strength-training log. Run 'lift-log init' to create the data directory.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_store(data_dir: Path | None) -> WorkoutStore:
    """Get workout store from path or default location."""
    return WorkoutStore(data_dir if data_dir is not None else get_default_data_dir())


def get_draft_store(data_dir: Path | None) -> DraftStore:
    return DraftStore(data_dir if data_dir is not None else get_default_data_dir())


def get_settings() -> Settings:
    return load_settings()


def load_workouts(store: WorkoutStore) -> list[Workout]:
    """Load the workout log or exit with an error message."""
    if not store.exists():
        views.print_error(f"Workout log not found: {store.workouts_path}")
        views.print_info("Run 'lift-log init' first to create the data directory.")
        raise typer.Exit(1)
    try:
        return store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def get_programs(store: WorkoutStore) -> list[DayProgram]:
    """Bundled default programs followed by the user's custom ones."""
    try:
        return merge_programs(load_default_programs(), store.load_custom_programs())
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def day_program(programs: list[DayProgram], day_type: str) -> DayProgram | None:
    """The program for a weekday, preferring a custom one over the default."""
    custom = program_for_day((p for p in programs if p.is_custom), day_type)
    return custom if custom is not None else program_for_day(programs, day_type)

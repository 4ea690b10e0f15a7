"""
File-based storage for workouts and related records.

Workouts live in ``workouts.jsonl`` (one JSON object per line, kept in
chronological order).  Goals, custom programs, body-weight, measurement
and wellness entries and favourite exercise names are small JSON arrays in
their own files; the in-progress session draft is a single JSON object.
Every write rewrites the whole file.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..core.calendar import parse_timestamp
from ..core.engine.config_loader import get_user_config_dir
from ..core.models import BodyWeight, DayProgram, Goal, Measurement, Wellness, Workout, exercise_key
from ..core.session import SessionDraft
from .serializers import (
    ValidationError,
    body_weight_to_dict,
    dict_to_body_weight,
    dict_to_draft,
    dict_to_goal,
    dict_to_measurement,
    dict_to_program,
    dict_to_wellness,
    draft_to_dict,
    goal_to_dict,
    json_line_to_workout,
    measurement_to_dict,
    program_to_dict,
    wellness_to_dict,
    workout_to_json_line,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

WORKOUTS_FILE = "workouts.jsonl"
GOALS_FILE = "goals.json"
PROGRAMS_FILE = "programs.json"
BODY_WEIGHT_FILE = "body_weight.json"
MEASUREMENTS_FILE = "measurements.json"
WELLNESS_FILE = "wellness.json"
FAVORITES_FILE = "favorites.json"
DRAFT_FILE = "draft.json"


def _read_json_list(path: Path, convert: Callable[[dict[str, Any]], T]) -> list[T]:
    """Load a JSON array of records; a missing file is an empty list."""
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Error parsing {path}: {e}") from e
    if not isinstance(data, list):
        raise ValidationError(f"Error parsing {path}: expected a JSON array")

    items: list[T] = []
    for i, record in enumerate(data):
        try:
            if not isinstance(record, dict):
                raise ValidationError("record must be a JSON object")
            items.append(convert(record))
        except ValidationError as e:
            raise ValidationError(f"Error in record {i} of {path}: {e}") from e
    return items


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.debug("Wrote %s", path)


class WorkoutStore:
    """
    Manages the training log stored under one data directory.

    Files:
    - workouts.jsonl: one workout per line, chronological
    - goals.json, programs.json, body_weight.json, measurements.json,
      wellness.json, favorites.json: JSON arrays
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the data files
        """
        self.data_dir = Path(data_dir)
        self.workouts_path = self.data_dir / WORKOUTS_FILE
        self.goals_path = self.data_dir / GOALS_FILE
        self.programs_path = self.data_dir / PROGRAMS_FILE
        self.body_weight_path = self.data_dir / BODY_WEIGHT_FILE
        self.measurements_path = self.data_dir / MEASUREMENTS_FILE
        self.wellness_path = self.data_dir / WELLNESS_FILE
        self.favorites_path = self.data_dir / FAVORITES_FILE

    def exists(self) -> bool:
        """Check if the workout log exists."""
        return self.workouts_path.exists()

    def init(self) -> None:
        """
        Create the data directory and an empty workout log if missing.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if not self.workouts_path.exists():
            self.workouts_path.touch()
            logger.info("Initialized workout log at %s", self.workouts_path)

    def _require_log(self) -> None:
        if not self.workouts_path.exists():
            raise FileNotFoundError(
                f"Workout log not found: {self.workouts_path}. Run 'init' first."
            )

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def load_workouts(self) -> list[Workout]:
        """
        Load all workouts.

        Returns:
            Workouts sorted by date

        Raises:
            FileNotFoundError: If the log doesn't exist
            ValidationError: If a line cannot be parsed
        """
        self._require_log()

        workouts: list[Workout] = []
        with open(self.workouts_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    workouts.append(json_line_to_workout(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.workouts_path}: {e}"
                    ) from e

        workouts.sort(key=lambda w: parse_timestamp(w.date))
        logger.debug("Loaded %d workouts from %s", len(workouts), self.workouts_path)
        return workouts

    def _write_workouts(self, workouts: list[Workout]) -> None:
        with open(self.workouts_path, "w", encoding="utf-8") as f:
            for workout in workouts:
                f.write(workout_to_json_line(workout) + "\n")
        logger.debug("Wrote %d workouts to %s", len(workouts), self.workouts_path)

    def save_workout(self, workout: Workout) -> None:
        """
        Insert or replace a workout (matched by id), keeping date order.

        Args:
            workout: Workout to store
        """
        workouts = [w for w in self.load_workouts() if w.id != workout.id]
        workouts.append(workout)
        workouts.sort(key=lambda w: parse_timestamp(w.date))
        self._write_workouts(workouts)
        logger.info("Saved workout %s (%s)", workout.id, workout.date)

    def get_workout(self, workout_id: str) -> Workout | None:
        """
        Find a workout by id or unique id prefix.

        Raises:
            ValidationError: If the prefix matches more than one workout
        """
        workouts = self.load_workouts()
        exact = [w for w in workouts if w.id == workout_id]
        if exact:
            return exact[0]
        matches = [w for w in workouts if w.id.startswith(workout_id)]
        if len(matches) > 1:
            raise ValidationError(f"Workout id prefix '{workout_id}' is ambiguous")
        return matches[0] if matches else None

    def delete_workout(self, workout_id: str) -> bool:
        """
        Delete a workout by id.

        Returns:
            True if a workout was removed
        """
        workouts = self.load_workouts()
        kept = [w for w in workouts if w.id != workout_id]
        if len(kept) == len(workouts):
            return False
        self._write_workouts(kept)
        logger.info("Deleted workout %s", workout_id)
        return True

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def load_goals(self) -> list[Goal]:
        return _read_json_list(self.goals_path, dict_to_goal)

    def save_goals(self, goals: list[Goal]) -> None:
        _write_json(self.goals_path, [goal_to_dict(g) for g in goals])

    def add_goal(self, goal: Goal) -> None:
        self.save_goals([*self.load_goals(), goal])

    def delete_goal(self, goal_id: str) -> bool:
        goals = self.load_goals()
        kept = [g for g in goals if g.id != goal_id]
        if len(kept) == len(goals):
            return False
        self.save_goals(kept)
        return True

    # ------------------------------------------------------------------
    # Custom programs
    # ------------------------------------------------------------------

    def load_custom_programs(self) -> list[DayProgram]:
        return _read_json_list(self.programs_path, dict_to_program)

    def save_custom_programs(self, programs: list[DayProgram]) -> None:
        _write_json(self.programs_path, [program_to_dict(p) for p in programs])

    # ------------------------------------------------------------------
    # Body weight
    # ------------------------------------------------------------------

    def load_body_weights(self) -> list[BodyWeight]:
        """Body-weight entries sorted by date."""
        entries = _read_json_list(self.body_weight_path, dict_to_body_weight)
        entries.sort(key=lambda e: e.date)
        return entries

    def add_body_weight(self, entry: BodyWeight) -> None:
        """Add an entry, replacing any existing entry for the same date."""
        entries = [e for e in self.load_body_weights() if e.date != entry.date]
        entries.append(entry)
        entries.sort(key=lambda e: e.date)
        _write_json(self.body_weight_path, [body_weight_to_dict(e) for e in entries])

    # ------------------------------------------------------------------
    # Body measurements
    # ------------------------------------------------------------------

    def load_measurements(self) -> list[Measurement]:
        """Measurements sorted by date."""
        entries = _read_json_list(self.measurements_path, dict_to_measurement)
        entries.sort(key=lambda e: e.date)
        return entries

    def add_measurement(self, entry: Measurement) -> None:
        """Add a measurement, replacing one of the same type on the same date."""
        entries = [
            e for e in self.load_measurements()
            if (e.date, e.type) != (entry.date, entry.type)
        ]
        entries.append(entry)
        entries.sort(key=lambda e: e.date)
        _write_json(self.measurements_path, [measurement_to_dict(e) for e in entries])

    def delete_measurement(self, entry_id: str) -> bool:
        entries = self.load_measurements()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        _write_json(self.measurements_path, [measurement_to_dict(e) for e in kept])
        return True

    # ------------------------------------------------------------------
    # Wellness
    # ------------------------------------------------------------------

    def load_wellness(self) -> list[Wellness]:
        """Wellness entries sorted by date."""
        entries = _read_json_list(self.wellness_path, dict_to_wellness)
        entries.sort(key=lambda e: e.date)
        return entries

    def add_wellness(self, entry: Wellness) -> None:
        """Add an entry; an existing entry for the same date is updated in place (keeping its id)."""
        entries = self.load_wellness()
        for i, existing in enumerate(entries):
            if existing.date == entry.date:
                entries[i] = replace(entry, id=existing.id)
                break
        else:
            entries.append(entry)
            entries.sort(key=lambda e: e.date)
        _write_json(self.wellness_path, [wellness_to_dict(e) for e in entries])

    def delete_wellness(self, entry_id: str) -> bool:
        entries = self.load_wellness()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        _write_json(self.wellness_path, [wellness_to_dict(e) for e in kept])
        return True

    # ------------------------------------------------------------------
    # Favourite exercises
    # ------------------------------------------------------------------

    def load_favorites(self) -> list[str]:
        """Favourite exercise names in the order they were marked."""
        if not self.favorites_path.exists():
            return []
        try:
            with open(self.favorites_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.favorites_path}: {e}") from e
        if not isinstance(data, list) or not all(isinstance(n, str) for n in data):
            raise ValidationError(f"Error parsing {self.favorites_path}: expected a JSON array of names")
        return data

    def toggle_favorite(self, name: str) -> bool:
        """
        Mark or unmark an exercise as favourite (matched case-insensitively).

        Returns:
            True if the exercise is a favourite afterwards
        """
        favorites = self.load_favorites()
        kept = [n for n in favorites if exercise_key(n) != exercise_key(name)]
        added = len(kept) == len(favorites)
        if added:
            kept.append(name.strip())
        _write_json(self.favorites_path, kept)
        return added


class DraftStore:
    """
    Persists the single in-progress session draft.

    The draft is passed around explicitly; this class only saves,
    restores and discards it.
    """

    def __init__(self, data_dir: str | Path):
        self.path = Path(data_dir) / DRAFT_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, draft: SessionDraft) -> None:
        _write_json(self.path, draft_to_dict(draft))

    def restore(self) -> SessionDraft | None:
        """
        Load the saved draft.

        Returns:
            SessionDraft, or None if no draft is saved

        Raises:
            ValidationError: If the draft file is corrupt
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"Error parsing {self.path}: expected a JSON object")
        return dict_to_draft(data)

    def discard(self) -> bool:
        """
        Delete the saved draft.

        Returns:
            True if a draft existed
        """
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.debug("Discarded draft %s", self.path)
        return True


def get_default_data_dir() -> Path:
    """Data directory from LIFT_LOG_HOME, else ~/.lift-log."""
    return get_user_config_dir()

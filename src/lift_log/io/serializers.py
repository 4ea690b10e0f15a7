"""
JSON serialization for training data models.

Handles conversion between dataclasses and JSON-compatible dicts, plus
parsing of the compact set notation accepted on the command line.
"""

import json
import re
from typing import Any

from ..core.calendar import parse_timestamp
from ..core.config import WELLNESS_MAX, WELLNESS_MIN
from ..core.models import (
    DAY_TYPES,
    MEASUREMENT_TYPES,
    BodyWeight,
    DayProgram,
    Exercise,
    Goal,
    Measurement,
    Wellness,
    Workout,
    WorkoutSet,
)
from ..core.session import SessionDraft


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_timestamp(value: str) -> str:
    """
    Validate an ISO-8601 date or datetime string.

    Args:
        value: Timestamp to validate

    Returns:
        The string unchanged

    Raises:
        ValidationError: If the timestamp cannot be parsed
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid date: {value!r}")
    try:
        parse_timestamp(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}. Expected ISO format (YYYY-MM-DD[THH:MM:SS])") from e
    return value


def validate_date(date_str: str) -> str:
    """
    Validate a plain YYYY-MM-DD date.

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    return validate_timestamp(date_str)


def validate_day_type(day_type: str) -> str:
    if day_type not in DAY_TYPES:
        raise ValidationError(f"Invalid day_type: {day_type}. Must be one of {DAY_TYPES}")
    return day_type


def validate_measurement_type(kind: str) -> str:
    if kind not in MEASUREMENT_TYPES:
        raise ValidationError(f"Invalid measurement type: {kind}. Must be one of {MEASUREMENT_TYPES}")
    return kind


def validate_rating(value: Any, name: str) -> int:
    """
    Validate a wellness rating.

    Raises:
        ValidationError: If value is not an integer in the rating range
    """
    if isinstance(value, bool) or not isinstance(value, int) or not WELLNESS_MIN <= value <= WELLNESS_MAX:
        raise ValidationError(f"{name} must be an integer from {WELLNESS_MIN} to {WELLNESS_MAX}, got {value}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise ValidationError(f"{what} is missing '{key}'")
    return data[key]


# =============================================================================
# Sets, exercises, workouts
# =============================================================================


def set_to_dict(s: WorkoutSet) -> dict[str, Any]:
    """Convert WorkoutSet to a dict; optional fields are omitted when unset."""
    d: dict[str, Any] = {
        "id": s.id,
        "set_number": s.set_number,
        "reps": s.reps,
        "weight": s.weight,
        "completed": s.completed,
    }
    if s.rest_time is not None:
        d["rest_time"] = s.rest_time
    if s.rir is not None:
        d["rir"] = s.rir
    if s.pyramid_id is not None:
        d["pyramid_id"] = s.pyramid_id
    return d


def dict_to_set(data: dict[str, Any]) -> WorkoutSet:
    """
    Convert dict to WorkoutSet.

    Raises:
        ValidationError: If data is invalid
    """
    reps = data.get("reps", 0)
    weight = data.get("weight", 0)
    validate_non_negative(reps, "reps")
    validate_non_negative(weight, "weight")
    if data.get("rest_time") is not None:
        validate_non_negative(data["rest_time"], "rest_time")
    rir = data.get("rir")
    if rir is not None and not 0 <= rir <= 10:
        raise ValidationError(f"rir must be between 0 and 10, got {rir}")

    return WorkoutSet(
        id=str(_require(data, "id", "set")),
        set_number=int(data.get("set_number", 0)),
        reps=int(reps),
        weight=float(weight),
        rest_time=int(data["rest_time"]) if data.get("rest_time") is not None else None,
        rir=int(rir) if rir is not None else None,
        completed=bool(data.get("completed", False)),
        pyramid_id=data.get("pyramid_id"),
    )


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": exercise.id,
        "name": exercise.name,
        "exercise_order": exercise.exercise_order,
        "sets": [set_to_dict(s) for s in exercise.sets],
    }
    if exercise.rm is not None:
        d["rm"] = exercise.rm
    if exercise.notes:
        d["notes"] = exercise.notes
    if exercise.superset_group is not None:
        d["superset_group"] = exercise.superset_group
    return d


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    name = _require(data, "name", "exercise")
    if not isinstance(name, str):
        raise ValidationError(f"Exercise name must be a string, got {name!r}")
    group = data.get("superset_group")
    if group is not None:
        validate_positive(group, "superset_group")

    return Exercise(
        id=str(_require(data, "id", "exercise")),
        name=name,
        sets=[dict_to_set(s) for s in data.get("sets", [])],
        rm=float(data["rm"]) if data.get("rm") is not None else None,
        notes=data.get("notes"),
        exercise_order=int(data.get("exercise_order", 0)),
        superset_group=int(group) if group is not None else None,
    )


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": workout.id,
        "date": workout.date,
        "day_type": workout.day_type,
        "session_name": workout.session_name,
        "completed": workout.completed,
        "exercises": [exercise_to_dict(e) for e in workout.exercises],
    }
    if workout.general_notes:
        d["general_notes"] = workout.general_notes
    if workout.duration is not None:
        d["duration"] = workout.duration
    return d


def dict_to_workout(data: dict[str, Any]) -> Workout:
    """
    Convert dict to Workout.

    Raises:
        ValidationError: If data is invalid
    """
    validate_timestamp(_require(data, "date", "workout"))
    validate_day_type(_require(data, "day_type", "workout"))
    if data.get("duration") is not None:
        validate_non_negative(data["duration"], "duration")

    exercises = [dict_to_exercise(e) for e in data.get("exercises", [])]
    orders = [e.exercise_order for e in exercises]
    if len(set(orders)) != len(orders):
        raise ValidationError(f"Workout {data.get('id')} has duplicate exercise_order values")

    return Workout(
        id=str(_require(data, "id", "workout")),
        date=data["date"],
        day_type=data["day_type"],
        session_name=str(data.get("session_name", "")),
        exercises=exercises,
        general_notes=data.get("general_notes"),
        duration=int(data["duration"]) if data.get("duration") is not None else None,
        completed=bool(data.get("completed", False)),
    )


def workout_to_json_line(workout: Workout) -> str:
    """Serialize a workout to a single JSON line (no trailing newline)."""
    return json.dumps(workout_to_dict(workout), separators=(",", ":"), ensure_ascii=False)


def json_line_to_workout(line: str) -> Workout:
    """
    Deserialize a JSON line to a Workout.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Workout record must be a JSON object")
    return dict_to_workout(data)


# =============================================================================
# Programs, goals, body weight, draft
# =============================================================================


def program_to_dict(program: DayProgram) -> dict[str, Any]:
    return {
        "id": program.id,
        "day_type": program.day_type,
        "session_name": program.session_name,
        "focus": program.focus,
        "exercises": list(program.exercises),
        "is_custom": program.is_custom,
    }


def dict_to_program(data: dict[str, Any]) -> DayProgram:
    validate_day_type(_require(data, "day_type", "program"))
    return DayProgram(
        id=str(_require(data, "id", "program")),
        day_type=data["day_type"],
        session_name=str(data.get("session_name", "")),
        focus=str(data.get("focus") or ""),
        exercises=[str(n) for n in data.get("exercises", [])],
        is_custom=bool(data.get("is_custom", True)),
    )


def goal_to_dict(goal: Goal) -> dict[str, Any]:
    return {"id": goal.id, "exercise_name": goal.exercise_name, "target_weight": goal.target_weight}


def dict_to_goal(data: dict[str, Any]) -> Goal:
    target = _require(data, "target_weight", "goal")
    validate_positive(target, "target_weight")
    name = str(_require(data, "exercise_name", "goal")).strip()
    if not name:
        raise ValidationError("Goal exercise_name cannot be empty")
    return Goal(id=str(_require(data, "id", "goal")), exercise_name=name, target_weight=float(target))


def body_weight_to_dict(entry: BodyWeight) -> dict[str, Any]:
    return {"id": entry.id, "date": entry.date, "weight": entry.weight}


def dict_to_body_weight(data: dict[str, Any]) -> BodyWeight:
    validate_date(_require(data, "date", "body weight entry"))
    weight = _require(data, "weight", "body weight entry")
    validate_positive(weight, "weight")
    return BodyWeight(id=str(_require(data, "id", "body weight entry")), date=data["date"], weight=float(weight))


def measurement_to_dict(entry: Measurement) -> dict[str, Any]:
    return {"id": entry.id, "date": entry.date, "type": entry.type, "value": entry.value}


def dict_to_measurement(data: dict[str, Any]) -> Measurement:
    validate_date(_require(data, "date", "measurement"))
    kind = validate_measurement_type(_require(data, "type", "measurement"))
    value = _require(data, "value", "measurement")
    validate_positive(value, "value")
    return Measurement(id=str(_require(data, "id", "measurement")), date=data["date"], type=kind, value=float(value))


def wellness_to_dict(entry: Wellness) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": entry.id,
        "date": entry.date,
        "sleep_quality": entry.sleep_quality,
        "energy_level": entry.energy_level,
        "muscle_soreness": entry.muscle_soreness,
    }
    if entry.notes:
        d["notes"] = entry.notes
    return d


def dict_to_wellness(data: dict[str, Any]) -> Wellness:
    validate_date(_require(data, "date", "wellness entry"))
    return Wellness(
        id=str(_require(data, "id", "wellness entry")),
        date=data["date"],
        sleep_quality=validate_rating(_require(data, "sleep_quality", "wellness entry"), "sleep_quality"),
        energy_level=validate_rating(_require(data, "energy_level", "wellness entry"), "energy_level"),
        muscle_soreness=validate_rating(_require(data, "muscle_soreness", "wellness entry"), "muscle_soreness"),
        notes=data.get("notes") or None,
    )


def draft_to_dict(draft: SessionDraft) -> dict[str, Any]:
    return {"updated_at": draft.updated_at, "workout": workout_to_dict(draft.workout)}


def dict_to_draft(data: dict[str, Any]) -> SessionDraft:
    workout = _require(data, "workout", "draft")
    if not isinstance(workout, dict):
        raise ValidationError("Draft workout must be an object")
    return SessionDraft(workout=dict_to_workout(workout), updated_at=str(data.get("updated_at", "")))


# =============================================================================
# Command-line set notation
# =============================================================================

_SET_PATTERN = re.compile(
    r"^(?P<weight>\d+(?:\.\d+)?)\s*[xX×]\s*(?P<reps>\d+)"
    r"(?:\s*@\s*(?P<rir>\d+))?"
    r"(?:\s*/\s*(?P<rest>\d+)s?)?$"
)


def parse_sets_string(sets_str: str) -> list[tuple[float, int, int | None, int | None]]:
    """
    Parse a comma-separated list of performed sets.

    Per-set format:
        WEIGHTxREPS[@RIR][/REST]
        e.g. "100x8@2"       100 kg for 8 reps, 2 reps in reserve
             "100x8/90"      rest 90 s, no RIR reported
             "0x12"          bodyweight set

    Repeating a set with a third ``xN`` factor is not supported; list
    each set.

    Args:
        sets_str: Sets string to parse

    Returns:
        List of (weight, reps, rir, rest_seconds) tuples

    Raises:
        ValidationError: If format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    sets: list[tuple[float, int, int | None, int | None]] = []
    for part in (p.strip() for p in sets_str.split(",")):
        if not part:
            continue
        match = _SET_PATTERN.match(part)
        if match is None:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                f"Use: WEIGHTxREPS[@RIR][/REST] (e.g. 100x8@2, 60x12/90, 0x10)."
            )
        rir = int(match.group("rir")) if match.group("rir") is not None else None
        if rir is not None and rir > 10:
            raise ValidationError(f"RIR must be between 0 and 10: {rir}")
        rest = int(match.group("rest")) if match.group("rest") is not None else None
        sets.append((float(match.group("weight")), int(match.group("reps")), rir, rest))

    if not sets:
        raise ValidationError("No valid sets found in sets string")
    return sets


def parse_reps_pattern(pattern: str) -> list[int]:
    """
    Parse a pyramid rep pattern such as "3-5-8-10-8-5-3".

    Raises:
        ValidationError: If any entry is not a positive integer
    """
    parts = [p.strip() for p in re.split(r"[-,\s]+", pattern.strip()) if p.strip()]
    if not parts:
        raise ValidationError("Rep pattern cannot be empty")
    reps = []
    for p in parts:
        if not p.isdigit() or int(p) < 1:
            raise ValidationError(f"Invalid rep count in pattern: '{p}'")
        reps.append(int(p))
    return reps

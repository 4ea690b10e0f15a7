"""
Movement catalog and default day programs.

Both are bundled as YAML under ``src/lift_log/data/``.  The catalog can be
extended or overridden from ``~/.lift-log/exercises.yaml`` (entries keyed
by id, deep-merged over the bundled file).
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

from .config import UNKNOWN_CATEGORY
from .engine.config_loader import deep_merge, get_package_dir, get_user_config_dir, load_yaml_file
from .models import DAY_TYPES, DayProgram, exercise_key

logger = logging.getLogger(__name__)

_REQUIRED_ENTRY_FIELDS: frozenset[str] = frozenset({"name", "category"})


@dataclass
class CatalogEntry:
    id: str
    name: str
    category: str
    equipment: str = ""


def get_data_dir() -> Path:
    return get_package_dir() / "data"


def entry_from_dict(entry_id: str, d: dict[str, Any]) -> CatalogEntry:
    """
    Convert a raw YAML mapping to a CatalogEntry.

    Raises:
        ValueError: If name or category is missing
    """
    missing = _REQUIRED_ENTRY_FIELDS - set(d)
    if missing:
        raise ValueError(f"catalog entry missing fields: {sorted(missing)}")
    return CatalogEntry(
        id=str(entry_id),
        name=str(d["name"]),
        category=str(d["category"]),
        equipment=str(d.get("equipment") or ""),
    )


def load_catalog(user_file: Path | None = None) -> list[CatalogEntry]:
    """
    Load the movement catalog.

    Args:
        user_file: Override file (defaults to ~/.lift-log/exercises.yaml)

    Returns:
        Catalog entries in file order; invalid entries are skipped with a
        warning
    """
    raw = load_yaml_file(get_data_dir() / "exercises.yaml")
    user_path = user_file if user_file is not None else get_user_config_dir() / "exercises.yaml"
    if user_path.exists():
        logger.debug("Merging user catalog from %s", user_path)
        raw = deep_merge(raw, load_yaml_file(user_path))

    entries: list[CatalogEntry] = []
    for entry_id, d in (raw.get("exercises") or {}).items():
        if not isinstance(d, dict):
            warnings.warn(f"lift-log: skipping catalog entry '{entry_id}' (not a mapping)", stacklevel=2)
            continue
        try:
            entries.append(entry_from_dict(entry_id, d))
        except ValueError as exc:
            warnings.warn(f"lift-log: skipping catalog entry '{entry_id}': {exc}", stacklevel=2)
    logger.debug("Loaded %d catalog entries", len(entries))
    return entries


def category_map(catalog: Iterable[CatalogEntry]) -> dict[str, str]:
    """Lower-cased exercise name → category."""
    return {exercise_key(e.name): e.category for e in catalog}


def category_for(name: str, catalog: Iterable[CatalogEntry]) -> str:
    """Category of a free-text exercise name; "Other" if it is not catalogued."""
    return category_map(catalog).get(exercise_key(name), UNKNOWN_CATEGORY)


def search_catalog(catalog: Iterable[CatalogEntry], query: str) -> list[CatalogEntry]:
    """Entries whose name, category or equipment contains the query."""
    q = query.strip().lower()
    return [
        e for e in catalog
        if q in e.name.lower() or q in e.category.lower() or q in e.equipment.lower()
    ]


def program_from_dict(d: dict[str, Any], is_custom: bool = False) -> DayProgram:
    """
    Convert a raw mapping to a DayProgram.

    Raises:
        ValueError: If the day type is unknown or fields are missing
    """
    try:
        day_type = str(d["day_type"])
        program = DayProgram(
            id=str(d["id"]),
            day_type=day_type,  # type: ignore[arg-type]
            session_name=str(d["session_name"]),
            focus=str(d.get("focus") or ""),
            exercises=[str(name) for name in d.get("exercises") or []],
            is_custom=bool(d.get("is_custom", is_custom)),
        )
    except KeyError as exc:
        raise ValueError(f"program missing field {exc}") from exc
    if day_type not in DAY_TYPES:
        raise ValueError(f"Invalid day_type: {day_type}")
    return program


def load_default_programs() -> list[DayProgram]:
    """Default weekly programs bundled with the package."""
    raw = load_yaml_file(get_data_dir() / "programs.yaml")
    programs: list[DayProgram] = []
    for d in raw.get("programs") or []:
        try:
            programs.append(program_from_dict(d))
        except (TypeError, ValueError) as exc:
            warnings.warn(f"lift-log: skipping default program: {exc}", stacklevel=2)
    return programs


def merge_programs(defaults: Sequence[DayProgram], custom: Sequence[DayProgram]) -> list[DayProgram]:
    """Defaults followed by custom programs."""
    return [*defaults, *custom]

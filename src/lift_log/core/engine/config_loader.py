"""
YAML → typed settings loader.

Loads tunable settings from settings.yaml (bundled with the package) and
optionally merges user overrides from ~/.lift-log/settings.yaml.

Usage:
    from lift_log.core.engine.config_loader import load_settings
    settings = load_settings()
    step = settings.weight_step

If the bundled YAML cannot be parsed, the Python defaults from config.py
are used.  If the user override file has parse errors, a warning is
issued and the file is ignored.
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .. import config

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; return {} (with a warning) on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"lift-log: ignoring {path} ({exc})", stacklevel=2)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"lift-log: ignoring {path} (top level is not a mapping)", stacklevel=2)
        return {}
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_package_dir() -> Path:
    """Return the installed lift_log package directory."""
    # config_loader.py lives at src/lift_log/core/engine/config_loader.py
    return Path(__file__).resolve().parent.parent.parent


def get_user_config_dir() -> Path:
    """Return the user data directory (LIFT_LOG_HOME or ~/.lift-log)."""
    env = os.environ.get("LIFT_LOG_HOME")
    if env:
        return Path(env).expanduser()
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".lift-log"


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    candidate = get_package_dir() / "settings.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return the user's settings.yaml if it exists, else None."""
    p = get_user_config_dir() / "settings.yaml"
    return p if p.exists() else None


@dataclass
class Settings:
    """Tunable parameters passed by the CLI into core functions."""

    weight_step: float = config.PROGRESSION_WEIGHT_STEP
    rep_step: int = config.PROGRESSION_REP_STEP
    min_rir_for_weight: int = config.PROGRESSION_MIN_RIR
    deload_window_weeks: int = config.DELOAD_WINDOW_WEEKS
    deload_week_ratio: float = config.DELOAD_WEEK_RATIO
    calendar_days: int = config.CALENDAR_DAYS
    streak_lookback_days: int = config.STREAK_LOOKBACK_DAYS
    default_sets: int = config.DEFAULT_SETS_PER_EXERCISE
    weight_increment: float = config.WEIGHT_INCREMENT
    default_period_months: int = config.DEFAULT_PERIOD_MONTHS
    pyramid_rest_between_sets: int = config.PYRAMID_DEFAULT_REST_BETWEEN_SETS
    pyramid_rest_between_rounds: int = config.PYRAMID_DEFAULT_REST_BETWEEN_ROUNDS


def load_config() -> dict[str, Any]:
    """
    Load and merge raw settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_log/settings.yaml
    2. User override at ~/.lift-log/settings.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    raw: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        raw = deep_merge(raw, load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        logger.debug("Merging user settings from %s", user)
        raw = deep_merge(raw, load_yaml_file(user))

    return raw


def settings_from_dict(raw: dict[str, Any]) -> Settings:
    """
    Build Settings from a sectioned YAML mapping.

    Sections are flattened (``progression.weight_step`` → ``weight_step``);
    unknown keys and values of the wrong type are skipped with a warning.
    """
    flat: dict[str, Any] = {}
    for section, values in raw.items():
        if isinstance(values, dict):
            flat.update(values)
        else:
            flat[section] = values

    defaults = Settings()
    kwargs: dict[str, Any] = {}
    for f in fields(Settings):
        if f.name not in flat:
            continue
        caster = type(getattr(defaults, f.name))
        try:
            kwargs[f.name] = caster(flat[f.name])
        except (TypeError, ValueError):
            warnings.warn(
                f"lift-log: invalid value for setting '{f.name}': {flat[f.name]!r}",
                stacklevel=2,
            )

    for key in sorted(set(flat) - {f.name for f in fields(Settings)}):
        warnings.warn(f"lift-log: unknown setting '{key}' ignored", stacklevel=2)

    return Settings(**kwargs)


def load_settings() -> Settings:
    """Return the merged, typed settings."""
    return settings_from_dict(load_config())

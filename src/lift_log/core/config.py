"""
Configuration constants for the training-log analytics engine.

All adjustable parameters are centralized here for easy tuning.
User-level overrides for a subset of them live in settings.yaml
(see core/engine/config_loader.py).
"""

from typing import Final

# =============================================================================
# 1RM ESTIMATION (Epley)
# =============================================================================

EPLEY_REPS_DIVISOR: Final[int] = 30  # 1RM = w × (1 + reps/30)

# =============================================================================
# TRAINING ZONES (% of 1RM, lower bound inclusive)
# =============================================================================

ZONE_MAX_STRENGTH_MIN: Final[int] = 90
ZONE_STRENGTH_HYPERTROPHY_MIN: Final[int] = 80
ZONE_HYPERTROPHY_MIN: Final[int] = 70
ZONE_ENDURANCE_MIN: Final[int] = 60

# Rows shown by the percentage-of-RM reference table
RM_TABLE_PERCENTAGES: Final[tuple[int, ...]] = (95, 90, 85, 80, 75, 70, 65, 60, 55, 50)

# =============================================================================
# PROGRESSION SUGGESTIONS
# =============================================================================

PROGRESSION_WEIGHT_STEP: Final[float] = 2.5  # added load when RIR leaves margin
PROGRESSION_REP_STEP: Final[int] = 1  # added reps when close to failure
PROGRESSION_MIN_RIR: Final[int] = 2  # min RIR required to add load

RIR_MIN: Final[int] = 0
RIR_MAX: Final[int] = 10

# =============================================================================
# DELOAD DETECTION
# =============================================================================

DELOAD_WINDOW_WEEKS: Final[int] = 4  # trailing ISO weeks inspected
DELOAD_WEEK_RATIO: Final[float] = 0.60  # week below this share of the mean = deload
DELOAD_VOLUME_REDUCTION: Final[float] = 0.40  # recommended cut for a light week

# =============================================================================
# STREAKS & CALENDAR HEATMAP
# =============================================================================

STREAK_LOOKBACK_DAYS: Final[int] = 365
CALENDAR_DAYS: Final[int] = 364  # 52 weeks
CALENDAR_LOW_PERCENTILE: Final[float] = 0.33
CALENDAR_HIGH_PERCENTILE: Final[float] = 0.66
CALENDAR_LOW_FALLBACK: Final[float] = 1.0  # thresholds when no volume recorded
CALENDAR_HIGH_FALLBACK: Final[float] = 2.0

# =============================================================================
# PYRAMID SETS
# =============================================================================

PYRAMID_DEFAULT_SCHEME: Final[str] = "ascending-descending"
PYRAMID_DEFAULT_MAX_REPS: Final[int] = 10
PYRAMID_DEFAULT_TOTAL_SETS: Final[int] = 7
PYRAMID_DEFAULT_ROUNDS: Final[int] = 1
PYRAMID_DEFAULT_REST_BETWEEN_SETS: Final[int] = 30  # seconds
PYRAMID_DEFAULT_REST_BETWEEN_ROUNDS: Final[int] = 120  # seconds

# Editor bounds (enforced at the CLI, not by the generator)
PYRAMID_MAX_TOTAL_SETS: Final[int] = 15
PYRAMID_MAX_REPS_LIMIT: Final[int] = 50
PYRAMID_MAX_ROUNDS: Final[int] = 5
PYRAMID_MAX_REST_BETWEEN_SETS: Final[int] = 300
PYRAMID_MAX_REST_BETWEEN_ROUNDS: Final[int] = 600

# =============================================================================
# SESSION CONSTRUCTION
# =============================================================================

DEFAULT_SETS_PER_EXERCISE: Final[int] = 4
WEIGHT_INCREMENT: Final[float] = 2.5  # smallest plate step for rounding

# =============================================================================
# GOALS & BODY TRACKING
# =============================================================================

GOAL_PERCENT_CAP: Final[int] = 100
BODY_WEIGHT_DELTA_DAYS: Final[int] = 30  # also used for measurement deltas

# Daily wellness ratings (sleep, energy, soreness)
WELLNESS_MIN: Final[int] = 1
WELLNESS_MAX: Final[int] = 5
WELLNESS_AVERAGE_DAYS: Final[int] = 7

# =============================================================================
# ANALYSIS WINDOWS
# =============================================================================

# Months offered by the period selector (0 = all history)
PERIOD_OPTIONS: Final[tuple[int, ...]] = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 18, 24, 0)
DEFAULT_PERIOD_MONTHS: Final[int] = 3
MONTHLY_ACTIVITY_MONTHS: Final[int] = 6  # calendar months in the activity overview

UNKNOWN_CATEGORY: Final[str] = "Other"

"""
Pyramid set generation.

A pyramid is a rep sequence (e.g. 3-5-8-10-8-5-3) performed one or more
times.  Each performed copy is a *round*: a run of consecutive sets
sharing one ``pyramid_id``.  Sets stay flat on the exercise; structure is
recovered with group_sets_for_display().

Generation is a pure function of PyramidConfig.  Callers regenerate
explicitly; manual per-set edits survive until total_sets, max_reps or
the scheme change (see reconfigure()).
"""

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Sequence

from .calendar import round_half_up
from .config import (
    PYRAMID_DEFAULT_MAX_REPS,
    PYRAMID_DEFAULT_REST_BETWEEN_ROUNDS,
    PYRAMID_DEFAULT_REST_BETWEEN_SETS,
    PYRAMID_DEFAULT_ROUNDS,
    PYRAMID_DEFAULT_SCHEME,
    PYRAMID_DEFAULT_TOTAL_SETS,
)
from .models import (
    Exercise,
    PyramidScheme,
    SetGroup,
    WorkoutSet,
    generate_id,
    renumber_sets,
)

PYRAMID_SCHEMES: tuple[str, ...] = ("ascending", "ascending-descending")

# Fields whose change invalidates manually edited reps
_SHAPE_FIELDS: tuple[str, ...] = ("scheme", "max_reps", "total_sets")


@dataclass
class PyramidConfig:
    """Shape and rest configuration of a pyramid."""

    scheme: PyramidScheme = PYRAMID_DEFAULT_SCHEME  # type: ignore[assignment]
    max_reps: int = PYRAMID_DEFAULT_MAX_REPS
    total_sets: int = PYRAMID_DEFAULT_TOTAL_SETS
    rounds: int = PYRAMID_DEFAULT_ROUNDS
    rest_between_sets: int = PYRAMID_DEFAULT_REST_BETWEEN_SETS  # seconds
    rest_between_rounds: int = PYRAMID_DEFAULT_REST_BETWEEN_ROUNDS  # seconds, rounds > 1 only

    def __post_init__(self) -> None:
        if self.scheme not in PYRAMID_SCHEMES:
            raise ValueError(
                f"Invalid pyramid scheme: {self.scheme}. "
                f"Valid: {', '.join(PYRAMID_SCHEMES)}"
            )
        self.rounds = max(1, self.rounds)
        self.rest_between_sets = max(0, self.rest_between_sets)
        self.rest_between_rounds = max(0, self.rest_between_rounds)


def generate_reps(total_sets: int, max_reps: int, scheme: str) -> list[int]:
    """
    Compute the rep sequence of a pyramid.

    Ascending: set i (1-indexed) gets round(i/total_sets × max_reps).

    Ascending-descending: peak = total_sets // 2 (0-indexed) and
    n = peak + 1.  Index i ≤ peak gets ratio (i+1)/n, later indices get
    (total_sets-i)/n, mirroring the climb.  For even totals the peak
    straddles the midpoint.

    Every entry is at least 1.

    Args:
        total_sets: Number of sets in one round
        max_reps: Reps at the peak
        scheme: "ascending" or "ascending-descending"

    Returns:
        Rep counts, empty if total_sets or max_reps is not positive
    """
    if total_sets <= 0 or max_reps <= 0:
        return []
    if total_sets == 1:
        return [max_reps]

    if scheme == "ascending":
        return [
            max(1, round_half_up((i + 1) / total_sets * max_reps))
            for i in range(total_sets)
        ]

    peak = total_sets // 2
    ascending_len = peak + 1
    reps = []
    for i in range(total_sets):
        if i <= peak:
            ratio = (i + 1) / ascending_len
        else:
            ratio = (total_sets - 1 - i + 1) / ascending_len
        reps.append(max(1, round_half_up(ratio * max_reps)))
    return reps


def regenerate(config: PyramidConfig) -> list[int]:
    """Rep sequence for a configuration."""
    return generate_reps(config.total_sets, config.max_reps, config.scheme)


def override_rep(reps: Sequence[int], index: int, value: int) -> list[int]:
    """Return a copy of reps with one entry manually set (minimum 1)."""
    if not 0 <= index < len(reps):
        raise IndexError(f"Set index {index} out of range (0..{len(reps) - 1})")
    updated = list(reps)
    updated[index] = max(1, value)
    return updated


def reconfigure(
    config: PyramidConfig,
    reps: Sequence[int],
    **changes,
) -> tuple[PyramidConfig, list[int]]:
    """
    Apply configuration changes, regenerating reps only when the shape changes.

    Changing rounds or rest intervals keeps manually edited reps.

    Returns:
        (new_config, reps)
    """
    new_config = replace(config, **changes)
    if any(getattr(new_config, f) != getattr(config, f) for f in _SHAPE_FIELDS):
        return new_config, regenerate(new_config)
    return new_config, list(reps)


def config_for_edit(reps: Sequence[int]) -> PyramidConfig:
    """Configuration pre-filled from an existing rep pattern."""
    if not reps:
        return PyramidConfig()
    return PyramidConfig(max_reps=max(reps), total_sets=len(reps))


def total_reps(reps: Sequence[int], rounds: int = 1) -> int:
    return sum(reps) * max(1, rounds)


def pattern_of(sets: Iterable[WorkoutSet]) -> str:
    """Joined rep pattern of a round, e.g. ``"3-5-8-10-8-5-3"``."""
    return "-".join(str(s.reps) for s in sets)


def parse_pattern(pattern: str) -> list[int]:
    return [int(part) for part in pattern.split("-") if part.strip()]


def is_placeholder(s: WorkoutSet) -> bool:
    """A normal set nobody has touched yet (weight 0, reps 0, not completed)."""
    return s.pyramid_id is None and s.is_blank and not s.completed


def _round_rests(
    count: int,
    round_index: int,
    rounds: int,
    rest_between_sets: int,
    rest_between_rounds: int,
) -> list[int]:
    rests = [rest_between_sets] * count
    if count and round_index < rounds - 1:
        rests[-1] = rest_between_rounds
    return rests


def build_round(
    reps: Sequence[int],
    pyramid_id: str,
    rests: Sequence[int],
    new_id: Callable[[], str] = generate_id,
) -> list[WorkoutSet]:
    """Fresh unnumbered sets for one round."""
    return [
        WorkoutSet(
            id=new_id(),
            set_number=0,
            reps=r,
            weight=0.0,
            rest_time=rest,
            pyramid_id=pyramid_id,
        )
        for r, rest in zip(reps, rests)
    ]


def apply_pyramid(
    exercise: Exercise,
    reps: Sequence[int],
    rounds: int = PYRAMID_DEFAULT_ROUNDS,
    rest_between_sets: int = PYRAMID_DEFAULT_REST_BETWEEN_SETS,
    rest_between_rounds: int = PYRAMID_DEFAULT_REST_BETWEEN_ROUNDS,
    new_id: Callable[[], str] = generate_id,
) -> Exercise:
    """
    Add a generated pyramid to an exercise.

    Placeholder sets are replaced by ``rounds`` copies of ``reps``, each
    copy tagged with its own pyramid_id.  The pyramid takes the position
    of the first placeholder (or goes last if there is none); sets that
    already hold data are kept.  Sets are renumbered 1..n.  An empty rep
    sequence leaves the exercise unchanged.

    Args:
        exercise: Exercise to extend
        reps: Rep sequence of one round
        rounds: Number of rounds
        rest_between_sets: Rest after each set within a round
        rest_between_rounds: Rest after the last set of a non-final round
        new_id: Identifier factory for sets and rounds

    Returns:
        New Exercise; the input is not modified
    """
    if not reps:
        return exercise
    rounds = max(1, rounds)
    pyramid_sets: list[WorkoutSet] = []
    for r in range(rounds):
        rests = _round_rests(len(reps), r, rounds, rest_between_sets, rest_between_rounds)
        pyramid_sets.extend(build_round(reps, new_id(), rests, new_id))

    kept: list[WorkoutSet] = []
    insert_at: int | None = None
    for s in exercise.sets:
        if is_placeholder(s):
            if insert_at is None:
                insert_at = len(kept)
            continue
        kept.append(s)
    if insert_at is None:
        insert_at = len(kept)

    sets = kept[:insert_at] + pyramid_sets + kept[insert_at:]
    return replace(exercise, sets=renumber_sets(sets))


def update_pyramid_group(
    exercise: Exercise,
    pyramid_ids: Sequence[str],
    reps: Sequence[int],
    rest_between_sets: int = PYRAMID_DEFAULT_REST_BETWEEN_SETS,
    rest_between_rounds: int = PYRAMID_DEFAULT_REST_BETWEEN_ROUNDS,
    new_id: Callable[[], str] = generate_id,
) -> Exercise:
    """
    Re-apply a rep pattern to every round of a display group.

    Each round keeps its pyramid_id.  Surviving sets (by index within the
    round) keep their id, weight, RIR and completion; extra sets are
    created or dropped to match the new length.  The rebuilt rounds sit
    where the group's first set was.
    """
    ids = [pid for pid in pyramid_ids if any(s.pyramid_id == pid for s in exercise.sets)]
    if not ids:
        return exercise

    rebuilt: list[WorkoutSet] = []
    for r, pid in enumerate(ids):
        old = [s for s in exercise.sets if s.pyramid_id == pid]
        rests = _round_rests(len(reps), r, len(ids), rest_between_sets, rest_between_rounds)
        for i, (rep, rest) in enumerate(zip(reps, rests)):
            if i < len(old):
                rebuilt.append(replace(old[i], reps=max(1, rep), rest_time=rest))
            else:
                rebuilt.extend(build_round([rep], pid, [rest], new_id))

    group = set(ids)
    sets: list[WorkoutSet] = []
    emitted = False
    for s in exercise.sets:
        if s.pyramid_id in group:
            if not emitted:
                sets.extend(rebuilt)
                emitted = True
            continue
        sets.append(s)

    return replace(exercise, sets=renumber_sets(sets))


def delete_pyramid_group(exercise: Exercise, pyramid_ids: Iterable[str]) -> Exercise:
    """Remove every set belonging to any of the rounds and renumber the rest."""
    group = set(pyramid_ids)
    survivors = [s for s in exercise.sets if s.pyramid_id is None or s.pyramid_id not in group]
    return replace(exercise, sets=renumber_sets(survivors))


def group_sets_for_display(sets: Sequence[WorkoutSet]) -> list[SetGroup]:
    """
    Collapse an exercise's flat set list into display groups.

    Consecutive sets sharing a pyramid_id form one round.  Adjacent rounds
    with identical rep patterns merge into a single group reporting a
    round count.  Consecutive normal sets form one group and stop merging.
    Non-adjacent runs of one pyramid_id stay separate.
    """
    runs: list[tuple[str | None, list[WorkoutSet]]] = []
    for s in sets:
        if runs and runs[-1][0] == s.pyramid_id:
            runs[-1][1].append(s)
        else:
            runs.append((s.pyramid_id, [s]))

    groups: list[SetGroup] = []
    for pid, run in runs:
        if pid is None:
            groups.append(SetGroup(pyramid_ids=[], sets=list(run)))
            continue
        pattern = pattern_of(run)
        last = groups[-1] if groups else None
        if last is not None and last.is_pyramid and last.reps_pattern == pattern:
            last.pyramid_ids.append(pid)
            last.sets.extend(run)
            last.round_count += 1
        else:
            groups.append(
                SetGroup(pyramid_ids=[pid], sets=list(run), reps_pattern=pattern, round_count=1)
            )
    return groups


def expand_group(group: SetGroup) -> list[tuple[str | None, list[WorkoutSet]]]:
    """The rounds of a group as ``(pyramid_id, sets)``; normal groups yield one entry."""
    if not group.is_pyramid:
        return [(None, list(group.sets))]
    rounds: list[tuple[str | None, list[WorkoutSet]]] = []
    for pid in group.pyramid_ids:
        rounds.append((pid, [s for s in group.sets if s.pyramid_id == pid]))
    return rounds


def flatten_groups(groups: Iterable[SetGroup]) -> list[WorkoutSet]:
    return [s for g in groups for s in g.sets]

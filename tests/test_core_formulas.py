"""
Formula-focused unit tests for the lift-log core.

Values are hand-computed from the documented formulas (Epley, pyramid
ratios, deload ratio, heatmap percentiles) and pinned exactly.
"""

import itertools
from dataclasses import replace
from datetime import date

import pytest

from lift_log.core.analytics import (
    average_weekly_volume,
    best_streak,
    calendar_heatmap,
    compare_sessions,
    current_streak,
    deload_due,
    deload_status,
    monthly_activity,
    muscle_frequency,
    recent_progress,
    sessions_named,
    streak_stats,
    training_summary,
    volume_tier,
    week_comparison,
    weekly_volume,
)
from lift_log.core.calendar import (
    day_type_for,
    in_window,
    iso_week,
    iso_week_year,
    months_ago,
    parse_timestamp,
    round_half_up,
    round_to_increment,
    to_date,
    week_key,
    window_start,
)
from lift_log.core.goals import (
    best_weight,
    goal_progress,
    measurement_stats,
    progress_percent,
    weight_stats,
    wellness_stats,
)
from lift_log.core.models import BodyWeight, Exercise, Goal, Measurement, Wellness, Workout, WorkoutSet
from lift_log.core.onerm import (
    classify_zone,
    estimate_1rm,
    load_for_percent,
    percent_of_rm,
    percentage_table,
    personal_records,
    strength_curve,
)
from lift_log.core.progression import apply_suggestion, last_session, suggest
from lift_log.core.pyramid import (
    PyramidConfig,
    apply_pyramid,
    config_for_edit,
    delete_pyramid_group,
    expand_group,
    flatten_groups,
    generate_reps,
    group_sets_for_display,
    override_rep,
    reconfigure,
    total_reps,
    update_pyramid_group,
)
from lift_log.core.superset import assign_superset_group, render_groups, superset_groups_in_use

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def _set(n: int, weight: float = 0.0, reps: int = 0, rir: int | None = None,
         completed: bool = True) -> WorkoutSet:
    return WorkoutSet(id=f"s{n}", set_number=n, reps=reps, weight=weight, rir=rir, completed=completed)


def _ex(name: str, sets: list[WorkoutSet], order: int = 0, group: int | None = None) -> Exercise:
    return Exercise(id=f"{name}-{order}", name=name, sets=sets, exercise_order=order, superset_group=group)


def _workout(wid: str, day: str, exercises: list[Exercise], completed: bool = True,
             name: str = "Push") -> Workout:
    return Workout(
        id=wid,
        date=day,
        day_type=day_type_for(day),
        session_name=name,
        exercises=exercises,
        completed=completed,
    )


def _lift(wid: str, day: str, weight: float, reps: int, name: str = "Bench press",
          completed: bool = True) -> Workout:
    """Workout with one completed set of one exercise."""
    return _workout(wid, day, [_ex(name, [_set(1, weight, reps)])], completed=completed)


def _placeholders(count: int) -> list[WorkoutSet]:
    return [WorkoutSet(id=f"s{i}", set_number=i) for i in range(1, count + 1)]


# =============================================================================
# Rounding and temporal utilities
# =============================================================================


class TestRounding:
    def test_half_rounds_up_not_to_even(self):
        """2.5 → 3 (Python's round() would give 2)."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_round_to_increment(self):
        assert round_to_increment(101, 2.5) == pytest.approx(100.0)
        assert round_to_increment(101.25, 2.5) == pytest.approx(102.5)

    def test_non_positive_increment_is_identity(self):
        assert round_to_increment(101.3, 0) == 101.3


class TestTemporal:
    def test_iso_week_across_year_boundary(self):
        """2024-12-30 (Monday) is ISO week 1 of 2025."""
        assert iso_week("2024-12-30") == 1
        assert iso_week_year("2024-12-30") == 2025
        assert week_key("2024-12-30") == "2025-1"

    def test_week_53(self):
        """2021-01-03 (Sunday) still belongs to 2020-W53."""
        assert iso_week("2021-01-03") == 53
        assert iso_week_year("2021-01-03") == 2020

    def test_calendar_date_is_written_date(self):
        """Offsets and a trailing Z are not converted."""
        assert to_date("2024-01-07T23:30:00Z") == date(2024, 1, 7)
        assert to_date("2024-01-07T23:30:00+02:00") == date(2024, 1, 7)
        assert parse_timestamp("2024-01-07").hour == 0

    def test_invalid_timestamp_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")

    def test_months_ago_clamps_day(self):
        assert months_ago(date(2024, 5, 31), 3) == date(2024, 2, 29)
        assert months_ago(date(2024, 1, 31), 1) == date(2023, 12, 31)
        assert months_ago(date(2024, 3, 15), 12) == date(2023, 3, 15)

    def test_window(self):
        now = date(2024, 5, 31)
        assert window_start(0, now) is None
        assert in_window("2019-01-01", 0, now)
        assert in_window("2024-02-29", 3, now)
        assert not in_window("2024-02-28T23:59:00", 3, now)

    def test_day_type(self):
        assert day_type_for("2024-01-01") == "monday"
        assert day_type_for("2024-01-07T10:00:00") == "sunday"


# =============================================================================
# 1RM and training zones
# =============================================================================


class TestOneRM:
    def test_single_rep_returns_weight(self):
        assert estimate_1rm(100, 1) == 100

    def test_zero_inputs(self):
        assert estimate_1rm(100, 0) == 0
        assert estimate_1rm(0, 5) == 0

    def test_epley(self):
        """100 × (1 + 8/30) = 126.67 → 127."""
        assert estimate_1rm(100, 8) == 127
        assert estimate_1rm(100, 10) == 133

    def test_percent_of_rm(self):
        assert percent_of_rm(80, 100) == 80
        assert percent_of_rm(67.5, 90) == 75
        assert percent_of_rm(80, None) is None
        assert percent_of_rm(80, 0) is None

    @pytest.mark.parametrize(
        "percent, zone",
        [
            (100, "maximal-strength"),
            (90, "maximal-strength"),
            (89, "strength-hypertrophy"),
            (80, "strength-hypertrophy"),
            (79, "hypertrophy"),
            (70, "hypertrophy"),
            (69, "endurance"),
            (60, "endurance"),
            (59, None),
            (None, None),
        ],
    )
    def test_zone_lower_bounds_inclusive(self, percent, zone):
        assert classify_zone(percent) == zone

    def test_load_for_percent(self):
        assert load_for_percent(150, 75) == pytest.approx(112.5)
        assert load_for_percent(0, 75) == 0.0

    def test_percentage_table(self):
        rows = percentage_table(100)
        assert [r.percent for r in rows] == [95, 90, 85, 80, 75, 70, 65, 60, 55, 50]
        assert rows[0].load == pytest.approx(95.0)
        assert rows[0].zone == "maximal-strength"
        assert rows[-1].zone is None

    def test_personal_records(self):
        """Case-insensitive key, first-seen name, unloaded exercises omitted."""
        workouts = [
            _workout("w1", "2024-01-01", [
                _ex("Bench press", [_set(1, 100, 5)]),
                _ex("Pull-up", [_set(1, 0, 10)], order=1),
            ]),
            _workout("w2", "2024-01-08", [
                _ex("bench press", [_set(1, 105, 1)]),
                _ex("Back squat", [_set(1, 140, 5), _set(2, 140, 5)], order=1),
            ]),
        ]
        records = personal_records(workouts)

        assert [r.name for r in records] == ["Back squat", "Bench press"]
        bench = records[1]
        assert bench.max_weight == 105
        assert bench.max_weight_date == "2024-01-08"
        assert bench.max_1rm == 117  # 100 × (1 + 5/30) = 116.67
        assert bench.max_volume == 500
        assert records[0].max_volume == 1400

    def test_strength_curve(self):
        workouts = [
            _lift("w1", "2024-01-01", 100, 5),
            _lift("w2", "2024-01-03", 60, 10, name="Row"),
            _lift("w3", "2024-01-08", 100, 8),
        ]
        points = strength_curve(workouts, ["Bench press"])
        assert [p.date for p in points] == ["2024-01-01", "2024-01-08"]
        assert [p.values["Bench press"] for p in points] == [117, 127]


# =============================================================================
# Pyramid generation
# =============================================================================


class TestPyramidReps:
    def test_ascending_descending_seven_sets(self):
        """Ratios 1/4, 2/4, 3/4, 1, 3/4, 2/4, 1/4 of 10."""
        assert generate_reps(7, 10, "ascending-descending") == [3, 5, 8, 10, 8, 5, 3]

    def test_ascending_descending_even_total(self):
        assert generate_reps(6, 9, "ascending-descending") == [2, 5, 7, 9, 5, 2]

    def test_ascending(self):
        assert generate_reps(5, 10, "ascending") == [2, 4, 6, 8, 10]
        assert generate_reps(4, 10, "ascending") == [3, 5, 8, 10]

    def test_single_set(self):
        assert generate_reps(1, 12, "ascending") == [12]
        assert generate_reps(1, 12, "ascending-descending") == [12]

    def test_minimum_one_rep(self):
        assert generate_reps(7, 1, "ascending-descending") == [1] * 7

    def test_non_positive_inputs(self):
        assert generate_reps(0, 10, "ascending") == []
        assert generate_reps(5, 0, "ascending") == []

    def test_config_rejects_unknown_scheme(self):
        with pytest.raises(ValueError):
            PyramidConfig(scheme="zigzag")

    def test_override_rep(self):
        reps = [3, 5, 8]
        assert override_rep(reps, 1, 0) == [3, 1, 8]
        assert reps == [3, 5, 8]
        with pytest.raises(IndexError):
            override_rep(reps, 3, 4)

    def test_reconfigure_keeps_manual_edits_for_rounds(self):
        edited = [3, 5, 9, 10, 8, 5, 3]
        config, reps = reconfigure(PyramidConfig(), edited, rounds=3, rest_between_sets=45)
        assert reps == edited
        assert config.rounds == 3
        assert config.rest_between_sets == 45

    def test_reconfigure_regenerates_on_shape_change(self):
        _, reps = reconfigure(PyramidConfig(), [3, 5, 9, 10, 8, 5, 3], max_reps=8)
        assert reps == [2, 4, 6, 8, 6, 4, 2]

    def test_config_for_edit(self):
        config = config_for_edit([3, 5, 8, 5, 3])
        assert config.max_reps == 8
        assert config.total_sets == 5

    def test_total_reps(self):
        assert total_reps([3, 5, 8, 10, 8, 5, 3], 2) == 84


class TestPyramidSets:
    def test_apply_replaces_placeholders_with_rounds(self):
        exercise = _ex("Bench press", _placeholders(4))
        result = apply_pyramid(exercise, [3, 5, 8], rounds=2, rest_between_sets=30,
                               rest_between_rounds=120, new_id=_ids("p"))

        assert [s.reps for s in result.sets] == [3, 5, 8, 3, 5, 8]
        assert [s.set_number for s in result.sets] == [1, 2, 3, 4, 5, 6]
        assert [s.pyramid_id for s in result.sets] == ["p1"] * 3 + ["p5"] * 3
        assert [s.rest_time for s in result.sets] == [30, 30, 120, 30, 30, 30]
        assert len(exercise.sets) == 4

    def test_apply_keeps_filled_sets(self):
        filled = _set(1, 60, 8, completed=False)
        exercise = _ex("Bench press", [filled, *_placeholders(3)[1:]])
        result = apply_pyramid(exercise, [3, 5], new_id=_ids("p"))

        assert result.sets[0].id == "s1"
        assert result.sets[0].weight == 60
        assert [s.reps for s in result.sets[1:]] == [3, 5]
        assert [s.set_number for s in result.sets] == [1, 2, 3]

    def test_apply_without_placeholders_appends(self):
        exercise = _ex("Bench press", [_set(1, 60, 8)])
        result = apply_pyramid(exercise, [3, 5], new_id=_ids("p"))
        assert result.sets[0].id == "s1"
        assert [s.pyramid_id for s in result.sets[1:]] == ["p1", "p1"]

    def test_completed_blank_set_is_not_a_placeholder(self):
        exercise = _ex("Bench press", [WorkoutSet(id="done", set_number=1, completed=True)])
        result = apply_pyramid(exercise, [3], new_id=_ids("p"))
        assert [s.id for s in result.sets] == ["done", "p2"]

    def test_update_group_keeps_ids_and_data(self):
        exercise = apply_pyramid(_ex("Bench press", _placeholders(1)), [3, 5, 8], rounds=2,
                                 new_id=_ids("p"))
        first = exercise.sets[0]
        exercise = replace(exercise, sets=[replace(first, weight=40.0, completed=True), *exercise.sets[1:]])

        result = update_pyramid_group(exercise, ["p1", "p5"], [4, 6], rest_between_sets=30,
                                      rest_between_rounds=120, new_id=_ids("n"))

        assert [s.reps for s in result.sets] == [4, 6, 4, 6]
        assert [s.id for s in result.sets] == ["p2", "p3", "p6", "p7"]
        assert [s.pyramid_id for s in result.sets] == ["p1", "p1", "p5", "p5"]
        assert result.sets[0].weight == 40.0
        assert result.sets[0].completed
        assert [s.rest_time for s in result.sets] == [30, 120, 30, 30]

    def test_update_group_grows_rounds(self):
        exercise = apply_pyramid(_ex("Bench press", []), [3, 5], new_id=_ids("p"))
        result = update_pyramid_group(exercise, ["p1"], [3, 5, 8], new_id=_ids("n"))
        assert [s.reps for s in result.sets] == [3, 5, 8]
        assert result.sets[2].id == "n1"
        assert result.sets[2].pyramid_id == "p1"

    def test_delete_group_renumbers(self):
        exercise = _ex("Bench press", [_set(1, 60, 8)])
        exercise = apply_pyramid(exercise, [3, 5, 8], new_id=_ids("p"))
        exercise = replace(exercise, sets=[*exercise.sets, _set(9, 70, 5)])

        result = delete_pyramid_group(exercise, ["p1"])
        assert [s.id for s in result.sets] == ["s1", "s9"]
        assert [s.set_number for s in result.sets] == [1, 2]

    def test_identical_rounds_merge_for_display(self):
        exercise = apply_pyramid(_ex("Bench press", []), [3, 5, 8], rounds=2, new_id=_ids("p"))
        groups = group_sets_for_display(exercise.sets)

        assert len(groups) == 1
        assert groups[0].round_count == 2
        assert groups[0].reps_pattern == "3-5-8"
        assert [pid for pid, _ in expand_group(groups[0])] == ["p1", "p5"]
        assert flatten_groups(groups) == exercise.sets

    def test_normal_sets_break_merging(self):
        one = apply_pyramid(_ex("Bench press", []), [3, 5], new_id=_ids("a"))
        two = apply_pyramid(_ex("Bench press", []), [3, 5], new_id=_ids("b"))
        sets = [*one.sets, _set(9, 60, 8), *two.sets]
        groups = group_sets_for_display(sets)

        assert [g.is_pyramid for g in groups] == [True, False, True]
        assert expand_group(groups[1]) == [(None, [sets[2]])]
        assert flatten_groups(groups) == sets

    def test_different_patterns_stay_separate(self):
        one = apply_pyramid(_ex("Bench press", []), [3, 5], new_id=_ids("a"))
        two = apply_pyramid(_ex("Bench press", []), [4, 6], new_id=_ids("b"))
        groups = group_sets_for_display([*one.sets, *two.sets])
        assert [g.reps_pattern for g in groups] == ["3-5", "4-6"]

    def test_empty_rep_sequence_leaves_exercise_unchanged(self):
        exercise = _ex("Bench press", _placeholders(4))
        result = apply_pyramid(exercise, [], rounds=3, new_id=_ids("p"))
        assert result.sets == exercise.sets

    def test_regrouping_flattened_groups_is_stable(self):
        """Collapse, expand and collapse again give the same grouping."""
        pyramid = apply_pyramid(_ex("Bench press", []), [3, 5, 8], rounds=3, new_id=_ids("p"))
        other = apply_pyramid(_ex("Bench press", []), [4, 6], new_id=_ids("q"))
        sets = [*pyramid.sets, _set(20, 60, 8), *other.sets]

        groups = group_sets_for_display(sets)
        assert [g.round_count for g in groups] == [3, 0, 1]
        assert group_sets_for_display(flatten_groups(groups)) == groups


# =============================================================================
# Supersets
# =============================================================================


class TestSupersets:
    def _sample(self) -> Workout:
        return _workout("w", "2024-01-01", [
            _ex("A", [], order=0),
            _ex("B", [], order=1, group=1),
            _ex("C", [], order=2),
            _ex("D", [], order=3, group=1),
        ])

    def test_render_groups_collect_members(self):
        groups = render_groups(self._sample().exercises)
        assert [[e.name for e in g.exercises] for g in groups] == [["A"], ["B", "D"], ["C"]]
        assert [g.superset_group for g in groups] == [None, 1, None]

    def test_render_groups_follow_exercise_order(self):
        workout = self._sample()
        reordered = list(reversed(workout.exercises))
        assert [e.name for g in render_groups(reordered) for e in g.exercises] == ["A", "B", "D", "C"]

    def test_assign_and_clear(self):
        workout = self._sample()
        updated = assign_superset_group(workout, "A-0", 2)
        assert updated.exercises[0].superset_group == 2
        assert workout.exercises[0].superset_group is None
        assert superset_groups_in_use(updated) == [1, 2]

        cleared = assign_superset_group(updated, "B-1", 0)
        assert cleared.exercises[1].superset_group is None
        assert cleared.exercises[3].superset_group == 1
        assert assign_superset_group(updated, "A-0", -3).exercises[0].superset_group is None


# =============================================================================
# Progression
# =============================================================================


class TestProgression:
    def _history(self, sets: list[WorkoutSet], name: str = "Bench press") -> list[Workout]:
        return [_workout("w1", "2024-01-01", [_ex(name, sets)])]

    def test_all_sets_with_rir_two_adds_weight(self):
        history = self._history([_set(1, 100, 8, rir=2), _set(2, 100, 8, rir=3)])
        s = suggest(history, "Bench press")
        assert (s.type, s.value, s.label) == ("weight", 2.5, "+2.5kg")

    def test_low_rir_adds_reps(self):
        history = self._history([_set(1, 100, 8, rir=2), _set(2, 100, 8, rir=1)])
        s = suggest(history, "Bench press")
        assert (s.type, s.value, s.label) == ("reps", 1, "+1 rep")

    def test_missing_rir_keeps_load(self):
        history = self._history([_set(1, 100, 8, rir=3), _set(2, 100, 8)])
        assert suggest(history, "Bench press").label == "Same load"

    def test_unfinished_set_keeps_load(self):
        history = self._history([_set(1, 100, 8, rir=3), _set(2, 100, 8, rir=3, completed=False)])
        assert suggest(history, "Bench press").type == "same"

    def test_nothing_completed_keeps_load(self):
        history = self._history([_set(1, 100, 8, rir=3, completed=False)])
        s = suggest(history, "Bench press")
        assert (s.type, s.value) == ("same", 0)

    def test_no_history(self):
        assert last_session([], "Bench press") is None
        assert last_session(self._history([]), "Bench press") is None

    def test_latest_completed_workout_wins(self):
        history = [
            _workout("old", "2024-01-01", [_ex("Bench press", [_set(1, 100, 8, rir=0)])]),
            _workout("new", "2024-01-08", [_ex("bench PRESS", [_set(1, 100, 8, rir=3)])]),
            _workout("draft", "2024-01-09", [_ex("Bench press", [_set(1, 100, 8, rir=0)])],
                     completed=False),
        ]
        assert suggest(history, "Bench Press").type == "weight"

    def test_renamed_exercise_has_no_history(self):
        history = self._history([_set(1, 100, 8, rir=3)])
        assert suggest(history, "Barbell bench") is None

    def test_configurable_step(self):
        history = self._history([_set(1, 100, 8, rir=3)])
        s = suggest(history, "Bench press", weight_step=5)
        assert (s.value, s.label) == (5, "+5kg")

    def test_apply_suggestion_fills_blank_sets_only(self):
        history = self._history([_set(1, 100, 8, rir=2), _set(2, 100, 6, rir=2)])
        last = last_session(history, "Bench press")
        current = _ex("Bench press", [
            WorkoutSet(id="a", set_number=1),
            WorkoutSet(id="b", set_number=2, weight=90),
            WorkoutSet(id="c", set_number=3),
        ])
        result = apply_suggestion(current, last)

        assert (result.sets[0].weight, result.sets[0].reps) == (102.5, 8)
        assert (result.sets[1].weight, result.sets[1].reps) == (90, 0)
        assert result.sets[2].is_blank
        assert current.sets[0].is_blank

    def test_apply_reps_suggestion(self):
        history = self._history([_set(1, 100, 8, rir=0)])
        last = last_session(history, "Bench press")
        result = apply_suggestion(_ex("Bench press", _placeholders(1)), last)
        assert (result.sets[0].weight, result.sets[0].reps) == (100, 9)


# =============================================================================
# Volume and deload
# =============================================================================


class TestVolume:
    def _workouts(self) -> list[Workout]:
        return [
            _workout("w1", "2024-01-01", [_ex("Bench press", [_set(1, 100, 5), _set(2, 100, 5, completed=False)])]),
            _lift("w2", "2024-01-03", 50, 10),
            _lift("w3", "2024-01-08", 80, 10),
        ]

    def test_weekly_volume_counts_completed_sets(self):
        weeks = weekly_volume(self._workouts())
        assert [(w.year, w.week, w.volume) for w in weeks] == [(2024, 1, 1000), (2024, 2, 800)]
        assert average_weekly_volume(weeks) == 900

    def test_year_boundary_shares_bucket(self):
        weeks = weekly_volume([_lift("a", "2024-12-30", 100, 1), _lift("b", "2025-01-02", 100, 1)])
        assert [(w.key, w.volume) for w in weeks] == [("2025-1", 200)]

    def test_window(self):
        weeks = weekly_volume(self._workouts(), months=1, now=date(2024, 2, 5))
        assert [w.week for w in weeks] == [2]

    def test_average_of_nothing(self):
        assert average_weekly_volume([]) == 0


class TestDeload:
    MONDAYS = ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-22"]

    def _weeks(self, volumes: list[float], days: list[str] | None = None) -> list[Workout]:
        days = days or self.MONDAYS
        return [_lift(f"w{i}", d, v, 1) for i, (d, v) in enumerate(zip(days, volumes))]

    def test_four_steady_weeks_due(self):
        status = deload_status(self._weeks([1000, 1000, 1000, 1000]))
        assert status.due
        assert status.mean_volume == pytest.approx(1000)
        assert status.consecutive_weeks == 4

    def test_fewer_than_four_weeks(self):
        assert not deload_due(self._weeks([1000, 1000, 1000]))

    def test_recent_light_week_means_no_deload(self):
        """500 < 0.6 × mean(875) = 525."""
        assert not deload_due(self._weeks([1000, 1000, 500, 1000]))

    def test_week_just_above_ratio_still_due(self):
        """550 ≥ 0.6 × 887.5 = 532.5."""
        assert deload_due(self._weeks([1000, 1000, 550, 1000]))

    def test_zero_volume_week_blocks(self):
        workouts = self._weeks([1000, 1000, 1000, 1000])
        workouts[2] = _workout("w2", self.MONDAYS[2], [_ex("Bench press", [_set(1, 100, 5, completed=False)])])
        assert not deload_due(workouts)

    def test_incomplete_workouts_ignored(self):
        workouts = self._weeks([1000, 1000, 1000, 1000])
        workouts[0] = _lift("w0", self.MONDAYS[0], 1000, 1, completed=False)
        assert not deload_due(workouts)

    def test_consecutive_weeks_stop_at_gap(self):
        days = ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-29"]
        status = deload_status(self._weeks([1000] * 4, days))
        assert status.consecutive_weeks == 1


# =============================================================================
# Streaks and calendar heatmap
# =============================================================================


class TestStreaks:
    TODAY = date(2024, 3, 10)

    def _days(self, days: list[str]) -> list[Workout]:
        return [_lift(f"w{i}", d, 50, 5) for i, d in enumerate(days)]

    def test_current_streak_starts_yesterday_when_today_empty(self):
        workouts = self._days(["2024-03-08", "2024-03-09"])
        assert current_streak(workouts, self.TODAY) == 2
        assert current_streak(workouts + self._days(["2024-03-10"]), self.TODAY) == 3

    def test_best_streak(self):
        days = ["2024-03-01", "2024-03-02", "2024-03-03", "2024-03-04", "2024-03-08", "2024-03-09", "2024-03-10"]
        workouts = self._days(days)
        workouts.append(_lift("skip", "2024-03-07", 50, 5, completed=False))

        stats = streak_stats(workouts, self.TODAY)
        assert (stats.current, stats.best, stats.training_days) == (3, 4, 7)
        assert best_streak(workouts, self.TODAY, lookback_days=5) == 3

    def test_no_workouts(self):
        assert streak_stats([], self.TODAY).current == 0

    def test_streak_breaks_after_a_missed_day(self):
        workouts = self._days(["2024-03-08", "2024-03-09", "2024-03-10"])
        assert current_streak(workouts, date(2024, 3, 10)) == 3
        assert current_streak(workouts, date(2024, 3, 11)) == 3
        assert current_streak(workouts, date(2024, 3, 12)) == 0


class TestHeatmap:
    @pytest.mark.parametrize(
        "volume, tier",
        [(0, 0), (1, 1), (1.5, 2), (2, 2), (3, 3)],
    )
    def test_volume_tier(self, volume, tier):
        assert volume_tier(volume, 1, 2) == tier

    def test_percentile_thresholds(self):
        """Nonzero volumes [100, 200, 300, 400]: p33 = sorted[1], p66 = sorted[2]."""
        workouts = [
            _lift("a", "2024-02-26", 100, 1),
            _lift("b", "2024-02-28", 200, 1),
            _lift("c", "2024-03-01", 300, 1),
            _lift("d", "2024-03-04", 400, 1),
        ]
        heatmap = calendar_heatmap(workouts, today=date(2024, 3, 10), days=14)

        assert heatmap.cells[0].date == "2024-02-26"
        assert heatmap.cells[-1].date == "2024-03-10"
        assert len(heatmap.weeks) == 2
        assert (heatmap.low_threshold, heatmap.high_threshold) == (200, 300)
        tiers = {c.date: c.tier for c in heatmap.cells if c.volume}
        assert tiers == {"2024-02-26": 1, "2024-02-28": 1, "2024-03-01": 2, "2024-03-04": 3}
        assert heatmap.month_columns == [(0, 2), (0, 3)]
        assert heatmap.training_days == 4

    def test_grid_starts_on_monday(self):
        heatmap = calendar_heatmap([], today=date(2024, 3, 13), days=7)
        assert date.fromisoformat(heatmap.cells[0].date).weekday() == 0
        assert (heatmap.low_threshold, heatmap.high_threshold) == (1, 2)
        assert all(c.tier == 0 for c in heatmap.cells)


# =============================================================================
# Comparison and summaries
# =============================================================================


class TestComparison:
    def test_compare_sessions(self):
        a = _workout("a", "2024-01-01", [
            _ex("Bench press", [_set(1, 100, 5), _set(2, 100, 5)]),
            _ex("Back squat", [_set(1, 140, 5)], order=1),
        ])
        b = _workout("b", "2024-01-08", [
            _ex("bench press", [_set(1, 102.5, 5), _set(2, 102.5, 5)]),
            _ex("Row", [_set(1, 60, 10)], order=1),
        ])
        result = compare_sessions(a, b)

        assert [r.name for r in result.exercises] == ["Bench press", "Back squat", "Row"]
        bench, squat, row = result.exercises
        assert bench.weight_diff == pytest.approx(2.5)
        assert bench.reps_diff == 0
        assert bench.volume_diff == pytest.approx(25)
        assert squat.b.volume == 0
        assert squat.volume_diff == pytest.approx(-700)
        assert row.a.max_weight == 0
        assert (result.total_volume_a, result.total_volume_b) == (1700, 1625)
        assert result.volume_delta == pytest.approx(-75)

    def test_sessions_named_newest_first(self):
        workouts = [
            _lift("a", "2024-01-01", 100, 5),
            _lift("b", "2024-01-08", 100, 5),
            _lift("c", "2024-01-15", 100, 5, completed=False),
        ]
        assert [w.id for w in sessions_named(workouts, "Push")] == ["b", "a"]


class TestSummaries:
    def test_training_summary_counts_loaded_sets(self):
        workouts = [
            _workout("a", "2024-01-01", [_ex("Bench press", [_set(1, 100, 5), _set(2, 0, 10), _set(3, 100, 5, completed=False)])]),
            _lift("b", "2024-01-02", 50, 10, completed=False),
        ]
        summary = training_summary(workouts)
        assert (summary.total_sessions, summary.completed_sessions) == (2, 1)
        # completed sets of an unfinished workout still count
        assert (summary.total_volume, summary.total_sets, summary.total_reps) == (1000, 2, 15)

    def test_training_summary_profile_fields(self):
        workouts = [
            replace(_workout("a", "2024-01-01", [_ex("Bench press", []), _ex("Back squat", [], order=1)]),
                    duration=60),
            replace(_workout("b", "2024-01-03", [_ex("bench press", []), _ex("Curl", [], order=1)]),
                    duration=45),
            replace(_workout("c", "2024-01-05", [_ex("Curl", [])], completed=False), duration=30),
        ]
        summary = training_summary(workouts)
        assert summary.total_duration == 105
        assert summary.unique_exercises == 3
        assert (summary.most_worked_exercise, summary.most_worked_sessions) == ("Bench press", 2)

    def test_training_summary_empty(self):
        summary = training_summary([])
        assert (summary.total_duration, summary.unique_exercises) == (0, 0)
        assert summary.most_worked_exercise is None

    def test_monthly_activity_uses_calendar_months(self):
        workouts = [
            _lift("dec", "2023-12-31", 100, 5),
            _lift("jan", "2024-01-31", 100, 5),
            _lift("feb1", "2024-02-01", 100, 5),
            _lift("feb2", "2024-02-29", 100, 5),
            _lift("skip", "2024-02-10", 100, 5, completed=False),
            _lift("mar", "2024-03-20", 100, 5),
        ]
        activity = monthly_activity(workouts, date(2024, 3, 15), months=3)
        assert [(m.month, m.sessions) for m in activity] == [("2024-01", 1), ("2024-02", 2), ("2024-03", 1)]

    def test_monthly_activity_default_span(self):
        activity = monthly_activity([], date(2024, 3, 31))
        assert [m.month for m in activity] == ["2023-10", "2023-11", "2023-12", "2024-01", "2024-02", "2024-03"]
        assert all(m.sessions == 0 for m in activity)

    def test_week_comparison(self):
        workouts = [_lift("last", "2024-03-05", 100, 10), _lift("this", "2024-03-11", 110, 10)]
        week = week_comparison(workouts, date(2024, 3, 13))
        assert (week.this_week_sessions, week.last_week_sessions) == (1, 1)
        assert week.volume_change_percent == 10

    def test_week_comparison_empty_last_week(self):
        week = week_comparison([_lift("this", "2024-03-11", 110, 10)], date(2024, 3, 13))
        assert week.volume_change_percent == 0

    def test_muscle_frequency(self):
        categories = {"bench press": "Chest", "back squat": "Legs"}
        workouts = [
            _workout("a", "2024-01-01", [_ex("Bench press", []), _ex("Back squat", [], order=1)]),
            _workout("b", "2024-01-03", [_ex("bench press", []), _ex("Curl", [], order=1)], completed=False),
        ]
        frequency = muscle_frequency(workouts, categories)
        assert frequency[0] == ("Chest", 2)
        assert dict(frequency) == {"Chest": 2, "Legs": 1, "Other": 1}

    def test_recent_progress(self):
        workouts = [_lift("a", "2024-01-01", 100, 5), _lift("b", "2024-01-08", 105, 5)]
        assert recent_progress(workouts) == [("Bench press", 100, 105)]


# =============================================================================
# Goals and body weight
# =============================================================================


class TestGoals:
    def test_best_weight_is_case_insensitive_and_completed_only(self):
        workouts = [
            _lift("a", "2024-01-01", 100, 5, name="bench press"),
            _workout("b", "2024-01-08", [_ex("Bench Press", [_set(1, 120, 1, completed=False)])]),
        ]
        assert best_weight(workouts, "Bench press") == 100

    @pytest.mark.parametrize(
        "best, target, percent",
        [(80, 100, 80), (150, 100, 100), (1, 3, 33), (2, 3, 67), (50, 0, 0)],
    )
    def test_progress_percent(self, best, target, percent):
        assert progress_percent(best, target) == percent

    def test_goal_progress(self):
        goals = [Goal(id="g1", exercise_name="Bench press", target_weight=100),
                 Goal(id="g2", exercise_name="Back squat", target_weight=200)]
        progress = goal_progress(goals, [_lift("a", "2024-01-01", 100, 1)])
        assert [(p.percent, p.achieved) for p in progress] == [(100, True), (0, False)]

    def test_weight_stats(self):
        entries = [
            BodyWeight(id="1", date="2024-01-01", weight=80),
            BodyWeight(id="2", date="2024-02-01", weight=79),
            BodyWeight(id="3", date="2024-03-01", weight=78),
        ]
        stats = weight_stats(entries, today=date(2024, 3, 10))
        assert (stats.current, stats.minimum, stats.maximum) == (78, 78, 80)
        assert stats.delta_30_days == pytest.approx(-1)

    def test_weight_stats_without_old_entry(self):
        stats = weight_stats([BodyWeight(id="1", date="2024-03-01", weight=78)], today=date(2024, 3, 10))
        assert stats.delta_30_days is None
        assert weight_stats([]) is None


class TestBodyTracking:
    def test_measurement_clamps_value_and_checks_type(self):
        assert Measurement(id="m", date="2024-01-01", type="arms", value=-3).value == 0.0
        with pytest.raises(ValueError):
            Measurement(id="m", date="2024-01-01", type="bras", value=30)

    def test_wellness_ratings_are_clamped(self):
        entry = Wellness(id="w", date="2024-01-01", sleep_quality=9, energy_level=0, muscle_soreness=3)
        assert (entry.sleep_quality, entry.energy_level, entry.muscle_soreness) == (5, 1, 3)

    def test_measurement_stats_per_type(self):
        entries = [
            Measurement(id="1", date="2024-01-01", type="arms", value=35),
            Measurement(id="2", date="2024-02-20", type="arms", value=36),
            Measurement(id="3", date="2024-03-05", type="arms", value=36.5),
            Measurement(id="4", date="2024-03-01", type="waist", value=80),
        ]
        stats = measurement_stats(entries, today=date(2024, 3, 10))

        assert [s.type for s in stats] == ["arms", "waist"]
        assert (stats[0].current, stats[0].date) == (36.5, "2024-03-05")
        assert stats[0].delta == pytest.approx(1.5)
        assert stats[1].delta is None
        assert measurement_stats([]) == []

    def test_wellness_stats_average_recent_days(self):
        entries = [
            Wellness(id="old", date="2024-03-01", sleep_quality=1, energy_level=1, muscle_soreness=5),
            Wellness(id="a", date="2024-03-08", sleep_quality=4, energy_level=3, muscle_soreness=2),
            Wellness(id="b", date="2024-03-10", sleep_quality=5, energy_level=4, muscle_soreness=1, notes="ok"),
        ]
        stats = wellness_stats(entries, today=date(2024, 3, 10), days=7)

        assert stats.entries == 2
        assert (stats.average_sleep, stats.average_energy, stats.average_soreness) == (4.5, 3.5, 1.5)
        assert stats.latest.id == "b"
        assert wellness_stats(entries[:1], today=date(2024, 3, 10), days=7) is None

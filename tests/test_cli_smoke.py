"""
Smoke tests for the lift-log CLI.

Tests basic functionality:
- App runs without errors
- The data directory initializes
- Workouts can be logged, listed and deleted
- A draft goes from start to finish with a pyramid
- Analytics, goal and body-tracking commands produce JSON
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lift_log.cli.main import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch):
    """Keep user settings and catalog overrides out of the tests."""
    with tempfile.TemporaryDirectory() as home:
        monkeypatch.setenv("LIFT_LOG_HOME", home)
        yield Path(home)


@pytest.fixture
def temp_data_dir():
    """Create a temporary data directory with an initialized log."""
    with tempfile.TemporaryDirectory() as tmpdir:
        data_dir = Path(tmpdir)
        result = runner.invoke(app, ["init", "--data-dir", str(data_dir)])
        assert result.exit_code == 0
        yield data_dir


def _run(data_dir: Path, *args: str):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)])


def _json(data_dir: Path, *args: str):
    result = _run(data_dir, *args, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def _log(data_dir: Path, day: str, sets: str = "100x5@2, 100x5@3", exercise: str = "Bench press",
         name: str = "Push"):
    result = _run(data_dir, "log", "-e", exercise, "-s", sets, "--date", day, "--name", name)
    assert result.exit_code == 0, result.output
    return result


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and lists its commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "draft-start" in result.output

    def test_init_creates_log(self):
        """Test init creates the workout log."""
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = Path(tmpdir) / "lifts"
            result = runner.invoke(app, ["init", "--data-dir", str(data_dir)])
            assert result.exit_code == 0
            assert (data_dir / "workouts.jsonl").exists()

            again = runner.invoke(app, ["init", "--data-dir", str(data_dir)])
            assert again.exit_code == 0
            assert "already exists" in again.output

    def test_missing_log_fails(self):
        """Commands reading history exit 1 before init."""
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(app, ["history", "--data-dir", tmpdir])
            assert result.exit_code == 1
            assert "init" in result.output

    def test_log_adds_to_history(self, temp_data_dir):
        """Test log stores completed sets."""
        _log(temp_data_dir, "2024-01-01")
        workouts = _json(temp_data_dir, "history")

        assert len(workouts) == 1
        workout = workouts[0]
        assert workout["completed"]
        assert workout["session_name"] == "Push"
        assert workout["day_type"] == "monday"
        assert workout["date"].startswith("2024-01-01")
        sets = workout["exercises"][0]["sets"]
        assert [(s["weight"], s["reps"], s["rir"]) for s in sets] == [(100.0, 5, 2), (100.0, 5, 3)]
        assert all(s["completed"] for s in sets)

    def test_log_defaults_to_day_program_name(self, temp_data_dir):
        result = _run(temp_data_dir, "log", "-e", "Back squat", "-s", "140x5", "--date", "2024-01-01")
        assert result.exit_code == 0
        assert _json(temp_data_dir, "history")[0]["session_name"] == "Snatch session"

    def test_log_rejects_bad_input(self, temp_data_dir):
        """Mismatched pairs, bad set notation and bad dates exit 1."""
        assert _run(temp_data_dir, "log", "-e", "Bench press", "-e", "Dip", "-s", "100x5").exit_code == 1
        assert _run(temp_data_dir, "log", "-e", "Bench press", "-s", "100 for 5").exit_code == 1
        assert _run(temp_data_dir, "log", "-e", "Dip", "-s", "0x10", "--date", "2024-13-01").exit_code == 1
        assert _json(temp_data_dir, "history") == []

    def test_delete_workout(self, temp_data_dir):
        _log(temp_data_dir, "2024-01-01")
        workout_id = _json(temp_data_dir, "history")[0]["id"]

        result = _run(temp_data_dir, "delete", workout_id[:8], "--yes")
        assert result.exit_code == 0
        assert _json(temp_data_dir, "history") == []
        assert _run(temp_data_dir, "delete", "nope", "--yes").exit_code == 1

    def test_history_limit(self, temp_data_dir):
        _log(temp_data_dir, "2024-01-01")
        _log(temp_data_dir, "2024-01-08")
        workouts = _json(temp_data_dir, "history", "--limit", "1")
        assert [w["date"][:10] for w in workouts] == ["2024-01-08"]


class TestDraftFlow:
    """Draft lifecycle from start to finish."""

    def test_pyramid_draft_to_history(self, temp_data_dir):
        """Empty draft → exercise → pyramid → set edits → finished workout."""
        assert _run(temp_data_dir, "draft-start", "--empty", "--day", "monday").exit_code == 0
        assert _run(temp_data_dir, "draft-add", "Bench press", "--no-prefill").exit_code == 0
        assert _run(temp_data_dir, "draft-pyramid", "1").exit_code == 0

        draft = _json(temp_data_dir, "draft-show")
        sets = draft["workout"]["exercises"][0]["sets"]
        assert [s["reps"] for s in sets] == [3, 5, 8, 10, 8, 5, 3]
        assert [s["set_number"] for s in sets] == [1, 2, 3, 4, 5, 6, 7]
        assert len({s["pyramid_id"] for s in sets}) == 1

        assert _run(temp_data_dir, "draft-set", "1", "1", "-w", "40", "--rir", "3", "--done").exit_code == 0
        assert _run(temp_data_dir, "draft-set", "Bench press", "1", "--copy-weight").exit_code == 0
        assert _run(temp_data_dir, "draft-set", "1", "--all-done").exit_code == 0

        result = _run(temp_data_dir, "draft-finish", "--notes", "pyramid day")
        assert result.exit_code == 0
        assert not (temp_data_dir / "draft.json").exists()

        workout = _json(temp_data_dir, "history")[0]
        assert workout["completed"]
        assert workout["general_notes"] == "pyramid day"
        sets = workout["exercises"][0]["sets"]
        assert all(s["weight"] == 40 and s["completed"] for s in sets)
        assert sets[0]["rir"] == 3

    def test_edit_and_remove_pyramid_group(self, temp_data_dir):
        _run(temp_data_dir, "draft-start", "--empty", "--day", "monday")
        _run(temp_data_dir, "draft-add", "Bench press", "--sets", "0", "--no-prefill")
        assert _run(temp_data_dir, "draft-pyramid", "1", "--pattern", "3-5-3", "--rounds", "2").exit_code == 0

        assert _run(temp_data_dir, "draft-pyramid", "1", "-g", "1", "-o", "2=6").exit_code == 0
        sets = _json(temp_data_dir, "draft-show")["workout"]["exercises"][0]["sets"]
        assert [s["reps"] for s in sets] == [3, 6, 3, 3, 6, 3]

        assert _run(temp_data_dir, "draft-pyramid", "1", "-g", "2").exit_code == 1
        assert _run(temp_data_dir, "draft-pyramid", "1", "-g", "1", "--remove").exit_code == 0
        assert _json(temp_data_dir, "draft-show")["workout"]["exercises"][0]["sets"] == []

    def test_second_draft_needs_force(self, temp_data_dir):
        assert _run(temp_data_dir, "draft-start", "--empty").exit_code == 0
        assert _run(temp_data_dir, "draft-start", "--empty").exit_code == 1
        assert _run(temp_data_dir, "draft-start", "--empty", "--force").exit_code == 0
        assert _run(temp_data_dir, "draft-discard", "--yes").exit_code == 0
        assert _run(temp_data_dir, "draft-show").exit_code == 1

    def test_program_draft_prefills_from_history(self, temp_data_dir):
        """The Monday program starts with Snatch pull; its last sets seed the draft."""
        _log(temp_data_dir, "2024-01-01", sets="60x3@2, 60x3@2", exercise="Snatch pull")
        assert _run(temp_data_dir, "draft-start", "--day", "monday").exit_code == 0

        exercises = _json(temp_data_dir, "draft-show")["workout"]["exercises"]
        assert exercises[0]["name"] == "Snatch pull"
        first_sets = exercises[0]["sets"]
        assert [(s["weight"], s["reps"]) for s in first_sets[:2]] == [(62.5, 3), (62.5, 3)]
        assert first_sets[2]["weight"] == 0

    def test_exercise_editing_and_supersets(self, temp_data_dir):
        _run(temp_data_dir, "draft-start", "--empty")
        _run(temp_data_dir, "draft-add", "Bench press", "--no-prefill")
        _run(temp_data_dir, "draft-add", "Row", "--no-prefill")
        _run(temp_data_dir, "draft-add", "Curl", "--no-prefill")

        assert _run(temp_data_dir, "draft-superset", "1", "1").exit_code == 0
        assert _run(temp_data_dir, "draft-superset", "Curl", "1").exit_code == 0
        assert _run(temp_data_dir, "draft-edit", "row", "--rename", "Pendlay row").exit_code == 0
        assert _run(temp_data_dir, "draft-edit", "9").exit_code == 1

        exercises = _json(temp_data_dir, "draft-show")["workout"]["exercises"]
        assert [e["name"] for e in exercises] == ["Bench press", "Pendlay row", "Curl"]
        assert [e.get("superset_group") for e in exercises] == [1, None, 1]

        assert _run(temp_data_dir, "draft-edit", "Curl", "--remove").exit_code == 0
        exercises = _json(temp_data_dir, "draft-show")["workout"]["exercises"]
        assert [e["exercise_order"] for e in exercises] == [0, 1]

    def test_finish_saves_program(self, temp_data_dir):
        _run(temp_data_dir, "draft-start", "--empty", "--day", "monday")
        _run(temp_data_dir, "draft-add", "Bench press", "--no-prefill")
        assert _run(temp_data_dir, "draft-finish", "--save-program").exit_code == 0

        monday = _json(temp_data_dir, "programs", "--day", "monday")
        assert [p["is_custom"] for p in monday] == [False, True]
        assert monday[1]["exercises"] == ["Bench press"]

        result = _run(temp_data_dir, "programs", "--delete", monday[1]["id"][:8])
        assert result.exit_code == 0
        assert len(_json(temp_data_dir, "programs")) == 7


class TestSuggestionsAndPyramids:
    def test_suggest_json(self, temp_data_dir):
        _log(temp_data_dir, "2024-01-01", sets="100x5@2, 100x5@1")
        data = _json(temp_data_dir, "suggest", "bench press")
        assert data["suggestion"] == {"type": "reps", "value": 1, "label": "+1 rep"}
        assert len(data["last_sets"]) == 2

        assert _json(temp_data_dir, "suggest", "Overhead press") is None

    def test_pyramid_preview(self):
        result = runner.invoke(app, ["pyramid", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["reps"] == [3, 5, 8, 10, 8, 5, 3]

        result = runner.invoke(app, ["pyramid", "-m", "8", "-o", "4=12", "--json"])
        assert json.loads(result.output)["reps"] == [2, 4, 6, 12, 6, 4, 2]

        result = runner.invoke(app, ["pyramid", "--scheme", "ascending", "-s", "5", "--json"])
        assert json.loads(result.output) == {"scheme": "ascending", "reps": [2, 4, 6, 8, 10], "rounds": 1}

        assert runner.invoke(app, ["pyramid", "--scheme", "zigzag"]).exit_code == 1
        assert runner.invoke(app, ["pyramid", "-o", "9=3"]).exit_code == 1

    def test_catalog_search(self):
        result = runner.invoke(app, ["catalog", "squat", "--json"])
        assert result.exit_code == 0
        names = [e["name"] for e in json.loads(result.output)]
        assert "Back squat" in names

    def test_catalog_favorites(self, temp_data_dir):
        assert _run(temp_data_dir, "favorite", "back squat").exit_code == 0
        favorites = _json(temp_data_dir, "catalog", "--favorites")
        assert [e["name"] for e in favorites] == ["Back squat"]
        assert favorites[0]["favorite"] is True
        assert _run(temp_data_dir, "catalog", "--favorites").exit_code == 0

        assert _run(temp_data_dir, "favorite", "Back Squat").exit_code == 0
        assert _json(temp_data_dir, "catalog", "--favorites") == []


class TestAnalysisCommands:
    @pytest.fixture
    def two_weeks(self, temp_data_dir):
        _log(temp_data_dir, "2024-01-01")
        _log(temp_data_dir, "2024-01-08", sets="102.5x5@2, 102.5x5@2")
        return temp_data_dir

    def test_volume(self, two_weeks):
        data = _json(two_weeks, "volume", "-m", "0")
        assert data["weeks"] == [
            {"week": "2024-1", "volume": 1000.0},
            {"week": "2024-2", "volume": 1025.0},
        ]
        assert data["average"] == 1013

    def test_volume_rejects_unknown_period(self, two_weeks):
        assert _run(two_weeks, "volume", "-m", "13").exit_code == 1

    def test_records(self, two_weeks):
        records = _json(two_weeks, "records")
        assert records[0]["name"] == "Bench press"
        assert records[0]["max_weight"] == 102.5
        assert records[0]["max_weight_date"].startswith("2024-01-08")

    def test_compare_sessions(self, two_weeks):
        data = _json(two_weeks, "compare", "--session", "Push")
        assert data["total_volume_a"] == 1000
        assert data["total_volume_b"] == 1025
        assert data["exercises"][0]["weight_diff"] == 2.5

        assert _run(two_weeks, "compare", "--session", "Pull").exit_code == 1

    def test_other_views_run(self, two_weeks):
        assert _json(two_weeks, "deload")["due"] is False
        assert _json(two_weeks, "streak")["training_days"] == 2
        assert "low_threshold" in _json(two_weeks, "calendar")
        assert _json(two_weeks, "summary")["summary"]["completed_sessions"] == 2
        assert _json(two_weeks, "strength", "Bench press", "-m", "0")[1]["values"] == {"Bench press": 120}
        for command in ("volume", "deload", "streak", "calendar", "records", "summary"):
            assert _run(two_weeks, command).exit_code == 0

    def test_summary_profile_and_monthly_activity(self, two_weeks):
        data = _json(two_weeks, "summary")
        assert data["summary"]["unique_exercises"] == 1
        assert (data["summary"]["most_worked_exercise"], data["summary"]["most_worked_sessions"]) == ("Bench press", 2)
        assert len(data["monthly_activity"]) == 6
        assert set(data["monthly_activity"][0]) == {"month", "sessions"}

    def test_one_rep_max(self):
        result = runner.invoke(app, ["1rm", "100", "8", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["estimated_1rm"] == 127
        assert [row["percent"] for row in data["table"]][:2] == [95, 90]
        assert runner.invoke(app, ["1rm", "100", "8"]).exit_code == 0


class TestGoalsAndBodyTracking:
    def test_goal_progress(self, temp_data_dir):
        _log(temp_data_dir, "2024-01-01")
        assert _run(temp_data_dir, "goal-add", "bench press", "200").exit_code == 0
        assert _run(temp_data_dir, "goal-add", "Squat", "-5").exit_code != 0

        goals = _json(temp_data_dir, "goals")
        assert len(goals) == 1
        assert (goals[0]["best_weight"], goals[0]["percent"], goals[0]["achieved"]) == (100.0, 50, False)

        assert _run(temp_data_dir, "goal-delete", goals[0]["id"][:6]).exit_code == 0
        assert _json(temp_data_dir, "goals") == []

    def test_body_weight(self, temp_data_dir):
        assert _run(temp_data_dir, "weight-add", "81.5", "--date", "2024-01-01").exit_code == 0
        assert _run(temp_data_dir, "weight-add", "80", "--date", "2024-01-01").exit_code == 0
        assert _run(temp_data_dir, "weight-add", "80", "--date", "Jan 1").exit_code == 1

        data = _json(temp_data_dir, "weight")
        assert data["entries"] == [{"date": "2024-01-01", "weight": 80.0}]
        assert data["stats"]["current"] == 80.0

    def test_empty_weight(self, temp_data_dir):
        assert _json(temp_data_dir, "weight") == {"stats": None, "entries": []}

    def test_measurements(self, temp_data_dir):
        assert _run(temp_data_dir, "measure-add", "arms", "35", "--date", "2024-01-01").exit_code == 0
        assert _run(temp_data_dir, "measure-add", "Arms", "36.5", "--date", "2024-03-01").exit_code == 0
        assert _run(temp_data_dir, "measure-add", "bras", "30").exit_code == 1
        assert _run(temp_data_dir, "measure-add", "waist", "0").exit_code == 1

        data = _json(temp_data_dir, "measures")
        assert [(s["type"], s["current"]) for s in data["stats"]] == [("arms", 36.5)]
        assert len(data["entries"]) == 2
        assert _run(temp_data_dir, "measures").exit_code == 0

        assert _run(temp_data_dir, "measure-delete", data["entries"][0]["id"][:8]).exit_code == 0
        assert len(_json(temp_data_dir, "measures")["entries"]) == 1

    def test_wellness(self, temp_data_dir):
        assert _run(temp_data_dir, "wellness-add", "--sleep", "4", "--energy", "2", "--notes", "long day").exit_code == 0
        assert _run(temp_data_dir, "wellness-add", "--sleep", "9").exit_code != 0

        data = _json(temp_data_dir, "wellness")
        assert data["stats"]["entries"] == 1
        assert (data["stats"]["average_sleep"], data["stats"]["average_energy"]) == (4.0, 2.0)
        assert data["entries"][0]["notes"] == "long day"
        assert _run(temp_data_dir, "wellness").exit_code == 0

        assert _run(temp_data_dir, "wellness-delete", data["entries"][0]["id"]).exit_code == 0
        assert _json(temp_data_dir, "wellness") == {"stats": None, "entries": []}

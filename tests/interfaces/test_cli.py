"""Tests for the Typer CLI."""

import json
import re

import pytest
from typer.testing import CliRunner

from checkmate import __version__
from checkmate.interfaces.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("CHECKMATE_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


def invoke(*args):
    return runner.invoke(app, list(args))


def added_id(result):
    match = re.search(r"\((task_[^)]+)\)", result.output)
    assert match, result.output
    return match.group(1)


class TestBasics:
    def test_version(self):
        result = invoke("--version")

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self):
        result = invoke()
        assert "task" in result.output


class TestTaskCommands:
    def test_add_list_and_complete(self):
        assert invoke("tag", "add", "Work", "--capacity", "20").exit_code == 0

        result = invoke("task", "add", "Write report", "-p", "Work=3", "--sprint", "current")
        assert result.exit_code == 0, result.output
        task_id = added_id(result)

        listing = invoke("task", "list", "--sprint", "current")
        assert "Write report" in listing.output

        done = invoke("task", "done", task_id)
        assert done.exit_code == 0
        assert "Completed: Write report (+3 points)" in done.output

        again = invoke("task", "done", task_id)
        assert again.exit_code == 1
        assert "completed" in again.output

    def test_bare_points_go_to_untagged(self):
        task_id = added_id(invoke("task", "add", "Chores", "-p", "2"))

        shown = invoke("task", "show", task_id)

        assert "untagged:2" in shown.output

    def test_non_fibonacci_points_rejected(self):
        result = invoke("task", "add", "Bad", "-p", "4")

        assert result.exit_code == 1
        assert "Fibonacci" in result.output

    def test_unknown_tag(self):
        result = invoke("task", "add", "Lost", "-p", "nope=3")

        assert result.exit_code == 1
        assert "Unknown tag" in result.output

    def test_cancel_requires_reason(self):
        task_id = added_id(invoke("task", "add", "Drop me", "-p", "1"))

        assert invoke("task", "cancel", task_id).exit_code == 2
        assert invoke("task", "cancel", task_id, "--reason", "Obsolete").exit_code == 0

    def test_skip_for_day_requires_reason(self):
        task_id = added_id(invoke("task", "add", "Later", "-p", "1"))

        assert invoke("task", "skip", task_id, "--day").exit_code == 1
        result = invoke("task", "skip", task_id, "--day", "--reason", "Waiting")
        assert "Skipped for today" in result.output

    def test_move_and_comment(self):
        task_id = added_id(invoke("task", "add", "Plan", "-p", "1"))

        assert "Moved to sprint" in invoke("task", "move", task_id, "current").output
        assert "Moved to backlog" in invoke("task", "move", task_id, "backlog").output
        assert "Comment added" in invoke("task", "comment", task_id, "Check numbers").output

    def test_recurring_template_and_spawn(self):
        result = invoke("task", "add", "Standup", "-p", "1", "--every", "FREQ=DAILY")
        template_id = added_id(result)

        spawned = invoke("task", "spawn", template_id)

        assert spawned.exit_code == 0
        assert "Spawned: Standup" in spawned.output
        assert "Standup" in invoke("task", "list", "--templates").output


class TestSessionCommands:
    def test_start_and_end(self):
        task_id = added_id(invoke("task", "add", "Deep work", "-p", "3"))

        started = invoke("session", "start", task_id, "--minutes", "50")
        assert "for 50 min" in started.output

        ended = invoke("session", "end", "--focus", "focused")
        assert ended.exit_code == 0, ended.output
        assert "focused" in ended.output

    def test_end_without_session(self):
        result = invoke("session", "end")

        assert result.exit_code == 1
        assert "No session in progress" in result.output

    def test_log_manual_session(self):
        task_id = added_id(invoke("task", "add", "Offline", "-p", "1"))

        result = invoke(
            "session", "log", task_id, "--start", "2025-01-06T09:00", "--end", "2025-01-06T10:30"
        )

        assert result.exit_code == 0
        assert "Logged 1h 30m" in result.output

    def test_log_end_before_start(self):
        task_id = added_id(invoke("task", "add", "Offline", "-p", "1"))

        result = invoke(
            "session", "log", task_id, "--start", "2025-01-06T10:00", "--end", "2025-01-06T09:00"
        )

        assert result.exit_code == 1


class TestSprintAndRoutineCommands:
    def test_health(self):
        invoke("tag", "add", "Work", "--capacity", "20")
        invoke("task", "add", "Big", "-p", "Work=13", "--sprint", "current")
        invoke("task", "add", "Small", "-p", "Work=5", "--sprint", "current")

        result = invoke("sprint", "health")

        assert result.exit_code == 0
        assert "at_risk" in result.output
        assert "day(s) remaining" in result.output

    def test_capacity_override(self):
        invoke("tag", "add", "Work", "--capacity", "20")
        invoke("task", "add", "Big", "-p", "Work=13", "--sprint", "current")

        assert invoke("sprint", "capacity", "Work", "8").exit_code == 0
        assert "off_track" in invoke("sprint", "health").output

    def test_create_on_monday(self):
        result = invoke("sprint", "create", "2025-01-06")

        assert result.exit_code == 1
        assert "Sunday" in result.output

    def test_routine_validation(self):
        assert invoke("routine", "add", "Broken", "--when", "hour >").exit_code == 1
        assert invoke("routine", "add", "Always", "--when", "True").exit_code == 0
        assert "Active: Always" in invoke("routine", "active").output


class TestTopLevelCommands:
    def test_focus(self):
        invoke("task", "add", "First", "-p", "1", "--sprint", "current")
        invoke("task", "add", "Second", "-p", "1", "--sprint", "current")

        result = invoke("focus")

        assert "Focus: First" in result.output
        assert "Second" in result.output

    def test_focus_empty(self):
        assert "Nothing to focus on" in invoke("focus").output

    def test_stats(self):
        task_id = added_id(invoke("task", "add", "Win", "-p", "5"))
        invoke("task", "done", task_id)

        result = invoke("stats")

        assert result.exit_code == 0
        assert "1 task(s), 5 point(s)" in result.output

    def test_export_and_import(self, tmp_path):
        invoke("task", "add", "Keep me", "-p", "1")
        path = tmp_path / "backup.json"

        assert invoke("export", str(path)).exit_code == 0
        assert json.loads(path.read_text(encoding="utf-8"))["tasks"][0]["title"] == "Keep me"

        invoke("task", "add", "Temporary", "-p", "1")
        result = invoke("import", str(path))

        assert result.exit_code == 0
        listing = invoke("task", "list").output
        assert "Keep me" in listing
        assert "Temporary" not in listing

    def test_config(self, home):
        assert invoke("config", "default_session_minutes", "50").exit_code == 0
        assert json.loads((home / "config.json").read_text())["default_session_minutes"] == 50

        assert invoke("config", "default_session_minutes", "zero").exit_code == 1
        assert invoke("config", "nonsense", "1").exit_code == 1

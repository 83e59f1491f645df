"""Tests for routines and active routine selection."""

from datetime import UTC, datetime

import pytest

from checkmate.domain.routine import (
    Routine,
    build_routine_context,
    determine_active_routine,
    is_routine_active,
    task_filter_context,
)
from checkmate.domain.shared import Err, ErrorKind, Ok


def routine(name, priority=5, when="", tasks=""):
    return Routine.create(name, priority, task_filter_expression=tasks, activation_expression=when).value


@pytest.fixture
def context(now):
    # Wednesday 10:00
    return build_routine_context(now)


class TestRoutineModel:
    @pytest.mark.parametrize("priority", [0, 11, -3])
    def test_priority_bounds(self, priority):
        result = Routine.create("Bad", priority)
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_name_required(self):
        assert isinstance(Routine.create("  ", 5), Err)

    def test_update_priority(self):
        assert routine("Deep work").update_priority(9).value.priority == 9
        assert isinstance(routine("Deep work").update_priority(12), Err)

    def test_blank_filter_matches_everything(self, make_task, evaluator):
        assert routine("All").matches(make_task(), evaluator)

    def test_filter_by_tag_name_or_id(self, make_task, evaluator):
        focus = routine("Work only", tasks='hasTag("Work")')
        task = make_task(points={"tag_w1": 3})

        assert focus.matches(task, evaluator, {"tag_w1": "Work"})
        assert not focus.matches(task, evaluator, {"tag_w1": "Home"})
        assert routine("By id", tasks='hasTag("tag_w1")').matches(task, evaluator)

    def test_broken_filter_matches_nothing(self, make_task, evaluator):
        assert not routine("Broken", tasks="points >").matches(make_task(), evaluator)

    def test_task_filter_context(self, make_task, now):
        task = make_task("Report", points={"w": 5, "a": 1}).skip_for_now(now).value

        context = task_filter_context(task, {"w": "Work"})

        assert context["tags"] == ["w", "Work", "a"]
        assert context["points"] == 6
        assert context["title"] == "Report"
        assert context["status"] == "active"
        assert context["location"] == "backlog"
        assert context["is_skipped"] is True


class TestRoutineContext:
    def test_wednesday_morning(self, context):
        variables = context.to_variables()

        assert variables["day_of_week"] == "wed"
        assert variables["hour"] == 10
        assert variables["time"] == 600
        assert variables["is_weekday"] is True
        assert variables["is_weekend"] is False
        assert variables["is_wednesday"] is True
        assert variables["is_monday"] is False

    def test_weekend(self):
        context = build_routine_context(datetime(2025, 1, 11, 8, 30, tzinfo=UTC))

        assert context.day_of_week == "sat"
        assert context.is_weekend
        assert context.time == 8 * 60 + 30


class TestDetermineActiveRoutine:
    def test_highest_priority_active_wins(self, context, evaluator):
        low = routine("Low", 2, when="is_weekday")
        high = routine("High", 8, when="hour >= 9 and hour < 12")
        inactive = routine("Evening", 10, when="hour >= 18")

        result = determine_active_routine([low, high, inactive], context, evaluator)

        assert result == Ok(high)

    def test_ties_keep_repository_order(self, context, evaluator):
        first = routine("First", 5, when="True")
        second = routine("Second", 5, when="True")

        assert determine_active_routine([first, second], context, evaluator).value == first
        assert determine_active_routine([second, first], context, evaluator).value == second

    def test_nothing_active(self, context, evaluator):
        assert determine_active_routine([routine("Never", when="False")], context, evaluator) == Ok(None)

    def test_blank_and_broken_expressions_are_inactive(self, context, evaluator):
        blank = routine("Blank", 9)
        broken = routine("Broken", 9, when="undefined_name > 3")

        assert not is_routine_active(blank, context, evaluator)
        assert not is_routine_active(broken, context, evaluator)
        assert determine_active_routine([blank, broken], context, evaluator) == Ok(None)

    def test_override_bypasses_evaluation(self, context, evaluator):
        forced = routine("Forced", 1, when="False")
        live = routine("Live", 10, when="True")

        result = determine_active_routine([forced, live], context, evaluator, override_id=forced.id)

        assert result.value == forced

    def test_unknown_override(self, context, evaluator):
        result = determine_active_routine([], context, evaluator, override_id="routine_missing")

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.NOT_FOUND

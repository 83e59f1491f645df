"""Tests for the Task aggregate."""

from datetime import UTC, datetime, timedelta

import pytest

from checkmate.domain.shared import Err, ErrorKind, Ok
from checkmate.domain.task import SkipForDay, SkipForNow, Task, TaskStatus
from checkmate.domain.types import BACKLOG, SprintLocation


@pytest.fixture
def completed(make_task, now):
    return make_task("Done already").complete(now).value


@pytest.fixture
def canceled(make_task, now):
    return make_task("Dropped").cancel("No longer needed", now).value


class TestCreate:
    def test_trims_title_and_defaults_to_backlog(self, now):
        task = Task.create("  Write report  ", {"work": 3}, now).value

        assert task.title == "Write report"
        assert task.status is TaskStatus.ACTIVE
        assert task.location == BACKLOG
        assert task.total_points == 3
        assert task.created_at == now

    def test_empty_title_rejected(self, now):
        result = Task.create("   ", {"work": 3}, now)
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_invalid_points_rejected(self, now):
        result = Task.create("Report", {"work": 4}, now)
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_recurring_template_cannot_start_in_sprint(self, now):
        result = Task.create(
            "Weekly review",
            {"work": 1},
            now,
            location=SprintLocation(sprint_id="sprint_1"),
            recurrence="FREQ=WEEKLY",
        )
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.FORBIDDEN

    def test_blank_recurrence_is_not_a_template(self, now):
        task = Task.create("Once", {"work": 1}, now, recurrence="  ").value
        assert not task.is_template

    def test_age_days(self, make_task, now):
        task = make_task(now=now - timedelta(days=3, hours=2))
        assert task.age_days(now) == 3


class TestTerminalStates:
    @pytest.mark.parametrize("fixture", ["completed", "canceled"])
    def test_terminal_tasks_reject_transitions(self, request, fixture, now):
        task = request.getfixturevalue(fixture)

        attempts = [
            task.complete(now),
            task.cancel("again", now),
            task.move_to_sprint("sprint_1"),
            task.move_to_backlog(),
            task.skip_for_now(now),
            task.skip_for_day("tired", now),
            task.start_session(25, now),
        ]

        for result in attempts:
            assert isinstance(result, Err)
            assert result.error.kind is ErrorKind.INVALID_TRANSITION

    def test_complete_sets_timestamp_and_clears_skip(self, make_task, now):
        task = make_task().skip_for_now(now).value
        done = task.complete(now).value

        assert done.status is TaskStatus.COMPLETED
        assert done.completed_at == now
        assert done.skip_state is None

    def test_comments_still_allowed_on_closed_tasks(self, completed, now):
        assert isinstance(completed.add_comment("Retro note", now), Ok)


class TestCancel:
    def test_requires_justification(self, make_task, now):
        result = make_task().cancel("   ", now)
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_records_flagged_comment(self, canceled, now):
        assert canceled.status is TaskStatus.CANCELED
        assert canceled.canceled_at == now
        assert len(canceled.comments) == 1
        assert canceled.comments[0].is_cancel_justification
        assert canceled.comments[0].content == "No longer needed"


class TestSkip:
    def test_skip_for_now(self, make_task, now):
        task = make_task().skip_for_now(now).value

        assert isinstance(task.skip_state, SkipForNow)
        assert not task.is_hidden

    def test_skip_for_day_hides_until_next_utc_midnight(self, make_task, now):
        task = make_task().skip_for_day("Waiting on review", now).value

        assert isinstance(task.skip_state, SkipForDay)
        assert task.is_hidden
        assert task.skip_state.return_at == datetime(2025, 1, 9, tzinfo=UTC)
        comment = task.find_comment(task.skip_state.justification_comment_id)
        assert comment is not None and comment.is_skip_justification

    def test_skip_for_day_requires_justification(self, make_task, now):
        result = make_task().skip_for_day("", now)
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_mark_returned(self, make_task, now):
        task = make_task().skip_for_day("Later", now).value
        returned = task.mark_skip_returned().value

        assert returned.skip_state.returned
        assert not returned.is_hidden

    def test_mark_returned_requires_day_skip(self, make_task):
        result = make_task().mark_skip_returned()
        assert result.error.kind is ErrorKind.INVALID_TRANSITION

    def test_clear_skip_state(self, make_task, now):
        task = make_task().skip_for_now(now).value
        assert task.clear_skip_state().skip_state is None


class TestLocation:
    def test_move_between_sprints_records_history(self, make_task):
        task = make_task().move_to_sprint("sprint_a").value
        task = task.move_to_sprint("sprint_b").value
        task = task.move_to_backlog().value

        assert task.location == BACKLOG
        assert task.sprint_history == ("sprint_a", "sprint_b")

    def test_moving_clears_skip(self, make_task, now):
        task = make_task().skip_for_now(now).value
        assert task.move_to_sprint("sprint_a").value.skip_state is None

    def test_templates_cannot_move(self, make_task):
        template = make_task(recurrence="FREQ=DAILY")
        result = template.move_to_sprint("sprint_a")
        assert result.error.kind is ErrorKind.FORBIDDEN


class TestUpdates:
    def test_update_title_and_description(self, make_task):
        task = make_task().update_title("  Renamed ").value
        task = task.update_description(" Details ").value

        assert task.title == "Renamed"
        assert task.description == "Details"

    def test_blank_title_rejected(self, make_task):
        assert make_task().update_title("  ").error.kind is ErrorKind.VALIDATION

    def test_closed_task_cannot_be_edited(self, completed):
        assert completed.update_description("x").error.kind is ErrorKind.INVALID_TRANSITION

    def test_update_tag_points_replaces_mapping(self, make_task):
        task = make_task(points={"work": 3}).update_tag_points({"admin": 8}).value
        assert task.tag_points.to_dict() == {"admin": 8}

    def test_add_tag_keeps_existing_points(self, make_task):
        task = make_task(points={"work": 3}).add_tag("admin", 1).value
        assert task.tag_points.to_dict() == {"work": 3, "admin": 1}
        assert task.total_points == 4

    def test_add_tag_checks_points(self, make_task):
        result = make_task().add_tag("admin", 4)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_remove_unknown_tag(self, make_task):
        result = make_task().remove_tag("missing")
        assert result.error.kind is ErrorKind.NOT_FOUND

    def test_remove_last_tag_rejected(self, make_task):
        result = make_task(points={"work": 3}).remove_tag("work")
        assert result.error.kind is ErrorKind.VALIDATION


class TestRecurrence:
    def test_spawn_instance_copies_template(self, make_task, now):
        template = make_task("Review", points={"work": 2}, recurrence="FREQ=WEEKLY")
        instance = template.spawn_instance(now + timedelta(days=1)).value

        assert instance.parent_id == template.id
        assert instance.recurrence is None
        assert instance.tag_points == template.tag_points
        assert instance.location == BACKLOG

    def test_spawn_requires_template(self, make_task, now):
        assert isinstance(make_task().spawn_instance(now), Err)


def test_serialization_round_trip(make_task, now):
    task = make_task("Round trip", points={"work": 5, "admin": 1})
    task = task.move_to_sprint("sprint_1").value
    task, _ = task.add_comment("First note", now).value
    task, session_id = task.start_session(25, now).value
    task = task.end_session(session_id, "focused", now + timedelta(minutes=25)).value
    task = task.add_manual_session(now - timedelta(hours=2), now - timedelta(hours=1), "neutral").value
    task = task.skip_for_day("Blocked", now).value

    restored = Task.model_validate_json(task.model_dump_json())

    assert restored == task
    assert isinstance(restored.skip_state, SkipForDay)
    assert restored.location == SprintLocation(sprint_id="sprint_1")
    assert restored.sessions[0].duration_seconds == 25 * 60

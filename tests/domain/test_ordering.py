"""Tests for focus ordering."""

from datetime import timedelta

from checkmate.domain.task import (
    build_focus_queue,
    clear_skipped_for_now,
    partition_for_focus,
    refresh_skip_returns,
    sort_for_focus,
)
from checkmate.domain.types import BACKLOG, SprintLocation


class TestBuildFocusQueue:
    def test_skip_buckets(self, make_task, now):
        a = make_task("A", order=0)
        b = make_task("B", order=1).skip_for_now(now).value
        c = make_task("C", order=2).skip_for_day("Later", now).value

        queue = build_focus_queue([c, b, a])

        assert queue.focus_task.id == a.id
        assert [t.id for t in queue.up_next] == [b.id]
        assert queue.hidden_count == 1

    def test_only_completed_tasks(self, make_task, now):
        done = make_task().complete(now).value

        queue = build_focus_queue([done])

        assert queue.focus_task is None
        assert queue.up_next == []
        assert queue.hidden_count == 0

    def test_skipped_for_now_sinks_below_later_tasks(self, make_task, now):
        first = make_task("First", order=0).skip_for_now(now).value
        second = make_task("Second", order=1)

        assert [t.title for t in sort_for_focus([first, second])] == ["Second", "First"]

    def test_returned_day_skip_is_normal_again(self, make_task, now):
        returned = make_task("Back", order=0).skip_for_day("Later", now).value
        returned = returned.mark_skip_returned().value
        other = make_task("Other", order=1)

        queue = build_focus_queue([other, returned])

        assert queue.focus_task.title == "Back"
        assert queue.hidden_count == 0

    def test_manual_order_then_creation_time(self, make_task, now):
        older = make_task("Older", order=1, now=now)
        newer = make_task("Newer", order=1, now=now + timedelta(minutes=1))
        top = make_task("Top", order=0)

        assert [t.title for t in sort_for_focus([newer, older, top])] == ["Top", "Older", "Newer"]

    def test_templates_and_other_locations_excluded(self, make_task):
        template = make_task("Template", recurrence="FREQ=DAILY")
        in_sprint = make_task("Sprint task").move_to_sprint("sprint_1").value
        in_backlog = make_task("Backlog task")

        queue = build_focus_queue([template, in_sprint, in_backlog], SprintLocation(sprint_id="sprint_1"))
        assert queue.visible == [in_sprint]

        queue = build_focus_queue([template, in_sprint, in_backlog], BACKLOG)
        assert queue.visible == [in_backlog]

    def test_everything_hidden(self, make_task, now):
        hidden = make_task().skip_for_day("Out", now).value

        queue = build_focus_queue([hidden])

        assert queue.focus_task is None
        assert queue.hidden_count == 1


class TestCycleMaintenance:
    def test_clear_skipped_for_now_returns_changed_only(self, make_task, now):
        skipped = make_task("Skipped").skip_for_now(now).value
        hidden = make_task("Hidden").skip_for_day("Later", now).value
        plain = make_task("Plain")

        released = clear_skipped_for_now([skipped, hidden, plain])

        assert [t.id for t in released] == [skipped.id]
        assert released[0].skip_state is None

    def test_refresh_skip_returns_after_midnight(self, make_task, now):
        hidden = make_task().skip_for_day("Later", now).value

        assert refresh_skip_returns([hidden], now + timedelta(hours=1)) == []

        returned = refresh_skip_returns([hidden], hidden.skip_state.return_at)
        assert len(returned) == 1
        assert returned[0].skip_state.returned

    def test_partition_keeps_buckets_ordered(self, make_task, now):
        tasks = [make_task(str(i), order=i).skip_for_now(now).value for i in (2, 0, 1)]

        buckets = partition_for_focus(tasks)

        assert [t.title for t in buckets.skipped_for_now] == ["0", "1", "2"]

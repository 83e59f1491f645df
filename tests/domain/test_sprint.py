"""Tests for sprints and sprint health."""

from datetime import date

import pytest
from pydantic import ValidationError

from checkmate.domain.shared import Err, ErrorKind
from checkmate.domain.sprint import (
    HealthStatus,
    HealthThresholds,
    Sprint,
    calculate_sprint_health,
    classify_load,
    scheduled_points,
    week_start,
    worst_health,
)
from checkmate.domain.tag import Tag


@pytest.fixture
def sprint():
    return Sprint.create("2025-01-05").value


class TestSprint:
    def test_must_start_on_sunday(self):
        result = Sprint.create(date(2025, 1, 6))

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION
        assert "Sunday" in result.error.message

    def test_spans_seven_days(self, sprint):
        assert sprint.start_date == date(2025, 1, 5)
        assert sprint.end_date == date(2025, 1, 11)

    def test_invalid_date_string(self):
        assert isinstance(Sprint.create("next tuesday"), Err)

    def test_week_start(self):
        assert week_start(date(2025, 1, 8)) == date(2025, 1, 5)
        assert week_start(date(2025, 1, 5)) == date(2025, 1, 5)
        assert week_start(date(2025, 1, 11)) == date(2025, 1, 5)

    def test_for_week_of(self):
        assert Sprint.for_week_of(date(2025, 1, 10)).start_date == date(2025, 1, 5)

    def test_calendar_queries(self, sprint):
        assert sprint.contains(date(2025, 1, 11))
        assert not sprint.contains(date(2025, 1, 12))
        assert sprint.is_upcoming(date(2025, 1, 4))
        assert sprint.days_remaining(date(2025, 1, 8)) == 4
        assert sprint.days_remaining(date(2025, 1, 12)) == 0
        assert sprint.days_remaining(date(2025, 1, 1)) == 7

    def test_capacity_override(self, sprint):
        updated = sprint.set_capacity_override("work", 5).value

        assert updated.capacity_for("work", 10) == 5
        assert updated.capacity_for("admin", 10) == 10
        assert updated.clear_capacity_override("work").capacity_for("work", 10) == 10

    def test_negative_capacity_override_rejected(self, sprint):
        result = sprint.set_capacity_override("work", -1)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_labels(self):
        assert Sprint.label(0) == "This Week"
        assert Sprint.label(1) == "Next Week"
        assert Sprint.label(3) == "Sprint +3"


class TestClassifyLoad:
    @pytest.mark.parametrize(
        "scheduled, expected",
        [
            (10, HealthStatus.ON_TRACK),
            (17, HealthStatus.ON_TRACK),
            (18, HealthStatus.AT_RISK),
            (20, HealthStatus.AT_RISK),
            (21, HealthStatus.OFF_TRACK),
            (25, HealthStatus.OFF_TRACK),
        ],
    )
    def test_against_capacity_twenty(self, scheduled, expected):
        ratio, health = classify_load(scheduled, 20)

        assert health is expected
        assert ratio == pytest.approx(scheduled / 20)

    def test_zero_capacity(self):
        assert classify_load(0, 0) == (None, HealthStatus.ON_TRACK)
        assert classify_load(3, 0) == (None, HealthStatus.OFF_TRACK)

    def test_custom_thresholds(self):
        _, health = classify_load(12, 20, HealthThresholds(at_risk=0.5, off_track=0.75))
        assert health is HealthStatus.AT_RISK

    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValidationError):
            HealthThresholds(at_risk=1.2, off_track=1.0)

    def test_worst_health(self):
        assert worst_health([]) is HealthStatus.ON_TRACK
        assert worst_health([HealthStatus.AT_RISK, HealthStatus.ON_TRACK]) is HealthStatus.AT_RISK


class TestSprintHealth:
    def test_report_per_tag(self, sprint, make_task, now):
        work = Tag.create("Work", 20).value
        tasks = [
            make_task("A", points={work.id: 13}).move_to_sprint(sprint.id).value,
            make_task("B", points={work.id: 5, "untagged": 3}).move_to_sprint(sprint.id).value,
            make_task("Elsewhere", points={work.id: 8}),
            make_task("Dropped", points={work.id: 8}).move_to_sprint(sprint.id).value.cancel("no", now).value,
        ]

        report = calculate_sprint_health(sprint, tasks, [work, Tag.untagged()])

        work_health = report.for_tag(work.id)
        assert work_health.scheduled == 18
        assert work_health.capacity == 20
        assert work_health.health is HealthStatus.AT_RISK
        assert report.for_tag("untagged").health is HealthStatus.ON_TRACK
        assert report.overall is HealthStatus.AT_RISK

    def test_completed_tasks_still_count(self, sprint, make_task, now):
        done = make_task(points={"work": 8}).move_to_sprint(sprint.id).value.complete(now).value
        assert scheduled_points(sprint, [done]) == {"work": 8}

    def test_override_beats_tag_default(self, sprint, make_task):
        work = Tag.create("Work", 20).value
        sprint = sprint.set_capacity_override(work.id, 10).value
        task = make_task(points={work.id: 13}).move_to_sprint(sprint.id).value

        report = calculate_sprint_health(sprint, [task], [work])

        assert report.for_tag(work.id).capacity == 10
        assert report.overall is HealthStatus.OFF_TRACK

    def test_unknown_tag_uses_default_capacity(self, sprint, make_task):
        task = make_task(points={"mystery": 5}).move_to_sprint(sprint.id).value

        report = calculate_sprint_health(sprint, [task], [], default_capacity=5)

        assert report.for_tag("mystery").health is HealthStatus.AT_RISK

    def test_empty_sprint_is_on_track(self, sprint):
        report = calculate_sprint_health(sprint, [], [])

        assert report.by_tag == []
        assert report.overall is HealthStatus.ON_TRACK

    def test_days_remaining_only_when_today_is_known(self, sprint):
        assert calculate_sprint_health(sprint, [], []).days_remaining is None
        assert calculate_sprint_health(sprint, [], [], today=date(2025, 1, 10)).days_remaining == 2

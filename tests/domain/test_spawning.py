"""Tests for recurring template spawning."""

from datetime import timedelta

from checkmate.domain.task import count_instances, spawn_due_instances


def test_spawns_one_instance_per_occurrence(make_task, recurrence, now):
    template = make_task("Standup", points={"work": 1}, recurrence="FREQ=DAILY")

    spawned = spawn_due_instances([template], [], now, now + timedelta(days=2), recurrence, now)

    assert len(spawned) == 3
    assert all(t.parent_id == template.id for t in spawned)
    assert all(not t.is_template for t in spawned)


def test_existing_instances_are_subtracted(make_task, recurrence, now):
    template = make_task("Standup", recurrence="FREQ=DAILY")
    existing = template.spawn_instance(now).value

    spawned = spawn_due_instances([template], [existing], now, now + timedelta(days=2), recurrence, now)

    assert len(spawned) == 2


def test_nothing_owed_when_fully_spawned(make_task, recurrence, now):
    template = make_task("Weekly", recurrence="FREQ=WEEKLY")
    existing = [template.spawn_instance(now).value]

    assert spawn_due_instances([template], existing, now, now + timedelta(days=6), recurrence, now) == []


def test_skips_plain_and_closed_templates(make_task, recurrence, now):
    plain = make_task("Plain")
    closed = make_task("Closed", recurrence="FREQ=DAILY").cancel("retired", now).value

    assert spawn_due_instances([plain, closed], [], now, now + timedelta(days=3), recurrence, now) == []


def test_reversed_range(make_task, recurrence, now):
    template = make_task("Standup", recurrence="FREQ=DAILY")
    assert spawn_due_instances([template], [], now, now - timedelta(days=1), recurrence, now) == []


def test_count_instances(make_task, now):
    template = make_task("T", recurrence="FREQ=DAILY")
    instances = [template.spawn_instance(now).value for _ in range(3)]

    counts = count_instances([*instances, make_task("Unrelated")])

    assert counts[template.id] == 3
    assert len(counts) == 1

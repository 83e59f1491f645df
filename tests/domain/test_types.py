"""Tests for shared value objects."""

import pytest

from checkmate.domain.shared import Err, ErrorKind, Ok, flat_map, is_err, is_ok, map_result, unwrap_or
from checkmate.domain.types import (
    BACKLOG,
    SprintLocation,
    TagPoints,
    is_fibonacci_point,
    new_id,
    sprint_location,
)


class TestFibonacciPoints:
    @pytest.mark.parametrize("value", [1, 2, 3, 5, 8, 13, 21, 144, 233])
    def test_accepts_fibonacci_values(self, value):
        assert is_fibonacci_point(value)

    @pytest.mark.parametrize("value", [0, -1, 4, 6, 7, 10, 100, 2.0, True, "5"])
    def test_rejects_everything_else(self, value):
        assert not is_fibonacci_point(value)


class TestTagPoints:
    def test_non_fibonacci_rejected(self):
        result = TagPoints.create({"work": 4})

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION
        assert "Fibonacci" in result.error.message

    def test_fibonacci_accepted(self):
        result = TagPoints.create({"work": 5})

        assert isinstance(result, Ok)
        assert result.value.get("work") == 5

    def test_requires_at_least_one_tag(self):
        result = TagPoints.create({})
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.VALIDATION

    def test_blank_tag_id_rejected(self):
        assert isinstance(TagPoints.create({"  ": 3}), Err)

    def test_total_and_lookup(self):
        points = TagPoints.create({"work": 5, "admin": 1}).value

        assert points.total == 6
        assert points.get("missing") == 0
        assert points.has_tag("admin")
        assert points.tag_ids() == ["work", "admin"]

    def test_with_tag_replaces_points(self):
        points = TagPoints.create({"work": 5}).value
        updated = points.with_tag("work", 8).value

        assert updated.get("work") == 8
        assert points.get("work") == 5

    def test_cannot_remove_last_tag(self):
        points = TagPoints.create({"work": 5}).value
        assert isinstance(points.without_tag("work"), Err)

    def test_direct_construction_validates(self):
        with pytest.raises(ValueError):
            TagPoints({"work": 4})


class TestLocations:
    def test_backlog_has_no_sprint(self):
        assert BACKLOG.sprint_id is None
        assert str(BACKLOG) == "backlog"

    def test_sprint_location_requires_id(self):
        assert isinstance(sprint_location("  "), Err)
        assert sprint_location("sprint_1").value == SprintLocation(sprint_id="sprint_1")


class TestResult:
    def test_map_and_flat_map(self):
        assert map_result(Ok(2), lambda v: v * 2) == Ok(4)
        assert flat_map(Ok(2), lambda v: Err("boom")) == Err("boom")
        assert map_result(Err("x"), lambda v: v * 2) == Err("x")

    def test_unwrap_or(self):
        assert unwrap_or(Err("x"), 7) == 7
        assert unwrap_or(Ok(1), 7) == 1

    def test_predicates(self):
        assert is_ok(Ok(None))
        assert not is_ok(Err("x"))
        assert is_err(Err("x"))


def test_new_id_has_kind_prefix():
    first, second = new_id("task"), new_id("task")

    assert first.startswith("task_")
    assert first != second

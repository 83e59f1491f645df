"""Recurrence calculator interface.

Rules are RFC 5545 RRULE strings, e.g. ``FREQ=WEEKLY;BYDAY=MO,WE,FR``.
"""

from datetime import datetime
from typing import Protocol

from .expression_evaluator import ValidationResult


class RecurrenceCalculator(Protocol):
    """Interface for interpreting recurrence rules."""

    def validate(self, rule: str) -> ValidationResult:
        """Check that a rule can be parsed."""
        ...

    def next_occurrence(self, rule: str, after: datetime) -> datetime | None:
        """First occurrence strictly after ``after``, or None if the rule has ended."""
        ...

    def occurrences(self, rule: str, start: datetime, end: datetime) -> list[datetime]:
        """All occurrences between start and end, inclusive."""
        ...

    def describe(self, rule: str) -> str:
        """Human-readable summary of the rule."""
        ...

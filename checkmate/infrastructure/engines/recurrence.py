"""Recurrence calculator backed by python-dateutil.

Rules are RFC 5545 RRULE strings with or without the ``RRULE:`` prefix,
e.g. ``FREQ=WEEKLY;BYDAY=MO,WE,FR``. The rule is anchored at the start of
whatever range is being expanded.
"""

import logging
from datetime import UTC, datetime

from dateutil.rrule import rrule, rrulestr

from checkmate.ports.expression_evaluator import ValidationResult

logger = logging.getLogger(__name__)

# dateutil signals a bad rule with any of these
_RULE_ERRORS = (ValueError, TypeError, KeyError)

_VALIDATION_ANCHOR = datetime(2000, 1, 3, tzinfo=UTC)

_FREQUENCY_UNITS = {
    "YEARLY": "year",
    "MONTHLY": "month",
    "WEEKLY": "week",
    "DAILY": "day",
    "HOURLY": "hour",
    "MINUTELY": "minute",
    "SECONDLY": "second",
}

_DAY_NAMES = {
    "MO": "Mon",
    "TU": "Tue",
    "WE": "Wed",
    "TH": "Thu",
    "FR": "Fri",
    "SA": "Sat",
    "SU": "Sun",
}


def normalize_rule(rule: str) -> str:
    text = rule.strip()
    if text.upper().startswith("RRULE:"):
        text = text[len("RRULE:"):]
    return text


def _build(rule: str, anchor: datetime) -> rrule:
    """Parse a rule anchored at ``anchor``. Raises ValueError if invalid."""
    text = normalize_rule(rule)
    if not text:
        raise ValueError("Recurrence rule cannot be empty")
    parsed = rrulestr(text, dtstart=anchor)
    if not isinstance(parsed, rrule):
        raise ValueError("Only a single RRULE is supported")
    return parsed


def _rule_parts(rule: str) -> dict[str, str]:
    parts: dict[str, str] = {}
    for chunk in normalize_rule(rule).split(";"):
        key, sep, value = chunk.partition("=")
        if sep:
            parts[key.strip().upper()] = value.strip().upper()
    return parts


class RRuleRecurrenceCalculator:
    """RecurrenceCalculator implementation using dateutil.rrule."""

    def validate(self, rule: str) -> ValidationResult:
        try:
            _build(rule, _VALIDATION_ANCHOR)
        except _RULE_ERRORS as e:
            return ValidationResult(valid=False, error=f"Invalid recurrence rule: {e}")
        return ValidationResult(valid=True)

    def next_occurrence(self, rule: str, after: datetime) -> datetime | None:
        try:
            return _build(rule, after).after(after, inc=False)
        except _RULE_ERRORS as e:
            logger.warning(f"Cannot expand recurrence {rule!r}: {e}")
            return None

    def occurrences(self, rule: str, start: datetime, end: datetime) -> list[datetime]:
        if start > end:
            return []
        try:
            return _build(rule, start).between(start, end, inc=True)
        except _RULE_ERRORS as e:
            logger.warning(f"Cannot expand recurrence {rule!r}: {e}")
            return []

    def describe(self, rule: str) -> str:
        """Short English summary such as ``Every 2 weeks on Mon, Wed``."""
        if not self.validate(rule).valid:
            return "Invalid recurrence rule"

        parts = _rule_parts(rule)
        unit = _FREQUENCY_UNITS.get(parts.get("FREQ", ""), "period")
        interval = int(parts.get("INTERVAL", "1") or 1)
        text = f"Every {unit}" if interval == 1 else f"Every {interval} {unit}s"

        if "BYDAY" in parts:
            days = [
                _DAY_NAMES.get(day[-2:], day)
                for day in parts["BYDAY"].split(",")
                if day
            ]
            text += f" on {', '.join(days)}"
        if "BYMONTHDAY" in parts:
            text += f" on day {parts['BYMONTHDAY']}"
        if "COUNT" in parts:
            text += f", {parts['COUNT']} times"
        if "UNTIL" in parts:
            text += f", until {parts['UNTIL'][:8]}"
        return text

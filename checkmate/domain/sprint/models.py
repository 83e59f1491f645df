"""Sprint domain models.

A sprint is a fixed seven-day window from Sunday to Saturday with optional
per-tag capacity overrides. The end date is always derived from the start.
"""

from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field, computed_field, field_validator

from checkmate.domain.shared import DomainError, Err, Ok, Result, validation
from checkmate.domain.types import SprintId, new_id

SPRINT_LENGTH_DAYS = 7

# date.weekday(): Monday is 0, Sunday is 6
_SUNDAY = 6


def week_start(day: date) -> date:
    """Sunday on or before the given day."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _parse_day(value: date | datetime | str) -> Result[date, DomainError]:
    if isinstance(value, datetime):
        return Ok(value.date())
    if isinstance(value, date):
        return Ok(value)
    try:
        return Ok(date.fromisoformat(value.strip()[:10]))
    except ValueError:
        return Err(validation(f"Invalid sprint start date: {value!r}"))


class Sprint(BaseModel):
    """A weekly planning window.

    Example:
        sprint = Sprint.create("2025-01-05").value
        sprint.end_date  # date(2025, 1, 11)
    """

    id: SprintId
    start_date: date
    capacity_overrides: dict[str, int] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("start_date")
    @classmethod
    def _starts_on_sunday(cls, value: date) -> date:
        if value.weekday() != _SUNDAY:
            raise ValueError("Sprint must start on a Sunday")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=SPRINT_LENGTH_DAYS - 1)

    @classmethod
    def create(cls, start_date: date | datetime | str) -> Result["Sprint", DomainError]:
        """Create a sprint starting on the given Sunday.

        Returns:
            Ok(Sprint), or a validation error when the day is not a Sunday.
        """
        day = _parse_day(start_date)
        if isinstance(day, Err):
            return day
        if day.value.weekday() != _SUNDAY:
            return Err(
                validation(
                    f"Sprint must start on a Sunday "
                    f"({day.value.isoformat()} is a {day.value.strftime('%A')})"
                )
            )
        return Ok(cls(id=new_id("sprint"), start_date=day.value))

    @classmethod
    def for_week_of(cls, day: date) -> "Sprint":
        """Sprint covering the week that contains ``day``."""
        return cls(id=new_id("sprint"), start_date=week_start(day))

    # -------------------------------------------------------------------------
    # Capacity
    # -------------------------------------------------------------------------

    def capacity_for(self, tag_id: str, default_capacity: int) -> int:
        """Override for the tag if one is set, otherwise the tag's default."""
        return self.capacity_overrides.get(tag_id, default_capacity)

    def set_capacity_override(self, tag_id: str, capacity: int) -> Result["Sprint", DomainError]:
        if not tag_id.strip():
            return Err(validation("Tag id cannot be empty"))
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            return Err(validation("Capacity must be a non-negative whole number"))
        overrides = {**self.capacity_overrides, tag_id.strip(): capacity}
        return Ok(self.model_copy(update={"capacity_overrides": overrides}))

    def clear_capacity_override(self, tag_id: str) -> "Sprint":
        overrides = {k: v for k, v in self.capacity_overrides.items() if k != tag_id}
        return self.model_copy(update={"capacity_overrides": overrides})

    # -------------------------------------------------------------------------
    # Calendar
    # -------------------------------------------------------------------------

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def is_active(self, today: date) -> bool:
        return self.contains(today)

    def is_upcoming(self, today: date) -> bool:
        return self.start_date > today

    def days_remaining(self, today: date) -> int:
        """Days left including today; 0 once the sprint is over."""
        if today > self.end_date:
            return 0
        if today < self.start_date:
            return SPRINT_LENGTH_DAYS
        return (self.end_date - today).days + 1

    @staticmethod
    def label(index: int) -> str:
        """Display label relative to the current sprint (index 0)."""
        if index == 0:
            return "This Week"
        if index == 1:
            return "Next Week"
        return f"Sprint +{index}"

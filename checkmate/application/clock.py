"""Time source for application services.

The domain never reads the clock itself; services ask a Clock and pass
``now`` down explicitly.
"""

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Current UTC time."""

    def now(self) -> datetime:
        return datetime.now(UTC)

"""Sprint domain package.

Weekly sprints and the capacity health calculation over them.

Key Types:
    Sprint - Sunday-to-Saturday planning window
    HealthStatus - on_track / at_risk / off_track
    HealthThresholds - ratio boundaries between verdicts
    TagHealth, SprintHealthReport - calculator output

Functions:
    calculate_sprint_health - full report for a sprint
    classify_load - verdict for a single scheduled/capacity pair
    week_start - Sunday on or before a day
"""

from checkmate.domain.sprint.health import (
    AT_RISK_RATIO,
    OFF_TRACK_RATIO,
    HealthStatus,
    HealthThresholds,
    SprintHealthReport,
    TagHealth,
    calculate_sprint_health,
    classify_load,
    scheduled_points,
    worst_health,
)
from checkmate.domain.sprint.models import SPRINT_LENGTH_DAYS, Sprint, week_start

__all__ = [
    # Models
    "Sprint",
    "SPRINT_LENGTH_DAYS",
    "week_start",
    # Health
    "AT_RISK_RATIO",
    "OFF_TRACK_RATIO",
    "HealthStatus",
    "HealthThresholds",
    "TagHealth",
    "SprintHealthReport",
    "calculate_sprint_health",
    "classify_load",
    "scheduled_points",
    "worst_health",
]

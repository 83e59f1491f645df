"""Global configuration storage for Checkmate.

Stores user preferences in ~/.checkmate/config.json. Set ``CHECKMATE_HOME``
to use another directory (tests point it at a temporary path).
"""

import json
import logging
import os
from datetime import UTC, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator

from checkmate.domain.sprint.health import HealthThresholds
from checkmate.domain.tag.models import UNTAGGED_CAPACITY

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "CHECKMATE_HOME"


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Zone for an IANA name; None stands for the system's local zone."""
    if name is None:
        return None
    if name.upper() == "UTC":
        return UTC
    return ZoneInfo(name)


class CheckmateConfig(BaseModel):
    """User preferences."""

    data_dir: str | None = None  # Defaults to <config dir>/data
    default_session_minutes: int = Field(default=25, gt=0)
    default_tag_capacity: int = Field(default=UNTAGGED_CAPACITY, gt=0)
    health: HealthThresholds = Field(default_factory=HealthThresholds)
    upcoming_sprint_limit: int = Field(default=4, ge=0)
    timezone: str | None = None  # Routine hours are read in this zone; system zone if unset

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        try:
            resolve_timezone(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    def resolve_data_dir(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return get_config_dir() / "data"

    def zone(self) -> tzinfo | None:
        return resolve_timezone(self.timezone)


def get_config_dir() -> Path:
    """Get the Checkmate config directory."""
    override = os.environ.get(HOME_ENV_VAR)
    config_dir = Path(override).expanduser() if override else Path.home() / ".checkmate"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_global_config() -> CheckmateConfig:
    """Load global configuration, falling back to defaults if missing or invalid."""
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return CheckmateConfig(**data)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {config_file}: {e}")
    return CheckmateConfig()  # defaults


def save_global_config(config: CheckmateConfig) -> None:
    """Save global configuration."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(config.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )

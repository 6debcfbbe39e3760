"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.calendar import BusinessCalendar
from .domain.clock import ClockValue, ClockWindow
from .domain.constants import DEFAULT_SEARCH_LIMIT_DAYS, DEFAULT_WORKING_WEEKDAYS

logger = logging.getLogger(__name__)


class WindowConfig(BaseModel):
    """A daily availability window, e.g. ``{start: "09:00", end: "17:00"}``."""
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Ensure the value parses as a clock time."""
        ClockValue.parse(value)
        return value

    def to_window(self) -> ClockWindow:
        return ClockWindow(start=ClockValue.parse(self.start), end=ClockValue.parse(self.end))


def _default_working_hours() -> List[WindowConfig]:
    return [WindowConfig(start="09:00", end="17:00")]


class SchedulerConfig(BaseModel):
    """Scheduler configuration."""
    slot_interval_minutes: int = 15
    search_limit_days: int = DEFAULT_SEARCH_LIMIT_DAYS
    max_slots: Optional[int] = None
    working_hours: List[WindowConfig] = Field(default_factory=_default_working_hours)
    weekday_hours: Dict[int, List[WindowConfig]] = Field(default_factory=dict)  # ISO weekday -> windows
    working_weekdays: List[int] = Field(default_factory=lambda: sorted(DEFAULT_WORKING_WEEKDAYS))
    holidays: List[date] = Field(default_factory=list)

    @field_validator("slot_interval_minutes", "search_limit_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure search settings are positive."""
        if value <= 0:
            raise ValueError(f"must be greater than zero, got {value}")
        return value

    @field_validator("max_slots")
    @classmethod
    def validate_max_slots(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError(f"max_slots must be greater than zero, got {value}")
        return value

    @field_validator("working_weekdays")
    @classmethod
    def validate_working_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        if not value:
            raise ValueError("working_weekdays must contain at least one weekday")
        invalid_days = [day for day in value if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"working_weekdays must be between 1 and 7, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("weekday_hours")
    @classmethod
    def validate_weekday_hours(cls, value: Dict[int, List[WindowConfig]]) -> Dict[int, List[WindowConfig]]:
        invalid_days = sorted(day for day in value if day not in range(1, 8))
        if invalid_days:
            raise ValueError(f"weekday_hours keys must be between 1 and 7, got {invalid_days}")
        return value

    @property
    def slot_interval(self) -> timedelta:
        return timedelta(minutes=self.slot_interval_minutes)

    def build_calendar(self) -> BusinessCalendar:
        """Business calendar described by this configuration."""
        return BusinessCalendar(
            holidays=frozenset(self.holidays),
            working_weekdays=frozenset(self.working_weekdays),
        )

    def windows_for(self, day: date) -> List[ClockWindow]:
        """
        Availability windows for a day.

        A ``weekday_hours`` entry for the day's weekday replaces the general
        ``working_hours``; an empty entry means no availability that day.
        """
        windows = self.weekday_hours.get(day.isoweekday(), self.working_hours)
        return [window.to_window() for window in windows]

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "SchedulerConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            SchedulerConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        logger.debug(
            "Loaded scheduler config from %s (%d holidays, weekdays %s)",
            config_path,
            len(config.holidays),
            config.working_weekdays,
        )
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path

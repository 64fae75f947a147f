"""
Configuration management using Pydantic models.

The models only enforce structure and types. Semantic rules (ranges, shift
overlaps, period ordering) belong to ``ConfigValidator`` so that they are
reported as ``InvalidConfiguration`` with a precise reason.
"""

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from .domain.exceptions import InvalidConfiguration
from .domain.models import (
    AbsoluteMoment,
    BlockedPeriod,
    CalendarMoment,
    DailyShift,
    RecurringMoment,
    SlotRules,
    WeekdayAvailability,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "slotfinder.yaml"


class ShiftConfig(BaseModel):
    """A daily shift in the ``HH:MM`` format."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    start_time: str
    end_time: str

    def to_shift(self) -> DailyShift:
        return DailyShift(start_time=self.start_time, end_time=self.end_time)


class AvailablePeriodConfig(BaseModel):
    """Shifts for one ISO weekday (1 for Monday to 7 for Sunday)."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    iso_weekday: StrictInt
    shifts: List[ShiftConfig] = Field(default_factory=list)

    def to_availability(self) -> WeekdayAvailability:
        return WeekdayAvailability(
            iso_weekday=self.iso_weekday,
            shifts=tuple(shift.to_shift() for shift in self.shifts),
        )


class MomentConfig(BaseModel):
    """
    A calendar moment. Without ``year`` it repeats every year.

    ``month`` is zero-based (0 = January).
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    year: Optional[int] = None
    month: int
    day: int
    hour: Optional[int] = None
    minute: Optional[int] = None

    def to_moment(self) -> CalendarMoment:
        if self.year is None:
            return RecurringMoment(month=self.month, day=self.day, hour=self.hour, minute=self.minute)
        return AbsoluteMoment(
            year=self.year, month=self.month, day=self.day, hour=self.hour, minute=self.minute
        )


class UnavailablePeriodConfig(BaseModel):
    """A period during which booking is impossible."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    start_at: MomentConfig
    end_at: MomentConfig

    def to_blocked_period(self) -> BlockedPeriod:
        return BlockedPeriod(start_at=self.start_at.to_moment(), end_at=self.end_at.to_moment())


class SlotFinderConfig(BaseModel):
    """Rules used to search bookable slots."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    slot_duration_minutes: int
    available_periods: List[AvailablePeriodConfig]
    slot_start_minute_step: int = 5
    unavailable_periods: List[UnavailablePeriodConfig] = Field(default_factory=list)
    min_available_time_before_slot: int = 0
    min_available_time_after_slot: int = 0
    min_time_before_first_slot: int = 0
    max_days_before_last_slot: Optional[int] = None
    timezone: str

    @field_validator("timezone")
    @classmethod
    def strip_timezone(cls, value: str) -> str:
        """Tolerate surrounding whitespace in the identifier."""
        return value.strip()

    def to_slot_rules(self) -> SlotRules:
        """Get the per-slot duration, alignment and buffer rules."""
        return SlotRules(
            duration_minutes=self.slot_duration_minutes,
            start_minute_step=self.slot_start_minute_step,
            minutes_before=self.min_available_time_before_slot,
            minutes_after=self.min_available_time_after_slot,
        )

    def weekday_availabilities(self) -> List[WeekdayAvailability]:
        return [period.to_availability() for period in self.available_periods]

    def blocked_periods(self) -> List[BlockedPeriod]:
        return [period.to_blocked_period() for period in self.unavailable_periods]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SlotFinderConfig":
        """
        Build a configuration from a plain mapping.

        Raises:
            InvalidConfiguration: If the mapping does not match the schema
        """
        if not isinstance(data, Mapping):
            raise InvalidConfiguration("Configuration must be a mapping at the root level.")
        try:
            return cls(**data)
        except ValidationError as exc:
            raise InvalidConfiguration(f"Configuration does not match the schema: {exc}") from exc

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "SlotFinderConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            SlotFinderConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            InvalidConfiguration: If the file content is not a valid configuration
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a {DEFAULT_CONFIG_FILENAME} file. See config.example.yaml for reference."
            )

        logger.debug("Loading configuration from %s", config_path)
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"Invalid YAML in {config_path}: {exc}") from exc

        return cls.from_mapping(data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for slotfinder.yaml in current directory
    config_path = Path.cwd() / DEFAULT_CONFIG_FILENAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / DEFAULT_CONFIG_FILENAME

    return config_path

"""Value types for working-hours profiles and computed durations."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from .config import (
    DEFAULT_LUNCH_HOUR,
    DEFAULT_LUNCH_HOURS,
    DEFAULT_ROUNDING_THRESHOLD_MINUTES,
    DEFAULT_WORKING_DAY_END_HOUR,
    DEFAULT_WORKING_DAY_START_HOUR,
    DEFAULT_WORKING_HOURS_PER_DAY,
)
from .errors import SettingsError


@dataclass(frozen=True, slots=True)
class WorkingHoursProfile:
    """Daily work window used to convert wall-clock spans into business time.

    ``lunch_hours``, ``lunch_hour`` and ``holidays`` are carried so callers can
    configure them, but the duration engine applies no subtraction for them.
    ``end_hour - start_hour`` is independent of ``hours_per_day``: the former
    clips the first and last day, the latter counts each day in between.
    """

    start_hour: int = DEFAULT_WORKING_DAY_START_HOUR
    end_hour: int = DEFAULT_WORKING_DAY_END_HOUR
    hours_per_day: int = DEFAULT_WORKING_HOURS_PER_DAY
    lunch_hours: int = DEFAULT_LUNCH_HOURS
    lunch_hour: int = DEFAULT_LUNCH_HOUR
    rounding_threshold: int = DEFAULT_ROUNDING_THRESHOLD_MINUTES
    timezone: str | None = None
    holidays: tuple[date, ...] = ()

    def __post_init__(self) -> None:
        for label, hour in (
            ("start_hour", self.start_hour),
            ("end_hour", self.end_hour),
            ("lunch_hour", self.lunch_hour),
        ):
            if not 0 <= hour <= 23:
                raise SettingsError(f"{label} must be within 0..23, got {hour}")
        if self.start_hour >= self.end_hour:
            raise SettingsError(
                f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})"
            )
        if not 0 < self.hours_per_day <= 24:
            raise SettingsError(f"hours_per_day must be within 1..24, got {self.hours_per_day}")
        if self.lunch_hours < 0:
            raise SettingsError(f"lunch_hours must not be negative, got {self.lunch_hours}")
        if self.rounding_threshold < 0:
            raise SettingsError(
                f"rounding_threshold must not be negative, got {self.rounding_threshold}"
            )


@dataclass(frozen=True, slots=True)
class DurationResult:
    total_minutes: int
    working_minutes: int
    rounding_threshold: int = DEFAULT_ROUNDING_THRESHOLD_MINUTES

    @property
    def working_hours(self) -> int:
        """Whole working hours, rounded down."""
        return self.working_minutes // 60

    def working_hours_round_up(self, threshold: int | None = None) -> int:
        """Working hours rounded up to the next hour once past ``threshold`` minutes.

        Spans at or below the threshold fall back to :attr:`working_hours`, so a
        few stray minutes never count as a full hour.

        Examples
        --------
        >>> DurationResult(total_minutes=305, working_minutes=305).working_hours_round_up()
        6
        >>> DurationResult(total_minutes=4, working_minutes=4).working_hours_round_up()
        0
        """
        limit = self.rounding_threshold if threshold is None else threshold
        if self.working_minutes > limit:
            return math.ceil(self.working_minutes / 60)
        return self.working_hours

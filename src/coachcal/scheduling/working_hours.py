"""Resolve a coach's effective working hours for one calendar date.

Global hours apply to the weekdays in ``working_days``. When a per-weekday
override map exists it takes over completely: enabled days use their own
range, every other day is unavailable, and ``working_days`` is derived from
the enabled entries.
"""

import logging
from dataclasses import dataclass
from datetime import date

from coachcal.scheduling.errors import InvalidRangeError
from coachcal.scheduling.timespec import parse_time
from coachcal.schemas.working_hours import (
    WEEKDAYS,
    CustomDayOverride,
    WorkingHours,
    weekday_name,
)

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = "9:00 AM"
DEFAULT_END_TIME = "6:00 PM"
DEFAULT_SLOT_INTERVAL = 60

DEFAULT_WORKING_HOURS = WorkingHours(
    start_time=DEFAULT_START_TIME,
    end_time=DEFAULT_END_TIME,
    working_days=list(WEEKDAYS),
    slot_interval_minutes=DEFAULT_SLOT_INTERVAL,
)


@dataclass(frozen=True)
class EffectiveHours:
    start_minute: int
    end_minute: int
    interval_minutes: int


def normalise_overrides(working_hours: WorkingHours) -> dict[str, CustomDayOverride] | None:
    """Fill missing weekdays of a partial override map from the global hours."""
    custom = working_hours.custom_working_hours
    if custom is None:
        return None
    enabled_globally = set(working_hours.working_days)
    return {
        day: custom.get(day)
        or CustomDayOverride(
            enabled=day in enabled_globally,
            start_time=working_hours.start_time,
            end_time=working_hours.end_time,
        )
        for day in WEEKDAYS
    }


def derive_working_days(working_hours: WorkingHours) -> list[str]:
    overrides = normalise_overrides(working_hours)
    if overrides is None:
        return list(working_hours.working_days)
    return [day for day in WEEKDAYS if overrides[day].enabled]


def day_range(working_hours: WorkingHours, day_name: str) -> tuple[str, str] | None:
    """Start/end strings that apply on a weekday, or None when it is off."""
    overrides = normalise_overrides(working_hours)
    if overrides is not None:
        override = overrides[day_name]
        if not override.enabled:
            return None
        return override.start_time, override.end_time
    if day_name not in working_hours.working_days:
        return None
    return working_hours.start_time, working_hours.end_time


def effective_hours_for(day: date, working_hours: WorkingHours) -> EffectiveHours | None:
    """Effective (start, end, interval) for ``day``; None means unavailable.

    Raises:
        InvalidTimeFormat: If the applicable start or end string is malformed.
    """
    day_name = weekday_name(day)
    bounds = day_range(working_hours, day_name)
    if bounds is None:
        return None

    start_minute = parse_time(bounds[0])
    end_minute = parse_time(bounds[1])
    if end_minute <= start_minute:
        logger.warning(
            "Ignoring invalid working hours on %s (%s - %s)", day_name, bounds[0], bounds[1]
        )
        return None
    return EffectiveHours(start_minute, end_minute, working_hours.slot_interval_minutes)


def validate_working_hours(working_hours: WorkingHours) -> None:
    """Check the global range and every enabled override day.

    Raises:
        InvalidTimeFormat: If any checked time string is malformed.
        InvalidRangeError: If any checked end time is not after its start.
    """
    _check_range(working_hours.start_time, working_hours.end_time)
    overrides = normalise_overrides(working_hours)
    if overrides is None:
        return
    for day_name, override in overrides.items():
        if override.enabled:
            _check_range(override.start_time, override.end_time, day_name)


def _check_range(start: str, end: str, day_name: str | None = None) -> None:
    if parse_time(end) <= parse_time(start):
        raise InvalidRangeError(start, end, day_name)

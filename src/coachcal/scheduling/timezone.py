"""Conversions between stored instants and a viewer's local wall clock.

Lessons and blocked times are stored as absolute instants (UTC). Slots are
wall-clock values in the viewer's zone. Every comparison that mixes the two
goes through this module.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from coachcal.scheduling.errors import InvalidTimeZone


@dataclass(frozen=True)
class WallClock:
    """A local calendar date plus minutes since local midnight."""

    date: date
    minute_of_day: int


def resolve_zone(name: str | ZoneInfo) -> ZoneInfo:
    if isinstance(name, ZoneInfo):
        return name
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidTimeZone(name) from None


def as_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime.

    SQLite hands back naive datetimes; those are always stored in UTC.
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def to_local_wall_clock(instant: datetime, zone: str | ZoneInfo) -> WallClock:
    local = as_utc(instant).astimezone(resolve_zone(zone))
    return WallClock(date=local.date(), minute_of_day=local.hour * 60 + local.minute)


def to_instant(day: date, minute_of_day: int, zone: str | ZoneInfo) -> datetime:
    """Build the UTC instant for a local date + minute in ``zone``."""
    hour, minute = divmod(minute_of_day, 60)
    local = datetime.combine(day, time(hour, minute), tzinfo=resolve_zone(zone))
    return local.astimezone(UTC)


def local_to_instant(local: datetime, zone: str | ZoneInfo) -> datetime:
    """Interpret a naive local datetime in ``zone``; aware values pass through."""
    if local.tzinfo is not None:
        return local.astimezone(UTC)
    return local.replace(tzinfo=resolve_zone(zone)).astimezone(UTC)


def local_day_bounds(day: date, zone: str | ZoneInfo) -> tuple[datetime, datetime]:
    """UTC instants of local midnight on ``day`` and on the following day."""
    tz = resolve_zone(zone)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)

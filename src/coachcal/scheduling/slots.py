"""Enumerate the bookable time slots of one coach for one calendar date.

Combines the effective working hours, the booking index and the blocked-time
index. Past slots on the viewer's "today" are never offered. What happens to
booked and blocked slots (omitted or shown disabled) is a ``SlotPolicy``.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from coachcal.scheduling.blocked import BlockedTimeIndex
from coachcal.scheduling.bookings import BookingIndex
from coachcal.scheduling.errors import InvalidTimeFormat
from coachcal.scheduling.timespec import format_time
from coachcal.scheduling.timezone import to_local_wall_clock
from coachcal.scheduling.working_hours import EffectiveHours, effective_hours_for
from coachcal.schemas.working_hours import WorkingHours

logger = logging.getLogger(__name__)

AVAILABLE = "available"
BOOKED = "booked"
BLOCKED = "blocked"

# Grid used when the configured times cannot be parsed: hourly, 9 AM - 6 PM
FALLBACK_HOURS = EffectiveHours(start_minute=9 * 60, end_minute=18 * 60, interval_minutes=60)


@dataclass(frozen=True)
class SlotPolicy:
    show_booked: bool
    show_blocked: bool = True


SINGLE_COACH = SlotPolicy(show_booked=False, show_blocked=True)
ORGANIZATION = SlotPolicy(show_booked=True, show_blocked=True)


@dataclass(frozen=True)
class Slot:
    minute_of_day: int
    state: str
    blocked_reason: str | None = None
    lesson_id: int | None = None
    coach_id: int | None = None

    @property
    def time(self) -> str:
        return format_time(self.minute_of_day)

    @property
    def is_available(self) -> bool:
        return self.state == AVAILABLE


def resolve_hours(day: date, working_hours: WorkingHours) -> EffectiveHours | None:
    """Effective hours for ``day``, falling back to the default grid on bad input."""
    try:
        return effective_hours_for(day, working_hours)
    except InvalidTimeFormat as e:
        logger.warning("Falling back to default slot grid for %s: %s", day, e)
        return FALLBACK_HOURS


def generate_slots(
    day: date,
    working_hours: WorkingHours,
    blocked: BlockedTimeIndex,
    bookings: BookingIndex,
    now: datetime,
    zone: str,
    policy: SlotPolicy = SINGLE_COACH,
) -> list[Slot]:
    """Ordered slots for ``day``; empty for a non-working or already past day.

    A slot counts as booked only when its start falls inside a lesson. Booking
    checks the full duration for overlap, so a listed slot may still conflict.

    Args:
        day: Local calendar date in ``zone``.
        working_hours: The coach's configuration (global + overrides).
        blocked: Blocked-time index built for the same zone.
        bookings: Booking index built for the same zone.
        now: Current instant. Slots at or before the current local minute are
            skipped when ``day`` is today in ``zone``.
        zone: The viewer's IANA zone.
        policy: Whether booked/blocked slots are listed (disabled) or omitted.
    """
    hours = resolve_hours(day, working_hours)
    if hours is None:
        return []

    current = to_local_wall_clock(now, zone)
    if day < current.date:
        return []
    cutoff = current.minute_of_day if current.date == day else None

    slots: list[Slot] = []
    for minute in range(hours.start_minute, hours.end_minute, hours.interval_minutes):
        if cutoff is not None and minute <= cutoff:
            continue

        lesson = bookings.lesson_at(day, minute)
        if lesson is not None:
            if policy.show_booked:
                slots.append(
                    Slot(
                        minute_of_day=minute,
                        state=BOOKED,
                        blocked_reason=lesson.title,
                        lesson_id=lesson.id,
                        coach_id=lesson.coach_id,
                    )
                )
            continue

        block = blocked.blocks_at(day, minute)
        if block is not None:
            if policy.show_blocked:
                slots.append(Slot(minute_of_day=minute, state=BLOCKED, blocked_reason=block.title))
            continue

        slots.append(Slot(minute_of_day=minute, state=AVAILABLE))

    return slots

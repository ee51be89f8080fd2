"""Submit lesson bookings, one lesson per instant.

The slot list a coach picked from is computed from a snapshot and may be stale
by the time they submit. This module re-checks for overlapping lessons at write
time and relies on the ``(coach_id, date)`` unique index as the final
authority; either failure surfaces as ``BookingConflict``. Blocked times are
advisory and never reject a booking.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.models.coach import Client, Coach
from coachcal.models.lesson import Lesson
from coachcal.scheduling.blocked import BlockedTimeIndex
from coachcal.scheduling.bookings import BookingIndex
from coachcal.scheduling.errors import BookingConflict, BookingRejected
from coachcal.scheduling.timespec import format_time
from coachcal.scheduling.timezone import as_utc, to_local_wall_clock
from coachcal.scheduling.working_hours import derive_working_days
from coachcal.schemas.lesson import LessonRead
from coachcal.schemas.working_hours import WorkingHours, weekday_name
from coachcal.services.context import load_blocked_times, load_lessons

logger = logging.getLogger(__name__)

# Lessons last at most 8 hours, so a day either side covers every overlap
CONFLICT_WINDOW = timedelta(days=1)


@dataclass
class BookingRequest:
    """One lesson to create for ``coach_id`` with ``client_id``."""

    coach_id: int
    client_id: int
    instant: datetime
    zone: str
    duration_minutes: int
    title: str
    description: str = "Scheduled lesson"
    override_working_days: bool = False


@dataclass
class BatchResult:
    """Outcome of a recurring booking batch."""

    lessons: list[LessonRead] = field(default_factory=list)
    failures: list[tuple[datetime, str]] = field(default_factory=list)

    @property
    def created(self) -> int:
        return len(self.lessons)

    @property
    def skipped(self) -> int:
        return len(self.failures)

    @property
    def has_errors(self) -> bool:
        return bool(self.failures)


def lesson_title(coach: Coach, client: Client, client_coach: Coach | None) -> str:
    """Title shown on the calendar.

    Booking a client who belongs to another coach in the organization shows
    that coach's name; otherwise the client's.
    """
    if client_coach is not None and client.coach_id != coach.id:
        return f"Lesson - {client_coach.name or 'Coach'}"
    return f"Lesson with {client.name or client.email or 'Client'}"


def check_bookable(
    instant: datetime,
    now: datetime,
    working_hours: WorkingHours,
    zone: str,
    override_working_days: bool = False,
) -> None:
    """Reject starts in the past and, unless overridden, on non-working days.

    Raises:
        BookingRejected: With a message suitable for the caller.
    """
    if as_utc(instant) <= as_utc(now):
        raise BookingRejected("Cannot schedule lessons in the past", reason="past")
    if override_working_days:
        return
    day_name = weekday_name(to_local_wall_clock(instant, zone).date)
    if day_name not in derive_working_days(working_hours):
        raise BookingRejected(f"You are not available on {day_name}s", reason="non_working_day")


async def book_lesson(session: AsyncSession, request: BookingRequest) -> LessonRead:
    """Create and commit one lesson.

    Raises:
        BookingConflict: If an overlapping lesson exists or the insert violates
            the one-lesson-per-instant constraint.
    """
    coach_id = request.coach_id
    instant = as_utc(request.instant)

    existing = await load_lessons(
        session, [coach_id], instant - CONFLICT_WINDOW, instant + CONFLICT_WINDOW
    )
    index = BookingIndex(
        existing,
        request.zone,
        default_duration=request.duration_minutes,
        coach_id=coach_id,
    )
    conflicting = index.conflicts(instant, request.duration_minutes)
    if conflicting is not None:
        logger.info(
            "Rejected booking for coach %s at %s: overlaps lesson %s",
            coach_id,
            instant.isoformat(),
            conflicting.id,
        )
        raise BookingConflict("Time slot is already booked", lesson_id=conflicting.id)

    await _note_blocked_override(session, request, instant)

    lesson = Lesson(
        coach_id=coach_id,
        client_id=request.client_id,
        date=instant.replace(tzinfo=None),
        title=request.title,
        description=request.description,
        status="confirmed",
        duration_minutes=request.duration_minutes,
    )
    session.add(lesson)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.info("Booking for coach %s at %s lost a race", coach_id, instant.isoformat())
        raise BookingConflict("Time slot is already booked") from None

    logger.info("Created lesson %s for coach %s at %s", lesson.id, coach_id, instant.isoformat())
    return LessonRead.model_validate(lesson)


async def _note_blocked_override(
    session: AsyncSession, request: BookingRequest, instant: datetime
) -> None:
    blocked = await load_blocked_times(
        session, [request.coach_id], instant, instant + timedelta(minutes=1)
    )
    if not blocked:
        return
    local = to_local_wall_clock(instant, request.zone)
    block = BlockedTimeIndex(blocked, request.zone).blocks_at(local.date, local.minute_of_day)
    if block is not None:
        logger.info(
            "Coach %s booked %s %s inside blocked time '%s'",
            request.coach_id,
            local.date,
            format_time(local.minute_of_day),
            block.title,
        )


async def book_recurring(
    session: AsyncSession,
    template: BookingRequest,
    instants: Iterable[datetime],
    now: datetime,
    working_hours: WorkingHours,
) -> BatchResult:
    """Book every instant independently, collecting per-instant failures.

    A failure never aborts the batch; lessons created before it stay committed.
    """
    result = BatchResult()
    for instant in instants:
        try:
            check_bookable(
                instant, now, working_hours, template.zone, template.override_working_days
            )
            lesson = await book_lesson(
                session,
                BookingRequest(
                    coach_id=template.coach_id,
                    client_id=template.client_id,
                    instant=instant,
                    zone=template.zone,
                    duration_minutes=template.duration_minutes,
                    title=template.title,
                    description=template.description,
                    override_working_days=template.override_working_days,
                ),
            )
        except (BookingConflict, BookingRejected) as e:
            result.failures.append((instant, str(e)))
            continue
        result.lessons.append(lesson)

    log = logger.warning if result.has_errors else logger.info
    log(
        "Recurring booking for coach %s: %d created, %d skipped",
        template.coach_id,
        result.created,
        result.skipped,
    )
    return result


def log_email_request(email: str | None, count: int) -> None:
    """Email delivery lives outside this service; record that one was asked for."""
    if email:
        logger.info(
            "Email notification requested for %s (%d lesson(s)); not sent by this service",
            email,
            count,
        )

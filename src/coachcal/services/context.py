"""Load a coach's scheduling inputs from the database as engine records.

Rows are validated into ``WorkingHours``, ``LessonRead`` and
``BlockedTimeRead`` once here; the scheduling engine never sees ORM objects.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.config import Settings
from coachcal.models.blocked_time import BlockedTime
from coachcal.models.coach import Coach
from coachcal.models.lesson import Lesson
from coachcal.scheduling.blocked import BlockedTimeIndex
from coachcal.scheduling.bookings import BookingIndex
from coachcal.scheduling.slots import SINGLE_COACH, Slot, SlotPolicy, generate_slots
from coachcal.scheduling.timezone import as_utc, local_day_bounds
from coachcal.schemas.blocked_time import BlockedTimeRead
from coachcal.schemas.lesson import LessonRead
from coachcal.schemas.working_hours import WEEKDAYS, WorkingHours

logger = logging.getLogger(__name__)


def default_working_hours(settings: Settings) -> WorkingHours:
    return WorkingHours(
        start_time=settings.default_start_time,
        end_time=settings.default_end_time,
        working_days=list(WEEKDAYS),
        slot_interval_minutes=settings.default_slot_interval,
    )


def working_hours_for(coach: Coach, settings: Settings) -> tuple[WorkingHours, bool]:
    """The coach's stored working hours, or the configured defaults.

    Returns:
        (working_hours, is_default). Stored values that fail validation are
        logged and replaced by the defaults.
    """
    if coach.working_start_time is None or coach.working_end_time is None:
        return default_working_hours(settings), True

    try:
        return (
            WorkingHours(
                start_time=coach.working_start_time,
                end_time=coach.working_end_time,
                working_days=(
                    json.loads(coach.working_days) if coach.working_days else list(WEEKDAYS)
                ),
                slot_interval_minutes=coach.slot_interval_minutes or settings.default_slot_interval,
                custom_working_hours=(
                    json.loads(coach.custom_working_hours) if coach.custom_working_hours else None
                ),
            ),
            False,
        )
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Stored working hours for coach %s are invalid: %s", coach.id, e)
        return default_working_hours(settings), True


def store_working_hours(coach: Coach, working_hours: WorkingHours) -> None:
    coach.working_start_time = working_hours.start_time
    coach.working_end_time = working_hours.end_time
    coach.working_days = json.dumps(working_hours.working_days)
    coach.slot_interval_minutes = working_hours.slot_interval_minutes
    custom = working_hours.custom_working_hours
    coach.custom_working_hours = (
        json.dumps({day: o.model_dump() for day, o in custom.items()}) if custom is not None else None
    )


async def get_coach(session: AsyncSession, coach_id: int) -> Coach | None:
    result = await session.execute(select(Coach).where(Coach.id == coach_id))
    return result.scalar_one_or_none()


async def organization_coach_ids(session: AsyncSession, organization_id: int) -> list[int]:
    result = await session.execute(
        select(Coach.id).where(Coach.organization_id == organization_id).order_by(Coach.id)
    )
    return list(result.scalars().all())


async def load_lessons(
    session: AsyncSession,
    coach_ids: list[int],
    start: datetime,
    end: datetime,
) -> list[LessonRead]:
    """Lessons of the given coaches starting in ``[start, end)`` (UTC instants)."""
    stmt = (
        select(Lesson)
        .where(
            Lesson.coach_id.in_(coach_ids),
            Lesson.date >= _naive_utc(start),
            Lesson.date < _naive_utc(end),
        )
        .order_by(Lesson.date)
    )
    result = await session.execute(stmt)
    return [LessonRead.model_validate(row) for row in result.scalars().all()]


async def load_blocked_times(
    session: AsyncSession,
    coach_ids: list[int],
    start: datetime,
    end: datetime,
) -> list[BlockedTimeRead]:
    """Blocked times of the given coaches overlapping ``[start, end)``."""
    stmt = (
        select(BlockedTime)
        .where(
            BlockedTime.coach_id.in_(coach_ids),
            BlockedTime.start_time < _naive_utc(end),
            BlockedTime.end_time > _naive_utc(start),
        )
        .order_by(BlockedTime.start_time)
    )
    result = await session.execute(stmt)
    return [BlockedTimeRead.model_validate(row) for row in result.scalars().all()]


def _naive_utc(instant: datetime) -> datetime:
    # Stored columns are naive UTC
    return as_utc(instant).replace(tzinfo=None)


@dataclass
class ScheduleContext:
    """Everything needed to list one coach's slots for one local day.

    ``shared_lessons`` marks an organization calendar: ``lessons`` then holds
    every coach's lessons and all of them occupy slots.
    """

    coach_id: int
    working_hours: WorkingHours
    zone: str
    lessons: list[LessonRead] = field(default_factory=list)
    blocked_times: list[BlockedTimeRead] = field(default_factory=list)
    shared_lessons: bool = False

    def booking_index(self) -> BookingIndex:
        return BookingIndex(
            self.lessons,
            self.zone,
            default_duration=self.working_hours.slot_interval_minutes,
            coach_id=None if self.shared_lessons else self.coach_id,
        )

    def blocked_index(self) -> BlockedTimeIndex:
        return BlockedTimeIndex(self.blocked_times, self.zone, coach_id=self.coach_id)

    def slots_for(self, day: date, now: datetime, policy: SlotPolicy = SINGLE_COACH) -> list[Slot]:
        return generate_slots(
            day,
            self.working_hours,
            self.blocked_index(),
            self.booking_index(),
            now,
            self.zone,
            policy,
        )


async def load_schedule_context(
    session: AsyncSession,
    coach: Coach,
    day: date,
    zone: str,
    settings: Settings,
    lesson_coach_ids: list[int] | None = None,
) -> ScheduleContext:
    """Fetch the coach's lessons and blocks around ``day`` in ``zone``.

    The lesson window starts a day early so lessons running past midnight are
    still seen. Passing ``lesson_coach_ids`` loads those coaches' lessons
    instead, for the organization calendar; blocks stay the coach's own.
    """
    day_start, day_end = local_day_bounds(day, zone)
    previous_start, _ = local_day_bounds(day - timedelta(days=1), zone)
    working_hours, _ = working_hours_for(coach, settings)
    return ScheduleContext(
        coach_id=coach.id,
        working_hours=working_hours,
        zone=zone,
        lessons=await load_lessons(
            session, lesson_coach_ids or [coach.id], previous_start, day_end
        ),
        blocked_times=await load_blocked_times(session, [coach.id], day_start, day_end),
        shared_lessons=lesson_coach_ids is not None,
    )

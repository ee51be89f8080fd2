"""Lesson endpoints: month listing, single and recurring booking, deletion."""

import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.api.deps import (
    get_bookable_client,
    get_now,
    get_viewer_zone,
    parse_time_or_422,
    require_coach,
    zone_or_default,
)
from coachcal.config import Settings, get_settings
from coachcal.database import get_db
from coachcal.models.coach import Coach
from coachcal.models.lesson import Lesson
from coachcal.scheduling.errors import BookingConflict, BookingRejected, RecurrenceBoundsExceeded
from coachcal.scheduling.recurrence import add_months, expand, validate_request
from coachcal.scheduling.timezone import local_day_bounds, to_instant
from coachcal.scheduling.working_hours import derive_working_days
from coachcal.schemas.lesson import (
    LessonCreate,
    LessonFailure,
    LessonRead,
    RecurringLessonCreate,
    RecurringLessonResult,
)
from coachcal.schemas.recurrence import RecurrenceRequest
from coachcal.services.booking import (
    BookingRequest,
    book_lesson,
    book_recurring,
    check_bookable,
    lesson_title,
    log_email_request,
)
from coachcal.services.context import load_lessons, working_hours_for

router = APIRouter(prefix="/api/coaches", tags=["lessons"])
logger = logging.getLogger(__name__)


def _rejected(e: BookingRejected) -> HTTPException:
    status = 400 if e.reason == "non_working_day" else 422
    return HTTPException(status_code=status, detail=str(e))


@router.get("/{coach_id}/lessons", response_model=list[LessonRead])
async def list_lessons(
    year: int = Query(ge=1970, le=9999),
    month: int = Query(ge=1, le=12),
    coach: Coach = Depends(require_coach),
    zone: str = Depends(get_viewer_zone),
    session: AsyncSession = Depends(get_db),
) -> list[LessonRead]:
    """Lessons starting in the given month of the viewer's zone."""
    first = date(year, month, 1)
    start, _ = local_day_bounds(first, zone)
    end, _ = local_day_bounds(add_months(first, 1), zone)
    return await load_lessons(session, [coach.id], start, end)


@router.post("/{coach_id}/lessons", response_model=LessonRead, status_code=201)
async def create_lesson(
    body: LessonCreate,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> LessonRead:
    """Book one lesson.

    Blocked times do not prevent booking. Conflicting with an existing lesson
    returns 409.
    """
    zone = zone_or_default(body.time_zone, settings)
    client, client_coach = await get_bookable_client(session, coach, body.client_id)
    instant = to_instant(body.lesson_date, parse_time_or_422(body.time), zone)
    working_hours, _ = working_hours_for(coach, settings)

    try:
        check_bookable(instant, now, working_hours, zone, body.override_working_days)
    except BookingRejected as e:
        raise _rejected(e) from None

    client_email = client.email
    request = BookingRequest(
        coach_id=coach.id,
        client_id=client.id,
        instant=instant,
        zone=zone,
        duration_minutes=body.duration_minutes or working_hours.slot_interval_minutes,
        title=body.title or lesson_title(coach, client, client_coach),
        override_working_days=body.override_working_days,
    )
    try:
        lesson = await book_lesson(session, request)
    except BookingConflict as e:
        raise HTTPException(status_code=409, detail=str(e)) from None

    if body.send_email:
        log_email_request(client_email, 1)
    return lesson


@router.post(
    "/{coach_id}/lessons/recurring", response_model=RecurringLessonResult, status_code=201
)
async def create_recurring_lessons(
    body: RecurringLessonCreate,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> RecurringLessonResult:
    """Book a recurring series.

    Every occurrence is booked on its own: conflicts and past starts are
    reported per instant and never undo the lessons already created.
    """
    zone = zone_or_default(body.time_zone, settings)
    client, client_coach = await get_bookable_client(session, coach, body.client_id)
    start = to_instant(body.start_date, parse_time_or_422(body.time), zone)
    working_hours, _ = working_hours_for(coach, settings)

    recurrence = RecurrenceRequest(
        start=start,
        end_date=body.end_date,
        pattern=body.pattern,
        interval=body.interval,
        working_days_filter=(
            None if body.override_working_days else frozenset(derive_working_days(working_hours))
        ),
        time_zone=zone,
    )
    try:
        validate_request(recurrence, settings.recurrence_max_instances)
    except RecurrenceBoundsExceeded as e:
        raise HTTPException(status_code=422, detail=str(e)) from None

    instants = list(expand(recurrence))
    if not instants:
        raise HTTPException(status_code=422, detail="No lessons match the recurring schedule")

    client_email = client.email
    template = BookingRequest(
        coach_id=coach.id,
        client_id=client.id,
        instant=start,
        zone=zone,
        duration_minutes=working_hours.slot_interval_minutes,
        title=lesson_title(coach, client, client_coach),
        description="Recurring lesson",
        override_working_days=body.override_working_days,
    )
    result = await book_recurring(session, template, instants, now, working_hours)

    if body.send_email and result.created:
        log_email_request(client_email, result.created)
    return RecurringLessonResult(
        total_lessons=result.created,
        skipped_lessons=result.skipped,
        lessons=result.lessons,
        failures=[LessonFailure(instant=i, reason=reason) for i, reason in result.failures],
    )


@router.delete("/{coach_id}/lessons/{lesson_id}", status_code=204)
async def delete_lesson(
    lesson_id: int,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
) -> None:
    result = await session.execute(
        select(Lesson).where(Lesson.id == lesson_id, Lesson.coach_id == coach.id)
    )
    lesson = result.scalar_one_or_none()
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    await session.delete(lesson)
    await session.commit()
    logger.info("Deleted lesson %s for coach %s", lesson_id, coach.id)

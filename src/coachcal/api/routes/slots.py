"""Slot listing for one coach and the recurring-series preview."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.api.deps import (
    get_now,
    get_viewer_zone,
    parse_time_or_422,
    require_coach,
    zone_or_default,
)
from coachcal.config import Settings, get_settings
from coachcal.database import get_db
from coachcal.models.coach import Coach
from coachcal.scheduling.errors import RecurrenceBoundsExceeded
from coachcal.scheduling.recurrence import preview
from coachcal.scheduling.slots import SINGLE_COACH, Slot, SlotPolicy
from coachcal.scheduling.timezone import to_instant
from coachcal.scheduling.working_hours import derive_working_days
from coachcal.schemas.recurrence import (
    RecurrencePreview,
    RecurrencePreviewRequest,
    RecurrenceRequest,
)
from coachcal.schemas.slot import DaySlotsRead, SlotRead
from coachcal.schemas.working_hours import weekday_name
from coachcal.services.context import load_schedule_context, working_hours_for

router = APIRouter(prefix="/api/coaches", tags=["slots"])


def slot_read(slot: Slot) -> SlotRead:
    return SlotRead(
        time=slot.time,
        minute_of_day=slot.minute_of_day,
        state=slot.state,
        blocked_reason=slot.blocked_reason,
        lesson_id=slot.lesson_id,
        coach_id=slot.coach_id,
    )


async def day_slots(
    session: AsyncSession,
    coach: Coach,
    day: date,
    zone: str,
    now: datetime,
    settings: Settings,
    policy: SlotPolicy,
    lesson_coach_ids: list[int] | None = None,
) -> DaySlotsRead:
    context = await load_schedule_context(
        session, coach, day, zone, settings, lesson_coach_ids
    )
    return DaySlotsRead(
        date=day,
        coach_id=coach.id,
        time_zone=zone,
        working_day=weekday_name(day) in derive_working_days(context.working_hours),
        slots=[slot_read(s) for s in context.slots_for(day, now, policy)],
    )


@router.get("/{coach_id}/slots", response_model=DaySlotsRead)
async def list_slots(
    day: date = Query(alias="date"),
    coach: Coach = Depends(require_coach),
    zone: str = Depends(get_viewer_zone),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> DaySlotsRead:
    """Bookable slots for one local date; booked slots are omitted."""
    return await day_slots(session, coach, day, zone, now, settings, SINGLE_COACH)


@router.post("/{coach_id}/recurrence/preview", response_model=RecurrencePreview)
async def preview_recurrence(
    body: RecurrencePreviewRequest,
    coach: Coach = Depends(require_coach),
    settings: Settings = Depends(get_settings),
) -> RecurrencePreview:
    """The first few dates of a recurring series plus how many lessons it makes."""
    zone = zone_or_default(body.time_zone, settings)
    working_hours, _ = working_hours_for(coach, settings)
    request = RecurrenceRequest(
        start=to_instant(body.start_date, parse_time_or_422(body.time), zone),
        end_date=body.end_date,
        pattern=body.pattern,
        interval=body.interval,
        working_days_filter=(
            None if body.override_working_days else frozenset(derive_working_days(working_hours))
        ),
        time_zone=zone,
    )
    try:
        return preview(
            request,
            limit=settings.recurrence_preview_limit,
            max_instances=settings.recurrence_max_instances,
        )
    except RecurrenceBoundsExceeded as e:
        raise HTTPException(status_code=422, detail=str(e)) from None

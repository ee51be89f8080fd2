"""Blocked time endpoints: month listing and CRUD.

Inputs are local wall-clock values in ``time_zone``; rows are stored as UTC
instants. An all-day block covers its local dates from 00:00:00 to 23:59:59.
"""

from datetime import date, datetime, time

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.api.deps import get_viewer_zone, require_coach, zone_or_default
from coachcal.config import Settings, get_settings
from coachcal.database import get_db
from coachcal.models.blocked_time import BlockedTime
from coachcal.models.coach import Coach
from coachcal.scheduling.recurrence import add_months
from coachcal.scheduling.timezone import local_day_bounds, local_to_instant
from coachcal.schemas.blocked_time import (
    BlockedTimeCreate,
    BlockedTimeRead,
    BlockedTimeUpdate,
)
from coachcal.services.context import load_blocked_times

router = APIRouter(prefix="/api/coaches", tags=["blocked-times"])

END_OF_DAY = time(23, 59, 59)


def _stored_range(body: BlockedTimeCreate, zone: str) -> tuple[datetime, datetime]:
    if body.is_all_day:
        start = datetime.combine(body.start.date(), time.min)
        end = datetime.combine(body.end.date(), END_OF_DAY)
    else:
        start, end = body.start, body.end
    return (
        local_to_instant(start, zone).replace(tzinfo=None),
        local_to_instant(end, zone).replace(tzinfo=None),
    )


async def _get_blocked_time(
    session: AsyncSession, coach_id: int, blocked_id: int
) -> BlockedTime:
    result = await session.execute(
        select(BlockedTime).where(
            BlockedTime.id == blocked_id,
            BlockedTime.coach_id == coach_id,
        )
    )
    blocked = result.scalar_one_or_none()
    if blocked is None:
        raise HTTPException(status_code=404, detail="Blocked time not found")
    return blocked


@router.get("/{coach_id}/blocked-times", response_model=list[BlockedTimeRead])
async def list_blocked_times(
    year: int = Query(ge=1970, le=9999),
    month: int = Query(ge=1, le=12),
    coach: Coach = Depends(require_coach),
    zone: str = Depends(get_viewer_zone),
    session: AsyncSession = Depends(get_db),
) -> list[BlockedTimeRead]:
    """Blocked times overlapping the given month in the viewer's zone."""
    first = date(year, month, 1)
    start, _ = local_day_bounds(first, zone)
    end, _ = local_day_bounds(add_months(first, 1), zone)
    return await load_blocked_times(session, [coach.id], start, end)


@router.post("/{coach_id}/blocked-times", response_model=BlockedTimeRead, status_code=201)
async def create_blocked_time(
    body: BlockedTimeCreate,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> BlockedTime:
    start, end = _stored_range(body, zone_or_default(body.time_zone, settings))
    blocked = BlockedTime(
        coach_id=coach.id,
        title=body.title,
        description=body.description,
        start_time=start,
        end_time=end,
        is_all_day=body.is_all_day,
    )
    session.add(blocked)
    await session.commit()
    await session.refresh(blocked)
    return blocked


@router.put("/{coach_id}/blocked-times/{blocked_id}", response_model=BlockedTimeRead)
async def update_blocked_time(
    blocked_id: int,
    body: BlockedTimeUpdate,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> BlockedTime:
    blocked = await _get_blocked_time(session, coach.id, blocked_id)
    start, end = _stored_range(body, zone_or_default(body.time_zone, settings))
    blocked.title = body.title
    blocked.description = body.description
    blocked.start_time = start
    blocked.end_time = end
    blocked.is_all_day = body.is_all_day
    await session.commit()
    await session.refresh(blocked)
    return blocked


@router.delete("/{coach_id}/blocked-times/{blocked_id}", status_code=204)
async def delete_blocked_time(
    blocked_id: int,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
) -> None:
    blocked = await _get_blocked_time(session, coach.id, blocked_id)
    await session.delete(blocked)
    await session.commit()

"""Dependencies shared by the scheduling routes."""

from datetime import UTC, datetime

from fastapi import Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.config import Settings, get_settings
from coachcal.database import get_db
from coachcal.models.coach import Client, Coach
from coachcal.scheduling.errors import InvalidTimeFormat, InvalidTimeZone
from coachcal.scheduling.timespec import parse_time
from coachcal.scheduling.timezone import resolve_zone
from coachcal.services.context import get_coach


def get_now() -> datetime:
    """Current instant; overridden in tests to pin "today"."""
    return datetime.now(UTC)


def zone_or_default(name: str | None, settings: Settings) -> str:
    zone = name or settings.default_timezone
    try:
        resolve_zone(zone)
    except InvalidTimeZone as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return zone


def get_viewer_zone(
    tz: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> str:
    return zone_or_default(tz, settings)


def parse_time_or_422(text: str) -> int:
    try:
        return parse_time(text)
    except InvalidTimeFormat as e:
        raise HTTPException(status_code=422, detail=str(e)) from None


async def require_coach(
    coach_id: int,
    session: AsyncSession = Depends(get_db),
) -> Coach:
    coach = await get_coach(session, coach_id)
    if coach is None:
        raise HTTPException(status_code=404, detail="Coach not found")
    return coach


async def get_bookable_client(
    session: AsyncSession, coach: Coach, client_id: int
) -> tuple[Client, Coach | None]:
    """Load a client the coach may book.

    Returns:
        (client, client_coach). ``client_coach`` is set when the client belongs
        to another coach of the same organization.
    """
    result = await session.execute(select(Client).where(Client.id == client_id))
    client = result.scalar_one_or_none()
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    if client.coach_id == coach.id:
        return client, None

    owner = await get_coach(session, client.coach_id)
    if owner is None or coach.organization_id is None or (
        owner.organization_id != coach.organization_id
    ):
        raise HTTPException(status_code=403, detail="Client belongs to another coach")
    return client, owner

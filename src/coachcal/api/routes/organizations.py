"""Organization records and the shared organization calendar view."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.api.deps import get_now, get_viewer_zone
from coachcal.api.routes.slots import day_slots
from coachcal.config import Settings, get_settings
from coachcal.database import get_db
from coachcal.models.coach import Coach
from coachcal.models.organization import Organization
from coachcal.scheduling.slots import ORGANIZATION
from coachcal.schemas.coach import CoachRead, OrganizationCreate, OrganizationRead
from coachcal.schemas.slot import DaySlotsRead
from coachcal.services.context import get_coach, organization_coach_ids

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


async def _require_organization(session: AsyncSession, org_id: int) -> Organization:
    org = await session.get(Organization, org_id)
    if org is None:
        raise HTTPException(status_code=404, detail="Organization not found")
    return org


@router.post("", response_model=OrganizationRead, status_code=201)
async def create_organization(
    body: OrganizationCreate,
    session: AsyncSession = Depends(get_db),
) -> Organization:
    org = Organization(name=body.name)
    session.add(org)
    await session.commit()
    await session.refresh(org)
    return org


@router.get("/{org_id}", response_model=OrganizationRead)
async def get_organization(
    org_id: int,
    session: AsyncSession = Depends(get_db),
) -> Organization:
    return await _require_organization(session, org_id)


@router.get("/{org_id}/coaches", response_model=list[CoachRead])
async def list_organization_coaches(
    org_id: int,
    session: AsyncSession = Depends(get_db),
) -> list[Coach]:
    await _require_organization(session, org_id)
    result = await session.execute(
        select(Coach).where(Coach.organization_id == org_id).order_by(Coach.name)
    )
    return list(result.scalars().all())


@router.get("/{org_id}/slots", response_model=DaySlotsRead)
async def list_organization_slots(
    org_id: int,
    coach_id: int = Query(),
    day: date = Query(alias="date"),
    zone: str = Depends(get_viewer_zone),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> DaySlotsRead:
    """Slots of one coach in the organization, with booked slots listed.

    Lessons of every coach in the organization occupy slots. Booked slots
    carry the lesson id and owning coach so the shared calendar can show who
    holds them.
    """
    await _require_organization(session, org_id)
    coach = await get_coach(session, coach_id)
    if coach is None or coach.organization_id != org_id:
        raise HTTPException(status_code=404, detail="Coach not found in organization")
    coach_ids = await organization_coach_ids(session, org_id)
    return await day_slots(session, coach, day, zone, now, settings, ORGANIZATION, coach_ids)

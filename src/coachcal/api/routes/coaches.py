"""Coach and client records."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.api.deps import require_coach
from coachcal.database import get_db
from coachcal.models.coach import Client, Coach
from coachcal.models.organization import Organization
from coachcal.schemas.coach import ClientCreate, ClientRead, CoachCreate, CoachRead

router = APIRouter(prefix="/api/coaches", tags=["coaches"])


@router.post("", response_model=CoachRead, status_code=201)
async def create_coach(
    body: CoachCreate,
    session: AsyncSession = Depends(get_db),
) -> Coach:
    if body.organization_id is not None:
        org = await session.get(Organization, body.organization_id)
        if org is None:
            raise HTTPException(status_code=404, detail="Organization not found")

    coach = Coach(name=body.name, email=body.email, organization_id=body.organization_id)
    session.add(coach)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=409, detail=f"A coach with email {body.email} already exists"
        ) from None
    await session.refresh(coach)
    return coach


@router.get("/{coach_id}", response_model=CoachRead)
async def get_coach_record(coach: Coach = Depends(require_coach)) -> Coach:
    return coach


@router.post("/{coach_id}/clients", response_model=ClientRead, status_code=201)
async def create_client(
    body: ClientCreate,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
) -> Client:
    client = Client(coach_id=coach.id, name=body.name, email=body.email)
    session.add(client)
    await session.commit()
    await session.refresh(client)
    return client


@router.get("/{coach_id}/clients", response_model=list[ClientRead])
async def list_clients(
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
) -> list[Client]:
    result = await session.execute(
        select(Client).where(Client.coach_id == coach.id).order_by(Client.name)
    )
    return list(result.scalars().all())

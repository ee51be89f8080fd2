"""Working hours endpoints: read with defaults applied, validate and save."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from coachcal.api.deps import require_coach
from coachcal.config import Settings, get_settings
from coachcal.database import get_db
from coachcal.models.coach import Coach
from coachcal.scheduling.working_hours import (
    derive_working_days,
    normalise_overrides,
    validate_working_hours,
)
from coachcal.schemas.working_hours import WorkingHours, WorkingHoursRead, WorkingHoursUpdate
from coachcal.services.context import store_working_hours, working_hours_for

router = APIRouter(prefix="/api/coaches", tags=["working-hours"])
logger = logging.getLogger(__name__)


def _read(coach_id: int, working_hours: WorkingHours, is_default: bool) -> WorkingHoursRead:
    return WorkingHoursRead(**working_hours.model_dump(), coach_id=coach_id, is_default=is_default)


@router.get("/{coach_id}/working-hours", response_model=WorkingHoursRead)
async def get_working_hours(
    coach: Coach = Depends(require_coach),
    settings: Settings = Depends(get_settings),
) -> WorkingHoursRead:
    """The coach's working hours, or the configured defaults when never saved."""
    working_hours, is_default = working_hours_for(coach, settings)
    return _read(coach.id, working_hours, is_default)


@router.put("/{coach_id}/working-hours", response_model=WorkingHoursRead)
async def update_working_hours(
    body: WorkingHoursUpdate,
    coach: Coach = Depends(require_coach),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> WorkingHoursRead:
    """Save working hours.

    When per-day overrides are sent, the stored map is completed for every
    weekday and ``working_days`` is derived from its enabled entries.
    """
    current, _ = working_hours_for(coach, settings)
    try:
        working_hours = WorkingHours(
            start_time=body.start_time,
            end_time=body.end_time,
            working_days=(
                body.working_days if body.working_days is not None else current.working_days
            ),
            slot_interval_minutes=body.slot_interval_minutes or current.slot_interval_minutes,
            custom_working_hours=body.custom_working_hours,
        )
        validate_working_hours(working_hours)
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from None

    if working_hours.custom_working_hours is not None:
        working_hours = working_hours.model_copy(
            update={
                "working_days": derive_working_days(working_hours),
                "custom_working_hours": normalise_overrides(working_hours),
            }
        )

    store_working_hours(coach, working_hours)
    await session.commit()
    logger.info(
        "Saved working hours for coach %s: %s - %s on %s",
        coach.id,
        working_hours.start_time,
        working_hours.end_time,
        ", ".join(working_hours.working_days) or "no days",
    )
    return _read(coach.id, working_hours, False)

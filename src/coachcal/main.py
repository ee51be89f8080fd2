import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

import coachcal.models  # noqa: F401 (register all models with Base.metadata)
from coachcal.api.routes.blocked_times import router as blocked_times_router
from coachcal.api.routes.coaches import router as coaches_router
from coachcal.api.routes.lessons import router as lessons_router
from coachcal.api.routes.organizations import router as organizations_router
from coachcal.api.routes.slots import router as slots_router
from coachcal.api.routes.working_hours import router as working_hours_router
from coachcal.config import get_settings
from coachcal.database import Base, engine
from coachcal.schemas.system import StatusResponse


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Create tables on startup (dev convenience; migrations for production)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title="CoachCal",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(coaches_router)
    app.include_router(organizations_router)
    app.include_router(working_hours_router)
    app.include_router(blocked_times_router)
    app.include_router(lessons_router)
    app.include_router(slots_router)

    @app.get("/api/system/status", response_model=StatusResponse)
    async def system_status() -> StatusResponse:
        return StatusResponse(status="ok")

    return app


app = create_app()

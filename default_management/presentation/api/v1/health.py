"""Health check endpoint for service monitoring."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from default_management import __version__
from default_management.infrastructure.database import get_session_factory

logger = structlog.get_logger(__name__)

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    database: str = "ok"


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service and its database.",
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
)
async def health_check(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
):
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health_check_failed", error=str(exc))
        body = HealthResponse(status="unhealthy", version=__version__, database="unreachable")
        return JSONResponse(status_code=503, content=body.model_dump())

    return HealthResponse(version=__version__)

"""Service health and readiness probes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.api.dependencies import DbSession, Schedule
from attendance_payroll.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Store reachability plus the configuration payroll runs will use."""

    status: str
    checked_at: datetime
    database: str
    engine_version: str
    schedule: str
    schedule_fingerprint: str


async def _database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database probe failed: %s", e)
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession, schedule: Schedule) -> HealthResponse:
    """Report store status, engine version and the statutory schedule in force."""
    reachable = await _database_reachable(db)
    return HealthResponse(
        status="healthy" if reachable else "degraded",
        checked_at=datetime.now(timezone.utc),
        database="healthy" if reachable else "unhealthy",
        engine_version=get_settings().engine_version,
        schedule=schedule.name,
        schedule_fingerprint=schedule.fingerprint(),
    )


@router.get("/ready")
async def readiness_check(db: DbSession, response: Response) -> dict[str, str]:
    """Ready once the attendance store answers; 503 otherwise."""
    if not await _database_reachable(db):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable"}
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}

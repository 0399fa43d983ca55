"""Health & Readiness Checks — liveness, plus readiness for the signup write path.

Invariants:
    - GET /api/health/ always returns 200 if process is up (liveness)
    - GET /api/health/ready returns 200 only when a signup could be stored right now:
      database reachable AND waiting_list present
    - 503 reason distinguishes an unreachable store from a missing table

Design Decisions:
    - Table check in readiness: ensure_schema() failure at startup is logged, not
      raised, so the process can be live while the table is still absent
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import waitlist_api.infrastructure.database as db_module
from waitlist_api.infrastructure.storage_gateway import EntrantGateway

router = APIRouter(prefix="/api/health", tags=["health"])

SERVICE_NAME = "waitlist-api"
SERVICE_VERSION = "1.0.0"


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness check."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness_check():
    """Readiness check — database reachable and waiting_list table present."""
    manager = db_module.db_manager
    if manager is None or not await manager.health_check():
        return _not_ready("database_unavailable")
    if not await EntrantGateway(manager).schema_ready():
        return _not_ready("schema_missing")
    return {
        "status": "ready",
        "checks": {"database": "healthy", "waiting_list": "present"},
    }

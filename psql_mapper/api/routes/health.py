"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /_health/ always returns 200 if process is up (liveness)
    - GET /_health/ready returns 503 until the registry is built or while the
      database is unreachable (readiness)
    - The leading underscore keeps probes out of the snake_case table namespace
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/_health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "psql-mapper"}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — registry built and database reachable."""
    db = getattr(request.app.state, "db", None)
    dispatcher = getattr(request.app.state, "dispatcher", None)
    db_ok = await db.health_check() if db else False
    if not db_ok or dispatcher is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable" if not db_ok else "registry_not_built",
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "tables": len(dispatcher.registry.behaviors),
    }

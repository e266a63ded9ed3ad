"""
Service endpoints: health check and mobile app configuration.
"""

import time
import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from trackpay.app.core.config import settings
from trackpay.app.db.session import Database, get_database
from trackpay.app.domain.ledger.clock import utcnow

router = APIRouter(tags=["Health"])
logger = logging.getLogger("trackpay.health")

_started_at = time.monotonic()


@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """
    Health check endpoint.

    Returns 503 when the database does not answer ``SELECT 1``.
    """
    try:
        await database.ping()
    except Exception as exc:
        logger.error("Health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "error": str(exc) if settings.debug else "Database unavailable",
            }
        )

    return {
        "status": "healthy",
        "database": "connected",
        "uptime": round(time.monotonic() - _started_at, 3),
        "timestamp": utcnow().isoformat(),
    }


@router.get("/app-config")
async def app_config():
    """Latest mobile app version and whether clients must update."""
    return {
        "latestVersion": settings.latest_app_version,
        "forceUpdate": settings.force_update,
        "updateUrl": settings.update_url,
        "message": settings.update_message,
    }

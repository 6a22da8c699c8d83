"""
Health check routes.
Liveness + metadata for load balancers and uptime monitors.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from datetime import datetime, timezone
import time
import logging

from zeo_api.core.config import settings
from zeo_api.core.rate_limiting import limiter, HEALTH_LIMIT
from zeo_api.db.database import get_db
from zeo_api.db.repositories import DestinationRepository, ActivityRepository, TourRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Track startup time for uptime reporting
_STARTUP_TIME = time.time()


@router.get("/health")
@limiter.limit(HEALTH_LIMIT)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Service metadata plus row counts. Always 200; a failing database is
    reported as "degraded" rather than an error.
    """
    health = {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "SQLite",
        "version": settings.app_version,
        "uptime_seconds": int(time.time() - _STARTUP_TIME),
    }

    try:
        health["counts"] = {
            "destinations": DestinationRepository(db).count(),
            "activities": ActivityRepository(db).count(),
            "tours": TourRepository(db).count(),
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health["status"] = "degraded"

    return health


@router.get("/health/ready")
@limiter.limit(HEALTH_LIMIT)
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """Reports ready only when the database answers."""
    try:
        db.execute(text("SELECT 1"))
        return {"ready": True, "timestamp": datetime.now(timezone.utc).isoformat()}
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        return {"ready": False, "error": "database unavailable", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health/live")
def liveness_check():
    """Liveness probe. Returns 200 if service is running."""
    return {"alive": True, "uptime_seconds": int(time.time() - _STARTUP_TIME), "timestamp": datetime.now(timezone.utc).isoformat()}

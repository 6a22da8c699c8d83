"""
Cross-entity search and the homepage "featured" bundle.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any
import logging

from zeo_api.api.errors import storage_errors
from zeo_api.api.serializers import to_public
from zeo_api.core.config import settings
from zeo_api.core.rate_limiting import limiter, SEARCH_LIMIT
from zeo_api.db.database import get_db
from zeo_api.db.repositories import ActivityRepository, DestinationRepository, TourRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.get("/search", response_model=Dict[str, Any])
@limiter.limit(SEARCH_LIMIT)
def search(
    request: Request,
    q: Optional[str] = Query(None, description="Search text"),
    entity_type: Optional[str] = Query(
        None, alias="type", description="tours, destinations or activities; other values match nothing"
    ),
    db: Session = Depends(get_db),
):
    """
    Search tours, destinations and activities at once.
    Only the requested type's key is present when `type` is given, so an
    unrecognised type answers an empty object.
    """
    if not q:
        raise HTTPException(status_code=400, detail="Search query is required")

    results: Dict[str, Any] = {}
    with storage_errors("searching"):
        if not entity_type or entity_type == "tours":
            results["tours"] = TourRepository(db).search(q)
        if not entity_type or entity_type == "destinations":
            results["destinations"] = DestinationRepository(db).search(q)
        if not entity_type or entity_type == "activities":
            results["activities"] = ActivityRepository(db).search(q)

    logger.debug(
        f"Search '{q}' -> " + ", ".join(f"{k}={len(v)}" for k, v in results.items())
    )
    return to_public(results)


@router.get("/featured", response_model=Dict[str, Any])
def featured(db: Session = Depends(get_db)):
    """Up to `featured_limit` featured destinations, activities and tours."""
    limit = settings.featured_limit
    with storage_errors("fetching featured content"):
        content = {
            "destinations": DestinationRepository(db).get_featured(limit),
            "activities": ActivityRepository(db).get_featured(limit),
            "tours": TourRepository(db).get_featured(limit),
        }
    return to_public(content)

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Dict, Any
import logging

from zeo_api.api.errors import storage_errors
from zeo_api.api.serializers import to_public
from zeo_api.db.database import get_db
from zeo_api.db.repositories import ActivityRepository, TourRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["activities"])


@router.get("/activities", response_model=List[Dict[str, Any]])
def list_activities(db: Session = Depends(get_db)):
    with storage_errors("fetching activities"):
        activities = ActivityRepository(db).get_all()
    return to_public(activities)


@router.get("/activities/{slug}", response_model=Dict[str, Any])
def get_activity(slug: str, db: Session = Depends(get_db)):
    with storage_errors("fetching activity"):
        activity = ActivityRepository(db).get_by_slug(slug)
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")
    return to_public(activity)


@router.get("/activities/{slug}/tours", response_model=List[Dict[str, Any]])
def list_activity_tours(slug: str, db: Session = Depends(get_db)):
    with storage_errors("fetching tours by activity"):
        activity = ActivityRepository(db).get_by_slug(slug)
        if not activity:
            raise HTTPException(status_code=404, detail="Activity not found")
        tours = TourRepository(db).get_by_activity(activity["id"])
    return to_public(tours)

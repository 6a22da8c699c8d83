from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any
import logging
import re

from zeo_api.api.errors import storage_errors
from zeo_api.api.serializers import to_public
from zeo_api.db.database import get_db
from zeo_api.db.repositories import ActivityRepository, DestinationRepository, TourRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tours"])

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """Leading integer of `raw` ("3abc" -> 3). Non-numeric or non-positive values mean no limit."""
    match = _LEADING_INT.match(raw or "")
    if match is None:
        return None
    value = int(match.group())
    return value if value > 0 else None


def select_tours(
    db: Session,
    search: Optional[str] = None,
    destination: Optional[str] = None,
    activity: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Apply one filter: search, else destination slug, else activity slug,
    else everything. Unknown slugs give an empty list.
    """
    tours = TourRepository(db)
    if search:
        return tours.search(search)
    if destination:
        dest = DestinationRepository(db).get_by_slug(destination)
        return tours.get_by_destination(dest["id"]) if dest else []
    if activity:
        act = ActivityRepository(db).get_by_slug(activity)
        return tours.get_by_activity(act["id"]) if act else []
    return tours.get_all()


@router.get("/tours", response_model=List[Dict[str, Any]])
def list_tours(
    search: Optional[str] = Query(None, description="Substring of title, description, location or destination"),
    destination: Optional[str] = Query(None, description="Destination slug"),
    activity: Optional[str] = Query(None, description="Activity slug"),
    limit: Optional[str] = Query(None, description="Maximum number of tours; ignored unless a positive integer"),
    db: Session = Depends(get_db),
):
    """
    List tours, featured first then by rating.
    Only one of search / destination / activity is honoured, in that order.
    """
    with storage_errors("fetching tours"):
        tours = select_tours(db, search=search, destination=destination, activity=activity)
    max_tours = parse_limit(limit)
    if max_tours is not None:
        tours = tours[:max_tours]
    return to_public(tours)


@router.get("/tours/slug/{slug}", response_model=Dict[str, Any])
def get_tour_by_slug(slug: str, db: Session = Depends(get_db)):
    with storage_errors("fetching tour"):
        tour = TourRepository(db).get_by_slug(slug)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")
    return to_public(tour)


@router.get("/tours/{tour_id}", response_model=Dict[str, Any])
def get_tour(tour_id: int, db: Session = Depends(get_db)):
    """One tour by numeric id (non-numeric ids are rejected with 400)."""
    with storage_errors("fetching tour"):
        tour = TourRepository(db).get_by_id(tour_id)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")
    return to_public(tour)

"""
Admin API Routes
================
Write endpoints behind the admin API key (header X-API-Key).

  GET            /admin/sliders                  -- all slides incl. inactive
  POST/PUT/DELETE /admin/destinations[/{id}]
  POST/PUT/DELETE /admin/activities[/{id}]
  POST/PUT/DELETE /admin/tours[/{id}]             -- highlights/inclusions/activity_ids included
  POST/PUT/DELETE /admin/sliders[/{id}]
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
import logging

from zeo_api.api.errors import storage_errors
from zeo_api.api.serializers import to_public
from zeo_api.core.config import settings
from zeo_api.core.rate_limiting import limiter, ADMIN_LIMIT
from zeo_api.db.database import get_db
from zeo_api.db.repositories import (
    ActivityRepository,
    DestinationRepository,
    SliderRepository,
    TourRepository,
)

logger = logging.getLogger(__name__)


def require_admin_key(x_api_key: Optional[str] = Header(None)) -> None:
    if x_api_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_key)])


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class DestinationIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1)
    location: str
    description: str
    image: str
    duration: str = "Year Round"
    difficulty: str = "Easy to Moderate"
    rating: float = Field(4.5, ge=0, le=5)
    featured: bool = False


class DestinationPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    country: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    duration: Optional[str] = None
    difficulty: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    featured: Optional[bool] = None


class ActivityIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    image: str
    icon: str = ""
    featured: bool = False


class ActivityPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    icon: Optional[str] = None
    featured: Optional[bool] = None


class TourIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    category: str
    description: str
    image: str
    price: float = Field(..., ge=0)
    duration: str
    group_size: str = "2-12 people"
    difficulty: str
    rating: float = Field(..., ge=0, le=5)
    reviews: int = Field(0, ge=0)
    location: str
    best_time: str = "Year Round"
    featured: bool = False
    destination_id: Optional[int] = None
    highlights: List[str] = Field(default_factory=list)
    inclusions: List[str] = Field(default_factory=list)
    activity_ids: List[int] = Field(default_factory=list)


class TourPatch(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = None
    group_size: Optional[str] = None
    difficulty: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    reviews: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    best_time: Optional[str] = None
    featured: Optional[bool] = None
    destination_id: Optional[int] = None
    highlights: Optional[List[str]] = None
    inclusions: Optional[List[str]] = None
    activity_ids: Optional[List[int]] = None


class SliderIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    subtitle: str = ""
    location: str = ""
    image: str
    video: Optional[str] = None
    order_index: int = 0
    is_active: bool = True


class SliderPatch(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    subtitle: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


def _changes(payload: BaseModel) -> Dict[str, Any]:
    """Only the fields the client actually sent."""
    return payload.model_dump(exclude_unset=True)


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------

@router.post("/destinations", status_code=201)
@limiter.limit(ADMIN_LIMIT)
def create_destination(request: Request, payload: DestinationIn, db: Session = Depends(get_db)):
    repo = DestinationRepository(db)
    with storage_errors("creating destination", conflict="A destination with this slug already exists"):
        result = repo.insert(payload.model_dump())
        destination = repo.get_by_id(result["last_id"])
    logger.info(f"Destination created: {payload.slug} (#{result['last_id']})")
    return to_public(destination)


@router.put("/destinations/{destination_id}")
@limiter.limit(ADMIN_LIMIT)
def update_destination(
    request: Request, destination_id: int, payload: DestinationPatch, db: Session = Depends(get_db)
):
    with storage_errors("updating destination", conflict="A destination with this slug already exists"):
        destination = DestinationRepository(db).update(destination_id, _changes(payload))
    if destination is None:
        raise HTTPException(status_code=404, detail="Destination not found")
    return to_public(destination)


@router.delete("/destinations/{destination_id}")
@limiter.limit(ADMIN_LIMIT)
def delete_destination(request: Request, destination_id: int, db: Session = Depends(get_db)):
    """Tours that pointed at the destination keep existing, unattached."""
    with storage_errors("deleting destination"):
        deleted = DestinationRepository(db).delete(destination_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Destination not found")
    return {"message": "Destination deleted successfully"}


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------

@router.post("/activities", status_code=201)
@limiter.limit(ADMIN_LIMIT)
def create_activity(request: Request, payload: ActivityIn, db: Session = Depends(get_db)):
    repo = ActivityRepository(db)
    with storage_errors("creating activity", conflict="An activity with this slug already exists"):
        result = repo.insert(payload.model_dump())
        activity = repo.get_by_id(result["last_id"])
    logger.info(f"Activity created: {payload.slug} (#{result['last_id']})")
    return to_public(activity)


@router.put("/activities/{activity_id}")
@limiter.limit(ADMIN_LIMIT)
def update_activity(request: Request, activity_id: int, payload: ActivityPatch, db: Session = Depends(get_db)):
    with storage_errors("updating activity", conflict="An activity with this slug already exists"):
        activity = ActivityRepository(db).update(activity_id, _changes(payload))
    if activity is None:
        raise HTTPException(status_code=404, detail="Activity not found")
    return to_public(activity)


@router.delete("/activities/{activity_id}")
@limiter.limit(ADMIN_LIMIT)
def delete_activity(request: Request, activity_id: int, db: Session = Depends(get_db)):
    with storage_errors("deleting activity"):
        deleted = ActivityRepository(db).delete(activity_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Activity not found")
    return {"message": "Activity deleted successfully"}


# ---------------------------------------------------------------------------
# Tours
# ---------------------------------------------------------------------------

TOUR_CONFLICT = "Tour conflicts with existing data (duplicate slug or unknown destination/activity)"


@router.post("/tours", status_code=201)
@limiter.limit(ADMIN_LIMIT)
def create_tour(request: Request, payload: TourIn, db: Session = Depends(get_db)):
    repo = TourRepository(db)
    with storage_errors("creating tour", conflict=TOUR_CONFLICT):
        result = repo.insert(payload.model_dump())
        tour = repo.get_by_id(result["last_id"])
    logger.info(f"Tour created: {payload.slug} (#{result['last_id']})")
    return to_public(tour)


@router.put("/tours/{tour_id}")
@limiter.limit(ADMIN_LIMIT)
def update_tour(request: Request, tour_id: int, payload: TourPatch, db: Session = Depends(get_db)):
    with storage_errors("updating tour", conflict=TOUR_CONFLICT):
        tour = TourRepository(db).update(tour_id, _changes(payload))
    if tour is None:
        raise HTTPException(status_code=404, detail="Tour not found")
    return to_public(tour)


@router.delete("/tours/{tour_id}")
@limiter.limit(ADMIN_LIMIT)
def delete_tour(request: Request, tour_id: int, db: Session = Depends(get_db)):
    """Highlights, inclusions and activity links go with the tour."""
    with storage_errors("deleting tour"):
        deleted = TourRepository(db).delete(tour_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Tour not found")
    return {"message": "Tour deleted successfully"}


# ---------------------------------------------------------------------------
# Sliders
# ---------------------------------------------------------------------------

@router.get("/sliders", response_model=List[Dict[str, Any]])
def list_all_sliders(db: Session = Depends(get_db)):
    with storage_errors("fetching admin sliders"):
        sliders = SliderRepository(db).get_all()
    return to_public(sliders)


@router.post("/sliders", status_code=201)
@limiter.limit(ADMIN_LIMIT)
def create_slider(request: Request, payload: SliderIn, db: Session = Depends(get_db)):
    repo = SliderRepository(db)
    with storage_errors("creating slider"):
        result = repo.insert(payload.model_dump())
        slider = repo.get_by_id(result["last_id"])
    return to_public(slider)


@router.put("/sliders/{slider_id}")
@limiter.limit(ADMIN_LIMIT)
def update_slider(request: Request, slider_id: int, payload: SliderPatch, db: Session = Depends(get_db)):
    with storage_errors("updating slider"):
        slider = SliderRepository(db).update(slider_id, _changes(payload))
    if slider is None:
        raise HTTPException(status_code=404, detail="Slider not found")
    return to_public(slider)


@router.delete("/sliders/{slider_id}")
@limiter.limit(ADMIN_LIMIT)
def delete_slider(request: Request, slider_id: int, db: Session = Depends(get_db)):
    with storage_errors("deleting slider"):
        deleted = SliderRepository(db).delete(slider_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Slider not found")
    return {"message": "Slider deleted successfully"}

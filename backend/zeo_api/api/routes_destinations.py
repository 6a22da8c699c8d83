from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Dict, Any
import logging

from zeo_api.api.errors import storage_errors
from zeo_api.api.serializers import to_public
from zeo_api.db.database import get_db
from zeo_api.db.repositories import DestinationRepository, TourRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["destinations"])


@router.get("/destinations", response_model=List[Dict[str, Any]])
def list_destinations(db: Session = Depends(get_db)):
    """All destinations, A-Z."""
    with storage_errors("fetching destinations"):
        destinations = DestinationRepository(db).get_all()
    return to_public(destinations)


@router.get("/destinations/{slug}", response_model=Dict[str, Any])
def get_destination(slug: str, db: Session = Depends(get_db)):
    with storage_errors("fetching destination"):
        destination = DestinationRepository(db).get_by_slug(slug)
    if not destination:
        raise HTTPException(status_code=404, detail="Destination not found")
    return to_public(destination)


@router.get("/destinations/{slug}/tours", response_model=List[Dict[str, Any]])
def list_destination_tours(slug: str, db: Session = Depends(get_db)):
    """Tours attached to the destination, featured first."""
    with storage_errors("fetching tours by destination"):
        destination = DestinationRepository(db).get_by_slug(slug)
        if not destination:
            raise HTTPException(status_code=404, detail="Destination not found")
        tours = TourRepository(db).get_by_destination(destination["id"])
    return to_public(tours)

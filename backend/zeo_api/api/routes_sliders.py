from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Dict, Any
import logging

from zeo_api.api.errors import storage_errors
from zeo_api.api.serializers import to_public
from zeo_api.db.database import get_db
from zeo_api.db.repositories import SliderRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sliders"])


@router.get("/sliders", response_model=List[Dict[str, Any]])
def list_sliders(db: Session = Depends(get_db)):
    """Active hero slides in display order."""
    with storage_errors("fetching sliders"):
        sliders = SliderRepository(db).get_active()
    return to_public(sliders)


@router.get("/sliders/{slider_id}", response_model=Dict[str, Any])
def get_slider(slider_id: int, db: Session = Depends(get_db)):
    with storage_errors("fetching slider"):
        slider = SliderRepository(db).get_by_id(slider_id)
    if not slider:
        raise HTTPException(status_code=404, detail="Slider not found")
    return to_public(slider)

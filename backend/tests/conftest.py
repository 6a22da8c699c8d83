"""
Shared fixtures: a throwaway SQLite file per test, a session bound to it,
and a TestClient whose `get_db` dependency hands out that same session.
"""

from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from zeo_api.core.config import settings
from zeo_api.core.rate_limiting import limiter
from zeo_api.db.database import create_db_engine, create_session_factory, get_db, init_db
from zeo_api.db.repositories import (
    ActivityRepository,
    DestinationRepository,
    SliderRepository,
    TourRepository,
)
from zeo_api.main import app

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def destination_data(**overrides) -> Dict[str, Any]:
    data = {
        "name": "Pokhara",
        "slug": "pokhara",
        "country": "Nepal",
        "location": "Nepal",
        "description": "Lakeside city below the Annapurnas",
        "image": "pokhara.jpg",
        "duration": "Year Round",
        "difficulty": "Easy",
        "rating": 4.8,
        "featured": True,
    }
    data.update(overrides)
    return data


def activity_data(**overrides) -> Dict[str, Any]:
    data = {
        "name": "Paragliding",
        "slug": "paragliding",
        "description": "Tandem flights over Phewa Lake",
        "image": "paragliding.jpg",
        "icon": "wind",
        "featured": True,
    }
    data.update(overrides)
    return data


def tour_data(**overrides) -> Dict[str, Any]:
    data = {
        "title": "Pokhara Day Trip",
        "slug": "pokhara-day-trip",
        "category": "Adventure",
        "description": "Sunrise at Sarangkot and a boat on the lake",
        "image": "pokhara-day-trip.jpg",
        "price": 140.0,
        "duration": "1 day",
        "group_size": "2-10 people",
        "difficulty": "Easy",
        "rating": 4.5,
        "reviews": 12,
        "location": "Pokhara, Nepal",
        "best_time": "Year Round",
        "featured": True,
        "destination_id": None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = settings.rate_limit_enabled


@pytest.fixture
def admin_headers():
    return {"X-API-Key": settings.admin_api_key}


@pytest.fixture
def seeded(db):
    """The Pokhara destination, one linked tour and one unrelated activity."""
    destinations = DestinationRepository(db)
    activities = ActivityRepository(db)
    tours = TourRepository(db)

    destination_id = destinations.insert(destination_data())["last_id"]
    activity_id = activities.insert(activity_data())["last_id"]
    tour_id = tours.insert(
        tour_data(
            destination_id=destination_id,
            highlights=["Sarangkot sunrise", "Phewa Lake boating"],
            inclusions=["Hotel pickup"],
        )
    )["last_id"]
    return {"destination_id": destination_id, "activity_id": activity_id, "tour_id": tour_id}


@pytest.fixture
def slider_repo(db):
    return SliderRepository(db)

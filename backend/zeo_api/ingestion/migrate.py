"""
Legacy JSON fixtures -> SQLite.

Reads destinations.json, activities.json and tours.json from the data
directory and upserts every record by slug, so the migration can be re-run
against an already populated database.

Tours are linked to destinations and activities by exact name, or by the
fixture's own ids when the names are absent. References that resolve to
nothing are dropped. A record that fails to load is logged with its name
and counted; the rest of the batch continues.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zeo_api.core.monitoring import track_performance
from zeo_api.db.repositories import ActivityRepository, DestinationRepository, TourRepository
from zeo_api.ingestion.slugs import slugify

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION_RATING = 4.5
FEATURED_TOUR_COUNT = 10

# per-record problems that skip the record instead of aborting the run
RECORD_ERRORS = (SQLAlchemyError, KeyError, TypeError, ValueError)


@dataclass
class EntityCount:
    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


@dataclass
class MigrationSummary:
    destinations: EntityCount = field(default_factory=EntityCount)
    activities: EntityCount = field(default_factory=EntityCount)
    tours: EntityCount = field(default_factory=EntityCount)

    @property
    def failed(self) -> int:
        return self.destinations.failed + self.activities.failed + self.tours.failed


def load_fixture(data_dir: Path, filename: str) -> List[Dict[str, Any]]:
    """Read one fixture file; `{"tours": [...]}` style wrappers are unwrapped."""
    path = Path(data_dir) / filename
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get(path.stem, [])
    logger.info(f"Loaded {len(data)} records from {path.name}")
    return data


# ---------------------------------------------------------------------------
# Fixture record -> table row
# ---------------------------------------------------------------------------

def destination_row(dest: Dict[str, Any]) -> Dict[str, Any]:
    href = dest.get("href") or ""
    slug = href.replace("/destinations/", "") if href else slugify(dest["name"])
    featured = bool(dest.get("featured")) or (dest.get("tourCount") or 0) > FEATURED_TOUR_COUNT
    return {
        "name": dest["name"],
        "slug": slug,
        "country": dest.get("country"),
        "location": dest.get("location") or dest.get("country"),
        "description": dest.get("description"),
        "image": dest.get("image"),
        "duration": dest.get("bestTime") or "Year Round",
        "difficulty": dest.get("difficulty"),
        "rating": dest.get("rating") or DEFAULT_DESTINATION_RATING,
        "featured": featured,
    }


def activity_row(activity: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": activity["name"],
        "slug": activity.get("slug") or slugify(activity["name"]),
        "description": activity.get("description") or "",
        "image": activity.get("image"),
        "icon": activity.get("icon") or "",
        "featured": bool(activity.get("featured")),
    }


def _resolve_destination(
    tour: Dict[str, Any], by_name: Dict[str, int], by_old_id: Dict[Any, int]
) -> Optional[int]:
    name = tour.get("destination")
    if isinstance(name, dict):
        name = name.get("name")
    if name in by_name:
        return by_name[name]
    return by_old_id.get(tour.get("destinationId"))


def _resolve_activities(
    tour: Dict[str, Any], by_name: Dict[str, int], by_old_id: Dict[Any, int]
) -> List[int]:
    ids = []
    for entry in tour.get("activities") or []:
        name = entry.get("name") if isinstance(entry, dict) else entry
        if name in by_name:
            ids.append(by_name[name])
    for old_id in tour.get("activityIds") or []:
        if old_id in by_old_id:
            ids.append(by_old_id[old_id])
    return list(dict.fromkeys(ids))


def tour_row(
    tour: Dict[str, Any],
    destination_id: Optional[int],
    activity_ids: List[int],
) -> Dict[str, Any]:
    return {
        "title": tour["title"],
        "slug": tour.get("slug") or slugify(tour["title"]),
        "category": tour.get("category"),
        "description": tour.get("description"),
        "image": tour.get("image"),
        "price": tour.get("price"),
        "duration": tour.get("duration"),
        "group_size": tour.get("groupSize") or tour.get("group_size") or "2-12",
        "difficulty": tour.get("difficulty"),
        "rating": tour.get("rating"),
        "reviews": tour.get("reviews") or 0,
        "location": tour.get("location"),
        "best_time": tour.get("bestTime") or tour.get("best_time") or "Year Round",
        "featured": bool(tour.get("featured")),
        "destination_id": destination_id,
        "highlights": tour.get("highlights") or [],
        "inclusions": tour.get("inclusions") or [],
        "activity_ids": activity_ids,
    }


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------

@track_performance("Data migration")
def migrate_data(db: Session, data_dir: Path) -> MigrationSummary:
    """
    Load all three fixture files into the database.
    Missing or unreadable fixture files raise before anything is written.
    """
    destinations = load_fixture(data_dir, "destinations.json")
    activities = load_fixture(data_dir, "activities.json")
    tours = load_fixture(data_dir, "tours.json")

    summary = MigrationSummary()
    dest_repo = DestinationRepository(db)
    activity_repo = ActivityRepository(db)
    tour_repo = TourRepository(db)

    logger.info("Migrating destinations...")
    dest_by_name: Dict[str, int] = {}
    dest_by_old_id: Dict[Any, int] = {}
    for dest in destinations:
        name = dest.get("name", "<unnamed>")
        try:
            result = dest_repo.upsert(destination_row(dest))
        except RECORD_ERRORS as e:
            summary.destinations.failed += 1
            logger.error(f"Failed to migrate destination '{name}': {e}")
            continue
        summary.destinations.succeeded += 1
        dest_by_name[name] = result["last_id"]
        if "id" in dest:
            dest_by_old_id[dest["id"]] = result["last_id"]
        logger.info(f"{'Inserted' if result['created'] else 'Updated'} destination: {name}")

    logger.info("Migrating activities...")
    activity_by_name: Dict[str, int] = {}
    activity_by_old_id: Dict[Any, int] = {}
    for activity in activities:
        name = activity.get("name", "<unnamed>")
        try:
            result = activity_repo.upsert(activity_row(activity))
        except RECORD_ERRORS as e:
            summary.activities.failed += 1
            logger.error(f"Failed to migrate activity '{name}': {e}")
            continue
        summary.activities.succeeded += 1
        activity_by_name[name] = result["last_id"]
        if "id" in activity:
            activity_by_old_id[activity["id"]] = result["last_id"]
        logger.info(f"{'Inserted' if result['created'] else 'Updated'} activity: {name}")

    logger.info("Migrating tours...")
    for tour in tours:
        title = tour.get("title", "<untitled>")
        try:
            row = tour_row(
                tour,
                _resolve_destination(tour, dest_by_name, dest_by_old_id),
                _resolve_activities(tour, activity_by_name, activity_by_old_id),
            )
            result = tour_repo.upsert(row)
        except RECORD_ERRORS as e:
            summary.tours.failed += 1
            logger.error(f"Failed to migrate tour '{title}': {e}")
            continue
        summary.tours.succeeded += 1
        logger.info(f"{'Inserted' if result['created'] else 'Updated'} tour: {title}")

    logger.info("Migration Summary:")
    logger.info(f"- Destinations: {summary.destinations.succeeded}/{summary.destinations.total}")
    logger.info(f"- Activities: {summary.activities.succeeded}/{summary.activities.total}")
    logger.info(f"- Tours: {summary.tours.succeeded}/{summary.tours.total}")
    return summary

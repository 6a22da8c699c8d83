"""
Repository pattern for data access.
One repository per entity, each bound to an explicit Session. Every method
returns plain dicts (or lists of dicts) ready to be serialized.

SQL errors propagate to the caller; write methods roll the session back
before re-raising. Lookups return None for missing rows.
"""

from typing import List, Optional, Dict, Any, Iterator, Sequence
from collections import defaultdict
from sqlalchemy.orm import Session, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import or_
import logging

from zeo_api.db.models import (
    Destination,
    Activity,
    Tour,
    TourHighlight,
    TourInclusion,
    TourActivity,
    Slider,
)

logger = logging.getLogger(__name__)

# Bound-parameter budget per IN (...) clause
IN_CLAUSE_CHUNK = 500


def row_to_dict(obj) -> Dict[str, Any]:
    """Column values of an ORM row as a dict, in table column order."""
    return {column.name: getattr(obj, column.key) for column in obj.__table__.columns}


def _chunks(ids: Sequence[int], size: int = IN_CLAUSE_CHUNK) -> Iterator[Sequence[int]]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


class _Repository:
    """Shared CRUD plumbing. Subclasses declare `model`, `fields`, `flags`."""

    model = None
    # writable column -> default applied on insert (None = no default)
    fields: Dict[str, Any] = {}
    # integer 0/1 columns
    flags: frozenset = frozenset()

    def __init__(self, db: Session):
        self.db = db

    @property
    def _table(self) -> str:
        return self.model.__tablename__

    def _values(self, data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """Pick writable columns from `data`, applying defaults unless partial."""
        values = {}
        for column, default in self.fields.items():
            if partial and column not in data:
                continue
            value = data.get(column)
            if value is None and not partial:
                value = default
            if column in self.flags and value is not None:
                value = 1 if value else 0
            values[column] = value
        return values

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{action} failed: {e}")
            raise

    def _first(self, **filters) -> Optional[Dict[str, Any]]:
        obj = self.db.query(self.model).filter_by(**filters).first()
        return row_to_dict(obj) if obj is not None else None

    def get_by_id(self, obj_id: int) -> Optional[Dict[str, Any]]:
        return self._first(id=obj_id)

    def count(self) -> int:
        return self.db.query(self.model).count()

    def insert(self, data: Dict[str, Any]) -> Dict[str, int]:
        """Insert one row. Returns {"last_id", "changes"}."""
        obj = self.model(**self._values(data))
        self.db.add(obj)
        self._commit(f"Insert into {self._table}")
        return {"last_id": obj.id, "changes": 1}

    def update(self, obj_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Partial update. Returns the stored row, or None if it does not exist."""
        obj = self.db.get(self.model, obj_id)
        if obj is None:
            return None
        for column, value in self._values(changes, partial=True).items():
            setattr(obj, column, value)
        self._commit(f"Update {self._table} #{obj_id}")
        return row_to_dict(obj)

    def delete(self, obj_id: int) -> int:
        """Delete by id. Dependent rows follow the table's FK actions."""
        changes = (
            self.db.query(self.model)
            .filter(self.model.id == obj_id)
            .delete(synchronize_session=False)
        )
        self._commit(f"Delete from {self._table} #{obj_id}")
        return changes


class _SluggedRepository(_Repository):

    def get_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self._first(slug=slug)

    def upsert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert, or update the row that already owns data["slug"]."""
        existing = self.db.query(self.model).filter_by(slug=data.get("slug")).first()
        if existing is None:
            result = self.insert(data)
            result["created"] = True
            return result
        for column, value in self._values(data).items():
            setattr(existing, column, value)
        self._commit(f"Upsert {self._table} '{data.get('slug')}'")
        return {"last_id": existing.id, "changes": 1, "created": False}


# ============================================================================
# DESTINATIONS
# ============================================================================

class DestinationRepository(_SluggedRepository):
    model = Destination
    fields = {
        "name": None,
        "slug": None,
        "country": None,
        "location": None,
        "description": None,
        "image": None,
        "duration": None,
        "difficulty": None,
        "rating": None,
        "featured": 0,
    }
    flags = frozenset({"featured"})

    def get_all(self) -> List[Dict[str, Any]]:
        """All destinations, A-Z by name."""
        rows = self.db.query(Destination).order_by(Destination.name.asc()).all()
        return [row_to_dict(d) for d in rows]

    def search(self, q: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on name, description or country."""
        pattern = f"%{q}%"
        rows = (
            self.db.query(Destination)
            .filter(
                or_(
                    Destination.name.ilike(pattern),
                    Destination.description.ilike(pattern),
                    Destination.country.ilike(pattern),
                )
            )
            .order_by(Destination.name.asc())
            .all()
        )
        return [row_to_dict(d) for d in rows]

    def get_featured(self, limit: int) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(Destination)
            .filter(Destination.featured == 1)
            .order_by(Destination.name.asc())
            .limit(limit)
            .all()
        )
        return [row_to_dict(d) for d in rows]


# ============================================================================
# ACTIVITIES
# ============================================================================

class ActivityRepository(_SluggedRepository):
    model = Activity
    fields = {
        "name": None,
        "slug": None,
        "description": "",
        "image": None,
        "icon": "",
        "featured": 0,
    }
    flags = frozenset({"featured"})

    def get_all(self) -> List[Dict[str, Any]]:
        rows = self.db.query(Activity).order_by(Activity.name.asc()).all()
        return [row_to_dict(a) for a in rows]

    def search(self, q: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on name or description."""
        pattern = f"%{q}%"
        rows = (
            self.db.query(Activity)
            .filter(or_(Activity.name.ilike(pattern), Activity.description.ilike(pattern)))
            .order_by(Activity.name.asc())
            .all()
        )
        return [row_to_dict(a) for a in rows]

    def get_featured(self, limit: int) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(Activity)
            .filter(Activity.featured == 1)
            .order_by(Activity.name.asc())
            .limit(limit)
            .all()
        )
        return [row_to_dict(a) for a in rows]


# ============================================================================
# TOURS
# ============================================================================

class TourRepository(_SluggedRepository):
    """
    Tours joined to their destination and enriched with highlights,
    inclusions and activities.

    Listing order everywhere: featured first, then rating high to low.
    Children are loaded with one query per child table for the whole
    result set, not one query per tour.
    """

    model = Tour
    fields = {
        "title": None,
        "slug": None,
        "category": None,
        "description": None,
        "image": None,
        "price": None,
        "duration": None,
        "group_size": None,
        "difficulty": None,
        "rating": None,
        "reviews": 0,
        "location": None,
        "best_time": None,
        "featured": 0,
        "destination_id": None,
    }
    flags = frozenset({"featured"})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def _base_query(self) -> Query:
        return (
            self.db.query(
                Tour,
                Destination.name.label("destination_name"),
                Destination.slug.label("destination_slug"),
            )
            .outerjoin(Destination, Tour.destination_id == Destination.id)
        )

    @staticmethod
    def _ordered(query: Query) -> Query:
        return query.order_by(Tour.featured.desc(), Tour.rating.desc(), Tour.id.asc())

    def _enrich(self, rows) -> List[Dict[str, Any]]:
        tours = []
        for tour, destination_name, destination_slug in rows:
            data = row_to_dict(tour)
            data["destination_name"] = destination_name
            data["destination_slug"] = destination_slug
            tours.append(data)
        if not tours:
            return tours

        ids = [t["id"] for t in tours]
        highlights: Dict[int, List[str]] = defaultdict(list)
        inclusions: Dict[int, List[str]] = defaultdict(list)
        activities: Dict[int, List[Dict[str, Any]]] = defaultdict(list)

        for chunk in _chunks(ids):
            for tour_id, text in (
                self.db.query(TourHighlight.tour_id, TourHighlight.highlight)
                .filter(TourHighlight.tour_id.in_(chunk))
                .order_by(TourHighlight.id)
            ):
                highlights[tour_id].append(text)

            for tour_id, text in (
                self.db.query(TourInclusion.tour_id, TourInclusion.inclusion)
                .filter(TourInclusion.tour_id.in_(chunk))
                .order_by(TourInclusion.id)
            ):
                inclusions[tour_id].append(text)

            for tour_id, activity in (
                self.db.query(TourActivity.tour_id, Activity)
                .join(Activity, Activity.id == TourActivity.activity_id)
                .filter(TourActivity.tour_id.in_(chunk))
                .order_by(TourActivity.id)
            ):
                activities[tour_id].append(row_to_dict(activity))

        for data in tours:
            data["highlights"] = highlights.get(data["id"], [])
            data["inclusions"] = inclusions.get(data["id"], [])
            data["activities"] = activities.get(data["id"], [])
        return tours

    def _single(self, query: Query) -> Optional[Dict[str, Any]]:
        tours = self._enrich(query.all())
        return tours[0] if tours else None

    def get_all(self) -> List[Dict[str, Any]]:
        return self._enrich(self._ordered(self._base_query()).all())

    def get_by_id(self, tour_id: int) -> Optional[Dict[str, Any]]:
        return self._single(self._base_query().filter(Tour.id == tour_id))

    def get_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self._single(self._base_query().filter(Tour.slug == slug))

    def get_by_destination(self, destination_id: int) -> List[Dict[str, Any]]:
        query = self._base_query().filter(Tour.destination_id == destination_id)
        return self._enrich(self._ordered(query).all())

    def get_by_activity(self, activity_id: int) -> List[Dict[str, Any]]:
        query = (
            self._base_query()
            .join(TourActivity, TourActivity.tour_id == Tour.id)
            .filter(TourActivity.activity_id == activity_id)
        )
        return self._enrich(self._ordered(query).all())

    def search(self, q: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on title, description, location or destination name."""
        pattern = f"%{q}%"
        query = self._base_query().filter(
            or_(
                Tour.title.ilike(pattern),
                Tour.description.ilike(pattern),
                Tour.location.ilike(pattern),
                Destination.name.ilike(pattern),
            )
        )
        return self._enrich(self._ordered(query).all())

    def get_featured(self, limit: int) -> List[Dict[str, Any]]:
        query = self._base_query().filter(Tour.featured == 1)
        return self._enrich(self._ordered(query).limit(limit).all())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def _write_children(self, tour_id: int, data: Dict[str, Any], replace: bool = False) -> None:
        """Write the child lists present in `data`; `replace` drops existing rows first."""
        if "highlights" in data:
            if replace:
                self.db.query(TourHighlight).filter(TourHighlight.tour_id == tour_id).delete(
                    synchronize_session=False
                )
            self.db.add_all(
                [TourHighlight(tour_id=tour_id, highlight=text) for text in data["highlights"] or []]
            )

        if "inclusions" in data:
            if replace:
                self.db.query(TourInclusion).filter(TourInclusion.tour_id == tour_id).delete(
                    synchronize_session=False
                )
            self.db.add_all(
                [TourInclusion(tour_id=tour_id, inclusion=text) for text in data["inclusions"] or []]
            )

        if "activity_ids" in data:
            if replace:
                self.db.query(TourActivity).filter(TourActivity.tour_id == tour_id).delete(
                    synchronize_session=False
                )
            activity_ids = list(dict.fromkeys(data["activity_ids"] or []))
            self.db.add_all(
                [TourActivity(tour_id=tour_id, activity_id=activity_id) for activity_id in activity_ids]
            )

        self.db.flush()

    def insert(self, data: Dict[str, Any]) -> Dict[str, int]:
        """
        Insert a tour with its highlights, inclusions and activity links
        (`activity_ids`) in one transaction. Any failure rolls back the
        whole tour.
        """
        tour = Tour(**self._values(data))
        try:
            self.db.add(tour)
            self.db.flush()
            tour_id = tour.id
            self._write_children(tour_id, data)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Insert tour '{data.get('slug')}' failed, rolled back: {e}")
            raise
        return {"last_id": tour_id, "changes": 1}

    def upsert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert by slug, or overwrite the existing tour and replace its children."""
        existing = self.db.query(Tour).filter(Tour.slug == data.get("slug")).first()
        if existing is None:
            result = self.insert(data)
            result["created"] = True
            return result

        tour_id = existing.id
        try:
            for column, value in self._values(data).items():
                setattr(existing, column, value)
            children = {key: data.get(key) or [] for key in ("highlights", "inclusions", "activity_ids")}
            self._write_children(tour_id, children, replace=True)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Upsert tour '{data.get('slug')}' failed, rolled back: {e}")
            raise
        return {"last_id": tour_id, "changes": 1, "created": False}

    def update(self, tour_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Partial update; child lists present in `changes` are replaced."""
        tour = self.db.get(Tour, tour_id)
        if tour is None:
            return None
        try:
            for column, value in self._values(changes, partial=True).items():
                setattr(tour, column, value)
            self._write_children(tour_id, changes, replace=True)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Update tour #{tour_id} failed, rolled back: {e}")
            raise
        return self.get_by_id(tour_id)


# ============================================================================
# SLIDERS
# ============================================================================

class SliderRepository(_Repository):
    model = Slider
    fields = {
        "title": None,
        "subtitle": "",
        "location": "",
        "image": None,
        "video": None,
        "order_index": 0,
        "is_active": 1,
    }
    flags = frozenset({"is_active"})

    def get_active(self) -> List[Dict[str, Any]]:
        """Active slides in display order."""
        rows = (
            self.db.query(Slider)
            .filter(Slider.is_active == 1)
            .order_by(Slider.order_index.asc(), Slider.id.asc())
            .all()
        )
        return [row_to_dict(s) for s in rows]

    def get_all(self) -> List[Dict[str, Any]]:
        """Every slide, inactive included, in display order."""
        rows = self.db.query(Slider).order_by(Slider.order_index.asc(), Slider.id.asc()).all()
        return [row_to_dict(s) for s in rows]

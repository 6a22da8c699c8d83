"""
Database models -- SQLAlchemy ORM definitions.
Seven tables: destinations, activities, tours, tour_highlights,
tour_inclusions, tour_activities (junction) and sliders.

Flags (featured, is_active) are stored as 0/1 integers; the API layer
converts them to booleans.
"""

from sqlalchemy import Column, Integer, Text, Float, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _created_at():
    return Column(DateTime, server_default=func.current_timestamp())


def _updated_at():
    return Column(DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


class Destination(Base):
    __tablename__ = "destinations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, index=True)
    slug = Column(Text, unique=True, nullable=False)
    country = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(Text, nullable=False)
    duration = Column(Text, nullable=False)
    difficulty = Column(Text, nullable=False)
    rating = Column(Float, nullable=False)
    featured = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = _created_at()
    updated_at = _updated_at()


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, index=True)
    slug = Column(Text, unique=True, nullable=False)
    description = Column(Text)
    image = Column(Text, nullable=False)
    icon = Column(Text)
    featured = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = _created_at()
    updated_at = _updated_at()


class Tour(Base):
    """
    A bookable tour. Optionally attached to one destination; owns its
    highlights, inclusions and activity links.
    """
    __tablename__ = "tours"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, unique=True, nullable=False)
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    duration = Column(Text, nullable=False)
    group_size = Column(Text, nullable=False)
    difficulty = Column(Text, nullable=False)
    rating = Column(Float, nullable=False)
    reviews = Column(Integer, default=0, server_default="0")
    location = Column(Text, nullable=False)
    best_time = Column(Text, nullable=False)
    featured = Column(Integer, nullable=False, default=0, server_default="0")
    destination_id = Column(
        Integer, ForeignKey("destinations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at = _created_at()
    updated_at = _updated_at()


class TourHighlight(Base):
    __tablename__ = "tour_highlights"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    highlight = Column(Text, nullable=False)


class TourInclusion(Base):
    __tablename__ = "tour_inclusions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    inclusion = Column(Text, nullable=False)


class TourActivity(Base):
    """Junction table: tours <-> activities."""
    __tablename__ = "tour_activities"
    __table_args__ = (UniqueConstraint("tour_id", "activity_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)


class Slider(Base):
    """Homepage hero slide."""
    __tablename__ = "sliders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    subtitle = Column(Text)
    location = Column(Text)
    image = Column(Text, nullable=False)
    video = Column(Text)
    order_index = Column(Integer, default=0, server_default="0")
    is_active = Column(Integer, nullable=False, default=1, server_default="1")
    created_at = _created_at()
    updated_at = _updated_at()

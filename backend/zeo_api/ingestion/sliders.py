"""
Seed the homepage hero sliders.
Does nothing when active sliders are already present.
"""

from dataclasses import dataclass
from typing import Any, Dict, List
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zeo_api.db.repositories import SliderRepository

logger = logging.getLogger(__name__)

DEFAULT_SLIDERS: List[Dict[str, Any]] = [
    {
        "title": "Experience Nepal",
        "subtitle": "Immerse yourself in the beauty of Nepal",
        "location": "Nepal Himalayas",
        "image": "https://images.unsplash.com/photo-1585409677983-0f6c41ca9c3b?q=80&w=2069",
        "video": "/video/slider video.mp4",
        "order_index": 1,
        "is_active": True,
    },
    {
        "title": "Journey Beyond Ordinary",
        "subtitle": "Discover the mystical peaks of the Himalayas",
        "location": "Mount Everest, Nepal",
        "image": "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?q=80&w=2070",
        "video": None,
        "order_index": 2,
        "is_active": True,
    },
    {
        "title": "Cultural Immersion",
        "subtitle": "Explore ancient temples and vibrant traditions",
        "location": "Kathmandu Valley, Nepal",
        "image": "https://images.unsplash.com/photo-1609920658906-8223bd289001?q=80&w=2070",
        "video": None,
        "order_index": 3,
        "is_active": True,
    },
]


@dataclass
class SliderSeedSummary:
    inserted: int = 0
    failed: int = 0
    skipped: bool = False


def migrate_sliders(db: Session, sliders: List[Dict[str, Any]] = DEFAULT_SLIDERS) -> SliderSeedSummary:
    repo = SliderRepository(db)
    summary = SliderSeedSummary()

    existing = repo.get_active()
    if existing:
        logger.warning(f"Found {len(existing)} active sliders. Skipping slider migration.")
        summary.skipped = True
        return summary

    logger.info(f"Migrating {len(sliders)} sliders...")
    for slider in sliders:
        try:
            result = repo.insert(slider)
        except SQLAlchemyError as e:
            summary.failed += 1
            logger.error(f"Error migrating slider '{slider.get('title')}': {e}")
            continue
        summary.inserted += 1
        logger.info(f"Migrated slider: {slider['title']} (ID: {result['last_id']})")

    logger.info(f"Slider migration: {summary.inserted} inserted, {summary.failed} failed")
    return summary

"""
Scraper output -> tours.json.

Turns the raw records produced by the Guru Travels scraper into complete
tour fixtures and appends them to the existing tours file. Fields the
scraper cannot provide get fixed defaults; rating, review count and the
featured flag are drawn at random. Pass a seed to make a run reproducible.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import random

from zeo_api.core.monitoring import track_performance

logger = logging.getLogger(__name__)

# Site-wide pages the scraper picks up alongside real tours
PLACEHOLDER_TITLES = frozenset({
    "Guru Travels Limited | #1st Public Limited Travel in Nepal",
    "Inbound/Domestic and International Holiday Packages.",
})
# Duplicates of hand-authored seed tours
EXCLUDED_TITLE_FRAGMENTS = (
    "Experience Everest Base Camp During Dashain",
    "Langtang Valley Trek – The Hidden Gem",
)

DEFAULT_IMAGE = "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?q=80&w=2070"
DEFAULT_HIGHLIGHTS = [
    "Professional guide service",
    "Comprehensive itinerary",
    "Cultural experience",
    "Scenic beauty",
]
DEFAULT_INCLUSIONS = [
    "Airport transfers",
    "Accommodation",
    "Experienced guide",
    "All meals during tour",
    "Permits and fees",
    "Transportation",
]
DEFAULT_EXCLUSIONS = [
    "International flights",
    "Nepal visa fees",
    "Personal expenses",
    "Travel insurance",
    "Tips for guide",
]
WHAT_TO_BRING = [
    "Comfortable walking shoes",
    "Weather appropriate clothing",
    "Personal medications",
    "Camera",
    "Sunglasses and sunscreen",
]

FEATURED_PROBABILITY = 0.3


@dataclass
class ImportSummary:
    imported: int
    total: int


def _price(item: Dict[str, Any]) -> float:
    try:
        return float(item.get("priceAmount") or 0)
    except (TypeError, ValueError):
        return 0.0


def is_importable(item: Dict[str, Any]) -> bool:
    """A real, priced tour with a title and slug."""
    title = item.get("title")
    if not title or not item.get("slug"):
        return False
    if title in PLACEHOLDER_TITLES:
        return False
    if any(fragment in title for fragment in EXCLUDED_TITLE_FRAGMENTS):
        return False
    return _price(item) > 0


def to_tour(item: Dict[str, Any], tour_id: int, rng: random.Random, now: str) -> Dict[str, Any]:
    """Build a complete tour fixture from one scraped record."""
    category = item.get("category") or "General"
    trekking = category == "Trekking"
    images = item.get("images") or []
    difficulty = item.get("difficulty") or ("Moderate" if trekking else "Easy")

    if item.get("durationDays"):
        duration = f"{item['durationDays']} days"
    else:
        duration = item.get("duration") or "10 days"

    return {
        "id": tour_id,
        "slug": item["slug"],
        "title": item["title"],
        "category": "Cultural" if category == "General" else category,
        "description": (
            item.get("excerpt")
            or item.get("description")
            or f"Experience {item['title']} with professional guides and comprehensive services."
        ),
        "location": item.get("destination") or "Nepal",
        "price": _price(item),
        "duration": duration,
        "group_size": "2-12 people",
        "difficulty": difficulty,
        "rating": 4.0 + rng.random(),
        "reviews": rng.randrange(50, 250),
        "best_time": "March-May, September-November",
        "featured": rng.random() > 1 - FEATURED_PROBABILITY,
        "listed": True,
        "image": images[0] if images else DEFAULT_IMAGE,
        "gallery": images,
        "highlights": item.get("highlights") or list(DEFAULT_HIGHLIGHTS),
        "inclusions": list(DEFAULT_INCLUSIONS),
        "exclusions": list(DEFAULT_EXCLUSIONS),
        "activities": [
            {
                "name": "Trekking" if trekking else "Cultural Experience",
                "description": f"Experience {category.lower()} activities",
            }
        ],
        "itinerary": item.get("itinerary") or [],
        "what_to_bring": list(WHAT_TO_BRING),
        "fitness_requirements": (
            "Good physical fitness required." if trekking else "Basic fitness level sufficient."
        ),
        "altitude_profile": {
            "max_altitude": "High altitude" if trekking else "Low altitude",
            "acclimatization_days": 1 if trekking else 0,
            "difficulty_level": item.get("difficulty") or "Moderate",
        },
        "booking_info": {
            "advance_booking": "7 days recommended",
            "group_discounts": "Available for 6+ people",
            "cancellation_policy": "Free cancellation up to 7 days before departure",
        },
        "created_at": now,
        "updated_at": now,
    }


def _read_tours(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("tours", [])
    return data


@track_performance("Scraped tour import")
def import_scraped_tours(
    scraped_path: Path,
    tours_path: Path,
    seed: Optional[int] = None,
    id_offset: int = 5,
) -> ImportSummary:
    """
    Append the importable scraped records to `tours_path` (rewritten in place).
    Ids start at `id_offset` so they stay clear of the hand-authored tours.
    """
    with open(scraped_path, "r", encoding="utf-8") as f:
        scraped = json.load(f)

    rng = random.Random(seed)
    now = datetime.now(timezone.utc).isoformat()
    candidates = [item for item in scraped if is_importable(item)]
    imported = [to_tour(item, id_offset + index, rng, now) for index, item in enumerate(candidates)]
    logger.info(f"{len(imported)} of {len(scraped)} scraped records are importable")

    all_tours = _read_tours(Path(tours_path)) + imported
    Path(tours_path).parent.mkdir(parents=True, exist_ok=True)
    with open(tours_path, "w", encoding="utf-8") as f:
        json.dump(all_tours, f, indent=2, ensure_ascii=False)

    logger.info(f"Imported {len(imported)} tours; {len(all_tours)} tours now in {Path(tours_path).name}")
    return ImportSummary(imported=len(imported), total=len(all_tours))

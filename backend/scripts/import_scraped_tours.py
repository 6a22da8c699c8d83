"""
Append scraped Guru Travels tours to data/tours.json.
Rating, reviews and featured are random; pass --seed for a reproducible file.
Run: python scripts/import_scraped_tours.py [--source FILE] [--seed N]
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from zeo_api.core.config import settings, resolve_path
from zeo_api.core.monitoring import configure_logging
from zeo_api.ingestion.scraped_tours import import_scraped_tours

logger = logging.getLogger("zeo_api.scripts.import_scraped_tours")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--source", default=settings.scraped_tours_path, help="Scraper output JSON")
    parser.add_argument("--tours", default=str(Path(settings.data_dir) / "tours.json"), help="tours.json to extend")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for generated fields")
    parser.add_argument("--id-offset", type=int, default=settings.scraped_tour_id_offset)
    args = parser.parse_args(argv)

    configure_logging()
    try:
        summary = import_scraped_tours(
            resolve_path(args.source),
            resolve_path(args.tours),
            seed=args.seed,
            id_offset=args.id_offset,
        )
    except Exception:
        logger.exception("Scraped tour import failed")
        return 1

    logger.info(f"Successfully imported {summary.imported} tours ({summary.total} total)")
    logger.info("Run scripts/migrate_data.py to load them into the database")
    return 0


if __name__ == "__main__":
    sys.exit(main())

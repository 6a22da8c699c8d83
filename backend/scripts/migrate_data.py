"""
Load the legacy JSON fixtures (destinations, activities, tours) into SQLite.
Safe to re-run: records are upserted by slug.
Run: python scripts/migrate_data.py [--data-dir DIR]
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from zeo_api.core.config import settings, resolve_path
from zeo_api.core.monitoring import configure_logging
from zeo_api.db.database import SessionLocal, init_db
from zeo_api.ingestion.migrate import migrate_data

logger = logging.getLogger("zeo_api.scripts.migrate_data")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--data-dir", default=settings.data_dir, help="Directory holding the fixture files")
    args = parser.parse_args(argv)

    configure_logging()
    logger.info("Starting data migration...")
    db = SessionLocal()
    try:
        init_db()
        summary = migrate_data(db, resolve_path(args.data_dir))
    except Exception:
        logger.exception("Error during migration")
        return 1
    finally:
        db.close()

    if summary.failed:
        logger.warning(f"Migration finished with {summary.failed} failed records")
    else:
        logger.info("Data migration completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

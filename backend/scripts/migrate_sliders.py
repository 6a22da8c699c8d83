"""
Seed the default homepage sliders (skipped when active sliders exist).
Run: python scripts/migrate_sliders.py
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from zeo_api.core.monitoring import configure_logging
from zeo_api.db.database import SessionLocal, init_db
from zeo_api.ingestion.sliders import migrate_sliders

logger = logging.getLogger("zeo_api.scripts.migrate_sliders")


def main() -> int:
    configure_logging()
    db = SessionLocal()
    try:
        init_db()
        summary = migrate_sliders(db)
    except Exception:
        logger.exception("Slider migration failed")
        return 1
    finally:
        db.close()

    if not summary.skipped:
        logger.info(f"Verification: {summary.inserted} sliders migrated, {summary.failed} failed")
    return 0


if __name__ == "__main__":
    sys.exit(main())

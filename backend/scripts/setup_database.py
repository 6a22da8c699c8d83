"""
Create the SQLite schema (all seven tables) if it does not exist yet.
Run: python scripts/setup_database.py
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from zeo_api.core.config import settings
from zeo_api.core.monitoring import configure_logging
from zeo_api.db.database import init_db

logger = logging.getLogger("zeo_api.scripts.setup_database")


def main() -> int:
    configure_logging()
    try:
        init_db()
    except Exception:
        logger.exception("Database setup failed")
        return 1
    logger.info(f"Database ready: {settings.database_url}")
    logger.info("Next step: python scripts/migrate_data.py")
    return 0


if __name__ == "__main__":
    sys.exit(main())

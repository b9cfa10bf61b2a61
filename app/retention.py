"""
CLI entrypoint for the retention job. Run from cron, e.g.:

  python -m app.retention

Or hourly: 0 * * * * cd /path/to/reanvue && .venv/bin/python -m app.retention
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import session_scope
from app.core.logging_config import configure_logging
from app.services.retention import run_retention

logger = logging.getLogger(__name__)


def main() -> int:
    """Run retention: delete expired sessions and expired bans."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        with session_scope() as db:
            sessions_deleted, bans_deleted = run_retention(db, settings)
    except Exception as e:
        logger.exception("Retention job failed: %s", e)
        return 1
    logger.info(
        "Retention completed: sessions_deleted=%s bans_deleted=%s",
        sessions_deleted,
        bans_deleted,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

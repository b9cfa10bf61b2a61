"""Data retention: purge expired sessions and lapsed bans."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.services.moderation import purge_expired_bans
from app.services.sessions import purge_expired_sessions

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_retention(session: Session, settings: "Settings") -> tuple[int, int]:
    """
    Delete sessions past their expiry and bans past their expiry.

    Returns (sessions_deleted, bans_deleted). Idempotent: safe to run repeatedly.
    """
    if not settings.RETENTION_ENABLED:
        logger.info("Retention is disabled (RETENTION_ENABLED=false); skipping.")
        return (0, 0)

    sessions_deleted = purge_expired_sessions(session)
    bans_deleted = purge_expired_bans(session)
    return (sessions_deleted, bans_deleted)

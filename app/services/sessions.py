"""Server-side sessions: the opaque id in the cookie maps to a user id until expiry.

Handlers receive the per-request SessionState explicitly; nothing here reads
ambient request state.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import UserSession

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 32


@dataclass
class SessionState:
    """Session binding for one request. Both fields are None for anonymous requests."""

    session_id: str | None = None
    user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def load_session(db: Session, session_id: str | None) -> SessionState:
    """Resolve a session id from the cookie. Unknown or expired ids yield an anonymous state."""
    if not session_id:
        return SessionState()
    row = (
        db.query(UserSession)
        .filter(UserSession.id == session_id, UserSession.expires_at > _now())
        .first()
    )
    if row is None:
        return SessionState()
    return SessionState(session_id=row.id, user_id=row.user_id)


def start_session(db: Session, state: SessionState, user_id: str) -> SessionState:
    """
    Bind state to user_id under a fresh session id and persist it.

    An existing session on the same request is replaced, so a login on top of
    another login never leaves a stale row behind.
    """
    if state.session_id:
        db.query(UserSession).filter(UserSession.id == state.session_id).delete(
            synchronize_session=False
        )
    session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
    row = UserSession(
        id=session_id,
        user_id=user_id,
        expires_at=_now() + timedelta(days=settings.SESSION_MAX_AGE_DAYS),
    )
    db.add(row)
    db.commit()
    state.session_id = session_id
    state.user_id = user_id
    return state


def destroy_session(db: Session, state: SessionState) -> None:
    """Delete the session row and clear the state. Database errors propagate to the caller."""
    if state.session_id:
        db.query(UserSession).filter(UserSession.id == state.session_id).delete(
            synchronize_session=False
        )
        db.commit()
    state.session_id = None
    state.user_id = None


def purge_expired_sessions(db: Session) -> int:
    """Delete every session whose expiry has passed. Returns the number of rows removed."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= _now())
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted > 0:
        logger.info("Purged expired sessions: sessions_deleted=%s", deleted)
    return deleted

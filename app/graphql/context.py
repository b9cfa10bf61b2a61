"""Per-request GraphQL context: DB session, explicit session state and cookie helpers."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext

from app.core.config import settings
from app.core.database import get_db
from app.core.security import create_session_token, decode_session_token
from app.services.result import rollback_quietly
from app.services.sessions import SessionState, load_session

logger = logging.getLogger(__name__)


class Context(BaseContext):
    """
    Strawberry fills in request and response after construction.

    session_failed is set when the session row could not be read; gated
    fields then answer with a 500 envelope instead of treating the caller as
    anonymous.
    """

    def __init__(self, db: Session, session: SessionState, session_failed: bool = False) -> None:
        super().__init__()
        self.db = db
        self.session = session
        self.session_failed = session_failed

    def set_session_cookie(self) -> None:
        """Write the signed session id for the current binding to the response."""
        if self.response is None or not self.session.session_id:
            return
        self.response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=create_session_token(self.session.session_id),
            max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
            httponly=True,
            samesite="lax",
            secure=settings.APP_ENV == "prod",
        )

    def clear_session_cookie(self) -> None:
        if self.response is None:
            return
        self.response.delete_cookie(
            key=settings.SESSION_COOKIE_NAME,
            httponly=True,
            samesite="lax",
            secure=settings.APP_ENV == "prod",
        )


def get_context(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> Context:
    """Build the context; a missing, tampered or expired cookie yields an anonymous session."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    session_id = decode_session_token(token) if token else None
    try:
        session = load_session(db, session_id)
    except Exception:
        logger.exception("Failed to load session")
        rollback_quietly(db, "get_context")
        return Context(db=db, session=SessionState(), session_failed=True)
    return Context(db=db, session=session)

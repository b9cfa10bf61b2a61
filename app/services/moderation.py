"""Moderator actions on accounts: ban and unban."""

import logging
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models import User, UserBan
from app.services import roles
from app.services.guards import is_banned
from app.services.result import (
    Err,
    Ok,
    Result,
    bad_request,
    conflict,
    contained,
    forbidden,
    unauthorized,
)
from app.services.sessions import SessionState
from app.services.users import USER_NOT_FOUND

logger = logging.getLogger(__name__)

REASON_MAX_LEN = 1000


def _load_actor_and_target(
    db: Session, session: SessionState, target_id: str
) -> tuple[User, User] | Err:
    actor = db.get(User, session.user_id) if session.is_authenticated else None
    if actor is None:
        return unauthorized()
    if target_id == actor.id:
        return bad_request("you cannot moderate yourself")
    target = db.get(User, target_id)
    if target is None:
        return bad_request(USER_NOT_FOUND)
    if not roles.outranks(actor.role, target.role):
        return forbidden()
    return actor, target


@contained
def ban_user(
    db: Session,
    session: SessionState,
    target_id: str,
    reason: str = "",
    expires_at: datetime | None = None,
) -> Result[User]:
    """Ban target_id. expires_at=None bans permanently; a past expiry is rejected."""
    loaded = _load_actor_and_target(db, session, target_id)
    if not isinstance(loaded, tuple):
        return loaded
    actor, target = loaded

    reason = reason.strip()
    if len(reason) > REASON_MAX_LEN:
        return bad_request(f"reason must be at most {REASON_MAX_LEN} characters")
    if expires_at is not None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= datetime.now(timezone.utc):
            return bad_request("ban expiry must be in the future")
    if is_banned(db, target.id):
        return conflict("user already banned")

    db.add(
        UserBan(
            user_id=target.id,
            moderator_id=actor.id,
            reason=reason,
            expires_at=expires_at,
        )
    )
    db.commit()
    logger.info("Banned user: user_id=%s banned_by=%s", target_id, session.user_id)
    return Ok(target)


@contained
def unban_user(db: Session, session: SessionState, target_id: str) -> Result[User]:
    """Lift every active ban on target_id."""
    loaded = _load_actor_and_target(db, session, target_id)
    if not isinstance(loaded, tuple):
        return loaded
    _, target = loaded

    if not is_banned(db, target.id):
        return bad_request("user is not banned")

    now = datetime.now(timezone.utc)
    db.query(UserBan).filter(
        UserBan.user_id == target.id,
        or_(UserBan.expires_at.is_(None), UserBan.expires_at > now),
    ).delete(synchronize_session=False)
    db.commit()
    logger.info("Unbanned user: user_id=%s unbanned_by=%s", target_id, session.user_id)
    return Ok(target)


def purge_expired_bans(db: Session) -> int:
    """Delete bans whose expiry has passed. Returns the number of rows removed."""
    deleted = (
        db.query(UserBan)
        .filter(UserBan.expires_at.is_not(None), UserBan.expires_at <= datetime.now(timezone.utc))
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted > 0:
        logger.info("Purged expired bans: bans_deleted=%s", deleted)
    return deleted

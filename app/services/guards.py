"""Ban and block checks run before gated handlers.

Each check returns an Err describing why the request must stop, or None when
the handler may run.
"""

from datetime import datetime, timezone

from sqlalchemy import and_, exists, or_, select
from sqlalchemy.orm import Session

from app.models import User, UserBan, UserBlock
from app.services.result import Err, forbidden, unauthorized
from app.services.sessions import SessionState

BANNED_MESSAGE = "you are banned"
BLOCKED_MESSAGE = "you cannot interact with this user"


def is_banned(db: Session, user_id: str) -> bool:
    """True when the user has a ban with no expiry or an expiry in the future."""
    now = datetime.now(timezone.utc)
    return db.execute(
        select(
            exists().where(
                UserBan.user_id == user_id,
                or_(UserBan.expires_at.is_(None), UserBan.expires_at > now),
            )
        )
    ).scalar_one()


def is_blocked(db: Session, user_a: str, user_b: str) -> bool:
    """True when either user blocks the other."""
    return db.execute(
        select(
            exists().where(
                or_(
                    and_(UserBlock.user_id == user_a, UserBlock.blocked_id == user_b),
                    and_(UserBlock.user_id == user_b, UserBlock.blocked_id == user_a),
                )
            )
        )
    ).scalar_one()


def check_bans(db: Session, session: SessionState, required: bool = True) -> Err | None:
    """
    Ban gate for the session user.

    required=True rejects anonymous sessions with 401; required=False lets them
    through untouched. A session whose user row is gone counts as anonymous.
    """
    if not session.is_authenticated:
        return unauthorized() if required else None
    if db.get(User, session.user_id) is None:
        return unauthorized() if required else None
    if is_banned(db, session.user_id):
        return forbidden(BANNED_MESSAGE)
    return None


def check_blocks(db: Session, actor_id: str | None, target_id: str | None) -> Err | None:
    """Block gate between the acting user and the user an operation targets."""
    if not actor_id or not target_id or actor_id == target_id:
        return None
    if is_blocked(db, actor_id, target_id):
        return forbidden(BLOCKED_MESSAGE)
    return None

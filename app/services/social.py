"""Social graph between users.

Rules:
  follow:  cannot follow self, cannot follow twice (block gate runs before this)
  block:   cannot block self; removes follow edges in both directions
  friends: users the session user follows who follow back
"""

import logging

from sqlalchemy import and_, exists, or_, select
from sqlalchemy.orm import Session, aliased

from app.models import User, UserBlock, UserFollow
from app.services.result import (
    Ok,
    Result,
    bad_request,
    conflict,
    contained,
    unauthorized,
)
from app.services.sessions import SessionState
from app.services.users import USER_NOT_FOUND

logger = logging.getLogger(__name__)


def _follow_exists(db: Session, follower_id: str, followed_id: str) -> bool:
    return db.execute(
        select(
            exists().where(
                UserFollow.user_id == follower_id,
                UserFollow.followed_id == followed_id,
            )
        )
    ).scalar_one()


def _block_exists(db: Session, blocker_id: str, blocked_id: str) -> bool:
    return db.execute(
        select(
            exists().where(
                UserBlock.user_id == blocker_id,
                UserBlock.blocked_id == blocked_id,
            )
        )
    ).scalar_one()


# -- Block --------------------------------------------------------------------


@contained
def block_user(db: Session, session: SessionState, target_id: str) -> Result[User]:
    if not session.is_authenticated:
        return unauthorized()
    if target_id == session.user_id:
        return bad_request("you cannot block yourself")
    target = db.get(User, target_id)
    if target is None:
        return bad_request(USER_NOT_FOUND)
    if _block_exists(db, session.user_id, target_id):
        return conflict("user already blocked")

    db.add(UserBlock(user_id=session.user_id, blocked_id=target_id))
    db.query(UserFollow).filter(
        or_(
            and_(UserFollow.user_id == session.user_id, UserFollow.followed_id == target_id),
            and_(UserFollow.user_id == target_id, UserFollow.followed_id == session.user_id),
        )
    ).delete(synchronize_session=False)
    db.commit()
    return Ok(target)


@contained
def unblock_user(db: Session, session: SessionState, target_id: str) -> Result[User]:
    if not session.is_authenticated:
        return unauthorized()
    target = db.get(User, target_id)
    if target is None:
        return bad_request(USER_NOT_FOUND)
    if not _block_exists(db, session.user_id, target_id):
        return bad_request("user is not blocked")

    db.query(UserBlock).filter(
        UserBlock.user_id == session.user_id,
        UserBlock.blocked_id == target_id,
    ).delete(synchronize_session=False)
    db.commit()
    return Ok(target)


# -- Follow -------------------------------------------------------------------


@contained
def follow_user(db: Session, session: SessionState, target_id: str) -> Result[User]:
    if not session.is_authenticated:
        return unauthorized()
    if target_id == session.user_id:
        return bad_request("you cannot follow yourself")
    target = db.get(User, target_id)
    if target is None:
        return bad_request(USER_NOT_FOUND)
    if _follow_exists(db, session.user_id, target_id):
        return conflict("already following this user")

    db.add(UserFollow(user_id=session.user_id, followed_id=target_id))
    db.commit()
    return Ok(target)


@contained
def unfollow_user(db: Session, session: SessionState, target_id: str) -> Result[User]:
    if not session.is_authenticated:
        return unauthorized()
    target = db.get(User, target_id)
    if target is None:
        return bad_request(USER_NOT_FOUND)
    if not _follow_exists(db, session.user_id, target_id):
        return bad_request("not following this user")

    db.query(UserFollow).filter(
        UserFollow.user_id == session.user_id,
        UserFollow.followed_id == target_id,
    ).delete(synchronize_session=False)
    db.commit()
    return Ok(target)


# -- Listings -----------------------------------------------------------------


@contained
def list_followers(db: Session, user_id: str) -> Result[list[User]]:
    """Users following user_id."""
    if db.get(User, user_id) is None:
        return bad_request(USER_NOT_FOUND)
    users = (
        db.query(User)
        .join(UserFollow, UserFollow.user_id == User.id)
        .filter(UserFollow.followed_id == user_id)
        .order_by(User.username)
        .all()
    )
    return Ok(users)


@contained
def list_following(db: Session, user_id: str) -> Result[list[User]]:
    """Users that user_id follows."""
    if db.get(User, user_id) is None:
        return bad_request(USER_NOT_FOUND)
    users = (
        db.query(User)
        .join(UserFollow, UserFollow.followed_id == User.id)
        .filter(UserFollow.user_id == user_id)
        .order_by(User.username)
        .all()
    )
    return Ok(users)


@contained
def list_friends(db: Session, session: SessionState) -> Result[list[User]]:
    """Mutual follows of the session user."""
    if not session.is_authenticated:
        return unauthorized()
    outgoing = aliased(UserFollow)
    incoming = aliased(UserFollow)
    users = (
        db.query(User)
        .join(outgoing, and_(outgoing.followed_id == User.id, outgoing.user_id == session.user_id))
        .join(incoming, and_(incoming.user_id == User.id, incoming.followed_id == session.user_id))
        .order_by(User.username)
        .all()
    )
    return Ok(users)

"""Account handlers: registration, login, profile lookup and update, deletion, logout.

Every handler takes the DB session and the request's SessionState explicitly
and returns a Result. Guards (ban checks) run before these are called.
"""

import logging
import re
import uuid
from collections.abc import Callable, Mapping

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import (
    PASSWORD_MIN_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    verify_password,
)
from app.models import User
from app.services import roles
from app.services.result import (
    Ok,
    Result,
    bad_request,
    conflict,
    contained,
    forbidden,
    unauthorized,
)
from app.services.sessions import SessionState, destroy_session, start_session

logger = logging.getLogger(__name__)

# Structural email check (RFC 5322 style local part, hostname or IP literal domain).
# Unanchored on purpose: it looks for an address-shaped substring.
_LOCAL_PART = (
    r"(?:[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r'|"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*")'
)
_DOMAIN_PART = (
    r"(?:(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
    r"|\[(?:(?:(2(5[0-5]|[0-4][0-9])|1[0-9][0-9]|[1-9]?[0-9]))\.){3}"
    r"(?:(2(5[0-5]|[0-4][0-9])|1[0-9][0-9]|[1-9]?[0-9])|[a-z0-9-]*[a-z0-9]:"
    r"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])"
)
EMAIL_PATTERN = re.compile(_LOCAL_PART + "@" + _DOMAIN_PART)

# Profile fields a user may change on their own account.
UPDATABLE_FIELDS = frozenset({"display_name", "avatar", "description", "status"})

USER_NOT_FOUND = "user doesn't exist"


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.search(email) is not None


def find_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


@contained
def register(
    db: Session,
    session: SessionState,
    username: str,
    password: str,
    email: str,
) -> Result[User]:
    """
    Create an account and log it in.

    Duplicate checks run before length and format checks, and all checks run
    before anything is written. The check-then-insert is not atomic: under a
    concurrent race the unique indexes reject the second insert, which the
    catch-all reports as an internal error.
    """
    email = email.strip()
    username = username.strip()

    if find_by_username(db, username) is not None:
        return conflict("username already taken")
    if find_by_email(db, email) is not None:
        return conflict("email already taken")
    if len(username) < USERNAME_MIN_LEN:
        return bad_request("username length must be greater than 2")
    if len(password) < PASSWORD_MIN_LEN:
        return bad_request("password length must be greater than 2")
    if not is_valid_email(email):
        return bad_request("invalid email")

    user = User(
        id=str(uuid.uuid4()),
        username=username,
        email=email,
        password=hash_password(password),
        display_name=username,
        avatar=settings.DEFAULT_AVATAR_URL,
    )
    db.add(user)
    db.commit()
    start_session(db, session, user.id)
    logger.info("Registered user: user_id=%s", user.id)
    return Ok(user)


@contained
def login(db: Session, session: SessionState, username: str, password: str) -> Result[User]:
    """Verify credentials and bind the session. A failed attempt leaves the session untouched."""
    user = find_by_username(db, username)
    if user is None:
        return bad_request("username doesn't exist")
    if not verify_password(password, user.password):
        return unauthorized("incorrect password")
    start_session(db, session, user.id)
    return Ok(user)


@contained
def me(db: Session, session: SessionState) -> Result[User | None]:
    if not session.is_authenticated:
        return Ok(None)
    return Ok(db.get(User, session.user_id))


@contained
def get_user(db: Session, user_id: str) -> Result[User | None]:
    """Public lookup by id. A missing user is Ok(None), not an error."""
    return Ok(db.get(User, user_id))


@contained
def update_user(
    db: Session,
    session: SessionState,
    changes: Mapping[str, str | None],
) -> Result[User]:
    """Apply a partial profile update to the session user. None values are left unchanged."""
    user = db.get(User, session.user_id) if session.is_authenticated else None
    if user is None:
        return bad_request(USER_NOT_FOUND)

    values = {
        field: value
        for field, value in changes.items()
        if field in UPDATABLE_FIELDS and value is not None
    }
    if values:
        db.query(User).filter(User.id == user.id).update(values, synchronize_session=False)
        db.commit()
    db.refresh(user)
    return Ok(user)


@contained
def delete_user(db: Session, session: SessionState, target_id: str) -> Result[User]:
    """
    Delete an account.

    Users may always delete themselves. Deleting someone else requires a
    moderation role that strictly outranks the target's role.
    """
    actor = db.get(User, session.user_id) if session.is_authenticated else None
    if actor is None:
        return unauthorized()
    target = db.get(User, target_id)
    if target is None:
        return bad_request(USER_NOT_FOUND)

    if target.id != actor.id and not roles.outranks(actor.role, target.role):
        return forbidden()

    db.delete(target)
    db.commit()
    logger.info("Deleted user: user_id=%s deleted_by=%s", target_id, actor.id)
    return Ok(target)


def logout(db: Session, session: SessionState, clear_cookie: Callable[[], None]) -> bool:
    """
    Destroy the session and clear the cookie.

    Returns False when the session row could not be destroyed; the cookie is
    cleared either way.
    """
    try:
        destroy_session(db, session)
    except Exception:
        logger.exception("Failed to destroy session")
        db.rollback()
        return False
    finally:
        clear_cookie()
    return True

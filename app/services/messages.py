"""Direct messages between two users. Ban and block gates run before these handlers."""

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.models import DirectMessage, User
from app.services.result import Ok, Result, bad_request, contained, unauthorized
from app.services.sessions import SessionState
from app.services.users import USER_NOT_FOUND

MESSAGE_MAX_LEN = 2000
CONVERSATION_PAGE_SIZE = 100


@contained
def send_message(
    db: Session,
    session: SessionState,
    recipient_id: str,
    content: str,
) -> Result[DirectMessage]:
    if not session.is_authenticated:
        return unauthorized()
    content = content.strip()
    if not content:
        return bad_request("message cannot be empty")
    if len(content) > MESSAGE_MAX_LEN:
        return bad_request(f"message must be at most {MESSAGE_MAX_LEN} characters")
    if recipient_id == session.user_id:
        return bad_request("you cannot message yourself")
    if db.get(User, recipient_id) is None:
        return bad_request(USER_NOT_FOUND)

    message = DirectMessage(
        sender_id=session.user_id,
        recipient_id=recipient_id,
        content=content,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return Ok(message)


@contained
def list_conversation(
    db: Session,
    session: SessionState,
    other_id: str,
    limit: int = CONVERSATION_PAGE_SIZE,
) -> Result[list[DirectMessage]]:
    """Most recent `limit` messages between the session user and other_id, oldest first."""
    if not session.is_authenticated:
        return unauthorized()
    if db.get(User, other_id) is None:
        return bad_request(USER_NOT_FOUND)
    limit = max(1, min(limit, CONVERSATION_PAGE_SIZE))

    recent = (
        db.query(DirectMessage)
        .filter(
            or_(
                and_(
                    DirectMessage.sender_id == session.user_id,
                    DirectMessage.recipient_id == other_id,
                ),
                and_(
                    DirectMessage.sender_id == other_id,
                    DirectMessage.recipient_id == session.user_id,
                ),
            )
        )
        .order_by(DirectMessage.created_at.desc(), DirectMessage.id.desc())
        .limit(limit)
        .all()
    )
    return Ok(list(reversed(recent)))

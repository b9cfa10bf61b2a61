"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.follow import UserFollow
from app.models.message import DirectMessage
from app.models.moderation import UserBan, UserBlock
from app.models.session import UserSession
from app.models.user import User, UserRole

__all__ = [
    "Base",
    "DirectMessage",
    "User",
    "UserBan",
    "UserBlock",
    "UserFollow",
    "UserRole",
    "UserSession",
]

"""ORM model for server-side login sessions referenced by the session cookie."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func

from app.models.base import Base


class UserSession(Base):
    """Maps an opaque session id to the authenticated user until expires_at."""

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

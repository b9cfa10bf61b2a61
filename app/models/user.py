"""ORM model for user accounts and the closed set of roles."""

import enum

from sqlalchemy import Column, DateTime, Enum, String, Text, func

from app.models.base import Base


class UserRole(str, enum.Enum):
    """Account roles, declared from highest to lowest rank."""

    SYSADMIN = "sysadmin"
    ADMIN = "administrator"
    MODERATOR = "moderator"
    VETERAN = "veteran"
    USER = "user"


class User(Base):
    """
    User account for session authentication and role-based moderation.

    id is an opaque UUID4 string; username and email are unique.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    display_name = Column(Text, nullable=False)
    avatar = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(Text, nullable=False, default="")
    role = Column(
        Enum(
            UserRole,
            name="user_role",
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.USER,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

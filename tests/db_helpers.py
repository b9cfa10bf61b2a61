"""In-memory SQLite database and account factories shared by the tests."""

import uuid

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import hash_password
from app.models import Base, User, UserRole

DEFAULT_PASSWORD = "secret-password"


def make_engine() -> Engine:
    """Fresh in-memory database with every table created and foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_user(
    db: Session,
    username: str,
    role: UserRole = UserRole.USER,
    password: str = DEFAULT_PASSWORD,
) -> User:
    user = User(
        id=str(uuid.uuid4()),
        username=username,
        email=f"{username}@example.com",
        password=hash_password(password),
        display_name=username,
        avatar="avatar-url",
        role=role,
    )
    db.add(user)
    db.commit()
    return user

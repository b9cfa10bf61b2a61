"""Uniform handler result: Ok(value) or Err(code, message), plus the per-handler catch-all."""

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, ParamSpec, TypeVar, Union

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")

INTERNAL_ERROR_MESSAGE = "internal server error"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    """Expected failure reported in-band. code follows HTTP status semantics (400, 401, 403, 409, 500)."""

    code: int
    message: str


Result = Union[Ok[T], Err]


def bad_request(message: str) -> Err:
    return Err(400, message)


def unauthorized(message: str = "not authenticated") -> Err:
    return Err(401, message)


def forbidden(message: str = "forbidden") -> Err:
    return Err(403, message)


def conflict(message: str) -> Err:
    return Err(409, message)


def internal_error() -> Err:
    return Err(500, INTERNAL_ERROR_MESSAGE)


def rollback_quietly(db: Session, where: str) -> None:
    """Roll back after a failure; a failing rollback is logged, not raised."""
    try:
        db.rollback()
    except Exception:
        logger.exception("Rollback failed after error in %s", where)


def contained(func: Callable[P, Result[T]]) -> Callable[P, Result[T]]:
    """
    Catch-all for a service handler whose first argument is the DB session.

    Any unexpected exception is logged with its traceback, the transaction is
    rolled back and the caller receives a generic 500 Err. Exception details
    never leave the server.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Unhandled error in %s", func.__qualname__)
            db = args[0] if args else kwargs.get("db")
            if isinstance(db, Session):
                rollback_quietly(db, func.__qualname__)
            return internal_error()

    return wrapper

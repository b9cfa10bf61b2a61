"""Field extensions that run the ban/block gates before a resolver.

A failed gate short-circuits the resolver and returns the field's envelope
with the error in `errors`; nothing is raised to the GraphQL executor. A
store failure inside a gate is logged and reported as a generic 500.
"""

import logging
from collections.abc import Callable
from typing import Any

from strawberry.extensions import FieldExtension
from strawberry.types import Info

from app.graphql.context import Context
from app.graphql.types import QueryError
from app.services.guards import check_bans, check_blocks
from app.services.result import Err, internal_error, rollback_quietly

logger = logging.getLogger(__name__)

TargetGetter = Callable[[dict[str, Any]], str | None]


class CheckBans(FieldExtension):
    """
    Mandatory gate: the caller must be logged in and not banned.

    When `target` is given it extracts the id of the user the operation acts
    on from the resolver arguments, and a block in either direction between
    the caller and that user also stops the request.
    """

    required = True

    def __init__(self, envelope: type, target: TargetGetter | None = None) -> None:
        self.envelope = envelope
        self.target = target

    def resolve(self, next_: Callable[..., Any], source: Any, info: Info, **kwargs: Any) -> Any:
        err = self.gate(info.context, info.field_name, kwargs)
        if err is not None:
            return self.envelope(errors=[QueryError.from_err(err)])
        return next_(source, info, **kwargs)

    def gate(self, ctx: Context, field_name: str, kwargs: dict[str, Any]) -> Err | None:
        if ctx.session_failed:
            return internal_error()
        try:
            err = check_bans(ctx.db, ctx.session, required=self.required)
            if err is None and self.target is not None:
                err = check_blocks(ctx.db, ctx.session.user_id, self.target(kwargs))
            return err
        except Exception:
            logger.exception("Guard failed on %s", field_name)
            rollback_quietly(ctx.db, field_name)
            return internal_error()


class CheckBansIfAuthed(CheckBans):
    """Like CheckBans, but anonymous callers pass through untouched."""

    required = False

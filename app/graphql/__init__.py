"""GraphQL API: Strawberry schema mounted on FastAPI."""

from app.graphql.schema import graphql_router, schema

__all__ = ["graphql_router", "schema"]

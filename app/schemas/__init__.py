"""Pydantic request/response schemas for the REST surface."""

from app.schemas.health import HealthResponse

__all__ = ["HealthResponse"]

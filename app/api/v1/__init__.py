"""API v1 routes. Everything else is served over GraphQL."""

from fastapi import APIRouter

from app.api.v1 import health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])

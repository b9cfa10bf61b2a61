"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.graphql import graphql_router

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Reanvue API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# The web client sends the session cookie, so credentials are allowed for its origin only.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_ADDRESS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
app.include_router(graphql_router, prefix=settings.GRAPHQL_PATH)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Reanvue API", "graphql": settings.GRAPHQL_PATH}

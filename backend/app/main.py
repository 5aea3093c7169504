"""GraphQL Error Gateway: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map AppError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging and the email service initialized on startup via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.dependencies import build_email_service
from app.api.error_handlers import register_error_handlers
from app.api.routes import graphql, health
from app.config import get_settings
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.email_service = build_email_service()
    logger.info(
        "GraphQL Error Gateway started",
        extra={"email_enabled": app.state.email_service is not None},
    )
    yield
    logger.info("GraphQL Error Gateway shutting down")


app = FastAPI(
    title="GraphQL Error Gateway", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(graphql.router)

register_error_handlers(app)

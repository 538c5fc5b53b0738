"""DevHabits API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DevHabitsError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan
    - Every request produces one access log line

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py: main only wires things together
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devhabits.api.error_handlers import register_error_handlers
from devhabits.api.routes import habits, health, tags
from devhabits.config import get_settings
from devhabits.infrastructure.database import init_db
from devhabits.infrastructure.observability import log_requests, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.sql_echo)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"{settings.app_title} {settings.service_version} started")
    yield
    await manager.dispose()
    logger.info(f"{settings.app_title} shutting down")


settings = get_settings()

app = FastAPI(
    title=settings.app_title,
    version=settings.service_version,
    description=(
        "Track daily habits with progress monitoring, milestone tracking, "
        "and flexible frequency configuration."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(habits.router)
app.include_router(tags.router)

register_error_handlers(app)

"""University ERP API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ErpError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unierp.api.error_handlers import register_error_handlers
from unierp.api.routes import (
    announcements, assignments, courses, health, offerings, students, system, users,
)
from unierp.config import get_settings
from unierp.infrastructure import database
from unierp.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("University ERP API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("University ERP API shutting down")


app = FastAPI(
    title="University ERP API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(courses.router)
app.include_router(offerings.router)
app.include_router(students.router)
app.include_router(assignments.router)
app.include_router(announcements.router)
app.include_router(users.router)
app.include_router(system.router)

register_error_handlers(app)

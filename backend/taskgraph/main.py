"""TaskGraph API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskGraphError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Tables are only auto-created when DATABASE_AUTO_CREATE is set; otherwise
      Alembic owns the schema
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskgraph.api.error_handlers import register_error_handlers
from taskgraph.api.routes import edges, health, nodes, requests, views
from taskgraph.config import get_settings
from taskgraph.db.session import create_all
from taskgraph.infrastructure import database
from taskgraph.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.database_auto_create:
        await create_all(settings.database_url)
        logger.info("Database tables created from metadata")
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("TaskGraph API started")
    yield
    if database.db_manager:
        await database.db_manager.close()
    logger.info("TaskGraph API shutting down")


app = FastAPI(
    title="TaskGraph API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(nodes.router)
app.include_router(edges.router)
app.include_router(requests.router)
app.include_router(views.router)

register_error_handlers(app)

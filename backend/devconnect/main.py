"""DevConnect API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Global error handlers map DevConnectError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan
    - Payment gateway HTTP client closed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py (ADR: ExMA import fan-out < 10)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devconnect.api.deps import close_payment_gateway
from devconnect.api.error_handlers import register_error_handlers
from devconnect.api.routes import (
    announcements, comments, health, payments, posts, tags, users,
)
from devconnect.config import get_settings
from devconnect.infrastructure.database import close_db, init_db
from devconnect.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("DevConnect API started")
    yield
    await close_payment_gateway()
    await close_db()
    logger.info("DevConnect API shutting down")


app = FastAPI(
    title="DevConnect API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(tags.router)
app.include_router(announcements.router)
app.include_router(payments.router)

register_error_handlers(app)


@app.get("/")
async def root():
    return {"message": "DevConnect server is ready"}

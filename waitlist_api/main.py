"""Waitlist API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WaitlistError → {"error": message} responses
    - CORS configured from settings (not hardcoded)
    - Database pool and waiting_list schema initialized once, in the lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Schema ensure at startup instead of per request: no first-request check,
      and ensure_schema() never raises so an unreachable store does not block boot
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from waitlist_api.api.error_handlers import register_error_handlers
from waitlist_api.api.routes import health, waitlist
from waitlist_api.config import get_settings
from waitlist_api.infrastructure.database import init_db
from waitlist_api.infrastructure.observability import setup_logging
from waitlist_api.infrastructure.storage_gateway import EntrantGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.ensure_schema_on_startup:
        await EntrantGateway(manager).ensure_schema()
    logger.info("Waitlist API started")
    yield
    logger.info("Waitlist API shutting down")
    await manager.close()


app = FastAPI(title="Waitlist API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(waitlist.router)

register_error_handlers(app)

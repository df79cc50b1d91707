"""Ledger Gateway API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map GatewayError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - No trailing-slash redirects: "/api/governances/" is an empty id, not the list
    - Node initialized on startup via lifespan context manager and kept on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - The reference node is the default NodeAPI; anything implementing the
      protocol can be placed on app.state.node instead
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledger_gateway.api.error_handlers import register_error_handlers
from ledger_gateway.api.routes import (
    approvals, events, governances, health, requests, subjects,
)
from ledger_gateway.config import get_settings
from ledger_gateway.infrastructure.database import init_db
from ledger_gateway.infrastructure.observability import setup_logging
from ledger_gateway.infrastructure.reference_node import ReferenceNode

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.node_create_schema:
        await db.create_all()
    app.state.node = ReferenceNode(
        db, settings.node_key,
        approval_required=settings.node_approval_required,
    )
    logger.info("Ledger gateway started")
    yield
    logger.info("Ledger gateway shutting down")
    await db.dispose()


app = FastAPI(
    title="Ledger Gateway API", version="0.1.0", lifespan=lifespan,
    redirect_slashes=False,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(subjects.router)
app.include_router(events.router)
app.include_router(requests.router)
app.include_router(approvals.router)
app.include_router(governances.router)

register_error_handlers(app)

"""Invoice Desk API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map InvoiceDeskError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The EntityStore is loaded from the configured backend before the first
      request and lives on app.state for the life of the process

Design Decisions:
    - Lifespan over @app.on_event
    - No API key -> assistant built without a client and degrades to empty results
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_desk.api.error_handlers import register_error_handlers
from invoice_desk.api.routes import (
    assistant, business_settings, customers, health, invoices, reports, users,
)
from invoice_desk.config import Settings, get_settings
from invoice_desk.core.entity_store import EntityStore
from invoice_desk.infrastructure.anthropic_client import ResilientAnthropicClient
from invoice_desk.infrastructure.backends import build_backend
from invoice_desk.infrastructure.observability import setup_logging
from invoice_desk.services.entity_sync import EntitySync, NotificationFeed
from invoice_desk.services.invoice_assistant import InvoiceAssistant

logger = logging.getLogger(__name__)


def build_assistant(settings: Settings) -> InvoiceAssistant:
    client = None
    if settings.anthropic_api_key:
        client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )
    else:
        logger.warning("ANTHROPIC_API_KEY not set, assistant disabled")
    return InvoiceAssistant(
        client,
        model=settings.assistant_model,
        max_tokens=settings.assistant_max_tokens,
        currency=settings.currency_code,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    wired = await build_backend(settings)
    sync = EntitySync(
        EntityStore(), wired.backend, NotificationFeed(settings.notification_limit),
    )
    await sync.load()
    app.state.sync = sync
    app.state.assistant = build_assistant(settings)
    logger.info("Invoice Desk API started", extra={"backend": wired.backend.name})
    yield
    await wired.close()
    logger.info("Invoice Desk API shutting down")


app = FastAPI(
    title="Invoice Desk API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(invoices.router)
app.include_router(customers.router)
app.include_router(users.router)
app.include_router(business_settings.router)
app.include_router(reports.router)
app.include_router(assistant.router)

register_error_handlers(app)

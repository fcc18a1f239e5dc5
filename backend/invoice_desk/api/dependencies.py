"""Route Dependencies - per-app services resolved from app.state.

Invariants:
    - The lifespan (main.py) puts `sync` and `assistant` on app.state before any request
    - `today` is a dependency so tests can pin the calendar
"""

from datetime import date

from fastapi import Request

from invoice_desk.services.entity_sync import EntitySync
from invoice_desk.services.invoice_assistant import InvoiceAssistant


def get_sync(request: Request) -> EntitySync:
    return request.app.state.sync


def get_assistant(request: Request) -> InvoiceAssistant:
    return request.app.state.assistant


def get_today() -> date:
    return date.today()

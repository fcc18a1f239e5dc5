"""Invoice Routes - CRUD, new-invoice drafts, PDF export and email drafts.

Invariants:
    - Writes are optimistic: the store changes inside the handler, persistence
      runs as a BackgroundTask after the response
    - Totals in responses are always server-computed
    - DELETE of an unknown id is accepted (202) and changes nothing
    - Unknown ids on reads and exports -> 404
"""

import logging
import random
import uuid
from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import Response

from invoice_desk.api.dependencies import get_assistant, get_sync, get_today
from invoice_desk.config import Settings, get_settings
from invoice_desk.core.domain_types import EntityKind, InvoiceId, ItemId
from invoice_desk.core.email_links import build_email_draft
from invoice_desk.core.entities import Invoice
from invoice_desk.core.errors import ExportError, ResourceNotFoundError
from invoice_desk.core.invoice_drafts import new_invoice_draft
from invoice_desk.infrastructure.pdf_renderer import pdf_filename, render_invoice_pdf
from invoice_desk.schemas.invoice import (
    EmailDraftResponse, InvoiceCreate, InvoiceResponse, InvoiceSummary, InvoiceUpsert,
)
from invoice_desk.services.entity_sync import EntitySync
from invoice_desk.services.invoice_assistant import InvoiceAssistant

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/invoices", tags=["invoices"])


def get_invoice_or_404(sync: EntitySync, invoice_id: str) -> Invoice:
    invoice = sync.store.invoices.get(invoice_id)
    if invoice is None:
        raise ResourceNotFoundError("Invoice", invoice_id)
    return invoice


@router.get("", response_model=list[InvoiceSummary])
async def list_invoices(sync: EntitySync = Depends(get_sync)):
    """All invoices, most recently created first."""
    return [InvoiceSummary.from_entity(inv) for inv in sync.store.invoices.all()]


@router.get("/draft", response_model=InvoiceResponse)
async def invoice_draft(
    today: date = Depends(get_today),
    settings: Settings = Depends(get_settings),
):
    """Blank invoice template. Nothing is stored until it is POSTed back."""
    draft = new_invoice_draft(
        today,
        invoice_id=InvoiceId(str(uuid.uuid4())),
        item_id=ItemId(str(uuid.uuid4())),
        number_suffix=random.randrange(1000),  # nosec B311
        due_days=settings.invoice_due_days,
    )
    return InvoiceResponse.from_entity(draft)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: str, sync: EntitySync = Depends(get_sync)):
    return InvoiceResponse.from_entity(get_invoice_or_404(sync, invoice_id))


@router.post(
    "", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    body: InvoiceCreate,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    stored = sync.apply_upsert(
        EntityKind.INVOICE, body.to_entity(body.id or str(uuid.uuid4())),
    )
    background_tasks.add_task(sync.persist_upsert, EntityKind.INVOICE, stored)
    logger.info(
        f"Invoice {stored.invoice_number} saved",
        extra={"entity_kind": "invoices", "entity_id": stored.id},
    )
    return InvoiceResponse.from_entity(stored)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def replace_invoice(
    invoice_id: str,
    body: InvoiceUpsert,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    """Full-record replacement; inserts when the id is new."""
    stored = sync.apply_upsert(EntityKind.INVOICE, body.to_entity(invoice_id))
    background_tasks.add_task(sync.persist_upsert, EntityKind.INVOICE, stored)
    return InvoiceResponse.from_entity(stored)


@router.delete("/{invoice_id}", status_code=status.HTTP_202_ACCEPTED)
async def delete_invoice(
    invoice_id: str,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    removed = sync.apply_delete(EntityKind.INVOICE, invoice_id)
    background_tasks.add_task(sync.persist_delete, EntityKind.INVOICE, invoice_id)
    return {"id": invoice_id, "deleted": removed}


@router.get("/{invoice_id}/pdf")
async def export_invoice_pdf(
    invoice_id: str,
    sync: EntitySync = Depends(get_sync),
    settings: Settings = Depends(get_settings),
):
    invoice = get_invoice_or_404(sync, invoice_id)
    pdf = render_invoice_pdf(invoice, sync.store.settings.current, settings.currency_code)
    if pdf is None:
        raise ExportError(invoice.invoice_number)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{pdf_filename(invoice)}"',
        },
    )


@router.post("/{invoice_id}/email-draft", response_model=EmailDraftResponse)
async def invoice_email_draft(
    invoice_id: str,
    sync: EntitySync = Depends(get_sync),
    assistant: InvoiceAssistant = Depends(get_assistant),
):
    """Subject, body and mailto link for sending the invoice."""
    invoice = get_invoice_or_404(sync, invoice_id)
    business = sync.store.settings.current
    body = await assistant.draft_email(invoice, business)
    draft = build_email_draft(invoice, business, body)
    return EmailDraftResponse(
        to=draft.to, subject=draft.subject, body=draft.body, mailto=draft.mailto,
    )

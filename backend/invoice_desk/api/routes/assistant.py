"""Assistant & Notification Routes - AI line-item suggestions and the persistence notice feed."""

from fastapi import APIRouter, Depends

from invoice_desk.api.dependencies import get_assistant, get_sync
from invoice_desk.schemas.assistant import (
    LineItemSuggestionRequest, LineItemSuggestionResponse, NotificationListResponse,
    NotificationResponse, SuggestedLineItem,
)
from invoice_desk.services.entity_sync import EntitySync
from invoice_desk.services.invoice_assistant import InvoiceAssistant

router = APIRouter(prefix="/api/v1", tags=["assistant"])


@router.post("/assistant/line-items", response_model=LineItemSuggestionResponse)
async def suggest_line_items(
    body: LineItemSuggestionRequest,
    sync: EntitySync = Depends(get_sync),
    assistant: InvoiceAssistant = Depends(get_assistant),
):
    """Suggested items are returned only; the client adds them to an invoice."""
    items = await assistant.suggest_line_items(
        body.description, sync.store.settings.current.business_name,
    )
    return LineItemSuggestionResponse(items=[
        SuggestedLineItem(
            id=item.id, description=item.description,
            quantity=item.quantity, rate=item.rate,
        )
        for item in items
    ])


@router.get("/notifications", response_model=NotificationListResponse)
async def drain_notifications(sync: EntitySync = Depends(get_sync)):
    """Pending persistence failures; each notice is returned once."""
    return NotificationListResponse(notifications=[
        NotificationResponse(
            entity_kind=n.entity_kind,
            entity_id=n.entity_id,
            operation=n.operation,
            message=n.message,
            error_code=n.error_code,
            timestamp=n.timestamp,
        )
        for n in sync.notifications.drain()
    ])

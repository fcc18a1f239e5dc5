"""Invoice Assistant - AI suggestions for line items and invoice email bodies.

Invariants:
    - No client (no API key) -> suggest_line_items returns [], draft_email returns ""
    - Blank description -> [] without calling the API
    - Any API or parsing failure is logged and degraded, never raised:
      [] for suggestions, FALLBACK_EMAIL_BODY for email drafts
    - Suggested items always receive fresh ids; invalid entries are skipped

Design Decisions:
    - Forced tool call (tool_choice) for line items: the SDK hands back parsed
      JSON in block.input, so no free-text JSON parsing is needed
    - Retry/backoff lives in ResilientAnthropicClient; this module holds none
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any

from invoice_desk.core.domain_types import ItemId
from invoice_desk.core.entities import BusinessSettings, Invoice, InvoiceItem
from invoice_desk.core.errors import ErrorContext
from invoice_desk.infrastructure.anthropic_client import ResilientAnthropicClient

logger = logging.getLogger(__name__)

FALLBACK_EMAIL_BODY = "Please find attached the invoice."

LINE_ITEMS_TOOL = {
    "name": "record_line_items",
    "description": "Records professional invoice line items.",
    "input_schema": {
        "type": "object",
        "properties": {
            "items": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "description": {
                            "type": "string",
                            "description": "Professional service description",
                        },
                        "quantity": {
                            "type": "number",
                            "description": "Quantity or hours",
                        },
                        "rate": {
                            "type": "number",
                            "description": "Unit rate in the invoice currency",
                        },
                    },
                    "required": ["description", "quantity", "rate"],
                },
            },
        },
        "required": ["items"],
    },
}


def _line_items_prompt(description: str, business_name: str, currency: str) -> str:
    business = business_name or "the business"
    return (
        f'Create a list of professional invoice line items for "{business}" '
        f'based on this rough description: "{description}". '
        f"The currency is {currency}. Assume reasonable market rates "
        "if none are specified."
    )


def _email_prompt(invoice: Invoice, settings: BusinessSettings, currency: str) -> str:
    business = settings.business_name or "our business"
    return (
        f"Write a polite, professional email to send invoice "
        f"#{invoice.invoice_number} to {invoice.client_name}. "
        f"The total is {currency} {invoice.total:,.2f}. "
        f"The business is {business}. Keep it brief and friendly. "
        "Reply with the email body only."
    )


def _to_item(raw: Any) -> InvoiceItem | None:
    if not isinstance(raw, dict):
        return None
    try:
        quantity = Decimal(str(raw.get("quantity", 1)))
        rate = Decimal(str(raw.get("rate", 0)))
    except InvalidOperation:
        return None
    if not quantity.is_finite() or not rate.is_finite():
        return None
    return InvoiceItem(
        id=ItemId(str(uuid.uuid4())),
        description=str(raw.get("description") or ""),
        quantity=quantity,
        rate=rate,
    )


class InvoiceAssistant:
    """Thin domain layer over the resilient Anthropic client."""

    def __init__(
        self,
        client: ResilientAnthropicClient | None,
        model: str,
        max_tokens: int = 1024,
        currency: str = "MVR",
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.currency = currency

    async def suggest_line_items(
        self, description: str, business_name: str = "",
    ) -> list[InvoiceItem]:
        if self.client is None or not description.strip():
            return []
        try:
            response = await self.client.create_message(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{
                    "role": "user",
                    "content": _line_items_prompt(
                        description.strip(), business_name, self.currency,
                    ),
                }],
                tools=[LINE_ITEMS_TOOL],
                tool_choice={"type": "tool", "name": LINE_ITEMS_TOOL["name"]},
                context=ErrorContext(operation="suggest_line_items"),
            )
        except Exception as e:
            logger.error(f"Line item suggestion failed: {e}")
            return []

        for block in response.content:
            if getattr(block, "type", None) != "tool_use":
                continue
            payload = block.input if isinstance(block.input, dict) else {}
            raw_items = payload.get("items")
            if not isinstance(raw_items, list):
                logger.warning("Line item tool input carried no item list")
                return []
            items = [item for item in map(_to_item, raw_items) if item is not None]
            logger.info(f"Suggested {len(items)} line items")
            return items
        logger.warning("Assistant response carried no line items")
        return []

    async def draft_email(self, invoice: Invoice, settings: BusinessSettings) -> str:
        if self.client is None:
            return ""
        try:
            response = await self.client.create_message(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{
                    "role": "user",
                    "content": _email_prompt(invoice, settings, self.currency),
                }],
                context=ErrorContext(
                    entity_kind="invoices", entity_id=invoice.id,
                    operation="draft_email",
                ),
            )
        except Exception as e:
            logger.error(
                f"Email draft failed for invoice {invoice.invoice_number}: {e}",
                extra={"entity_kind": "invoices", "entity_id": invoice.id},
            )
            return FALLBACK_EMAIL_BODY

        text = "".join(
            b.text for b in response.content if getattr(b, "type", None) == "text"
        )
        return text.strip()

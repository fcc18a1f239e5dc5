"""Invoice Schemas - Pydantic models with field-level validation for the invoice API.

Invariants:
    - Quantities and rates are non-negative at the API boundary
    - Client-supplied subtotal/tax/total are ignored (extra="ignore"); the
      server always recomputes them
    - Items without an id get a fresh one
    - Money is Decimal internally and a JSON number on the wire

Design Decisions:
    - to_entity()/from_entity() keep conversion next to the shape it converts,
      so routes stay thin
"""

import uuid
import datetime as dt
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from invoice_desk.core.domain_types import InvoiceId, InvoiceStatus, ItemId
from invoice_desk.core.entities import Invoice, InvoiceItem
from invoice_desk.core.invoice_totals import line_amount

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class InvoiceItemIn(BaseModel):
    """One line item as submitted by the client."""
    id: str | None = Field(None, max_length=64)
    description: str = Field("", max_length=1000)
    quantity: Decimal = Field(Decimal("1"), ge=0, allow_inf_nan=False)
    rate: Decimal = Field(Decimal("0"), ge=0, allow_inf_nan=False)

    def to_entity(self) -> InvoiceItem:
        return InvoiceItem(
            id=ItemId(self.id or str(uuid.uuid4())),
            description=self.description,
            quantity=self.quantity,
            rate=self.rate,
        )


class InvoiceUpsert(BaseModel):
    """Full invoice record for create and replace."""
    model_config = ConfigDict(extra="ignore")

    invoice_number: str = Field(min_length=1, max_length=50)
    client_name: str = Field("", max_length=300)
    client_email: str = Field("", max_length=320)
    client_address: str | None = Field(None, max_length=2000)
    date: dt.date
    due_date: dt.date
    items: list[InvoiceItemIn] = Field(default_factory=list, max_length=500)
    notes: str | None = Field(None, max_length=5000)
    status: InvoiceStatus = InvoiceStatus.DRAFT

    @field_validator("invoice_number")
    @classmethod
    def strip_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("invoice_number cannot be empty or whitespace")
        return v

    def to_entity(self, invoice_id: str) -> Invoice:
        return Invoice(
            id=InvoiceId(invoice_id),
            invoice_number=self.invoice_number,
            client_name=self.client_name,
            client_email=self.client_email,
            client_address=self.client_address,
            date=self.date,
            due_date=self.due_date,
            items=tuple(item.to_entity() for item in self.items),
            notes=self.notes,
            status=self.status,
        )


class InvoiceCreate(InvoiceUpsert):
    """Creation may carry a client-generated id (drafts hand one out)."""
    id: str | None = Field(None, min_length=1, max_length=64)


class InvoiceItemResponse(BaseModel):
    id: str
    description: str
    quantity: Money
    rate: Money
    amount: Money


class InvoiceResponse(BaseModel):
    """Invoice as stored, with server-computed totals."""
    id: str
    invoice_number: str
    client_name: str
    client_email: str
    client_address: str | None
    date: dt.date
    due_date: dt.date
    items: list[InvoiceItemResponse]
    notes: str | None
    status: InvoiceStatus
    subtotal: Money
    tax: Money
    total: Money

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceResponse":
        return cls(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            client_name=invoice.client_name,
            client_email=invoice.client_email,
            client_address=invoice.client_address,
            date=invoice.date,
            due_date=invoice.due_date,
            items=[
                InvoiceItemResponse(
                    id=item.id,
                    description=item.description,
                    quantity=item.quantity,
                    rate=item.rate,
                    amount=line_amount(item),
                )
                for item in invoice.items
            ],
            notes=invoice.notes,
            status=invoice.status,
            subtotal=invoice.subtotal,
            tax=invoice.tax,
            total=invoice.total,
        )


class InvoiceSummary(BaseModel):
    """Compact row for lists and the dashboard."""
    id: str
    invoice_number: str
    client_name: str
    date: dt.date
    due_date: dt.date
    status: InvoiceStatus
    total: Money

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceSummary":
        return cls(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            client_name=invoice.client_name,
            date=invoice.date,
            due_date=invoice.due_date,
            status=invoice.status,
            total=invoice.total,
        )


class EmailDraftResponse(BaseModel):
    to: str
    subject: str
    body: str
    mailto: str

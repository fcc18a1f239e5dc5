"""Entity Codec - dict serialization for entities shared by every persistence backend.

Invariants:
    - to_dict produces a JSON-safe dict (Decimals as strings, dates as ISO strings,
      enums by value)
    - from_dict reconstructs the entity from any dict produced by to_dict
    - Missing optional keys fall back to entity defaults (forward-compatible)
    - Invoice totals are NOT trusted from storage: from_dict recomputes them

Design Decisions:
    - Plain functions per entity, dispatched by EntityKind for generic repositories
"""

from datetime import date
from decimal import Decimal
from typing import Any, Callable

from invoice_desk.core.domain_types import (
    EntityKind, InvoiceStatus, UserRole, InvoiceId, CustomerId, UserId, ItemId,
)
from invoice_desk.core.entities import (
    Invoice, InvoiceItem, Customer, User, BusinessSettings,
)
from invoice_desk.core.invoice_totals import with_computed_totals


def _decimal(value: Any, default: str = "0") -> Decimal:
    if value is None or value == "":
        return Decimal(default)
    return Decimal(str(value))


def _date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


# ─── Invoice ─────────────────────────────────────────────────────

def item_to_dict(item: InvoiceItem) -> dict:
    return {
        "id": item.id,
        "description": item.description,
        "quantity": str(item.quantity),
        "rate": str(item.rate),
    }


def item_from_dict(data: dict) -> InvoiceItem:
    return InvoiceItem(
        id=ItemId(str(data["id"])),
        description=data.get("description") or "",
        quantity=_decimal(data.get("quantity"), "1"),
        rate=_decimal(data.get("rate")),
    )


def invoice_to_dict(invoice: Invoice) -> dict:
    return {
        "id": invoice.id,
        "invoice_number": invoice.invoice_number,
        "client_name": invoice.client_name,
        "client_email": invoice.client_email,
        "client_address": invoice.client_address,
        "date": invoice.date.isoformat(),
        "due_date": invoice.due_date.isoformat(),
        "items": [item_to_dict(i) for i in invoice.items],
        "notes": invoice.notes,
        "status": invoice.status.value,
        "subtotal": str(invoice.subtotal),
        "tax": str(invoice.tax),
        "total": str(invoice.total),
    }


def invoice_from_dict(data: dict) -> Invoice:
    invoice = Invoice(
        id=InvoiceId(str(data["id"])),
        invoice_number=data.get("invoice_number") or "",
        client_name=data.get("client_name") or "",
        client_email=data.get("client_email") or "",
        client_address=data.get("client_address"),
        date=_date(data["date"]),
        due_date=_date(data.get("due_date") or data["date"]),
        items=tuple(item_from_dict(i) for i in data.get("items") or []),
        notes=data.get("notes"),
        status=InvoiceStatus(data.get("status") or InvoiceStatus.DRAFT.value),
    )
    return with_computed_totals(invoice)


# ─── Customer / User ─────────────────────────────────────────────

def customer_to_dict(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "name": customer.name,
        "company_name": customer.company_name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
    }


def customer_from_dict(data: dict) -> Customer:
    return Customer(
        id=CustomerId(str(data["id"])),
        name=data.get("name") or "",
        company_name=data.get("company_name") or "",
        email=data.get("email") or "",
        phone=data.get("phone") or "",
        address=data.get("address") or "",
    )


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }


def user_from_dict(data: dict) -> User:
    return User(
        id=UserId(str(data["id"])),
        name=data.get("name") or "",
        email=data.get("email") or "",
        role=UserRole(data.get("role") or UserRole.VIEWER.value),
    )


# ─── Settings ────────────────────────────────────────────────────

def settings_to_dict(settings: BusinessSettings) -> dict:
    return {
        "business_name": settings.business_name,
        "business_subtitle": settings.business_subtitle,
        "address": settings.address,
        "email": settings.email,
        "phone": settings.phone,
        "gst_tin": settings.gst_tin,
        "logo_url": settings.logo_url,
    }


def settings_from_dict(data: dict) -> BusinessSettings:
    return BusinessSettings(
        business_name=data.get("business_name") or "",
        business_subtitle=data.get("business_subtitle") or "",
        address=data.get("address") or "",
        email=data.get("email") or "",
        phone=data.get("phone") or "",
        gst_tin=data.get("gst_tin") or "",
        logo_url=data.get("logo_url"),
    )


# ─── Dispatch by kind ────────────────────────────────────────────

ENCODERS: dict[EntityKind, Callable[[Any], dict]] = {
    EntityKind.INVOICE: invoice_to_dict,
    EntityKind.CUSTOMER: customer_to_dict,
    EntityKind.USER: user_to_dict,
}

DECODERS: dict[EntityKind, Callable[[dict], Any]] = {
    EntityKind.INVOICE: invoice_from_dict,
    EntityKind.CUSTOMER: customer_from_dict,
    EntityKind.USER: user_from_dict,
}

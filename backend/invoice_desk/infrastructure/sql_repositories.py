"""SQL Repositories - database-backed implementations of the persistence protocols.

Invariants:
    - Each call opens its own session from DatabaseSessionManager and commits it
    - upsert is a full-record replace (session.merge), keyed by primary key
    - delete_by_id of an absent id succeeds without effect
    - Settings are only ever read from / written to id == SETTINGS_ID
    - Failures surface as DatabaseError (mapped by DatabaseSessionManager)

Design Decisions:
    - One generic repository parametrized by record class + converters
    - Invoice rows are loaded newest-created first, other rows oldest first,
      matching the in-memory insertion order of EntityStore
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from sqlalchemy import delete, select

from invoice_desk.core.domain_types import EntityKind, SETTINGS_ID
from invoice_desk.core.entities import BusinessSettings, Customer, Invoice, User
from invoice_desk.core.entity_codec import (
    invoice_from_dict, item_to_dict, customer_from_dict, user_from_dict,
    settings_from_dict,
)
from invoice_desk.core.repository_protocols import PersistenceBackend
from invoice_desk.infrastructure.database import DatabaseSessionManager
from invoice_desk.models import (
    InvoiceRecord, CustomerRecord, UserRecord, BusinessSettingsRecord,
)

logger = logging.getLogger(__name__)

E = TypeVar("E")


# ─── Converters ──────────────────────────────────────────────────

def invoice_to_record(invoice: Invoice) -> InvoiceRecord:
    return InvoiceRecord(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        client_name=invoice.client_name,
        client_email=invoice.client_email,
        client_address=invoice.client_address,
        date=invoice.date,
        due_date=invoice.due_date,
        items=[item_to_dict(i) for i in invoice.items],
        notes=invoice.notes,
        status=invoice.status.value,
        subtotal=invoice.subtotal,
        tax=invoice.tax,
        total=invoice.total,
    )


def invoice_from_record(record: InvoiceRecord) -> Invoice:
    return invoice_from_dict({
        "id": record.id,
        "invoice_number": record.invoice_number,
        "client_name": record.client_name,
        "client_email": record.client_email,
        "client_address": record.client_address,
        "date": record.date,
        "due_date": record.due_date,
        "items": record.items or [],
        "notes": record.notes,
        "status": record.status,
    })


def customer_to_record(customer: Customer) -> CustomerRecord:
    return CustomerRecord(
        id=customer.id,
        name=customer.name,
        company_name=customer.company_name,
        email=customer.email,
        phone=customer.phone,
        address=customer.address,
    )


def customer_from_record(record: CustomerRecord) -> Customer:
    return customer_from_dict({
        "id": record.id, "name": record.name,
        "company_name": record.company_name, "email": record.email,
        "phone": record.phone, "address": record.address,
    })


def user_to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id, name=user.name, email=user.email, role=user.role.value,
    )


def user_from_record(record: UserRecord) -> User:
    return user_from_dict({
        "id": record.id, "name": record.name,
        "email": record.email, "role": record.role,
    })


# ─── Repositories ────────────────────────────────────────────────

@dataclass(frozen=True)
class RecordMapping(Generic[E]):
    """How one entity kind maps onto its table."""
    kind: EntityKind
    record_cls: Any
    to_record: Callable[[E], Any]
    from_record: Callable[[Any], E]
    newest_first: bool = False


INVOICE_MAPPING = RecordMapping(
    EntityKind.INVOICE, InvoiceRecord,
    invoice_to_record, invoice_from_record, newest_first=True,
)
CUSTOMER_MAPPING = RecordMapping(
    EntityKind.CUSTOMER, CustomerRecord, customer_to_record, customer_from_record,
)
USER_MAPPING = RecordMapping(
    EntityKind.USER, UserRecord, user_to_record, user_from_record,
)


class SqlEntityRepository(Generic[E]):
    """EntityRepository over one table."""

    def __init__(self, db: DatabaseSessionManager, mapping: RecordMapping[E]):
        self._db = db
        self._mapping = mapping

    async def fetch_all(self) -> list[E]:
        record_cls = self._mapping.record_cls
        order = (
            record_cls.created_at.desc() if self._mapping.newest_first
            else record_cls.created_at.asc()
        )
        async with self._db.session() as db:
            result = await db.execute(select(record_cls).order_by(order))
            return [self._mapping.from_record(r) for r in result.scalars().all()]

    async def upsert(self, entity: E) -> None:
        async with self._db.session() as db:
            await db.merge(self._mapping.to_record(entity))
            await db.commit()

    async def delete_by_id(self, entity_id: str) -> None:
        record_cls = self._mapping.record_cls
        async with self._db.session() as db:
            await db.execute(delete(record_cls).where(record_cls.id == entity_id))
            await db.commit()


class SqlSettingsRepository:
    """SettingsRepository pinned to the single SETTINGS_ID row."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def fetch_settings(self) -> BusinessSettings | None:
        async with self._db.session() as db:
            record = await db.get(BusinessSettingsRecord, SETTINGS_ID)
            if record is None:
                return None
            return settings_from_dict({
                "business_name": record.business_name,
                "business_subtitle": record.business_subtitle,
                "address": record.address,
                "email": record.email,
                "phone": record.phone,
                "gst_tin": record.gst_tin,
                "logo_url": record.logo_url,
            })

    async def save_settings(self, settings: BusinessSettings) -> None:
        async with self._db.session() as db:
            await db.merge(BusinessSettingsRecord(
                id=SETTINGS_ID,
                business_name=settings.business_name,
                business_subtitle=settings.business_subtitle,
                address=settings.address,
                email=settings.email,
                phone=settings.phone,
                gst_tin=settings.gst_tin,
                logo_url=settings.logo_url,
            ))
            await db.commit()


def build_sql_backend(db: DatabaseSessionManager) -> PersistenceBackend:
    return PersistenceBackend(
        name="database",
        invoices=SqlEntityRepository(db, INVOICE_MAPPING),
        customers=SqlEntityRepository(db, CUSTOMER_MAPPING),
        users=SqlEntityRepository(db, USER_MAPPING),
        settings=SqlSettingsRepository(db),
        health=db,
    )

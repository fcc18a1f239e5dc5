"""SQL repositories against a throwaway SQLite file database."""

from decimal import Decimal

import pytest

from invoice_desk.core.domain_types import InvoiceStatus, UserRole
from invoice_desk.core.entities import BusinessSettings, Customer, User
from invoice_desk.core.errors import DatabaseError
from invoice_desk.infrastructure.backends import create_sqlite_tables
from invoice_desk.infrastructure.database import DatabaseSessionManager
from invoice_desk.infrastructure.sql_repositories import build_sql_backend


@pytest.fixture
async def db(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'invoices.db'}")
    await create_sqlite_tables(manager)
    yield manager
    await manager.dispose()


@pytest.fixture
def backend(db):
    return build_sql_backend(db)


async def test_invoice_upsert_then_fetch(backend, make_invoice):
    invoice = make_invoice("a", status=InvoiceStatus.PAID)
    await backend.invoices.upsert(invoice)
    fetched = await backend.invoices.fetch_all()
    assert fetched == [invoice]
    assert fetched[0].total == Decimal("12960")


async def test_invoice_upsert_replaces_existing_row(backend, make_invoice):
    await backend.invoices.upsert(make_invoice("a", client_name="Old"))
    await backend.invoices.upsert(make_invoice("a", client_name="New", items=[("1", "10")]))
    fetched = await backend.invoices.fetch_all()
    assert len(fetched) == 1
    assert fetched[0].client_name == "New"
    assert fetched[0].subtotal == Decimal("10")


async def test_invoices_fetched_newest_first(backend, make_invoice):
    for invoice_id in ("first", "second", "third"):
        await backend.invoices.upsert(make_invoice(invoice_id))
    assert [i.id for i in await backend.invoices.fetch_all()] == ["third", "second", "first"]


async def test_customers_fetched_oldest_first(backend):
    await backend.customers.upsert(Customer(id="c1", name="One"))
    await backend.customers.upsert(Customer(id="c2", name="Two", company_name="Co"))
    fetched = await backend.customers.fetch_all()
    assert [c.id for c in fetched] == ["c1", "c2"]
    assert fetched[1].company_name == "Co"


async def test_replaced_row_keeps_its_position(backend):
    await backend.customers.upsert(Customer(id="a", name="A"))
    await backend.customers.upsert(Customer(id="b", name="B"))
    await backend.customers.upsert(Customer(id="a", name="A renamed"))
    fetched = await backend.customers.fetch_all()
    assert [c.id for c in fetched] == ["a", "b"]
    assert fetched[0].name == "A renamed"


async def test_replaced_invoice_keeps_its_position(backend, make_invoice):
    await backend.invoices.upsert(make_invoice("a"))
    await backend.invoices.upsert(make_invoice("b"))
    await backend.invoices.upsert(make_invoice("a", client_name="Replaced"))
    fetched = await backend.invoices.fetch_all()
    assert [i.id for i in fetched] == ["b", "a"]
    assert fetched[1].client_name == "Replaced"


async def test_delete_by_id_and_delete_absent(backend):
    await backend.users.upsert(User(id="u1", name="Ann", email="a@x.test", role=UserRole.ADMIN))
    await backend.users.delete_by_id("missing")
    assert len(await backend.users.fetch_all()) == 1
    await backend.users.delete_by_id("u1")
    assert await backend.users.fetch_all() == []


async def test_settings_singleton_row(backend):
    assert await backend.settings.fetch_settings() is None
    await backend.settings.save_settings(BusinessSettings(business_name="First"))
    await backend.settings.save_settings(BusinessSettings(business_name="Second", gst_tin="T1"))
    saved = await backend.settings.fetch_settings()
    assert saved.business_name == "Second"
    assert saved.gst_tin == "T1"


async def test_health_check_reports_reachable(backend):
    assert await backend.health.health_check() is True


async def test_missing_tables_surface_as_database_error(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    backend = build_sql_backend(manager)
    with pytest.raises(DatabaseError):
        await backend.invoices.fetch_all()
    await manager.dispose()

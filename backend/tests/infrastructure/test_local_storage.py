"""Local JSON document backend - whole-collection reads and writes under tmp_path."""

import asyncio
import json

import pytest

from invoice_desk.core.entities import BusinessSettings, Customer
from invoice_desk.core.errors import LocalStorageError
from invoice_desk.infrastructure.local_storage import build_local_backend


@pytest.fixture
def backend(tmp_path):
    return build_local_backend(tmp_path / "data")


async def test_missing_documents_mean_empty(backend):
    assert await backend.invoices.fetch_all() == []
    assert await backend.settings.fetch_settings() is None


async def test_new_invoices_stored_first(backend, tmp_path, make_invoice):
    await backend.invoices.upsert(make_invoice("a"))
    await backend.invoices.upsert(make_invoice("b"))
    assert [i.id for i in await backend.invoices.fetch_all()] == ["b", "a"]
    on_disk = json.loads((tmp_path / "data" / "invoices.json").read_text())
    assert [d["id"] for d in on_disk] == ["b", "a"]


async def test_upsert_replaces_in_place(backend, make_invoice):
    await backend.invoices.upsert(make_invoice("a", client_name="Old"))
    await backend.invoices.upsert(make_invoice("b"))
    await backend.invoices.upsert(make_invoice("a", client_name="New"))
    fetched = await backend.invoices.fetch_all()
    assert [i.id for i in fetched] == ["b", "a"]
    assert fetched[1].client_name == "New"


async def test_new_customers_stored_last_and_delete(backend):
    await backend.customers.upsert(Customer(id="c1", name="One"))
    await backend.customers.upsert(Customer(id="c2", name="Two"))
    await backend.customers.delete_by_id("c1")
    await backend.customers.delete_by_id("absent")
    assert [c.id for c in await backend.customers.fetch_all()] == ["c2"]


async def test_concurrent_upserts_do_not_drop_records(backend):
    await asyncio.gather(*(
        backend.customers.upsert(Customer(id=f"c{i}", name=f"N{i}")) for i in range(10)
    ))
    assert len(await backend.customers.fetch_all()) == 10


async def test_settings_document_is_replaced(backend):
    await backend.settings.save_settings(BusinessSettings(business_name="A"))
    await backend.settings.save_settings(BusinessSettings(business_name="B"))
    assert (await backend.settings.fetch_settings()).business_name == "B"


async def test_malformed_document_raises_local_storage_error(backend, tmp_path):
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "invoices.json").write_text("{not json")
    with pytest.raises(LocalStorageError):
        await backend.invoices.fetch_all()


async def test_wrong_document_shape_raises_local_storage_error(backend, tmp_path):
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "users.json").write_text('{"id": "u1"}')
    with pytest.raises(LocalStorageError):
        await backend.users.fetch_all()


async def test_health_check_creates_directory(backend, tmp_path):
    assert await backend.health.health_check() is True
    assert (tmp_path / "data").is_dir()

"""Invoice routes - optimistic writes, server-computed totals, export and email drafts.

Design Decisions:
    - Background persistence has finished by the time the response is returned,
      so the backend is checked right after each request
"""

from invoice_desk.main import app

INVOICE_BODY = {
    "invoice_number": "INV-2024-001",
    "client_name": "Blue Lagoon (Aisha)",
    "client_email": "aisha@lagoon.test",
    "client_address": "Male",
    "date": "2024-05-10",
    "due_date": "2024-05-24",
    "items": [
        {"description": "Photography", "quantity": 2, "rate": 4500},
        {"description": "Editing", "quantity": 1, "rate": 3000},
    ],
    "status": "Paid",
}


async def _create(client, **overrides) -> dict:
    res = await client.post("/api/v1/invoices", json={**INVOICE_BODY, **overrides})
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_computes_totals_and_persists(client, backend):
    created = await _create(client, subtotal=1, tax=1, total=1)

    assert created["subtotal"] == 12000
    assert created["tax"] == 960
    assert created["total"] == 12960
    assert created["items"][0]["amount"] == 9000
    assert all(item["id"] for item in created["items"])
    stored = await backend.invoices.fetch_all()
    assert [i.id for i in stored] == [created["id"]]


async def test_create_keeps_client_supplied_id(client):
    created = await _create(client, id="draft-123")
    assert created["id"] == "draft-123"
    res = await client.get("/api/v1/invoices/draft-123")
    assert res.status_code == 200


async def test_list_is_newest_first(client):
    first = await _create(client, invoice_number="INV-2024-001")
    second = await _create(client, invoice_number="INV-2024-002")
    res = await client.get("/api/v1/invoices")
    assert [i["id"] for i in res.json()] == [second["id"], first["id"]]


async def test_put_replaces_whole_record(client, backend):
    created = await _create(client)
    body = {**INVOICE_BODY, "items": [{"quantity": 1, "rate": 100}], "status": "Pending"}

    res = await client.put(f"/api/v1/invoices/{created['id']}", json=body)

    assert res.status_code == 200
    assert res.json()["total"] == 108
    assert len(res.json()["items"]) == 1
    listed = (await client.get("/api/v1/invoices")).json()
    assert len(listed) == 1
    assert (await backend.invoices.fetch_all())[0].status.value == "Pending"


async def test_put_unknown_id_inserts(client):
    res = await client.put("/api/v1/invoices/new-id", json=INVOICE_BODY)
    assert res.status_code == 200
    assert len((await client.get("/api/v1/invoices")).json()) == 1


async def test_delete_is_accepted_and_removes(client, backend):
    created = await _create(client)
    res = await client.delete(f"/api/v1/invoices/{created['id']}")
    assert res.status_code == 202
    assert res.json()["deleted"] is True
    assert (await client.get(f"/api/v1/invoices/{created['id']}")).status_code == 404
    assert await backend.invoices.fetch_all() == []


async def test_delete_absent_id_is_a_noop(client):
    await _create(client)
    res = await client.delete("/api/v1/invoices/missing")
    assert res.status_code == 202
    assert res.json()["deleted"] is False
    assert len((await client.get("/api/v1/invoices")).json()) == 1


async def test_get_unknown_returns_structured_404(client):
    res = await client.get("/api/v1/invoices/nope")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_negative_quantity_rejected_before_store(client):
    body = {**INVOICE_BODY, "items": [{"quantity": -1, "rate": 10}]}
    res = await client.post("/api/v1/invoices", json=body)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await client.get("/api/v1/invoices")).json() == []


async def test_missing_required_field_rejected(client):
    body = {k: v for k, v in INVOICE_BODY.items() if k != "date"}
    res = await client.post("/api/v1/invoices", json=body)
    assert res.status_code == 400
    fields = [d["field"] for d in res.json()["error"]["details"]]
    assert "body.date" in fields


async def test_draft_template(client):
    res = await client.get("/api/v1/invoices/draft")
    draft = res.json()
    assert res.status_code == 200
    assert draft["invoice_number"].startswith("INV-2024-")
    assert len(draft["invoice_number"]) == len("INV-2024-000")
    assert draft["date"] == "2024-05-15"
    assert draft["due_date"] == "2024-05-29"
    assert draft["status"] == "Draft"
    assert len(draft["items"]) == 1
    assert draft["total"] == 0
    assert (await client.get("/api/v1/invoices")).json() == []


async def test_pdf_export(client):
    created = await _create(client)
    res = await client.get(f"/api/v1/invoices/{created['id']}/pdf")
    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert 'filename="Invoice-INV-2024-001.pdf"' in res.headers["content-disposition"]
    assert res.content.startswith(b"%PDF")


async def test_pdf_export_failure_is_generic_500(client, monkeypatch):
    created = await _create(client)
    monkeypatch.setattr(
        "invoice_desk.api.routes.invoices.render_invoice_pdf", lambda *a: None,
    )
    res = await client.get(f"/api/v1/invoices/{created['id']}/pdf")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "EXPORT_FAILED"


async def test_email_draft_with_assistant_disabled(client):
    await client.put("/api/v1/settings", json={"business_name": "SandPix"})
    created = await _create(client)
    res = await client.post(f"/api/v1/invoices/{created['id']}/email-draft")
    draft = res.json()
    assert res.status_code == 200
    assert draft["to"] == "aisha@lagoon.test"
    assert draft["subject"] == "Invoice INV-2024-001 from SandPix"
    assert draft["body"] == ""
    assert draft["mailto"].startswith("mailto:aisha@lagoon.test?subject=Invoice%20INV-2024-001")


async def test_persist_failure_keeps_invoice_and_queues_notification(client, failing_sync):
    app.state.sync = failing_sync
    created = await _create(client)

    assert (await client.get(f"/api/v1/invoices/{created['id']}")).status_code == 200
    notices = (await client.get("/api/v1/notifications")).json()["notifications"]
    assert len(notices) == 1
    assert notices[0]["entity_id"] == created["id"]
    assert notices[0]["error_code"] == "LOCAL_STORAGE_ERROR"
    assert (await client.get("/api/v1/notifications")).json()["notifications"] == []

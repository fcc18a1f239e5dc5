"""Customer, user and settings routes."""


async def test_customer_crud_and_client_fields(client, backend):
    res = await client.post("/api/v1/customers", json={
        "name": " Aisha ", "company_name": "Blue Lagoon",
        "email": "aisha@lagoon.test", "address": "Male",
    })
    assert res.status_code == 201
    customer = res.json()
    assert customer["name"] == "Aisha"

    fields = (await client.get(f"/api/v1/customers/{customer['id']}/client-fields")).json()
    assert fields == {
        "client_name": "Blue Lagoon (Aisha)",
        "client_email": "aisha@lagoon.test",
        "client_address": "Male",
    }

    res = await client.put(f"/api/v1/customers/{customer['id']}", json={"name": "Aisha"})
    assert res.json()["company_name"] == ""
    fields = (await client.get(f"/api/v1/customers/{customer['id']}/client-fields")).json()
    assert fields["client_name"] == "Aisha"

    assert (await client.delete(f"/api/v1/customers/{customer['id']}")).status_code == 202
    assert (await client.get("/api/v1/customers")).json() == []
    assert await backend.customers.fetch_all() == []


async def test_customer_edit_does_not_touch_existing_invoice(client):
    customer = (await client.post("/api/v1/customers", json={"name": "Old Name"})).json()
    fields = (await client.get(f"/api/v1/customers/{customer['id']}/client-fields")).json()
    invoice = (await client.post("/api/v1/invoices", json={
        "invoice_number": "INV-2024-010", "date": "2024-05-01", "due_date": "2024-05-15",
        **fields,
    })).json()

    await client.put(f"/api/v1/customers/{customer['id']}", json={"name": "New Name"})

    stored = (await client.get(f"/api/v1/invoices/{invoice['id']}")).json()
    assert stored["client_name"] == "Old Name"


async def test_customers_listed_in_insertion_order(client):
    for name in ("First", "Second"):
        await client.post("/api/v1/customers", json={"name": name})
    names = [c["name"] for c in (await client.get("/api/v1/customers")).json()]
    assert names == ["First", "Second"]


async def test_blank_customer_name_rejected(client):
    res = await client.post("/api/v1/customers", json={"name": "   "})
    assert res.status_code == 400


async def test_unknown_customer_is_404(client):
    assert (await client.get("/api/v1/customers/nope/client-fields")).status_code == 404


async def test_user_crud(client, backend):
    res = await client.post("/api/v1/users", json={
        "name": "Ann", "email": "ann@x.test", "role": "Admin",
    })
    assert res.status_code == 201
    user = res.json()
    assert user["role"] == "Admin"

    res = await client.put(f"/api/v1/users/{user['id']}", json={
        "name": "Ann", "email": "ann@x.test", "role": "Editor",
    })
    assert res.json()["role"] == "Editor"
    assert (await backend.users.fetch_all())[0].role.value == "Editor"

    await client.delete(f"/api/v1/users/{user['id']}")
    assert (await client.get(f"/api/v1/users/{user['id']}")).status_code == 404


async def test_user_invalid_role_or_email_rejected(client):
    res = await client.post("/api/v1/users", json={"name": "A", "email": "a@x.test", "role": "Owner"})
    assert res.status_code == 400
    res = await client.post("/api/v1/users", json={"name": "A", "email": "nope"})
    assert res.status_code == 400


async def test_settings_default_then_singleton_replace(client, backend):
    assert (await client.get("/api/v1/settings")).json()["business_name"] == ""

    await client.put("/api/v1/settings", json={"business_name": "SandPix", "gst_tin": "T-1"})
    res = await client.put("/api/v1/settings", json={"business_name": "SandPix Maldives"})

    assert res.json()["business_name"] == "SandPix Maldives"
    assert res.json()["gst_tin"] == ""
    saved = await backend.settings.fetch_settings()
    assert saved.business_name == "SandPix Maldives"

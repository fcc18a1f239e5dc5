"""Report, assistant, notification and health routes."""

from decimal import Decimal

from invoice_desk.core.entities import InvoiceItem
from invoice_desk.main import app
from invoice_desk.services.invoice_assistant import InvoiceAssistant


def _body(number: str, on: str, status: str, rate: int = 4500) -> dict:
    return {
        "invoice_number": number, "client_name": "Client",
        "date": on, "due_date": on, "status": status,
        "items": [{"quantity": 2, "rate": rate}, {"quantity": 1, "rate": 3000}],
    }


async def _seed(client) -> None:
    for body in (
        _body("INV-1", "2024-05-10", "Paid"),        # 12960
        _body("INV-2", "2024-05-12", "Pending", 0),  # 3240
        _body("INV-3", "2024-03-01", "Paid", 0),     # 3240
        _body("INV-4", "2024-05-31", "Overdue", 0),  # 3240
    ):
        assert (await client.post("/api/v1/invoices", json=body)).status_code == 201


async def test_dashboard(client):
    await _seed(client)
    data = (await client.get("/api/v1/reports/dashboard")).json()

    assert data["stats"] == {
        "total_revenue": 16200, "pending_amount": 3240, "invoice_count": 4,
    }
    assert [m["label"] for m in data["trend"]] == ["Dec", "Jan", "Feb", "Mar", "Apr", "May"]
    assert [m["amount"] for m in data["trend"]] == [0, 0, 0, 3240, 0, 12960]
    assert [r["invoice_number"] for r in data["recent"]] == ["INV-4", "INV-3", "INV-2", "INV-1"]


async def test_dashboard_on_empty_store(client):
    data = (await client.get("/api/v1/reports/dashboard")).json()
    assert data["stats"]["invoice_count"] == 0
    assert len(data["trend"]) == 6
    assert data["recent"] == []


async def test_financial_report_range(client):
    await _seed(client)
    res = await client.get("/api/v1/reports/financial?start=2024-05-01&end=2024-05-31")
    report = res.json()

    assert res.status_code == 200
    assert [i["invoice_number"] for i in report["invoices"]] == ["INV-1", "INV-2", "INV-4"]
    assert report["total_invoiced"] == 19440
    assert report["total_received"] == 12960
    assert report["total_pending"] == 6480
    assert report["total_tax"] == 1440
    assert report["status_counts"] == {"Draft": 0, "Pending": 1, "Paid": 1, "Overdue": 1}


async def test_financial_report_defaults_to_month_to_date(client):
    await _seed(client)
    report = (await client.get("/api/v1/reports/financial")).json()
    assert report["start"] == "2024-05-01"
    assert report["end"] == "2024-05-15"
    assert [i["invoice_number"] for i in report["invoices"]] == ["INV-1", "INV-2"]


async def test_financial_report_rejects_inverted_range(client):
    res = await client.get("/api/v1/reports/financial?start=2024-06-01&end=2024-05-01")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_DATE_RANGE"


async def test_line_item_suggestions_disabled_returns_empty(client):
    res = await client.post("/api/v1/assistant/line-items", json={"description": "wedding"})
    assert res.status_code == 200
    assert res.json() == {"items": []}


async def test_line_item_suggestions_from_assistant(client, monkeypatch):
    async def fake_suggest(self, description, business_name=""):
        return [InvoiceItem(id="s1", description=description, quantity=Decimal("2"), rate=Decimal("10"))]

    monkeypatch.setattr(InvoiceAssistant, "suggest_line_items", fake_suggest)
    res = await client.post("/api/v1/assistant/line-items", json={"description": "Drone"})
    assert res.json()["items"] == [
        {"id": "s1", "description": "Drone", "quantity": 2, "rate": 10},
    ]


async def test_blank_suggestion_prompt_rejected(client):
    res = await client.post("/api/v1/assistant/line-items", json={"description": "  "})
    assert res.status_code == 400


async def test_notifications_empty_by_default(client):
    assert (await client.get("/api/v1/notifications")).json() == {"notifications": []}


async def test_health_and_readiness(client):
    assert (await client.get("/api/v1/health/")).json()["status"] == "healthy"
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"local": "healthy"}


async def test_readiness_fails_when_backend_unhealthy(client, monkeypatch):
    async def unhealthy():
        return False

    monkeypatch.setattr(app.state.sync.backend.health, "health_check", unhealthy)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "local_unavailable"

"""Invoice and directory schema validation at the API boundary."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from invoice_desk.schemas.directory import CustomerUpsert, UserUpsert
from invoice_desk.schemas.invoice import InvoiceResponse, InvoiceUpsert

VALID = {
    "invoice_number": "INV-2024-001",
    "date": "2024-05-10",
    "due_date": "2024-05-24",
    "items": [{"quantity": "2", "rate": "4500"}],
}


def test_valid_invoice_converts_to_entity():
    entity = InvoiceUpsert(**VALID).to_entity("inv-1")
    assert entity.id == "inv-1"
    assert entity.date == date(2024, 5, 10)
    assert entity.items[0].quantity == Decimal("2")
    assert entity.items[0].id


def test_client_totals_are_dropped():
    body = InvoiceUpsert(**VALID, subtotal=5, tax=5, total=5)
    assert "total" not in body.model_dump()


@pytest.mark.parametrize("field", ["quantity", "rate"])
def test_negative_item_values_rejected(field):
    item = {"quantity": "1", "rate": "1", field: "-0.01"}
    with pytest.raises(ValidationError):
        InvoiceUpsert(**{**VALID, "items": [item]})


def test_non_finite_amounts_rejected():
    with pytest.raises(ValidationError):
        InvoiceUpsert(**{**VALID, "items": [{"quantity": "NaN", "rate": "1"}]})


def test_blank_invoice_number_rejected():
    with pytest.raises(ValidationError):
        InvoiceUpsert(**{**VALID, "invoice_number": "   "})


def test_unknown_status_rejected():
    with pytest.raises(ValidationError):
        InvoiceUpsert(**{**VALID, "status": "Cancelled"})


def test_response_serializes_money_as_numbers(make_invoice):
    data = InvoiceResponse.from_entity(make_invoice()).model_dump(mode="json")
    assert data["total"] == 12960.0
    assert isinstance(data["tax"], float)
    assert data["status"] == "Draft"


def test_customer_name_stripped_and_required():
    assert CustomerUpsert(name="  Aisha ").name == "Aisha"
    with pytest.raises(ValidationError):
        CustomerUpsert(name=" ")


def test_user_email_must_contain_at():
    with pytest.raises(ValidationError):
        UserUpsert(name="Ann", email="ann.example")

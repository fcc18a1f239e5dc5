"""Tests for invoice totals - decimal subtotal, 8% tax, total, recompute on replace."""

from dataclasses import replace
from decimal import Decimal

from invoice_desk.core.entities import InvoiceItem
from invoice_desk.core.invoice_totals import (
    compute_totals, line_amount, quantize_money, with_computed_totals,
)


def _item(quantity: str, rate: str, item_id: str = "i") -> InvoiceItem:
    return InvoiceItem(id=item_id, quantity=Decimal(quantity), rate=Decimal(rate))


def test_two_lines_give_subtotal_tax_and_total():
    totals = compute_totals([_item("2", "4500", "a"), _item("1", "3000", "b")])
    assert totals.subtotal == Decimal("12000")
    assert totals.tax == Decimal("960")
    assert totals.total == Decimal("12960")


def test_empty_items_are_all_zero():
    totals = compute_totals([])
    assert totals.subtotal == 0
    assert totals.tax == 0
    assert totals.total == 0


def test_tax_rounds_half_up_to_cents():
    # subtotal 10.56, tax 0.8448
    assert compute_totals([_item("1", "10.5625")]).tax == Decimal("0.84")
    # subtotal 6.25, tax exactly 0.50
    assert compute_totals([_item("100", "0.0625")]).tax == Decimal("0.50")
    assert compute_totals([_item("1", "0.5625")]).subtotal == Decimal("0.56")
    assert quantize_money(Decimal("0.045")) == Decimal("0.05")


def test_decimal_accumulation_has_no_float_drift():
    items = [_item("1", "0.1", str(i)) for i in range(3)]
    totals = compute_totals(items)
    assert totals.subtotal == Decimal("0.30")
    assert totals.total == Decimal("0.32")


def test_negative_values_stay_arithmetically_consistent():
    totals = compute_totals([_item("-1", "100"), _item("2", "50")])
    assert totals.subtotal == Decimal("0")
    totals = compute_totals([_item("1", "-250")])
    assert totals.subtotal == Decimal("-250")
    assert totals.tax == Decimal("-20")
    assert totals.total == totals.subtotal + totals.tax


def test_line_amount_is_quantity_times_rate():
    assert line_amount(_item("3", "12.50")) == Decimal("37.50")


def test_recompute_is_idempotent(make_invoice):
    once = with_computed_totals(make_invoice())
    twice = with_computed_totals(once)
    assert once == twice


def test_stale_totals_are_overwritten(make_invoice):
    stale = replace(make_invoice(), subtotal=Decimal("1"), tax=Decimal("1"), total=Decimal("999"))
    fixed = with_computed_totals(stale)
    assert fixed.total == Decimal("12960")

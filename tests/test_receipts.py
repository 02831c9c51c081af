from datetime import datetime
from types import SimpleNamespace

from app.utils.receipts import build_receipt, render_receipt_html


def _transaction(**overrides):
    fields = dict(
        transaction_number="TXN-b001-1767600000000",
        transaction_date=datetime(2026, 1, 5, 14, 30),
        subtotal=22.97,
        tax=1.84,
        tip=2.0,
        discount=None,
        total=26.81,
        payment_method="cash",
        payment_status="Paid",
        pickup_date=datetime(2026, 1, 8, 17, 0),
        notes=None,
        items=[SimpleNamespace(item_id="i-1", quantity=2, price_at_transaction=3.99)],
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _order():
    return SimpleNamespace(
        order_number="ORD-600000-0042",
        status="CREATED",
        amount_tendered=40.0,
        change=13.19,
        items=[
            SimpleNamespace(name="Shirt - Wash & Press", quantity=2, price_at_order=3.99,
                            starch="LIGHT", press_only=False, notes=None),
            SimpleNamespace(name="Suit - 2 Piece", quantity=1, price_at_order=14.99,
                            starch="NONE", press_only=True, notes="Stain on lapel"),
        ],
    )


def test_build_receipt_uses_order_lines():
    receipt = build_receipt(
        _transaction(),
        business=SimpleNamespace(name="Sparkle", phone_number="5551234567"),
        customer=SimpleNamespace(full_name="Jamie Walker"),
        order=_order(),
    )
    assert receipt["business_phone"] == "(555) 123-4567"
    assert receipt["order_status"] == "Created"
    assert receipt["items"][0]["line_total"] == 7.98
    assert receipt["items"][0]["options"] == ["Starch: Light"]
    assert receipt["items"][1]["options"] == ["Press only", "Stain on lapel"]
    assert receipt["change"] == 13.19


def test_build_receipt_without_order_falls_back_to_transaction_items():
    receipt = build_receipt(_transaction())
    assert receipt["order_number"] is None
    assert receipt["items"] == [
        {"name": "i-1", "quantity": 2, "price": 3.99, "line_total": 7.98, "options": []}
    ]


def test_render_receipt_html_escapes_text():
    receipt = build_receipt(
        _transaction(notes="<b>fold</b>"),
        business=SimpleNamespace(name="Suds & Duds", phone_number="5551234567"),
        order=_order(),
    )
    html = render_receipt_html(receipt)
    assert "Suds &amp; Duds" in html
    assert "&lt;b&gt;fold&lt;/b&gt;" in html
    assert "$26.81" in html
    assert "ORD-600000-0042" in html
    assert "Thank you for your business!" in html
    assert "Tendered" in html

"""
Receipt rendering for completed transactions.

build_receipt() flattens the rows into a plain dict (also returned by the
checkout endpoint) and render_receipt_html() lays that dict out as a
printable/emailable HTML page.
"""
from html import escape
from typing import Optional

from app.services.order_workflow import format_status
from app.utils.validators import format_phone_for_display


def _fmt_money(value) -> str:
    return f"${float(value or 0):.2f}"


def _fmt_datetime(value) -> str:
    if not value:
        return ""
    return value.strftime("%m/%d/%Y %I:%M %p")


def build_receipt(transaction, business=None, customer=None, order=None) -> dict:
    """Collect everything a receipt shows from the transaction and its related rows"""
    if order is not None and order.items:
        lines = [
            {
                "name": item.name,
                "quantity": item.quantity,
                "price": item.price_at_order,
                "line_total": round(item.price_at_order * item.quantity, 2),
                "options": _item_options(item),
            }
            for item in order.items
        ]
    else:
        lines = [
            {
                "name": item.item_id or "Item",
                "quantity": item.quantity,
                "price": item.price_at_transaction,
                "line_total": round(item.price_at_transaction * item.quantity, 2),
                "options": [],
            }
            for item in transaction.items
        ]

    return {
        "business_name": business.name if business else None,
        "business_phone": format_phone_for_display(business.phone_number) if business else None,
        "customer_name": customer.full_name if customer else None,
        "transaction_number": transaction.transaction_number,
        "order_number": order.order_number if order is not None else None,
        "order_status": format_status(order.status) if order is not None else None,
        "date": transaction.transaction_date,
        "items": lines,
        "subtotal": transaction.subtotal,
        "tax": transaction.tax,
        "tip": transaction.tip or 0,
        "discount": transaction.discount,
        "total": transaction.total,
        "payment_method": transaction.payment_method,
        "payment_status": transaction.payment_status,
        "amount_tendered": order.amount_tendered if order is not None else None,
        "change": order.change if order is not None else None,
        "pickup_date": transaction.pickup_date,
        "notes": transaction.notes,
    }


def _item_options(item) -> list:
    options = []
    if item.starch and item.starch != "NONE":
        options.append(f"Starch: {item.starch.title()}")
    if item.press_only:
        options.append("Press only")
    if item.notes:
        options.append(item.notes)
    return options


def _row(label: str, value: str, css_class: str = "info-row") -> str:
    return f'<div class="{css_class}"><span>{escape(label)}</span><span>{escape(value)}</span></div>'


def render_receipt_html(receipt: dict, footer: Optional[str] = "Thank you for your business!") -> str:
    item_rows = []
    for line in receipt["items"]:
        label = f'{line["quantity"]} x {line["name"]}'
        item_rows.append(_row(label, _fmt_money(line["line_total"]), "item-row"))
        for option in line["options"]:
            item_rows.append(f'<div class="item-option">{escape(option)}</div>')

    info_rows = [_row("Receipt:", receipt["transaction_number"])]
    if receipt.get("order_number"):
        info_rows.append(_row("Order:", receipt["order_number"]))
    info_rows.append(_row("Date:", _fmt_datetime(receipt.get("date"))))
    if receipt.get("customer_name"):
        info_rows.append(_row("Customer:", receipt["customer_name"]))
    if receipt.get("pickup_date"):
        info_rows.append(_row("Pickup:", _fmt_datetime(receipt["pickup_date"])))

    total_rows = [
        _row("Subtotal", _fmt_money(receipt["subtotal"])),
        _row("Tax", _fmt_money(receipt["tax"])),
        _row("Tip", _fmt_money(receipt["tip"])),
    ]
    if receipt.get("discount"):
        total_rows.append(_row("Discount", f'-{_fmt_money(receipt["discount"])}'))
    total_rows.append(_row("TOTAL", _fmt_money(receipt["total"]), "total-row"))

    payment_rows = [_row("Paid with", (receipt.get("payment_method") or "").upper())]
    if receipt.get("amount_tendered") is not None:
        payment_rows.append(_row("Tendered", _fmt_money(receipt["amount_tendered"])))
        payment_rows.append(_row("Change", _fmt_money(receipt.get("change"))))

    notes = f'<div class="notes">{escape(receipt["notes"])}</div>' if receipt.get("notes") else ""
    footer_html = f'<div class="footer">{escape(footer)}</div>' if footer else ""
    newline = "\n        "

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>
    body {{ font-family: sans-serif; font-size: 10pt; margin: 0; padding: 0; }}
    .receipt {{ max-width: 380px; margin: 0 auto; padding: 10px; }}
    .header {{ text-align: center; margin-bottom: 10px; }}
    .business-name {{ font-weight: bold; font-size: 14pt; text-transform: uppercase; }}
    .info-row, .item-row, .total-row {{ display: flex; justify-content: space-between; margin-bottom: 3px; }}
    .item-option {{ padding-left: 10px; font-style: italic; font-size: 9pt; }}
    .total-row {{ font-weight: bold; margin-top: 5px; }}
    .separator {{ border-top: 1px dashed #000; margin: 5px 0; }}
    .notes {{ margin-top: 10px; font-style: italic; }}
    .footer {{ text-align: center; margin-top: 15px; font-size: 9pt; }}
  </style>
</head>
<body>
  <div class="receipt">
    <div class="header">
      <div class="business-name">{escape(receipt.get("business_name") or "Business Name")}</div>
      {escape(receipt.get("business_phone") or "")}
    </div>
    <div class="info">
        {newline.join(info_rows)}
    </div>
    <div class="separator"></div>
    <div class="items">
        {newline.join(item_rows)}
    </div>
    <div class="separator"></div>
    <div class="totals">
        {newline.join(total_rows)}
    </div>
    <div class="separator"></div>
    <div class="payment">
        {newline.join(payment_rows)}
    </div>
    {notes}
    {footer_html}
  </div>
</body>
</html>"""

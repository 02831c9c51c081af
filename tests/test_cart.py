import random
from decimal import Decimal

import pytest

from app.services.cart import Cart, CartItem, money

SHIRT = CartItem(id="shirt", name="Shirt", price=Decimal("3.99"))
SUIT = CartItem(id="suit", name="Suit", price=Decimal("14.99"))


def test_money_rounds_half_up():
    assert money("1.005") == Decimal("1.01")
    assert money(None) == Decimal("0.00")
    assert money(2) == Decimal("2.00")


def test_adding_same_item_bumps_quantity():
    cart = Cart().add_item(SHIRT).add_item(SHIRT).add_item(SUIT)
    assert len(cart.items) == 2
    assert cart.items[0].quantity == 2
    assert cart.item_count == 3


def test_updates_return_new_cart():
    empty = Cart()
    cart = empty.add_item(SHIRT)
    assert empty.is_empty
    assert not cart.is_empty


def test_update_quantity_to_zero_removes_line():
    cart = Cart().add_item(SHIRT).add_item(SUIT).update_quantity("shirt", 0)
    assert [line.id for line in cart.items] == ["suit"]


def test_totals():
    cart = (
        Cart(tax_rate=Decimal("0.08"))
        .add_item(SHIRT)
        .update_quantity("shirt", 2)
        .add_item(SUIT)
        .with_tip("2.00")
    )
    assert cart.subtotal == Decimal("22.97")
    assert cart.tax == Decimal("1.84")
    assert cart.tip == Decimal("2.00")
    assert cart.total == Decimal("26.81")
    assert cart.totals()["item_count"] == 3


def test_negative_tip_rejected():
    with pytest.raises(ValueError):
        Cart().with_tip("-1")


def test_clear_resets_items_and_tip():
    cart = Cart().add_item(SUIT).with_tip(5).clear()
    assert cart.is_empty
    assert cart.tip == Decimal("0.00")
    assert cart.total == Decimal("0.00")


CATALOG = (
    SHIRT,
    SUIT,
    CartItem(id="bag", name="Garment Bag", price=Decimal("2.50")),
    CartItem(id="gown", name="Wedding Dress", price=Decimal("100.00")),
)
PRICES = {item.id: item.price for item in CATALOG}


@pytest.mark.parametrize("seed", range(25))
def test_totals_hold_after_any_update_sequence(seed):
    rng = random.Random(seed)
    rate = Decimal("0.0825")
    cart = Cart(tax_rate=rate)
    quantities = {}
    tip = Decimal("0.00")

    for _ in range(40):
        item = rng.choice(CATALOG)
        step = rng.choice(("add", "update", "remove", "tip"))
        if step == "add":
            cart = cart.add_item(item)
            quantities[item.id] = quantities.get(item.id, 0) + 1
        elif step == "update":
            quantity = rng.randint(-1, 6)
            cart = cart.update_quantity(item.id, quantity)
            if item.id in quantities:
                if quantity <= 0:
                    del quantities[item.id]
                else:
                    quantities[item.id] = quantity
        elif step == "remove":
            cart = cart.remove_item(item.id)
            quantities.pop(item.id, None)
        else:
            tip = Decimal(rng.randint(0, 2000)) / 100
            cart = cart.with_tip(tip)

        assert {line.id: line.quantity for line in cart.items} == quantities
        subtotal = sum((money(PRICES[item_id] * qty) for item_id, qty in quantities.items()), Decimal("0.00"))
        assert cart.subtotal == subtotal
        assert cart.tax == money(subtotal * rate)
        assert cart.tip == tip
        assert cart.total == subtotal + cart.tax + tip
        assert cart.item_count == sum(quantities.values())

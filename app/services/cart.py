"""
CHECKOUT CART

Immutable cart value object. Every update returns a new Cart so the totals
can never drift from the lines they were computed from:

    cart = Cart().add_item(shirt).add_item(shirt).with_tip("2.00")
    cart.subtotal, cart.tax, cart.total

Money is Decimal, rounded to cents (half up) at each derived value:

    subtotal = sum(price * quantity)
    tax      = subtotal * tax_rate
    total    = subtotal + tax + tip
"""
import os
from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

TWOPLACES = Decimal("0.01")
DEFAULT_TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.08"))


def money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CartItem:
    id: str
    name: str
    price: Decimal
    quantity: int = 1
    item_type: str = "service"
    category_id: Optional[str] = None
    starch: str = "NONE"
    press_only: bool = False

    @property
    def line_total(self) -> Decimal:
        return money(self.price * self.quantity)


@dataclass(frozen=True)
class Cart:
    items: Tuple[CartItem, ...] = ()
    tip: Decimal = Decimal("0.00")
    tax_rate: Decimal = field(default=DEFAULT_TAX_RATE)

    # ---- updates -------------------------------------------------------

    def add_item(self, item: CartItem) -> "Cart":
        """Add one unit; an existing line for the same id gets its quantity bumped"""
        for index, line in enumerate(self.items):
            if line.id == item.id:
                updated = replace(line, quantity=line.quantity + 1)
                return replace(self, items=self.items[:index] + (updated,) + self.items[index + 1:])
        return replace(self, items=self.items + (replace(item, price=money(item.price), quantity=1),))

    def update_quantity(self, item_id: str, quantity: int) -> "Cart":
        """Set a line's quantity; zero or less removes the line"""
        if quantity <= 0:
            return self.remove_item(item_id)
        return replace(
            self,
            items=tuple(
                replace(line, quantity=quantity) if line.id == item_id else line
                for line in self.items
            ),
        )

    def remove_item(self, item_id: str) -> "Cart":
        return replace(self, items=tuple(line for line in self.items if line.id != item_id))

    def with_tip(self, tip) -> "Cart":
        tip = money(tip)
        if tip < 0:
            raise ValueError("Tip cannot be negative")
        return replace(self, tip=tip)

    def clear(self) -> "Cart":
        return replace(self, items=(), tip=Decimal("0.00"))

    # ---- totals --------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def subtotal(self) -> Decimal:
        return money(sum((line.price * line.quantity for line in self.items), Decimal("0")))

    @property
    def tax(self) -> Decimal:
        return money(self.subtotal * self.tax_rate)

    @property
    def total(self) -> Decimal:
        return money(self.subtotal + self.tax + self.tip)

    def totals(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "tax": self.tax,
            "tip": self.tip,
            "total": self.total,
            "item_count": self.item_count,
        }

"""
Mock payment gateway.

Stands in for the card-reader SDK at the counter. Card entry always
succeeds with a fixed simulator nonce, Apple Pay is never available, and
cash is settled locally against the tendered amount. No network calls.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from app.services.cart import money

logger = logging.getLogger(__name__)

MOCK_CARD_NONCE = "cnon:mock-nonce-for-simulator"
MOCK_CARD_BRAND = "VISA"
MOCK_CARD_LAST_FOUR = "1111"
APPLE_PAY_UNAVAILABLE = "Apple Pay not available in simulator"

PAYMENT_METHODS = ("cash", "card", "applepay")


class PaymentError(Exception):
    pass


@dataclass
class PaymentResult:
    success: bool
    method: str
    amount: Decimal
    transaction_id: Optional[str] = None
    nonce: Optional[str] = None
    card_brand: Optional[str] = None
    last_four_digits: Optional[str] = None
    amount_tendered: Optional[Decimal] = None
    change: Optional[Decimal] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_method(self) -> str:
        """What goes on the receipt: the card brand for cards, else the method name"""
        if self.card_brand:
            return self.card_brand
        return self.method.upper()


class MockPaymentGateway:
    def __init__(self, currency: str = "USD", merchant_name: str = "Dry Clean Business"):
        self.currency = currency
        self.merchant_name = merchant_name

    @staticmethod
    def _validate_amount(amount) -> Decimal:
        amount = money(amount)
        if amount <= 0:
            raise PaymentError("Payment amount must be greater than zero")
        return amount

    def can_use_apple_pay(self) -> bool:
        return False

    def available_methods(self) -> list:
        methods = ["cash", "card"]
        if self.can_use_apple_pay():
            methods.append("applepay")
        return methods

    def process_card_payment(self, amount, currency: Optional[str] = None) -> PaymentResult:
        amount = self._validate_amount(amount)
        logger.info(f"Processing mock card payment of {amount} {currency or self.currency}")
        return PaymentResult(
            success=True,
            method="card",
            amount=amount,
            transaction_id=f"mock-{uuid.uuid4()}",
            nonce=MOCK_CARD_NONCE,
            card_brand=MOCK_CARD_BRAND,
            last_four_digits=MOCK_CARD_LAST_FOUR,
        )

    def process_apple_pay(self, amount, currency: Optional[str] = None, summary_label: str = "Your Purchase") -> PaymentResult:
        amount = self._validate_amount(amount)
        logger.warning(f"Apple Pay requested for {amount} ({summary_label}) but it is unavailable")
        return PaymentResult(success=False, method="applepay", amount=amount, error=APPLE_PAY_UNAVAILABLE)

    def process_cash_payment(self, amount, amount_tendered) -> PaymentResult:
        amount = self._validate_amount(amount)
        if amount_tendered is None:
            raise PaymentError("Amount tendered is required for cash payments")
        tendered = money(amount_tendered)
        if tendered < amount:
            raise PaymentError(f"Amount tendered ({tendered}) is less than the total ({amount})")
        logger.info(f"Cash payment of {amount} received, change {tendered - amount}")
        return PaymentResult(
            success=True,
            method="cash",
            amount=amount,
            transaction_id=f"cash-{uuid.uuid4()}",
            amount_tendered=tendered,
            change=money(tendered - amount),
        )

    def process(self, method: str, amount, amount_tendered=None) -> PaymentResult:
        """Dispatch on the payment method name used by the checkout request"""
        method = (method or "cash").strip().lower()
        if method == "card":
            return self.process_card_payment(amount)
        if method == "applepay":
            return self.process_apple_pay(amount)
        if method == "cash":
            return self.process_cash_payment(amount, amount_tendered)
        raise PaymentError(f"Unsupported payment method '{method}'. Use one of: {', '.join(PAYMENT_METHODS)}")


payment_gateway = MockPaymentGateway()


def get_payment_gateway() -> MockPaymentGateway:
    return payment_gateway

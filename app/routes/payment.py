from fastapi import APIRouter, Depends, HTTPException, status
import logging
from app.models.user import User
from app.core.dependencies import get_current_user
from app.schemas.payment import (
    PaymentRequest,
    ApplePayRequest,
    CashPaymentRequest,
    PaymentMethodsResponse,
    PaymentResultResponse,
)
from app.services.payment_service import MockPaymentGateway, PaymentError, get_payment_gateway

router = APIRouter(tags=["payment"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _payment_failed(e: PaymentError) -> HTTPException:
    logger.warning(f"Payment rejected: {str(e)}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/methods", response_model=PaymentMethodsResponse)
async def get_payment_methods(
    gateway: MockPaymentGateway = Depends(get_payment_gateway),
    current_user: User = Depends(get_current_user)
):
    return {
        "methods": gateway.available_methods(),
        "apple_pay_available": gateway.can_use_apple_pay(),
        "currency": gateway.currency,
    }


@router.post("/card", response_model=PaymentResultResponse)
async def process_card_payment(
    request: PaymentRequest,
    gateway: MockPaymentGateway = Depends(get_payment_gateway),
    current_user: User = Depends(get_current_user)
):
    """Simulated card entry; always approved with the simulator nonce"""
    try:
        return gateway.process_card_payment(request.amount, request.currency)
    except PaymentError as e:
        raise _payment_failed(e)


@router.post("/apple-pay", response_model=PaymentResultResponse)
async def process_apple_pay(
    request: ApplePayRequest,
    gateway: MockPaymentGateway = Depends(get_payment_gateway),
    current_user: User = Depends(get_current_user)
):
    try:
        result = gateway.process_apple_pay(request.amount, request.currency, request.summary_label)
    except PaymentError as e:
        raise _payment_failed(e)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return result


@router.post("/cash", response_model=PaymentResultResponse)
async def process_cash_payment(
    request: CashPaymentRequest,
    gateway: MockPaymentGateway = Depends(get_payment_gateway),
    current_user: User = Depends(get_current_user)
):
    try:
        return gateway.process_cash_payment(request.amount, request.amount_tendered)
    except PaymentError as e:
        raise _payment_failed(e)

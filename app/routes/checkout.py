import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.business import Business
from app.models.customers import Customer
from app.models.user import User
from app.schemas.checkout import CheckoutRequest, CheckoutResponse, QuoteRequest, QuoteResponse
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error
from app.services import checkout_service
from app.services.checkout_service import CheckoutLine, CheckoutNotFoundError, InvalidCartError
from app.services.payment_service import MockPaymentGateway, PaymentError, get_payment_gateway
from app.utils.receipts import build_receipt

router = APIRouter(tags=["checkout"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _lines(request: QuoteRequest):
    return [CheckoutLine(**line.model_dump()) for line in request.items]


@router.post("/quote", response_model=QuoteResponse)
async def quote(
    request: QuoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Totals for a cart without taking payment or writing anything"""
    get_owned_business(db, request.business_id, current_user)
    try:
        cart = checkout_service.build_cart(db, request.business_id, _lines(request), tip=request.tip)
    except CheckoutNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (InvalidCartError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {
        "items": [
            {
                "item_id": line.id,
                "name": line.name,
                "price": line.price,
                "quantity": line.quantity,
                "line_total": line.line_total,
            }
            for line in cart.items
        ],
        "item_count": cart.item_count,
        "subtotal": cart.subtotal,
        "tax_rate": cart.tax_rate,
        "tax": cart.tax,
        "tip": cart.tip,
        "total": cart.total,
    }


@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout(
    request: CheckoutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: MockPaymentGateway = Depends(get_payment_gateway)
):
    """
    Take payment for the cart and create the order and transaction.

    Raises:
        HTTPException 400: empty cart, declined payment or insufficient cash
        HTTPException 404: unknown customer, employee or item
    """
    business: Business = get_owned_business(db, request.business_id, current_user)
    try:
        result = checkout_service.checkout(
            db,
            gateway,
            business_id=business.id,
            customer_id=request.customer_id,
            employee_id=request.employee_id,
            lines=_lines(request),
            payment_method=request.payment_method,
            tip=request.tip,
            amount_tendered=request.amount_tendered,
            due_date=request.due_date,
            notes=request.notes,
            customer_preferences=request.customer_preferences,
        )
    except CheckoutNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidCartError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PaymentError as e:
        logger.warning(f"Payment failed for business {business.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "PaymentError",
                "message": str(e),
                "type": "payment_failed",
                "suggestion": "Choose another payment method or check the amount tendered"
            }
        )
    except Exception as e:
        raise database_error(e, "processing checkout", "order")

    customer = db.query(Customer).filter(Customer.id == result.order.customer_id).first()
    receipt = build_receipt(result.transaction, business=business, customer=customer, order=result.order)
    return {
        "order": result.order,
        "transaction": result.transaction,
        "payment": result.payment,
        "receipt": receipt,
    }

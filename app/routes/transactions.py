import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.business import Business
from app.models.customers import Customer
from app.models.orders import Order
from app.models.transactions import Transaction
from app.models.user import User
from app.schemas.transactions import TransactionResponse, EmailReceiptRequest, EmailReceiptResponse
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error, not_found
from app.utils.email_service import send_receipt_email, is_email_configured
from app.utils.receipts import build_receipt, render_receipt_html

router = APIRouter(tags=["transactions"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_owned_transaction(db: Session, transaction_id: str, current_user: User) -> Transaction:
    transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not transaction:
        raise not_found("Transaction", transaction_id)
    get_owned_business(db, transaction.business_id, current_user)
    return transaction


def _receipt_for(db: Session, transaction: Transaction) -> dict:
    business = db.query(Business).filter(Business.id == transaction.business_id).first()
    customer = db.query(Customer).filter(Customer.id == transaction.customer_id).first()
    order = None
    if transaction.order_id:
        order = db.query(Order).filter(Order.id == transaction.order_id).first()
    return build_receipt(transaction, business=business, customer=customer, order=order)


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
    business_id: str,
    customer_id: Optional[str] = None,
    order_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    try:
        query = db.query(Transaction).filter(Transaction.business_id == business_id)
        if customer_id:
            query = query.filter(Transaction.customer_id == customer_id)
        if order_id:
            query = query.filter(Transaction.order_id == order_id)
        if start_date:
            query = query.filter(Transaction.transaction_date >= start_date)
        if end_date:
            query = query.filter(Transaction.transaction_date <= end_date)
        transactions = query.order_by(Transaction.transaction_date.desc()).limit(limit).all()
        logger.info(f"Retrieved {len(transactions)} transactions for business {business_id}")
        return transactions
    except Exception as e:
        raise database_error(e, "listing transactions", "transaction")


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_owned_transaction(db, transaction_id, current_user)


@router.get("/{transaction_id}/receipt", response_class=HTMLResponse)
async def get_receipt(
    transaction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    transaction = get_owned_transaction(db, transaction_id, current_user)
    return HTMLResponse(content=render_receipt_html(_receipt_for(db, transaction)))


@router.post("/{transaction_id}/email-receipt", response_model=EmailReceiptResponse)
async def email_receipt(
    transaction_id: str,
    request: Optional[EmailReceiptRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Email the receipt to the given address, or to the customer's email on file"""
    transaction = get_owned_transaction(db, transaction_id, current_user)
    receipt = _receipt_for(db, transaction)

    to_email = request.email if request and request.email else None
    if not to_email:
        customer = db.query(Customer).filter(Customer.id == transaction.customer_id).first()
        to_email = customer.email if customer else None
    if not to_email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No email address given and the customer has none on file"
        )

    if not is_email_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Email is not configured. Set SMTP_USER and SMTP_PASSWORD."
        )

    sent = send_receipt_email(
        to_email,
        render_receipt_html(receipt),
        transaction.transaction_number,
        business_name=receipt["business_name"],
    )
    if not sent:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to send receipt to {to_email}")

    logger.info(f"Receipt {transaction.transaction_number} emailed to {to_email}")
    return {"transaction_id": transaction.id, "email": to_email, "sent": True}

"""
Payment Routes
Stripe payment intents, payment records and payment history
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from foodchef.api.deps import ensure_self, get_current_user
from foodchef.config import Settings, get_settings
from foodchef.database import (
    ORDERS,
    PAYMENTS,
    get_database,
    insert_result,
    serialize_docs,
    to_object_id,
    update_result,
)
from foodchef.models.order import PAID
from foodchef.models.payment import PaymentCreate, PaymentIntentCreate, PaymentIntentResponse
from foodchef.services.payment import (
    PaymentGatewayError,
    StripePaymentGateway,
    get_payment_gateway,
    to_minor_units,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    request: PaymentIntentCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    gateway: StripePaymentGateway = Depends(get_payment_gateway)
):
    """Create a Stripe PaymentIntent and return its client secret"""
    try:
        client_secret = await gateway.create_payment_intent(to_minor_units(request.price))
    except PaymentGatewayError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Payment gateway error: {e}"
        )
    return {"clientSecret": client_secret}


async def _record_payment(db: AsyncIOMotorDatabase, payment: Dict[str, Any], order_id, session=None):
    payment_result = await db[PAYMENTS].insert_one(payment, session=session)
    update = await db[ORDERS].update_one(
        {"_id": order_id},
        {"$set": {"paymentStatus": PAID, "transactionId": payment["transactionId"]}},
        session=session
    )
    return payment_result, update


@router.post("/payments")
async def save_payment(
    payment: PaymentCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings)
):
    """
    Save a confirmed payment and mark its order as paid.
    Both writes share one transaction when transactions are enabled.
    """
    order_id = to_object_id(payment.orderId)
    doc = payment.to_document()

    if settings.MONGODB_TRANSACTIONS:
        async with await db.client.start_session() as session:
            async with session.start_transaction():
                payment_result, update = await _record_payment(db, doc, order_id, session=session)
    else:
        payment_result, update = await _record_payment(db, doc, order_id)

    logger.info(f"Payment {payment.transactionId} recorded for order {payment.orderId}")
    return {
        "paymentResult": insert_result(payment_result),
        "updateResult": update_result(update),
    }


@router.get("/payments/{email}")
async def get_payment_history(
    email: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get payment history of the caller"""
    ensure_self(current_user, email)
    payments = await db[PAYMENTS].find({"email": email}).to_list(length=None)
    return serialize_docs(payments)


@router.get("/payments")
async def get_all_payments(
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get all payments"""
    payments = await db[PAYMENTS].find().to_list(length=None)
    return serialize_docs(payments)

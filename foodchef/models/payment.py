"""
Payment Model
Request schemas for payment intents and recorded payments
"""
from pydantic import BaseModel, Field

from foodchef.models.base import DocumentIn


class PaymentIntentCreate(BaseModel):
    price: float = Field(..., gt=0)


class PaymentIntentResponse(BaseModel):
    clientSecret: str


class PaymentCreate(DocumentIn):
    """Confirmed payment reported by the client after the gateway charge"""
    orderId: str = Field(..., min_length=1)
    transactionId: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)

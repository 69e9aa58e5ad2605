"""
Order Model
Request schemas for placing and advancing orders
"""
from typing import Optional

from pydantic import BaseModel, Field

from foodchef.models.base import DocumentIn

PENDING = "pending"
PAID = "paid"


class OrderCreate(DocumentIn):
    """
    Order line for a single meal. Repeat requests for the same meal while
    the order is still pending are merged by quantity.
    """
    userEmail: str = Field(..., min_length=1)
    mealId: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)
    totalPrice: Optional[float] = Field(default=None, ge=0)
    chefEmail: Optional[str] = None
    chefId: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    """Workflow state set by the chef (cooking, delivered...)"""
    status: str = Field(..., min_length=1)

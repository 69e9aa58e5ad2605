"""
Meal Model
Request schema for meals published by chefs
"""
from typing import Optional

from pydantic import Field

from foodchef.models.base import DocumentIn


class MealCreate(DocumentIn):
    """
    Meal created by a chef. Extra fields (image, ingredients, rating...)
    are stored as sent.
    """
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    chefEmail: str = Field(..., min_length=1)
    chefName: Optional[str] = None
    orders: int = Field(default=0, ge=0)

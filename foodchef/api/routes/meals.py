"""
Meal Routes
Public browsing and chef management of meals
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from foodchef.api.deps import get_current_user
from foodchef.database import (
    MEALS,
    delete_result,
    get_database,
    insert_result,
    serialize_doc,
    serialize_docs,
    to_object_id,
)
from foodchef.models.meal import MealCreate

router = APIRouter()

TOP_MEALS_LIMIT = 6


@router.get("")
async def get_all_meals(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Get all meals"""
    meals = await db[MEALS].find().to_list(length=None)
    return serialize_docs(meals)


@router.get("/top")
async def get_top_meals(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Most ordered meals, best first"""
    meals = await db[MEALS].find().sort("orders", -1).limit(TOP_MEALS_LIMIT).to_list(length=None)
    return serialize_docs(meals)


@router.get("/chef/{email}")
async def get_meals_by_chef(
    email: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get meals published by a chef"""
    meals = await db[MEALS].find({"chefEmail": email}).to_list(length=None)
    return serialize_docs(meals)


@router.get("/{meal_id}")
async def get_meal(meal_id: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Get meal details"""
    meal = await db[MEALS].find_one({"_id": to_object_id(meal_id)})
    if not meal:
        raise HTTPException(status_code=404, detail="Meal not found")
    return serialize_doc(meal)


@router.post("")
async def create_meal(
    meal: MealCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Add a new meal"""
    result = await db[MEALS].insert_one(meal.to_document())
    return insert_result(result)


@router.delete("/{meal_id}")
async def delete_meal(
    meal_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Delete a meal"""
    result = await db[MEALS].delete_one({"_id": to_object_id(meal_id)})
    return delete_result(result)

"""
Order Routes
Placing, tracking and advancing meal orders
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from foodchef.api.deps import ensure_self, get_current_user
from foodchef.database import (
    ORDERS,
    delete_result,
    get_database,
    serialize_doc,
    serialize_docs,
    to_object_id,
    update_result,
)
from foodchef.models.order import PENDING, OrderCreate, OrderStatusUpdate

router = APIRouter()


@router.post("")
async def place_order(
    order: OrderCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Save a new order, or fold it into the caller's pending order for the
    same meal.

    The lookup and the merge are one upsert, so concurrent requests for the
    same (userEmail, mealId) pair land on a single pending document. On a
    merge ``totalPrice`` is recomputed from the incoming unit price and the
    merged quantity.
    """
    doc = order.to_document()
    quantity = doc.pop("quantity")
    price = doc.pop("price")
    query = {
        "userEmail": doc.pop("userEmail"),
        "mealId": doc.pop("mealId"),
        "status": PENDING,
    }
    # Server owned fields
    doc.pop("status", None)
    doc.pop("orderTime", None)
    doc.setdefault("totalPrice", price * quantity)

    change = {
        "$inc": {"quantity": quantity, "price": price},
        "$set": {"orderTime": datetime.now(timezone.utc)},
        "$setOnInsert": doc,
    }
    try:
        result = await db[ORDERS].update_one(query, change, upsert=True)
    except DuplicateKeyError:
        # A concurrent request inserted the pending order first; merge into it
        result = await db[ORDERS].update_one(query, change, upsert=True)

    if result.upserted_id is not None:
        return {"acknowledged": result.acknowledged, "insertedId": str(result.upserted_id)}

    merged = await db[ORDERS].find_one(query)
    if merged:
        # Guarded on quantity: a newer merge owns the total if it raced us
        await db[ORDERS].update_one(
            {"_id": merged["_id"], "quantity": merged["quantity"]},
            {"$set": {"totalPrice": price * merged["quantity"]}}
        )
    return update_result(result)


@router.get("")
async def get_my_orders(
    email: Optional[str] = None,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get orders placed by the caller"""
    if not email:
        return []
    ensure_self(current_user, email)

    orders = await db[ORDERS].find({"userEmail": email}).to_list(length=None)
    return serialize_docs(orders)


@router.get("/chef/{chef_email}")
async def get_chef_orders(
    chef_email: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get all orders for a chef"""
    # Older orders reference the chef through chefId
    query = {"$or": [{"chefId": chef_email}, {"chefEmail": chef_email}]}
    orders = await db[ORDERS].find(query).to_list(length=None)
    return serialize_docs(orders)


@router.patch("/status/{order_id}")
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Advance the order workflow state"""
    result = await db[ORDERS].update_one(
        {"_id": to_object_id(order_id)},
        {"$set": {"orderStatus": update.status}}
    )
    return update_result(result)


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get a single order"""
    order = await db[ORDERS].find_one({"_id": to_object_id(order_id)})
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return serialize_doc(order)


@router.delete("/{order_id}")
async def cancel_order(
    order_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Cancel an order"""
    result = await db[ORDERS].delete_one({"_id": to_object_id(order_id)})
    return delete_result(result)

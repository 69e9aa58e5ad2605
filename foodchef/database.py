"""
Database Helpers
Store handle dependency and document/result serialization
"""
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, Request, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import OperationFailure

USERS = "users"
MEALS = "meals"
ORDERS = "orders"
PAYMENTS = "payments"

logger = logging.getLogger(__name__)


def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Database handle opened in the application lifespan"""
    return request.app.state.db


def to_object_id(id_str: str) -> ObjectId:
    """Parse a path id, rejecting malformed values with a 400"""
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid id format: {id_str}"
        )


def serialize_doc(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not doc:
        return doc
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_docs(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [serialize_doc(d) for d in docs]


def _str_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def insert_result(result) -> Dict[str, Any]:
    return {"acknowledged": result.acknowledged, "insertedId": _str_id(result.inserted_id)}


def update_result(result) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedId": _str_id(result.upserted_id),
    }


def delete_result(result) -> Dict[str, Any]:
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}


async def _create_unique_index(collection, keys, **kwargs) -> None:
    try:
        await collection.create_index(keys, unique=True, **kwargs)
    except OperationFailure as e:
        # Existing duplicates block the build; the service runs without it
        logger.error(f"Unique index on {collection.name} {keys} not created, deduplicate first: {e}")


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Indexes backing the uniqueness rules for users and pending orders"""
    await _create_unique_index(db[USERS], "email")
    await db[MEALS].create_index("chefEmail")
    await db[MEALS].create_index([("orders", -1)])
    await _create_unique_index(
        db[ORDERS],
        [("userEmail", 1), ("mealId", 1)],
        partialFilterExpression={"status": "pending"},
        name="one_pending_order_per_meal",
    )
    await db[ORDERS].create_index("chefEmail")
    await db[PAYMENTS].create_index("email")

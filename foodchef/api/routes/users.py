"""
User Routes
Registration, role assignment and role checks
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from foodchef.api.deps import ensure_self, get_current_user
from foodchef.database import (
    USERS,
    get_database,
    insert_result,
    serialize_docs,
    to_object_id,
    update_result,
)
from foodchef.models.user import AdminCheck, ChefCheck, RoleUpdate, UserCreate

router = APIRouter()


async def _has_role(db: AsyncIOMotorDatabase, email: str, role: str) -> bool:
    user = await db[USERS].find_one({"email": email})
    return bool(user) and user.get("role") == role


@router.post("")
async def register_user(user: UserCreate, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Save a user on registration.
    Registering an existing email is a no-op.
    """
    existing = await db[USERS].find_one({"email": user.email})
    if existing:
        return {"message": "User already exists", "insertedId": None}

    try:
        result = await db[USERS].insert_one(user.to_document())
    except DuplicateKeyError:
        # Lost a race with a concurrent registration of the same email
        return {"message": "User already exists", "insertedId": None}
    return insert_result(result)


@router.get("")
async def get_all_users(
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get all users"""
    users = await db[USERS].find().to_list(length=None)
    return serialize_docs(users)


@router.patch("/admin/{user_id}")
async def update_user_role(
    user_id: str,
    update: RoleUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Change a user's role, or clear it"""
    if update.role is None:
        change = {"$unset": {"role": ""}}
    else:
        change = {"$set": {"role": update.role}}
    result = await db[USERS].update_one({"_id": to_object_id(user_id)}, change)
    return update_result(result)


@router.get("/admin/{email}", response_model=AdminCheck)
async def check_admin(
    email: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    ensure_self(current_user, email)
    return {"admin": await _has_role(db, email, "admin")}


@router.get("/chef/{email}", response_model=ChefCheck)
async def check_chef(
    email: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    ensure_self(current_user, email)
    return {"chef": await _has_role(db, email, "chef")}

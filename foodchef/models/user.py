"""
User Model
Request schemas for user registration and role management
"""
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr

from foodchef.models.base import DocumentIn

Role = Literal["admin", "chef"]


class UserCreate(DocumentIn):
    """Registration payload; role stays unset until an admin assigns one"""
    email: EmailStr
    name: Optional[str] = None
    photo: Optional[str] = None

    def to_document(self):
        doc = super().to_document()
        doc.pop("role", None)
        return doc


class RoleUpdate(BaseModel):
    """``None`` clears the role"""
    role: Optional[Role]


class AdminCheck(BaseModel):
    admin: bool


class ChefCheck(BaseModel):
    chef: bool

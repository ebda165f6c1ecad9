# storefront/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr
from sqlmodel import SQLModel

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["user", "admin"]


class UserRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    email: EmailStr
    name: str
    role: Role
    created_at: datetime


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role

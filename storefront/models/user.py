# storefront/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Registered shop account.

    Role:
      - "user" | "admin"
      - "guest" is represented by a missing token.

    Passwords are stored as bcrypt hashes only. The reset token pair is set
    by a password-reset request and cleared once a new password is saved.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email (unique)",
    )

    # Display name for the user (e.g. customer name)
    name: str = Field(
        max_length=50,
        description="Customer display name; first part of email by default",
    )

    password_hash: str = Field(
        description="bcrypt hash of the password",
    )

    # Application role
    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    reset_token: str | None = Field(
        default=None,
        index=True,
        description="Pending password reset token (hex)",
    )
    reset_token_expiration: datetime | None = Field(
        default=None,
        description="Reset token expiry (UTC)",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

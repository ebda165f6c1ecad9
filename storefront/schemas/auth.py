# storefront/schemas/auth.py
import uuid

from pydantic import ConfigDict, EmailStr, model_validator
from sqlmodel import SQLModel, Field


class SignupRequest(SQLModel):
    """
    Payload for account creation.

    Validation rules:
      - email must be a valid EmailStr
      - password at least 5 characters
      - confirm_password must equal password
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=5, max_length=72)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords have to match")
        return self


class LoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str


class TokenRead(SQLModel):
    access_token: str
    token_type: str = "bearer"


class ResetRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class ResetTokenRead(SQLModel):
    """Returned when a reset link is opened and the token is still valid."""

    user_id: uuid.UUID
    token: str


class NewPasswordRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    user_id: uuid.UUID
    token: str
    password: str = Field(min_length=5, max_length=72)


class MessageRead(SQLModel):
    message: str

# storefront/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductCreate(SQLModel):
    """
    Payload for creating a product (admin only).
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(max_length=255)
    description: str = ""
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    image_url: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional. Placed orders keep their own copy of
    title/price, so nothing here reaches them.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    image_url: str | None = None  # allow manual override if needed

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    title: str
    description: str
    price: Decimal
    image_url: str | None = None
    created_at: datetime


class ProductPage(SQLModel):
    """
    One page of the catalog plus the navigation flags the storefront
    needs to draw its pager.
    """

    items: list[ProductRead]
    total_count: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    next_page: int
    previous_page: int
    last_page: int

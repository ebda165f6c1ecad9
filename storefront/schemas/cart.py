# storefront/schemas/cart.py
import uuid
from decimal import Decimal

from sqlmodel import SQLModel


class CartItemAdd(SQLModel):
    """
    Payload for adding one unit of a product to the cart.
    """

    product_id: uuid.UUID


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.

    0 removes the line; negative values are rejected by the service.
    """

    quantity: int


class CartLineRead(SQLModel):
    """
    A cart line joined with live product data.
    """

    product_id: uuid.UUID
    title: str
    price: Decimal
    image_url: str | None = None
    quantity: int
    line_total: Decimal


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLineRead]
    total_quantity: int
    total_price: Decimal

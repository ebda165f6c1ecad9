# storefront/schemas/order.py
import uuid
from datetime import datetime
from decimal import Decimal

from sqlmodel import SQLModel


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item (frozen at checkout).
    """

    product_id: uuid.UUID
    title: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class OrderRead(SQLModel):
    """
    Full order view including items and total.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    user_email: str
    created_at: datetime
    items: list[OrderItemRead]
    total_price: Decimal

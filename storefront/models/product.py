# storefront/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry.

    Price is a fixed-point decimal; orders copy it at checkout, so later
    edits here never reach placed orders.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(
        max_length=255,
        index=True,
        description="Display title of the product",
    )

    description: str = Field(
        default="",
        description="Long description",
    )

    price: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Unit price",
    )

    image_url: str | None = Field(
        default=None,
        description="Public image URL (Supabase Storage or external)",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

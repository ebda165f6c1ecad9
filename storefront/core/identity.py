# storefront/core/identity.py
import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """
    Authenticated caller, passed explicitly to every cart/order/invoice
    operation. Built by the auth dependency from the bearer token.
    """

    user_id: uuid.UUID
    email: str

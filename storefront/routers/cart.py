# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import current_identity
from storefront.core.identity import Identity
from storefront.database import get_session
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartSummary
from storefront.wiring import cart_service as service

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartSummary)
async def get_my_cart(
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    Get current user's cart with live product data.

    Auth:
      - Only role='user' (customer) can access.
    """
    return await service.list_cart(session, identity)


@router.post("", response_model=CartSummary)
async def add_to_cart(
    payload: CartItemAdd,
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    Add one unit of a product to the cart.

    Adding a product already in the cart increases its quantity.
    """
    return await service.add_product(session, identity, payload.product_id)


@router.patch("/{product_id}", response_model=CartSummary)
async def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    Set the quantity of a product in the cart. 0 removes it.
    """
    return await service.set_quantity(session, identity, product_id, payload.quantity)


@router.delete("/{product_id}", response_model=CartSummary)
async def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    Remove a product from the cart. Removing an absent product is not an error.
    """
    return await service.remove_product(session, identity, product_id)

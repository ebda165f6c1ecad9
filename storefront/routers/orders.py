# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from storefront.core.auth import current_identity
from storefront.core.identity import Identity
from storefront.database import get_session
from storefront.schemas.order import OrderRead
from storefront.services.invoice_service import invoice_filename
from storefront.wiring import invoice_service, order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "/checkout",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
async def checkout(
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    Create an order from the current user's cart and empty the cart.

    - 400 if the cart is empty.
    """
    return await order_service.checkout(session, identity)


@router.get("", response_model=list[OrderRead])
async def list_my_orders(
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    List the authenticated user's orders (most recent first).
    """
    return await order_service.list_orders(session, identity)


@router.get("/{order_id}", response_model=OrderRead)
async def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    Get a single order. 404 if missing, 403 if owned by another user.
    """
    return await order_service.get_order(session, order_id, identity)


@router.get(
    "/{order_id}/invoice",
    response_class=StreamingResponse,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def get_invoice(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    identity: Identity = Depends(current_identity),
):
    """
    Stream the PDF invoice of an order.

    The same bytes are written to INVOICE_DIR/invoice-<order_id>.pdf.
    """
    _, chunks = await invoice_service.render_invoice(session, order_id, identity)
    filename = invoice_filename(order_id)
    return StreamingResponse(
        chunks,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )

# storefront/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.schemas.product import (
    ProductCreate,
    ProductPage,
    ProductRead,
    ProductUpdate,
)
from storefront.wiring import product_service as service

router = APIRouter(prefix="/products", tags=["Products"])


# -------- Public endpoints --------


@router.get("", response_model=ProductPage)
async def list_products(
    session: Session = Depends(get_session),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=100),
):
    """
    List one page of products.

    - Public endpoint.
    - Page size defaults to PRODUCTS_PER_PAGE.
    """
    return await service.get_page(session, page=page, page_size=page_size)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.
    """
    return await service.get_product(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    return await service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
async def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).

    Placed orders keep the title and price they were bought at.
    """
    return await service.update_product(session, product_id, payload)


@router.post(
    "/{product_id}/image",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
    summary="Upload or replace the product image",
)
async def upload_product_image(
    product_id: uuid.UUID,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    Upload a new image for the product.

    - Accepts JPEG, PNG, WEBP.
    - Overwrites any previous image.
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    file_bytes = await file.read()
    return await service.set_product_image(
        session=session,
        product_id=product_id,
        content_type=file.content_type,
        file_bytes=file_bytes,
    )

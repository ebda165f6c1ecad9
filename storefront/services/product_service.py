# storefront/services/product_service.py
import asyncio
import logging
import math
import uuid

from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.image_store import SupabaseImageStore
from storefront.core.store import run_store_call
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductCreate, ProductPage, ProductRead, ProductUpdate

settings = get_settings()
logger = logging.getLogger(__name__)

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ProductService:
    """
    Catalog Store.

    Responsibilities:
      - paginated listing and lookup by id (public)
      - create / update / image upload (admin, enforced at router)
    """

    def __init__(self, repo: ProductRepository, images: SupabaseImageStore | None = None):
        self.repo = repo
        self.images = images or SupabaseImageStore()

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise ValidationError("Unsupported image type. Allowed: JPEG, PNG, WEBP.")

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise ValidationError("Image too large (max 5MB).")

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    # ----- Catalog -----

    async def list_products(
        self,
        session: Session,
        page: int = 1,
        page_size: int | None = None,
    ) -> tuple[list[Product], int]:
        """
        Return (items on `page`, total product count). Pages start at 1.
        """
        if page < 1:
            raise ValidationError("page must be >= 1")
        if page_size is None:
            page_size = settings.PRODUCTS_PER_PAGE
        if page_size < 1:
            raise ValidationError("page_size must be >= 1")

        total = await run_store_call(self.repo.count, session)
        items = await run_store_call(
            self.repo.list_page,
            session,
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        return items, total

    async def get_page(
        self,
        session: Session,
        page: int = 1,
        page_size: int | None = None,
    ) -> ProductPage:
        if page_size is None:
            page_size = settings.PRODUCTS_PER_PAGE
        items, total = await self.list_products(session, page, page_size)
        return ProductPage(
            items=[ProductRead.model_validate(p) for p in items],
            total_count=total,
            current_page=page,
            has_next_page=page_size * page < total,
            has_previous_page=page > 1,
            next_page=page + 1,
            previous_page=page - 1,
            last_page=max(1, math.ceil(total / page_size)),
        )

    async def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = await run_store_call(self.repo.get_by_id, session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    # ----- Admin -----

    async def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product(
            title=payload.title,
            description=payload.description,
            price=payload.price,
            image_url=payload.image_url,
        )
        product = await run_store_call(self.repo.create, session, product)
        logger.info("Created product %s (%s)", product.id, product.title)
        return product

    async def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.
        """
        product = await self.get_product(session, product_id)

        if payload.title is not None:
            product.title = payload.title

        if payload.description is not None:
            product.description = payload.description

        if payload.price is not None:
            logger.info(
                "Product %s price %s -> %s", product.id, product.price, payload.price
            )
            product.price = payload.price

        if payload.image_url is not None:
            product.image_url = payload.image_url

        return await run_store_call(self.repo.update, session, product)

    async def set_product_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> Product:
        """
        Upload or replace the product image.

        - Validates content type + size.
        - Deletes the old image from Storage if it lives in our bucket.
        - Uploads to a deterministic path: products/<product_id>/image.<ext>
        """
        product = await self.get_product(session, product_id)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        if product.image_url:
            await asyncio.to_thread(self.images.delete_url, product.image_url)

        path = f"products/{product.id}/image.{ext}"
        product.image_url = await asyncio.to_thread(
            self.images.upload, path, file_bytes, content_type
        )
        return await run_store_call(self.repo.update, session, product)

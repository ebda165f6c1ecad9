# storefront/repositories/product_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.product import Product


class ProductRepository:
    """
    Data access layer for the catalog.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def count(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product)
        return int(session.exec(stmt).one() or 0)

    def list_page(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        # Stable order so pages do not overlap between requests
        stmt = (
            select(Product)
            .order_by(Product.created_at, Product.id)
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

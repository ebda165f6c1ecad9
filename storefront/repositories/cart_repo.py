# storefront/repositories/cart_repo.py
import uuid

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.models.cart import CartItem
from storefront.models.product import Product


class CartRepository:
    """
    Data access layer for cart_items.

    Every mutation commits immediately; there is no staged cart state.
    """

    def list_with_products(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[tuple[CartItem, Product]]:
        """
        Cart rows joined with their live product rows, oldest line first.

        Rows whose product no longer exists are left out.
        """
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at, CartItem.id)
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def increment_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        by: int = 1,
    ) -> None:
        """
        Add `by` to the line's quantity in place, creating the line if needed.

        The UPDATE is a single `quantity = quantity + by` statement, so two
        writers never lose an increment. If another writer inserts the same
        line first, the unique constraint rejects our INSERT and we fall back
        to the UPDATE.
        """
        if self._bump(session, user_id, product_id, by):
            return

        session.add(CartItem(user_id=user_id, product_id=product_id, quantity=by))
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            self._bump(session, user_id, product_id, by)

    def _bump(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        by: int,
    ) -> bool:
        stmt = (
            update(CartItem)
            .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .values(quantity=CartItem.quantity + by)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount > 0

    def set_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> bool:
        """Overwrite a line's quantity. Returns False if the line is absent."""
        stmt = (
            update(CartItem)
            .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .values(quantity=quantity)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount > 0

    def delete_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> bool:
        """Delete a line. Returns False if there was nothing to delete."""
        stmt = delete(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount > 0

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        try:
            session.exec(delete(CartItem).where(CartItem.user_id == user_id))
            session.commit()
        except Exception:
            session.rollback()
            raise

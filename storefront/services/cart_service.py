# storefront/services/cart_service.py
import logging
import uuid
from decimal import Decimal

from sqlmodel import Session

from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.identity import Identity
from storefront.core.store import UserLocks, run_store_call
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartLineRead, CartSummary

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart Aggregate: business logic for a user's cart.

    Responsibilities:
      - validate product existence before adding
      - keep one line per product (adding again increments)
      - drop lines whose quantity reaches zero
      - present the cart joined with *live* product data

    Mutations for one user run under that user's lock, shared with
    OrderService so checkout never interleaves with a cart change.
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        locks: UserLocks,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.locks = locks

    # ---- reads ----

    async def joined_lines(
        self,
        session: Session,
        identity: Identity,
    ) -> list[tuple[CartItem, Product]]:
        """Cart rows with their live product rows (explicit join, no lazy loads)."""
        return await run_store_call(
            self.cart_repo.list_with_products, session, identity.user_id
        )

    async def list_cart(self, session: Session, identity: Identity) -> CartSummary:
        """
        Return full cart summary:
          - lines with current title / price / image and line_total
          - total_quantity
          - total_price
        """
        rows = await self.joined_lines(session, identity)

        lines: list[CartLineRead] = []
        total_qty = 0
        total_price = Decimal("0.00")

        for item, product in rows:
            line_total = product.price * item.quantity
            total_qty += item.quantity
            total_price += line_total
            lines.append(
                CartLineRead(
                    product_id=product.id,
                    title=product.title,
                    price=product.price,
                    image_url=product.image_url,
                    quantity=item.quantity,
                    line_total=line_total,
                )
            )

        return CartSummary(items=lines, total_quantity=total_qty, total_price=total_price)

    # ---- mutations ----

    async def add_product(
        self,
        session: Session,
        identity: Identity,
        product_id: uuid.UUID,
    ) -> CartSummary:
        """
        Add one unit of a product.

        Raises:
            NotFoundError: product does not exist.
        """
        async with self.locks.for_user(identity.user_id):
            product = await run_store_call(self.product_repo.get_by_id, session, product_id)
            if product is None:
                raise NotFoundError("Product not found")

            await run_store_call(
                self.cart_repo.increment_item, session, identity.user_id, product_id
            )
            logger.info("User %s added product %s to cart", identity.user_id, product_id)

        return await self.list_cart(session, identity)

    async def set_quantity(
        self,
        session: Session,
        identity: Identity,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartSummary:
        """
        Overwrite the quantity of an existing line.

        - negative => ValidationError
        - zero     => line removed
        - missing line => NotFoundError
        """
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        async with self.locks.for_user(identity.user_id):
            if quantity == 0:
                found = await run_store_call(
                    self.cart_repo.delete_item, session, identity.user_id, product_id
                )
            else:
                found = await run_store_call(
                    self.cart_repo.set_quantity,
                    session,
                    identity.user_id,
                    product_id,
                    quantity,
                )
            if not found:
                raise NotFoundError("Item not in cart")

        return await self.list_cart(session, identity)

    async def remove_product(
        self,
        session: Session,
        identity: Identity,
        product_id: uuid.UUID,
    ) -> CartSummary:
        """
        Remove a product from the cart. Absent products are a no-op.
        """
        async with self.locks.for_user(identity.user_id):
            removed = await run_store_call(
                self.cart_repo.delete_item, session, identity.user_id, product_id
            )
        if removed:
            logger.info("User %s removed product %s from cart", identity.user_id, product_id)
        return await self.list_cart(session, identity)

    async def clear(self, session: Session, identity: Identity) -> None:
        """
        Empty the cart.

        Callers must already hold the user's lock (checkout does).
        """
        await run_store_call(self.cart_repo.clear_user_cart, session, identity.user_id)

# storefront/services/order_service.py
import logging
import uuid
from collections import defaultdict
from decimal import Decimal

from sqlmodel import Session

from storefront.core.errors import (
    EmptyCartError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    StoreTimeoutError,
)
from storefront.core.identity import Identity
from storefront.core.store import run_store_call
from storefront.models.order import Order, OrderItem
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import OrderItemRead, OrderRead
from storefront.services.cart_service import CartService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order Ledger: checkout and read access to placed orders.

    Responsibilities:
      - Snapshot the cart (title + price per line) into a new Order
      - Refuse to create an order from an empty cart
      - Clear the cart after the order is durable
      - Only let owners read their orders
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_service: CartService,
    ):
        self.order_repo = order_repo
        self.carts = cart_service

    # -------- Checkout --------

    async def checkout(self, session: Session, identity: Identity) -> OrderRead:
        """
        Convert the current user's cart into an Order.

        Steps (under the user's cart lock):
          1. Load cart joined with products; error if empty.
          2. Copy title and current price of every line into OrderItems.
          3. Insert Order + OrderItems in one commit.
          4. Clear cart.

        If the insert times out, the order is looked up by id before the
        lock is released; a committed order continues to step 4.

        If step 4 fails the order stays placed and is returned; the stale
        cart is logged for reconciliation. An order is never rolled back
        once committed.
        """
        async with self.carts.locks.for_user(identity.user_id):
            rows = await self.carts.joined_lines(session, identity)
            if not rows:
                raise EmptyCartError("Cart is empty")

            order = Order(user_id=identity.user_id, user_email=identity.email)
            items = [
                OrderItem(
                    order_id=order.id,
                    product_id=product.id,
                    position=position,
                    title=product.title,
                    unit_price=product.price,
                    quantity=cart_item.quantity,
                )
                for position, (cart_item, product) in enumerate(rows)
            ]

            # Built before commit: committed instances expire, and the clear
            # step below may leave the session unusable.
            placed = self._build_order_dto(order, items)

            try:
                await run_store_call(self.order_repo.place, session, order, items)
            except StoreTimeoutError:
                # The insert has finished by now; it may still have committed.
                stored = await run_store_call(self.order_repo.get_by_id, session, placed.id)
                if stored is None:
                    raise
                logger.warning("Order %s committed after its store call timed out", placed.id)

            logger.info(
                "Order %s placed by user %s with %d line(s), total %s",
                placed.id,
                identity.user_id,
                len(items),
                placed.total_price,
            )

            try:
                await self.carts.clear(session, identity)
            except StorageError as e:
                logger.error(
                    "Order %s placed but cart of user %s was not cleared (%s); "
                    "cart needs reconciliation",
                    placed.id,
                    identity.user_id,
                    e.detail,
                )

        return placed

    # -------- Reads --------

    async def list_orders(self, session: Session, identity: Identity) -> list[OrderRead]:
        """
        All orders of the user, most recent first, with their items.
        """
        orders = await run_store_call(
            self.order_repo.list_for_user, session, identity.user_id
        )
        items = await run_store_call(
            self.order_repo.list_items_for_orders, session, [o.id for o in orders]
        )

        by_order: dict[uuid.UUID, list[OrderItem]] = defaultdict(list)
        for it in items:
            by_order[it.order_id].append(it)

        return [self._build_order_dto(o, by_order[o.id]) for o in orders]

    async def get_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        identity: Identity,
    ) -> OrderRead:
        """
        Get a single order including items.

        Raises:
            NotFoundError: no such order.
            ForbiddenError: the order belongs to someone else. Checked before
                any line item is loaded.
        """
        order = await run_store_call(self.order_repo.get_by_id, session, order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if order.user_id != identity.user_id:
            logger.warning(
                "User %s tried to read order %s owned by another user",
                identity.user_id,
                order_id,
            )
            raise ForbiddenError("You are not allowed to access this order")

        items = await run_store_call(self.order_repo.list_items_for_order, session, order.id)
        return self._build_order_dto(order, items)

    # -------- Helper DTO builder --------

    @staticmethod
    def _build_order_dto(order: Order, items: list[OrderItem]) -> OrderRead:
        """
        Compose OrderRead from ORM models, including line totals and total.
        """
        item_dtos: list[OrderItemRead] = []
        total = Decimal("0.00")

        for it in items:
            line_total = it.unit_price * it.quantity
            total += line_total
            item_dtos.append(
                OrderItemRead(
                    product_id=it.product_id,
                    title=it.title,
                    unit_price=it.unit_price,
                    quantity=it.quantity,
                    line_total=line_total,
                )
            )

        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            user_email=order.user_email,
            created_at=order.created_at,
            items=item_dtos,
            total_price=total,
        )

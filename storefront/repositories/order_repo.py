# storefront/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access layer for orders and order_items.

    The ledger is append-only: there is no update or delete here.
    """

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id)
        )
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.position)
        )
        return list(session.exec(stmt).all())

    def list_items_for_orders(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> list[OrderItem]:
        if not order_ids:
            return []
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id.in_(order_ids))
            .order_by(OrderItem.order_id, OrderItem.position)
        )
        return list(session.exec(stmt).all())

    def place(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> None:
        """
        Insert an order together with its items in a single commit.

        Either both are durable afterwards or neither is.
        """
        try:
            session.add(order)
            session.add_all(items)
            session.commit()
        except Exception:
            session.rollback()
            raise

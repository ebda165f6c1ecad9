import asyncio
import uuid
from decimal import Decimal

import pytest
from sqlmodel import Session, SQLModel, create_engine

from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.identity import Identity
from storefront.core.store import UserLocks
from storefront.models.product import Product
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.services.cart_service import CartService


@pytest.fixture
def carts():
    return CartService(CartRepository(), ProductRepository(), UserLocks())


async def test_add_product_twice_increments_one_line(carts, session, identity, make_product):
    tea = make_product("Tea", "10.00")

    await carts.add_product(session, identity, tea.id)
    summary = await carts.add_product(session, identity, tea.id)

    assert len(summary.items) == 1
    assert summary.items[0].quantity == 2
    assert summary.total_quantity == 2
    assert summary.total_price == Decimal("20.00")


async def test_add_unknown_product(carts, session, identity):
    with pytest.raises(NotFoundError):
        await carts.add_product(session, identity, uuid.uuid4())

    summary = await carts.list_cart(session, identity)
    assert summary.items == []


async def test_cart_shows_live_product_price(carts, session, identity, make_product):
    tea = make_product("Tea", "10.00")
    await carts.add_product(session, identity, tea.id)

    tea.price = Decimal("12.50")
    session.add(tea)
    session.commit()

    summary = await carts.list_cart(session, identity)
    assert summary.items[0].price == Decimal("12.50")
    assert summary.total_price == Decimal("12.50")


async def test_set_quantity(carts, session, identity, make_product):
    tea = make_product("Tea", "10.00")
    await carts.add_product(session, identity, tea.id)

    summary = await carts.set_quantity(session, identity, tea.id, 5)
    assert summary.items[0].quantity == 5

    summary = await carts.set_quantity(session, identity, tea.id, 0)
    assert summary.items == []


async def test_set_quantity_rejects_negative(carts, session, identity, make_product):
    tea = make_product("Tea", "10.00")
    await carts.add_product(session, identity, tea.id)

    with pytest.raises(ValidationError):
        await carts.set_quantity(session, identity, tea.id, -1)

    summary = await carts.list_cart(session, identity)
    assert summary.items[0].quantity == 1


async def test_set_quantity_of_missing_line(carts, session, identity, make_product):
    tea = make_product("Tea", "10.00")

    with pytest.raises(NotFoundError):
        await carts.set_quantity(session, identity, tea.id, 3)


async def test_remove_absent_product_is_noop(carts, session, identity, make_product):
    tea = make_product("Tea", "10.00")
    cake = make_product("Cake", "5.50")
    await carts.add_product(session, identity, tea.id)

    summary = await carts.remove_product(session, identity, cake.id)
    assert [line.product_id for line in summary.items] == [tea.id]

    summary = await carts.remove_product(session, identity, tea.id)
    assert summary.items == []


async def test_carts_are_per_user(carts, session, identity, make_user, make_product):
    tea = make_product("Tea", "10.00")
    bob = make_user("bob@example.com")
    bob_identity = Identity(user_id=bob.id, email=bob.email)

    await carts.add_product(session, identity, tea.id)

    summary = await carts.list_cart(session, bob_identity)
    assert summary.items == []


async def test_concurrent_adds_are_not_lost(carts, tmp_path):
    # File database so each coroutine can use its own connection.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'shop.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    SQLModel.metadata.create_all(engine)

    with Session(engine) as setup:
        user = User(email="carol@example.com", name="carol", password_hash="x")
        tea = Product(title="Tea", price=Decimal("10.00"))
        setup.add(user)
        setup.add(tea)
        setup.commit()
        ident = Identity(user_id=user.id, email=user.email)
        tea_id = tea.id

    async def add_once():
        with Session(engine) as s:
            await carts.add_product(s, ident, tea_id)

    await asyncio.gather(*(add_once() for _ in range(10)))

    with Session(engine) as s:
        summary = await carts.list_cart(s, ident)
    assert summary.items[0].quantity == 10
    engine.dispose()

import os
import uuid
from decimal import Decimal

# Settings are read at import time.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront import wiring
from storefront.core.identity import Identity
from storefront.core.security import create_access_token, get_password_hash
from storefront.database import get_session
from storefront.main import app
from storefront.models.product import Product
from storefront.models.user import User

PASSWORD = "secret123"


@pytest.fixture(scope="session")
def password_hash():
    return get_password_hash(PASSWORD)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def invoice_dir(tmp_path, monkeypatch):
    path = tmp_path / "invoices"
    monkeypatch.setattr(wiring.invoice_service, "invoice_dir", path)
    return path


@pytest.fixture
def client(engine, invoice_dir):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session, password_hash):
    def _make_user(email: str | None = None, role: str = "user") -> User:
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        user = User(
            email=email,
            name=email.split("@", 1)[0],
            password_hash=password_hash,
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_product(session):
    def _make_product(title: str = "Tea", price: str = "10.00") -> Product:
        product = Product(title=title, price=Decimal(price))
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def customer(make_user):
    return make_user("alice@example.com")


@pytest.fixture
def identity(customer):
    return Identity(user_id=customer.id, email=customer.email)


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(user.id, user.email)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers

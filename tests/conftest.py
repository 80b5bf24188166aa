"""Pytest configuration and fixtures"""
import os
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Set test environment variables before the app reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")
os.environ.setdefault("SITE_URL", "https://shop.test")

from app.database import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.product import Collection, Product  # noqa: E402
from app.models.user import User  # noqa: E402
from app.repositories.cart_repo import CartRepository  # noqa: E402
from app.schemas.cart import ProductSnapshot  # noqa: E402

JWT_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session in a test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def cart_storage(session):
    return CartRepository(session, ttl_seconds=3600)


@pytest.fixture
def client(engine):
    """Test client wired to the test database"""

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(sub: uuid.UUID | None = None, email: str = "shopper@example.com") -> str:
    return jwt.encode(
        {"sub": str(sub or uuid.uuid4()), "email": email},
        JWT_SECRET,
        algorithm="HS256",
    )


@pytest.fixture
def auth_headers():
    """Bearer headers for a regular customer"""
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def admin_headers(session):
    admin = User(id=uuid.uuid4(), email="admin@example.com", name="admin", role="admin")
    session.add(admin)
    session.commit()
    return {"Authorization": f"Bearer {make_token(admin.id, admin.email)}"}


@pytest.fixture
def laptops(session):
    """Active collection with an explicit slug"""
    collection = Collection(
        name="Laptops",
        slug="laptops",
        updated_at=datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc),
    )
    session.add(collection)
    session.commit()
    session.refresh(collection)
    return collection


@pytest.fixture
def sample_products(session, laptops):
    """Two in-stock products and one sold-out product"""
    products = [
        Product(
            name="ThinkPad T480",
            price=32000.0,
            discount_price=27999.0,
            stock=5,
            type="Lenovo",
            collection_id=laptops.id,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
            updated_at=datetime(2025, 4, 2, 23, 59, tzinfo=timezone.utc),
        ),
        Product(
            name="MacBook Air M1",
            price=55000.0,
            stock=3,
            type="Apple",
            collection_id=laptops.id,
            created_at=datetime(2025, 1, 2, tzinfo=timezone.utc),
        ),
        Product(
            name="Pixel 6",
            price=18000.0,
            stock=0,
            type="Google",
            created_at=datetime(2025, 1, 3, tzinfo=timezone.utc),
        ),
    ]
    session.add_all(products)
    session.commit()

    # updated_at has a default, so clear it after insert to get a NULL column
    products[1].updated_at = None
    session.add(products[1])
    session.commit()

    for product in products:
        session.refresh(product)
    return products


@pytest.fixture
def phone():
    """Snapshot of a discounted phone with plenty of stock"""
    return ProductSnapshot(
        id="prod-phone",
        name="iPhone 12",
        price=40000.0,
        discount_price=30000.0,
        image="https://cdn.test/iphone12.png",
        stock=10,
        type="Apple",
        collection="Smart Phones",
    )


@pytest.fixture
def charger():
    """Snapshot without discount and with unknown stock"""
    return ProductSnapshot(id="prod-charger", name="USB-C Charger", price=1500.0)

import os
from pathlib import Path

# must be set before anything from grocery is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["PAYMENT_GATEWAY"] = "fake"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from grocery.api import create_app
from grocery.api.deps import get_lock_service
from grocery.celery_worker import celery_app
from grocery.data import models  # noqa: F401
from grocery.data.database import Base, SessionLocal, engine
from grocery.data.models.address import AddressModel
from grocery.data.models.product import ProductModel
from grocery.data.models.user import UserModel
from grocery.services.payments import FakeGateway, reset_gateway, set_gateway
from grocery.utils.security import create_access_token, hash_password

celery_app.conf.task_always_eager = True

# bcrypt is slow on purpose; every test user shares one hash
_PASSWORD_HASH = hash_password("secret123")


def pytest_collection_modifyitems(config, items):
    """Mark tests by the directory they live in."""
    for item in items:
        test_path = str(Path(item.fspath))
        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


class InMemoryLock:
    """Stands in for LockService: same SET NX / compare-and-delete semantics."""

    def __init__(self):
        self.held: dict[int, str] = {}
        self.acquired = 0

    def acquire_user_lock(self, user_id: int, token: str, ttl: int) -> bool:
        if user_id in self.held:
            return False
        self.held[user_id] = token
        self.acquired += 1
        return True

    def release_user_lock(self, user_id: int, token: str) -> bool:
        if self.held.get(user_id) == token:
            del self.held[user_id]
            return True
        return False


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture()
def lock_service():
    return InMemoryLock()


@pytest.fixture()
def app(gateway, lock_service):
    application = create_app()
    application.dependency_overrides[get_lock_service] = lambda: lock_service
    return application


@pytest.fixture()
def client(app):
    return TestClient(app)


def make_user(db, role="customer", email=None, full_name="Jane Doe", phone_number="0788000001"):
    user = UserModel(
        full_name=full_name,
        email=email or f"{role}-{os.urandom(4).hex()}@example.com",
        phone_number=phone_number,
        password_hash=_PASSWORD_HASH,
        role=role,
        status="Active",
    )
    db.add(user)
    db.commit()
    return user


def make_product(db, name="Tomatoes", price="1000.00", offer_price=None, in_stock=True, unit="kg"):
    product = ProductModel(
        name=name,
        description="",
        unit=unit,
        price=Decimal(price),
        offer_price=Decimal(offer_price) if offer_price is not None else None,
        image=f"https://img.example.com/{name.lower()}.png",
        category="Vegetables",
        in_stock=in_stock,
    )
    db.add(product)
    db.commit()
    return product


def make_address(db, user, is_default=False, city="Kigali"):
    address = AddressModel(
        user_id=user.id,
        description="Home",
        city=city,
        street="KG 11 Ave",
        district="Gasabo",
        phone_number="+250 788 000 001",
        is_default=is_default,
    )
    db.add(address)
    db.commit()
    return address


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture()
def customer(db):
    return make_user(db, "customer", email="jane@example.com")


@pytest.fixture()
def seller(db):
    return make_user(db, "seller", email="seller@example.com", full_name="Sam Seller")


@pytest.fixture()
def admin(db):
    return make_user(db, "admin", email="admin@example.com", full_name="Ada Admin")

import os

#konfiguracja musi byc ustawiona zanim zaimportujemy aplikacje
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DB_CONNECT_ATTEMPTS"] = "1"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import app.data.models  # noqa: F401
from app.data.database import Base, SessionLocal, engine
from app.data.models import UserModel, ProductModel
from app.domain.enums import Role
from app.main import app as fastapi_app
from app.services.password_service import PasswordHasher
from app.services.token_service import TokenService
from tests.helpers import auth_header

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    #bez "with": lifespan (init_db, seed) testujemy osobno
    return TestClient(fastapi_app)


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService()


def _make_user(db, hasher, name, email, role):
    user = UserModel(
        name=name,
        email=email,
        password_hash=hasher.hash(PASSWORD),
        phone="600100200",
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db, hasher):
    return _make_user(db, hasher, "Admin", "admin@example.com", Role.ADMIN)


@pytest.fixture
def alice(db, hasher):
    return _make_user(db, hasher, "Alice", "alice@example.com", Role.CLIENT)


@pytest.fixture
def bob(db, hasher):
    return _make_user(db, hasher, "Bob", "bob@example.com", Role.CLIENT)


@pytest.fixture
def admin_headers(tokens, admin):
    return auth_header(tokens, admin)


@pytest.fixture
def alice_headers(tokens, alice):
    return auth_header(tokens, alice)


@pytest.fixture
def bob_headers(tokens, bob):
    return auth_header(tokens, bob)


@pytest.fixture
def make_product(db):
    def _make(name="Keyboard", price="10.00", stock=5, brand="Acme", category_id=None):
        product = ProductModel(
            name=name,
            price=Decimal(price),
            brand=brand,
            stock=stock,
            description="No description",
            category_id=category_id,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make

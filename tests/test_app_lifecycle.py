from sqlalchemy import inspect

from app.data.database import init_db, make_engine
from app.data.seed import seed_admin
from app.domain.enums import Role


def test_init_db_creates_all_tables():
    engine = make_engine("sqlite://")
    init_db(engine)

    tables = set(inspect(engine).get_table_names())
    assert {"users", "addresses", "categories", "products", "reviews", "carts", "cart_items",
            "orders", "order_items"} <= tables
    engine.dispose()


def test_seed_admin_is_idempotent(client):
    assert seed_admin() is None

    first = seed_admin(email="root@example.com", password="rootpass", name="Root")
    second = seed_admin(email="root@example.com", password="other", name="Root")
    assert first.role == Role.ADMIN
    assert second.id == first.id

    resp = client.post("/users/login", json={"email": "root@example.com", "password": "rootpass"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "ADMIN"


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["error"]["kind"] == "not_found"

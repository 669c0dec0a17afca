from decimal import Decimal


def _cart_with(client, headers, items):
    cart = client.post("/cart", json={}, headers=headers)
    assert cart.status_code == 201
    cart_id = cart.json()["cart_id"]
    for product_id, quantity in items:
        resp = client.put(f"/cart/{cart_id}", json={"product_id": product_id, "quantity": quantity}, headers=headers)
        assert resp.status_code == 200
    return cart_id


# =====================================================
# CART
# =====================================================
def test_cart_requires_token(client):
    resp = client.post("/cart", json={})
    assert resp.status_code == 401
    assert resp.json()["error"]["kind"] == "unauthorized"


def test_cart_merge_over_http(client, alice, alice_headers, make_product):
    p1 = make_product(name="Mouse", price="25.00").id
    cart_id = _cart_with(client, alice_headers, [(p1, 2), (p1, 3)])

    cart = client.get(f"/cart/user/{alice.id}", headers=alice_headers).json()
    assert cart["cart_id"] == cart_id
    assert cart["items"] == [{"product_id": p1, "name": "Mouse", "quantity": 5}]

    assert client.post("/cart", json={}, headers=alice_headers).status_code == 409


def test_cart_item_validation(client, alice_headers, make_product):
    p1 = make_product().id
    cart_id = _cart_with(client, alice_headers, [])

    for quantity in (0, -2, 2.5, "3", True, 10_001, 2**31):
        resp = client.put(f"/cart/{cart_id}", json={"product_id": p1, "quantity": quantity}, headers=alice_headers)
        assert resp.status_code == 422, quantity

    resp = client.put(f"/cart/{cart_id}", json={"product_id": 999, "quantity": 1}, headers=alice_headers)
    assert resp.status_code == 404


def test_foreign_cart_is_forbidden(client, alice, alice_headers, bob_headers, admin_headers):
    cart_id = _cart_with(client, alice_headers, [])

    resp = client.get(f"/cart/{cart_id}", headers=bob_headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["kind"] == "forbidden"

    assert client.get(f"/cart/user/{alice.id}", headers=bob_headers).status_code == 403
    assert client.post("/cart", json={"user_id": alice.id}, headers=bob_headers).status_code == 403
    assert client.get(f"/cart/{cart_id}", headers=admin_headers).status_code == 200
    assert client.get("/cart", headers=bob_headers).status_code == 403
    assert len(client.get("/cart", headers=admin_headers).json()) == 1


def test_cart_total_and_item_removal(client, alice, alice_headers, make_product):
    p1 = make_product(name="Cable", price="4.50").id
    p2 = make_product(name="Hub", price="20.00").id
    cart_id = _cart_with(client, alice_headers, [(p1, 3), (p2, 1)])

    total = client.get(f"/cart/{alice.id}/total", headers=alice_headers).json()
    assert Decimal(str(total["total"])) == Decimal("33.50")
    assert [line["name"] for line in total["items"]] == ["Cable", "Hub"]

    resp = client.delete(f"/cart/{cart_id}/items/{p1}", headers=alice_headers)
    assert [i["product_id"] for i in resp.json()["items"]] == [p2]
    assert client.delete(f"/cart/{cart_id}/items/{p1}", headers=alice_headers).status_code == 404

    assert client.delete(f"/cart/{cart_id}", headers=alice_headers).status_code == 200
    assert client.get(f"/cart/{cart_id}", headers=alice_headers).status_code == 404


# =====================================================
# ORDERS
# =====================================================
def test_order_from_cart_over_http(client, alice, alice_headers, admin_headers, make_product):
    p1 = make_product(name="Mouse", price="10.00").id
    _cart_with(client, alice_headers, [(p1, 2), (p1, 3)])

    resp = client.post("/orders", json={"payment_method": "card"}, headers=alice_headers)
    assert resp.status_code == 201
    order = resp.json()
    assert order["status"] == "PENDING"
    assert order["total"] == "50.00"
    assert order["items"][0]["unit_price"] == "10.00"
    assert len(order["items"]) == 1
    assert order["items"][0]["quantity"] == 5
    assert order["items"][0]["product_name"] == "Mouse"

    assert client.get(f"/cart/user/{alice.id}", headers=alice_headers).status_code == 404
    assert client.get(f"/orders/{order['id']}", headers=alice_headers).status_code == 200

    listed = client.get("/orders", headers=admin_headers).json()
    assert listed[0]["user"] == {"name": "Alice", "email": "alice@example.com"}


def test_order_errors(client, alice_headers, bob, bob_headers):
    assert client.post("/orders", json={"payment_method": "card"}, headers=alice_headers).status_code == 404

    _cart_with(client, alice_headers, [])
    resp = client.post("/orders", json={"payment_method": "card"}, headers=alice_headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["kind"] == "validation_error"

    assert client.post("/orders", json={"payment_method": ""}, headers=alice_headers).status_code == 422
    resp = client.post("/orders", json={"user_id": bob.id, "payment_method": "card"}, headers=alice_headers)
    assert resp.status_code == 403


def test_status_patch(client, alice_headers, admin_headers, make_product):
    p1 = make_product().id
    _cart_with(client, alice_headers, [(p1, 1)])
    order_id = client.post("/orders", json={"payment_method": "cash"}, headers=alice_headers).json()["id"]

    assert client.patch(f"/orders/{order_id}", json={"status": "SHIPPED"}, headers=alice_headers).status_code == 403

    resp = client.patch(f"/orders/{order_id}", json={"status": "SHIPPEDD"}, headers=admin_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["kind"] == "validation_error"
    assert client.get(f"/orders/{order_id}", headers=admin_headers).json()["status"] == "PENDING"

    resp = client.patch(f"/orders/{order_id}", json={"status": "SHIPPED"}, headers=admin_headers)
    assert resp.json()["status"] == "SHIPPED"
    assert client.patch("/orders/999", json={"status": "SHIPPED"}, headers=admin_headers).status_code == 404


def test_user_orders_and_stats(client, alice, alice_headers, bob, bob_headers, admin_headers, make_product):
    p1 = make_product().id
    _cart_with(client, alice_headers, [(p1, 1)])
    first = client.post("/orders", json={"payment_method": "card"}, headers=alice_headers).json()["id"]
    _cart_with(client, alice_headers, [(p1, 2)])
    client.post("/orders", json={"payment_method": "card"}, headers=alice_headers)
    client.patch(f"/orders/{first}", json={"status": "CANCELED"}, headers=admin_headers)

    assert len(client.get(f"/orders/user/{alice.id}", headers=alice_headers).json()) == 2
    assert client.get(f"/orders/user/{bob.id}", headers=bob_headers).json() == []
    assert client.get(f"/orders/user/{alice.id}", headers=bob_headers).status_code == 403
    assert client.get(f"/orders/{first}", headers=bob_headers).status_code == 403

    stats = {s["status"]: s["count"] for s in client.get("/orders/stats", headers=admin_headers).json()}
    assert stats == {"PENDING": 1, "CANCELED": 1}
    assert client.get("/orders/stats", headers=alice_headers).status_code == 403

    assert client.delete(f"/orders/{first}", headers=admin_headers).status_code == 200
    assert client.get(f"/orders/{first}", headers=admin_headers).status_code == 404

import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import app
from models import Account, Log, Product
from utils.tokenJWT import create_access_token
from conftest import GUEST, STUDENT


@pytest.fixture
def client(seeded, session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(email):
    return {"Authorization": f"Bearer {create_access_token({'sub': email, 'role': 'customer'})}"}


def test_requires_token(client):
    assert client.get("/cart").status_code in (401, 403)
    bad = {"Authorization": "Bearer not-a-token"}
    assert client.get("/cart", headers=bad).status_code == 401


def test_shop_listing_hides_sold_out(client):
    res = client.get("/shop/products")
    assert res.status_code == 200
    ids = [p["id"] for p in res.json()["items"]]
    assert "P3" not in ids and "P1" in ids

    res = client.get("/shop/products", params={"in_stock": False, "sort_by": "price", "order": "desc"})
    assert res.json()["total"] == 3
    assert client.get("/shop/products/P1").json()["member_price"] == 8.0
    assert client.get("/shop/products/NOPE").status_code == 404
    assert client.get("/shop/categories").json() == ["Apparel", "Pantry", "Stationery"]


def test_cart_flow(client):
    headers = auth(GUEST)
    res = client.post("/cart/add", json={"product_id": "P1", "qty": 3}, headers=headers)
    assert res.status_code == 200
    assert res.json()["subtotal"] == 30.0

    res = client.post("/cart/add", json={"product_id": "P1", "qty": 15}, headers=headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Max 10 units per product"

    res = client.post("/cart/add", json={"product_id": "NOPE", "qty": 1}, headers=headers)
    assert res.status_code == 404

    res = client.put("/cart/items/P2", json={"qty": 12}, headers=headers)
    assert res.status_code == 200
    assert res.json()["message"] == "Updated: P2 -> 10"
    assert res.json()["total_units"] == 13

    res = client.put("/cart/items/P1", json={"qty": 0}, headers=headers)
    assert res.json()["message"] == "Removed"

    assert client.delete("/cart/items/P1", headers=headers).status_code == 404
    assert client.delete("/cart", headers=headers).json()["items"] == []


def test_preview_and_checkout(client, session_factory):
    headers = auth(STUDENT)
    client.post("/cart/add", json={"product_id": "P1", "qty": 2}, headers=headers)

    payload = {"fulfilment": "PICKUP", "location": "S1"}
    preview = client.post("/orders/preview", json=payload, headers=headers).json()
    assert preview["total"] == 19.0
    assert "Pickup Location: Clayton Campus Store - 21 College Walk" in preview["summary"]

    res = client.post("/orders/checkout", json=payload, headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == preview["total"]
    assert body["new_balance"] == 81.0

    assert client.get("/cart", headers=headers).json()["items"] == []
    orders = client.get("/orders", headers=headers).json()
    assert orders["total"] == 1
    assert orders["items"][0]["location"] == "Clayton Campus Store - 21 College Walk"

    db = session_factory()
    try:
        assert db.get(Product, "P1").stock == 3
        assert db.query(Log).filter(Log.action == "ORDER_CHECKOUT", Log.status == "SUCCESS").count() == 1
    finally:
        db.close()


def test_checkout_declined(client, session_factory):
    headers = auth(GUEST)
    res = client.post("/orders/checkout", json={"fulfilment": "DELIVERY"}, headers=headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Cart is empty"

    client.post("/cart/add", json={"product_id": "P2", "qty": 10}, headers=headers)
    client.post("/cart/add", json={"product_id": "P1", "qty": 1}, headers=headers)
    res = client.post("/orders/checkout", json={"fulfilment": "DELIVERY", "location": "1 Main St"}, headers=headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Insufficient funds, please top up!"

    db = session_factory()
    try:
        assert db.get(Account, GUEST).balance == 100.0
    finally:
        db.close()


def test_invalid_fulfilment_mode(client):
    res = client.post("/orders/preview", json={"fulfilment": "DRONE"}, headers=auth(GUEST))
    assert res.status_code == 422


def test_account_and_topup(client):
    headers = auth(GUEST)
    account = client.get("/account", headers=headers).json()
    assert account["balance"] == 100.0
    assert account["membership"] == "No membership"

    res = client.post("/account/topup", json={"amount": 50}, headers=headers)
    assert res.json()["balance"] == 150.0
    assert client.post("/account/topup", json={"amount": 5000}, headers=headers).status_code == 400
    assert client.post("/account/topup", json={"amount": -1}, headers=headers).status_code == 422


def test_logout_discards_cart(client):
    headers = auth(GUEST)
    client.post("/cart/add", json={"product_id": "P1", "qty": 1}, headers=headers)
    assert client.post("/logout", headers=headers).status_code == 200
    assert client.get("/cart", headers=headers).json()["items"] == []


def test_stores(client):
    stores = client.get("/stores").json()
    assert [s["id"] for s in stores] == ["S1"]


def test_failed_cart_update_is_audited(client, session_factory):
    headers = auth(GUEST)
    client.post("/cart/add", json={"product_id": "P1", "qty": 1}, headers=headers)

    res = client.put("/cart/items/P1", json={"qty": 8}, headers=headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Insufficient stock (5 available)"
    assert client.put("/cart/items/NOPE", json={"qty": 1}, headers=headers).status_code == 404

    db = session_factory()
    try:
        failed = (
            db.query(Log)
            .filter(Log.action == "CART_UPDATE", Log.status == "FAIL")
            .order_by(Log.id)
            .all()
        )
        assert [row.meta["reason"] for row in failed] == ["InsufficientStock", "UnknownProduct"]
        assert all(row.email == GUEST for row in failed)
    finally:
        db.close()


def test_order_history_pages(client):
    headers = auth(GUEST)
    for _ in range(3):
        client.post("/cart/add", json={"product_id": "P2", "qty": 1}, headers=headers)
        assert client.post("/orders/checkout", json={"fulfilment": "PICKUP", "location": "S1"},
                           headers=headers).status_code == 200

    first = client.get("/orders", params={"page": 1, "page_size": 2}, headers=headers).json()
    second = client.get("/orders", params={"page": 2, "page_size": 2}, headers=headers).json()
    assert first["total"] == 3
    assert len(first["items"]) == 2 and len(second["items"]) == 1
    seen = {o["id"] for o in first["items"] + second["items"]}
    assert len(seen) == 3
    assert client.get("/orders", headers=auth(STUDENT)).json()["total"] == 0

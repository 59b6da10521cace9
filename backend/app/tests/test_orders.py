from decimal import Decimal

import pytest

from app.models.today_menu_item import TodayMenuItem


@pytest.fixture
def menu(client, make_product, headers_for):
    pho = make_product("Pho bo", price=45000, quantity=10, category="food")
    tea = make_product("Tra da", price=5000, quantity=20, category="beverage")
    items = client.post("/today-menu/", headers=headers_for("staff"), json=[
        {"productId": pho.id},
        {"productId": tea.id},
    ]).json()
    return {item["name"]: item for item in items}


def _place(client, headers, menu, **quantities):
    return client.post("/orders/", headers=headers, json={
        "items": [{"menuItemId": menu[name]["id"], "quantity": qty} for name, qty in quantities.items()],
        "note": "no onions",
    })


def _remaining(db_session, item):
    db_session.expire_all()
    return db_session.get(TodayMenuItem, item["id"]).quantity


def test_place_order_takes_from_menu(client, make_user, auth_headers, menu, db_session):
    customer = make_user("customer")
    r = client.post("/orders/", headers=auth_headers(customer), json={"items": [
        {"menuItemId": menu["Pho bo"]["id"], "quantity": 2},
        {"menuItemId": menu["Tra da"]["id"], "quantity": 3},
    ]})
    assert r.status_code == 201
    order = r.json()
    assert order["status"] == "pending"
    assert order["customer_id"] == customer.id
    assert Decimal(order["total_price"]) == Decimal("105000")
    assert order["payment"]["payment_status"] == "pending"
    assert Decimal(order["payment"]["payment_amount"]) == Decimal("105000")

    assert _remaining(db_session, menu["Pho bo"]) == 8
    assert _remaining(db_session, menu["Tra da"]) == 17


def test_order_cannot_oversell(client, headers_for, menu, db_session):
    r = client.post("/orders/", headers=headers_for("customer"), json={"items": [
        {"menuItemId": menu["Tra da"]["id"], "quantity": 1},
        {"menuItemId": menu["Pho bo"]["id"], "quantity": 11},
    ]})
    assert r.status_code == 400
    assert r.json()["code"] == "NOT_ENOUGH_QUANTITY"
    # Nothing is taken when the order fails
    assert _remaining(db_session, menu["Tra da"]) == 20


def test_order_unknown_menu_item(client, headers_for, menu):
    r = client.post("/orders/", headers=headers_for("customer"), json={"items": [{"menuItemId": 999}]})
    assert r.status_code == 404


def test_order_needs_items(client, headers_for):
    r = client.post("/orders/", headers=headers_for("customer"), json={"items": []})
    assert r.status_code == 400


def test_customers_only_see_their_orders(client, make_user, auth_headers, menu):
    alice = make_user("customer")
    bob = make_user("customer")
    order = _place(client, auth_headers(alice), menu, **{"Pho bo": 1}).json()
    _place(client, auth_headers(bob), menu, **{"Tra da": 1})

    r = client.get("/orders/", headers=auth_headers(alice))
    assert [o["id"] for o in r.json()] == [order["id"]]
    assert r.headers["X-Total-Count"] == "1"

    assert client.get(f"/orders/{order['id']}", headers=auth_headers(bob)).status_code == 404

    r = client.get("/orders/", headers=auth_headers(make_user("cashier")))
    assert r.headers["X-Total-Count"] == "2"


def test_full_order_flow(client, make_user, auth_headers, menu):
    customer = make_user("customer")
    staff = auth_headers(make_user("staff"))
    cashier = auth_headers(make_user("cashier"))
    order = _place(client, auth_headers(customer), menu, **{"Pho bo": 2}).json()
    order_id = order["id"]

    r = client.patch(f"/orders/{order_id}/status", headers=auth_headers(customer), json={"status": "preparing"})
    assert r.status_code == 403

    r = client.patch(f"/orders/{order_id}/status", headers=staff, json={"status": "preparing"})
    assert r.json()["status"] == "preparing"
    r = client.patch(f"/orders/{order_id}/status", headers=staff, json={"status": "success"})
    assert r.json()["status"] == "success"

    # Not paid yet
    r = client.patch(f"/orders/{order_id}/status", headers=cashier, json={"status": "completed"})
    assert r.status_code == 409
    assert r.json()["code"] == "PAYMENT_REQUIRED"

    r = client.post(f"/orders/{order_id}/pay", headers=cashier, json={"paymentMethod": "cash", "discountAmount": "10000"})
    assert r.status_code == 200
    payment = r.json()
    assert payment["payment_status"] == "success"
    assert Decimal(payment["payment_amount"]) == Decimal("80000")
    assert Decimal(payment["discount_amount"]) == Decimal("10000")

    r = client.post(f"/orders/{order_id}/pay", headers=cashier, json={"paymentMethod": "cash"})
    assert r.status_code == 409

    r = client.patch(f"/orders/{order_id}/status", headers=cashier, json={"status": "completed"})
    assert r.json()["status"] == "completed"

    r = client.post(f"/orders/{order_id}/cancel", headers=cashier)
    assert r.status_code == 409
    assert r.json()["code"] == "INVALID_STATUS"


def test_skipping_a_status_is_rejected(client, headers_for, menu):
    order = _place(client, headers_for("customer"), menu, **{"Tra da": 1}).json()
    r = client.patch(f"/orders/{order['id']}/status", headers=headers_for("staff"), json={"status": "success"})
    assert r.status_code == 409


def test_customer_cancels_pending_order(client, make_user, auth_headers, menu, db_session):
    customer = make_user("customer")
    order = _place(client, auth_headers(customer), menu, **{"Pho bo": 3}).json()
    assert _remaining(db_session, menu["Pho bo"]) == 7

    r = client.post(f"/orders/{order['id']}/cancel", headers=auth_headers(customer))
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"
    assert r.json()["payment"]["payment_status"] == "failed"
    assert _remaining(db_session, menu["Pho bo"]) == 10

    r = client.post(f"/orders/{order['id']}/pay", headers=auth_headers(make_user("cashier")), json={})
    assert r.status_code == 409


def test_cancel_after_close_leaves_next_menu_alone(client, make_user, make_product, auth_headers, menu, db_session):
    staff = auth_headers(make_user("staff"))
    customer = make_user("customer")
    order = _place(client, auth_headers(customer), menu, **{"Pho bo": 3}).json()
    assert client.post("/today-menu/close", headers=staff).status_code == 200

    banh_mi = make_product("Banh mi", price=20000, quantity=15, category="food")
    new_item = client.post("/today-menu/", headers=staff, json=[{"productId": banh_mi.id}]).json()[0]

    r = client.post(f"/orders/{order['id']}/cancel", headers=auth_headers(customer))
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"
    assert _remaining(db_session, new_item) == 15


def test_customer_cannot_cancel_once_preparing(client, make_user, auth_headers, menu):
    customer = make_user("customer")
    order = _place(client, auth_headers(customer), menu, **{"Pho bo": 1}).json()
    client.patch(f"/orders/{order['id']}/status", headers=auth_headers(make_user("staff")), json={"status": "preparing"})

    r = client.post(f"/orders/{order['id']}/cancel", headers=auth_headers(customer))
    assert r.status_code == 409


def test_payments_listing(client, make_user, auth_headers, menu):
    cashier = auth_headers(make_user("cashier"))
    order = _place(client, auth_headers(make_user("customer")), menu, **{"Tra da": 2}).json()
    client.post(f"/orders/{order['id']}/pay", headers=cashier, json={"paymentMethod": "vnpay"})

    r = client.get("/payments/?status=success&method=vnpay", headers=cashier)
    assert r.status_code == 200
    assert r.headers["X-Total-Count"] == "1"
    payment_id = r.json()[0]["id"]

    assert client.get(f"/payments/{payment_id}", headers=cashier).status_code == 200
    assert client.get("/payments/", headers=auth_headers(make_user("customer"))).status_code == 403


def test_unknown_status_filters_are_rejected(client, headers_for):
    cashier = headers_for("cashier")
    r = client.get("/payments/?status=refunded", headers=cashier)
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_ARGUMENTS"
    r = client.get("/orders/?status=lost", headers=cashier)
    assert r.status_code == 400

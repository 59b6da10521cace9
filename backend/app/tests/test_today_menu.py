from decimal import Decimal

from app.models.menu_history import MenuHistory
from app.models.product import Product
from app.models.today_menu_item import TodayMenuItem


def test_create_menu_populates_from_products(client, make_product, headers_for):
    pho = make_product("Pho bo", price=45000, quantity=30, category="food", description="Beef noodle soup")
    tea = make_product("Tra da", price=5000, quantity=100, category="beverage")

    r = client.post("/today-menu/", headers=headers_for("staff"), json=[
        {"productId": pho.id},
        {"productId": tea.id, "price": "6000", "quantity": 40},
    ])
    assert r.status_code == 200
    items = {item["product_id"]: item for item in r.json()}

    assert Decimal(items[pho.id]["price"]) == Decimal("45000")
    assert items[pho.id]["quantity"] == 30
    assert items[pho.id]["total_quantity"] == 30
    assert items[pho.id]["name"] == "Pho bo"
    assert items[pho.id]["category"] == "food"
    assert items[pho.id]["description"] == "Beef noodle soup"

    assert Decimal(items[tea.id]["price"]) == Decimal("6000")
    assert items[tea.id]["quantity"] == 40
    assert items[tea.id]["total_quantity"] == 40


def test_second_menu_for_the_day_is_rejected(client, make_product, headers_for):
    pho = make_product()
    headers = headers_for("staff")
    assert client.post("/today-menu/", headers=headers, json=[{"productId": pho.id}]).status_code == 200

    r = client.post("/today-menu/", headers=headers, json=[{"productId": pho.id}])
    assert r.status_code == 400
    assert r.json()["code"] == "BAD_REQUEST"


def test_create_menu_with_unknown_product(client, headers_for, db_session):
    r = client.post("/today-menu/", headers=headers_for("staff"), json=[{"productId": 999}])
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"
    assert db_session.query(TodayMenuItem).count() == 0


def test_only_kitchen_staff_edits_the_menu(client, make_product, headers_for):
    pho = make_product()
    for role in ("customer", "cashier"):
        r = client.post("/today-menu/", headers=headers_for(role), json=[{"productId": pho.id}])
        assert r.status_code == 403
    r = client.post("/today-menu/", headers=headers_for("admin"), json=[{"productId": pho.id}])
    assert r.status_code == 200


def test_get_today_menu(client, make_product, headers_for):
    headers = headers_for("customer")
    r = client.get("/today-menu/", headers=headers)
    assert r.status_code == 200
    assert r.json() == []
    assert r.headers["X-Total-Count"] == "0"

    pho = make_product("Pho bo", category="food")
    tea = make_product("Tra da", category="beverage")
    client.post("/today-menu/", headers=headers_for("staff"), json=[{"productId": pho.id}, {"productId": tea.id}])

    r = client.get("/today-menu/?category=beverage", headers=headers)
    assert [item["name"] for item in r.json()] == ["Tra da"]
    assert r.headers["X-Total-Count"] == "1"


def test_add_single_item_and_duplicate(client, make_product, headers_for):
    pho = make_product("Pho bo")
    headers = headers_for("staff")

    r = client.post("/today-menu/items", headers=headers, json={"productId": pho.id, "quantity": 12})
    assert r.status_code == 200
    assert r.json()[0]["quantity"] == 12

    r = client.post("/today-menu/items", headers=headers, json=[{"productId": pho.id}])
    assert r.status_code == 400
    body = r.json()
    assert body["code"] == "DUPLICATE_KEY"
    assert body["details"] == {"name": "Pho bo"}


def test_update_quantity_moves_total_quantity(client, make_product, headers_for):
    pho = make_product(quantity=30)
    headers = headers_for("staff")
    item = client.post("/today-menu/items", headers=headers, json={"productId": pho.id}).json()[0]

    r = client.patch(f"/today-menu/items/{item['id']}", headers=headers, json={"quantity": 20})
    assert r.status_code == 200
    assert r.json()["quantity"] == 20
    assert r.json()["total_quantity"] == 20

    r = client.patch(f"/today-menu/items/{item['id']}", headers=headers, json={"quantity": 25, "price": "50000"})
    assert r.json()["quantity"] == 25
    assert r.json()["total_quantity"] == 25
    assert Decimal(r.json()["price"]) == Decimal("50000")


def test_update_and_delete_missing_item(client, headers_for):
    headers = headers_for("staff")
    assert client.patch("/today-menu/items/42", headers=headers, json={"quantity": 1}).status_code == 404
    assert client.delete("/today-menu/items/42", headers=headers).status_code == 404


def test_delete_item_and_menu(client, make_product, headers_for, db_session):
    pho = make_product("Pho bo")
    tea = make_product("Tra da")
    headers = headers_for("staff")
    items = client.post("/today-menu/", headers=headers, json=[{"productId": pho.id}, {"productId": tea.id}]).json()

    assert client.delete(f"/today-menu/items/{items[0]['id']}", headers=headers).status_code == 204
    assert db_session.query(TodayMenuItem).count() == 1

    assert client.delete("/today-menu/", headers=headers).status_code == 204
    assert db_session.query(TodayMenuItem).count() == 0

    r = client.delete("/today-menu/", headers=headers)
    assert r.status_code == 400
    assert r.json()["code"] == "NOT_FOUND"


def test_close_menu_reconciles_products_and_writes_history(client, make_product, headers_for, db_session):
    pho = make_product("Pho bo", price=45000, quantity=30, category="food")
    tea = make_product("Tra da", price=5000, quantity=100, category="beverage")
    headers = headers_for("staff")
    items = client.post("/today-menu/", headers=headers, json=[
        {"productId": pho.id, "quantity": 10},
        {"productId": tea.id, "quantity": 50},
    ]).json()
    by_product = {item["product_id"]: item for item in items}
    client.patch(f"/today-menu/items/{by_product[pho.id]['id']}", headers=headers, json={"quantity": 4})
    client.patch(f"/today-menu/items/{by_product[tea.id]['id']}", headers=headers, json={"quantity": 45})

    r = client.post("/today-menu/close", headers=headers)
    assert r.status_code == 200
    history = r.json()
    remaining = {entry["product_id"]: entry for entry in history["items"]}
    assert remaining[pho.id]["remain_quantity"] == 4
    assert remaining[pho.id]["total_quantity"] == 4
    assert remaining[tea.id]["remain_quantity"] == 45
    assert Decimal(remaining[tea.id]["price"]) == Decimal("5000")

    db_session.expire_all()
    # Leftover food is discarded, drinks go back on the shelf
    assert db_session.get(Product, pho.id).quantity == 0
    assert db_session.get(Product, tea.id).quantity == 45
    assert db_session.query(TodayMenuItem).count() == 0
    assert db_session.query(MenuHistory).count() == 1


def test_close_skips_deleted_products(client, make_product, headers_for, db_session):
    pho = make_product("Pho bo")
    tea = make_product("Tra da", category="beverage", quantity=10)
    headers = headers_for("staff")
    client.post("/today-menu/", headers=headers, json=[{"productId": pho.id}, {"productId": tea.id}])
    assert client.delete(f"/products/{pho.id}", headers=headers).status_code == 204

    r = client.post("/today-menu/close", headers=headers)
    assert r.status_code == 200
    assert len(r.json()["items"]) == 2
    db_session.expire_all()
    assert db_session.get(Product, tea.id).quantity == 10


def test_close_without_menu(client, headers_for):
    r = client.post("/today-menu/close", headers=headers_for("staff"))
    assert r.status_code == 400
    assert r.json()["code"] == "NOT_FOUND"


def test_menu_histories(client, make_product, headers_for):
    staff = headers_for("staff")
    for name in ("Pho bo", "Banh mi"):
        product = make_product(name)
        client.post("/today-menu/", headers=staff, json=[{"productId": product.id}])
        client.post("/today-menu/close", headers=staff)

    r = client.get("/menu-histories/", headers=headers_for("cashier"))
    assert r.status_code == 200
    assert r.headers["X-Total-Count"] == "2"
    latest = r.json()[0]

    r = client.get(f"/menu-histories/{latest['id']}", headers=staff)
    assert r.status_code == 200
    assert r.json()["id"] == latest["id"]

    assert client.get("/menu-histories/", headers=headers_for("customer")).status_code == 403
    assert client.get("/menu-histories/999", headers=staff).status_code == 404

from bson import ObjectId
from fastapi.testclient import TestClient

from conftest import DEFAULT_PASSWORD, run
from main import app

ADDRESS = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "addressLine1": "12 Analytical Row",
    "city": "London",
    "state": "London",
    "country": "UK",
    "postalCode": "N1 9GU",
}


def addresses_url(user):
    return f"/api/customer/users/{user['_id']}/delivery-addresses"


def test_register_login_order_and_history(restaurant):
    client = TestClient(app)
    register = client.post("/api/customer/register", json={
        "firstName": "A",
        "lastName": "X",
        "emailId": "a@x.com",
        "password": DEFAULT_PASSWORD,
        "role": "customer",
    })
    assert register.status_code == 200
    user_id = register.json()["data"]["id"]

    client.cookies.clear()
    login = client.post("/api/customer/login", json={"emailId": "a@x.com", "password": DEFAULT_PASSWORD})
    assert login.status_code == 200
    assert "token" in login.cookies

    placed = client.post("/api/customer/orders", json={
        "restaurantId": str(restaurant["_id"]),
        "items": [{"itemId": "m1", "quantity": 2}],
    })
    assert placed.status_code == 201
    order = placed.json()["order"]
    assert order["status"] == "preparing"
    assert order["orderStatus"] == "preparing"
    assert order["userId"] == user_id

    history = client.get("/api/customer/orders/history")
    assert history.status_code == 200
    assert [o["id"] for o in history.json()] == [order["id"]]


def test_register_rejects_non_customer_role(client):
    response = client.post("/api/customer/register", json={
        "firstName": "A",
        "lastName": "X",
        "emailId": "a@x.com",
        "password": DEFAULT_PASSWORD,
        "role": "restaurant",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid role"


def test_login_refuses_other_roles(client, owner):
    response = client.post("/api/customer/login", json={"emailId": owner["email_id"], "password": DEFAULT_PASSWORD})
    assert response.status_code == 403
    assert response.json()["detail"] == "Invalid role"


def test_logout_requires_login(client, customer_client):
    assert client.post("/api/customer/logout").status_code == 401
    response = customer_client.post("/api/customer/logout")
    assert response.status_code == 200
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_add_address_requires_every_mandatory_field(customer_client, customer):
    payload = dict(ADDRESS)
    del payload["city"]
    response = customer_client.post(addresses_url(customer), json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required field: city"


def test_only_one_default_address(customer_client, customer, db):
    ids = []
    for _ in range(3):
        response = customer_client.post(addresses_url(customer), json={**ADDRESS, "isDefault": True})
        assert response.status_code == 201
        ids.append(response.json()["address"]["id"])

    defaults = run(db.delivery_addresses.find({"user_id": customer["_id"], "is_default": True}).to_list(None))
    assert [str(a["_id"]) for a in defaults] == [ids[-1]]

    response = customer_client.put(f"{addresses_url(customer)}/{ids[0]}", json={"isDefault": True})
    assert response.status_code == 200
    assert response.json()["address"]["isDefault"] is True

    listed = customer_client.get(addresses_url(customer)).json()
    assert {a["id"]: a["isDefault"] for a in listed} == {ids[0]: True, ids[1]: False, ids[2]: False}


def test_update_address_ignores_blank_values(customer_client, customer, factory):
    address = factory.address(customer)
    response = customer_client.put(f"{addresses_url(customer)}/{address['_id']}", json={"city": "", "state": "Kent"})
    assert response.status_code == 200
    body = response.json()["address"]
    assert body["city"] == "London"
    assert body["state"] == "Kent"


def test_delete_address(customer_client, customer, factory):
    address = factory.address(customer)
    url = f"{addresses_url(customer)}/{address['_id']}"
    assert customer_client.delete(url).status_code == 200
    assert customer_client.delete(url).status_code == 404


def test_cannot_manage_another_customers_addresses(client_for, factory, customer):
    other = client_for(factory.user())
    assert other.get(addresses_url(customer)).status_code == 403
    assert other.post(addresses_url(customer), json=ADDRESS).status_code == 403


def test_admin_may_manage_customer_addresses(admin_client, customer):
    response = admin_client.post(addresses_url(customer), json=ADDRESS)
    assert response.status_code == 201
    assert response.json()["address"]["userId"] == str(customer["_id"])


def test_browse_restaurants(customer_client, factory, owner):
    factory.restaurant(owner, restaurant_name="Zeta")
    factory.restaurant(owner, restaurant_name="Alpha")
    response = customer_client.get("/api/customer/restaurants")
    assert response.status_code == 200
    assert [r["restaurantName"] for r in response.json()] == ["Alpha", "Zeta"]


def test_search_by_menu_item_or_cuisine(customer_client, factory, owner):
    pizza_place = factory.restaurant(owner, cuisine_type="Italian")
    curry_house = factory.restaurant(owner, cuisine_type="Indian")
    factory.restaurant(owner, cuisine_type="Mexican")
    factory.menu_item(pizza_place, item_name="Margherita Pizza")

    by_item = customer_client.get("/api/customer/restaurants/search", params={"query": "pizza"})
    assert [r["id"] for r in by_item.json()] == [str(pizza_place["_id"])]

    by_cuisine = customer_client.get("/api/customer/restaurants/search", params={"filter": "indian"})
    assert [r["id"] for r in by_cuisine.json()] == [str(curry_house["_id"])]

    either = customer_client.get("/api/customer/restaurants/search", params={"query": "pizza", "filter": "indian"})
    assert {r["id"] for r in either.json()} == {str(pizza_place["_id"]), str(curry_house["_id"])}


def test_search_without_match_returns_empty_list(customer_client, restaurant):
    assert customer_client.get("/api/customer/restaurants/search", params={"query": "sushi"}).json() == []
    assert customer_client.get("/api/customer/restaurants/search").json() == []


def test_search_treats_query_as_literal_text(customer_client, restaurant, factory):
    factory.menu_item(restaurant, item_name="Plain Naan")
    response = customer_client.get("/api/customer/restaurants/search", params={"query": ".*"})
    assert response.json() == []


def test_place_order_for_unknown_restaurant(customer_client):
    response = customer_client.post("/api/customer/orders", json={
        "restaurantId": str(ObjectId()),
        "items": [{"itemId": "m1", "quantity": 1}],
    })
    assert response.status_code == 404
    assert response.json()["detail"] == "Restaurant not found"


def test_place_order_needs_items(customer_client, restaurant):
    response = customer_client.post("/api/customer/orders", json={"restaurantId": str(restaurant["_id"]), "items": []})
    assert response.status_code == 400


def test_place_order_with_someone_elses_address(customer_client, restaurant, factory):
    address = factory.address(factory.user())
    response = customer_client.post("/api/customer/orders", json={
        "restaurantId": str(restaurant["_id"]),
        "items": [{"itemId": "m1", "quantity": 1}],
        "deliveryAddressId": str(address["_id"]),
    })
    assert response.status_code == 404


def test_only_customers_place_orders(owner_client, restaurant):
    response = owner_client.post("/api/customer/orders", json={
        "restaurantId": str(restaurant["_id"]),
        "items": [{"itemId": "m1", "quantity": 1}],
    })
    assert response.status_code == 403


def test_history_only_contains_own_orders(customer_client, customer, factory, restaurant):
    mine = factory.order(customer, restaurant)
    factory.order(factory.user(), restaurant)
    history = customer_client.get("/api/customer/orders/history").json()
    assert [o["id"] for o in history] == [str(mine["_id"])]


def test_track_order(customer_client, customer, factory, restaurant):
    order = factory.order(customer, restaurant, order_status="OutForDelivery")
    response = customer_client.get(f"/api/customer/orders/{order['_id']}/track")
    assert response.status_code == 200
    assert response.json() == {"status": "OutForDelivery"}


def test_track_someone_elses_order_is_not_found(customer_client, factory, restaurant):
    order = factory.order(factory.user(), restaurant)
    response = customer_client.get(f"/api/customer/orders/{order['_id']}/track")
    assert response.status_code == 404


def test_track_with_malformed_id(customer_client):
    response = customer_client.get("/api/customer/orders/not-an-id/track")
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid order id"

"""Integration tests for the admin customer pages."""

from decimal import Decimal

from conftest import auth_headers, make_address, make_product


def _order_as(client, user, db):
    address = make_address(db, user, is_default=True)
    product = make_product(db, name="Rice", price="1500.00")
    headers = auth_headers(user)
    client.post("/cart/add", json={"product_id": product.id, "quantity": 2}, headers=headers)
    return client.post(
        "/order/placeOrder",
        json={"addressId": address.id, "paymentType": "cash"},
        headers=headers,
    ).json()["order"]


def test_only_admins_see_customers(client, customer, seller):
    assert client.get("/customers").status_code == 401
    assert client.get("/customers", headers=auth_headers(customer)).status_code == 403
    assert client.get("/customers", headers=auth_headers(seller)).status_code == 403


def test_list_customers(client, db, customer, admin):
    _order_as(client, customer, db)

    body = client.get("/customers", headers=auth_headers(admin)).json()
    assert body["totalCustomers"] == 1
    row = body["customers"][0]
    assert row["email"] == "jane@example.com"
    assert row["ordersCount"] == 1
    assert Decimal(row["spent"]) == Decimal("3000.00")
    assert row["lastOrder"] is not None


def test_customer_details_and_orders(client, db, customer, admin):
    order = _order_as(client, customer, db)
    headers = auth_headers(admin)

    details = client.get(f"/customers/{customer.id}", headers=headers).json()
    assert details["full_name"] == customer.full_name
    assert [a["city"] for a in details["addresses"]] == ["Kigali"]

    orders = client.get(f"/customers/{customer.id}/orders", headers=headers).json()
    assert [o["id"] for o in orders["orders"]] == [order["id"]]
    assert orders["pagination"]["totalOrders"] == 1


def test_unknown_customer(client, admin):
    headers = auth_headers(admin)
    assert client.get("/customers/999", headers=headers).status_code == 404
    assert client.get(f"/customers/{admin.id}/orders", headers=headers).status_code == 404

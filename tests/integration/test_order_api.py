"""Integration tests for order, webhook and notification endpoints."""

from decimal import Decimal

import pytest

from conftest import auth_headers, make_address, make_product
from grocery.data.models.order import OrderModel


@pytest.fixture()
def headers(customer):
    return auth_headers(customer)


@pytest.fixture()
def staff_headers(seller):
    return auth_headers(seller)


@pytest.fixture()
def address(db, customer):
    return make_address(db, customer, is_default=True)


@pytest.fixture()
def cart(client, headers, db):
    product = make_product(db, name="Tomatoes", price="1200.00", offer_price="1000.00")
    client.post("/cart/add", json={"product_id": product.id, "quantity": 3}, headers=headers)
    return product


def _place(client, headers, address, payment_type="cash"):
    return client.post(
        "/order/placeOrder",
        json={"addressId": address.id, "paymentType": payment_type},
        headers=headers,
    )


class TestPlaceOrderEndpoint:
    def test_cash(self, client, headers, address, cart):
        response = _place(client, headers, address)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["paymentUrl"] is None
        assert body["order"]["payment_status"] == "pending"
        assert Decimal(body["order"]["amount"]) == Decimal("3000.00")
        assert body["order"]["items"][0]["product_name"] == "Tomatoes"
        assert Decimal(body["order"]["items"][0]["subtotal"]) == Decimal("3000.00")

    def test_online_returns_payment_url(self, client, headers, address, cart):
        body = _place(client, headers, address, payment_type="online").json()
        assert body["paymentUrl"].startswith("https://")
        assert body["order"]["payment_status"] == "pending"

    def test_gateway_down_is_502_and_nothing_saved(self, client, headers, address, cart, gateway, db):
        gateway.configure(should_succeed=False)
        response = _place(client, headers, address, payment_type="online")
        assert response.status_code == 502
        assert db.query(OrderModel).count() == 0
        assert len(client.get("/cart", headers=headers).json()["items"]) == 1

    def test_empty_cart_is_400(self, client, headers, address):
        response = _place(client, headers, address)
        assert response.status_code == 400
        assert response.json()["message"] == "Cart is empty"

    def test_missing_payment_type_is_400(self, client, headers, address, cart):
        response = client.post("/order/placeOrder", json={"addressId": address.id}, headers=headers)
        assert response.status_code == 400


class TestCustomerOrderEndpoints:
    def test_list_and_details(self, client, headers, address, cart):
        order_id = _place(client, headers, address).json()["order"]["id"]

        listed = client.get("/order/getUserOrders", headers=headers).json()
        assert [o["id"] for o in listed["orders"]] == [order_id]
        assert listed["pagination"]["totalOrders"] == 1
        assert listed["pagination"]["hasNextPage"] is False

        details = client.get(f"/order/getOrderDetails/{order_id}", headers=headers)
        assert details.status_code == 200

    def test_cancel(self, client, headers, address, cart):
        order_id = _place(client, headers, address).json()["order"]["id"]
        response = client.put(f"/order/cancelOrder/{order_id}", headers=headers)
        assert response.json()["status"] == "cancelled"

    def test_customer_blocked_from_admin_routes(self, client, headers):
        assert client.get("/order/getAllOrders", headers=headers).status_code == 403
        assert client.get("/order/getOrderStatistics", headers=headers).status_code == 403
        assert client.get("/order/notifications", headers=headers).status_code == 403


class TestStaffEndpoints:
    def test_status_lifecycle_and_rejected_rollback(self, client, headers, staff_headers, address, cart):
        order_id = _place(client, headers, address).json()["order"]["id"]

        for status in ("processing", "shipped", "delivered"):
            response = client.put(
                f"/order/updateOrderStatus/{order_id}", json={"status": status}, headers=staff_headers
            )
            assert response.status_code == 200
            assert response.json()["status"] == status

        response = client.put(f"/order/updateOrderStatus/{order_id}", json={"status": "pending"}, headers=staff_headers)
        assert response.status_code == 400

    def test_confirm_cash_payment(self, client, headers, staff_headers, address, cart):
        order_id = _place(client, headers, address).json()["order"]["id"]
        response = client.put(f"/order/confirmCashPayment/{order_id}", headers=staff_headers)
        assert response.json()["payment_status"] == "completed"

    def test_confirm_cash_on_online_is_400(self, client, headers, staff_headers, address, cart):
        order_id = _place(client, headers, address, payment_type="online").json()["order"]["id"]
        response = client.put(f"/order/confirmCashPayment/{order_id}", headers=staff_headers)
        assert response.status_code == 400

    def test_all_orders_search(self, client, headers, staff_headers, address, cart):
        _place(client, headers, address)
        body = client.get("/order/getAllOrders", params={"search": "jane"}, headers=staff_headers).json()
        assert body["pagination"]["totalOrders"] == 1
        body = client.get("/order/getAllOrders", params={"search": "zzz"}, headers=staff_headers).json()
        assert body["orders"] == []

    def test_admin_details_and_statistics(self, client, headers, staff_headers, address, cart):
        order_id = _place(client, headers, address).json()["order"]["id"]

        details = client.get(f"/order/admin/getOrderDetails/{order_id}", headers=staff_headers)
        assert details.json()["user_email"] == "jane@example.com"

        stats = client.get("/order/getOrderStatistics", headers=staff_headers).json()
        assert stats["totalOrders"] == 1
        assert stats["statusCounts"]["pending"] == 1
        assert Decimal(stats["totalRevenue"]) == Decimal("3000.00")
        assert stats["dailyStats"][0]["orders"] == 1

    def test_notifications_flow(self, client, headers, staff_headers, address, cart):
        _place(client, headers, address)

        page = client.get("/order/notifications", headers=staff_headers).json()
        assert page["total"] == 1
        assert page["unread"] == 1
        note_id = page["notifications"][0]["id"]

        marked = client.put(f"/order/notifications/{note_id}/read", headers=staff_headers)
        assert marked.json()["is_read"] is True

        cleared = client.delete("/order/notifications/clear-read", headers=staff_headers).json()
        assert cleared["deleted"] == 1
        assert client.get("/order/notifications", headers=staff_headers).json()["total"] == 0


class TestWebhookEndpoint:
    def _online_order(self, client, headers, address):
        return _place(client, headers, address, payment_type="online").json()["order"]

    def test_success(self, client, headers, address, cart):
        order = self._online_order(client, headers, address)
        response = client.post(
            "/order/flw-webhook",
            json={"event": "charge.completed", "data": {"id": 555, "tx_ref": order["tx_ref"]}},
            headers={"verif-hash": "test-signature"},
        )
        assert response.status_code == 200
        assert response.json()["outcome"] == "completed"

        details = client.get(f"/order/getOrderDetails/{order['id']}", headers=headers).json()
        assert details["payment_status"] == "completed"
        assert details["status"] == "processing"

    def test_bad_signature_is_401(self, client, headers, address, cart):
        order = self._online_order(client, headers, address)
        response = client.post(
            "/order/flw-webhook",
            json={"event": "charge.completed", "data": {"id": 555, "tx_ref": order["tx_ref"]}},
            headers={"verif-hash": "forged"},
        )
        assert response.status_code == 401

    def test_unknown_reference_is_404(self, client):
        response = client.post(
            "/order/flw-webhook",
            json={"event": "charge.completed", "data": {"id": 1, "tx_ref": "ORDER-0-0"}},
            headers={"verif-hash": "test-signature"},
        )
        assert response.status_code == 404

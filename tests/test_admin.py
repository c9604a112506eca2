"""Tests for the admin console."""

import pytest

ADMIN = "/api/v1/admin"


@pytest.fixture
def admin(auth, data):
    return auth(data.admin_id)


@pytest.fixture
def orders(client, auth, data):
    """Two orders for the seeded buyer, the second one cancelled."""
    buyer = auth(data.buyer_id)
    ids = []
    for slug in ("block-print-saree", "kids-cotton-tee"):
        client.post("/api/v1/cart/items", json={"product_id": data.products[slug]}, headers=buyer)
        resp = client.post("/api/v1/orders/checkout", json={"address_id": data.address_id, "payment_method": "card"}, headers=buyer)
        ids.append(resp.get_json()["data"]["order_id"])
    client.post(f"/api/v1/orders/{ids[1]}/cancel", headers=buyer)
    return ids


class TestAccess:
    @pytest.mark.parametrize("role", ["buyer_id", "seller_id"])
    def test_non_admins_are_forbidden(self, client, auth, data, role):
        resp = client.get(f"{ADMIN}/dashboard", headers=auth(getattr(data, role)))
        assert resp.status_code == 403


class TestDashboard:
    def test_counts_and_revenue(self, client, admin, orders):
        dashboard = client.get(f"{ADMIN}/dashboard", headers=admin).get_json()["data"]
        assert dashboard["user_count"] == 3
        assert dashboard["seller_count"] == 1
        assert dashboard["shop_count"] == 1
        assert dashboard["product_count"] == 5
        assert dashboard["order_count"] == 2
        assert dashboard["orders_by_status"] == {"confirmed": 1, "cancelled": 1}
        assert dashboard["revenue_paise"] == 249900
        assert [o["id"] for o in dashboard["recent_orders"]] == list(reversed(orders))


class TestOrders:
    def test_list_all(self, client, admin, orders):
        page = client.get(f"{ADMIN}/orders", headers=admin).get_json()["data"]
        assert len(page["items"]) == 2

    def test_filter_by_status(self, client, admin, orders):
        page = client.get(f"{ADMIN}/orders?status=cancelled", headers=admin).get_json()["data"]
        assert [o["id"] for o in page["items"]] == [orders[1]]

    def test_unknown_status_filter(self, client, admin, orders):
        assert client.get(f"{ADMIN}/orders?status=lost", headers=admin).status_code == 400

    def test_update_status(self, client, admin, orders):
        resp = client.post(f"{ADMIN}/orders/{orders[0]}/status", json={"status": "shipped"}, headers=admin)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["status"] == "shipped"

    def test_terminal_order_cannot_move(self, client, admin, orders):
        resp = client.post(f"{ADMIN}/orders/{orders[1]}/status", json={"status": "confirmed"}, headers=admin)
        assert resp.status_code == 409

    def test_invalid_status_body(self, client, admin, orders):
        resp = client.post(f"{ADMIN}/orders/{orders[0]}/status", json={"status": "teleported"}, headers=admin)
        assert resp.status_code == 400

    def test_missing_order(self, client, admin, data):
        resp = client.post(f"{ADMIN}/orders/424242/status", json={"status": "shipped"}, headers=admin)
        assert resp.status_code == 404


class TestProductsAndShops:
    def test_deactivate_and_feature(self, client, admin, data):
        tote = data.products["jute-tote-bag"]
        resp = client.patch(f"{ADMIN}/products/{tote}", json={"is_active": False, "is_featured": True}, headers=admin)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["is_active"] is False

        inactive = client.get(f"{ADMIN}/products?status=inactive", headers=admin).get_json()["data"]
        assert [p["id"] for p in inactive] == [tote]
        featured = client.get(f"{ADMIN}/products?status=featured", headers=admin).get_json()["data"]
        assert len(featured) == 3

    def test_list_all_products(self, client, admin, data):
        assert len(client.get(f"{ADMIN}/products", headers=admin).get_json()["data"]) == 5

    def test_unknown_product_filter(self, client, admin, data):
        assert client.get(f"{ADMIN}/products?status=sold_out", headers=admin).status_code == 400

    def test_verify_shop(self, client, auth, admin, make_user):
        seller = auth(make_user(role="seller"))
        shop = client.post("/api/v1/seller/shop", json={"name": "New Weaves"}, headers=seller).get_json()["data"]
        assert shop["is_verified"] is False

        resp = client.post(f"{ADMIN}/shops/{shop['id']}/verify", headers=admin)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["is_verified"] is True

    def test_verify_missing_shop(self, client, admin, data):
        assert client.post(f"{ADMIN}/shops/424242/verify", headers=admin).status_code == 404

"""Tests for the cart and wishlist endpoints."""

import pytest

CART = "/api/v1/cart"


@pytest.fixture
def buyer(auth, data):
    return auth(data.buyer_id)


def add(client, headers, product_id, **body):
    return client.post(f"{CART}/items", json={"product_id": product_id, **body}, headers=headers)


class TestAddToCart:
    def test_same_variant_merges_into_one_line(self, client, buyer, data):
        kurta = data.products["linen-kurta"]
        add(client, buyer, kurta, size="M", color="white")
        resp = add(client, buyer, kurta, size="M", color="white", quantity=2)

        assert resp.status_code == 201
        items = resp.get_json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 3

    def test_different_size_is_a_separate_line(self, client, buyer, data):
        kurta = data.products["linen-kurta"]
        add(client, buyer, kurta, size="M")
        resp = add(client, buyer, kurta, size="L")
        assert len(resp.get_json()["data"]["items"]) == 2

    def test_unknown_size_rejected(self, client, buyer, data):
        resp = add(client, buyer, data.products["linen-kurta"], size="XXXL")
        assert resp.status_code == 400
        assert resp.get_json()["error"]["details"]["field_errors"][0]["field"] == "size"

    def test_cannot_exceed_stock(self, client, buyer, data):
        resp = add(client, buyer, data.products["jute-tote-bag"], quantity=4)
        assert resp.status_code == 400
        assert "stock" in resp.get_json()["error"]["message"]

    def test_merged_quantity_checked_against_stock(self, client, buyer, data):
        tote = data.products["jute-tote-bag"]
        assert add(client, buyer, tote, quantity=2).status_code == 201
        assert add(client, buyer, tote, quantity=2).status_code == 400

    def test_quantity_above_limit_fails_body_validation(self, client, buyer, data):
        resp = add(client, buyer, data.products["kids-cotton-tee"], quantity=11)
        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"
        assert "quantity" in resp.get_json()["error"]["details"]["field_errors"]

    def test_missing_product_id(self, client, buyer, data):
        resp = client.post(f"{CART}/items", json={"quantity": 1}, headers=buyer)
        assert resp.status_code == 400

    def test_unknown_product(self, client, buyer, data):
        assert add(client, buyer, 999999).status_code == 404

    def test_inactive_product(self, client, buyer, make_product):
        hidden = make_product(10000, is_active=False)
        assert add(client, buyer, hidden).status_code == 404


class TestCartSummary:
    def test_empty_cart(self, client, buyer):
        data = client.get(CART, headers=buyer).get_json()["data"]
        assert data["is_empty"] is True
        assert data["summary"]["total_paise"] == 0
        assert data["summary"]["shipping_paise"] == 0
        assert data["summary"]["amount_to_free_shipping_paise"] == 0

    def test_summary_below_threshold(self, client, buyer, data):
        add(client, buyer, data.products["kids-cotton-tee"])
        summary = client.get(CART, headers=buyer).get_json()["data"]["summary"]

        assert summary["subtotal_paise"] == 49900
        assert summary["shipping_paise"] == 9900
        assert summary["total_paise"] == 59800
        assert summary["discount_paise"] == 10000
        assert summary["amount_to_free_shipping_paise"] == 50001

    def test_summary_above_threshold(self, client, buyer, data):
        add(client, buyer, data.products["block-print-saree"])
        summary = client.get(CART, headers=buyer).get_json()["data"]["summary"]
        assert summary["free_shipping"] is True
        assert summary["total_paise"] == 249900


class TestChangeCart:
    def test_update_quantity(self, client, buyer, data):
        item = add(client, buyer, data.products["kids-cotton-tee"]).get_json()["data"]["items"][0]
        resp = client.patch(f"{CART}/items/{item['cart_item_id']}", json={"quantity": 4}, headers=buyer)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["items"][0]["quantity"] == 4

    def test_quantity_zero_removes_line(self, client, buyer, data):
        item = add(client, buyer, data.products["kids-cotton-tee"]).get_json()["data"]["items"][0]
        resp = client.patch(f"{CART}/items/{item['cart_item_id']}", json={"quantity": 0}, headers=buyer)
        assert resp.get_json()["message"] == "Item removed from cart."
        assert resp.get_json()["data"]["is_empty"] is True

    def test_delete_line(self, client, buyer, data):
        item = add(client, buyer, data.products["kids-cotton-tee"]).get_json()["data"]["items"][0]
        resp = client.delete(f"{CART}/items/{item['cart_item_id']}", headers=buyer)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["items"] == []

    def test_other_users_line_is_not_found(self, client, buyer, auth, data, make_user):
        item = add(client, buyer, data.products["kids-cotton-tee"]).get_json()["data"]["items"][0]
        stranger = auth(make_user())
        resp = client.patch(f"{CART}/items/{item['cart_item_id']}", json={"quantity": 2}, headers=stranger)
        assert resp.status_code == 404
        assert client.delete(f"{CART}/items/{item['cart_item_id']}", headers=stranger).status_code == 404

    def test_move_to_wishlist(self, client, buyer, data):
        tee = data.products["kids-cotton-tee"]
        item = add(client, buyer, tee).get_json()["data"]["items"][0]

        resp = client.post(f"{CART}/items/{item['cart_item_id']}/move-to-wishlist", headers=buyer)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["cart"]["is_empty"] is True

        wishlist = client.get("/api/v1/wishlist", headers=buyer).get_json()["data"]
        assert [w["product"]["id"] for w in wishlist] == [tee]


class TestWishlist:
    def test_toggle_adds_then_removes(self, client, buyer, data):
        saree = data.products["block-print-saree"]
        first = client.post("/api/v1/wishlist/toggle", json={"product_id": saree}, headers=buyer)
        assert first.get_json()["data"]["action"] == "added"
        assert len(client.get("/api/v1/wishlist", headers=buyer).get_json()["data"]) == 1

        second = client.post("/api/v1/wishlist/toggle", json={"product_id": saree}, headers=buyer)
        assert second.get_json()["data"]["action"] == "removed"
        assert client.get("/api/v1/wishlist", headers=buyer).get_json()["data"] == []

    def test_unknown_product(self, client, buyer, data):
        resp = client.post("/api/v1/wishlist/toggle", json={"product_id": 999999}, headers=buyer)
        assert resp.status_code == 404

    def test_wishlists_are_per_user(self, client, buyer, auth, data, make_user):
        client.post("/api/v1/wishlist/toggle", json={"product_id": data.products["denim-jacket"]}, headers=buyer)
        other = client.get("/api/v1/wishlist", headers=auth(make_user())).get_json()["data"]
        assert other == []

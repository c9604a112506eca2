"""Tests for the address book."""

import pytest

ADDRESSES = "/api/v1/addresses"

NEW_ADDRESS = {
    "full_name": "Priya Buyer",
    "phone": "+91 98200 11111",
    "address_line_1": "22 Residency Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postal_code": "560025",
}


@pytest.fixture
def buyer(auth, data):
    return auth(data.buyer_id)


def defaults(client, headers):
    return [a["id"] for a in client.get(ADDRESSES, headers=headers).get_json()["data"] if a["is_default"]]


class TestAddressBook:
    def test_list_puts_default_first(self, client, buyer, data):
        client.post(ADDRESSES, json=NEW_ADDRESS, headers=buyer)
        listed = client.get(ADDRESSES, headers=buyer).get_json()["data"]
        assert listed[0]["id"] == data.address_id
        assert listed[0]["is_default"] is True
        assert listed[1]["is_default"] is False

    def test_first_address_becomes_default(self, client, auth, make_user):
        headers = auth(make_user())
        resp = client.post(ADDRESSES, json=NEW_ADDRESS, headers=headers)
        assert resp.status_code == 201
        assert resp.get_json()["data"]["is_default"] is True

    def test_new_default_clears_old_one(self, client, buyer, data):
        created = client.post(ADDRESSES, json={**NEW_ADDRESS, "is_default": True}, headers=buyer).get_json()["data"]
        assert defaults(client, buyer) == [created["id"]]

    def test_set_default(self, client, buyer, data):
        created = client.post(ADDRESSES, json=NEW_ADDRESS, headers=buyer).get_json()["data"]
        resp = client.post(f"{ADDRESSES}/{created['id']}/default", headers=buyer)
        assert resp.status_code == 200
        assert defaults(client, buyer) == [created["id"]]

    def test_deleting_default_promotes_remaining(self, client, buyer, data):
        created = client.post(ADDRESSES, json=NEW_ADDRESS, headers=buyer).get_json()["data"]
        resp = client.delete(f"{ADDRESSES}/{data.address_id}", headers=buyer)
        assert resp.status_code == 200
        assert defaults(client, buyer) == [created["id"]]

    def test_partial_update(self, client, buyer, data):
        resp = client.put(f"{ADDRESSES}/{data.address_id}", json={"city": "Navi Mumbai"}, headers=buyer)
        assert resp.status_code == 200
        updated = resp.get_json()["data"]
        assert updated["city"] == "Navi Mumbai"
        assert updated["postal_code"] == "400050"
        assert updated["is_default"] is True

    def test_invalid_phone(self, client, buyer):
        resp = client.post(ADDRESSES, json={**NEW_ADDRESS, "phone": "call me"}, headers=buyer)
        assert resp.status_code == 400
        assert "phone" in resp.get_json()["error"]["details"]["field_errors"]

    def test_missing_required_fields(self, client, buyer):
        resp = client.post(ADDRESSES, json={"full_name": "Only Name"}, headers=buyer)
        assert resp.status_code == 400

    def test_foreign_address_is_not_found(self, client, auth, data, make_user):
        stranger = auth(make_user())
        assert client.put(f"{ADDRESSES}/{data.address_id}", json={"city": "X"}, headers=stranger).status_code == 404
        assert client.delete(f"{ADDRESSES}/{data.address_id}", headers=stranger).status_code == 404
        assert client.post(f"{ADDRESSES}/{data.address_id}/default", headers=stranger).status_code == 404

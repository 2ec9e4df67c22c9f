"""Tests for the product and delivery endpoints."""

from __future__ import annotations

import pytest
from flask.testing import FlaskClient

PRODUCT_PAYLOAD = {
    "productName": "Tea crates",
    "quantity": "12",
    "weight": 40.5,
    "cost": 120,
    "fromLocation": "Pune",
    "toLocation": "Mumbai",
}


def _account(client: FlaskClient, email: str, role: str) -> dict[str, str]:
    response = client.post(
        "/api/auth/register",
        json={
            "name": email.split("@")[0].title(),
            "email": email,
            "password": "secret1",
            "phone": "9999999999",
            "userType": role,
        },
    )
    assert response.status_code == 201, response.get_json()
    return {"Authorization": f"Bearer {response.get_json()['accessToken']}"}


@pytest.fixture()
def owner(client: FlaskClient) -> dict[str, str]:
    return _account(client, "owner@x.com", "entrepreneur")


@pytest.fixture()
def courier(client: FlaskClient) -> dict[str, str]:
    return _account(client, "courier@x.com", "delivery")


def _create_product(client: FlaskClient, headers: dict[str, str], **overrides) -> dict:
    response = client.post("/api/products", json=dict(PRODUCT_PAYLOAD, **overrides), headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["product"]


def _accept(client: FlaskClient, headers: dict[str, str], product_id: str, price=90):
    return client.post(
        f"/api/deliveries/accept/{product_id}", json={"offeredPrice": price}, headers=headers
    )


def test_create_product(client: FlaskClient, owner):
    product = _create_product(client, owner)

    assert product["status"] == "Pending"
    assert product["entrepreneurName"] == "Owner"
    assert product["currentLocation"] == "Pune"
    assert product["cost"] == 120.0
    assert product["deliveryPartnerId"] is None


def test_create_product_requires_entrepreneur(client: FlaskClient, courier):
    response = client.post("/api/products", json=PRODUCT_PAYLOAD, headers=courier)

    assert response.status_code == 403
    assert response.get_json()["message"] == "Only entrepreneurs can create products"


def test_create_product_requires_token(client: FlaskClient):
    response = client.post("/api/products", json=PRODUCT_PAYLOAD)

    assert response.status_code == 401


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"toLocation": ""}, "All fields are required"),
        ({"weight": "heavy"}, "weight must be numeric"),
        ({"cost": -5}, "cost must be greater than zero"),
    ],
)
def test_create_product_validation(client: FlaskClient, owner, overrides, message):
    response = client.post("/api/products", json=dict(PRODUCT_PAYLOAD, **overrides), headers=owner)

    assert response.status_code == 400
    assert response.get_json()["message"] == message


def test_my_products_lists_only_own(client: FlaskClient, owner):
    other = _account(client, "other@x.com", "entrepreneur")
    _create_product(client, owner)
    _create_product(client, other, productName="Rice")

    response = client.get("/api/products/my-products", headers=owner)

    assert response.status_code == 200
    names = [product["productName"] for product in response.get_json()]
    assert names == ["Tea crates"]


def test_product_visibility(client: FlaskClient, owner, courier):
    product = _create_product(client, owner)
    other = _account(client, "other@x.com", "entrepreneur")

    assert client.get(f"/api/products/{product['id']}", headers=owner).status_code == 200
    assert client.get(f"/api/products/{product['id']}", headers=courier).status_code == 200
    assert client.get(f"/api/products/{product['id']}", headers=other).status_code == 403
    assert client.get("/api/products/unknown", headers=owner).status_code == 404

    assert _accept(client, courier, product["id"]).status_code == 200
    rival = _account(client, "rival@x.com", "delivery")
    assert client.get(f"/api/products/{product['id']}", headers=rival).status_code == 403
    assert client.get(f"/api/products/{product['id']}", headers=courier).status_code == 200


def test_available_and_accept(client: FlaskClient, owner, courier):
    product = _create_product(client, owner)

    available = client.get("/api/deliveries/available", headers=courier)
    assert [item["id"] for item in available.get_json()] == [product["id"]]
    assert client.get("/api/deliveries/available", headers=owner).status_code == 403

    response = _accept(client, courier, product["id"])
    assert response.status_code == 200
    accepted = response.get_json()["product"]
    assert accepted["status"] == "Accepted"
    assert accepted["deliveryPartnerName"] == "Courier"
    assert accepted["deliveryPartnerPrice"] == 90.0

    assert client.get("/api/deliveries/available", headers=courier).get_json() == []
    mine = client.get("/api/deliveries/my-deliveries", headers=courier).get_json()
    assert [item["id"] for item in mine] == [product["id"]]


def test_second_acceptance_is_rejected(client: FlaskClient, owner, courier):
    product = _create_product(client, owner)
    rival = _account(client, "rival@x.com", "delivery")

    assert _accept(client, courier, product["id"]).status_code == 200
    response = _accept(client, rival, product["id"], price=80)

    assert response.status_code == 400
    mine = client.get("/api/deliveries/my-deliveries", headers=rival).get_json()
    assert mine == []


@pytest.mark.parametrize("price", [None, 0, -1, "cheap"])
def test_accept_requires_positive_price(client: FlaskClient, owner, courier, price):
    product = _create_product(client, owner)

    response = _accept(client, courier, product["id"], price=price)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Valid offered price is required"


def test_accept_requires_delivery_role(client: FlaskClient, owner):
    product = _create_product(client, owner)

    response = _accept(client, owner, product["id"])

    assert response.status_code == 403
    assert response.get_json()["message"] == "Only delivery partners can accept deliveries"


def test_delivery_status_updates(client: FlaskClient, owner, courier):
    product = _create_product(client, owner)
    _accept(client, courier, product["id"])
    url = f"/api/deliveries/{product['id']}/status"

    response = client.put(url, json={"status": "In Transit", "currentLocation": "Lonavala"}, headers=courier)
    assert response.status_code == 200
    updated = response.get_json()["product"]
    assert updated["status"] == "In Transit"
    assert updated["currentLocation"] == "Lonavala"

    assert client.put(url, json={"status": "Pending"}, headers=courier).status_code == 400
    assert client.put(url, json={"status": "Delivered"}, headers=owner).status_code == 403


def test_owner_can_update_product(client: FlaskClient, owner, courier):
    product = _create_product(client, owner)
    url = f"/api/products/{product['id']}"

    response = client.put(url, json={"status": "Cancelled"}, headers=owner)
    assert response.status_code == 200
    assert response.get_json()["product"]["status"] == "Cancelled"

    assert client.put(url, json={"status": "Lost"}, headers=owner).status_code == 400
    assert client.put(url, json={"status": "Pending"}, headers=courier).status_code == 403


def test_delete_product(client: FlaskClient, owner, courier):
    removable = _create_product(client, owner)
    assigned = _create_product(client, owner, productName="Rice")
    _accept(client, courier, assigned["id"])

    blocked = client.delete(f"/api/products/{assigned['id']}", headers=owner)
    assert blocked.status_code == 400
    assert blocked.get_json()["message"] == "Cannot delete product with assigned delivery partner"

    assert client.delete(f"/api/products/{removable['id']}", headers=courier).status_code == 403
    assert client.delete(f"/api/products/{removable['id']}", headers=owner).status_code == 200
    assert client.get(f"/api/products/{removable['id']}", headers=owner).status_code == 404

"""Integration tests for the order endpoints via TestClient."""

from orderdesk.models import DriverStatus


def _create(client, catalog, **overrides):
    body = {
        "fullName": "A",
        "phone": "555",
        "address": "X",
        "productIDs": [{"id": catalog.shirt_id, "quantity": 2, "size": "M"}],
    }
    body.update(overrides)
    return client.post("/orders/create", json=body)


def test_health(client):
    assert client.get("/").json()["success"] is True


def test_create_order(client, catalog):
    response = _create(client, catalog)

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["status"] == "RECEIVED"
    assert data["fullName"] == "A"
    assert data["formattedDate"] == "2024-01-11"
    assert data["orderProducts"] == [{"productId": catalog.shirt_id, "quantity": 2, "size": "M"}]


def test_create_with_missing_fields_is_400(client, catalog):
    response = _create(client, catalog, phone="")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Required parameters are missing"}


def test_create_with_busy_driver_is_400(client, catalog):
    response = _create(client, catalog, driver=catalog.busy_driver)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_create_with_unknown_product_is_soft_failure(client, catalog):
    response = _create(client, catalog, productIDs=[{"id": 999, "quantity": 1}])

    assert response.status_code == 200
    assert response.json() == {"success": False, "message": "Product 999 wasn't found"}


def test_create_without_quantity_is_400(client, catalog):
    response = _create(client, catalog, productIDs=[{"id": catalog.shirt_id, "size": "M"}])

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Quantity must be a positive number"}


def test_create_with_out_of_range_delivery_date_is_400(client, catalog):
    response = _create(client, catalog, deliveryDate="99999999999999999999")

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"].startswith("Invalid date")
    assert client.get("/orders").json()["data"] == []


def test_malformed_body_uses_envelope(client, catalog):
    response = client.post("/orders/create", json={"productIDs": "nope"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_orders(client, catalog):
    _create(client, catalog)
    _create(client, catalog, fullName="B")

    response = client.get("/orders", params={"take": 1})

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["createdAt"] == "2024-01-11"
    assert data[0]["deliveryDate"] == "2024-01-11"


def test_get_order(client, catalog):
    order_id = _create(client, catalog).json()["data"]["id"]

    response = client.get(f"/orders/{order_id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["formattedDate"] == "10/01/2024"
    assert data["deliveryDate"] == "10/01/2024"
    line = data["orderProducts"][0]
    assert line["quantity"] == 2
    assert line["size"] == "M"
    assert line["product"]["name"] == "Linen shirt"
    assert len(line["product"]["images"]) == 2


def test_get_unknown_order_is_400(client):
    response = client.get("/orders/404")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Order wasn't found"}


def test_complete_order_frees_driver(client, catalog, driver_status):
    order_id = _create(client, catalog, driver=catalog.free_driver).json()["data"]["id"]
    assert driver_status(catalog.free_driver) == DriverStatus.DELIVERY

    response = client.put(f"/orders/{order_id}", json={"status": "COMPLETED"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Order updated successfully"
    assert payload["data"]["status"] == "COMPLETED"
    assert payload["data"]["driver"] is None
    assert driver_status(catalog.free_driver) == DriverStatus.FREE


def test_update_unknown_order_is_soft_failure(client):
    response = client.put("/orders/404", json={"status": "COMPLETED"})

    assert response.status_code == 200
    assert response.json()["success"] is False


def test_update_with_unknown_status_is_400(client, catalog):
    order_id = _create(client, catalog).json()["data"]["id"]

    response = client.put(f"/orders/{order_id}", json={"status": "LOST"})

    assert response.status_code == 400


def test_update_with_out_of_range_delivery_date_is_soft_failure(client, catalog):
    order_id = _create(client, catalog).json()["data"]["id"]

    response = client.put(f"/orders/{order_id}", json={"deliveryDate": 1e18})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"].startswith("Invalid date")
    assert client.get(f"/orders/{order_id}").json()["data"]["deliveryDate"] == "10/01/2024"


def test_delete_order_twice(client, catalog):
    order_id = _create(client, catalog).json()["data"]["id"]

    first = client.delete(f"/orders/{order_id}")
    second = client.delete(f"/orders/{order_id}")

    assert first.status_code == 200
    assert first.json()["message"] == "Order removed"
    assert second.status_code == 400
    assert second.json()["success"] is False

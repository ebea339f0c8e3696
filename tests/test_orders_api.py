from tests.payloads import mock_payload
from tests.sources import FailingSource

MANUAL_ORDER = {
    "platform": "organic",
    "platform_order_id": "ORG-MANUAL-1",
    "order_date": "2024-02-01T09:00:00Z",
    "status": "pending",
    "customer": {"name": "Walk In", "email": "walkin@example.com", "phone": "9999999999"},
    "items": [
        {"product_id": "ORG-9", "name": "Silver Ring", "quantity": 2, "unit_price": 500, "total_price": 1000}
    ],
    "subtotal": 1000,
    "tax": 180,
    "shipping_fee": 50,
    "discount": 30,
    "total": 1200,
    "notes": "Phone order",
    "actor": "staff:1",
}


def test_create_and_get_order(client):
    response = client.post("/orders", json=MANUAL_ORDER)
    assert response.status_code == 201
    order = response.json()
    assert order["order_number"].startswith("ORG-")
    assert order["sync_status"] == "pending"
    assert [h["status"] for h in order["status_history"]] == ["pending"]

    fetched = client.get(f"/orders/{order['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["platform_order_id"] == "ORG-MANUAL-1"


def test_create_duplicate_order(client):
    assert client.post("/orders", json=MANUAL_ORDER).status_code == 201
    response = client.post("/orders", json=MANUAL_ORDER)
    assert response.status_code == 409


def test_create_order_with_inconsistent_total(client):
    response = client.post("/orders", json={**MANUAL_ORDER, "total": 999})
    assert response.status_code == 422


def test_get_missing_order(client):
    assert client.get("/orders/12345").status_code == 404


def test_list_filters(client):
    client.post("/webhooks/trigger-fetch")

    everything = client.get("/orders", params={"limit": 2}).json()
    assert everything["total"] == 5
    assert len(everything["orders"]) == 2
    assert everything["pagination"] == {"skip": 0, "limit": 2, "total": 5}

    by_platform = client.get("/orders/platform/swiggy").json()
    assert [o["platform"] for o in by_platform["orders"]] == ["swiggy"]

    by_status = client.get("/orders", params={"status": "dispatched"}).json()
    assert [o["platform"] for o in by_status["orders"]] == ["amazon"]

    email = mock_payload("blinkit")["customer_email"]
    by_customer = client.get(f"/orders/customer/{email}").json()
    assert [o["platform"] for o in by_customer] == ["blinkit"]

    ascending = client.get("/orders", params={"sort_by": "order_date", "sort_order": "asc"}).json()
    assert ascending["orders"][0]["platform"] == "amazon"


def test_list_rejects_large_limit(client):
    assert client.get("/orders", params={"limit": 500}).status_code == 422


def test_update_status_syncs_platform(client):
    order = client.post("/orders", json=MANUAL_ORDER).json()

    response = client.patch(
        f"/orders/{order['id']}/status",
        json={"status": "confirmed", "notes": "Paid", "actor": "staff:2"}
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "confirmed"
    assert updated["sync_status"] == "synced"
    assert updated["status_history"][-1]["status"] == "confirmed"
    assert updated["status_history"][-1]["notes"] == "Paid"


def test_update_status_missing_order(client):
    response = client.patch("/orders/999/status", json={"status": "confirmed"})
    assert response.status_code == 404


def test_delete_order(client):
    order = client.post("/orders", json=MANUAL_ORDER).json()
    assert client.delete(f"/orders/{order['id']}").status_code == 204
    assert client.delete(f"/orders/{order['id']}").status_code == 404


def test_update_status_records_failed_platform_sync(client, use_source):
    use_source(FailingSource(["organic"]))
    order = client.post("/orders", json=MANUAL_ORDER).json()

    response = client.patch(f"/orders/{order['id']}/status", json={"status": "confirmed"})
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "confirmed"
    assert updated["sync_status"] == "failed"
    assert updated["last_synced_at"] is None


def test_edit_order_sets_shipping_info(client):
    order = client.post("/orders", json=MANUAL_ORDER).json()

    response = client.put(f"/orders/{order['id']}", json={
        "shipping_info": {
            "method": "express",
            "tracking_number": "TRK123",
            "carrier": "BlueDart",
            "estimated_delivery": "2024-02-05T18:00:00Z"
        },
        "tags": ["gift"],
        "actor": "staff:3",
    })
    assert response.status_code == 200
    edited = response.json()
    assert edited["shipping_info"]["tracking_number"] == "TRK123"
    assert edited["shipping_info"]["carrier"] == "BlueDart"
    assert edited["tags"] == ["gift"]
    assert edited["updated_by"] == "staff:3"
    assert edited["version"] == order["version"] + 1
    assert edited["status_history"] == order["status_history"]
    assert edited["total"] == 1200


def test_edit_order_status_appends_history(client):
    order = client.post("/orders", json=MANUAL_ORDER).json()

    edited = client.put(f"/orders/{order['id']}", json={"status": "dispatched"}).json()
    assert edited["status"] == "dispatched"
    assert [h["status"] for h in edited["status_history"]] == ["pending", "dispatched"]


def test_edit_order_items_recomputes_subtotal(client):
    order = client.post("/orders", json=MANUAL_ORDER).json()

    response = client.put(f"/orders/{order['id']}", json={
        "items": [
            {"product_id": "ORG-9", "name": "Silver Ring", "quantity": 3, "unit_price": 500, "total_price": 1500}
        ],
        "total": 1700,
    })
    assert response.status_code == 200
    edited = response.json()
    assert edited["subtotal"] == 1500
    assert edited["items"][0]["quantity"] == 3


def test_edit_order_rejects_inconsistent_total(client):
    order = client.post("/orders", json=MANUAL_ORDER).json()

    response = client.put(f"/orders/{order['id']}", json={"tax": 500})
    assert response.status_code == 422
    assert client.get(f"/orders/{order['id']}").json()["tax"] == 180


def test_edit_missing_order(client):
    assert client.put("/orders/999", json={"notes": "x"}).status_code == 404

import uuid
from decimal import Decimal


def _walk_in(client, **overrides):
    payload = {
        "category": "PC",
        "seat_name": "PC-1",
        "customer_name": "Ravi",
        "duration": "1 hour",
    }
    payload.update(overrides)
    return client.post("/api/v1/bookings/", json=payload)


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200


def test_unknown_booking_is_404(client):
    resp = client.get(f"/api/v1/bookings/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_create_walk_in(client, price_tables):
    resp = _walk_in(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "running"
    assert body["booking_type"] == "walk-in"
    assert Decimal(body["price"]) == Decimal("100")
    assert body["remaining_seconds"] == 3600


def test_multi_person_pc_booking_rejected(client, price_tables):
    resp = _walk_in(client, person_count=2)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_advance_booking_without_start_is_request_error(client, price_tables):
    resp = _walk_in(client, booking_type="advance")
    assert resp.status_code == 422


def test_seat_conflict_is_409(client, price_tables):
    assert _walk_in(client).status_code == 201
    resp = _walk_in(client, customer_name="Sana")
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"


def test_status_follows_the_clock(client, price_tables, clock):
    booking_id = _walk_in(client).json()["id"]

    clock.advance(hours=2)
    resp = client.get(f"/api/v1/bookings/{booking_id}")
    assert resp.json()["status"] == "expired"
    assert resp.json()["remaining_seconds"] == 0

    # The sweep persists what reads already report
    resp = client.post("/api/v1/bookings/sweep")
    assert resp.json()["updated"] == 1
    resp = client.get("/api/v1/bookings/", params={"status": "expired"})
    assert [b["id"] for b in resp.json()] == [booking_id]


def test_active_list_excludes_completed(client, price_tables):
    first = _walk_in(client).json()["id"]
    _walk_in(client, seat_name="PC-2")
    client.post(f"/api/v1/bookings/{first}/complete")

    resp = client.get("/api/v1/bookings/active")
    assert [b["seat_name"] for b in resp.json()] == ["PC-2"]


def test_food_added_to_bill(client, price_tables, snack):
    booking_id = _walk_in(client).json()["id"]
    resp = client.post(
        f"/api/v1/bookings/{booking_id}/food",
        json={"item_id": str(snack.id), "quantity": 2},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["food_total"]) == Decimal("160")
    assert Decimal(body["total_amount"]) == Decimal("260")


def test_pause_resume_and_complete_with_payment(client, price_tables, clock):
    booking_id = _walk_in(client, whatsapp_number="9833333333").json()["id"]

    clock.advance(minutes=10)
    resp = client.post(f"/api/v1/bookings/{booking_id}/pause")
    assert resp.json()["status"] == "paused"
    assert resp.json()["remaining_seconds"] == 50 * 60

    resp = client.post(f"/api/v1/bookings/{booking_id}/resume")
    assert resp.json()["status"] == "running"

    resp = client.post(
        f"/api/v1/bookings/{booking_id}/complete",
        json={"payment": {"payment_method": "upi"}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["booking"]["status"] == "completed"
    assert body["booking"]["payment_status"] == "paid"
    assert body["loyalty"]["points_earned"] == 10


def test_history_listing_is_paginated(client, db_session, price_tables):
    for seat in ("PC-1", "PC-2", "PC-3"):
        booking_id = _walk_in(client, seat_name=seat).json()["id"]
        client.post(f"/api/v1/bookings/{booking_id}/complete")
    client.post("/api/v1/bookings/refresh")

    resp = client.get("/api/v1/history/", params={"limit": 2})
    body = resp.json()
    assert body["total"] == 3
    assert body["total_pages"] == 2
    assert len(body["data"]) == 2

    resp = client.get(
        "/api/v1/history/", params={"date_from": "2025-01-02", "date_to": "2025-01-01"}
    )
    assert resp.status_code == 422


def test_device_upsert_names_seats(client):
    resp = client.put("/api/v1/admin/devices/", json={"category": "VR", "count": 2})
    assert resp.status_code == 200
    assert resp.json()["seats"] == ["VR-1", "VR-2"]

    resp = client.put("/api/v1/admin/devices/", json={"category": "VR", "count": 3})
    assert resp.json()["seats"] == ["VR-1", "VR-2", "VR-3"]
    assert len(client.get("/api/v1/admin/devices/").json()) == 1

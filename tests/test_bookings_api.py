from conftest import at, auth_headers, next_workday
from marketplace.db.models.booking import Booking
from marketplace.db.models.provider import ServiceProvider


def create(client, user, payload, **headers):
    return client.post("/api/bookings", json=payload, headers={**auth_headers(user), **headers})


def test_client_creates_booking(client, client_user, booking_payload):
    res = create(client, client_user, booking_payload)

    assert res.status_code == 201, res.json()
    body = res.json()
    assert body["message"] == "Booking created successfully"
    data = body["data"]
    assert data["status"] == "pending"
    assert data["payment_status"] == "pending"
    assert data["created_at"]
    assert data["location"]["address"] == "12 Long Street, Cape Town"
    assert data["price"]["base_amount"] == 50.0
    price = data["price"]
    assert price["final_amount"] == round(price["base_amount"] + price["premium"] - price["discount"], 2)
    assert price["currency"] == "ZAR"


def test_unauthenticated_request_is_rejected(client, booking_payload):
    res = client.post("/api/bookings", json=booking_payload)

    assert res.status_code == 401
    assert res.json()["errors"] == {"general": ["Not authenticated"]}


def test_provider_cannot_create_booking(client, provider_user, booking_payload):
    res = create(client, provider_user, booking_payload)
    assert res.status_code == 403


def test_end_before_start_is_rejected(client, client_user, booking_payload):
    booking_payload["end_time"], booking_payload["start_time"] = booking_payload["start_time"], booking_payload["end_time"]

    res = create(client, client_user, booking_payload)

    assert res.status_code == 422
    assert "end_time" in res.json()["errors"]


def test_missing_field_reports_field_error(client, client_user, booking_payload):
    del booking_payload["location"]

    res = create(client, client_user, booking_payload)

    assert res.status_code == 422
    assert res.json()["message"] == "Validation failed"
    assert "location" in res.json()["errors"]


def test_overlapping_booking_is_rejected(client, client_user, other_client, booking_payload):
    assert create(client, client_user, booking_payload).status_code == 201

    start = booking_payload["start_time"]
    res = create(client, other_client, {**booking_payload, "start_time": start.replace("T09:", "T10:")})

    assert res.status_code == 422
    assert "provider_id" in res.json()["errors"]


def test_back_to_back_bookings_are_allowed(client, client_user, booking_payload):
    assert create(client, client_user, booking_payload).status_code == 201

    day = booking_payload["start_time"][:10]
    res = create(
        client,
        client_user,
        {**booking_payload, "start_time": f"{day}T11:00:00", "end_time": f"{day}T12:00:00"},
    )
    assert res.status_code == 201


def test_booking_on_day_off_is_rejected(client, client_user, booking_payload):
    saturday = next_workday(min_days_ahead=2, weekday=5)
    payload = {**booking_payload, "start_time": at(saturday, 9).isoformat(), "end_time": at(saturday, 11).isoformat()}

    res = create(client, client_user, payload)

    assert res.status_code == 422
    assert res.json()["message"] == "Provider is not available"


def test_idempotency_key_replays_original_booking(client, db, client_user, booking_payload):
    first = create(client, client_user, booking_payload, **{"Idempotency-Key": "abc-123"})
    second = create(client, client_user, booking_payload, **{"Idempotency-Key": "abc-123"})

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["data"]["id"] == first.json()["data"]["id"]
    assert db.query(Booking).count() == 1


def test_other_client_cannot_cancel(client, client_user, other_client, booking_payload):
    booking_id = create(client, client_user, booking_payload).json()["data"]["id"]

    res = client.post(f"/api/bookings/{booking_id}/cancel", headers=auth_headers(other_client))

    assert res.status_code == 403
    assert res.json()["message"] == "Unauthorized access"


def test_cancel_refunds_and_frees_slot(client, client_user, other_client, booking_payload):
    booking_id = create(client, client_user, booking_payload).json()["data"]["id"]

    res = client.post(f"/api/bookings/{booking_id}/cancel", headers=auth_headers(client_user))

    assert res.status_code == 200
    assert res.json()["data"]["status"] == "cancelled"
    assert res.json()["data"]["payment_status"] == "refunded"
    assert create(client, other_client, booking_payload).status_code == 201


def test_full_lifecycle_and_rating(client, db, client_user, provider_user, provider, booking_payload):
    booking_id = create(client, client_user, booking_payload).json()["data"]["id"]

    # client cannot confirm on the provider's behalf
    assert client.post(f"/api/bookings/{booking_id}/confirm", headers=auth_headers(client_user)).status_code == 403

    res = client.post(f"/api/bookings/{booking_id}/confirm", headers=auth_headers(provider_user))
    assert res.json()["data"]["status"] == "confirmed"

    res = client.post(f"/api/bookings/{booking_id}/start", headers=auth_headers(provider_user))
    assert res.json()["data"]["status"] == "in_progress"

    res = client.post(f"/api/bookings/{booking_id}/complete", headers=auth_headers(client_user))
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "completed"

    res = client.post(f"/api/bookings/{booking_id}/cancel", headers=auth_headers(client_user))
    assert res.status_code == 422
    assert db.get(Booking, booking_id).status == "completed"

    res = client.post(f"/api/bookings/{booking_id}/rate", json={"rating": 4}, headers=auth_headers(client_user))
    assert res.status_code == 201
    assert res.json()["data"]["average_score"] == 4.0

    res = client.post(f"/api/bookings/{booking_id}/rate", json={"rating": 5}, headers=auth_headers(client_user))
    assert res.status_code == 422
    assert res.json()["message"] == "Booking already rated"

    db.expire_all()
    assert db.get(ServiceProvider, provider.id).rating == 4.0


def test_rating_pending_booking_is_rejected(client, client_user, booking_payload):
    booking_id = create(client, client_user, booking_payload).json()["data"]["id"]

    res = client.post(f"/api/bookings/{booking_id}/rate", json={"rating": 5}, headers=auth_headers(client_user))

    assert res.status_code == 422
    assert res.json()["errors"] == {"general": ["Only completed bookings can be rated"]}


def test_reschedule_reprices_and_keeps_own_slot(client, client_user, booking_payload):
    booking_id = create(client, client_user, booking_payload).json()["data"]["id"]
    day = booking_payload["start_time"][:10]

    res = client.patch(
        f"/api/bookings/{booking_id}",
        json={"start_time": f"{day}T10:00:00", "end_time": f"{day}T14:00:00", "special_instructions": "Bring a ladder"},
        headers=auth_headers(client_user),
    )

    assert res.status_code == 200, res.json()
    data = res.json()["data"]
    assert data["price"]["base_amount"] == 100.0
    assert data["requirements"]["special_instructions"] == "Bring a ladder"


def test_list_show_and_delete(client, client_user, other_client, booking_payload):
    booking_id = create(client, client_user, booking_payload).json()["data"]["id"]

    listed = client.get("/api/bookings", headers=auth_headers(client_user)).json()["data"]
    assert [b["id"] for b in listed] == [booking_id]
    assert client.get("/api/bookings", headers=auth_headers(other_client)).json()["data"] == []

    assert client.get(f"/api/bookings/{booking_id}", headers=auth_headers(other_client)).status_code == 403
    assert client.get(f"/api/bookings/{booking_id}", headers=auth_headers(client_user)).status_code == 200

    assert client.delete(f"/api/bookings/{booking_id}", headers=auth_headers(client_user)).status_code == 200
    assert client.get(f"/api/bookings/{booking_id}", headers=auth_headers(client_user)).status_code == 404

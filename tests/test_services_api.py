from datetime import timedelta

from conftest import at, auth_headers, next_workday
from marketplace.db.models.availability import ProviderTimeOff


def test_list_and_show_services(client, service):
    res = client.get("/api/services", params={"category": "cleaning"})
    assert res.status_code == 200
    assert [s["id"] for s in res.json()["data"]] == [service.id]

    assert client.get("/api/services", params={"category": "gardening"}).json()["data"] == []
    assert client.get(f"/api/services/{service.id}").json()["data"]["base_rate"] == 25.0
    assert client.get("/api/services/999").status_code == 404


def test_providers_for_service(client, service, provider):
    res = client.get(f"/api/services/{service.id}/providers")

    providers = res.json()["data"]
    assert [p["id"] for p in providers] == [provider.id]
    assert providers[0]["name"] == "Carol Cleaner"

    assert client.get(f"/api/services/{service.id}/providers", params={"min_rating": 4}).json()["data"] == []


def test_availability_lists_open_windows(client, client_user, service, provider, booking_payload):
    client.post("/api/bookings", json=booking_payload, headers=auth_headers(client_user))
    day = booking_payload["start_time"][:10]

    res = client.get(f"/api/services/{service.id}/availability", params={"provider_id": provider.id, "date": day})

    assert res.status_code == 200
    assert res.json()["data"] == {
        "available": True,
        "available_times": [
            {"start": "08:00:00", "end": "09:00:00"},
            {"start": "11:00:00", "end": "18:00:00"},
        ],
    }


def test_availability_respects_time_off(client, db, service, provider):
    day = next_workday(min_days_ahead=2)
    db.add(ProviderTimeOff(provider_id=provider.id, start_date=day, end_date=day))
    db.commit()

    res = client.get(f"/api/services/{service.id}/availability", params={"provider_id": provider.id, "date": day.isoformat()})

    assert res.json()["data"] == {"available": True, "available_times": []}


def test_availability_rejects_past_dates_and_unknown_provider(client, service, provider):
    yesterday = (next_workday() - timedelta(days=30)).isoformat()

    res = client.get(f"/api/services/{service.id}/availability", params={"provider_id": provider.id, "date": yesterday})
    assert res.status_code == 422
    assert "date" in res.json()["errors"]

    res = client.get(f"/api/services/{service.id}/availability", params={"provider_id": 999})
    assert res.status_code == 404


def test_calculate_price(client, service):
    day = next_workday(min_days_ahead=1)

    res = client.post(
        f"/api/services/{service.id}/calculate-price",
        json={"start_time": at(day, 9).isoformat(), "end_time": at(day, 12).isoformat()},
    )

    assert res.status_code == 200
    assert res.json()["data"]["base_amount"] == 75.0
    assert res.json()["data"]["premium"] == 0


def test_calculate_price_rejects_inverted_interval(client, service):
    day = next_workday()

    res = client.post(
        f"/api/services/{service.id}/calculate-price",
        json={"start_time": at(day, 12).isoformat(), "end_time": at(day, 9).isoformat()},
    )

    assert res.status_code == 422
    assert res.json()["message"] == "Invalid booking interval"


def test_pricing_info(client, service):
    data = client.get(f"/api/services/{service.id}/pricing").json()["data"]

    assert data["base_rate"] == 25.0
    assert data["currency"] == "ZAR"
    assert data["maximum_hours"] == 8

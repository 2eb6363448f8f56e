import httpx

from marketplace.services import notifications


def test_without_webhook_notification_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(notifications, "NOTIFICATION_WEBHOOK_URL", None)

    with caplog.at_level("INFO", logger="marketplace.services.notifications"):
        assert notifications.send_notification("a@example.com", "booking_created", booking_id=3)

    assert "New booking request #3" in caplog.text


def test_webhook_receives_payload(monkeypatch):
    sent = {}

    def fake_post(url, json, timeout):
        sent.update(url=url, json=json)
        return httpx.Response(200, request=httpx.Request("POST", url))

    monkeypatch.setattr(notifications, "NOTIFICATION_WEBHOOK_URL", "https://hooks.example.com/notify")
    monkeypatch.setattr(notifications.httpx, "post", fake_post)

    assert notifications.send_notification("a@example.com", "listing_decided", listing_id=5, status="approved")
    assert sent["json"]["message"] == "Your listing #5 was approved"
    assert sent["json"]["to"] == "a@example.com"


def test_delivery_failure_is_reported_not_raised(monkeypatch):
    def failing_post(url, json, timeout):
        return httpx.Response(503, request=httpx.Request("POST", url))

    monkeypatch.setattr(notifications, "NOTIFICATION_WEBHOOK_URL", "https://hooks.example.com/notify")
    monkeypatch.setattr(notifications.httpx, "post", failing_post)

    assert notifications.send_notification("a@example.com", "booking_cancelled", booking_id=1) is False
    assert notifications.send_notification(None, "booking_cancelled", booking_id=1) is False

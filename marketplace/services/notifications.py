"""
Booking notifications.
Delivery is fire-and-forget: callers queue ``send_notification`` on FastAPI
``BackgroundTasks`` and any delivery failure is logged here, never raised.
"""

import logging
from typing import Optional

import httpx

from marketplace.core.config import NOTIFICATION_TIMEOUT, NOTIFICATION_WEBHOOK_URL

logger = logging.getLogger(__name__)

MESSAGES = {
    "booking_created": "New booking request #{booking_id}",
    "booking_updated": "Booking #{booking_id} was updated",
    "booking_confirmed": "Your booking #{booking_id} has been confirmed",
    "booking_started": "Your booking #{booking_id} is in progress",
    "booking_cancelled": "Booking #{booking_id} was cancelled",
    "booking_completed": "Booking #{booking_id} completed. Please leave a review.",
    "review_received": "You received a new review for booking #{booking_id}",
    "listing_decided": "Your listing #{listing_id} was {status}",
}


def render(notification_type: str, **context) -> str:
    return MESSAGES[notification_type].format(**context)


def _deliver(payload: dict) -> None:
    if not NOTIFICATION_WEBHOOK_URL:
        logger.info(f"Notification ({payload['type']}) for {payload['to']}: {payload['message']}")
        return
    response = httpx.post(NOTIFICATION_WEBHOOK_URL, json=payload, timeout=NOTIFICATION_TIMEOUT)
    response.raise_for_status()


def send_notification(to: Optional[str], notification_type: str, **context) -> bool:
    """Deliver one notification. Returns False instead of raising on failure."""
    if not to:
        logger.debug(f"No recipient for {notification_type} notification")
        return False

    payload = {"to": to, "type": notification_type, "message": render(notification_type, **context), "context": context}
    try:
        _deliver(payload)
        return True
    except Exception as e:
        logger.error(f"Failed to send {notification_type} notification to {to}: {e}")
        return False

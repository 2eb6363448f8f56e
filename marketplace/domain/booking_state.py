"""Booking lifecycle.

    pending -> confirmed -> in_progress -> completed
       \\_________\\______________\\-------> cancelled

``completed`` and ``cancelled`` are terminal.
"""

import logging

from marketplace.core.errors import ErrorKind, Outcome

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
CANCELLED = "cancelled"

STATUSES = (PENDING, CONFIRMED, IN_PROGRESS, COMPLETED, CANCELLED)
TERMINAL = frozenset({COMPLETED, CANCELLED})
ACTIVE = frozenset(STATUSES) - TERMINAL

PAYMENT_PENDING = "pending"
PAYMENT_REFUNDED = "refunded"

# action -> states it may be taken from
ALLOWED_FROM = {
    "update": frozenset({PENDING, CONFIRMED}),
    "cancel": ACTIVE,
    "confirm": frozenset({PENDING}),
    "start": frozenset({CONFIRMED}),
    "complete": frozenset({CONFIRMED, IN_PROGRESS}),
}

# action -> resulting state (update keeps the current one)
TARGET = {
    "cancel": CANCELLED,
    "confirm": CONFIRMED,
    "start": IN_PROGRESS,
    "complete": COMPLETED,
}

REJECTIONS = {
    "update": ("Booking cannot be updated", "Completed or cancelled bookings cannot be updated"),
    "cancel": ("Booking cannot be cancelled", "Completed or already cancelled bookings cannot be cancelled"),
    "confirm": ("Booking cannot be confirmed", "Only pending bookings can be confirmed"),
    "start": ("Booking cannot be started", "Only confirmed bookings can be started"),
    "complete": (
        "Booking cannot be completed",
        "Only confirmed or in-progress bookings can be marked as completed",
    ),
}


def can_transition(status: str, action: str) -> bool:
    return status in ALLOWED_FROM[action]


def guard(booking, action: str) -> Outcome:
    """Check that ``action`` is legal from the booking's current status."""
    if can_transition(booking.status, action):
        return Outcome.success(booking)
    message, detail = REJECTIONS[action]
    logger.warning(f"Rejected {action} on booking {booking.id} in status {booking.status}")
    return Outcome.fail(ErrorKind.INVALID_TRANSITION, message, "status", detail)


def transition(booking, action: str) -> Outcome:
    """Move the booking to the action's target state and sync payment status.

    Mutates the booking in place; committing is the caller's job.
    """
    checked = guard(booking, action)
    if not checked.ok:
        return checked

    previous = booking.status
    booking.status = TARGET[action]
    if booking.status == CANCELLED:
        booking.payment_status = PAYMENT_REFUNDED

    logger.info(f"Booking {booking.id}: {previous} -> {booking.status}")
    return Outcome.success(booking)

"""Authorization predicates.

Every check is a pure function of (actor, resource) returning a
``Decision``; nothing here touches the session. A provider profile is owned
by the user whose id is ``profile.user_id``, and bookings, listings and
reviews all point at the profile, never at the provider's user row.
"""

from typing import NamedTuple, Optional

CLIENT = "client"
PROVIDER = "provider"
ADMIN = "admin"


class Decision(NamedTuple):
    allowed: bool
    reason: Optional[str] = None


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


def owns_provider_profile(actor, provider) -> bool:
    return provider is not None and provider.user_id == actor.id


def is_admin(actor) -> Decision:
    if actor.role == ADMIN:
        return ALLOW
    return deny("Only administrators can perform this action")


def can_create_booking(actor) -> Decision:
    if actor.role == CLIENT:
        return ALLOW
    return deny("Only clients can create bookings")


def is_booking_client(actor, booking) -> Decision:
    if booking.client_id == actor.id:
        return ALLOW
    return deny("You do not have permission to modify this booking")


def is_booking_provider(actor, booking) -> Decision:
    if owns_provider_profile(actor, booking.provider):
        return ALLOW
    return deny("Only the booked provider can perform this action")


def is_booking_party(actor, booking) -> Decision:
    if booking.client_id == actor.id or owns_provider_profile(actor, booking.provider):
        return ALLOW
    return deny("You do not have permission to complete this booking")


def can_view_booking(actor, booking) -> Decision:
    if actor.role == ADMIN or is_booking_party(actor, booking).allowed:
        return ALLOW
    return deny("You do not have permission to view this booking")


# booking action -> predicate
BOOKING_ACTIONS = {
    "view": can_view_booking,
    "update": is_booking_client,
    "delete": is_booking_client,
    "cancel": is_booking_client,
    "rate": is_booking_client,
    "complete": is_booking_party,
    "confirm": is_booking_provider,
    "start": is_booking_provider,
}


def check_booking_action(actor, booking, action: str) -> Decision:
    return BOOKING_ACTIONS[action](actor, booking)


def is_provider(actor) -> Decision:
    if actor.role == PROVIDER:
        return ALLOW
    return deny("User is not a service provider")


def can_manage_listing(actor, listing) -> Decision:
    """Provider-side edits of a ProviderService or StaffProfile."""
    decision = is_provider(actor)
    if not decision.allowed:
        return decision
    if owns_provider_profile(actor, listing.provider):
        return ALLOW
    return deny("You do not own this listing")

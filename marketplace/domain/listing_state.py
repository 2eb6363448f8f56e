"""Approval lifecycle shared by ProviderService and StaffProfile listings.

    pending --approve--> approved
    pending --reject---> rejected
    approved --edit----> pending
    rejected --edit----> pending

Only edits that touch a core field send a listing back to review.
"""

import logging
from typing import Iterable, Optional

from marketplace.core.errors import ErrorKind, Outcome

logger = logging.getLogger(__name__)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

SERVICE_CORE_FIELDS = frozenset({"title", "description", "price", "availability"})
STAFF_CORE_FIELDS = frozenset({"name", "position", "bio", "skills"})


def status_after_edit(status: str, changed: Iterable[str], core_fields: frozenset) -> str:
    if status in (APPROVED, REJECTED) and core_fields.intersection(changed):
        return PENDING
    return status


def apply_edit(listing, changes: dict, core_fields: frozenset) -> None:
    """Write ``changes`` onto the listing and re-queue it for review if needed."""
    for name, value in changes.items():
        setattr(listing, name, value)

    new_status = status_after_edit(listing.status, changes.keys(), core_fields)
    if new_status != listing.status:
        logger.info(f"{type(listing).__name__} {listing.id}: {listing.status} -> {new_status} after edit")
        listing.status = new_status
        listing.rejection_reason = None


def decide(listing, decision: str, rejection_reason: Optional[str] = None) -> Outcome:
    if listing.status != PENDING:
        return Outcome.fail(
            ErrorKind.INVALID_TRANSITION,
            "Listing is not awaiting review",
            "status",
            f"Only pending listings can be {decision}",
        )
    if decision == REJECTED and not rejection_reason:
        return Outcome.fail(
            ErrorKind.VALIDATION,
            "Validation failed",
            "rejection_reason",
            "A rejection reason is required when rejecting",
        )

    listing.status = decision
    listing.rejection_reason = rejection_reason if decision == REJECTED else None
    logger.info(f"{type(listing).__name__} {listing.id} {decision}")
    return Outcome.success(listing)

# marketplace/api/routes/admin.py
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from marketplace.core.responses import respond
from marketplace.core.security import get_current_user
from marketplace.db.base import get_db
from marketplace.db.models.user import User
from marketplace.schemas.listing import ListingDecision, ProviderServiceResponse, StaffProfileResponse
from marketplace.services.bookings import provider_contact
from marketplace.services.listings import SERVICE_LISTING, STAFF_LISTING, ListingKind, ListingService
from marketplace.services.notifications import send_notification

router = APIRouter(prefix="/admin", tags=["admin"])


def _decide(
    kind: ListingKind,
    listing_id: int,
    payload: ListingDecision,
    background_tasks: BackgroundTasks,
    db: Session,
    current_user: User,
):
    outcome = ListingService(db, kind).decide(current_user, listing_id, payload.status, payload.rejection_reason)
    if outcome.ok:
        background_tasks.add_task(
            send_notification,
            provider_contact(db, outcome.value.provider_id),
            "listing_decided",
            listing_id=listing_id,
            status=outcome.value.status,
        )
    return outcome


# -------------------------
# Pending queues
# -------------------------
@router.get("/pending-services")
def pending_services(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, SERVICE_LISTING).pending(current_user)
    return respond(outcome, "Pending services retrieved successfully", ProviderServiceResponse)


@router.get("/pending-staff")
def pending_staff(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, STAFF_LISTING).pending(current_user)
    return respond(outcome, "Pending staff profiles retrieved successfully", StaffProfileResponse)


# -------------------------
# Approve / reject
# -------------------------
@router.post("/services/{listing_id}/approval")
def decide_service(
    listing_id: int,
    payload: ListingDecision,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = _decide(SERVICE_LISTING, listing_id, payload, background_tasks, db, current_user)
    return respond(outcome, f"Service {payload.status} successfully", ProviderServiceResponse)


@router.post("/staff/{listing_id}/approval")
def decide_staff(
    listing_id: int,
    payload: ListingDecision,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = _decide(STAFF_LISTING, listing_id, payload, background_tasks, db, current_user)
    return respond(outcome, f"Staff profile {payload.status} successfully", StaffProfileResponse)

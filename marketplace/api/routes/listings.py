# marketplace/api/routes/listings.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketplace.core.responses import respond
from marketplace.core.security import get_current_user
from marketplace.db.base import get_db
from marketplace.db.models.user import User
from marketplace.schemas.listing import (
    ProviderServiceCreate,
    ProviderServiceResponse,
    ProviderServiceUpdate,
    StaffProfileCreate,
    StaffProfileResponse,
    StaffProfileUpdate,
)
from marketplace.services.listings import SERVICE_LISTING, STAFF_LISTING, ListingService

router = APIRouter(prefix="/provider", tags=["provider-listings"])


# -------------------------
# Service listings
# -------------------------
@router.get("/services")
def list_my_services(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, SERVICE_LISTING).list_own(current_user)
    return respond(outcome, "Services retrieved successfully", ProviderServiceResponse)


@router.post("/services")
def create_service(
    payload: ProviderServiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = ListingService(db, SERVICE_LISTING).create(current_user, payload)
    return respond(
        outcome,
        "Service created successfully and pending approval",
        ProviderServiceResponse,
        status.HTTP_201_CREATED,
    )


@router.get("/services/{listing_id}")
def show_service(listing_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, SERVICE_LISTING).get(current_user, listing_id)
    return respond(outcome, "Service retrieved successfully", ProviderServiceResponse)


@router.patch("/services/{listing_id}")
def update_service(
    listing_id: int,
    payload: ProviderServiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = ListingService(db, SERVICE_LISTING).update(current_user, listing_id, payload)
    return respond(outcome, "Service updated successfully", ProviderServiceResponse)


@router.delete("/services/{listing_id}")
def delete_service(listing_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, SERVICE_LISTING).delete(current_user, listing_id)
    return respond(outcome, "Service deleted successfully")


# -------------------------
# Staff profiles
# -------------------------
@router.get("/staff")
def list_my_staff(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, STAFF_LISTING).list_own(current_user)
    return respond(outcome, "Staff profiles retrieved successfully", StaffProfileResponse)


@router.post("/staff")
def create_staff(
    payload: StaffProfileCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = ListingService(db, STAFF_LISTING).create(current_user, payload)
    return respond(
        outcome,
        "Staff profile created successfully and pending approval",
        StaffProfileResponse,
        status.HTTP_201_CREATED,
    )


@router.get("/staff/{listing_id}")
def show_staff(listing_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, STAFF_LISTING).get(current_user, listing_id)
    return respond(outcome, "Staff profile retrieved successfully", StaffProfileResponse)


@router.patch("/staff/{listing_id}")
def update_staff(
    listing_id: int,
    payload: StaffProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = ListingService(db, STAFF_LISTING).update(current_user, listing_id, payload)
    return respond(outcome, "Staff profile updated successfully", StaffProfileResponse)


@router.delete("/staff/{listing_id}")
def delete_staff(listing_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    outcome = ListingService(db, STAFF_LISTING).delete(current_user, listing_id)
    return respond(outcome, "Staff profile deleted successfully")

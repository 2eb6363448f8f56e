from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Query, status
from sqlalchemy.orm import Session

from marketplace.core.errors import Outcome
from marketplace.core.responses import envelope, respond
from marketplace.core.security import get_current_user
from marketplace.db.base import get_db
from marketplace.db.models.booking import Booking
from marketplace.db.models.user import User
from marketplace.schemas.booking import BookingCreate, BookingRate, BookingResponse, BookingUpdate
from marketplace.schemas.review import ReviewResponse
from marketplace.services.bookings import BookingService, provider_contact
from marketplace.services.notifications import send_notification
from marketplace.services.reviews import ReviewService

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _notify_provider(background_tasks: BackgroundTasks, db: Session, booking: Booking, event: str):
    background_tasks.add_task(send_notification, provider_contact(db, booking.provider_id), event, booking_id=booking.id)


def _notify_client(background_tasks: BackgroundTasks, booking: Booking, event: str):
    email = booking.client.email if booking.client else None
    background_tasks.add_task(send_notification, email, event, booking_id=booking.id)


# Client lists their bookings

@router.get("")
def list_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bookings = BookingService(db).list_for_client(current_user, status_filter)
    return respond(Outcome.success(bookings), "Bookings retrieved successfully", BookingResponse)


# Client creates booking

@router.post("")
def create_booking(
    payload: BookingCreate,
    background_tasks: BackgroundTasks,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key", max_length=255),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = BookingService(db)

    replay = service.find_replay(current_user, idempotency_key)
    if replay is not None:
        return envelope("Booking already created", BookingResponse.model_validate(replay))

    outcome = service.create(current_user, payload, idempotency_key)
    if outcome.ok:
        _notify_provider(background_tasks, db, outcome.value, "booking_created")
    return respond(outcome, "Booking created successfully", BookingResponse, status.HTTP_201_CREATED)


@router.get("/{booking_id}")
def show_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return respond(BookingService(db).get(booking_id, current_user), "Booking retrieved successfully", BookingResponse)


# Client reschedules or edits details

@router.patch("/{booking_id}")
def update_booking(
    booking_id: int,
    payload: BookingUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = BookingService(db).update(booking_id, current_user, payload)
    if outcome.ok:
        _notify_provider(background_tasks, db, outcome.value, "booking_updated")
    return respond(outcome, "Booking updated successfully", BookingResponse)


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return respond(BookingService(db).delete(booking_id, current_user), "Booking deleted successfully")


# Lifecycle transitions

@router.post("/{booking_id}/cancel")
def cancel_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = BookingService(db).cancel(booking_id, current_user)
    if outcome.ok:
        _notify_provider(background_tasks, db, outcome.value, "booking_cancelled")
    return respond(outcome, "Booking cancelled successfully", BookingResponse)


@router.post("/{booking_id}/confirm")
def confirm_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = BookingService(db).confirm(booking_id, current_user)
    if outcome.ok:
        _notify_client(background_tasks, outcome.value, "booking_confirmed")
    return respond(outcome, "Booking confirmed", BookingResponse)


@router.post("/{booking_id}/start")
def start_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = BookingService(db).start(booking_id, current_user)
    if outcome.ok:
        _notify_client(background_tasks, outcome.value, "booking_started")
    return respond(outcome, "Booking started", BookingResponse)


@router.post("/{booking_id}/complete")
def complete_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outcome = BookingService(db).complete(booking_id, current_user)
    if outcome.ok:
        _notify_client(background_tasks, outcome.value, "booking_completed")
    return respond(outcome, "Booking marked as completed", BookingResponse)


# Client rates a completed booking

@router.post("/{booking_id}/rate")
def rate_booking(
    booking_id: int,
    payload: BookingRate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    categories = payload.categories.model_dump(exclude_none=True) if payload.categories else None
    outcome = ReviewService(db).submit(booking_id, current_user, payload.rating, categories, payload.review)
    if outcome.ok:
        background_tasks.add_task(
            send_notification,
            provider_contact(db, outcome.value.ratee_id),
            "review_received",
            booking_id=booking_id,
        )
    return respond(outcome, "Review submitted successfully", ReviewResponse, status.HTTP_201_CREATED)

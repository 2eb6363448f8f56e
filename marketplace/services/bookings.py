"""Booking operations: creation, rescheduling and lifecycle transitions."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.core.errors import ErrorKind, Outcome, forbidden, not_found
from marketplace.db.models.booking import Booking
from marketplace.db.models.provider import ServiceProvider
from marketplace.db.models.service import Service
from marketplace.db.models.user import User
from marketplace.domain import booking_state, policy
from marketplace.domain.pricing import InvalidInterval, PriceBreakdown, calculate_price, duration_hours, local_now, to_local
from marketplace.schemas.booking import BookingCreate, BookingUpdate
from marketplace.services import scheduling

logger = logging.getLogger(__name__)


def _check_interval(start: datetime, end: datetime) -> Outcome:
    try:
        return Outcome.success(duration_hours(start, end))
    except InvalidInterval as e:
        return Outcome.fail(ErrorKind.INVALID_INTERVAL, "Invalid booking interval", "end_time", str(e))


def _quote(service: Service, start: datetime, end: datetime, now: datetime) -> Outcome:
    """Validate the interval against the service and price it."""
    interval = _check_interval(start, end)
    if not interval.ok:
        return interval
    hours = interval.value

    if start <= now:
        return Outcome.fail(ErrorKind.VALIDATION, "Validation failed", "start_time", "start_time must be in the future")

    if hours < service.min_hours or hours > service.max_hours:
        return Outcome.fail(
            ErrorKind.VALIDATION,
            "Validation failed",
            "end_time",
            f"Duration must be between {service.min_hours} and {service.max_hours} hours",
        )

    return Outcome.success(calculate_price(service.base_rate, start, end, now))


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session, now: Optional[datetime] = None):
        self.db = db
        self._now = now

    def now(self) -> datetime:
        return to_local(self._now) if self._now else local_now()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_for_client(self, actor: User, status: Optional[str] = None) -> list[Booking]:
        q = self.db.query(Booking).filter(Booking.client_id == actor.id)
        if status:
            q = q.filter(Booking.status == status)
        return q.order_by(Booking.start_time.desc()).all()

    def _load(self, booking_id: int, actor: User, action: str) -> Outcome:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            return not_found("Booking")

        allowed, reason = policy.check_booking_action(actor, booking, action)
        if not allowed:
            logger.warning(f"User {actor.id} denied {action} on booking {booking_id}")
            return forbidden(reason)
        return Outcome.success(booking)

    def get(self, booking_id: int, actor: User) -> Outcome:
        return self._load(booking_id, actor, "view")

    def find_replay(self, actor: User, idempotency_key: Optional[str]) -> Optional[Booking]:
        if not idempotency_key:
            return None
        return (
            self.db.query(Booking)
            .filter(Booking.client_id == actor.id, Booking.idempotency_key == idempotency_key)
            .first()
        )

    # ------------------------------------------------------------------
    # Create / update
    # ------------------------------------------------------------------
    def create(self, actor: User, data: BookingCreate, idempotency_key: Optional[str] = None) -> Outcome:
        allowed, reason = policy.can_create_booking(actor)
        if not allowed:
            return forbidden(reason)

        start, end = to_local(data.start_time), to_local(data.end_time)
        interval = _check_interval(start, end)
        if not interval.ok:
            return interval

        service = self.db.query(Service).filter(Service.id == data.service_id, Service.status == "active").first()
        if not service:
            return not_found("Service")

        quoted = _quote(service, start, end, self.now())
        if not quoted.ok:
            return quoted

        provider = scheduling.lock_provider(self.db, data.provider_id)
        if not provider or provider.status != "active":
            self.db.rollback()
            return not_found("Provider")

        bookable = scheduling.check_bookable(self.db, provider, start, end)
        if not bookable.ok:
            self.db.rollback()
            return bookable

        price: PriceBreakdown = quoted.value
        booking = Booking(
            client_id=actor.id,
            provider_id=provider.id,
            service_id=service.id,
            start_time=start,
            end_time=end,
            location={
                "address": data.location,
                "access_instructions": data.access_instructions,
            },
            requirements={"special_instructions": data.special_instructions},
            price=price.as_dict(),
            status=booking_state.PENDING,
            payment_status=booking_state.PAYMENT_PENDING,
            idempotency_key=idempotency_key,
        )
        self.db.add(booking)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.find_replay(actor, idempotency_key)
            if existing is None:
                raise
            logger.info(f"Idempotent replay of booking {existing.id} for client {actor.id}")
            return Outcome.success(existing)

        self.db.refresh(booking)
        logger.info(
            f"Booking {booking.id} created: client={actor.id} provider={provider.id} "
            f"{start.isoformat()}-{end.isoformat()} final={booking.price['final_amount']}"
        )
        return Outcome.success(booking)

    def update(self, booking_id: int, actor: User, data: BookingUpdate) -> Outcome:
        loaded = self._load(booking_id, actor, "update")
        if not loaded.ok:
            return loaded
        booking: Booking = loaded.value

        checked = booking_state.guard(booking, "update")
        if not checked.ok:
            return checked

        changed = data.model_fields_set
        if "start_time" in changed or "end_time" in changed:
            start = to_local(data.start_time) if data.start_time else booking.start_time
            end = to_local(data.end_time) if data.end_time else booking.end_time

            quoted = _quote(booking.service, start, end, self.now())
            if not quoted.ok:
                return quoted

            provider = scheduling.lock_provider(self.db, booking.provider_id)
            bookable = scheduling.check_bookable(self.db, provider, start, end, exclude_booking_id=booking.id)
            if not bookable.ok:
                self.db.rollback()
                return bookable

            booking.start_time = start
            booking.end_time = end
            booking.price = quoted.value.as_dict()
            logger.info(f"Booking {booking.id} rescheduled to {start.isoformat()}-{end.isoformat()}")

        # JSON columns: assign fresh dicts so the change is tracked
        if "location" in changed and data.location is not None:
            booking.location = {**(booking.location or {}), "address": data.location}
        if "access_instructions" in changed:
            booking.location = {**(booking.location or {}), "access_instructions": data.access_instructions}
        if "special_instructions" in changed:
            booking.requirements = {**(booking.requirements or {}), "special_instructions": data.special_instructions}

        self.db.commit()
        self.db.refresh(booking)
        return Outcome.success(booking)

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------
    def advance(self, booking_id: int, actor: User, action: str) -> Outcome:
        """Run one of cancel / confirm / start / complete."""
        loaded = self._load(booking_id, actor, action)
        if not loaded.ok:
            return loaded

        moved = booking_state.transition(loaded.value, action)
        if not moved.ok:
            return moved

        self.db.commit()
        self.db.refresh(moved.value)
        return moved

    def cancel(self, booking_id: int, actor: User) -> Outcome:
        return self.advance(booking_id, actor, "cancel")

    def confirm(self, booking_id: int, actor: User) -> Outcome:
        return self.advance(booking_id, actor, "confirm")

    def start(self, booking_id: int, actor: User) -> Outcome:
        return self.advance(booking_id, actor, "start")

    def complete(self, booking_id: int, actor: User) -> Outcome:
        return self.advance(booking_id, actor, "complete")

    def delete(self, booking_id: int, actor: User) -> Outcome:
        loaded = self._load(booking_id, actor, "delete")
        if not loaded.ok:
            return loaded
        booking: Booking = loaded.value

        if booking.status not in (booking_state.PENDING, booking_state.CANCELLED):
            return Outcome.fail(
                ErrorKind.INVALID_TRANSITION,
                "Booking cannot be deleted",
                "status",
                "Only pending or cancelled bookings can be deleted",
            )

        self.db.delete(booking)
        self.db.commit()
        logger.info(f"Booking {booking_id} deleted by client {actor.id}")
        return Outcome.success({"id": booking_id})


def provider_contact(db: Session, provider_id: int) -> Optional[str]:
    provider = db.query(ServiceProvider).filter(ServiceProvider.id == provider_id).first()
    return provider.user.email if provider and provider.user else None


def quote_price(db: Session, service_id: int, start: datetime, end: datetime, now: Optional[datetime] = None) -> Outcome:
    """Price preview for ``start``..``end``; nothing is stored."""
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        return not_found("Service")

    start, end = to_local(start), to_local(end)
    interval = _check_interval(start, end)
    if not interval.ok:
        return interval

    price = calculate_price(service.base_rate, start, end, to_local(now) if now else local_now())
    return Outcome.success(price.as_dict())

"""Availability checks backed by stored bookings and time off."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from marketplace.core.errors import ErrorKind, Outcome
from marketplace.db.models.availability import ProviderTimeOff
from marketplace.db.models.booking import Booking
from marketplace.db.models.provider import ServiceProvider
from marketplace.domain import availability
from marketplace.domain.booking_state import CANCELLED

logger = logging.getLogger(__name__)


def lock_provider(db: Session, provider_id: int) -> Optional[ServiceProvider]:
    """Load the provider row with a write lock so concurrent bookings serialize on it."""
    return (
        db.query(ServiceProvider)
        .filter(ServiceProvider.id == provider_id)
        .with_for_update()
        .first()
    )


def busy_intervals(
    db: Session,
    provider_id: int,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[int] = None,
) -> list[availability.Interval]:
    """(start, end) of every non-cancelled booking touching ``start``..``end``."""
    q = db.query(Booking).filter(
        Booking.provider_id == provider_id,
        Booking.status != CANCELLED,
        Booking.start_time < end,
        Booking.end_time > start,
    )
    if exclude_booking_id is not None:
        q = q.filter(Booking.id != exclude_booking_id)
    return [(b.start_time, b.end_time) for b in q.all()]


def provider_timeoffs(db: Session, provider_id: int, day: date) -> list[ProviderTimeOff]:
    return (
        db.query(ProviderTimeOff)
        .filter(
            ProviderTimeOff.provider_id == provider_id,
            ProviderTimeOff.start_date <= day,
            ProviderTimeOff.end_date >= day,
        )
        .all()
    )


def availability_for(db: Session, provider: ServiceProvider, day: date) -> availability.Availability:
    day_start = datetime.combine(day, time.min)
    day_end = day_start + timedelta(days=1)
    busy = busy_intervals(db, provider.id, day_start, day_end)
    return availability.resolve(provider, day, busy, provider_timeoffs(db, provider.id, day))


def check_bookable(
    db: Session,
    provider: ServiceProvider,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[int] = None,
) -> Outcome:
    busy = busy_intervals(db, provider.id, start, end, exclude_booking_id)
    reason = availability.unavailable_reason(
        provider, start, end, busy, provider_timeoffs(db, provider.id, start.date())
    )
    if reason:
        logger.warning(f"Provider {provider.id} unavailable for {start.isoformat()}-{end.isoformat()}: {reason}")
        return Outcome.fail(ErrorKind.PROVIDER_UNAVAILABLE, "Provider is not available", "provider_id", reason)
    return Outcome.success(provider)

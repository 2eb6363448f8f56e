"""Review submission and provider rating aggregation."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.core.errors import ErrorKind, Outcome, forbidden, not_found
from marketplace.db.models.booking import Booking
from marketplace.db.models.provider import ServiceProvider
from marketplace.db.models.review import Review
from marketplace.db.models.user import User
from marketplace.domain import policy
from marketplace.domain.booking_state import COMPLETED
from marketplace.domain.ratings import category_scores, mean_score

logger = logging.getLogger(__name__)


def already_reviewed() -> Outcome:
    return Outcome.fail(ErrorKind.ALREADY_REVIEWED, "Booking already rated", "general", "This booking has already been rated")


def recalculate_provider_rating(db: Session, provider: ServiceProvider) -> float:
    """Recompute the provider's rating from every review naming it. Does not commit."""
    rows = db.query(Review).filter(Review.ratee_id == provider.id).all()
    provider.rating = mean_score(r.average_score for r in rows)
    db.add(provider)
    return provider.rating


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def submit(
        self,
        booking_id: int,
        actor: User,
        rating: int,
        categories: Optional[dict] = None,
        comment: Optional[str] = None,
    ) -> Outcome:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            return not_found("Booking")

        if not policy.check_booking_action(actor, booking, "rate").allowed:
            return forbidden("You do not have permission to rate this booking")

        if booking.status != COMPLETED:
            return Outcome.fail(ErrorKind.NOT_COMPLETED, "Booking cannot be rated", "general", "Only completed bookings can be rated")

        if self.db.query(Review).filter(Review.booking_id == booking.id).first():
            return already_reviewed()

        provider = self.db.query(ServiceProvider).filter(ServiceProvider.id == booking.provider_id).first()
        if not provider:
            return not_found("Provider")

        review = Review(
            booking_id=booking.id,
            rater_id=actor.id,
            ratee_id=provider.id,
            scores=category_scores(rating, categories),
            average_score=float(rating),
            comment=comment,
        )

        # review and rating commit together
        try:
            self.db.add(review)
            self.db.flush()
            new_rating = recalculate_provider_rating(self.db, provider)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Concurrent review insert for booking {booking_id}")
            return already_reviewed()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(review)
        logger.info(f"Review {review.id} for booking {booking_id}; provider {provider.id} rating now {new_rating:.2f}")
        return Outcome.success(review)

    def list_for_provider(self, provider_id: int) -> list[Review]:
        return (
            self.db.query(Review)
            .filter(Review.ratee_id == provider_id)
            .order_by(Review.created_at.desc())
            .all()
        )

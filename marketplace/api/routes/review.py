# marketplace/api/routes/review.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.core.errors import Outcome, not_found
from marketplace.core.responses import failure_response, respond
from marketplace.db.base import get_db
from marketplace.db.models.provider import ServiceProvider
from marketplace.schemas.review import ReviewResponse
from marketplace.services.reviews import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


# Public: list reviews for a provider
@router.get("/provider/{provider_id}")
def list_provider_reviews(provider_id: int, db: Session = Depends(get_db)):
    if not db.query(ServiceProvider).filter(ServiceProvider.id == provider_id).first():
        return failure_response(not_found("Provider").failure)
    reviews = ReviewService(db).list_for_provider(provider_id)
    return respond(Outcome.success(reviews), "Reviews retrieved successfully", ReviewResponse)

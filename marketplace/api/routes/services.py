# marketplace/api/routes/services.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from marketplace.core.errors import ErrorKind, Outcome, not_found
from marketplace.core.responses import envelope, failure_response, respond
from marketplace.db.base import get_db
from marketplace.db.models.provider import ServiceProvider
from marketplace.db.models.service import Service
from marketplace.domain.pricing import local_now, pricing_info
from marketplace.schemas.availability import AvailabilityResponse
from marketplace.schemas.service import PriceQuoteRequest, ServiceResponse
from marketplace.services.bookings import quote_price
from marketplace.services.scheduling import availability_for

router = APIRouter(prefix="/services", tags=["services"])


def _provider_card(provider: ServiceProvider) -> dict:
    return {
        "id": provider.id,
        "name": provider.user.name if provider.user else "Unknown",
        "category": provider.category,
        "description": provider.description,
        "hourly_rate": float(provider.hourly_rate or 0),
        "rating": provider.rating,
        "availability": provider.availability,
        "image": provider.profile_image,
        "status": provider.status,
    }


# Catalog

@router.get("")
def list_services(category: Optional[str] = Query(None), db: Session = Depends(get_db)):
    q = db.query(Service).filter(Service.status == "active")
    if category:
        q = q.filter(Service.category == category)
    return respond(Outcome.success(q.order_by(Service.id).all()), "Services retrieved successfully", ServiceResponse)


@router.get("/{service_id}")
def show_service(service_id: int, db: Session = Depends(get_db)):
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        return failure_response(not_found("Service").failure)
    return envelope("Service retrieved successfully", ServiceResponse.model_validate(service))


# Providers offering a service category

@router.get("/{service_id}/providers")
def service_providers(
    service_id: int,
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    db: Session = Depends(get_db),
):
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        return failure_response(not_found("Service").failure)

    q = db.query(ServiceProvider).filter(
        ServiceProvider.category == service.category,
        ServiceProvider.status == "active",
    )
    if min_rating is not None:
        q = q.filter(ServiceProvider.rating >= min_rating)

    providers = q.order_by(ServiceProvider.rating.desc()).all()
    return envelope("Service providers retrieved successfully", [_provider_card(p) for p in providers])


# Open windows for a provider on a date

@router.get("/{service_id}/availability")
def service_availability(
    service_id: int,
    provider_id: int = Query(...),
    day: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    db: Session = Depends(get_db),
):
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        return failure_response(not_found("Service").failure)

    provider = db.query(ServiceProvider).filter(ServiceProvider.id == provider_id).first()
    if not provider:
        return failure_response(not_found("Provider").failure)

    today = local_now().date()
    target = day or today
    if target < today:
        outcome = Outcome.fail(ErrorKind.VALIDATION, "Validation failed", "date", "date must be today or later")
        return failure_response(outcome.failure)

    result = availability_for(db, provider, target)
    message = "Availability retrieved successfully" if result.available else "Provider not available on this day"
    return envelope(message, AvailabilityResponse(**result.as_dict()))


@router.get("/{service_id}/pricing")
def service_pricing(service_id: int, db: Session = Depends(get_db)):
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        return failure_response(not_found("Service").failure)
    return envelope("Pricing information retrieved successfully", pricing_info(service))


@router.post("/{service_id}/calculate-price")
def calculate_service_price(service_id: int, payload: PriceQuoteRequest, db: Session = Depends(get_db)):
    return respond(
        quote_price(db, service_id, payload.start_time, payload.end_time),
        "Price calculated successfully",
    )

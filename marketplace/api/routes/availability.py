# marketplace/api/routes/availability.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketplace.core.errors import Outcome, forbidden, not_found
from marketplace.core.responses import failure_response, respond
from marketplace.core.security import get_current_user
from marketplace.db.base import get_db
from marketplace.db.models.availability import ProviderTimeOff
from marketplace.db.models.user import User
from marketplace.domain import policy
from marketplace.schemas.availability import ProviderTimeOffCreate, ProviderTimeOffResponse
from marketplace.services.listings import provider_profile

router = APIRouter(prefix="/provider/timeoff", tags=["availability"])


def _own_profile(db: Session, user: User) -> Outcome:
    allowed, reason = policy.is_provider(user)
    if not allowed:
        return forbidden(reason)
    profile = provider_profile(db, user)
    if not profile:
        return not_found("Provider profile")
    return Outcome.success(profile)


@router.post("")
def add_timeoff(
    payload: ProviderTimeOffCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = _own_profile(db, current_user)
    if not profile.ok:
        return failure_response(profile.failure)

    timeoff = ProviderTimeOff(provider_id=profile.value.id, **payload.model_dump())
    db.add(timeoff)
    db.commit()
    db.refresh(timeoff)
    return respond(Outcome.success(timeoff), "Time off added", ProviderTimeOffResponse, status.HTTP_201_CREATED)


@router.get("")
def list_timeoffs(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    profile = _own_profile(db, current_user)
    if not profile.ok:
        return failure_response(profile.failure)

    rows = (
        db.query(ProviderTimeOff)
        .filter(ProviderTimeOff.provider_id == profile.value.id)
        .order_by(ProviderTimeOff.start_date)
        .all()
    )
    return respond(Outcome.success(rows), "Time off retrieved successfully", ProviderTimeOffResponse)

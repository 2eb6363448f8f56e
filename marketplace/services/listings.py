"""Provider listings (services and staff profiles) and their admin review."""

import logging

from sqlalchemy.orm import Session

from marketplace.core.errors import Outcome, forbidden, not_found
from marketplace.db.models.listing import ProviderService, StaffProfile
from marketplace.db.models.provider import ServiceProvider
from marketplace.db.models.user import User
from marketplace.domain import listing_state, policy

logger = logging.getLogger(__name__)


class ListingKind:
    def __init__(self, model, core_fields: frozenset, label: str):
        self.model = model
        self.core_fields = core_fields
        self.label = label


SERVICE_LISTING = ListingKind(ProviderService, listing_state.SERVICE_CORE_FIELDS, "Service")
STAFF_LISTING = ListingKind(StaffProfile, listing_state.STAFF_CORE_FIELDS, "Staff profile")


def provider_profile(db: Session, user: User):
    return db.query(ServiceProvider).filter(ServiceProvider.user_id == user.id).first()


class ListingService:
    def __init__(self, db: Session, kind: ListingKind):
        self.db = db
        self.kind = kind

    def _profile(self, actor: User) -> Outcome:
        allowed, reason = policy.is_provider(actor)
        if not allowed:
            return forbidden(reason)
        profile = provider_profile(self.db, actor)
        if not profile:
            return not_found("Provider profile")
        return Outcome.success(profile)

    def _owned(self, actor: User, listing_id: int) -> Outcome:
        listing = self.db.query(self.kind.model).filter(self.kind.model.id == listing_id).first()
        if not listing:
            return not_found(self.kind.label)

        allowed, reason = policy.can_manage_listing(actor, listing)
        if not allowed:
            logger.warning(f"User {actor.id} denied access to {self.kind.label.lower()} {listing_id}")
            return forbidden(reason)
        return Outcome.success(listing)

    def list_own(self, actor: User) -> Outcome:
        profile = self._profile(actor)
        if not profile.ok:
            return profile
        rows = (
            self.db.query(self.kind.model)
            .filter(self.kind.model.provider_id == profile.value.id)
            .order_by(self.kind.model.id)
            .all()
        )
        return Outcome.success(rows)

    def create(self, actor: User, data) -> Outcome:
        profile = self._profile(actor)
        if not profile.ok:
            return profile

        listing = self.kind.model(
            provider_id=profile.value.id,
            status=listing_state.PENDING,
            **data.model_dump(),
        )
        self.db.add(listing)
        self.db.commit()
        self.db.refresh(listing)
        logger.info(f"{self.kind.label} {listing.id} created by provider {profile.value.id}, pending approval")
        return Outcome.success(listing)

    def get(self, actor: User, listing_id: int) -> Outcome:
        return self._owned(actor, listing_id)

    def update(self, actor: User, listing_id: int, data) -> Outcome:
        owned = self._owned(actor, listing_id)
        if not owned.ok:
            return owned

        listing_state.apply_edit(owned.value, data.model_dump(exclude_unset=True), self.kind.core_fields)
        self.db.commit()
        self.db.refresh(owned.value)
        return owned

    def delete(self, actor: User, listing_id: int) -> Outcome:
        owned = self._owned(actor, listing_id)
        if not owned.ok:
            return owned
        self.db.delete(owned.value)
        self.db.commit()
        return Outcome.success({"id": listing_id})

    # ------------------------------------------------------------------
    # Admin review
    # ------------------------------------------------------------------
    def pending(self, actor: User) -> Outcome:
        allowed, reason = policy.is_admin(actor)
        if not allowed:
            return forbidden(reason)
        rows = (
            self.db.query(self.kind.model)
            .filter(self.kind.model.status == listing_state.PENDING)
            .order_by(self.kind.model.created_at)
            .all()
        )
        return Outcome.success(rows)

    def decide(self, actor: User, listing_id: int, decision: str, rejection_reason=None) -> Outcome:
        allowed, reason = policy.is_admin(actor)
        if not allowed:
            return forbidden(reason)

        listing = self.db.query(self.kind.model).filter(self.kind.model.id == listing_id).first()
        if not listing:
            return not_found(self.kind.label)

        decided = listing_state.decide(listing, decision, rejection_reason)
        if not decided.ok:
            return decided
        self.db.commit()
        self.db.refresh(listing)
        return decided

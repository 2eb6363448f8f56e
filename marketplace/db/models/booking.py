from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("client_id", "idempotency_key", name="uq_bookings_client_idempotency_key"),
    )

    id = Column(Integer, primary_key=True, index=True)

    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("service_providers.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)

    # local wall-clock time in MARKETPLACE_TIMEZONE
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    location = Column(JSON, nullable=False)      # {"address", "access_instructions"}
    requirements = Column(JSON, nullable=True)   # {"special_instructions"}
    price = Column(JSON, nullable=False)         # see domain.pricing.PriceBreakdown.as_dict

    status = Column(String, nullable=False, default="pending")
    payment_status = Column(String, nullable=False, default="pending")

    idempotency_key = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # relationships
    client = relationship("User", foreign_keys=[client_id])
    provider = relationship("ServiceProvider", foreign_keys=[provider_id])
    service = relationship("Service", foreign_keys=[service_id])
    review = relationship("Review", back_populates="booking", uselist=False)

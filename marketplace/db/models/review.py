# marketplace/db/models/review.py
from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True)
    rater_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    ratee_id = Column(Integer, ForeignKey("service_providers.id", ondelete="CASCADE"), nullable=False, index=True)

    scores = Column(JSON, nullable=False)  # punctuality/quality/communication/professionalism, 1..5
    average_score = Column(Float, nullable=False)
    comment = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # relationships
    booking = relationship("Booking", back_populates="review")
    rater = relationship("User", foreign_keys=[rater_id])
    ratee = relationship("ServiceProvider", foreign_keys=[ratee_id])

# marketplace/db/models/availability.py
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from marketplace.db.base import Base


class ProviderTimeOff(Base):
    """
    One-off time off or block for a provider.
    Use for vacations, breaks, special blocks.
    start_date/start_time and end_date/end_time define the blocked window.
    Leave start_time/end_time NULL for whole-day time off.
    """
    __tablename__ = "provider_timeoffs"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("service_providers.id", ondelete="CASCADE"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=True)  # optional for whole day
    end_time = Column(Time, nullable=True)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    provider = relationship("ServiceProvider", back_populates="timeoffs")

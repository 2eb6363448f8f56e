# marketplace/db/models/provider.py
from datetime import time

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, Numeric, String, Text, Time, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class ServiceProvider(Base):
    """
    Public profile of a provider user.
    availability: list of weekday tokens ("mon" .. "sun").
    work_day_start / work_day_end: daily window the provider takes bookings in.
    rating is derived from reviews and is never written by the provider.
    """
    __tablename__ = "service_providers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    category = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    rating = Column(Float, nullable=False, default=0)

    availability = Column(JSON, nullable=False, default=list)
    work_day_start = Column(Time, nullable=False, default=time(8, 0))
    work_day_end = Column(Time, nullable=False, default=time(18, 0))

    experience = Column(JSON, nullable=True)
    certifications = Column(JSON, nullable=True)
    profile_image = Column(String, nullable=True)  # blob store key

    status = Column(String, nullable=False, default="active")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="provider_profile")
    listings = relationship("ProviderService", back_populates="provider", lazy="selectin")
    staff = relationship("StaffProfile", back_populates="provider", lazy="selectin")
    timeoffs = relationship("ProviderTimeOff", back_populates="provider", lazy="selectin")

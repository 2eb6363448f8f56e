# marketplace/db/models/listing.py
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class ProviderService(Base):
    """A provider-authored service listing; visible only once approved."""
    __tablename__ = "provider_services"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("service_providers.id", ondelete="CASCADE"), nullable=False)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    availability = Column(JSON, nullable=False, default=list)

    status = Column(String, nullable=False, default="pending")
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    provider = relationship("ServiceProvider", back_populates="listings")


class StaffProfile(Base):
    __tablename__ = "staff_profiles"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("service_providers.id", ondelete="CASCADE"), nullable=False)

    name = Column(String, nullable=False)
    position = Column(String, nullable=False)
    bio = Column(Text, nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    profile_image = Column(String, nullable=True)  # blob store key

    status = Column(String, nullable=False, default="pending")
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    provider = relationship("ServiceProvider", back_populates="staff")

# marketplace/db/models/service.py

from sqlalchemy import JSON, Column, DateTime, Integer, Numeric, String, Text, func

from marketplace.db.base import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)

    # Basic details
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Pricing (per hour)
    base_rate = Column(Numeric(10, 2), nullable=False)

    # Structured descriptors
    requirements = Column(JSON, nullable=True)
    availability = Column(JSON, nullable=True)  # weekday tokens

    # Duration range (hours)
    min_hours = Column(Integer, nullable=False, default=1)
    max_hours = Column(Integer, nullable=False, default=8)

    # Status
    status = Column(String, nullable=False, default="active")

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

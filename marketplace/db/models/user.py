# marketplace/db/models/user.py
from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="client", server_default="client")
    status = Column(String, nullable=False, default="active", server_default="active")

    phone = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # set only for role == "provider"
    provider_profile = relationship(
        "ServiceProvider",
        back_populates="user",
        uselist=False,
        lazy="selectin",
    )

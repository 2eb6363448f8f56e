# marketplace/schemas/listing.py
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from marketplace.schemas.user import Weekday


class ProviderServiceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    availability: list[Weekday]


class ProviderServiceUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    availability: Optional[list[Weekday]] = None

    # omitted means unchanged; explicit null is not allowed
    @field_validator("title", "description", "price", "availability")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ProviderServiceResponse(BaseModel):
    id: int
    provider_id: int
    title: str
    description: str
    price: float
    availability: list[str]
    status: str
    rejection_reason: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class StaffProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)
    bio: str = Field(..., min_length=1)
    skills: list[str]
    profile_image: Optional[str] = None


class StaffProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    position: Optional[str] = Field(default=None, min_length=1, max_length=255)
    bio: Optional[str] = None
    skills: Optional[list[str]] = None
    profile_image: Optional[str] = None

    @field_validator("name", "position", "bio", "skills")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class StaffProfileResponse(BaseModel):
    id: int
    provider_id: int
    name: str
    position: str
    bio: str
    skills: list[str]
    profile_image: Optional[str]
    status: str
    rejection_reason: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ListingDecision(BaseModel):
    status: Literal["approved", "rejected"]
    rejection_reason: Optional[str] = None

    @model_validator(mode="after")
    def reason_required_when_rejected(self):
        if self.status == "rejected" and not self.rejection_reason:
            raise ValueError("rejection_reason is required when status is rejected")
        return self

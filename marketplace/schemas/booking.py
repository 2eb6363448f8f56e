from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, conint


# --- CREATE ---
class BookingCreate(BaseModel):
    provider_id: int
    service_id: int
    start_time: datetime
    end_time: datetime
    location: str = Field(..., min_length=1, max_length=255)
    access_instructions: Optional[str] = Field(default=None, max_length=1000)
    special_instructions: Optional[str] = Field(default=None, max_length=1000)


# --- UPDATE (client reschedule / detail edit) ---
class BookingUpdate(BaseModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    access_instructions: Optional[str] = Field(default=None, max_length=1000)
    special_instructions: Optional[str] = Field(default=None, max_length=1000)


# --- RATE ---
class CategoryScores(BaseModel):
    punctuality: Optional[conint(ge=1, le=5)] = None
    quality: Optional[conint(ge=1, le=5)] = None
    communication: Optional[conint(ge=1, le=5)] = None
    professionalism: Optional[conint(ge=1, le=5)] = None


class BookingRate(BaseModel):
    rating: conint(ge=1, le=5) = Field(..., description="Overall rating 1-5")
    review: Optional[str] = Field(default=None, max_length=1000)
    categories: Optional[CategoryScores] = None


# --- RESPONSE ---
class PriceResponse(BaseModel):
    base_amount: float
    premium: float
    discount: float
    final_amount: float
    commission: float
    hours: Optional[float] = None
    hourly_rate: Optional[float] = None
    premium_reason: Optional[str] = None
    discount_reason: Optional[str] = None
    currency: Optional[str] = None


class BookingResponse(BaseModel):
    id: int
    client_id: int
    provider_id: int
    service_id: int
    start_time: datetime
    end_time: datetime
    location: dict
    requirements: Optional[dict]
    price: PriceResponse
    status: str
    payment_status: str
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True

from datetime import time
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

Weekday = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8)
    role: Literal["client", "provider"] = "client"
    phone: Optional[str] = None

    # provider profile, used when role == "provider"
    category: Optional[str] = None
    description: Optional[str] = None
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)
    availability: Optional[list[Weekday]] = None
    work_day_start: Optional[time] = None
    work_day_end: Optional[time] = None

    @model_validator(mode="after")
    def check_work_day(self):
        start = self.work_day_start or time(8, 0)
        end = self.work_day_end or time(18, 0)
        if start >= end:
            raise ValueError("work_day_start must be before work_day_end")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: str
    status: str
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class ProviderResponse(BaseModel):
    id: int
    user_id: int
    category: str
    description: str
    hourly_rate: float
    rating: float
    availability: list[str]
    work_day_start: time
    work_day_end: time
    profile_image: Optional[str] = None
    status: str

    class Config:
        from_attributes = True

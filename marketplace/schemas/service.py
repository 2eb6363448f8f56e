# marketplace/schemas/service.py

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class ServiceResponse(BaseModel):
    id: int
    category: str
    description: Optional[str]
    base_rate: float
    requirements: Optional[Any]
    availability: Optional[list[str]]
    min_hours: int
    max_hours: int
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PriceQuoteRequest(BaseModel):
    start_time: datetime
    end_time: datetime

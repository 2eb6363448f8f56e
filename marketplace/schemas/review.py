# marketplace/schemas/review.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ReviewResponse(BaseModel):
    id: int
    booking_id: int
    rater_id: int
    ratee_id: int
    scores: dict[str, int]
    average_score: float
    comment: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

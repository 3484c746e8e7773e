from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional, Union


class RatingIn(BaseModel):
    # Validated by the rating service so the message matches the form's
    score: Union[str, float, None] = None
    comments: Optional[str] = ""


class RatingResponse(BaseModel):
    id: int
    driver_id: int
    month: date
    score: float
    comments: Optional[str]
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RatingSaveResponse(BaseModel):
    created: bool
    rating: RatingResponse

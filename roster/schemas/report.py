from pydantic import BaseModel
from datetime import date
from typing import Dict, List, Optional


class DriverPerformance(BaseModel):
    driver_id: int
    name: str
    status: str
    score: Optional[float]
    evaluations: int


class RatingTrendPoint(BaseModel):
    month: date
    average: float
    ratings: int


class DriverCounts(BaseModel):
    total: int
    by_status: Dict[str, int]


class SummaryResponse(BaseModel):
    drivers: DriverCounts
    evaluation_items: int
    evaluations: int
    ratings_this_month: int


class RatingTrendResponse(BaseModel):
    months: int
    points: List[RatingTrendPoint]

from pydantic import BaseModel, Field, computed_field, field_validator
from datetime import datetime
from typing import Dict, List, Optional

from roster.utils.validators import validate_score, parse_number

WEIGHT_LABELS = {
    1: "Very Low",
    2: "Low",
    3: "Medium",
    4: "High",
    5: "Very High",
}


class EvaluationItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    weight: int = Field(2, ge=1, le=5)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class EvaluationItemResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    weight: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def weight_label(self) -> str:
        return WEIGHT_LABELS.get(self.weight, "N/A")


class ItemScoreIn(BaseModel):
    evaluation_item_id: int
    score: str | float  # as typed, 1-10
    notes: Optional[str] = None

    @field_validator("score")
    @classmethod
    def check_score(cls, v):
        error = validate_score(v)
        if error:
            raise ValueError(error)
        return parse_number(v)


class EvaluationSubmit(BaseModel):
    scores: List[ItemScoreIn] = Field(..., min_length=1)


class AggregatedScoreResponse(BaseModel):
    item_id: int
    name: str
    weight: int
    score: float
    count: int

    model_config = {"from_attributes": True}


class DriverScoresResponse(BaseModel):
    driver_id: int
    overall: Optional[float]
    scores: List[AggregatedScoreResponse]


class GridDriver(BaseModel):
    id: int
    name: str
    scores: Dict[int, Optional[float]]  # item id -> score, None when never evaluated


class EvaluationGridResponse(BaseModel):
    items: List[EvaluationItemResponse]
    drivers: List[GridDriver]

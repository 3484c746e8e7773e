# roster/routers/reports.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roster.core.auth import get_current_user
from roster.database import get_db
from roster.dependencies import get_today
from roster.schemas.report import DriverPerformance, RatingTrendResponse, SummaryResponse
from roster.services import reports

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/performance", response_model=List[DriverPerformance])
async def performance(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await reports.performance_ranking(db)


@router.get("/ratings/trend", response_model=RatingTrendResponse)
async def ratings_trend(
    months: int = Query(6, ge=1, le=36),
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    current_user = Depends(get_current_user)
):
    points = await reports.rating_trend(db, today, months)
    return RatingTrendResponse(months=months, points=points)


@router.get("/summary", response_model=SummaryResponse)
async def summary(
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    current_user = Depends(get_current_user)
):
    return await reports.summary(db, today)

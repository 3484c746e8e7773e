# roster/services/rating.py
import logging
from datetime import date
from typing import Optional, Tuple, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.evaluation import MonthlyRating
from roster.utils.validators import validate_rating, parse_number

logger = logging.getLogger(__name__)


class RatingValidationError(ValueError):
    """Raised when a monthly rating cannot be accepted as typed."""


def first_day_of_month(today: date) -> date:
    return today.replace(day=1)


async def get_current_rating(db: AsyncSession, driver_id: int, today: date) -> Optional[MonthlyRating]:
    result = await db.execute(
        select(MonthlyRating)
        .where(MonthlyRating.driver_id == driver_id)
        .where(MonthlyRating.month == first_day_of_month(today))
        .order_by(MonthlyRating.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def upsert_monthly_rating(
    db: AsyncSession,
    driver_id: int,
    score: Any,
    comments: Optional[str],
    today: date,
) -> Tuple[MonthlyRating, bool]:
    """Store the driver's rating for the month containing ``today``.

    A second submission in the same month updates the existing row in place
    instead of adding another one. Returns ``(rating, created)``.
    """
    error = validate_rating(score)
    if error:
        raise RatingValidationError(error)
    value = parse_number(score)

    rating = await get_current_rating(db, driver_id, today)
    created = rating is None
    if created:
        rating = MonthlyRating(
            driver_id=driver_id,
            month=first_day_of_month(today),
        )
        db.add(rating)

    rating.score = value
    rating.comments = comments or ""
    rating.status = "filled"

    await db.commit()
    await db.refresh(rating)
    logger.info(
        "%s monthly rating %s for driver %s (%s)",
        "Created" if created else "Updated", rating.id, driver_id, rating.month,
    )
    return rating, created

# roster/services/reports.py
from collections import defaultdict
from datetime import date
from typing import Dict, List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.driver import Driver, DriverStatus
from roster.models.evaluation import DriverEvaluation, EvaluationItem, MonthlyRating
from roster.services.evaluation import AggregatedScore, get_all_scores, overall_score
from roster.services.rating import first_day_of_month


def months_back(today: date, months: int) -> date:
    """First day of the month ``months - 1`` months before ``today``'s month."""
    index = today.year * 12 + (today.month - 1) - (months - 1)
    return date(index // 12, index % 12 + 1, 1)


async def performance_ranking(db: AsyncSession) -> List[dict]:
    drivers = (await db.execute(select(Driver).order_by(Driver.name))).scalars().all()
    by_driver: Dict[int, List[AggregatedScore]] = defaultdict(list)
    for score in await get_all_scores(db):
        by_driver[score.driver_id].append(score)

    rows = []
    for driver in drivers:
        scores = by_driver.get(driver.id, [])
        overall = overall_score(scores)
        rows.append({
            "driver_id": driver.id,
            "name": driver.name,
            "status": driver.status,
            "score": round(overall, 2) if overall is not None else None,
            "evaluations": sum(s.count for s in scores),
        })
    # Unscored drivers go last, otherwise highest first
    rows.sort(key=lambda r: (r["score"] is None, -(r["score"] or 0), r["name"]))
    return rows


async def rating_trend(db: AsyncSession, today: date, months: int = 6) -> List[dict]:
    start = months_back(today, months)
    result = await db.execute(
        select(MonthlyRating.month, func.avg(MonthlyRating.score), func.count(MonthlyRating.id))
        .where(MonthlyRating.month >= start)
        .where(MonthlyRating.month <= first_day_of_month(today))
        .group_by(MonthlyRating.month)
        .order_by(MonthlyRating.month)
    )
    return [
        {"month": month, "average": round(float(avg), 2), "ratings": count}
        for month, avg, count in result.all()
    ]


async def summary(db: AsyncSession, today: date) -> dict:
    status_rows = await db.execute(
        select(Driver.status, func.count(Driver.id)).group_by(Driver.status)
    )
    by_status = {s.value: 0 for s in DriverStatus}
    for status, count in status_rows.all():
        by_status[status] = count

    items = await db.execute(select(func.count(EvaluationItem.id)))
    evaluations = await db.execute(select(func.count(DriverEvaluation.id)))
    ratings = await db.execute(
        select(func.count(MonthlyRating.id)).where(MonthlyRating.month == first_day_of_month(today))
    )
    return {
        "drivers": {"total": sum(by_status.values()), "by_status": by_status},
        "evaluation_items": items.scalar_one(),
        "evaluations": evaluations.scalar_one(),
        "ratings_this_month": ratings.scalar_one(),
    }

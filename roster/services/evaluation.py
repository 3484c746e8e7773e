# roster/services/evaluation.py
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.evaluation import DriverEvaluation, EvaluationItem, SCORE_SCALE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatedScore:
    driver_id: int
    item_id: int
    name: str
    weight: int
    score: float  # back on the 1-10 display scale
    count: int


def aggregate_scores(
    evaluations: Iterable[DriverEvaluation],
    items: Mapping[int, EvaluationItem],
    driver_id: Optional[int] = None,
) -> List[AggregatedScore]:
    """Average raw evaluation rows per (driver, item).

    Scores are stored on the x10 scale, so the mean is divided back down.
    A pair with no rows yields no entry at all; callers render a placeholder.
    """
    grouped: Dict[Tuple[int, int], List[float]] = defaultdict(list)
    for ev in evaluations:
        if driver_id is not None and ev.driver_id != driver_id:
            continue
        grouped[(ev.driver_id, ev.evaluation_item_id)].append(float(ev.score))

    result = []
    for (drv_id, item_id), scores in grouped.items():
        item = items.get(item_id)
        if item is None:
            logger.debug("Skipping %d evaluations for missing item %s", len(scores), item_id)
            continue
        result.append(
            AggregatedScore(
                driver_id=drv_id,
                item_id=item_id,
                name=item.name,
                weight=item.weight,
                score=sum(scores) / len(scores) / SCORE_SCALE,
                count=len(scores),
            )
        )
    result.sort(key=lambda s: (-s.weight, s.name, s.driver_id))
    return result


def overall_score(scores: Sequence[AggregatedScore]) -> Optional[float]:
    """Weight-weighted mean of one driver's item averages."""
    total_weight = sum(s.weight for s in scores)
    if not scores or total_weight <= 0:
        return None
    return sum(s.score * s.weight for s in scores) / total_weight


def score_grid(
    driver_ids: Sequence[int],
    item_ids: Sequence[int],
    scores: Iterable[AggregatedScore],
) -> Dict[int, Dict[int, Optional[float]]]:
    lookup = {(s.driver_id, s.item_id): s.score for s in scores}
    return {
        drv_id: {item_id: lookup.get((drv_id, item_id)) for item_id in item_ids}
        for drv_id in driver_ids
    }


async def load_items(db: AsyncSession) -> Dict[int, EvaluationItem]:
    result = await db.execute(select(EvaluationItem))
    return {item.id: item for item in result.scalars().all()}


async def get_driver_scores(db: AsyncSession, driver_id: int) -> List[AggregatedScore]:
    items = await load_items(db)
    result = await db.execute(
        select(DriverEvaluation)
        .where(DriverEvaluation.driver_id == driver_id)
        .order_by(DriverEvaluation.evaluated_at.desc())
    )
    return aggregate_scores(result.scalars().all(), items, driver_id=driver_id)


async def get_all_scores(db: AsyncSession) -> List[AggregatedScore]:
    items = await load_items(db)
    result = await db.execute(select(DriverEvaluation))
    return aggregate_scores(result.scalars().all(), items)

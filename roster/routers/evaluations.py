# roster/routers/evaluations.py
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.core.auth import get_current_user
from roster.database import get_db
from roster.models.driver import Driver
from roster.models.evaluation import EvaluationItem
from roster.schemas.evaluation import EvaluationGridResponse, EvaluationItemResponse, GridDriver
from roster.services.evaluation import get_all_scores, score_grid

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.get("/grid", response_model=EvaluationGridResponse)
async def evaluation_grid(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    """Every driver against every item; cells never evaluated come back as null."""
    drivers = (await db.execute(select(Driver).order_by(Driver.name))).scalars().all()
    items = (await db.execute(
        select(EvaluationItem).order_by(EvaluationItem.weight.desc(), EvaluationItem.name)
    )).scalars().all()

    grid = score_grid(
        [d.id for d in drivers],
        [i.id for i in items],
        await get_all_scores(db),
    )
    return EvaluationGridResponse(
        items=[EvaluationItemResponse.model_validate(i) for i in items],
        drivers=[
            GridDriver(
                id=d.id,
                name=d.name,
                scores={k: round(v, 1) if v is not None else None for k, v in grid[d.id].items()},
            )
            for d in drivers
        ],
    )

# roster/routers/drivers.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import WS_1008_POLICY_VIOLATION

from roster.core.auth import get_current_user, user_from_token
from roster.database import get_db
from roster.dependencies import get_change_feed, get_today
from roster.models.driver import Driver, DriverStatus
from roster.models.evaluation import DriverEvaluation, EvaluationItem, SCORE_SCALE
from roster.schemas.driver import DriverCreate, DriverUpdate, DriverResponse
from roster.schemas.evaluation import EvaluationSubmit, DriverScoresResponse, AggregatedScoreResponse
from roster.schemas.rating import RatingIn, RatingResponse, RatingSaveResponse
from roster.services.change_feed import ChangeFeed, wait_for_change
from roster.services.evaluation import get_driver_scores, overall_score
from roster.services.rating import RatingValidationError, get_current_rating, upsert_monthly_rating
from roster.utils.formatters import only_digits

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drivers", tags=["drivers"])

EVALUATIONS = "driver_evaluations"


async def _get_driver(db: AsyncSession, driver_id: int) -> Driver:
    driver = await db.get(Driver, driver_id)
    if driver is None:
        raise HTTPException(404, "Driver not found")
    return driver


async def _scores_payload(db: AsyncSession, driver_id: int) -> DriverScoresResponse:
    scores = await get_driver_scores(db, driver_id)
    overall = overall_score(scores)
    return DriverScoresResponse(
        driver_id=driver_id,
        overall=round(overall, 2) if overall is not None else None,
        scores=[AggregatedScoreResponse.model_validate(s) for s in scores],
    )


@router.get("", response_model=List[DriverResponse])
async def list_drivers(
    search: Optional[str] = Query(None),
    status: Optional[DriverStatus] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    q = select(Driver)
    if search:
        term = search.strip()
        digits = only_digits(term)
        conditions = [Driver.name.ilike(f"%{term}%")]
        if digits:
            conditions.append(Driver.cpf.contains(digits))
        q = q.where(or_(*conditions))
    if status:
        q = q.where(Driver.status == status.value)
    result = await db.execute(q.order_by(Driver.name))
    return result.scalars().all()


@router.post("", response_model=DriverResponse, status_code=201)
async def create_driver(
    driver_in: DriverCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    existing = await db.execute(select(Driver).where(Driver.cpf == driver_in.cpf))
    if existing.scalar_one_or_none():
        raise HTTPException(400, "A driver with this CPF is already registered")

    driver = Driver(
        name=driver_in.name,
        cpf=driver_in.cpf,
        admission_date=driver_in.admission_date,
        status=driver_in.status.value,
    )
    db.add(driver)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(400, "A driver with this CPF is already registered")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating driver")
        raise HTTPException(500, "Error registering driver")
    await db.refresh(driver)
    logger.info("Registered driver %s", driver.id)
    return driver


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await _get_driver(db, driver_id)


@router.patch("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: int,
    driver_in: DriverUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    driver = await _get_driver(db, driver_id)
    changes = driver_in.model_dump(exclude_unset=True, exclude_none=True)
    if "status" in changes:
        changes["status"] = changes["status"].value
    for field, value in changes.items():
        setattr(driver, field, value)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error updating driver %s", driver_id)
        raise HTTPException(500, "Error updating driver profile")
    await db.refresh(driver)
    return driver


@router.get("/{driver_id}/evaluations", response_model=DriverScoresResponse)
async def get_driver_evaluations(
    driver_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await _get_driver(db, driver_id)
    return await _scores_payload(db, driver_id)


@router.post("/{driver_id}/evaluations", response_model=DriverScoresResponse, status_code=201)
async def submit_evaluation(
    driver_id: int,
    evaluation_in: EvaluationSubmit,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
    current_user = Depends(get_current_user)
):
    await _get_driver(db, driver_id)

    item_ids = {s.evaluation_item_id for s in evaluation_in.scores}
    if len(item_ids) != len(evaluation_in.scores):
        raise HTTPException(400, "Each evaluation item can be scored only once per submission")
    found = await db.execute(select(EvaluationItem.id).where(EvaluationItem.id.in_(item_ids)))
    missing = item_ids - set(found.scalars().all())
    if missing:
        raise HTTPException(400, f"Unknown evaluation items: {sorted(missing)}")

    for entry in evaluation_in.scores:
        db.add(DriverEvaluation(
            driver_id=driver_id,
            evaluation_item_id=entry.evaluation_item_id,
            score=entry.score * SCORE_SCALE,
            notes=entry.notes or None,
            evaluator_id=current_user.id,
        ))
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error saving evaluation for driver %s", driver_id)
        raise HTTPException(500, "Error saving evaluation")

    feed.publish(EVALUATIONS, driver_id)
    return await _scores_payload(db, driver_id)


@router.websocket("/{driver_id}/evaluations/stream")
async def stream_evaluations(websocket: WebSocket, driver_id: int, token: str = Query(...)):
    """Push the driver's aggregated scores now and after every new evaluation."""
    feed: ChangeFeed = websocket.app.state.change_feed
    session_factory = websocket.app.state.session_factory

    async with session_factory() as db:
        user = await user_from_token(db, token)
        driver = await db.get(Driver, driver_id)
    if user is None:
        await websocket.close(code=WS_1008_POLICY_VIOLATION)
        return
    if driver is None:
        await websocket.close(code=WS_1008_POLICY_VIOLATION, reason="Driver not found")
        return

    await websocket.accept()
    async with feed.listen(EVALUATIONS, driver_id) as changes:
        try:
            while True:
                async with session_factory() as db:
                    payload = await _scores_payload(db, driver_id)
                await websocket.send_json(payload.model_dump(mode="json"))
                if not await wait_for_change(changes, websocket.receive):
                    break
        except WebSocketDisconnect:
            pass
    logger.debug("Evaluation stream for driver %s closed", driver_id)


@router.get("/{driver_id}/rating", response_model=Optional[RatingResponse])
async def get_monthly_rating(
    driver_id: int,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    current_user = Depends(get_current_user)
):
    await _get_driver(db, driver_id)
    return await get_current_rating(db, driver_id, today)


@router.put("/{driver_id}/rating", response_model=RatingSaveResponse)
async def save_monthly_rating(
    driver_id: int,
    rating_in: RatingIn,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    current_user = Depends(get_current_user)
):
    await _get_driver(db, driver_id)
    try:
        rating, created = await upsert_monthly_rating(db, driver_id, rating_in.score, rating_in.comments, today)
    except RatingValidationError as e:
        raise HTTPException(400, str(e))
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error saving rating for driver %s", driver_id)
        raise HTTPException(500, "Error saving rating")
    return RatingSaveResponse(created=created, rating=rating)

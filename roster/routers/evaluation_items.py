# roster/routers/evaluation_items.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.core.auth import get_current_user, get_current_admin
from roster.database import get_db
from roster.models.evaluation import EvaluationItem
from roster.schemas.evaluation import EvaluationItemCreate, EvaluationItemResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluation-items", tags=["evaluation items"])


async def _get_item(db: AsyncSession, item_id: int) -> EvaluationItem:
    item = await db.get(EvaluationItem, item_id)
    if item is None:
        raise HTTPException(404, "Evaluation item not found")
    return item


@router.get("", response_model=List[EvaluationItemResponse])
async def list_items(
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    q = select(EvaluationItem)
    if search:
        q = q.where(EvaluationItem.name.ilike(f"%{search.strip()}%"))
    result = await db.execute(q.order_by(EvaluationItem.weight.desc(), EvaluationItem.name))
    return result.scalars().all()


@router.post("", response_model=EvaluationItemResponse, status_code=201)
async def create_item(
    item_in: EvaluationItemCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    item = EvaluationItem(**item_in.model_dump())
    db.add(item)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating evaluation item")
        raise HTTPException(500, "Error saving evaluation item")
    await db.refresh(item)
    return item


@router.put("/{item_id}", response_model=EvaluationItemResponse)
async def update_item(
    item_id: int,
    item_in: EvaluationItemCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    item = await _get_item(db, item_id)
    for field, value in item_in.model_dump().items():
        setattr(item, field, value)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error updating evaluation item %s", item_id)
        raise HTTPException(500, "Error saving evaluation item")
    await db.refresh(item)
    return item


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    item = await _get_item(db, item_id)
    await db.delete(item)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error deleting evaluation item %s", item_id)
        raise HTTPException(500, "Error deleting evaluation item")

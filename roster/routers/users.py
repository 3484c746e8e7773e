# roster/routers/users.py
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func, or_, asc, desc, nulls_last
from sqlalchemy.ext.asyncio import AsyncSession

from roster.config import settings
from roster.core.auth import get_current_admin
from roster.database import get_db
from roster.models.user import User
from roster.schemas.user import UserPage, UserResponse, UserSortKey

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserPage)
async def list_users(
    search: Optional[str] = Query(None),
    sort: UserSortKey = Query("created_at"),
    direction: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    q = select(User)
    if search:
        term = f"%{search.strip()}%"
        q = q.where(or_(User.full_name.ilike(term), User.email.ilike(term)))

    total = (await db.execute(select(func.count()).select_from(q.subquery()))).scalar_one()

    order = asc if direction == "asc" else desc
    page_size = settings.USERS_PAGE_SIZE
    result = await db.execute(
        q.order_by(nulls_last(order(getattr(User, sort))), User.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return UserPage(
        page=page,
        page_size=page_size,
        total=total,
        pages=max(1, math.ceil(total / page_size)),
        users=[UserResponse.model_validate(u) for u in result.scalars().all()],
    )

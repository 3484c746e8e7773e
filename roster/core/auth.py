# roster/core/auth.py
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from roster.database import get_db
from roster.models.user import User, Role, ROLE_LEVELS
from roster.config import settings

reusable_oauth2 = HTTPBearer()


async def user_from_token(db: AsyncSession, token: str) -> Optional[User]:
    """Resolve an access token to an active user, or None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("sub")
    if user_id is None or payload.get("type", "access") != "access":
        return None

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: HTTPAuthorizationCredentials = Depends(reusable_oauth2)
):
    user = await user_from_token(db, token.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def has_role(user: User, required: Role) -> bool:
    try:
        level = ROLE_LEVELS[Role(user.role)]
    except ValueError:
        return False
    return level >= ROLE_LEVELS[required]


def require_role(required: Role):
    async def dependency(current_user: User = Depends(get_current_user)):
        if not has_role(current_user, required):
            raise HTTPException(403, f"{required.value.capitalize()} access required")
        return current_user
    return dependency


get_current_admin = require_role(Role.ADMINISTRATOR)

"""FastAPI dependencies: current user from JWT, permission checks, paging params."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from training_admin.config import settings
from training_admin.core.auth import ACCESS_TOKEN_TYPE, decode_token
from training_admin.db.session import get_db, get_session_factory
from training_admin.models.role import Role
from training_admin.models.user import User
from training_admin.services.query.pagination import PageRequest, resolve_page


async def get_current_user(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = auth_header[7:].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        user_id = int(payload.get("sub") or "")
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token")
    r = await session.execute(
        select(User)
        .options(
            selectinload(User.role).selectinload(Role.permissions),
            selectinload(User.state),
            selectinload(User.range),
        )
        .where(User.id == user_id)
    )
    user = r.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is inactive")
    return user


def has_permission(user: User, code: str) -> bool:
    role = user.role
    if role is None or not role.is_active:
        return False
    return any(p.code == code and p.is_active for p in role.permissions)


def require_permission(code: str):
    """Dependency factory: 403 unless the user's active role grants ``code``."""

    async def dependency(user: Annotated[User, Depends(get_current_user)]) -> User:
        if not has_permission(user, code):
            raise HTTPException(status_code=403, detail=f"Permission '{code}' required")
        return user

    return dependency


def page_params(
    page: Annotated[str | None, Query(description="1-based page number")] = None,
    limit: Annotated[str | None, Query(description="Items per page")] = None,
) -> PageRequest:
    """Invalid or missing values fall back to defaults instead of failing the request."""
    return resolve_page(
        page, limit, default_limit=settings.default_page_size, max_limit=settings.max_page_size
    )


DbSession = Annotated[AsyncSession, Depends(get_db)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
CurrentUser = Annotated[User, Depends(get_current_user)]
Page = Annotated[PageRequest, Depends(page_params)]

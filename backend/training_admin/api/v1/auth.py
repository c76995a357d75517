"""Auth: login, refresh, me, and the modules the current user may open."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_admin.api.deps import CurrentUser, has_permission
from training_admin.api.responses import dump, ok
from training_admin.config import settings
from training_admin.core.auth import (
    create_access_token,
    create_refresh_token,
    hash_refresh_token,
    verify_password,
)
from training_admin.core.permissions import MANAGE_PERMISSIONS
from training_admin.db.session import get_db
from training_admin.models.refresh_token import RefreshToken
from training_admin.models.user import User
from training_admin.schemas.user import UserDetail
from training_admin.services.modules import module_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

ACCESS_TOKEN_EXPIRE_SECONDS = settings.access_token_expire_minutes * 60


class LoginBody(BaseModel):
    email: str
    password: str


class RefreshBody(BaseModel):
    refresh_token: str


def _issue_tokens(session: AsyncSession, user: User) -> dict:
    """Access token plus a stored (hashed) refresh token."""
    refresh_plain = create_refresh_token()
    session.add(
        RefreshToken(
            user_id=user.id,
            token_hash=hash_refresh_token(refresh_plain),
            expires_at=datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days),
        )
    )
    return {
        "access_token": create_access_token(user.id, user.email, user.role_id),
        "refresh_token": refresh_plain,
        "token_type": "bearer",
        "expires_in": ACCESS_TOKEN_EXPIRE_SECONDS,
        "user": {"id": user.id, "email": user.email, "role_id": user.role_id},
    }


@router.post(
    "/login",
    summary="Login with email and password",
    responses={401: {"description": "Invalid email or password"}, 403: {"description": "Account inactive"}},
)
async def login(
    session: Annotated[AsyncSession, Depends(get_db)],
    body: LoginBody,
) -> dict:
    email = (body.email or "").strip().lower()
    if not email or not body.password:
        raise HTTPException(status_code=401, detail="Email and password required")
    r = await session.execute(select(User).where(User.email == email))
    user = r.scalar_one_or_none()
    if not user or not user.password_hash or not verify_password(body.password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is inactive")
    tokens = _issue_tokens(session, user)
    await session.flush()
    return ok(tokens, "Login successful")


@router.post(
    "/refresh",
    summary="Exchange refresh token for new access and refresh tokens",
    responses={401: {"description": "Refresh token required, invalid or expired"}},
)
async def refresh_tokens(
    session: Annotated[AsyncSession, Depends(get_db)],
    body: RefreshBody,
) -> dict:
    """Rotation: the presented refresh token is consumed."""
    if not body.refresh_token.strip():
        raise HTTPException(status_code=401, detail="Refresh token required")
    r = await session.execute(
        select(RefreshToken).where(
            RefreshToken.token_hash == hash_refresh_token(body.refresh_token.strip()),
            RefreshToken.expires_at > datetime.now(timezone.utc),
        )
    )
    row = r.scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
    user_id = row.user_id
    await session.delete(row)
    await session.flush()
    user = await session.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")
    tokens = _issue_tokens(session, user)
    await session.flush()
    return ok(tokens, "Token refreshed")


@router.get("/me", summary="Get current authenticated user")
async def me(user: CurrentUser) -> dict:
    data = dump(UserDetail, user)
    data["permissions"] = sorted(
        p.code for p in (user.role.permissions if user.role else []) if p.is_active
    )
    data["can_manage"] = sorted(
        resource for resource, code in MANAGE_PERMISSIONS.items() if has_permission(user, code)
    )
    return ok(data, "Current user retrieved successfully")


@router.get("/me/modules", summary="Modules available to the current user")
async def my_modules(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: CurrentUser,
) -> dict:
    modules = await module_service.modules_for_user(session, user)
    return ok(modules, "User modules retrieved successfully")

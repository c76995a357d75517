"""Pytest configuration and shared fixtures for API tests.

Tests run against a throwaway SQLite file (aiosqlite) so no database server is needed.
"""

import os
import tempfile

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

_DB_PATH = os.path.join(tempfile.gettempdir(), f"training_admin_test_{os.getpid()}.db")
if os.path.exists(_DB_PATH):
    os.remove(_DB_PATH)

# Set test DB before app imports so config/engine use it
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from training_admin.core.auth import create_access_token, hash_password
from training_admin.core.permissions import MANAGE_PERMISSIONS
from training_admin.db.base import Base
from training_admin.db.session import async_session_maker, engine
from training_admin.main import app
from training_admin.models import Permission, Role, User

ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "password123"


async def _reset_tables():
    """Create missing tables, then delete every row in reverse dependency order."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())


@pytest_asyncio.fixture
async def clean_db():
    await _reset_tables()
    yield


@pytest_asyncio.fixture
async def client(clean_db):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def _create_user(email: str, role_id: int | None = None, is_active: bool = True) -> tuple[int, str]:
    async with async_session_maker() as session:
        user = User(
            email=email,
            first_name="Test",
            password_hash=hash_password(ADMIN_PASSWORD),
            role_id=role_id,
            is_active=is_active,
        )
        session.add(user)
        await session.commit()
        return user.id, create_access_token(user.id, user.email, role_id)


@pytest_asyncio.fixture
async def admin_user(clean_db):
    """User whose role grants every manage permission. Returns (user_id, access_token)."""
    async with async_session_maker() as session:
        permissions = [
            Permission(name=f"Manage {resource}", code=code)
            for resource, code in MANAGE_PERMISSIONS.items()
        ]
        role = Role(name="Administrator", permissions=permissions)
        session.add(role)
        await session.commit()
        role_id = role.id
    return await _create_user(ADMIN_EMAIL, role_id)


@pytest_asyncio.fixture
async def auth_headers(admin_user):
    _, token = admin_user
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def viewer_headers(clean_db):
    """Authenticated user without a role: may read, may not write."""
    _, token = await _create_user("viewer@test.com")
    return {"Authorization": f"Bearer {token}"}

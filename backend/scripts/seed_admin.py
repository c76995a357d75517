#!/usr/bin/env python3
"""Create the manage permissions, an Administrator role holding all of them, and an admin user.
Safe to re-run: existing rows are reused, missing grants are added.
Usage: ADMIN_EMAIL=admin@example.org ADMIN_PASSWORD=secret123 python scripts/seed_admin.py"""
import asyncio
import os

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from training_admin.core.auth import hash_password
from training_admin.core.permissions import MANAGE_PERMISSIONS
from training_admin.db.session import async_session_maker, init_db
from training_admin.models import Permission, Role, User

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "").strip().lower()
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "")
ROLE_NAME = os.environ.get("ADMIN_ROLE", "Administrator")


async def main():
    if not ADMIN_EMAIL or len(ADMIN_PASSWORD) < 8:
        print("Set ADMIN_EMAIL and ADMIN_PASSWORD (min 8 chars) in environment")
        return
    await init_db()
    async with async_session_maker() as session:
        permissions = []
        for resource, code in MANAGE_PERMISSIONS.items():
            r = await session.execute(select(Permission).where(Permission.code == code))
            perm = r.scalar_one_or_none()
            if perm is None:
                perm = Permission(name=f"Manage {resource.replace('_', ' ')}", code=code)
                session.add(perm)
                print("Created permission", code)
            permissions.append(perm)
        await session.flush()

        r = await session.execute(
            select(Role).options(selectinload(Role.permissions)).where(Role.name == ROLE_NAME)
        )
        role = r.scalar_one_or_none()
        if role is None:
            role = Role(name=ROLE_NAME, description="Full access to the admin catalog")
            session.add(role)
            await session.flush()
            await session.refresh(role, ["permissions"])
            print("Created role", ROLE_NAME)
        granted = {p.id for p in role.permissions}
        role.permissions.extend(p for p in permissions if p.id not in granted)

        r = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
        user = r.scalar_one_or_none()
        if user is None:
            session.add(
                User(
                    email=ADMIN_EMAIL,
                    first_name="Admin",
                    password_hash=hash_password(ADMIN_PASSWORD),
                    role_id=role.id,
                )
            )
            print("Created user", ADMIN_EMAIL)
        else:
            user.role_id = role.id
            print("User exists; role set to", ROLE_NAME)
        await session.commit()


if __name__ == "__main__":
    asyncio.run(main())

"""Roles group permissions; a user's role decides what it may change."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from training_admin.core.errors import QueryValidationError
from training_admin.models import Permission, Role, User, role_permissions
from training_admin.models.mixins import utcnow
from training_admin.schemas.role import RoleResponse
from training_admin.services.audit import log_action
from training_admin.services.catalog import CatalogService, ChildRelation
from training_admin.services.query.config import EntityQueryConfig

logger = logging.getLogger(__name__)

ROLE_QUERY = EntityQueryConfig(
    model=Role,
    sortable={
        "id": "id",
        "name": "name",
        "is_active": "is_active",
        "created_at": "created_at",
        "updated_at": "updated_at",
    },
    searchable=("name", "description"),
    filterable={"is_active": "is_active"},
    default_sort=("name", "ASC"),
)


class RoleService(CatalogService):
    model = Role
    resource = "roles"
    label = "Role"
    config = ROLE_QUERY
    read_schema = RoleResponse
    children = (
        ChildRelation(
            "permissions",
            role_permissions,
            role_permissions.c.role_id,
            "permission_count",
            blocks_delete=False,
        ),
        ChildRelation(
            "users",
            User,
            User.role_id,
            "user_count",
            delete_message="Cannot delete role while users are assigned to it",
        ),
    )
    detail_options = (selectinload(Role.permissions),)
    conflict_message = "Role with this name already exists"

    async def _load_permissions(self, session: AsyncSession, permission_ids: list[int]) -> list[Permission]:
        ids = sorted(set(permission_ids))
        if not ids:
            return []
        result = await session.execute(select(Permission).where(Permission.id.in_(ids)))
        permissions = list(result.scalars().all())
        missing = sorted(set(ids) - {p.id for p in permissions})
        if missing:
            raise QueryValidationError(
                f"Unknown permission ids: {missing}", details={"missing_ids": missing}
            )
        return permissions

    async def create(self, session, data, actor_id):
        values = dict(data)
        permissions = await self._load_permissions(session, values.pop("permission_ids", None) or [])
        role = await super().create(session, values, actor_id)
        if permissions:
            role = await self.set_permissions(session, role.id, [p.id for p in permissions], actor_id)
        return role

    async def set_permissions(
        self, session: AsyncSession, role_id: int, permission_ids: list[int], actor_id: int | None
    ) -> Role | None:
        """Replace the role's permission set; unknown ids reject the whole change."""
        role = await self.get(session, role_id)
        if role is None:
            return None
        permissions = await self._load_permissions(session, permission_ids)
        role.permissions = permissions
        role.updated_by = actor_id
        role.updated_at = utcnow()
        await self._flush(session)
        await log_action(
            session,
            actor_id,
            "set_permissions",
            self.resource,
            role_id,
            details={"permission_ids": [p.id for p in permissions]},
        )
        logger.info("Role %s now has %d permissions", role_id, len(permissions))
        return await self.get(session, role_id)


role_service = RoleService()

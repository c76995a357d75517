"""Module catalog: top of the training content tree and owner of permissions."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from training_admin.models import Module, Permission, Topic, User, role_permissions
from training_admin.schemas.common import OrderedRef
from training_admin.schemas.module import ModuleResponse, PermissionRef
from training_admin.services.catalog import CatalogService, ChildRelation
from training_admin.services.query.config import EntityQueryConfig

MODULE_QUERY = EntityQueryConfig(
    model=Module,
    sortable={
        "id": "id",
        "name": "name",
        "display_order": "display_order",
        "is_active": "is_active",
        "created_at": "created_at",
        "updated_at": "updated_at",
    },
    searchable=("name", "description", "route"),
    filterable={"is_active": "is_active"},
    default_sort=("display_order", "ASC"),
)


class ModuleService(CatalogService):
    model = Module
    resource = "modules"
    label = "Module"
    config = MODULE_QUERY
    read_schema = ModuleResponse
    ordered = True
    children = (
        ChildRelation("topics", Topic, Topic.module_id, "topic_count"),
        ChildRelation("permissions", Permission, Permission.module_id, "permission_count"),
    )
    detail_options = (selectinload(Module.topics), selectinload(Module.permissions))
    dropdown_fields = ("id", "name", "icon", "route", "display_order")
    bulk_fields = ("name", "description", "icon", "route", "display_order", "is_active")
    clearable_fields = ("description", "icon", "route")
    conflict_message = "Module with this name already exists"

    async def hierarchy(self, session: AsyncSession, module_id: int) -> dict[str, Any] | None:
        """Module with its active topics (each with active sub-topics) and active permissions."""
        result = await session.execute(
            select(Module)
            .options(
                selectinload(Module.topics).selectinload(Topic.sub_topics),
                selectinload(Module.permissions),
            )
            .where(Module.id == module_id)
            .execution_options(populate_existing=True)
        )
        module = result.scalar_one_or_none()
        if module is None:
            return None
        data = self.to_item(module)
        data["topics"] = [
            {
                **OrderedRef.model_validate(topic).model_dump(mode="json"),
                "sub_topics": [
                    OrderedRef.model_validate(st).model_dump(mode="json")
                    for st in topic.sub_topics
                    if st.is_active
                ],
            }
            for topic in module.topics
            if topic.is_active
        ]
        data["permissions"] = [
            PermissionRef.model_validate(p).model_dump(mode="json")
            for p in module.permissions
            if p.is_active
        ]
        return data

    async def modules_for_user(self, session: AsyncSession, user: User) -> list[dict[str, Any]]:
        """Active modules reachable through the user's role, each with the permissions granted."""
        if user.role_id is None or user.role is None or not user.role.is_active:
            return []
        result = await session.execute(
            select(Permission)
            .join(role_permissions, role_permissions.c.permission_id == Permission.id)
            .join(Module, Module.id == Permission.module_id)
            .options(selectinload(Permission.module))
            .where(
                role_permissions.c.role_id == user.role_id,
                Permission.is_active.is_(True),
                Module.is_active.is_(True),
            )
            .order_by(Module.display_order.asc(), Module.id.asc(), Permission.name.asc())
        )
        modules: dict[int, dict[str, Any]] = {}
        for perm in result.scalars().all():
            entry = modules.get(perm.module_id)
            if entry is None:
                entry = modules[perm.module_id] = {**self.to_item(perm.module), "permissions": []}
            entry["permissions"].append(PermissionRef.model_validate(perm).model_dump(mode="json"))
        return list(modules.values())


module_service = ModuleService()

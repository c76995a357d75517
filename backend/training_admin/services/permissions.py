from sqlalchemy.orm import selectinload

from training_admin.models import Module, Permission, role_permissions
from training_admin.schemas.permission import PermissionResponse
from training_admin.services.catalog import CatalogService, ChildRelation
from training_admin.services.query.config import EntityQueryConfig

PERMISSION_QUERY = EntityQueryConfig(
    model=Permission,
    sortable={
        "id": "id",
        "name": "name",
        "code": "code",
        "module_id": "module_id",
        "is_active": "is_active",
        "created_at": "created_at",
    },
    searchable=("name", "code", "description"),
    filterable={"module_id": "module_id", "is_active": "is_active"},
    default_sort=("name", "ASC"),
)


class PermissionService(CatalogService):
    model = Permission
    resource = "permissions"
    label = "Permission"
    config = PERMISSION_QUERY
    read_schema = PermissionResponse
    scope_field = "module_id"
    children = (
        ChildRelation(
            "roles",
            role_permissions,
            role_permissions.c.permission_id,
            "role_count",
            delete_message="Cannot delete permission while it is assigned to roles",
        ),
    )
    detail_options = (selectinload(Permission.module),)
    dropdown_fields = ("id", "name", "code", "module_id")
    clearable_fields = ("description", "module_id")
    conflict_message = "Permission with this name or code already exists"

    async def prepare(self, session, values, current=None):
        await self._require(session, Module, values.get("module_id"), "Module")
        if values.get("code"):
            values["code"] = values["code"].lower()
        return values


permission_service = PermissionService()

from typing import Annotated

from fastapi import APIRouter

from training_admin.api.deps import CurrentUser, DbSession
from training_admin.api.responses import dump, ok
from training_admin.api.v1.catalog import add_collection_routes, add_item_routes, manager, not_found
from training_admin.models.user import User
from training_admin.schemas.module import PermissionRef
from training_admin.schemas.role import (
    RoleCreate,
    RoleDetail,
    RolePermissionsRequest,
    RoleUpdate,
)
from training_admin.services.roles import role_service

router = APIRouter(prefix="/roles", tags=["roles"])


def role_filters(is_active: bool | None = None) -> dict:
    return {"is_active": is_active}


add_collection_routes(
    router,
    role_service,
    plural="Roles",
    create_schema=RoleCreate,
    filters=role_filters,
)
add_item_routes(router, role_service, update_schema=RoleUpdate, detail_schema=RoleDetail)


@router.get("/{item_id}/permissions", summary="Permissions granted by a role")
async def role_permissions(session: DbSession, user: CurrentUser, item_id: int) -> dict:
    role = await role_service.get(session, item_id)
    if role is None:
        raise not_found(role_service, item_id)
    return ok([dump(PermissionRef, p) for p in role.permissions], "Role permissions retrieved successfully")


@router.put("/{item_id}/permissions", summary="Replace the permissions of a role")
async def set_role_permissions(
    session: DbSession,
    user: Annotated[User, manager("roles")],
    item_id: int,
    body: RolePermissionsRequest,
) -> dict:
    actor_id = user.id
    role = await role_service.set_permissions(session, item_id, body.permission_ids, actor_id)
    if role is None:
        raise not_found(role_service, item_id)
    return ok(dump(RoleDetail, role), "Role permissions updated successfully")

from fastapi import APIRouter

from training_admin.api.v1.catalog import add_collection_routes, add_item_routes
from training_admin.schemas.permission import (
    PermissionCreate,
    PermissionDetail,
    PermissionUpdate,
)
from training_admin.services.permissions import permission_service

router = APIRouter(prefix="/permissions", tags=["permissions"])


def permission_filters(module_id: int | None = None, is_active: bool | None = None) -> dict:
    return {"module_id": module_id, "is_active": is_active}


add_collection_routes(
    router,
    permission_service,
    plural="Permissions",
    create_schema=PermissionCreate,
    filters=permission_filters,
)
add_item_routes(
    router, permission_service, update_schema=PermissionUpdate, detail_schema=PermissionDetail
)

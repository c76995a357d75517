"""Admin user management. Password hashes are never returned."""

from fastapi import APIRouter

from training_admin.api.v1.catalog import add_collection_routes, add_item_routes
from training_admin.schemas.user import UserCreate, UserDetail, UserUpdate
from training_admin.services.users import user_service

router = APIRouter(prefix="/users", tags=["users"])


def user_filters(
    role_id: int | None = None,
    state_id: int | None = None,
    range_id: int | None = None,
    is_active: bool | None = None,
) -> dict:
    return {"role_id": role_id, "state_id": state_id, "range_id": range_id, "is_active": is_active}


add_collection_routes(
    router,
    user_service,
    plural="Users",
    create_schema=UserCreate,
    filters=user_filters,
)
add_item_routes(router, user_service, update_schema=UserUpdate, detail_schema=UserDetail)

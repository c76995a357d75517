from fastapi import APIRouter

from training_admin.api.deps import CurrentUser, DbSession, Page
from training_admin.api.responses import paged
from training_admin.api.v1.catalog import add_collection_routes, add_item_routes, not_found
from training_admin.schemas.state import StateCreate, StateDetail, StateUpdate
from training_admin.services.ranges import range_service
from training_admin.services.states import state_service

router = APIRouter(prefix="/states", tags=["states"])


def state_filters(is_active: bool | None = None) -> dict:
    return {"is_active": is_active}


add_collection_routes(
    router,
    state_service,
    plural="States",
    create_schema=StateCreate,
    filters=state_filters,
)
add_item_routes(router, state_service, update_schema=StateUpdate, detail_schema=StateDetail)


@router.get("/{item_id}/ranges", summary="Ranges of a state")
async def state_ranges(
    session: DbSession,
    user: CurrentUser,
    page: Page,
    item_id: int,
    is_active: bool | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> dict:
    if await session.get(state_service.model, item_id) is None:
        raise not_found(state_service, item_id)
    result = await range_service.list_page(
        session,
        page,
        filters={"state_id": item_id, "is_active": is_active},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paged(result, "Ranges retrieved successfully")

from fastapi import APIRouter

from training_admin.api.deps import CurrentUser, DbSession, Page
from training_admin.api.responses import paged
from training_admin.api.v1.catalog import add_collection_routes, add_item_routes, not_found
from training_admin.schemas.range import RangeCreate, RangeDetail, RangeUpdate
from training_admin.services.districts import district_service
from training_admin.services.ranges import range_service

router = APIRouter(prefix="/ranges", tags=["ranges"])


def range_filters(state_id: int | None = None, is_active: bool | None = None) -> dict:
    return {"state_id": state_id, "is_active": is_active}


add_collection_routes(
    router,
    range_service,
    plural="Ranges",
    create_schema=RangeCreate,
    filters=range_filters,
)
add_item_routes(router, range_service, update_schema=RangeUpdate, detail_schema=RangeDetail)


@router.get("/{item_id}/districts", summary="Districts of a range")
async def range_districts(
    session: DbSession,
    user: CurrentUser,
    page: Page,
    item_id: int,
    is_active: bool | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> dict:
    if await session.get(range_service.model, item_id) is None:
        raise not_found(range_service, item_id)
    result = await district_service.list_page(
        session,
        page,
        filters={"range_id": item_id, "is_active": is_active},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paged(result, "Districts retrieved successfully")

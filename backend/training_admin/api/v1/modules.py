"""Module catalog routes, plus module-scoped topic and permission listings."""

from fastapi import APIRouter, HTTPException

from training_admin.api.deps import CurrentUser, DbSession, Page
from training_admin.api.responses import ok, paged
from training_admin.api.v1.catalog import add_collection_routes, add_item_routes, not_found
from training_admin.schemas.module import ModuleBulkRequest, ModuleCreate, ModuleDetail, ModuleUpdate
from training_admin.services.modules import module_service
from training_admin.services.permissions import permission_service
from training_admin.services.topics import topic_service

router = APIRouter(prefix="/modules", tags=["modules"])


def module_filters(is_active: bool | None = None) -> dict:
    return {"is_active": is_active}


add_collection_routes(
    router,
    module_service,
    plural="Modules",
    create_schema=ModuleCreate,
    bulk_schema=ModuleBulkRequest,
    filters=module_filters,
)
add_item_routes(router, module_service, update_schema=ModuleUpdate, detail_schema=ModuleDetail)


@router.get("/{item_id}/hierarchy", summary="Module with topics and sub-topics")
async def module_hierarchy(session: DbSession, user: CurrentUser, item_id: int) -> dict:
    data = await module_service.hierarchy(session, item_id)
    if data is None:
        raise not_found(module_service, item_id)
    return ok(data, "Module hierarchy retrieved successfully")


async def _require_module(session, module_id: int) -> None:
    if await session.get(module_service.model, module_id) is None:
        raise HTTPException(status_code=404, detail=f"Module {module_id} not found")


@router.get("/{item_id}/topics", summary="Topics of a module")
async def module_topics(
    session: DbSession,
    user: CurrentUser,
    page: Page,
    item_id: int,
    is_active: bool | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> dict:
    await _require_module(session, item_id)
    result = await topic_service.list_page(
        session,
        page,
        filters={"module_id": item_id, "is_active": is_active},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paged(result, "Topics retrieved successfully")


@router.get("/{item_id}/permissions", summary="Permissions of a module")
async def module_permissions(
    session: DbSession,
    user: CurrentUser,
    page: Page,
    item_id: int,
    is_active: bool | None = None,
) -> dict:
    await _require_module(session, item_id)
    result = await permission_service.list_page(
        session, page, filters={"module_id": item_id, "is_active": is_active}
    )
    return paged(result, "Permissions retrieved successfully")

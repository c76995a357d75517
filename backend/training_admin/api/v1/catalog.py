"""Route builders shared by the catalog routers.

Collection routes (``/search``, ``/active``, ``/reorder`` ...) must be registered before the
``/{item_id}`` routes so the static paths are matched first; entity routers call
``add_collection_routes`` then add their own static routes, then ``add_item_routes``.
"""

from typing import Annotated, Any, Callable

from fastapi import APIRouter, Depends, HTTPException, Query

from training_admin.api.deps import CurrentUser, DbSession, Page, SessionFactory, require_permission
from training_admin.api.responses import dump, ok, paged
from training_admin.core.permissions import MANAGE_PERMISSIONS
from training_admin.models.user import User
from training_admin.schemas.common import ReorderRequest
from training_admin.services.catalog import CatalogService
from training_admin.services.query.reorder import ReorderItem


def no_filters() -> dict[str, Any]:
    return {}


def manager(resource: str):
    return Depends(require_permission(MANAGE_PERMISSIONS[resource]))


def not_found(service: CatalogService, item_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{service.label} {item_id} not found")


def add_collection_routes(
    router: APIRouter,
    service: CatalogService,
    *,
    plural: str,
    create_schema: type,
    bulk_schema: type | None = None,
    filters: Callable[..., dict[str, Any]] = no_filters,
) -> None:
    Filters = Annotated[dict[str, Any], Depends(filters)]
    Manager = Annotated[User, manager(service.resource)]

    @router.get("", summary=f"List {plural.lower()}")
    async def list_items(
        session: DbSession,
        user: CurrentUser,
        page: Page,
        scope: Filters,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> dict:
        result = await service.list_page(
            session, page, search=search, filters=scope, sort_by=sort_by, sort_order=sort_order
        )
        return paged(result, f"{plural} retrieved successfully")

    @router.get("/search", summary=f"Search {plural.lower()}")
    async def search_items(
        session: DbSession,
        user: CurrentUser,
        page: Page,
        scope: Filters,
        q: Annotated[str | None, Query(description="Search term")] = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> dict:
        result = await service.search(
            session, q, page, filters=scope, sort_by=sort_by, sort_order=sort_order
        )
        return paged(result, f"{plural} search completed")

    @router.get("/active", summary=f"Active {plural.lower()}")
    async def active_items(session: DbSession, user: CurrentUser, scope: Filters) -> dict:
        rows = await service.active(session, scope)
        return ok([service.to_item(r) for r in rows], f"Active {plural.lower()} retrieved successfully")

    @router.get("/dropdown", summary=f"{plural} for select inputs")
    async def dropdown_items(session: DbSession, user: CurrentUser, scope: Filters) -> dict:
        return ok(await service.dropdown(session, scope), f"{plural} retrieved successfully")

    @router.get("/statistics", summary=f"{plural} statistics")
    async def item_statistics(
        session_factory: SessionFactory, user: CurrentUser, scope: Filters
    ) -> dict:
        stats = await service.statistics(session_factory, filters=scope)
        return ok(stats, f"{service.label} statistics retrieved successfully")

    @router.get("/usage", summary=f"{plural} with child counts")
    async def item_usage(session: DbSession, user: CurrentUser, scope: Filters) -> dict:
        return ok(await service.usage(session, scope), f"{service.label} usage retrieved successfully")

    if service.name_field is not None:

        @router.get("/name-exists", summary=f"Check whether a {service.label.lower()} name is taken")
        async def name_exists(
            session: DbSession,
            user: CurrentUser,
            scope: Filters,
            name: Annotated[str, Query(min_length=1)],
            exclude_id: int | None = None,
        ) -> dict:
            scope_id = scope.get(service.scope_field) if service.scope_field else None
            exists = await service.name_exists(session, name, scope_id=scope_id, exclude_id=exclude_id)
            return ok({"exists": exists}, "Name check completed")

    if service.ordered:

        @router.get("/next-display-order", summary="Next free display order")
        async def next_display_order(session: DbSession, user: CurrentUser, scope: Filters) -> dict:
            scope_id = scope.get(service.scope_field) if service.scope_field else None
            value = await service.next_display_order(session, scope_id)
            return ok({"next_display_order": value}, "Next display order retrieved successfully")

        @router.put("/reorder", summary=f"Reorder {plural.lower()}")
        async def reorder_items(
            session_factory: SessionFactory, user: Manager, body: ReorderRequest
        ) -> dict:
            actor_id = user.id
            items = [ReorderItem(id=e.id, display_order=e.display_order) for e in body.items]
            rows = await service.reorder(session_factory, items, actor_id)
            return ok(rows, f"{plural} reordered successfully")

    if bulk_schema is not None:

        @router.put("/bulk", summary=f"Bulk update {plural.lower()}")
        async def bulk_update_items(
            session_factory: SessionFactory, user: Manager, body: bulk_schema
        ) -> dict:
            actor_id = user.id
            entries = [item.model_dump(exclude_unset=True) for item in body.items]
            rows = await service.bulk_update(session_factory, entries, actor_id)
            return ok(rows, f"{plural} updated successfully")

    @router.post("", status_code=201, summary=f"Create {service.label.lower()}")
    async def create_item(session: DbSession, user: Manager, body: create_schema) -> dict:
        actor_id = user.id
        row = await service.create(session, body.model_dump(), actor_id)
        return ok(service.to_item(row), f"{service.label} created successfully")


def add_item_routes(
    router: APIRouter,
    service: CatalogService,
    *,
    update_schema: type,
    detail_schema: type,
) -> None:
    Manager = Annotated[User, manager(service.resource)]
    label = service.label

    @router.get("/{item_id}", summary=f"Get {label.lower()} by id")
    async def get_item(session: DbSession, user: CurrentUser, item_id: int) -> dict:
        row = await service.get(session, item_id)
        if row is None:
            raise not_found(service, item_id)
        return ok(dump(detail_schema, row), f"{label} retrieved successfully")

    @router.put("/{item_id}", summary=f"Update {label.lower()}")
    async def update_item(session: DbSession, user: Manager, item_id: int, body: update_schema) -> dict:
        actor_id = user.id
        row = await service.update(session, item_id, body.model_dump(exclude_unset=True), actor_id)
        if row is None:
            raise not_found(service, item_id)
        return ok(service.to_item(row), f"{label} updated successfully")

    @router.delete("/{item_id}", summary=f"Delete {label.lower()}")
    async def delete_item(session: DbSession, user: Manager, item_id: int) -> dict:
        actor_id = user.id
        if not await service.delete(session, item_id, actor_id):
            raise not_found(service, item_id)
        return ok(None, f"{label} deleted successfully")

    @router.patch("/{item_id}/activate", summary=f"Activate {label.lower()}")
    async def activate_item(session: DbSession, user: Manager, item_id: int) -> dict:
        actor_id = user.id
        row = await service.activate(session, item_id, actor_id)
        if row is None:
            raise not_found(service, item_id)
        return ok(service.to_item(row), f"{label} activated successfully")

    @router.patch("/{item_id}/deactivate", summary=f"Deactivate {label.lower()}")
    async def deactivate_item(session: DbSession, user: Manager, item_id: int) -> dict:
        actor_id = user.id
        row = await service.deactivate(session, item_id, actor_id)
        if row is None:
            raise not_found(service, item_id)
        return ok(service.to_item(row), f"{label} deactivated successfully")

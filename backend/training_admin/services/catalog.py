"""Shared CRUD and listing behaviour for the admin catalog entities.

Entity services subclass ``CatalogService`` and describe themselves with class attributes
(model, query allow-lists, child relations). Single-row reads return ORM objects or ``None``;
list reads return ``PageResult`` of plain dicts so derived counts can ride along.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from training_admin.config import settings
from training_admin.core.errors import ConflictError, DependencyError, QueryValidationError
from training_admin.models.mixins import utcnow
from training_admin.services.audit import log_action
from training_admin.services.query.aggregation import (
    AggregateQuery,
    count_children,
    count_parents_with_children,
    count_rows,
    gather_reads,
    ranked_child_counts,
)
from training_admin.services.query.config import EntityQueryConfig
from training_admin.services.query.ordering import resolve_order
from training_admin.services.query.pagination import PageRequest, PageResult
from training_admin.services.query.predicates import PredicateBuilder
from training_admin.services.query.reorder import ReorderItem, apply_bulk_update, apply_reorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildRelation:
    """Rows that reference the parent through ``fk`` (a column on ``child``)."""

    name: str
    child: Any
    fk: Any
    count_key: str
    blocks_delete: bool = True
    delete_message: str | None = None


class CatalogService:
    model: Any
    resource: str
    label: str
    config: EntityQueryConfig
    read_schema: type[BaseModel]
    name_field: str | None = "name"
    scope_field: str | None = None
    ordered: bool = False
    children: tuple[ChildRelation, ...] = ()
    detail_options: tuple = ()
    dropdown_fields: tuple[str, ...] = ("id", "name")
    bulk_fields: tuple[str, ...] = ()
    # Fields an update may explicitly set to null; other nulls are ignored.
    clearable_fields: tuple[str, ...] = ("description",)
    conflict_message: str = "A record with this name already exists"

    # --- serialization -------------------------------------------------------------------

    def to_item(self, row: Any, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        item = self.read_schema.model_validate(row).model_dump(mode="json")
        if extra:
            item.update(extra)
        return item

    # --- reads ---------------------------------------------------------------------------

    async def list_page(
        self,
        session: AsyncSession,
        page: PageRequest,
        *,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        default_sort: tuple[str, str] | None = None,
        with_counts: bool = True,
    ) -> PageResult[dict[str, Any]]:
        order_by = resolve_order(self.config, sort_by, sort_order, default=default_sort)
        where = PredicateBuilder(self.config).search(search).filters(filters).compile()

        total = await count_rows(session, self.model, *where)
        result = await session.execute(
            select(self.model)
            .where(*where)
            .order_by(*order_by)
            .offset(page.offset)
            .limit(page.limit)
        )
        rows = list(result.scalars().all())
        counts = await self.child_counts(session, [r.id for r in rows]) if with_counts else {}
        return PageResult(
            items=[self.to_item(r, counts.get(r.id)) for r in rows],
            total=total,
            page=page.page,
            limit=page.limit,
        )

    async def search(
        self,
        session: AsyncSession,
        term: str | None,
        page: PageRequest,
        *,
        filters: dict[str, Any] | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> PageResult[dict[str, Any]]:
        if not term or not term.strip():
            raise QueryValidationError("Search term is required")
        return await self.list_page(
            session,
            page,
            search=term,
            filters=filters,
            sort_by=sort_by,
            sort_order=sort_order,
            default_sort=self.config.search_sort,
        )

    async def get(self, session: AsyncSession, entity_id: int) -> Any | None:
        result = await session.execute(
            select(self.model)
            .options(*self.detail_options)
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def active(self, session: AsyncSession, filters: dict[str, Any] | None = None) -> list[Any]:
        where = PredicateBuilder(self.config).filters(filters).where("is_active", True).compile()
        result = await session.execute(
            select(self.model).where(*where).order_by(*resolve_order(self.config))
        )
        return list(result.scalars().all())

    async def dropdown(
        self, session: AsyncSession, filters: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        where = PredicateBuilder(self.config).filters(filters).where("is_active", True).compile()
        columns = [getattr(self.model, f) for f in self.dropdown_fields]
        result = await session.execute(
            select(*columns).where(*where).order_by(*resolve_order(self.config))
        )
        return [dict(row._mapping) for row in result.all()]

    async def name_exists(
        self,
        session: AsyncSession,
        name: str,
        *,
        scope_id: int | None = None,
        exclude_id: int | None = None,
    ) -> bool:
        if self.name_field is None:
            raise QueryValidationError(f"{self.label} has no name to check")
        column = getattr(self.model, self.name_field)
        where = [column == name.strip()]
        if self.scope_field is not None and scope_id is not None:
            where.append(getattr(self.model, self.scope_field) == scope_id)
        if exclude_id is not None:
            where.append(self.model.id != exclude_id)
        return await count_rows(session, self.model, *where) > 0

    async def next_display_order(self, session: AsyncSession, scope_id: int | None = None) -> int:
        stmt = select(func.max(self.model.display_order))
        if self.scope_field is not None and scope_id is not None:
            stmt = stmt.where(getattr(self.model, self.scope_field) == scope_id)
        current = (await session.execute(stmt)).scalar_one_or_none()
        return (current or 0) + 1

    async def child_counts(self, session: AsyncSession, ids: list[int]) -> dict[int, dict[str, int]]:
        merged: dict[int, dict[str, int]] = {i: {} for i in ids}
        for rel in self.children:
            counts = await count_children(session, self.model, rel.child, rel.fk, parent_ids=ids)
            for parent_id, n in counts.items():
                merged.setdefault(parent_id, {})[rel.count_key] = n
        return merged

    async def usage(self, session: AsyncSession, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Every row in scope with its child counts, zero counts included."""
        where = PredicateBuilder(self.config).filters(filters).compile()
        result = await session.execute(
            select(self.model).where(*where).order_by(*resolve_order(self.config))
        )
        rows = list(result.scalars().all())
        counts = await self.child_counts(session, [r.id for r in rows])
        return [self.to_item(r, counts.get(r.id)) for r in rows]

    async def statistics(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Totals, active split and per-relation coverage, read concurrently.

        ``filters`` narrows the parent rows (e.g. topics of one module); the active flag is
        ignored here since the result already splits on it.
        """
        scope = {k: v for k, v in (filters or {}).items() if k != "is_active"}
        where = tuple(PredicateBuilder(self.config).filters(scope).compile())
        model = self.model
        queries: dict[str, AggregateQuery] = {
            "total": lambda s: count_rows(s, model, *where),
            "active": lambda s: count_rows(s, model, *where, model.is_active.is_(True)),
            "inactive": lambda s: count_rows(s, model, *where, model.is_active.is_(False)),
        }
        label_key = self.name_field or "id"
        label = getattr(model, label_key)
        for rel in self.children:
            queries[f"with_{rel.name}"] = partial(
                count_parents_with_children, parent=model, child=rel.child, fk=rel.fk, parent_where=where
            )
            queries[f"{rel.count_key}s"] = partial(
                ranked_child_counts, parent=model, label=label, child=rel.child, fk=rel.fk, parent_where=where
            )

        results = await gather_reads(
            session_factory, queries, timeout=settings.statistics_timeout_seconds
        )
        stats: dict[str, Any] = {
            "total": results["total"],
            "active": results["active"],
            "inactive": results["inactive"],
        }
        for rel in self.children:
            with_children = results[f"with_{rel.name}"]
            stats[f"with_{rel.name}"] = with_children
            stats[f"without_{rel.name}"] = results["total"] - with_children
            stats[f"{rel.count_key}s"] = [
                {"id": row_id, label_key: name, rel.count_key: n}
                for row_id, name, n in results[f"{rel.count_key}s"]
            ]
        return stats

    # --- writes --------------------------------------------------------------------------

    async def _flush(self, session: AsyncSession) -> None:
        try:
            await session.flush()
        except IntegrityError as exc:
            await session.rollback()
            logger.warning("%s write rejected by constraint: %s", self.label, exc.orig)
            raise ConflictError(self.conflict_message) from exc

    async def _require(self, session: AsyncSession, model: Any, entity_id: int | None, label: str) -> Any:
        if entity_id is None:
            return None
        row = await session.get(model, entity_id)
        if row is None:
            raise QueryValidationError(f"{label} {entity_id} does not exist")
        return row

    async def prepare(
        self, session: AsyncSession, values: dict[str, Any], current: Any | None = None
    ) -> dict[str, Any]:
        """Validate references and normalise values before they are written."""
        return values

    def _drop_ignored_nulls(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in data.items() if v is not None or k in self.clearable_fields}

    async def create(self, session: AsyncSession, data: dict[str, Any], actor_id: int | None) -> Any:
        values = await self.prepare(session, dict(data))
        if self.ordered and values.get("display_order") is None:
            scope_id = values.get(self.scope_field) if self.scope_field else None
            values["display_order"] = await self.next_display_order(session, scope_id)
        row = self.model(**values, created_by=actor_id, updated_by=actor_id)
        session.add(row)
        await self._flush(session)
        await log_action(session, actor_id, "create", self.resource, row.id)
        return await self.get(session, row.id)

    async def update(
        self, session: AsyncSession, entity_id: int, data: dict[str, Any], actor_id: int | None
    ) -> Any | None:
        row = await session.get(self.model, entity_id)
        if row is None:
            return None
        values = await self.prepare(session, self._drop_ignored_nulls(data), current=row)
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_by = actor_id
        await self._flush(session)
        await log_action(
            session, actor_id, "update", self.resource, entity_id, details={"fields": sorted(values)}
        )
        return await self.get(session, entity_id)

    async def delete(self, session: AsyncSession, entity_id: int, actor_id: int | None) -> bool:
        row = await session.get(self.model, entity_id)
        if row is None:
            return False
        for rel in self.children:
            if not rel.blocks_delete:
                continue
            n = await count_rows(session, rel.child, rel.fk == entity_id)
            if n:
                raise DependencyError(
                    rel.delete_message
                    or f"Cannot delete {self.label.lower()} with existing {rel.name.replace('_', ' ')}",
                    details={rel.count_key: n},
                )
        await session.delete(row)
        await self._flush(session)
        await log_action(session, actor_id, "delete", self.resource, entity_id)
        return True

    async def set_active(
        self, session: AsyncSession, entity_id: int, active: bool, actor_id: int | None
    ) -> Any | None:
        row = await session.get(self.model, entity_id)
        if row is None:
            return None
        row.is_active = active
        row.updated_by = actor_id
        # Stamp even when the flag is unchanged
        row.updated_at = utcnow()
        await self._flush(session)
        await log_action(
            session, actor_id, "activate" if active else "deactivate", self.resource, entity_id
        )
        return await self.get(session, entity_id)

    async def activate(self, session: AsyncSession, entity_id: int, actor_id: int | None) -> Any | None:
        return await self.set_active(session, entity_id, True, actor_id)

    async def deactivate(self, session: AsyncSession, entity_id: int, actor_id: int | None) -> Any | None:
        return await self.set_active(session, entity_id, False, actor_id)

    async def reorder(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        items: list[ReorderItem],
        actor_id: int | None,
    ) -> list[dict[str, Any]]:
        rows = await apply_reorder(
            session_factory, self.model, items, resource=self.resource, actor_id=actor_id
        )
        return [self.to_item(r) for r in rows]

    async def bulk_update(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        entries: list[dict[str, Any]],
        actor_id: int | None,
    ) -> list[dict[str, Any]]:
        rows = await apply_bulk_update(
            session_factory,
            self.model,
            [self._drop_ignored_nulls(e) for e in entries],
            allowed_fields=self.bulk_fields,
            resource=self.resource,
            conflict_message=self.conflict_message,
            actor_id=actor_id,
        )
        return [self.to_item(r) for r in rows]

"""Transactional batch writes: display-order changes and multi-row field updates.

Each batch runs in its own session via ``transaction_scope``; either every row is written
or none is.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from training_admin.core.errors import ConflictError, QueryValidationError
from training_admin.db.session import transaction_scope
from training_admin.models.mixins import utcnow
from training_admin.services.audit import log_action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReorderItem:
    id: int
    display_order: int


def _unique_ids(ids: list[int]) -> None:
    seen: set[int] = set()
    duplicates: set[int] = set()
    for i in ids:
        if i in seen:
            duplicates.add(i)
        seen.add(i)
    if duplicates:
        raise QueryValidationError(
            "Each id may appear only once in a batch",
            details={"duplicate_ids": sorted(duplicates)},
        )


async def _require_existing(session: AsyncSession, model: Any, ids: list[int]) -> None:
    result = await session.execute(select(model.id).where(model.id.in_(ids)))
    missing = sorted(set(ids) - set(result.scalars().all()))
    if missing:
        raise QueryValidationError(
            f"Unknown ids in batch: {missing}", details={"missing_ids": missing}
        )


async def _reload(session: AsyncSession, model: Any, ids: list[int]) -> list[Any]:
    stmt = select(model).where(model.id.in_(ids))
    if hasattr(model, "display_order"):
        stmt = stmt.order_by(model.display_order.asc(), model.id.asc())
    else:
        stmt = stmt.order_by(model.id.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def apply_reorder(
    session_factory: async_sessionmaker[AsyncSession],
    model: Any,
    batch: Iterable[ReorderItem],
    *,
    resource: str,
    actor_id: int | None = None,
) -> list[Any]:
    """Set ``display_order`` for every item in one transaction and return the rows."""
    items = list(batch)
    if not items:
        return []
    for item in items:
        if isinstance(item.display_order, bool) or not isinstance(item.display_order, int):
            raise QueryValidationError(f"display_order for id {item.id} must be an integer")
    ids = [item.id for item in items]
    _unique_ids(ids)

    async with transaction_scope(session_factory) as session:
        await _require_existing(session, model, ids)
        now = utcnow()
        for item in items:
            await session.execute(
                update(model)
                .where(model.id == item.id)
                .values(display_order=item.display_order, updated_by=actor_id, updated_at=now)
            )
        await log_action(
            session,
            actor_id,
            "reorder",
            resource,
            details={"order": {str(item.id): item.display_order for item in items}},
        )
        rows = await _reload(session, model, ids)
    logger.info("Reordered %d %s rows", len(items), resource)
    return rows


async def apply_bulk_update(
    session_factory: async_sessionmaker[AsyncSession],
    model: Any,
    changes: Iterable[Mapping[str, Any]],
    *,
    allowed_fields: Iterable[str],
    resource: str,
    conflict_message: str,
    actor_id: int | None = None,
) -> list[Any]:
    """Apply per-row field changes (each mapping carries ``id``) atomically."""
    entries = [dict(change) for change in changes]
    if not entries:
        return []
    allowed = set(allowed_fields)
    for entry in entries:
        if "id" not in entry:
            raise QueryValidationError("Every bulk update entry needs an id")
        unknown = sorted(set(entry) - allowed - {"id"})
        if unknown:
            raise QueryValidationError(
                f"Fields cannot be bulk updated: {unknown}", details={"allowed": sorted(allowed)}
            )
    ids = [entry["id"] for entry in entries]
    _unique_ids(ids)

    try:
        async with transaction_scope(session_factory) as session:
            await _require_existing(session, model, ids)
            now = utcnow()
            for entry in entries:
                values = {k: v for k, v in entry.items() if k != "id"}
                if not values:
                    continue
                await session.execute(
                    update(model)
                    .where(model.id == entry["id"])
                    .values(**values, updated_by=actor_id, updated_at=now)
                )
            await log_action(
                session, actor_id, "bulk_update", resource, details={"ids": ids}
            )
            rows = await _reload(session, model, ids)
    except IntegrityError as exc:
        logger.warning("Bulk update of %s rejected by constraint: %s", resource, exc.orig)
        raise ConflictError(conflict_message) from exc
    logger.info("Bulk updated %d %s rows", len(entries), resource)
    return rows

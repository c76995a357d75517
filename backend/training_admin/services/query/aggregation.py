"""Child counts and concurrent statistics reads."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

AggregateQuery = Callable[[AsyncSession], Awaitable[Any]]


async def count_rows(session: AsyncSession, target: Any, *where: Any) -> int:
    result = await session.execute(select(func.count()).select_from(target).where(*where))
    return int(result.scalar_one())


async def count_children(
    session: AsyncSession,
    parent: Any,
    child: Any,
    fk: Any,
    *,
    parent_ids: Iterable[int] | None = None,
    parent_where: Iterable[Any] = (),
) -> dict[int, int]:
    """Map parent id -> number of child rows referencing it.

    Outer join from the parent side, so parents without children report 0. Every id in
    ``parent_ids`` is present in the result even if no such parent exists.
    """
    ids = list(parent_ids) if parent_ids is not None else None
    if ids is not None and not ids:
        return {}
    stmt = (
        select(parent.id, func.count(fk))
        .select_from(parent)
        .outerjoin(child, fk == parent.id)
        .where(*parent_where)
        .group_by(parent.id)
    )
    if ids is not None:
        stmt = stmt.where(parent.id.in_(ids))
    result = await session.execute(stmt)
    counts = {parent_id: 0 for parent_id in ids or ()}
    counts.update({row[0]: int(row[1]) for row in result.all()})
    return counts


async def count_parents_with_children(
    session: AsyncSession,
    parent: Any,
    child: Any,
    fk: Any,
    *,
    parent_where: Iterable[Any] = (),
) -> int:
    stmt = (
        select(func.count(distinct(parent.id)))
        .select_from(parent)
        .join(child, fk == parent.id)
        .where(*parent_where)
    )
    result = await session.execute(stmt)
    return int(result.scalar_one())


async def ranked_child_counts(
    session: AsyncSession,
    parent: Any,
    label: Any,
    child: Any,
    fk: Any,
    *,
    parent_where: Iterable[Any] = (),
) -> list[tuple[int, str, int]]:
    """(id, label, count) per parent, most children first."""
    child_count = func.count(fk)
    stmt = (
        select(parent.id, label, child_count)
        .select_from(parent)
        .outerjoin(child, fk == parent.id)
        .where(*parent_where)
        .group_by(parent.id, label)
        .order_by(child_count.desc(), parent.id.asc())
    )
    result = await session.execute(stmt)
    return [(row[0], row[1], int(row[2])) for row in result.all()]


async def gather_reads(
    session_factory: async_sessionmaker[AsyncSession],
    queries: Mapping[str, AggregateQuery],
    *,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Run independent read queries concurrently, one session each.

    All queries are awaited; every failure is logged and the first one (in ``queries``
    order) is re-raised, so callers never see a partial result.
    """
    names = list(queries)

    async def run(name: str) -> Any:
        async with session_factory() as session:
            return await queries[name](session)

    pending = asyncio.gather(*(run(name) for name in names), return_exceptions=True)
    if timeout:
        results = await asyncio.wait_for(pending, timeout=timeout)
    else:
        results = await pending

    failures = [(name, r) for name, r in zip(names, results) if isinstance(r, BaseException)]
    for name, exc in failures:
        logger.error("Aggregate query %s failed: %s", name, exc, exc_info=exc)
    if failures:
        raise failures[0][1]
    return dict(zip(names, results))

"""Typed filter nodes and their compilation to SQLAlchemy clauses.

A builder collects nodes into a flat AND-list. Free-text search becomes a single ``AnyOf``
group (case-insensitive substring match over the searchable fields), so the final predicate
is ``scope AND (field1 ILIKE %t% OR field2 ILIKE %t%)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from training_admin.core.errors import QueryValidationError
from training_admin.services.query.config import EntityQueryConfig


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class IsNull:
    field: str


@dataclass(frozen=True)
class Contains:
    field: str
    term: str


@dataclass(frozen=True)
class AnyOf:
    clauses: tuple["Predicate", ...]


Predicate = Union[Equals, IsNull, Contains, AnyOf]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def compile_predicate(model: Any, node: Predicate) -> ColumnElement[bool]:
    if isinstance(node, Equals):
        return getattr(model, node.field) == node.value
    if isinstance(node, IsNull):
        return getattr(model, node.field).is_(None)
    if isinstance(node, Contains):
        pattern = f"%{_escape_like(node.term)}%"
        return getattr(model, node.field).ilike(pattern, escape="\\")
    if isinstance(node, AnyOf):
        return or_(*(compile_predicate(model, clause) for clause in node.clauses))
    raise TypeError(f"Unsupported predicate node: {node!r}")


class PredicateBuilder:
    """Accumulates filters for one entity; ``None`` values never produce a clause."""

    def __init__(self, config: EntityQueryConfig) -> None:
        self.config = config
        self._nodes: list[Predicate] = []

    def _filter_attr(self, name: str) -> str:
        attr = self.config.filterable.get(name)
        if attr is None:
            raise QueryValidationError(f"Cannot filter by '{name}'")
        return attr

    def search(self, term: str | None) -> "PredicateBuilder":
        term = (term or "").strip()
        if term and self.config.searchable:
            self._nodes.append(AnyOf(tuple(Contains(f, term) for f in self.config.searchable)))
        return self

    def where(self, name: str, value: Any) -> "PredicateBuilder":
        # Absent flags mean "no filter"; False is a real filter value.
        if value is None:
            return self
        self._nodes.append(Equals(self._filter_attr(name), value))
        return self

    def where_null(self, name: str) -> "PredicateBuilder":
        self._nodes.append(IsNull(self._filter_attr(name)))
        return self

    def filters(self, values: dict[str, Any] | None) -> "PredicateBuilder":
        for name, value in (values or {}).items():
            self.where(name, value)
        return self

    @property
    def nodes(self) -> tuple[Predicate, ...]:
        return tuple(self._nodes)

    def compile(self) -> list[ColumnElement[bool]]:
        return [compile_predicate(self.config.model, node) for node in self._nodes]

"""Per-entity allow-lists consumed by the predicate builder and the ordering resolver."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class EntityQueryConfig:
    """What clients may sort, search and filter on for one model.

    ``sortable`` and ``filterable`` map public field names to model attribute names, so a
    client-supplied name never reaches SQL unless it is listed here.
    """

    model: Any
    sortable: Mapping[str, str]
    searchable: tuple[str, ...] = ()
    filterable: Mapping[str, str] = field(default_factory=dict)
    default_sort: tuple[str, str] = ("id", "ASC")
    search_sort: tuple[str, str] = ("name", "ASC")

    def attribute(self, attr_name: str):
        return getattr(self.model, attr_name)

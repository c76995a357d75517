"""Page/limit resolution for list endpoints.

Pagination input is never rejected: anything that is not a positive integer falls back to
the default, the page size is capped, and the page number is clamped so the offset always
fits a 64-bit database integer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Largest OFFSET a signed 64-bit database integer can hold.
MAX_OFFSET = 2**63 - 1

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def resolve_page(
    page: Any = None,
    limit: Any = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> PageRequest:
    """Coerce raw page/limit values into a usable ``PageRequest``."""
    resolved_limit = min(_positive_int(limit, default_limit), max_limit)
    resolved_page = min(_positive_int(page, DEFAULT_PAGE), MAX_OFFSET // resolved_limit + 1)
    return PageRequest(page=resolved_page, limit=resolved_limit)


def total_pages(total: int, limit: int) -> int:
    """0 for an empty result, otherwise ceil(total / limit)."""
    if total <= 0:
        return 0
    return -(-total // limit)


@dataclass
class PageResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    def pagination(self) -> dict[str, int]:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages,
        }

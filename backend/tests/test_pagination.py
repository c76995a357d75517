"""Unit tests for page/limit resolution and page counts."""

import pytest

from training_admin.services.query.pagination import (
    MAX_OFFSET,
    PageRequest,
    PageResult,
    resolve_page,
    total_pages,
)


def test_defaults_when_missing():
    page = resolve_page()
    assert page == PageRequest(page=1, limit=10)
    assert page.offset == 0


@pytest.mark.parametrize("raw", ["abc", "", "0", "-3", "1.5", None, True])
def test_garbage_page_falls_back_to_first(raw):
    assert resolve_page(raw, "10").page == 1


def test_numeric_strings_are_accepted():
    page = resolve_page("3", "20")
    assert (page.page, page.limit, page.offset) == (3, 20, 40)


def test_limit_is_capped():
    assert resolve_page(1, "5000", max_limit=100).limit == 100


def test_custom_default_limit():
    assert resolve_page(None, "nope", default_limit=25).limit == 25


@pytest.mark.parametrize("limit", [1, 10, 100])
def test_huge_page_keeps_offset_in_range(limit):
    page = resolve_page("99999999999999999999", limit)
    assert page.offset <= MAX_OFFSET
    assert page.offset + limit > MAX_OFFSET


@pytest.mark.parametrize(
    "total,limit,expected",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3)],
)
def test_total_pages(total, limit, expected):
    assert total_pages(total, limit) == expected


def test_page_result_pagination_block():
    result = PageResult(items=[1, 2], total=25, page=2, limit=10)
    assert result.pagination() == {"total": 25, "page": 2, "limit": 10, "total_pages": 3}

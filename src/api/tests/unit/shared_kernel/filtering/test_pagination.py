"""Unit tests for offset/page pagination."""

import pytest

from shared_kernel.exceptions import InvalidArgumentError
from shared_kernel.filtering import (
    Pagination,
    build_page,
    count_pages,
    page_window,
    paginate,
)

ITEMS = list(range(15))


class TestPaginate:
    """Tests for paginate() over an ordered list."""

    def test_first_page(self):
        page = paginate(ITEMS, Pagination(limit=10))

        assert page.docs == ITEMS[0:10]
        assert page.total == 15
        assert page.page == 1
        assert page.pages == 2
        assert page.offset == 0
        assert page.limit == 10

    def test_second_page(self):
        page = paginate(ITEMS, Pagination(limit=10, page=2))

        assert page.docs == ITEMS[10:15]
        assert page.pages == 2

    def test_total_counts_items_after_offset(self):
        page = paginate(ITEMS, Pagination(limit=10, offset=2))

        assert page.total == 13
        assert page.docs == ITEMS[2:12]
        assert page.offset == 2

    def test_page_beyond_last_is_empty(self):
        page = paginate(ITEMS, Pagination(limit=10, page=5))

        assert page.docs == []
        assert page.total == 15

    def test_zero_limit_returns_everything_after_offset(self):
        page = paginate(ITEMS, Pagination(limit=0, offset=4))

        assert page.docs == ITEMS[4:]
        assert page.pages == 1

    def test_offset_past_end(self):
        page = paginate(ITEMS, Pagination(offset=20))

        assert page.docs == []
        assert page.total == 0
        assert page.pages == 1

    def test_defaults(self):
        page = paginate(list(range(25)))

        assert page.docs == list(range(10))
        assert (page.page, page.limit, page.offset) == (1, 10, 0)
        assert page.pages == 3

    def test_empty_input(self):
        page = paginate([], Pagination())

        assert page.docs == []
        assert page.total == 0
        assert page.pages == 1


class TestCountPages:
    """Tests for count_pages()."""

    @pytest.mark.parametrize(
        ("total", "limit", "expected"),
        [(15, 10, 2), (10, 10, 1), (11, 10, 2), (0, 10, 1), (100, 0, 1), (5, 20, 1)],
    )
    def test_count(self, total, limit, expected):
        assert count_pages(total, limit) == expected


class TestPageWindow:
    """Tests for page_window() bounds used by SQL backends."""

    def test_window_includes_offset(self):
        assert page_window(Pagination(page=2, limit=10, offset=3)) == (13, 23)

    def test_unlimited_window(self):
        assert page_window(Pagination(limit=0, offset=3)) == (3, None)


class TestBuildPage:
    """Tests for build_page()."""

    def test_total_never_negative(self):
        page = build_page([], matched=1, pagination=Pagination(offset=5))
        assert page.total == 0


class TestPaginationValidation:
    """Tests for Pagination value object validation."""

    @pytest.mark.parametrize(
        ("kwargs", "argument"),
        [
            ({"page": 0}, "page"),
            ({"limit": -1}, "limit"),
            ({"offset": -1}, "offset"),
            ({"page": "1"}, "page"),
            ({"limit": True}, "limit"),
        ],
    )
    def test_rejects_invalid_values(self, kwargs, argument):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Pagination(**kwargs)
        assert exc_info.value.argument == argument

    def test_unbounded(self):
        assert Pagination.unbounded() == Pagination(page=1, limit=0, offset=0)

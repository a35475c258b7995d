"""
Unit Tests for pagination helpers
"""
import pytest
from sqlalchemy import select

from report_portal.core.exceptions import PageOutOfRangeError
from report_portal.models.user import User
from report_portal.utils.pagination import create_paginated_response, paginate, paginate_items, resolve_jump_page


class TestPaginateItems:
    """Test in-memory pagination envelope"""

    def test_first_page(self):
        result = paginate_items(list(range(25)), page=1, page_size=10)

        assert result["items"] == list(range(10))
        assert result["total"] == 25
        assert result["total_pages"] == 3
        assert result["has_next"] is True
        assert result["has_previous"] is False

    def test_last_partial_page(self):
        result = paginate_items(list(range(25)), page=3, page_size=10)

        assert result["items"] == [20, 21, 22, 23, 24]
        assert result["has_next"] is False

    def test_empty_has_one_page(self):
        result = paginate_items([], page=1, page_size=9)

        assert result["items"] == []
        assert result["total_pages"] == 1

    def test_page_size_is_capped(self):
        result = paginate_items(list(range(500)), page=1, page_size=1000)

        assert result["page_size"] == 100

    def test_matches_sql_envelope_keys(self):
        assert set(paginate_items([1], 1, 10)) == set(create_paginated_response([1], 1, 1, 10))


class TestResolveJumpPage:
    """Test user-typed page numbers"""

    @pytest.mark.parametrize("raw", ["0", "6", "abc", "", None, "-1", "2.5"])
    def test_out_of_range_rejected(self, raw):
        with pytest.raises(PageOutOfRangeError) as exc_info:
            resolve_jump_page(raw, current_page=1, total_pages=5)

        assert exc_info.value.message == "Enter a page number between 1 and 5."
        assert exc_info.value.status_code == 400

    def test_current_page_is_noop(self):
        assert resolve_jump_page("3", current_page=3, total_pages=5) == 3

    def test_valid_jump(self):
        assert resolve_jump_page(" 5 ", current_page=1, total_pages=5) == 5

    def test_integer_input(self):
        assert resolve_jump_page(2, current_page=1, total_pages=2) == 2


class TestSqlPaginate:
    """Test the SQLAlchemy helper"""

    @pytest.mark.asyncio
    async def test_paginates_query(self, db_session, make_user):
        for _ in range(7):
            await make_user()

        result = await paginate(db_session, select(User).order_by(User.email), page=2, page_size=5)

        assert result["total"] == 7
        assert result["total_pages"] == 2
        assert len(result["items"]) == 2
        assert result["has_previous"] is True

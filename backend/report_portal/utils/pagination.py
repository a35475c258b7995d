"""
Pagination Utility Module

Provides standardized pagination helpers for all API endpoints.
"""
from typing import List, Optional, Any, Sequence
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from report_portal.core.config import settings
from report_portal.core.exceptions import PageOutOfRangeError


def _clamp_page_size(page_size: int) -> int:
    return max(1, min(settings.MAX_PAGE_SIZE, page_size))


def _total_pages(total: int, page_size: int) -> int:
    return (total + page_size - 1) // page_size if total > 0 else 1


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    page_size: int = 10,
    count_query: Optional[Select] = None
) -> dict:
    """
    Apply pagination to a SQLAlchemy query.

    Args:
        db: Database session
        query: Base SQLAlchemy query
        page: Page number (1-indexed)
        page_size: Items per page
        count_query: Optional custom count query

    Returns:
        Dictionary with items, total, page, page_size, total_pages, has_next, has_previous
    """
    page = max(1, page)
    page_size = _clamp_page_size(page_size)

    offset = (page - 1) * page_size

    if count_query is not None:
        count_result = await db.execute(count_query)
    else:
        count_stmt = select(func.count()).select_from(query.subquery())
        count_result = await db.execute(count_stmt)

    total = count_result.scalar() or 0

    paginated_query = query.offset(offset).limit(page_size)
    result = await db.execute(paginated_query)
    items = result.scalars().all()

    return create_paginated_response(list(items), total, page, page_size)


def paginate_items(items: Sequence[Any], page: int = 1, page_size: int = 10) -> dict:
    """
    Paginate an in-memory sequence with the same envelope as ``paginate``.

    Pages past the end yield an empty ``items`` list rather than an error;
    explicit jumps are validated with ``resolve_jump_page``.
    """
    page = max(1, page)
    page_size = _clamp_page_size(page_size)
    start = (page - 1) * page_size
    return create_paginated_response(list(items[start:start + page_size]), len(items), page, page_size)


def resolve_jump_page(raw: Any, current_page: int, total_pages: int) -> int:
    """
    Validate a user-typed page number.

    Returns the target page (``current_page`` unchanged when the user jumps to
    the page already shown). Raises PageOutOfRangeError for anything that is
    not an integer in [1, total_pages].
    """
    text = str(raw).strip() if raw is not None else ""
    try:
        target = int(text)
    except ValueError:
        raise PageOutOfRangeError(text, total_pages)

    if target < 1 or target > total_pages:
        raise PageOutOfRangeError(text, total_pages)
    if target == current_page:
        return current_page
    return target


def create_paginated_response(
    items: List[Any],
    total: int,
    page: int,
    page_size: int
) -> dict:
    """
    Create a paginated response dictionary.

    Args:
        items: List of items for current page
        total: Total count of all items
        page: Current page number
        page_size: Items per page

    Returns:
        Paginated response dictionary
    """
    total_pages = _total_pages(total, page_size)

    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1
    }

"""
Report Filters
==============

In-memory filtering and ordering for the report board and the aggregation
picker. Works on anything exposing the report attributes (ORM rows or
``ReportRecord`` schemas).
"""
from typing import Iterable, List, Optional, TypeVar
import enum

T = TypeVar('T')


class SortKey(str, enum.Enum):
    DEPARTMENT = "dept"
    TEAM = "team"
    DATE = "date"


def _fold(value: Optional[str]) -> str:
    return (value or "").casefold()


def filter_reports(
    reports: Iterable[T],
    title_query: Optional[str] = None,
    date_prefix: Optional[str] = None,
    department: Optional[str] = None,
    team_id: Optional[str] = None,
    exclude_author_id: Optional[str] = None
) -> List[T]:
    """
    Filter reports by the board/picker criteria.

    Args:
        reports: Reports to filter
        title_query: Case-insensitive substring of the title
        date_prefix: Prefix of createdAt, e.g. "2025-01-14"
        department: Exact department match
        team_id: Exact team match
        exclude_author_id: Drop reports written by this user

    Returns:
        Matching reports in their original order
    """
    needle = _fold(title_query.strip()) if title_query else ""
    result = []
    for report in reports:
        if needle and needle not in _fold(report.title):
            continue
        if date_prefix and not (report.created_at or "").startswith(date_prefix):
            continue
        if department and report.department != department:
            continue
        if team_id and report.team_id != team_id:
            continue
        if exclude_author_id and report.author_id == exclude_author_id:
            continue
        result.append(report)
    return result


def sort_reports(
    reports: Iterable[T],
    sort_by: SortKey = SortKey.DATE,
    descending: Optional[bool] = None
) -> List[T]:
    """
    Order reports for aggregation.

    dept sorts by department, then team; team sorts by team; date sorts by
    createdAt (newest first unless descending=False). Ties always fall back to
    the author name in ascending order. Sorting is stable.
    """
    sort_by = SortKey(sort_by)
    items = list(reports)

    if sort_by == SortKey.DATE:
        key = lambda r: r.created_at or ""
        if descending is None:
            descending = True
    elif sort_by == SortKey.DEPARTMENT:
        key = lambda r: (_fold(r.department), _fold(r.team_id))
    else:
        key = lambda r: _fold(r.team_id)

    # Two passes keep the author tie-break ascending whichever way the key runs
    items.sort(key=lambda r: _fold(r.author_name))
    items.sort(key=key, reverse=bool(descending))
    return items


def filter_users(users: Iterable[T], search_term: Optional[str] = None) -> List[T]:
    """Case-insensitive substring match on name, email or team"""
    needle = _fold(search_term.strip()) if search_term else ""
    if not needle:
        return list(users)
    return [
        u for u in users
        if needle in _fold(u.name) or needle in _fold(u.email) or needle in _fold(u.team_id)
    ]

"""
Filtering, search and sorting over a log collection.

Pure helpers behind the list view: a view selects completed, pending or a
single category; search matches task text, category or tags
case-insensitively; sort orders by time, priority or category.
"""

from collections.abc import Sequence
from enum import Enum

from devdiary.core.errors import ValidationError
from devdiary.core.logs.models import Category, LogEntry


class LogView(str, Enum):
    """Status views; any Category value is also accepted as a view."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class SortOrder(str, Enum):
    """Sort orders for listing logs."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRIORITY = "priority"
    CATEGORY = "category"


def _matches_view(entry: LogEntry, view: str) -> bool:
    if view == LogView.ALL.value:
        return True
    if view == LogView.COMPLETED.value:
        return entry.completed
    if view == LogView.PENDING.value:
        return not entry.completed
    return entry.category.value == view


def _matches_search(entry: LogEntry, term: str) -> bool:
    if not term:
        return True
    return (
        term in entry.task.lower()
        or term in entry.category.value
        or any(term in tag.lower() for tag in entry.tags)
    )


def query_logs(
    logs: Sequence[LogEntry],
    view: LogView | Category | str = LogView.ALL,
    search: str = "",
    sort: SortOrder | str = SortOrder.NEWEST,
) -> list[LogEntry]:
    """
    Filter, search and sort a log collection.

    Args:
        logs: Collection to query (not modified)
        view: "all", "pending", "completed", or a category value
        search: Case-insensitive substring matched against task, category and tags
        sort: One of newest, oldest, priority, category

    Returns:
        New list of matching entries in the requested order

    Raises:
        ValidationError: If view or sort is not recognized
    """
    view_value = view.value if isinstance(view, Enum) else str(view).lower()
    valid_views = {v.value for v in LogView} | {c.value for c in Category}
    if view_value not in valid_views:
        raise ValidationError(
            f"Invalid view '{view}'. Valid views: {', '.join(sorted(valid_views))}"
        )

    try:
        order = SortOrder(sort)
    except ValueError as e:
        valid = ", ".join(s.value for s in SortOrder)
        raise ValidationError(f"Invalid sort '{sort}'. Valid sorts: {valid}") from e

    term = search.strip().lower()
    matched = [
        entry for entry in logs if _matches_view(entry, view_value) and _matches_search(entry, term)
    ]

    if order == SortOrder.OLDEST:
        matched.sort(key=lambda e: e.timestamp)
    elif order == SortOrder.PRIORITY:
        matched.sort(key=lambda e: e.priority.rank, reverse=True)
    elif order == SortOrder.CATEGORY:
        matched.sort(key=lambda e: e.category.value)
    else:
        matched.sort(key=lambda e: e.timestamp, reverse=True)

    return matched

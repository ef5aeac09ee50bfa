"""
Search Engine - Case-insensitive substring filtering over app records.

No ranking: results keep the order of the records passed in.
"""

from typing import Iterable


def matches(record, query_lower: str, include_categories: bool = False) -> bool:
    """Return True if the lowercased query occurs in any searchable field."""
    if query_lower in record.name.lower():
        return True
    if record.generic_name and query_lower in record.generic_name.lower():
        return True
    if record.comment and query_lower in record.comment.lower():
        return True
    if any(query_lower in keyword.lower() for keyword in record.keywords):
        return True
    if include_categories:
        return any(query_lower in category.lower() for category in record.categories)
    return False


def search_records(records: Iterable, query: str, include_categories: bool = False) -> list:
    """
    Filter records by query.

    Args:
        records: Records to filter (iteration order is preserved)
        query: Search text; empty means "everything"
        include_categories: Also match against category names

    Returns:
        Matching records, each at most once
    """
    if not query:
        return list(records)

    q = query.lower()
    return [r for r in records if matches(r, q, include_categories)]


def filter_by_category(records: Iterable, name: str) -> list:
    """Records having a category equal to name, ignoring case."""
    wanted = name.lower()
    return [
        r for r in records
        if any(category.lower() == wanted for category in r.categories)
    ]

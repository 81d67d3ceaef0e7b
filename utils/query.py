"""Shared SQL query builder utilities for the voter listing routes.

Provides the WHERE clause, ORDER BY and LIMIT/OFFSET construction used by
api/routes/voters.py.  All values are passed as ``?`` parameters; column names
only ever come from the whitelists below.
"""

from typing import Any

from utils.config import SEARCH_COLUMNS


_ALLOWED_SORTS_DEFAULT = {
    "id", "voter_id", "full_name", "booth_number", "colony_name",
    "voting_status", "created_at", "updated_at",
}

_LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so *term* is matched literally."""
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def build_where_clause(
    search: str | None = None,
    surveyed_only: bool = False,
    booth_number: list[str] | None = None,
    search_columns: tuple[str, ...] = SEARCH_COLUMNS,
) -> tuple[str, list[Any]]:
    """Build a SQL WHERE clause from filter parameters.

    Args:
        search: Case-insensitive substring matched against any of
            *search_columns*.  Blank or whitespace-only means no constraint.
        surveyed_only: Restrict to rows whose ``updated_at`` is set.
        booth_number: Restrict to the given booth number(s).
        search_columns: Columns the search term is matched against.

    Returns:
        Tuple of (where_clause_string, params_list). The where_clause_string
        starts with "WHERE " if any conditions exist, or is "" if none.
    """
    conditions: list[str] = []
    params: list[Any] = []

    if surveyed_only:
        conditions.append("updated_at IS NOT NULL AND updated_at != ''")

    if booth_number:
        placeholders = ",".join("?" * len(booth_number))
        conditions.append(f"booth_number IN ({placeholders})")
        params.extend(booth_number)

    term = (search or "").strip()
    if term:
        pattern = f"%{escape_like(term.lower())}%"
        # SQLite LOWER() folds ASCII only, which matches LIKE's own folding.
        ors = [
            f"LOWER(COALESCE({col}, '')) LIKE ? ESCAPE '{_LIKE_ESCAPE}'"
            for col in search_columns
        ]
        conditions.append("(" + " OR ".join(ors) + ")")
        params.extend([pattern] * len(search_columns))

    where = "WHERE " + " AND ".join(conditions) if conditions else ""
    return where, params


def build_order_clause(
    sort_by: str,
    sort_dir: str,
    allowed_sorts: set[str] | None = None,
    default_sort: str = "id",
) -> str:
    """Build a safe SQL ORDER BY clause.

    Args:
        sort_by: Column name to sort by.
        sort_dir: Direction: 'asc' or 'desc' (case-insensitive).
        allowed_sorts: Set of valid sort column names. Defaults to
            _ALLOWED_SORTS_DEFAULT if not provided.
        default_sort: Column to use if sort_by is not in allowed_sorts.

    Returns:
        ORDER BY clause string, e.g. "ORDER BY id ASC".  A secondary ``id``
        key keeps page boundaries stable when the sort column has ties.
    """
    if allowed_sorts is None:
        allowed_sorts = _ALLOWED_SORTS_DEFAULT
    col = sort_by if sort_by in allowed_sorts else default_sort
    direction = "DESC" if sort_dir.lower() == "desc" else "ASC"
    if col == "id":
        return f"ORDER BY id {direction}"
    return f"ORDER BY {col} {direction}, id {direction}"


def page_offset(page: int, limit: int) -> int:
    """Return the row offset of 1-based *page* for page size *limit*."""
    return (max(page, 1) - 1) * limit


def pagination_meta(page: int, limit: int, total: int) -> dict[str, Any]:
    """Server-side pagination metadata for a listing response."""
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_records": total,
        "limit": limit,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }

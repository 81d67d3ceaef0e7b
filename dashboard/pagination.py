"""
Pagination slicer: cut the filtered dataset into fixed-size pages.

Pages are 1-based.  Out-of-range pages yield an empty window rather than an
error, and ``total_pages`` is 0 for an empty dataset.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from dashboard.records import Dataset

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class PaginationMeta:
    """Pagination metadata, shared by client-side and server-side paging."""

    current_page: int
    total_pages: int
    total_records: int
    limit: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, total_records: int, current_page: int,
              page_size: int = DEFAULT_PAGE_SIZE) -> "PaginationMeta":
        total_pages = math.ceil(total_records / page_size) if page_size > 0 else 0
        return cls(
            current_page=current_page,
            total_pages=total_pages,
            total_records=total_records,
            limit=page_size,
            has_next_page=current_page < total_pages,
            has_prev_page=current_page > 1,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaginationMeta":
        """Parse the API's camelCase ``pagination`` object."""
        return cls(
            current_page=int(data.get("currentPage", 1)),
            total_pages=int(data.get("totalPages", 0)),
            total_records=int(data.get("totalRecords", 0)),
            limit=int(data.get("limit", DEFAULT_PAGE_SIZE)),
            has_next_page=bool(data.get("hasNextPage", False)),
            has_prev_page=bool(data.get("hasPrevPage", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalRecords": self.total_records,
            "limit": self.limit,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
        }

    def display_range(self) -> tuple[int, int, int]:
        """(first, last, total) for a "Showing X to Y of Z entries" footer."""
        if self.total_records == 0:
            return (0, 0, 0)
        first = (self.current_page - 1) * self.limit + 1
        last = min(self.current_page * self.limit, self.total_records)
        if first > self.total_records:
            return (0, 0, self.total_records)
        return (first, last, self.total_records)


def slice_page(filtered: Dataset, current_page: int,
               page_size: int = DEFAULT_PAGE_SIZE) -> tuple[Dataset, PaginationMeta]:
    """Return the window for *current_page* and its pagination metadata."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    start = max(current_page - 1, 0) * page_size
    window = tuple(filtered[start:start + page_size]) if current_page >= 1 else ()
    return window, PaginationMeta.build(len(filtered), current_page, page_size)


def page_numbers(meta: PaginationMeta, max_pages: int = 5) -> list[int]:
    """Page buttons to show: a window of up to *max_pages* around the current page.

    An empty result still shows a single page 1.
    """
    if meta.total_pages <= 0:
        return [1]
    start = max(1, meta.current_page - max_pages // 2)
    end = min(meta.total_pages, start + max_pages - 1)
    if end - start + 1 < max_pages:
        start = max(1, end - max_pages + 1)
    return list(range(start, end + 1))

"""Summary aggregator: survey and voting counts for the selected scope."""

from __future__ import annotations

from dataclasses import dataclass

from dashboard.filters import FilterState, apply_filters, booth_filter
from dashboard.records import Dataset


@dataclass(frozen=True)
class SummaryStats:
    total_records: int
    surveyed_count: int
    voting_done_count: int
    voting_done_percentage: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_records": self.total_records,
            "surveyed_count": self.surveyed_count,
            "voting_done_count": self.voting_done_count,
            "voting_done_percentage": self.voting_done_percentage,
        }


EMPTY_STATS = SummaryStats(0, 0, 0, 0)


def percentage(part: int, whole: int) -> int:
    """``part / whole * 100`` rounded half-up; 0 when *whole* is 0."""
    if whole <= 0:
        return 0
    # floor(x + 0.5) in integer arithmetic avoids float and banker's rounding
    return (200 * part + whole) // (2 * whole)


def compute_stats(scope: Dataset) -> SummaryStats:
    """Count totals over *scope*."""
    total = len(scope)
    surveyed = sum(1 for r in scope if r.is_surveyed)
    done = sum(1 for r in scope if r.is_voting_done)
    return SummaryStats(
        total_records=total,
        surveyed_count=surveyed,
        voting_done_count=done,
        voting_done_percentage=percentage(done, total),
    )


def stats_scope(dataset: Dataset, state: FilterState,
                narrow_all: bool = False) -> Dataset:
    """The records summary statistics are computed over.

    By default only the booth filter narrows the scope; with *narrow_all*
    every filter slot does.
    """
    if narrow_all:
        return apply_filters(dataset, state)
    if state.booth_id:
        return booth_filter(dataset, state.booth_id)
    return dataset

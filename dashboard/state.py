"""
Dashboard state and the reducers that advance it.

``DashboardState`` is the single aggregate the controller owns: the raw
dataset, the filter controls, the current page, the summary statistics and
the milestone detector.  Every event is a pure function
``reducer(state, ...) -> (new_state, effects)``; the controller applies the
new state and runs the effects (timers, notifications).

Events:
    fetch_completed       full dataset arrived
    fetch_failed          full-dataset fetch raised FetchFailure
    page_fetched          server-paginated page arrived
    page_fetch_failed     server-paginated fetch raised FetchFailure
    filters_changed       any filter control changed (resets to page 1)
    page_changed          user moved to another page
    search_changed        server-side search term changed (resets to page 1)
    celebration_cleared   auto-clear timer fired
    celebration_dismissed user closed the banner

Fetches carry a sequence number; a response older than the newest one
already applied is discarded so a slow request cannot overwrite fresher data.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union

from dashboard import milestones
from dashboard.filters import FilterState, apply_filters, booth_options
from dashboard.milestones import Celebrate, MilestoneState
from dashboard.pagination import DEFAULT_PAGE_SIZE, PaginationMeta, page_numbers, slice_page
from dashboard.records import Dataset, VoterRecord
from dashboard.stats import EMPTY_STATS, SummaryStats, compute_stats, stats_scope


@dataclass(frozen=True)
class Notify:
    """Effect: show a transient notification."""

    level: str
    message: str


Effect = Union[Celebrate, Notify]


@dataclass(frozen=True)
class DashboardState:
    dataset: Dataset = ()
    filters: FilterState = field(default_factory=FilterState)
    current_page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: str = ""
    narrow_stats: bool = False
    stats: SummaryStats = EMPTY_STATS
    milestone: MilestoneState = field(default_factory=MilestoneState)
    loaded: bool = False
    last_applied_seq: int = 0
    last_error: str | None = None
    fetched_at: float | None = None
    # Server-paginated variant (one page as the API cut it)
    server_page: Dataset = ()
    server_pagination: PaginationMeta | None = None
    last_page_seq: int = 0


@dataclass(frozen=True)
class DashboardView:
    """Immutable snapshot handed to rendering."""

    window: tuple[VoterRecord, ...]
    pagination: PaginationMeta
    stats: SummaryStats
    milestone: MilestoneState
    filters: FilterState
    booth_options: list[dict[str, str]]
    filtered_count: int
    last_error: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filters": {
                "booth_id": self.filters.booth_id,
                "voting_filter": self.filters.voting_filter,
                "survey_filter": self.filters.survey_filter,
                "transfer_filter": self.filters.transfer_filter,
                "not_yet_filter": self.filters.not_yet_filter,
            },
            "stats": self.stats.to_dict(),
            "milestone": self.milestone.to_dict(),
            "pagination": self.pagination.to_dict(),
            "pages": page_numbers(self.pagination),
            "filtered_count": self.filtered_count,
            "last_error": self.last_error,
            "data": [r.to_dict() for r in self.window],
            "rows": [r.display_row() for r in self.window],
        }


def _recompute(state: DashboardState) -> tuple[DashboardState, tuple[Effect, ...]]:
    """Refresh stats and, once data has loaded, feed the milestone detector."""
    stats = compute_stats(stats_scope(state.dataset, state.filters, state.narrow_stats))
    state = replace(state, stats=stats)
    if not state.loaded:
        return state, ()
    milestone, effects = milestones.advance(state.milestone, stats.voting_done_percentage)
    return replace(state, milestone=milestone), effects


# ── Fetch events ──────────────────────────────────────────────────────────────

def fetch_completed(state: DashboardState, seq: int, dataset: Dataset,
                    fetched_at: float | None = None) -> tuple[DashboardState, tuple[Effect, ...]]:
    if seq <= state.last_applied_seq:
        return state, ()
    state = replace(
        state,
        dataset=tuple(dataset),
        loaded=True,
        last_applied_seq=seq,
        last_error=None,
        fetched_at=fetched_at,
    )
    return _recompute(state)


def fetch_failed(state: DashboardState, seq: int,
                 message: str) -> tuple[DashboardState, tuple[Effect, ...]]:
    """Clear the dataset and notify.

    The milestone detector is not fed until the next successful fetch, so an
    outage never reads as a drop to 0% followed by a rise.
    """
    if seq <= state.last_applied_seq:
        return state, ()
    state = replace(
        state,
        dataset=(),
        stats=EMPTY_STATS,
        loaded=False,
        last_applied_seq=seq,
        last_error=message,
    )
    return state, (Notify("error", message),)


def page_fetched(state: DashboardState, seq: int, window: Dataset,
                 meta: PaginationMeta) -> tuple[DashboardState, tuple[Effect, ...]]:
    if seq <= state.last_page_seq:
        return state, ()
    return replace(
        state,
        server_page=tuple(window),
        server_pagination=meta,
        last_page_seq=seq,
    ), ()


def page_fetch_failed(state: DashboardState, seq: int,
                      message: str) -> tuple[DashboardState, tuple[Effect, ...]]:
    if seq <= state.last_page_seq:
        return state, ()
    return replace(
        state,
        server_page=(),
        server_pagination=None,
        last_page_seq=seq,
        last_error=message,
    ), (Notify("error", message),)


# ── User events ───────────────────────────────────────────────────────────────

def filters_changed(state: DashboardState,
                    filters: FilterState) -> tuple[DashboardState, tuple[Effect, ...]]:
    if filters == state.filters:
        return state, ()
    return _recompute(replace(state, filters=filters, current_page=1))


def page_changed(state: DashboardState, page: int) -> tuple[DashboardState, tuple[Effect, ...]]:
    return replace(state, current_page=max(1, int(page))), ()


def search_changed(state: DashboardState, search: str) -> tuple[DashboardState, tuple[Effect, ...]]:
    term = (search or "").strip()
    if term == state.search:
        return state, ()
    return replace(state, search=term, current_page=1), ()


# ── Celebration events ────────────────────────────────────────────────────────

def celebration_cleared(state: DashboardState,
                        celebration_id: int) -> tuple[DashboardState, tuple[Effect, ...]]:
    return replace(state, milestone=milestones.clear(state.milestone, celebration_id)), ()


def celebration_dismissed(state: DashboardState) -> tuple[DashboardState, tuple[Effect, ...]]:
    return replace(state, milestone=milestones.dismiss(state.milestone)), ()


# ── View ──────────────────────────────────────────────────────────────────────

def build_view(state: DashboardState) -> DashboardView:
    """Filter, slice and package the current state for rendering."""
    filtered = apply_filters(state.dataset, state.filters)
    window, meta = slice_page(filtered, state.current_page, state.page_size)
    return DashboardView(
        window=window,
        pagination=meta,
        stats=state.stats,
        milestone=state.milestone,
        filters=state.filters,
        booth_options=booth_options(state.dataset),
        filtered_count=len(filtered),
        last_error=state.last_error,
    )

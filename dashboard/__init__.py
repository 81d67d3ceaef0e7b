"""
Dashboard package -- filtering, pagination, summary and milestone engine for
the voter status view.

Re-exports the main entry points so callers can do::

    from dashboard import DashboardController, VoterFetcher, FilterState
"""

from dashboard.controller import DashboardController
from dashboard.fetcher import FetchFailure, VoterFetcher
from dashboard.filters import FilterState, apply_filters, booth_options
from dashboard.milestones import MilestoneState, advance
from dashboard.pagination import PaginationMeta, slice_page
from dashboard.records import Dataset, VoterRecord
from dashboard.scheduler import PollScheduler
from dashboard.stats import SummaryStats, compute_stats

__all__ = [
    "DashboardController",
    "FetchFailure",
    "VoterFetcher",
    "FilterState",
    "apply_filters",
    "booth_options",
    "MilestoneState",
    "advance",
    "PaginationMeta",
    "slice_page",
    "Dataset",
    "VoterRecord",
    "PollScheduler",
    "SummaryStats",
    "compute_stats",
]

"""
Dashboard controller: the single owner of the dashboard state.

The controller wires the pieces together:

    PollScheduler ──tick──▶ refresh() ──▶ VoterFetcher.fetch_all()
                                               │
                            fetch_completed / fetch_failed reducers
                                               │
                 filters → page window, summary stats → milestone detector
                                               │
                     effects: Celebrate → banner + auto-clear timer
                              Notify    → notifier callback

All state changes go through ``_dispatch``, which applies one reducer under a
lock; effects run after the lock is released.  ``start()``/``stop()`` bound
the lifetime of the poll timer and of any pending auto-clear timers, and
results of fetches still in flight at ``stop()`` are dropped.

Usage::

    fetcher = VoterFetcher(cfg.api_url)
    with DashboardController(fetcher, cfg) as dash:
        dash.set_filters(booth_id="12", voting_filter="not_done")
        view = dash.view()
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from dashboard import state as reducers
from dashboard.fetcher import FetchFailure, VoterFetcher
from dashboard.filters import FilterState
from dashboard.milestones import Celebrate
from dashboard.scheduler import PollScheduler
from dashboard.state import DashboardState, DashboardView, Effect, Notify, build_view
from utils.config import AppConfig

logger = logging.getLogger(__name__)

Notifier = Callable[[Notify], None]
ChangeListener = Callable[[DashboardView], None]
TimerFactory = Callable[..., threading.Timer]


def log_notifier(note: Notify) -> None:
    """Default notifier: route notifications to the log."""
    level = logging.ERROR if note.level == "error" else logging.INFO
    logger.log(level, "%s", note.message)


class DashboardController:
    """Owns DashboardState and runs its effects."""

    def __init__(
        self,
        fetcher: VoterFetcher,
        config: AppConfig | None = None,
        notifier: Notifier = log_notifier,
        on_change: ChangeListener | None = None,
        timer_factory: TimerFactory = threading.Timer,
        clock: Callable[[], float] = time.time,
    ) -> None:
        cfg = config or AppConfig.from_env()
        self.fetcher = fetcher
        self.notifier = notifier
        self.on_change = on_change
        self.celebration_seconds = cfg.celebration_seconds
        self._timer_factory = timer_factory
        self._clock = clock
        self._state = DashboardState(page_size=cfg.page_size, narrow_stats=cfg.narrow_stats)
        self._lock = threading.RLock()
        self._seq = 0
        self._page_seq = 0
        self._closed = False
        self._timers: dict[int, threading.Timer] = {}
        self.scheduler = PollScheduler(self.refresh, interval=cfg.poll_seconds)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def start(self, poll: bool = True) -> None:
        """Load the dataset once, then poll it until ``stop()``."""
        with self._lock:
            self._closed = False
        self.refresh()
        if poll:
            self.scheduler.start()

    def stop(self) -> None:
        """Stop polling, cancel pending timers and drop in-flight results."""
        with self._lock:
            self._closed = True
            timers = list(self._timers.values())
            self._timers.clear()
        self.scheduler.stop()
        for timer in timers:
            timer.cancel()

    def __enter__(self) -> "DashboardController":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # ── Snapshots ─────────────────────────────────────────────────────────

    @property
    def state(self) -> DashboardState:
        with self._lock:
            return self._state

    def view(self) -> DashboardView:
        return build_view(self.state)

    # ── Fetches ───────────────────────────────────────────────────────────

    def _next_seq(self) -> int:
        with self._lock:
            self._seq += 1
            return self._seq

    def refresh(self) -> None:
        """Fetch the whole dataset and apply it (newest request wins)."""
        seq = self._next_seq()
        search = self.state.search
        try:
            dataset = self.fetcher.fetch_all(search=search or None)
        except FetchFailure as e:
            logger.warning("fetch %d failed: %s", seq, e, extra={"seq": seq})
            self._dispatch(reducers.fetch_failed, seq, str(e))
            return
        logger.debug("fetch %d returned %d voters", seq, len(dataset),
                     extra={"seq": seq, "records": len(dataset)})
        self._dispatch(reducers.fetch_completed, seq, dataset, self._clock())

    def refresh_page(self, page: int | None = None) -> None:
        """Fetch one server-side page (the server-paginated variant)."""
        with self._lock:
            self._page_seq += 1
            seq = self._page_seq
            current = self._state
        page = page or current.current_page
        try:
            window, meta = self.fetcher.fetch_page(page, current.page_size,
                                                   search=current.search or None)
        except FetchFailure as e:
            logger.warning("page fetch %d failed: %s", seq, e, extra={"seq": seq})
            self._dispatch(reducers.page_fetch_failed, seq, str(e))
            return
        self._dispatch(reducers.page_fetched, seq, window, meta)

    # ── User input ────────────────────────────────────────────────────────

    def set_filters(self, **changes: str | None) -> None:
        """Change one or more filter slots; the page resets to 1."""
        filters = self.state.filters.update(**changes)
        self._dispatch(reducers.filters_changed, filters)

    def set_filter_state(self, filters: FilterState) -> None:
        self._dispatch(reducers.filters_changed, filters)

    def set_page(self, page: int) -> None:
        self._dispatch(reducers.page_changed, page)

    def set_search(self, search: str, refresh: bool = True) -> None:
        """Change the server-side search term and, if it changed, refetch."""
        before = self.state.search
        self._dispatch(reducers.search_changed, search)
        if refresh and self.state.search != before:
            self.refresh()

    def dismiss_celebration(self) -> None:
        with self._lock:
            celebration_id = self._state.milestone.celebration_id
            timer = self._timers.pop(celebration_id, None)
        if timer is not None:
            timer.cancel()
        self._dispatch(reducers.celebration_dismissed)

    # ── Dispatch and effects ──────────────────────────────────────────────

    def _dispatch(self, reducer, *args) -> None:
        with self._lock:
            if self._closed:
                logger.debug("dropping %s after stop()", reducer.__name__)
                return
            before = self._state
            self._state, effects = reducer(before, *args)
            changed = self._state is not before
        for effect in effects:
            self._run_effect(effect)
        if changed and self.on_change is not None:
            self.on_change(build_view(self.state))

    def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, Celebrate):
            logger.info("milestone reached: %d%% voting done", effect.milestone,
                        extra={"milestone": effect.milestone})
            self._schedule_clear(effect.celebration_id)
        elif isinstance(effect, Notify):
            self.notifier(effect)

    def _schedule_clear(self, celebration_id: int) -> None:
        timer = self._timer_factory(self.celebration_seconds, self._auto_clear,
                                    args=(celebration_id,))
        timer.daemon = True
        with self._lock:
            if self._closed:
                return
            self._timers[celebration_id] = timer
        timer.start()

    def _auto_clear(self, celebration_id: int) -> None:
        with self._lock:
            self._timers.pop(celebration_id, None)
        self._dispatch(reducers.celebration_cleared, celebration_id)

"""
Command-line viewer for the voter status dashboard.

Usage:
    python -m dashboard snapshot [--booth 12] [--voting done] [--page 2]
    python -m dashboard watch --url http://127.0.0.1:8000 [--duration 60]

``snapshot`` loads the dataset once and prints the computed view as JSON.
``watch`` polls the API every DASHBOARD_POLL_SECONDS and prints a summary line
whenever the view changes, plus a banner when a voting milestone is reached.

Exit codes:
    0: success
    1: the listing API could not be read
"""

from __future__ import annotations

import argparse
import json
import sys
import threading

from dashboard.controller import DashboardController
from dashboard.fetcher import VoterFetcher
from dashboard.filters import (
    NOT_YET_CHOICES,
    SURVEY_CHOICES,
    TRANSFER_CHOICES,
    VOTING_CHOICES,
    FilterState,
)
from dashboard.state import DashboardView, Notify
from utils.config import AppConfig
from utils.logging import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m dashboard",
        description="Voter status dashboard (filters, pagination, summary, milestones).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--url", default=None,
                        help="Listing API base URL (default: DASHBOARD_API_URL)")
    common.add_argument("--booth", default="", help="Booth number filter")
    common.add_argument("--voting", default="", choices=["", *VOTING_CHOICES])
    common.add_argument("--survey", default="", choices=["", *SURVEY_CHOICES])
    common.add_argument("--transfer", default="", choices=["", *TRANSFER_CHOICES])
    common.add_argument("--not-yet", dest="not_yet", default="", choices=["", *NOT_YET_CHOICES])
    common.add_argument("--search", default="", help="Server-side search term")
    common.add_argument("--page", type=int, default=1, help="1-based page (default: 1)")
    common.add_argument("--narrow-stats", action="store_true",
                        help="Narrow summary stats by every filter, not only booth")

    sub.add_parser("snapshot", parents=[common], help="Print one computed view as JSON")
    watch = sub.add_parser("watch", parents=[common], help="Poll and print summary lines")
    watch.add_argument("--duration", type=float, default=None,
                       help="Stop after this many seconds (default: until Ctrl-C)")
    return parser.parse_args(argv)


def _filters_from_args(args: argparse.Namespace) -> FilterState:
    return FilterState(
        booth_id=args.booth,
        voting_filter=args.voting,
        survey_filter=args.survey,
        transfer_filter=args.transfer,
        not_yet_filter=args.not_yet,
    )


def format_summary(view: DashboardView) -> str:
    """One status line: the three summary cards plus the visible row range."""
    first, last, total = view.pagination.display_range()
    line = (
        f"Survey Completed: {view.stats.surveyed_count} | "
        f"Voting Completed: {view.stats.voting_done_count} | "
        f"Voting Rate: {view.stats.voting_done_percentage}% | "
        f"Showing {first} to {last} of {total} entries"
    )
    if view.milestone.is_celebrating:
        line += f" | *** {view.milestone.celebrating_value}% voting milestone reached ***"
    return line


def _print_notification(note: Notify) -> None:
    print(f"[{note.level.upper()}] {note.message}", file=sys.stderr)


def _build_controller(args: argparse.Namespace, cfg: AppConfig, **kwargs) -> DashboardController:
    if args.url:
        cfg.api_url = args.url.rstrip("/")
    if args.narrow_stats:
        cfg.narrow_stats = True
    fetcher = VoterFetcher(cfg.api_url, timeout=cfg.http_timeout)
    return DashboardController(fetcher, cfg, notifier=_print_notification, **kwargs)


def run_snapshot(args: argparse.Namespace, cfg: AppConfig) -> int:
    controller = _build_controller(args, cfg)
    try:
        if args.search:
            controller.set_search(args.search, refresh=False)
        # filters first so the load seeds milestones on the filtered scope
        controller.set_filter_state(_filters_from_args(args))
        controller.set_page(args.page)
        controller.start(poll=False)
        view = controller.view()
    finally:
        controller.stop()
        controller.fetcher.close()
    print(json.dumps(view.to_dict(), indent=2))
    return 1 if view.last_error else 0


def run_watch(args: argparse.Namespace, cfg: AppConfig) -> int:
    last_line: list[str] = []

    def _on_change(view: DashboardView) -> None:
        line = format_summary(view)
        if not last_line or last_line[-1] != line:
            last_line.append(line)
            print(line, flush=True)

    controller = _build_controller(args, cfg, on_change=_on_change)
    done = threading.Event()
    try:
        if args.search:
            controller.set_search(args.search, refresh=False)
        controller.set_filter_state(_filters_from_args(args))
        controller.set_page(args.page)
        controller.start()
        print(f"Polling {controller.fetcher.url} every {cfg.poll_seconds:g}s (Ctrl-C to stop)")
        done.wait(args.duration)
    except KeyboardInterrupt:
        print("\nStopped.")
    finally:
        controller.stop()
        controller.fetcher.close()
    return 1 if controller.state.last_error else 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = AppConfig.from_env()
    configure_logging(cfg.log_format)
    if args.command == "snapshot":
        return run_snapshot(args, cfg)
    return run_watch(args, cfg)


if __name__ == "__main__":
    sys.exit(main())

"""
Data fetcher: pull voter rows from the listing API.

``fetch_all`` pulls the whole table in one request (an effectively unbounded
``limit``); ``fetch_page`` pulls a single server-side page with the server's
pagination metadata.  There is no retry: every failure is raised as
``FetchFailure`` and the caller decides how to recover.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from dashboard.pagination import DEFAULT_PAGE_SIZE, PaginationMeta
from dashboard.records import Dataset, to_dataset
from utils.config import UNBOUNDED_PAGE_SIZE
from utils.http import SessionManager, get_json

logger = logging.getLogger(__name__)

VOTERS_PATH = "/api/v1/voters"


class FetchFailure(Exception):
    """A listing request failed (transport error, non-2xx status or bad body)."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class VoterFetcher:
    """Client for ``GET /api/v1/voters`` (or another listing path)."""

    def __init__(self, base_url: str, session: SessionManager | None = None,
                 path: str = VOTERS_PATH, timeout: float = 30.0):
        self.url = base_url.rstrip("/") + path
        self.session = session or SessionManager(timeout=timeout)

    def _params(self, page: int, limit: int, search: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if search and search.strip():
            params["search"] = search.strip()
        return params

    def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            body = get_json(self.session, self.url, params=params)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchFailure("Failed to load voter list", self.url, status) from e
        except requests.RequestException as e:
            raise FetchFailure(f"Failed to load voter list: {e}", self.url) from e
        except ValueError as e:
            raise FetchFailure("Voter list response was not valid JSON", self.url) from e
        if not isinstance(body, dict):
            raise FetchFailure("Voter list response was not a JSON object", self.url)
        return body

    def fetch_all(self, search: str | None = None) -> Dataset:
        """Return every voter row (optionally narrowed by server-side search)."""
        body = self._get(self._params(1, UNBOUNDED_PAGE_SIZE, search))
        dataset = to_dataset(body.get("data") or [])
        logger.debug("fetched %d voters from %s", len(dataset), self.url)
        return dataset

    def fetch_page(self, page: int, page_size: int = DEFAULT_PAGE_SIZE,
                   search: str | None = None) -> tuple[Dataset, PaginationMeta]:
        """Return one server-side page and its pagination metadata."""
        body = self._get(self._params(page, page_size, search))
        window = to_dataset(body.get("data") or [])
        raw_meta = body.get("pagination")
        if isinstance(raw_meta, dict):
            meta = PaginationMeta.from_dict(raw_meta)
        else:
            meta = PaginationMeta.build(len(window), page, page_size)
        return window, meta

    def close(self) -> None:
        self.session.close()

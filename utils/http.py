"""HTTP utilities for the voter status dashboard.

Provides:
- RetryStrategy: urllib3 retry configuration (the dashboard uses none)
- SessionManager: pooled ``requests`` session with a default timeout
- get_json(): GET a URL and decode its JSON body
"""

from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry as URLRetry


class RetryStrategy:
    """Defines retry behavior for HTTP requests."""

    def __init__(self, max_retries: int = 0, backoff_factor: float = 0.0,
                 status_forcelist: Optional[List[int]] = None):
        """Initialize retry strategy.

        Args:
            max_retries: Maximum number of retry attempts (default: 0)
            backoff_factor: Exponential backoff multiplier between attempts
            status_forcelist: HTTP status codes to retry on when
                            max_retries > 0 (default: [429, 500, 502, 503, 504])
        """
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist or [429, 500, 502, 503, 504]

    def get_retry_object(self) -> URLRetry:
        """Get urllib3 Retry object configured with this strategy."""
        return URLRetry(
            total=self.max_retries,
            connect=self.max_retries,
            read=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False,
        )


class SessionManager:
    """Manages HTTP sessions with connection pooling and a default timeout."""

    def __init__(self, retry_strategy: Optional[RetryStrategy] = None,
                 timeout: float = 30.0,
                 pool_connections: int = 4, pool_maxsize: int = 4):
        """Initialize session manager.

        Args:
            retry_strategy: RetryStrategy to use (default: no retries)
            timeout: Seconds applied to every request made through get()
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
        """
        self.retry_strategy = retry_strategy or RetryStrategy()
        self.timeout = timeout
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the pooled HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            adapter = HTTPAdapter(
                max_retries=self.retry_strategy.get_retry_object(),
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
        return self._session

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """GET *url* with the configured timeout."""
        return self.session.get(url, params=params, timeout=self.timeout)

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def get_json(manager: SessionManager, url: str,
             params: Optional[Dict[str, Any]] = None) -> Any:
    """GET *url* and return the decoded JSON body.

    Raises:
        requests.RequestException: on transport errors or a non-2xx status
            (``raise_for_status``).
        ValueError: if the body is not valid JSON.
    """
    response = manager.get(url, params=params)
    response.raise_for_status()
    return response.json()

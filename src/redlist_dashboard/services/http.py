"""
Shared HTTP client with automatic retry and backoff.

Provides a pre-configured ``requests.Session`` that retries on transient
upstream errors (timeouts, connection resets, 429/502/503/504) with
exponential backoff. GBIF, IUCN, iNaturalist and OpenAlex wrappers all go
through this session instead of bare ``requests.get``.

Usage::

    from redlist_dashboard.services.http import session

    resp = session.get("https://api.gbif.org/v1/occurrence/search", params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

#: Default retry strategy. GBIF rate-limits with 429 under bursty fan-out.
DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,  # 0s, 2s, 4s, 8s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # callers decide how to treat the final status
)

DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_MAX_WORKERS = 16

T = TypeVar("T")

USER_AGENT = "redlist-dashboard/0.1"

# Connection pool sized for the parallel count queries of a species lookup
POOL_SIZE = 32


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY, pool_maxsize=POOL_SIZE)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Wrap send to inject a default timeout so callers don't need to
    # remember to pass ``timeout=`` every time.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: Any
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


def get_json(url: str, params: Any = None, **kwargs: Any) -> Any:
    """GET ``url`` and decode JSON, raising ``requests.HTTPError`` on 4xx/5xx."""
    resp = session.get(url, params=params, **kwargs)
    resp.raise_for_status()
    return resp.json()


def fetch_parallel(
    calls: Mapping[str, Callable[[], T]], max_workers: int = DEFAULT_MAX_WORKERS
) -> dict[str, T]:
    """Run independent upstream calls on a thread pool, results keyed like ``calls``.

    The first exception raised by any call propagates.
    """
    if not calls:
        return {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(calls))) as pool:
        futures = {name: pool.submit(fn) for name, fn in calls.items()}
        return {name: future.result() for name, future in futures.items()}


#: Module-level session. Import and use directly.
session: requests.Session = create_session()

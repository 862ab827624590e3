"""Tests for the shared HTTP client with retry logic."""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest
import requests
from urllib3.util.retry import Retry

from redlist_dashboard.services.http import (
    DEFAULT_RETRY,
    DEFAULT_TIMEOUT,
    create_session,
    fetch_parallel,
    get_json,
    session,
)

from conftest import make_response


class TestDefaultRetry:
    """Verify retry strategy configuration."""

    def test_total_retries(self) -> None:
        assert DEFAULT_RETRY.total == 4

    def test_backoff_factor(self) -> None:
        assert DEFAULT_RETRY.backoff_factor == 2

    def test_retries_on_server_errors(self) -> None:
        assert 502 in DEFAULT_RETRY.status_forcelist
        assert 503 in DEFAULT_RETRY.status_forcelist
        assert 504 in DEFAULT_RETRY.status_forcelist

    def test_retries_on_rate_limit(self) -> None:
        assert 429 in DEFAULT_RETRY.status_forcelist

    def test_only_safe_methods(self) -> None:
        allowed = DEFAULT_RETRY.allowed_methods
        assert "GET" in allowed
        assert "POST" not in allowed


class TestCreateSession:
    """Verify session factory."""

    def test_returns_session(self) -> None:
        s = create_session()
        assert isinstance(s, requests.Session)

    def test_adapter_has_retry(self) -> None:
        s = create_session()
        adapter = s.get_adapter("https://api.gbif.org")
        assert adapter.max_retries.total == 4

    def test_custom_retry(self) -> None:
        custom = Retry(total=10, backoff_factor=1)
        s = create_session(retry=custom)
        adapter = s.get_adapter("https://api.gbif.org")
        assert adapter.max_retries.total == 10

    def test_user_agent_header(self) -> None:
        s = create_session()
        assert s.headers["User-Agent"].startswith("redlist-dashboard/")

    def test_default_timeout_injected(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "https://api.gbif.org/v1/species").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 42

    def test_explicit_timeout_not_overridden(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "https://api.gbif.org/v1/species").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep, timeout=99)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 99


class TestModuleSession:
    """Verify the module-level singleton."""

    def test_session_is_configured(self) -> None:
        adapter = session.get_adapter("https://api.iucnredlist.org")
        assert adapter.max_retries.total == 4

    def test_default_timeout(self) -> None:
        assert DEFAULT_TIMEOUT == 30


class TestGetJson:
    def test_returns_decoded_body(self) -> None:
        with patch.object(session, "get", return_value=make_response({"count": 3})) as mock_get:
            assert get_json("https://api.gbif.org/v1/x", {"a": 1}) == {"count": 3}
        mock_get.assert_called_once_with("https://api.gbif.org/v1/x", params={"a": 1})

    def test_raises_on_error_status(self) -> None:
        with (
            patch.object(session, "get", return_value=make_response({}, status=500)),
            pytest.raises(requests.HTTPError),
        ):
            get_json("https://api.gbif.org/v1/x")


class TestFetchParallel:
    def test_results_keyed_by_name(self) -> None:
        result = fetch_parallel({"a": lambda: 1, "b": lambda: 2})
        assert result == {"a": 1, "b": 2}

    def test_empty(self) -> None:
        assert fetch_parallel({}) == {}

    def test_runs_on_worker_threads(self) -> None:
        main = threading.get_ident()
        result = fetch_parallel({"t": threading.get_ident})
        assert result["t"] != main

    def test_exception_propagates(self) -> None:
        def boom() -> int:
            raise requests.ConnectionError("down")

        with pytest.raises(requests.ConnectionError):
            fetch_parallel({"ok": lambda: 1, "bad": boom})

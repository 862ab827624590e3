"""Request-scoped accessors for objects attached to ``app.state``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from fastapi import Request

from redlist_dashboard.cache import TTLCache
from redlist_dashboard.config import Settings
from redlist_dashboard.errors import InvalidParameterError
from redlist_dashboard.store import SnapshotStore

LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class ResponseCaches:
    """Per-app caches of upstream-derived responses, one TTL for all."""

    ttl_seconds: float
    species_details: TTLCache[str, dict[str, Any]] = field(init=False)
    assessments: TTLCache[int, dict[str, Any]] = field(init=False)
    breakdowns: TTLCache[str, dict[str, Any]] = field(init=False)
    literature: TTLCache[str, dict[str, Any]] = field(init=False)
    taxa_summary: TTLCache[str, list[dict[str, Any]]] = field(init=False)

    def __post_init__(self) -> None:
        self.species_details = TTLCache(self.ttl_seconds)
        self.assessments = TTLCache(self.ttl_seconds)
        self.breakdowns = TTLCache(self.ttl_seconds)
        self.literature = TTLCache(self.ttl_seconds)
        self.taxa_summary = TTLCache(self.ttl_seconds)


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


def get_caches(request: Request) -> ResponseCaches:
    return request.app.state.caches


def parse_int(value: str | None, name: str, default: int | None = None) -> int | None:
    """Leading-integer parse of a query value (``"12abc"`` -> 12).

    Raises:
        InvalidParameterError: Value present but not numeric.
    """
    if value is None or value == "":
        return default
    match = LEADING_INT.match(value)
    if match is None:
        raise InvalidParameterError(f"Invalid {name}")
    return int(match.group(1))


def require_int(value: str | None, name: str) -> int:
    """Like ``parse_int`` but a missing value is also invalid."""
    parsed = parse_int(value, name)
    if parsed is None:
        raise InvalidParameterError(f"Invalid {name}")
    return parsed

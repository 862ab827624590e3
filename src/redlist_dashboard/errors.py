"""Exceptions raised by the dashboard and rendered as ``{"error": ...}`` responses."""

from __future__ import annotations

from typing import Any

from redlist_dashboard.reference.taxa import TaxonConfig


class DashboardError(Exception):
    """Base error carrying the HTTP status it should be reported with."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def body(self) -> dict[str, Any]:
        """JSON response body."""
        return {"error": self.message}


class InvalidParameterError(DashboardError):
    """A query or path parameter is missing or malformed."""

    status_code = 400


class SnapshotUnavailableError(DashboardError):
    """No pre-computed snapshot exists on disk for the requested taxon.

    ``extra`` fields (e.g. an empty ``species`` list) are added to the body
    ahead of the taxon description.
    """

    status_code = 503

    def __init__(self, taxon: TaxonConfig, **extra: Any) -> None:
        super().__init__(
            f"Species data not available for {taxon.name}. "
            f"Expected {taxon.data_file} in the data directory."
        )
        self.taxon = taxon
        self.extra = extra

    def body(self) -> dict[str, Any]:
        info = self.taxon.info()
        info.pop("color")
        return {**super().body(), **self.extra, "taxon": info}


class UpstreamError(DashboardError):
    """An external API (GBIF, IUCN, OpenAlex) returned an error."""


class RedListAuthError(DashboardError):
    """The IUCN Red List API token is not configured."""

    def __init__(self, message: str = "RED_LIST_API_KEY environment variable not set") -> None:
        super().__init__(message)

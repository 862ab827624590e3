"""GBIF API constants and the occurrence-count primitive.

API docs: https://techdocs.gbif.org/en/openapi/
"""

from __future__ import annotations

from typing import Any

from redlist_dashboard.reference.gbif import DATA_SOURCES
from redlist_dashboard.services.http import session

API_BASE = "https://api.gbif.org/v1"
OCCURRENCE_SEARCH_URL = f"{API_BASE}/occurrence/search"
OCCURRENCE_COUNT_URL = f"{API_BASE}/occurrence/count"
SPECIES_URL = f"{API_BASE}/species"

GBIF_SPECIES_PAGE = "https://www.gbif.org/species/{key}"


def species_page_url(key: int) -> str:
    return GBIF_SPECIES_PAGE.format(key=key)


def apply_filters(
    params: dict[str, Any],
    *,
    country: str | None = None,
    max_uncertainty: str | None = None,
    data_source: str | None = None,
) -> dict[str, Any]:
    """Add the dashboard's optional country/uncertainty/data-source filters.

    Unknown data source names are ignored.
    """
    if country:
        params["country"] = country.upper()
    if max_uncertainty:
        params["coordinateUncertaintyInMeters"] = f"*,{max_uncertainty}"
    source = DATA_SOURCES.get(data_source) if data_source else None
    if source is not None:
        params[source.param] = source.key
    return params


def count_occurrences(params: dict[str, Any]) -> int:
    """``count`` of an occurrence search with ``limit=0``.

    Returns 0 when GBIF answers with an error status.
    """
    resp = session.get(OCCURRENCE_SEARCH_URL, params={**params, "limit": 0})
    if not resp.ok:
        return 0
    return resp.json().get("count") or 0

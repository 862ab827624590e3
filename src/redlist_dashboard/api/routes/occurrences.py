"""Occurrence points of one species as GeoJSON for the map."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from redlist_dashboard.analysis.geojson import occurrences_to_geojson
from redlist_dashboard.api.deps import parse_int
from redlist_dashboard.datasources.gbif import search_occurrences
from redlist_dashboard.errors import InvalidParameterError

router = APIRouter()


@router.get("/occurrences")
def get_occurrences(
    species_key: str | None = Query(None, alias="speciesKey"),
    country: str | None = None,
    limit: str | None = None,
) -> dict[str, Any]:
    if not species_key:
        raise InvalidParameterError("speciesKey parameter is required")
    key = parse_int(species_key, "speciesKey") or 0
    data = search_occurrences(key, country=country, limit=parse_int(limit, "limit", 500) or 500)
    return occurrences_to_geojson(
        data.get("results") or [], species_key=key, total=data.get("count")
    )

"""Occurrence search: raw records, speciesKey facets and iNaturalist observations."""

from __future__ import annotations

from typing import Any

from redlist_dashboard.datasources.gbif.client import OCCURRENCE_SEARCH_URL
from redlist_dashboard.reference.gbif import GEO_PARAMS, INAT_DATASET_KEY
from redlist_dashboard.services.http import get_json, session

# =============================================================================
# Occurrence search
# =============================================================================


def search_occurrences(
    species_key: int, *, country: str | None = None, limit: int = 500
) -> dict[str, Any]:
    """Geo-referenced occurrences of one species (``results`` + ``count``)."""
    params: dict[str, Any] = {"speciesKey": species_key, **GEO_PARAMS, "limit": limit}
    if country:
        params["country"] = country.upper()
    return get_json(OCCURRENCE_SEARCH_URL, params)


def species_key_facets(params: dict[str, Any]) -> list[tuple[int, int]]:
    """``(species_key, occurrence_count)`` pairs from a speciesKey facet query.

    ``params`` carries the taxon scope and filters; repeated keys (e.g. several
    ``classKey`` values) are passed as lists.
    """
    query = {
        "facet": "speciesKey",
        "facetLimit": 500000,
        "limit": 0,
        **GEO_PARAMS,
        **params,
    }
    data = get_json(OCCURRENCE_SEARCH_URL, query)
    facet = next(
        (f for f in data.get("facets") or [] if f.get("field") == "SPECIES_KEY"), None
    )
    if not facet or not facet.get("counts"):
        return []
    return [(int(c["name"]), c["count"]) for c in facet["counts"]]


def first_still_image(taxon_key: int) -> str | None:
    """URL of a StillImage from the first iNaturalist occurrence with media."""
    resp = session.get(
        OCCURRENCE_SEARCH_URL,
        params={
            "taxonKey": taxon_key,
            "mediaType": "StillImage",
            "datasetKey": INAT_DATASET_KEY,
            "limit": 1,
        },
    )
    if not resp.ok:
        return None
    results = resp.json().get("results") or []
    if not results:
        return None
    for media in results[0].get("media") or []:
        if media.get("type") == "StillImage" and media.get("identifier"):
            return media["identifier"]
    return None


# =============================================================================
# iNaturalist observations (as published to GBIF)
# =============================================================================


def _observation_base(record: dict[str, Any]) -> dict[str, Any]:
    parts = [record.get(k) for k in ("verbatimLocality", "stateProvince", "country")]
    event_date = record.get("eventDate")
    return {
        "url": record["references"],
        "date": event_date.split("T")[0] if event_date else None,
        "location": ", ".join(p for p in parts if p) or None,
        "observer": record.get("recordedBy") or None,
    }


def parse_inat_observation(record: dict[str, Any]) -> dict[str, Any] | None:
    """Reshape a GBIF occurrence from the iNaturalist dataset for the media viewer.

    Returns None without a ``references`` link or a first media item.
    """
    media = record.get("media") or []
    if not record.get("references") or not (media and media[0].get("identifier")):
        return None

    image = next((m for m in media if m.get("type") == "StillImage"), None)
    audio = next((m for m in media if m.get("type") == "Sound"), None)
    base = _observation_base(record)
    return {
        "url": base["url"],
        "date": base["date"],
        "imageUrl": image.get("identifier") if image else None,
        "audioUrl": audio.get("identifier") if audio else None,
        "mediaType": media[0].get("type"),
        "location": base["location"],
        "observer": base["observer"],
    }


def parse_inat_observations(results: list[dict[str, Any]]) -> list[dict[str, Any]]:
    parsed = (parse_inat_observation(r) for r in results)
    return [p for p in parsed if p is not None]


def parse_recent_observations(results: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Species panel links: any observation with a ``references`` link.

    ``imageUrl`` is the first media item, whatever its type.
    """
    recent = []
    for record in results:
        if not record.get("references"):
            continue
        media = record.get("media") or []
        base = _observation_base(record)
        recent.append(
            {
                "url": base["url"],
                "date": base["date"],
                "imageUrl": media[0].get("identifier") or None if media else None,
                "location": base["location"],
                "observer": base["observer"],
            }
        )
    return recent


def inat_observations(
    taxon_key: int,
    *,
    country: str | None = None,
    limit: int = 10,
    offset: int = 0,
    geo_filtered: bool = False,
) -> dict[str, Any] | None:
    """Raw iNaturalist-dataset occurrence page, or None on an error status."""
    params: dict[str, Any] = {
        "taxonKey": taxon_key,
        "datasetKey": INAT_DATASET_KEY,
        "hasCoordinate": "true",
        "limit": limit,
        "offset": offset,
    }
    if geo_filtered:
        params.update(GEO_PARAMS)
    if country:
        params["country"] = country.upper()
    resp = session.get(OCCURRENCE_SEARCH_URL, params=params)
    if not resp.ok:
        return None
    return resp.json()


def inat_photos(
    taxon_key: int, *, country: str | None = None, offset: int = 0, limit: int = 10
) -> dict[str, Any]:
    """One page of iNaturalist observations that carry media."""
    data = inat_observations(taxon_key, country=country, limit=limit, offset=offset)
    if data is None:
        return {"observations": [], "totalCount": 0}
    return {
        "observations": parse_inat_observations(data.get("results") or []),
        "totalCount": data.get("count") or 0,
    }

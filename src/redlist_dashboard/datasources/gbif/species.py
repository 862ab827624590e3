"""Species lookups: name match, search, species records and vernacular names."""

from __future__ import annotations

from typing import Any

from redlist_dashboard.datasources.gbif.client import (
    OCCURRENCE_COUNT_URL,
    SPECIES_URL,
    species_page_url,
)
from redlist_dashboard.datasources.gbif.occurrences import first_still_image
from redlist_dashboard.reference.gbif import GOOD_MATCH_TYPES
from redlist_dashboard.reference.taxa import TaxonConfig
from redlist_dashboard.services.http import fetch_parallel, get_json, session


def match_species(name: str) -> int | None:
    """GBIF usage key for a scientific name, or None without a species-level match.

    HIGHERRANK matches (a genus or family) are rejected.
    """
    resp = session.get(f"{SPECIES_URL}/match", params={"name": name})
    if not resp.ok:
        return None
    data = resp.json()
    key = data.get("usageKey")
    if key and data.get("matchType") in GOOD_MATCH_TYPES:
        return key
    return None


def species_record(key: int) -> dict[str, Any]:
    return get_json(f"{SPECIES_URL}/{key}")


def species_name(key: int) -> tuple[str | None, str | None]:
    """``(canonical name, vernacular name)`` from the species record."""
    data = species_record(key)
    return data.get("canonicalName") or data.get("scientificName"), data.get("vernacularName")


def english_vernacular_name(key: int) -> str | None:
    """First English (``eng``) vernacular name listed for a species."""
    resp = session.get(f"{SPECIES_URL}/{key}/vernacularNames", params={"limit": 50})
    if not resp.ok:
        return None
    for entry in resp.json().get("results") or []:
        if entry.get("language") == "eng":
            return entry.get("vernacularName")
    return None


def occurrence_count(taxon_key: int) -> int | None:
    """Total occurrences from ``/occurrence/count`` (plain-text integer body)."""
    resp = session.get(OCCURRENCE_COUNT_URL, params={"taxonKey": taxon_key})
    if not resp.ok:
        return None
    try:
        return int(resp.text.strip())
    except ValueError:
        return None


# =============================================================================
# Search
# =============================================================================


def search_scope_key(taxon: TaxonConfig) -> int | None:
    """``highertaxonKey`` for a taxon: its class, first class, else its kingdom."""
    if taxon.gbif_class_key:
        return taxon.gbif_class_key
    if taxon.gbif_class_keys:
        return taxon.gbif_class_keys[0]
    return taxon.gbif_kingdom_key


def search_species(
    query: str, taxon: TaxonConfig | None = None, limit: int = 10
) -> list[dict[str, Any]]:
    """Species-rank search results, optionally scoped to a taxon."""
    params: dict[str, Any] = {"q": query, "rank": "SPECIES", "limit": limit}
    scope = search_scope_key(taxon) if taxon else None
    if scope:
        params["highertaxonKey"] = scope
    return get_json(f"{SPECIES_URL}/search", params).get("results") or []


def enrich_search_result(result: dict[str, Any], max_workers: int = 3) -> dict[str, Any]:
    """Add an English name, an iNaturalist image and the occurrence count."""
    key = result["key"]
    extra = fetch_parallel(
        {
            "vernacular": lambda: english_vernacular_name(key),
            "image": lambda: first_still_image(key),
            "count": lambda: occurrence_count(key),
        },
        max_workers,
    )
    return {
        "key": key,
        "scientificName": result.get("scientificName"),
        "canonicalName": result.get("canonicalName"),
        "vernacularName": extra["vernacular"] or result.get("vernacularName"),
        "kingdom": result.get("kingdom"),
        "family": result.get("family"),
        "genus": result.get("genus"),
        "gbifUrl": species_page_url(key),
        "imageUrl": extra["image"],
        "occurrenceCount": extra["count"],
    }

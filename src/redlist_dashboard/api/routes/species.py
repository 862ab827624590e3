"""GBIF species table and per-species occurrence panels."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from redlist_dashboard.analysis.species_table import (
    DEFAULT_MAX_COUNT,
    MAX_PAGE_SIZE,
    species_table,
)
from redlist_dashboard.api.deps import (
    ResponseCaches,
    get_caches,
    get_settings_dep,
    get_store,
    parse_int,
)
from redlist_dashboard.config import Settings
from redlist_dashboard.datasources.gbif import inat_photos, record_breakdown
from redlist_dashboard.reference.taxa import DEFAULT_TAXON_ID, get_taxon_config
from redlist_dashboard.services.species_listing import live_species_table
from redlist_dashboard.store import SnapshotStore

router = APIRouter()


@router.get("")
def list_gbif_species(
    taxon: str = DEFAULT_TAXON_ID,
    page: str | None = None,
    limit: str | None = None,
    min_count: str | None = Query(None, alias="minCount"),
    max_count: str | None = Query(None, alias="maxCount"),
    sort: str = "desc",
    redlist: str | None = None,
    basis_of_record: str | None = Query(None, alias="basisOfRecord"),
    max_uncertainty: str | None = Query(None, alias="maxUncertainty"),
    data_source: str | None = Query(None, alias="dataSource"),
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
) -> dict[str, Any]:
    """Species of a taxon with occurrence counts, paged.

    Served from the pre-computed CSV unless a record filter (basis of record,
    coordinate uncertainty, data source) forces a live GBIF facet query.
    """
    config = get_taxon_config(taxon)
    options = {
        "page": parse_int(page, "page", 1),
        "limit": min(parse_int(limit, "limit", 100) or 100, MAX_PAGE_SIZE),
        "min_count": parse_int(min_count, "minCount", 0),
        "max_count": parse_int(max_count, "maxCount", DEFAULT_MAX_COUNT),
        "sort": sort,
        "redlist_filter": redlist,
    }

    if basis_of_record or max_uncertainty or data_source:
        return live_species_table(
            store,
            config,
            **options,
            basis_of_record=basis_of_record,
            max_uncertainty=max_uncertainty,
            data_source=data_source,
            max_workers=settings.max_workers,
        )
    return species_table(store.gbif_species(config.id), **options)


@router.get("/{species_key}/breakdown")
def get_breakdown(
    species_key: int,
    country: str | None = None,
    max_uncertainty: str | None = Query(None, alias="maxUncertainty"),
    data_source: str | None = Query(None, alias="dataSource"),
    settings: Settings = Depends(get_settings_dep),
    caches: ResponseCaches = Depends(get_caches),
) -> dict[str, Any]:
    """Occurrence counts by record type plus recent iNaturalist observations."""
    cache_key = f"{species_key}-{country or 'global'}-{max_uncertainty or ''}-{data_source or ''}"
    cached = caches.breakdowns.get(cache_key)
    if cached is not None:
        return cached

    result = record_breakdown(
        species_key,
        country=country,
        max_uncertainty=max_uncertainty,
        data_source=data_source,
        max_workers=settings.max_workers,
    )
    caches.breakdowns.set(cache_key, result)
    return result


@router.get("/{species_key}/inat-photos")
def get_inat_photos(
    species_key: int,
    country: str | None = None,
    offset: str | None = None,
    limit: str | None = None,
) -> dict[str, Any]:
    """One page of iNaturalist observations with media."""
    return inat_photos(
        species_key,
        country=country,
        offset=parse_int(offset, "offset", 0) or 0,
        limit=parse_int(limit, "limit", 10) or 10,
    )

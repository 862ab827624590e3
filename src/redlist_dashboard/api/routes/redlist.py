"""Red List endpoints: species lists, species details, assessments, stats, taxa."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from redlist_dashboard.analysis.not_evaluated import (
    count_not_evaluated,
    matches_search,
    not_evaluated_species,
    redlist_names,
)
from redlist_dashboard.analysis.redlist_summary import category_stats, summarize_taxon
from redlist_dashboard.api.deps import (
    ResponseCaches,
    get_caches,
    get_settings_dep,
    get_store,
    parse_int,
    require_int,
)
from redlist_dashboard.config import Settings
from redlist_dashboard.datasources.iucn import fetch_assessment
from redlist_dashboard.errors import SnapshotUnavailableError
from redlist_dashboard.reference.categories import NOT_EVALUATED
from redlist_dashboard.reference.taxa import DEFAULT_TAXON_ID, get_taxon_config, summary_taxa
from redlist_dashboard.services.species_details import species_details
from redlist_dashboard.store import SnapshotStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/species")
def list_species(
    taxon: str = DEFAULT_TAXON_ID,
    category: str | None = None,
    search: str | None = None,
    list_: str | None = Query(None, alias="list"),
    store: SnapshotStore = Depends(get_store),
) -> dict[str, Any]:
    """Species of a taxon, optionally filtered by category and name.

    ``category=NE`` lists GBIF species with no Red List assessment.
    ``list=taxa`` instead returns which taxa have snapshots on disk.
    """
    if list_ == "taxa":
        return {"taxa": store.available_taxa()}

    config = get_taxon_config(taxon)
    snapshot = store.redlist(taxon)
    if snapshot is None:
        raise SnapshotUnavailableError(config, species=[], total=0)

    term = search.lower() if search else None

    if category == NOT_EVALUATED:
        if not store.has_gbif_csv(config.id):
            return {"species": [], "total": 0, "taxon": config.info()}
        species = not_evaluated_species(
            store.gbif_species(config.id), redlist_names(snapshot.species)
        )
    else:
        species = snapshot.species
        if category:
            species = [s for s in species if s.get("category") == category]
    if term:
        species = [s for s in species if matches_search(s, term)]

    return {
        "species": species,
        "total": len(species),
        "metadata": snapshot.metadata.to_json_dict(),
        "taxon": config.info(),
    }


@router.get("/species/{sis_id}")
def get_species_details(
    sis_id: int,
    assessment_id: str | None = Query(None, alias="assessmentId"),
    name: str | None = None,
    assessment_year: str | None = Query(None, alias="assessmentYear"),
    assessment_month: str | None = Query(None, alias="assessmentMonth"),
    settings: Settings = Depends(get_settings_dep),
    caches: ResponseCaches = Depends(get_caches),
) -> dict[str, Any]:
    """IUCN + GBIF + iNaturalist details for one species, cached per assessment date."""
    year = parse_int(assessment_year, "assessmentYear")
    month = parse_int(assessment_month, "assessmentMonth")
    cache_key = f"{sis_id}-{year or 'none'}-{month or 'none'}"

    cached = caches.species_details.get(cache_key)
    if cached is not None:
        return {**cached, "cached": True}

    result = species_details(
        sis_id,
        api_key=settings.red_list_api_key,
        assessment_id=parse_int(assessment_id, "assessmentId"),
        scientific_name=name or None,
        assessment_year=year,
        assessment_month=month,
        max_workers=settings.max_workers,
    )
    caches.species_details.set(cache_key, result)
    return result


@router.get("/assessment/{assessment_id}")
def get_assessment(
    assessment_id: str,
    settings: Settings = Depends(get_settings_dep),
    caches: ResponseCaches = Depends(get_caches),
) -> dict[str, Any]:
    """Normalized IUCN assessment document."""
    key = require_int(assessment_id, "assessment ID")

    cached = caches.assessments.get(key)
    if cached is not None:
        return {**cached, "cached": True}

    result = fetch_assessment(key, settings.red_list_api_key)
    caches.assessments.set(key, result)
    return result


@router.get("/stats")
def get_stats(
    taxon: str = DEFAULT_TAXON_ID, store: SnapshotStore = Depends(get_store)
) -> dict[str, Any]:
    """Species count per IUCN category, with NE counted from the GBIF species list."""
    config = get_taxon_config(taxon)
    snapshot = store.redlist(taxon)
    if snapshot is None:
        raise SnapshotUnavailableError(config)

    ne_count = count_not_evaluated(
        store.gbif_species(config.id), redlist_names(snapshot.species)
    )
    total = snapshot.metadata.total_species
    return {
        "totalAssessed": total,
        "byCategory": [
            stat.to_json_dict() for stat in category_stats(snapshot.metadata.by_category, ne_count)
        ],
        "sampleSize": total + ne_count,
        "lastUpdated": snapshot.metadata.fetched_at,
        "cached": True,
        "taxon": config.info(),
    }


@router.get("/taxa")
def get_taxa_summary(
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
    caches: ResponseCaches = Depends(get_caches),
) -> dict[str, Any]:
    """Assessment coverage for every taxon except "all"."""
    cached = caches.taxa_summary.get("summary")
    if cached is not None:
        return {"taxa": cached, "cached": True}

    year = date.today().year
    summary = [
        summarize_taxon(
            t,
            store.load_summary_snapshot(t),
            current_year=year,
            max_age_years=settings.outdated_after_years,
        ).to_json_dict()
        for t in summary_taxa()
    ]
    caches.taxa_summary.set("summary", summary)
    return {"taxa": summary, "cached": False}

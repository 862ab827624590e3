"""Live GBIF species table, used when record filters rule out the CSV.

The pre-computed CSV only knows total counts per species. Filtering by basis
of record, coordinate uncertainty or data source needs a live speciesKey
facet query. Facet keys are restricted to the species validated in the CSV,
which drops subspecies and synonyms GBIF facets on. Names are fetched only for
the requested page, so the Red List filter applies to that page alone.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import requests

from redlist_dashboard.analysis.occurrence_stats import banded_distribution, median
from redlist_dashboard.analysis.species_table import (
    matches_redlist_filter,
    paginate,
    sort_by_count,
)
from redlist_dashboard.datasources.gbif import apply_filters, species_key_facets, species_name
from redlist_dashboard.reference.gbif import OTHER_BASIS_OF_RECORD
from redlist_dashboard.reference.taxa import TaxonConfig
from redlist_dashboard.services.http import DEFAULT_MAX_WORKERS
from redlist_dashboard.store import SnapshotStore, normalize_name

logger = logging.getLogger(__name__)


def taxon_scope(taxon: TaxonConfig) -> dict[str, Any]:
    """GBIF backbone filter for a taxon, most specific key first."""
    if taxon.gbif_class_key:
        return {"classKey": taxon.gbif_class_key}
    if taxon.gbif_class_keys:
        return {"classKey": list(taxon.gbif_class_keys)}
    if taxon.gbif_order_keys:
        return {"orderKey": list(taxon.gbif_order_keys)}
    if taxon.gbif_kingdom_key:
        return {"kingdomKey": taxon.gbif_kingdom_key}
    return {}


def facet_params(
    taxon: TaxonConfig,
    *,
    basis_of_record: str | None = None,
    max_uncertainty: str | None = None,
    data_source: str | None = None,
) -> dict[str, Any]:
    """Facet query parameters; ``OTHER`` expands to the minor record types."""
    params: dict[str, Any] = {}
    if basis_of_record == "OTHER":
        params["basisOfRecord"] = list(OTHER_BASIS_OF_RECORD)
    elif basis_of_record:
        params["basisOfRecord"] = basis_of_record
    apply_filters(params, max_uncertainty=max_uncertainty, data_source=data_source)
    params.update(taxon_scope(taxon))
    return params


def name_row(key: int, count: int, lookup: dict[str, str]) -> dict[str, Any]:
    """Table row for one facet entry with its name and Red List category."""
    try:
        scientific_name, vernacular = species_name(key)
    except requests.RequestException:
        logger.warning("Could not fetch GBIF species %s", key)
        return {
            "species_key": key,
            "occurrence_count": count,
            "scientific_name": f"Species {key}",
            "redlist_category": None,
        }
    return {
        "species_key": key,
        "occurrence_count": count,
        "scientific_name": scientific_name,
        "vernacularName": vernacular,
        "redlist_category": (
            lookup.get(normalize_name(scientific_name)) if scientific_name else None
        ),
    }


def empty_live_table(limit: int) -> dict[str, Any]:
    return {
        "data": [],
        "pagination": {"page": 1, "limit": limit, "total": 0, "totalPages": 0},
        "stats": {
            "total": 0,
            "filtered": 0,
            "totalOccurrences": 0,
            "median": 0,
            "distribution": banded_distribution([]),
        },
    }


def live_species_table(
    store: SnapshotStore,
    taxon: TaxonConfig,
    *,
    page: int,
    limit: int,
    min_count: int,
    max_count: int,
    sort: str,
    redlist_filter: str | None,
    basis_of_record: str | None = None,
    max_uncertainty: str | None = None,
    data_source: str | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[str, Any]:
    """Species table page computed from a live facet query.

    Raises:
        requests.HTTPError: The facet query failed.
    """
    params = facet_params(
        taxon,
        basis_of_record=basis_of_record,
        max_uncertainty=max_uncertainty,
        data_source=data_source,
    )
    facets = species_key_facets(params)
    if not facets:
        return empty_live_table(limit)

    valid = store.valid_species_keys(taxon.id)
    species = [(key, count) for key, count in facets if key in valid]
    counts = [count for _, count in species]

    in_range = [s for s in species if min_count <= s[1] <= max_count]
    ordered = sort_by_count(in_range, lambda s: s[1], sort)
    page_species, pagination = paginate(ordered, page, limit)

    lookup = store.redlist_lookup(taxon.id)
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(page_species)))) as pool:
        rows = list(pool.map(lambda s: name_row(s[0], s[1], lookup), page_species))

    return {
        "data": [r for r in rows if matches_redlist_filter(r["redlist_category"], redlist_filter)],
        "pagination": pagination.to_json_dict(),
        "stats": {
            "total": len(species),
            "filtered": len(in_range),
            "totalOccurrences": sum(counts),
            "median": median(counts),
            "distribution": banded_distribution(counts),
        },
        "isLiveQuery": True,
    }

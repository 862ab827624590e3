"""Not Evaluated (NE) species: known to GBIF but absent from the Red List."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from redlist_dashboard.reference.categories import NOT_EVALUATED
from redlist_dashboard.store import GbifSpeciesCount, normalize_name

GBIF_SPECIES_URL = "https://www.gbif.org/species/{key}"


def redlist_names(species: Iterable[dict[str, Any]]) -> set[str]:
    """Normalized scientific names present in a Red List snapshot."""
    return {normalize_name(s["scientific_name"]) for s in species if s.get("scientific_name")}


def _unassessed(
    gbif_rows: Iterable[GbifSpeciesCount], assessed: set[str]
) -> Iterable[GbifSpeciesCount]:
    for row in gbif_rows:
        if row.scientific_name and normalize_name(row.scientific_name) not in assessed:
            yield row


def count_not_evaluated(gbif_rows: Iterable[GbifSpeciesCount], assessed: set[str]) -> int:
    return sum(1 for _ in _unassessed(gbif_rows, assessed))


def not_evaluated_species(
    gbif_rows: Iterable[GbifSpeciesCount], assessed: set[str]
) -> list[dict[str, Any]]:
    """Species records shaped like Red List rows, keyed by GBIF species key."""
    return [
        {
            "sis_taxon_id": row.species_key,
            "assessment_id": 0,
            "scientific_name": row.scientific_name,
            "common_name": row.common_name,
            "family": None,
            "category": NOT_EVALUATED,
            "assessment_date": None,
            "year_published": "",
            "url": GBIF_SPECIES_URL.format(key=row.species_key),
            "population_trend": None,
            "countries": [],
            "assessment_count": 0,
            "previous_assessments": [],
            "gbif_species_key": row.species_key,
            "gbif_occurrence_count": row.occurrence_count,
        }
        for row in _unassessed(gbif_rows, assessed)
    ]


def matches_search(species: dict[str, Any], term: str) -> bool:
    """Case-insensitive substring match on scientific or common name."""
    scientific = (species.get("scientific_name") or "").lower()
    common = (species.get("common_name") or "").lower()
    return term in scientific or term in common

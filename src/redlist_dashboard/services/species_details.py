"""Species detail panel: IUCN taxon data joined with GBIF and iNaturalist.

One lookup fans out to the IUCN API (assessment history, common name,
criteria), then, when the scientific name resolves to a GBIF species, to a
set of GBIF occurrence counts: total, by record type, and the same split for
occurrences recorded since the last assessment. Recent iNaturalist
observations and a default iNaturalist photo round out the panel.

GBIF and iNaturalist failures are logged and leave their fields empty; IUCN
failures propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

import requests

from redlist_dashboard.datasources.gbif import (
    inat_observations,
    match_species,
    parse_recent_observations,
    record_type_counts,
    species_page_url,
)
from redlist_dashboard.datasources.gbif.breakdown import with_other
from redlist_dashboard.datasources.inaturalist import fetch_default_photo
from redlist_dashboard.datasources.iucn import fetch_criteria, fetch_taxon
from redlist_dashboard.reference.gbif import GEO_PARAMS
from redlist_dashboard.services.http import DEFAULT_MAX_WORKERS, fetch_parallel

logger = logging.getLogger(__name__)

RECENT_INAT_LIMIT = 5

RECORD_TYPE_KEYS = (
    "humanObservation",
    "preservedSpecimen",
    "machineObservation",
    "other",
    "iNaturalist",
)


def record_types(counts: dict[str, int]) -> dict[str, int]:
    """The record-type split as shown in the panel (no total)."""
    return {key: counts[key] for key in RECORD_TYPE_KEYS}


def sum_counts(*parts: dict[str, int]) -> dict[str, int]:
    """Add count dicts field-wise and re-derive ``other`` from the sums."""
    keys = ("total", "humanObservation", "preservedSpecimen", "machineObservation", "iNaturalist")
    summed = {k: sum(p.get(k, 0) for p in parts) for k in keys}
    return with_other(summed)


def since_assessment_scopes(
    taxon_key: int, year: int, month: int | None, current_year: int
) -> dict[str, dict[str, Any]]:
    """Query scopes covering everything recorded after an assessment.

    The rest of the assessment year (months after ``month``) and the full
    years after it are separate GBIF queries. Either may be absent: no month
    or December leaves no same-year window, and an assessment in the current
    year leaves no full years.
    """
    base = {"taxonKey": taxon_key, **GEO_PARAMS}
    scopes: dict[str, dict[str, Any]] = {}
    if month and month < 12:
        scopes["sameYear"] = {**base, "year": year, "month": f"{month + 1},12"}
    if year + 1 <= current_year:
        scopes["laterYears"] = {**base, "year": f"{year + 1},{current_year}"}
    return scopes


def gbif_details(
    taxon_key: int,
    scientific_name: str,
    *,
    assessment_year: int | None,
    assessment_month: int | None,
    current_year: int,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[str, Any]:
    """GBIF counts, recent iNaturalist observations and the default photo."""
    scopes = (
        since_assessment_scopes(taxon_key, assessment_year, assessment_month, current_year)
        if assessment_year
        else {}
    )
    calls: dict[str, Callable[[], Any]] = {
        "all": lambda: record_type_counts({"taxonKey": taxon_key, **GEO_PARAMS}, max_workers),
        "recent": lambda: inat_observations(
            taxon_key, limit=RECENT_INAT_LIMIT, geo_filtered=True
        ),
        "photo": lambda: fetch_default_photo(scientific_name),
    }
    for name, scope in scopes.items():
        calls[name] = lambda scope=scope: record_type_counts(scope, max_workers)

    results = fetch_parallel(calls, max_workers)
    counts = results["all"]
    recent = results["recent"] or {}

    details: dict[str, Any] = {
        "gbifOccurrences": counts["total"],
        "gbifByRecordType": record_types(counts),
        "recentInatObservations": parse_recent_observations(recent.get("results") or []),
        "inatTotalCount": counts["iNaturalist"],
        "inatDefaultImage": results["photo"],
    }
    if assessment_year:
        since = sum_counts(*(results[name] for name in scopes))
        details["gbifOccurrencesSinceAssessment"] = since["total"]
        details["gbifNewByRecordType"] = record_types(since)
    return details


def species_details(
    sis_id: int,
    *,
    api_key: str | None,
    assessment_id: int | None = None,
    scientific_name: str | None = None,
    assessment_year: int | None = None,
    assessment_month: int | None = None,
    current_year: int | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[str, Any]:
    """Everything the species panel shows for one Red List species.

    Args:
        sis_id: IUCN SIS taxon id.
        api_key: IUCN API token.
        assessment_id: Latest assessment, for its criteria string.
        scientific_name: Name to resolve against the GBIF backbone.
        assessment_year: Year of the latest assessment; enables the
            since-assessment counts.
        assessment_month: Month (1-12) of the latest assessment.
        current_year: Defaults to today's year.

    Raises:
        RedListAuthError: No IUCN token configured.
        requests.RequestException: The IUCN or GBIF name-match request failed.
    """
    year_now = current_year or date.today().year

    calls: dict[str, Callable[[], Any]] = {"taxon": lambda: fetch_taxon(sis_id, api_key)}
    if scientific_name:
        calls["match"] = lambda: match_species(scientific_name)
    if assessment_id:
        calls["criteria"] = lambda: fetch_criteria(assessment_id, api_key)
    first = fetch_parallel(calls, max_workers)

    taxon = first["taxon"]
    result: dict[str, Any] = {
        "sis_taxon_id": sis_id,
        "criteria": first.get("criteria"),
        "commonName": taxon.common_name,
        "gbifUrl": None,
        "gbifOccurrences": None,
        "gbifOccurrencesSinceAssessment": None,
        "gbifByRecordType": None,
        "gbifNewByRecordType": None,
        "recentInatObservations": [],
        "inatTotalCount": 0,
        "inatDefaultImage": None,
        "assessmentCount": taxon.assessment_count,
    }

    taxon_key = first.get("match")
    if scientific_name and taxon_key:
        result["gbifUrl"] = species_page_url(taxon_key)
        try:
            result.update(
                gbif_details(
                    taxon_key,
                    scientific_name,
                    assessment_year=assessment_year,
                    assessment_month=assessment_month,
                    current_year=year_now,
                    max_workers=max_workers,
                )
            )
        except requests.RequestException:
            logger.exception("GBIF lookups failed for species key %s", taxon_key)

    return result

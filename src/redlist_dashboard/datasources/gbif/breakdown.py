"""Occurrence counts split by basis of record, plus the iNaturalist share."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from redlist_dashboard.datasources.gbif.client import apply_filters, count_occurrences
from redlist_dashboard.datasources.gbif.occurrences import (
    inat_observations,
    parse_inat_observations,
)
from redlist_dashboard.reference.gbif import (
    GEO_PARAMS,
    HUMAN_OBSERVATION,
    INAT_DATASET_KEY,
    MACHINE_OBSERVATION,
    PRESERVED_SPECIMEN,
)
from redlist_dashboard.services.http import DEFAULT_MAX_WORKERS, fetch_parallel

RECENT_INAT_LIMIT = 10


def record_type_counts(
    base: dict[str, Any], max_workers: int = DEFAULT_MAX_WORKERS
) -> dict[str, int]:
    """Total, per-basis-of-record and iNaturalist counts for one query scope.

    ``other`` is whatever the three named record types leave of the total,
    clamped at zero.
    """

    def count(extra: dict[str, Any]) -> Callable[[], int]:
        return lambda: count_occurrences({**base, **extra})

    counts = fetch_parallel(
        {
            "total": count({}),
            "humanObservation": count({"basisOfRecord": HUMAN_OBSERVATION}),
            "preservedSpecimen": count({"basisOfRecord": PRESERVED_SPECIMEN}),
            "machineObservation": count({"basisOfRecord": MACHINE_OBSERVATION}),
            "iNaturalist": count({"datasetKey": INAT_DATASET_KEY}),
        },
        max_workers,
    )
    return with_other(counts)


def with_other(counts: dict[str, int]) -> dict[str, int]:
    """Derive ``other`` from total minus the named record types."""
    named = counts["humanObservation"] + counts["preservedSpecimen"] + counts["machineObservation"]
    return {**counts, "other": max(0, counts["total"] - named)}


def record_breakdown(
    species_key: int,
    *,
    country: str | None = None,
    max_uncertainty: str | None = None,
    data_source: str | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[str, Any]:
    """Breakdown panel for one species with the latest iNaturalist observations."""
    base = apply_filters(
        {"taxonKey": species_key, **GEO_PARAMS},
        country=country,
        max_uncertainty=max_uncertainty,
        data_source=data_source,
    )
    results = fetch_parallel(
        {
            "counts": lambda: record_type_counts(base, max_workers),
            "recent": lambda: inat_observations(
                species_key, country=country, limit=RECENT_INAT_LIMIT
            ),
        },
        2,
    )
    counts = results["counts"]
    recent = results["recent"] or {}
    return {
        "humanObservation": counts["humanObservation"],
        "preservedSpecimen": counts["preservedSpecimen"],
        "machineObservation": counts["machineObservation"],
        "other": counts["other"],
        "iNaturalist": counts["iNaturalist"],
        "recentInatObservations": parse_inat_observations(recent.get("results") or []),
        "inatTotalCount": counts["iNaturalist"],
        "total": counts["total"],
    }

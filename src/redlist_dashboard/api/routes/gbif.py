"""GBIF coverage summary across taxa."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from redlist_dashboard.analysis.occurrence_stats import taxon_occurrence_stats
from redlist_dashboard.api.deps import get_store
from redlist_dashboard.reference.taxa import summary_taxa
from redlist_dashboard.schemas import Distribution, GbifTaxonSummary
from redlist_dashboard.store import SnapshotStore

router = APIRouter()


@router.get("/taxa")
def get_gbif_taxa(store: SnapshotStore = Depends(get_store)) -> dict[str, Any]:
    """Occurrence statistics per taxon from its GBIF species CSV, in registry order."""
    summaries = []
    for taxon in summary_taxa():
        counts = [row.occurrence_count for row in store.gbif_species(taxon.id)]
        stats = taxon_occurrence_stats(counts)
        summaries.append(
            GbifTaxonSummary(
                id=taxon.id,
                name=taxon.name,
                color=taxon.color,
                estimated_described=taxon.estimated_described,
                estimated_source=taxon.estimated_source,
                estimated_source_url=taxon.estimated_source_url,
                gbif_species_count=stats["speciesCount"],
                gbif_total_occurrences=stats["totalOccurrences"],
                gbif_median=stats["median"],
                gbif_mean=stats["mean"],
                gbif_data_available=bool(counts),
                distribution=Distribution(**stats["distribution"]),
            ).to_json_dict()
        )

    return {
        "taxa": summaries,
        "totalTaxa": len(summaries),
        "availableTaxa": sum(1 for s in summaries if s["gbifDataAvailable"]),
    }

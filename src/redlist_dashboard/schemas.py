"""
Domain models for the dashboard.

Pydantic models for the on-disk Red List snapshots and for the summary
payloads the API returns. Python fields are snake_case; JSON keys keep the
camelCase the UI consumes (``by_alias`` serialization).

Species records themselves stay plain dicts: they are IUCN export rows passed
through field-for-field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# =============================================================================
# Red List snapshots
# =============================================================================


class SnapshotMetadata(CamelModel):
    """Header of a ``redlist-*.json`` export."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    total_species: int = 0
    fetched_at: str = ""
    pages_processed: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    taxon_id: str | None = None


class RedListSnapshot(BaseModel):
    """A per-class (or merged) Red List export: species rows plus metadata."""

    species: list[dict[str, Any]] = Field(default_factory=list)
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)

    def to_json_dict(self) -> dict[str, Any]:
        return {"species": self.species, "metadata": self.metadata.to_json_dict()}


# =============================================================================
# API payloads
# =============================================================================


class CategoryStat(CamelModel):
    """Species count for one IUCN category."""

    code: str
    name: str
    count: int
    color: str


class RedListTaxonSummary(CamelModel):
    """Assessment coverage of one taxon."""

    id: str
    name: str
    color: str
    estimated_described: int
    estimated_source: str
    estimated_source_url: str | None = None
    available: bool
    total_assessed: int = 0
    percent_assessed: float = 0
    outdated: int = 0
    percent_outdated: float = 0
    last_updated: str | None = None
    by_category: dict[str, int] = Field(default_factory=dict)


class Distribution(CamelModel):
    """Cumulative species counts by occurrence-count ceiling."""

    lte1: int = 0
    lte10: int = 0
    lte100: int = 0
    lte1000: int = 0
    lte10000: int = 0


class GbifTaxonSummary(CamelModel):
    """Occurrence coverage of one taxon from its GBIF species CSV."""

    id: str
    name: str
    color: str
    estimated_described: int
    estimated_source: str
    estimated_source_url: str | None = None
    gbif_species_count: int
    gbif_total_occurrences: int
    gbif_median: int
    gbif_mean: int
    gbif_data_available: bool
    distribution: Distribution


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

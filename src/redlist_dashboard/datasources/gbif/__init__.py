"""GBIF occurrence and species data source.

Public API:
  - client: URLs, shared filters, ``count_occurrences``
  - occurrences: occurrence search, speciesKey facets, iNaturalist observations
  - species: name match, search, species records, vernacular names
  - breakdown: counts by basis of record plus iNaturalist

API docs: https://techdocs.gbif.org/en/openapi/
"""

from redlist_dashboard.datasources.gbif.breakdown import record_breakdown, record_type_counts
from redlist_dashboard.datasources.gbif.client import (
    API_BASE,
    apply_filters,
    count_occurrences,
    species_page_url,
)
from redlist_dashboard.datasources.gbif.occurrences import (
    inat_observations,
    inat_photos,
    parse_inat_observation,
    parse_inat_observations,
    parse_recent_observations,
    search_occurrences,
    species_key_facets,
)
from redlist_dashboard.datasources.gbif.species import (
    enrich_search_result,
    match_species,
    occurrence_count,
    search_species,
    species_name,
)

__all__ = [
    "API_BASE",
    "apply_filters",
    "count_occurrences",
    "enrich_search_result",
    "inat_observations",
    "inat_photos",
    "match_species",
    "occurrence_count",
    "parse_inat_observation",
    "parse_inat_observations",
    "parse_recent_observations",
    "record_breakdown",
    "record_type_counts",
    "search_occurrences",
    "search_species",
    "species_key_facets",
    "species_name",
    "species_page_url",
]

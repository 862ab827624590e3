"""IUCN Red List API v4 data source.

Public API:
  - client: ``API_BASE`` and the bearer-token ``fetch``
  - taxon: TaxonDetails, fetch_taxon, preferred_common_name
  - assessment: normalize_assessment, fetch_assessment, fetch_criteria
"""

from redlist_dashboard.datasources.iucn.assessment import (
    fetch_assessment,
    fetch_criteria,
    localized_text,
    normalize_assessment,
)
from redlist_dashboard.datasources.iucn.client import API_BASE
from redlist_dashboard.datasources.iucn.taxon import (
    TaxonDetails,
    fetch_taxon,
    preferred_common_name,
)

__all__ = [
    "API_BASE",
    "TaxonDetails",
    "fetch_assessment",
    "fetch_criteria",
    "fetch_taxon",
    "localized_text",
    "normalize_assessment",
    "preferred_common_name",
]

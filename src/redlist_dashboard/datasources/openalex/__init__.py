"""OpenAlex scholarly works data source.

Public API:
  - name_variants: Latin gender variants of a binomial
  - works: WorksPage, search_works, reconstruct_abstract
"""

from redlist_dashboard.datasources.openalex.name_variants import name_variants
from redlist_dashboard.datasources.openalex.works import (
    WorksPage,
    format_work,
    reconstruct_abstract,
    search_works,
)

__all__ = [
    "WorksPage",
    "format_work",
    "name_variants",
    "reconstruct_abstract",
    "search_works",
]

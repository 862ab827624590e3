"""iNaturalist taxa API (species photos).

Observations themselves are read from GBIF's copy of the iNaturalist
research-grade dataset; see ``datasources.gbif.occurrences``.
"""

from redlist_dashboard.datasources.inaturalist.taxa import fetch_default_photo, parse_default_photo

__all__ = ["fetch_default_photo", "parse_default_photo"]

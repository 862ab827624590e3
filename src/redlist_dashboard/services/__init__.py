"""
Composite lookups built on top of the datasources.

- http.py            - shared requests session (retry, backoff, timeout)
- species_details.py - IUCN + GBIF + iNaturalist detail panel for one species
- species_listing.py - live GBIF facet query behind the filtered species table
- literature.py      - OpenAlex papers before/after an assessment year
"""

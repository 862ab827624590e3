"""Pure reshaping of snapshots and API payloads into dashboard responses.

Dependency rule: analysis/ imports store records and reference data only.
It never fetches data, touches disk or knows about HTTP.

Modules:
  - occurrence_stats: distributions, median/mean, chart bins
  - redlist_summary: assessed/outdated coverage, category stats
  - not_evaluated: GBIF species missing from the Red List (NE)
  - species_table: filter/sort/paginate GBIF species CSV rows
  - geojson: occurrence results -> FeatureCollection + bbox

Adding an analysis module
-------------------------
1. Create ``analysis/{name}.py`` with pure functions returning dicts or models.
2. Call it from a route in ``api/routes/`` or a flow in ``flows/``.
3. Add tests in ``tests/test_{name}.py``.
"""

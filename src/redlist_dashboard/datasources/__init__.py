"""External data source integrations.

Each subdirectory is one upstream API with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, auth
    └── {feature}.py      # Fetch + parse functions (one per endpoint/concept)

Sources: ``gbif`` (occurrences, species), ``iucn`` (Red List v4, needs a
token), ``inaturalist`` (species photos), ``openalex`` (literature).

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with the files above.

2. Write fetch functions that return dicts or dataclasses::

       from redlist_dashboard.services.http import session

       def fetch_something(key) -> dict[str, Any]:
           resp = session.get(API_URL, params={...})
           resp.raise_for_status()
           return resp.json()

   Keep parsing in separate pure functions so tests can feed fixtures.

3. Re-export public API in ``__init__.py`` with ``__all__``.

4. Call it from a service in ``services/`` or a route in ``api/routes/``.

5. Add tests in ``tests/test_{name}.py``.
"""

"""Red List Dashboard - IUCN Red List and GBIF coverage for a map/chart UI.

Architecture::

    reference/     Static taxon registry, IUCN categories, GBIF dataset keys
    store.py       Snapshot store: per-class Red List JSON + GBIF CSV, merged
                   into combined taxa and reloaded from disk on a TTL
    cache.py       Timestamp-gated in-memory cache used by store and routes
    datasources/   External APIs (GBIF, IUCN Red List, iNaturalist, OpenAlex)
    analysis/      Pure reshaping (stats, summaries, NE species, GeoJSON)
    services/      HTTP session with retry, composite multi-API lookups
    api/           FastAPI app and route handlers
    flows/         Prefect flow that writes the offline taxa summary

Data flow: snapshots/datasources → store/cache → analysis → api (JSON)
"""

__version__ = "0.1.0"

from redlist_dashboard.config import Settings

__all__ = ["Settings", "__version__"]

"""Species name search against the GBIF backbone."""

from __future__ import annotations

from typing import Any

import requests
from fastapi import APIRouter, Depends

from redlist_dashboard.api.deps import get_settings_dep
from redlist_dashboard.config import Settings
from redlist_dashboard.datasources.gbif import enrich_search_result, search_species
from redlist_dashboard.errors import UpstreamError
from redlist_dashboard.reference.taxa import get_taxon_config
from redlist_dashboard.services.http import fetch_parallel

router = APIRouter()

MIN_QUERY_LENGTH = 2


@router.get("/search")
def search(
    q: str | None = None,
    taxon: str | None = None,
    settings: Settings = Depends(get_settings_dep),
) -> dict[str, Any]:
    """Up to 10 species matching ``q``, each with name, image and occurrence count."""
    if not q or len(q) < MIN_QUERY_LENGTH:
        return {"results": []}

    try:
        results = search_species(q, get_taxon_config(taxon) if taxon else None)
        enriched = fetch_parallel(
            {str(i): (lambda r=r: enrich_search_result(r)) for i, r in enumerate(results)},
            settings.max_workers,
        )
    except requests.RequestException as exc:
        raise UpstreamError("Search failed") from exc
    return {"results": [enriched[str(i)] for i in range(len(results))]}

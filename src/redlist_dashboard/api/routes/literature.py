"""Literature published before or after a species' last assessment."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from redlist_dashboard.api.deps import ResponseCaches, get_caches, get_settings_dep, parse_int
from redlist_dashboard.config import Settings
from redlist_dashboard.errors import InvalidParameterError
from redlist_dashboard.services.literature import MAX_LIMIT, literature_around_assessment

router = APIRouter()


@router.get("/literature")
def get_literature(
    scientific_name: str | None = Query(None, alias="scientificName"),
    assessment_year: str | None = Query(None, alias="assessmentYear"),
    limit: str | None = None,
    mode: str = "after",
    settings: Settings = Depends(get_settings_dep),
    caches: ResponseCaches = Depends(get_caches),
) -> dict[str, Any]:
    if not scientific_name:
        raise InvalidParameterError("Query parameter 'scientificName' is required")
    if not assessment_year:
        raise InvalidParameterError("Query parameter 'assessmentYear' is required")
    year = parse_int(assessment_year, "assessmentYear") or 0
    size = min(parse_int(limit, "limit", 5) or 5, MAX_LIMIT)
    if mode not in ("after", "before"):
        mode = "after"

    cache_key = f"{scientific_name.lower()}-{year}-{size}-{mode}"
    cached = caches.literature.get(cache_key)
    if cached is not None:
        return {**cached, "cached": True}

    result = literature_around_assessment(
        scientific_name,
        year,
        mode=mode,  # type: ignore[arg-type]
        limit=size,
        mailto=settings.openalex_mailto,
    )
    caches.literature.set(cache_key, result)
    return result

"""Assessment lookups and normalization of the v4 assessment document.

v4 wraps most human-readable text as ``{"en": "..."}``; the dashboard wants
plain strings, and narrative sections live under ``documentation``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from redlist_dashboard.datasources.iucn.client import fetch
from redlist_dashboard.errors import DashboardError

SUPPLEMENTARY_FIELDS = (
    "estimated_extent_of_occurence",
    "estimated_area_of_occupancy",
    "population_size",
    "number_of_locations",
    "no_of_subpopulations",
    "generational_length",
    "upper_elevation_limit",
    "lower_elevation_limit",
    "upper_depth_limit",
    "lower_depth_limit",
    "movement_patterns",
    "congregatory",
    "population_severely_fragmented",
    "population_continuing_decline",
    "continuing_decline_in_extent_of_occurence",
    "continuing_decline_in_area_of_occupancy",
    "continuing_decline_in_number_of_locations",
)


# =============================================================================
# Normalization
# =============================================================================


def localized_text(value: Any) -> str | None:
    """Flatten ``{"en": "text"}`` (or a plain string) to a string."""
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("en") or None
    return None


def _coded(value: dict[str, Any] | None) -> dict[str, Any] | None:
    if not value:
        return None
    return {"code": value.get("code"), "description": localized_text(value.get("description"))}


def _habitat(h: dict[str, Any]) -> dict[str, Any]:
    code = h.get("code") or ""
    return {
        "code": code,
        "name": localized_text(h.get("description")) or code,
        "suitability": h.get("suitability") or None,
        "major_importance": h.get("majorImportance") == "Yes",
    }


def _titled(item: dict[str, Any]) -> str:
    return (
        localized_text(item.get("title"))
        or localized_text(item.get("description"))
        or item.get("code")
        or ""
    )


def _threat(t: dict[str, Any]) -> dict[str, Any]:
    stresses = t.get("stresses")
    return {
        "code": t.get("code") or "",
        "name": _titled(t),
        "timing": t.get("timing") or None,
        "scope": t.get("scope") or None,
        "severity": t.get("severity") or None,
        "score": t.get("score") or None,
        "stresses": (
            [
                name
                for s in stresses
                if (name := localized_text(s.get("description")) or s.get("code") or "")
            ]
            if isinstance(stresses, list)
            else None
        ),
    }


def _described(item: dict[str, Any]) -> dict[str, Any]:
    code = item.get("code") or ""
    return {"code": code, "description": localized_text(item.get("description")) or code}


def _map_list(
    value: Any, fn: Callable[[dict[str, Any]], dict[str, Any]]
) -> list[dict[str, Any]] | None:
    return [fn(v) for v in value] if isinstance(value, list) else None


def normalize_assessment(data: dict[str, Any]) -> dict[str, Any]:
    """Reshape a raw v4 assessment into the flat record the UI renders."""
    doc = data.get("documentation") or {}
    supplementary = data.get("supplementary_info")

    return {
        "assessment_id": data.get("assessment_id"),
        "sis_taxon_id": data.get("sis_taxon_id"),
        "url": data.get("url"),
        "red_list_category": _coded(data.get("red_list_category")),
        "criteria": data.get("criteria") or None,
        "assessment_date": data.get("assessment_date") or None,
        "year_published": data.get("year_published") or None,
        "possibly_extinct": bool(data.get("possibly_extinct")),
        "possibly_extinct_in_the_wild": bool(data.get("possibly_extinct_in_the_wild")),
        "rationale": doc.get("rationale") or None,
        "population": doc.get("population") or None,
        "habitat": doc.get("habitats") or None,
        "threats": doc.get("threats") or None,
        "conservation_actions": doc.get("measures") or None,
        "use_trade": doc.get("use_trade") or None,
        "range": doc.get("range") or None,
        "population_trend": _coded(data.get("population_trend")),
        "habitats": _map_list(data.get("habitats"), _habitat),
        "threat_classification": _map_list(data.get("threats"), _threat),
        "conservation_actions_classification": _map_list(
            data.get("conservation_actions"),
            lambda c: {"code": c.get("code") or "", "name": _titled(c)},
        ),
        "systems": _map_list(data.get("systems"), _described),
        "scopes": _map_list(data.get("scopes"), _described),
        "supplementary_info": (
            {field: supplementary.get(field) for field in SUPPLEMENTARY_FIELDS}
            if supplementary
            else None
        ),
    }


# =============================================================================
# API Fetching
# =============================================================================


def fetch_assessment_raw(assessment_id: int, api_key: str | None) -> dict[str, Any] | None:
    """Raw assessment document, or None on an error status."""
    resp = fetch(f"assessment/{assessment_id}", api_key)
    if not resp.ok:
        return None
    return resp.json()


def fetch_assessment(assessment_id: int, api_key: str | None) -> dict[str, Any]:
    """Normalized assessment.

    Raises:
        DashboardError: 404 as "Assessment not found", any other error status
            passed through as "IUCN API error: {status}".
    """
    resp = fetch(f"assessment/{assessment_id}", api_key)
    if resp.status_code == 404:
        raise DashboardError("Assessment not found", 404)
    if not resp.ok:
        raise DashboardError(f"IUCN API error: {resp.status_code}", resp.status_code)
    return normalize_assessment(resp.json())


def fetch_criteria(assessment_id: int, api_key: str | None) -> str | None:
    data = fetch_assessment_raw(assessment_id, api_key)
    return data.get("criteria") if data else None

"""Taxon lookups by SIS id: assessment history and preferred common name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from redlist_dashboard.datasources.iucn.client import fetch


@dataclass
class TaxonDetails:
    """The parts of ``/taxa/sis/{id}`` the species panel shows."""

    assessment_count: int = 1
    common_name: str | None = None


def preferred_common_name(names: list[dict[str, Any]]) -> str | None:
    """English name if any, else the one flagged ``main``, else the first."""
    if not names:
        return None
    english = next((n for n in names if n.get("language") in ("eng", "en")), None)
    main = next((n for n in names if n.get("main")), None)
    for candidate in (english, main, names[0]):
        if candidate and candidate.get("name"):
            return candidate["name"]
    return None


def parse_taxon(data: dict[str, Any]) -> TaxonDetails:
    assessments = data.get("assessments") or []
    names = (data.get("taxon") or {}).get("common_names") or []
    return TaxonDetails(
        assessment_count=len(assessments) or 1,
        common_name=preferred_common_name(names),
    )


def fetch_taxon(sis_id: int, api_key: str | None) -> TaxonDetails:
    """Taxon details; defaults (1 assessment, no name) on an error status."""
    resp = fetch(f"taxa/sis/{sis_id}", api_key)
    if not resp.ok:
        return TaxonDetails()
    return parse_taxon(resp.json())

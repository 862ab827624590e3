"""Default species photo from the iNaturalist taxa endpoint."""

from __future__ import annotations

from typing import Any

from redlist_dashboard.services.http import session

TAXA_URL = "https://api.inaturalist.org/v1/taxa"


def parse_default_photo(data: dict[str, Any]) -> dict[str, str | None] | None:
    results = data.get("results") or []
    photo = results[0].get("default_photo") if results else None
    if not photo:
        return None
    return {
        "squareUrl": photo.get("square_url") or photo.get("url") or None,
        "mediumUrl": photo.get("medium_url") or photo.get("url") or None,
    }


def fetch_default_photo(scientific_name: str) -> dict[str, str | None] | None:
    """Square and medium photo URLs of the best species match, or None."""
    resp = session.get(
        TAXA_URL, params={"q": scientific_name, "rank": "species", "per_page": 1}
    )
    if not resp.ok:
        return None
    return parse_default_photo(resp.json())

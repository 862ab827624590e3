"""Shared fixtures: snapshot files on disk and a fake upstream HTTP router."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from redlist_dashboard.services.http import session
from redlist_dashboard.store import SnapshotStore

# =============================================================================
# Snapshot data
# =============================================================================

MAMMALS: list[dict[str, Any]] = [
    {
        "sis_taxon_id": 1001,
        "assessment_id": 5001,
        "scientific_name": "Panthera leo",
        "common_name": "Lion",
        "family": "FELIDAE",
        "category": "VU",
        "assessment_date": "2023-06-01",
        "year_published": "2023",
        "url": "https://www.iucnredlist.org/species/15951/5001",
    },
    {
        "sis_taxon_id": 1002,
        "assessment_id": 5002,
        "scientific_name": "Lynx pardinus",
        "common_name": "Iberian Lynx",
        "family": "FELIDAE",
        "category": "EN",
        "assessment_date": "2008-03-15",
        "year_published": "2008",
        "url": "https://www.iucnredlist.org/species/12520/5002",
    },
]

BIRDS: list[dict[str, Any]] = [
    {
        "sis_taxon_id": 2001,
        "assessment_id": 6001,
        "scientific_name": "Aquila chrysaetos",
        "common_name": "Golden Eagle",
        "family": "ACCIPITRIDAE",
        "category": "LC",
        "assessment_date": "2021-08-09",
        "year_published": "2021",
        "url": "https://www.iucnredlist.org/species/22696060/6001",
    },
]

PLANTS: list[dict[str, Any]] = [
    {
        "sis_taxon_id": 3001,
        "assessment_id": 7001,
        "scientific_name": "Quercus robur",
        "common_name": "English Oak",
        "family": "FAGACEAE",
        "category": "LC",
        "assessment_date": "2017-11-20",
        "year_published": "2017",
    },
    {
        "sis_taxon_id": 3002,
        "assessment_id": 7002,
        "scientific_name": "Abies nebrodensis",
        "common_name": "Sicilian Fir",
        "family": "PINACEAE",
        "category": "CR",
        "assessment_date": "2010-05-01",
        "year_published": "2010",
    },
    {
        "sis_taxon_id": 3003,
        "assessment_id": 7003,
        "scientific_name": "Taxus baccata",
        "common_name": "Yew",
        "family": "TAXACEAE",
        "category": "LR/lc",
        "assessment_date": "1998-01-01",
        "year_published": "1998",
    },
]

PLANTS_CSV = """species_key,occurrence_count,scientific_name,common_name
2878688,150000,Quercus robur,English Oak
5284884,40000,Bellis perennis,Daisy
2685484,5000,Taxus baccata,Yew
7303245,12,Rare orchid,
9000001,1,Abies nebrodensis,Sicilian Fir
"""


def write_snapshot(
    base: Path,
    file_name: str,
    species: list[dict[str, Any]],
    fetched_at: str = "2025-01-01T00:00:00Z",
) -> Path:
    """Write a Red List export in the on-disk format."""
    by_category: dict[str, int] = {}
    for s in species:
        by_category[s["category"]] = by_category.get(s["category"], 0) + 1
    payload = {
        "species": species,
        "metadata": {
            "totalSpecies": len(species),
            "fetchedAt": fetched_at,
            "pagesProcessed": 1,
            "byCategory": by_category,
        },
    }
    path = base / file_name
    path.write_text(json.dumps(payload))
    return path


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory with mammal, bird and plant exports plus the plant GBIF CSV."""
    write_snapshot(tmp_path, "redlist-mammalia.json", MAMMALS, "2025-01-10T00:00:00Z")
    write_snapshot(tmp_path, "redlist-aves.json", BIRDS, "2025-02-20T00:00:00Z")
    write_snapshot(tmp_path, "redlist-plantae.json", PLANTS, "2024-12-01T00:00:00Z")
    (tmp_path / "gbif-plantae.csv").write_text(PLANTS_CSV)
    return tmp_path


@pytest.fixture
def store(data_dir: Path) -> SnapshotStore:
    return SnapshotStore(data_dir)


# =============================================================================
# Fake upstream APIs
# =============================================================================


def make_response(payload: Any = None, status: int = 200, text: str | None = None) -> MagicMock:
    """A stand-in for ``requests.Response``."""
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.json.return_value = payload
    resp.text = text if text is not None else json.dumps(payload)
    if not resp.ok:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return resp


class FakeUpstream:
    """Routes ``session.get`` calls to canned responses.

    Rules are checked in registration order; the first whose URL fragment
    occurs in the URL and whose params are a superset of ``params`` wins.
    Unmatched calls get a 404.
    """

    def __init__(self) -> None:
        self.rules: list[tuple[str, dict[str, Any], MagicMock]] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def add(self, url_part: str, response: MagicMock, **params: Any) -> FakeUpstream:
        self.rules.append((url_part, params, response))
        return self

    def json(self, url_part: str, payload: Any, status: int = 200, **params: Any) -> FakeUpstream:
        return self.add(url_part, make_response(payload, status), **params)

    def __call__(self, url: str, params: dict[str, Any] | None = None, **_kwargs: Any) -> MagicMock:
        params = dict(params or {})
        self.calls.append((url, params))
        for url_part, expected, response in self.rules:
            if url_part in url and all(params.get(k) == v for k, v in expected.items()):
                return response
        return make_response({"error": "not found"}, status=404)

    def calls_to(self, url_part: str) -> list[dict[str, Any]]:
        return [p for u, p in self.calls if url_part in u]


@pytest.fixture
def upstream() -> Iterator[FakeUpstream]:
    """Patch the shared HTTP session so every upstream call hits a FakeUpstream."""
    fake = FakeUpstream()
    with patch.object(session, "get", side_effect=fake):
        yield fake

"""OpenAlex works search around a publication year.

API docs: https://docs.openalex.org/api-entities/works
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from redlist_dashboard.datasources.openalex.name_variants import name_variants
from redlist_dashboard.services.http import session

logger = logging.getLogger(__name__)

WORKS_URL = "https://api.openalex.org/works"
DOI_PREFIX = "https://doi.org/"
ABSTRACT_MAX_WORDS = 100
MAX_AUTHORS = 3


@dataclass
class WorksPage:
    """Total hit count plus the formatted top results."""

    count: int = 0
    results: list[dict[str, Any]] = field(default_factory=list)


# =============================================================================
# Parsing
# =============================================================================


def reconstruct_abstract(
    inverted_index: dict[str, list[int]] | None, max_words: int = ABSTRACT_MAX_WORDS
) -> str | None:
    """Rebuild abstract text from OpenAlex's word -> positions index.

    Truncated to ``max_words`` words, with ``...`` appended when cut.
    """
    if not inverted_index:
        return None
    words = sorted(
        (pos, word) for word, positions in inverted_index.items() for pos in positions
    )
    text = " ".join(word for _, word in words[:max_words])
    return text + ("..." if len(words) > max_words else "")


def format_work(work: dict[str, Any]) -> dict[str, Any]:
    doi = work.get("doi")
    source = ((work.get("primary_location") or {}).get("source") or {}).get("display_name")
    authors = [
        a["author"]["display_name"]
        for a in (work.get("authorships") or [])[:MAX_AUTHORS]
        if (a.get("author") or {}).get("display_name")
    ]
    return {
        "title": work.get("title"),
        "url": DOI_PREFIX + doi.removeprefix(DOI_PREFIX) if doi else work.get("id"),
        "doi": doi,
        "year": work.get("publication_year"),
        "date": work.get("publication_date"),
        "citations": work.get("cited_by_count"),
        "source": source or "Unknown",
        "sourceType": "academic",
        "abstract": reconstruct_abstract(work.get("abstract_inverted_index")),
        "authors": ", ".join(authors) or None,
    }


# =============================================================================
# API Fetching
# =============================================================================


def works_filter(scientific_name: str, year: int, direction: Literal["after", "before"]) -> str:
    """``default.search`` over all name variants, bounded by publication year.

    ``after`` is strictly after ``year``; ``before`` includes ``year`` itself.
    Datasets (e.g. GBIF downloads) are excluded.
    """
    terms = "|".join(name_variants(scientific_name))
    bound = f">{year}" if direction == "after" else f"<{year + 1}"
    return f"default.search:{terms},publication_year:{bound},type:!dataset"


def search_works(
    scientific_name: str,
    year: int,
    direction: Literal["after", "before"],
    *,
    limit: int = 5,
    mailto: str | None = None,
) -> WorksPage:
    """Papers after (newest first) or up to (most cited first) ``year``.

    An error status is logged and yields an empty page.
    """
    params: dict[str, Any] = {
        "filter": works_filter(scientific_name, year, direction),
        "sort": "publication_date:desc" if direction == "after" else "cited_by_count:desc",
        # per_page must be at least 1 even for count-only requests
        "per_page": max(1, limit),
    }
    if mailto:
        params["mailto"] = mailto

    resp = session.get(WORKS_URL, params=params)
    if not resp.ok:
        logger.error("OpenAlex API error: %s", resp.status_code)
        return WorksPage()

    data = resp.json()
    return WorksPage(
        count=(data.get("meta") or {}).get("count") or 0,
        results=[format_work(w) for w in data.get("results") or []],
    )

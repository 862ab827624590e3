"""Filtering, sorting and paging of GBIF species tables."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from redlist_dashboard.analysis.occurrence_stats import banded_distribution
from redlist_dashboard.reference.categories import NOT_EVALUATED
from redlist_dashboard.schemas import Pagination
from redlist_dashboard.store import GbifSpeciesCount

T = TypeVar("T")

MAX_PAGE_SIZE = 1000
DEFAULT_MAX_COUNT = 999_999_999


def matches_redlist_filter(category: str | None, redlist_filter: str | None) -> bool:
    """``None``/``"all"`` keep everything; ``"NE"`` keeps unassessed species."""
    if not redlist_filter or redlist_filter == "all":
        return True
    if redlist_filter == NOT_EVALUATED:
        return not category
    return category == redlist_filter


def paginate(items: Sequence[T], page: int, limit: int) -> tuple[list[T], Pagination]:
    """Slice one 1-based page out of ``items``."""
    start = max(page - 1, 0) * limit
    pagination = Pagination(
        page=page,
        limit=limit,
        total=len(items),
        total_pages=math.ceil(len(items) / limit) if limit > 0 else 0,
    )
    return list(items[start : start + limit]), pagination


def sort_by_count(items: Sequence[T], key: Callable[[T], int], order: str) -> list[T]:
    return sorted(items, key=key, reverse=order != "asc")


def species_table(
    rows: Sequence[GbifSpeciesCount],
    *,
    page: int = 1,
    limit: int = 100,
    min_count: int = 0,
    max_count: int = DEFAULT_MAX_COUNT,
    sort: str = "desc",
    redlist_filter: str | None = None,
) -> dict[str, Any]:
    """One page of a taxon's GBIF species CSV with summary stats.

    The CSV is written in descending occurrence order, so only ``asc``
    requires re-sorting.
    """
    filtered = [
        r
        for r in rows
        if min_count <= r.occurrence_count <= max_count
        and matches_redlist_filter(r.redlist_category, redlist_filter)
    ]
    if sort == "asc":
        filtered = sort_by_count(filtered, lambda r: r.occurrence_count, "asc")

    page_rows, pagination = paginate(filtered, page, limit)

    counts = [r.occurrence_count for r in rows]
    assessed = [r for r in rows if r.redlist_category]
    not_assessed = [r for r in rows if not r.redlist_category]

    return {
        "data": [r.to_dict() for r in page_rows],
        "pagination": pagination.to_json_dict(),
        "stats": {
            "total": len(rows),
            "filtered": len(filtered),
            "totalOccurrences": sum(counts),
            # middle row in file order, so the lower median for an even count
            "median": rows[len(rows) // 2].occurrence_count if rows else 0,
            "distribution": banded_distribution(counts),
            "redlist": {
                "assessed": len(assessed),
                "notAssessed": len(not_assessed),
                "assessedOccurrences": sum(r.occurrence_count for r in assessed),
                "notAssessedOccurrences": sum(r.occurrence_count for r in not_assessed),
            },
        },
    }

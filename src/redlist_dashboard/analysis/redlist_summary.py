"""Red List coverage summaries: assessed share, outdated assessments, categories."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from redlist_dashboard.analysis.occurrence_stats import round_half_up
from redlist_dashboard.reference.categories import (
    CATEGORY_COLORS,
    CATEGORY_NAMES,
    CATEGORY_ORDER,
    NOT_EVALUATED,
    normalize_category,
)
from redlist_dashboard.reference.taxa import TaxonConfig
from redlist_dashboard.schemas import CategoryStat, RedListSnapshot, RedListTaxonSummary

OUTDATED_AFTER_YEARS = 10


def assessment_year(value: str | None) -> int | None:
    """Year of an IUCN ``assessment_date`` (``2019-05-01`` or a full ISO timestamp)."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).year
    except ValueError:
        pass
    head = value[:4]
    return int(head) if head.isdigit() else None


def count_outdated(
    species: Iterable[dict[str, Any]],
    current_year: int,
    max_age_years: int = OUTDATED_AFTER_YEARS,
) -> int:
    """Species whose latest assessment is more than ``max_age_years`` old."""
    outdated = 0
    for s in species:
        year = assessment_year(s.get("assessment_date"))
        if year is not None and current_year - year > max_age_years:
            outdated += 1
    return outdated


def merge_categories(by_category: dict[str, int]) -> dict[str, int]:
    """Fold legacy Lower Risk codes into NT/LC."""
    merged: dict[str, int] = {}
    for code, count in by_category.items():
        key = normalize_category(code)
        merged[key] = merged.get(key, 0) + count
    return merged


def summarize_taxon(
    taxon: TaxonConfig,
    snapshot: RedListSnapshot | None,
    *,
    current_year: int | None = None,
    max_age_years: int = OUTDATED_AFTER_YEARS,
) -> RedListTaxonSummary:
    """Assessment coverage for one taxon; ``available=False`` without a snapshot."""
    base = {
        "id": taxon.id,
        "name": taxon.name,
        "color": taxon.color,
        "estimated_described": taxon.estimated_described,
        "estimated_source": taxon.estimated_source,
        "estimated_source_url": taxon.estimated_source_url,
    }
    if snapshot is None:
        return RedListTaxonSummary(**base, available=False)

    year = current_year if current_year is not None else date.today().year
    total = snapshot.metadata.total_species
    outdated = count_outdated(snapshot.species, year, max_age_years)

    described = taxon.estimated_described
    percent_assessed = total / described * 100 if described > 0 else 0
    percent_outdated = outdated / total * 100 if total > 0 else 0

    return RedListTaxonSummary(
        **base,
        available=True,
        total_assessed=total,
        percent_assessed=round_half_up(percent_assessed, 1),
        outdated=outdated,
        percent_outdated=round_half_up(percent_outdated, 1),
        last_updated=snapshot.metadata.fetched_at,
        by_category=merge_categories(snapshot.metadata.by_category),
    )


def category_stats(by_category: dict[str, int], ne_count: int) -> list[CategoryStat]:
    """Counts for every IUCN category in display order, NE from GBIF."""
    counts = {**by_category, NOT_EVALUATED: ne_count}
    return [
        CategoryStat(
            code=code,
            name=CATEGORY_NAMES[code],
            count=counts.get(code, 0),
            color=CATEGORY_COLORS[code],
        )
        for code in CATEGORY_ORDER
    ]

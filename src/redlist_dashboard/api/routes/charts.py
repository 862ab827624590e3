"""Occurrence-count charts for the plant species CSV."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from redlist_dashboard.analysis.occurrence_stats import category_pie_chart, data_deficient_histogram
from redlist_dashboard.api.deps import get_settings_dep, get_store
from redlist_dashboard.config import Settings
from redlist_dashboard.store import SnapshotStore

router = APIRouter()


@router.get("/charts")
def get_charts(
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
) -> dict[str, Any]:
    counts = store.read_occurrence_counts(settings.charts_file)
    return {
        "dataDeficientHistogram": data_deficient_histogram(counts),
        "categoryPieChart": category_pie_chart(counts),
        "totalSpecies": len(counts),
    }

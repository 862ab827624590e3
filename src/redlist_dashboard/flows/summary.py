"""
Prefect flow that writes the per-taxon Red List summary to disk.

Produces ``taxa-summary.json`` in the data directory: one coverage summary
per taxon (the combined "all" taxon excluded) plus a ``generatedAt``
timestamp. Run it after refreshing the Red List exports.

Run locally:
    python -m redlist_dashboard.flows.summary
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from prefect import flow, task

from redlist_dashboard.analysis.redlist_summary import OUTDATED_AFTER_YEARS, summarize_taxon
from redlist_dashboard.config import get_settings
from redlist_dashboard.reference.taxa import summary_taxa
from redlist_dashboard.store import SnapshotStore

store = SnapshotStore(get_settings().data_dir)

SUMMARY_FILE = "taxa-summary.json"


# =============================================================================
# Tasks
# =============================================================================


@task(name="summarize-taxa")
def build_summaries(
    current_year: int, max_age_years: int = OUTDATED_AFTER_YEARS
) -> list[dict[str, Any]]:
    """Summary for every taxon, from its (possibly merged) snapshot."""
    summaries = []
    for taxon in summary_taxa():
        snapshot = store.load_summary_snapshot(taxon)
        summary = summarize_taxon(
            taxon, snapshot, current_year=current_year, max_age_years=max_age_years
        )
        if summary.available:
            print(
                f"  {taxon.name}: {summary.total_assessed} assessed "
                f"({summary.percent_assessed}%), {summary.outdated} outdated"
            )
        else:
            print(f"  {taxon.name}: no data")
        summaries.append(summary.to_json_dict())
    return summaries


@task(name="write-summary")
def write_summary(summaries: list[dict[str, Any]], generated_at: datetime) -> Path:
    """Write the summary file into the data directory."""
    payload = {"taxa": summaries, "generatedAt": generated_at.isoformat()}
    return store.write_json(SUMMARY_FILE, payload)


# =============================================================================
# Flow
# =============================================================================


@flow(name="summarize-taxa", log_prints=True)
def summarize_taxa(max_age_years: int | None = None) -> dict[str, Any]:
    """
    Compute Red List coverage for each taxon and save it as JSON.

    Taxa without a snapshot on disk are included with ``available: false``.
    """
    now = datetime.now(UTC)
    print("Generating taxa summary...")
    summaries = build_summaries(
        now.year,
        max_age_years if max_age_years is not None else get_settings().outdated_after_years,
    )

    output_path = write_summary(summaries, now)
    available = sum(1 for s in summaries if s["available"])
    print(f"Wrote {len(summaries)} taxa ({available} with data) to {output_path}")
    return {"taxa": len(summaries), "available": available, "output": str(output_path)}


if __name__ == "__main__":
    result = summarize_taxa()
    print(f"Flow complete: {result}")

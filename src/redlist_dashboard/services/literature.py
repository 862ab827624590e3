"""Literature published around a species' last Red List assessment."""

from __future__ import annotations

from typing import Any, Literal

from redlist_dashboard.datasources.openalex import search_works
from redlist_dashboard.services.http import fetch_parallel

MAX_LIMIT = 20

Mode = Literal["after", "before"]


def literature_around_assessment(
    scientific_name: str,
    assessment_year: int,
    *,
    mode: Mode = "after",
    limit: int = 5,
    mailto: str | None = None,
) -> dict[str, Any]:
    """Top papers on one side of the assessment year, with counts on both sides.

    ``after`` lists the newest papers published after the assessment year;
    ``before`` lists the most cited papers up to and including it. The
    opposite side is fetched with a one-result page only for its count.
    """
    limit = min(limit, MAX_LIMIT)
    other: Mode = "before" if mode == "after" else "after"
    pages = fetch_parallel(
        {
            "main": lambda: search_works(
                scientific_name, assessment_year, mode, limit=limit, mailto=mailto
            ),
            "other": lambda: search_works(
                scientific_name, assessment_year, other, limit=1, mailto=mailto
            ),
        },
        2,
    )
    papers, other_count = pages["main"], pages["other"].count
    return {
        "scientificName": scientific_name,
        "assessmentYear": assessment_year,
        "mode": mode,
        "totalPapersSinceAssessment": papers.count if mode == "after" else other_count,
        "papersAtAssessment": papers.count if mode == "before" else other_count,
        "totalPapers": papers.count,
        "topPapers": papers.results,
    }

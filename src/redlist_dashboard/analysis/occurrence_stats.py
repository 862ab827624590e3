"""Occurrence-count statistics for GBIF species tables and charts."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from typing import Any

# (label, lower bound exclusive, upper bound inclusive); None = unbounded
DISTRIBUTION_BANDS: tuple[tuple[str, int, int | None], ...] = (
    ("gt1_lte10", 1, 10),
    ("gt10_lte100", 10, 100),
    ("gt100_lte1000", 100, 1000),
    ("gt1000_lte10000", 1000, 10000),
    ("gt10000", 10000, None),
)

CUMULATIVE_CEILINGS: tuple[int, ...] = (1, 10, 100, 1000, 10000)

PIE_SLICES: tuple[tuple[str, int, int | None, str], ...] = (
    ("1-10 occurrences", 0, 10, "#ef4444"),
    ("11-100 occurrences", 10, 100, "#f97316"),
    ("101-1000 occurrences", 100, 1000, "#eab308"),
    (">1000 occurrences", 1000, None, "#3b82f6"),
)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like ``Math.round``: halves go up, not to even."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def median(counts: Sequence[int]) -> int:
    """Upper median of the counts (the middle element of the sorted list)."""
    if not counts:
        return 0
    ordered = sorted(counts)
    return ordered[len(ordered) // 2]


def mean(counts: Sequence[int]) -> int:
    if not counts:
        return 0
    return int(round_half_up(sum(counts) / len(counts)))


def banded_distribution(counts: Sequence[int]) -> dict[str, int]:
    """Species per occurrence band: exactly 1, (1, 10], (10, 100], ... > 10000."""
    result = {"eq1": sum(1 for c in counts if c == 1)}
    for label, low, high in DISTRIBUTION_BANDS:
        result[label] = sum(1 for c in counts if c > low and (high is None or c <= high))
    return result


def cumulative_distribution(counts: Sequence[int]) -> dict[str, int]:
    """Species with at most 1, 10, 100, 1000 and 10000 occurrences."""
    return {
        f"lte{ceiling}": sum(1 for c in counts if c <= ceiling) for ceiling in CUMULATIVE_CEILINGS
    }


def data_deficient_histogram(counts: Sequence[int], max_occurrences: int = 100) -> dict[str, Any]:
    """One bin per occurrence count 1..max for poorly recorded species."""
    deficient = [c for c in counts if c <= max_occurrences]
    tally = Counter(deficient)
    bins = [{"occurrenceCount": i, "count": tally.get(i, 0)} for i in range(1, max_occurrences + 1)]
    return {"bins": bins, "total": len(deficient)}


def category_pie_chart(counts: Sequence[int]) -> list[dict[str, Any]]:
    """Species split into four occurrence bands with fixed colors."""
    slices = []
    for name, low, high, color in PIE_SLICES:
        value = sum(1 for c in counts if c > low and (high is None or c <= high))
        slices.append({"name": name, "value": value, "color": color})
    return slices


def taxon_occurrence_stats(counts: Sequence[int]) -> dict[str, Any]:
    """Species count, total, median, mean and cumulative distribution."""
    return {
        "speciesCount": len(counts),
        "totalOccurrences": sum(counts),
        "median": median(counts),
        "mean": mean(counts),
        "distribution": cumulative_distribution(counts),
    }

"""IUCN Red List category codes, display names and colors."""

from __future__ import annotations

NOT_EVALUATED = "NE"

# Most threatened first, NE last
CATEGORY_ORDER: tuple[str, ...] = ("EX", "EW", "CR", "EN", "VU", "NT", "LC", "DD", "NE")

CATEGORY_COLORS: dict[str, str] = {
    "EX": "#000000",
    "EW": "#542344",
    "CR": "#d81e05",
    "EN": "#fc7f3f",
    "VU": "#f9e814",
    "NT": "#cce226",
    "LC": "#60c659",
    "DD": "#6b7280",
    "NE": "#a3a3a3",
}

CATEGORY_NAMES: dict[str, str] = {
    "EX": "Extinct",
    "EW": "Extinct in the Wild",
    "CR": "Critically Endangered",
    "EN": "Endangered",
    "VU": "Vulnerable",
    "NT": "Near Threatened",
    "LC": "Least Concern",
    "DD": "Data Deficient",
    "NE": "Not Evaluated",
}

# Pre-1994 "Lower Risk" subcategories still present in old assessments
LEGACY_CATEGORY_MAP: dict[str, str] = {
    "LR/nt": "NT",
    "LR/lc": "LC",
    "LR/cd": "NT",
}


def normalize_category(code: str) -> str:
    """Map legacy Lower Risk codes onto their modern equivalents."""
    return LEGACY_CATEGORY_MAP.get(code, code)

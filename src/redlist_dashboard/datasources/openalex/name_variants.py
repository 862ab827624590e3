"""Latin gender variants of a binomial for literature search.

A species epithet agrees in gender with its genus, so a species moved between
genera may be published as ``albocaudata``, ``albocaudatus`` or
``albocaudatum``. Searching all variants finds papers using any spelling.
"""

from __future__ import annotations


def epithet_variants(epithet: str) -> list[str]:
    """The epithet itself followed by its alternative gender endings."""
    variants = [epithet]

    def add(v: str) -> None:
        if v not in variants:
            variants.append(v)

    # Geographic -ensis/-ense first; they would otherwise hit the -is/-e rule
    if epithet.endswith("ensis"):
        add(epithet[:-5] + "ense")
        return variants
    if epithet.endswith("ense"):
        add(epithet[:-4] + "ensis")
        return variants

    # Second declension: -us/-a/-um
    if epithet.endswith("us"):
        add(epithet[:-2] + "a")
        add(epithet[:-2] + "um")
    elif epithet.endswith("um"):
        add(epithet[:-2] + "us")
        add(epithet[:-2] + "a")
    elif epithet.endswith("a"):
        add(epithet[:-1] + "us")
        add(epithet[:-1] + "um")

    # Third declension: -is/-e
    if epithet.endswith("is"):
        add(epithet[:-2] + "e")
    elif epithet.endswith("e") and not epithet.endswith("ae"):
        add(epithet[:-1] + "is")

    return variants


def name_variants(scientific_name: str) -> list[str]:
    """Every spelling of ``Genus epithet [rest]`` with epithet gender variants.

    Names without an epithet are returned unchanged.
    """
    parts = scientific_name.split()
    if len(parts) < 2:
        return [scientific_name]
    genus, epithet, *rest = parts
    return [" ".join([genus, variant, *rest]) for variant in epithet_variants(epithet)]

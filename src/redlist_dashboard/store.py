"""Snapshot store with per-taxon reload-from-disk.

Reads the pre-computed files that offline fetch jobs drop into the data
directory:

  - ``redlist-{class}.json``: IUCN Red List export for one class/kingdom
    (``{"species": [...], "metadata": {...}}``)
  - ``gbif-{taxon}.csv``: validated GBIF species with occurrence counts
    (``species_key,occurrence_count[,scientific_name][,common_name]...``)

Combined taxa (Fishes, Invertebrates, Fungi, All) have no export of their
own; when the combined file is missing the per-class files are merged. Every
species is tagged with the taxon it came from, category counts are summed and
the most recent ``fetchedAt`` wins. Any unreadable file makes the taxon
unavailable; coverage summaries instead prefer the per-class files and skip
unreadable ones.

Loaded snapshots are cached per taxon and reloaded from disk once older than
the TTL, so refreshed exports are picked up without a restart. Failed loads
are not cached.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from redlist_dashboard.cache import TTLCache
from redlist_dashboard.reference.taxa import (
    FILE_TO_TAXON_ID,
    TAXA,
    TaxonConfig,
    get_taxon_config,
)
from redlist_dashboard.schemas import RedListSnapshot, SnapshotMetadata

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60

# Column names used by older and newer versions of the GBIF export
SINCE_ASSESSMENT_COLUMNS = ("observations_after_assessment_year", "occurrences_since_assessment")


@dataclass
class GbifSpeciesCount:
    """One row of a GBIF species CSV, annotated with its Red List category."""

    species_key: int
    occurrence_count: int
    scientific_name: str | None = None
    common_name: str | None = None
    observations_after_assessment_year: int | None = None
    redlist_category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "species_key": self.species_key,
            "occurrence_count": self.occurrence_count,
            "observations_after_assessment_year": self.observations_after_assessment_year,
            "scientific_name": self.scientific_name,
            "redlist_category": self.redlist_category,
        }


def normalize_name(name: str) -> str:
    """Key used to match scientific names across GBIF and the Red List."""
    return name.strip().lower()


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class SnapshotStore:
    """Reads and caches Red List / GBIF snapshot files under one directory."""

    def __init__(self, base_dir: Path, ttl_seconds: float = DEFAULT_TTL_SECONDS) -> None:
        self.base = base_dir
        self.ttl = ttl_seconds
        self._redlist: TTLCache[str, RedListSnapshot] = TTLCache(ttl_seconds)
        self._gbif: TTLCache[str, list[GbifSpeciesCount]] = TTLCache(ttl_seconds)
        self._counts: TTLCache[str, list[int]] = TTLCache(ttl_seconds)

    # -------------------------------------------------------------------------
    # Red List snapshots
    # -------------------------------------------------------------------------

    def read_snapshot(self, file_name: str) -> RedListSnapshot | None:
        """Read one Red List export file. Returns None if it does not exist.

        Unreadable or invalid files raise; callers decide whether that makes
        the taxon unavailable or just drops the file.
        """
        full = self._resolve(file_name)
        if not full.exists():
            return None
        with full.open(encoding="utf-8") as f:
            raw = json.load(f)
        return RedListSnapshot.model_validate(raw)

    def load_redlist(self, taxon: TaxonConfig) -> RedListSnapshot | None:
        """Load a taxon's snapshot from disk, merging per-class files if needed.

        Any unreadable file makes the whole taxon unavailable, including a
        corrupt combined export (the per-class files are not tried then).
        """
        try:
            single = self.read_snapshot(taxon.data_file)
            if single is not None:
                return single

            if taxon.data_files:
                merged = self._merge_snapshots(
                    taxon, [(name, self.read_snapshot(name)) for name in taxon.data_files]
                )
                if merged is not None:
                    return merged
        except (OSError, ValueError, ValidationError):
            logger.exception("Failed to load Red List data for %s", taxon.id)
            return None

        logger.warning("Pre-computed data file not found: %s", self.base / taxon.data_file)
        return None

    def load_summary_snapshot(self, taxon: TaxonConfig) -> RedListSnapshot | None:
        """Snapshot used for coverage summaries.

        Per-class files take precedence over a combined export. Unreadable
        files are skipped.
        """
        if taxon.data_files:
            return self._merge_snapshots(
                taxon, [(name, self._read_snapshot_or_none(name)) for name in taxon.data_files]
            )
        return self._read_snapshot_or_none(taxon.data_file)

    def _read_snapshot_or_none(self, file_name: str) -> RedListSnapshot | None:
        try:
            return self.read_snapshot(file_name)
        except (OSError, ValueError, ValidationError):
            logger.exception("Skipping unreadable Red List snapshot %s", file_name)
            return None

    def _merge_snapshots(
        self, taxon: TaxonConfig, snapshots: list[tuple[str, RedListSnapshot | None]]
    ) -> RedListSnapshot | None:
        species: list[dict[str, Any]] = []
        by_category: dict[str, int] = {}
        latest_fetched_at = ""

        for file_name, snapshot in snapshots:
            if snapshot is None:
                continue

            source_taxon_id = FILE_TO_TAXON_ID.get(file_name, "all")
            species.extend({**s, "taxon_id": source_taxon_id} for s in snapshot.species)

            for category, count in snapshot.metadata.by_category.items():
                by_category[category] = by_category.get(category, 0) + count

            # ISO timestamps compare correctly as strings
            latest_fetched_at = max(latest_fetched_at, snapshot.metadata.fetched_at)

        if not species:
            return None

        return RedListSnapshot(
            species=species,
            metadata=SnapshotMetadata(
                total_species=len(species),
                fetched_at=latest_fetched_at,
                pages_processed=0,
                by_category=by_category,
                taxon_id=taxon.id,
            ),
        )

    def redlist(self, taxon_id: str) -> RedListSnapshot | None:
        """Cached snapshot for a taxon, reloaded from disk after the TTL."""
        taxon = get_taxon_config(taxon_id)
        return self._redlist.get_or_load(taxon.id, lambda: self.load_redlist(taxon))

    def redlist_lookup(self, taxon_id: str) -> dict[str, str]:
        """Normalized scientific name -> Red List category for a taxon."""
        snapshot = self.redlist(taxon_id)
        if snapshot is None:
            return {}
        lookup: dict[str, str] = {}
        for s in snapshot.species:
            name = s.get("scientific_name")
            category = s.get("category")
            if name and category:
                lookup[normalize_name(name)] = category
        return lookup

    def available_taxa(self) -> list[dict[str, Any]]:
        """Every configured taxon with whether a snapshot exists and its size."""
        result = []
        for taxon in TAXA:
            snapshot = self.redlist(taxon.id)
            result.append(
                {
                    "id": taxon.id,
                    "name": taxon.name,
                    "available": snapshot is not None,
                    "speciesCount": len(snapshot.species) if snapshot else 0,
                }
            )
        return result

    # -------------------------------------------------------------------------
    # GBIF species CSVs
    # -------------------------------------------------------------------------

    def read_gbif_csv(self, file_name: str) -> list[GbifSpeciesCount] | None:
        """Parse a GBIF species CSV. Returns None if the file is missing."""
        full = self._resolve(file_name)
        if not full.exists():
            return None

        rows: list[GbifSpeciesCount] = []
        with full.open(encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            fields = reader.fieldnames or []
            since_column = next((c for c in SINCE_ASSESSMENT_COLUMNS if c in fields), None)
            for row in reader:
                key = _parse_int(row.get("species_key"))
                count = _parse_int(row.get("occurrence_count"))
                if key is None or count is None:
                    logger.debug("Skipping malformed row in %s: %s", file_name, row)
                    continue
                rows.append(
                    GbifSpeciesCount(
                        species_key=key,
                        occurrence_count=count,
                        scientific_name=(row.get("scientific_name") or "").strip() or None,
                        common_name=(row.get("common_name") or "").strip() or None,
                        observations_after_assessment_year=(
                            _parse_int(row.get(since_column)) if since_column else None
                        ),
                    )
                )
        return rows

    def load_gbif_species(self, taxon: TaxonConfig) -> list[GbifSpeciesCount] | None:
        """Load a taxon's GBIF CSV and attach Red List categories by name."""
        rows = self.read_gbif_csv(taxon.gbif_data_file)
        if rows is None:
            return None
        lookup = self.redlist_lookup(taxon.id)
        for row in rows:
            if row.scientific_name:
                row.redlist_category = lookup.get(normalize_name(row.scientific_name))
        return rows

    def gbif_species(self, taxon_id: str) -> list[GbifSpeciesCount]:
        """Cached GBIF species for a taxon; empty if no CSV has been fetched yet."""
        taxon = get_taxon_config(taxon_id)
        return self._gbif.get_or_load(taxon.id, lambda: self.load_gbif_species(taxon)) or []

    def has_gbif_csv(self, taxon_id: str) -> bool:
        return self._resolve(get_taxon_config(taxon_id).gbif_data_file).exists()

    def valid_species_keys(self, taxon_id: str) -> set[int]:
        """Species keys validated as accepted species by the offline fetch."""
        return {row.species_key for row in self.gbif_species(taxon_id)}

    def read_occurrence_counts(self, file_name: str) -> list[int]:
        """Occurrence counts column of a species-count CSV, cached."""

        def load() -> list[int] | None:
            rows = self.read_gbif_csv(file_name)
            return [row.occurrence_count for row in rows] if rows is not None else None

        return self._counts.get_or_load(file_name, load) or []

    # -------------------------------------------------------------------------
    # Writing / housekeeping
    # -------------------------------------------------------------------------

    def write_json(self, file_name: str, payload: Any) -> Path:
        """Write a derived JSON file into the data directory."""
        full = self._resolve(file_name)
        full.parent.mkdir(parents=True, exist_ok=True)
        with full.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        return full

    def clear(self) -> None:
        """Drop every cached snapshot so the next read goes to disk."""
        self._redlist.clear()
        self._gbif.clear()
        self._counts.clear()

    def _resolve(self, name: str | Path) -> Path:
        path = Path(name)
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {name}"
            raise ValueError(msg) from None
        return full

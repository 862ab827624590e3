"""GBIF dataset/publisher keys and query constants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# iNaturalist research-grade observations as published to GBIF
INAT_DATASET_KEY = "50c9509d-22c7-4a22-a47d-8c48425ef4a7"


@dataclass(frozen=True)
class DataSource:
    """A named GBIF filter: either a single dataset or a publishing organization."""

    type: Literal["dataset", "publishingOrg"]
    key: str

    @property
    def param(self) -> str:
        return "datasetKey" if self.type == "dataset" else "publishingOrg"


DATA_SOURCES: dict[str, DataSource] = {
    "iNaturalist": DataSource("dataset", INAT_DATASET_KEY),
    "iRecord": DataSource("publishingOrg", "32f1b389-5871-4da3-832f-9a89132520c5"),
    "BSBI": DataSource("publishingOrg", "aa569acf-991d-4467-b327-8442f30ddbd2"),
}

# Name-match types that resolve to the species itself. HIGHERRANK would match
# a genus or family and pull in occurrences for the whole group.
GOOD_MATCH_TYPES = frozenset({"EXACT", "FUZZY", "VARIANT"})

HUMAN_OBSERVATION = "HUMAN_OBSERVATION"
PRESERVED_SPECIMEN = "PRESERVED_SPECIMEN"
MACHINE_OBSERVATION = "MACHINE_OBSERVATION"

# Basis-of-record values grouped under the dashboard's "OTHER" filter
OTHER_BASIS_OF_RECORD: tuple[str, ...] = (
    "OBSERVATION",
    "MATERIAL_CITATION",
    "OCCURRENCE",
    "LIVING_SPECIMEN",
    "FOSSIL_SPECIMEN",
)

# Only geo-referenced occurrences without geospatial issues are counted
GEO_PARAMS: dict[str, str] = {"hasCoordinate": "true", "hasGeospatialIssue": "false"}

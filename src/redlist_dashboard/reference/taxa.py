"""Taxon registry for the Red List and GBIF dashboards.

Each taxon names the IUCN endpoint(s) it was exported from, the pre-computed
Red List JSON file(s) and GBIF species-count CSV on disk, and the GBIF
backbone keys used to scope live occurrence queries.

Combined taxa (Fishes, Invertebrates, Fungi, All) list several per-class
export files in ``data_files``; the store merges them when the combined
``data_file`` itself is not on disk.
"""

from __future__ import annotations

from dataclasses import dataclass

# Estimated described species from IUCN Red List Table 1a (version 2025-2)
IUCN_SOURCE = "IUCN 2025-2"
IUCN_SOURCE_URL = (
    "https://nc.iucnredlist.org/redlist/content/attachment_files/2025-2_RL_Table1a.pdf"
)

ALL_TAXON_ID = "all"
DEFAULT_TAXON_ID = "plantae"


@dataclass(frozen=True)
class TaxonConfig:
    """Static configuration for one dashboard taxon."""

    id: str
    name: str
    api_endpoint: str
    estimated_described: int
    data_file: str
    gbif_data_file: str
    color: str
    estimated_source: str = IUCN_SOURCE
    estimated_source_url: str | None = IUCN_SOURCE_URL
    api_endpoints: tuple[str, ...] = ()
    data_files: tuple[str, ...] = ()
    gbif_kingdom_key: int | None = None
    gbif_class_key: int | None = None
    gbif_class_keys: tuple[int, ...] = ()
    gbif_order_keys: tuple[int, ...] = ()

    @property
    def is_combined(self) -> bool:
        return bool(self.data_files)

    def info(self) -> dict[str, object]:
        """Short description embedded in API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "estimatedDescribed": self.estimated_described,
            "estimatedSource": self.estimated_source,
            "color": self.color,
        }


# Ray-finned fish orders (GBIF has no Actinopterygii class)
FISH_ORDER_KEYS: tuple[int, ...] = (
    389, 391, 427, 428, 446, 494, 495, 496, 497, 498, 499, 537, 538, 547, 548,
    549, 550, 587, 588, 589, 590, 696, 708, 742, 752, 753, 772, 773, 774, 781,
    836, 848, 857, 860, 861, 888, 889, 890, 898, 929, 975, 976, 1067, 1153, 1313,
)  # fmt: skip

FISHES_FILES = ("redlist-actinopterygii.json", "redlist-chondrichthyes.json")
INVERTEBRATE_FILES = (
    "redlist-insecta.json",
    "redlist-arachnida.json",
    "redlist-gastropoda.json",
    "redlist-bivalvia.json",
    "redlist-malacostraca.json",
    "redlist-anthozoa.json",
)
FUNGI_FILES = ("redlist-ascomycota.json", "redlist-basidiomycota.json")

TAXA: tuple[TaxonConfig, ...] = (
    TaxonConfig(
        id=ALL_TAXON_ID,
        name="All Species",
        api_endpoint="kingdom/Animalia",
        estimated_described=2174939,
        data_file="redlist-all.json",
        data_files=(
            "redlist-mammalia.json",
            "redlist-aves.json",
            "redlist-reptilia.json",
            "redlist-amphibia.json",
            *FISHES_FILES,
            *INVERTEBRATE_FILES,
            "redlist-plantae.json",
            *FUNGI_FILES,
        ),
        gbif_data_file="gbif-all.csv",
        color="#dc2626",
    ),
    TaxonConfig(
        id="mammalia",
        name="Mammals",
        api_endpoint="class/Mammalia",
        estimated_described=6819,
        data_file="redlist-mammalia.json",
        gbif_data_file="gbif-mammalia.csv",
        gbif_kingdom_key=1,
        gbif_class_key=359,
        color="#f97316",
    ),
    TaxonConfig(
        id="aves",
        name="Birds",
        api_endpoint="class/Aves",
        estimated_described=11185,
        data_file="redlist-aves.json",
        gbif_data_file="gbif-aves.csv",
        gbif_kingdom_key=1,
        gbif_class_key=212,
        color="#3b82f6",
    ),
    TaxonConfig(
        id="reptilia",
        name="Reptiles",
        api_endpoint="class/Reptilia",
        estimated_described=12502,
        data_file="redlist-reptilia.json",
        gbif_data_file="gbif-reptilia.csv",
        gbif_kingdom_key=1,
        # GBIF splits Reptilia into Squamata, Crocodylia, Testudines
        gbif_class_keys=(11592253, 11493978, 11418114),
        color="#84cc16",
    ),
    TaxonConfig(
        id="amphibia",
        name="Amphibians",
        api_endpoint="class/Amphibia",
        estimated_described=8918,
        data_file="redlist-amphibia.json",
        gbif_data_file="gbif-amphibia.csv",
        gbif_kingdom_key=1,
        gbif_class_key=131,
        color="#14b8a6",
    ),
    TaxonConfig(
        id="fishes",
        name="Fishes",
        api_endpoint="class/Actinopterygii",
        api_endpoints=("class/Actinopterygii", "class/Chondrichthyes"),
        estimated_described=37288,
        data_file="redlist-fishes.json",
        data_files=FISHES_FILES,
        gbif_data_file="gbif-fishes.csv",
        gbif_kingdom_key=1,
        gbif_order_keys=FISH_ORDER_KEYS,
        # Elasmobranchii, Holocephali
        gbif_class_keys=(121, 120),
        color="#06b6d4",
    ),
    TaxonConfig(
        id="invertebrates",
        name="Invertebrates",
        api_endpoint="class/Insecta",
        api_endpoints=(
            "class/Insecta",
            "class/Arachnida",
            "class/Gastropoda",
            "class/Bivalvia",
            "class/Malacostraca",
            "class/Anthozoa",
        ),
        estimated_described=1508442,
        data_file="redlist-invertebrates.json",
        data_files=INVERTEBRATE_FILES,
        gbif_data_file="gbif-invertebrates.csv",
        gbif_kingdom_key=1,
        gbif_class_keys=(216, 367, 225, 137, 229, 206),
        color="#78716c",
    ),
    TaxonConfig(
        id="plantae",
        name="Plants",
        api_endpoint="kingdom/Plantae",
        estimated_described=426132,
        data_file="redlist-plantae.json",
        gbif_data_file="gbif-plantae.csv",
        gbif_kingdom_key=6,
        color="#22c55e",
    ),
    TaxonConfig(
        id="fungi",
        name="Fungi",
        api_endpoint="phylum/Ascomycota",
        api_endpoints=("phylum/Ascomycota", "phylum/Basidiomycota"),
        estimated_described=162653,
        data_file="redlist-fungi.json",
        data_files=FUNGI_FILES,
        gbif_data_file="gbif-fungi.csv",
        gbif_kingdom_key=5,
        color="#d97706",
    ),
)

TAXA_BY_ID: dict[str, TaxonConfig] = {t.id: t for t in TAXA}

# Per-class export file -> dashboard taxon that owns it (tags merged species)
FILE_TO_TAXON_ID: dict[str, str] = {
    "redlist-mammalia.json": "mammalia",
    "redlist-aves.json": "aves",
    "redlist-reptilia.json": "reptilia",
    "redlist-amphibia.json": "amphibia",
    **dict.fromkeys(FISHES_FILES, "fishes"),
    **dict.fromkeys(INVERTEBRATE_FILES, "invertebrates"),
    "redlist-plantae.json": "plantae",
    **dict.fromkeys(FUNGI_FILES, "fungi"),
}


def get_taxon_config(taxon_id: str | None) -> TaxonConfig:
    """Look up a taxon by id. Unknown or empty ids fall back to plants."""
    return TAXA_BY_ID.get(taxon_id or DEFAULT_TAXON_ID, TAXA_BY_ID[DEFAULT_TAXON_ID])


def summary_taxa() -> list[TaxonConfig]:
    """Real taxa, without the "all" meta-taxon used only for browsing."""
    return [t for t in TAXA if t.id != ALL_TAXON_ID]

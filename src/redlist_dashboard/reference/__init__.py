"""Static reference data.

Values that don't change with API calls: the taxon registry, IUCN category
metadata and GBIF dataset keys.

Adding a new module:
1. Create ``reference/{name}.py`` with constants/dataclasses
2. Re-export from this ``__init__.py``
"""

from redlist_dashboard.reference.categories import CATEGORY_COLORS as CATEGORY_COLORS
from redlist_dashboard.reference.categories import CATEGORY_NAMES as CATEGORY_NAMES
from redlist_dashboard.reference.categories import CATEGORY_ORDER as CATEGORY_ORDER
from redlist_dashboard.reference.gbif import DATA_SOURCES as DATA_SOURCES
from redlist_dashboard.reference.gbif import INAT_DATASET_KEY as INAT_DATASET_KEY
from redlist_dashboard.reference.taxa import TAXA as TAXA
from redlist_dashboard.reference.taxa import TaxonConfig as TaxonConfig
from redlist_dashboard.reference.taxa import get_taxon_config as get_taxon_config

"""Component catalog: records, lookup, search, dependency resolution and usage checks."""

from dscatalog.catalog.loader import load_snapshot, parse_snapshot
from dscatalog.catalog.models import (
    LAYER_NAMES,
    CatalogError,
    CatalogIntegrityError,
    CatalogSnapshot,
    ComponentRecord,
    CompositionRule,
    PropDetail,
    PropDetails,
    ResolvedComponent,
    SourceFile,
)
from dscatalog.catalog.resolver import DependencyResolver, VirtualComponentResolver
from dscatalog.catalog.search import SearchHit, SearchIndex
from dscatalog.catalog.sources import SourceReader
from dscatalog.catalog.store import CatalogStore
from dscatalog.catalog.usage import (
    ElementMapResponse,
    ElementMapping,
    UsageIssue,
    UsageReport,
    map_elements,
    validate_usage,
)

__all__ = [
    "LAYER_NAMES",
    "CatalogError",
    "CatalogIntegrityError",
    "CatalogSnapshot",
    "CatalogStore",
    "ComponentRecord",
    "CompositionRule",
    "DependencyResolver",
    "ElementMapResponse",
    "ElementMapping",
    "PropDetail",
    "PropDetails",
    "ResolvedComponent",
    "SearchHit",
    "SearchIndex",
    "SourceFile",
    "SourceReader",
    "UsageIssue",
    "UsageReport",
    "VirtualComponentResolver",
    "load_snapshot",
    "map_elements",
    "parse_snapshot",
    "validate_usage",
]

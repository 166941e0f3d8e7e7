"""Design-system component catalog service.

Search a component catalog, resolve dependency closures bottom-up, and
scaffold ready-to-build projects from a component selection.

Quick usage::

    from dscatalog import CatalogService

    service = CatalogService.from_path("bundle.json")
    service.search("data table")
    service.scaffold_project("my-prototype", ["DocuSignShell", "DataTable"])
"""

from dscatalog.config import ScaffoldConfig, ServiceConfig
from dscatalog.service import CatalogService

__version__ = "0.1.0"

__all__ = [
    "CatalogService",
    "ScaffoldConfig",
    "ServiceConfig",
    "__version__",
]

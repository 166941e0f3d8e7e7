"""Catalog bundle loading.

Reads a JSON or YAML bundle from disk and validates it into a
:class:`CatalogSnapshot`.  Structural problems surface here, at startup, as
``pydantic.ValidationError``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..utils import load_structured
from .models import CatalogSnapshot

logger = logging.getLogger(__name__)


def parse_snapshot(data: dict[str, Any]) -> CatalogSnapshot:
    """Validate an already-decoded bundle."""
    return CatalogSnapshot.model_validate(data)


def load_snapshot(path: str | Path) -> CatalogSnapshot:
    """Load and validate the catalog bundle at *path*.

    Raises:
        FileNotFoundError: If the bundle does not exist.
        pydantic.ValidationError: If the bundle is structurally invalid.
    """
    bundle_path = Path(path)
    snapshot = parse_snapshot(load_structured(bundle_path))
    logger.info(
        "Loaded catalog %s: %d components, %d source groups from %s",
        snapshot.version or "(unversioned)",
        len(snapshot.components),
        len(snapshot.sources),
        bundle_path,
    )
    if snapshot.tokens is None:
        logger.warning("Catalog bundle has no tokens stylesheet")
    if snapshot.utility is None:
        logger.warning("Catalog bundle has no utility file")
    return snapshot

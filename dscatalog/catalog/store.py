"""In-memory component store.

Holds every :class:`ComponentRecord` of the catalog, answers exact and
case-insensitive lookups, and lists records per layer.  The store is built
once and never mutated, so per-filter listings are cached.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Optional

from .models import LAYER_NAMES, CatalogIntegrityError, ComponentRecord

logger = logging.getLogger(__name__)


class CatalogStore:
    """Read-only collection of component records.

    Construction fails fast with :class:`CatalogIntegrityError` on duplicate
    names or broken virtual-host links.  Dependency names that point nowhere
    are tolerated and logged once.
    """

    def __init__(self, records: Iterable[ComponentRecord], version: str = "") -> None:
        self.version = version
        self._records: dict[str, ComponentRecord] = {}
        for record in records:
            if record.name in self._records:
                raise CatalogIntegrityError(f"duplicate component name: {record.name!r}")
            self._records[record.name] = record

        self._lower: dict[str, ComponentRecord] = {}
        for name, record in self._records.items():
            self._lower.setdefault(name.lower(), record)

        self._check_hosts()
        self._list_cache: dict[Optional[int], tuple[ComponentRecord, ...]] = {}
        self._children: dict[str, tuple[str, ...]] = self._index_virtual_children()

        self._dangling = self._find_dangling()
        for name, missing in self._dangling.items():
            logger.warning(
                "Component %s declares unknown dependencies: %s", name, ", ".join(missing)
            )

    # -- Validation --------------------------------------------------------

    def _check_hosts(self) -> None:
        for record in self._records.values():
            if record.host_component is None:
                continue
            host = self._records.get(record.host_component)
            if host is None:
                raise CatalogIntegrityError(
                    f"virtual component {record.name!r} names missing host "
                    f"{record.host_component!r}"
                )
            if host.is_virtual:
                raise CatalogIntegrityError(
                    f"virtual component {record.name!r} is hosted by another "
                    f"virtual component {host.name!r}"
                )

    def _index_virtual_children(self) -> dict[str, tuple[str, ...]]:
        children: dict[str, list[str]] = {}
        for record in self._records.values():
            if record.host_component is not None:
                children.setdefault(record.host_component, []).append(record.name)
        return {host: tuple(names) for host, names in children.items()}

    def _find_dangling(self) -> dict[str, tuple[str, ...]]:
        dangling: dict[str, tuple[str, ...]] = {}
        for record in self._records.values():
            missing = tuple(d for d in record.dependencies if self.get(d) is None)
            if missing:
                dangling[record.name] = missing
        return dangling

    # -- Lookup ------------------------------------------------------------

    def get(self, name: str) -> Optional[ComponentRecord]:
        """Return the record named *name*, trying a case-insensitive match second."""
        record = self._records.get(name)
        if record is not None:
            return record
        return self._lower.get(name.lower())

    def list(self, layer: Optional[int] = None) -> tuple[ComponentRecord, ...]:
        """Records in catalog order, optionally restricted to one layer."""
        cached = self._list_cache.get(layer)
        if cached is not None:
            return cached
        if layer is None:
            result = tuple(self._records.values())
        else:
            result = tuple(r for r in self._records.values() if r.layer == layer)
        self._list_cache[layer] = result
        return result

    def all_names(self) -> frozenset[str]:
        return frozenset(self._records)

    def virtual_children(self, host: str) -> tuple[str, ...]:
        """Names of virtual records hosted by *host*, in catalog order."""
        return self._children.get(host, ())

    def dangling_dependencies(self) -> dict[str, tuple[str, ...]]:
        """Declared dependency names that match no record, per component."""
        return dict(self._dangling)

    # -- Presentation ------------------------------------------------------

    @staticmethod
    def layer_name(layer: int) -> str:
        return LAYER_NAMES.get(layer, "unknown")

    def stats(self) -> dict[str, object]:
        return {
            "version": self.version,
            "totalComponents": len(self._records),
            "byLayer": {
                f"{layer}-{self.layer_name(layer)}": len(self.list(layer))
                for layer in sorted({r.layer for r in self._records.values()})
            },
        }

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[ComponentRecord]:
        return iter(self._records.values())

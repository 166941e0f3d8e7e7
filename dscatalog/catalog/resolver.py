"""Dependency closure and virtual-component indirection.

:class:`DependencyResolver` walks declared dependencies depth-first and
returns them bottom-up (every dependency before the component that needs
it).  :class:`VirtualComponentResolver` maps virtual records onto the host
record whose files and exports they share.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Optional

from .models import ResolvedComponent
from .store import CatalogStore


class DependencyResolver:
    """Memoised transitive dependency resolution over a :class:`CatalogStore`.

    Results are cached per root name and never invalidated; the catalog is
    immutable.  Cache population happens under a lock so concurrent callers
    asking for the same root do not repeat the walk.
    """

    def __init__(self, store: CatalogStore) -> None:
        self.store = store
        self._cache: dict[str, tuple[ResolvedComponent, ...]] = {}
        self._lock = threading.Lock()

    def resolve(self, name: str) -> tuple[ResolvedComponent, ...]:
        """Return the closure of *name*, dependencies first and *name* last.

        Unknown dependency names are skipped.  A component reachable through
        several paths is emitted once, at its first visit, which also makes
        the walk terminate on cyclic data.
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(name)
            if cached is not None:
                return cached
            result: list[ResolvedComponent] = []
            self._walk(name, set(), result)
            resolved = tuple(result)
            self._cache[name] = resolved
            return resolved

    def _walk(self, name: str, visited: set[str], result: list[ResolvedComponent]) -> None:
        record = self.store.get(name)
        if record is None or record.name in visited:
            return
        visited.add(record.name)

        for dep in record.dependencies:
            self._walk(dep, visited, result)

        result.append(ResolvedComponent(name=record.name, layer=record.layer, kind=record.kind))

    def dependencies(self, name: str) -> tuple[ResolvedComponent, ...]:
        """The closure of *name* without *name* itself."""
        record = self.store.get(name)
        root = record.name if record is not None else name
        return tuple(c for c in self.resolve(name) if c.name != root)

    def cache_size(self) -> int:
        return len(self._cache)


class VirtualComponentResolver:
    """Redirects virtual components to their host for files and exports."""

    def __init__(self, store: CatalogStore, resolver: DependencyResolver) -> None:
        self.store = store
        self.resolver = resolver

    def host_of(self, name: str) -> Optional[str]:
        record = self.store.get(name)
        if record is None:
            return None
        return record.host_component

    def host_map(self, names: Iterable[str]) -> dict[str, str]:
        """``{virtual: host}`` for every virtual name in *names*."""
        mapping: dict[str, str] = {}
        for name in names:
            host = self.host_of(name)
            if host is not None:
                mapping[name] = host
        return mapping

    def expand(self, names: Iterable[str]) -> list[str]:
        """Close *names* over host/virtual links.

        Adds every virtual record whose host is present, and the host (with
        its own dependency closure) of every virtual record present.  Runs to
        a fixpoint, so expanding an already-expanded set adds nothing.  Input
        order is kept; additions follow in discovery order.
        """
        result = list(dict.fromkeys(names))
        present = set(result)
        pending = list(result)

        while pending:
            name = pending.pop(0)
            added: list[str] = []

            host = self.host_of(name)
            if host is not None and host not in present:
                added.extend(c.name for c in self.resolver.resolve(host))

            added.extend(self.store.virtual_children(name))

            for extra in added:
                if extra not in present:
                    present.add(extra)
                    result.append(extra)
                    pending.append(extra)

        return result

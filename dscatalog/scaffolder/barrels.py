"""Barrel (re-export) file generation.

Three kinds of barrels are produced for a scaffolded design system:

- a component barrel inside each real component directory, exporting the
  component and any virtual names it hosts;
- a layer barrel per populated layer, exporting every name in that layer,
  with virtual names routed to their host's directory;
- the root barrel, re-exporting each layer barrel from the highest layer
  down.

All output is sorted so identical inputs give byte-identical files.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence
from typing import Optional

from ..config import ScaffoldConfig

logger = logging.getLogger(__name__)


def export_line(names: Sequence[str], source: str) -> str:
    return f"export {{ {', '.join(names)} }} from '{source}';"


def component_barrel(name: str, virtual_exports: Sequence[str] = ()) -> str:
    """Barrel for one component directory: ``export { Host, Virtual } from './Host';``."""
    return export_line([name, *sorted(virtual_exports)], f"./{name}") + "\n"


def layer_barrel(
    layer: int,
    names: Sequence[str],
    virtual_to_host: Mapping[str, str],
    layers: Mapping[str, int],
    config: ScaffoldConfig,
) -> str:
    """Barrel for one layer directory.

    *layers* maps every resolved name to its layer; it is used to route a
    virtual name whose host lives in a different layer to that layer's
    directory.
    """
    by_source: dict[str, list[str]] = {}
    for name in sorted(names):
        host = virtual_to_host.get(name, name)
        host_layer = layers.get(host, layer)
        if host_layer == layer:
            source = f"./{host}"
        else:
            source = f"../{config.layer_dir(host_layer)}/{host}"
        by_source.setdefault(source, []).append(name)

    lines = [export_line(exported, source) for source, exported in sorted(by_source.items())]
    return "\n".join(lines) + "\n"


def root_barrel(layer_components: Mapping[int, Sequence[str]], config: ScaffoldConfig) -> str:
    """Root barrel re-exporting every populated layer, highest layer first."""
    lines: list[str] = []
    for layer in sorted(layer_components, reverse=True):
        names = layer_components[layer]
        if not names:
            continue
        lines.append(export_line(sorted(names), f"./{config.layer_dir(layer)}"))
    return "\n".join(lines) + "\n"


def drop_sourceless(
    layer_components: Mapping[int, Sequence[str]],
    virtual_to_host: Mapping[str, str],
    with_sources: Collection[str],
) -> tuple[dict[int, list[str]], dict[str, str]]:
    """Remove real components without bundled sources, and the virtuals they host.

    Exporting them would point barrels at directories that are never written.
    """
    missing = {
        name
        for names in layer_components.values()
        for name in names
        if name not in virtual_to_host and name not in with_sources
    }
    if missing:
        logger.warning("No bundled sources for %s; left out of barrels", ", ".join(sorted(missing)))

    kept_virtuals = {v: h for v, h in virtual_to_host.items() if h not in missing}
    kept_layers = {
        layer: [
            n for n in names
            if n not in missing and (n not in virtual_to_host or n in kept_virtuals)
        ]
        for layer, names in layer_components.items()
    }
    return kept_layers, kept_virtuals


def generate_barrels(
    layer_components: Mapping[int, Sequence[str]],
    virtual_to_host: Mapping[str, str],
    config: ScaffoldConfig,
    with_sources: Optional[Collection[str]] = None,
) -> dict[str, str]:
    """Every barrel file for the resolved set, keyed by project-relative path.

    Virtual names never get a directory of their own; they are exported from
    their host's component barrel and routed there by the layer barrel.  When
    *with_sources* is given, real components outside it are skipped (see
    :func:`drop_sourceless`).
    """
    if with_sources is not None:
        layer_components, virtual_to_host = drop_sourceless(
            layer_components, virtual_to_host, with_sources
        )
    layers = {name: layer for layer, names in layer_components.items() for name in names}

    hosted: dict[str, list[str]] = {}
    for virtual, host in virtual_to_host.items():
        hosted.setdefault(host, []).append(virtual)

    base = config.design_system_dir
    files: dict[str, str] = {}

    for layer in sorted(layer_components):
        for name in sorted(layer_components[layer]):
            if name in virtual_to_host:
                continue
            path = f"{base}/{config.layer_dir(layer)}/{name}/index.ts"
            files[path] = component_barrel(name, hosted.get(name, ()))

    for layer in sorted(layer_components):
        names = layer_components[layer]
        if not names:
            continue
        path = f"{base}/{config.layer_dir(layer)}/index.ts"
        files[path] = layer_barrel(layer, names, virtual_to_host, layers, config)

    files[f"{base}/index.ts"] = root_barrel(layer_components, config)
    return files

"""Icon asset scanning and trimming.

The full icon manifest (``iconPaths.ts``) is large; scaffolded projects get a
subset holding only the icons their sources reference plus a small safety
net.  Reference detection is a regex heuristic kept behind
:func:`scan_for_asset_references` so it can be replaced without touching the
scaffolder.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from .templates import TemplateRenderer

# name="search", name='search', name={"search"}, name={'search'}
_REFERENCE_PATTERNS = (
    re.compile(r"""\bname=["']([a-z][a-z0-9-]*)["']"""),
    re.compile(r"""\bname=\{["']([a-z][a-z0-9-]*)["']\}"""),
)

_ENTRY_PATTERN = re.compile(r"'([^']+)':\s*\{([^}]+)\}")
_PATH_PATTERN = re.compile(r"path:\s*'([^']+)'")
_VIEWBOX_PATTERN = re.compile(r"viewBox:\s*'([^']+)'")

COMMON_ICONS: frozenset[str] = frozenset({
    "check", "close", "error", "warning", "info",
    "chevron-down", "chevron-up", "chevron-left", "chevron-right",
    "search", "menu", "more-horizontal", "add", "edit", "delete",
    "arrow-left", "arrow-right", "arrow-down", "arrow-up",
})


@dataclass(frozen=True)
class IconPath:
    path: str
    view_box: Optional[str] = None


def scan_for_asset_references(source_text: str) -> set[str]:
    """Icon names referenced by ``name=...`` attributes in *source_text*."""
    found: set[str] = set()
    for pattern in _REFERENCE_PATTERNS:
        found.update(pattern.findall(source_text))
    return found


def scan_sources(sources: Iterable[str]) -> set[str]:
    used: set[str] = set()
    for text in sources:
        used |= scan_for_asset_references(text)
    return used


def parse_icon_paths(content: str) -> dict[str, IconPath]:
    """Parse ``'name': { path: '...', viewBox?: '...' }`` entries."""
    icons: dict[str, IconPath] = {}
    for match in _ENTRY_PATTERN.finditer(content):
        name, body = match.group(1), match.group(2)
        path_match = _PATH_PATTERN.search(body)
        if path_match is None:
            continue
        view_box = _VIEWBOX_PATTERN.search(body)
        icons[name] = IconPath(
            path=path_match.group(1),
            view_box=view_box.group(1) if view_box else None,
        )
    return icons


def trimmed_icon_names(used: Iterable[str], available: dict[str, IconPath]) -> list[str]:
    """Sorted names from *used* (plus the safety net) that *available* defines."""
    wanted = set(used) | COMMON_ICONS
    return sorted(name for name in wanted if name in available)


def render_trimmed_icon_paths(
    renderer: TemplateRenderer,
    used: Iterable[str],
    available: dict[str, IconPath],
    full_manifest_url: str,
    icons_dir_url: str,
) -> str:
    """Render the trimmed ``iconPaths.ts`` module."""
    names = trimmed_icon_names(used, available)
    return renderer.render(
        "iconPaths.ts.j2",
        {
            "icons": [(name, available[name]) for name in names],
            "included": len(names),
            "total": len(available),
            "full_manifest_url": full_manifest_url,
            "icons_dir_url": icons_dir_url,
        },
    )

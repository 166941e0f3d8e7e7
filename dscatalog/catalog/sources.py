"""Access to bundled component source files and design tokens."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Optional

from .models import SourceFile

DESIGN_SYSTEM_PREFIX = "design-system/"

# Custom-property patterns per token category
CATEGORY_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    "color": [
        re.compile(
            r"--ink-(bg|font|border|brand|button|badge|status|alert|nav|chip|input|select|tab"
            r"|link|card|skeleton|progress|slider|divider|tooltip|callout|banner|stepper|avatar"
            r"|switch|checkbox|radio|file|filter|popover|drawer|modal)"
        ),
        re.compile(r"color", re.IGNORECASE),
    ],
    "spacing": [re.compile(r"--ink-spacing"), re.compile(r"--ink-gap")],
    "typography": [
        re.compile(r"--ink-font-size"),
        re.compile(r"--ink-font-weight"),
        re.compile(r"--ink-line-height"),
        re.compile(r"--ink-font-family"),
    ],
    "radius": [re.compile(r"--ink-radius")],
    "shadow": [re.compile(r"--ink-shadow"), re.compile(r"--ink-elevation")],
    "size": [re.compile(r"--ink-size"), re.compile(r"--ink-height"), re.compile(r"--ink-width")],
}


def to_static_path(bundle_path: str) -> str:
    """``design-system/2-utilities/Stack/Stack.tsx`` -> ``2-utilities/Stack/Stack.tsx``."""
    if bundle_path.startswith(DESIGN_SYSTEM_PREFIX):
        return bundle_path[len(DESIGN_SYSTEM_PREFIX):]
    return bundle_path


class SourceReader:
    """Read-only view over the bundled source files.

    Component files are keyed by ``"Name:layer"``.  The tokens stylesheet and
    the shared utility file are optional; callers get ``None`` when the
    bundle did not ship them.
    """

    def __init__(
        self,
        sources: Mapping[str, Sequence[SourceFile]],
        tokens: Optional[SourceFile] = None,
        utility: Optional[SourceFile] = None,
    ) -> None:
        self._sources = {key: tuple(files) for key, files in sources.items()}
        self.tokens = tokens
        self.utility = utility
        self._category_cache: dict[str, str] = {}

    def component_files(self, name: str, layer: int) -> tuple[SourceFile, ...]:
        return self._sources.get(f"{name}:{layer}", ())

    def file_count(self) -> int:
        return sum(len(files) for files in self._sources.values())

    @staticmethod
    def categories() -> list[str]:
        return list(CATEGORY_PATTERNS)

    def tokens_by_category(self, category: str) -> Optional[str]:
        """The ``:root`` block of the tokens stylesheet filtered to *category*.

        Returns ``None`` for an unknown category or when no stylesheet was
        loaded.
        """
        key = category.lower()
        patterns = CATEGORY_PATTERNS.get(key)
        if patterns is None or self.tokens is None:
            return None

        cached = self._category_cache.get(key)
        if cached is not None:
            return cached

        filtered: list[str] = []
        inside_root = False
        for line in self.tokens.content.split("\n"):
            if ":root" in line:
                inside_root = True
                filtered.append(":root {")
                continue
            if inside_root and line.strip() == "}":
                inside_root = False
                filtered.append("}")
                continue
            if inside_root and any(p.search(line) for p in patterns):
                filtered.append(line)

        result = "\n".join(filtered)
        self._category_cache[key] = result
        return result

"""Scaffold plan and result models.

A :class:`ScaffoldPlan` holds one logical file tree built once per request.
:func:`serialize_plan` turns that tree into a :class:`ScaffoldResult` for
the requested transport mode: ``inline`` carries every file's content,
``urls`` carries generated files inline and refers to catalog sources by
URL.  Both modes list the same paths.  :func:`write_project` writes an
inline result to disk.
"""

from __future__ import annotations

import asyncio
import shlex
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional

from pydantic import BaseModel, Field

from ..catalog.models import ResolvedComponent
from .templates import TemplateRenderer


class OutputMode(str, Enum):
    """How file contents travel in the scaffold response."""
    URLS = "urls"
    INLINE = "inline"


class FileOrigin(str, Enum):
    BOILERPLATE = "boilerplate"
    BARREL = "barrel"
    GENERATED = "generated"
    SOURCE = "source"


class ProjectFile(BaseModel):
    """One file of the logical tree.

    ``content`` is always present.  ``remote_path`` is set for files that
    can be fetched from the source base URL instead of being sent inline.
    """

    path: str
    content: str
    origin: FileOrigin
    remote_path: Optional[str] = None


class RemoteReference(BaseModel):
    destination_path: str
    remote_url: str


class ScaffoldPlan(BaseModel):
    """Working state of one scaffold request.

    ``project_name`` is the sanitised directory name; it is used verbatim in
    generated files, setup scripts and output paths.
    """

    project_name: str
    requested: list[str] = Field(default_factory=list, description="Canonical requested names")
    not_found: list[str] = Field(default_factory=list)
    resolved: dict[str, ResolvedComponent] = Field(
        default_factory=dict, description="Closure in discovery order"
    )
    virtual_to_host: dict[str, str] = Field(default_factory=dict)
    layers: dict[int, list[str]] = Field(default_factory=dict)
    template: Optional[str] = None
    files: list[ProjectFile] = Field(default_factory=list)
    assets: list[RemoteReference] = Field(
        default_factory=list, description="Binary assets, always fetched by URL"
    )

    def add(self, file: ProjectFile) -> bool:
        """Append *file* unless its path is already taken; return whether it was added."""
        if any(f.path == file.path for f in self.files):
            return False
        self.files.append(file)
        return True

    @property
    def paths(self) -> list[str]:
        return sorted(f.path for f in self.files)

    @property
    def component_names(self) -> list[str]:
        return sorted(self.resolved)


class ScaffoldResult(BaseModel):
    """Serialised scaffold response."""

    project_name: str
    mode: OutputMode
    template: Optional[str] = None
    base_url: Optional[str] = None
    components: list[str] = Field(default_factory=list, description="Sorted component names")
    resolution_order: list[str] = Field(
        default_factory=list, description="Discovery order; each requested closure is bottom-up"
    )
    component_count: int = 0
    not_found: list[str] = Field(default_factory=list)
    paths: list[str] = Field(default_factory=list, description="Every path of the logical tree")
    total_files: int = 0
    files: dict[str, str] = Field(default_factory=dict)
    source_files: list[RemoteReference] = Field(default_factory=list)
    assets: list[RemoteReference] = Field(default_factory=list)
    setup_script: Optional[str] = None
    setup_script_windows: Optional[str] = None
    quick_start: str = ""
    instructions: str = ""


def _directories(paths: list[str]) -> list[str]:
    dirs = {str(PurePosixPath(p).parent) for p in paths}
    dirs.discard(".")
    return sorted(dirs)


def serialize_plan(
    plan: ScaffoldPlan,
    mode: OutputMode,
    source_base_url: str,
    renderer: TemplateRenderer,
) -> ScaffoldResult:
    """Render *plan* for *mode*; the path list is the same for every mode."""
    quick_start = f"cd {shlex.quote(plan.project_name)} && npm install && npm run dev"
    result = ScaffoldResult(
        project_name=plan.project_name,
        mode=mode,
        template=plan.template,
        components=plan.component_names,
        resolution_order=list(plan.resolved),
        component_count=len(plan.resolved),
        not_found=list(plan.not_found),
        paths=plan.paths,
        total_files=len(plan.files),
        assets=list(plan.assets),
        quick_start=quick_start,
    )
    asset_note = "fetch assets to their destination paths, " if plan.assets else ""

    if mode is OutputMode.INLINE:
        result.files = {f.path: f.content for f in sorted(plan.files, key=lambda f: f.path)}
        result.instructions = (
            f"Write all files, {asset_note}then run quick_start. Import from '@/design-system'."
        )
        return result

    base = source_base_url.rstrip("/")
    references: list[RemoteReference] = []
    inline: dict[str, str] = {}
    for f in sorted(plan.files, key=lambda f: f.path):
        if f.remote_path is None:
            inline[f.path] = f.content
        else:
            references.append(
                RemoteReference(destination_path=f.path, remote_url=f"{base}/{f.remote_path}")
            )

    fetch = references + list(plan.assets)
    context = {
        "project_name": plan.project_name,
        "directories": _directories([r.destination_path for r in fetch]),
        "references": fetch,
    }
    result.base_url = base
    result.files = inline
    result.source_files = references
    result.setup_script = renderer.render("setup.sh.j2", context)
    result.setup_script_windows = renderer.render("setup.bat.j2", context)
    result.instructions = (
        "Write files directly, then run setup_script (or setup_script_windows) from the parent "
        f"directory to fetch source_files{' and assets' if plan.assets else ''} and install "
        "dependencies. Import from '@/design-system'."
    )
    return result


# ---------------------------------------------------------------------------
# Writing a plan to disk
# ---------------------------------------------------------------------------


async def write_project(result: ScaffoldResult, output_dir: str | Path) -> Path:
    """Write every file of an inline *result* under ``output_dir/<project_name>``.

    Remote assets are not downloaded.  Returns the project root.

    Raises:
        ValueError: If *result* was not serialised inline, or if the project
            root or any file path would land outside *output_dir*.
    """
    if result.mode is not OutputMode.INLINE:
        raise ValueError("write_project needs an inline scaffold result")

    base = Path(output_dir).resolve()
    root = _contained(base, base / result.project_name)
    if root == base:
        raise ValueError(f"project name {result.project_name!r} does not name a directory")
    targets = [(_contained(root, root / path), content) for path, content in result.files.items()]

    for target, content in targets:
        await asyncio.to_thread(_write_file, target, content)
    return root


def _contained(base: Path, candidate: Path) -> Path:
    resolved = candidate.resolve()
    if not resolved.is_relative_to(base):
        raise ValueError(f"{candidate} resolves outside {base}")
    return resolved


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")

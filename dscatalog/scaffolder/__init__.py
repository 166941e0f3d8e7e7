"""Project scaffolder -- turns a component selection into a buildable project.

Given the shared catalog structures, the scaffolder resolves the dependency
closure of the requested components and emits a Vite + React + TypeScript
file tree: boilerplate, barrel files, a synthesized ``src/App.tsx``, the
component sources and a trimmed icon manifest.

Quick usage::

    from dscatalog.scaffolder import ProjectScaffolder

    scaffolder = ProjectScaffolder(store, index, resolver, sources)
    result = scaffolder.scaffold("my-prototype", ["Button", "DataTable"], mode="inline")
"""

from dscatalog.scaffolder.entrypoint import EntryTemplate, select_template
from dscatalog.scaffolder.generator import EmptyResolutionError, ProjectScaffolder
from dscatalog.scaffolder.plan import (
    FileOrigin,
    OutputMode,
    ProjectFile,
    RemoteReference,
    ScaffoldPlan,
    ScaffoldResult,
    write_project,
)
from dscatalog.scaffolder.templates import TemplateRenderer

__all__ = [
    "EmptyResolutionError",
    "EntryTemplate",
    "FileOrigin",
    "OutputMode",
    "ProjectFile",
    "ProjectScaffolder",
    "RemoteReference",
    "ScaffoldPlan",
    "ScaffoldResult",
    "TemplateRenderer",
    "select_template",
    "write_project",
]

"""Main scaffolding orchestrator.

Takes a project name and a list of requested component names and produces a
ready-to-build Vite + React + TypeScript project manifest:

1. resolve each requested name to its dependency closure;
2. expand virtual components to their hosts (and hosts to their virtuals);
3. group the closure by layer;
4. generate component, layer and root barrels;
5. trim the icon manifest to the icons actually referenced;
6. pick and render an entry-point template;
7. assemble boilerplate, barrels, entry point and sources into one tree and
   serialise it for the requested output mode.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Optional

from ..catalog.models import CatalogError, ResolvedComponent
from ..catalog.resolver import DependencyResolver, VirtualComponentResolver
from ..catalog.search import SearchIndex
from ..catalog.sources import SourceReader, to_static_path
from ..catalog.store import CatalogStore
from ..config import ScaffoldConfig
from ..utils import sanitize_name, unique
from .barrels import generate_barrels
from .entrypoint import build_entry_point
from .icons import parse_icon_paths, render_trimmed_icon_paths, scan_sources
from .plan import (
    FileOrigin,
    OutputMode,
    ProjectFile,
    RemoteReference,
    ScaffoldPlan,
    ScaffoldResult,
    serialize_plan,
)
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class EmptyResolutionError(CatalogError):
    """Raised when none of the requested component names exist."""

    def __init__(self, not_found: list[str], suggestions: list[str]) -> None:
        self.not_found = not_found
        self.suggestions = suggestions
        super().__init__(f"No valid components found. Unknown: {', '.join(not_found)}")


# ---------------------------------------------------------------------------
# Boilerplate builders
# ---------------------------------------------------------------------------

DEV_PORT = 3000
FALLBACK_PROJECT_NAME = "prototype"
TOKENS_REMOTE_PATH = "tokens.css"
UTILITY_REMOTE_PATH = "utils.ts"


def project_directory(project_name: str) -> str:
    """Directory and package name for *project_name*: lowercase, no path or shell syntax."""
    return sanitize_name(project_name) or FALLBACK_PROJECT_NAME


def package_json(project_name: str) -> str:
    return json.dumps(
        {
            "name": project_name,
            "private": True,
            "type": "module",
            "scripts": {
                "dev": "vite",
                "build": "vite build",
                "preview": "vite preview",
            },
            "dependencies": {
                "react": "^19.0.0",
                "react-dom": "^19.0.0",
                "lucide-react": "^0.487.0",
            },
            "devDependencies": {
                "typescript": "~5.7.0",
                "vite": "^6.3.0",
                "@vitejs/plugin-react-swc": "^3.10.0",
                "@types/react": "^19.0.0",
                "@types/react-dom": "^19.0.0",
            },
        },
        indent=2,
    ) + "\n"


def tsconfig_json() -> str:
    return json.dumps(
        {
            "compilerOptions": {
                "target": "ES2020",
                "module": "ESNext",
                "moduleResolution": "bundler",
                "jsx": "react-jsx",
                "strict": True,
                "esModuleInterop": True,
                "skipLibCheck": True,
                "paths": {"@/*": ["./src/*"]},
                "baseUrl": ".",
            },
            "include": ["src"],
        },
        indent=2,
    ) + "\n"


# ---------------------------------------------------------------------------
# Main scaffolder
# ---------------------------------------------------------------------------


class ProjectScaffolder:
    """Turns a requested component set into a deterministic project tree.

    Holds references to the shared, read-only catalog structures; every call
    to :meth:`plan` or :meth:`scaffold` builds a fresh :class:`ScaffoldPlan`.
    """

    def __init__(
        self,
        store: CatalogStore,
        index: SearchIndex,
        resolver: DependencyResolver,
        sources: SourceReader,
        config: Optional[ScaffoldConfig] = None,
        source_base_url: str = "http://localhost:3000/source",
        site_base_url: str = "http://localhost:3000",
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.store = store
        self.index = index
        self.resolver = resolver
        self.virtuals = VirtualComponentResolver(store, resolver)
        self.sources = sources
        self.config = config or ScaffoldConfig()
        self.source_base_url = source_base_url.rstrip("/")
        self.site_base_url = site_base_url.rstrip("/")
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def scaffold(
        self,
        project_name: str,
        requested: Sequence[str],
        mode: OutputMode | str = OutputMode.URLS,
        include_fonts: bool = True,
    ) -> ScaffoldResult:
        """Build and serialise a project for *requested* components.

        Raises:
            EmptyResolutionError: If no requested name matches the catalog.
        """
        plan = self.plan(project_name, requested, include_fonts=include_fonts)
        return serialize_plan(plan, OutputMode(mode), self.source_base_url, self.renderer)

    def plan(
        self,
        project_name: str,
        requested: Sequence[str],
        include_fonts: bool = True,
    ) -> ScaffoldPlan:
        """Build the logical file tree without choosing an output mode.

        *project_name* is reduced to a safe directory name first; the plan and
        every generated file use that name.
        """
        directory = project_directory(project_name)
        if directory != project_name:
            logger.info("Project name %r scaffolded as %r", project_name, directory)
        project_name = directory
        plan = ScaffoldPlan(project_name=project_name)

        # 1. Resolve requested names
        self._resolve_requested(plan, requested)

        # 2. Pull in virtual components and their hosts
        self._expand_virtuals(plan)

        # 3. Group by layer, names sorted
        plan.layers = self._group_by_layer(plan.resolved)

        # 4. Barrels
        with_sources = {
            c.name for c in self._real_components(plan)
            if self.sources.component_files(c.name, c.layer)
        }
        barrels = generate_barrels(plan.layers, plan.virtual_to_host, self.config, with_sources)
        for path, content in barrels.items():
            plan.add(ProjectFile(path=path, content=content, origin=FileOrigin.BARREL))

        # 5. Trimmed icon manifest
        trimmed_icons = self._trimmed_icon_paths(plan)

        # 6. Entry point
        entry = build_entry_point(
            self.renderer,
            project_name,
            plan.requested,
            set(plan.resolved),
            self.config,
        )
        plan.template = entry.template.value

        # 7. Boilerplate, entry point, sources
        for file in self._boilerplate(project_name, include_fonts):
            plan.add(file)
        plan.add(ProjectFile(path="src/App.tsx", content=entry.content, origin=FileOrigin.GENERATED))
        self._add_sources(plan, trimmed_icons)
        self._add_infrastructure(plan, include_fonts)

        logger.debug(
            "Planned %s: %d components, %d files, template %s",
            project_name,
            len(plan.resolved),
            len(plan.files),
            plan.template,
        )
        return plan

    # -- Steps -------------------------------------------------------------

    def _resolve_requested(self, plan: ScaffoldPlan, requested: Sequence[str]) -> None:
        not_found: list[str] = []
        canonical: list[str] = []
        for name in requested:
            record = self.store.get(name)
            if record is None:
                not_found.append(name)
                continue
            canonical.append(record.name)
            for component in self.resolver.resolve(record.name):
                plan.resolved.setdefault(component.name, component)

        plan.not_found = unique(not_found)
        plan.requested = unique(canonical)

        if not plan.resolved:
            suggestions: list[str] = []
            for name in plan.not_found:
                suggestions.extend(self.index.suggest(name, self.config.scaffold_suggestions))
            raise EmptyResolutionError(plan.not_found, unique(suggestions))

        if plan.not_found:
            logger.info("Scaffold %s: unknown components %s", plan.project_name, plan.not_found)

    def _expand_virtuals(self, plan: ScaffoldPlan) -> None:
        expanded = self.virtuals.expand(plan.resolved)
        for name in expanded:
            if name in plan.resolved:
                continue
            record = self.store.get(name)
            if record is None:
                continue
            plan.resolved[name] = ResolvedComponent(
                name=record.name, layer=record.layer, kind=record.kind
            )
        plan.virtual_to_host = self.virtuals.host_map(plan.resolved)

    @staticmethod
    def _group_by_layer(resolved: dict[str, ResolvedComponent]) -> dict[int, list[str]]:
        layers: dict[int, list[str]] = {}
        for component in resolved.values():
            layers.setdefault(component.layer, []).append(component.name)
        return {layer: sorted(names) for layer, names in sorted(layers.items())}

    def _real_components(self, plan: ScaffoldPlan) -> list[ResolvedComponent]:
        """Resolved components that own source files (virtuals excluded)."""
        return [c for c in plan.resolved.values() if c.name not in plan.virtual_to_host]

    def _trimmed_icon_paths(self, plan: ScaffoldPlan) -> Optional[str]:
        icon = self.config.icon_component
        record = plan.resolved.get(icon)
        if record is None:
            return None

        icon_file = next(
            (
                f for f in self.sources.component_files(icon, record.layer)
                if f.path.endswith(self.config.icon_paths_file)
            ),
            None,
        )
        if icon_file is None:
            logger.debug("No %s bundled for %s; icon trimming skipped", self.config.icon_paths_file, icon)
            return None

        texts = [
            f.content
            for c in self._real_components(plan)
            for f in self.sources.component_files(c.name, c.layer)
        ]
        used = scan_sources(texts)
        available = parse_icon_paths(icon_file.content)

        static_dir = to_static_path(icon_file.path).rsplit("/", 1)[0]
        return render_trimmed_icon_paths(
            self.renderer,
            used,
            available,
            full_manifest_url=f"{self.source_base_url}/{to_static_path(icon_file.path)}",
            icons_dir_url=f"{self.source_base_url}/{static_dir}/icons",
        )

    def _boilerplate(self, project_name: str, include_fonts: bool) -> list[ProjectFile]:
        tokens_import: Optional[str] = None
        if self.sources.tokens is not None:
            tokens_import = "./" + self.sources.tokens.path
        context = {
            "project_name": project_name,
            "dev_port": DEV_PORT,
            "include_fonts": include_fonts,
            "font_family": self.config.font_family,
            "tokens_import": tokens_import,
        }
        rendered = {
            "package.json": package_json(project_name),
            "tsconfig.json": tsconfig_json(),
            "vite.config.ts": self.renderer.render("vite.config.ts.j2", context),
            "index.html": self.renderer.render("index.html.j2", context),
            "src/main.tsx": self.renderer.render("main.tsx.j2", context),
            "src/index.css": self.renderer.render("index.css.j2", context),
        }
        return [
            ProjectFile(path=path, content=content, origin=FileOrigin.BOILERPLATE)
            for path, content in rendered.items()
        ]

    def _add_sources(self, plan: ScaffoldPlan, trimmed_icons: Optional[str]) -> None:
        for component in self._real_components(plan):
            for source in self.sources.component_files(component.name, component.layer):
                path = f"src/{source.path}"
                if trimmed_icons is not None and source.path.endswith(self.config.icon_paths_file):
                    plan.add(ProjectFile(path=path, content=trimmed_icons, origin=FileOrigin.GENERATED))
                else:
                    plan.add(
                        ProjectFile(
                            path=path,
                            content=source.content,
                            origin=FileOrigin.SOURCE,
                            remote_path=to_static_path(source.path),
                        )
                    )

    def _add_infrastructure(self, plan: ScaffoldPlan, include_fonts: bool) -> None:
        tokens = self.sources.tokens
        if tokens is not None:
            plan.add(
                ProjectFile(
                    path=f"src/{tokens.path}",
                    content=tokens.content,
                    origin=FileOrigin.SOURCE,
                    remote_path=TOKENS_REMOTE_PATH,
                )
            )
        utility = self.sources.utility
        if utility is not None:
            plan.add(
                ProjectFile(
                    path=f"src/{utility.path}",
                    content=utility.content,
                    origin=FileOrigin.SOURCE,
                    remote_path=UTILITY_REMOTE_PATH,
                )
            )

        if include_fonts:
            family = self.config.font_family
            plan.assets.append(
                RemoteReference(
                    destination_path="src/styles/fonts.css",
                    remote_url=f"{self.site_base_url}/fonts.css",
                )
            )
            for variant in self.config.font_variants:
                font = f"fonts/{family}-{variant}/{family}-{variant}.woff2"
                plan.assets.append(
                    RemoteReference(
                        destination_path=f"public/{font}",
                        remote_url=f"{self.site_base_url}/{font}",
                    )
                )

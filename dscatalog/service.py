"""Catalog service -- the operations exposed to the transport layer.

:class:`CatalogService` is built once at startup from a catalog snapshot and
handed to request handlers.  It owns the read-only catalog structures (store,
search index, resolver, source reader) and the scaffolder, and reports usage
to an analytics tracker without ever waiting on it.

Lookup misses are answered with structured ``not found`` payloads rather
than exceptions; only catalog invariant violations raise, and those surface
at construction time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from .analytics.events import (
    ComponentListEvent,
    ComponentLookupEvent,
    ScaffoldEvent,
    SearchQueryEvent,
    SourceDeliveryEvent,
    TokenAccessEvent,
    ValidationEvent,
)
from .analytics.tracker import HttpTracker, NullTracker, Tracker, track_call
from .catalog.loader import load_snapshot
from .catalog.models import (
    CatalogSnapshot,
    ComponentRecord,
    CompositionRule,
    PropDetail,
    SourceFile,
)
from .catalog.resolver import DependencyResolver
from .catalog.search import SearchIndex
from .catalog.sources import SourceReader, to_static_path
from .catalog.store import CatalogStore
from .catalog.usage import ElementMapResponse, UsageReport, map_elements, validate_usage
from .config import ServiceConfig
from .scaffolder.generator import EmptyResolutionError, ProjectScaffolder
from .scaffolder.plan import OutputMode, ScaffoldResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class NotFoundResponse(BaseModel):
    error: str
    suggestions: list[str] = Field(default_factory=list)


class ComponentSummary(BaseModel):
    name: str
    layer: int
    layer_name: str
    kind: str
    description: str
    use_cases: list[str] = Field(default_factory=list)
    import_line: str
    score: Optional[int] = None


class SearchResponse(BaseModel):
    query: str
    matches: int
    components: list[ComponentSummary] = Field(default_factory=list)
    message: Optional[str] = None


class DependencySummary(BaseModel):
    name: str
    layer: int
    kind: str


class ComponentDetail(BaseModel):
    name: str
    layer: int
    layer_name: str
    kind: str
    description: str
    import_line: str
    props: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    use_cases: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    variants: Optional[list[str]] = None
    sizes: Optional[list[str]] = None
    statuses: Optional[list[str]] = None
    icon_list: Optional[list[str]] = None
    host_component: Optional[str] = None
    dependencies: list[DependencySummary] = Field(default_factory=list)
    prop_details: Optional[list[PropDetail]] = None
    extends: Optional[str] = None
    composition: Optional[CompositionRule] = None


class LayerGroup(BaseModel):
    layer: int
    layer_name: str
    count: int
    components: list[ComponentSummary] = Field(default_factory=list)


class ComponentListResponse(BaseModel):
    stats: dict[str, Any] = Field(default_factory=dict)
    layers: list[LayerGroup] = Field(default_factory=list)


class SourceFileRef(BaseModel):
    path: str
    content: Optional[str] = None
    url: Optional[str] = None


class ComponentSources(BaseModel):
    name: str
    layer: int
    files: list[SourceFileRef] = Field(default_factory=list)


class SourceResponse(BaseModel):
    component: str
    layer: int
    mode: OutputMode
    import_line: str
    base_url: Optional[str] = None
    files: list[SourceFileRef] = Field(default_factory=list)
    dependencies: list[ComponentSources] = Field(default_factory=list)
    infrastructure: list[SourceFileRef] = Field(default_factory=list)


class TokensResponse(BaseModel):
    available: bool
    category: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    content: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None


class ScaffoldFailure(BaseModel):
    error: str
    not_found: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CatalogService:
    """Process-wide catalog service built once from a snapshot.

    Attributes:
        config: Service configuration.
        store: Component records.
        index: Ranked search over ``store``.
        resolver: Memoised dependency resolution.
        sources: Bundled source files and tokens.
        scaffolder: Project scaffolder sharing the structures above.
        tracker: Analytics sink; never blocks or raises into operations.
    """

    def __init__(
        self,
        snapshot: CatalogSnapshot,
        config: Optional[ServiceConfig] = None,
        tracker: Optional[Tracker] = None,
    ) -> None:
        self.config = config or ServiceConfig()
        self.store = CatalogStore(snapshot.components, version=snapshot.version)
        self.index = SearchIndex(self.store)
        self.resolver = DependencyResolver(self.store)
        self.sources = SourceReader(snapshot.sources, snapshot.tokens, snapshot.utility)
        self.scaffolder = ProjectScaffolder(
            self.store,
            self.index,
            self.resolver,
            self.sources,
            config=self.config.scaffold,
            source_base_url=self.config.source_base_url,
            site_base_url=self.config.site_url,
        )
        self.tracker = tracker or self._default_tracker(self.config)
        logger.info(
            "Catalog service ready: %d components, %d source files",
            len(self.store),
            self.sources.file_count(),
        )

    # -- Construction --------------------------------------------------------

    @classmethod
    def from_snapshot(
        cls,
        snapshot: CatalogSnapshot,
        config: Optional[ServiceConfig] = None,
        tracker: Optional[Tracker] = None,
    ) -> "CatalogService":
        return cls(snapshot, config=config, tracker=tracker)

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        config: Optional[ServiceConfig] = None,
        tracker: Optional[Tracker] = None,
    ) -> "CatalogService":
        """Load the bundle at *path* and build the service from it."""
        return cls(load_snapshot(path), config=config, tracker=tracker)

    @classmethod
    def from_config(
        cls, config: ServiceConfig, tracker: Optional[Tracker] = None
    ) -> "CatalogService":
        if config.catalog_path is None:
            raise ValueError("ServiceConfig.catalog_path is not set")
        return cls.from_path(config.catalog_path, config=config, tracker=tracker)

    @staticmethod
    def _default_tracker(config: ServiceConfig) -> Tracker:
        if config.analytics_url:
            return HttpTracker(config.analytics_url)
        return NullTracker()

    # -- Helpers -------------------------------------------------------------

    def _summary(self, record: ComponentRecord, score: Optional[int] = None) -> ComponentSummary:
        return ComponentSummary(
            name=record.name,
            layer=record.layer,
            layer_name=record.layer_name,
            kind=record.kind,
            description=record.description,
            use_cases=list(record.use_cases),
            import_line=record.import_line,
            score=score,
        )

    def _not_found(self, name: str) -> NotFoundResponse:
        return NotFoundResponse(
            error=f'Component "{name}" not found',
            suggestions=self.index.suggest(name, self.config.suggestion_limit),
        )

    def _file_ref(
        self, file: SourceFile, mode: OutputMode, remote_path: Optional[str] = None
    ) -> SourceFileRef:
        static = remote_path or to_static_path(file.path)
        if mode is OutputMode.INLINE:
            return SourceFileRef(path=file.path, content=file.content)
        return SourceFileRef(path=static, url=f"{self.config.source_base_url}/{static}")

    # -- Operations ----------------------------------------------------------

    def search(self, query: str, limit: Optional[int] = None) -> SearchResponse:
        """Ranked component summaries for *query*."""
        with track_call(self.tracker, "search_components") as call:
            hits = self.index.search(query)[: limit or self.config.search_limit]
            self.tracker.emit(
                SearchQueryEvent(
                    query=query,
                    result_count=len(hits),
                    top_matches=[h.record.name for h in hits[:5]],
                )
            )
            if not hits:
                response = SearchResponse(
                    query=query,
                    matches=0,
                    message="No components matched. Try broader terms or list_components.",
                )
            else:
                response = SearchResponse(
                    query=query,
                    matches=len(hits),
                    components=[self._summary(h.record, h.score) for h in hits],
                )
            call.response_size = len(response.model_dump_json())
            return response

    def get_component(self, name: str) -> Union[ComponentDetail, NotFoundResponse]:
        """Full detail for *name*, or a not-found payload with suggestions."""
        with track_call(self.tracker, "get_component") as call:
            record = self.store.get(name)
            self.tracker.emit(
                ComponentLookupEvent(
                    component=record.name if record else name, found=record is not None
                )
            )
            if record is None:
                missing = self._not_found(name)
                call.response_size = len(missing.model_dump_json())
                return missing

            detail = ComponentDetail(
                name=record.name,
                layer=record.layer,
                layer_name=record.layer_name,
                kind=record.kind,
                description=record.description,
                import_line=record.import_line,
                props=list(record.prop_names),
                examples=list(record.examples),
                use_cases=list(record.use_cases),
                aliases=list(record.aliases),
                variants=record.variants,
                sizes=record.sizes,
                statuses=record.statuses,
                icon_list=record.icon_list,
                host_component=record.host_component,
                dependencies=[
                    DependencySummary(name=d.name, layer=d.layer, kind=d.kind)
                    for d in self.resolver.dependencies(record.name)
                ],
                prop_details=list(record.prop_details.props) if record.prop_details else None,
                extends=record.prop_details.extends if record.prop_details else None,
                composition=record.composition,
            )
            call.response_size = len(detail.model_dump_json())
            return detail

    def list_components(self, layer: Optional[int] = None) -> ComponentListResponse:
        """Components grouped by layer, highest layer first."""
        with track_call(self.tracker, "list_components") as call:
            grouped: dict[int, list[ComponentRecord]] = {}
            for record in self.store.list(layer):
                grouped.setdefault(record.layer, []).append(record)

            response = ComponentListResponse(
                stats=self.store.stats(),
                layers=[
                    LayerGroup(
                        layer=number,
                        layer_name=self.store.layer_name(number),
                        count=len(records),
                        components=[self._summary(r) for r in records],
                    )
                    for number, records in sorted(grouped.items(), reverse=True)
                ],
            )
            self.tracker.emit(ComponentListEvent(layer_filter=layer))
            call.response_size = len(response.model_dump_json())
            return response

    def get_component_source(
        self,
        name: str,
        include_dependencies: bool = True,
        mode: OutputMode | str = OutputMode.URLS,
    ) -> Union[SourceResponse, NotFoundResponse]:
        """Source files of *name* (and its dependencies) plus infrastructure files.

        Virtual components are answered with their host's files.
        """
        output = OutputMode(mode)
        with track_call(self.tracker, "get_component_source") as call:
            record = self.store.get(name)
            if record is None:
                missing = self._not_found(name)
                call.response_size = len(missing.model_dump_json())
                return missing

            owner = record
            if record.host_component is not None:
                owner = self.store.get(record.host_component) or record
            own_files = self.sources.component_files(owner.name, owner.layer)

            dependencies: list[ComponentSources] = []
            delivered: list[SourceFile] = list(own_files)
            if include_dependencies:
                seen = {owner.name}
                for dep in self.resolver.dependencies(record.name):
                    dep_record = self.store.get(dep.name)
                    if dep_record is None:
                        continue
                    if dep_record.is_virtual:
                        dep_record = self.store.get(dep_record.host_component)
                        if dep_record is None:
                            continue
                    if dep_record.name in seen:
                        continue
                    seen.add(dep_record.name)
                    files = self.sources.component_files(dep_record.name, dep_record.layer)
                    if not files:
                        continue
                    delivered.extend(files)
                    dependencies.append(
                        ComponentSources(
                            name=dep_record.name,
                            layer=dep_record.layer,
                            files=[self._file_ref(f, output) for f in files],
                        )
                    )

            infrastructure: list[SourceFileRef] = []
            if self.sources.tokens is not None:
                infrastructure.append(self._file_ref(self.sources.tokens, output, "tokens.css"))
                delivered.append(self.sources.tokens)
            if self.sources.utility is not None:
                infrastructure.append(self._file_ref(self.sources.utility, output, "utils.ts"))
                delivered.append(self.sources.utility)

            self.tracker.emit(
                SourceDeliveryEvent(
                    component=record.name,
                    file_count=len(delivered),
                    total_bytes=sum(len(f.content) for f in delivered),
                    dep_count=len(dependencies),
                    dep_names=[d.name for d in dependencies],
                )
            )

            response = SourceResponse(
                component=record.name,
                layer=record.layer,
                mode=output,
                import_line=record.import_line,
                base_url=self.config.source_base_url if output is OutputMode.URLS else None,
                files=[self._file_ref(f, output) for f in own_files],
                dependencies=dependencies,
                infrastructure=infrastructure,
            )
            call.response_size = len(response.model_dump_json())
            return response

    def get_tokens(self, category: Optional[str] = None) -> TokensResponse:
        """The design tokens stylesheet, whole or filtered to *category*."""
        with track_call(self.tracker, "get_design_tokens") as call:
            self.tracker.emit(TokenAccessEvent(category=category))
            categories = SourceReader.categories()
            tokens = self.sources.tokens
            if tokens is None:
                response = TokensResponse(
                    available=False,
                    category=category,
                    categories=categories,
                    error="No tokens stylesheet was loaded with the catalog",
                )
            elif category is None:
                response = TokensResponse(
                    available=True,
                    categories=categories,
                    content=tokens.content,
                    url=f"{self.config.source_base_url}/tokens.css",
                )
            else:
                subset = self.sources.tokens_by_category(category)
                response = TokensResponse(
                    available=subset is not None,
                    category=category,
                    categories=categories,
                    content=subset,
                    error=None if subset is not None else (
                        f'Unknown category "{category}". Available: {", ".join(categories)}'
                    ),
                )
            call.response_size = len(response.model_dump_json())
            return response

    def validate_component_usage(self, code: str) -> UsageReport:
        """Check component names, props and styling in JSX/TSX *code*."""
        with track_call(self.tracker, "validate_component_usage") as call:
            report = validate_usage(code, self.store, self.index)
            self.tracker.emit(
                ValidationEvent(
                    components_checked=len(report.components_found) + len(report.components_unknown),
                    issue_count=len(report.issues),
                    error_count=report.error_count,
                )
            )
            call.response_size = len(report.model_dump_json())
            return report

    def map_ui_elements(
        self, elements: list[str], include_token_suggestions: bool = False
    ) -> ElementMapResponse:
        """Best matching component for each UI element description."""
        with track_call(self.tracker, "map_ui_elements") as call:
            response = map_elements(elements, self.index, include_token_suggestions)
            matched = [m.match.name for m in response.mappings if m.match is not None]
            self.tracker.emit(
                SearchQueryEvent(
                    query=f"map_elements: {', '.join(elements)}",
                    result_count=len(matched),
                    top_matches=matched,
                )
            )
            call.response_size = len(response.model_dump_json())
            return response

    def scaffold_project(
        self,
        project_name: str,
        components: list[str],
        mode: OutputMode | str = OutputMode.URLS,
        include_fonts: bool = True,
    ) -> Union[ScaffoldResult, ScaffoldFailure]:
        """Scaffold a project; total resolution failure becomes a ``ScaffoldFailure``."""
        output = OutputMode(mode)
        with track_call(self.tracker, "scaffold_project") as call:
            try:
                result = self.scaffolder.scaffold(
                    project_name, components, mode=output, include_fonts=include_fonts
                )
            except EmptyResolutionError as exc:
                self.tracker.emit(
                    ScaffoldEvent(
                        project_name=project_name,
                        requested=list(components),
                        component_count=0,
                        not_found=exc.not_found,
                        mode=output.value,
                    )
                )
                failure = ScaffoldFailure(
                    error=str(exc), not_found=exc.not_found, suggestions=exc.suggestions
                )
                call.response_size = len(failure.model_dump_json())
                return failure

            self.tracker.emit(
                ScaffoldEvent(
                    project_name=project_name,
                    requested=list(components),
                    component_count=result.component_count,
                    not_found=result.not_found,
                    mode=output.value,
                    template=result.template,
                )
            )
            call.response_size = len(result.model_dump_json())
            return result

"""Shared pytest fixtures for the catalog service test suite.

Provides reusable fixtures for:
- A small but realistic catalog bundle (records, sources, tokens, utility)
- The read-only catalog structures built from it
- A scaffolder and a service wired to an in-memory tracker
- Bundle files on disk in JSON and YAML form
"""

from __future__ import annotations

import json
import logging
import textwrap
from pathlib import Path
from typing import Any

import pytest
import yaml

from dscatalog.analytics import MemoryTracker
from dscatalog.catalog import (
    CatalogSnapshot,
    CatalogStore,
    ComponentRecord,
    DependencyResolver,
    SearchIndex,
    SourceReader,
    VirtualComponentResolver,
    parse_snapshot,
)
from dscatalog.config import ServiceConfig
from dscatalog.scaffolder import ProjectScaffolder
from dscatalog.service import CatalogService


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo ``setup_logging`` so caplog sees records in every test."""
    yield
    package_logger = logging.getLogger("dscatalog")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Catalog bundle
# ---------------------------------------------------------------------------

def _component(
    name: str,
    layer: int,
    kind: str,
    description: str,
    use_cases: list[str],
    aliases: list[str],
    props: list[str],
    dependencies: tuple[str, ...] = (),
    **extra: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "name": name,
        "layer": layer,
        "type": kind,
        "description": description,
        "useCases": use_cases,
        "aliases": aliases,
        "props": props,
        "dependencies": list(dependencies),
        "imports": "@/design-system",
        "examples": [f"<{name} />"],
    }
    record.update(extra)
    return record


COMPONENTS: list[dict[str, Any]] = [
    # -- Layer 2: utilities --
    _component(
        "Stack", 2, "layout",
        "Vertical stack layout with consistent gap spacing",
        ["Vertical layout of form fields", "Page section spacing"],
        ["vstack", "column"],
        ["gap", "align", "children"],
    ),
    _component(
        "Inline", 2, "layout",
        "Horizontal layout that lines items up in a row",
        ["Toolbar actions", "Button groups"],
        ["hstack", "row"],
        ["gap", "align", "wrap"],
    ),
    _component(
        "Grid", 2, "layout",
        "Responsive grid of equal-width columns",
        ["Card grids", "Dashboard tiles"],
        ["columns layout"],
        ["columns", "gap"],
    ),
    # -- Layer 3: primitives --
    _component(
        "Icon", 3, "media",
        "SVG icon from the icon library",
        ["Decorate buttons and menus", "Status indicators"],
        ["glyph", "svg"],
        ["name", "size", "color"],
        iconList=["add", "calendar", "check", "close", "filter", "more-horizontal",
                  "search", "sort-ascending", "star", "user"],
    ),
    _component(
        "Button", 3, "action",
        "Clickable button that triggers an action",
        ["Submit a form", "Primary page action", "Open a dialog"],
        ["cta", "action button"],
        ["kind", "size", "disabled", "onClick", "startElement"],
        ("Icon",),
        variants=["primary", "secondary", "tertiary", "danger"],
        sizes=["small", "medium", "large"],
        propDetails={
            "props": [
                {"name": "kind", "type": "ButtonKind",
                 "values": ["primary", "secondary", "tertiary", "danger"]},
                {"name": "size", "type": "ButtonSize", "values": ["small", "medium", "large"]},
                {"name": "disabled", "type": "boolean"},
                {"name": "onClick", "type": "() => void", "required": True,
                 "description": "Called when the button is pressed"},
                {"name": "startElement", "type": "ReactNode"},
                {"name": "children", "type": "ReactNode", "required": True},
            ],
        },
    ),
    _component(
        "Typography", 3, "text",
        "Text styles for headings and body copy",
        ["Page titles", "Body paragraphs"],
        ["type", "font"],
        ["variant", "as"],
    ),
    _component(
        "Heading", 3, "text",
        "Section and page heading",
        ["Page titles", "Section headers"],
        ["title", "header"],
        ["level"],
        hostComponent="Typography",
    ),
    _component(
        "Text", 3, "text",
        "Body text paragraph",
        ["Body copy", "Helper text"],
        ["paragraph", "copy"],
        ["size", "tone"],
        hostComponent="Typography",
    ),
    _component(
        "Input", 3, "form",
        "Single-line text input field with label and validation message",
        ["Form text entry", "Search boxes", "Email and password fields"],
        ["text field", "textbox", "form input"],
        ["label", "value", "onChange", "error", "placeholder"],
    ),
    _component(
        "Select", 3, "form",
        "Native select for picking one option from a list",
        ["Choose one option in a form"],
        ["picker"],
        ["label", "options", "value", "onChange"],
    ),
    _component(
        "Checkbox", 3, "form",
        "Checkbox for boolean or multi-select choices",
        ["Accept terms", "Select table rows"],
        ["tick box"],
        ["label", "checked", "onChange", "indeterminate"],
    ),
    _component(
        "Switch", 3, "form",
        "Toggle switch for on/off settings",
        ["Enable notifications", "Feature toggles"],
        ["toggle"],
        ["label", "checked", "onChange"],
    ),
    _component(
        "Link", 3, "navigation",
        "Inline hyperlink",
        ["Navigate to another page"],
        ["anchor", "hyperlink"],
        ["href", "external"],
    ),
    # -- Layer 4: composites --
    _component(
        "Card", 4, "container",
        "Surface that groups related content",
        ["Dashboard tiles", "Summary panels"],
        ["panel", "tile"],
        ["title", "actions", "children"],
        ("Heading", "Stack"),
    ),
    _component(
        "Modal", 4, "overlay",
        "Dialog window that overlays the page and requires user attention",
        ["Confirm a destructive action", "Focused form in a dialog",
         "Popup dialog over page content"],
        ["dialog", "popup", "lightbox"],
        ["open", "onClose", "title", "footer"],
        ("Button", "Heading", "Stack"),
    ),
    _component(
        "Drawer", 4, "overlay",
        "Panel that slides in from the edge of the screen over the page",
        ["Filters side panel", "Detail overlay"],
        ["side panel", "sheet"],
        ["open", "onClose", "side"],
        ("Button", "Heading"),
    ),
    _component(
        "Dropdown", 4, "menu",
        "Menu of actions opened from a trigger button",
        ["Action menu in table row", "Overflow menu"],
        ["menu", "dropdown menu", "kebab menu"],
        ["items", "trigger", "onSelect"],
        ("Button", "Icon"),
    ),
    _component(
        "ComboBox", 4, "form",
        "Text input with a filterable dropdown list of options",
        ["Searchable select in a form", "Autocomplete input with validation error"],
        ["autocomplete", "typeahead"],
        ["options", "value", "onChange", "error", "label"],
        ("Input", "Icon"),
    ),
    _component(
        "Tabs", 4, "navigation",
        "Tabbed navigation between related views",
        ["Switch between sections of a page"],
        ["tab bar"],
        ["tabs", "activeTab", "onChange"],
        ("Inline",),
    ),
    # -- Layer 5: patterns --
    _component(
        "DataTable", 5, "data display",
        "Table for displaying rows of structured data with sorting and selection",
        ["List of records with sortable columns", "Row selection with bulk actions",
         "Column visibility toggle"],
        ["data grid", "table", "grid view"],
        ["columns", "rows", "onSort", "selectable", "rowActions"],
        ("Checkbox", "Dropdown", "Icon", "Text", "Inline"),
    ),
    _component(
        "GlobalNav", 5, "navigation",
        "Top navigation bar with product logo and user menu",
        ["Primary app navigation", "Account menu"],
        ["top nav", "header bar", "navbar"],
        ["logo", "items", "user"],
        ("Icon", "Inline", "Link"),
    ),
    _component(
        "LocalNav", 5, "navigation",
        "Side navigation listing sections of the current app",
        ["Secondary navigation", "Settings sections"],
        ["side nav", "sidebar"],
        ["items", "activeItem"],
        ("Link", "Stack"),
    ),
    # -- Layer 6: layouts --
    _component(
        "DocuSignShell", 6, "layout",
        "Full-page application shell with global and local navigation",
        ["Page layout for app screens", "Settings page frame", "List page frame"],
        ["app shell", "page layout", "app frame"],
        ["title", "globalNav", "localNav", "children"],
        ("GlobalNav", "LocalNav", "Stack"),
        composition={
            "slotProps": {
                "globalNav": {"type": "GlobalNavProps", "description": "Top navigation config"},
                "localNav": {"type": "ReactNode", "description": "Side navigation element"},
            },
            "typicalChildren": ["DataTable", "Card"],
        },
    ),
]


LAYER_DIRS = {
    2: "2-utilities",
    3: "3-primitives",
    4: "4-composites",
    5: "5-patterns",
    6: "6-layouts",
}


ICON_PATHS_TS = textwrap.dedent("""\
    export interface IconPath {
      path: string;
      viewBox?: string;
    }

    export const iconPaths: Record<string, IconPath> = {
      'add': { path: 'M12 5v14M5 12h14' },
      'calendar': { path: 'M3 4h18v18H3z', viewBox: '0 0 24 24' },
      'check': { path: 'M5 13l4 4L19 7' },
      'close': { path: 'M6 6l12 12M18 6L6 18' },
      'filter': { path: 'M3 5h18l-7 8v6l-4 2v-8z', viewBox: '0 0 24 24' },
      'more-horizontal': { path: 'M5 12h.01M12 12h.01M19 12h.01' },
      'search': { path: 'M11 19a8 8 0 1 1 0-16 8 8 0 0 1 0 16zM21 21l-4-4' },
      'sort-ascending': { path: 'M3 18h6M3 12h12M3 6h18' },
      'star': { path: 'M12 2l3 7h7l-5.5 4.5 2 7.5L12 17l-6.5 4 2-7.5L2 9h7z' },
      'user': { path: 'M12 12a5 5 0 1 0 0-10 5 5 0 0 0 0 10zM3 22a9 9 0 0 1 18 0' },
    };
""")


# Extra body text per component, used where the source references icons
_SOURCE_BODIES: dict[str, str] = {
    "Dropdown": '<Button kind="tertiary"><Icon name="more-horizontal" /></Button>',
    "DataTable": (
        '<Icon name="sort-ascending" size={12} />\n'
        "      <Icon name={'filter'} />"
    ),
    "GlobalNav": '<Icon name="user" />',
    "Typography": "<h1>{children}</h1>",
}


def _component_sources(name: str, layer: int) -> list[dict[str, str]]:
    directory = f"design-system/{LAYER_DIRS[layer]}/{name}"
    body = _SOURCE_BODIES.get(name, "<div>{children}</div>")
    tsx = textwrap.dedent(f"""\
        import styles from './{name}.module.css';

        export function {name}({{ children }}: {{ children?: React.ReactNode }}) {{
          return (
            <div className={{styles.root}}>
              {body}
            </div>
          );
        }}
    """)
    if name == "Typography":
        tsx += textwrap.dedent("""\

            export function Heading({ children }: { children?: React.ReactNode }) {
              return <h2>{children}</h2>;
            }

            export function Text({ children }: { children?: React.ReactNode }) {
              return <p>{children}</p>;
            }
        """)
    files = [
        {"path": f"{directory}/{name}.tsx", "content": tsx},
        {"path": f"{directory}/{name}.module.css", "content": ".root {\n  display: block;\n}\n"},
    ]
    if name == "Icon":
        files.append({"path": f"{directory}/iconPaths.ts", "content": ICON_PATHS_TS})
    return files


TOKENS_CSS = textwrap.dedent("""\
    /* Design tokens */
    :root {
      --ink-bg-canvas: #ffffff;
      --ink-font-default: #130032;
      --ink-border-subtle: #e0e0e0;
      --ink-spacing-100: 4px;
      --ink-spacing-200: 8px;
      --ink-spacing-300: 16px;
      --ink-font-size-md: 14px;
      --ink-font-weight-bold: 600;
      --ink-radius-md: 4px;
      --ink-shadow-low: 0 1px 2px rgba(0, 0, 0, 0.2);
      --ink-size-icon: 16px;
    }
""")


UTILITY_TS = textwrap.dedent("""\
    export function cx(...names: Array<string | false | undefined>): string {
      return names.filter(Boolean).join(' ');
    }
""")


# Prop details shipped beside the registry rather than inside a record
INPUT_PROP_DETAILS: dict[str, Any] = {
    "Input": {
        "props": [
            {"name": "label", "type": "string", "required": True, "description": "Visible field label"},
            {"name": "value", "type": "string"},
            {"name": "onChange", "type": "(value: string) => void"},
            {"name": "error", "type": "string"},
            {"name": "placeholder", "type": "string"},
        ],
        "extends": "InputHTMLAttributes<HTMLInputElement>",
    },
}


def build_bundle() -> dict[str, Any]:
    """The catalog bundle in the shape the build script writes it."""
    sources: dict[str, list[dict[str, str]]] = {}
    for component in COMPONENTS:
        if "hostComponent" in component:
            continue
        key = f"{component['name']}:{component['layer']}"
        sources[key] = _component_sources(component["name"], component["layer"])

    return {
        "registry": {
            "version": "2.4.0",
            "lastUpdated": "2026-03-01",
            "components": {c["name"]: {k: v for k, v in c.items() if k != "name"}
                           for c in COMPONENTS},
        },
        "sources": sources,
        "tokens": {"path": "design-system/1-tokens/tokens.css", "content": TOKENS_CSS},
        "utility": {"path": "lib/utils.ts", "content": UTILITY_TS},
        "propDetails": INPUT_PROP_DETAILS,
    }


@pytest.fixture
def bundle() -> dict[str, Any]:
    """A fresh, mutable copy of the sample catalog bundle."""
    return build_bundle()


@pytest.fixture
def snapshot(bundle: dict[str, Any]) -> CatalogSnapshot:
    """The sample bundle validated into a snapshot."""
    return parse_snapshot(bundle)


# ---------------------------------------------------------------------------
# Catalog structures
# ---------------------------------------------------------------------------

@pytest.fixture
def store(snapshot: CatalogSnapshot) -> CatalogStore:
    return CatalogStore(snapshot.components, version=snapshot.version)


@pytest.fixture
def index(store: CatalogStore) -> SearchIndex:
    return SearchIndex(store)


@pytest.fixture
def resolver(store: CatalogStore) -> DependencyResolver:
    return DependencyResolver(store)


@pytest.fixture
def virtuals(store: CatalogStore, resolver: DependencyResolver) -> VirtualComponentResolver:
    return VirtualComponentResolver(store, resolver)


@pytest.fixture
def sources(snapshot: CatalogSnapshot) -> SourceReader:
    return SourceReader(snapshot.sources, snapshot.tokens, snapshot.utility)


@pytest.fixture
def make_store():
    """Factory building a store from minimal ``(name, layer, deps, host)`` tuples.

    Usage:
        def test_cycle(make_store):
            store = make_store(("A", 3, ["B"]), ("B", 3, ["A"]))
    """
    def factory(*entries: tuple) -> CatalogStore:
        records = []
        for entry in entries:
            name, layer, *rest = entry
            deps = rest[0] if rest else []
            host = rest[1] if len(rest) > 1 else None
            records.append(
                ComponentRecord(name=name, layer=layer, dependencies=deps, host_component=host)
            )
        return CatalogStore(records)

    return factory


# ---------------------------------------------------------------------------
# Scaffolder & service
# ---------------------------------------------------------------------------

@pytest.fixture
def scaffolder(
    store: CatalogStore,
    index: SearchIndex,
    resolver: DependencyResolver,
    sources: SourceReader,
) -> ProjectScaffolder:
    """Scaffolder with default config and the localhost base URLs."""
    return ProjectScaffolder(store, index, resolver, sources)


@pytest.fixture
def tracker() -> MemoryTracker:
    return MemoryTracker()


@pytest.fixture
def service_config() -> ServiceConfig:
    return ServiceConfig(site_base_url="https://catalog.example.com")


@pytest.fixture
def service(
    snapshot: CatalogSnapshot, service_config: ServiceConfig, tracker: MemoryTracker
) -> CatalogService:
    """Catalog service recording analytics into ``tracker``."""
    return CatalogService(snapshot, config=service_config, tracker=tracker)


# ---------------------------------------------------------------------------
# Bundle files on disk
# ---------------------------------------------------------------------------

@pytest.fixture
def bundle_json(tmp_path: Path, bundle: dict[str, Any]) -> Path:
    """The sample bundle written as JSON."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(bundle, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def bundle_yaml(tmp_path: Path, bundle: dict[str, Any]) -> Path:
    """The sample bundle written as YAML."""
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(bundle, sort_keys=False), encoding="utf-8")
    return path

"""Command-line access to the catalog service.

Usage::

    python -m dscatalog.cli --catalog bundle.json search "data table"
    python -m dscatalog.cli --catalog bundle.json show Modal
    python -m dscatalog.cli --catalog bundle.json scaffold my-prototype Button DataTable --output ./out
    python -m dscatalog.cli --catalog bundle.json validate src/App.tsx
    python -m dscatalog.cli --catalog bundle.json map "search input" "data table" --tokens
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.panel import Panel
from rich.table import Table

from .config import ServiceConfig
from .scaffolder.plan import OutputMode, write_project
from .service import CatalogService, NotFoundResponse, ScaffoldFailure
from .utils import (
    console,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    setup_logging,
)


def _cmd_search(service: CatalogService, query: str, limit: Optional[int]) -> int:
    response = service.search(query, limit=limit)
    if not response.components:
        print_warning(response.message or "No matches")
        return 1

    table = Table(title=f"Results for {query!r}", header_style="bold cyan")
    table.add_column("Score", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Layer")
    table.add_column("Description")
    for summary in response.components:
        table.add_row(
            str(summary.score),
            summary.name,
            f"{summary.layer}-{summary.layer_name}",
            summary.description,
        )
    console.print(table)
    return 0


def _cmd_show(service: CatalogService, name: str) -> int:
    detail = service.get_component(name)
    if isinstance(detail, NotFoundResponse):
        print_error(detail.error)
        if detail.suggestions:
            print_warning(f"Did you mean: {', '.join(detail.suggestions)}")
        return 1

    body = [
        detail.description,
        "",
        f"[bold]Import:[/bold] {detail.import_line}",
        f"[bold]Props:[/bold] {', '.join(detail.props) or '-'}",
        f"[bold]Dependencies:[/bold] {', '.join(d.name for d in detail.dependencies) or '-'}",
    ]
    if detail.host_component:
        body.append(f"[bold]Exported from:[/bold] {detail.host_component}")
    console.print(
        Panel("\n".join(body), title=f"{detail.name} ({detail.layer}-{detail.layer_name})")
    )
    return 0


def _cmd_validate(service: CatalogService, path: Path) -> int:
    report = service.validate_component_usage(path.read_text(encoding="utf-8"))
    if not report.issues:
        print_success(f"No issues in {len(report.components_found)} components ({path})")
        return 0

    table = Table(title=f"Issues in {path}", header_style="bold cyan")
    table.add_column("Severity")
    table.add_column("Component", style="bold")
    table.add_column("Message")
    table.add_column("Suggestion", style="dim")
    for issue in report.issues:
        style = "red" if issue.severity == "error" else "yellow"
        table.add_row(
            f"[{style}]{issue.severity}[/{style}]",
            issue.component,
            issue.message,
            issue.suggestion or "",
        )
    console.print(table)
    return 0 if report.valid else 1


def _cmd_map(service: CatalogService, elements: list[str], tokens: bool) -> int:
    response = service.map_ui_elements(elements, include_token_suggestions=tokens)
    table = Table(title="Element mapping", header_style="bold cyan")
    table.add_column("Element")
    table.add_column("Component", style="bold")
    table.add_column("Confidence")
    table.add_column("Alternatives", style="dim")
    if tokens:
        table.add_column("Tokens")
    for mapping in response.mappings:
        row = [
            mapping.element,
            mapping.match.name if mapping.match else "-",
            mapping.confidence,
            ", ".join(a.name for a in mapping.alternatives) or "-",
        ]
        if tokens:
            row.append(", ".join(mapping.token_suggestions or []))
        table.add_row(*row)
    console.print(table)
    if response.suggested_hierarchy:
        console.print(f"Hierarchy: {response.suggested_hierarchy}")
    return 1 if response.unmapped and len(response.unmapped) == len(elements) else 0


def _cmd_scaffold(
    service: CatalogService,
    project_name: str,
    components: list[str],
    output: Optional[Path],
    include_fonts: bool,
) -> int:
    result = service.scaffold_project(
        project_name, components, mode=OutputMode.INLINE, include_fonts=include_fonts
    )
    if isinstance(result, ScaffoldFailure):
        print_error(result.error)
        if result.suggestions:
            print_warning(f"Did you mean: {', '.join(result.suggestions)}")
        return 1

    print_summary_table(
        {
            "Project": result.project_name,
            "Template": result.template or "-",
            "Components": str(result.component_count),
            "Files": str(result.total_files),
            "Not found": ", ".join(result.not_found) or "-",
        },
        title="Scaffold",
    )

    if output is not None:
        root = asyncio.run(write_project(result, output))
        print_success(f"Project written to {root}")
        console.print(f"Next: {result.quick_start}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="dscatalog",
        description="Search the component catalog and scaffold projects from it.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--catalog", type=Path, help="Path to the catalog bundle (JSON or YAML)")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Ranked keyword search")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=None)

    show = sub.add_parser("show", help="Show one component")
    show.add_argument("name")

    scaffold = sub.add_parser("scaffold", help="Scaffold a project")
    scaffold.add_argument("project_name")
    scaffold.add_argument("components", nargs="+")
    scaffold.add_argument("--output", type=Path, default=None, help="Write the project here")
    scaffold.add_argument("--no-fonts", action="store_true", help="Use system fonts")

    validate = sub.add_parser("validate", help="Check component usage in a JSX/TSX file")
    validate.add_argument("file", type=Path)

    map_parser = sub.add_parser("map", help="Map UI element descriptions to components")
    map_parser.add_argument("elements", nargs="+")
    map_parser.add_argument("--tokens", action="store_true", help="Include token categories")

    args = parser.parse_args(argv)

    config = ServiceConfig.from_env()
    if args.catalog is not None:
        config = config.model_copy(update={"catalog_path": args.catalog})
    if args.log_level:
        config = config.model_copy(update={"log_level": args.log_level})
    setup_logging(config.log_level)

    if config.catalog_path is None:
        print_error("No catalog given: pass --catalog or set DSCATALOG_CATALOG_PATH")
        return 2

    service = CatalogService.from_config(config)

    if args.command == "search":
        return _cmd_search(service, args.query, args.limit)
    if args.command == "show":
        return _cmd_show(service, args.name)
    if args.command == "validate":
        return _cmd_validate(service, args.file)
    if args.command == "map":
        return _cmd_map(service, args.elements, args.tokens)
    return _cmd_scaffold(
        service, args.project_name, args.components, args.output, not args.no_fonts
    )


if __name__ == "__main__":
    sys.exit(main())

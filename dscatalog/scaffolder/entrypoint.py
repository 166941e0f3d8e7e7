"""Entry-point (``src/App.tsx``) synthesis.

A template is picked from the anchor components the caller asked for, not
from the expanded closure, so a primitive pulled in transitively never
switches the template.  Each template imports exactly the components its
body renders, and only ones present in the resolved set.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..config import ScaffoldConfig
from .templates import TemplateRenderer


class EntryTemplate(str, Enum):
    """Entry-point layouts, in selection priority order."""
    LIST_PAGE = "list_page"
    SETTINGS_FORM = "settings_form"
    DASHBOARD = "dashboard"
    SHELL = "shell"
    PLACEHOLDER = "placeholder"


# Components a template uses when they happen to be in the resolved set
BUTTON = "Button"
STACK = "Stack"
HEADING = "Heading"

CHOICE_INPUTS = frozenset({"Select", "ComboBox", "RadioGroup"})
TOGGLE_INPUTS = frozenset({"Checkbox", "Switch"})

SAMPLE_COLUMNS = [
    {"key": "name", "header": "Name"},
    {"key": "owner", "header": "Owner"},
    {"key": "status", "header": "Status"},
    {"key": "updated", "header": "Last updated"},
]

SAMPLE_ROWS = [
    {"id": "1", "name": "Master services agreement", "owner": "Avery Chen", "status": "Completed", "updated": "2026-03-02"},
    {"id": "2", "name": "Offer letter", "owner": "Jordan Patel", "status": "Waiting for others", "updated": "2026-03-01"},
    {"id": "3", "name": "Vendor NDA", "owner": "Sam Rivera", "status": "Draft", "updated": "2026-02-27"},
    {"id": "4", "name": "Lease renewal", "owner": "Riley Kim", "status": "Voided", "updated": "2026-02-20"},
]

SAMPLE_FIELDS = [
    ("fullName", "Full name", "Avery Chen"),
    ("email", "Email address", "avery@example.com"),
    ("language", "Language", "English"),
    ("notifications", "Email notifications", True),
    ("timezone", "Time zone", "UTC"),
    ("signature", "Signature style", "Classic"),
    ("bio", "Bio", ""),
]

SAMPLE_METRICS = [
    {"title": "Action required", "value": "12"},
    {"title": "Waiting for others", "value": "8"},
    {"title": "Expiring soon", "value": "3"},
    {"title": "Completed", "value": "47"},
]


@dataclass
class EntryPoint:
    """A rendered entry point and the components it imports."""

    template: EntryTemplate
    content: str
    imports: list[str] = field(default_factory=list)


def _first_present(candidates: Sequence[str], names: Collection[str]) -> Optional[str]:
    for candidate in candidates:
        if candidate in names:
            return candidate
    return None


def select_template(requested: Collection[str], config: ScaffoldConfig) -> EntryTemplate:
    """Pick the entry template from the requested anchor components."""
    shell = _first_present(config.shell_components, requested)
    table = _first_present(config.table_components, requested)
    form = _first_present(config.form_components, requested)
    card = _first_present(config.card_components, requested)
    grid = _first_present(config.grid_components, requested)

    if shell and table:
        return EntryTemplate.LIST_PAGE
    if shell and form:
        return EntryTemplate.SETTINGS_FORM
    if card and grid:
        return EntryTemplate.DASHBOARD
    if shell:
        return EntryTemplate.SHELL
    return EntryTemplate.PLACEHOLDER


def _form_fields(inputs: Sequence[str]) -> list[dict[str, Any]]:
    fields: list[dict[str, Any]] = []
    for index, component in enumerate(inputs):
        key, label, value = SAMPLE_FIELDS[index % len(SAMPLE_FIELDS)]
        if index >= len(SAMPLE_FIELDS):
            key = f"{key}{index}"
        if component in TOGGLE_INPUTS:
            kind, value = "toggle", bool(value) if isinstance(value, bool) else False
        elif component in CHOICE_INPUTS:
            kind = "choice"
            value = value if isinstance(value, str) and value else "Option A"
        else:
            kind = "text"
            value = value if isinstance(value, str) else ""
        fields.append({"component": component, "key": key, "label": label, "value": value, "kind": kind})
    return fields


def build_entry_point(
    renderer: TemplateRenderer,
    project_name: str,
    requested: Collection[str],
    resolved: Collection[str],
    config: ScaffoldConfig,
) -> EntryPoint:
    """Select and render the entry point for a scaffolded project.

    Args:
        requested: Canonical names the caller asked for (anchor detection).
        resolved: Every name in the expanded closure (what may be imported).
    """
    template = select_template(requested, config)

    def optional(name: str) -> Optional[str]:
        return name if name in resolved else None

    context: dict[str, Any] = {
        "project_name": project_name,
        "shell": _first_present(config.shell_components, requested),
        "table": None,
        "card": None,
        "grid": None,
        "fields": [],
        "button": optional(BUTTON),
        "stack": optional(STACK),
        "heading": optional(HEADING),
        "components": sorted(resolved),
        "import_path": config.import_path,
    }

    if template is EntryTemplate.LIST_PAGE:
        context["table"] = _first_present(config.table_components, requested)
        context["columns"] = SAMPLE_COLUMNS
        context["rows"] = SAMPLE_ROWS
    elif template is EntryTemplate.SETTINGS_FORM:
        inputs = [c for c in config.form_components if c in requested]
        context["fields"] = _form_fields(inputs)
    elif template is EntryTemplate.DASHBOARD:
        context["card"] = _first_present(config.card_components, requested)
        context["grid"] = _first_present(config.grid_components, requested)
        context["metrics"] = SAMPLE_METRICS
    elif template is EntryTemplate.PLACEHOLDER:
        context["shell"] = None
        context["button"] = None
        context["heading"] = None

    used = {
        context["shell"],
        context["table"],
        context["card"],
        context["grid"],
        context["button"],
        context["stack"],
        context["heading"],
        *(f["component"] for f in context["fields"]),
    }
    imports = sorted(name for name in used if name and name in resolved)
    context["imports"] = imports

    content = renderer.render(f"app/{template.value}.tsx.j2", context)
    return EntryPoint(template=template, content=content, imports=imports)

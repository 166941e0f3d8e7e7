"""Checks of generated code against the catalog, and element-to-component mapping.

:func:`validate_usage` scans JSX/TSX text for component tags and reports
unknown components, missing required props, unknown props, invalid literal
values, slot misuse and hardcoded colors or pixel spacing.  It works on
regexes and a small attribute scanner, not a parser, so it reports likely
problems rather than proving correctness.

:func:`map_elements` maps free-text UI element descriptions ("search input",
"data table") to the best-ranked catalog component.
"""

from __future__ import annotations

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..utils import unique
from .models import ComponentRecord
from .search import SearchIndex
from .store import CatalogStore

JSX_COMPONENT_RE = re.compile(r"<([A-Z][A-Za-z0-9]*)")
HARDCODED_COLOR_RE = re.compile(
    r"""(?:color|background|border)(?:[Cc]olor)?(?:-color)?:\s*['"]?#[0-9a-fA-F]{3,8}['"]?"""
)
HARDCODED_SPACING_RE = re.compile(
    r"""(?:padding|margin|gap|[Pp]adding|[Mm]argin|[Gg]ap)"""
    r"""(?:Top|Right|Bottom|Left|Inline|Block)?:\s*['"]?\d+px['"]?"""
)
_ATTRIBUTE_NAME_RE = re.compile(r"[A-Za-z][\w-]*")

# Accepted on every component in addition to its declared props
COMMON_PROPS = frozenset({
    "children", "className", "style", "key", "ref", "id",
    "data-testid", "aria-label", "aria-describedby",
    "onClick", "onChange", "onBlur", "onFocus", "onSubmit",
    "onKeyDown", "onKeyUp", "onMouseEnter", "onMouseLeave",
})

KNOWN_PROPS_SHOWN = 8
UNKNOWN_SUGGESTIONS = 3

Severity = Literal["error", "warning"]
Confidence = Literal["high", "medium", "low", "none"]

HIGH_CONFIDENCE_SCORE = 15
MEDIUM_CONFIDENCE_SCORE = 7
ALTERNATIVES = 3

# Token categories worth looking at per element keyword
TOKEN_SUGGESTIONS: dict[str, list[str]] = {
    "layout": ["spacing", "color"],
    "navigation": ["color", "spacing"],
    "form": ["spacing", "color", "typography"],
    "input": ["spacing", "color", "radius"],
    "button": ["color", "spacing", "typography"],
    "table": ["spacing", "color"],
    "card": ["spacing", "color", "radius", "shadow"],
    "modal": ["spacing", "color", "shadow", "radius"],
    "text": ["typography", "color"],
    "icon": ["color"],
}
DEFAULT_TOKEN_SUGGESTIONS = ["spacing", "color"]


# ---------------------------------------------------------------------------
# Usage validation
# ---------------------------------------------------------------------------


class UsageIssue(BaseModel):
    severity: Severity
    component: str = Field(..., description="Component name, or 'global' for stylesheet issues")
    message: str
    suggestion: Optional[str] = None


class UsageReport(BaseModel):
    valid: bool
    components_found: list[str] = Field(default_factory=list)
    components_unknown: list[str] = Field(default_factory=list)
    issues: list[UsageIssue] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")


def used_components(code: str) -> list[str]:
    """Capitalised JSX tag names in *code*, in first-seen order."""
    return list(dict.fromkeys(JSX_COMPONENT_RE.findall(code)))


def attribute_blocks(code: str, name: str) -> list[str]:
    """The attribute text of every ``<name ...>`` tag in *code*.

    Braces and quoted strings are skipped over, so ``onClick={() => a > b}``
    does not end the tag early.  A tag with no attributes gives ``""``.
    """
    blocks: list[str] = []
    for match in re.finditer(rf"<{re.escape(name)}(?=[\s/>])", code):
        i = start = match.end()
        depth = 0
        quote: Optional[str] = None
        while i < len(code):
            ch = code[i]
            if quote:
                if ch == quote and code[i - 1] != "\\":
                    quote = None
            elif ch in "\"'`":
                quote = ch
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
            elif depth == 0 and (ch == ">" or (ch == "/" and code[i + 1 : i + 2] == ">")):
                blocks.append(code[start:i])
                break
            i += 1
    return blocks


def attribute_names(block: str) -> list[str]:
    """Attribute names in *block*, ignoring anything inside braces or quotes."""
    top: list[str] = []
    depth = 0
    quote: Optional[str] = None
    for i, ch in enumerate(block):
        if quote:
            if ch == quote and block[i - 1] != "\\":
                quote = None
            ch = " "
        elif ch in "\"'`":
            quote = ch
            ch = " "
        elif ch == "{":
            depth += 1
            ch = " "
        elif ch == "}":
            depth -= 1
            ch = " "
        elif depth:
            ch = " "
        top.append(ch)
    return _ATTRIBUTE_NAME_RE.findall("".join(top))


def _literal_values(block: str, prop: str) -> list[str]:
    return re.findall(rf"""(?<![\w-]){re.escape(prop)}\s*=\s*["']([^"']*)["']""", block)


def _prop_issues(record: ComponentRecord, code: str) -> list[UsageIssue]:
    details = record.prop_details
    if details is None:
        return []
    name = record.name
    blocks = attribute_blocks(code, name)
    used = [set(attribute_names(block)) for block in blocks]
    issues: list[UsageIssue] = []

    for prop in details.props:
        if not prop.required or prop.name == "children":
            continue
        if any(prop.name not in names for names in used):
            issues.append(UsageIssue(
                severity="warning",
                component=name,
                message=f'Required prop "{prop.name}" may be missing on <{name}>',
                suggestion=prop.description,
            ))

    if not details.extends_html:
        known = COMMON_PROPS | {p.name for p in details.props}
        shown = ", ".join(p.name for p in details.props[:KNOWN_PROPS_SHOWN])
        if len(details.props) > KNOWN_PROPS_SHOWN:
            shown += "..."
        unknown = unique(
            attribute
            for names in used
            for attribute in sorted(names)
            if attribute not in known and not attribute.startswith(("data-", "aria-"))
        )
        for attribute in unknown:
            issues.append(UsageIssue(
                severity="warning",
                component=name,
                message=f'Unknown prop "{attribute}" on <{name}>',
                suggestion=f"Known props: {shown}",
            ))

    for prop in details.props:
        if not prop.values:
            continue
        invalid = unique(
            value
            for block in blocks
            for value in _literal_values(block, prop.name)
            if value not in prop.values
        )
        for value in invalid:
            issues.append(UsageIssue(
                severity="warning",
                component=name,
                message=f'Invalid value "{value}" for prop "{prop.name}" on <{name}>',
                suggestion=f"Valid values: {', '.join(prop.values)}",
            ))
    return issues


def _slot_issues(record: ComponentRecord, code: str) -> list[UsageIssue]:
    if record.composition is None:
        return []
    issues: list[UsageIssue] = []
    for slot, definition in record.composition.slot_props.items():
        # slots typed as a props object must not receive JSX
        if "Props" not in definition.type:
            continue
        if re.search(rf"{re.escape(slot)}\s*=\s*\{{\s*<", code):
            issues.append(UsageIssue(
                severity="error",
                component=record.name,
                message=(
                    f'Slot "{slot}" expects a props object ({definition.type}), not JSX. '
                    "Pass a config object instead."
                ),
                suggestion=f"Use {slot}={{{{ ... }}}} instead of {slot}={{<Component />}}",
            ))
    return issues


def _style_issues(code: str) -> list[UsageIssue]:
    issues: list[UsageIssue] = []
    colors = HARDCODED_COLOR_RE.findall(code)
    if colors:
        issues.append(UsageIssue(
            severity="warning",
            component="global",
            message=f"Found {len(colors)} hardcoded color(s). Use design tokens instead.",
            suggestion=(
                "Use var(--ink-font-color-default), var(--ink-bg-color-default), etc. "
                'See the "color" token category.'
            ),
        ))
    spacing = HARDCODED_SPACING_RE.findall(code)
    if spacing:
        issues.append(UsageIssue(
            severity="warning",
            component="global",
            message=f"Found {len(spacing)} hardcoded spacing value(s). Use design tokens instead.",
            suggestion="Use var(--ink-spacing-100) through var(--ink-spacing-700).",
        ))
    return issues


def validate_usage(code: str, store: CatalogStore, index: SearchIndex) -> UsageReport:
    """Check the components used in *code* against the catalog."""
    used = used_components(code)
    names = store.all_names()
    known = [n for n in used if n in names]
    unknown = [n for n in used if n not in names]

    issues: list[UsageIssue] = []
    for name in unknown:
        suggestions = index.suggest(name, UNKNOWN_SUGGESTIONS)
        issues.append(UsageIssue(
            severity="error",
            component=name,
            message=f'Component "{name}" is not in the design system',
            suggestion=f"Did you mean: {', '.join(suggestions)}?" if suggestions else None,
        ))

    for name in known:
        record = store.get(name)
        if record is None:
            continue
        issues.extend(_prop_issues(record, code))
        issues.extend(_slot_issues(record, code))

    issues.extend(_style_issues(code))
    return UsageReport(
        valid=not any(i.severity == "error" for i in issues),
        components_found=known,
        components_unknown=unknown,
        issues=issues,
    )


# ---------------------------------------------------------------------------
# Element mapping
# ---------------------------------------------------------------------------


class ElementMatch(BaseModel):
    name: str
    layer: int
    kind: str
    description: str
    import_line: str


class Alternative(BaseModel):
    name: str
    layer: int
    reason: str


class ElementMapping(BaseModel):
    element: str
    match: Optional[ElementMatch] = None
    alternatives: list[Alternative] = Field(default_factory=list)
    confidence: Confidence = "none"
    score: int = 0
    token_suggestions: Optional[list[str]] = None


class ElementMapResponse(BaseModel):
    mappings: list[ElementMapping] = Field(default_factory=list)
    unmapped: list[str] = Field(default_factory=list)
    suggested_hierarchy: str = ""


def token_suggestions(element: str) -> list[str]:
    """Token categories relevant to *element*, by keyword."""
    lower = element.lower()
    found: list[str] = []
    for keyword, categories in TOKEN_SUGGESTIONS.items():
        if keyword in lower:
            found.extend(categories)
    return list(dict.fromkeys(found)) or list(DEFAULT_TOKEN_SUGGESTIONS)


def confidence_for(score: int) -> Confidence:
    if score >= HIGH_CONFIDENCE_SCORE:
        return "high"
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return "medium"
    return "low"


def map_elements(
    elements: list[str], index: SearchIndex, include_tokens: bool = False
) -> ElementMapResponse:
    """Best catalog component (plus up to three alternatives) per element description."""
    mappings: list[ElementMapping] = []
    unmapped: list[str] = []

    for element in elements:
        tokens = token_suggestions(element) if include_tokens else None
        hits = index.search(element)
        if not hits:
            unmapped.append(element)
            mappings.append(ElementMapping(element=element, token_suggestions=tokens))
            continue

        top = hits[0]
        record = top.record
        mappings.append(ElementMapping(
            element=element,
            match=ElementMatch(
                name=record.name,
                layer=record.layer,
                kind=record.kind,
                description=record.description,
                import_line=record.import_line,
            ),
            alternatives=[
                Alternative(name=h.record.name, layer=h.record.layer, reason=h.record.description)
                for h in hits[1 : 1 + ALTERNATIVES]
            ],
            confidence=confidence_for(top.score),
            score=top.score,
            token_suggestions=tokens,
        ))

    matched = sorted(
        (m.match for m in mappings if m.match is not None),
        key=lambda match: match.layer,
        reverse=True,
    )
    return ElementMapResponse(
        mappings=mappings,
        unmapped=unmapped,
        suggested_hierarchy=" > ".join(f"{m.name} (L{m.layer})" for m in matched),
    )

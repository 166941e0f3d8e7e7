"""Pydantic v2 models for the component catalog.

Defines the strongly-typed shape of a catalog bundle: component records,
bundled source files, and the snapshot that ties them together.  Bundles
written by the catalog build script use camelCase keys; the models accept
those keys as aliases and expose snake_case attributes.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


LAYER_NAMES: dict[int, str] = {
    1: "tokens",
    2: "utilities",
    3: "primitives",
    4: "composites",
    5: "patterns",
    6: "layouts",
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CatalogError(Exception):
    """Base class for catalog and scaffolding errors."""


class CatalogIntegrityError(CatalogError):
    """Raised at construction time when the catalog violates an invariant."""


# ---------------------------------------------------------------------------
# Prop and composition details
# ---------------------------------------------------------------------------


class PropDetail(BaseModel):
    """One extracted prop of a component."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = Field(default="")
    required: bool = Field(default=False)
    description: Optional[str] = Field(default=None)
    default: Optional[str] = Field(default=None)
    values: Optional[list[str]] = Field(default=None, description="Allowed literal values")


class PropDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    props: list[PropDetail] = Field(default_factory=list)
    extends: Optional[str] = Field(default=None, description="Base props type, e.g. HTMLAttributes")

    @property
    def extends_html(self) -> bool:
        return self.extends is not None and "htmlattributes" in self.extends.lower()


class SlotProp(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    description: str = Field(default="")


class CompositionRule(BaseModel):
    """How a component is meant to be composed with others."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    slot_props: dict[str, SlotProp] = Field(default_factory=dict, alias="slotProps")
    typical_parents: list[str] = Field(default_factory=list, alias="typicalParents")
    typical_children: list[str] = Field(default_factory=list, alias="typicalChildren")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class ComponentRecord(BaseModel):
    """One catalog component.

    A record with ``host_component`` set is *virtual*: it has no source files
    of its own and is exported from its host's directory.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Unique, case-sensitive component name")
    layer: int = Field(..., ge=1, le=6, description="Rank in the layer hierarchy")
    kind: str = Field(default="", alias="type", description="Free-text category label")
    description: str = Field(default="")
    use_cases: list[str] = Field(default_factory=list, alias="useCases")
    aliases: list[str] = Field(default_factory=list)
    prop_names: list[str] = Field(default_factory=list, alias="props")
    dependencies: list[str] = Field(default_factory=list)
    host_component: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("hostComponent", "sourceComponent", "host_component"),
        serialization_alias="hostComponent",
    )
    imports: str = Field(default="@/design-system")
    examples: list[str] = Field(default_factory=list)
    variants: Optional[list[str]] = Field(default=None)
    sizes: Optional[list[str]] = Field(default=None)
    statuses: Optional[list[str]] = Field(default=None)
    icon_list: Optional[list[str]] = Field(default=None, alias="iconList")
    prop_details: Optional[PropDetails] = Field(default=None, alias="propDetails")
    composition: Optional[CompositionRule] = Field(default=None)

    @field_validator("aliases", "use_cases", "prop_names", "dependencies", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _check_self_references(self) -> "ComponentRecord":
        if self.name in self.dependencies:
            raise ValueError(f"component {self.name!r} depends on itself")
        if self.host_component == self.name:
            raise ValueError(f"component {self.name!r} cannot host itself")
        return self

    @property
    def is_virtual(self) -> bool:
        return self.host_component is not None

    @property
    def layer_name(self) -> str:
        return LAYER_NAMES.get(self.layer, "unknown")

    @property
    def import_line(self) -> str:
        return f"import {{ {self.name} }} from '{self.imports}';"


class SourceFile(BaseModel):
    """A bundled source file, addressed by its bundle-relative path."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="e.g. 'design-system/3-primitives/Button/Button.tsx'")
    content: str = Field(default="")


class ResolvedComponent(BaseModel):
    """One entry of a bottom-up dependency resolution."""

    model_config = ConfigDict(frozen=True)

    name: str
    layer: int
    kind: str = ""


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


class CatalogSnapshot(BaseModel):
    """Immutable catalog bundle as loaded at process start.

    Accepts either the flat shape (``components`` at the top level) or the
    bundle shape produced by the catalog build script, where component
    metadata sits under ``registry``.  ``components`` may be a list of
    records or a mapping of name to record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = Field(default="")
    last_updated: str = Field(default="", alias="lastUpdated")
    components: list[ComponentRecord] = Field(default_factory=list)
    sources: dict[str, list[SourceFile]] = Field(
        default_factory=dict, description="Source files keyed by 'Name:layer'"
    )
    tokens: Optional[SourceFile] = Field(default=None)
    utility: Optional[SourceFile] = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_bundle(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        registry = data.pop("registry", None)
        if isinstance(registry, dict):
            for key in ("version", "lastUpdated", "components"):
                if key in registry and key not in data:
                    data[key] = registry[key]

        components = data.get("components")
        if isinstance(components, dict):
            data["components"] = [
                {"name": name, **meta} if isinstance(meta, dict) and "name" not in meta else meta
                for name, meta in components.items()
            ]

        # Extracted prop details ship beside the registry, keyed by name
        prop_details = data.pop("propDetails", None)
        if isinstance(prop_details, dict) and isinstance(data.get("components"), list):
            merged = []
            for meta in data["components"]:
                if (
                    isinstance(meta, dict)
                    and meta.get("name") in prop_details
                    and "propDetails" not in meta
                    and "prop_details" not in meta
                ):
                    meta = {**meta, "propDetails": prop_details[meta["name"]]}
                merged.append(meta)
            data["components"] = merged
        return data

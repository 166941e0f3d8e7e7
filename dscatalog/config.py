"""Catalog service configuration.

Centralised, typed configuration for the service and the project scaffolder.
All settings use Pydantic v2 models so they are validated at construction
time and can be serialised to/from JSON or environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


DEFAULT_SITE_URL = "http://localhost:3000"


class ScaffoldConfig(BaseModel):
    """Knobs for project scaffolding: directory names, anchors, icon handling."""

    layer_dirs: dict[int, str] = Field(
        default_factory=lambda: {
            1: "1-tokens",
            2: "2-utilities",
            3: "3-primitives",
            4: "4-composites",
            5: "5-patterns",
            6: "6-layouts",
        },
        description="Directory name under src/design-system/ for each layer",
    )
    design_system_dir: str = Field(default="src/design-system")
    import_path: str = Field(
        default="@/design-system", description="Import specifier used by generated code"
    )

    # Icon asset trimming
    icon_component: str = Field(default="Icon")
    icon_paths_file: str = Field(default="iconPaths.ts")

    # Entry-point template anchors (matched against the requested names)
    shell_components: list[str] = Field(default=["AppShell", "DocuSignShell"])
    table_components: list[str] = Field(default=["DataTable"])
    form_components: list[str] = Field(
        default=["Input", "Select", "Checkbox", "Switch", "TextArea", "ComboBox", "RadioGroup"]
    )
    card_components: list[str] = Field(default=["Card"])
    grid_components: list[str] = Field(default=["Grid"])

    scaffold_suggestions: int = Field(
        default=3, ge=0, description="Suggestions per unknown name on total failure"
    )
    font_family: str = Field(default="DSIndigo")
    font_variants: list[str] = Field(
        default=[
            "Regular", "Light", "Medium", "SemiBold", "Bold", "Black",
            "Italic", "LightItalic", "MediumItalic", "SemiBoldItalic", "BoldItalic", "BlackItalic",
        ]
    )

    def layer_dir(self, layer: int) -> str:
        """Directory name for *layer*, falling back to ``<n>-layer``."""
        return self.layer_dirs.get(layer, f"{layer}-layer")


class ServiceConfig(BaseModel):
    """Global catalog service configuration.

    Instances are created once at startup (usually by :meth:`from_env`) and
    handed to :class:`dscatalog.service.CatalogService`.
    """

    catalog_path: Optional[Path] = Field(default=None)
    site_base_url: str = Field(default=DEFAULT_SITE_URL)
    search_limit: int = Field(default=10, ge=1)
    suggestion_limit: int = Field(default=5, ge=0)
    analytics_url: Optional[str] = Field(default=None)
    log_level: str = Field(default="INFO")
    scaffold: ScaffoldConfig = Field(default_factory=ScaffoldConfig)

    # ------------------------------------------------------------------
    # Derived URLs
    # ------------------------------------------------------------------

    @property
    def site_url(self) -> str:
        """Site root without a trailing slash."""
        return self.site_base_url.rstrip("/")

    @property
    def source_base_url(self) -> str:
        """Base URL for static component source files."""
        return f"{self.site_url}/source"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ServiceConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build a ``ServiceConfig`` from environment variables.

        Recognised variables (all optional):
            DSCATALOG_CATALOG_PATH, DSCATALOG_BASE_URL, VERCEL_URL,
            DSCATALOG_SEARCH_LIMIT, DSCATALOG_ANALYTICS_URL, DSCATALOG_LOG_LEVEL.

        The site URL comes from ``DSCATALOG_BASE_URL`` first, then
        ``VERCEL_URL`` (served over https), then the localhost default.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("DSCATALOG_CATALOG_PATH"):
            kwargs["catalog_path"] = Path(os.environ["DSCATALOG_CATALOG_PATH"])
        if os.environ.get("DSCATALOG_BASE_URL"):
            kwargs["site_base_url"] = os.environ["DSCATALOG_BASE_URL"]
        elif os.environ.get("VERCEL_URL"):
            kwargs["site_base_url"] = f"https://{os.environ['VERCEL_URL']}"
        if os.environ.get("DSCATALOG_SEARCH_LIMIT"):
            kwargs["search_limit"] = int(os.environ["DSCATALOG_SEARCH_LIMIT"])
        if os.environ.get("DSCATALOG_ANALYTICS_URL"):
            kwargs["analytics_url"] = os.environ["DSCATALOG_ANALYTICS_URL"]
        if os.environ.get("DSCATALOG_LOG_LEVEL"):
            kwargs["log_level"] = os.environ["DSCATALOG_LOG_LEVEL"]
        return cls(**kwargs)

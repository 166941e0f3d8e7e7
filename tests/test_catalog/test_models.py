"""Unit tests for the catalog Pydantic models (dscatalog.catalog.models).

Tests cover:
- ComponentRecord aliases, defaults and derived properties
- Self-reference validation
- CatalogSnapshot bundle unwrapping (registry shape, mapping of components)
- Prop details on records or beside the registry, and composition rules
"""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from dscatalog.catalog.models import CatalogSnapshot, ComponentRecord, PropDetails


# ---------------------------------------------------------------------------
# ComponentRecord
# ---------------------------------------------------------------------------


class TestComponentRecord:
    @pytest.mark.unit
    def test_camel_case_aliases(self):
        record = ComponentRecord.model_validate(
            {
                "name": "Button",
                "layer": 3,
                "type": "action",
                "useCases": ["Submit a form"],
                "props": ["kind", "size"],
                "iconList": None,
            }
        )
        assert record.kind == "action"
        assert record.use_cases == ["Submit a form"]
        assert record.prop_names == ["kind", "size"]
        assert record.icon_list is None

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["hostComponent", "sourceComponent", "host_component"])
    def test_host_component_accepts_all_spellings(self, key: str):
        record = ComponentRecord.model_validate({"name": "Heading", "layer": 3, key: "Typography"})
        assert record.host_component == "Typography"
        assert record.is_virtual

    @pytest.mark.unit
    def test_defaults(self):
        record = ComponentRecord(name="Stack", layer=2)
        assert record.kind == ""
        assert record.aliases == []
        assert record.dependencies == []
        assert record.imports == "@/design-system"
        assert record.variants is None
        assert not record.is_virtual

    @pytest.mark.unit
    def test_null_lists_become_empty(self):
        record = ComponentRecord.model_validate(
            {"name": "Stack", "layer": 2, "aliases": None, "dependencies": None}
        )
        assert record.aliases == []
        assert record.dependencies == []

    @pytest.mark.unit
    def test_layer_name_and_import_line(self):
        record = ComponentRecord(name="Modal", layer=4)
        assert record.layer_name == "composites"
        assert record.import_line == "import { Modal } from '@/design-system';"

    @pytest.mark.unit
    @pytest.mark.parametrize("layer", [0, 7])
    def test_layer_out_of_range_rejected(self, layer: int):
        with pytest.raises(ValidationError):
            ComponentRecord(name="Odd", layer=layer)

    @pytest.mark.unit
    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            ComponentRecord(name="", layer=3)

    @pytest.mark.unit
    def test_self_dependency_rejected(self):
        with pytest.raises(ValidationError, match="depends on itself"):
            ComponentRecord(name="Loop", layer=3, dependencies=["Loop"])

    @pytest.mark.unit
    def test_self_host_rejected(self):
        with pytest.raises(ValidationError, match="cannot host itself"):
            ComponentRecord(name="Loop", layer=3, host_component="Loop")

    @pytest.mark.unit
    def test_records_are_frozen(self):
        record = ComponentRecord(name="Stack", layer=2)
        with pytest.raises(ValidationError):
            record.layer = 3


# ---------------------------------------------------------------------------
# CatalogSnapshot
# ---------------------------------------------------------------------------


class TestCatalogSnapshot:
    @pytest.mark.unit
    def test_unwraps_registry_bundle(self, bundle: dict[str, Any]):
        snapshot = CatalogSnapshot.model_validate(bundle)
        assert snapshot.version == "2.4.0"
        assert snapshot.last_updated == "2026-03-01"
        assert [c.name for c in snapshot.components][:3] == ["Stack", "Inline", "Grid"]
        assert snapshot.tokens is not None
        assert snapshot.tokens.path == "design-system/1-tokens/tokens.css"
        assert snapshot.utility is not None

    @pytest.mark.unit
    def test_mapping_keys_become_names(self):
        snapshot = CatalogSnapshot.model_validate(
            {"components": {"Button": {"layer": 3}, "Modal": {"layer": 4}}}
        )
        assert [c.name for c in snapshot.components] == ["Button", "Modal"]

    @pytest.mark.unit
    def test_flat_shape(self):
        snapshot = CatalogSnapshot.model_validate(
            {"version": "1", "components": [{"name": "Button", "layer": 3}]}
        )
        assert snapshot.version == "1"
        assert snapshot.components[0].name == "Button"
        assert snapshot.sources == {}
        assert snapshot.tokens is None

    @pytest.mark.unit
    def test_sources_keyed_by_name_and_layer(self, bundle: dict[str, Any]):
        snapshot = CatalogSnapshot.model_validate(bundle)
        files = snapshot.sources["Button:3"]
        assert [f.path for f in files] == [
            "design-system/3-primitives/Button/Button.tsx",
            "design-system/3-primitives/Button/Button.module.css",
        ]

    @pytest.mark.unit
    def test_invalid_component_fails_fast(self):
        with pytest.raises(ValidationError):
            CatalogSnapshot.model_validate({"components": [{"name": "Broken", "layer": "top"}]})


# ---------------------------------------------------------------------------
# Prop details and composition
# ---------------------------------------------------------------------------


class TestPropDetails:
    @pytest.mark.unit
    def test_record_level_details(self):
        record = ComponentRecord.model_validate(
            {
                "name": "Button",
                "layer": 3,
                "propDetails": {
                    "props": [{"name": "kind", "values": ["primary"]}, {"name": "onClick"}],
                },
            }
        )
        assert [p.name for p in record.prop_details.props] == ["kind", "onClick"]
        assert record.prop_details.props[1].required is False
        assert record.prop_details.extends_html is False

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("extends", "expected"),
        [
            ("HTMLAttributes<HTMLDivElement>", True),
            ("InputHTMLAttributes<HTMLInputElement>", True),
            ("BaseProps", False),
            (None, False),
        ],
    )
    def test_extends_html(self, extends, expected: bool):
        assert PropDetails(extends=extends).extends_html is expected

    @pytest.mark.unit
    def test_bundle_level_details_merged_by_name(self):
        snapshot = CatalogSnapshot.model_validate(
            {
                "components": {"Input": {"layer": 3}, "Modal": {"layer": 4}},
                "propDetails": {
                    "Input": {"props": [{"name": "label", "required": True}]},
                    "Ghost": {"props": []},
                },
            }
        )
        by_name = {c.name: c for c in snapshot.components}
        assert by_name["Input"].prop_details.props[0].required is True
        assert by_name["Modal"].prop_details is None

    @pytest.mark.unit
    def test_record_details_win_over_bundle_details(self):
        snapshot = CatalogSnapshot.model_validate(
            {
                "components": [
                    {"name": "Input", "layer": 3, "propDetails": {"props": [{"name": "own"}]}}
                ],
                "propDetails": {"Input": {"props": [{"name": "shared"}]}},
            }
        )
        assert snapshot.components[0].prop_details.props[0].name == "own"

    @pytest.mark.unit
    def test_composition_aliases(self, snapshot):
        shell = next(c for c in snapshot.components if c.name == "DocuSignShell")
        assert shell.composition.slot_props["globalNav"].type == "GlobalNavProps"
        assert shell.composition.typical_children == ["DataTable", "Card"]
        assert shell.composition.typical_parents == []

"""Tests for building and serializing the navigation tree."""

import json
from pathlib import Path

import yaml
from export_factory import ExportBuilder, prim

from rustdoc_md.conversion_options import ConversionOptions
from rustdoc_md.navigation_builder import module_subtree, sidebar_key
from rustdoc_md.navigation_node import CATEGORY, DOC
from rustdoc_md.output_layout import ITEM, MODULE, SINGLE
from rustdoc_md.render_navigation import (
    GENERATED_HEADER,
    navigation_path,
    render_navigation,
)
from rustdoc_md.run_conversion import ConversionResult, convert


def _workspace(
    tmp_path: Path, mode: str, *, collapsed: bool = True
) -> ConversionResult:
    builder = ExportBuilder(docs="Crate docs.")
    geo = builder.module("geo")
    shapes = builder.module("shapes", parent=geo)
    builder.struct("Point", [builder.field("x", prim("f64"))], parent=geo)
    builder.struct("Circle", parent=shapes)
    builder.function("version", [], prim("u32"))
    builder.struct("Area")
    options = ConversionOptions(
        output_root=tmp_path, mode=mode, navigation_collapsed=collapsed
    )
    return convert(builder.load(), options)


def test_counts_match_documents_and_modules(tmp_path: Path) -> None:
    """Verify one doc node per document and one category per module."""
    for mode in (ITEM, MODULE, SINGLE):
        result = _workspace(tmp_path, mode)
        assert result.navigation.count(DOC) == len(result.units)
        assert result.navigation.count(CATEGORY) == 3  # noqa: PLR2004


def test_item_mode_tree_shape(tmp_path: Path) -> None:
    """Verify the overview first, then child modules, then sorted items."""
    result = _workspace(tmp_path, ITEM)
    root = result.navigation

    assert root.label == "mycrate"
    assert root.path == "/mycrate"
    labels = [(child.kind, child.label) for child in root.children]
    assert labels == [
        (DOC, "Overview"),
        (CATEGORY, "geo"),
        (DOC, "Area"),
        (DOC, "version"),
    ]
    overview = root.children[0]
    assert overview.doc_id == "mycrate/index"
    assert overview.path == "/mycrate"

    geo = root.children[1]
    assert geo.path is None
    assert [(c.kind, c.label) for c in geo.children] == [
        (CATEGORY, "shapes"),
        (DOC, "Point"),
    ]
    point = geo.children[1]
    assert point.doc_id == "mycrate/geo/Point"
    assert point.path == "/mycrate/geo/Point"


def test_module_mode_categories_link_pages(tmp_path: Path) -> None:
    """Verify that module categories carry the href of their page."""
    result = _workspace(tmp_path, MODULE)
    geo = module_subtree(result.navigation, ("mycrate", "geo"))

    assert geo is not None
    assert geo.path == "/mycrate/geo"
    assert geo.children[0].label == "Overview"
    assert geo.children[0].doc_id == "mycrate/geo/index"


def test_single_mode_labels_document_by_title(tmp_path: Path) -> None:
    """Verify that the only document is labelled with its title."""
    result = _workspace(tmp_path, SINGLE)
    [doc] = [n for n in result.navigation.walk() if n.kind == DOC]
    assert doc.label == "mycrate"


def test_collapsed_flag(tmp_path: Path) -> None:
    """Verify that every category takes the configured collapsed state."""
    expanded = _workspace(tmp_path, ITEM, collapsed=False)
    collapsed = _workspace(tmp_path, ITEM, collapsed=True)

    assert all(
        not n.collapsed for n in expanded.navigation.walk() if n.kind == CATEGORY
    )
    assert all(n.collapsed for n in collapsed.navigation.walk() if n.kind == CATEGORY)


def test_module_subtree(tmp_path: Path) -> None:
    """Verify module-scoped extraction, and None for unknown modules."""
    result = _workspace(tmp_path, ITEM)
    shapes = module_subtree(result.navigation, ["mycrate", "geo", "shapes"])

    assert shapes is not None
    assert [c.label for c in shapes.children] == ["Circle"]
    assert module_subtree(result.navigation, ["mycrate", "nowhere"]) is None


def test_module_sidebars(tmp_path: Path) -> None:
    """Verify that every non-root module gets its own sidebar."""
    result = _workspace(tmp_path, ITEM)
    assert sorted(result.module_navigation) == ["mycrate_geo", "mycrate_geo_shapes"]


def test_sidebar_key() -> None:
    """Verify that sidebar keys are valid identifiers."""
    assert sidebar_key(["my-crate", "geo"]) == "my_crate_geo"
    assert sidebar_key(["mycrate"]) == "mycrate"


def test_json_serialization(tmp_path: Path) -> None:
    """Verify the JSON sidebar shape."""
    result = _workspace(tmp_path, ITEM)
    data = json.loads(
        render_navigation(result.navigation, result.module_navigation, ".json")
    )

    [root] = data["sidebar"]
    assert root["type"] == "category"
    assert root["label"] == "mycrate"
    assert root["href"] == "/mycrate"
    assert root["items"][0] == {
        "type": "doc",
        "id": "mycrate/index",
        "label": "Overview",
        "href": "/mycrate",
    }
    assert set(data["modules"]) == {"mycrate_geo", "mycrate_geo_shapes"}


def test_yaml_matches_json(tmp_path: Path) -> None:
    """Verify that YAML output carries the same data as JSON output."""
    result = _workspace(tmp_path, ITEM)
    as_json = json.loads(
        render_navigation(result.navigation, result.module_navigation, ".json")
    )
    as_yaml = yaml.safe_load(
        render_navigation(result.navigation, result.module_navigation, ".yml")
    )
    assert as_yaml == as_json


def test_typescript_module(tmp_path: Path) -> None:
    """Verify the generated TypeScript sidebar module."""
    result = _workspace(tmp_path, ITEM)
    text = render_navigation(result.navigation, result.module_navigation, ".ts")

    assert text.startswith(GENERATED_HEADER)
    assert "export const rustSidebars: Record<string, any[]> = {" in text
    assert '"mycrate": [' in text
    assert '"mycrate_geo": [' in text
    js = render_navigation(result.navigation, result.module_navigation, ".js")
    assert "export const rustSidebars = {" in js


def test_navigation_path(tmp_path: Path) -> None:
    """Verify the default and configured navigation file locations."""
    assert navigation_path(tmp_path, "mycrate", None) == (
        tmp_path / "mycrate" / "sidebar.json"
    )
    custom = tmp_path / "site" / "sidebars.ts"
    assert navigation_path(tmp_path, "mycrate", custom) == custom

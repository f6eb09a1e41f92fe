"""Tests for resolving identifiers to internal, sibling and external links."""

from pathlib import Path

from export_factory import ExportBuilder, prim

from rustdoc_md.conversion_options import ConversionOptions, LinkSettings
from rustdoc_md.conversion_report import ConversionReport
from rustdoc_md.cross_reference_resolver import CrossReferenceResolver, member_anchor
from rustdoc_md.link_target import EXTERNAL, INTERNAL, NO_LINK, SIBLING
from rustdoc_md.output_layout import ITEM, MODULE, plan_output_layout
from rustdoc_md.visibility_resolver import resolve_visibility


def _resolver(
    builder: ExportBuilder, options: ConversionOptions
) -> tuple[CrossReferenceResolver, ConversionReport]:
    index = builder.load()
    report = ConversionReport()
    tree = resolve_visibility(index, include_private=options.include_private)
    layout = plan_output_layout(
        tree, index, mode=options.mode, base_path=options.base_path, report=report
    )
    return CrossReferenceResolver(index, layout, options, report), report


def test_member_anchor() -> None:
    """Verify member anchors with and without an owner anchor."""
    assert member_anchor("point", "struct_field", "x") == "point-field-x"
    assert member_anchor(None, "function", "new") == "method-new"
    assert member_anchor(None, "variant", "Some") == "variant-some"
    scoped = member_anchor("point", "function", "fmt", "impl-Display")
    assert scoped == "point-impl-display-method-fmt"


def test_internal_item(tmp_path: Path) -> None:
    """Verify that a placed local item links into this package's output."""
    builder = ExportBuilder()
    geo = builder.module("geo")
    point = builder.struct("Point", parent=geo)
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path, mode=ITEM))

    target = resolver.resolve(str(point))
    assert target.kind == INTERNAL
    assert target.href == "/mycrate/geo/Point"
    assert target.markdown("Point") == "[Point](/mycrate/geo/Point)"


def test_unplaced_local_item_has_no_link(tmp_path: Path) -> None:
    """Verify that a private local item is not linked."""
    builder = ExportBuilder()
    hidden = builder.struct("Hidden", visibility="default")
    resolver, report = _resolver(builder, ConversionOptions(output_root=tmp_path))

    target = resolver.resolve(str(hidden))
    assert target.kind == NO_LINK
    assert target.markdown() == "Hidden"
    assert report.misses == {}


def test_dangling_reference(tmp_path: Path) -> None:
    """Verify that an id in neither index is a miss and resolves deterministically."""
    builder = ExportBuilder()
    resolver, report = _resolver(builder, ConversionOptions(output_root=tmp_path))

    first = resolver.resolve("9999", "Ghost")
    second = resolver.resolve("9999", "Ghost")
    assert first.kind == NO_LINK
    assert first == second
    assert first.markdown() == "Ghost"
    assert list(report.misses) == ["9999"]


def test_none_id_is_no_link(tmp_path: Path) -> None:
    """Verify that a missing identifier yields no link and no miss."""
    options = ConversionOptions(output_root=tmp_path)
    resolver, report = _resolver(ExportBuilder(), options)
    assert resolver.resolve(None, "x").kind == NO_LINK
    assert report.misses == {}


def test_std_item(tmp_path: Path) -> None:
    """Verify that standard library items link to the std documentation host."""
    builder = ExportBuilder()
    string = builder.external(
        ["std", "string", "String"], "struct", crate_id=1, crate_name="std"
    )
    collections = builder.external(
        ["std", "collections"], "module", crate_id=1, crate_name="std"
    )
    some = builder.external(
        ["core", "option", "Option", "Some"], "variant", crate_id=2, crate_name="core"
    )
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path))

    target = resolver.resolve(str(string))
    assert target.kind == EXTERNAL
    assert target.href == "https://doc.rust-lang.org/std/string/struct.String.html"
    assert resolver.resolve(str(collections)).href == (
        "https://doc.rust-lang.org/std/collections/index.html"
    )
    assert resolver.resolve(str(some)).href == (
        "https://doc.rust-lang.org/core/option/enum.Option.html#variant.Some"
    )


def test_external_package_default_and_pinned_version(tmp_path: Path) -> None:
    """Verify docs.rs links with the default and a configured version."""
    builder = ExportBuilder()
    serialize = builder.external(
        ["serde", "ser", "Serialize"], "trait", crate_id=2, crate_name="serde"
    )
    latest, _ = _resolver(builder, ConversionOptions(output_root=tmp_path))
    pinned, _ = _resolver(
        builder,
        ConversionOptions(
            output_root=tmp_path, links=LinkSettings(versions={"serde": "1.0.200"})
        ),
    )

    assert latest.resolve(str(serialize)).href == (
        "https://docs.rs/serde/latest/serde/ser/trait.Serialize.html"
    )
    assert pinned.resolve(str(serialize)).href == (
        "https://docs.rs/serde/1.0.200/serde/ser/trait.Serialize.html"
    )


def test_external_package_html_root_url(tmp_path: Path) -> None:
    """Verify that a declared documentation root overrides the default host."""
    builder = ExportBuilder()
    mutex = builder.external(
        ["tokio", "sync", "Mutex"],
        "struct",
        crate_id=3,
        crate_name="tokio",
        html_root_url="https://docs.example.com/",
    )
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path))

    assert resolver.resolve(str(mutex)).href == (
        "https://docs.example.com/tokio/sync/struct.Mutex.html"
    )


def test_external_internal_modules_dropped(tmp_path: Path) -> None:
    """Verify that implementation-detail module names are left out of URLs."""
    builder = ExportBuilder()
    sender = builder.external(
        ["futures", "channel", "bounded", "Sender"],
        "struct",
        crate_id=4,
        crate_name="futures",
    )
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path))

    assert resolver.resolve(str(sender)).href == (
        "https://docs.rs/futures/latest/futures/channel/struct.Sender.html"
    )


def test_workspace_sibling_module_mode(tmp_path: Path) -> None:
    """Verify that a declared sibling links with the same layout, never externally."""
    builder = ExportBuilder()
    b = builder.external(["p2", "B"], "struct", crate_id=5, crate_name="p2")
    resolver, _ = _resolver(
        builder,
        ConversionOptions(output_root=tmp_path, mode=MODULE, workspace_packages=["p2"]),
    )

    target = resolver.resolve(str(b))
    assert target.kind == SIBLING
    assert target.href == "/p2#b"


def test_workspace_sibling_item_mode_hyphenated(tmp_path: Path) -> None:
    """Verify that hyphenated sibling names match their underscored crate names."""
    builder = ExportBuilder()
    shape = builder.external(
        ["my_shapes", "round", "Circle"], "struct", crate_id=6, crate_name="my_shapes"
    )
    resolver, _ = _resolver(
        builder,
        ConversionOptions(
            output_root=tmp_path,
            mode=ITEM,
            base_path="/api",
            workspace_packages=["my-shapes"],
        ),
    )

    target = resolver.resolve(str(shape))
    assert target.kind == SIBLING
    assert target.href == "/api/my_shapes/round/Circle"


def test_struct_field_links_to_owner_anchor(tmp_path: Path) -> None:
    """Verify that a field links to its anchor on the owner's page."""
    builder = ExportBuilder()
    x = builder.field("x", prim("i32"))
    builder.struct("Point", [x])
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path, mode=ITEM))

    target = resolver.resolve(str(x))
    assert target.kind == INTERNAL
    assert target.href == "/mycrate/Point#field-x"
    assert target.title == "Point::x"


def test_field_in_module_mode_uses_owner_anchor(tmp_path: Path) -> None:
    """Verify that member anchors nest under the owner's anchor in module mode."""
    builder = ExportBuilder()
    x = builder.field("x", prim("i32"))
    builder.struct("Point", [x])
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path))

    assert resolver.resolve(str(x)).href == "/mycrate#point-field-x"


def test_private_field_not_linked(tmp_path: Path) -> None:
    """Verify that a hidden field never becomes a link."""
    builder = ExportBuilder()
    secret = builder.field("secret", prim("u8"), visibility="default")
    builder.struct("Point", [secret])
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path, mode=ITEM))

    assert resolver.resolve(str(secret)).kind == NO_LINK


def test_enum_variant_links(tmp_path: Path) -> None:
    """Verify that enum variants link through the enum page."""
    builder = ExportBuilder()
    circle = builder.variant("Circle")
    builder.enum("Shape", [circle])
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path, mode=ITEM))

    assert resolver.resolve(str(circle)).href == "/mycrate/Shape#variant-circle"


def test_method_links_only_when_visible(tmp_path: Path) -> None:
    """Verify that public inherent methods link and private ones do not."""
    builder = ExportBuilder()
    point = builder.struct("Point")
    new = builder.function("new", parent=None)
    internal = builder.function("internal", parent=None, visibility="default")
    builder.impl(point, "Point", [new, internal])
    resolver, _ = _resolver(builder, ConversionOptions(output_root=tmp_path, mode=ITEM))

    assert resolver.resolve(str(new)).href == "/mycrate/Point#method-new"
    assert resolver.resolve(str(internal)).kind == NO_LINK


def test_trait_impl_method_links(tmp_path: Path) -> None:
    """Verify that same-named methods of different trait impls get distinct links."""
    builder = ExportBuilder()
    point = builder.struct("Point")
    display = builder.external(
        ["core", "fmt", "Display"], "trait", crate_id=2, crate_name="core"
    )
    debug = builder.external(
        ["core", "fmt", "Debug"], "trait", crate_id=2, crate_name="core"
    )
    display_fmt = builder.function("fmt", parent=None, visibility="default")
    debug_fmt = builder.function("fmt", parent=None, visibility="default")
    builder.impl(point, "Point", [display_fmt], trait=("Display", display))
    builder.impl(point, "Point", [debug_fmt], trait=("Debug", debug))
    options = ConversionOptions(output_root=tmp_path, mode=ITEM)
    resolver, _ = _resolver(builder, options)

    display_href = resolver.resolve(str(display_fmt)).href
    debug_href = resolver.resolve(str(debug_fmt)).href
    assert display_href == "/mycrate/Point#impl-display-method-fmt"
    assert debug_href == "/mycrate/Point#impl-debug-method-fmt"

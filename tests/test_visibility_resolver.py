"""Tests for visibility resolution and canonical placements."""

from export_factory import ExportBuilder

from rustdoc_md.visibility_resolver import ResolvedTree, resolve_visibility


def _paths(tree: ResolvedTree, item_id: int) -> list[tuple[str, ...]]:
    return [p.path for p in tree.placements.placements(str(item_id))]


def test_private_items_excluded() -> None:
    """Verify that non-public items get no placement under the default policy."""
    builder = ExportBuilder()
    point = builder.struct("Point")
    hidden = builder.struct("Hidden", visibility="default")
    crate_only = builder.function("helper", visibility="crate")
    tree = resolve_visibility(builder.load(), include_private=False)

    assert _paths(tree, point) == [("mycrate", "Point")]
    assert str(hidden) not in tree.placements
    assert str(crate_only) not in tree.placements
    assert [p.name for p in tree.root.members] == ["Point"]


def test_include_private_places_everything() -> None:
    """Verify that private items are placed when private items are requested."""
    builder = ExportBuilder()
    hidden = builder.struct("Hidden", visibility="default")
    inner = builder.module("inner", visibility="default")
    tree = resolve_visibility(builder.load(), include_private=True)

    assert _paths(tree, hidden) == [("mycrate", "Hidden")]
    assert _paths(tree, inner) == [("mycrate", "inner")]


def test_stripped_private_module_excluded() -> None:
    """Verify that a stripped module stays out even with private items included."""
    builder = ExportBuilder()
    stripped = builder.module("gone", visibility="default", is_stripped=True)
    tree = resolve_visibility(builder.load(), include_private=True)

    assert str(stripped) not in tree.placements


def test_members_of_private_module_are_hidden() -> None:
    """Verify that public items inside a private module are not reachable."""
    builder = ExportBuilder()
    inner = builder.module("inner", visibility="default")
    point = builder.struct("Point", parent=inner)
    tree = resolve_visibility(builder.load(), include_private=False)

    assert str(point) not in tree.placements
    assert tree.root.children == []


def test_reexport_from_private_module() -> None:
    """Verify that a re-export makes an item from a private module visible."""
    builder = ExportBuilder()
    inner = builder.module("inner", visibility="default")
    point = builder.struct("Point", parent=inner)
    builder.use("inner::Point", point)
    tree = resolve_visibility(builder.load(), include_private=False)

    assert _paths(tree, point) == [("mycrate", "Point")]
    assert tree.root.members[0].via_reexport is True


def test_reexport_creates_second_placement() -> None:
    """Verify that a re-exported item has two placements, the shorter being primary."""
    builder = ExportBuilder()
    geo = builder.module("geo")
    point = builder.struct("Point", parent=geo)
    builder.use("geo::Point", point)
    tree = resolve_visibility(builder.load(), include_private=False)

    assert _paths(tree, point) == [("mycrate", "Point"), ("mycrate", "geo", "Point")]
    primary = tree.placements.primary(str(point))
    assert primary is not None
    assert primary.path == ("mycrate", "Point")


def test_primary_placement_tie_breaks_lexicographically() -> None:
    """Verify that equally long placements are ordered by path."""
    builder = ExportBuilder()
    zeta = builder.module("zeta")
    alpha = builder.module("alpha")
    point = builder.struct("Point", parent=zeta)
    builder.use("crate::zeta::Point", point, parent=alpha)
    tree = resolve_visibility(builder.load(), include_private=False)

    primary = tree.placements.primary(str(point))
    assert primary is not None
    assert primary.path == ("mycrate", "alpha", "Point")


def test_renamed_reexport() -> None:
    """Verify that `use a::B as C` places the item under the new name."""
    builder = ExportBuilder()
    geo = builder.module("geo")
    point = builder.struct("Point", parent=geo)
    builder.use("geo::Point", point, name="Pt")
    tree = resolve_visibility(builder.load(), include_private=False)

    assert ("mycrate", "Pt") in _paths(tree, point)


def test_glob_reexport() -> None:
    """Verify that a glob re-export places every public member of the module."""
    builder = ExportBuilder()
    shapes = builder.module("shapes", visibility="default")
    circle = builder.struct("Circle", parent=shapes)
    square = builder.struct("Square", parent=shapes)
    secret = builder.struct("Secret", parent=shapes, visibility="default")
    builder.use("shapes", shapes, is_glob=True)
    tree = resolve_visibility(builder.load(), include_private=False)

    assert [p.name for p in tree.root.members] == ["Circle", "Square"]
    assert _paths(tree, circle) == [("mycrate", "Circle")]
    assert _paths(tree, square) == [("mycrate", "Square")]
    assert str(secret) not in tree.placements


def test_self_glob_terminates() -> None:
    """Verify that a module glob-importing itself does not loop."""
    builder = ExportBuilder()
    point = builder.struct("Point")
    builder.use("self", builder.root, is_glob=True)
    tree = resolve_visibility(builder.load(), include_private=False)

    assert _paths(tree, point) == [("mycrate", "Point")]


def test_module_reexport_cycle_terminates() -> None:
    """Verify that modules re-exporting each other yield a finite tree."""
    builder = ExportBuilder()
    a = builder.module("a")
    b = builder.module("b")
    builder.use("crate::b", b, parent=a)
    builder.use("crate::a", a, parent=b)
    tree = resolve_visibility(builder.load(), include_private=False)

    assert _paths(tree, a) == [("mycrate", "a"), ("mycrate", "b", "a")]
    assert _paths(tree, b) == [("mycrate", "b"), ("mycrate", "a", "b")]
    assert len(tree.modules()) == 5  # noqa: PLR2004


def test_use_chain_cycle_is_dropped() -> None:
    """Verify that `use` items pointing at each other end the chain."""
    builder = ExportBuilder()
    first = builder.use("crate::second", None, name="first")
    second = builder.use("crate::first", first, name="second")
    builder.index[str(first)]["inner"]["use"]["id"] = second
    tree = resolve_visibility(builder.load(), include_private=False)

    assert tree.root.members == []
    assert len(tree.placements) == 1


def test_external_reexport_listed() -> None:
    """Verify that a re-export of an external item is listed on the module."""
    builder = ExportBuilder()
    builder.use("serde::Serialize", None)
    tree = resolve_visibility(builder.load(), include_private=False)

    assert tree.root.members == []
    [reexport] = tree.root.reexports
    assert reexport.name == "Serialize"
    assert reexport.source == "serde::Serialize"


def test_members_sorted_by_name() -> None:
    """Verify that module members and children are sorted case-insensitively."""
    builder = ExportBuilder()
    builder.struct("beta")
    builder.struct("Alpha")
    builder.module("zed")
    builder.module("Mid")
    tree = resolve_visibility(builder.load(), include_private=False)

    assert [p.name for p in tree.root.members] == ["Alpha", "beta"]
    assert [c.name for c in tree.root.children] == ["Mid", "zed"]


def test_fields_and_impls_never_placed() -> None:
    """Verify that fields, variants and impl blocks are rendered on owners only."""
    builder = ExportBuilder()
    point = builder.struct("Point")
    impl = builder.impl(point, "Point", [])
    builder.add_to(builder.root, impl)
    tree = resolve_visibility(builder.load(), include_private=True)

    assert str(impl) not in tree.placements

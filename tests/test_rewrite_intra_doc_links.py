"""Tests for rewriting intra-doc links in documentation text."""

from rustdoc_md.link_target import INTERNAL, LinkTarget, no_link
from rustdoc_md.output_unit import LinkRef
from rustdoc_md.rewrite_intra_doc_links import rewrite_intra_doc_links

HREFS = {"1": "/mycrate/Point", "2": "/mycrate/geo#area"}


def _resolve(item_id: str, title: str) -> LinkTarget:
    href = HREFS.get(item_id)
    if href is None:
        return no_link(title)
    return LinkTarget(kind=INTERNAL, title=title, href=href)


def test_inline_link_rewritten() -> None:
    """Verify that `[text](path)` links become resolved hrefs."""
    text, links = rewrite_intra_doc_links(
        "See [`Point`](crate::Point).", {"crate::Point": "1"}, _resolve
    )
    assert text == "See [`Point`](/mycrate/Point)."
    assert links == [LinkRef("Point", "/mycrate/Point")]


def test_shortcut_link_rewritten() -> None:
    """Verify that shortcut `[Point]` links are rewritten."""
    text, _ = rewrite_intra_doc_links("Uses [Point] here.", {"Point": "1"}, _resolve)
    assert text == "Uses [Point](/mycrate/Point) here."


def test_collapsed_reference_link_rewritten() -> None:
    """Verify that `[text][label]` references are rewritten."""
    text, _ = rewrite_intra_doc_links(
        "Compute [the area][area].", {"area": "2"}, _resolve
    )
    assert text == "Compute [the area](/mycrate/geo#area)."


def test_reference_definition_rewritten() -> None:
    """Verify that reference definitions get the resolved destination."""
    docs = "See [point].\n\n[point]: crate::Point"
    text, links = rewrite_intra_doc_links(docs, {"crate::Point": "1"}, _resolve)
    assert text == "See [point].\n\n[point]: /mycrate/Point"
    assert links == [LinkRef("point", "/mycrate/Point")]


def test_unresolved_link_reduced_to_text() -> None:
    """Verify that a link to an unplaced item keeps only its text."""
    text, links = rewrite_intra_doc_links(
        "See [`Hidden`](crate::Hidden) for details.", {"crate::Hidden": "9"}, _resolve
    )
    assert text == "See `Hidden` for details."
    assert links == []


def test_unresolved_reference_definition_dropped() -> None:
    """Verify that references to an unresolved definition are reduced to text."""
    docs = "See [hidden].\n\n[hidden]: crate::Hidden"
    text, _ = rewrite_intra_doc_links(docs, {"crate::Hidden": "9"}, _resolve)
    assert text.strip() == "See hidden."


def test_ordinary_links_untouched() -> None:
    """Verify that web links and images are left alone."""
    docs = "Read [the book](https://doc.rust-lang.org/book/) and ![logo](logo.png)."
    text, links = rewrite_intra_doc_links(docs, {"Point": "1"}, _resolve)
    assert text == docs
    assert links == []


def test_code_fences_untouched() -> None:
    """Verify that bracketed text inside code blocks is not rewritten."""
    docs = "```\nlet v = [Point];\n```\n[Point]"
    text, _ = rewrite_intra_doc_links(docs, {"Point": "1"}, _resolve)
    assert text == "```\nlet v = [Point];\n```\n[Point](/mycrate/Point)"


def test_no_links_is_identity() -> None:
    """Verify that docs without a links map are returned unchanged."""
    assert rewrite_intra_doc_links("[Point]", {}, _resolve) == ("[Point]", [])
    assert rewrite_intra_doc_links("", {"a": "1"}, _resolve) == ("", [])

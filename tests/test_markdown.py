"""Tests for Markdown fragment helpers."""

import yaml

from rustdoc_md.markdown import (
    first_paragraph,
    frontmatter,
    header_slug,
    md_code,
    md_codeblock,
    md_escape,
    md_table,
)


def test_header_slug() -> None:
    """Verify slug generation for anchors."""
    assert header_slug("Point") == "point"
    assert header_slug("mycrate::geo::Point") == "mycrate-geo-point"
    assert header_slug("  Hello, World!  ") == "hello-world"
    assert header_slug("!!!") == "section"


def test_md_escape() -> None:
    """Verify that Markdown and MDX special characters are escaped."""
    assert md_escape("Vec<T>") == "Vec\\<T\\>"
    assert md_escape("a|b") == "a\\|b"
    assert md_escape("*x*") == "\\*x\\*"


def test_md_code_widens_fence() -> None:
    """Verify inline code spans around text containing backticks."""
    assert md_code("x") == "`x`"
    assert md_code("a`b") == "``a`b``"
    assert md_code("`a") == "`` `a ``"


def test_md_table() -> None:
    """Verify table rendering with pipes escaped once and newlines flattened."""
    rows = [["x", "a|b"], ["y", "one\ntwo"], ["z", "c\\|d"]]
    table = md_table(["Name", "Type"], rows)
    assert table.splitlines() == [
        "| Name | Type |",
        "| --- | --- |",
        "| x | a\\|b |",
        "| y | one two |",
        "| z | c\\|d |",
    ]


def test_md_table_empty() -> None:
    """Verify that a table without rows renders nothing."""
    assert md_table(["Name"], []) == ""


def test_md_codeblock() -> None:
    """Verify fenced code blocks, widening the fence around nested fences."""
    assert md_codeblock("rust", "fn f() {}\n") == "```rust\nfn f() {}\n```"
    assert md_codeblock("", "```\nx\n```").startswith("````")


def test_frontmatter_is_valid_yaml() -> None:
    """Verify that titles needing quotes survive the round trip through YAML."""
    lines = frontmatter("Point: a 2D <point>")
    assert lines[0] == "---"
    assert lines[-2] == "---"
    meta = yaml.safe_load("\n".join(lines[1:-2]))
    assert meta == {
        "title": "Point: a 2D <point>",
        "sidebar_label": "Point: a 2D <point>",
    }


def test_first_paragraph() -> None:
    """Verify that only the first paragraph is kept and joined onto one line."""
    docs = "A point\nin space.\n\nMore details."
    assert first_paragraph(docs) == "A point in space."
    assert first_paragraph("") == ""

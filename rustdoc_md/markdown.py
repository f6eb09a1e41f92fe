"""Utilities for producing Markdown fragments."""

import re

import yaml

_MD_SPECIAL_RE = re.compile(r"([\\`*_\[\]<>|])")
_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")


def header_slug(s: str) -> str:
    """Generate a GitHub-ish anchor slug: lower, hyphenate non-alnum."""
    s = s.strip().lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    s = re.sub(r"-{2,}", "-", s).strip("-")
    return s or "section"


def md_escape(text: str) -> str:
    """Escape characters that Markdown or MDX would interpret."""
    return _MD_SPECIAL_RE.sub(r"\\\1", text)


def md_code(text: str) -> str:
    """Wrap text in an inline code span, widening the fence when needed."""
    fence = "``" if "`" in text else "`"
    pad = " " if text.startswith("`") or text.endswith("`") else ""
    return f"{fence}{pad}{text}{pad}{fence}"


def md_table(headers: list[str], rows: list[list[str]]) -> str:
    """Generate a Markdown table, keeping each cell on one line."""
    if not rows:
        return ""

    def cell(value: str) -> str:
        return _UNESCAPED_PIPE_RE.sub(r"\\|", value.replace("\n", " ")).strip()

    out = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join(["---"] * len(headers)) + " |",
    ]
    out.extend("| " + " | ".join(cell(c) for c in r) + " |" for r in rows)
    return "\n".join(out)


def md_codeblock(lang: str, code: str) -> str:
    """Generate a Markdown code block."""
    fence = "````" if "```" in code else "```"
    return f"{fence}{lang}\n{code.rstrip()}\n{fence}"


def frontmatter(title: str, sidebar_label: str | None = None) -> list[str]:
    """Render a YAML frontmatter block as lines."""
    meta = {"title": title, "sidebar_label": sidebar_label or title}
    dumped = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True).rstrip()
    return ["---", *dumped.splitlines(), "---", ""]


def first_paragraph(docs: str) -> str:
    """Return the first paragraph of a doc string, joined onto one line."""
    para = docs.strip().split("\n\n", 1)[0]
    return " ".join(line.strip() for line in para.splitlines()).strip()

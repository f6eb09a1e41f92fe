"""Logic for making rustdoc Markdown safe for MDX-based site generators."""

import re

BLOCK_TAGS = frozenset({"details", "summary", "div", "table", "pre", "blockquote"})

# Code fence attributes rustdoc treats as Rust code.
RUST_FENCE_ATTRS = frozenset(
    {
        "rust",
        "ignore",
        "no_run",
        "should_panic",
        "compile_fail",
        "edition2015",
        "edition2018",
        "edition2021",
        "edition2024",
        "test_harness",
        "allow_fail",
    }
)

OPEN_TAG_RE = re.compile(r"^<([A-Za-z][A-Za-z0-9]*)[\s>/]")
FENCE_RE = re.compile(r"^(\s*)(`{3,}|~{3,})(.*)$")
TAG_SPLIT_RE = re.compile(r"(<[^>]*>)")


def _is_rust_fence(info: str) -> bool:
    attrs = [a.strip() for a in re.split(r"[,\s]+", info.strip()) if a.strip()]
    return not attrs or all(a in RUST_FENCE_ATTRS for a in attrs)


def _split_tags(line: str) -> list[str]:
    """Put every HTML tag of a line on its own line."""
    return [piece for piece in TAG_SPLIT_RE.split(line.strip()) if piece.strip()]


def sanitize_docs(docs: str) -> str:
    """Normalize doc Markdown.

    - Rust code fences are labelled ``rust`` and their hidden (``# ``) lines
      dropped, as rustdoc does.
    - Block-level HTML tags are put on their own lines and separated from
      surrounding paragraphs by blank lines.
    """
    if not docs:
        return ""
    lines = docs.splitlines()
    out: list[str] = []
    fence: str | None = None
    rust_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        fence_match = FENCE_RE.match(line)
        if fence is not None:
            if fence_match and fence_match.group(2).startswith(fence):
                fence = None
                out.append(line)
            elif rust_fence and (stripped == "#" or stripped.startswith("# ")):
                pass
            elif rust_fence and stripped.startswith("##"):
                out.append(line.replace("##", "#", 1))
            else:
                out.append(line)
            i += 1
            continue

        if fence_match:
            indent, fence, info = fence_match.groups()
            rust_fence = _is_rust_fence(info)
            out.append(f"{indent}{fence}rust" if rust_fence else line)
            i += 1
            continue

        tag_match = OPEN_TAG_RE.match(stripped)
        if tag_match and tag_match.group(1).lower() in BLOCK_TAGS:
            tag = tag_match.group(1)
            if out and out[-1].strip():
                out.append("")
            out.extend(_split_tags(stripped))
            closing = f"</{tag}>"
            i += 1
            if closing not in stripped:
                while i < len(lines):
                    inner = lines[i].strip()
                    i += 1
                    if closing in inner:
                        out.extend(_split_tags(inner))
                        break
                    out.append(inner)
            if i < len(lines) and lines[i].strip():
                out.append("")
            continue

        out.append(line)
        i += 1
    return "\n".join(out).strip()

"""Logic for rewriting intra-doc links to resolved Markdown links."""

import re
from collections.abc import Callable

from rustdoc_md.link_target import LinkTarget
from rustdoc_md.output_unit import LinkRef

Resolve = Callable[[str, str], LinkTarget]

LINK_RE = re.compile(
    r"(?<![\\!])\[([^\[\]]+)\](?:\(([^()\s]+)\)|\[([^\[\]]*)\])?"
)  # [text](dest) / [text][label] / [text]
DEFINITION_RE = re.compile(r"^(\s{0,3}\[([^\]]+)\]:\s*)(\S+)(.*)$")
FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")


def _plain(text: str) -> str:
    return text.strip().strip("`")


def rewrite_intra_doc_links(
    text: str, links: dict[str, str], resolve: Resolve
) -> tuple[str, list[LinkRef]]:
    """Rewrite links whose destination is an intra-doc path.

    ``links`` maps the link text as written in the docs to an item id.
    Resolved links point at their target's href; unresolved ones are reduced to
    their text. Links to ordinary URLs and fenced code are left untouched.
    """
    if not text or not links:
        return text or "", []

    found: list[LinkRef] = []
    dropped_labels: set[str] = set()
    lines = text.splitlines()

    def target_for(key: str, label: str) -> LinkTarget | None:
        item_id = links.get(key)
        if item_id is None:
            return None
        target = resolve(item_id, _plain(label))
        if target.is_link:
            found.append(LinkRef(_plain(label), str(target.href)))
        return target

    # reference definitions first, so references to dropped labels can be reduced
    fence: str | None = None
    for i, line in enumerate(lines):
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker.startswith(fence):
                fence = None
            continue
        if fence is not None:
            continue
        m = DEFINITION_RE.match(line)
        if not m:
            continue
        target = target_for(m.group(3), m.group(2))
        if target is None:
            continue
        if target.is_link:
            lines[i] = f"{m.group(1)}{target.href}{m.group(4)}"
        else:
            dropped_labels.add(m.group(2).lower())
            lines[i] = ""

    def repl(m: re.Match) -> str:
        label, dest, ref = m.group(1), m.group(2), m.group(3)
        if dest is not None:
            target = target_for(dest, label)
            return m.group(0) if target is None else target.markdown(label)
        if ref is not None:
            key = ref or label
            if key.lower() in dropped_labels:
                return label
            target = target_for(key, label)
            return m.group(0) if target is None else target.markdown(label)
        if label.lower() in dropped_labels:
            return label
        target = target_for(label, label)
        return m.group(0) if target is None else target.markdown(label)

    out: list[str] = []
    fence = None
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker.startswith(fence):
                fence = None
            out.append(line)
        elif fence is not None or DEFINITION_RE.match(line):
            out.append(line)
        else:
            out.append(LINK_RE.sub(repl, line))
    return "\n".join(out), found

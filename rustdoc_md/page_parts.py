"""Accumulator for the lines, links and anchors of one rendered page."""

from rustdoc_md.output_unit import LinkRef, dedupe_links


class PageParts:
    """Collects page lines and the link manifest while a page is rendered."""

    def __init__(self) -> None:
        """Initialize an empty page."""
        self.lines: list[str] = []
        self.links: list[LinkRef] = []
        self._anchors: set[str] = set()

    def add(self, *lines: str) -> None:
        self.lines.extend(lines)

    def extend_links(self, links: list[LinkRef]) -> None:
        self.links.extend(links)

    def anchor(self, anchor: str | None) -> str:
        """Return an anchor tag, or "" when the page already defines it."""
        if not anchor or anchor in self._anchors:
            return ""
        self._anchors.add(anchor)
        return f'<a id="{anchor}"></a>'

    def heading(self, level: int, text: str, anchor: str | None = None) -> None:
        """Add a heading, preceded by an explicit anchor when one is given."""
        tag = self.anchor(anchor)
        if tag:
            self.add(tag, "")
        self.add(f"{'#' * min(level, 6)} {text}", "")

    def body(self) -> str:
        return "\n".join(self.lines).rstrip() + "\n"

    def manifest(self) -> list[LinkRef]:
        return dedupe_links(self.links)

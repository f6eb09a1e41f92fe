"""Data models for representing link targets."""

from dataclasses import dataclass

INTERNAL = "internal"
SIBLING = "sibling"
EXTERNAL = "external"
NO_LINK = "none"


@dataclass(frozen=True)
class LinkTarget:
    """Represents where a reference to an item points."""

    kind: str  # internal/sibling/external/none
    title: str
    href: str | None = None  # e.g. /mycrate/geometry/Point

    @property
    def is_link(self) -> bool:
        return self.kind != NO_LINK and bool(self.href)

    def markdown(self, text: str | None = None) -> str:
        """Render as a Markdown link, or as the bare name when unresolved."""
        label = text if text is not None else self.title
        if not self.is_link:
            return label
        return f"[{label}]({self.href})"


def no_link(title: str) -> LinkTarget:
    return LinkTarget(kind=NO_LINK, title=title)

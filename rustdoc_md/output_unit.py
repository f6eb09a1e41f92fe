"""Data models for emitted documents."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LinkRef:
    """A rendered token paired with the href it resolves to."""

    token: str
    href: str


@dataclass
class OutputUnit:
    """One emitted document."""

    path: str  # relative to the package output directory
    title: str
    body: str
    links: list[LinkRef] = field(default_factory=list)
    kind: str = "item"  # document/module/item
    target_id: str | None = None


def dedupe_links(links: list[LinkRef]) -> list[LinkRef]:
    """Drop repeated link refs, keeping first-seen order."""
    seen: set[LinkRef] = set()
    out: list[LinkRef] = []
    for link in links:
        if link not in seen:
            seen.add(link)
            out.append(link)
    return out

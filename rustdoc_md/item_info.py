"""Data models for representing rustdoc items."""

from dataclasses import dataclass
from typing import Any

from rustdoc_md.payloads import Payload
from rustdoc_md.visibility import Visibility


@dataclass(frozen=True)
class Deprecation:
    """Deprecation note attached to an item."""

    since: str | None = None
    note: str | None = None


@dataclass
class ItemInfo:
    """Represents a documented item (module, struct, function, etc.)."""

    id: str
    kind: str  # payload tag: module/struct/function/...
    name: str | None
    visibility: Visibility
    docs: str
    deprecation: Deprecation | None
    links: dict[str, str]  # intra-doc link text -> item id
    attrs: list[str]
    payload: Payload
    raw: dict[str, Any]  # item as parsed from JSON
    crate_id: int = 0

    @property
    def display_name(self) -> str:
        return self.name or f"<{self.kind}>"

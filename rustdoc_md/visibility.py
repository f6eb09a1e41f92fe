"""Data model and parser for item visibility."""

from dataclasses import dataclass
from typing import Any

PUBLIC = "public"
DEFAULT = "default"
CRATE = "crate"
RESTRICTED = "restricted"


@dataclass(frozen=True)
class Visibility:
    """Represents the declared visibility of an item."""

    kind: str  # public/default/crate/restricted
    path: str | None = None  # only set for restricted visibility

    @property
    def is_public(self) -> bool:
        return self.kind == PUBLIC

    def keyword(self) -> str:
        """Return the source-level visibility keyword, with a trailing space."""
        if self.kind == PUBLIC:
            return "pub "
        if self.kind == CRATE:
            return "pub(crate) "
        if self.kind == RESTRICTED and self.path:
            return f"pub(in {self.path}) "
        return ""


def parse_visibility(raw: Any) -> Visibility:
    """Parse the rustdoc visibility value into a Visibility."""
    if isinstance(raw, str):
        if raw in (PUBLIC, DEFAULT, CRATE):
            return Visibility(raw)
        return Visibility(DEFAULT)
    if isinstance(raw, dict) and RESTRICTED in raw:
        restricted = raw[RESTRICTED] or {}
        path = restricted.get("path") if isinstance(restricted, dict) else None
        return Visibility(RESTRICTED, str(path) if path else None)
    return Visibility(DEFAULT)

"""Utility for detecting lifetimes introduced by the compiler or by macros."""

import re

_SYNTHETIC_LIFETIME_RE = re.compile(r"^'(_\d*|life\d+|async_trait)$")


def is_synthetic_lifetime(name: str | None) -> bool:
    """Check if a lifetime is elided or generated ('_, '_0, 'life0, 'async_trait)."""
    if not name:
        return False
    return bool(_SYNTHETIC_LIFETIME_RE.match(name.strip()))

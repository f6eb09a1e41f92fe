"""Utility for normalizing rustdoc identifiers."""


def as_id(v: object) -> str | None:
    """Normalize an identifier (int or str in the export) to a string key."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, str)):
        s = str(v).strip()
        return s or None
    return None


def id_sort_key(item_id: str) -> tuple[int, int, str]:
    """Order identifiers numerically when they are numeric, else lexically."""
    if item_id.isdigit():
        return (0, int(item_id), "")
    return (1, 0, item_id)

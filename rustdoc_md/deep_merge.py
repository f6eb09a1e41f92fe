"""Logic for deep merging configuration dictionaries."""

from typing import Any

# Lists under these (section, key) pairs are merged additively.
ADDITIVE_LISTS = frozenset({("workspace", "packages"), ("noise", "traits")})


def deep_merge(
    base: dict[str, Any], update: dict[str, Any], _section: str | None = None
) -> dict[str, Any]:
    """Merge `update` over `base` without mutating either.

    Nested mappings merge key by key and scalars or lists from `update` win,
    except the lists named in ADDITIVE_LISTS, which are unioned and sorted.
    """
    result = base.copy()
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value, key)
        elif (
            (_section, key) in ADDITIVE_LISTS
            and isinstance(value, list)
            and isinstance(result.get(key), list)
        ):
            result[key] = sorted({str(v) for v in (*result[key], *value)})
        else:
            result[key] = value
    return result

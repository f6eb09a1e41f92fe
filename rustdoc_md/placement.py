"""Data models for canonical item placements."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Placement:
    """One display path under which an item appears."""

    item_id: str
    path: tuple[str, ...]  # package name first, item name last
    via_reexport: bool = False

    @property
    def name(self) -> str:
        return self.path[-1]

    @property
    def module_path(self) -> tuple[str, ...]:
        return self.path[:-1]


def primary_key(placement: Placement) -> tuple[int, tuple[str, ...]]:
    """Order placements: fewest segments first, then lexicographic path."""
    return (len(placement.path), placement.path)


class PlacementMap:
    """One-to-many mapping from item id to its placements."""

    def __init__(self) -> None:
        """Initialize an empty map."""
        self._by_id: dict[str, list[Placement]] = {}

    def add(self, placement: Placement) -> bool:
        """Record a placement; return False when the same path is already known."""
        existing = self._by_id.setdefault(placement.item_id, [])
        if any(p.path == placement.path for p in existing):
            return False
        existing.append(placement)
        return True

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def ids(self) -> list[str]:
        return sorted(self._by_id)

    def placements(self, item_id: str) -> list[Placement]:
        """Return all placements of an item, primary first."""
        return sorted(self._by_id.get(item_id, []), key=primary_key)

    def primary(self, item_id: str) -> Placement | None:
        """Return the placement used as the item's canonical location."""
        placements = self._by_id.get(item_id)
        if not placements:
            return None
        return min(placements, key=primary_key)

    def is_primary(self, placement: Placement) -> bool:
        return self.primary(placement.item_id) == placement

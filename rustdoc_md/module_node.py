"""Data models for the filtered public module tree."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from rustdoc_md.placement import Placement


@dataclass(frozen=True)
class ReExport:
    """A `use` that could not be turned into a placement (e.g. external item)."""

    item_id: str  # the use item itself
    name: str
    source: str
    target: str | None
    is_glob: bool = False


@dataclass
class ModuleNode:
    """A module at one display path, with the items visible under it."""

    id: str
    path: tuple[str, ...]
    children: list["ModuleNode"] = field(default_factory=list)
    members: list[Placement] = field(default_factory=list)
    reexports: list[ReExport] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path[-1]

    def walk(self) -> Iterator["ModuleNode"]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: Sequence[str]) -> "ModuleNode | None":
        """Find the node at a display path (package name first)."""
        target = tuple(path)
        for node in self.walk():
            if node.path == target:
                return node
        return None

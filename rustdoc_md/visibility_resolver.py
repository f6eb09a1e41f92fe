"""Logic for building the public module tree and canonical placements.

The raw module graph is walked from the package root. Items that pass the
inclusion policy get a placement under the module that declares them; `use`
items add further placements for their targets, so one item can appear under
several display paths. Module re-export cycles are cut by tracking the
modules on the current walk path, and `use` chains are followed with a
visited set and a fixed depth limit.
"""

import logging
from dataclasses import dataclass

from rustdoc_md.export_index import ExportIndex
from rustdoc_md.is_included import is_included
from rustdoc_md.item_info import ItemInfo
from rustdoc_md.module_node import ModuleNode, ReExport
from rustdoc_md.payloads import ModulePayload, UsePayload
from rustdoc_md.placement import Placement, PlacementMap

logger = logging.getLogger(__name__)

MAX_REEXPORT_DEPTH = 10

# Rendered on their owner's page, never placed on their own.
NEVER_PLACED_KINDS = frozenset(
    {"impl", "struct_field", "variant", "assoc_const", "assoc_type"}
)


@dataclass
class ResolvedTree:
    """Output of the resolver: the placement map plus the public module tree."""

    placements: PlacementMap
    root: ModuleNode

    def modules(self) -> list[ModuleNode]:
        return list(self.root.walk())


class VisibilityResolver:
    """Resolves visibility and re-exports into placements."""

    def __init__(self, index: ExportIndex, *, include_private: bool) -> None:
        """Initialize the resolver over a loaded export."""
        self.index = index
        self.include_private = include_private
        self._placements = PlacementMap()

    def resolve(self) -> ResolvedTree:
        """Walk the module graph from the root and return the resolved tree."""
        self._placements = PlacementMap()
        package = self.index.package
        root_path = (package.name,)
        self._placements.add(Placement(package.root_id, root_path))
        root = self._walk_module(package.root_id, root_path, frozenset())
        return ResolvedTree(placements=self._placements, root=root)

    def _included(self, item: ItemInfo) -> bool:
        return is_included(item, include_private=self.include_private)

    def _walk_module(
        self,
        module_id: str,
        path: tuple[str, ...],
        stack: frozenset[str],
    ) -> ModuleNode:
        node = ModuleNode(id=module_id, path=path)
        module = self.index.items[module_id]
        stack = stack | {module_id}
        payload = module.payload
        child_ids = payload.items if isinstance(payload, ModulePayload) else []

        for child_id in child_ids:
            child = self.index.get(child_id)
            if child is None:
                logger.debug("Module %s lists unknown item %s", module_id, child_id)
                continue
            if not self._included(child):
                continue
            if isinstance(child.payload, UsePayload):
                self._expand_use(node, child, child.payload, stack)
            elif isinstance(child.payload, ModulePayload):
                self._place_module(
                    node, child_id, child.name, stack, via_reexport=False
                )
            else:
                self._place_item(node, child, child.name, via_reexport=False)

        node.children.sort(key=lambda n: (n.name.lower(), n.name))
        node.members.sort(key=lambda p: (p.name.lower(), p.name, p.item_id))
        return node

    def _place_module(
        self,
        node: ModuleNode,
        module_id: str,
        name: str | None,
        stack: frozenset[str],
        *,
        via_reexport: bool,
    ) -> None:
        if not name:
            return
        if module_id in stack:
            logger.debug("Skipping re-export cycle through module %s", module_id)
            return
        child_path = node.path + (name,)
        if any(c.path == child_path for c in node.children):
            return
        self._placements.add(Placement(module_id, child_path, via_reexport))
        node.children.append(self._walk_module(module_id, child_path, stack))

    def _place_item(
        self,
        node: ModuleNode,
        item: ItemInfo,
        name: str | None,
        *,
        via_reexport: bool,
    ) -> None:
        if not name or item.kind in NEVER_PLACED_KINDS:
            return
        placement = Placement(item.id, node.path + (name,), via_reexport)
        if self._placements.add(placement):
            node.members.append(placement)

    def _expand_use(
        self,
        node: ModuleNode,
        use_item: ItemInfo,
        use: UsePayload,
        stack: frozenset[str],
    ) -> None:
        if use.target is None or use.target not in self.index.items:
            # external or unresolvable source: listed, never placed
            node.reexports.append(_reexport_entry(use_item, use))
            return
        if use.is_glob:
            self._expand_glob(node, use.target, stack, set())
            return

        target_id = self._follow_chain(use.target)
        if target_id is None:
            return
        target = self.index.get(target_id)
        if target is None:
            node.reexports.append(_reexport_entry(use_item, use))
            return
        if not self._included(target):
            return
        if isinstance(target.payload, ModulePayload):
            self._place_module(node, target.id, use.name, stack, via_reexport=True)
        else:
            self._place_item(node, target, use.name, via_reexport=True)

    def _follow_chain(self, target_id: str | None) -> str | None:
        """Follow `use` items that point at other `use` items to the final target."""
        visited: set[str] = set()
        current = target_id
        for _ in range(MAX_REEXPORT_DEPTH):
            item = self.index.get(current)
            if item is None or not isinstance(item.payload, UsePayload):
                return current
            if item.payload.is_glob or current in visited:
                return None
            visited.add(str(current))
            current = item.payload.target
        logger.debug("Re-export chain from %s exceeds depth limit", target_id)
        return None

    def _expand_glob(
        self,
        node: ModuleNode,
        module_id: str,
        stack: frozenset[str],
        visited: set[str],
    ) -> None:
        if module_id in visited:
            return
        visited.add(module_id)
        if module_id in stack:
            # glob of the current module or one of its ancestors
            return
        module = self.index.items[module_id]
        if not isinstance(module.payload, ModulePayload):
            # enum variant globs have nothing to place
            return

        for child_id in module.payload.items:
            child = self.index.get(child_id)
            if child is None or not self._included(child):
                continue
            if isinstance(child.payload, UsePayload):
                nested = child.payload
                if nested.is_glob and nested.target in self.index.items:
                    self._expand_glob(node, str(nested.target), stack, visited)
            elif isinstance(child.payload, ModulePayload):
                self._place_module(
                    node, child_id, child.name, stack, via_reexport=True
                )
            else:
                self._place_item(node, child, child.name, via_reexport=True)


def _reexport_entry(use_item: ItemInfo, use: UsePayload) -> ReExport:
    return ReExport(
        item_id=use_item.id,
        name=use.name,
        source=use.source,
        target=use.target,
        is_glob=use.is_glob,
    )


def resolve_visibility(index: ExportIndex, *, include_private: bool) -> ResolvedTree:
    """Build the placement map and public module tree for an export."""
    return VisibilityResolver(index, include_private=include_private).resolve()

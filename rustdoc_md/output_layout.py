"""Logic for deciding output files and collision-free destination paths.

The layout is planned before anything is rendered so that cross-references
can point at the files and anchors that will actually be emitted. Three
granularities are supported:

- ``single``: one ``index.md`` holding every module; items get anchors.
- ``module``: one page per public module; items are anchored sections.
- ``item``: one page per placed item at its primary placement; modules get an
  overview page only when they carry docs or external re-exports.

Name clashes inside one directory (or one page) are resolved by switching
every clashing entry to a kind-qualified name, then by appending ``-2``,
``-3``, ... in identifier order. Each clash is recorded in the report.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from rustdoc_md.as_id import id_sort_key
from rustdoc_md.conversion_report import ConversionReport
from rustdoc_md.export_index import ExportIndex
from rustdoc_md.markdown import header_slug
from rustdoc_md.module_node import ModuleNode
from rustdoc_md.placement import Placement
from rustdoc_md.visibility_resolver import ResolvedTree

logger = logging.getLogger(__name__)

SINGLE = "single"
MODULE = "module"
ITEM = "item"
MODES = (SINGLE, MODULE, ITEM)

KIND_PREFIXES = {
    "module": "mod",
    "function": "fn",
    "struct": "struct",
    "enum": "enum",
    "union": "union",
    "trait": "trait",
    "trait_alias": "traitalias",
    "type_alias": "type",
    "constant": "constant",
    "static": "static",
    "macro": "macro",
    "proc_macro": "macro",
    "primitive": "primitive",
}

RESERVED_FILE_NAMES = frozenset({"index"})


def kind_prefix(kind: str) -> str:
    return KIND_PREFIXES.get(kind, kind)


def page_url(base_path: str, package: str, rel_path: str) -> str:
    """Build the link for a file relative to the package output directory."""
    rel = rel_path[:-3] if rel_path.endswith(".md") else rel_path
    if rel == "index":
        rel = ""
    elif rel.endswith("/index"):
        rel = rel[: -len("/index")]
    url = f"{base_path.rstrip('/')}/{package}"
    return f"{url}/{rel}" if rel else url


def module_file(module_path: tuple[str, ...]) -> str:
    """Return the overview file of a module, relative to the package directory."""
    segments = module_path[1:]
    return "/".join((*segments, "index.md"))


def predicted_href(
    base_path: str, mode: str, path: list[str], kind: str
) -> str:
    """Predict where another package built with the same layout puts an item."""
    package, segments = path[0], tuple(path[1:])
    if kind == "module":
        return page_url(base_path, package, module_file((package, *segments)))
    if mode == SINGLE:
        anchor = header_slug("-".join(path))
        return f"{page_url(base_path, package, 'index.md')}#{anchor}"
    if mode == MODULE:
        url = page_url(base_path, package, module_file((package, *segments[:-1])))
        return f"{url}#{header_slug(path[-1])}"
    return page_url(base_path, package, "/".join(segments) + ".md")


@dataclass
class FilePlan:
    """One output file to be rendered."""

    path: str  # relative to the package output directory
    kind: str  # document/module/item
    title: str
    target_id: str
    node: ModuleNode | None = None  # set for document and module files
    placement: Placement | None = None  # set for item files


class OutputLayout:
    """Planned output files and the location of every placed item."""

    def __init__(self, mode: str, package: str, base_path: str) -> None:
        """Initialize an empty layout."""
        self.mode = mode
        self.package = package
        self.base_path = base_path
        self.files: list[FilePlan] = []
        self._file_of: dict[str, FilePlan] = {}
        self._anchor_of: dict[str, str] = {}
        self._by_path: dict[str, FilePlan] = {}

    def add_file(self, plan: FilePlan, *, owns_target: bool = True) -> None:
        self.files.append(plan)
        self._by_path[plan.path] = plan
        if owns_target:
            self._file_of.setdefault(plan.target_id, plan)

    def place_anchor(self, item_id: str, plan: FilePlan, anchor: str) -> None:
        self._file_of.setdefault(item_id, plan)
        self._anchor_of.setdefault(item_id, anchor)

    def url_of(self, plan: FilePlan) -> str:
        return page_url(self.base_path, self.package, plan.path)

    def file_for(self, item_id: str) -> FilePlan | None:
        return self._file_of.get(item_id)

    def file_at(self, path: str) -> FilePlan | None:
        return self._by_path.get(path)

    def anchor_for(self, item_id: str) -> str | None:
        return self._anchor_of.get(item_id)

    def href_for(self, item_id: str) -> str | None:
        """Return the link for a placed item, or None when it has no location."""
        plan = self._file_of.get(item_id)
        if plan is None:
            return None
        url = self.url_of(plan)
        anchor = self._anchor_of.get(item_id)
        return f"{url}#{anchor}" if anchor else url


def plan_output_layout(
    tree: ResolvedTree,
    index: ExportIndex,
    *,
    mode: str,
    base_path: str,
    report: ConversionReport,
) -> OutputLayout:
    """Decide the output files and item locations for a resolved tree."""
    layout = OutputLayout(mode, index.package.name, base_path)
    planner = {SINGLE: _plan_single, MODULE: _plan_module, ITEM: _plan_item}[mode]
    planner(layout, tree, index, report)
    logger.debug("Planned %d output files in %s mode", len(layout.files), mode)
    return layout


def _is_primary_node(tree: ResolvedTree, node: ModuleNode) -> bool:
    primary = tree.placements.primary(node.id)
    return primary is not None and primary.path == node.path


def _plan_single(
    layout: OutputLayout,
    tree: ResolvedTree,
    index: ExportIndex,
    report: ConversionReport,
) -> None:
    plan = FilePlan(
        path="index.md",
        kind="document",
        title=index.package.name,
        target_id=tree.root.id,
        node=tree.root,
    )
    layout.add_file(plan, owns_target=False)

    entries: list[tuple[str, str, str, tuple[str, ...]]] = []
    for node in tree.modules():
        if _is_primary_node(tree, node):
            entries.append((node.id, "module", node.name, node.path))
        for placement in node.members:
            if tree.placements.is_primary(placement):
                kind = index.items[placement.item_id].kind
                entries.append(
                    (placement.item_id, kind, placement.name, placement.path)
                )

    anchors = _allocate_names(
        entries,
        base=lambda e: header_slug("-".join(e[3])),
        qualified=lambda e: header_slug(f"{kind_prefix(e[1])}-{'-'.join(e[3])}"),
        directory="index.md",
        report=report,
    )
    for item_id, anchor in anchors.items():
        layout.place_anchor(item_id, plan, anchor)


def _plan_module(
    layout: OutputLayout,
    tree: ResolvedTree,
    index: ExportIndex,
    report: ConversionReport,
) -> None:
    for node in tree.modules():
        plan = FilePlan(
            path=module_file(node.path),
            kind="module",
            title=node.name,
            target_id=node.id,
            node=node,
        )
        layout.add_file(plan, owns_target=_is_primary_node(tree, node))

        entries = [
            (p.item_id, index.items[p.item_id].kind, p.name, p.path)
            for p in node.members
            if tree.placements.is_primary(p)
        ]
        anchors = _allocate_names(
            entries,
            base=lambda e: header_slug(e[2]),
            qualified=lambda e: header_slug(f"{kind_prefix(e[1])}-{e[2]}"),
            directory=plan.path,
            report=report,
        )
        for item_id, anchor in anchors.items():
            layout.place_anchor(item_id, plan, anchor)


def _needs_overview(node: ModuleNode, index: ExportIndex) -> bool:
    return bool(index.items[node.id].docs) or bool(node.reexports)


def _plan_item(
    layout: OutputLayout,
    tree: ResolvedTree,
    index: ExportIndex,
    report: ConversionReport,
) -> None:
    entries_by_dir: dict[str, list[tuple[str, str, str, Placement]]] = {}
    # Module directories share URLs with same-named item files.
    subdirs: dict[str, set[str]] = {}
    for node in tree.modules():
        if len(node.path) > 1:
            parent = "/".join(node.path[1:-1])
            subdirs.setdefault(parent, set()).add(node.path[-1].lower())
        primary = _is_primary_node(tree, node)
        if _needs_overview(node, index):
            plan = FilePlan(
                path=module_file(node.path),
                kind="module",
                title=node.name,
                target_id=node.id,
                node=node,
            )
            layout.add_file(plan, owns_target=primary)

        directory = "/".join(node.path[1:])
        for p in node.members:
            if tree.placements.is_primary(p):
                kind = index.items[p.item_id].kind
                entries_by_dir.setdefault(directory, []).append(
                    (p.item_id, kind, p.name, p)
                )

    for directory in sorted(entries_by_dir):
        entries = entries_by_dir[directory]
        names = _allocate_names(
            entries,
            base=lambda e: e[2],
            qualified=lambda e: f"{kind_prefix(e[1])}.{e[2]}",
            directory=directory,
            report=report,
            reserved=RESERVED_FILE_NAMES | subdirs.get(directory, set()),
        )
        for item_id, kind, name, placement in sorted(
            entries, key=lambda e: (e[2].lower(), id_sort_key(e[0]))
        ):
            file_name = f"{names[item_id]}.md"
            path = f"{directory}/{file_name}" if directory else file_name
            layout.add_file(
                FilePlan(
                    path=path,
                    kind="item",
                    title=name,
                    target_id=item_id,
                    placement=placement,
                )
            )


def _allocate_names(
    entries: Iterable[tuple],
    *,
    base: Callable[[tuple], str],
    qualified: Callable[[tuple], str],
    directory: str,
    report: ConversionReport,
    reserved: frozenset[str] = frozenset(),
) -> dict[str, str]:
    """Assign each entry (id first) a unique, case-insensitive name."""
    entries = sorted(entries, key=lambda e: id_sort_key(e[0]))
    by_base: dict[str, list[tuple]] = {}
    for e in entries:
        by_base.setdefault(base(e).lower(), []).append(e)

    names: dict[str, str] = {}
    for key, group in by_base.items():
        clash = len(group) > 1 or key in reserved
        for e in group:
            names[e[0]] = qualified(e) if clash else base(e)

    by_name: dict[str, list[tuple]] = {}
    for e in entries:
        by_name.setdefault(names[e[0]].lower(), []).append(e)
    for group in by_name.values():
        for ordinal, e in enumerate(group[1:], start=2):
            names[e[0]] = f"{names[e[0]]}-{ordinal}"

    for key, group in sorted(by_base.items()):
        if len(group) > 1 or key in reserved:
            report.add_collision(
                directory, base(group[0]), {e[0]: names[e[0]] for e in group}
            )
    return names

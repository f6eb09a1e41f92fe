"""Logic for building the navigation tree in lock-step with emitted documents.

The tree mirrors the public module tree: one category node per module and
one doc node per emitted document, attached to the module the document
belongs to. A module's overview document (when one is emitted) is the first
child of its category.
"""

import logging
import re
from collections.abc import Sequence

from rustdoc_md.conversion_context import ConversionContext
from rustdoc_md.module_node import ModuleNode
from rustdoc_md.navigation_node import CATEGORY, DOC, NavigationNode
from rustdoc_md.output_layout import page_url
from rustdoc_md.output_unit import OutputUnit

logger = logging.getLogger(__name__)

SIDEBAR_KEY_RE = re.compile(r"[/.\-]")


def build_navigation(
    ctx: ConversionContext, units: list[OutputUnit], *, collapsed: bool
) -> NavigationNode:
    """Build the navigation tree for the documents of one run."""
    overviews: dict[tuple[str, ...], OutputUnit] = {}
    members: dict[tuple[str, ...], list[OutputUnit]] = {}
    for unit in units:
        plan = ctx.layout.file_at(unit.path)
        if plan is None:
            continue
        if plan.node is not None:
            overviews[plan.node.path] = unit
        elif plan.placement is not None:
            members.setdefault(plan.placement.module_path, []).append(unit)

    def doc(unit: OutputUnit, label: str) -> NavigationNode:
        return NavigationNode(
            label=label,
            kind=DOC,
            path=page_url(ctx.options.base_path, ctx.package, unit.path),
            doc_id=f"{ctx.package}/{unit.path.removesuffix('.md')}",
        )

    def build(node: ModuleNode) -> NavigationNode:
        overview = overviews.get(node.path)
        category = NavigationNode(
            label=node.name,
            kind=CATEGORY,
            path=ctx.module_link(node),
            collapsed=collapsed,
            module_path=node.path,
        )
        if overview is not None:
            label = "Overview" if len(units) > 1 else overview.title
            category.children.append(doc(overview, label))
        category.children.extend(build(child) for child in node.children)
        for unit in sorted(
            members.get(node.path, []), key=lambda u: (u.title.lower(), u.path)
        ):
            category.children.append(doc(unit, unit.title))
        return category

    root = build(ctx.tree.root)
    logger.debug(
        "Navigation: %d categories, %d documents",
        root.count(CATEGORY),
        root.count(DOC),
    )
    return root


def module_subtree(root: NavigationNode, path: Sequence[str]) -> NavigationNode | None:
    """Extract the navigation subtree of one module, or None when it is absent."""
    target = tuple(path)
    for node in root.walk():
        if node.kind == CATEGORY and node.module_path == target:
            return node
    return None


def sidebar_key(module_path: Sequence[str]) -> str:
    return SIDEBAR_KEY_RE.sub("_", "_".join(module_path))


def module_sidebars(root: NavigationNode) -> dict[str, NavigationNode]:
    """Return one module-scoped navigation view per non-root module."""
    sidebars: dict[str, NavigationNode] = {}
    for node in root.walk():
        if node.kind != CATEGORY or len(node.module_path) < 2:  # noqa: PLR2004
            continue
        subtree = module_subtree(root, node.module_path)
        if subtree is not None:
            sidebars[sidebar_key(node.module_path)] = subtree
    return sidebars

"""Logic for rendering module pages and module sections."""

from rustdoc_md.conversion_context import ConversionContext
from rustdoc_md.markdown import frontmatter, md_code, md_table
from rustdoc_md.module_node import ModuleNode
from rustdoc_md.output_layout import MODULE, FilePlan
from rustdoc_md.output_unit import LinkRef, OutputUnit
from rustdoc_md.page_parts import PageParts
from rustdoc_md.placement import Placement
from rustdoc_md.render_item_page import (
    breadcrumb,
    link_to,
    render_docs,
    render_item_section,
    render_summary,
)

GROUP_TITLES = {
    "struct": "Structs",
    "enum": "Enums",
    "union": "Unions",
    "trait": "Traits",
    "trait_alias": "Trait Aliases",
    "function": "Functions",
    "type_alias": "Type Aliases",
    "constant": "Constants",
    "static": "Statics",
    "macro": "Macros",
    "proc_macro": "Macros",
    "primitive": "Primitives",
}
OTHER_ITEMS = "Other Items"
GROUP_ORDER = [*dict.fromkeys(GROUP_TITLES.values()), OTHER_ITEMS]


def group_title(kind: str) -> str:
    return GROUP_TITLES.get(kind, OTHER_ITEMS)


def render_module_page(ctx: ConversionContext, plan: FilePlan) -> OutputUnit:
    """Render the overview page of one module."""
    node = plan.node or ctx.tree.root
    page = PageParts()
    page.add(*frontmatter(plan.title))
    if len(node.path) > 1:
        page.add(f"**Module:** {breadcrumb(ctx, node.path[:-1], page)}", "")
    label = "Crate" if len(node.path) == 1 else "Module"
    page.heading(1, f"{label} {node.name}")
    _render_module_intro(ctx, node, page)
    render_module_sections(ctx, node, page, level=2, inline=ctx.options.mode == MODULE)
    return OutputUnit(
        path=plan.path,
        title=plan.title,
        body=page.body(),
        links=page.manifest(),
        kind="module",
        target_id=node.id,
    )


def render_single_document(ctx: ConversionContext, plan: FilePlan) -> OutputUnit:
    """Render the whole package into one document."""
    root = plan.node or ctx.tree.root
    page = PageParts()
    page.add(*frontmatter(plan.title))
    page.heading(1, f"Crate {root.name}")
    _render_module_intro(ctx, root, page)

    modules = ctx.tree.modules()[1:]
    if modules:
        page.heading(2, "Contents")
        for node in modules:
            indent = "  " * (len(node.path) - 2)
            href = ctx.module_link(node)
            if href:
                page.extend_links([LinkRef(node.name, href)])
                page.add(f"{indent}- [{node.name}]({href})")
            else:
                page.add(f"{indent}- {node.name}")
        page.add("")

    render_module_sections(
        ctx, root, page, level=2, inline=True, include_children=False
    )
    for node in modules:
        primary = ctx.tree.placements.primary(node.id)
        anchor = None
        if primary is not None and primary.path == node.path:
            anchor = ctx.layout.anchor_for(node.id)
        page.heading(2, f"Module {'::'.join(node.path)}", anchor)
        _render_module_intro(ctx, node, page)
        render_module_sections(
            ctx, node, page, level=3, inline=True, include_children=False
        )

    return OutputUnit(
        path=plan.path,
        title=plan.title,
        body=page.body(),
        links=page.manifest(),
        kind="document",
        target_id=root.id,
    )


def _render_module_intro(
    ctx: ConversionContext, node: ModuleNode, page: PageParts
) -> None:
    primary = ctx.tree.placements.primary(node.id)
    if primary is not None and primary.path != node.path:
        source = link_to(ctx, page, node.id, "::".join(primary.path))
        page.add(f"Re-export of {source}.", "")
    docs = render_docs(ctx, ctx.index.items[node.id], page)
    if docs:
        page.add(docs, "")


def render_module_sections(
    ctx: ConversionContext,
    node: ModuleNode,
    page: PageParts,
    *,
    level: int,
    inline: bool,
    include_children: bool = True,
) -> None:
    """Render the child modules, members and re-exports of a module.

    With ``inline`` set, members placed here primarily are rendered as full
    sections; otherwise every member is a table row linking to its page.
    Members whose primary placement is elsewhere always link there.
    """
    if include_children and node.children:
        rows = []
        for child in node.children:
            href = ctx.module_link(child)
            if href:
                page.extend_links([LinkRef(child.name, href)])
                name = f"[{child.name}]({href})"
            else:
                name = child.name
            rows.append([name, render_summary(ctx, ctx.index.items[child.id], page)])
        page.heading(level, "Modules")
        page.add(md_table(["Name", "Description"], rows), "")

    groups: dict[str, list[Placement]] = {}
    for placement in node.members:
        kind = ctx.index.items[placement.item_id].kind
        groups.setdefault(group_title(kind), []).append(placement)

    for title in sorted(groups, key=GROUP_ORDER.index):
        page.heading(level, title)
        if inline:
            _render_inline_members(ctx, groups[title], page, level + 1)
        else:
            rows = [
                [
                    link_to(ctx, page, p.item_id, p.name),
                    render_summary(ctx, ctx.index.items[p.item_id], page),
                ]
                for p in groups[title]
            ]
            page.add(md_table(["Name", "Description"], rows), "")

    if node.reexports:
        page.heading(level, "Re-exports")
        for reexport in node.reexports:
            rendered = ctx.signatures.render(ctx.index.items[reexport.item_id])
            code = md_code(rendered.code)
            target = ctx.resolver.resolve(reexport.target, reexport.name)
            if target.is_link:
                page.extend_links([LinkRef(reexport.name, str(target.href))])
                page.add(f"- [{code}]({target.href})")
            else:
                page.add(f"- {code}")
        page.add("")


def _render_inline_members(
    ctx: ConversionContext,
    placements: list[Placement],
    page: PageParts,
    level: int,
) -> None:
    elsewhere = []
    for placement in placements:
        if ctx.tree.placements.is_primary(placement):
            render_item_section(
                ctx,
                ctx.index.items[placement.item_id],
                page,
                level=level,
                anchor=ctx.layout.anchor_for(placement.item_id),
            )
            continue
        primary = ctx.tree.placements.primary(placement.item_id)
        link = link_to(ctx, page, placement.item_id, placement.name)
        elsewhere.append(f"- {link} (re-export of {md_code('::'.join(primary.path))})")
    if elsewhere:
        page.add(*elsewhere, "")

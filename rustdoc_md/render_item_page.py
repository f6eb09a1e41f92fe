"""Logic for rendering item pages and inline item sections."""

from rustdoc_md.conversion_context import ConversionContext
from rustdoc_md.cross_reference_resolver import member_anchor
from rustdoc_md.format_type import TypeFormatter
from rustdoc_md.implementation_classifier import impl_anchor_scope
from rustdoc_md.is_included import is_member_visible
from rustdoc_md.item_info import ItemInfo
from rustdoc_md.markdown import (
    first_paragraph,
    frontmatter,
    md_code,
    md_codeblock,
    md_table,
)
from rustdoc_md.output_layout import FilePlan
from rustdoc_md.output_unit import LinkRef, OutputUnit
from rustdoc_md.page_parts import PageParts
from rustdoc_md.payloads import (
    AssocConstPayload,
    AssocTypePayload,
    EnumPayload,
    FunctionPayload,
    ImplPayload,
    StructFieldPayload,
    StructPayload,
    TraitPayload,
    VariantPayload,
)
from rustdoc_md.placement import Placement
from rustdoc_md.rewrite_intra_doc_links import rewrite_intra_doc_links
from rustdoc_md.sanitize_docs import sanitize_docs

KIND_LABELS = {
    "module": "Module",
    "struct": "Struct",
    "enum": "Enum",
    "union": "Union",
    "trait": "Trait",
    "trait_alias": "Trait Alias",
    "function": "Function",
    "type_alias": "Type Alias",
    "constant": "Constant",
    "static": "Static",
    "macro": "Macro",
    "proc_macro": "Macro",
    "primitive": "Primitive",
}

# Kinds whose pages list methods and trait implementations.
IMPL_TARGET_KINDS = frozenset({"struct", "enum", "union", "primitive"})


def kind_label(kind: str) -> str:
    return KIND_LABELS.get(kind, kind.replace("_", " ").title())


def render_docs(ctx: ConversionContext, item: ItemInfo, page: PageParts) -> str:
    """Rewrite intra-doc links and sanitize an item's docs."""
    text, links = rewrite_intra_doc_links(item.docs, item.links, ctx.resolver.resolve)
    page.extend_links(links)
    return sanitize_docs(text)


def render_summary(ctx: ConversionContext, item: ItemInfo, page: PageParts) -> str:
    """Render the first paragraph of an item's docs as one line."""
    text, links = rewrite_intra_doc_links(item.docs, item.links, ctx.resolver.resolve)
    summary = first_paragraph(sanitize_docs(text))
    if summary.startswith(("```", "~~~", "<")):
        return ""
    page.extend_links([link for link in links if link.href in summary])
    return summary


def link_to(
    ctx: ConversionContext, page: PageParts, item_id: str | None, name: str
) -> str:
    """Render a name linked to an item, or the bare name when unresolved."""
    target = ctx.resolver.resolve(item_id, name)
    if target.is_link:
        page.extend_links([LinkRef(name, str(target.href))])
    return target.markdown(name)


def breadcrumb(
    ctx: ConversionContext, module_path: tuple[str, ...], page: PageParts
) -> str:
    """Render a module path with a link on every module that has a page."""
    crumbs = []
    for i in range(1, len(module_path) + 1):
        node = ctx.tree.root.find(module_path[:i])
        href = ctx.module_link(node) if node is not None else None
        segment = module_path[i - 1]
        if href:
            page.extend_links([LinkRef(segment, href)])
            crumbs.append(f"[{segment}]({href})")
        else:
            crumbs.append(segment)
    return "::".join(crumbs)


def render_item_page(ctx: ConversionContext, plan: FilePlan) -> OutputUnit:
    """Render the page of one item in per-item mode."""
    item = ctx.index.items[plan.target_id]
    page = PageParts()
    page.add(*frontmatter(plan.title))
    if plan.placement is not None:
        crumbs = breadcrumb(ctx, plan.placement.module_path, page)
        page.add(f"**Module:** {crumbs}", "")
    render_item_section(ctx, item, page, level=1)
    _render_other_placements(ctx, item, plan.placement, page)
    return OutputUnit(
        path=plan.path,
        title=plan.title,
        body=page.body(),
        links=page.manifest(),
        kind="item",
        target_id=item.id,
    )


def render_item_section(
    ctx: ConversionContext,
    item: ItemInfo,
    page: PageParts,
    *,
    level: int,
    anchor: str | None = None,
) -> None:
    """Render an item's heading, declaration, docs and members."""
    page.heading(level, f"{kind_label(item.kind)} {item.display_name}", anchor)
    _render_deprecation(item, page)

    rendered = ctx.signatures.render(item)
    page.extend_links(rendered.links)
    page.add(md_codeblock("rust", rendered.code), "")

    docs = render_docs(ctx, item, page)
    if docs:
        page.add(docs, "")

    types = ctx.markdown_types()
    payload = item.payload
    if isinstance(payload, StructPayload):
        _render_fields(ctx, payload, page, types, anchor, level + 1)
    elif isinstance(payload, EnumPayload):
        _render_variants(ctx, payload, page, anchor, level + 1)
    elif isinstance(payload, TraitPayload):
        _render_trait_items(ctx, payload, page, anchor, level + 1)
        _render_implementors(ctx, payload, page, types, level + 1)
    if item.kind in IMPL_TARGET_KINDS:
        _render_implementations(ctx, item, page, anchor, level + 1)
    page.extend_links(types.links)


def _render_deprecation(item: ItemInfo, page: PageParts) -> None:
    dep = item.deprecation
    if dep is None:
        return
    text = "**Deprecated**"
    if dep.since:
        text += f" since {dep.since}"
    if dep.note:
        text += f": {dep.note}"
    page.add(f"> {text}", "")


def _render_other_placements(
    ctx: ConversionContext,
    item: ItemInfo,
    primary: Placement | None,
    page: PageParts,
) -> None:
    others = [
        md_code("::".join(p.path))
        for p in ctx.tree.placements.placements(item.id)
        if p != primary
    ]
    if others:
        page.add(f"**Also available as:** {', '.join(others)}", "")


def _render_member(
    ctx: ConversionContext,
    member: ItemInfo,
    page: PageParts,
    *,
    owner_anchor: str | None,
    level: int,
    scope: str | None = None,
) -> None:
    anchor = member_anchor(owner_anchor, member.kind, member.display_name, scope)
    page.heading(level, md_code(member.display_name), anchor)
    _render_deprecation(member, page)
    rendered = ctx.signatures.render(member)
    page.extend_links(rendered.links)
    page.add(md_codeblock("rust", rendered.code), "")
    docs = render_docs(ctx, member, page)
    if docs:
        page.add(docs, "")


def _render_fields(
    ctx: ConversionContext,
    payload: StructPayload,
    page: PageParts,
    types: TypeFormatter,
    owner_anchor: str | None,
    level: int,
) -> None:
    rows = []
    for field_id in payload.fields:
        field = ctx.index.get(field_id)
        if field is None or not isinstance(field.payload, StructFieldPayload):
            continue
        if not is_member_visible(
            ctx.index, field.id, include_private=ctx.options.include_private
        ):
            continue
        tag = page.anchor(member_anchor(owner_anchor, field.kind, field.display_name))
        rows.append(
            [
                tag + md_code(field.display_name),
                types.format(field.payload.type),
                render_summary(ctx, field, page),
            ]
        )
    if rows:
        page.heading(level, "Fields")
        page.add(md_table(["Name", "Type", "Description"], rows), "")


def _render_variants(
    ctx: ConversionContext,
    payload: EnumPayload,
    page: PageParts,
    owner_anchor: str | None,
    level: int,
) -> None:
    rows = []
    for variant_id in payload.variants:
        variant = ctx.index.get(variant_id)
        if variant is None or not isinstance(variant.payload, VariantPayload):
            continue
        anchor = member_anchor(owner_anchor, variant.kind, variant.display_name)
        tags = page.anchor(anchor)
        if variant.payload.shape == "struct":
            for field_id in variant.payload.fields:
                field = ctx.index.get(field_id)
                if field is not None and field.name:
                    tags += page.anchor(member_anchor(anchor, field.kind, field.name))
        rendered = ctx.signatures.render(variant)
        page.extend_links(rendered.links)
        rows.append([tags + md_code(rendered.code), render_summary(ctx, variant, page)])
    if rows:
        page.heading(level, "Variants")
        page.add(md_table(["Variant", "Description"], rows), "")


def _render_trait_items(
    ctx: ConversionContext,
    payload: TraitPayload,
    page: PageParts,
    owner_anchor: str | None,
    level: int,
) -> None:
    buckets: dict[str, list[ItemInfo]] = {
        "Associated Types": [],
        "Associated Constants": [],
        "Required Methods": [],
        "Provided Methods": [],
    }
    for member_id in payload.items:
        member = ctx.index.get(member_id)
        if member is None:
            continue
        if isinstance(member.payload, AssocTypePayload):
            buckets["Associated Types"].append(member)
        elif isinstance(member.payload, AssocConstPayload):
            buckets["Associated Constants"].append(member)
        elif isinstance(member.payload, FunctionPayload):
            key = "Provided Methods" if member.payload.has_body else "Required Methods"
            buckets[key].append(member)

    for title, members in buckets.items():
        if not members:
            continue
        page.heading(level, title)
        for member in members:
            _render_member(
                ctx, member, page, owner_anchor=owner_anchor, level=level + 1
            )


def _render_implementors(
    ctx: ConversionContext,
    payload: TraitPayload,
    page: PageParts,
    types: TypeFormatter,
    level: int,
) -> None:
    implementors: set[str] = set()
    for impl_id in payload.implementations:
        impl_item = ctx.index.get(impl_id)
        if impl_item is None or not isinstance(impl_item.payload, ImplPayload):
            continue
        if ctx.classifier.is_noise(impl_item.payload):
            continue
        prefix = "!" if impl_item.payload.is_negative else ""
        implementors.add(prefix + types.format(impl_item.payload.for_type))
    if implementors:
        page.heading(level, "Implementors")
        page.add(*(f"- {entry}" for entry in sorted(implementors)), "")


def _render_implementations(
    ctx: ConversionContext,
    item: ItemInfo,
    page: PageParts,
    owner_anchor: str | None,
    level: int,
) -> None:
    group = ctx.classifier.classify(item.id)

    methods = [
        ctx.index.items[m]
        for m in group.inherent_members
        if is_member_visible(ctx.index, m, include_private=ctx.options.include_private)
    ]
    if methods:
        page.heading(level, "Methods")
        for member in methods:
            _render_member(
                ctx, member, page, owner_anchor=owner_anchor, level=level + 1
            )

    traits = group.trait_implementations()
    if not traits:
        return
    page.heading(level, "Trait Implementations")
    markers = [
        ("!" if t.is_negative else "") + link_to(ctx, page, t.trait_id, t.trait_name)
        for t in traits
        if t.is_marker
    ]
    if markers:
        page.add(f"**Traits:** {', '.join(markers)}", "")

    for trait in traits:
        if trait.is_marker:
            continue
        impl_item = ctx.index.items[trait.impl_id]
        page.heading(level + 1, f"impl {trait.trait_name}")
        rendered = ctx.signatures.render(impl_item)
        page.extend_links(rendered.links)
        page.add(md_codeblock("rust", rendered.code), "")
        docs = render_docs(ctx, impl_item, page)
        if docs:
            page.add(docs, "")
        for member_id in trait.members:
            _render_member(
                ctx,
                ctx.index.items[member_id],
                page,
                owner_anchor=owner_anchor,
                level=level + 2,
                scope=impl_anchor_scope(trait.trait_name),
            )
        if trait.defaults_not_overridden:
            provided = ", ".join(md_code(n) for n in trait.defaults_not_overridden)
            page.add(f"Provided by default: {provided}", "")

"""Logic for mapping item identifiers to link targets.

Decision order: a placed local item links into this package's output; an
item owned by a declared workspace sibling links into that sibling's output,
predicted with the same layout rules; any other externally summarized item
links to its documentation host; everything else is unlinked. Resolution never
raises, and results are memoized so a given id always yields the same target.
"""

import logging

from rustdoc_md.conversion_options import ConversionOptions, normalize_package_name
from rustdoc_md.conversion_report import ConversionReport
from rustdoc_md.export_index import ExportIndex
from rustdoc_md.implementation_classifier import impl_anchor_scope, trait_path
from rustdoc_md.is_included import is_member_visible
from rustdoc_md.link_target import EXTERNAL, INTERNAL, SIBLING, LinkTarget, no_link
from rustdoc_md.markdown import header_slug
from rustdoc_md.output_layout import OutputLayout, predicted_href
from rustdoc_md.package_info import ExternalSummary
from rustdoc_md.payloads import ImplPayload

logger = logging.getLogger(__name__)

STD_PACKAGES = frozenset({"std", "core", "alloc", "proc_macro", "test"})

# Implementation-detail modules that do not appear in published doc URLs.
INTERNAL_MODULE_NAMES = frozenset({"bounded", "unbounded", "inner", "private", "imp"})

EXTERNAL_PAGE_PREFIXES = {
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
    "primitive": "primitive",
    "proc_attribute": "attr",
    "proc_derive": "derive",
    "keyword": "keyword",
}

# Member kinds live on their owner's page: (owner page prefix, fragment prefix).
EXTERNAL_MEMBER_ANCHORS = {
    "variant": ("enum", "variant"),
    "struct_field": ("struct", "structfield"),
    "assoc_type": ("trait", "associatedtype"),
    "assoc_const": ("trait", "associatedconstant"),
}

MEMBER_ANCHOR_PREFIXES = {
    "struct_field": "field",
    "variant": "variant",
    "function": "method",
    "assoc_const": "const",
    "assoc_type": "type",
}

MAX_OWNER_DEPTH = 3


def member_anchor(
    owner_anchor: str | None, kind: str, name: str, scope: str | None = None
) -> str:
    """Anchor of a field, variant or associated item on its owner's page."""
    prefix = MEMBER_ANCHOR_PREFIXES.get(kind, kind)
    parts = (owner_anchor, scope, prefix, name)
    return header_slug("-".join(p for p in parts if p))


class CrossReferenceResolver:
    """Resolves identifiers to internal, sibling or external link targets."""

    def __init__(
        self,
        index: ExportIndex,
        layout: OutputLayout,
        options: ConversionOptions,
        report: ConversionReport,
    ) -> None:
        """Initialize the resolver with the planned layout of this package."""
        self.index = index
        self.layout = layout
        self.options = options
        self.report = report
        self._workspace = {
            normalize_package_name(p) for p in options.workspace_packages
        }
        self._cache: dict[str, LinkTarget] = {}

    def resolve(self, item_id: str | None, title: str | None = None) -> LinkTarget:
        """Compute where a reference to an item points. Never raises."""
        if item_id is None:
            return no_link(title or "")
        cached = self._cache.get(item_id)
        if cached is None:
            cached = self._resolve(item_id, title)
            self._cache[item_id] = cached
        return cached

    def _resolve(self, item_id: str, title: str | None) -> LinkTarget:
        item = self.index.get(item_id)
        if item is not None:
            name = item.display_name
            href = self.layout.href_for(item_id)
            if href:
                return LinkTarget(kind=INTERNAL, title=name, href=href)
            member = self._member_target(item_id)
            if member is not None:
                return member
            return no_link(name)

        summary = self.index.external.get(item_id)
        if summary is not None:
            return self._external_target(summary)

        self.report.add_miss(item_id, title or item_id)
        return no_link(title or item_id)

    def _member_target(self, item_id: str) -> LinkTarget | None:
        """Link a field, variant or associated item through its owner's page."""
        chain = [item_id]
        owner_id = self.index.owners.get(item_id)
        while owner_id is not None and len(chain) <= MAX_OWNER_DEPTH:
            if self.layout.file_for(owner_id) is not None:
                break
            chain.append(owner_id)
            owner_id = self.index.owners.get(owner_id)
        if owner_id is None or self.layout.file_for(owner_id) is None:
            return None
        if not all(
            is_member_visible(
                self.index, m, include_private=self.options.include_private
            )
            for m in chain
        ):
            return None

        plan = self.layout.file_for(owner_id)
        anchor = self.layout.anchor_for(owner_id)
        names = [self.index.items[owner_id].display_name]
        for member_id in reversed(chain):
            member = self.index.items[member_id]
            anchor = member_anchor(
                anchor, member.kind, member.display_name, self._impl_scope(member_id)
            )
            names.append(member.display_name)
        href = f"{self.layout.url_of(plan)}#{anchor}"
        return LinkTarget(kind=INTERNAL, title="::".join(names), href=href)

    def _impl_scope(self, member_id: str) -> str | None:
        container = self.index.get(self.index.containers.get(member_id, ""))
        if container is None or not isinstance(container.payload, ImplPayload):
            return None
        if container.payload.trait_ref is None:
            return None
        name = trait_path(self.index, container.payload).rsplit("::", 1)[-1]
        return impl_anchor_scope(name)

    def _external_target(self, summary: ExternalSummary) -> LinkTarget:
        if summary.crate_id == 0 or not summary.path:
            # local item that the export does not document
            return no_link(summary.name)

        package = normalize_package_name(summary.crate_name)
        if package in self._workspace:
            path = [normalize_package_name(summary.path[0]), *summary.path[1:]]
            kind = summary.kind
            if kind in EXTERNAL_MEMBER_ANCHORS and len(path) > 2:  # noqa: PLR2004
                path, kind = path[:-1], EXTERNAL_MEMBER_ANCHORS[kind][0]
            href = predicted_href(self.options.base_path, self.options.mode, path, kind)
            return LinkTarget(kind=SIBLING, title=summary.name, href=href)

        return LinkTarget(
            kind=EXTERNAL, title=summary.name, href=self._external_url(summary)
        )

    def _external_url(self, summary: ExternalSummary) -> str:
        package = summary.crate_name
        page = _external_page(summary)
        links = self.options.links

        if package in STD_PACKAGES:
            return f"{links.std_host.rstrip('/')}/{package}/{page}"

        ext = self.index.package.external_packages.get(summary.crate_id)
        if ext is not None and ext.html_root_url:
            return f"{ext.html_root_url.rstrip('/')}/{package}/{page}"

        version = (
            links.versions.get(package)
            or links.versions.get(package.replace("_", "-"))
            or links.default_version
        )
        host = links.external_host.rstrip("/")
        return f"{host}/{package}/{version}/{package}/{page}"


def _external_page(summary: ExternalSummary) -> str:
    """Path of an item's page below its package root on a rustdoc host."""
    path = summary.path
    name = path[-1]
    kind = summary.kind

    if kind == "module":
        modules = [s for s in path[1:] if s not in INTERNAL_MODULE_NAMES]
        return "/".join((*modules, "index.html"))

    if kind in EXTERNAL_MEMBER_ANCHORS and len(path) > 2:  # noqa: PLR2004
        owner_prefix, fragment = EXTERNAL_MEMBER_ANCHORS[kind]
        modules = [s for s in path[1:-2] if s not in INTERNAL_MODULE_NAMES]
        page = f"{owner_prefix}.{path[-2]}.html#{fragment}.{name}"
        return "/".join((*modules, page))

    prefix = EXTERNAL_PAGE_PREFIXES.get(kind, kind)
    modules = [s for s in path[1:-1] if s not in INTERNAL_MODULE_NAMES]
    return "/".join((*modules, f"{prefix}.{name}.html"))

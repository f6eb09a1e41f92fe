"""Shared, read-only state of one conversion run."""

from dataclasses import dataclass

from rustdoc_md.conversion_options import ConversionOptions
from rustdoc_md.conversion_report import ConversionReport
from rustdoc_md.cross_reference_resolver import CrossReferenceResolver
from rustdoc_md.export_index import ExportIndex
from rustdoc_md.format_type import TypeFormatter
from rustdoc_md.implementation_classifier import ImplementationClassifier
from rustdoc_md.module_node import ModuleNode
from rustdoc_md.output_layout import OutputLayout, module_file, plan_output_layout
from rustdoc_md.render_signature import SignatureFormatter
from rustdoc_md.visibility_resolver import ResolvedTree, resolve_visibility


@dataclass
class ConversionContext:
    """Everything the emission stage needs, threaded explicitly through it."""

    options: ConversionOptions
    index: ExportIndex
    tree: ResolvedTree
    layout: OutputLayout
    resolver: CrossReferenceResolver
    classifier: ImplementationClassifier
    signatures: SignatureFormatter
    report: ConversionReport

    @property
    def package(self) -> str:
        return self.index.package.name

    def markdown_types(self) -> TypeFormatter:
        """Return a fresh formatter for types rendered inline in Markdown."""
        return TypeFormatter(self.resolver.resolve, markdown=True)

    def module_link(self, node: ModuleNode) -> str | None:
        """Link of a module node when a page or anchor actually exists for it."""
        plan = self.layout.file_at(module_file(node.path))
        if plan is not None:
            return self.layout.url_of(plan)
        primary = self.tree.placements.primary(node.id)
        if primary is None or primary.path != node.path:
            return None
        if self.layout.file_for(node.id) is None:
            return None
        return self.layout.href_for(node.id)


def build_context(
    index: ExportIndex, options: ConversionOptions, report: ConversionReport
) -> ConversionContext:
    """Run the resolution stages and collect their outputs into a context."""
    tree = resolve_visibility(index, include_private=options.include_private)
    layout = plan_output_layout(
        tree, index, mode=options.mode, base_path=options.base_path, report=report
    )
    resolver = CrossReferenceResolver(index, layout, options, report)
    return ConversionContext(
        options=options,
        index=index,
        tree=tree,
        layout=layout,
        resolver=resolver,
        classifier=ImplementationClassifier(index, options.noise_traits),
        signatures=SignatureFormatter(
            index,
            resolver.resolve,
            include_private=options.include_private,
            report=report,
        ),
        report=report,
    )

"""Logic for rendering every planned output file."""

import logging
from collections.abc import Callable

from rustdoc_md.conversion_context import ConversionContext
from rustdoc_md.output_layout import FilePlan
from rustdoc_md.output_unit import OutputUnit
from rustdoc_md.render_item_page import render_item_page
from rustdoc_md.render_module_page import render_module_page, render_single_document

logger = logging.getLogger(__name__)

RENDERERS: dict[str, Callable[[ConversionContext, FilePlan], OutputUnit]] = {
    "document": render_single_document,
    "module": render_module_page,
    "item": render_item_page,
}


def emit_documents(ctx: ConversionContext) -> list[OutputUnit]:
    """Render the planned files in layout order."""
    units = [RENDERERS[plan.kind](ctx, plan) for plan in ctx.layout.files]
    logger.debug("Rendered %d documents for %s", len(units), ctx.package)
    return units

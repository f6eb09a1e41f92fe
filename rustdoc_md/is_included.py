"""Utility for applying the visibility inclusion policy."""

from rustdoc_md.export_index import ExportIndex
from rustdoc_md.item_info import ItemInfo
from rustdoc_md.payloads import ImplPayload, ModulePayload
from rustdoc_md.visibility import DEFAULT


def is_included(item: ItemInfo, *, include_private: bool) -> bool:
    """Check if an item belongs in the output under the active policy."""
    if item.visibility.is_public:
        return True
    if not include_private:
        return False
    return not (isinstance(item.payload, ModulePayload) and item.payload.is_stripped)


def is_member_visible(
    index: ExportIndex, member_id: str, *, include_private: bool
) -> bool:
    """Check if a field, variant or associated item is shown on its owner's page.

    Variants, trait items and trait implementation items carry no visibility of
    their own and follow their container. Struct fields and inherent methods
    follow the inclusion policy.
    """
    member = index.get(member_id)
    if member is None:
        return False
    if is_included(member, include_private=include_private):
        return True
    container = index.get(index.containers.get(member_id))
    if member.kind == "struct_field":
        return container is not None and container.kind == "variant"
    if member.visibility.kind != DEFAULT:
        return False
    if container is None:
        return False
    if isinstance(container.payload, ImplPayload):
        return container.payload.trait_ref is not None
    return container.kind in ("enum", "variant", "trait")


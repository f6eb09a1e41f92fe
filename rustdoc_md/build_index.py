"""Logic for building the item and external-summary indices of an export."""

from typing import Any

from rustdoc_md.as_id import as_id
from rustdoc_md.export_index import ExportIndex
from rustdoc_md.implementation_classifier import impl_target_id
from rustdoc_md.item_info import Deprecation, ItemInfo
from rustdoc_md.package_info import ExternalPackage, ExternalSummary, PackageInfo
from rustdoc_md.parse_payload import parse_payload
from rustdoc_md.payloads import (
    EnumPayload,
    ImplPayload,
    StructPayload,
    TraitPayload,
    VariantPayload,
)
from rustdoc_md.visibility import parse_visibility


def build_index(doc: dict[str, Any], format_version: int) -> ExportIndex:
    """Index a parsed export into items, external summaries and member owners."""
    items: dict[str, ItemInfo] = {}
    for key, raw in (doc.get("index") or {}).items():
        if not isinstance(raw, dict):
            continue
        item_id = as_id(raw.get("id")) or as_id(key)
        if item_id is None:
            continue
        items[item_id] = _build_item(item_id, raw)

    root_id = str(as_id(doc.get("root")))
    root = items[root_id]
    external_packages = _build_external_packages(doc.get("external_crates") or {})
    package = PackageInfo(
        name=root.name or "crate",
        version=doc.get("crate_version"),
        root_id=root_id,
        includes_private=bool(doc.get("includes_private")),
        format_version=format_version,
        external_packages=external_packages,
    )

    external: dict[str, ExternalSummary] = {}
    for key, summary in (doc.get("paths") or {}).items():
        summary_id = as_id(key)
        if summary_id is None or summary_id in items or not isinstance(summary, dict):
            continue
        crate_id = int(summary.get("crate_id") or 0)
        path = [str(s) for s in (summary.get("path") or [])]
        if crate_id == 0:
            crate_name = package.name
        elif crate_id in external_packages:
            crate_name = external_packages[crate_id].name
        else:
            crate_name = path[0] if path else "unknown"
        external[summary_id] = ExternalSummary(
            id=summary_id,
            crate_id=crate_id,
            crate_name=crate_name,
            path=path,
            kind=str(summary.get("kind") or "unknown"),
        )

    owners, containers = _build_owners(items)
    return ExportIndex(
        package=package,
        items=items,
        external=external,
        owners=owners,
        containers=containers,
    )


def _build_item(item_id: str, raw: dict[str, Any]) -> ItemInfo:
    inner = raw.get("inner")
    if isinstance(inner, dict) and len(inner) == 1:
        kind = str(next(iter(inner)))
    elif isinstance(inner, str):
        kind = inner
    else:
        kind = "unknown"

    links = {
        str(text): target
        for text, target in ((t, as_id(v)) for t, v in (raw.get("links") or {}).items())
        if target is not None
    }

    name = raw.get("name")
    return ItemInfo(
        id=item_id,
        kind=kind,
        name=str(name) if name else None,
        visibility=parse_visibility(raw.get("visibility")),
        docs=str(raw.get("docs") or "").strip(),
        deprecation=_parse_deprecation(raw.get("deprecation")),
        links=links,
        attrs=[_attr_text(a) for a in (raw.get("attrs") or [])],
        payload=parse_payload(inner),
        raw=raw,
        crate_id=int(raw.get("crate_id") or 0),
    )


def _parse_deprecation(raw: Any) -> Deprecation | None:
    if not isinstance(raw, dict):
        return None
    since = raw.get("since")
    note = raw.get("note")
    return Deprecation(
        since=str(since) if since else None,
        note=str(note) if note else None,
    )


def _attr_text(attr: Any) -> str:
    """Normalize an attribute, which newer exports encode as a tagged object."""
    if isinstance(attr, str):
        return attr if attr.startswith("#") else f"#[{attr}]"
    if isinstance(attr, dict) and len(attr) == 1:
        tag, value = next(iter(attr.items()))
        if tag == "other":
            return str(value)
        if tag == "repr" and isinstance(value, dict):
            repr_kind = str(value.get("kind") or "rust")
            return f"#[repr({'C' if repr_kind == 'c' else repr_kind})]"
        return f"#[{tag}]"
    return str(attr)


def _build_external_packages(raw: dict[str, Any]) -> dict[int, ExternalPackage]:
    packages: dict[int, ExternalPackage] = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict) or not str(key).isdigit():
            continue
        url = entry.get("html_root_url")
        packages[int(key)] = ExternalPackage(
            name=str(entry.get("name") or ""),
            html_root_url=str(url) if url else None,
        )
    return packages


def _build_owners(
    items: dict[str, ItemInfo],
) -> tuple[dict[str, str], dict[str, str]]:
    """Map fields, variants and associated items to the item that displays them.

    Also returns the item that directly encloses each member (the impl block
    rather than the type, for associated items of implementations).
    """
    owners: dict[str, str] = {}
    containers: dict[str, str] = {}
    for item_id, item in items.items():
        payload = item.payload
        owner_id = item_id
        members: list[str | None] = []
        if isinstance(payload, StructPayload):
            members = list(payload.fields)
        elif isinstance(payload, EnumPayload):
            members = list(payload.variants)
        elif isinstance(payload, VariantPayload):
            members = list(payload.fields)
        elif isinstance(payload, TraitPayload):
            members = list(payload.items)
        elif isinstance(payload, ImplPayload):
            target = impl_target_id(payload)
            if target is not None:
                members = list(payload.items)
                owner_id = target
        for member in members:
            if member is not None:
                owners.setdefault(member, owner_id)
                containers.setdefault(member, item_id)
    return owners, containers


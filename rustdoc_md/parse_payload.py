"""Logic for reading the ``inner`` object of a rustdoc item into a payload."""

import logging
from collections.abc import Callable
from typing import Any

from rustdoc_md.as_id import as_id
from rustdoc_md.payloads import (
    AssocConstPayload,
    AssocTypePayload,
    ConstantPayload,
    EnumPayload,
    FunctionPayload,
    Generics,
    ImplPayload,
    MacroPayload,
    ModulePayload,
    Payload,
    PrimitivePayload,
    ProcMacroPayload,
    StaticPayload,
    StructFieldPayload,
    StructPayload,
    TraitPayload,
    TypeAliasPayload,
    UnknownPayload,
    UsePayload,
    VariantPayload,
)

logger = logging.getLogger(__name__)


def _ids(values: Any) -> list[str]:
    return [i for i in (as_id(v) for v in (values or [])) if i is not None]


def _optional_ids(values: Any) -> list[str | None]:
    return [as_id(v) for v in (values or [])]


def parse_generics(raw: Any) -> Generics:
    """Read a generics object, tolerating absent keys."""
    if not isinstance(raw, dict):
        return Generics()
    return Generics(
        params=list(raw.get("params") or []),
        where_predicates=list(raw.get("where_predicates") or []),
    )


def _shape(kind: Any) -> tuple[str, Any]:
    """Split a struct/variant kind into its tag and body."""
    if isinstance(kind, str):
        return kind, None
    if isinstance(kind, dict) and len(kind) == 1:
        tag, body = next(iter(kind.items()))
        return str(tag), body
    return "unit", None


def _parse_module(body: dict[str, Any]) -> ModulePayload:
    return ModulePayload(
        items=_ids(body.get("items")),
        is_crate=bool(body.get("is_crate")),
        is_stripped=bool(body.get("is_stripped")),
    )


def _parse_struct(body: dict[str, Any]) -> StructPayload:
    tag, kind_body = _shape(body.get("kind"))
    fields: list[str | None] = []
    stripped = False
    if tag == "tuple":
        fields = _optional_ids(kind_body)
        stripped = any(f is None for f in fields)
    elif tag == "plain":
        kind_body = kind_body or {}
        fields = list(_ids(kind_body.get("fields")))
        stripped = bool(kind_body.get("has_stripped_fields"))
    return StructPayload(
        shape=tag,
        fields=fields,
        generics=parse_generics(body.get("generics")),
        has_stripped_fields=stripped,
        impls=_ids(body.get("impls")),
    )


def _parse_enum(body: dict[str, Any]) -> EnumPayload:
    return EnumPayload(
        variants=_ids(body.get("variants")),
        generics=parse_generics(body.get("generics")),
        has_stripped_variants=bool(body.get("has_stripped_variants")),
        impls=_ids(body.get("impls")),
    )


def _parse_variant(body: dict[str, Any]) -> VariantPayload:
    tag, kind_body = _shape(body.get("kind"))
    fields: list[str | None] = []
    if tag == "tuple":
        fields = _optional_ids(kind_body)
    elif tag == "struct":
        fields = list(_ids((kind_body or {}).get("fields")))
    discriminant = body.get("discriminant")
    expr = discriminant.get("expr") if isinstance(discriminant, dict) else None
    return VariantPayload(shape=tag, fields=fields, discriminant=expr)


def _abi_name(abi: Any) -> str:
    if isinstance(abi, str):
        return abi
    if isinstance(abi, dict) and abi:
        tag, value = next(iter(abi.items()))
        if tag == "Other" and isinstance(value, str):
            return value
        return str(tag)
    return "Rust"


def _parse_function(body: dict[str, Any]) -> FunctionPayload:
    sig = body.get("sig") or {}
    header = body.get("header") or {}
    inputs = [
        (str(pair[0]), pair[1])
        for pair in (sig.get("inputs") or [])
        if isinstance(pair, list | tuple) and len(pair) == 2  # noqa: PLR2004
    ]
    return FunctionPayload(
        inputs=inputs,
        output=sig.get("output"),
        generics=parse_generics(body.get("generics")),
        is_const=bool(header.get("is_const")),
        is_async=bool(header.get("is_async")),
        is_unsafe=bool(header.get("is_unsafe")),
        abi=_abi_name(header.get("abi")),
        has_body=bool(body.get("has_body", True)),
        is_c_variadic=bool(sig.get("is_c_variadic")),
    )


def _parse_trait(body: dict[str, Any]) -> TraitPayload:
    return TraitPayload(
        items=_ids(body.get("items")),
        bounds=list(body.get("bounds") or []),
        generics=parse_generics(body.get("generics")),
        is_auto=bool(body.get("is_auto")),
        is_unsafe=bool(body.get("is_unsafe")),
        implementations=_ids(body.get("implementations")),
    )


def _parse_type_alias(body: dict[str, Any]) -> TypeAliasPayload:
    return TypeAliasPayload(
        type=body.get("type"), generics=parse_generics(body.get("generics"))
    )


def _parse_constant(body: dict[str, Any]) -> ConstantPayload:
    const = body.get("const") or {}
    return ConstantPayload(
        type=body.get("type"), expr=const.get("expr"), value=const.get("value")
    )


def _parse_static(body: dict[str, Any]) -> StaticPayload:
    return StaticPayload(
        type=body.get("type"),
        expr=body.get("expr"),
        is_mutable=bool(body.get("is_mutable")),
        is_unsafe=bool(body.get("is_unsafe")),
    )


def _parse_impl(body: dict[str, Any]) -> ImplPayload:
    trait_ref = body.get("trait")
    return ImplPayload(
        for_type=body.get("for"),
        trait_ref=trait_ref if isinstance(trait_ref, dict) else None,
        items=_ids(body.get("items")),
        generics=parse_generics(body.get("generics")),
        is_synthetic=bool(body.get("is_synthetic")),
        blanket_impl=body.get("blanket_impl"),
        is_negative=bool(body.get("is_negative")),
        is_unsafe=bool(body.get("is_unsafe")),
        provided_trait_methods=[
            str(m) for m in (body.get("provided_trait_methods") or [])
        ],
    )


def _parse_use(body: dict[str, Any]) -> UsePayload:
    source = str(body.get("source") or "")
    name = body.get("name") or source.rsplit("::", 1)[-1]
    return UsePayload(
        source=source,
        name=str(name),
        target=as_id(body.get("id")),
        is_glob=bool(body.get("is_glob")),
    )


def _parse_proc_macro(body: dict[str, Any]) -> ProcMacroPayload:
    return ProcMacroPayload(
        kind=str(body.get("kind") or "bang"),
        helpers=[str(h) for h in (body.get("helpers") or [])],
    )


def _parse_primitive(body: dict[str, Any]) -> PrimitivePayload:
    return PrimitivePayload(
        name=str(body.get("name") or ""), impls=_ids(body.get("impls"))
    )


def _parse_assoc_const(body: dict[str, Any]) -> AssocConstPayload:
    value = body.get("value")
    if value is None:
        value = body.get("default")
    return AssocConstPayload(type=body.get("type"), value=value)


def _parse_assoc_type(body: dict[str, Any]) -> AssocTypePayload:
    ty = body.get("type")
    if ty is None:
        ty = body.get("default")
    return AssocTypePayload(
        bounds=list(body.get("bounds") or []),
        generics=parse_generics(body.get("generics")),
        type=ty,
    )


_DICT_PARSERS: dict[str, Callable[[dict[str, Any]], Payload]] = {
    "module": _parse_module,
    "struct": _parse_struct,
    "enum": _parse_enum,
    "variant": _parse_variant,
    "function": _parse_function,
    "trait": _parse_trait,
    "type_alias": _parse_type_alias,
    "constant": _parse_constant,
    "static": _parse_static,
    "impl": _parse_impl,
    "use": _parse_use,
    "proc_macro": _parse_proc_macro,
    "primitive": _parse_primitive,
    "assoc_const": _parse_assoc_const,
    "assoc_type": _parse_assoc_type,
}


def parse_payload(inner: Any) -> Payload:
    """Convert an item's ``inner`` object into its payload dataclass."""
    if isinstance(inner, str):
        return UnknownPayload(tag=inner)
    if not isinstance(inner, dict) or len(inner) != 1:
        return UnknownPayload(tag="<malformed>", raw=inner)

    tag, body = next(iter(inner.items()))
    if tag == "struct_field":
        return StructFieldPayload(type=body)
    if tag == "macro":
        return MacroPayload(source=str(body or ""))

    parser = _DICT_PARSERS.get(tag)
    if parser is None:
        return UnknownPayload(tag=str(tag), raw=body)
    if not isinstance(body, dict):
        logger.debug("Payload %s has a non-object body; treating as unknown", tag)
        return UnknownPayload(tag=str(tag), raw=body)
    return parser(body)

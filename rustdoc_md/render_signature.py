"""Logic for rendering the canonical declaration of an item.

Every payload class has exactly one renderer in the dispatch table. Payloads
this version does not read render as an ``unsupported item kind`` placeholder
and are counted in the report instead of failing the run.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rustdoc_md.conversion_report import ConversionReport
from rustdoc_md.export_index import ExportIndex
from rustdoc_md.format_type import Resolve, TypeFormatter
from rustdoc_md.is_included import is_included
from rustdoc_md.is_synthetic_lifetime import is_synthetic_lifetime
from rustdoc_md.item_info import ItemInfo
from rustdoc_md.output_unit import LinkRef, dedupe_links
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

MAX_INLINE_PARAMS = 3
MAX_LINE_WIDTH = 80
INDENT = "    "


@dataclass(frozen=True)
class RenderedCode:
    """A rendered declaration and the links found in it."""

    code: str
    links: list[LinkRef]


class SignatureFormatter:
    """Renders deterministic declarations for every item kind."""

    def __init__(
        self,
        index: ExportIndex,
        resolve: Resolve | None = None,
        *,
        include_private: bool = False,
        report: ConversionReport | None = None,
    ) -> None:
        """Initialize the formatter over an export."""
        self.index = index
        self.resolve = resolve
        self.include_private = include_private
        self.report = report
        self._renderers: dict[type, Callable[[ItemInfo, Any, TypeFormatter], str]] = {
            ModulePayload: self._module,
            StructPayload: self._struct,
            StructFieldPayload: self._struct_field,
            EnumPayload: self._enum,
            VariantPayload: self._variant,
            FunctionPayload: self._function,
            TraitPayload: self._trait,
            TypeAliasPayload: self._type_alias,
            ConstantPayload: self._constant,
            StaticPayload: self._static,
            ImplPayload: self._impl,
            MacroPayload: self._macro,
            ProcMacroPayload: self._proc_macro,
            PrimitivePayload: self._primitive,
            UsePayload: self._use,
            AssocConstPayload: self._assoc_const,
            AssocTypePayload: self._assoc_type,
            UnknownPayload: self._unsupported,
        }

    def render(self, item: ItemInfo) -> RenderedCode:
        """Render an item's declaration and collect its links."""
        types = TypeFormatter(self.resolve)
        renderer = self._renderers.get(type(item.payload), self._unsupported)
        code = renderer(item, item.payload, types)
        return RenderedCode(code=code, links=dedupe_links(types.links))

    def _visible(self, item: ItemInfo | None) -> bool:
        return item is not None and is_included(
            item, include_private=self.include_private
        )

    def _where(self, generics: Generics, types: TypeFormatter) -> str:
        predicates = types.where_predicates(generics.where_predicates)
        if not predicates:
            return ""
        return "\nwhere\n" + "\n".join(f"{INDENT}{p}," for p in predicates)

    def _open_brace(self, where: str) -> str:
        return f"{where}\n{{" if where else " {"

    def _module(self, item: ItemInfo, p: ModulePayload, types: TypeFormatter) -> str:
        if p.is_crate:
            return f"crate {item.display_name}"
        return f"{item.visibility.keyword()}mod {item.display_name}"

    def _struct(self, item: ItemInfo, p: StructPayload, types: TypeFormatter) -> str:
        head = (
            f"{item.visibility.keyword()}struct {item.display_name}"
            f"{types.generic_params(p.generics.params)}"
        )
        where = self._where(p.generics, types)
        if p.shape == "tuple":
            parts = []
            hidden = False
            for field_id in p.fields:
                field = self.index.get(field_id)
                if not self._visible(field) or not isinstance(
                    field.payload, StructFieldPayload
                ):
                    hidden = True
                    continue
                parts.append(
                    f"{field.visibility.keyword()}{types.format(field.payload.type)}"
                )
            if hidden:
                parts.append("/* private fields */")
            return f"{head}({', '.join(parts)}){where};"
        if p.shape != "plain":
            return f"{head}{where};"

        lines = []
        hidden = p.has_stripped_fields
        for field_id in p.fields:
            field = self.index.get(field_id)
            if not self._visible(field):
                hidden = True
                continue
            lines.append(f"{INDENT}{self._struct_field(field, field.payload, types)},")
        if hidden:
            lines.append(f"{INDENT}/* private fields */")
        if not lines:
            return f"{head}{where} {{}}"
        return head + self._open_brace(where) + "\n" + "\n".join(lines) + "\n}"

    def _struct_field(self, item: ItemInfo, p: Any, types: TypeFormatter) -> str:
        ty = p.type if isinstance(p, StructFieldPayload) else None
        return f"{item.visibility.keyword()}{item.display_name}: {types.format(ty)}"

    def _enum(self, item: ItemInfo, p: EnumPayload, types: TypeFormatter) -> str:
        head = (
            f"{item.visibility.keyword()}enum {item.display_name}"
            f"{types.generic_params(p.generics.params)}"
        )
        where = self._where(p.generics, types)
        lines = []
        for variant_id in p.variants:
            variant = self.index.get(variant_id)
            if variant is None or not isinstance(variant.payload, VariantPayload):
                continue
            lines.append(f"{INDENT}{self._variant(variant, variant.payload, types)},")
        if p.has_stripped_variants:
            lines.append(f"{INDENT}// some variants omitted")
        if not lines:
            return f"{head}{where} {{}}"
        return head + self._open_brace(where) + "\n" + "\n".join(lines) + "\n}"

    def _variant(self, item: ItemInfo, p: VariantPayload, types: TypeFormatter) -> str:
        name = item.display_name
        fields = [self.index.get(f) for f in p.fields]
        if p.shape == "tuple":
            rendered = [
                types.format(f.payload.type)
                if f is not None and isinstance(f.payload, StructFieldPayload)
                else "_"
                for f in fields
            ]
            return f"{name}({', '.join(rendered)})"
        if p.shape == "struct":
            rendered = [
                f"{f.display_name}: {types.format(f.payload.type)}"
                for f in fields
                if f is not None and isinstance(f.payload, StructFieldPayload)
            ]
            return f"{name} {{ {', '.join(rendered)} }}" if rendered else f"{name} {{}}"
        if p.discriminant:
            return f"{name} = {p.discriminant}"
        return name

    def _function(
        self, item: ItemInfo, p: FunctionPayload, types: TypeFormatter
    ) -> str:
        qualifiers = item.visibility.keyword()
        if p.is_const:
            qualifiers += "const "
        if p.is_async:
            qualifiers += "async "
        if p.is_unsafe:
            qualifiers += "unsafe "
        if p.abi and p.abi != "Rust":
            qualifiers += f'extern "{p.abi}" '

        generics = types.generic_params(p.generics.params)
        head = f"{qualifiers}fn {item.display_name}{generics}"
        args = [self._fn_input(name, ty, types) for name, ty in p.inputs]
        if p.is_c_variadic:
            args.append("...")
        ret = f" -> {types.format(p.output)}" if p.output is not None else ""

        sig = f"{head}({', '.join(args)}){ret}"
        if len(args) > MAX_INLINE_PARAMS or len(sig) > MAX_LINE_WIDTH:
            sig = f"{head}(\n" + "".join(f"{INDENT}{a},\n" for a in args) + f"){ret}"
        return sig + self._where(p.generics, types)

    def _fn_input(self, name: str, ty: Any, types: TypeFormatter) -> str:
        if name != "self":
            return f"{name}: {types.format(ty)}"
        if ty == {"generic": "Self"}:
            return "self"
        if isinstance(ty, dict) and "borrowed_ref" in ty:
            ref = ty["borrowed_ref"] or {}
            if ref.get("type") == {"generic": "Self"}:
                out = "&"
                lifetime = ref.get("lifetime")
                if lifetime and not is_synthetic_lifetime(lifetime):
                    out += f"{lifetime} "
                if ref.get("is_mutable"):
                    out += "mut "
                return out + "self"
        return f"self: {types.format(ty)}"

    def _trait(self, item: ItemInfo, p: TraitPayload, types: TypeFormatter) -> str:
        head = item.visibility.keyword()
        if p.is_unsafe:
            head += "unsafe "
        if p.is_auto:
            head += "auto "
        head += f"trait {item.display_name}{types.generic_params(p.generics.params)}"
        if p.bounds:
            head += f": {types.bounds(p.bounds)}"
        where = self._where(p.generics, types)

        assoc_types, assoc_consts, methods = [], [], []
        for member_id in p.items:
            member = self.index.get(member_id)
            if member is None:
                continue
            if isinstance(member.payload, AssocTypePayload):
                assoc_types.append(self._assoc_type(member, member.payload, types))
            elif isinstance(member.payload, AssocConstPayload):
                assoc_consts.append(self._assoc_const(member, member.payload, types))
            elif isinstance(member.payload, FunctionPayload):
                sig = self._function(member, member.payload, types)
                methods.append(sig + (" { ... }" if member.payload.has_body else ";"))

        members = assoc_types + assoc_consts + methods
        if not members:
            return f"{head}{where} {{}}"
        body = "\n".join(
            "\n".join(f"{INDENT}{line}" for line in member.splitlines())
            for member in members
        )
        return head + self._open_brace(where) + "\n" + body + "\n}"

    def _type_alias(
        self, item: ItemInfo, p: TypeAliasPayload, types: TypeFormatter
    ) -> str:
        return (
            f"{item.visibility.keyword()}type {item.display_name}"
            f"{types.generic_params(p.generics.params)}"
            f"{self._where(p.generics, types)} = {types.format(p.type)};"
        )

    def _constant(
        self, item: ItemInfo, p: ConstantPayload, types: TypeFormatter
    ) -> str:
        vis = item.visibility.keyword()
        out = f"{vis}const {item.display_name}: {types.format(p.type)}"
        init = p.expr or p.value
        return f"{out} = {init};" if init else f"{out};"

    def _static(self, item: ItemInfo, p: StaticPayload, types: TypeFormatter) -> str:
        out = item.visibility.keyword()
        if p.is_unsafe:
            out += "unsafe "
        out += "static "
        if p.is_mutable:
            out += "mut "
        out += f"{item.display_name}: {types.format(p.type)}"
        return f"{out} = {p.expr};" if p.expr else f"{out};"

    def _impl(self, item: ItemInfo, p: ImplPayload, types: TypeFormatter) -> str:
        out = "unsafe impl" if p.is_unsafe else "impl"
        out += types.generic_params(p.generics.params) + " "
        if p.trait_ref is not None:
            out += ("!" if p.is_negative else "") + types.path(p.trait_ref) + " for "
        out += types.format(p.for_type)
        return out + self._where(p.generics, types)

    def _macro(self, item: ItemInfo, p: MacroPayload, types: TypeFormatter) -> str:
        return p.source.strip() or f"macro_rules! {item.display_name} {{ ... }}"

    def _proc_macro(
        self, item: ItemInfo, p: ProcMacroPayload, types: TypeFormatter
    ) -> str:
        name = item.display_name
        if p.kind == "derive":
            out = f"#[derive({name})]"
            if p.helpers:
                out += f"\n// helper attributes: {', '.join(p.helpers)}"
            return out
        if p.kind == "attr":
            return f"#[{name}]"
        return f"{name}!() {{ /* proc-macro */ }}"

    def _primitive(
        self, item: ItemInfo, p: PrimitivePayload, types: TypeFormatter
    ) -> str:
        return f"primitive {p.name or item.display_name}"

    def _use(self, item: ItemInfo, p: UsePayload, types: TypeFormatter) -> str:
        vis = item.visibility.keyword()
        if p.is_glob:
            return f"{vis}use {p.source}::*;"
        if p.name != p.source.rsplit("::", 1)[-1]:
            return f"{vis}use {p.source} as {p.name};"
        return f"{vis}use {p.source};"

    def _assoc_const(
        self, item: ItemInfo, p: AssocConstPayload, types: TypeFormatter
    ) -> str:
        out = f"const {item.display_name}: {types.format(p.type)}"
        return f"{out} = {p.value};" if p.value else f"{out};"

    def _assoc_type(
        self, item: ItemInfo, p: AssocTypePayload, types: TypeFormatter
    ) -> str:
        out = f"type {item.display_name}{types.generic_params(p.generics.params)}"
        if p.bounds:
            out += f": {types.bounds(p.bounds)}"
        if p.type is not None:
            out += f" = {types.format(p.type)}"
        return out + ";"

    def _unsupported(self, item: ItemInfo, p: Any, types: TypeFormatter) -> str:
        tag = p.tag if isinstance(p, UnknownPayload) else type(p).__name__
        if self.report is not None:
            self.report.add_unsupported(item.id, tag)
        else:
            logger.debug("Unsupported item kind %r for %s", tag, item.id)
        return f"/* unsupported item kind: {tag} */"


def render_signature(item: ItemInfo, index: ExportIndex) -> str:
    """Render the canonical declaration of an item, without links."""
    return SignatureFormatter(index).render(item).code

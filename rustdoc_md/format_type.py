"""Logic for rendering rustdoc type trees as source-like text.

The formatter walks the nested type objects of an export. In plain mode it
produces text for code blocks and records every resolvable path as a link
ref. In markdown mode it escapes literal text and turns resolvable paths into
inline Markdown links, for use in tables and lists.
"""

from collections.abc import Callable
from typing import Any

from rustdoc_md.as_id import as_id
from rustdoc_md.is_synthetic_lifetime import is_synthetic_lifetime
from rustdoc_md.link_target import LinkTarget
from rustdoc_md.markdown import md_escape
from rustdoc_md.output_unit import LinkRef

Resolve = Callable[[str | None, str], LinkTarget]

MAX_TYPE_DEPTH = 50


class TypeFormatter:
    """Renders types, bounds and generics, collecting links along the way."""

    def __init__(
        self,
        resolve: Resolve | None = None,
        *,
        markdown: bool = False,
        max_depth: int = MAX_TYPE_DEPTH,
    ) -> None:
        """Initialize the formatter with an optional link resolver."""
        self.resolve = resolve
        self.markdown = markdown
        self.max_depth = max_depth
        self.links: list[LinkRef] = []
        self._handlers: dict[str, Callable[[Any, int], str]] = {
            "resolved_path": self._resolved_path,
            "dyn_trait": self._dyn_trait,
            "generic": self._name,
            "primitive": self._name,
            "function_pointer": self._function_pointer,
            "tuple": self._tuple,
            "slice": self._slice,
            "array": self._array,
            "pat": self._pat,
            "impl_trait": self._impl_trait,
            "raw_pointer": self._raw_pointer,
            "borrowed_ref": self._borrowed_ref,
            "qualified_path": self._qualified_path,
        }

    def format(self, ty: Any) -> str:
        """Render one type."""
        return self._type(ty, 0)

    def _text(self, s: str) -> str:
        return md_escape(s) if self.markdown else s

    def _type(self, ty: Any, depth: int) -> str:
        if depth > self.max_depth:
            return self._text("...")
        if isinstance(ty, str):
            return self._text("_" if ty == "infer" else ty)
        if not isinstance(ty, dict) or len(ty) != 1:
            return self._text("_")
        tag, body = next(iter(ty.items()))
        handler = self._handlers.get(tag)
        if handler is None:
            return self._text("_")
        return handler(body, depth + 1)

    def _name(self, body: Any, depth: int) -> str:
        return self._text(str(body))

    def link(self, item_id: str | None, name: str) -> str:
        """Render a name, linked when the id resolves."""
        if self.resolve is None:
            return self._text(name)
        target = self.resolve(item_id, name)
        if not target.is_link:
            return self._text(name)
        self.links.append(LinkRef(name, str(target.href)))
        if self.markdown:
            return f"[{md_escape(name)}]({target.href})"
        return name

    def path(self, body: Any, depth: int = 0) -> str:
        """Render a path (type or trait reference) with its generic args."""
        if not isinstance(body, dict):
            return self._text("_")
        full = str(body.get("path") or "")
        name = full.rsplit("::", 1)[-1] or full
        return self.link(as_id(body.get("id")), name) + self._generic_args(
            body.get("args"), depth
        )

    def _resolved_path(self, body: Any, depth: int) -> str:
        return self.path(body, depth)

    def _generic_args(self, args: Any, depth: int) -> str:
        if not isinstance(args, dict) or len(args) != 1:
            return ""
        tag, body = next(iter(args.items()))
        body = body or {}
        if tag == "angle_bracketed":
            parts = [self._generic_arg(a, depth) for a in body.get("args") or []]
            parts += [self._constraint(c, depth) for c in body.get("constraints") or []]
            if not parts:
                return ""
            return self._text("<") + self._text(", ").join(parts) + self._text(">")
        if tag == "parenthesized":
            inputs = self._text(", ").join(
                self._type(t, depth) for t in body.get("inputs") or []
            )
            out = self._text("(") + inputs + self._text(")")
            if body.get("output") is not None:
                out += self._text(" -> ") + self._type(body["output"], depth)
            return out
        return ""

    def _generic_arg(self, arg: Any, depth: int) -> str:
        if isinstance(arg, str):
            return self._text("_" if arg == "infer" else arg)
        if not isinstance(arg, dict) or len(arg) != 1:
            return self._text("_")
        tag, body = next(iter(arg.items()))
        if tag == "type":
            return self._type(body, depth)
        if tag == "lifetime":
            return self._text(str(body))
        if tag == "const":
            return self._text(_const_text(body))
        return self._text("_")

    def _constraint(self, constraint: Any, depth: int) -> str:
        if not isinstance(constraint, dict):
            return self._text("_")
        name = self._text(str(constraint.get("name") or "_"))
        name += self._generic_args(constraint.get("args"), depth)
        binding = constraint.get("binding") or {}
        if "equality" in binding:
            term = binding["equality"] or {}
            if "type" in term:
                return name + self._text(" = ") + self._type(term["type"], depth)
            return name + self._text(" = " + _const_text(term.get("constant")))
        if "constraint" in binding:
            return name + self._text(": ") + self.bounds(binding["constraint"], depth)
        return name

    def bounds(self, bounds: Any, depth: int = 0) -> str:
        """Render a list of bounds joined with `+`."""
        return self._text(" + ").join(
            self.bound(b, depth) for b in bounds or [] if b is not None
        )

    def bound(self, bound: Any, depth: int = 0) -> str:
        """Render a single trait, outlives or use<..> bound."""
        if not isinstance(bound, dict) or len(bound) != 1:
            return self._text("_")
        tag, body = next(iter(bound.items()))
        if tag == "trait_bound":
            body = body or {}
            modifier = {"maybe": "?", "maybe_const": "~const "}.get(
                str(body.get("modifier") or "none"), ""
            )
            hrtb = self._hrtb(body.get("generic_params"), depth)
            return hrtb + self._text(modifier) + self.path(body.get("trait"), depth)
        if tag == "outlives":
            return self._text(str(body))
        if tag == "use":
            names = [_use_arg(a) for a in body or []]
            return self._text(f"use<{', '.join(names)}>")
        return self._text("_")

    def _hrtb(self, params: Any, depth: int) -> str:
        lifetimes = [
            str(p.get("name"))
            for p in params or []
            if isinstance(p, dict) and "lifetime" in (p.get("kind") or {})
        ]
        if not lifetimes:
            return ""
        return self._text(f"for<{', '.join(lifetimes)}> ")

    def _dyn_trait(self, body: Any, depth: int) -> str:
        body = body or {}
        parts = []
        for poly in body.get("traits") or []:
            poly = poly or {}
            parts.append(
                self._hrtb(poly.get("generic_params"), depth)
                + self.path(poly.get("trait"), depth)
            )
        lifetime = body.get("lifetime")
        if lifetime:
            parts.append(self._text(str(lifetime)))
        return self._text("dyn ") + self._text(" + ").join(parts)

    def _function_pointer(self, body: Any, depth: int) -> str:
        body = body or {}
        sig = body.get("sig") or {}
        header = body.get("header") or {}
        prefix = self._hrtb(body.get("generic_params"), depth)
        if header.get("is_unsafe"):
            prefix += self._text("unsafe ")
        abi = header.get("abi")
        if abi and abi != "Rust":
            abi_name = abi if isinstance(abi, str) else next(iter(abi), "C")
            prefix += self._text(f'extern "{abi_name}" ')
        inputs = [self._type(pair[1], depth) for pair in sig.get("inputs") or []]
        if sig.get("is_c_variadic"):
            inputs.append(self._text("..."))
        out = (
            prefix
            + self._text("fn(")
            + self._text(", ").join(inputs)
            + self._text(")")
        )
        if sig.get("output") is not None:
            out += self._text(" -> ") + self._type(sig["output"], depth)
        return out

    def _tuple(self, body: Any, depth: int) -> str:
        elems = [self._type(t, depth) for t in body or []]
        if len(elems) == 1:
            return self._text("(") + elems[0] + self._text(",)")
        return self._text("(") + self._text(", ").join(elems) + self._text(")")

    def _slice(self, body: Any, depth: int) -> str:
        return self._text("[") + self._type(body, depth) + self._text("]")

    def _array(self, body: Any, depth: int) -> str:
        body = body or {}
        inner = self._type(body.get("type"), depth)
        return self._text("[") + inner + self._text(f"; {body.get('len', '_')}]")

    def _pat(self, body: Any, depth: int) -> str:
        return self._type((body or {}).get("type"), depth)

    def _impl_trait(self, body: Any, depth: int) -> str:
        return self._text("impl ") + self.bounds(body, depth)

    def _raw_pointer(self, body: Any, depth: int) -> str:
        body = body or {}
        qualifier = "*mut " if body.get("is_mutable") else "*const "
        return self._text(qualifier) + self._type(body.get("type"), depth)

    def _borrowed_ref(self, body: Any, depth: int) -> str:
        body = body or {}
        out = "&"
        lifetime = body.get("lifetime")
        if lifetime and not is_synthetic_lifetime(lifetime):
            out += f"{lifetime} "
        if body.get("is_mutable"):
            out += "mut "
        return self._text(out) + self._type(body.get("type"), depth)

    def _qualified_path(self, body: Any, depth: int) -> str:
        body = body or {}
        name = self._text(str(body.get("name") or "_"))
        name += self._generic_args(body.get("args"), depth)
        self_type = body.get("self_type")
        trait = body.get("trait")
        if trait is None or self_type == {"generic": "Self"}:
            return self._type(self_type, depth) + self._text("::") + name
        return (
            self._text("<")
            + self._type(self_type, depth)
            + self._text(" as ")
            + self.path(trait, depth)
            + self._text(">::")
            + name
        )

    def generic_params(self, params: Any) -> str:
        """Render a generic parameter list, omitting synthetic parameters."""
        rendered = [r for r in (self.generic_param(p) for p in params or []) if r]
        if not rendered:
            return ""
        return self._text("<") + self._text(", ").join(rendered) + self._text(">")

    def generic_param(self, param: Any) -> str:
        """Render one generic parameter, or an empty string if it is synthetic."""
        if not isinstance(param, dict):
            return ""
        name = str(param.get("name") or "_")
        kind = param.get("kind") or {}
        if "lifetime" in kind:
            if is_synthetic_lifetime(name):
                return ""
            outlives = list((kind["lifetime"] or {}).get("outlives") or [])
            if outlives:
                return self._text(f"{name}: {' + '.join(outlives)}")
            return self._text(name)
        if "type" in kind:
            body = kind["type"] or {}
            if body.get("is_synthetic"):
                return ""
            out = self._text(name)
            if body.get("bounds"):
                out += self._text(": ") + self.bounds(body["bounds"])
            if body.get("default") is not None:
                out += self._text(" = ") + self.format(body["default"])
            return out
        if "const" in kind:
            body = kind["const"] or {}
            out = self._text(f"const {name}: ") + self.format(body.get("type"))
            if body.get("default"):
                out += self._text(f" = {body['default']}")
            return out
        return self._text(name)

    def where_predicates(self, predicates: Any) -> list[str]:
        """Render each where-clause predicate."""
        out: list[str] = []
        for pred in predicates or []:
            if not isinstance(pred, dict) or len(pred) != 1:
                continue
            tag, body = next(iter(pred.items()))
            body = body or {}
            if tag == "bound_predicate":
                bounds = self.bounds(body.get("bounds"))
                if not bounds:
                    continue
                hrtb = self._hrtb(body.get("generic_params"), 0)
                out.append(
                    hrtb + self.format(body.get("type")) + self._text(": ") + bounds
                )
            elif tag == "lifetime_predicate":
                outlives = " + ".join(body.get("outlives") or [])
                out.append(self._text(f"{body.get('lifetime')}: {outlives}"))
            elif tag == "eq_predicate":
                rhs = body.get("rhs") or {}
                if "type" in rhs:
                    rhs_text = self.format(rhs["type"])
                else:
                    rhs_text = self._text(_const_text(rhs.get("constant")))
                out.append(self.format(body.get("lhs")) + self._text(" = ") + rhs_text)
        return out


def _const_text(const: Any) -> str:
    if isinstance(const, dict):
        return str(const.get("expr") or const.get("value") or "_")
    return str(const) if const is not None else "_"


def _use_arg(arg: Any) -> str:
    if isinstance(arg, str):
        return arg
    if isinstance(arg, dict) and len(arg) == 1:
        return str(next(iter(arg.values())))
    return "_"

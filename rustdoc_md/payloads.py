"""Data models for the kind-specific payload of a documented item.

Every item carries exactly one payload. The set of variants is closed: code that
consumes payloads dispatches on the concrete class and must handle
``UnknownPayload``, which stands for any variant this version does not read.
Types inside payloads stay as the raw rustdoc type trees (plain dicts).
"""

from dataclasses import dataclass, field
from typing import Any

RawType = Any  # nested rustdoc type tree


@dataclass(frozen=True)
class Generics:
    """Generic parameter list and where-clause of a declaration."""

    params: list[dict[str, Any]] = field(default_factory=list)
    where_predicates: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class ModulePayload:
    items: list[str]
    is_crate: bool = False
    is_stripped: bool = False


@dataclass(frozen=True)
class StructPayload:
    shape: str  # unit/tuple/plain
    fields: list[str | None]  # tuple fields may be stripped (None)
    generics: Generics
    has_stripped_fields: bool = False
    impls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StructFieldPayload:
    type: RawType


@dataclass(frozen=True)
class EnumPayload:
    variants: list[str]
    generics: Generics
    has_stripped_variants: bool = False
    impls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class VariantPayload:
    shape: str  # plain/tuple/struct
    fields: list[str | None]
    discriminant: str | None = None


@dataclass(frozen=True)
class FunctionPayload:
    inputs: list[tuple[str, RawType]]
    output: RawType | None
    generics: Generics
    is_const: bool = False
    is_async: bool = False
    is_unsafe: bool = False
    abi: str = "Rust"
    has_body: bool = True
    is_c_variadic: bool = False


@dataclass(frozen=True)
class TraitPayload:
    items: list[str]
    bounds: list[dict[str, Any]]
    generics: Generics
    is_auto: bool = False
    is_unsafe: bool = False
    implementations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TypeAliasPayload:
    type: RawType
    generics: Generics


@dataclass(frozen=True)
class ConstantPayload:
    type: RawType
    expr: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class StaticPayload:
    type: RawType
    expr: str | None = None
    is_mutable: bool = False
    is_unsafe: bool = False


@dataclass(frozen=True)
class ImplPayload:
    for_type: RawType
    trait_ref: dict[str, Any] | None
    items: list[str]
    generics: Generics
    is_synthetic: bool = False
    blanket_impl: RawType | None = None
    is_negative: bool = False
    is_unsafe: bool = False
    provided_trait_methods: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MacroPayload:
    source: str


@dataclass(frozen=True)
class ProcMacroPayload:
    kind: str  # bang/attr/derive
    helpers: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PrimitivePayload:
    name: str
    impls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UsePayload:
    source: str
    name: str
    target: str | None
    is_glob: bool = False


@dataclass(frozen=True)
class AssocConstPayload:
    type: RawType
    value: str | None = None


@dataclass(frozen=True)
class AssocTypePayload:
    bounds: list[dict[str, Any]]
    generics: Generics
    type: RawType | None = None


@dataclass(frozen=True)
class UnknownPayload:
    """A payload variant this version cannot read."""

    tag: str
    raw: Any = None


Payload = (
    ModulePayload
    | StructPayload
    | StructFieldPayload
    | EnumPayload
    | VariantPayload
    | FunctionPayload
    | TraitPayload
    | TypeAliasPayload
    | ConstantPayload
    | StaticPayload
    | ImplPayload
    | MacroPayload
    | ProcMacroPayload
    | PrimitivePayload
    | UsePayload
    | AssocConstPayload
    | AssocTypePayload
    | UnknownPayload
)

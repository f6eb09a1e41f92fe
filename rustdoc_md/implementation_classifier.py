"""Logic for grouping implementation blocks by the type they target."""

import logging
from dataclasses import dataclass, field

from rustdoc_md.as_id import as_id, id_sort_key
from rustdoc_md.export_index import ExportIndex
from rustdoc_md.payloads import (
    AssocConstPayload,
    AssocTypePayload,
    FunctionPayload,
    ImplPayload,
)

logger = logging.getLogger(__name__)


@dataclass
class TraitImplementation:
    """One implementation of a trait for the classified type."""

    impl_id: str
    trait_id: str | None
    trait_path: str
    members: list[str]  # functions/consts/types physically in the block
    defaults_not_overridden: list[str]  # provided method names, sorted
    is_negative: bool = False

    @property
    def trait_name(self) -> str:
        return self.trait_path.rsplit("::", 1)[-1]

    @property
    def is_marker(self) -> bool:
        return not self.members and not self.defaults_not_overridden


@dataclass
class ImplementationGroup:
    """Implementation blocks of one type, split into inherent and trait buckets."""

    type_id: str
    inherent: list[str] = field(default_factory=list)  # impl ids
    inherent_members: list[str] = field(default_factory=list)
    traits: dict[str, list[TraitImplementation]] = field(default_factory=dict)
    dropped: list[str] = field(default_factory=list)  # noise impl ids

    def trait_implementations(self) -> list[TraitImplementation]:
        """All trait implementations, sorted by trait path."""
        flat = [t for bucket in self.traits.values() for t in bucket]
        return sorted(flat, key=lambda t: (t.trait_path, id_sort_key(t.impl_id)))

    def rendered_impl_ids(self) -> list[str]:
        return self.inherent + [t.impl_id for t in self.trait_implementations()]


class ImplementationClassifier:
    """Classifies implementation blocks per target type, dropping noise."""

    def __init__(self, index: ExportIndex, noise_traits: list[str]) -> None:
        """Index every implementation block by the type it targets."""
        self.index = index
        self.noise_traits = frozenset(noise_traits)
        self._by_target: dict[str, list[str]] = {}
        self._cache: dict[str, ImplementationGroup] = {}
        for item_id, item in index.items.items():
            if isinstance(item.payload, ImplPayload):
                target = impl_target_id(item.payload)
                if target is not None:
                    self._by_target.setdefault(target, []).append(item_id)
        for impl_ids in self._by_target.values():
            impl_ids.sort(key=id_sort_key)

    def is_noise(self, impl: ImplPayload) -> bool:
        """Check if an implementation is compiler-implied or blanket noise."""
        if impl.is_synthetic or impl.blanket_impl is not None:
            return True
        return self._trait_path(impl).rsplit("::", 1)[-1] in self.noise_traits

    def classify(self, type_id: str) -> ImplementationGroup:
        """Group the implementations targeting a type."""
        cached = self._cache.get(type_id)
        if cached is not None:
            return cached

        group = ImplementationGroup(type_id=type_id)
        for impl_id in self._by_target.get(type_id, []):
            impl = self.index.items[impl_id].payload
            if not isinstance(impl, ImplPayload):
                continue
            if self.is_noise(impl):
                group.dropped.append(impl_id)
                continue
            members = self._members(impl)
            if impl.trait_ref is None:
                group.inherent.append(impl_id)
                group.inherent_members.extend(members)
                continue

            trait_id = as_id(impl.trait_ref.get("id"))
            member_names = {self.index.items[m].name for m in members}
            defaults = sorted(
                name for name in impl.provided_trait_methods if name not in member_names
            )
            group.traits.setdefault(trait_id or impl_id, []).append(
                TraitImplementation(
                    impl_id=impl_id,
                    trait_id=trait_id,
                    trait_path=self._trait_path(impl),
                    members=members,
                    defaults_not_overridden=defaults,
                    is_negative=impl.is_negative,
                )
            )

        logger.debug(
            "Type %s: %d inherent, %d trait impls, %d dropped",
            type_id,
            len(group.inherent),
            sum(len(b) for b in group.traits.values()),
            len(group.dropped),
        )
        self._cache[type_id] = group
        return group

    def _members(self, impl: ImplPayload) -> list[str]:
        members = []
        for member_id in impl.items:
            member = self.index.get(member_id)
            if member is not None and isinstance(
                member.payload, FunctionPayload | AssocConstPayload | AssocTypePayload
            ):
                members.append(member_id)
        return members

    def _trait_path(self, impl: ImplPayload) -> str:
        return trait_path(self.index, impl)


def trait_path(index: ExportIndex, impl: ImplPayload) -> str:
    """Full path of the implemented trait, as precise as the export allows."""
    if impl.trait_ref is None:
        return ""
    trait_id = as_id(impl.trait_ref.get("id"))
    summary = index.external.get(trait_id) if trait_id else None
    if summary is not None and summary.path:
        return "::".join(summary.path)
    return str(impl.trait_ref.get("path") or "")


def impl_anchor_scope(trait_name: str) -> str:
    """Anchor segment that keeps members of different trait impls apart."""
    return f"impl-{trait_name}"


def impl_target_id(impl: ImplPayload) -> str | None:
    """Return the id of the type an implementation targets, if it names one."""
    for_type = impl.for_type
    if isinstance(for_type, dict) and "resolved_path" in for_type:
        return as_id((for_type["resolved_path"] or {}).get("id"))
    return None

"""Read-only lookup tables built from one export."""

from dataclasses import dataclass, field

from rustdoc_md.item_info import ItemInfo
from rustdoc_md.package_info import ExternalSummary, PackageInfo


@dataclass
class ExportIndex:
    """Local item index and external-summary index of a loaded export."""

    package: PackageInfo
    items: dict[str, ItemInfo]
    external: dict[str, ExternalSummary]
    owners: dict[str, str] = field(default_factory=dict)  # member id -> owner id
    # member id -> enclosing item id
    containers: dict[str, str] = field(default_factory=dict)

    def get(self, item_id: str | None) -> ItemInfo | None:
        if item_id is None:
            return None
        return self.items.get(item_id)

    @property
    def root(self) -> ItemInfo:
        return self.items[self.package.root_id]

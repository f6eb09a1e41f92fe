"""Data models for the package described by one export."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExternalPackage:
    """A package referenced by the export but documented elsewhere."""

    name: str
    html_root_url: str | None = None


@dataclass(frozen=True)
class ExternalSummary:
    """Path summary for an identifier that is not defined locally."""

    id: str
    crate_id: int
    crate_name: str
    path: list[str]
    kind: str

    @property
    def name(self) -> str:
        return self.path[-1] if self.path else self.id


@dataclass(frozen=True)
class PackageInfo:
    """Metadata of the package that produced the export."""

    name: str
    version: str | None
    root_id: str
    includes_private: bool
    format_version: int
    external_packages: dict[int, ExternalPackage] = field(default_factory=dict)

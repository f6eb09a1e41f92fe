"""Data model for the options of one conversion run."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rustdoc_md.errors import ConfigError
from rustdoc_md.output_layout import MODES, MODULE

DEFAULT_NOISE_TRAITS = (
    "Freeze",
    "RefUnwindSafe",
    "StructuralEq",
    "StructuralPartialEq",
    "Unpin",
    "UnwindSafe",
)


@dataclass
class LinkSettings:
    """How references to items outside the package are turned into URLs."""

    external_host: str = "https://docs.rs"
    std_host: str = "https://doc.rust-lang.org"
    default_version: str = "latest"
    versions: dict[str, str] = field(default_factory=dict)


@dataclass
class ConversionOptions:
    """Plain options value consumed by the conversion pipeline."""

    output_root: Path
    include_private: bool = False
    mode: str = MODULE
    workspace_packages: list[str] = field(default_factory=list)
    base_path: str = ""
    navigation_output: Path | None = None
    navigation_collapsed: bool = True
    links: LinkSettings = field(default_factory=LinkSettings)
    noise_traits: list[str] = field(default_factory=lambda: list(DEFAULT_NOISE_TRAITS))
    config_hash: str = ""

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            expected = ", ".join(MODES)
            msg = f"Unknown output mode {self.mode!r} (expected one of: {expected})"
            raise ConfigError(msg)


def normalize_package_name(name: str) -> str:
    return name.strip().replace("-", "_")


def options_from_config(
    config: dict[str, Any], output_root: Path, config_hash: str = ""
) -> ConversionOptions:
    """Build options from a merged configuration dictionary."""
    output = config.get("output") or {}
    workspace = config.get("workspace") or {}
    navigation = config.get("navigation") or {}
    links = config.get("links") or {}
    noise = config.get("noise") or {}

    nav_output = navigation.get("output")
    return ConversionOptions(
        output_root=output_root,
        include_private=bool(output.get("include_private", False)),
        mode=str(output.get("mode") or MODULE),
        workspace_packages=[str(p) for p in (workspace.get("packages") or [])],
        base_path=str(output.get("base_path") or ""),
        navigation_output=Path(nav_output) if nav_output else None,
        navigation_collapsed=bool(navigation.get("collapsed", True)),
        links=LinkSettings(
            external_host=str(links.get("external_host") or "https://docs.rs"),
            std_host=str(links.get("std_host") or "https://doc.rust-lang.org"),
            default_version=str(links.get("default_version") or "latest"),
            versions={str(k): str(v) for k, v in (links.get("versions") or {}).items()},
        ),
        noise_traits=[str(t) for t in (noise.get("traits") or [])],
        config_hash=config_hash,
    )

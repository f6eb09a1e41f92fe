"""Logic for serializing navigation trees to sidebar files."""

import json
from pathlib import Path
from typing import Any

import yaml

from rustdoc_md.navigation_builder import sidebar_key
from rustdoc_md.navigation_node import NavigationNode

GENERATED_HEADER = (
    "// This file is auto-generated by rustdoc-md\n"
    "// Do not edit manually - this file will be regenerated\n"
)


def navigation_payload(
    root: NavigationNode, modules: dict[str, NavigationNode]
) -> dict[str, Any]:
    """Build the serializable form of the global and per-module sidebars."""
    return {
        "sidebar": [root.to_dict()],
        "modules": {key: [node.to_dict()] for key, node in sorted(modules.items())},
    }


def render_navigation(
    root: NavigationNode, modules: dict[str, NavigationNode], suffix: str
) -> str:
    """Serialize navigation in the format implied by a file suffix."""
    payload = navigation_payload(root, modules)
    suffix = suffix.lower()
    if suffix in (".yml", ".yaml"):
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    if suffix in (".js", ".ts"):
        sidebars = {sidebar_key(root.module_path): payload["sidebar"]}
        sidebars.update(payload["modules"])
        annotation = ": Record<string, any[]>" if suffix == ".ts" else ""
        body = json.dumps(sidebars, indent=2, ensure_ascii=False)
        return f"{GENERATED_HEADER}\nexport const rustSidebars{annotation} = {body};\n"
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def navigation_path(output_root: Path, package: str, configured: Path | None) -> Path:
    """Return where the navigation file goes, defaulting next to the documents."""
    if configured is not None:
        return configured
    return output_root / package / "sidebar.json"

"""Logic for loading a rustdoc JSON export and gating on its format version."""

import json
import logging
from pathlib import Path
from typing import Any

from rustdoc_md.as_id import as_id
from rustdoc_md.build_index import build_index
from rustdoc_md.errors import InputReadError, SchemaError
from rustdoc_md.export_index import ExportIndex

logger = logging.getLogger(__name__)

SUPPORTED_FORMAT_VERSION = 56


def load_export(path: Path) -> ExportIndex:
    """Read and parse an export file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(path, str(e)) from e

    export = parse_export(text)
    print(
        f"Loaded crate: {export.package.name} "
        f"(format version: {export.package.format_version})"
    )
    return export


def parse_export(text: str) -> ExportIndex:
    """Parse export text, check its format version and build the indices.

    Any structural problem aborts with SchemaError before anything is indexed.
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Malformed export: {e}"
        raise SchemaError(msg) from e
    if not isinstance(doc, dict):
        msg = "Malformed export: top-level value is not an object"
        raise SchemaError(msg)

    version = check_format_version(doc)
    _check_structure(doc)
    return build_index(doc, version)


def check_format_version(doc: dict[str, Any]) -> int:
    """Return the declared format version, or raise if it is not supported."""
    found = doc.get("format_version")
    if found is None:
        msg = (
            "Export declares no format_version "
            f"(supported: {SUPPORTED_FORMAT_VERSION}, found: none)"
        )
        raise SchemaError(msg, supported=SUPPORTED_FORMAT_VERSION, found=None)
    if isinstance(found, bool) or not isinstance(found, int):
        msg = (
            f"Export format_version is not a number "
            f"(supported: {SUPPORTED_FORMAT_VERSION}, found: {found!r})"
        )
        raise SchemaError(msg, supported=SUPPORTED_FORMAT_VERSION, found=found)
    if found != SUPPORTED_FORMAT_VERSION:
        msg = (
            f"Unsupported format version: supported {SUPPORTED_FORMAT_VERSION}, "
            f"found {found}"
        )
        raise SchemaError(msg, supported=SUPPORTED_FORMAT_VERSION, found=found)
    return found


def _check_structure(doc: dict[str, Any]) -> None:
    index = doc.get("index")
    if not isinstance(index, dict):
        msg = "Malformed export: missing 'index' object"
        raise SchemaError(msg)

    root_id = as_id(doc.get("root"))
    if root_id is None:
        msg = "Malformed export: missing 'root' identifier"
        raise SchemaError(msg)

    root = index.get(root_id)
    if not isinstance(root, dict):
        msg = f"Malformed export: root item {root_id} is not in the index"
        raise SchemaError(msg)
    inner = root.get("inner")
    if not (isinstance(inner, dict) and "module" in inner):
        msg = f"Malformed export: root item {root_id} is not a module"
        raise SchemaError(msg)
    logger.debug("Export has %d indexed items", len(index))

"""Fingerprint of the settings that shape generated documentation."""

import hashlib
import json
from typing import Any

from rustdoc_md.load_export import SUPPORTED_FORMAT_VERSION


def compute_config_hash(
    config: dict[str, Any], format_version: int = SUPPORTED_FORMAT_VERSION
) -> str:
    """Return a SHA-256 fingerprint of a configuration and the export format.

    Two runs with equal fingerprints over the same export produce the same
    pages, so the value is stamped into the conversion report.
    """
    payload = {"format_version": format_version, "config": config}
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

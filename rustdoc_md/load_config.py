"""Logic for loading and merging configuration files."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from rustdoc_md.conversion_options import DEFAULT_NOISE_TRAITS
from rustdoc_md.deep_merge import deep_merge
from rustdoc_md.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "output": {
        "mode": "module",
        "base_path": "",
        "include_private": False,
    },
    "workspace": {
        "packages": [],
    },
    "navigation": {
        "output": None,
        "collapsed": True,
    },
    "links": {
        "external_host": "https://docs.rs",
        "std_host": "https://doc.rust-lang.org",
        "default_version": "latest",
        "versions": {},
    },
    "noise": {
        "traits": list(DEFAULT_NOISE_TRAITS),
    },
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not path:
        return config
    p = Path(path)
    if not p.exists():
        logger.warning("Config file %s not found, using defaults", p)
        return config
    try:
        user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        msg = f"Failed to read config {p}: {e}"
        raise ConfigError(msg) from e
    if not isinstance(user_config, dict):
        msg = f"Config {p} must be a mapping, got {type(user_config).__name__}"
        raise ConfigError(msg)
    return deep_merge(config, user_config)

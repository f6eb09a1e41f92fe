"""Tests for configuration loading, merging and option building."""

from pathlib import Path

import pytest
import yaml

from rustdoc_md.compute_config_hash import compute_config_hash
from rustdoc_md.conversion_options import (
    DEFAULT_NOISE_TRAITS,
    ConversionOptions,
    options_from_config,
)
from rustdoc_md.deep_merge import deep_merge
from rustdoc_md.errors import ConfigError
from rustdoc_md.load_config import load_config
from rustdoc_md.output_layout import ITEM, MODULE


def test_deep_merge_scalars() -> None:
    """Verify scalar replacement in deep merge."""
    merged = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
    assert merged == {"a": 1, "b": 3, "c": 4}


def test_deep_merge_nested() -> None:
    """Verify recursive merging of dictionaries."""
    merged = deep_merge({"nested": {"x": 1, "y": 2}}, {"nested": {"y": 3, "z": 4}})
    assert merged == {"nested": {"x": 1, "y": 3, "z": 4}}


def test_deep_merge_arrays_replace() -> None:
    """Verify that arrays outside the additive keys are replaced."""
    merged = deep_merge({"output": {"arr": [1, 2]}}, {"output": {"arr": [3]}})
    assert merged == {"output": {"arr": [3]}}


def test_deep_merge_workspace_packages_additive() -> None:
    """Verify that workspace packages are merged additively and sorted."""
    base = {"workspace": {"packages": ["beta", "alpha"]}}
    update = {"workspace": {"packages": ["alpha", "gamma"]}}
    merged = deep_merge(base, update)
    assert merged["workspace"]["packages"] == ["alpha", "beta", "gamma"]


def test_deep_merge_packages_key_outside_workspace_replaces() -> None:
    """Verify that a 'packages' list in another section is still replaced."""
    merged = deep_merge({"other": {"packages": ["a"]}}, {"other": {"packages": ["b"]}})
    assert merged["other"]["packages"] == ["b"]


def test_deep_merge_does_not_mutate_base() -> None:
    """Verify that merging leaves the base dictionary untouched."""
    base = {"output": {"mode": "module"}}
    deep_merge(base, {"output": {"mode": "item"}})
    assert base == {"output": {"mode": "module"}}


def test_compute_config_hash_stability() -> None:
    """Verify that the config hash is stable regardless of key order."""
    config1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}}
    config2 = {"a": 1, "b": 2, "nested": {"x": 1, "y": 2}}
    assert compute_config_hash(config1) == compute_config_hash(config2)


def test_compute_config_hash_changes_with_values() -> None:
    """Verify that different settings produce different hashes."""
    assert compute_config_hash({"mode": "item"}) != compute_config_hash(
        {"mode": "module"}
    )


def test_compute_config_hash_includes_format_version() -> None:
    """Verify that the export format version is part of the fingerprint."""
    config = {"output": {"mode": "item"}}
    assert compute_config_hash(config) == compute_config_hash(config, 56)
    assert compute_config_hash(config, 56) != compute_config_hash(config, 57)


def test_load_config_defaults() -> None:
    """Verify that the default config is loaded when no path is provided."""
    config = load_config(None)
    assert config["output"]["mode"] == MODULE
    assert config["output"]["include_private"] is False
    assert config["navigation"]["collapsed"] is True
    assert config["noise"]["traits"] == list(DEFAULT_NOISE_TRAITS)


def test_load_config_defaults_are_copies() -> None:
    """Verify that callers cannot corrupt the defaults through a loaded config."""
    config = load_config(None)
    config["noise"]["traits"].append("Send")
    assert "Send" not in load_config(None)["noise"]["traits"]


def test_load_config_with_file(tmp_path: Path) -> None:
    """Verify that a user config overrides defaults and extends additive lists."""
    config_file = tmp_path / "config.yml"
    user_config = {
        "output": {"mode": "item", "base_path": "/api"},
        "noise": {"traits": ["Send", "Sync"]},
        "links": {"versions": {"serde": "1.0.200"}},
    }
    config_file.write_text(yaml.dump(user_config), encoding="utf-8")

    config = load_config(config_file)
    assert config["output"]["mode"] == ITEM
    assert config["output"]["base_path"] == "/api"
    assert config["output"]["include_private"] is False
    assert "Send" in config["noise"]["traits"]
    assert "Unpin" in config["noise"]["traits"]
    assert config["links"]["versions"] == {"serde": "1.0.200"}


def test_load_config_missing_file_uses_defaults(tmp_path: Path) -> None:
    """Verify that a missing config file falls back to the defaults."""
    config = load_config(tmp_path / "absent.yml")
    assert config == load_config(None)


def test_load_config_invalid_yaml(tmp_path: Path) -> None:
    """Verify that unparsable YAML raises ConfigError."""
    config_file = tmp_path / "broken.yml"
    config_file.write_text("output: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="broken.yml"):
        load_config(config_file)


def test_load_config_non_mapping(tmp_path: Path) -> None:
    """Verify that a config whose top level is not a mapping is rejected."""
    config_file = tmp_path / "list.yml"
    config_file.write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_config(config_file)


def test_options_from_config(tmp_path: Path) -> None:
    """Verify that merged configuration turns into conversion options."""
    config = deep_merge(
        load_config(None),
        {
            "output": {"mode": "item", "include_private": True},
            "workspace": {"packages": ["sibling-crate"]},
            "navigation": {"output": str(tmp_path / "nav.yml"), "collapsed": False},
        },
    )
    options = options_from_config(config, tmp_path, "abc123")
    assert options.mode == ITEM
    assert options.include_private is True
    assert options.workspace_packages == ["sibling-crate"]
    assert options.navigation_output == tmp_path / "nav.yml"
    assert options.navigation_collapsed is False
    assert options.links.default_version == "latest"
    assert options.config_hash == "abc123"


def test_unknown_mode_rejected(tmp_path: Path) -> None:
    """Verify that an unknown output mode is a configuration error."""
    with pytest.raises(ConfigError, match="Unknown output mode"):
        ConversionOptions(output_root=tmp_path, mode="chapter")

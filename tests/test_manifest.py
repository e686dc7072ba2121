"""Tests for manifest loading."""

import json
from pathlib import Path

import pytest

from extman.core.errors import ConfigError
from extman.extensions.manifest import Manifest, load_manifest
from extman.models.extension import LoadStatus


def test_load_manifest(manifest_file: Path):
    manifest = load_manifest(manifest_file)

    assert [info.id for info in manifest.extensions] == ["jit", "logger", "net"]
    assert manifest.loaded["net"] is LoadStatus.ACTIVE_REQUESTED


def test_manifest_to_registry(manifest_file: Path):
    registry = load_manifest(manifest_file).to_registry()

    assert registry.known_ids() == ("jit", "logger", "net")
    assert registry.status("logger") is LoadStatus.ACTIVE_IMPLICIT
    assert registry.status("jit") is LoadStatus.UNLOADED
    assert registry.info("net").dependency == {"logger": ">=v1"}


def test_missing_manifest(temp_dir: Path):
    with pytest.raises(ConfigError) as exc_info:
        load_manifest(temp_dir / "nope.json")

    assert exc_info.value.config_key == "EXTMAN_MANIFEST"


def test_invalid_json(temp_dir: Path):
    path = temp_dir / "broken.json"
    path.write_text("{not json")

    with pytest.raises(ConfigError):
        load_manifest(path)


def test_duplicate_ids_rejected(temp_dir: Path):
    path = temp_dir / "dupes.json"
    path.write_text(json.dumps({
        "extensions": [
            {"id": "a", "version": "1.0"},
            {"id": "a", "version": "2.0"},
        ]
    }))

    with pytest.raises(ConfigError):
        load_manifest(path)


def test_status_for_unknown_extension_rejected(temp_dir: Path):
    path = temp_dir / "unknown.json"
    path.write_text(json.dumps({
        "extensions": [{"id": "a", "version": "1.0"}],
        "loaded": {"b": "active_requested"},
    }))

    with pytest.raises(ConfigError):
        load_manifest(path)


def test_empty_manifest():
    manifest = Manifest()

    assert len(manifest.to_registry()) == 0

"""Tests for ExtensionRegistry."""

import pytest
from pydantic import ValidationError

from extman.core.errors import ExtensionError
from extman.extensions.registry import ExtensionRegistry
from extman.models.extension import ExtensionInfo, LoadStatus


def test_register_extension():
    """Test registering a new extension."""
    registry = ExtensionRegistry()
    info = ExtensionInfo(id="net", version="1.0.0", dependency={"logger": ">=1"}, api=True)
    instance = object()

    assert registry.register(info, instance) is True

    assert "net" in registry
    assert registry.info("net") == info
    assert registry.instance("net") is instance
    assert registry.status("net") is LoadStatus.UNLOADED


def test_register_duplicate_keeps_original():
    """Test that re-registering an id does not replace the entry."""
    registry = ExtensionRegistry()
    original = ExtensionInfo(id="net", version="1.0.0")
    registry.register(original)

    assert registry.register(ExtensionInfo(id="net", version="2.0.0")) is False
    assert registry.info("net").version == "1.0.0"
    assert len(registry) == 1


def test_get_nonexistent_extension():
    """Test retrieving an extension that doesn't exist."""
    registry = ExtensionRegistry()

    assert registry.info("nonexistent") is None
    assert registry.instance("nonexistent") is None
    assert registry.status("nonexistent") is LoadStatus.UNLOADED


def test_known_ids_keep_registration_order():
    """Test listing all extensions."""
    registry = ExtensionRegistry()
    for name in ["ui", "net", "logger"]:
        registry.register(ExtensionInfo(id=name, version="1.0"))

    assert registry.known_ids() == ("ui", "net", "logger")


def test_deregister():
    """Test removing an extension."""
    registry = ExtensionRegistry()
    registry.register(ExtensionInfo(id="net", version="1.0"))
    registry.set_status("net", LoadStatus.ACTIVE_REQUESTED)

    assert registry.deregister("net") is True
    assert registry.deregister("net") is False
    assert "net" not in registry
    assert registry.loaded_ids() == []


def test_loaded_ids():
    """Test that only active extensions are reported as loaded."""
    registry = ExtensionRegistry()
    for name in ["a", "b", "c"]:
        registry.register(ExtensionInfo(id=name, version="1.0"))
    registry.set_status("c", LoadStatus.ACTIVE_IMPLICIT)
    registry.set_status("a", LoadStatus.ACTIVE_REQUESTED)

    assert registry.loaded_ids() == ["a", "c"]


def test_set_status_accepts_values():
    registry = ExtensionRegistry()
    registry.register(ExtensionInfo(id="a", version="1.0"))

    registry.set_status("a", "active_implicit")

    assert registry.status("a") is LoadStatus.ACTIVE_IMPLICIT


def test_set_status_of_unknown_extension():
    registry = ExtensionRegistry()

    with pytest.raises(ExtensionError) as exc_info:
        registry.set_status("ghost", LoadStatus.ACTIVE_REQUESTED)

    assert exc_info.value.extension_name == "ghost"


def test_extension_info_is_immutable():
    info = ExtensionInfo(id="net", version="1.0")

    with pytest.raises(ValidationError):
        info.version = "2.0"


def test_extension_info_requires_id():
    with pytest.raises(ValidationError):
        ExtensionInfo(id="", version="1.0")


def test_extension_info_defaults():
    info = ExtensionInfo(id="jit", version="1")

    assert info.dependency == {}
    assert info.api is False
    assert info.to_display_string() == "jit v1 [vm] deps: none"


def test_extension_info_dependency_is_read_only():
    declared = {"logger": ">=1"}
    info = ExtensionInfo(id="net", version="1.0", dependency=declared)

    with pytest.raises(TypeError):
        info.dependency["tls"] = "*"
    declared["tls"] = "*"

    assert info.dependency == {"logger": ">=1"}
    assert info.model_dump()["dependency"] == {"logger": ">=1"}

"""Tests for ExtensionManager."""

import pytest
from unittest.mock import MagicMock

from extman.core.errors import CircularRequirementError, ExtensionError, UnavailableExtensionError
from extman.extensions.manager import ExtensionManager
from extman.models.extension import ExtensionInfo, LoadMode, LoadStatus, PlanEntry


class TestExtensionManager:
    """Test suite for registration, lifecycle and events."""

    @pytest.fixture
    def journal(self):
        return []

    @pytest.fixture
    def manager(self, mock_extension, journal):
        manager = ExtensionManager()
        manager.add_instance(ExtensionInfo(id="jit", version="v1", api=False))
        manager.add_instance(
            ExtensionInfo(id="logger", version="v2", api=True),
            mock_extension("logger", journal)
        )
        manager.add_instance(
            ExtensionInfo(id="net", version="v1", api=True, dependency={"logger": ">=v1"}),
            mock_extension("net", journal)
        )
        return manager

    def test_registration_accessors(self, manager):
        assert manager.exists("net")
        assert not manager.exists("ghost")
        assert manager.get_info("net").dependency == {"logger": ">=v1"}
        assert manager.get_instance("net").name == "net"
        assert manager.get_load_status("net") is LoadStatus.UNLOADED

    def test_add_existing_instance_is_ignored(self, manager):
        assert manager.add_instance(ExtensionInfo(id="net", version="v9")) is False
        assert manager.get_info("net").version == "v1"

    def test_remove_instance(self, manager):
        assert manager.remove_instance("jit") is True
        assert not manager.exists("jit")
        assert manager.remove_instance("jit") is False

    def test_load_calls_on_init_in_order(self, manager, journal):
        plan = manager.load_extensions(["net"])

        assert plan == [
            PlanEntry(id="logger", mode=LoadMode.PASSIVE),
            PlanEntry(id="net", mode=LoadMode.INITIATIVE),
        ]
        assert journal == [("init", "logger"), ("init", "net")]
        assert manager.get_load_status("logger") is LoadStatus.ACTIVE_IMPLICIT
        assert manager.get_load_status("net") is LoadStatus.ACTIVE_REQUESTED
        assert manager.get_loaded_extensions() == ["logger", "net"]

    def test_load_routes_non_api_to_callback(self, manager):
        vm_callback = MagicMock()

        manager.load_extensions(["jit"], vm_callback)

        vm_callback.assert_called_once_with("jit")
        assert manager.get_load_status("jit") is LoadStatus.ACTIVE_REQUESTED

    def test_load_without_callback_fails_before_any_step(self, manager, journal):
        with pytest.raises(ExtensionError) as exc_info:
            manager.load_extensions(["net", "jit"])

        assert exc_info.value.extension_name == "jit"
        assert journal == []
        assert manager.get_loaded_extensions() == []

    def test_already_loaded_extensions_are_not_reinitialised(self, manager, journal):
        manager.load_extensions(["net"])
        journal.clear()

        manager.load_extensions(["net"])

        assert journal == []

    def test_explicit_request_promotes_passive_extension(self, manager, journal):
        manager.load_extensions(["net"])
        journal.clear()

        manager.load_extensions(["logger"])

        assert journal == []
        assert manager.get_load_status("logger") is LoadStatus.ACTIVE_REQUESTED

    def test_failed_resolution_loads_nothing(self, manager, journal):
        manager.add_instance(ExtensionInfo(id="ui", version="1", api=True, dependency={"net": "^2"}))

        with pytest.raises(UnavailableExtensionError):
            manager.load_extensions(["logger", "ui"])

        assert journal == []
        assert manager.get_loaded_extensions() == []

    def test_api_extension_without_instance_fails_before_any_step(self, mock_extension, journal):
        manager = ExtensionManager()
        manager.add_instance(ExtensionInfo(id="logger", version="1", api=True), mock_extension("logger", journal))
        manager.add_instance(ExtensionInfo(id="net", version="1", api=True, dependency={"logger": "*"}))

        with pytest.raises(ExtensionError) as exc_info:
            manager.load_extensions(["net"])

        assert exc_info.value.extension_name == "net"
        assert journal == []
        assert manager.get_loaded_extensions() == []

    def test_circular_requirement_surfaces(self, mock_extension, journal):
        manager = ExtensionManager()
        manager.add_instance(ExtensionInfo(id="a", version="1", api=True, dependency={"b": "*"}), mock_extension("a", journal))
        manager.add_instance(ExtensionInfo(id="b", version="1", api=True, dependency={"a": "*"}), mock_extension("b", journal))

        with pytest.raises(CircularRequirementError):
            manager.load_extensions(["a"])

    def test_unload_cascades_to_passive_dependencies(self, manager, journal):
        manager.load_extensions(["net"])
        journal.clear()

        order = manager.unload_extensions(["net"])

        assert order == ["net", "logger"]
        assert journal == [("uninit", "net"), ("uninit", "logger")]
        assert manager.get_loaded_extensions() == []

    def test_unload_keeps_requested_dependencies(self, manager, journal):
        manager.load_extensions(["logger", "net"])
        journal.clear()

        manager.unload_extensions(["net"])

        assert journal == [("uninit", "net")]
        assert manager.get_loaded_extensions() == ["logger"]

    def test_unload_of_dependency_tears_down_dependents_first(self, manager, journal):
        manager.load_extensions(["logger", "net"])
        journal.clear()

        manager.unload_extensions(["logger"])

        assert journal == [("uninit", "net"), ("uninit", "logger")]

    def test_unload_tolerates_instances_without_hooks(self, manager):
        manager.load_extensions(["jit"], MagicMock())

        assert manager.unload_extensions(["jit"]) == ["jit"]
        assert manager.get_load_status("jit") is LoadStatus.UNLOADED

    def test_unload_of_inactive_extension_is_noop(self, manager, journal):
        assert manager.unload_extensions(["net", "ghost"]) == []
        assert journal == []

    def test_emit_event_to_extension(self, manager):
        result = manager.emit_event_to_extension("net", "on_message", "ping", urgent=True)

        assert result == "net"
        assert manager.get_instance("net").events == [(("ping",), {"urgent": True})]

    def test_emit_event_to_unknown_extension(self, manager):
        with pytest.raises(ExtensionError):
            manager.emit_event_to_extension("ghost", "on_message")

    def test_emit_event_skips_missing_handlers(self, manager):
        assert manager.emit_event_to_extension("net", "on_missing") is None

    def test_emit_event_reaches_loaded_extensions_only(self, manager):
        manager.load_extensions(["logger"])

        manager.emit_event("on_message", 1)

        assert manager.get_instance("logger").events == [((1,), {})]
        assert manager.get_instance("net").events == []

    def test_managers_are_independent(self):
        first, second = ExtensionManager(), ExtensionManager()
        first.add_instance(ExtensionInfo(id="a", version="1"))

        assert first.exists("a")
        assert not second.exists("a")

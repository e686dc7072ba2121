"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

# Add project root to Python path so 'extman' is findable
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import json
import tempfile
from typing import Callable, Generator
import pytest

from extman.extensions.registry import ExtensionRegistry
from extman.models.extension import ExtensionInfo, LoadStatus


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_registry() -> Callable[..., ExtensionRegistry]:
    """Build a registry from compact tuples.

    Each extension is ``(id, version, dependency)`` or
    ``(id, version, dependency, api)``; ``loaded`` maps ids to statuses.
    """
    def _make(extensions, loaded=None) -> ExtensionRegistry:
        registry = ExtensionRegistry()
        for ext in extensions:
            ext_id, version, dependency = ext[:3]
            api = ext[3] if len(ext) > 3 else True
            registry.register(ExtensionInfo(id=ext_id, version=version, dependency=dependency, api=api))
        for ext_id, status in (loaded or {}).items():
            registry.set_status(ext_id, status)
        return registry

    return _make


@pytest.fixture
def sample_extensions() -> list:
    """The jit/logger/net example set."""
    return [
        ("jit", "v1", {}, False),
        ("logger", "v2", {}, True),
        ("net", "v1", {"logger": ">=v1"}, True),
    ]


@pytest.fixture
def manifest_file(temp_dir: Path) -> Path:
    """A manifest with net loaded on top of a passive logger."""
    path = temp_dir / "extensions.json"
    path.write_text(json.dumps({
        "extensions": [
            {"id": "jit", "version": "1.0.0", "api": False},
            {"id": "logger", "version": "2.0.0", "api": True},
            {"id": "net", "version": "1.0.0", "api": True, "dependency": {"logger": ">=v1"}},
        ],
        "loaded": {
            "logger": LoadStatus.ACTIVE_IMPLICIT.value,
            "net": LoadStatus.ACTIVE_REQUESTED.value,
        },
    }))
    return path


@pytest.fixture
def mock_extension():
    """Factory for extension instances that record lifecycle calls."""

    class MockExtension:
        def __init__(self, name: str, journal: list):
            self.name = name
            self.journal = journal
            self.events = []

        def on_init(self):
            self.journal.append(("init", self.name))

        def on_uninit(self):
            self.journal.append(("uninit", self.name))

        def on_message(self, *args, **kwargs):
            self.events.append((args, kwargs))
            return self.name

    return MockExtension

"""Extensions package - registry, dependency ordering and lifecycle management."""

from .graph import Graph
from .manager import ExtensionManager
from .manifest import Manifest, load_manifest
from .registry import ExtensionRegistry, RegistryView
from .resolver import LoadOrderResolver, UnloadOrderResolver
from .version import matches

__all__ = [
    "Graph",
    "ExtensionManager",
    "ExtensionRegistry",
    "RegistryView",
    "LoadOrderResolver",
    "UnloadOrderResolver",
    "Manifest",
    "load_manifest",
    "matches",
]

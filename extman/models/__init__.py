"""Data models for extman."""

from .extension import ExtensionInfo, LoadMode, LoadStatus, PlanEntry, RequireFrame

__all__ = [
    "ExtensionInfo",
    "LoadMode",
    "LoadStatus",
    "PlanEntry",
    "RequireFrame",
]

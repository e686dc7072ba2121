"""Core package - errors, logging and configuration."""

from .config import Config, get_config, reset_config
from .errors import (
    CircularRequirementError,
    ConfigError,
    DuplicatedEdgeError,
    ExtensionError,
    ExtManError,
    NoTopologicalOrderError,
    ResolutionError,
    UnavailableExtensionError,
    VersionFormatError,
)
from .logging import get_logger, setup_logging

__all__ = [
    "Config",
    "get_config",
    "reset_config",
    "ExtManError",
    "ConfigError",
    "ExtensionError",
    "VersionFormatError",
    "ResolutionError",
    "UnavailableExtensionError",
    "CircularRequirementError",
    "NoTopologicalOrderError",
    "DuplicatedEdgeError",
    "get_logger",
    "setup_logging",
]

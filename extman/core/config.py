"""Centralized configuration for the extension manager.

This module provides typed, validated configuration loaded from
environment variables and .env files.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").lower() == "true"


@dataclass
class PathConfig:
    """Path configuration."""
    data_dir: Path = field(default_factory=lambda: Path("./data"))
    logs_dir: Path = field(default_factory=lambda: Path("./data/logs"))
    manifest: Path = field(default_factory=lambda: Path("./data/extensions.json"))

    def __post_init__(self):
        base = os.getenv("EXTMAN_DATA_DIR")
        if base:
            self.data_dir = Path(base)
            self.logs_dir = self.data_dir / "logs"
            self.manifest = self.data_dir / "extensions.json"

        manifest = os.getenv("EXTMAN_MANIFEST")
        if manifest:
            self.manifest = Path(manifest)


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "text"  # "json" or "text"
    file_enabled: bool = False
    console_enabled: bool = True

    def __post_init__(self):
        self.level = os.getenv("EXTMAN_LOG_LEVEL", self.level).upper()
        self.format = os.getenv("EXTMAN_LOG_FORMAT", self.format).lower()
        self.file_enabled = _env_flag("EXTMAN_LOG_FILE", self.file_enabled)
        self.console_enabled = _env_flag("EXTMAN_LOG_CONSOLE", self.console_enabled)


@dataclass
class Config:
    """Main configuration container."""
    paths: PathConfig = field(default_factory=PathConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if self.log.level not in LOG_LEVELS:
            issues.append(f"EXTMAN_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        if self.log.format not in ("json", "text"):
            issues.append("EXTMAN_LOG_FORMAT must be 'json' or 'text'")

        if self.paths.manifest.suffix.lower() != ".json":
            issues.append("EXTMAN_MANIFEST must point to a .json file")

        return issues

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None

"""Manifest files - JSON snapshots of a registry used by the CLI.

Example::

    {
      "extensions": [
        {"id": "logger", "version": "2.0", "api": true},
        {"id": "net", "version": "1.0", "api": true, "dependency": {"logger": ">=v1"}}
      ],
      "loaded": {"logger": "active_implicit", "net": "active_requested"}
    }
"""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from extman.core.errors import ConfigError
from extman.extensions.registry import ExtensionRegistry
from extman.models.extension import ExtensionInfo, LoadStatus


class Manifest(BaseModel):
    """Extension infos plus the load status of each active extension."""
    extensions: list[ExtensionInfo] = Field(default_factory=list)
    loaded: dict[str, LoadStatus] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_ids(self) -> "Manifest":
        seen = set()
        for info in self.extensions:
            if info.id in seen:
                raise ValueError(f"duplicate extension id: {info.id}")
            seen.add(info.id)
        unknown = [ext_id for ext_id in self.loaded if ext_id not in seen]
        if unknown:
            raise ValueError(f"load status given for unknown extensions: {', '.join(unknown)}")
        return self

    def to_registry(self) -> ExtensionRegistry:
        """Build a registry holding these extensions (without instances)."""
        registry = ExtensionRegistry()
        for info in self.extensions:
            registry.register(info)
        for ext_id, status in self.loaded.items():
            registry.set_status(ext_id, status)
        return registry


def load_manifest(path: str | Path) -> Manifest:
    """Read and validate a manifest file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(
            f"Manifest not found: {path}",
            config_key="EXTMAN_MANIFEST"
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Manifest.model_validate(data)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Manifest is not valid JSON: {path}", details=str(e), cause=e) from e
    except ValidationError as e:
        raise ConfigError(f"Invalid manifest: {path}", details=str(e), cause=e) from e

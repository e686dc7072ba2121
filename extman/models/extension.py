"""Extension data models."""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class LoadStatus(str, Enum):
    """Current load status of a registered extension."""
    UNLOADED = "unloaded"
    ACTIVE_REQUESTED = "active_requested"
    ACTIVE_IMPLICIT = "active_implicit"

    @property
    def is_active(self) -> bool:
        return self is not LoadStatus.UNLOADED


class LoadMode(str, Enum):
    """Why an extension appears in a load plan."""
    INITIATIVE = "initiative"
    PASSIVE = "passive"

    @property
    def status(self) -> LoadStatus:
        """The status an extension takes once loaded in this mode."""
        if self is LoadMode.INITIATIVE:
            return LoadStatus.ACTIVE_REQUESTED
        return LoadStatus.ACTIVE_IMPLICIT


class ExtensionInfo(BaseModel):
    """Metadata declared by an extension.

    ``dependency`` maps each required extension id to a version range,
    e.g. ``{"logger": ">=1.0"}``. ``api`` is true when the extension exposes
    ``on_init``/``on_uninit`` itself; otherwise the host loads it through a
    callback.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique extension id")
    version: str = Field(..., min_length=1, description="Installed version")
    dependency: Mapping[str, str] = Field(
        default_factory=dict,
        validate_default=True,
        description="Required extension id -> version range"
    )
    api: bool = Field(default=False, description="Exposes a structured init/uninit surface")
    description: Optional[str] = None

    @field_validator("dependency")
    @classmethod
    def freeze_dependency(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("dependency")
    def serialize_dependency(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    def to_display_string(self) -> str:
        deps = ", ".join(f"{k} {v}" for k, v in self.dependency.items()) or "none"
        kind = "api" if self.api else "vm"
        return f"{self.id} v{self.version} [{kind}] deps: {deps}"


class PlanEntry(BaseModel):
    """One step of a load plan."""
    model_config = ConfigDict(frozen=True)

    id: str
    mode: LoadMode


class RequireFrame(NamedTuple):
    """An (id, version) pair on the require stack."""
    id: str
    version: str

    def __str__(self) -> str:
        return f"{self.id}({self.version})"

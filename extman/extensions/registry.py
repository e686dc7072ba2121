"""Extension registry - in-memory store of extension info, instances and load status."""

from typing import Any, Optional, Protocol

from extman.core.errors import ExtensionError
from extman.core.logging import get_logger
from extman.models.extension import ExtensionInfo, LoadStatus

logger = get_logger("registry")


class RegistryView(Protocol):
    """Read-only access used by the order resolvers."""

    def info(self, ext_id: str) -> Optional[ExtensionInfo]: ...

    def status(self, ext_id: str) -> LoadStatus: ...

    def known_ids(self) -> tuple[str, ...]: ...


class ExtensionRegistry:
    """Keyed store of registered extensions.

    Entries keep registration order, which is the order resolvers scan
    extensions in.
    """

    def __init__(self):
        self._info: dict[str, ExtensionInfo] = {}
        self._instances: dict[str, Any] = {}
        self._status: dict[str, LoadStatus] = {}

    def __contains__(self, ext_id: str) -> bool:
        return ext_id in self._info

    def __len__(self) -> int:
        return len(self._info)

    # Read side

    def info(self, ext_id: str) -> Optional[ExtensionInfo]:
        return self._info.get(ext_id)

    def status(self, ext_id: str) -> LoadStatus:
        return self._status.get(ext_id, LoadStatus.UNLOADED)

    def known_ids(self) -> tuple[str, ...]:
        return tuple(self._info)

    def instance(self, ext_id: str) -> Any:
        return self._instances.get(ext_id)

    def loaded_ids(self) -> list[str]:
        """Ids of every active extension, in registration order."""
        return [ext_id for ext_id, status in self._status.items() if status.is_active]

    # Write side

    def register(self, info: ExtensionInfo, instance: Any = None) -> bool:
        """Register an extension.

        Returns:
            False if the id is already registered; the existing entry is kept.
        """
        if info.id in self._info:
            logger.warning(f"Extension already registered: {info.id}", component="registry", extension=info.id)
            return False

        self._info[info.id] = info
        self._instances[info.id] = instance
        self._status[info.id] = LoadStatus.UNLOADED
        logger.extension_registered(info.id, info.version)
        return True

    def deregister(self, ext_id: str) -> bool:
        """Remove an extension. Returns False if it was not registered."""
        if ext_id not in self._info:
            return False

        del self._info[ext_id]
        del self._instances[ext_id]
        del self._status[ext_id]
        logger.info(f"Extension removed: {ext_id}", component="registry", extension=ext_id)
        return True

    def set_status(self, ext_id: str, status: LoadStatus) -> None:
        if ext_id not in self._info:
            raise ExtensionError("Cannot set status of unknown extension", extension_name=ext_id)
        self._status[ext_id] = LoadStatus(status)

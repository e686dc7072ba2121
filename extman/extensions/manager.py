"""Extension manager - owns a registry and applies load/unload plans."""

import threading
from typing import Any, Callable, Optional, Sequence

from extman.core.errors import ExtensionError
from extman.core.logging import get_logger
from extman.extensions.registry import ExtensionRegistry
from extman.extensions.resolver import LoadOrderResolver, UnloadOrderResolver
from extman.models.extension import ExtensionInfo, LoadMode, LoadStatus, PlanEntry

logger = get_logger("manager")

VmCallback = Callable[[str], Any]


class ExtensionManager:
    """Registers extensions and drives them through their lifecycle.

    Structured extensions (``info.api`` true) are initialised by calling
    ``on_init()`` on their instance. Everything else is handed to the
    host's ``vm_callback`` by id. Unloading calls ``on_uninit()`` where the
    instance provides one.

    Every public method holds the same lock, so registration never races
    with plan computation.
    """

    def __init__(self, registry: Optional[ExtensionRegistry] = None):
        self._registry = registry if registry is not None else ExtensionRegistry()
        self._lock = threading.RLock()

    @property
    def registry(self) -> ExtensionRegistry:
        return self._registry

    # Registration

    def add_instance(self, info: ExtensionInfo, instance: Any = None) -> bool:
        """Register an extension. Returns False if the id is already taken."""
        with self._lock:
            return self._registry.register(info, instance)

    def remove_instance(self, ext_id: str) -> bool:
        with self._lock:
            return self._registry.deregister(ext_id)

    def get_instance(self, ext_id: str) -> Any:
        with self._lock:
            return self._registry.instance(ext_id)

    def get_info(self, ext_id: str) -> Optional[ExtensionInfo]:
        with self._lock:
            return self._registry.info(ext_id)

    def exists(self, ext_id: str) -> bool:
        with self._lock:
            return ext_id in self._registry

    def get_load_status(self, ext_id: str) -> LoadStatus:
        with self._lock:
            return self._registry.status(ext_id)

    def set_load_status(self, ext_id: str, status: LoadStatus) -> None:
        with self._lock:
            self._registry.set_status(ext_id, status)

    def get_loaded_extensions(self) -> list[str]:
        with self._lock:
            return self._registry.loaded_ids()

    # Planning

    def get_load_order(self, ext_ids: Sequence[str]) -> list[PlanEntry]:
        with self._lock:
            return LoadOrderResolver(self._registry).resolve(ext_ids)

    def get_unload_order(self, ext_ids: Sequence[str]) -> list[str]:
        with self._lock:
            return UnloadOrderResolver(self._registry).resolve(ext_ids)

    # Lifecycle

    def load_extensions(
        self,
        ext_ids: Sequence[str],
        vm_callback: Optional[VmCallback] = None
    ) -> list[PlanEntry]:
        """Resolve and apply a load plan.

        Already loaded extensions are not initialised again. A passively
        loaded extension that is now requested explicitly is promoted to
        ACTIVE_REQUESTED.

        Returns:
            The plan that was applied.

        Raises:
            ResolutionError: If no plan could be built; nothing is loaded.
            ExtensionError: If the plan needs ``vm_callback`` and none was given,
                or an api extension to start has no instance.
        """
        with self._lock:
            plan = LoadOrderResolver(self._registry).resolve(ext_ids)

            for entry in plan:
                if self._registry.status(entry.id).is_active:
                    continue
                if not self._registry.info(entry.id).api:
                    if vm_callback is None:
                        raise ExtensionError(
                            "No vm callback given for an extension without api",
                            extension_name=entry.id,
                            suggestion="Pass vm_callback to load_extensions"
                        )
                elif self._registry.instance(entry.id) is None:
                    raise ExtensionError(
                        "Extension with api has no instance to initialise",
                        extension_name=entry.id,
                        suggestion="Register the extension together with its instance"
                    )

            for entry in plan:
                self._apply_load(entry, vm_callback)
            return plan

    def _apply_load(self, entry: PlanEntry, vm_callback: Optional[VmCallback]) -> None:
        status = self._registry.status(entry.id)
        if status.is_active:
            if status is LoadStatus.ACTIVE_IMPLICIT and entry.mode is LoadMode.INITIATIVE:
                self._registry.set_status(entry.id, LoadStatus.ACTIVE_REQUESTED)
                logger.info(f"Extension promoted to requested: {entry.id}", component="manager", extension=entry.id)
            return

        if self._registry.info(entry.id).api:
            self._registry.instance(entry.id).on_init()
        else:
            vm_callback(entry.id)
        self._registry.set_status(entry.id, entry.mode.status)
        logger.extension_loaded(entry.id, entry.mode.value)

    def unload_extensions(self, ext_ids: Sequence[str]) -> list[str]:
        """Resolve and apply an unload plan.

        Returns:
            The unload order that was applied.
        """
        with self._lock:
            order = UnloadOrderResolver(self._registry).resolve(ext_ids)
            for ext_id in order:
                if not self._registry.status(ext_id).is_active:
                    continue
                self._call(self._registry.instance(ext_id), "on_uninit")
                self._registry.set_status(ext_id, LoadStatus.UNLOADED)
                logger.extension_unloaded(ext_id)
            return order

    # Events

    def emit_event_to_extension(self, ext_id: str, event: str, *args, **kwargs) -> Any:
        """Call the ``event`` handler of one extension, if it defines one."""
        with self._lock:
            if ext_id not in self._registry:
                raise ExtensionError("Unavailable extension id", extension_name=ext_id)
            return self._call(self._registry.instance(ext_id), event, *args, **kwargs)

    def emit_event(self, event: str, *args, **kwargs) -> None:
        """Call the ``event`` handler of every loaded extension."""
        with self._lock:
            for ext_id in self._registry.loaded_ids():
                self._call(self._registry.instance(ext_id), event, *args, **kwargs)

    @staticmethod
    def _call(instance: Any, name: str, *args, **kwargs) -> Any:
        func = getattr(instance, name, None)
        if callable(func):
            return func(*args, **kwargs)
        return None

"""Load and unload order resolution.

Both resolvers are read-only planners: they consult a RegistryView, build a
fresh Graph per call and return its topological order. Applying the plan
(calling lifecycle hooks, updating status) is the caller's job.
"""

import time
from typing import Iterator, Optional, Sequence

from extman.core.errors import (
    CircularRequirementError,
    DuplicatedEdgeError,
    ResolutionError,
    UnavailableExtensionError,
    VersionFormatError,
)
from extman.core.logging import get_logger
from extman.extensions.graph import Graph
from extman.extensions.registry import RegistryView
from extman.extensions.version import matches
from extman.models.extension import LoadMode, LoadStatus, PlanEntry, RequireFrame

logger = get_logger("resolver")


def _chain(require_stack: Sequence[RequireFrame]) -> list[str]:
    """Render the require stack innermost requirer first."""
    return [str(frame) for frame in reversed(require_stack)]


class LoadOrderResolver:
    """Computes the order in which extensions must be loaded.

    Dependencies are walked depth-first. Edges point from a dependency to
    its dependent, so the topological order loads dependencies first.
    """

    def __init__(self, registry: RegistryView):
        self._registry = registry

    def resolve(self, requested: Sequence[str]) -> list[PlanEntry]:
        """Build the load plan for ``requested``.

        Every id in the plan is tagged INITIATIVE if it was requested and
        PASSIVE if it was only pulled in as a dependency.

        Raises:
            UnavailableExtensionError: A requested id or dependency is not
                registered, or a dependency's version is out of range.
            CircularRequirementError: A dependency requires itself.
        """
        started = time.perf_counter()
        requested = list(requested)
        graph = Graph()

        for ext_id in requested:
            if self._registry.info(ext_id) is None:
                self._fail(UnavailableExtensionError(ext_id))
            self._walk(ext_id, graph)

        order = graph.topo()
        wanted = set(requested)
        plan = [
            PlanEntry(id=ext_id, mode=LoadMode.INITIATIVE if ext_id in wanted else LoadMode.PASSIVE)
            for ext_id in order
        ]
        logger.plan_resolved("load", order, (time.perf_counter() - started) * 1000)
        return plan

    def _enter(self, ext_id: str, graph: Graph, require_stack: list, frames: list) -> None:
        info = self._registry.info(ext_id)
        require_stack.append(RequireFrame(ext_id, info.version))
        graph.add_node(ext_id)
        frames.append((ext_id, iter(info.dependency.items())))

    def _walk(self, root: str, graph: Graph) -> None:
        require_stack: list[RequireFrame] = []
        frames: list[tuple[str, Iterator[tuple[str, str]]]] = []
        self._enter(root, graph, require_stack, frames)

        while frames:
            ext_id, pending = frames[-1]
            step = next(pending, None)
            if step is None:
                frames.pop()
                require_stack.pop()
                continue

            dependency, required = step
            dep_info = self._registry.info(dependency)
            if dep_info is None:
                self._fail(UnavailableExtensionError(dependency, chain=_chain(require_stack)))

            if any(frame.id == dependency for frame in require_stack):
                self._fail(CircularRequirementError(dependency, chain=_chain(require_stack)))

            try:
                in_range = matches(dep_info.version, required)
            except VersionFormatError as e:
                logger.requirement_failed(e.message, _chain(require_stack))
                raise

            if not in_range:
                self._fail(UnavailableExtensionError(
                    dependency,
                    required=required,
                    actual=dep_info.version,
                    chain=_chain(require_stack)
                ))

            try:
                graph.add_edge(dependency, ext_id)
            except DuplicatedEdgeError as e:
                # subtree already walked through this same edge
                logger.debug(e.message, component="resolver")
                continue

            self._enter(dependency, graph, require_stack, frames)

    def _fail(self, error: ResolutionError) -> None:
        logger.requirement_failed(error.message, error.chain)
        raise error


class UnloadOrderResolver:
    """Computes the order in which loaded extensions must be unloaded.

    Active dependents of an extension are torn down before it, and its
    passively loaded dependencies are torn down after it. Extensions that
    were explicitly requested are never unloaded as a side effect of
    unloading a dependent.
    """

    def __init__(self, registry: RegistryView):
        self._registry = registry

    def resolve(self, requested: Sequence[str]) -> list[str]:
        """Build the unload order for ``requested``.

        Ids that are unknown or not currently loaded are skipped.
        """
        started = time.perf_counter()
        graph = Graph()

        for ext_id in requested:
            if self._registry.status(ext_id).is_active:
                self._walk(ext_id, graph)

        order = graph.topo()
        logger.plan_resolved("unload", order, (time.perf_counter() - started) * 1000)
        return order

    def _neighbours(self, ext_id: str, came_from: Optional[str]) -> Iterator[tuple[str, str, str]]:
        """Yield (edge source, edge target, next id) for each step out of ``ext_id``."""
        for other in self._registry.known_ids():
            if other in (ext_id, came_from) or not self._registry.status(other).is_active:
                continue
            if ext_id in self._registry.info(other).dependency:
                yield other, ext_id, other

        info = self._registry.info(ext_id)
        if info is None:
            return
        for dependency in info.dependency:
            if dependency == came_from:
                continue
            if self._registry.status(dependency) is LoadStatus.ACTIVE_IMPLICIT:
                yield ext_id, dependency, dependency

    def _walk(self, root: str, graph: Graph) -> None:
        graph.add_node(root)
        frames = [(root, self._neighbours(root, None))]

        while frames:
            ext_id, pending = frames[-1]
            step = next(pending, None)
            if step is None:
                frames.pop()
                continue

            source, target, next_id = step
            try:
                graph.add_edge(source, target)
            except DuplicatedEdgeError as e:
                logger.debug(e.message, component="resolver")
                continue

            frames.append((next_id, self._neighbours(next_id, ext_id)))

"""Directed graph with deterministic topological ordering."""

import heapq
from typing import Hashable, Iterator

from extman.core.errors import DuplicatedEdgeError, NoTopologicalOrderError


class Graph:
    """A small directed graph.

    An edge ``(u, v)`` means "u comes before v". Nodes keep their insertion
    order and ``topo()`` uses it to break ties, so the same sequence of
    insertions always produces the same order.
    """

    def __init__(self):
        self._successors: dict[Hashable, list[Hashable]] = {}
        self._edges: set[tuple[Hashable, Hashable]] = set()

    def __contains__(self, node: Hashable) -> bool:
        return node in self._successors

    def __len__(self) -> int:
        return len(self._successors)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._successors)

    @property
    def nodes(self) -> list[Hashable]:
        return list(self._successors)

    @property
    def edges(self) -> list[tuple[Hashable, Hashable]]:
        return [(u, v) for u, targets in self._successors.items() for v in targets]

    def has_node(self, node: Hashable) -> bool:
        return node in self._successors

    def has_edge(self, source: Hashable, target: Hashable) -> bool:
        return (source, target) in self._edges

    def add_node(self, node: Hashable) -> None:
        """Add a node. Adding an existing node does nothing."""
        self._successors.setdefault(node, [])

    def add_edge(self, source: Hashable, target: Hashable) -> None:
        """Add the edge ``source -> target``, creating missing nodes.

        Raises:
            DuplicatedEdgeError: If the edge is already present.
        """
        if (source, target) in self._edges:
            raise DuplicatedEdgeError(str(source), str(target))
        self.add_node(source)
        self.add_node(target)
        self._successors[source].append(target)
        self._edges.add((source, target))

    def topo(self) -> list[Hashable]:
        """Return the nodes in an order consistent with every edge.

        Kahn's algorithm; among nodes that are ready at the same time the
        one inserted first wins.

        Raises:
            NoTopologicalOrderError: If the graph has a cycle.
        """
        position = {node: i for i, node in enumerate(self._successors)}
        in_degree = {node: 0 for node in self._successors}
        for targets in self._successors.values():
            for target in targets:
                in_degree[target] += 1

        # heap keyed by insertion position keeps the tie-break stable
        ready = [(position[node], node) for node, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        order = []
        while ready:
            _, node = heapq.heappop(ready)
            order.append(node)
            for target in self._successors[node]:
                in_degree[target] -= 1
                if in_degree[target] == 0:
                    heapq.heappush(ready, (position[target], target))

        if len(order) != len(self._successors):
            remaining = [str(node) for node, degree in in_degree.items() if degree > 0]
            raise NoTopologicalOrderError(remaining)
        return order

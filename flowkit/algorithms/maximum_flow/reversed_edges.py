"""Residual (reverse) edge augmentation.

Maximum-flow algorithms push flow back along an edge by increasing the
residual capacity of its reverse. `ReversedEdgeAugmentor` makes sure every
edge of the graph has a reverse of its own. An opposite-direction edge not yet
paired is reused and a self-loop is its own reverse. Any other edge gets a new
reverse from the caller's edge factory, so parallel edges never share one.
The added edges are recorded so that ``remove_reversed_edges()`` restores
the graph exactly.

Typical use::

    with ReversedEdgeAugmentor(graph, edge_factory) as reverser:
        reverser.add_reversed_edges()
        flow = EdmondsKarpMaximumFlow(graph, capacity, edge_factory, reverser)
        flow.compute(source, sink)
    # reverse edges removed here
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from flowkit.algorithms.base import require_not_none
from flowkit.events import Event
from flowkit.exceptions import InvalidOperationError
from flowkit.graph.edge import EdgeFactory, is_self_edge
from flowkit.logging import get_logger

logger = get_logger(__name__)


class ReversedEdgeAugmentor:
    """Adds and removes the reverse edges a residual graph needs.

    Attributes:
        visited_graph: The caller-owned graph to augment.
        edge_factory: Callable ``(source, target) -> edge`` for new reverse edges.
        reversed_edge_added: Event fired with each edge this augmentor adds.
    """

    def __init__(self, visited_graph: Any, edge_factory: EdgeFactory) -> None:
        self.visited_graph = require_not_none(visited_graph, "visited_graph")
        self.edge_factory = require_not_none(edge_factory, "edge_factory")

        self._augmented_edges: List[Any] = []
        self._reversed_edges: Dict[Any, Any] = {}
        self._augmented = False

        self.reversed_edge_added: Event[Any] = Event("reversed_edge_added")

    @property
    def augmented(self) -> bool:
        """True between ``add_reversed_edges()`` and ``remove_reversed_edges()``."""
        return self._augmented

    @property
    def augmented_edges(self) -> Tuple[Any, ...]:
        """Edges added to the graph by this augmentor."""
        return tuple(self._augmented_edges)

    @property
    def reversed_edges(self) -> Mapping[Any, Any]:
        """Read-only edge -> reverse edge map, covering both directions."""
        return MappingProxyType(self._reversed_edges)

    def reversed_edge(self, edge: Any) -> Optional[Any]:
        return self._reversed_edges.get(edge)

    def _find_reversed_edge(self, edge: Any) -> Optional[Any]:
        # An opposite edge is reverse to at most one edge
        for candidate in self.visited_graph.out_edges(edge.target):
            if candidate.target == edge.source and candidate not in self._reversed_edges:
                return candidate
        return None

    def _find_edges_to_reverse(self) -> Iterator[Any]:
        for edge in self.visited_graph.edges:
            if edge in self._reversed_edges:
                continue

            if is_self_edge(edge):
                self._reversed_edges[edge] = edge
                continue

            reversed_edge = self._find_reversed_edge(edge)
            if reversed_edge is not None:
                self._reversed_edges[edge] = reversed_edge
                self._reversed_edges[reversed_edge] = edge
                continue

            yield edge

    def _add_reversed_edges(self, not_reversed_edges: List[Any]) -> None:
        for edge in not_reversed_edges:
            reversed_edge = self.edge_factory(edge.target, edge.source)
            if reversed_edge is None:
                raise InvalidOperationError("Edge factory returned None.")
            if not self.visited_graph.add_edge(reversed_edge):
                raise InvalidOperationError(
                    f"Cannot add the reversed edge of {edge} to the graph."
                )

            self._augmented_edges.append(reversed_edge)
            self._reversed_edges[edge] = reversed_edge
            self._reversed_edges[reversed_edge] = edge
            self.reversed_edge_added.fire(reversed_edge)

    def add_reversed_edges(self) -> None:
        """Give every edge of the graph a reverse edge.

        Raises:
            InvalidOperationError: If the graph is already augmented.
        """
        if self._augmented:
            raise InvalidOperationError("Graph already augmented.")

        # The scan must finish before the graph is mutated
        not_reversed_edges = list(self._find_edges_to_reverse())
        try:
            self._add_reversed_edges(not_reversed_edges)
        except Exception:
            for edge in self._augmented_edges:
                self.visited_graph.remove_edge(edge)
            self._augmented_edges.clear()
            self._reversed_edges.clear()
            raise
        self._augmented = True

        logger.debug(
            "Added %d reversed edges (%d edges paired)",
            len(self._augmented_edges),
            len(self._reversed_edges),
        )

    def remove_reversed_edges(self) -> None:
        """Remove the edges added by ``add_reversed_edges()``.

        Raises:
            InvalidOperationError: If the graph is not augmented.
        """
        if not self._augmented:
            raise InvalidOperationError("Graph is not augmented yet.")

        for edge in self._augmented_edges:
            self.visited_graph.remove_edge(edge)

        logger.debug("Removed %d reversed edges", len(self._augmented_edges))
        self._augmented_edges.clear()
        self._reversed_edges.clear()
        self._augmented = False

    def close(self) -> None:
        """Remove the reverse edges if they are still in the graph."""
        if self._augmented:
            self.remove_reversed_edges()

    def __enter__(self) -> "ReversedEdgeAugmentor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

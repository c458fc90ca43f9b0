"""Maximum flow via Edmonds-Karp shortest augmenting paths.

The algorithm works on the caller's graph after a `ReversedEdgeAugmentor` has
paired every edge with a reverse edge. Each iteration runs a breadth-first
search from the source over edges with positive residual capacity, stops as
soon as the sink is discovered, and pushes the path bottleneck along the
path: the residual of each path edge drops by the bottleneck and the residual
of its reverse grows by the same amount.

When no augmenting path is left, the vertices colored Black by the last
search form the source side of a minimum cut and the White vertices the sink
side.

Example:
    >>> graph = AdjacencyGraph.from_edges([
    ...     EquatableTaggedEdge("A", "B", 3.0),
    ...     EquatableTaggedEdge("B", "C", 2.0),
    ... ])
    >>> factory = lambda s, t: EquatableTaggedEdge(s, t, 0.0)
    >>> with ReversedEdgeAugmentor(graph, factory) as reverser:
    ...     reverser.add_reversed_edges()
    ...     flow = EdmondsKarpMaximumFlow(graph, lambda e: e.tag, factory, reverser)
    ...     flow.compute("A", "C")
    >>> flow.max_flow
    2.0
"""

from __future__ import annotations

from collections import deque
from types import MappingProxyType
from typing import Any, Deque, Dict, List, Mapping, Optional

from flowkit.algorithms.base import AlgorithmBase, GraphColor, require_not_none
from flowkit.algorithms.maximum_flow.reversed_edges import ReversedEdgeAugmentor
from flowkit.exceptions import (
    InvalidOperationError,
    NegativeCapacityError,
    VertexNotFoundError,
)
from flowkit.graph.edge import CapacityFunc, EdgeFactory
from flowkit.logging import get_logger

logger = get_logger(__name__)


class MaximumFlowAlgorithm(AlgorithmBase[Any]):
    """State shared by maximum-flow algorithms.

    Attributes:
        capacities: Callable returning the capacity of an edge.
        edge_factory: Callable ``(source, target) -> edge``.
        source, sink: Flow terminals; set directly or through ``compute``.
        max_flow: Flow value found by the last computation.
    """

    def __init__(
        self,
        visited_graph: Any,
        capacities: CapacityFunc,
        edge_factory: EdgeFactory,
    ) -> None:
        super().__init__(visited_graph)
        self.capacities = require_not_none(capacities, "capacities")
        self.edge_factory = require_not_none(edge_factory, "edge_factory")

        self.source: Optional[Any] = None
        self.sink: Optional[Any] = None
        self.max_flow: float = 0.0

        self._predecessors: Dict[Any, Any] = {}
        self._residual_capacities: Dict[Any, float] = {}
        self._vertex_colors: Dict[Any, GraphColor] = {}
        self._reversed_edges: Mapping[Any, Any] = MappingProxyType({})

    @property
    def predecessors(self) -> Mapping[Any, Any]:
        """Vertex -> tree edge reaching it in the last augmenting-path search."""
        return MappingProxyType(self._predecessors)

    @property
    def residual_capacities(self) -> Mapping[Any, float]:
        """Edge -> remaining capacity; valid until the next ``compute``."""
        return MappingProxyType(self._residual_capacities)

    @property
    def vertex_colors(self) -> Mapping[Any, GraphColor]:
        return MappingProxyType(self._vertex_colors)

    @property
    def reversed_edges(self) -> Mapping[Any, Any]:
        return self._reversed_edges

    def get_vertex_color(self, vertex: Any) -> GraphColor:
        """Return the color ``vertex`` had at the end of the last search.

        Raises:
            VertexNotFoundError: If ``vertex`` is not in the graph.
        """
        if not self.visited_graph.contains_vertex(vertex):
            raise VertexNotFoundError(f"Vertex '{vertex}' does not exist.", vertex)
        return self._vertex_colors.get(vertex, GraphColor.WHITE)

    def compute(self, source: Any = None, sink: Any = None) -> None:  # type: ignore[override]
        """Compute the maximum flow from ``source`` to ``sink``.

        Called without arguments, the terminals already assigned to
        ``source`` and ``sink`` are used.

        Raises:
            TypeError: If only one of the terminals is given.
        """
        if source is not None or sink is not None:
            self.source = require_not_none(source, "source")
            self.sink = require_not_none(sink, "sink")
        super().compute()


class EdmondsKarpMaximumFlow(MaximumFlowAlgorithm):
    """Edmonds-Karp maximum flow for directed graphs with non-negative capacities.

    Args:
        visited_graph: Graph already holding the reverse edges.
        capacities: Callable returning the capacity of an edge. Reverse edges
            created by the augmentor are passed to it as well.
        edge_factory: Callable ``(source, target) -> edge``.
        reversed_edge_augmentor: Augmentor bound to ``visited_graph``; it must
            be augmented before ``compute`` is called.

    Raises:
        TypeError: If an argument is None.
        ValueError: If the augmentor targets another graph.
    """

    def __init__(
        self,
        visited_graph: Any,
        capacities: CapacityFunc,
        edge_factory: EdgeFactory,
        reversed_edge_augmentor: ReversedEdgeAugmentor,
    ) -> None:
        super().__init__(visited_graph, capacities, edge_factory)
        require_not_none(reversed_edge_augmentor, "reversed_edge_augmentor")
        if reversed_edge_augmentor.visited_graph is not visited_graph:
            raise ValueError("Reversed edge augmentor must target the same graph.")

        self._reverser = reversed_edge_augmentor
        self._reversed_edges = reversed_edge_augmentor.reversed_edges
        self._pushed: Dict[Any, float] = {}
        self.augmenting_paths = 0

    @property
    def edge_flows(self) -> Dict[Any, float]:
        """Net flow pushed along each edge by the last computation.

        The value is negative on an edge used only to cancel flow of its
        reverse.
        """
        return {
            edge: self._pushed.get(edge, 0.0) for edge in self._residual_capacities
        }

    def _initialize(self) -> None:
        if not self._reverser.augmented:
            raise InvalidOperationError(
                "The graph has not been augmented yet. Call "
                "ReversedEdgeAugmentor.add_reversed_edges() before running this algorithm."
            )
        if self.source is None:
            raise InvalidOperationError("Source is not specified.")
        if self.sink is None:
            raise InvalidOperationError("Sink is not specified.")
        if not self.visited_graph.contains_vertex(self.source):
            raise VertexNotFoundError(
                f"Source vertex '{self.source}' is not part of the graph.", self.source
            )
        if not self.visited_graph.contains_vertex(self.sink):
            raise VertexNotFoundError(
                f"Sink vertex '{self.sink}' is not part of the graph.", self.sink
            )
        if self.source == self.sink:
            raise ValueError("Source and sink must be different vertices.")

        self.max_flow = 0.0
        self.augmenting_paths = 0
        self._pushed.clear()
        self._predecessors.clear()
        self._vertex_colors.clear()

        residual: Dict[Any, float] = {}
        for vertex in self.visited_graph.vertices:
            for edge in self.visited_graph.out_edges(vertex):
                capacity = self.capacities(edge)
                if capacity < 0:
                    raise NegativeCapacityError(edge, capacity)
                residual[edge] = capacity
        self._residual_capacities.clear()
        self._residual_capacities.update(residual)

    def _search_augmenting_path(self) -> bool:
        """Run one BFS over the residual graph.

        Returns:
            bool: True if the sink was discovered.
        """
        graph = self.visited_graph
        colors = self._vertex_colors
        predecessors = self._predecessors
        residual = self._residual_capacities
        sink = self.sink

        colors.clear()
        predecessors.clear()
        for vertex in graph.vertices:
            colors[vertex] = GraphColor.WHITE

        colors[self.source] = GraphColor.GRAY
        queue: Deque[Any] = deque([self.source])
        while queue:
            vertex = queue.popleft()
            for edge in graph.out_edges(vertex):
                if residual[edge] <= 0:
                    continue
                target = edge.target
                if colors[target] != GraphColor.WHITE:
                    continue
                predecessors[target] = edge
                colors[target] = GraphColor.GRAY
                if target == sink:
                    # First discovery is a shortest augmenting path
                    return True
                queue.append(target)
            colors[vertex] = GraphColor.BLACK
        return False

    def _augment_path(self) -> float:
        path: List[Any] = []
        vertex = self.sink
        while vertex != self.source:
            edge = self._predecessors[vertex]
            path.append(edge)
            vertex = edge.source

        delta = min(self._residual_capacities[edge] for edge in path)

        for edge in path:
            self._residual_capacities[edge] -= delta
            self._pushed[edge] = self._pushed.get(edge, 0.0) + delta
            reversed_edge = self._reversed_edges.get(edge)
            if reversed_edge is not None:
                self._residual_capacities[reversed_edge] += delta
                self._pushed[reversed_edge] = self._pushed.get(reversed_edge, 0.0) - delta
        return delta

    def _internal_compute(self) -> None:
        while self._search_augmenting_path():
            delta = self._augment_path()
            self.max_flow += delta
            self.augmenting_paths += 1
            logger.debug(
                "Augmenting path %d pushed %s (total %s)",
                self.augmenting_paths,
                delta,
                self.max_flow,
            )

        logger.debug(
            "Maximum flow from %s to %s is %s after %d augmenting paths",
            self.source,
            self.sink,
            self.max_flow,
            self.augmenting_paths,
        )

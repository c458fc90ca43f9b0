"""Supply/demand balancing for flows with lower bounds.

Every original edge is assumed to carry a preflow (lower bound) of
``FLOW_CONFIG.balancing_preflow``. The balancing index of a vertex is the
preflow leaving it minus the preflow entering it:

- index < 0: more preflow arrives than leaves, the vertex is a *surplus*
  vertex and is fed by the balancing source with capacity ``-index``;
- index > 0: the vertex is *deficient* and drains into the balancing sink
  with capacity ``index``.

The flow source and sink are linked to the balancing terminals with unbounded
capacity, so a maximum flow from the balancing source to the balancing sink
tells whether a feasible flow honouring the lower bounds exists.
"""

from __future__ import annotations

from typing import Any, Dict, List, MutableMapping, Optional, Tuple

from flowkit.algorithms.base import require_not_none
from flowkit.config import FLOW_CONFIG
from flowkit.events import Event
from flowkit.exceptions import InvalidOperationError, VertexNotFoundError
from flowkit.graph.edge import EdgeFactory, VertexFactory
from flowkit.logging import get_logger

logger = get_logger(__name__)


class GraphBalancer:
    """Adds balancing terminals and edges to a caller-owned graph.

    Args:
        visited_graph: Graph to balance; must support ``in_edges``.
        source: Flow source, must be in the graph.
        sink: Flow sink, must be in the graph.
        vertex_factory: Callable returning a new vertex not yet in the graph.
        edge_factory: Callable ``(source, target) -> edge``.
        capacities: Optional edge -> capacity mapping. It is updated in
            place with the capacities of the balancing edges. When omitted,
            every existing edge gets an unbounded capacity.

    Attributes:
        capacities: Edge -> capacity mapping, usable as ``capacities.__getitem__``
            for a maximum-flow algorithm.
        balancing_source, balancing_sink: Terminals added by ``balance()``.
        balancing_source_edge, balancing_sink_edge: Edges
            ``balancing_source -> source`` and ``sink -> balancing_sink``.
    """

    def __init__(
        self,
        visited_graph: Any,
        source: Any,
        sink: Any,
        vertex_factory: VertexFactory,
        edge_factory: EdgeFactory,
        capacities: Optional[MutableMapping[Any, float]] = None,
    ) -> None:
        self.visited_graph = require_not_none(visited_graph, "visited_graph")
        require_not_none(source, "source")
        require_not_none(sink, "sink")
        self.vertex_factory = require_not_none(vertex_factory, "vertex_factory")
        self.edge_factory = require_not_none(edge_factory, "edge_factory")

        if not visited_graph.contains_vertex(source):
            raise VertexNotFoundError(f"Source '{source}' must be in the graph.", source)
        if not visited_graph.contains_vertex(sink):
            raise VertexNotFoundError(f"Sink '{sink}' must be in the graph.", sink)
        self.source = source
        self.sink = sink

        self._preflow: Dict[Any, int] = {}
        if capacities is None:
            capacities = {}
            for edge in visited_graph.edges:
                capacities[edge] = FLOW_CONFIG.unbounded_capacity
        self.capacities: MutableMapping[Any, float] = capacities
        for edge in visited_graph.edges:
            self._preflow[edge] = FLOW_CONFIG.balancing_preflow

        self.balanced = False
        self.balancing_source: Optional[Any] = None
        self.balancing_sink: Optional[Any] = None
        self.balancing_source_edge: Optional[Any] = None
        self.balancing_sink_edge: Optional[Any] = None

        self._surplus_vertices: List[Any] = []
        self._surplus_edges: List[Any] = []
        self._deficient_vertices: List[Any] = []
        self._deficient_edges: List[Any] = []

        self.balancing_source_added: Event[Any] = Event("balancing_source_added")
        self.balancing_sink_added: Event[Any] = Event("balancing_sink_added")
        self.edge_added: Event[Any] = Event("edge_added")
        self.surplus_vertex_added: Event[Any] = Event("surplus_vertex_added")
        self.deficient_vertex_added: Event[Any] = Event("deficient_vertex_added")

    @property
    def surplus_vertices(self) -> Tuple[Any, ...]:
        return tuple(self._surplus_vertices)

    @property
    def surplus_edges(self) -> Tuple[Any, ...]:
        return tuple(self._surplus_edges)

    @property
    def deficient_vertices(self) -> Tuple[Any, ...]:
        return tuple(self._deficient_vertices)

    @property
    def deficient_edges(self) -> Tuple[Any, ...]:
        return tuple(self._deficient_edges)

    def get_balancing_index(self, vertex: Any) -> int:
        """Return outgoing minus incoming preflow at ``vertex``.

        Edges the balancer does not know about (added to the graph after it
        was built) carry no preflow.

        Raises:
            TypeError: If ``vertex`` is None.
            VertexNotFoundError: If ``vertex`` is not in the graph.
        """
        require_not_none(vertex, "vertex")
        if not self.visited_graph.contains_vertex(vertex):
            raise VertexNotFoundError(f"Vertex '{vertex}' does not exist.", vertex)

        index = 0
        for edge in self.visited_graph.out_edges(vertex):
            index += self._preflow.get(edge, 0)
        for edge in self.visited_graph.in_edges(vertex):
            index -= self._preflow.get(edge, 0)
        return index

    def _new_vertex(self) -> Any:
        vertex = self.vertex_factory()
        if vertex is None:
            raise InvalidOperationError("Vertex factory returned None.")
        if not self.visited_graph.add_vertex(vertex):
            raise InvalidOperationError(
                f"Vertex factory returned '{vertex}', which is already in the graph."
            )
        return vertex

    def _add_balancing_edge(self, source: Any, target: Any, capacity: float) -> Any:
        edge = self.edge_factory(source, target)
        self.visited_graph.add_edge(edge)
        self.capacities[edge] = capacity
        self._preflow[edge] = 0
        return edge

    def _is_terminal(self, vertex: Any) -> bool:
        return vertex in (
            self.source,
            self.sink,
            self.balancing_source,
            self.balancing_sink,
        )

    def balance(self) -> None:
        """Add the balancing terminals and classify every other vertex.

        Raises:
            InvalidOperationError: If the graph is already balanced.
        """
        if self.balanced:
            raise InvalidOperationError("Graph already balanced.")

        # Marked balanced up front so unbalance() can undo a partial run
        self.balanced = True
        try:
            self._balance()
        except Exception:
            self.unbalance()
            raise

        logger.debug(
            "Balanced graph: %d surplus, %d deficient vertices",
            len(self._surplus_vertices),
            len(self._deficient_vertices),
        )

    def _balance(self) -> None:
        self.balancing_source = self._new_vertex()
        self.balancing_source_added.fire(self.balancing_source)

        self.balancing_sink = self._new_vertex()
        self.balancing_sink_added.fire(self.balancing_sink)

        unbounded = FLOW_CONFIG.unbounded_capacity
        self.balancing_source_edge = self._add_balancing_edge(
            self.balancing_source, self.source, unbounded
        )
        self.edge_added.fire(self.balancing_source_edge)

        self.balancing_sink_edge = self._add_balancing_edge(
            self.sink, self.balancing_sink, unbounded
        )
        self.edge_added.fire(self.balancing_sink_edge)

        for vertex in self.visited_graph.vertices:
            if self._is_terminal(vertex):
                continue
            index = self.get_balancing_index(vertex)
            if index == 0:
                continue

            if index < 0:
                edge = self._add_balancing_edge(self.balancing_source, vertex, -index)
                self._surplus_edges.append(edge)
                self._surplus_vertices.append(vertex)
                self.surplus_vertex_added.fire(vertex)
            else:
                edge = self._add_balancing_edge(vertex, self.balancing_sink, index)
                self._deficient_edges.append(edge)
                self._deficient_vertices.append(vertex)
                self.deficient_vertex_added.fire(vertex)
            self.edge_added.fire(edge)

    def unbalance(self) -> None:
        """Remove everything ``balance()`` added.

        Raises:
            InvalidOperationError: If the graph is not balanced.
        """
        if not self.balanced:
            raise InvalidOperationError("Graph is not balanced.")

        balancing_edges = (
            self._surplus_edges
            + self._deficient_edges
            + [self.balancing_source_edge, self.balancing_sink_edge]
        )
        for edge in balancing_edges:
            if edge is None:
                continue
            self.visited_graph.remove_edge(edge)
            self.capacities.pop(edge, None)
            self._preflow.pop(edge, None)

        for vertex in (self.balancing_source, self.balancing_sink):
            if vertex is not None:
                self.visited_graph.remove_vertex(vertex)

        self.balancing_source = None
        self.balancing_sink = None
        self.balancing_source_edge = None
        self.balancing_sink_edge = None
        self._surplus_edges.clear()
        self._surplus_vertices.clear()
        self._deficient_edges.clear()
        self._deficient_vertices.clear()
        self.balanced = False

        logger.debug("Unbalanced graph")

    def __enter__(self) -> "GraphBalancer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if self.balanced:
            self.unbalance()

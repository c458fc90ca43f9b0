"""Super-source / super-sink graph augmentors.

A single-source single-sink flow algorithm can solve multi-source or
multi-sink problems once a synthetic super-source and super-sink are wired to
the real terminals. The augmentors here add those two vertices to the
caller's graph, connect them according to a policy, and remove them again on
``rollback()`` (or when leaving a ``with`` block):

- `AllVerticesAugmentor`: every vertex is both a source and a sink.
- `BipartiteAugmentor`: one side of a bipartite graph feeds the sink side.
- `MultiSourceSinkAugmentor`: vertices without in-edges are sources,
  vertices without out-edges are sinks.

The connector edges come from the caller's edge factory; their capacity is
whatever the caller's capacity function returns for them.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from flowkit.algorithms.base import AlgorithmBase, require_not_none
from flowkit.events import Event
from flowkit.exceptions import InvalidOperationError, VertexNotFoundError
from flowkit.graph.edge import EdgeFactory, VertexFactory
from flowkit.logging import get_logger

logger = get_logger(__name__)


class GraphAugmentorBase(AlgorithmBase[Any]):
    """Adds a super-source and a super-sink, then lets a subclass connect them.

    Attributes:
        vertex_factory: Callable returning a new vertex not yet in the graph.
        edge_factory: Callable ``(source, target) -> edge``.
        super_source_added, super_sink_added: Events fired with the new vertex.
        edge_added: Event fired with each connector edge.
    """

    def __init__(
        self,
        visited_graph: Any,
        vertex_factory: VertexFactory,
        edge_factory: EdgeFactory,
    ) -> None:
        super().__init__(visited_graph)
        self.vertex_factory = require_not_none(vertex_factory, "vertex_factory")
        self.edge_factory = require_not_none(edge_factory, "edge_factory")

        self.super_source: Optional[Any] = None
        self.super_sink: Optional[Any] = None
        self._augmented = False
        self._augmented_edges: List[Any] = []

        self.super_source_added: Event[Any] = Event("super_source_added")
        self.super_sink_added: Event[Any] = Event("super_sink_added")
        self.edge_added: Event[Any] = Event("edge_added")

    @property
    def augmented(self) -> bool:
        return self._augmented

    @property
    def augmented_edges(self) -> Tuple[Any, ...]:
        """Connector edges added by the last ``compute()``."""
        return tuple(self._augmented_edges)

    def _new_vertex(self) -> Any:
        vertex = self.vertex_factory()
        if vertex is None:
            raise InvalidOperationError("Vertex factory returned None.")
        if not self.visited_graph.add_vertex(vertex):
            raise InvalidOperationError(
                f"Vertex factory returned '{vertex}', which is already in the graph."
            )
        return vertex

    def _internal_compute(self) -> None:
        if self._augmented:
            raise InvalidOperationError("Graph already augmented.")

        # Marked augmented up front so rollback() can undo a partial augmentation
        self._augmented = True
        try:
            self.super_source = self._new_vertex()
            self.super_source_added.fire(self.super_source)

            self.super_sink = self._new_vertex()
            self.super_sink_added.fire(self.super_sink)

            self._augment_graph()
        except Exception:
            self.rollback()
            raise

        logger.debug(
            "%s added super source %s, super sink %s and %d edges",
            type(self).__name__,
            self.super_source,
            self.super_sink,
            len(self._augmented_edges),
        )

    def _augment_graph(self) -> None:
        """Connect ``super_source`` and ``super_sink`` to the graph."""
        raise NotImplementedError

    def _add_augmented_edge(self, source: Any, target: Any) -> Any:
        edge = self.edge_factory(source, target)
        self._augmented_edges.append(edge)
        self.visited_graph.add_edge(edge)
        self.edge_added.fire(edge)
        return edge

    def _is_super_vertex(self, vertex: Any) -> bool:
        return vertex == self.super_source or vertex == self.super_sink

    def rollback(self) -> None:
        """Remove the super vertices and their edges; no-op if not augmented."""
        if not self._augmented:
            return

        self._augmented = False
        # Removing the vertices cascades to every connector edge
        for vertex in (self.super_source, self.super_sink):
            if vertex is not None:
                self.visited_graph.remove_vertex(vertex)
        self.super_source = None
        self.super_sink = None
        self._augmented_edges.clear()

        logger.debug("%s rolled back", type(self).__name__)

    def __enter__(self) -> "GraphAugmentorBase":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.rollback()


class AllVerticesAugmentor(GraphAugmentorBase):
    """Connects the super-source to, and the super-sink from, every vertex."""

    def _augment_graph(self) -> None:
        for vertex in self.visited_graph.vertices:
            if self._is_super_vertex(vertex):
                continue
            self._add_augmented_edge(self.super_source, vertex)
            self._add_augmented_edge(vertex, self.super_sink)


class BipartiteAugmentor(GraphAugmentorBase):
    """Turns a bipartite matching problem into a maximum-flow problem.

    The super-source feeds every vertex of ``source_to_vertices`` and every
    vertex of ``vertices_to_sink`` drains into the super-sink.
    """

    def __init__(
        self,
        visited_graph: Any,
        source_to_vertices: Iterable[Any],
        vertices_to_sink: Iterable[Any],
        vertex_factory: VertexFactory,
        edge_factory: EdgeFactory,
    ) -> None:
        super().__init__(visited_graph, vertex_factory, edge_factory)
        self.source_to_vertices = list(
            require_not_none(source_to_vertices, "source_to_vertices")
        )
        self.vertices_to_sink = list(
            require_not_none(vertices_to_sink, "vertices_to_sink")
        )

    def _augment_graph(self) -> None:
        for vertex in self.source_to_vertices:
            if not self.visited_graph.contains_vertex(vertex):
                raise VertexNotFoundError(
                    f"Vertex '{vertex}' to connect from the super source is not in the graph.",
                    vertex,
                )
            self._add_augmented_edge(self.super_source, vertex)

        for vertex in self.vertices_to_sink:
            if not self.visited_graph.contains_vertex(vertex):
                raise VertexNotFoundError(
                    f"Vertex '{vertex}' to connect to the super sink is not in the graph.",
                    vertex,
                )
            self._add_augmented_edge(vertex, self.super_sink)


class MultiSourceSinkAugmentor(GraphAugmentorBase):
    """Connects the super-source to every vertex without in-edges and every
    vertex without out-edges to the super-sink.
    """

    def _augment_graph(self) -> None:
        graph = self.visited_graph
        candidates = [v for v in graph.vertices if not self._is_super_vertex(v)]
        sources = [v for v in candidates if graph.is_in_edges_empty(v)]
        sinks = [v for v in candidates if graph.is_out_edges_empty(v)]

        for vertex in sources:
            self._add_augmented_edge(self.super_source, vertex)
        for vertex in sinks:
            self._add_augmented_edge(vertex, self.super_sink)

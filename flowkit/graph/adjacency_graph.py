"""Mutable directed multigraph keyed by edge objects.

`AdjacencyGraph` stores caller-supplied vertices and edge objects in a
`networkx.MultiDiGraph`, using each edge object as its multigraph key. It
enforces explicit vertex management (adding an edge never creates vertices),
keeps edge identity as defined by the edge type, and raises
`VertexNotFoundError` when a vertex-scoped query names a missing vertex.

The flow algorithms only need the capability set below; any object offering
the same methods can be passed to them instead.
"""

from __future__ import annotations

from typing import Generic, Hashable, Iterable, Iterator, List, Optional, TypeVar

import networkx as nx

from flowkit.events import Event
from flowkit.exceptions import VertexNotFoundError
from flowkit.graph.edge import EdgeLike

V = TypeVar("V", bound=Hashable)
E = TypeVar("E", bound=EdgeLike)


class AdjacencyGraph(Generic[V, E]):
    """A directed graph with explicit vertices and edge objects.

    This class enforces:
      - No automatic creation of missing vertices when adding an edge
        (raises VertexNotFoundError).
      - Adding a vertex or an edge that is already present is a no-op that
        returns False.
      - Removing a vertex removes its incident edges and reports each of them
        through ``edge_removed``.
      - With ``allow_parallel_edges=False`` at most one edge joins an ordered
        pair of vertices.

    Attributes:
        vertex_added, vertex_removed: Events fired with the vertex.
        edge_added, edge_removed: Events fired with the edge.
    """

    def __init__(self, allow_parallel_edges: bool = True) -> None:
        self.allow_parallel_edges = allow_parallel_edges
        self._graph = nx.MultiDiGraph()
        self._edge_count = 0

        self.vertex_added: Event[V] = Event("vertex_added")
        self.vertex_removed: Event[V] = Event("vertex_removed")
        self.edge_added: Event[E] = Event("edge_added")
        self.edge_removed: Event[E] = Event("edge_removed")

    @classmethod
    def from_edges(
        cls, edges: Iterable[E], allow_parallel_edges: bool = True
    ) -> "AdjacencyGraph[V, E]":
        """Build a graph holding ``edges`` and every vertex they touch."""
        graph: AdjacencyGraph[V, E] = cls(allow_parallel_edges=allow_parallel_edges)
        graph.add_vertices_and_edge_range(edges)
        return graph

    #
    # Vertex management
    #
    @property
    def vertices(self) -> List[V]:
        return list(self._graph.nodes)

    @property
    def vertex_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def is_vertices_empty(self) -> bool:
        return self.vertex_count == 0

    def contains_vertex(self, vertex: V) -> bool:
        return vertex is not None and vertex in self._graph

    def __contains__(self, vertex: object) -> bool:
        return self.contains_vertex(vertex)  # type: ignore[arg-type]

    def add_vertex(self, vertex: V) -> bool:
        """Add a vertex.

        Returns:
            bool: True if added, False if the vertex was already present.

        Raises:
            TypeError: If ``vertex`` is None.
        """
        if vertex is None:
            raise TypeError("Vertex must not be None.")
        if vertex in self._graph:
            return False
        self._graph.add_node(vertex)
        self.vertex_added.fire(vertex)
        return True

    def add_vertex_range(self, vertices: Iterable[V]) -> int:
        """Add several vertices and return how many were new."""
        return sum(1 for vertex in vertices if self.add_vertex(vertex))

    def remove_vertex(self, vertex: V) -> bool:
        """Remove a vertex and every edge incident to it.

        Returns:
            bool: True if removed, False if the vertex was not present.
        """
        if not self.contains_vertex(vertex):
            return False
        incident = list(
            dict.fromkeys(
                [k for _, _, k in self._graph.out_edges(vertex, keys=True)]
                + [k for _, _, k in self._graph.in_edges(vertex, keys=True)]
            )
        )
        self._graph.remove_node(vertex)
        self._edge_count -= len(incident)
        for edge in incident:
            self.edge_removed.fire(edge)
        self.vertex_removed.fire(vertex)
        return True

    #
    # Edge management
    #
    @property
    def edges(self) -> List[E]:
        return [key for _, _, key in self._graph.edges(keys=True)]

    @property
    def edge_count(self) -> int:
        return self._edge_count

    @property
    def is_edges_empty(self) -> bool:
        return self._edge_count == 0

    def contains_edge(self, edge: E) -> bool:
        """Return True if this exact edge (by the edge type's equality) is present."""
        if edge is None:
            return False
        return self._graph.has_edge(edge.source, edge.target, key=edge)

    def has_edge(self, source: V, target: V) -> bool:
        """Return True if at least one edge goes from ``source`` to ``target``."""
        return self._graph.has_edge(source, target)

    def try_get_edge(self, source: V, target: V) -> Optional[E]:
        """Return the first edge from ``source`` to ``target``, or None."""
        if not self._graph.has_edge(source, target):
            return None
        return next(iter(self._graph[source][target]))

    def edges_between(self, source: V, target: V) -> List[E]:
        if not self._graph.has_edge(source, target):
            return []
        return list(self._graph[source][target])

    def add_edge(self, edge: E) -> bool:
        """Add a directed edge between two existing vertices.

        Returns:
            bool: True if added; False if the edge is already present, or if
            parallel edges are disallowed and the vertices are already joined.

        Raises:
            TypeError: If ``edge`` is None.
            VertexNotFoundError: If an endpoint is not in the graph.
        """
        if edge is None:
            raise TypeError("Edge must not be None.")
        if edge.source not in self._graph:
            raise VertexNotFoundError(
                f"Source vertex '{edge.source}' does not exist.", edge.source
            )
        if edge.target not in self._graph:
            raise VertexNotFoundError(
                f"Target vertex '{edge.target}' does not exist.", edge.target
            )
        if self.contains_edge(edge):
            return False
        if not self.allow_parallel_edges and self.has_edge(edge.source, edge.target):
            return False

        self._graph.add_edge(edge.source, edge.target, key=edge)
        self._edge_count += 1
        self.edge_added.fire(edge)
        return True

    def add_edge_range(self, edges: Iterable[E]) -> int:
        """Add several edges and return how many were new."""
        return sum(1 for edge in edges if self.add_edge(edge))

    def add_vertices_and_edge(self, edge: E) -> bool:
        """Add an edge, adding its endpoints first when they are missing."""
        if edge is None:
            raise TypeError("Edge must not be None.")
        self.add_vertex(edge.source)
        self.add_vertex(edge.target)
        return self.add_edge(edge)

    def add_vertices_and_edge_range(self, edges: Iterable[E]) -> int:
        return sum(1 for edge in edges if self.add_vertices_and_edge(edge))

    def remove_edge(self, edge: E) -> bool:
        """Remove an edge.

        Returns:
            bool: True if removed, False if the edge was not present.
        """
        if not self.contains_edge(edge):
            return False
        self._graph.remove_edge(edge.source, edge.target, key=edge)
        self._edge_count -= 1
        self.edge_removed.fire(edge)
        return True

    #
    # Incidence queries
    #
    def _require_vertex(self, vertex: V) -> None:
        if vertex is None:
            raise TypeError("Vertex must not be None.")
        if vertex not in self._graph:
            raise VertexNotFoundError(f"Vertex '{vertex}' does not exist.", vertex)

    def out_edges(self, vertex: V) -> List[E]:
        self._require_vertex(vertex)
        return [key for _, _, key in self._graph.out_edges(vertex, keys=True)]

    def in_edges(self, vertex: V) -> List[E]:
        self._require_vertex(vertex)
        return [key for _, _, key in self._graph.in_edges(vertex, keys=True)]

    def out_degree(self, vertex: V) -> int:
        self._require_vertex(vertex)
        return self._graph.out_degree(vertex)

    def in_degree(self, vertex: V) -> int:
        self._require_vertex(vertex)
        return self._graph.in_degree(vertex)

    def is_out_edges_empty(self, vertex: V) -> bool:
        return self.out_degree(vertex) == 0

    def is_in_edges_empty(self, vertex: V) -> bool:
        return self.in_degree(vertex) == 0

    #
    # Convenience methods
    #
    def clear(self) -> None:
        """Remove every vertex and edge, firing the removal events."""
        for vertex in self.vertices:
            self.remove_vertex(vertex)

    def to_networkx(self) -> nx.MultiDiGraph:
        """Return a copy as a plain ``networkx.MultiDiGraph`` keyed by edge objects."""
        return self._graph.copy()

    def __iter__(self) -> Iterator[V]:
        return iter(self.vertices)

    def __len__(self) -> int:
        return self.vertex_count

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(vertices={self.vertex_count}, "
            f"edges={self.edge_count})"
        )

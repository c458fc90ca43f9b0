"""Graph primitives.

This package provides the mutable directed graph `AdjacencyGraph` used by the
flow algorithms, and the edge value types in `edge`.
"""

from flowkit.graph.adjacency_graph import AdjacencyGraph
from flowkit.graph.edge import (
    Edge,
    EdgeFactory,
    EdgeLike,
    EquatableEdge,
    EquatableTaggedEdge,
    TaggedEdge,
    VertexFactory,
)

__all__ = [
    "AdjacencyGraph",
    "Edge",
    "EdgeFactory",
    "EdgeLike",
    "EquatableEdge",
    "EquatableTaggedEdge",
    "TaggedEdge",
    "VertexFactory",
]

"""flowkit: maximum-flow toolkit for mutable directed graphs.

flowkit augments a caller-owned graph with reverse edges, super terminals or
balancing terminals, runs Edmonds-Karp on it and removes every synthetic
vertex and edge again afterwards.

Primary API:
    AdjacencyGraph - Mutable directed multigraph keyed by edge objects
    ReversedEdgeAugmentor - Adds and removes residual (reverse) edges
    EdmondsKarpMaximumFlow - Shortest augmenting path maximum flow
    maximum_flow() - One-call helper with an optional FlowSummary

Example:
    from flowkit import AdjacencyGraph, EquatableTaggedEdge, maximum_flow

    graph = AdjacencyGraph.from_edges([
        EquatableTaggedEdge("A", "B", 3.0),
        EquatableTaggedEdge("B", "C", 2.0),
    ])
    flow = maximum_flow(
        graph,
        lambda e: e.tag,
        "A",
        "C",
        lambda s, t: EquatableTaggedEdge(s, t, 0.0),
    )
"""

from __future__ import annotations

from flowkit import logging
from flowkit._version import __version__
from flowkit.algorithms.base import AlgorithmBase, ComputationState, GraphColor
from flowkit.algorithms.matching import MaximumBipartiteMatching
from flowkit.algorithms.maximum_flow import (
    AllVerticesAugmentor,
    BipartiteAugmentor,
    EdmondsKarpMaximumFlow,
    FlowSummary,
    GraphAugmentorBase,
    GraphBalancer,
    MaximumFlowAlgorithm,
    MultiSourceSinkAugmentor,
    ReversedEdgeAugmentor,
    maximum_flow,
)
from flowkit.config import FLOW_CONFIG, FlowConfig
from flowkit.events import Event, EventHandle
from flowkit.exceptions import (
    FlowkitError,
    InvalidOperationError,
    NegativeCapacityError,
    VertexNotFoundError,
)
from flowkit.graph import (
    AdjacencyGraph,
    Edge,
    EquatableEdge,
    EquatableTaggedEdge,
    TaggedEdge,
)

__all__ = [
    # Version
    "__version__",
    # Graph
    "AdjacencyGraph",
    "Edge",
    "TaggedEdge",
    "EquatableEdge",
    "EquatableTaggedEdge",
    # Algorithms
    "AlgorithmBase",
    "ComputationState",
    "GraphColor",
    "ReversedEdgeAugmentor",
    "GraphAugmentorBase",
    "AllVerticesAugmentor",
    "BipartiteAugmentor",
    "MultiSourceSinkAugmentor",
    "MaximumFlowAlgorithm",
    "EdmondsKarpMaximumFlow",
    "GraphBalancer",
    "MaximumBipartiteMatching",
    "maximum_flow",
    "FlowSummary",
    # Events
    "Event",
    "EventHandle",
    # Errors
    "FlowkitError",
    "InvalidOperationError",
    "NegativeCapacityError",
    "VertexNotFoundError",
    # Configuration
    "FlowConfig",
    "FLOW_CONFIG",
    # Utilities
    "logging",
]

"""Maximum-flow engine.

Modules:
    reversed_edges: `ReversedEdgeAugmentor`, residual edge pairing.
    augmentors: super-source / super-sink augmentors.
    edmonds_karp: `EdmondsKarpMaximumFlow`.
    balancer: `GraphBalancer` for flows with lower bounds.
    summary: `maximum_flow()` helper and `FlowSummary`.
"""

from flowkit.algorithms.maximum_flow.augmentors import (
    AllVerticesAugmentor,
    BipartiteAugmentor,
    GraphAugmentorBase,
    MultiSourceSinkAugmentor,
)
from flowkit.algorithms.maximum_flow.balancer import GraphBalancer
from flowkit.algorithms.maximum_flow.edmonds_karp import (
    EdmondsKarpMaximumFlow,
    MaximumFlowAlgorithm,
)
from flowkit.algorithms.maximum_flow.reversed_edges import ReversedEdgeAugmentor
from flowkit.algorithms.maximum_flow.summary import FlowSummary, maximum_flow

__all__ = [
    "AllVerticesAugmentor",
    "BipartiteAugmentor",
    "EdmondsKarpMaximumFlow",
    "FlowSummary",
    "GraphAugmentorBase",
    "GraphBalancer",
    "MaximumFlowAlgorithm",
    "MultiSourceSinkAugmentor",
    "ReversedEdgeAugmentor",
    "maximum_flow",
]

"""Maximum bipartite matching as a unit-capacity maximum flow."""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple

from flowkit.algorithms.base import AlgorithmBase, require_not_none
from flowkit.algorithms.maximum_flow.augmentors import BipartiteAugmentor
from flowkit.algorithms.maximum_flow.edmonds_karp import EdmondsKarpMaximumFlow
from flowkit.algorithms.maximum_flow.reversed_edges import ReversedEdgeAugmentor
from flowkit.config import FLOW_CONFIG
from flowkit.graph.edge import EdgeFactory, VertexFactory
from flowkit.logging import get_logger

logger = get_logger(__name__)


class MaximumBipartiteMatching(AlgorithmBase[Any]):
    """Finds a maximum matching between two vertex sets.

    Every edge gets capacity 1. The super vertices and the reverse edges are
    removed again before ``compute()`` returns, whether it succeeds or not.

    Attributes:
        matched_edges: Original edges used by the matching.
    """

    def __init__(
        self,
        visited_graph: Any,
        source_to_vertices: Iterable[Any],
        vertices_to_sink: Iterable[Any],
        vertex_factory: VertexFactory,
        edge_factory: EdgeFactory,
    ) -> None:
        super().__init__(visited_graph)
        self.source_to_vertices = list(
            require_not_none(source_to_vertices, "source_to_vertices")
        )
        self.vertices_to_sink = list(
            require_not_none(vertices_to_sink, "vertices_to_sink")
        )
        self.vertex_factory = require_not_none(vertex_factory, "vertex_factory")
        self.edge_factory = require_not_none(edge_factory, "edge_factory")
        self._matched_edges: List[Any] = []

    @property
    def matched_edges(self) -> Tuple[Any, ...]:
        return tuple(self._matched_edges)

    def _initialize(self) -> None:
        self._matched_edges.clear()

    def _internal_compute(self) -> None:
        graph = self.visited_graph
        augmentor = BipartiteAugmentor(
            graph,
            self.source_to_vertices,
            self.vertices_to_sink,
            self.vertex_factory,
            self.edge_factory,
        )
        with augmentor, ReversedEdgeAugmentor(graph, self.edge_factory) as reverser:
            augmentor.compute()
            reverser.add_reversed_edges()

            synthetic = set(reverser.augmented_edges)
            flow = EdmondsKarpMaximumFlow(
                graph,
                lambda edge: 0.0 if edge in synthetic else 1.0,
                self.edge_factory,
                reverser,
            )
            flow.compute(augmentor.super_source, augmentor.super_sink)

            for edge in graph.edges:
                if edge in synthetic:
                    continue
                if edge.source == augmentor.super_source:
                    continue
                if edge.target == augmentor.super_sink:
                    continue
                if FLOW_CONFIG.is_saturated(flow.residual_capacities[edge]):
                    self._matched_edges.append(edge)

        logger.debug("Matched %d edges", len(self._matched_edges))

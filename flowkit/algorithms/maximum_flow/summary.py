"""One-call maximum flow with an optional result summary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Set, Tuple, Union, overload

from flowkit.algorithms.base import GraphColor
from flowkit.algorithms.maximum_flow.edmonds_karp import EdmondsKarpMaximumFlow
from flowkit.algorithms.maximum_flow.reversed_edges import ReversedEdgeAugmentor
from flowkit.graph.edge import CapacityFunc, EdgeFactory


@dataclass(frozen=True)
class FlowSummary:
    """Summary of max-flow computation results.

    Reverse edges created for the computation are left out of every field.

    Attributes:
        total_flow: Maximum flow value achieved.
        edge_flow: Net flow per edge.
        residual_cap: Remaining capacity per edge after placement.
        reachable: Vertices reachable from the source in the residual graph.
        min_cut: Edges with positive capacity crossing from the reachable
            side to the rest of the graph.
    """

    total_flow: float
    edge_flow: Dict[Any, float]
    residual_cap: Dict[Any, float]
    reachable: Set[Any]
    min_cut: List[Any]


@overload
def maximum_flow(
    graph: Any,
    capacities: CapacityFunc,
    source: Any,
    sink: Any,
    edge_factory: EdgeFactory,
    reverser: Optional[ReversedEdgeAugmentor] = None,
    *,
    return_summary: Literal[False] = False,
) -> float: ...


@overload
def maximum_flow(
    graph: Any,
    capacities: CapacityFunc,
    source: Any,
    sink: Any,
    edge_factory: EdgeFactory,
    reverser: Optional[ReversedEdgeAugmentor] = None,
    *,
    return_summary: Literal[True],
) -> Tuple[float, FlowSummary]: ...


def maximum_flow(
    graph: Any,
    capacities: CapacityFunc,
    source: Any,
    sink: Any,
    edge_factory: EdgeFactory,
    reverser: Optional[ReversedEdgeAugmentor] = None,
    *,
    return_summary: bool = False,
) -> Union[float, Tuple[float, FlowSummary]]:
    """Compute the maximum flow from ``source`` to ``sink``.

    Without a ``reverser`` the reverse edges are added before the
    computation and removed afterwards, so ``graph`` is returned to its
    original shape. A caller-supplied reverser must already be augmented and
    is left as it is.

    Args:
        graph: The graph to analyze.
        capacities: Callable returning the capacity of an edge.
        source: The source vertex.
        sink: The sink vertex.
        edge_factory: Callable ``(source, target) -> edge`` used for reverse edges.
        reverser: Optional augmented ``ReversedEdgeAugmentor`` for ``graph``.
        return_summary: If True, also return a ``FlowSummary``.

    Returns:
        float: The maximum flow value, or ``(flow, summary)`` when
        ``return_summary`` is True.

    Example:
        >>> flow, summary = maximum_flow(
        ...     graph, lambda e: e.tag, "A", "C", factory, return_summary=True
        ... )
        >>> summary.min_cut
        [EquatableTaggedEdge(source='B', target='C', tag=2.0)]
    """
    if reverser is not None:
        return _run(graph, capacities, source, sink, edge_factory, reverser, return_summary)

    with ReversedEdgeAugmentor(graph, edge_factory) as own_reverser:
        own_reverser.add_reversed_edges()
        return _run(
            graph, capacities, source, sink, edge_factory, own_reverser, return_summary
        )


def _run(
    graph: Any,
    capacities: CapacityFunc,
    source: Any,
    sink: Any,
    edge_factory: EdgeFactory,
    reverser: ReversedEdgeAugmentor,
    return_summary: bool,
) -> Union[float, Tuple[float, FlowSummary]]:
    algorithm = EdmondsKarpMaximumFlow(graph, capacities, edge_factory, reverser)
    algorithm.compute(source, sink)

    if not return_summary:
        return algorithm.max_flow
    return algorithm.max_flow, _build_summary(algorithm, reverser)


def _build_summary(
    algorithm: EdmondsKarpMaximumFlow, reverser: ReversedEdgeAugmentor
) -> FlowSummary:
    synthetic = set(reverser.augmented_edges)
    edge_flows = algorithm.edge_flows
    residual = algorithm.residual_capacities

    reachable = {
        vertex
        for vertex, color in algorithm.vertex_colors.items()
        if color == GraphColor.BLACK
    }

    edge_flow: Dict[Any, float] = {}
    residual_cap: Dict[Any, float] = {}
    min_cut: List[Any] = []
    for edge, flow in edge_flows.items():
        if edge in synthetic:
            continue
        edge_flow[edge] = flow
        residual_cap[edge] = residual[edge]
        if (
            edge.source in reachable
            and edge.target not in reachable
            and algorithm.capacities(edge) > 0
        ):
            min_cut.append(edge)

    return FlowSummary(
        total_flow=algorithm.max_flow,
        edge_flow=edge_flow,
        residual_cap=residual_cap,
        reachable=reachable,
        min_cut=min_cut,
    )

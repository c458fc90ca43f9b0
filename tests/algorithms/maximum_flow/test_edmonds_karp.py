import pytest
from pytest import approx

from flowkit.algorithms.base import ComputationState, GraphColor
from flowkit.algorithms.maximum_flow.augmentors import (
    AllVerticesAugmentor,
    BipartiteAugmentor,
)
from flowkit.algorithms.maximum_flow.edmonds_karp import EdmondsKarpMaximumFlow
from flowkit.algorithms.maximum_flow.reversed_edges import ReversedEdgeAugmentor
from flowkit.exceptions import (
    InvalidOperationError,
    NegativeCapacityError,
    VertexNotFoundError,
)
from flowkit.graph import AdjacencyGraph, Edge, EquatableTaggedEdge
from tests.algorithms.sample_graphs import (
    capacity,
    identity_edge_factory,
    make_vertex_factory,
    reversed_edge_factory,
    tagged_graph,
)


def _augmented(graph, edge_factory=reversed_edge_factory):
    reverser = ReversedEdgeAugmentor(graph, edge_factory)
    reverser.add_reversed_edges()
    return reverser


def _run(graph, source, sink, edge_factory=reversed_edge_factory):
    original_edges = graph.edges
    reverser = _augmented(graph, edge_factory)
    algo = EdmondsKarpMaximumFlow(graph, capacity, edge_factory, reverser)
    algo.compute(source, sink)
    return algo, reverser, original_edges


class TestConstruction:
    def test_none_arguments(self, simple_flow):
        reverser = ReversedEdgeAugmentor(simple_flow, reversed_edge_factory)
        with pytest.raises(TypeError):
            EdmondsKarpMaximumFlow(None, capacity, reversed_edge_factory, reverser)
        with pytest.raises(TypeError):
            EdmondsKarpMaximumFlow(simple_flow, None, reversed_edge_factory, reverser)
        with pytest.raises(TypeError):
            EdmondsKarpMaximumFlow(simple_flow, capacity, None, reverser)
        with pytest.raises(TypeError):
            EdmondsKarpMaximumFlow(simple_flow, capacity, reversed_edge_factory, None)

    def test_reverser_for_another_graph(self, simple_flow, two_cycle):
        reverser = ReversedEdgeAugmentor(two_cycle, reversed_edge_factory)
        with pytest.raises(ValueError, match="same graph"):
            EdmondsKarpMaximumFlow(simple_flow, capacity, reversed_edge_factory, reverser)

    def test_initial_state(self, simple_flow):
        reverser = ReversedEdgeAugmentor(simple_flow, reversed_edge_factory)
        algo = EdmondsKarpMaximumFlow(
            simple_flow, capacity, reversed_edge_factory, reverser
        )
        assert algo.state == ComputationState.NOT_RUNNING
        assert algo.source is None
        assert algo.sink is None
        assert algo.max_flow == 0
        assert dict(algo.residual_capacities) == {}
        assert algo.edge_flows == {}


class TestComputeErrors:
    def test_not_augmented(self, simple_flow):
        reverser = ReversedEdgeAugmentor(simple_flow, reversed_edge_factory)
        algo = EdmondsKarpMaximumFlow(
            simple_flow, capacity, reversed_edge_factory, reverser
        )
        with pytest.raises(InvalidOperationError, match="not been augmented"):
            algo.compute("A", "G")
        assert algo.state == ComputationState.ABORTED

    def test_missing_terminals(self, simple_flow):
        algo = EdmondsKarpMaximumFlow(
            simple_flow, capacity, reversed_edge_factory, _augmented(simple_flow)
        )
        with pytest.raises(InvalidOperationError, match="Source is not specified"):
            algo.compute()
        algo.source = "A"
        with pytest.raises(InvalidOperationError, match="Sink is not specified"):
            algo.compute()

    def test_none_terminal_argument(self, simple_flow):
        algo = EdmondsKarpMaximumFlow(
            simple_flow, capacity, reversed_edge_factory, _augmented(simple_flow)
        )
        with pytest.raises(TypeError):
            algo.compute("A", None)
        with pytest.raises(TypeError):
            algo.compute(None, "G")

    def test_absent_terminals(self, simple_flow):
        algo = EdmondsKarpMaximumFlow(
            simple_flow, capacity, reversed_edge_factory, _augmented(simple_flow)
        )
        with pytest.raises(VertexNotFoundError) as exc:
            algo.compute("Z", "G")
        assert exc.value.vertex == "Z"
        with pytest.raises(VertexNotFoundError) as exc:
            algo.compute("A", "Z")
        assert exc.value.vertex == "Z"

    def test_source_equals_sink(self, simple_flow):
        algo = EdmondsKarpMaximumFlow(
            simple_flow, capacity, reversed_edge_factory, _augmented(simple_flow)
        )
        with pytest.raises(ValueError, match="different"):
            algo.compute("A", "A")

    def test_negative_capacity(self, negative_capacity):
        reverser = _augmented(negative_capacity)
        algo = EdmondsKarpMaximumFlow(
            negative_capacity, capacity, reversed_edge_factory, reverser
        )
        aborted = []
        algo.aborted.subscribe(aborted.append)

        with pytest.raises(NegativeCapacityError) as exc:
            algo.compute(1, 4)

        assert exc.value.capacity == -1.0
        assert exc.value.edge == EquatableTaggedEdge(2, 3)
        assert algo.max_flow == 0
        assert algo.state == ComputationState.ABORTED
        assert aborted == [algo]


class TestComputeScenarios:
    def test_simple_flow(self, simple_flow):
        algo, _, _ = _run(simple_flow, "A", "G")
        assert algo.max_flow == approx(5)
        assert algo.state == ComputationState.FINISHED
        assert algo.source == "A"
        assert algo.sink == "G"

    def test_simple_flow_reversed_terminals(self, simple_flow):
        # Nothing leaves G
        algo, _, _ = _run(simple_flow, "G", "A")
        assert algo.max_flow == 0

    def test_unreachable_sink(self, unreachable_sink):
        algo, _, _ = _run(unreachable_sink, "A", "G")
        assert algo.max_flow == 0
        for vertex in "ABCDEF":
            assert algo.get_vertex_color(vertex) == GraphColor.BLACK
        assert algo.get_vertex_color("G") == GraphColor.WHITE

    def test_vertex_colors_after_single_edge(self):
        graph = tagged_graph([(1, 2, 1.0)])
        graph.add_vertex(3)
        algo, _, _ = _run(graph, 1, 2)

        assert algo.max_flow == 1
        assert algo.get_vertex_color(1) == GraphColor.BLACK
        assert algo.get_vertex_color(2) == GraphColor.WHITE
        assert algo.get_vertex_color(3) == GraphColor.WHITE

    def test_get_vertex_color_absent_vertex(self, simple_flow):
        algo, _, _ = _run(simple_flow, "A", "G")
        with pytest.raises(VertexNotFoundError):
            algo.get_vertex_color("Z")

    def test_get_vertex_color_before_compute(self, simple_flow):
        algo = EdmondsKarpMaximumFlow(
            simple_flow, capacity, reversed_edge_factory, _augmented(simple_flow)
        )
        assert algo.get_vertex_color("A") == GraphColor.WHITE

    def test_existing_opposite_edges(self, two_cycle):
        algo, reverser, _ = _run(two_cycle, "A", "C")
        assert reverser.augmented_edges == ()
        assert algo.max_flow == approx(2)

    def test_zero_capacity_edge(self):
        graph = tagged_graph([("s", "a", 0.0), ("a", "t", 5.0)])
        algo, _, _ = _run(graph, "s", "t")
        assert algo.max_flow == 0

    def test_parallel_identity_edges(self):
        graph = AdjacencyGraph()
        graph.add_vertex_range(["s", "t"])
        caps = {}
        for value in (1.0, 2.0, 4.0):
            edge = Edge("s", "t")
            graph.add_edge(edge)
            caps[edge] = value

        reverser = ReversedEdgeAugmentor(graph, lambda s, t: Edge(s, t))
        reverser.add_reversed_edges()
        algo = EdmondsKarpMaximumFlow(
            graph, lambda e: caps.get(e, 0.0), lambda s, t: Edge(s, t), reverser
        )
        algo.compute("s", "t")
        assert algo.max_flow == approx(7)

    def test_recompute_restarts_from_capacities(self, simple_flow):
        algo, _, _ = _run(simple_flow, "A", "G")
        algo.compute()
        assert algo.max_flow == approx(5)
        algo.compute("B", "G")
        # B->C is the only edge leaving B
        assert algo.max_flow == approx(4)

    def test_augmenting_paths_counted(self):
        graph = tagged_graph(
            [("s", "a", 1.0), ("a", "t", 1.0), ("s", "b", 2.0), ("b", "t", 2.0)]
        )
        algo, _, _ = _run(graph, "s", "t")
        assert algo.max_flow == approx(3)
        assert algo.augmenting_paths == 2

    def test_predecessors_form_path_tree(self, simple_flow):
        algo, _, _ = _run(simple_flow, "A", "G")
        for vertex, edge in algo.predecessors.items():
            assert edge.target == vertex
            assert algo.get_vertex_color(edge.source) == GraphColor.BLACK

    def test_result_views_are_read_only(self, simple_flow):
        algo, _, _ = _run(simple_flow, "A", "G")
        with pytest.raises(TypeError):
            algo.residual_capacities[EquatableTaggedEdge("A", "D")] = 0
        with pytest.raises(TypeError):
            algo.vertex_colors["A"] = GraphColor.WHITE


class TestFlowProperties:
    @pytest.mark.parametrize(
        "fixture, source, sink, edge_factory",
        [
            ("simple_flow", "A", "G", reversed_edge_factory),
            ("simple_flow", "B", "F", reversed_edge_factory),
            ("unreachable_sink", "A", "G", reversed_edge_factory),
            ("two_cycle", "A", "C", reversed_edge_factory),
            ("parallel_paths", "s", "t", identity_edge_factory),
        ],
    )
    def test_capacity_and_residual(self, request, fixture, source, sink, edge_factory):
        graph = request.getfixturevalue(fixture)
        algo, reverser, _ = _run(graph, source, sink, edge_factory)
        flows = algo.edge_flows
        for edge, residual in algo.residual_capacities.items():
            reversed_edge = reverser.reversed_edge(edge)
            assert reverser.reversed_edge(reversed_edge) is edge
            assert residual + flows[edge] == approx(capacity(edge))
            assert 0 <= residual <= capacity(edge) + capacity(reversed_edge) + 1e-9

    def test_parallel_edges_keep_their_own_flow(self, parallel_paths):
        algo, reverser, original_edges = _run(
            parallel_paths, "s", "t", identity_edge_factory
        )
        assert algo.max_flow == approx(2)

        flows = algo.edge_flows
        for edge in original_edges:
            assert 0 <= algo.residual_capacities[edge] <= capacity(edge)
            assert 0 <= flows[edge] <= capacity(edge)
        for edge in reverser.augmented_edges:
            assert flows[edge] == approx(-flows[reverser.reversed_edge(edge)])

    @pytest.mark.parametrize("source, sink", [("A", "G"), ("B", "F"), ("C", "G")])
    def test_flow_conservation(self, simple_flow, source, sink):
        algo, reverser, original_edges = _run(simple_flow, source, sink)
        flows = algo.edge_flows

        balance = {vertex: 0.0 for vertex in simple_flow.vertices}
        for edge in original_edges:
            flow = flows[edge]
            assert -1e-9 <= flow <= capacity(edge) + 1e-9
            balance[edge.source] -= flow
            balance[edge.target] += flow

        for vertex, net in balance.items():
            if vertex == source:
                assert net == approx(-algo.max_flow)
            elif vertex == sink:
                assert net == approx(algo.max_flow)
            else:
                assert net == approx(0)

    def test_synthetic_reverse_flow_is_negated(self, simple_flow):
        algo, reverser, original_edges = _run(simple_flow, "A", "G")
        flows = algo.edge_flows
        for edge in original_edges:
            assert flows[reverser.reversed_edge(edge)] == approx(-flows[edge])

    @pytest.mark.parametrize("source, sink", [("A", "G"), ("B", "F"), ("D", "G")])
    def test_max_flow_equals_min_cut(self, simple_flow, source, sink):
        algo, _, original_edges = _run(simple_flow, source, sink)

        def side(vertex):
            return algo.get_vertex_color(vertex)

        assert side(source) == GraphColor.BLACK
        assert side(sink) == GraphColor.WHITE
        cut = sum(
            capacity(edge)
            for edge in original_edges
            if side(edge.source) == GraphColor.BLACK
            and side(edge.target) == GraphColor.WHITE
        )
        assert cut == approx(algo.max_flow)

    def test_no_gray_vertex_after_final_search(self, simple_flow):
        algo, _, _ = _run(simple_flow, "A", "G")
        assert GraphColor.GRAY not in set(algo.vertex_colors.values())


class TestWithAugmentors:
    def test_all_vertices_augmentor(self, simple_flow):
        with AllVerticesAugmentor(
            simple_flow, make_vertex_factory(100), reversed_edge_factory
        ) as augmentor:
            augmentor.compute()
            caps = {edge: 1.0 for edge in augmentor.augmented_edges}

            with ReversedEdgeAugmentor(simple_flow, reversed_edge_factory) as reverser:
                reverser.add_reversed_edges()
                algo = EdmondsKarpMaximumFlow(
                    simple_flow,
                    lambda e: caps.get(e, capacity(e)),
                    reversed_edge_factory,
                    reverser,
                )
                algo.compute(augmentor.super_source, augmentor.super_sink)
                # Every vertex can route one unit straight to the super sink
                assert algo.max_flow == approx(7)

        assert simple_flow.vertex_count == 7
        assert simple_flow.edge_count == 11

    def test_bipartite_augmentor(self, bipartite_chain):
        with BipartiteAugmentor(
            bipartite_chain,
            ["L1", "L2", "L3"],
            ["R1", "R2"],
            make_vertex_factory(100),
            reversed_edge_factory,
        ) as augmentor, ReversedEdgeAugmentor(
            bipartite_chain, reversed_edge_factory
        ) as reverser:
            augmentor.compute()
            reverser.add_reversed_edges()
            synthetic = set(reverser.augmented_edges)
            algo = EdmondsKarpMaximumFlow(
                bipartite_chain,
                lambda e: 0.0 if e in synthetic else 1.0,
                reversed_edge_factory,
                reverser,
            )
            algo.compute(augmentor.super_source, augmentor.super_sink)
            assert algo.max_flow == approx(2)

        assert bipartite_chain.vertex_count == 5
        assert bipartite_chain.edge_count == 4

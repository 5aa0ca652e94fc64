import math

import pytest

from bellman_ford_sim.graph import INF, GraphModel, bellman_ford
from bellman_ford_sim.phase import Phase
from bellman_ford_sim.sample import SAMPLE_GRAPH
from bellman_ford_sim.stepper import BellmanFordStepper, steps_to_cycle_check


NEG_CYCLE = GraphModel.from_triples(["S", "X", "Y"], [("S", "X", 1), ("X", "Y", -2), ("Y", "X", 1)])
UNREACHABLE_CYCLE = GraphModel.from_triples(["S", "T", "U", "V"], [("S", "T", 3), ("U", "V", -1), ("V", "U", -1)])
NO_EDGES = GraphModel.from_triples(["A", "B"], [])
SINGLE_SELF_LOOP = GraphModel.from_triples(["A"], [("A", "A", -1)])
DUPLICATES = GraphModel.from_triples(["A", "B"], [("A", "B", 5), ("A", "B", 3)])

GRAPHS = [SAMPLE_GRAPH, NEG_CYCLE, UNREACHABLE_CYCLE, NO_EDGES, SINGLE_SELF_LOOP, DUPLICATES]


@pytest.mark.parametrize("graph", GRAPHS)
def test_initialize_sets_source_zero_others_infinite(graph):
    snap = BellmanFordStepper(graph).initialize()
    assert snap.phase is Phase.INITIALIZATION
    assert snap.iteration == 0
    assert snap.edge_cursor == 0
    assert snap.active_edge is None
    assert not snap.has_negative_cycle
    assert snap.distances[graph.source] == 0
    assert all(math.isinf(d) for n, d in snap.distances.items() if n != graph.source)


@pytest.mark.parametrize("graph", GRAPHS)
def test_distances_never_increase(graph):
    stepper = BellmanFordStepper(graph)
    prev = stepper.initialize()
    for snap in stepper.run():
        if snap.is_complete:
            break
        for node, d in snap.distances.items():
            assert d <= prev.distances[node]
        prev = snap


@pytest.mark.parametrize("graph", GRAPHS)
def test_step_count_to_cycle_check(graph):
    stepper = BellmanFordStepper(graph)
    stepper.initialize()
    n = steps_to_cycle_check(graph)
    for i in range(n):
        assert stepper.phase is not Phase.CYCLE_CHECK, f"reached cycle-check early at step {i}"
        stepper.step()
    assert stepper.phase is Phase.CYCLE_CHECK
    assert stepper.step().phase is Phase.COMPLETE


def test_sample_step_count_is_33_plus_one():
    assert steps_to_cycle_check(SAMPLE_GRAPH) == 1 + 4 * 8
    snaps = BellmanFordStepper(SAMPLE_GRAPH).run_to_completion()
    assert len(snaps) == 34
    assert snaps[-1].step_count == 34


@pytest.mark.parametrize("graph", GRAPHS)
def test_step_after_complete_is_noop(graph):
    stepper = BellmanFordStepper(graph)
    final = stepper.run_to_completion()[-1]
    assert final.is_complete
    for _ in range(3):
        assert stepper.step() == final


def test_sample_runs_to_no_negative_cycle():
    final = BellmanFordStepper(SAMPLE_GRAPH).run_to_completion()[-1]
    assert final.has_negative_cycle is False
    assert final.distances == {"A": 0, "B": 4, "C": 2, "D": 9, "E": 12}
    assert final.iteration == 4
    assert final.active_edge is None


def test_sample_first_pass_trace():
    stepper = BellmanFordStepper(SAMPLE_GRAPH)
    prev = stepper.initialize()
    first = stepper.step()
    assert first.phase is Phase.RELAXATION
    assert first.distances == prev.distances
    assert first.active_edge is None

    expected = [
        (("A", "B"), ("B",)),
        (("A", "C"), ("C",)),
        (("B", "C"), ()),
        (("B", "D"), ("D",)),
        (("C", "D"), ()),
        (("C", "E"), ("E",)),
        (("D", "B"), ()),
        (("E", "D"), ()),
    ]
    prev = first
    for i, (edge, changed) in enumerate(expected):
        snap = stepper.step()
        assert snap.active_edge == edge
        assert snap.active_edge_index == i
        assert snap.changed_nodes(prev) == changed
        prev = snap
    assert prev.iteration == 1
    assert prev.edge_cursor == 0
    assert prev.phase is Phase.RELAXATION


def test_negative_cycle_detected():
    final = BellmanFordStepper(NEG_CYCLE).run_to_completion()[-1]
    assert final.has_negative_cycle is True
    assert final.distances == {"S": 0, "X": -1, "Y": -2}


def test_unreachable_cycle_not_reported():
    final = BellmanFordStepper(UNREACHABLE_CYCLE).run_to_completion()[-1]
    assert final.has_negative_cycle is False
    assert final.distances["T"] == 3
    assert final.distances["U"] == INF


def test_single_node_self_loop_goes_straight_to_scan():
    stepper = BellmanFordStepper(SINGLE_SELF_LOOP)
    assert stepper.step().phase is Phase.CYCLE_CHECK
    final = stepper.step()
    assert final.is_complete
    assert final.has_negative_cycle is True


def test_no_edges_completes_without_relaxation():
    snaps = BellmanFordStepper(NO_EDGES).run_to_completion()
    assert [s.phase for s in snaps] == [Phase.CYCLE_CHECK, Phase.COMPLETE]
    assert snaps[-1].distances == {"A": 0, "B": INF}


def test_duplicate_edges_relaxed_independently():
    stepper = BellmanFordStepper(DUPLICATES)
    stepper.step()
    assert stepper.step().distances["B"] == 5
    assert stepper.step().distances["B"] == 3


def test_ties_do_not_update():
    g = GraphModel.from_triples(["A", "B", "C"], [("A", "B", 2), ("A", "C", 1), ("C", "B", 1)])
    stepper = BellmanFordStepper(g)
    stepper.step()
    stepper.step()
    prev = stepper.step()
    snap = stepper.step()
    assert snap.active_edge == ("C", "B")
    assert snap.changed_nodes(prev) == ()
    assert snap.distances["B"] == 2


@pytest.mark.parametrize("graph", GRAPHS)
def test_matches_reference_solver(graph):
    final = BellmanFordStepper(graph).run_to_completion()[-1]
    dist, _, has_neg = bellman_ford(graph)
    assert final.has_negative_cycle == has_neg
    if not has_neg:
        assert final.distances == dist


@pytest.mark.parametrize("steps", [0, 1, 5, 33, 34, 50])
def test_reset_restores_initial_snapshot(steps):
    stepper = BellmanFordStepper(SAMPLE_GRAPH)
    initial = stepper.initialize()
    for _ in range(steps):
        stepper.step()
    assert stepper.reset() == initial
    assert stepper.initialize() == initial


def test_snapshot_distances_are_a_copy():
    stepper = BellmanFordStepper(SAMPLE_GRAPH)
    snap = stepper.initialize()
    snap.distances["B"] = -100
    assert stepper.snapshot().distances["B"] == INF


def test_initialize_with_new_graph_replaces_graph():
    stepper = BellmanFordStepper(SAMPLE_GRAPH)
    stepper.step()
    snap = stepper.initialize(NEG_CYCLE)
    assert stepper.graph is NEG_CYCLE
    assert set(snap.distances) == {"S", "X", "Y"}
    assert snap.iteration_bound == 2


def test_run_honours_max_steps():
    stepper = BellmanFordStepper(SAMPLE_GRAPH)
    assert len(list(stepper.run(max_steps=5))) == 5
    assert stepper.phase is Phase.RELAXATION


def test_to_dict_is_json_safe():
    data = BellmanFordStepper(SAMPLE_GRAPH).step().to_dict()
    assert data["phase"] == "relaxation"
    assert data["distances"] == {"A": 0, "B": None, "C": None, "D": None, "E": None}
    assert data["active_edge"] is None
    assert data["iteration_bound"] == 4


@pytest.mark.parametrize("graph", GRAPHS)
def test_relaxation_keeps_iteration_and_cursor_in_bounds(graph):
    stepper = BellmanFordStepper(graph)
    stepper.initialize()
    for snap in stepper.run():
        if snap.phase is Phase.RELAXATION:
            assert 0 <= snap.iteration < graph.iteration_bound
            assert 0 <= snap.edge_cursor < len(graph.edges)
        else:
            assert snap.edge_cursor == 0

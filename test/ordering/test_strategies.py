"""
Tests for the node ordering algorithms behind the pipeline codes.

Every strategy must return a permutation of the graph's nodes without
touching the graph. On DAGs the topological family must respect every edge.
"""

import pytest

from vgorder.algorithms import (
    breadth_first_topological_order,
    cycle_breaking_sort,
    dagify,
    eades_algorithm,
    lazy_topological_order,
    partition_order,
    random_order,
    split_strands,
    topological_order,
    two_way_topological_order,
)
from vgorder.algorithms.partition_order import fiedler_ordering, weighted_adjacency
from vgorder.exceptions import OrderingStrategyError
from vgorder.graph import Handle
from vgorder.ordering import DEFAULT_REGISTRY, OrderingParameters
from vgorder.parser.gfa_parser import to_gfa

DAG_CODES = ["s", "l", "w", "b", "e", "c"]


def _ids(ordering):
    return [h.node_id for h in ordering]


def _respects_edges(graph, ordering):
    position = {h.node_id: i for i, h in enumerate(ordering)}
    return all(
        position[source] < position[target]
        for source, target in graph.directed_node_edges()
        if source != target
    )


@pytest.mark.parametrize("code", DEFAULT_REGISTRY.codes())
@pytest.mark.parametrize("fixture", ["small_dag", "shuffled_dag", "inversion_graph"])
def test_every_strategy_returns_a_permutation(request, code, fixture):
    graph = request.getfixturevalue(fixture)
    text = to_gfa(graph)

    ordering = DEFAULT_REGISTRY.resolve(code).compute_ordering(graph, OrderingParameters(seed=3))

    assert sorted(_ids(ordering)) == sorted(graph.node_ids())
    assert to_gfa(graph) == text


@pytest.mark.parametrize("code", DAG_CODES)
@pytest.mark.parametrize("fixture", ["small_dag", "shuffled_dag"])
def test_dag_strategies_respect_every_edge(request, code, fixture):
    graph = request.getfixturevalue(fixture)
    ordering = DEFAULT_REGISTRY.resolve(code).compute_ordering(graph)
    assert _respects_edges(graph, ordering), _ids(ordering)


def test_topological_order_drains_lowest_rank_first(small_dag, shuffled_dag):
    assert _ids(topological_order(small_dag)) == [1, 2, 3, 4]
    assert _ids(topological_order(shuffled_dag)) == [5, 3, 4, 2, 1]


@pytest.mark.parametrize("code", ["n", "d"])
def test_storage_seeded_strategies_respect_edges_of_sorted_dag(small_dag, code):
    ordering = DEFAULT_REGISTRY.resolve(code).compute_ordering(small_dag)
    assert _respects_edges(small_dag, ordering)


def test_topological_order_without_seeds_is_still_complete(shuffled_dag):
    ordering = topological_order(shuffled_dag, use_heads=False)
    assert sorted(_ids(ordering)) == [1, 2, 3, 4, 5]


def test_topological_order_follows_inverted_nodes(inversion_graph):
    assert topological_order(inversion_graph) == [Handle(1), Handle(2, True), Handle(3)]


def test_lazy_order_is_node_level_kahn(shuffled_dag):
    assert _ids(lazy_topological_order(shuffled_dag)) == [5, 3, 4, 2, 1]


def test_lazy_order_rejects_cycles(cyclic_graph):
    with pytest.raises(OrderingStrategyError, match="requires a DAG"):
        lazy_topological_order(cyclic_graph)


def test_breadth_first_visits_level_by_level(small_dag, shuffled_dag):
    assert _ids(breadth_first_topological_order(small_dag)) == [1, 2, 4, 3]
    assert _ids(breadth_first_topological_order(shuffled_dag)) == [5, 3, 4, 2, 1]


def test_two_way_order_on_chain(small_dag):
    assert _ids(two_way_topological_order(small_dag)) == [1, 2, 3, 4]


def test_eades_moves_sinks_to_the_back(small_dag, shuffled_dag):
    assert _ids(eades_algorithm(small_dag)) == [1, 4, 2, 3]
    assert _ids(eades_algorithm(shuffled_dag)) == [5, 4, 3, 2, 1]


def test_cycle_breaking_keeps_components_together(cyclic_graph):
    assert _ids(cycle_breaking_sort(cyclic_graph)) == [1, 2, 3, 4]


@pytest.mark.parametrize("code", ["s", "n", "w", "b", "e", "c", "d", "m", "r", "f"])
def test_cyclic_graphs_are_fully_ordered(cyclic_graph, code):
    ordering = DEFAULT_REGISTRY.resolve(code).compute_ordering(cyclic_graph)
    assert sorted(_ids(ordering)) == [1, 2, 3, 4]


def test_random_order_is_reproducible_with_seed(shuffled_dag):
    first = random_order(shuffled_dag, seed=42)
    second = random_order(shuffled_dag, seed=42)

    assert first == second
    assert sorted(_ids(first)) == [1, 2, 3, 4, 5]
    assert all(not h.is_reverse for h in first)


def test_split_strands_doubles_nodes(inversion_graph):
    split, translation = split_strands(inversion_graph)

    assert split.node_count == 6
    assert split.edge_count == 4
    assert translation[4] == Handle(2, True)
    assert split.get_sequence(4) == "AATC"
    assert split.has_edge(Handle(1), Handle(4))
    assert split.has_edge(Handle(3), Handle(2))


def test_dagify_removes_back_edges(cyclic_graph):
    split, _ = split_strands(cyclic_graph)
    dag = dagify(split)

    assert dag.node_count == split.node_count
    assert dag.edge_count < split.edge_count
    assert _ids(lazy_topological_order(dag))


def test_dagify_sort_on_dag_keeps_forward_strands(small_dag):
    assert DEFAULT_REGISTRY.get("dagify").compute_ordering(small_dag) == [
        Handle(1),
        Handle(2),
        Handle(3),
        Handle(4),
    ]


def test_weighted_adjacency_counts_path_traversals(small_dag):
    plain = weighted_adjacency(small_dag)
    weighted = weighted_adjacency(small_dag, path_weight=True)

    assert (plain != plain.T).nnz == 0
    assert plain[0, 1] == 1
    assert weighted[0, 1] == 2
    assert weighted[1, 2] == 2
    assert weighted[0, 3] == 2


def test_fiedler_ordering_of_a_path_graph_is_monotone(graph_factory):
    chain = graph_factory(
        [(i, "A") for i in range(1, 8)],
        [(f"{i}+", f"{i + 1}+") for i in range(1, 7)],
    )
    ordering, _ = fiedler_ordering(weighted_adjacency(chain))
    assert list(ordering) == list(range(7))


@pytest.mark.parametrize("n_parts", [1, 2, 3])
@pytest.mark.parametrize("path_weight", [False, True])
def test_partition_order_is_a_permutation(sample_paths_graph, n_parts, path_weight):
    ordering = partition_order(sample_paths_graph, n_parts=n_parts, path_weight=path_weight)
    assert sorted(_ids(ordering)) == [1, 2, 3, 4, 5, 6]


def test_partition_order_keeps_components_contiguous(graph_factory):
    graph = graph_factory(
        [(i, "A") for i in range(1, 7)],
        [("1+", "3+"), ("3+", "5+"), ("2+", "4+"), ("4+", "6+")],
    )
    ids = _ids(partition_order(graph, n_parts=2))

    assert set(ids[:3]) == {1, 3, 5}
    assert set(ids[3:]) == {2, 4, 6}

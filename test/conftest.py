import logging

import pytest

from vgorder.graph import Handle, VariationGraph


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_graph(nodes, edges=(), paths=()):
    """
    Build a graph from compact descriptions.

    nodes: [(id, sequence)]
    edges: [("1+", "2-")]
    paths: [(name, ["1+", "2+"])]
    """

    def handle(token):
        return Handle(int(token[:-1]), token[-1] == "-")

    graph = VariationGraph()
    for node_id, sequence in nodes:
        graph.create_node(node_id, sequence)
    for left, right in edges:
        graph.create_edge(handle(left), handle(right))
    for name, steps in paths:
        graph.create_path(name, [handle(s) for s in steps])
    return graph


@pytest.fixture
def graph_factory():
    return build_graph


@pytest.fixture
def small_dag():
    """Nodes 1..4 with edges 1->2, 2->3, 1->4."""
    return build_graph(
        [(1, "A"), (2, "CC"), (3, "GGG"), (4, "TTTT")],
        [("1+", "2+"), ("2+", "3+"), ("1+", "4+")],
        [("x", ["1+", "2+", "3+"]), ("y", ["1+", "4+"])],
    )


@pytest.fixture
def shuffled_dag():
    """A DAG stored out of topological order: 5->3->1, 5->4->2->1."""
    return build_graph(
        [(1, "A"), (2, "C"), (3, "G"), (4, "T"), (5, "AC")],
        [("5+", "3+"), ("3+", "1+"), ("5+", "4+"), ("4+", "2+"), ("2+", "1+")],
        [("p", ["5+", "3+", "1+"]), ("q", ["5+", "4+", "2+", "1+"])],
    )


@pytest.fixture
def cyclic_graph():
    """1 -> 2 -> 3 -> 4 with a back edge 3 -> 2 and a self loop on 4."""
    return build_graph(
        [(1, "AAA"), (2, "C"), (3, "GT"), (4, "T")],
        [("1+", "2+"), ("2+", "3+"), ("3+", "2+"), ("3+", "4+"), ("4+", "4+")],
        [("loop", ["1+", "2+", "3+", "2+", "3+", "4+"])],
    )


@pytest.fixture
def inversion_graph():
    """Node 2 is traversed on its reverse strand: 1+ -> 2- -> 3+."""
    return build_graph(
        [(1, "AC"), (2, "GATT"), (3, "CA")],
        [("1+", "2-"), ("2-", "3+")],
        [("inv", ["1+", "2-", "3+"])],
    )


@pytest.fixture
def sample_paths_graph():
    """A chain 1..6 with paths grouped by sample prefix."""
    return build_graph(
        [(i, "A") for i in range(1, 7)],
        [(f"{i}+", f"{i + 1}+") for i in range(1, 6)],
        [
            ("sampleB#1", ["1+", "2+"]),
            ("sampleA#2", ["2+", "3+", "6+"]),
            ("sampleA#1", ["4+", "5+"]),
        ],
    )

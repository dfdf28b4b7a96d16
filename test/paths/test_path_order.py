"""
Tests for path keys and path list reordering.

Ranks in these tests are 1-based positions in the graph's current node order.
For sample_paths_graph (a chain 1..6 stored in id order):

  sampleB#1  [1, 2]     min 1  max 2  avg 1.5
  sampleA#2  [2, 3, 6]  min 2  max 6  avg 11/3
  sampleA#1  [4, 5]     min 4  max 5  avg 4.5
"""

import logging

import pytest

from vgorder.graph import Handle
from vgorder.paths import (
    PASS_PRIORITY,
    PathKeyStrategy,
    apply_path_passes,
    compute_key,
    path_prefix,
    prefix_and_id_ordered_paths,
)


@pytest.mark.parametrize(
    "name, delimiter, expected",
    [
        ("sampleA#1", "#", "sampleA"),
        ("a#b#c", "#", "a"),
        ("noprefix", "#", "noprefix"),
        ("sampleA#1", "", ""),
        ("chr1.hap2", ".", "chr1"),
    ],
)
def test_path_prefix(name, delimiter, expected):
    assert path_prefix(name, delimiter) == expected


def test_compute_key_values(sample_paths_graph):
    path = sample_paths_graph.get_path("sampleA#2")

    assert compute_key(sample_paths_graph, path) == ("", 2.0)
    assert compute_key(sample_paths_graph, path, "#", reverse=True) == ("sampleA", 6.0)
    prefix, average = compute_key(sample_paths_graph, path, "#", use_average=True)
    assert prefix == "sampleA"
    assert average == pytest.approx(11 / 3)
    _, reversed_average = compute_key(
        sample_paths_graph, path, use_average=True, reverse=True
    )
    assert reversed_average == pytest.approx(-11 / 3)


def test_compute_key_follows_current_order(sample_paths_graph):
    sample_paths_graph.apply_ordering([Handle(n) for n in (6, 5, 4, 3, 2, 1)])
    path = sample_paths_graph.get_path("sampleB#1")
    assert compute_key(sample_paths_graph, path) == ("", 5.0)


def test_empty_path_scores_zero(graph_factory):
    graph = graph_factory([(1, "A"), (2, "C")], [("1+", "2+")], [("late", ["2+"]), ("empty", [])])

    assert compute_key(graph, graph.get_path("empty")) == ("", 0.0)
    assert prefix_and_id_ordered_paths(graph) == ["empty", "late"]


def test_prefix_groups_come_first(sample_paths_graph):
    names = prefix_and_id_ordered_paths(sample_paths_graph, delimiter="#")
    assert names == ["sampleA#2", "sampleA#1", "sampleB#1"]


def test_without_delimiter_only_ranks_count(sample_paths_graph):
    assert prefix_and_id_ordered_paths(sample_paths_graph) == [
        "sampleB#1",
        "sampleA#2",
        "sampleA#1",
    ]
    assert prefix_and_id_ordered_paths(sample_paths_graph, reverse=True) == [
        "sampleB#1",
        "sampleA#1",
        "sampleA#2",
    ]


@pytest.mark.parametrize(
    "strategy, expected",
    [
        (PathKeyStrategy.MINIMUM, ["sampleA#2", "sampleA#1", "sampleB#1"]),
        (PathKeyStrategy.MAXIMUM, ["sampleA#1", "sampleA#2", "sampleB#1"]),
        (PathKeyStrategy.AVERAGE, ["sampleA#2", "sampleA#1", "sampleB#1"]),
        (PathKeyStrategy.AVERAGE_REVERSED, ["sampleA#1", "sampleA#2", "sampleB#1"]),
    ],
)
def test_single_pass(sample_paths_graph, strategy, expected):
    applied = apply_path_passes(sample_paths_graph, [strategy], delimiter="#")

    assert applied == [strategy]
    assert sample_paths_graph.path_names() == expected


def test_ties_keep_current_order(graph_factory):
    graph = graph_factory(
        [(1, "A"), (2, "C"), (3, "G")],
        [("1+", "2+"), ("1+", "3+")],
        [("p1", ["1+", "2+"]), ("p0", ["1+", "3+"]), ("p2", ["1+"])],
    )
    apply_path_passes(graph, [PathKeyStrategy.MINIMUM])
    assert graph.path_names() == ["p1", "p0", "p2"]


def test_last_pass_wins(sample_paths_graph, caplog):
    with caplog.at_level(logging.WARNING, logger="vgorder.paths.path_keys"):
        applied = apply_path_passes(
            sample_paths_graph,
            [PathKeyStrategy.MAXIMUM, PathKeyStrategy.MINIMUM],
            delimiter="#",
        )

    assert applied == [PathKeyStrategy.MINIMUM, PathKeyStrategy.MAXIMUM]
    assert sample_paths_graph.path_names() == ["sampleA#1", "sampleA#2", "sampleB#1"]
    assert "only the last, MAXIMUM" in caplog.text


def test_all_passes_equal_average_reversed(sample_paths_graph):
    applied = apply_path_passes(sample_paths_graph, list(PathKeyStrategy))

    assert applied == list(PASS_PRIORITY)
    # Average ranks: sampleB#1 1.5, sampleA#2 3.67, sampleA#1 4.5; highest first.
    assert sample_paths_graph.path_names() == ["sampleA#1", "sampleA#2", "sampleB#1"]


def test_no_passes_leave_paths_alone(sample_paths_graph):
    assert apply_path_passes(sample_paths_graph, []) == []
    assert sample_paths_graph.path_names() == ["sampleB#1", "sampleA#2", "sampleA#1"]


def test_earlier_pass_does_not_break_ties_of_last_pass(graph_factory):
    def build():
        return graph_factory(
            [(1, "A"), (2, "C"), (3, "G")],
            [("1+", "3+"), ("2+", "3+")],
            [("p2", ["2+", "3+"]), ("p1", ["1+", "3+"])],
        )

    # Both paths reach rank 3, so only their starting order separates them.
    only_max = build()
    apply_path_passes(only_max, [PathKeyStrategy.MAXIMUM])

    min_then_max = build()
    apply_path_passes(min_then_max, [PathKeyStrategy.MINIMUM, PathKeyStrategy.MAXIMUM])

    assert only_max.path_names() == ["p2", "p1"]
    assert min_then_max.path_names() == only_max.path_names()


def test_sort_over_an_explicit_path_list(sample_paths_graph):
    paths = list(reversed(sample_paths_graph.paths()))
    names = prefix_and_id_ordered_paths(sample_paths_graph, "#", paths=[paths[0], paths[2]])
    assert names == ["sampleA#1", "sampleB#1"]

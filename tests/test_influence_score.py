import math

import networkx as nx
import pytest

from influence_analysis import (
    build_graph,
    build_weighted_graph,
    calculate_influence_score_unweighted,
    calculate_influence_score_weighted,
    compute_influence_scores,
    demo_graph,
    generate_random_graph,
    influence_score,
    rank_scores,
    to_networkx,
)


def test_chain_scores(chain_graph):
    # A reaches B(1), C(2), D(3): (3/6) * (3/3)
    assert calculate_influence_score_unweighted(chain_graph, "A") == pytest.approx(0.5)
    assert calculate_influence_score_unweighted(chain_graph, "D") == 0.0


def test_weighted_pair_scores(weighted_pair):
    assert calculate_influence_score_weighted(weighted_pair, "A") == pytest.approx(0.5)
    assert calculate_influence_score_weighted(weighted_pair, "B") == 0.0


def test_complete_graph_scores_exactly_one(complete_graph):
    scores = compute_influence_scores(complete_graph)
    assert scores == {"A": 1.0, "B": 1.0, "C": 1.0, "D": 1.0}


def test_single_node_graph_scores_zero():
    assert compute_influence_scores({"Solo": []}) == {"Solo": 0.0}
    assert compute_influence_scores({"Solo": []}, weighted=True) == {"Solo": 0.0}


def test_isolated_node_counts_toward_total():
    graph = build_graph([("A", "B")], nodes=["C"])
    scores = compute_influence_scores(graph)
    # A reaches only B: closeness 1/1, scaled by 1/2
    assert scores["A"] == pytest.approx(0.5)
    assert scores["C"] == 0.0


def test_small_island_is_penalized():
    island = build_graph([("A", "B"), ("B", "A")], nodes=[str(i) for i in range(8)])
    big = build_graph([("A", "B"), ("B", "A")])
    assert compute_influence_scores(big)["A"] == 1.0
    assert compute_influence_scores(island)["A"] == pytest.approx(1 / 9)


def test_zero_weight_edge_is_ignored_for_scoring():
    graph = build_weighted_graph([("A", "B", 0), ("A", "C", 2)])
    # only C is reached: (1/2) * (1/2)
    assert calculate_influence_score_weighted(graph, "A") == pytest.approx(0.25)


def test_influence_score_degenerate_inputs():
    assert influence_score({}, 0, 0) == 0.0
    assert influence_score({"A": 0}, 1, 1) == 0.0
    assert influence_score({"A": 0, "B": None}, 1, 2) == 0.0
    assert influence_score({"A": 0.0, "B": math.inf}, 1, 2) == 0.0


def test_influence_score_ignores_unreachable_markers():
    assert influence_score({"A": 0, "B": 2, "C": None}, 2, 3) == pytest.approx(0.25)
    assert influence_score({"A": 0.0, "B": 2.0, "C": math.inf}, 2, 3) == pytest.approx(0.25)


def test_influence_score_is_clamped():
    # fractional distances below one would push the raw value past 1
    assert influence_score({"A": 0.0, "B": 0.5}, 2, 2) == 1.0


def test_demo_unweighted_scores():
    scores = compute_influence_scores(demo_graph())
    assert scores["Alicia"] == pytest.approx(7 / 24)
    assert scores["Diana"] == pytest.approx((4 / 6) * (4 / 7))
    assert scores["Edward"] == pytest.approx(3 / 7)
    assert scores["Fred"] == 0.0


def test_demo_weighted_scores():
    scores = compute_influence_scores(demo_graph(weighted=True))
    # A: B1 C1 E2 G2 H2 D4 F5 I5 J8
    assert scores["A"] == pytest.approx(9 / 30)
    assert scores["J"] == 0.0


def test_compute_influence_scores_detects_variant(weighted_pair):
    assert compute_influence_scores(weighted_pair) == pytest.approx({"A": 0.5, "B": 0.0})


@pytest.mark.parametrize("seed", range(5))
def test_scores_are_bounded(seed):
    for weighted in (False, True):
        graph = generate_random_graph(25, 0.8, weighted=weighted, seed=seed)
        for score in compute_influence_scores(graph).values():
            assert 0.0 <= score <= 1.0


@pytest.mark.parametrize("seed", range(4))
def test_scores_match_networkx_closeness(seed):
    # networkx measures incoming distance on digraphs, so compare on the reverse
    graph = generate_random_graph(20, 1.0, seed=seed)
    expected = nx.closeness_centrality(to_networkx(graph).reverse(), wf_improved=True)
    assert compute_influence_scores(graph) == pytest.approx(expected)

    weighted = generate_random_graph(20, 1.0, weighted=True, seed=seed)
    expected = nx.closeness_centrality(to_networkx(weighted).reverse(), distance="weight",
                                       wf_improved=True)
    assert compute_influence_scores(weighted) == pytest.approx(expected)


def test_rank_scores_orders_and_breaks_ties():
    scores = {"b": 0.5, "a": 0.5, "c": 0.9, "d": 0.0}
    assert rank_scores(scores) == [("c", 0.9), ("a", 0.5), ("b", 0.5), ("d", 0.0)]
    assert rank_scores(scores, top=2) == [("c", 0.9), ("a", 0.5)]

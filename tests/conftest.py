import matplotlib

matplotlib.use("Agg")

import pytest

from influence_analysis import build_graph, build_weighted_graph


@pytest.fixture
def chain_graph():
    """A -> B -> C -> D"""
    return build_graph([("A", "B"), ("B", "C"), ("C", "D")])


@pytest.fixture
def complete_graph():
    nodes = ["A", "B", "C", "D"]
    return build_graph([(u, v) for u in nodes for v in nodes if u != v])


@pytest.fixture
def weighted_pair():
    return build_weighted_graph([("A", "B", 2)])

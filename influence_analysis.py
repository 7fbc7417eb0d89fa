import argparse
import networkx as nx
import matplotlib.pyplot as plt
import matplotlib
import math
import heapq
import random
import sys

from collections import deque
from typing import Iterable, Union, Optional

UnweightedGraph = dict[str, list[str]]
WeightedGraph = dict[str, list[tuple[str, int]]]
Graph = Union[UnweightedGraph, WeightedGraph]

# Demo data: people network (unweighted) and lettered network (weighted)
DEMO_UNWEIGHTED_EDGES = [
    ("Alicia", "Britney"),
    ("Britney", "Claire"),
    ("Claire", "Diana"),
    ("Diana", "Edward"),
    ("Diana", "Harry"),
    ("Edward", "Harry"),
    ("Edward", "Gloria"),
    ("Edward", "Fred"),
    ("Harry", "Gloria"),
    ("Gloria", "Fred"),
]

DEMO_WEIGHTED_EDGES = [
    ("A", "B", 1), ("A", "C", 1), ("A", "E", 5),
    ("B", "C", 4), ("B", "E", 1), ("B", "G", 1), ("B", "H", 1),
    ("C", "D", 3), ("C", "E", 1),
    ("D", "E", 2), ("D", "F", 1), ("D", "G", 5),
    ("E", "G", 2),
    ("F", "G", 1),
    ("G", "H", 2),
    ("H", "I", 3),
    ("I", "J", 3),
]


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the influence calculator.

    Returns:
        argparse.Namespace: Parsed arguments containing:
            - weighted: Use the weighted (Dijkstra) variant
            - edge: List of [source, target] or [source, target, weight] edges
            - node: Extra node IDs to add (isolated nodes included)
            - create_random_graph: Tuple of (n, c) for graph generation (optional)
            - seed: Seed for the random graph generator
            - max_weight: Largest weight drawn for a random weighted graph
            - top: Only report the k most influential nodes
            - plot: Output image path, or '' to show the plot on screen
    """
    parser = argparse.ArgumentParser(
        description='Influence scores (normalized closeness centrality) for social networks.',
        usage='python %(prog)s [--weighted] [--edge SRC DST [WEIGHT]]... [OPTIONS]'
    )

    parser.add_argument('--weighted',
                        action='store_true',
                        help='Use edge weights (Dijkstra) instead of hop counts (BFS).')

    parser.add_argument('--edge',
                        action='append',
                        nargs='+',
                        metavar='ID',
                        help='Directed edge SRC DST [WEIGHT]. Repeat for more edges. '
                             'Without any --edge the built-in demo graph is used.')

    parser.add_argument('--node',
                        action='append',
                        metavar='node_id',
                        help='Add a node even if it has no edges.')

    parser.add_argument('--create_random_graph',
                        nargs=2,
                        type=float,
                        metavar=('n', 'c'),
                        help='Create a random directed Erdos-Renyi graph with n nodes and constant c.')

    parser.add_argument('--seed',
                        type=int,
                        help='Seed for --create_random_graph.')

    parser.add_argument('--max_weight',
                        type=int,
                        default=5,
                        metavar='w',
                        help='Largest edge weight for a random weighted graph (default 5).')

    parser.add_argument('--top',
                        type=int,
                        metavar='k',
                        help='Only report the k most influential nodes.')

    # nargs='?' means: absent→None, bare --plot→'' (show), --plot X→save to X
    parser.add_argument('--plot',
                        nargs='?',
                        const='',
                        default=None,
                        metavar='FILE',
                        help='Draw the graph sized by influence. Saves to FILE when given.')

    return parser.parse_args(argv)


# ── GRAPH BUILDER ─────────────────────────────────────────────────────────────

def is_weighted(graph: Graph) -> bool:
    """Return True when adjacency entries are (neighbor, weight) pairs."""
    for neighbors in graph.values():
        for entry in neighbors:
            return isinstance(entry, tuple)
    return False


def _neighbor_id(entry) -> str:
    return entry[0] if isinstance(entry, tuple) else entry


def ensure_all_nodes(graph: Graph) -> Graph:
    """
    Make sure every node referenced as a neighbor is also a key.

    Sink nodes that only appear as edge targets get an empty adjacency
    list, so every node counts toward the total node count.

    Args:
        graph: Unweighted or weighted adjacency mapping

    Returns:
        New mapping containing every node as a key (input is not mutated)
    """
    result = {node: list(neighbors) for node, neighbors in graph.items()}
    for neighbors in graph.values():
        for entry in neighbors:
            result.setdefault(_neighbor_id(entry), [])

    return result


def build_graph(edges: Iterable[tuple[str, str]], nodes: Iterable[str] = ()) -> UnweightedGraph:
    """
    Build an unweighted directed graph from (source, target) pairs.

    Args:
        edges: Iterable of (source, target) node ID pairs
        nodes: Extra node IDs to include, e.g. isolated nodes

    Returns:
        Adjacency mapping with every node present as a key
    """
    graph = {node: [] for node in nodes}
    for source, target in edges:
        graph.setdefault(source, []).append(target)

    return ensure_all_nodes(graph)


def build_weighted_graph(edges: Iterable[tuple[str, str, int]], nodes: Iterable[str] = ()) -> WeightedGraph:
    """
    Build a weighted directed graph from (source, target, weight) triples.

    Weights are stored as given. Non-positive weights are kept here and
    ignored later by the weighted shortest-path search.

    Args:
        edges: Iterable of (source, target, weight) triples
        nodes: Extra node IDs to include, e.g. isolated nodes

    Returns:
        Adjacency mapping with every node present as a key
    """
    graph = {node: [] for node in nodes}
    for source, target, weight in edges:
        graph.setdefault(source, []).append((target, weight))

    return ensure_all_nodes(graph)


def from_networkx(graph: nx.Graph, weight: Optional[str] = None) -> Graph:
    """
    Convert a NetworkX graph into an adjacency mapping.

    Undirected edges are followed in both directions. Node IDs are
    converted to strings.

    Args:
        graph: NetworkX graph or digraph
        weight: Edge attribute holding the weight. None builds an unweighted graph,
                edges without the attribute get weight 1.

    Returns:
        Unweighted or weighted adjacency mapping
    """
    result = {str(node): [] for node in graph.nodes}
    for node, neighbors in graph.adjacency():
        for neighbor, data in neighbors.items():
            if weight is None:
                result[str(node)].append(str(neighbor))
            else:
                result[str(node)].append((str(neighbor), data.get(weight, 1)))

    return result


def to_networkx(graph: Graph) -> nx.DiGraph:
    """Build an nx.DiGraph from an adjacency mapping (weights go in the 'weight' attribute)."""
    digraph = nx.DiGraph()
    digraph.add_nodes_from(graph)
    for node, neighbors in graph.items():
        for entry in neighbors:
            if isinstance(entry, tuple):
                digraph.add_edge(node, entry[0], weight=entry[1])
            else:
                digraph.add_edge(node, entry)

    return digraph


def edge_list(graph: Graph) -> list[tuple]:
    """
    List the graph's edges sorted by source, then target.

    Args:
        graph: Unweighted or weighted adjacency mapping

    Returns:
        List of (source, target) or (source, target, weight) tuples
    """
    edges = []
    for node in sorted(graph):
        for entry in sorted(graph[node], key=_neighbor_id):
            if isinstance(entry, tuple):
                edges.append((node, entry[0], entry[1]))
            else:
                edges.append((node, entry))

    return edges


def get_isolated_nodes(graph: Graph) -> list[str]:
    """
    Find all isolated nodes (no outbound and no inbound edges).

    Args:
        graph: The graph to search for isolated nodes

    Returns:
        List of node IDs that are isolated (empty list if none exist)
    """
    targets = set()
    for neighbors in graph.values():
        targets.update(_neighbor_id(entry) for entry in neighbors)

    iso_nodes = []
    for node, neighbors in graph.items():
        if len(neighbors) == 0 and node not in targets:
            iso_nodes.append(node)

    return iso_nodes


def generate_random_graph(n: int, c: float, weighted: bool = False,
                          max_weight: int = 5, seed: Optional[int] = None) -> Graph:
    """
    Generate a directed Erdős–Rényi random graph using the G(n,p) model.

    Each ordered pair of distinct nodes gets an edge independently with
    probability p = (c * ln(n)) / n.

    Args:
        n: Number of nodes in the graph
        c: Constant multiplier for edge probability calculation
        weighted: Attach integer weights drawn uniformly from [1, max_weight]
        max_weight: Largest weight for weighted graphs
        seed: Seed for reproducible graphs

    Returns:
        Adjacency mapping with nodes labeled as strings "0" to "n-1"

    Raises:
        ValueError: If n, c or max_weight is not positive.
    """
    if n <= 0:
        raise ValueError("Number of nodes must be positive.")
    if c <= 0:
        raise ValueError("Constant c must be positive.")
    if weighted and max_weight < 1:
        raise ValueError("max_weight must be at least 1.")

    rng = random.Random(seed)
    graph = nx.DiGraph()
    graph.add_nodes_from([str(i) for i in range(n)])
    p = c * math.log(n) / n

    for i in range(n):
        for j in range(n):
            if i != j and rng.random() < p:
                if weighted:
                    graph.add_edge(str(i), str(j), weight=rng.randint(1, max_weight))
                else:
                    graph.add_edge(str(i), str(j))

    return from_networkx(graph, weight="weight" if weighted else None)


def demo_graph(weighted: bool = False) -> Graph:
    """Return the built-in demo graph of the requested variant."""
    if weighted:
        return build_weighted_graph(DEMO_WEIGHTED_EDGES)
    return build_graph(DEMO_UNWEIGHTED_EDGES)


# ── SHORTEST PATHS ────────────────────────────────────────────────────────────

def shortest_paths_unweighted(graph: UnweightedGraph, start_node: str, return_reachable: bool = False):
    """
    Breadth-first search for hop distances from a starting node.

    Every node starts unreachable (None). Nodes are processed level by
    level; a neighbor gets a distance and is queued only the first time
    it is seen, so each node is queued at most once.

    Args:
        graph: Unweighted adjacency mapping
        start_node: The starting node ID
        return_reachable: If True, also returns the number of reached nodes

    Returns:
        If return_reachable is False: dict of node ID to hop count (None if unreachable)
        If return_reachable is True: Tuple of (distances, reachable count including start)

    """
    distances = {node: None for node in graph}
    distances[start_node] = 0
    queue = deque([start_node])
    reachable = 0

    while queue:
        curr_node = queue.popleft()
        reachable += 1

        # a start node missing from the graph is reached but expands nothing
        for neighbor in graph.get(curr_node, ()):
            # neighbors missing from the key set are skipped
            if neighbor in distances and distances[neighbor] is None:
                distances[neighbor] = distances[curr_node] + 1
                queue.append(neighbor)

    if return_reachable:
        return distances, reachable
    else:
        return distances


def shortest_paths_weighted(graph: WeightedGraph, start_node: str, return_reachable: bool = False):
    """
    Dijkstra's algorithm for weighted distances from a starting node.

    The heap holds (distance, node) pairs, so equal distances are popped in
    node ID order. Improved distances are pushed again and the stale entries
    are dropped when popped. Edges with zero or negative weight are ignored.

    Args:
        graph: Weighted adjacency mapping of (neighbor, weight) pairs
        start_node: The starting node ID
        return_reachable: If True, also returns the number of finalized nodes

    Returns:
        If return_reachable is False: dict of node ID to distance (math.inf if unreachable)
        If return_reachable is True: Tuple of (distances, reachable count including start)

    """
    distances = {node: math.inf for node in graph}
    distances[start_node] = 0.0
    heap = [(0.0, start_node)]
    visited = set()

    while heap:
        curr_dist, curr_node = heapq.heappop(heap)
        if curr_node in visited or curr_dist == math.inf:
            continue

        visited.add(curr_node)

        for neighbor, weight in graph.get(curr_node, ()):
            if weight <= 0:
                continue
            if neighbor not in distances or neighbor in visited:
                continue

            new_dist = curr_dist + weight
            if new_dist < distances[neighbor]:
                distances[neighbor] = new_dist
                heapq.heappush(heap, (new_dist, neighbor))

    if return_reachable:
        return distances, len(visited)
    else:
        return distances


# ── CENTRALITY ────────────────────────────────────────────────────────────────

def influence_score(distances: dict, reachable: int, total_nodes: int) -> float:
    """
    Normalized closeness centrality of one start node.

    closeness = (n - 1) / sum of distances to reached nodes, scaled by
    (n - 1) / (N - 1), the share of the graph that was reached. A node
    confined to a small component therefore scores low even when its
    neighbors are close.

    Args:
        distances: Distance map from one of the shortest-path searches
        reachable: n, the number of nodes reached including the start node
        total_nodes: N, the number of nodes in the whole graph

    Returns:
        Float score between 0 and 1 (0.0 for single-node graphs and nodes that reach nothing)
    """
    sum_distances = sum(d for d in distances.values()
                        if d is not None and 0 < d < math.inf)

    if total_nodes <= 1 or reachable <= 1 or sum_distances == 0:
        return 0.0

    closeness = (reachable - 1) / sum_distances
    normalization_factor = (reachable - 1) / (total_nodes - 1)
    score = closeness * normalization_factor

    # clamp floating point overshoot
    return max(0.0, min(1.0, score))


def calculate_influence_score_unweighted(graph: UnweightedGraph, node: str) -> float:
    """Influence score of a node using hop distances."""
    distances, reachable = shortest_paths_unweighted(graph, node, return_reachable=True)
    return influence_score(distances, reachable, len(graph))


def calculate_influence_score_weighted(graph: WeightedGraph, node: str) -> float:
    """Influence score of a node using weighted distances."""
    distances, reachable = shortest_paths_weighted(graph, node, return_reachable=True)
    return influence_score(distances, reachable, len(graph))


# ── DRIVER ────────────────────────────────────────────────────────────────────

def compute_influence_scores(graph: Graph, weighted: Optional[bool] = None) -> dict[str, float]:
    """
    Compute the influence score of every node in the graph.

    Args:
        graph: Unweighted or weighted adjacency mapping
        weighted: Variant to use. None picks it from the adjacency entries.

    Returns:
        Dictionary mapping node IDs to scores between 0 and 1
    """
    if weighted is None:
        weighted = is_weighted(graph)

    if weighted:
        score_fn = calculate_influence_score_weighted
    else:
        score_fn = calculate_influence_score_unweighted

    return {node: score_fn(graph, node) for node in graph}


def rank_scores(scores: dict[str, float], top: Optional[int] = None) -> list[tuple[str, float]]:
    """
    Sort scores from most to least influential.

    Ties are broken by node ID so the order is reproducible.

    Args:
        scores: Node ID to score mapping
        top: Keep only the first `top` entries (all when None)

    Returns:
        List of (node, score) tuples
    """
    ranked = sorted(scores.items(), key=lambda x: (-x[1], x[0]))
    if top is not None:
        ranked = ranked[:top]
    return ranked


def print_edge_list(graph: Graph, title: str, weighted: Optional[bool] = None) -> None:
    """
    Print the graph's edges in sorted order followed by node/edge counts.

    Args:
        graph: Unweighted or weighted adjacency mapping
        title: Heading printed above the edge list
        weighted: Print the weight column. None picks it from the adjacency entries.

    Returns:
        None (prints to console)
    """
    edges = edge_list(graph)
    if weighted is None:
        weighted = is_weighted(graph)

    print(f"\n{title}")
    print("Node1 -> Node2 (Weight)" if weighted else "Node1 -> Node2")
    for edge in edges:
        if len(edge) == 3:
            print(f"{edge[0]} -> {edge[1]} ({edge[2]})")
        else:
            print(f"{edge[0]} -> {edge[1]}")
    print(f"Graph has {len(graph)} nodes and {len(edges)} edges.")


def print_influence_report(ranked: list[tuple[str, float]], weighted: bool) -> None:
    """
    Print the ranked score table.

    Node names are padded to 15 characters and scores shown with 4 decimals.

    Args:
        ranked: Output of rank_scores
        weighted: Whether the scores came from the weighted variant

    Returns:
        None (prints to console)
    """
    kind = "Weighted" if weighted else "Unweighted"
    print(f"\n{kind} Graph Influence Scores (Normalized Closeness Centrality 0-1):")
    print("-" * 52)
    for node, score in ranked:
        print(f"{node:<15}: {score:.4f}")
    print("-" * 52)
    if weighted:
        print("Note: Score reflects reachability and average distance (using edge weights).")
    else:
        print("Note: Score reflects reachability and average distance.")


def plot_influence(graph: Graph, scores: dict[str, float], output: Optional[str] = None) -> None:
    """
    Visualize the graph with node size and color following the influence score.

    Node size = 300 + score * 1500. Node color = score, mapped through the
    plasma colormap. Weighted edges are labeled with their weight; isolated
    nodes are outlined in red.

    Args:
        graph: Unweighted or weighted adjacency mapping
        scores: Node ID to score mapping (missing nodes count as 0)
        output: Image path to save to. The plot is shown on screen when None.

    Returns:
        None (saves or displays the plot)
    """
    digraph = to_networkx(graph)
    nodes = list(digraph.nodes)
    values = [scores.get(n, 0.0) for n in nodes]
    node_sizes = [300 + v * 1500 for v in values]

    pos = nx.spring_layout(digraph, seed=42)
    fig, ax = plt.subplots(figsize=(12, 9))

    drawn = nx.draw_networkx_nodes(
        digraph, pos, ax=ax,
        nodelist=nodes,
        node_size=node_sizes,
        node_color=values,
        cmap=matplotlib.colormaps['plasma'],
        vmin=0.0, vmax=1.0,
    )
    nx.draw_networkx_edges(digraph, pos, ax=ax, edge_color="gray", arrows=True,
                           node_size=node_sizes, nodelist=nodes)
    nx.draw_networkx_labels(digraph, pos, ax=ax, font_size=10, font_weight="bold")

    if is_weighted(graph):
        edge_labels = nx.get_edge_attributes(digraph, 'weight')
        nx.draw_networkx_edge_labels(digraph, pos, edge_labels=edge_labels, ax=ax, font_size=8)

    iso_nodes = get_isolated_nodes(graph)
    if iso_nodes:
        nx.draw_networkx_nodes(digraph, pos, ax=ax, nodelist=iso_nodes,
                               node_color="none", edgecolors="red", node_size=500)

    fig.colorbar(drawn, ax=ax, label="Influence score")
    num_edges = len(digraph.edges)
    ax.set_title(f"Influence Scores (Normalized Closeness Centrality)\n"
                 f"{len(nodes)} nodes, {num_edges} edges",
                 fontsize=14, fontweight='bold')
    ax.axis("off")
    plt.tight_layout()

    if output:
        fig.savefig(output)
        plt.close(fig)
    else:
        plt.show()


def parse_edges(raw_edges: list[list[str]], weighted: bool) -> list[tuple]:
    """
    Turn --edge values into edge tuples.

    Args:
        raw_edges: Each item is [src, dst] or [src, dst, weight]
        weighted: Build (src, dst, weight) triples; two-value edges get weight 1

    Returns:
        List of (src, dst) pairs or (src, dst, weight) triples

    Raises:
        ValueError: If an edge has the wrong number of values or a non-integer weight.
    """
    edges = []
    for raw in raw_edges:
        if len(raw) not in (2, 3):
            raise ValueError(f"--edge expects SRC DST [WEIGHT], got {' '.join(raw)!r}.")
        if not weighted:
            edges.append((raw[0], raw[1]))
            continue
        try:
            weight = int(raw[2]) if len(raw) == 3 else 1
        except ValueError:
            raise ValueError(f"Invalid weight {raw[2]!r} for edge {raw[0]} -> {raw[1]}.")
        edges.append((raw[0], raw[1], weight))

    return edges


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_arguments(argv)
    weighted = args.weighted

    # ── GRAPH CONSTRUCTION ────────────────────────────────────────────────────
    if args.edge and args.create_random_graph:
        print("Error: Use either --edge or --create_random_graph, not both.")
        return 1

    if args.edge:
        # a weight on any edge switches to the weighted variant
        weighted = weighted or any(len(raw) == 3 for raw in args.edge)
        try:
            edges = parse_edges(args.edge, weighted)
        except ValueError as err:
            print(f"Error: {err}")
            return 1
        graph = build_weighted_graph(edges) if weighted else build_graph(edges)
        title = "Edge list of the given social network"
    elif args.create_random_graph:
        try:
            n = int(args.create_random_graph[0])
            c = args.create_random_graph[1]
            graph = generate_random_graph(n, c, weighted=weighted,
                                          max_weight=args.max_weight, seed=args.seed)
        except ValueError as err:
            print(f"Error: Invalid parameters for random graph: {err}")
            return 1
        title = "Edge list of the random social network"
    else:
        graph = demo_graph(weighted)
        if weighted:
            title = "List 2: edge_list of weighted social network (Demo Data)"
        else:
            title = "List 1: edge_list of unweighted social network (Demo Data)"

    for node in args.node or []:
        graph.setdefault(node, [])

    if args.top is not None and args.top <= 0:
        print("Error: k for --top must be a positive integer.")
        return 1

    # ── SCORING ───────────────────────────────────────────────────────────────
    print_edge_list(graph, title, weighted)
    scores = compute_influence_scores(graph, weighted=weighted)
    print_influence_report(rank_scores(scores, args.top), weighted)

    # ── PLOT ──────────────────────────────────────────────────────────────────
    if args.plot is not None:
        try:
            plot_influence(graph, scores, output=args.plot or None)
        except OSError as err:
            print(f"Error saving plot: {err}")
            return 1

    return 0  # success

if __name__ == "__main__":
    sys.exit(main())

import networkx as nx
import numpy as np

from randmst.algorithms.union_find import SizedUnionFind
from randmst.graph_generators.complete import generate_complete


def kruskal_mst_edges(graph_matrix: np.ndarray) -> list:
    """
    Kruskal's algorithm over every positive-weight edge of a symmetric
    (n x n) weight matrix. Returns the tree as (u, v, w) tuples in the order
    they were accepted.
    """
    n = graph_matrix.shape[0]
    if n <= 1:
        return []

    rows, cols = np.where(np.triu(graph_matrix, k=1) > 0)
    weights = graph_matrix[rows, cols]
    order = np.argsort(weights, kind='stable')

    uf = SizedUnionFind(n)
    tree = []

    for idx in order:
        u, v = int(rows[idx]), int(cols[idx])
        if uf.unite(u, v):
            tree.append((u, v, float(weights[idx])))
            if uf.free_edges == 0:
                break

    return tree


def kruskal_mst_weight(graph_matrix: np.ndarray) -> float:
    return float(sum(w for _, _, w in kruskal_mst_edges(graph_matrix)))


def mst_total_length_explicit(num_points: int, rng=None) -> float:
    """
    Builds all n(n-1)/2 weights and runs plain Kruskal; quadratic memory, so
    only useful as a cross-check for small n.
    """
    if num_points < 2:
        raise ValueError(
            f"need at least 2 points to build a spanning tree, got {num_points}")
    return kruskal_mst_weight(generate_complete(num_points, np.random.default_rng(rng)))


def networkx_mst_weight(graph_matrix: np.ndarray) -> float:
    """Trusted MST weight from networkx, for checking the implementations here."""
    G = nx.from_numpy_array(graph_matrix)
    T = nx.minimum_spanning_tree(G, weight='weight')
    return float(T.size(weight='weight'))

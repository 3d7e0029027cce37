import numpy as np


def generate_complete(n: int, rng=None) -> np.ndarray:
    """
    Generates a complete graph K_n with i.i.d. Uniform[0, 1] edge weights.

    Returns:
        np.ndarray: A symmetric (n, n) weight matrix with a zero diagonal.
    """
    if rng is None:
        rng = np.random.default_rng()

    matrix = np.zeros((n, n), dtype=float)

    # indices for the upper triangle (k=1 excludes the diagonal)
    rows, cols = np.triu_indices(n, k=1)
    weights = rng.random(rows.size)
    matrix[rows, cols] = weights

    # mirror the matrix to make it symmetric (undirected)
    matrix[cols, rows] = weights

    return matrix

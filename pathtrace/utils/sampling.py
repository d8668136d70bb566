"""Multi-jittered sub-pixel sampling.

Follows Kensler's "Correlated Multi-Jittered Sampling" construction: an n x n
grid of samples that is stratified both on the coarse n x n cells and on the
fine n^2 columns and rows (the N-rooks property). Shuffling swaps x values
within a column and y values within a row, which keeps both stratifications
while giving every pixel a different pattern.
"""

from __future__ import annotations

import numpy as np


def canonical_multi_jitter(n: int, rng: np.random.Generator) -> np.ndarray:
    """Return an (n, n, 2) array of (x, y) samples in [0, 1), indexed [row][column]."""
    if n < 1:
        raise ValueError(f"sample grid size must be positive, got {n}")
    rows, columns = np.meshgrid(np.arange(n), np.arange(n), indexing="ij")
    samples = np.empty((n, n, 2), dtype=float)
    samples[..., 0] = (columns + (rows + rng.random((n, n))) / n) / n
    samples[..., 1] = (rows + (columns + rng.random((n, n))) / n) / n
    return samples


def shuffle_multi_jitter(samples: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Shuffled copy of a canonical arrangement; stratification is preserved."""
    shuffled = samples.copy()
    n = shuffled.shape[0]
    for column in range(n):
        shuffled[:, column, 0] = shuffled[rng.permutation(n), column, 0]
    for row in range(n):
        shuffled[row, :, 1] = shuffled[row, rng.permutation(n), 1]
    return shuffled

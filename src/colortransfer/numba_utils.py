"""
Numba-optimized functions for the per-pixel colorization loops.
"""
import numpy as np
from numba import njit, prange


@njit(cache=True)
def window_signature(luminance, row, col, patch_size):
    """
    Mean plus population standard deviation of the luminance in the window
    rows [row - patch_size, row + patch_size) x cols [col - patch_size,
    col + patch_size), clamped to the image.
    """
    rows, cols = luminance.shape
    r0 = max(row - patch_size, 0)
    r1 = min(row + patch_size, rows)
    c0 = max(col - patch_size, 0)
    c1 = min(col + patch_size, cols)
    size = (r1 - r0) * (c1 - c0)

    total = 0.0
    for i in range(r0, r1):
        for j in range(c0, c1):
            total += luminance[i, j]
    avg = total / size

    squares = 0.0
    for i in range(r0, r1):
        for j in range(c0, c1):
            d = luminance[i, j] - avg
            squares += d * d
    return avg + np.sqrt(squares / size)


@njit(cache=True)
def nearest_index(bank_luminance, value):
    """Index of the first bank entry with the smallest |L - value|."""
    best = 0
    best_diff = np.inf
    for i in range(bank_luminance.shape[0]):
        diff = abs(bank_luminance[i] - value)
        if diff < best_diff:
            best_diff = diff
            best = i
    return best


@njit(parallel=True, cache=True)
def window_luminance_signatures(luminance, patch_size):
    """Signature of every pixel of a luminance plane."""
    rows, cols = luminance.shape
    result = np.empty((rows, cols), dtype=np.float64)
    for i in prange(rows):
        for j in range(cols):
            result[i, j] = window_signature(luminance, i, j, patch_size)
    return result


@njit(parallel=True, cache=True)
def nearest_sample_indices(signatures, bank_luminance):
    """Nearest bank index for every signature of a 2-D plane."""
    rows, cols = signatures.shape
    result = np.empty((rows, cols), dtype=np.int64)
    for i in prange(rows):
        for j in range(cols):
            result[i, j] = nearest_index(bank_luminance, signatures[i, j])
    return result

# stockwindow/windows.py

from typing import Tuple

import numpy as np


def build_windows(sequence, window_size: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Turn a 1D series into overlapping (input window, next value) pairs.

    Pair i has input sequence[i : i + window_size] and output
    sequence[i + window_size], in ascending i. A series that is not longer
    than the window yields empty arrays of shape (0, window_size) and (0,).
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")

    values = np.asarray(sequence, dtype=float).reshape(-1)
    n_pairs = max(len(values) - window_size, 0)

    X = np.empty((n_pairs, window_size), dtype=float)
    y = np.empty(n_pairs, dtype=float)
    for i in range(n_pairs):
        X[i] = values[i:i + window_size]
        y[i] = values[i + window_size]
    return X, y


def truncate_to_window_multiple(sequence, window_size: int) -> np.ndarray:
    """
    Keep the leading len - (len mod window_size) values; the remainder at the
    end is dropped.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")

    values = np.asarray(sequence, dtype=float).reshape(-1)
    keep = len(values) - len(values) % window_size
    return values[:keep]


def target_days(n_pairs: int, window_size: int, offset: int = 0) -> np.ndarray:
    """
    Absolute day index of each window output: pair i -> offset + i + window_size.

    Use offset=0 for the train split and offset=<split index> for the test split.
    """
    start = offset + window_size
    return np.arange(start, start + n_pairs)

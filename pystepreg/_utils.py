"""
Utility functions.
"""

import numpy as np

from .exceptions import DimensionMismatchError


def check_array(X, name='X', dtype=np.float64):
    """Validate array input."""
    X = np.asarray(X, dtype=dtype)
    if X.ndim != 2:
        raise DimensionMismatchError(f"{name} must be 2-dimensional")
    if not np.all(np.isfinite(X)):
        raise DimensionMismatchError(f"{name} contains NaN or Inf")
    return X


def check_vector(y, name='y', dtype=np.float64):
    """Validate vector input (n or n x 1)."""
    y = np.asarray(y, dtype=dtype)
    if y.ndim == 2 and y.shape[1] == 1:
        y = y[:, 0]
    if y.ndim != 1:
        raise DimensionMismatchError(f"{name} must be 1-dimensional or a single column")
    if not np.all(np.isfinite(y)):
        raise DimensionMismatchError(f"{name} contains NaN or Inf")
    return y


def check_X_y(X, y):
    """Validate a design matrix and response together."""
    X = check_array(X)
    y = check_vector(y)
    if X.shape[0] != y.shape[0]:
        raise DimensionMismatchError(
            f"X has {X.shape[0]} rows but y has {y.shape[0]}"
        )
    if X.shape[0] == 0:
        raise DimensionMismatchError("X and y have no rows")
    return X, y

"""
Intercept handling and implicit standardization of the design matrix.

Standardizing is done on the normal equations rather than on X itself.
With the intercept as the last column, the standardized design is
X_std = X T where T = diag(scale) + e_last shift', so

    A_std = T' A T,    b_std = T' b,    beta = T beta_std.
"""

import numpy as np
from typing import Tuple
from dataclasses import dataclass


NO_INTERCEPT = 0
INTERCEPT = 1
INTERCEPT_STANDARDIZED = 2

INTERCEPT_MODES = (NO_INTERCEPT, INTERCEPT, INTERCEPT_STANDARDIZED)


@dataclass
class ColumnScaling:
    """Per-column scale and shift for the standardized fit."""
    scale: np.ndarray     # 1 / sd, or 1 for unsafe columns and the intercept
    shift: np.ndarray     # -mean * scale, 0 for the intercept
    unsafe: np.ndarray    # True where the sample variance was <= 0


def add_intercept(X: np.ndarray, intercept: int) -> np.ndarray:
    """Append a column of ones when the intercept mode asks for one."""
    if intercept == NO_INTERCEPT:
        return X
    return np.column_stack([X, np.ones(X.shape[0], dtype=np.float64)])


def column_scaling(X_ext: np.ndarray) -> ColumnScaling:
    """
    Compute scale and shift for every column of X_ext.

    X_ext must already carry the intercept as its last column. Columns whose
    sample variance is not positive keep scale 1 so constant columns never
    divide by zero.
    """
    n, m_ext = X_ext.shape
    avg = X_ext.sum(axis=0) / n
    if n > 1:
        var = ((X_ext ** 2).sum(axis=0) - n * avg ** 2) / (n - 1)
    else:
        var = np.zeros(m_ext, dtype=np.float64)

    unsafe = var <= 0.0
    scale = 1.0 / np.sqrt(np.where(unsafe, 1.0, var))
    scale[m_ext - 1] = 1.0
    shift = -avg * scale
    shift[m_ext - 1] = 0.0

    return ColumnScaling(scale=scale, shift=shift, unsafe=unsafe)


def scale_normal_equations(
    A: np.ndarray,
    b: np.ndarray,
    scaling: ColumnScaling,
) -> Tuple[np.ndarray, np.ndarray]:
    """Transform X'X and X'y as if X had been standardized first."""
    scale, shift = scaling.scale, scaling.shift

    # T' M = diag(scale) M + shift M[last, :]
    A = scale[:, np.newaxis] * A + np.outer(shift, A[-1, :])
    A = A.T
    A = scale[:, np.newaxis] * A + np.outer(shift, A[-1, :])
    b = scale * b + shift * b[-1]

    return A, b


def unscale_coefficients(beta_std: np.ndarray, scaling: ColumnScaling) -> np.ndarray:
    """Map standardized-scale coefficients back to the original X scale."""
    beta = scaling.scale * beta_std
    beta[-1] = beta[-1] + scaling.shift @ beta_std
    return beta

"""
CPU backend using NumPy + SciPy.

Normal equations are solved by Cholesky factorization of the equilibrated
system D^-1 X'X D^-1, D = diag(||x_j||). Its pivots are |R_jj| / ||x_j||
for X = QR, the per-column ratio R's lm() compares against tol, so the
rank decision does not depend on the units of the columns.
"""

import numpy as np
from scipy.linalg import cho_factor, cho_solve, LinAlgError
from typing import Optional, Tuple

from .base import CPUBackend
from ..exceptions import SingularSystemError


class CPUBackendFP64(CPUBackend):
    """
    CPU backend using NumPy + SciPy.

    Always uses FP64 precision.
    """

    def __init__(self, tol: Optional[float] = None):
        self.name = "cpu_fp64"
        self.precision = "fp64"
        self.tol = 1e-7 if tol is None else tol

    def gram(self, X: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        return X.T @ X, X.T @ y

    def solve_normal_equations(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        """
        Solve A beta = b for symmetric positive definite A.

        A failed factorization, a rank-deficient factor or a non-finite
        solution all raise SingularSystemError instead of returning NaNs.
        """
        A = np.asarray(A, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)
        k = A.shape[0]
        if k == 0:
            return np.zeros(0, dtype=np.float64)

        if not (np.all(np.isfinite(A)) and np.all(np.isfinite(b))):
            raise SingularSystemError(f"Non-finite entries in {k}x{k} system")

        # Column norms of X; a zero column can never be estimated
        d = np.sqrt(np.diag(A))
        if np.any(d == 0):
            zero = [int(j) for j in np.flatnonzero(d == 0)]
            raise SingularSystemError(f"Zero column(s) at positions {zero}")

        # Factor D^-1 A D^-1 so each pivot is |R_jj| / ||x_j||
        A_eq = A / np.outer(d, d)
        try:
            c, lower = cho_factor(A_eq, lower=False, check_finite=False)
        except LinAlgError as exc:
            raise SingularSystemError(
                f"Cholesky factorization failed for {k}x{k} system: {exc}"
            ) from exc

        R_diag = np.abs(np.diag(c))
        rank = int(np.sum(R_diag >= self.tol))
        if rank < k:
            raise SingularSystemError(
                f"Singular normal equations: rank {rank} < {k} columns"
            )

        beta = cho_solve((c, lower), b / d, check_finite=False) / d
        if not np.all(np.isfinite(beta)):
            raise SingularSystemError("Normal-equation solve produced non-finite coefficients")
        return beta

    def get_device_info(self) -> dict:
        """Get backend information."""
        import scipy
        return {
            'backend': 'cpu',
            'precision': 'fp64',
            'algorithm': 'Cholesky on normal equations',
            'library': f'NumPy {np.__version__}, SciPy {scipy.__version__}',
        }

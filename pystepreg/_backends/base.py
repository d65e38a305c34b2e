"""
Abstract base classes for backends.

Defines the linear-algebra primitives every backend must provide.
"""

from abc import ABC, abstractmethod
import numpy as np
from typing import Tuple


class BackendBase(ABC):
    """Abstract base class for all backends."""

    @abstractmethod
    def gram(self, X: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Form the normal-equation terms.

        Parameters
        ----------
        X : ndarray, shape (n, k)
            Design matrix (intercept column already appended, if any)
        y : ndarray, shape (n,)
            Response vector

        Returns
        -------
        A : ndarray, shape (k, k)
            X'X
        b : ndarray, shape (k,)
            X'y
        """
        pass

    @abstractmethod
    def solve_normal_equations(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        """
        Solve the symmetric system A beta = b.

        Raises
        ------
        SingularSystemError
            If A is singular or too ill-conditioned to solve reliably.
        """
        pass

    @abstractmethod
    def get_device_info(self) -> dict:
        """Get backend information."""
        pass


class CPUBackend(BackendBase):
    """CPU backend base class (always FP64)."""
    pass

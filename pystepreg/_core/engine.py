"""
Regression engine for a single feature subset.

Fits ordinary least squares through the normal equations and scores the fit
with the Akaike Information Criterion.
"""

import numpy as np
from typing import Optional, Sequence, Tuple
from dataclasses import dataclass

from .standardize import (
    INTERCEPT_STANDARDIZED,
    NO_INTERCEPT,
    add_intercept,
    column_scaling,
    scale_normal_equations,
    unscale_coefficients,
)
from . import statistics
from .statistics import ModelStatistics
from ..exceptions import SingularSystemError


@dataclass
class FittedModel:
    """Result of fitting one feature subset."""
    features: Tuple[int, ...]  # 1-based columns, selection order
    intercept: int             # Intercept mode
    beta: np.ndarray           # (k,) or (k, 2): [original scale, standardized]
    aic: float                 # Akaike Information Criterion
    rss: float                 # Residual sum of squares
    n_params: int              # Model columns incl. intercept (m_ext)
    residuals: np.ndarray      # y - X beta

    @property
    def coef(self) -> np.ndarray:
        """Coefficients on the original X scale (intercept last)."""
        return self.beta[:, 0] if self.beta.ndim == 2 else self.beta

    @property
    def coef_scaled(self) -> Optional[np.ndarray]:
        """Coefficients on the standardized scale, if standardization was used."""
        return self.beta[:, 1] if self.beta.ndim == 2 else None


def akaike(rss: float, n: int, n_params: int) -> float:
    """AIC = 2 k + n ln(RSS / n); a perfect fit scores -inf."""
    with np.errstate(divide='ignore'):
        return float(2 * n_params + n * np.log(rss / n))


class RegressionEngine:
    """
    Fit OLS models for arbitrary column subsets of a fixed design.

    X and y are never modified, so one engine can be shared by many
    workers scoring candidates concurrently.

    Parameters
    ----------
    X : ndarray, shape (n, m_orig)
        Full design matrix (no intercept column)
    y : ndarray, shape (n,)
        Response vector
    intercept : int
        0 = no intercept, 1 = intercept, 2 = intercept + standardization
    backend : BackendBase
        Linear-algebra provider
    """

    def __init__(self, X: np.ndarray, y: np.ndarray, intercept: int, backend):
        self.X = X
        self.y = y
        self.intercept = intercept
        self.backend = backend
        self.n_obs = X.shape[0]

    def baseline(self) -> FittedModel:
        """Model with no predictors: mean of y, or zero without intercept."""
        n = self.n_obs
        if self.intercept == NO_INTERCEPT:
            beta = np.zeros(0, dtype=np.float64)
            residuals = self.y.copy()
            n_params = 0
        else:
            mean_y = np.sum(self.y) / n
            beta = np.array([mean_y])
            if self.intercept == INTERCEPT_STANDARDIZED:
                beta = np.column_stack([beta, beta])
            residuals = self.y - mean_y
            n_params = 1

        rss = float(np.sum(residuals ** 2))
        return FittedModel(
            features=(),
            intercept=self.intercept,
            beta=beta,
            aic=akaike(rss, n, n_params),
            rss=rss,
            n_params=n_params,
            residuals=residuals,
        )

    def design(self, features: Sequence[int]) -> np.ndarray:
        """Selected columns in selection order, intercept appended last."""
        cols = np.asarray(features, dtype=np.int64) - 1
        return add_intercept(self.X[:, cols], self.intercept)

    def _solve(self, X_sub: np.ndarray, features: Sequence[int]) -> np.ndarray:
        A, b = self.backend.gram(X_sub, self.y)

        scaling = None
        if self.intercept == INTERCEPT_STANDARDIZED:
            scaling = column_scaling(X_sub)
            A, b = scale_normal_equations(A, b, scaling)

        try:
            beta_std = self.backend.solve_normal_equations(A, b)
        except SingularSystemError as exc:
            raise SingularSystemError(
                f"Cannot fit features {list(features)} "
                f"(intercept={self.intercept}): {exc}",
                features=features,
                intercept=self.intercept,
            ) from exc

        if scaling is None:
            return beta_std
        return np.column_stack([unscale_coefficients(beta_std, scaling), beta_std])

    def fit(
        self,
        features: Sequence[int],
        compute_statistics: bool = False,
    ) -> Tuple[float, FittedModel, Optional[ModelStatistics]]:
        """
        Fit the model on the given columns.

        Parameters
        ----------
        features : sequence of int
            1-based column indices, in selection order
        compute_statistics : bool
            Also compute ModelStatistics (final model only)

        Returns
        -------
        aic : float
        model : FittedModel
        statistics : ModelStatistics or None

        Raises
        ------
        SingularSystemError
            If the normal equations for this subset cannot be solved.
        """
        features = tuple(int(f) for f in features)
        X_sub = self.design(features)
        beta = self._solve(X_sub, features)

        coef = beta[:, 0] if beta.ndim == 2 else beta
        residuals = self.y - X_sub @ coef
        rss = float(np.sum(residuals ** 2))
        n_params = X_sub.shape[1]
        aic = akaike(rss, self.n_obs, n_params)

        model = FittedModel(
            features=features,
            intercept=self.intercept,
            beta=beta,
            aic=aic,
            rss=rss,
            n_params=n_params,
            residuals=residuals,
        )

        stats = None
        if compute_statistics:
            stats = statistics.compute_statistics(
                self.y, residuals, len(features), self.intercept
            )

        return aic, model, stats

    def aic(self, features: Sequence[int]) -> float:
        """AIC of the fit on the given columns (worker-pool entry point)."""
        return self.fit(features)[0]

"""
Forward feature selection driven by AIC.

Starting from the empty model, each round scores every unselected column
added to the current subset and keeps the best one, as long as it improves
AIC by more than a relative threshold.
"""

import numpy as np
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass, field
from joblib import Parallel, delayed

from ._backends import get_backend
from ._core import FittedModel, ModelStatistics, RegressionEngine
from ._core.standardize import INTERCEPT_MODES
from ._utils import check_X_y
from .exceptions import ConfigurationError


SUPPORTED_DIRECTIONS = ('forward',)


@dataclass
class SelectionConfig:
    """
    Settings for a stepwise run. Validated on construction.

    Parameters
    ----------
    intercept : int
        0 = no intercept, 1 = intercept, 2 = intercept + standardized X
    threshold : float
        Relative AIC improvement a feature must exceed to be accepted
    direction : str
        Selection strategy; only 'forward' is supported
    n_jobs : int
        joblib workers used to score candidates (-1 = all cores)
    backend : str
        Linear-algebra backend passed to get_backend()
    verbose : bool
        Print per-round progress
    """
    intercept: int = 0
    threshold: float = 0.01
    direction: str = 'forward'
    n_jobs: int = -1
    backend: str = 'auto'
    verbose: bool = False

    def __post_init__(self):
        if self.direction not in SUPPORTED_DIRECTIONS:
            raise ConfigurationError(
                f"Unsupported selection direction: '{self.direction}'\n"
                f"Valid options: {', '.join(SUPPORTED_DIRECTIONS)}"
            )
        if isinstance(self.intercept, bool) or self.intercept not in INTERCEPT_MODES:
            raise ConfigurationError(
                f"intercept must be one of {INTERCEPT_MODES}, got {self.intercept!r}"
            )
        try:
            threshold = float(self.threshold)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"threshold must be a number, got {self.threshold!r}"
            ) from None
        if not np.isfinite(threshold) or threshold < 0:
            raise ConfigurationError(
                f"threshold must be finite and non-negative, got {self.threshold!r}"
            )
        self.threshold = threshold
        if not isinstance(self.n_jobs, (int, np.integer)) or self.n_jobs == 0:
            raise ConfigurationError(f"n_jobs must be a non-zero integer, got {self.n_jobs!r}")


class SelectionState(Enum):
    INIT = 'init'
    EVALUATING_ROUND = 'evaluating_round'
    COMMITTING = 'committing'
    CONVERGED = 'converged'
    FULL_MODEL = 'full_model'


TERMINAL_STATES = (SelectionState.CONVERGED, SelectionState.FULL_MODEL)


@dataclass
class SelectionResult:
    """Outcome of a forward selection run."""
    selected: List[int]                    # 1-based, selection order
    model: FittedModel                     # Final (or baseline) model
    statistics: Optional[ModelStatistics]  # None when nothing was selected
    aic_history: List[float]               # Baseline, then each accepted round
    state: SelectionState                  # CONVERGED or FULL_MODEL
    n_features: int                        # Columns in the original X
    intercept: int
    y: np.ndarray = field(repr=False)

    @property
    def aic(self) -> float:
        return self.model.aic


class FeatureSelectionController:
    """
    Greedy forward search over the columns of X.

    All mutable search state (selected columns, best AIC, round table)
    lives on the instance. Within a round candidates are scored in parallel
    against immutable X, y and subset; the commit step only runs once the
    whole round table is filled.

    Parameters
    ----------
    X : ndarray, shape (n, m)
        Design matrix (no intercept column)
    y : ndarray, shape (n,) or (n, 1)
        Response vector
    config : SelectionConfig, optional
        Run settings; defaults to SelectionConfig()

    Raises
    ------
    ConfigurationError
        If config is invalid (raised by SelectionConfig)
    DimensionMismatchError
        If X and y do not have the same number of rows
    """

    def __init__(self, X, y, config: Optional[SelectionConfig] = None):
        self.config = config if config is not None else SelectionConfig()
        backend = get_backend(self.config.backend)

        self.X, self.y = check_X_y(X, y)
        self.n_obs, self.n_features = self.X.shape
        self.engine = RegressionEngine(self.X, self.y, self.config.intercept, backend)

        self.state = SelectionState.INIT
        self.selected: List[int] = []
        self.best_aic: Optional[float] = None
        self.aic_history: List[float] = []
        self.candidates = np.zeros(0, dtype=np.int64)
        self.aic_table = np.zeros(0, dtype=np.float64)
        self._baseline: Optional[FittedModel] = None

    def _log(self, message: str):
        if self.config.verbose:
            print(message)

    def initialize(self) -> float:
        """Score the zero-predictor model and enter the first round."""
        self._baseline = self.engine.baseline()
        self.best_aic = self._baseline.aic
        self.aic_history = [self.best_aic]
        self._log(f"Best AIC without any features: {self.best_aic}")
        self.state = SelectionState.EVALUATING_ROUND
        return self.best_aic

    def remaining(self) -> np.ndarray:
        """Unselected 1-based column indices, ascending."""
        chosen = set(self.selected)
        return np.array(
            [j for j in range(1, self.n_features + 1) if j not in chosen],
            dtype=np.int64
        )

    def evaluate_round(self) -> np.ndarray:
        """
        Fit current subset + each remaining column and record its AIC.

        Returns
        -------
        ndarray
            AIC per candidate, aligned with self.candidates
        """
        if self.state is not SelectionState.EVALUATING_ROUND:
            raise RuntimeError(f"Cannot evaluate a round in state {self.state.name}")

        candidates = self.remaining()
        subset = tuple(self.selected)

        table = np.full(len(candidates), np.nan, dtype=np.float64)
        results = Parallel(n_jobs=self.config.n_jobs, prefer='threads')(
            delayed(self.engine.aic)(subset + (int(j),)) for j in candidates
        )
        table[:] = results

        self.candidates = candidates
        self.aic_table = table
        self.state = SelectionState.COMMITTING
        return table

    def commit(self) -> Optional[int]:
        """
        Accept the best candidate of the round, if it beats the threshold.

        Candidates are scanned in ascending column order; the first one
        holding the strict minimum among those that pass wins.

        Returns
        -------
        int or None
            The accepted column (1-based), or None when the search converged
        """
        if self.state is not SelectionState.COMMITTING:
            raise RuntimeError(f"Cannot commit in state {self.state.name}")

        margin = abs(self.config.threshold * self.best_aic)
        winner = None
        winner_aic = self.best_aic
        for j, aic in zip(self.candidates, self.aic_table):
            if (self.best_aic - aic) > margin and aic < winner_aic:
                winner, winner_aic = int(j), float(aic)

        if winner is None:
            self._log("No new feature improves AIC beyond the threshold")
            self.state = SelectionState.CONVERGED
            return None

        self.selected.append(winner)
        self.best_aic = winner_aic
        self.aic_history.append(winner_aic)
        self._log(f"Best AIC {winner_aic} achieved with feature: {winner}")

        if len(self.selected) == self.n_features:
            self._log("All features selected")
            self.state = SelectionState.FULL_MODEL
        else:
            self.state = SelectionState.EVALUATING_ROUND
        return winner

    def finalize(self) -> SelectionResult:
        """Refit the chosen subset with statistics (terminal states only)."""
        if self.state not in TERMINAL_STATES:
            raise RuntimeError(f"Cannot finalize in state {self.state.name}")

        if not self.selected:
            self._log("No features selected")
            model, stats = self._baseline, None
        else:
            _, model, stats = self.engine.fit(self.selected, compute_statistics=True)

        return SelectionResult(
            selected=list(self.selected),
            model=model,
            statistics=stats,
            aic_history=list(self.aic_history),
            state=self.state,
            n_features=self.n_features,
            intercept=self.config.intercept,
            y=self.y,
        )

    def run(self) -> SelectionResult:
        """Run forward selection to convergence."""
        self.initialize()
        if self.n_features == 0:
            self.state = SelectionState.CONVERGED

        while self.state not in TERMINAL_STATES:
            self.evaluate_round()
            self.commit()

        return self.finalize()


def forward_selection(X, y, **kwargs) -> SelectionResult:
    """
    Run forward selection (convenience function).

    Parameters
    ----------
    X : array, shape (n, m)
        Design matrix
    y : array, shape (n,)
        Response
    **kwargs
        SelectionConfig fields (intercept, threshold, direction, n_jobs, ...)

    Returns
    -------
    SelectionResult
    """
    return FeatureSelectionController(X, y, SelectionConfig(**kwargs)).run()

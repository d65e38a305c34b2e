"""
Map a selection result back to the original column space and report it.
"""

import numpy as np
import pandas as pd
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ._core import ModelStatistics, compute_statistics
from ._core.standardize import INTERCEPT_STANDARDIZED, NO_INTERCEPT
from .selection import SelectionResult


NO_FEATURE_SELECTED = 0


class ReportSink(ABC):
    """Destination for the three outputs of a stepwise run."""

    @abstractmethod
    def write_selected(self, selected: List[int]):
        pass

    @abstractmethod
    def write_coefficients(self, coefficients: np.ndarray):
        pass

    @abstractmethod
    def write_statistics(self, statistics: List[Tuple[str, float]]):
        pass


class FrameSink(ReportSink):
    """Collect the report as pandas objects in memory."""

    def __init__(self):
        self.selected: Optional[pd.Series] = None
        self.coefficients: Optional[pd.DataFrame] = None
        self.statistics: Optional[pd.Series] = None

    def write_selected(self, selected):
        self.selected = pd.Series(selected, name='feature', dtype=np.int64)

    def write_coefficients(self, coefficients):
        self.coefficients = pd.DataFrame(coefficients)

    def write_statistics(self, statistics):
        names = [name for name, _ in statistics]
        values = [value for _, value in statistics]
        self.statistics = pd.Series(values, index=names, name='value', dtype=np.float64)


class CSVSink(ReportSink):
    """
    Write the report as CSV files in a directory.

    Files: selected.csv (one index per line), coefficients.csv (one row per
    original column, intercept last) and statistics.csv (NAME,value rows).
    statistics.csv is not written when no feature was selected.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def write_selected(self, selected):
        pd.Series(selected, dtype=np.int64).to_csv(
            self.directory / 'selected.csv', index=False, header=False
        )

    def write_coefficients(self, coefficients):
        pd.DataFrame(coefficients).to_csv(
            self.directory / 'coefficients.csv', index=False, header=False
        )

    def write_statistics(self, statistics):
        if not statistics:
            return
        frame = pd.DataFrame(statistics, columns=['name', 'value'])
        frame.to_csv(self.directory / 'statistics.csv', index=False, header=False)


class StatisticsReporter:
    """
    Reconstruct coefficients in the original column space and emit results.

    Parameters
    ----------
    result : SelectionResult
        Output of FeatureSelectionController.run()
    """

    def __init__(self, result: SelectionResult):
        self.result = result

    @property
    def has_intercept(self) -> bool:
        return self.result.intercept != NO_INTERCEPT

    def selected_output(self) -> List[int]:
        """Selected columns in selection order, or [0] if none."""
        if not self.result.selected:
            return [NO_FEATURE_SELECTED]
        return list(self.result.selected)

    def coefficients(self) -> np.ndarray:
        """
        Coefficients laid out over the original columns.

        Returns
        -------
        ndarray
            shape (m, 1) without intercept, (m + 1, 1) with intercept, or
            (m + 1, 2) with standardization (column 0 on the original X
            scale, column 1 on the standardized scale). Unselected columns
            are 0; the intercept is always the last row.
        """
        model = self.result.model
        beta = model.beta if model.beta.ndim == 2 else model.beta[:, np.newaxis]
        n_rows = self.result.n_features + (1 if self.has_intercept else 0)
        n_cols = 2 if self.result.intercept == INTERCEPT_STANDARDIZED else 1

        out = np.zeros((n_rows, n_cols), dtype=np.float64)
        for pos, feature in enumerate(model.features):
            out[feature - 1, :] = beta[pos, :]
        if self.has_intercept:
            out[-1, :] = beta[-1, :]
        return out

    def statistics_items(self) -> List[Tuple[str, float]]:
        """Named statistics in report order; empty if nothing was selected."""
        if self.result.statistics is None:
            return []
        return self.result.statistics.items()

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Apply the original-space coefficients to a full design matrix."""
        X = np.asarray(X, dtype=np.float64)
        coef = self.coefficients()[:, 0]
        fitted = X @ coef[:self.result.n_features]
        if self.has_intercept:
            fitted = fitted + coef[-1]
        return fitted

    def recompute_statistics(self, X: np.ndarray) -> Optional[ModelStatistics]:
        """
        Recompute the statistics from the original-space coefficients.

        Agrees with the engine's statistics when the coefficient mapping is
        consistent. Returns None when nothing was selected.
        """
        if not self.result.selected:
            return None
        y = self.result.y
        residuals = y - self.predict(X)
        return compute_statistics(
            y, residuals, len(self.result.selected), self.result.intercept
        )

    def emit(self, sink: ReportSink) -> ReportSink:
        """Send selected columns, coefficients and statistics to a sink."""
        sink.write_selected(self.selected_output())
        sink.write_coefficients(self.coefficients())
        sink.write_statistics(self.statistics_items())
        return sink


def report(result: SelectionResult, sink: Optional[ReportSink] = None) -> ReportSink:
    """Emit a selection result to a sink (FrameSink by default)."""
    if sink is None:
        sink = FrameSink()
    return StatisticsReporter(result).emit(sink)


__all__ = [
    'ReportSink',
    'FrameSink',
    'CSVSink',
    'StatisticsReporter',
    'report',
    'NO_FEATURE_SELECTED',
]

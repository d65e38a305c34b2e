"""
Goodness-of-fit statistics for the final selected model.
"""

import warnings
import numpy as np
import pandas as pd
from typing import List, Optional, Tuple
from dataclasses import dataclass, fields

from ..exceptions import DegenerateStatisticsWarning
from .standardize import NO_INTERCEPT


@dataclass
class ModelStatistics:
    """Named descriptive statistics, in report order."""
    AVG_TOT_Y: float
    STDEV_TOT_Y: float
    AVG_RES_Y: float
    STDEV_RES_Y: float
    DISPERSION: float
    PLAIN_R2: float
    ADJUSTED_R2: float
    PLAIN_R2_NOBIAS: float
    ADJUSTED_R2_NOBIAS: float
    PLAIN_R2_VS_0: Optional[float] = None     # intercept mode 0 only
    ADJUSTED_R2_VS_0: Optional[float] = None  # intercept mode 0 only

    def items(self) -> List[Tuple[str, float]]:
        """Ordered (name, value) pairs; the _VS_0 pair only when computed."""
        pairs = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            pairs.append((f.name, value))
        return pairs

    def to_series(self) -> pd.Series:
        names, values = zip(*self.items())
        return pd.Series(values, index=list(names), name='value', dtype=np.float64)


def _degenerate(name: str, reason: str) -> float:
    warnings.warn(
        f"{name} set to NaN: {reason}",
        DegenerateStatisticsWarning,
        stacklevel=3
    )
    return np.nan


def compute_statistics(
    y: np.ndarray,
    residuals: np.ndarray,
    n_features: int,
    intercept: int,
) -> ModelStatistics:
    """
    Compute the descriptive statistics of a fitted model.

    Parameters
    ----------
    y : ndarray, shape (n,)
        Response vector
    residuals : ndarray, shape (n,)
        y minus fitted values
    n_features : int
        Number of selected feature columns, intercept excluded (m)
    intercept : int
        Intercept mode (0, 1 or 2)

    Returns
    -------
    ModelStatistics
        Undefined statistics are NaN and trigger DegenerateStatisticsWarning.
    """
    n = y.shape[0]
    m = n_features
    m_ext = m + (0 if intercept == NO_INTERCEPT else 1)

    avg_tot = np.sum(y) / n
    ss_tot = np.sum(y ** 2)
    ss_avg_tot = ss_tot - n * avg_tot ** 2
    var_tot = ss_avg_tot / (n - 1) if n > 1 else np.nan

    avg_res = np.sum(residuals) / n
    ss_res = np.sum(residuals ** 2)
    ss_avg_res = ss_res - n * avg_res ** 2

    if n > 1:
        stdev_tot = np.sqrt(var_tot)
    else:
        stdev_tot = _degenerate('STDEV_TOT_Y', 'fewer than 2 observations')

    deg_freedom = n - m - 1
    if deg_freedom > 0:
        var_res = ss_avg_res / deg_freedom
        stdev_res = np.sqrt(var_res)
    else:
        var_res = np.nan
        stdev_res = _degenerate('STDEV_RES_Y', f'n - m - 1 = {deg_freedom} <= 0')

    if n > m_ext:
        dispersion = ss_res / (n - m_ext)
    else:
        dispersion = _degenerate('DISPERSION', f'n = {n} <= {m_ext} model columns')

    if ss_avg_tot > 0:
        plain_r2 = 1 - ss_res / ss_avg_tot
        plain_r2_nobias = 1 - ss_avg_res / ss_avg_tot
    else:
        plain_r2 = _degenerate('PLAIN_R2', 'response has zero variance')
        plain_r2_nobias = _degenerate('PLAIN_R2_NOBIAS', 'response has zero variance')

    if n > m_ext and ss_avg_tot > 0:
        adjusted_r2 = 1 - dispersion / var_tot
    else:
        adjusted_r2 = _degenerate(
            'ADJUSTED_R2', f'n = {n}, {m_ext} model columns, total SS = {ss_avg_tot:g}'
        )

    if deg_freedom > 0 and ss_avg_tot > 0:
        adjusted_r2_nobias = 1 - var_res / var_tot
    else:
        adjusted_r2_nobias = _degenerate(
            'ADJUSTED_R2_NOBIAS', f'n - m - 1 = {deg_freedom}, total SS = {ss_avg_tot:g}'
        )

    stats = ModelStatistics(
        AVG_TOT_Y=float(avg_tot),
        STDEV_TOT_Y=float(stdev_tot),
        AVG_RES_Y=float(avg_res),
        STDEV_RES_Y=float(stdev_res),
        DISPERSION=float(dispersion),
        PLAIN_R2=float(plain_r2),
        ADJUSTED_R2=float(adjusted_r2),
        PLAIN_R2_NOBIAS=float(plain_r2_nobias),
        ADJUSTED_R2_NOBIAS=float(adjusted_r2_nobias),
    )

    if intercept == NO_INTERCEPT:
        if ss_tot > 0:
            stats.PLAIN_R2_VS_0 = float(1 - ss_res / ss_tot)
        else:
            stats.PLAIN_R2_VS_0 = _degenerate('PLAIN_R2_VS_0', 'response is all zeros')
        if n > m and ss_tot > 0:
            stats.ADJUSTED_R2_VS_0 = float(1 - (ss_res / (n - m)) / (ss_tot / n))
        else:
            stats.ADJUSTED_R2_VS_0 = _degenerate(
                'ADJUSTED_R2_VS_0', f'n = {n} <= {m} features'
            )

    return stats

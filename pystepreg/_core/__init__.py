"""
Core algorithms (backend-agnostic).
"""

from .engine import FittedModel, RegressionEngine, akaike
from .statistics import ModelStatistics, compute_statistics
from .standardize import INTERCEPT_MODES

__all__ = [
    "FittedModel",
    "RegressionEngine",
    "akaike",
    "ModelStatistics",
    "compute_statistics",
    "INTERCEPT_MODES",
]

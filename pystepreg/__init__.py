"""
PyStepReg: forward stepwise linear regression by AIC.

Copyright (C) 2024 SGCX
Licensed under GPL-3.0
"""

__version__ = "1.0.0"

# Import main user-facing API
from .steplm import steplm, StepwiseLinearModel
from .selection import (
    FeatureSelectionController,
    SelectionConfig,
    SelectionResult,
    SelectionState,
    forward_selection,
)
from .reporter import StatisticsReporter, ReportSink, FrameSink, CSVSink
from .exceptions import (
    StepRegError,
    ConfigurationError,
    DimensionMismatchError,
    SingularSystemError,
    DegenerateStatisticsWarning,
)

# Import backend utilities (for advanced users)
from ._backends import get_backend, list_available_backends

__all__ = [
    'steplm',
    'StepwiseLinearModel',
    'FeatureSelectionController',
    'SelectionConfig',
    'SelectionResult',
    'SelectionState',
    'forward_selection',
    'StatisticsReporter',
    'ReportSink',
    'FrameSink',
    'CSVSink',
    'StepRegError',
    'ConfigurationError',
    'DimensionMismatchError',
    'SingularSystemError',
    'DegenerateStatisticsWarning',
    'get_backend',
    'list_available_backends',
]

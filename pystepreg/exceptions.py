"""
Exceptions and warnings raised by stepwise regression.
"""


class StepRegError(Exception):
    """Base class for all pystepreg errors."""
    pass


class ConfigurationError(StepRegError, ValueError):
    """Invalid selection settings (strategy, intercept mode, threshold)."""
    pass


class DimensionMismatchError(StepRegError, ValueError):
    """Design matrix and response do not line up."""
    pass


class SingularSystemError(StepRegError, RuntimeError):
    """
    Normal equations could not be solved for a feature subset.

    Attributes
    ----------
    features : tuple of int
        1-based column indices of the offending subset (selection order)
    intercept : int
        Intercept mode used for the failed fit
    """

    def __init__(self, message, features=(), intercept=0):
        super().__init__(message)
        self.features = tuple(features)
        self.intercept = intercept

    def __reduce__(self):
        # Keep attributes when re-raised from a process-based worker
        return (self.__class__, (str(self), self.features, self.intercept))


class DegenerateStatisticsWarning(UserWarning):
    """A statistic was replaced by NaN for lack of degrees of freedom."""
    pass


__all__ = [
    "StepRegError",
    "ConfigurationError",
    "DimensionMismatchError",
    "SingularSystemError",
    "DegenerateStatisticsWarning",
]

"""
Stepwise linear regression with an lm()-style interface and output.

This is the user-facing API.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Union

from .selection import FeatureSelectionController, SelectionConfig
from .reporter import FrameSink, ReportSink, StatisticsReporter


class StepwiseLinearModel:
    """
    Forward-select features by AIC and fit the final linear model.

    Examples
    --------
    >>> import pandas as pd
    >>> from pystepreg import steplm
    >>>
    >>> data = pd.read_csv('trial_data.csv')
    >>> model = steplm(data[['age', 'dose', 'baseline_sbp']], data['sbp_change'],
    ...                intercept=1)
    >>>
    >>> model.summary()          # Selected features and fit statistics
    >>> model.selected           # 1-based columns, in selection order
    >>> model.coef               # Coefficients over all original columns
    >>> model.predict(new_data)  # Predictions
    """

    def __init__(
        self,
        X: Union[np.ndarray, pd.DataFrame],
        y: Union[np.ndarray, pd.Series],
        intercept: int = 0,
        threshold: float = 0.01,
        direction: str = 'forward',
        n_jobs: int = -1,
        backend: str = 'auto',
        verbose: bool = False
    ):
        """
        Run forward selection and fit the selected model.

        Parameters
        ----------
        X : DataFrame or array, shape (n, m)
            Candidate predictors (no intercept column)
        y : Series or array, shape (n,) or (n, 1)
            Response variable
        intercept : int
            0 = no intercept, 1 = add intercept,
            2 = add intercept and standardize predictors
        threshold : float
            Relative AIC improvement required to accept a feature
        direction : str
            Selection strategy; only 'forward' is supported
        n_jobs : int
            Workers used to score candidate features (-1 = all cores)
        backend : str
            Computational backend: 'auto', 'cpu'
        verbose : bool
            Print the AIC of every accepted round
        """
        # Validate settings before touching the data
        self.config = SelectionConfig(
            intercept=intercept,
            threshold=threshold,
            direction=direction,
            n_jobs=n_jobs,
            backend=backend,
            verbose=verbose,
        )

        if isinstance(X, pd.DataFrame):
            self.X_names = [str(c) for c in X.columns]
            X_values = X.values
        else:
            X_values = np.asarray(X)
            n_cols = X_values.shape[1] if X_values.ndim == 2 else 0
            self.X_names = [f'x{i}' for i in range(1, n_cols + 1)]

        self.y_name = 'y'
        if isinstance(y, pd.Series):
            if y.name is not None:
                self.y_name = str(y.name)
            y_values = y.values
        else:
            y_values = np.asarray(y)

        self.controller = FeatureSelectionController(X_values, y_values, self.config)
        self.result = self.controller.run()
        self.reporter = StatisticsReporter(self.result)

        self.n_obs = self.controller.n_obs
        self.n_features = self.controller.n_features
        self.backend = self.controller.engine.backend

    @property
    def selected(self) -> List[int]:
        """Selected 1-based columns in selection order, or [0] if none."""
        return self.reporter.selected_output()

    @property
    def selected_names(self) -> List[str]:
        return [self.X_names[j - 1] for j in self.result.selected]

    @property
    def var_names(self) -> List[str]:
        if self.config.intercept:
            return self.X_names + ['Intercept']
        return list(self.X_names)

    @property
    def coef(self) -> Union[pd.Series, pd.DataFrame]:
        """
        Coefficients over all original columns (pandas).

        A Series, or with standardization a DataFrame with columns
        'coef' (original X scale) and 'coef_scaled'.
        """
        beta = self.reporter.coefficients()
        if beta.shape[1] == 2:
            return pd.DataFrame(beta, index=self.var_names, columns=['coef', 'coef_scaled'])
        return pd.Series(beta[:, 0], index=self.var_names, name='coef')

    @property
    def statistics(self) -> Optional[pd.Series]:
        """Fit statistics of the final model, or None if nothing was selected."""
        if self.result.statistics is None:
            return None
        return self.result.statistics.to_series()

    @property
    def aic(self) -> float:
        return self.result.aic

    @property
    def aic_history(self) -> List[float]:
        return list(self.result.aic_history)

    @property
    def residuals(self) -> np.ndarray:
        return self.result.model.residuals

    def predict(self, newdata: Union[pd.DataFrame, np.ndarray]) -> np.ndarray:
        """
        Predict response for new data.

        Parameters
        ----------
        newdata : DataFrame or array
            All original predictor columns
            - If DataFrame: must have columns matching self.X_names
            - If array: must have the same number of columns as X

        Returns
        -------
        array
            Predicted values
        """
        if isinstance(newdata, pd.DataFrame):
            X_new = newdata[self.X_names].values
        else:
            X_new = np.asarray(newdata)
        return self.reporter.predict(X_new)

    def report(self, sink: Optional[ReportSink] = None) -> ReportSink:
        """Emit selected features, coefficients and statistics to a sink."""
        return self.reporter.emit(sink if sink is not None else FrameSink())

    def summary(self):
        """Print a summary of the selection and the final fit."""
        print()
        print("="*80)
        print("STEPWISE LINEAR REGRESSION RESULTS")
        print("="*80)
        print()

        print(f"Dependent variable: {self.y_name}")
        print(f"Number of observations: {self.n_obs}")
        print(f"Candidate features: {self.n_features}")
        print(f"Intercept mode: {self.config.intercept}")
        print(f"Threshold: {self.config.threshold}")
        print()

        print("Selection path:")
        print("-"*80)
        print(f"{'Step':<6} {'Feature':<30} {'AIC':>16}")
        print("-"*80)
        print(f"{0:<6} {'(none)':<30} {self.result.aic_history[0]:>16.4f}")
        for step, (j, aic) in enumerate(zip(self.result.selected, self.result.aic_history[1:]), 1):
            print(f"{step:<6} {self.X_names[j - 1]:<30} {aic:>16.4f}")
        print("-"*80)
        print()

        print("Coefficients:")
        print("-"*80)
        coef = self.coef
        if isinstance(coef, pd.DataFrame):
            print(f"{'Variable':<30} {'Estimate':>14} {'Standardized':>14}")
            for name, row in coef.iterrows():
                print(f"{name:<30} {row['coef']:>14.6f} {row['coef_scaled']:>14.6f}")
        else:
            print(f"{'Variable':<30} {'Estimate':>14}")
            for name, value in coef.items():
                print(f"{name:<30} {value:>14.6f}")
        print("-"*80)
        print()

        if self.result.statistics is None:
            print("No features selected; no fit statistics.")
        else:
            print("Fit statistics:")
            for name, value in self.result.statistics.items():
                print(f"  {name:<22} {value:>14.6f}")

        print()
        print(f"Backend: {self.backend.name}")
        print("="*80)
        print()

    def __repr__(self):
        return (f"StepwiseLinearModel(n={self.n_obs}, selected={self.selected}, "
                f"AIC={self.aic:.3f})")


def steplm(X, y, **kwargs):
    """
    Forward stepwise linear regression (convenience function).

    Parameters
    ----------
    X : DataFrame or array
        Candidate predictors
    y : Series or array
        Response
    **kwargs
        Additional arguments passed to StepwiseLinearModel

    Returns
    -------
    StepwiseLinearModel
        Fitted model object

    Examples
    --------
    >>> model = steplm(X, y, intercept=2, threshold=0.001)
    >>> model.selected
    [3, 1]
    >>> model.statistics['ADJUSTED_R2']
    """
    return StepwiseLinearModel(X=X, y=y, **kwargs)

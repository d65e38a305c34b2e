"""
Test the regression engine: AIC, intercept modes and standardization.
"""

import pytest
import numpy as np

from pystepreg._backends import get_backend
from pystepreg._core import RegressionEngine, akaike
from pystepreg._core.standardize import (
    add_intercept,
    column_scaling,
    scale_normal_equations,
    unscale_coefficients,
)
from pystepreg.exceptions import SingularSystemError


TOL = 1e-8


def make_engine(X, y, intercept):
    return RegressionEngine(
        np.asarray(X, dtype=np.float64),
        np.asarray(y, dtype=np.float64),
        intercept,
        get_backend('cpu'),
    )


@pytest.fixture
def regression_data():
    np.random.seed(42)
    n = 60
    X = np.column_stack([
        np.random.randn(n) * 5 + 10,
        np.random.randn(n) * 0.2 - 3,
        np.random.randn(n),
    ])
    y = 2.0 + 0.5 * X[:, 0] - 4.0 * X[:, 1] + 0.3 * np.random.randn(n)
    return X, y


class TestAIC:
    """AIC formula and baseline models."""

    def test_akaike_formula(self):
        assert akaike(2.0, 10, 3) == pytest.approx(6 + 10 * np.log(0.2))

    def test_akaike_perfect_fit(self):
        assert akaike(0.0, 5, 2) == -np.inf

    def test_baseline_no_intercept(self):
        y = np.array([1.0, -2.0, 3.0, 0.5])
        engine = make_engine(np.ones((4, 1)), y, intercept=0)

        model = engine.baseline()

        assert model.aic == pytest.approx(4 * np.log(np.sum(y ** 2) / 4), rel=1e-12)
        assert model.beta.shape == (0,)
        assert model.n_params == 0
        np.testing.assert_array_equal(model.residuals, y)

    @pytest.mark.parametrize("intercept", [1, 2])
    def test_baseline_with_intercept(self, intercept):
        y = np.array([1.0, -2.0, 3.0, 0.5])
        engine = make_engine(np.ones((4, 1)), y, intercept=intercept)

        model = engine.baseline()

        expected = 2 + 4 * np.log(np.sum((y.mean() - y) ** 2) / 4)
        assert model.aic == pytest.approx(expected, rel=1e-12)
        assert model.coef[-1] == pytest.approx(y.mean())
        assert model.n_params == 1

    def test_fit_aic_matches_formula(self):
        X = np.array([[1, 0], [2, 0], [3, 0], [4, 1]], dtype=float)
        y = np.array([1, 2, 3, 5], dtype=float)
        engine = make_engine(X, y, intercept=0)

        aic, model, stats = engine.fit([1])

        # beta = 34/30, RSS = 39 - 34^2/30 = 7/15
        assert model.coef[0] == pytest.approx(34 / 30, rel=1e-12)
        assert model.rss == pytest.approx(7 / 15, rel=1e-10)
        assert aic == pytest.approx(2 + 4 * np.log(7 / 60), rel=1e-10)
        assert stats is None

    def test_aic_shortcut(self, regression_data):
        X, y = regression_data
        engine = make_engine(X, y, intercept=1)
        assert engine.aic([2, 1]) == engine.fit([2, 1])[0]


class TestFit:
    """Coefficients against least squares in every intercept mode."""

    def test_no_intercept_matches_lstsq(self, regression_data):
        X, y = regression_data
        engine = make_engine(X, y, intercept=0)

        _, model, _ = engine.fit([3, 1])

        expected = np.linalg.lstsq(X[:, [2, 0]], y, rcond=None)[0]
        np.testing.assert_allclose(model.coef, expected, rtol=TOL)
        assert model.n_params == 2

    def test_intercept_is_last(self, regression_data):
        X, y = regression_data
        engine = make_engine(X, y, intercept=1)

        _, model, _ = engine.fit([2, 1])

        design = np.column_stack([X[:, 1], X[:, 0], np.ones(len(y))])
        expected = np.linalg.lstsq(design, y, rcond=None)[0]
        np.testing.assert_allclose(model.coef, expected, rtol=TOL)
        assert model.coef[-1] == pytest.approx(2.0, abs=0.5)
        assert model.n_params == 3

    def test_residuals_and_rss(self, regression_data):
        X, y = regression_data
        engine = make_engine(X, y, intercept=1)

        _, model, _ = engine.fit([1, 2])

        fitted = X[:, :2] @ model.coef[:2] + model.coef[2]
        np.testing.assert_allclose(model.residuals, y - fitted, atol=1e-10)
        assert model.rss == pytest.approx(np.sum((y - fitted) ** 2), rel=1e-10)

    def test_features_keep_selection_order(self, regression_data):
        X, y = regression_data
        engine = make_engine(X, y, intercept=0)
        _, model, _ = engine.fit([3, 1, 2])
        assert model.features == (3, 1, 2)


class TestStandardization:
    """Intercept mode 2: implicit standardization of the normal equations."""

    def test_same_fit_as_plain_intercept(self, regression_data):
        """OLS with an intercept is invariant to column standardization."""
        X, y = regression_data
        aic1, plain, _ = make_engine(X, y, intercept=1).fit([1, 2, 3])
        aic2, scaled, _ = make_engine(X, y, intercept=2).fit([1, 2, 3])

        assert scaled.beta.shape == (4, 2)
        np.testing.assert_allclose(scaled.coef, plain.coef, rtol=TOL)
        assert aic2 == pytest.approx(aic1, rel=TOL)

    def test_standardized_coefficients(self, regression_data):
        """Column 2 equals a fit on explicitly standardized predictors."""
        X, y = regression_data
        _, model, _ = make_engine(X, y, intercept=2).fit([1, 2, 3])

        Z = (X - X.mean(axis=0)) / X.std(axis=0, ddof=1)
        design = np.column_stack([Z, np.ones(len(y))])
        expected = np.linalg.lstsq(design, y, rcond=None)[0]
        np.testing.assert_allclose(model.coef_scaled, expected, rtol=TOL)

    def test_inverse_transform_round_trip(self, regression_data):
        X, y = regression_data
        _, model, _ = make_engine(X, y, intercept=2).fit([2, 3])

        scaling = column_scaling(add_intercept(X[:, [1, 2]], 2))
        recovered = unscale_coefficients(model.coef_scaled.copy(), scaling)
        np.testing.assert_allclose(recovered, model.coef, rtol=TOL)

    def test_transformed_normal_equations(self, regression_data):
        """T'AT and T'b equal X_std'X_std and X_std'y."""
        X, y = regression_data
        X_ext = add_intercept(X, 2)
        scaling = column_scaling(X_ext)

        A_std, b_std = scale_normal_equations(X_ext.T @ X_ext, X_ext.T @ y, scaling)

        X_std = X_ext * scaling.scale + scaling.shift
        np.testing.assert_allclose(A_std, X_std.T @ X_std, rtol=1e-8, atol=1e-8)
        np.testing.assert_allclose(b_std, X_std.T @ y, rtol=1e-8, atol=1e-8)

    def test_constant_column_is_unsafe(self):
        X_ext = add_intercept(np.column_stack([np.full(5, 3.0), np.arange(5.0)]), 2)

        scaling = column_scaling(X_ext)

        assert scaling.unsafe[0]
        assert scaling.scale[0] == 1.0
        assert scaling.shift[0] == -3.0
        assert scaling.scale[-1] == 1.0
        assert scaling.shift[-1] == 0.0
        assert scaling.scale[1] == pytest.approx(1 / np.std(np.arange(5.0), ddof=1))

    def test_baseline_has_two_columns(self):
        y = np.array([1.0, 2.0, 4.0])
        model = make_engine(np.ones((3, 1)), y, intercept=2).baseline()
        assert model.beta.shape == (1, 2)
        np.testing.assert_allclose(model.beta[0], [y.mean(), y.mean()])


class TestSingular:
    """Solver failures identify the offending subset."""

    def test_duplicate_columns(self, regression_data):
        X, y = regression_data
        X = np.column_stack([X[:, 0], X[:, 0]])
        engine = make_engine(X, y, intercept=0)

        with pytest.raises(SingularSystemError) as excinfo:
            engine.fit([2, 1])

        assert excinfo.value.features == (2, 1)
        assert excinfo.value.intercept == 0
        assert "[2, 1]" in str(excinfo.value)

    def test_zero_column_without_intercept(self):
        X = np.column_stack([np.arange(1.0, 7.0), np.zeros(6)])
        engine = make_engine(X, np.arange(6.0), intercept=0)

        with pytest.raises(SingularSystemError):
            engine.fit([2])

"""
Test the user-facing stepwise regression API.
"""

import pytest
import numpy as np
import pandas as pd

from pystepreg import (
    ConfigurationError,
    DimensionMismatchError,
    FrameSink,
    StepwiseLinearModel,
    steplm,
)


@pytest.fixture
def trial_data():
    np.random.seed(42)
    n = 150
    data = pd.DataFrame({
        'age': np.random.uniform(20, 80, n),
        'dose': np.random.choice([0.0, 5.0, 10.0], n),
        'weight': np.random.normal(75, 12, n),
        'noise': np.random.randn(n),
    })
    data['sbp_change'] = (
        -8.0 - 1.2 * data['dose'] + 0.15 * data['age'] + 0.05 * np.random.randn(n)
    )
    return data


FEATURES = ['age', 'dose', 'weight', 'noise']


class TestStepwiseLinearModel:

    def test_dataframe_names(self, trial_data):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=1)

        assert model.selected == [2, 1]
        assert model.selected_names == ['dose', 'age']
        assert model.y_name == 'sbp_change'
        assert list(model.coef.index) == FEATURES + ['Intercept']
        assert model.coef['dose'] == pytest.approx(-1.2, abs=0.05)
        assert model.coef['weight'] == 0.0
        assert model.coef['Intercept'] == pytest.approx(-8.0, abs=0.5)

    def test_standardized_coef_frame(self, trial_data):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=2)

        coef = model.coef
        assert isinstance(coef, pd.DataFrame)
        assert list(coef.columns) == ['coef', 'coef_scaled']
        assert coef.loc['dose', 'coef'] == pytest.approx(-1.2, abs=0.05)

    def test_array_input(self, trial_data):
        X = trial_data[FEATURES].values
        y = trial_data['sbp_change'].values

        model = StepwiseLinearModel(X, y, intercept=1, n_jobs=1)

        assert model.X_names == ['x1', 'x2', 'x3', 'x4']
        assert model.selected_names == ['x2', 'x1']
        assert isinstance(model.coef, pd.Series)

    def test_predict(self, trial_data):
        X = trial_data[FEATURES]
        model = steplm(X, trial_data['sbp_change'], intercept=1)

        predictions = model.predict(X)

        np.testing.assert_allclose(
            predictions, trial_data['sbp_change'].values - model.residuals, atol=1e-8
        )
        np.testing.assert_allclose(model.predict(X.values), predictions)

    def test_statistics(self, trial_data):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=1)

        stats = model.statistics
        assert stats['PLAIN_R2'] > 0.9
        assert stats['AVG_TOT_Y'] == pytest.approx(trial_data['sbp_change'].mean())
        assert 'PLAIN_R2_VS_0' not in stats.index

    def test_aic(self, trial_data):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=1)
        assert model.aic == model.aic_history[-1]
        assert len(model.aic_history) == len(model.selected) + 1

    def test_nothing_selected(self, trial_data):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'],
                       intercept=1, threshold=100.0)

        assert model.selected == [0]
        assert model.selected_names == []
        assert model.statistics is None
        assert model.coef['Intercept'] == pytest.approx(trial_data['sbp_change'].mean())

    def test_report(self, trial_data):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=1)
        sink = model.report()
        assert isinstance(sink, FrameSink)
        assert list(sink.selected) == model.selected

    def test_summary(self, trial_data, capsys):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=2)
        model.summary()
        out = capsys.readouterr().out

        assert 'STEPWISE LINEAR REGRESSION RESULTS' in out
        assert 'dose' in out
        assert 'ADJUSTED_R2' in out
        assert 'cpu_fp64' in out

    def test_repr(self, trial_data):
        model = steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=1)
        assert repr(model).startswith('StepwiseLinearModel(n=150, selected=[2, 1]')


class TestErrors:

    def test_bad_direction(self, trial_data):
        with pytest.raises(ConfigurationError):
            steplm(trial_data[FEATURES], trial_data['sbp_change'], direction='backward')

    def test_bad_intercept(self, trial_data):
        with pytest.raises(ConfigurationError):
            steplm(trial_data[FEATURES], trial_data['sbp_change'], intercept=4)

    def test_row_mismatch(self, trial_data):
        with pytest.raises(DimensionMismatchError):
            steplm(trial_data[FEATURES], trial_data['sbp_change'].values[:-1])

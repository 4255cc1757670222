"""
Tests for panel loading, validation and differencing.
"""

import numpy as np
import pandas as pd
import pytest

from macrovar.errors import DataQualityError, PipelineError
from macrovar.utils.data_handling import (
    CANADA_COLUMNS,
    difference,
    load_canada,
    table_print,
    validate_panel,
)


class TestLoadCanada:
    """Test the bundled labour market panel."""

    def test_shape_and_columns(self):
        df = load_canada()
        assert df.shape == (84, 4)
        assert list(df.columns) == CANADA_COLUMNS

    def test_quarterly_index(self):
        df = load_canada()
        assert str(df.index[0]) == '1980Q1'
        assert str(df.index[-1]) == '2000Q4'
        assert df.index.is_monotonic_increasing

    def test_values_are_finite(self):
        df = load_canada()
        assert np.isfinite(df.values).all()
        assert (df.dtypes == float).all()


class TestValidatePanel:
    """Test data quality checks."""

    def test_missing_values_raise(self, stationary_panel):
        bad = stationary_panel.copy()
        bad.iloc[3, 1] = np.nan
        with pytest.raises(DataQualityError) as exc:
            validate_panel(bad, stage='data loading')
        assert exc.value.stage == 'data loading'
        assert 'prod' in str(exc.value)

    def test_infinite_values_raise(self, stationary_panel):
        bad = stationary_panel.copy()
        bad.iloc[0, 0] = np.inf
        with pytest.raises(DataQualityError):
            validate_panel(bad)

    def test_non_numeric_values_raise(self, stationary_panel):
        bad = stationary_panel.astype(object)
        bad.iloc[5, 2] = 'n/a'
        with pytest.raises(DataQualityError):
            validate_panel(bad)

    def test_errors_are_value_errors(self):
        assert issubclass(DataQualityError, PipelineError)
        assert issubclass(PipelineError, ValueError)

    def test_array_input_gets_names(self):
        df = validate_panel(np.ones((5, 3)))
        assert list(df.columns) == ['y1', 'y2', 'y3']

    def test_too_short_panel_raises(self):
        with pytest.raises(DataQualityError):
            validate_panel(pd.DataFrame({'a': [1.0]}))


class TestDifference:
    """Test first differencing."""

    def test_loses_one_row(self, integrated_panel):
        out = difference(integrated_panel)
        assert len(out) == len(integrated_panel) - 1

    def test_every_column_differenced(self, integrated_panel):
        out = difference(integrated_panel)
        np.testing.assert_allclose(out.values, np.diff(integrated_panel.values, axis=0))
        assert list(out.columns) == list(integrated_panel.columns)


class TestTablePrint:
    """Test console tables."""

    def test_contains_names_and_values(self):
        df = pd.DataFrame({'pvalue': [0.5, 0.01]}, index=['e', 'U'])
        text = table_print(df, precision=3, title='ADF')
        lines = text.splitlines()
        assert lines[0] == 'ADF'
        assert 'pvalue' in lines[1]
        assert '0.500' in text and '0.010' in text
        assert len(lines) == 5

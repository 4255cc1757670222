"""
Tests for residual diagnostics.
"""

from types import SimpleNamespace

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from macrovar.auxiliary import vech
from macrovar.var.diagnostics import TestResult, arch_test, normality_test, serial_test


class TestSerialTest:
    """Test the portmanteau test."""

    def test_degrees_of_freedom(self, var2_model):
        result = serial_test(var2_model.results, lags=10)
        assert result.df == 16 * (10 - 2)
        assert 0 <= result.pvalue <= 1
        assert result.statistic > 0

    def test_needs_more_lags_than_order(self, var2_model):
        with pytest.raises(ValueError):
            serial_test(var2_model.results, lags=2)


class TestArchTest:
    """Test the multivariate ARCH-LM test."""

    def test_multivariate_only(self, var1_model):
        result = arch_test(var1_model.results, lags=5)
        assert result.df == 5 * 16 * 25 / 4
        assert 0 <= result.pvalue <= 1
        assert result.univariate is None

    def test_with_univariate_tests(self, var1_model):
        result = arch_test(var1_model.results, lags=5, multivariate_only=False)
        assert list(result.univariate.index) == ['e', 'prod', 'rw', 'U']
        assert ((result.univariate['pvalue'] >= 0) & (result.univariate['pvalue'] <= 1)).all()


class TestOtherDiagnostics:
    """Test normality test and verdict helper."""

    def test_normality(self, var1_model):
        result = normality_test(var1_model.results)
        assert result.df == 8
        assert 0 <= result.pvalue <= 1

    def test_reject(self):
        result = TestResult(name='x', statistic=30.0, df=10, pvalue=0.001)
        assert result.reject()
        assert not result.reject(alpha=0.0001)


def _arch_lm_by_hand(u, q):
    """Multivariate ARCH-LM statistic built observation by observation."""
    T, K = u.shape
    z = (u - u.mean(axis=0)) / u.std(axis=0, ddof=1)
    V = []
    for row in z:
        outer = np.outer(row, row)
        V.append([outer[i, j] for j in range(K) for i in range(j, K)])
    V = np.array(V)

    Y = V[q:]
    X = np.array([np.concatenate([[1.0]] + [V[t - j] for j in range(1, q + 1)]) for t in range(q, T)])
    beta = np.linalg.solve(X.T @ X, X.T @ Y)
    e1 = Y - X @ beta
    e0 = Y - Y.mean(axis=0)
    ratio = np.cov(e1, rowvar=False) @ np.linalg.inv(np.cov(e0, rowvar=False))
    r2m = 1 - 2 / (K * (K + 1)) * np.trace(ratio)
    return 0.5 * T * K * (K + 1) * r2m


class TestArchStatistic:
    """Test the ARCH-LM statistic on a fixed residual matrix."""

    def test_matches_direct_computation(self):
        rng = np.random.default_rng(11)
        scale = np.exp(0.5 * np.sin(np.arange(60) / 4.0)).reshape(-1, 1)
        u = rng.standard_normal((60, 2)) * scale
        results = SimpleNamespace(resid=pd.DataFrame(u, columns=['a', 'b']), var_names=['a', 'b'])

        result = arch_test(results, lags=2)
        expected = _arch_lm_by_hand(u, q=2)
        assert result.statistic == pytest.approx(expected, rel=1e-6)
        assert result.df == 2 * 4 * 9 / 4
        assert result.pvalue == pytest.approx(stats.chi2.sf(expected, 18), rel=1e-6)

    def test_vech_ordering(self):
        m = np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 5.0], [3.0, 5.0, 6.0]])
        np.testing.assert_array_equal(vech(m), [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

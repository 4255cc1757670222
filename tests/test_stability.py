"""
Tests for the stability checker.
"""

from types import SimpleNamespace

import numpy as np

from macrovar.var.stability import check_stability, cusum_test, is_stable


class TestStabilityVerdict:
    """Stable iff every root modulus is strictly below one."""

    def test_roots_inside_unit_circle(self):
        assert is_stable(np.array([0.99, 0.5, 0.1]))

    def test_root_on_unit_circle_is_not_stable(self):
        assert not is_stable(np.array([1.0, 0.2]))

    def test_explosive_root(self):
        assert not is_stable(np.array([1.3, 0.2]))

    def test_boundary_companion_matrix(self):
        results = SimpleNamespace(F_comp=np.diag([1.0, 0.5]))
        stability = check_stability(results)
        np.testing.assert_allclose(stability.roots, [1.0, 0.5])
        assert not stability.stable

    def test_complex_roots_use_modulus(self):
        rotation = 0.9 * np.array([[0.0, -1.0], [1.0, 0.0]])
        stability = check_stability(SimpleNamespace(F_comp=rotation))
        np.testing.assert_allclose(stability.roots, [0.9, 0.9])
        assert stability.stable


class TestCheckStability:
    """Test roots of an estimated VAR."""

    def test_roots_sorted_and_sized(self, var2_model):
        stability = check_stability(var2_model.results)
        assert stability.roots.shape == (8,)
        assert np.all(np.diff(stability.roots) <= 0)
        assert stability.max_root == stability.roots[0]

    def test_verdict_agrees_with_roots(self, var2_model):
        stability = check_stability(var2_model.results)
        assert stability.stable == bool(np.all(stability.roots < 1))
        assert stability.stable

    def test_matches_characteristic_polynomial(self, var2_model):
        stability = check_stability(var2_model.results)
        expected = np.sort(1 / np.abs(var2_model.results.fit.roots))[::-1]
        np.testing.assert_allclose(stability.roots, expected, rtol=1e-8)

    def test_cusum_table(self, var1_model):
        table = cusum_test(var1_model.results)
        assert list(table.index) == ['e', 'prod', 'rw', 'U']
        assert ((table['pvalue'] >= 0) & (table['pvalue'] <= 1)).all()

"""
Tests for impulse responses and their error bands.
"""

import numpy as np
import pandas as pd
import pytest

from macrovar.errors import PipelineError
from macrovar.var.impulse_response import ImpulseResponse
from macrovar.var.model import Model
from macrovar.var.options import Options


def _options(**kwargs):
    defaults = dict(shock_var='prod', responses=['e', 'rw', 'U'], nsteps=10, ndraws=20, seed=123)
    defaults.update(kwargs)
    return Options(**defaults)


class TestPointResponses:
    """Test orthogonalised impulse responses."""

    def test_impact_is_cholesky_column(self, var1_model):
        ir = ImpulseResponse(var1_model.results, _options())
        responses = ir.get_impulse_response()
        np.testing.assert_allclose(responses['prod'].loc[0].values, ir.B['prod'].values)
        assert responses['prod'].loc[0, 'e'] == 0.0

    def test_matches_statsmodels(self, var2_model):
        responses = ImpulseResponse(var2_model.results, _options(nsteps=20)).get_impulse_response()
        orth = var2_model.results.fit.irf(20).orth_irfs
        for j, shock in enumerate(var2_model.results.var_names):
            assert responses[shock].shape == (21, 4)
            np.testing.assert_allclose(responses[shock].values, orth[:, :, j], atol=1e-10)

    def test_unit_shock(self, var1_model):
        responses = ImpulseResponse(var1_model.results, _options(impact=1)).get_impulse_response()
        assert responses['rw'].loc[0, 'rw'] == pytest.approx(1.0)

    def test_responses_die_out(self, var1_model):
        responses = ImpulseResponse(var1_model.results, _options(nsteps=60)).get_impulse_response()
        assert responses['prod'].loc[60].abs().max() < 1e-3


class TestBands:
    """Test bootstrap and asymptotic bands."""

    def test_bootstrap_is_reproducible(self, var1_model):
        first = ImpulseResponse(var1_model.results, _options()).get_bands()
        second = ImpulseResponse(var1_model.results, _options()).get_bands()
        for a, b in zip(first, second):
            pd.testing.assert_frame_equal(a, b)

    def test_seed_changes_draws(self, var1_model):
        INF1, *_ = ImpulseResponse(var1_model.results, _options(seed=1)).get_bands()
        INF2, *_ = ImpulseResponse(var1_model.results, _options(seed=2)).get_bands()
        assert not np.allclose(INF1.values, INF2.values)

    def test_band_ordering_and_shape(self, var1_model):
        INF, SUP, MED, BAR = ImpulseResponse(var1_model.results, _options()).get_bands()
        assert INF.shape == (11, 3)
        assert list(INF.columns) == ['e', 'rw', 'U']
        assert (INF.values <= MED.values + 1e-12).all()
        assert (MED.values <= SUP.values + 1e-12).all()

    def test_bands_cover_point_estimate_on_impact(self, var1_model):
        ir = ImpulseResponse(var1_model.results, _options(ndraws=50))
        point = ir.get_impulse_response()['prod']
        INF, SUP, _, _ = ir.get_bands()
        assert INF.loc[1, 'rw'] <= point.loc[1, 'rw'] <= SUP.loc[1, 'rw']

    def test_wild_bootstrap(self, var1_model):
        INF, SUP, _, _ = ImpulseResponse(var1_model.results, _options(method='wild')).get_bands()
        assert (INF.values <= SUP.values).all()

    def test_asymptotic_bands(self, var2_model):
        ir = ImpulseResponse(var2_model.results, _options(method='asymptotic'))
        INF, SUP, MED, BAR = ir.get_bands()
        point = ir.get_impulse_response()['prod'][['e', 'rw', 'U']]
        np.testing.assert_allclose(MED.values, point.values, atol=1e-10)
        assert (SUP.values - INF.values >= 0).all()
        assert (SUP.loc[1:].values - INF.loc[1:].values > 0).all()

    def test_asymptotic_needs_std_shock(self, var1_model):
        with pytest.raises(ValueError):
            ImpulseResponse(var1_model.results, _options(method='asymptotic', impact=1)).get_bands()


class TestErrors:
    """Test invalid requests."""

    def test_unknown_shock(self, var1_model):
        with pytest.raises(ValueError):
            ImpulseResponse(var1_model.results, _options(shock_var='gdp')).get_bands()

    def test_unknown_response(self, var1_model):
        with pytest.raises(ValueError):
            ImpulseResponse(var1_model.results, _options(responses=['gdp'])).get_bands()

    def test_all_draws_failing(self, monkeypatch, var1_model):
        ir = ImpulseResponse(var1_model.results, _options(ndraws=3, max_attempts_mult=2))

        def degenerate(u):
            raise np.linalg.LinAlgError('singular')
        monkeypatch.setattr(ir, '_simulate', degenerate)
        with pytest.raises(PipelineError):
            ir.get_bands()

    def test_unexpected_errors_propagate(self, monkeypatch, var1_model):
        ir = ImpulseResponse(var1_model.results, _options(ndraws=3))

        def broken(u):
            raise ValueError('shape mismatch')
        monkeypatch.setattr(ir, '_simulate', broken)
        with pytest.raises(ValueError) as exc:
            ir.get_bands()
        assert not isinstance(exc.value, PipelineError)


class TestSimulation:
    """Test the artificial samples behind the bootstrap."""

    @pytest.mark.parametrize('const', [1, 2])
    def test_fitted_residuals_rebuild_the_sample(self, stationary_panel, const):
        results = Model(stationary_panel, nlag=2, const=const).results
        ir = ImpulseResponse(results, _options())
        y = ir._simulate(results.resid.values)
        np.testing.assert_allclose(y, results.endo.values, atol=1e-8)

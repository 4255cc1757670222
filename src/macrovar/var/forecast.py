"""
Recursive multi-step forecasts with normal interval bands.

Point forecasts iterate the estimated equations forward, each step feeding
the previous forecasts back as lags. The h-step forecast error covariance is
sum_{s<h} Psi_s Sigma Psi_s', which never shrinks as h grows.
"""

from typing import Dict

import numpy as np
import pandas as pd
from scipy import stats

from ..auxiliary import check_finite
from ..utils.var import VARUtils
from .model import Output


def _deterministic_terms(const: int, t: int) -> list:
    """Constant and trend values at observation t (1-based) of the full sample."""
    return [1.0, t, t**2][:const]


def point_forecast(results: Output, nsteps: int) -> np.ndarray:
    """Iterate the fitted equations nsteps ahead, shape (nsteps, nvar)."""
    nlag = results.nlag
    F = results.F.values
    history = list(results.endo.values[-nlag:])

    out = np.zeros((nsteps, results.nvar))
    for h in range(nsteps):
        # most recent lag first: [y_{T+h-1}, y_{T+h-2}, ...]
        lags = np.concatenate(history[::-1][:nlag])
        X = np.hstack([_deterministic_terms(results.const, results.nlag + results.nobs + h + 1), lags])
        out[h] = X @ F
        history.append(out[h])
    return out


def forecast_mse(results: Output, nsteps: int) -> np.ndarray:
    """Forecast error covariance matrices for horizons 1..nsteps, shape (nsteps, nvar, nvar)."""
    PSI = VARUtils.compute_wold_matrices(VARUtils.get_lag_coefs_matrices(results.F), nsteps)
    sigma = results.sigma.values
    return np.cumsum(PSI @ sigma @ PSI.transpose(0, 2, 1), axis=0)


def forecast(results: Output, nsteps: int = 8, pctg: float = 95) -> Dict[str, pd.DataFrame]:
    """Point forecasts and pctg% intervals for every variable.

    Args:
        results: Estimated VAR
        nsteps: Forecast horizon
        pctg: Confidence level of the intervals

    Returns:
        Dict variable -> DataFrame (rows horizon 1..nsteps, columns fcst, lower,
        upper, ci where ci is the half-width)
    """
    if nsteps < 1:
        raise ValueError('nsteps must be a positive integer')

    fcst = point_forecast(results, nsteps)
    se = np.sqrt(np.diagonal(forecast_mse(results, nsteps), axis1=1, axis2=2))
    z = stats.norm.ppf(1 - (100 - pctg) / 200)
    check_finite(fcst, stage='forecast', what='forecasts')
    check_finite(se, stage='forecast', what='standard errors')

    horizons = pd.RangeIndex(start=1, stop=nsteps + 1, name='horizon')
    out = {}
    for i, var in enumerate(results.var_names):
        ci = z * se[:, i]
        out[var] = pd.DataFrame({
            'fcst': fcst[:, i],
            'lower': fcst[:, i] - ci,
            'upper': fcst[:, i] + ci,
            'ci': ci,
        }, index=horizons)
    return out

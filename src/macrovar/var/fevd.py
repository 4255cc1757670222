"""
Forecast error variance decomposition (FEVD).

Shares are built from the orthogonalised moving-average coefficients
Theta_s = Psi_s B, with B the Cholesky factor of the residual covariance.
"""

from typing import Dict

import numpy as np
import pandas as pd

from ..errors import DataQualityError
from ..utils.var import VARUtils
from .model import Output

FEVD_TOL = 1e-6


def fevd(results: Output, nsteps: int = 8) -> Dict[str, pd.DataFrame]:
    """Share of each shock in each variable's h-step forecast error variance.

    Args:
        results: Estimated VAR
        nsteps: Number of horizons H

    Returns:
        Dict variable -> DataFrame (rows horizon 1..H, columns shocks)
    """
    if nsteps < 1:
        raise ValueError('nsteps must be a positive integer')

    Fp = VARUtils.get_lag_coefs_matrices(results.F)
    PSI = VARUtils.compute_wold_matrices(Fp, nsteps)
    B = VARUtils.get_cholesky_identification_short(results.sigma).values

    theta = PSI @ B                            # (nsteps, response, shock)
    mse_parts = np.cumsum(theta ** 2, axis=0)  # contributions up to each horizon
    shares = mse_parts / mse_parts.sum(axis=2, keepdims=True)

    if not np.all(np.isfinite(shares)) or not np.allclose(shares.sum(axis=2), 1.0, atol=FEVD_TOL):
        raise DataQualityError('variance shares do not sum to one', stage='variance decomposition')

    horizons = pd.RangeIndex(start=1, stop=nsteps + 1, name='horizon')
    return {
        var: pd.DataFrame(shares[:, i, :], index=horizons, columns=pd.Index(results.var_names, name='shock'))
        for i, var in enumerate(results.var_names)
    }

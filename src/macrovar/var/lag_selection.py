"""
Lag order selection by information criteria.

Every candidate lag is fitted on the same effective sample (the observations
left after dropping lag_max initial values), so the criteria are comparable.
"""

from dataclasses import dataclass, field
from typing import Dict

import numpy as np
import pandas as pd
from statsmodels.tsa.api import VAR

from ..auxiliary import check_finite, trimr
from ..errors import InsufficientSampleError
from ..utils.data_handling import validate_panel
from ..utils.var import VARUtils
from .options import VALID_IC


@dataclass
class LagSelection:
    """Outcome of the lag scan."""
    lag: int                     # lag chosen by `ic`
    ic: str
    lag_max: int
    scores: pd.DataFrame         # rows lag 1..lag_max, columns aic/hqic/bic/fpe
    selection: Dict[str, int] = field(default_factory=dict)  # best lag per criterion


def information_criteria(data: np.ndarray, lag: int, lag_max: int, const: int = 1) -> Dict[str, float]:
    """Fit VAR(lag) on the common sample and return its information criteria."""
    sample = trimr(data, lag_max - lag, 0)
    fit = VAR(sample).fit(lag, trend=VARUtils.get_trend_order(const))
    return {name: float(fit.info_criteria[name]) for name in VALID_IC}


def select_lag(data: pd.DataFrame, lag_max: int = 10, ic: str = 'aic', const: int = 1) -> LagSelection:
    """Pick the lag in 1..lag_max minimising the information criterion `ic`.

    Args:
        data: Stationary panel (nobs x nvar)
        lag_max: Largest lag considered
        ic: 'aic', 'hqic', 'bic' or 'fpe'
        const: Type of deterministic terms (see VARUtils.get_trend_order)

    Returns:
        LagSelection with the chosen lag and all scores
    """
    if ic not in VALID_IC:
        raise ValueError(f'ic must be one of {VALID_IC}, got {ic!r}')
    if int(lag_max) < 1:
        raise ValueError(f'lag_max must be a positive integer, got {lag_max}')
    lag_max = int(lag_max)

    data = validate_panel(data, stage='lag selection')
    nobs, nvar = data.shape
    nobse = nobs - lag_max
    nregressors = nvar * lag_max + const
    if nobse <= nregressors:
        raise InsufficientSampleError(
            f'lag_max={lag_max} leaves {max(nobse, 0)} observations for up to '
            f'{nregressors} regressors per equation; lower lag_max or supply more data',
            stage='lag selection'
        )

    values = data.values
    scores = pd.DataFrame.from_dict(
        {lag: information_criteria(values, lag, lag_max, const) for lag in range(1, lag_max + 1)},
        orient='index'
    )
    scores.index.name = 'lag'
    check_finite(scores, stage='lag selection', what='information criteria')

    # idxmin keeps the first (smallest) lag on ties
    selection = {name: int(scores[name].idxmin()) for name in VALID_IC}
    return LagSelection(lag=selection[ic], ic=ic, lag_max=lag_max, scores=scores, selection=selection)

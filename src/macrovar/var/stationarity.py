"""
Unit-root testing and the differencing policy applied before estimation.

Every column is tested with an augmented Dickey-Fuller regression. If any
column fails to reject the unit root, the whole panel is differenced once.
The panel is never re-tested after differencing.
"""

from typing import Optional, Tuple

import numpy as np
import pandas as pd
from statsmodels.tsa.stattools import adfuller

from ..utils.data_handling import difference, validate_panel


def default_adf_lag(nobs: int) -> int:
    """Lag order trunc((n - 1)^(1/3)) used when none is given."""
    return int(np.trunc((nobs - 1) ** (1 / 3)))


def adf_test(series: pd.Series, regression: str = 'ct', maxlag: Optional[int] = None) -> dict:
    """Augmented Dickey-Fuller test with a fixed lag order (null: unit root).

    Args:
        series: One column of the panel
        regression: Deterministic terms, 'c' constant or 'ct' constant and trend
        maxlag: Lagged differences in the test regression

    Returns:
        Dictionary with statistic, pvalue, usedlag and nobs
    """
    x = np.asarray(series, dtype=float)
    if maxlag is None:
        maxlag = default_adf_lag(len(x))
    stat, pvalue, usedlag, nobs, _ = adfuller(x, maxlag=maxlag, regression=regression, autolag=None)
    return {
        'statistic': float(stat),
        'pvalue': float(np.clip(pvalue, 0.0, 1.0)),
        'usedlag': int(usedlag),
        'nobs': int(nobs),
    }


def adf_pvalue(series: pd.Series, regression: str = 'ct', maxlag: Optional[int] = None) -> float:
    return adf_test(series, regression=regression, maxlag=maxlag)['pvalue']


def unit_root_table(data: pd.DataFrame, alpha: float = 0.05,
                    regression: str = 'ct', maxlag: Optional[int] = None) -> pd.DataFrame:
    """Run the ADF test on every column.

    Returns:
        DataFrame indexed by column name with statistic, pvalue, usedlag,
        nobs and nonstationary (pvalue > alpha)
    """
    data = validate_panel(data, stage='stationarity test')
    table = pd.DataFrame(
        {col: adf_test(data[col], regression=regression, maxlag=maxlag) for col in data.columns}
    ).T
    table = table.astype({'statistic': float, 'pvalue': float, 'usedlag': int, 'nobs': int})
    table['nonstationary'] = table['pvalue'] > alpha
    table.index.name = 'variable'
    return table


def make_stationary(data: pd.DataFrame, alpha: float = 0.05, regression: str = 'ct',
                    maxlag: Optional[int] = None) -> Tuple[pd.DataFrame, pd.DataFrame, bool]:
    """Difference the whole panel once if any column looks non-stationary.

    All columns are differenced together even if a single one is flagged.

    Returns:
        tuple:
            - panel: the (possibly differenced) panel
            - table: the ADF results on the input panel
            - differenced: whether differencing was applied
    """
    table = unit_root_table(data, alpha=alpha, regression=regression, maxlag=maxlag)
    if table['nonstationary'].any():
        return difference(data), table, True
    return validate_panel(data, stage='stationarity test'), table, False

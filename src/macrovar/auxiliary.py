"""Auxiliary numerical helpers shared by the pipeline stages."""

from typing import Union

import numpy as np
import pandas as pd

from .errors import DataQualityError


def ols(y: np.ndarray, x: np.ndarray, add_constant: bool = True) -> dict:
    """Least-squares regression of one or several dependent variables.

    Args:
        y: Dependent variables (nobs x neq), a vector is treated as one column
        x: Regressors (nobs x nvar)
        add_constant: Whether to prepend a constant column

    Returns:
        Dictionary with regression results:
            - meth: 'ols'
            - beta: coefficients (nvar x neq)
            - yhat: fitted values (nobs x neq)
            - resid: residuals (nobs x neq)
            - sige: e'*e/(n-k) (neq x neq)
            - nobs: nobs
            - nvar: nvars
    """
    if len(y.shape) == 1:
        y = y.reshape(-1, 1)

    if add_constant:
        x = np.column_stack([np.ones(x.shape[0]), x])

    nobs, nvar = x.shape
    if nobs != y.shape[0]:
        raise ValueError('x and y must have same # obs in ols')
    if nobs <= nvar:
        raise ValueError(f'ols needs more observations ({nobs}) than regressors ({nvar})')

    results = {'meth': 'ols', 'y': y, 'nobs': nobs, 'nvar': nvar}
    results['beta'], *_ = np.linalg.lstsq(x, y, rcond=None)
    results['yhat'] = x @ results['beta']
    results['resid'] = y - results['yhat']
    results['sige'] = results['resid'].T @ results['resid'] / (nobs - nvar)
    return results


def lag(x: np.ndarray, k: int) -> np.ndarray:
    """Create matrix of values lagged k periods (first k rows are lost).

    Args:
        x: Data matrix (nobs x nvar)
        k: Number of lags

    Returns:
        Matrix of lagged values ((nobs - k) x nvar)
    """
    if k == 0:
        return x
    return x[:-k, :]


def trimr(x: np.ndarray, n1: int, n2: int) -> np.ndarray:
    """Trim rows from top and bottom of matrix.

    Args:
        x: Input matrix
        n1: Number of rows to trim from top
        n2: Number of rows to trim from bottom

    Returns:
        Trimmed matrix
    """
    if n1 + n2 >= x.shape[0]:
        raise ValueError('Attempting to trim too many rows')
    return x[n1:x.shape[0]-n2]


def vech(m: np.ndarray) -> np.ndarray:
    """Stack the lower triangle (diagonal included) of a square matrix column-wise."""
    rows, cols = np.triu_indices(m.shape[0])
    # column-major lower triangle == row-major upper triangle of the transpose
    return m.T[rows, cols]


def check_finite(data: Union[np.ndarray, pd.DataFrame, pd.Series], stage: str, what: str = 'values'):
    """Raise DataQualityError if data hold NaN or infinite entries."""
    values = data.values if isinstance(data, (pd.DataFrame, pd.Series)) else np.asarray(data)
    if not np.all(np.isfinite(values)):
        nbad = int(np.size(values) - np.isfinite(values).sum())
        raise DataQualityError(f'{nbad} non-finite {what} found', stage=stage)
    return data

"""
Residual diagnostics for an estimated VAR.

All tests are informational: a rejection is reported, never acted upon.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd
from scipy import stats
from statsmodels.stats.diagnostic import het_arch

from ..auxiliary import lag, ols, vech
from ..errors import InsufficientSampleError
from .model import Output


@dataclass
class TestResult:
    """Statistic, degrees of freedom and p-value of a chi-square type test."""
    __test__ = False  # keep pytest from collecting this class

    name: str
    statistic: float
    df: float
    pvalue: float

    def reject(self, alpha: float = 0.05) -> bool:
        return self.pvalue < alpha


@dataclass
class ArchResult(TestResult):
    univariate: Optional[pd.DataFrame] = field(default=None)  # per-equation ARCH-LM


def serial_test(results: Output, lags: int = 10) -> TestResult:
    """Asymptotic portmanteau test for residual autocorrelation up to `lags`.

    Degrees of freedom are K^2 (lags - p), so lags must exceed the VAR order.
    """
    if lags <= results.nlag:
        raise ValueError(f'serial test needs more lags ({lags}) than the VAR order ({results.nlag})')
    res = results.fit.test_whiteness(nlags=lags, adjusted=False)
    return TestResult(
        name=f'Portmanteau (asymptotic), lags={lags}',
        statistic=float(res.test_statistic),
        df=float(res.df),
        pvalue=float(res.pvalue),
    )


def arch_test(results: Output, lags: int = 5, multivariate_only: bool = True) -> ArchResult:
    """Multivariate ARCH-LM test on the standardised residuals.

    vech(u_t u_t') is regressed on a constant and `lags` of itself; the
    statistic 0.5*T*K*(K+1)*R2m is chi-square with lags*K^2*(K+1)^2/4 degrees
    of freedom.
    """
    u = results.resid.values
    nobs, nvar = u.shape
    u = (u - u.mean(axis=0)) / u.std(axis=0, ddof=1)

    V = np.array([vech(np.outer(row, row)) for row in u])
    Y = V[lags:]
    X = np.hstack([lag(V, j)[lags-j:] for j in range(1, lags + 1)])

    try:
        resid1 = ols(Y, X)['resid']
    except ValueError as exc:
        raise InsufficientSampleError(str(exc), stage='diagnostics') from exc
    resid0 = Y - Y.mean(axis=0)

    omega0 = np.cov(resid0, rowvar=False)
    omega1 = np.cov(resid1, rowvar=False)
    r2m = 1 - (2 / (nvar * (nvar + 1))) * np.trace(omega1 @ np.linalg.inv(omega0))
    statistic = 0.5 * nobs * nvar * (nvar + 1) * r2m
    df = lags * nvar**2 * (nvar + 1)**2 / 4

    univariate = None
    if not multivariate_only:
        rows = {}
        for var in results.var_names:
            lm, lm_pval, _, _ = het_arch(results.resid[var].values, nlags=lags)
            rows[var] = {'statistic': float(lm), 'df': float(lags), 'pvalue': float(lm_pval)}
        univariate = pd.DataFrame(rows).T
        univariate.index.name = 'equation'

    return ArchResult(
        name=f'ARCH (multivariate), lags={lags}',
        statistic=float(statistic),
        df=float(df),
        pvalue=float(stats.chi2.sf(statistic, df)),
        univariate=univariate,
    )


def normality_test(results: Output) -> TestResult:
    """Multivariate Jarque-Bera test on the residuals."""
    res = results.fit.test_normality()
    return TestResult(
        name='Jarque-Bera (multivariate)',
        statistic=float(res.test_statistic),
        df=float(res.df),
        pvalue=float(res.pvalue),
    )

"""
Vector Autoregression (VAR) Model Implementation.

This module estimates a reduced-form VAR equation by equation with OLS
(through statsmodels) and collects everything later stages need in an
Output container.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from statsmodels.tsa.api import VAR

from ..auxiliary import check_finite
from ..errors import InsufficientSampleError
from ..utils.data_handling import validate_panel
from ..utils.var import VARUtils


@dataclass
class Output:
    """Estimation results of a VAR model."""
    endo: pd.DataFrame          # data the model was fitted on
    var_names: list
    nvar: int
    nlag: int
    const: int
    nobs: int                   # effective sample size
    ntotcoeff: int              # regressors per equation
    Y: pd.DataFrame
    X: pd.DataFrame
    F: pd.DataFrame             # coefficients, regressors x equations
    sigma: pd.DataFrame         # residual covariance (degrees-of-freedom adjusted)
    resid: pd.DataFrame
    F_comp: np.ndarray          # companion matrix
    fit: Any                    # statsmodels VARResults


class Model:
    """Vector Autoregression (VAR) Model estimated by OLS."""

    def __init__(self, endo: pd.DataFrame, nlag: int, const: int = 1):
        """Initialize and estimate the VAR model.

        Args:
            endo: DataFrame of endogenous variables (nobs x nvar)
            nlag: Number of lags
            const: Type of deterministic terms
                  0: no constant
                  1: constant
                  2: constant and trend
                  3: constant and trend^2
        """
        self.endo = validate_panel(endo, stage='estimation')
        self.nlag = int(nlag)
        self.const = const

        self.nobs, self.nvar = self.endo.shape
        self.nobse = self.nobs - self.nlag
        self.ncoeff = self.nvar * self.nlag
        self.ntotcoeff = self.ncoeff + self.const

        self._validate_inputs()
        self.results = self._estimate()

    def _validate_inputs(self):
        """Validate lag order and sample size."""
        if self.nlag < 1:
            raise ValueError(f'nlag must be a positive integer, got {self.nlag}')
        # an exact fit leaves no degrees of freedom for the residual covariance
        if self.nobse <= self.ntotcoeff:
            raise InsufficientSampleError(
                f'VAR({self.nlag}) needs more than {self.ntotcoeff} observations after lagging '
                f'({self.nvar * self.nlag} lagged regressors + {self.const} deterministic), '
                f'only {max(self.nobse, 0)} available',
                stage='estimation'
            )

    def _estimate(self) -> Output:
        """Estimate VAR model using statsmodels."""
        Y, X = VARUtils.var_make_xy(self.endo, self.nlag, self.const)

        Y = pd.DataFrame(Y, index=self.endo.index[self.nlag:], columns=self.endo.columns)

        X_cols = ['const', 'trend', 'trend2'][:self.const]
        for lag in range(1, self.nlag + 1):
            for col in self.endo.columns:
                X_cols.append(f"L{lag}.{col}")
        X = pd.DataFrame(X, index=Y.index, columns=X_cols)

        fit = VAR(self.endo).fit(self.nlag, trend=VARUtils.get_trend_order(self.const))

        F = pd.DataFrame(np.asarray(fit.params), index=X_cols, columns=self.endo.columns)
        resid = pd.DataFrame(np.asarray(fit.resid), index=Y.index, columns=self.endo.columns)
        sigma = pd.DataFrame(np.asarray(fit.sigma_u), index=self.endo.columns, columns=self.endo.columns)

        check_finite(F, stage='estimation', what='coefficients')
        check_finite(resid, stage='estimation', what='residuals')
        check_finite(sigma, stage='estimation', what='residual covariance entries')

        return Output(
            endo=self.endo,
            var_names=list(self.endo.columns),
            nvar=self.nvar,
            nlag=self.nlag,
            const=self.const,
            nobs=self.nobse,
            ntotcoeff=self.ntotcoeff,
            Y=Y,
            X=X,
            F=F,
            sigma=sigma,
            resid=resid,
            F_comp=VARUtils.compute_companion_matrix(F.values, self.nvar, self.nlag),
            fit=fit,
        )

    def coefficients(self, equation: str) -> pd.Series:
        """Coefficient vector of one equation (constant first, then lags)."""
        if equation not in self.results.var_names:
            raise ValueError(f'Unknown equation {equation!r}; choose one of {self.results.var_names}')
        return self.results.F[equation]

    def summary(self) -> str:
        """Text summary with coefficients, standard errors and p-values per equation."""
        return str(self.results.fit.summary())

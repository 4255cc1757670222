import numpy as np
import pandas as pd
from typing import Dict, Tuple, Union

from ..errors import DataQualityError


class VARUtils:
    """Utility functions for VAR models."""

    @staticmethod
    def get_trend_order(const: int) -> str:
        """Get the trend order for the VAR model.

        Args:
            const: Integer indicating the type of deterministic terms
                  0: no constant
                  1: constant only
                  2: constant and trend
                  3: constant and quadratic trend

        Returns:
            str: Trend order specification for statsmodels
        """
        trend_orders = {
            0: 'n',   # No deterministic terms
            1: 'c',   # Constant only
            2: 'ct',  # Constant and trend
            3: 'ctt'  # Constant and quadratic trend
        }
        if const not in trend_orders:
            raise ValueError(f"Invalid const value: {const}. Must be 0, 1, 2, or 3.")
        return trend_orders[const]

    @staticmethod
    def var_make_xy(data: Union[np.ndarray, pd.DataFrame], lags: int, const: int) -> Tuple[np.ndarray, np.ndarray]:
        """Create matrices Y and X for VAR estimation.

        X holds the deterministic terms first, then the lag-1 block of all
        variables, then the lag-2 block, and so on.

        Args:
            data: Matrix containing the original data (nobs x nvar)
            lags: Lag order of the VAR
            const: Type of deterministic terms (see get_trend_order)

        Returns:
            tuple:
                - Y: VAR dependent variable ((nobs-lags) x nvar)
                - X: VAR independent variable ((nobs-lags) x (const + nvar*lags))
        """
        if isinstance(data, pd.DataFrame):
            data = data.values

        nobs = len(data)
        Y = data[lags:]

        # lag 1 block first
        X = np.hstack([data[lags-jj-1:nobs-jj-1] for jj in range(lags)])

        # trend counts observations of the full sample, so it starts at lags+1
        trend = np.arange(lags+1, nobs+1).reshape(-1, 1)
        deterministic = {
            0: [],
            1: [np.ones((nobs-lags, 1))],
            2: [np.ones((nobs-lags, 1)), trend],
            3: [np.ones((nobs-lags, 1)), trend, trend**2],
        }[const]
        if deterministic:
            X = np.hstack(deterministic + [X])

        return Y, X

    @staticmethod
    def compute_companion_matrix(coef: np.ndarray, nvar: int, nlag: int) -> np.ndarray:
        """Compute the companion matrix for the VAR model.

        The companion matrix transforms a VAR(p) into a VAR(1) in a higher dimension.
        For a VAR with n variables and p lags, it creates an (n*p)×(n*p) matrix:

        | A₁ A₂ ... Aₚ₋₁ Aₚ |
        | I  0  ... 0    0  |
        | 0  I  ... 0    0  |
        | ⋮  ⋮  ⋱  ⋮    ⋮  |
        | 0  0  ... I    0  |

        Args:
            coef: Coefficient matrix from statsmodels ((det + n*p) × n),
                  deterministic rows first
            nvar: Number of variables (n)
            nlag: Number of lags (p)

        Returns:
            np.ndarray: Companion matrix ((n*p) × (n*p))
        """
        coef = np.asarray(coef)
        n_companion = nvar * nlag
        companion = np.zeros((n_companion, n_companion))

        # drop deterministic rows, keep the last n*p
        var_coefs = coef[coef.shape[0] - n_companion:].T

        companion[:nvar, :] = var_coefs

        if nlag > 1:
            companion[nvar:, :n_companion - nvar] = np.eye(nvar * (nlag - 1))

        return companion

    @staticmethod
    def retrieve_nlag_from_params(params: pd.DataFrame) -> int:
        nlag = [x.replace('L', '').split('.')[0] for x in params.index if x.startswith('L')]
        return len(set(nlag))

    @staticmethod
    def get_lag_coefs_matrices(params: pd.DataFrame) -> Dict[int, pd.DataFrame]:
        """Extract lag coefficient matrices from the VAR parameter DataFrame.

        Each Fp[lag] is a (nvar × nvar) DataFrame whose rows are the equations
        (response variables) and whose columns are the lagged regressors, so
        Fp[lag][i, j] is the effect of variable j lagged by 'lag' periods on
        variable i.

        Args:
            params: Parameter DataFrame from statsmodels VAR estimation

        Returns:
            Dict[int, pd.DataFrame]: Dictionary mapping lag numbers to coefficient matrices
        """
        nvar = len(params.columns)
        nlag = VARUtils.retrieve_nlag_from_params(params)

        Fp = {}
        for lag in range(1, nlag + 1):
            lag_index = f'L{lag}.'  # the dot matters, L1. must not match L10.
            lag_coeffs = params.loc[params.index.str.startswith(lag_index)].values.T
            Fp[lag] = pd.DataFrame(
                lag_coeffs.reshape(nvar, nvar),
                index=params.columns,
                columns=params.columns
            )
        return Fp

    @staticmethod
    def compute_wold_matrices(Fp: Dict[int, pd.DataFrame], nsteps: int) -> np.ndarray:
        """Compute Wold moving average representation matrices.

        The Wold representation expresses a VAR model as an infinite MA process:
        y_t = ε_t + Ψ₁ε_{t-1} + Ψ₂ε_{t-2} + ...

        The Ψ matrices follow the recursion
        Ψ₀ = I
        Ψₛ = ∑ᵢ₌₁ᵖ Ψₛ₋ᵢFᵢ for s > 0, where p is the VAR lag order

        PSI[step][i, j] is the effect of a unit reduced-form shock to variable j
        at time t on variable i at time t+step.

        Args:
            Fp: Dictionary of lag coefficient matrices from get_lag_coefs_matrices
            nsteps: Number of steps to compute (step 0 included)

        Returns:
            np.ndarray: Array of shape (nsteps, nvar, nvar)
        """
        nvar = Fp[1].shape[0]
        nlag = len(Fp)

        PSI = np.zeros((nsteps, nvar, nvar))
        PSI[0] = np.eye(nvar)

        for step in range(1, nsteps):
            PSI[step] = sum(
                PSI[step - lag - 1] @ Fp[lag + 1].values
                for lag in range(min(step, nlag))
            )
        return PSI

    @staticmethod
    def get_cholesky_identification_short(sigma: pd.DataFrame) -> pd.DataFrame:
        """Lower-triangular impact matrix B with B B' = sigma.

        Rows are response variables and columns are shocks, so the first
        variable in the ordering affects all others contemporaneously.
        """
        try:
            cholesky_decomp = np.linalg.cholesky(sigma.values)
        except np.linalg.LinAlgError as exc:
            raise DataQualityError('residual covariance is not positive definite', stage='identification') from exc
        return pd.DataFrame(cholesky_decomp, index=sigma.index, columns=sigma.columns)

    @staticmethod
    def get_unitary_shock(B: pd.DataFrame, impact: int, shock_var: str) -> pd.DataFrame:
        """Create an impulse vector for computing impulse responses.

        The shock size is determined by the 'impact' parameter:
        - impact=0: one standard deviation shock (uses the B matrix directly)
        - impact=1: unitary shock (scales by 1/B[shock_var,shock_var])

        The resulting impulse vector is used in impulse response calculations:
        IR_step = PSI[step] @ B @ impulse

        Args:
            B: Structural identification matrix (e.g., Cholesky decomposition of variance-covariance)
            impact: Type of shock (0=one std dev, 1=unitary)
            shock_var: Name of the variable to shock

        Returns:
            pd.DataFrame: Impulse vector for the specified shock
        """
        if shock_var not in B.columns:
            raise ValueError(f'Unknown shock variable {shock_var!r}; choose one of {list(B.columns)}')

        impulse = pd.DataFrame(np.zeros((B.shape[0], 1)), index=B.columns)
        impulse.index.name = 'shock'

        if impact == 0:
            impulse.loc[shock_var, 0] = 1  # one stdev shock
        elif impact == 1:
            impulse.loc[shock_var, 0] = 1/B.loc[shock_var, shock_var]  # unitary shock
        else:
            raise ValueError('Impact must be either 0 or 1')
        return impulse

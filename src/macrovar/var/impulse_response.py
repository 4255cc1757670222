"""
Compute impulse responses (IRs) for a VAR model.

Responses are identified recursively (Cholesky factor of the residual
covariance, 'short' zero contemporaneous restrictions). Error bands come
from a residual bootstrap, a wild bootstrap or asymptotic standard errors.
"""

from typing import Dict, Tuple, Union

import numpy as np
import pandas as pd
from colorama import Fore, Style
from scipy import stats
from tqdm.auto import tqdm

from ..errors import PipelineError
from ..utils.var import VARUtils
from .model import Model, Output
from .options import Options


class ImpulseResponse:
    def __init__(self, results: Output, options: Union[Options, Dict], verbose: bool = False):
        """Initialize ImpulseResponse with VAR results and options.

        Args:
            results: Estimated VAR (Model.results)
            options: Options instance or dictionary of options (see Options)
            verbose: Print bootstrap progress
        """
        self.results = results
        self.fit = results.fit
        self.options = options.to_dict() if isinstance(options, Options) else dict(options)
        self.verbose = verbose

        self.__B = None
        self.__PSI = None

    @property
    def nsteps(self) -> int:
        return int(self.options['nsteps'])

    @property
    def PSI(self) -> np.ndarray:
        if self.__PSI is None:
            self.__PSI = self.get_wold_representation()
        return self.__PSI

    @property
    def B(self) -> pd.DataFrame:
        if self.__B is None:
            if self.options['ident'] == 'short':
                self.__B = VARUtils.get_cholesky_identification_short(self.results.sigma)
            else:
                raise ValueError(
                    'Identification incorrectly specified.\n'
                    'Only short (zero contemporaneous restrictions) is available'
                )
        return self.__B

    @property
    def responses(self) -> list:
        responses = self.options.get('responses') or self.results.var_names
        unknown = [var for var in responses if var not in self.results.var_names]
        if unknown:
            raise ValueError(f'Unknown response variables {unknown}; choose from {self.results.var_names}')
        return list(responses)

    def get_wold_representation(self) -> np.ndarray:
        """Wold multipliers for steps 0..nsteps, shape (nsteps+1, nvar, nvar)."""
        Fp = VARUtils.get_lag_coefs_matrices(self.results.F)
        return VARUtils.compute_wold_matrices(Fp, self.nsteps + 1)

    def get_impulse_response(self) -> Dict[str, pd.DataFrame]:
        """Compute impulse responses to every shock.

        Returns:
            Dict shock variable -> DataFrame (rows step 0..nsteps, columns responses
            of every variable)
        """
        impact = self.options.get('impact', 0)
        steps = pd.RangeIndex(start=0, stop=self.nsteps + 1, name='step')

        IR = {}
        for var in self.results.var_names:
            impulse = VARUtils.get_unitary_shock(self.B, impact, var)
            # (nsteps+1, nvar, nvar) @ (nvar, 1) for every step at once
            response = (self.PSI @ (self.B.values @ impulse.values))[:, :, 0]
            IR[var] = pd.DataFrame(response, index=steps, columns=self.results.var_names)
        return IR

    def get_bands(self) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame, pd.DataFrame]:
        """Calculate confidence intervals for the responses to `shock_var`.

        Returns:
            tuple:
                - INF: Lower confidence band (nsteps+1, responses)
                - SUP: Upper confidence band (nsteps+1, responses)
                - MED: Median response (nsteps+1, responses)
                - BAR: Mean response (nsteps+1, responses) with outlier removal
        """
        required_options = ['nsteps', 'ndraws', 'pctg', 'method', 'shock_var']
        for option in required_options:
            if option not in self.options:
                raise ValueError(f'Option {option} is required for computing bands')

        shock_var = self.options['shock_var']
        if shock_var not in self.results.var_names:
            raise ValueError(f'Unknown shock variable {shock_var!r}; choose from {self.results.var_names}')

        if self.options['method'] == 'asymptotic':
            return self._asymptotic_bands()
        return self._bootstrap_bands()

    def _asymptotic_bands(self):
        """Point estimate plus/minus normal quantiles of the delta-method standard errors."""
        if self.options.get('impact', 0) != 0:
            raise ValueError('Asymptotic bands are only available for one standard deviation shocks (impact=0)')

        shock = self.results.var_names.index(self.options['shock_var'])
        cols = [self.results.var_names.index(var) for var in self.responses]
        steps = pd.RangeIndex(start=0, stop=self.nsteps + 1, name='step')

        irf = self.fit.irf(self.nsteps)
        point = pd.DataFrame(irf.orth_irfs[:, cols, shock], index=steps, columns=self.responses)
        stderr = pd.DataFrame(irf.stderr(orth=True)[:, cols, shock], index=steps, columns=self.responses)

        z = stats.norm.ppf(1 - (100 - self.options['pctg']) / 200)
        return point - z * stderr, point + z * stderr, point.copy(), point.copy()

    def _bootstrap_bands(self):
        def remove_outliers(data, n_std=3):
            """Mask draws more than n_std standard deviations from the step mean."""
            mean = data.mean(axis=1)
            std = data.std(axis=1)
            z_scores = data.sub(mean, axis=0).div(std, axis=0).abs()
            # constant rows give NaN z-scores, keep them
            mask = z_scores.lt(n_std) | z_scores.isna()
            return data.where(mask)

        ndraws = int(self.options['ndraws'])
        pctg = self.options['pctg']
        method = self.options['method']
        shock_var = self.options['shock_var']
        nlag = self.results.nlag
        const = self.results.const
        responses = self.responses

        rng = np.random.default_rng(self.options.get('seed'))

        if self.verbose:
            print(f"{Fore.CYAN}Starting {method} bootstrap with {ndraws} draws for IRF bands...{Style.RESET_ALL}")
        pbar = tqdm(total=ndraws, desc="Bootstrap Draws", disable=not self.verbose)

        IR = []
        attempts = 0
        max_attempts = ndraws * int(self.options.get('max_attempts_mult', 5))
        draw_options = dict(self.options, responses=None)

        while len(IR) < ndraws and attempts < max_attempts:
            attempts += 1
            u = self._get_bootstrapped_residuals(rng)

            try:
                y_artificial = self._simulate(u)
                var_model = Model(
                    endo=pd.DataFrame(y_artificial, columns=self.results.var_names),
                    nlag=nlag,
                    const=const)
                IR_draw = ImpulseResponse(var_model.results, draw_options).get_impulse_response()
            except (np.linalg.LinAlgError, PipelineError):
                # degenerate artificial sample; draw again
                continue

            IR.append(IR_draw[shock_var])
            pbar.update(1)
        pbar.close()

        tt = len(IR)
        if tt == 0:
            raise PipelineError(f'no bootstrap draw could be estimated in {attempts} attempts',
                                stage='impulse response')
        if self.verbose:
            if tt < ndraws:
                print(f"{Fore.YELLOW}Warning: Only {tt} draws were accepted out of {attempts} attempts.{Style.RESET_ALL}")
            else:
                print(f"{Fore.GREEN}Bootstrap finished: {tt} draws accepted.{Style.RESET_ALL}")

        pctg_inf = (100 - pctg) / 2      # Lower percentile (e.g., 2.5 for 95% CI)
        pctg_sup = 100 - (100 - pctg) / 2  # Upper percentile (e.g., 97.5 for 95% CI)

        steps = pd.RangeIndex(start=0, stop=self.nsteps + 1, name='step')
        INF = pd.DataFrame(index=steps, columns=responses, dtype=float)
        SUP = pd.DataFrame(index=steps, columns=responses, dtype=float)
        MED = pd.DataFrame(index=steps, columns=responses, dtype=float)
        BAR = pd.DataFrame(index=steps, columns=responses, dtype=float)

        for var in responses:
            # rows are steps, columns are draws
            all_draws = pd.DataFrame({draw: IR[draw][var] for draw in range(tt)}, index=steps)
            cleaned_draws = remove_outliers(all_draws)

            INF[var] = all_draws.quantile(pctg_inf/100, axis=1)
            SUP[var] = all_draws.quantile(pctg_sup/100, axis=1)
            MED[var] = all_draws.quantile(0.5, axis=1)
            BAR[var] = cleaned_draws.mean(axis=1)

        return INF, SUP, MED, BAR

    def _simulate(self, u: np.ndarray) -> np.ndarray:
        """Rebuild an artificial sample from the estimated equations and residuals u.

        The first nlag observations are the original initial values.
        """
        nlag = self.results.nlag
        const = self.results.const
        F = self.results.F.values
        endo = self.results.endo.values

        y_artificial = np.zeros((len(u) + nlag, self.results.nvar))
        y_artificial[:nlag] = endo[:nlag]
        for jj in range(len(u)):
            t = jj + nlag
            # most recent lag first: [y_{t-1}, y_{t-2}, ...]
            X = y_artificial[t-nlag:t][::-1].flatten()
            X = self._construct_lag_with_const_or_trend(X, const, t)
            y_artificial[t] = X @ F + u[jj]
        return y_artificial

    def _construct_lag_with_const_or_trend(self, X: np.ndarray, const: int, jj: int) -> np.ndarray:
        """Prepend the deterministic terms of observation jj to the lag vector.

        Args:
            X: Array containing the lag values.
            const: Integer indicating the type of deterministic terms to include:
                  0: No constant
                  1: Constant
                  2: Constant and linear trend
                  3: Constant and linear and quadratic trend
            jj: Zero-based observation index in the full sample (trend is jj+1)

        Returns:
            np.ndarray: Deterministic terms followed by the lag values
        """
        if const == 0:
            return X.copy()
        elif const == 1:
            return np.hstack([1, X])
        elif const == 2:
            return np.hstack([1, jj+1, X])
        elif const == 3:
            return np.hstack([1, jj+1, (jj+1)**2, X])
        else:
            raise ValueError(f"Invalid const value: {const}. Must be 0, 1, 2, or 3.")

    def _get_bootstrapped_residuals(self, rng: np.random.Generator) -> np.ndarray:
        resid = self.results.resid.values
        nobs = resid.shape[0]

        if self.options['method'] == 'bs':
            # Standard bootstrap: resample centred residual vectors with replacement
            centred = resid - resid.mean(axis=0)
            idx = rng.integers(0, nobs, nobs)
            return centred[idx]
        elif self.options['method'] == 'wild':
            # Wild bootstrap: flip the sign of each residual vector at random
            rr = 1 - 2 * (rng.random((nobs, 1)) > 0.5)
            return resid * rr
        else:
            raise ValueError(f'The method {self.options["method"]} is not available')

"""
Sequential VAR analysis of a macroeconomic panel.

load -> unit-root tests -> differencing -> lag selection -> estimation ->
stability -> FEVD -> residual diagnostics -> impulse responses -> forecasts

Each stage consumes the complete output of the previous one and any error
aborts the run.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd
from colorama import Fore, Style, init

from .utils.data_handling import load_canada, table_print, validate_panel
from .var.diagnostics import ArchResult, TestResult, arch_test, normality_test, serial_test
from .var.fevd import fevd
from .var.forecast import forecast
from .var.impulse_response import ImpulseResponse
from .var.lag_selection import LagSelection, select_lag
from .var.model import Model
from .var.options import Options
from .var.stability import StabilityResult, check_stability, cusum_test
from .var.stationarity import make_stationary

# Initialize colorama for colored console output
init(autoreset=True)


@dataclass
class PipelineResult:
    """Every intermediate result of one run."""
    options: Options
    data: pd.DataFrame
    unit_roots: pd.DataFrame
    differenced: bool
    panel: pd.DataFrame
    lag_selection: LagSelection
    model: Model
    stability: StabilityResult
    cusum: pd.DataFrame
    fevd: Dict[str, pd.DataFrame]
    serial: TestResult
    arch: ArchResult
    normality: TestResult
    irf: pd.DataFrame           # responses to options.shock_var
    irf_bands: Dict[str, pd.DataFrame]
    forecast: Dict[str, pd.DataFrame]


def _stage(message: str, verbose: bool):
    if verbose:
        print(f"{Fore.CYAN}{message}{Style.RESET_ALL}")


def run_pipeline(data: Optional[pd.DataFrame] = None,
                 options: Optional[Options] = None,
                 verbose: bool = True) -> PipelineResult:
    """Run the full analysis.

    Args:
        data: Panel (nobs x nvar); the Canadian labour market panel if None
        options: Options instance; defaults if None
        verbose: Print stage progress

    Returns:
        PipelineResult
    """
    options = options or Options()

    _stage("Loading data...", verbose)
    data = load_canada() if data is None else validate_panel(data, stage='data loading')

    _stage("Testing for unit roots...", verbose)
    panel, unit_roots, differenced = make_stationary(
        data, alpha=options.alpha, regression=options.adf_regression, maxlag=options.adf_maxlag)
    if verbose and differenced:
        flagged = unit_roots.index[unit_roots['nonstationary']].tolist()
        print(f"{Fore.YELLOW}-> Non-stationary: {', '.join(flagged)}; differencing all series{Style.RESET_ALL}")

    _stage("Selecting lag order...", verbose)
    lag_selection = select_lag(panel, lag_max=options.lag_max, ic=options.ic, const=options.const)

    _stage(f"Estimating VAR({lag_selection.lag})...", verbose)
    model = Model(panel, nlag=lag_selection.lag, const=options.const)
    results = model.results

    _stage("Checking stability...", verbose)
    stability = check_stability(results)
    cusum = cusum_test(results)

    _stage("Decomposing forecast error variance...", verbose)
    decomposition = fevd(results, nsteps=options.fevd_nsteps)

    _stage("Running residual diagnostics...", verbose)
    serial = serial_test(results, lags=options.serial_lags)
    arch = arch_test(results, lags=options.arch_lags, multivariate_only=options.multivariate_only)
    normality = normality_test(results)

    _stage("Estimating impulse responses and error bands...", verbose)
    impulse_response = ImpulseResponse(results, options, verbose=verbose)
    irf = impulse_response.get_impulse_response()[options.shock_var][impulse_response.responses]
    INF, SUP, MED, BAR = impulse_response.get_bands()

    _stage("Forecasting...", verbose)
    forecasts = forecast(results, nsteps=options.fcst_nsteps, pctg=options.pctg)

    if verbose:
        print(f"{Fore.GREEN}Analysis finished{Style.RESET_ALL}")

    return PipelineResult(
        options=options,
        data=data,
        unit_roots=unit_roots,
        differenced=differenced,
        panel=panel,
        lag_selection=lag_selection,
        model=model,
        stability=stability,
        cusum=cusum,
        fevd=decomposition,
        serial=serial,
        arch=arch,
        normality=normality,
        irf=irf,
        irf_bands={'INF': INF, 'SUP': SUP, 'MED': MED, 'BAR': BAR},
        forecast=forecasts,
    )


def _print_test(test: TestResult):
    verdict = f"{Fore.YELLOW}reject{Style.RESET_ALL}" if test.reject() else f"{Fore.GREEN}do not reject{Style.RESET_ALL}"
    print(f"{test.name}: statistic={test.statistic:.4f}, df={test.df:g}, p-value={test.pvalue:.4f} ({verdict})")


def report(result: PipelineResult):
    """Print every summary of a run."""
    print(f"\n{Fore.CYAN}ADF unit-root tests{Style.RESET_ALL}")
    print(table_print(result.unit_roots[['statistic', 'pvalue']]))
    print(f"Differenced: {result.differenced} ({len(result.panel)} observations)")

    selection = result.lag_selection
    print(f"\n{Fore.CYAN}Lag selection{Style.RESET_ALL}")
    print(table_print(result.lag_selection.scores, title=None))
    print(", ".join(f"{ic.upper()}(n)={lag}" for ic, lag in selection.selection.items()))
    print(f"Selected lag ({selection.ic.upper()}): {selection.lag}")

    print(f"\n{Fore.CYAN}Estimation{Style.RESET_ALL}")
    print(result.model.summary())

    print(f"\n{Fore.CYAN}Roots of the characteristic polynomial{Style.RESET_ALL}")
    print(" ".join(f"{root:.4f}" for root in result.stability.roots))
    if result.stability.stable:
        print(f"{Fore.GREEN}The model is stable (all roots are less than 1).{Style.RESET_ALL}")
    else:
        print(f"{Fore.YELLOW}The model is not stable (some roots are greater than or equal to 1).{Style.RESET_ALL}")
    print(table_print(result.cusum, title="OLS-CUSUM"))

    print(f"\n{Fore.CYAN}Forecast error variance decomposition{Style.RESET_ALL}")
    for var, shares in result.fevd.items():
        print(table_print(shares, title=f"FEVD for {var}"))

    print(f"\n{Fore.CYAN}Diagnostics{Style.RESET_ALL}")
    _print_test(result.serial)
    _print_test(result.arch)
    if result.arch.univariate is not None:
        print(table_print(result.arch.univariate))
    _print_test(result.normality)

    opts = result.options
    print(f"\n{Fore.CYAN}Impulse responses to {opts.shock_var} ({opts.pctg}% {opts.method} bands){Style.RESET_ALL}")
    for var in result.irf.columns:
        table = pd.DataFrame({
            'irf': result.irf[var],
            'lower': result.irf_bands['INF'][var],
            'upper': result.irf_bands['SUP'][var],
        })
        print(table_print(table, title=f"{opts.shock_var} -> {var}"))

    print(f"\n{Fore.CYAN}Forecasts{Style.RESET_ALL}")
    for var, table in result.forecast.items():
        print(table_print(table, title=f"{var}"))

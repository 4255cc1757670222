"""
Stability of the estimated VAR.

The model is stable when every eigenvalue of the companion matrix lies
strictly inside the unit circle. An OLS-CUSUM test per equation is also
provided as an informational check for parameter constancy.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from statsmodels.stats.diagnostic import breaks_cusumolsresid

from ..auxiliary import check_finite
from .model import Output


@dataclass
class StabilityResult:
    roots: np.ndarray    # companion eigenvalue moduli, descending
    stable: bool

    @property
    def max_root(self) -> float:
        return float(self.roots[0]) if self.roots.size else 0.0


def companion_roots(F_comp: np.ndarray) -> np.ndarray:
    """Moduli of the companion matrix eigenvalues, largest first."""
    moduli = np.abs(np.linalg.eigvals(F_comp))
    return np.sort(moduli)[::-1]


def is_stable(roots: np.ndarray) -> bool:
    """True iff every modulus is strictly below one."""
    return bool(np.all(np.asarray(roots) < 1.0))


def check_stability(results: Output) -> StabilityResult:
    roots = check_finite(companion_roots(results.F_comp), stage='stability check', what='roots')
    return StabilityResult(roots=roots, stable=is_stable(roots))


def cusum_test(results: Output) -> pd.DataFrame:
    """OLS-CUSUM test on the residuals of each equation.

    Returns:
        DataFrame indexed by equation with the sup statistic and its p-value
    """
    rows = {}
    for var in results.var_names:
        stat, pvalue, _ = breaks_cusumolsresid(results.resid[var].values, ddof=results.ntotcoeff)
        rows[var] = {'statistic': float(stat), 'pvalue': float(pvalue)}
    table = pd.DataFrame(rows).T
    table.index.name = 'equation'
    return table

"""
Shared fixtures: synthetic panels with known dynamics.
"""

import numpy as np
import pandas as pd
import pytest

from macrovar.var.model import Model

COLUMNS = ['e', 'prod', 'rw', 'U']

A1 = np.array([
    [0.5, 0.1, 0.0, 0.0],
    [0.0, 0.4, 0.1, 0.0],
    [0.1, 0.0, 0.3, 0.0],
    [0.0, 0.0, 0.1, 0.2],
])
CHOL = np.array([
    [1.0, 0.0, 0.0, 0.0],
    [0.3, 0.8, 0.0, 0.0],
    [0.2, 0.1, 0.7, 0.0],
    [-0.2, 0.1, 0.1, 0.5],
])


def simulate_var1(nobs: int, seed: int, intercept: float = 0.1, burn: int = 50) -> np.ndarray:
    """Simulate a stable VAR(1) with correlated Gaussian shocks."""
    rng = np.random.default_rng(seed)
    shocks = rng.standard_normal((nobs + burn, 4)) @ CHOL.T
    y = np.zeros((nobs + burn, 4))
    for t in range(1, nobs + burn):
        y[t] = intercept + A1 @ y[t-1] + shocks[t]
    return y[burn:]


@pytest.fixture
def stationary_panel():
    """200 quarters of a stationary VAR(1)."""
    return pd.DataFrame(simulate_var1(200, seed=42), columns=COLUMNS)


@pytest.fixture
def integrated_panel():
    """84 quarters of random walks with drift whose increments follow a VAR(1)."""
    increments = simulate_var1(84, seed=7, intercept=0.2)
    return pd.DataFrame(np.cumsum(increments, axis=0) + 100.0, columns=COLUMNS)


@pytest.fixture
def var1_model(stationary_panel):
    return Model(stationary_panel, nlag=1)


@pytest.fixture
def var2_model(stationary_panel):
    return Model(stationary_panel, nlag=2)

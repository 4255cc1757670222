"""
VAR (Vector Autoregression) module for time series analysis.

This module provides estimation of reduced-form VARs together with lag
selection, stability checks, variance decomposition, residual diagnostics,
impulse responses and forecasts.
"""

from .model import Model, Output
from .options import Options
from .impulse_response import ImpulseResponse

__all__ = ['Model', 'Options', 'Output', 'ImpulseResponse']

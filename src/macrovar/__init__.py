"""
macrovar: reduced-form VAR analysis of a small macroeconomic panel.

Unit-root tests, differencing, lag selection, OLS estimation, stability,
variance decomposition, residual diagnostics, impulse responses with error
bands and forecasts.
"""

from .errors import DataQualityError, InsufficientSampleError, PipelineError
from .pipeline import PipelineResult, report, run_pipeline

__version__ = "0.1.0"

__all__ = [
    'run_pipeline',
    'report',
    'PipelineResult',
    'PipelineError',
    'InsufficientSampleError',
    'DataQualityError',
]

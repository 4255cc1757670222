"""Exceptions raised by the VAR pipeline."""


class PipelineError(ValueError):
    """Raised when a pipeline stage cannot proceed.

    Args:
        message: Description of the failure
        stage: Name of the stage that failed (e.g. 'estimation')
    """

    def __init__(self, message: str, stage: str = None):
        self.stage = stage
        if stage:
            message = f"[{stage}] {message}"
        super().__init__(message)


class InsufficientSampleError(PipelineError):
    """Raised when the effective sample is too small for the requested regressors."""


class DataQualityError(PipelineError):
    """Raised when data contain missing or non-finite values."""

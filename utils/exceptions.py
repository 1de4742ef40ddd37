"""Exception types raised by the tracking model."""


class MultiHypoTrackingError(Exception):
    """Base class for all errors raised by this project."""


class ConfigurationError(MultiHypoTrackingError, ValueError):
    """
    The hypotheses graph, an annotation or a weight vector is inconsistent.

    Raised for unknown or duplicate ids, feature-length mismatches within one
    hypothesis class, and ground truth that needs a variable the graph lacks.
    """


class SolverError(MultiHypoTrackingError, RuntimeError):
    """The optimization engine did not return an optimal labeling."""

    def __init__(self, message: str, status: int = -1):
        super().__init__(message)
        self.status = status

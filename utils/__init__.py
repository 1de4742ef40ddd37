"""Shared helpers for multi-hypotheses tracking."""

from .exceptions import MultiHypoTrackingError, ConfigurationError, SolverError
from .logger import get_logger, setup_logging

__all__ = [
    'MultiHypoTrackingError',
    'ConfigurationError',
    'SolverError',
    'get_logger',
    'setup_logging'
]

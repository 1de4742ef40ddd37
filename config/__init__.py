"""Configuration for multi-hypotheses tracking."""

from .config_loader import (
    Config, SolverConfig, LearningConfig, LoggingConfig, load_config, save_config
)

__all__ = [
    'Config',
    'SolverConfig',
    'LearningConfig',
    'LoggingConfig',
    'load_config',
    'save_config'
]

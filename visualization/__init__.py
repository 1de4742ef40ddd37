"""Visualization tools for multi-hypotheses tracking."""

from .dot_export import to_dot, save_dot
from .learning_plots import plot_learning_history

__all__ = [
    'to_dot',
    'save_dot',
    'plot_learning_history'
]

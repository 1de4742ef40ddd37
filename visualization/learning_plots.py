"""
Plots of structured learning progress.
"""

from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import seaborn as sns


def plot_learning_history(
    history: Dict[str, List[float]],
    save_path: Optional[str] = None,
    figsize: Tuple[int, int] = (12, 4)
) -> plt.Figure:
    """
    Plot objective, margin violation and Hamming loss per iteration.

    Args:
        history: StructuredMaxMarginLearner.history.
        save_path: Optional path to save figure.
        figsize: Figure size.

    Returns:
        Matplotlib figure.
    """
    sns.set_style('whitegrid')
    keys = [k for k in ('objective', 'violation', 'loss') if k in history]
    fig, axes = plt.subplots(1, max(len(keys), 1), figsize=figsize, squeeze=False)
    fig.suptitle('Structured Learning', fontsize=14, fontweight='bold')

    for ax, key in zip(axes[0], keys):
        values = history[key]
        ax.plot(range(1, len(values) + 1), values, marker='o', linewidth=2)
        ax.set_xlabel('Iteration', fontsize=11)
        ax.set_ylabel(key.capitalize(), fontsize=11)
        ax.set_title(key.capitalize(), fontsize=12)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig

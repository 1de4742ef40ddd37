"""
Binary decision variables attached to hypotheses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

import numpy as np


class VariableKind(Enum):
    """
    Hypothesis classes that own a weight range.

    Declaration order is the order of the weight ranges in the global
    weight vector.
    """

    LINK = 'Link'
    DETECTION = 'Detection'
    DIVISION = 'Division'
    APPEARANCE = 'Appearance'
    DISAPPEARANCE = 'Disappearance'


SEGMENTATION_KINDS = (
    VariableKind.DETECTION,
    VariableKind.DIVISION,
    VariableKind.APPEARANCE,
    VariableKind.DISAPPEARANCE,
)


def as_feature_vector(values: Optional[Iterable[float]]) -> np.ndarray:
    """
    Convert a list of numbers into a 1D float feature vector.

    Args:
        values: Feature values, or None for an absent variable.

    Returns:
        Float64 array; empty if values is None.
    """
    if values is None:
        return np.zeros(0, dtype=np.float64)
    vector = np.asarray(list(values), dtype=np.float64)
    return vector.reshape(-1)


@dataclass(frozen=True, eq=False)
class Variable:
    """
    A binary decision tied to one feature vector.

    An empty feature vector marks an optional variable as absent. Optimizer
    ids are not stored here; they belong to the assembled model.
    """

    features: np.ndarray = field(default_factory=lambda: np.zeros(0))
    """Feature values scored by the variable's weight range."""

    @classmethod
    def from_values(cls, values: Optional[Iterable[float]]) -> 'Variable':
        return cls(features=as_feature_vector(values))

    @property
    def num_features(self) -> int:
        return int(self.features.shape[0])

    def is_present(self) -> bool:
        """Check if the variable has at least one feature."""
        return self.num_features > 0

    def to_list(self) -> list:
        return [float(v) for v in self.features]

"""
Weight-space indexing.

Every hypothesis class owns one contiguous range of the global weight
vector, in the order link, detection, division, appearance, disappearance.
A class with F features gets 2*F weights: F for the "off" state followed by
F for the "on" state.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from hypotheses import HypothesesGraph, VariableKind
from hypotheses.variable import SEGMENTATION_KINDS
from utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

NUM_STATES = 2

_PLURAL_NAMES = {
    VariableKind.LINK: 'Links',
    VariableKind.DETECTION: 'Detections',
    VariableKind.DIVISION: 'Divisions',
    VariableKind.APPEARANCE: 'Appearances',
    VariableKind.DISAPPEARANCE: 'Disappearances',
}


@dataclass(frozen=True)
class WeightRange:
    """Contiguous slice of the weight vector owned by one hypothesis class."""

    kind: VariableKind
    start: int
    num_features: int

    @property
    def size(self) -> int:
        return NUM_STATES * self.num_features

    @property
    def stop(self) -> int:
        return self.start + self.size

    def state_slice(self, state: int) -> slice:
        """Weights multiplied with the features when the variable is in `state`."""
        offset = self.start + state * self.num_features
        return slice(offset, offset + self.num_features)

    def weight_ids(self) -> List[int]:
        return list(range(self.start, self.stop))


class WeightIndexAllocator:
    """
    Computes feature counts per hypothesis class and assigns weight ranges.
    """

    def __init__(self, graph: HypothesesGraph):
        self.graph = graph
        self.feature_counts: Dict[VariableKind, int] = {kind: 0 for kind in VariableKind}

    @staticmethod
    def _check(kind: VariableKind, count: int, previous: Optional[int]) -> int:
        if previous is not None and count != previous:
            raise ConfigurationError(
                f"{_PLURAL_NAMES[kind]} do not have the same number of features "
                f"({previous} != {count})"
            )
        return count

    def compute_num_weights(self) -> int:
        """
        Scan the graph for feature lengths and return the weight-vector size.

        Segmentation classes only compare non-empty vectors; link vectors
        must all share one length.
        Recomputes the cached counts on every call.

        Returns:
            2 * (sum of feature lengths over the five classes).

        Raises:
            ConfigurationError: On a length mismatch within one class.
        """
        counts: Dict[VariableKind, Optional[int]] = {kind: None for kind in VariableKind}

        for hyp in self.graph.sorted_segmentations():
            for kind in SEGMENTATION_KINDS:
                variable = hyp.variable(kind)
                if not variable.is_present():
                    continue
                counts[kind] = self._check(kind, variable.num_features, counts[kind])

        for link in self.graph.sorted_links():
            counts[VariableKind.LINK] = self._check(
                VariableKind.LINK, link.num_features, counts[VariableKind.LINK]
            )

        self.feature_counts = {kind: counts[kind] or 0 for kind in VariableKind}
        return NUM_STATES * sum(self.feature_counts.values())

    def allocate(self) -> Dict[VariableKind, WeightRange]:
        """
        Assign contiguous weight ranges by cumulative offsets starting at 0.

        Returns:
            Mapping from hypothesis class to its WeightRange.
        """
        self.compute_num_weights()

        ranges = {}
        offset = 0
        for kind in VariableKind:
            ranges[kind] = WeightRange(kind, offset, self.feature_counts[kind])
            offset += ranges[kind].size

        logger.debug(
            "Weight ranges: %s",
            ", ".join(f"{k.value}=[{r.start}, {r.stop})" for k, r in ranges.items())
        )
        return ranges

    def weight_descriptions(self) -> List[str]:
        """
        Describe each weight, e.g. 'Detection = 1 - feature 2'.

        Returns:
            One description per weight, in weight-vector order.
        """
        descriptions = []
        for kind, weight_range in self.allocate().items():
            for state in range(NUM_STATES):
                for f in range(weight_range.num_features):
                    descriptions.append(f"{kind.value} = {state} - feature {f}")
        return descriptions

"""
Ground-truth reconstruction from sparse link annotations.

Annotators only state which links are active. The full labeling follows
from the model's own consistency rules:

1. every active link turns its source detection on; a source that is used
   by a second active link divides instead,
2. every active link turns its destination detection on,
3. an active detection without active incoming links appears, and one
   without active outgoing links disappears.
"""

import logging
from collections import Counter
from typing import Iterable

import numpy as np

from hypotheses import HypothesesGraph, LinkAnnotation, VariableKind
from optimization.model_builder import AssembledModel
from utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class GroundTruthReconstructor:
    """
    Expands link annotations into a labeling of every model variable.

    Args:
        graph: Hypotheses graph the annotations refer to.
        model: Assembled model of that graph (provides variable ids).
    """

    def __init__(self, graph: HypothesesGraph, model: AssembledModel):
        self.graph = graph
        self.model = model

    def _set(self, solution: np.ndarray, kind: VariableKind, key, error: str):
        var = self.model.variable_id(kind, key)
        if var < 0:
            raise ConfigurationError(error)
        solution[var] = 1

    def reconstruct(self, annotations: Iterable[LinkAnnotation]) -> np.ndarray:
        """
        Build the full binary labeling.

        The result only depends on the set of active annotated links, not on
        their order or on repetitions.

        Args:
            annotations: Link annotations; inactive ones are ignored.

        Returns:
            Integer 0/1 array indexed by variable id.

        Raises:
            ConfigurationError: If an annotated link does not exist, a source
                is used by more than two links, or a needed division,
                appearance or disappearance variable is missing.
        """
        active = sorted({a.key for a in annotations if a.value})
        logger.info("Ground truth contains %d active link annotations", len(active))

        for src, dest in active:
            if (src, dest) not in self.graph.links:
                raise ConfigurationError(f"Cannot find link to annotate: {src} to {dest}")

        solution = np.zeros(self.model.num_variables, dtype=int)

        # Pass 1: links and their sources; a second use of a source is a division
        source_uses = Counter()
        for src, dest in active:
            solution[self.model.variable_id(VariableKind.LINK, (src, dest))] = 1
            source_uses[src] += 1

        for src, uses in sorted(source_uses.items()):
            solution[self.model.variable_id(VariableKind.DETECTION, src)] = 1
            if uses == 2:
                self._set(
                    solution, VariableKind.DIVISION, src,
                    f"Segmentation Hypothesis: {src} - GT contains a division "
                    f"but no division features are set!"
                )
            elif uses > 2:
                raise ConfigurationError(
                    f"Segmentation Hypothesis: {src} - source node has been used "
                    f"more than twice ({uses} active outgoing links)!"
                )

        # Pass 2: destinations, so that the last node of each track is active
        for _, dest in active:
            solution[self.model.variable_id(VariableKind.DETECTION, dest)] = 1

        # Closing pass: appearances and disappearances
        for hyp in self.graph.sorted_segmentations():
            if not self.model.is_active(solution, VariableKind.DETECTION, hyp.id):
                continue

            if self._num_active(solution, hyp.incoming_links) == 0:
                self._set(
                    solution, VariableKind.APPEARANCE, hyp.id,
                    f"Segmentation Hypothesis: {hyp.id} - GT contains appearing variable "
                    f"that has no appearance features set!"
                )

            if self._num_active(solution, hyp.outgoing_links) == 0:
                self._set(
                    solution, VariableKind.DISAPPEARANCE, hyp.id,
                    f"Segmentation Hypothesis: {hyp.id} - GT contains disappearing variable "
                    f"that has no disappearance features set!"
                )

        logger.debug("Ground truth labeling: %s", solution.tolist())
        return solution

    def _num_active(self, solution: np.ndarray, link_keys) -> int:
        return sum(
            1 for key in link_keys if self.model.is_active(solution, VariableKind.LINK, key)
        )


def reconstruct_ground_truth(
    graph: HypothesesGraph,
    model: AssembledModel,
    annotations: Iterable[LinkAnnotation]
) -> np.ndarray:
    """Shortcut for GroundTruthReconstructor(graph, model).reconstruct(annotations)."""
    return GroundTruthReconstructor(graph, model).reconstruct(annotations)

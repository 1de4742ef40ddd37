"""
TrackingModel - ties graph, weight allocation, assembly and solving together.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from config.config_loader import Config
from hypotheses import HypothesesGraph, LinkAnnotation, VariableKind
from optimization import (
    AssembledModel,
    InferenceResult,
    ModelBuilder,
    Solver,
    StructuredMaxMarginLearner,
    WeightIndexAllocator,
    create_solver
)
from .ground_truth import GroundTruthReconstructor
from .verification import SolutionVerifier, VerificationResult

logger = logging.getLogger(__name__)


class TrackingModel:
    """
    Multi-hypotheses tracking model over one hypotheses graph.

    Assembly never modifies the graph, so a TrackingModel may run inference
    and learning repeatedly. The assembled model is cached and rebuilt
    on request.
    """

    def __init__(
        self,
        graph: HypothesesGraph,
        config: Optional[Config] = None,
        solver: Optional[Solver] = None,
        learner: Optional[StructuredMaxMarginLearner] = None
    ):
        """
        Initialize tracking model.

        Args:
            graph: Hypotheses graph to track on.
            config: Configuration; defaults to Config().
            solver: Inference backend; built from config.solver if None.
            learner: Structured learner; built from config.learning if None.
        """
        self.graph = graph
        self.config = config or Config()
        self.solver = solver or create_solver(self.config.solver)
        self.learner = learner or StructuredMaxMarginLearner(self.solver, self.config.learning)
        self.allocator = WeightIndexAllocator(graph)
        self._model: Optional[AssembledModel] = None

    @classmethod
    def from_dict(cls, data: Dict, config: Optional[Config] = None, **kwargs) -> 'TrackingModel':
        return cls(HypothesesGraph.from_dict(data), config=config, **kwargs)

    def compute_num_weights(self) -> int:
        return self.allocator.compute_num_weights()

    def weight_descriptions(self) -> List[str]:
        return self.allocator.weight_descriptions()

    def build(self, rebuild: bool = False) -> AssembledModel:
        """
        Assemble the binary program (cached).

        Args:
            rebuild: Re-run weight allocation and assembly.
        """
        if self._model is None or rebuild:
            self._model = ModelBuilder(self.graph, self.allocator.allocate()).build()
        return self._model

    @property
    def model(self) -> AssembledModel:
        return self.build()

    def infer(self, weights: Sequence[float]) -> InferenceResult:
        """
        Find the minimum-energy labeling for the given weights.

        Args:
            weights: Weight vector of length compute_num_weights().

        Returns:
            InferenceResult (labeling indexed by variable id, energy).
        """
        model = self.build()
        model.check_weights(weights)
        logger.info("Running inference with %s", type(self.solver).__name__)
        return self.solver.solve(model, weights)

    def ground_truth(self, annotations: Iterable[LinkAnnotation]) -> np.ndarray:
        """Reconstruct the full labeling implied by link annotations."""
        return GroundTruthReconstructor(self.graph, self.build()).reconstruct(annotations)

    def learn(self, annotations: Iterable[LinkAnnotation]) -> np.ndarray:
        """
        Learn weights from link annotations.

        Returns:
            Weight vector ordered like weight_descriptions().
        """
        model = self.build()
        gt = self.ground_truth(annotations)
        return self.learner.fit_weights(model, gt)

    def verify(self, solution: Sequence[int]) -> VerificationResult:
        return SolutionVerifier(self.graph, self.build()).verify(solution)

    def link_results(self, solution: Sequence[int]) -> List[LinkAnnotation]:
        """
        One annotation per linking hypothesis, active iff its variable is on.
        """
        model = self.build()
        solution = model.check_solution(solution)
        return [
            LinkAnnotation(
                link.src_id, link.dest_id,
                bool(model.is_active(solution, VariableKind.LINK, link.key))
            )
            for link in self.graph.sorted_links()
        ]

    def active_links(self, solution: Sequence[int]) -> List[tuple]:
        return [a.key for a in self.link_results(solution) if a.value]

    def __repr__(self) -> str:
        return f"TrackingModel({self.graph!r}, solver={type(self.solver).__name__})"

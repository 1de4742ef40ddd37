"""
Structured max-margin learning of the feature weights.

Typical usage::

    from optimization import StructuredMaxMarginLearner, create_solver

    learner = StructuredMaxMarginLearner(create_solver(config.solver), config.learning)
    weights = learner.fit_weights(model, ground_truth)
    history = learner.history
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from .model_builder import AssembledModel
from .solvers import Solver

logger = logging.getLogger(__name__)


def hamming_loss(solution: Sequence[int], ground_truth: Sequence[int]) -> float:
    """Number of variables whose label differs from the ground truth."""
    return float(np.sum(np.asarray(solution) != np.asarray(ground_truth)))


class StructuredMaxMarginLearner:
    """
    Subgradient training of a structured SVM on one instance.

    Minimizes
        lambda/2 * ||w||^2 + max_y [E(gt; w) - E(y; w) + Hamming(y, gt)]
    where the inner maximization is a loss-augmented inference call to the
    solver. Energies are linear in w through the model's joint feature map.

    Args:
        solver: Backend used for loss-augmented inference.
        config: LearningConfig (or any object with 'max_iterations',
            'learning_rate', 'regularizer_weight', 'epsilon',
            'initial_weight' and 'verbose').
    """

    def __init__(self, solver: Solver, config: Optional[Any] = None):
        self.solver = solver
        self.max_iterations = int(getattr(config, 'max_iterations', 100))
        self.learning_rate = float(getattr(config, 'learning_rate', 0.1))
        self.regularizer_weight = float(getattr(config, 'regularizer_weight', 1.0))
        self.epsilon = float(getattr(config, 'epsilon', 1e-6))
        self.initial_weight = float(getattr(config, 'initial_weight', 0.0))
        self.verbose = bool(getattr(config, 'verbose', False))

        self.history: Dict[str, List[float]] = {'objective': [], 'violation': [], 'loss': []}

    def fit_weights(self, model: AssembledModel, ground_truth: Sequence[int]) -> np.ndarray:
        """
        Learn weights for which the ground truth is the minimum-energy labeling.

        Args:
            model: Assembled model.
            ground_truth: Full binary labeling indexed by variable id.

        Returns:
            Weight vector with the lowest objective seen, ordered like
            model.weight_ranges.
        """
        gt = model.check_solution(ground_truth).astype(int)
        phi_gt = model.joint_feature_vector(gt)
        # Hamming loss is linear: sum(gt) + sum(x * (1 - 2 gt))
        loss_coefficients = 1.0 - 2.0 * gt

        weights = np.full(model.num_weights, self.initial_weight, dtype=np.float64)
        best_weights = weights.copy()
        best_objective = np.inf
        self.history = {'objective': [], 'violation': [], 'loss': []}

        logger.info(
            "Learning %d weights on %d variables (max %d iterations)",
            model.num_weights, model.num_variables, self.max_iterations
        )

        iterations = tqdm(
            range(1, self.max_iterations + 1),
            desc='Structured learning',
            disable=not self.verbose
        )
        for t in iterations:
            c, _ = model.energy_coefficients(weights)
            y_hat, _ = self.solver.minimize(model, c - loss_coefficients)

            phi_hat = model.joint_feature_vector(y_hat)
            loss = hamming_loss(y_hat, gt)
            violation = max(0.0, float(weights @ (phi_gt - phi_hat)) + loss)
            objective = 0.5 * self.regularizer_weight * float(weights @ weights) + violation

            self.history['objective'].append(objective)
            self.history['violation'].append(violation)
            self.history['loss'].append(loss)
            logger.debug(
                "Iteration %d: objective=%.6g violation=%.6g loss=%g",
                t, objective, violation, loss
            )

            if objective < best_objective:
                best_objective = objective
                best_weights = weights.copy()

            if violation <= self.epsilon:
                logger.info("Converged after %d iterations (objective %.6g)", t, objective)
                break

            gradient = self.regularizer_weight * weights + phi_gt - phi_hat
            weights = weights - self.learning_rate / np.sqrt(t) * gradient
        else:
            logger.info(
                "Stopped after %d iterations, best objective %.6g",
                self.max_iterations, best_objective
            )

        return best_weights

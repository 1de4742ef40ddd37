"""
Tests for structured max-margin learning.
"""

import unittest
from unittest.mock import MagicMock

import numpy as np

from config.config_loader import LearningConfig
from hypotheses import LinkAnnotation
from optimization import (
    BruteForceSolver,
    ModelBuilder,
    StructuredMaxMarginLearner,
    WeightIndexAllocator,
    hamming_loss
)
from optimization.solvers import Solver
from tracking.ground_truth import reconstruct_ground_truth

from graph_factory import chain_graph


class TestHammingLoss(unittest.TestCase):

    def test_counts_differences(self):
        self.assertEqual(hamming_loss([0, 1, 1, 0], [0, 1, 1, 0]), 0.0)
        self.assertEqual(hamming_loss([1, 1, 0, 0], [0, 1, 1, 0]), 2.0)


class TestStructuredMaxMarginLearner(unittest.TestCase):
    """Test StructuredMaxMarginLearner on the two-node chain."""

    def setUp(self):
        """Set up test fixtures."""
        self.graph = chain_graph()
        self.model = ModelBuilder(self.graph, WeightIndexAllocator(self.graph).allocate()).build()
        self.gt = reconstruct_ground_truth(self.graph, self.model, [LinkAnnotation(1, 2, True)])

    def test_learned_weights_reproduce_ground_truth(self):
        """Test that inference with the learned weights returns the ground truth."""
        solver = BruteForceSolver()
        config = LearningConfig(max_iterations=50, learning_rate=1.0, regularizer_weight=1e-3)
        learner = StructuredMaxMarginLearner(solver, config)

        weights = learner.fit_weights(self.model, self.gt)

        self.assertEqual(weights.shape, (self.model.num_weights,))
        result = solver.solve(self.model, weights)
        self.assertEqual(result.solution.tolist(), self.gt.tolist())
        self.assertLess(len(learner.history['objective']), 50)
        self.assertEqual(learner.history['violation'][-1], 0.0)

    def test_ground_truth_energy_is_lowest(self):
        solver = BruteForceSolver()
        learner = StructuredMaxMarginLearner(
            solver, LearningConfig(max_iterations=50, learning_rate=1.0, regularizer_weight=1e-3)
        )
        weights = learner.fit_weights(self.model, self.gt)

        gt_energy = self.model.energy(self.gt, weights)
        for labeling in ([0] * 7, [0, 1, 1, 1, 0, 0, 0], [0, 0, 0, 0, 1, 1, 1]):
            self.assertLess(gt_energy, self.model.energy(labeling, weights))

    def test_stops_when_margin_is_satisfied(self):
        """Test early stopping when loss-augmented inference returns the ground truth."""
        solver = MagicMock(spec=Solver)
        solver.minimize.return_value = (self.gt.copy(), 0.0)
        learner = StructuredMaxMarginLearner(solver, LearningConfig(max_iterations=10))

        weights = learner.fit_weights(self.model, self.gt)

        np.testing.assert_array_equal(weights, np.zeros(self.model.num_weights))
        self.assertEqual(solver.minimize.call_count, 1)
        self.assertEqual(learner.history['loss'], [0.0])

    def test_loss_augmented_coefficients(self):
        """Test that the solver sees c - (1 - 2 * gt)."""
        solver = MagicMock(spec=Solver)
        solver.minimize.return_value = (self.gt.copy(), 0.0)
        learner = StructuredMaxMarginLearner(solver, LearningConfig(max_iterations=1, initial_weight=0.0))

        learner.fit_weights(self.model, self.gt)

        _, coefficients = solver.minimize.call_args[0]
        np.testing.assert_allclose(coefficients, 2.0 * self.gt - 1.0)

    def test_history_is_reset(self):
        solver = MagicMock(spec=Solver)
        solver.minimize.return_value = (self.gt.copy(), 0.0)
        learner = StructuredMaxMarginLearner(solver, LearningConfig(max_iterations=3))

        learner.fit_weights(self.model, self.gt)
        learner.fit_weights(self.model, self.gt)

        self.assertEqual(len(learner.history['objective']), 1)


if __name__ == '__main__':
    unittest.main()

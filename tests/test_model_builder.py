"""
Tests for model assembly: variable ids, energies and constraint rows.
"""

import unittest
import numpy as np

from hypotheses import HypothesesGraph, VariableKind
from optimization import ModelBuilder, WeightIndexAllocator, assemble
from utils.exceptions import ConfigurationError

from graph_factory import chain_graph, competing_document, division_graph


def build(graph):
    return ModelBuilder(graph, WeightIndexAllocator(graph).allocate()).build()


class TestModelBuilder(unittest.TestCase):
    """Test ModelBuilder on a two-node chain."""

    def setUp(self):
        """Set up test fixtures."""
        self.graph = chain_graph()
        self.model = build(self.graph)

    def test_variable_ids(self):
        """Test that links come first, then segmentations by id."""
        expected = [
            (VariableKind.LINK, (1, 2)),
            (VariableKind.DETECTION, 1),
            (VariableKind.APPEARANCE, 1),
            (VariableKind.DISAPPEARANCE, 1),
            (VariableKind.DETECTION, 2),
            (VariableKind.APPEARANCE, 2),
            (VariableKind.DISAPPEARANCE, 2),
        ]

        self.assertEqual(self.model.num_variables, 7)
        for idx, (kind, key) in enumerate(expected):
            self.assertEqual(self.model.variable_id(kind, key), idx)

    def test_absent_variables(self):
        self.assertEqual(self.model.variable_id(VariableKind.DIVISION, 1), -1)
        self.assertEqual(self.model.variable_id(VariableKind.LINK, (2, 1)), -1)
        self.assertFalse(self.model.is_active(np.ones(7), VariableKind.DIVISION, 1))

    def test_num_weights(self):
        self.assertEqual(self.model.num_weights, 8)
        self.assertEqual(self.model.num_weights, WeightIndexAllocator(self.graph).compute_num_weights())

    def test_constraint_names(self):
        names = [row.name for row in self.model.constraints]
        self.assertEqual(names, ['incoming[1]', 'outgoing[1]', 'incoming[2]', 'outgoing[2]'])

    def test_energy_coefficients(self):
        """Test c = (w_on - w_off) . f and constant = sum of w_off . f."""
        c, constant = self.model.energy_coefficients(np.arange(8))

        np.testing.assert_allclose(c, np.ones(7))
        self.assertAlmostEqual(constant, 24.0)

    def test_energy_matches_linearization(self):
        weights = np.array([0.5, -2.0, 1.0, -1.5, 0.25, 3.0, -0.75, 1.25])
        c, constant = self.model.energy_coefficients(weights)

        for labeling in ([0] * 7, [1, 1, 1, 0, 1, 0, 1], [0, 1, 1, 1, 0, 0, 0]):
            x = np.array(labeling)
            self.assertAlmostEqual(self.model.energy(x, weights), c @ x + constant)

    def test_joint_feature_vector(self):
        """Test that features land in the half selected by the state."""
        phi = self.model.joint_feature_vector([1, 1, 1, 0, 1, 0, 1])

        # link on; det 1 and 2 on; app: 1 on, 2 off; dis: 1 off, 2 on
        np.testing.assert_allclose(phi, [0, 1, 0, 2, 1, 1, 1, 1])

    def test_weight_length_mismatch(self):
        with self.assertRaises(ConfigurationError):
            self.model.energy_coefficients(np.zeros(7))

    def test_solution_length_mismatch(self):
        with self.assertRaises(ConfigurationError):
            self.model.joint_feature_vector([0, 1])

    def test_feasible_labelings(self):
        self.assertEqual(self.model.violated_constraints([0] * 7), [])
        self.assertEqual(self.model.violated_constraints([1, 1, 1, 0, 1, 0, 1]), [])
        self.assertEqual(self.model.violated_constraints([0, 1, 1, 1, 0, 0, 0]), [])

    def test_infeasible_labeling(self):
        """Detection of 2 on without incoming flow."""
        violated = self.model.violated_constraints([0, 0, 0, 0, 1, 0, 1])
        self.assertEqual(violated, ['incoming[2]'])

    def test_constraint_matrix(self):
        A, lower, upper = self.model.constraint_matrix()

        self.assertEqual(A.shape, (4, 7))
        np.testing.assert_allclose(lower, np.zeros(4))
        np.testing.assert_allclose(upper, np.zeros(4))
        # outgoing[1]: link + dis1 - det1
        np.testing.assert_allclose(A.toarray()[1], [1, -1, 0, 1, 0, 0, 0])

    def test_describe_variable(self):
        self.assertEqual(self.model.describe_variable(0), 'Link[1 -> 2]')
        self.assertEqual(self.model.describe_variable(4), 'Detection[2]')

    def test_reassembly_gives_identical_model(self):
        """Test that assembly leaves the graph untouched."""
        again = assemble(self.graph, WeightIndexAllocator(self.graph).allocate())

        self.assertEqual(again.variable_keys, self.model.variable_keys)
        self.assertEqual(again.constraints, self.model.constraints)
        self.assertEqual(self.graph.segmentations[1].outgoing_links, [(1, 2)])


class TestDivisionConstraints(unittest.TestCase):
    """Test the division rows."""

    def setUp(self):
        self.model = build(division_graph())

    def test_rows(self):
        names = [row.name for row in self.model.constraints]

        self.assertIn('division[1]', names)
        self.assertIn('division_disappearance[1]', names)
        self.assertNotIn('division[2]', names)
        self.assertEqual(len(names), 8)

    def test_division_labeling(self):
        """Test that a dividing detection may feed two links."""
        x = np.zeros(self.model.num_variables, dtype=int)
        for kind, key in [
            (VariableKind.LINK, (1, 2)), (VariableKind.LINK, (1, 3)),
            (VariableKind.DETECTION, 1), (VariableKind.DIVISION, 1), (VariableKind.APPEARANCE, 1),
            (VariableKind.DETECTION, 2), (VariableKind.DISAPPEARANCE, 2),
            (VariableKind.DETECTION, 3), (VariableKind.DISAPPEARANCE, 3),
        ]:
            x[self.model.variable_id(kind, key)] = 1

        self.assertEqual(self.model.violated_constraints(x), [])

        # division together with disappearance
        x[self.model.variable_id(VariableKind.DISAPPEARANCE, 1)] = 1
        violated = self.model.violated_constraints(x)
        self.assertIn('division_disappearance[1]', violated)


class TestExclusionRows(unittest.TestCase):

    def test_exclusion_row(self):
        model = build(HypothesesGraph.from_dict(competing_document()))
        row = model.constraints[-1]

        self.assertEqual(row.name, 'exclusion[0]')
        self.assertEqual(row.upper, 1.0)
        self.assertEqual(
            sorted(var for var, _ in row.coefficients),
            sorted([
                model.variable_id(VariableKind.DETECTION, 2),
                model.variable_id(VariableKind.DETECTION, 3),
            ])
        )


if __name__ == '__main__':
    unittest.main()

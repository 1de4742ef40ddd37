"""
Tests for ground-truth reconstruction from link annotations.
"""

import unittest
import numpy as np

from hypotheses import HypothesesGraph, LinkAnnotation, VariableKind
from optimization import ModelBuilder, WeightIndexAllocator
from tracking.ground_truth import GroundTruthReconstructor, reconstruct_ground_truth
from tracking.verification import verify_solution
from utils.exceptions import ConfigurationError

from graph_factory import chain_graph, division_graph, link, segmentation


def build(graph):
    return ModelBuilder(graph, WeightIndexAllocator(graph).allocate()).build()


class TestChainGroundTruth(unittest.TestCase):
    """Test reconstruction on A(1) -> B(2)."""

    def setUp(self):
        """Set up test fixtures."""
        self.graph = chain_graph()
        self.model = build(self.graph)
        self.reconstructor = GroundTruthReconstructor(self.graph, self.model)

    def test_single_link(self):
        """Test that one active link implies the whole track."""
        gt = self.reconstructor.reconstruct([LinkAnnotation(1, 2, True)])

        # link, det1, app1, dis1, det2, app2, dis2
        self.assertEqual(gt.tolist(), [1, 1, 1, 0, 1, 0, 1])
        self.assertEqual(self.model.violated_constraints(gt), [])

    def test_no_active_links(self):
        gt = self.reconstructor.reconstruct([LinkAnnotation(1, 2, False)])
        self.assertEqual(gt.tolist(), [0] * 7)

    def test_repeated_annotations_count_once(self):
        once = self.reconstructor.reconstruct([LinkAnnotation(1, 2, True)])
        repeated = self.reconstructor.reconstruct([
            LinkAnnotation(1, 2, True),
            LinkAnnotation(1, 2, True),
        ])
        np.testing.assert_array_equal(once, repeated)

    def test_unknown_active_link(self):
        with self.assertRaisesRegex(ConfigurationError, 'Cannot find link'):
            self.reconstructor.reconstruct([LinkAnnotation(2, 1, True)])

    def test_unknown_inactive_link_is_ignored(self):
        gt = self.reconstructor.reconstruct([LinkAnnotation(2, 1, False), LinkAnnotation(1, 2, True)])
        self.assertEqual(gt.tolist(), [1, 1, 1, 0, 1, 0, 1])

    def test_missing_appearance(self):
        """Test that a track start needs an appearance variable."""
        graph = chain_graph(with_appearance_a=False)

        with self.assertRaisesRegex(ConfigurationError, 'no appearance features'):
            reconstruct_ground_truth(graph, build(graph), [LinkAnnotation(1, 2, True)])

    def test_missing_disappearance(self):
        graph = HypothesesGraph.build(
            [segmentation(1), segmentation(2, disappearance=None)], [link(1, 2)]
        )

        with self.assertRaisesRegex(ConfigurationError, 'no disappearance features'):
            reconstruct_ground_truth(graph, build(graph), [LinkAnnotation(1, 2, True)])


class TestDivisionGroundTruth(unittest.TestCase):
    """Test reconstruction when one source feeds two links."""

    def test_division(self):
        graph = division_graph()
        model = build(graph)

        gt = reconstruct_ground_truth(graph, model, [
            LinkAnnotation(1, 3, True),
            LinkAnnotation(1, 2, True),
        ])

        on = {
            (VariableKind.LINK, (1, 2)), (VariableKind.LINK, (1, 3)),
            (VariableKind.DETECTION, 1), (VariableKind.DIVISION, 1), (VariableKind.APPEARANCE, 1),
            (VariableKind.DETECTION, 2), (VariableKind.DISAPPEARANCE, 2),
            (VariableKind.DETECTION, 3), (VariableKind.DISAPPEARANCE, 3),
        }
        for var, (kind, key) in enumerate(model.variable_keys):
            self.assertEqual(gt[var], 1 if (kind, key) in on else 0, model.describe_variable(var))
        self.assertEqual(model.violated_constraints(gt), [])

    def test_single_branch_does_not_divide(self):
        graph = division_graph()
        model = build(graph)

        gt = reconstruct_ground_truth(graph, model, [LinkAnnotation(1, 2, True)])

        self.assertFalse(model.is_active(gt, VariableKind.DIVISION, 1))
        self.assertFalse(model.is_active(gt, VariableKind.DETECTION, 3))

    def test_division_without_features(self):
        graph = division_graph(with_division=False)

        with self.assertRaisesRegex(ConfigurationError, 'no division features'):
            reconstruct_ground_truth(graph, build(graph), [
                LinkAnnotation(1, 2, True),
                LinkAnnotation(1, 3, True),
            ])

    def test_annotation_order_does_not_matter(self):
        """Test a division followed by a track continuation in both orders."""
        graph = HypothesesGraph.build(
            [segmentation(1, division=(1.0,)), segmentation(2), segmentation(3), segmentation(4)],
            [link(1, 2), link(1, 3), link(2, 4)]
        )
        model = build(graph)
        annotations = [
            LinkAnnotation(1, 2, True),
            LinkAnnotation(2, 4, True),
            LinkAnnotation(1, 3, True),
        ]

        forward = reconstruct_ground_truth(graph, model, annotations)
        backward = reconstruct_ground_truth(graph, model, list(reversed(annotations)))

        np.testing.assert_array_equal(forward, backward)
        self.assertTrue(model.is_active(forward, VariableKind.DIVISION, 1))
        self.assertTrue(verify_solution(graph, model, forward).valid)

    def test_source_used_three_times(self):
        graph = HypothesesGraph.build(
            [segmentation(1, division=(1.0,)), segmentation(2), segmentation(3), segmentation(4)],
            [link(1, 2), link(1, 3), link(1, 4)]
        )

        with self.assertRaisesRegex(ConfigurationError, 'more than twice'):
            reconstruct_ground_truth(graph, build(graph), [
                LinkAnnotation(1, 2, True),
                LinkAnnotation(1, 3, True),
                LinkAnnotation(1, 4, True),
            ])


class TestLinkAnnotation(unittest.TestCase):

    def test_from_dict(self):
        annotation = LinkAnnotation.from_dict({'src': 4, 'dest': 7, 'value': True})

        self.assertEqual(annotation.key, (4, 7))
        self.assertTrue(annotation.value)
        self.assertEqual(annotation.to_dict(), {'src': 4, 'dest': 7, 'value': True})


if __name__ == '__main__':
    unittest.main()

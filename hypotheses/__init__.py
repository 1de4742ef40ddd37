"""Hypotheses graph for multi-target tracking."""

from .variable import Variable, VariableKind, as_feature_vector
from .segmentation_hypothesis import SegmentationHypothesis
from .linking_hypothesis import LinkingHypothesis
from .exclusion_constraint import ExclusionConstraint
from .link_annotation import LinkAnnotation, annotations_from_dicts
from .hypotheses_graph import HypothesesGraph

__all__ = [
    'Variable',
    'VariableKind',
    'as_feature_vector',
    'SegmentationHypothesis',
    'LinkingHypothesis',
    'ExclusionConstraint',
    'LinkAnnotation',
    'annotations_from_dicts',
    'HypothesesGraph'
]

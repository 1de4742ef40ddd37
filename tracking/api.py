"""
Dictionary-level entry points.

Graphs, weights and link results are passed in the same structure as the
JSON documents, so callers can hand over parsed documents directly.
"""

from typing import Dict, Optional

from config.config_loader import Config
from data.json_loader import annotations_from_document, link_results_document, weights_document, weights_from_document
from .tracking_model import TrackingModel


def track(graph: Dict, weights: Dict, config: Optional[Config] = None) -> Dict:
    """
    Run inference on a graph.

    Args:
        graph: Model document ('segmentationHypotheses', 'linkingHypotheses', 'exclusions').
        weights: {'weights': [...]} document.
        config: Optional configuration.

    Returns:
        {'linkResults': [{'src', 'dest', 'value'}, ...]}
    """
    model = TrackingModel.from_dict(graph, config=config)
    result = model.infer(weights_from_document(weights))
    return link_results_document(model.link_results(result.solution))


def train(graph: Dict, ground_truth: Dict, config: Optional[Config] = None) -> Dict:
    """
    Learn weights from annotated links.

    Returns:
        {'weights': [...], 'descriptions': [...]}
    """
    model = TrackingModel.from_dict(graph, config=config)
    weights = model.learn(annotations_from_document(ground_truth))
    return weights_document(weights, model.weight_descriptions())


def validate(graph: Dict, ground_truth: Dict, config: Optional[Config] = None) -> bool:
    """
    Reconstruct the ground truth labeling and check it against all constraints.
    """
    model = TrackingModel.from_dict(graph, config=config)
    solution = model.ground_truth(annotations_from_document(ground_truth))
    return model.verify(solution).valid

"""
JSON documents: hypotheses graphs, link results and weight vectors.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from hypotheses import HypothesesGraph, LinkAnnotation, annotations_from_dicts
from utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

LINK_RESULTS_KEY = 'linkResults'
LEGACY_LINK_RESULTS_KEY = 'linkingResults'
WEIGHTS_KEY = 'weights'
DESCRIPTIONS_KEY = 'descriptions'


class NumpyEncoder(json.JSONEncoder):
    """Custom encoder for numpy data types"""
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        return json.JSONEncoder.default(self, obj)


def read_json(path: PathLike) -> Any:
    """
    Read a JSON document.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Could not open JSON file {path}")

    with open(path, 'r') as f:
        return json.load(f)


def write_json(path: PathLike, data: Any):
    with open(path, 'w') as f:
        json.dump(data, f, indent=4, separators=(',', ': '), cls=NumpyEncoder)


def load_graph(path: PathLike) -> HypothesesGraph:
    """
    Load a hypotheses graph from a model document.

    Args:
        path: JSON file with 'segmentationHypotheses', 'linkingHypotheses'
            and 'exclusions'.

    Returns:
        HypothesesGraph instance.
    """
    logger.info("Loading model from %s", path)
    return HypothesesGraph.from_dict(read_json(path))


def save_graph(path: PathLike, graph: HypothesesGraph):
    write_json(path, graph.to_dict())


def annotations_from_document(document: Dict) -> List[LinkAnnotation]:
    """
    Extract link annotations from a ground-truth or result document.

    Accepts the 'linkResults' key as well as the older 'linkingResults'.
    """
    for key in (LINK_RESULTS_KEY, LEGACY_LINK_RESULTS_KEY):
        if key in document:
            return annotations_from_dicts(document[key])
    raise ConfigurationError(
        f"Document has neither '{LINK_RESULTS_KEY}' nor '{LEGACY_LINK_RESULTS_KEY}' entry"
    )


def load_link_results(path: PathLike) -> List[LinkAnnotation]:
    """
    Load link annotations (ground truth or a saved result).

    Args:
        path: JSON file with a 'linkResults' list of {'src', 'dest', 'value'}.
    """
    annotations = annotations_from_document(read_json(path))
    logger.info("%s contains %d link annotations", path, len(annotations))
    return annotations


def link_results_document(annotations: Iterable[LinkAnnotation]) -> Dict:
    return {LINK_RESULTS_KEY: [a.to_dict() for a in annotations]}


def save_link_results(path: PathLike, annotations: Iterable[LinkAnnotation]):
    """Write one {'src', 'dest', 'value'} record per annotation."""
    write_json(path, link_results_document(annotations))


def weights_from_document(document: Union[Dict, Sequence[float]]) -> np.ndarray:
    """
    Extract a weight vector from {'weights': [...]} or a plain list.
    """
    if isinstance(document, dict):
        if WEIGHTS_KEY not in document:
            raise ConfigurationError(f"Weights document has no '{WEIGHTS_KEY}' entry")
        document = document[WEIGHTS_KEY]
    return np.asarray(document, dtype=np.float64).reshape(-1)


def weights_document(weights: Sequence[float], descriptions: Optional[Sequence[str]] = None) -> Dict:
    document = {WEIGHTS_KEY: [float(w) for w in weights]}
    if descriptions is not None:
        document[DESCRIPTIONS_KEY] = list(descriptions)
    return document


def load_weights(path: PathLike) -> np.ndarray:
    return weights_from_document(read_json(path))


def save_weights(path: PathLike, weights: Sequence[float], descriptions: Optional[Sequence[str]] = None):
    """
    Save a weight vector, optionally with one description per weight.
    """
    write_json(path, weights_document(weights, descriptions))

"""Reading and writing tracking documents."""

from .json_loader import (
    NumpyEncoder,
    read_json,
    write_json,
    load_graph,
    save_graph,
    annotations_from_document,
    load_link_results,
    link_results_document,
    save_link_results,
    weights_from_document,
    weights_document,
    load_weights,
    save_weights
)

__all__ = [
    'NumpyEncoder',
    'read_json',
    'write_json',
    'load_graph',
    'save_graph',
    'annotations_from_document',
    'load_link_results',
    'link_results_document',
    'save_link_results',
    'weights_from_document',
    'weights_document',
    'load_weights',
    'save_weights'
]

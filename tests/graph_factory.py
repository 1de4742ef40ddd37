"""
Small hypotheses graphs shared by the tests.
"""

from hypotheses import HypothesesGraph


def segmentation(seg_id, features=(1.0,), division=None, appearance=(1.0,), disappearance=(1.0,)):
    """Segmentation record; pass None to leave an optional variable out."""
    entry = {'id': seg_id, 'features': list(features)}
    if division is not None:
        entry['divisionFeatures'] = list(division)
    if appearance is not None:
        entry['appearanceFeatures'] = list(appearance)
    if disappearance is not None:
        entry['disappearanceFeatures'] = list(disappearance)
    return entry


def link(src, dest, features=(1.0,)):
    return {'src': src, 'dest': dest, 'features': list(features)}


def chain_document(with_appearance_a=True):
    """A(1) -> B(2), both able to appear and disappear."""
    return {
        'segmentationHypotheses': [
            segmentation(1, appearance=(1.0,) if with_appearance_a else None),
            segmentation(2),
        ],
        'linkingHypotheses': [link(1, 2)],
        'exclusions': []
    }


def chain_graph(with_appearance_a=True):
    return HypothesesGraph.from_dict(chain_document(with_appearance_a))


def division_document(with_division=True):
    """A(1) -> B(2) and A(1) -> C(3); A may divide."""
    return {
        'segmentationHypotheses': [
            segmentation(1, division=(1.0,) if with_division else None),
            segmentation(2),
            segmentation(3),
        ],
        'linkingHypotheses': [link(1, 2), link(1, 3)],
        'exclusions': []
    }


def division_graph(with_division=True):
    return HypothesesGraph.from_dict(division_document(with_division))


def competing_document():
    """A(1) links to B(2) or C(3); B and C exclude each other."""
    return {
        'segmentationHypotheses': [segmentation(1), segmentation(2), segmentation(3)],
        'linkingHypotheses': [link(1, 2, (1.0, 0.0)), link(1, 3, (0.0, 1.0))],
        'exclusions': [[2, 3]]
    }

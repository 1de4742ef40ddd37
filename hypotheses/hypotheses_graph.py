"""
Hypotheses graph: segmentation and linking hypotheses plus exclusions.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from utils.exceptions import ConfigurationError
from .exclusion_constraint import ExclusionConstraint
from .linking_hypothesis import LinkingHypothesis
from .segmentation_hypothesis import SegmentationHypothesis

logger = logging.getLogger(__name__)

SEGMENTATIONS_KEY = 'segmentationHypotheses'
LINKS_KEY = 'linkingHypotheses'
EXCLUSIONS_KEY = 'exclusions'


class HypothesesGraph:
    """
    Holds all hypotheses of one tracking problem.

    Segmentations are added first, then links (which register with their
    endpoints), then exclusion constraints. Iteration over segmentations and
    links is in sorted key order so model assembly is deterministic.
    """

    def __init__(self):
        self.segmentations: Dict[int, SegmentationHypothesis] = {}
        self.links: Dict[Tuple[int, int], LinkingHypothesis] = {}
        self.exclusions: List[ExclusionConstraint] = []

    def add_segmentation(self, hypothesis: SegmentationHypothesis) -> SegmentationHypothesis:
        """
        Add a segmentation hypothesis.

        Raises:
            ConfigurationError: If the id is already taken.
        """
        if hypothesis.id in self.segmentations:
            raise ConfigurationError(
                f"Segmentation hypothesis id {hypothesis.id} is used more than once"
            )
        self.segmentations[hypothesis.id] = hypothesis
        return hypothesis

    def add_link(self, link: LinkingHypothesis) -> LinkingHypothesis:
        """
        Add a linking hypothesis and register it with its endpoints.

        Raises:
            ConfigurationError: On a duplicate (src, dest) pair or unknown endpoint.
        """
        if link.key in self.links:
            raise ConfigurationError(
                f"Linking hypothesis {link.src_id} -> {link.dest_id} is defined more than once"
            )
        link.register_with_segmentations(self.segmentations)
        self.links[link.key] = link
        return link

    def add_exclusion(self, exclusion: ExclusionConstraint) -> ExclusionConstraint:
        exclusion.validate(self.segmentations)
        self.exclusions.append(exclusion)
        return exclusion

    def sorted_segmentations(self) -> List[SegmentationHypothesis]:
        return [self.segmentations[i] for i in sorted(self.segmentations)]

    def sorted_links(self) -> List[LinkingHypothesis]:
        return [self.links[k] for k in sorted(self.links)]

    def get_segmentation(self, hypothesis_id: int) -> SegmentationHypothesis:
        if hypothesis_id not in self.segmentations:
            raise ConfigurationError(f"Unknown segmentation hypothesis {hypothesis_id}")
        return self.segmentations[hypothesis_id]

    def get_link(self, src_id: int, dest_id: int) -> LinkingHypothesis:
        key = (int(src_id), int(dest_id))
        if key not in self.links:
            raise ConfigurationError(f"Cannot find link {src_id} -> {dest_id}")
        return self.links[key]

    @classmethod
    def build(
        cls,
        segmentations: Iterable[Dict],
        links: Iterable[Dict],
        exclusions: Optional[Iterable[Iterable[int]]] = None
    ) -> 'HypothesesGraph':
        """
        Construct a graph from raw records.

        Args:
            segmentations: Segmentation records ('id', 'features', ...).
            links: Linking records ('src', 'dest', 'features').
            exclusions: Lists of mutually exclusive segmentation ids.

        Returns:
            HypothesesGraph instance.
        """
        graph = cls()

        for entry in segmentations:
            graph.add_segmentation(SegmentationHypothesis.from_dict(entry))

        for entry in links:
            graph.add_link(LinkingHypothesis.from_dict(entry))

        for entry in exclusions or []:
            graph.add_exclusion(ExclusionConstraint.from_list(entry))

        logger.info(
            "Graph contains %d segmentation hypotheses, %d linking hypotheses, %d exclusions",
            len(graph.segmentations), len(graph.links), len(graph.exclusions)
        )
        return graph

    @classmethod
    def from_dict(cls, data: Dict) -> 'HypothesesGraph':
        """
        Construct a graph from a model document.

        Args:
            data: Dict with 'segmentationHypotheses', 'linkingHypotheses'
                and optionally 'exclusions'.
        """
        if SEGMENTATIONS_KEY not in data:
            raise ConfigurationError(f"Model document has no '{SEGMENTATIONS_KEY}' entry")

        return cls.build(
            data[SEGMENTATIONS_KEY],
            data.get(LINKS_KEY, []),
            data.get(EXCLUSIONS_KEY, [])
        )

    def to_dict(self) -> Dict:
        return {
            SEGMENTATIONS_KEY: [h.to_dict() for h in self.sorted_segmentations()],
            LINKS_KEY: [l.to_dict() for l in self.sorted_links()],
            EXCLUSIONS_KEY: [e.to_list() for e in self.exclusions],
        }

    def __repr__(self) -> str:
        return (
            f"HypothesesGraph(segmentations={len(self.segmentations)}, "
            f"links={len(self.links)}, exclusions={len(self.exclusions)})"
        )

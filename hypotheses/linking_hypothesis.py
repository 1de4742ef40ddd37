"""
Linking hypotheses: candidate transitions between two segmentations.
"""

from typing import Dict, Mapping, Tuple

from utils.exceptions import ConfigurationError
from .segmentation_hypothesis import SegmentationHypothesis
from .variable import Variable


class LinkingHypothesis:
    """
    Directed candidate transition from segmentation `src_id` to `dest_id`.

    Endpoints are referenced by id only; the graph resolves them.
    """

    def __init__(self, src_id: int, dest_id: int, features):
        self.src_id = int(src_id)
        self.dest_id = int(dest_id)
        self.variable = Variable.from_values(features if features is not None else [])

    @property
    def key(self) -> Tuple[int, int]:
        return (self.src_id, self.dest_id)

    @property
    def num_features(self) -> int:
        return self.variable.num_features

    def register_with_segmentations(
        self,
        segmentations: Mapping[int, SegmentationHypothesis]
    ):
        """
        Add this link to the incident link lists of both endpoints.

        Args:
            segmentations: Id-indexed segmentation hypotheses.

        Raises:
            ConfigurationError: If an endpoint id is unknown.
        """
        for endpoint in (self.src_id, self.dest_id):
            if endpoint not in segmentations:
                raise ConfigurationError(
                    f"Link {self.src_id} -> {self.dest_id} references unknown "
                    f"segmentation hypothesis {endpoint}"
                )

        segmentations[self.src_id].add_outgoing_link(self.key)
        segmentations[self.dest_id].add_incoming_link(self.key)

    @classmethod
    def from_dict(cls, entry: Dict) -> 'LinkingHypothesis':
        """
        Create link from a document record with 'src', 'dest' and 'features'.
        """
        try:
            return cls(entry['src'], entry['dest'], entry.get('features'))
        except KeyError as exc:
            raise ConfigurationError(
                f"Linking hypothesis is missing field {exc}: {entry}"
            ) from exc

    def to_dict(self, value=None) -> Dict:
        """
        Convert to a document record.

        Args:
            value: If given, emit a result record {'src', 'dest', 'value'}
                instead of the hypothesis record.
        """
        if value is not None:
            return {'src': self.src_id, 'dest': self.dest_id, 'value': bool(value)}
        return {'src': self.src_id, 'dest': self.dest_id, 'features': self.variable.to_list()}

    def __repr__(self) -> str:
        return f"LinkingHypothesis({self.src_id} -> {self.dest_id}, features={self.num_features})"

"""
Segmentation hypotheses: candidate object instances at one point in time.
"""

from typing import Dict, List, Optional, Tuple

from utils.exceptions import ConfigurationError
from .variable import Variable, VariableKind

LinkKey = Tuple[int, int]


class SegmentationHypothesis:
    """
    Candidate detection with its detection, division, appearance and
    disappearance variables.

    Division, appearance and disappearance are optional. A hypothesis without
    an appearance variable can only be active with an incoming link, and one
    without a disappearance variable only with an outgoing link.
    """

    def __init__(
        self,
        hypothesis_id: int,
        features,
        division_features=None,
        appearance_features=None,
        disappearance_features=None
    ):
        """
        Initialize segmentation hypothesis.

        Args:
            hypothesis_id: Unique id within the graph.
            features: Detection features (mandatory).
            division_features: Optional division features.
            appearance_features: Optional appearance features.
            disappearance_features: Optional disappearance features.
        """
        if features is None:
            raise ConfigurationError(
                f"Segmentation hypothesis {hypothesis_id} has no detection features"
            )

        self.id = int(hypothesis_id)
        self._variables: Dict[VariableKind, Variable] = {
            VariableKind.DETECTION: Variable.from_values(features),
            VariableKind.DIVISION: Variable.from_values(division_features),
            VariableKind.APPEARANCE: Variable.from_values(appearance_features),
            VariableKind.DISAPPEARANCE: Variable.from_values(disappearance_features),
        }

        # Keys of incident links, filled by LinkingHypothesis.register_with_segmentations
        self.incoming_links: List[LinkKey] = []
        self.outgoing_links: List[LinkKey] = []

    @property
    def detection(self) -> Variable:
        return self._variables[VariableKind.DETECTION]

    @property
    def division(self) -> Variable:
        return self._variables[VariableKind.DIVISION]

    @property
    def appearance(self) -> Variable:
        return self._variables[VariableKind.APPEARANCE]

    @property
    def disappearance(self) -> Variable:
        return self._variables[VariableKind.DISAPPEARANCE]

    def variable(self, kind: VariableKind) -> Variable:
        """
        Get the variable of a given kind.

        Args:
            kind: One of the segmentation variable kinds.

        Returns:
            The Variable (possibly absent, i.e. without features).
        """
        if kind not in self._variables:
            raise KeyError(f"Segmentation hypotheses have no {kind.value} variable")
        return self._variables[kind]

    def has_variable(self, kind: VariableKind) -> bool:
        """Detection always exists; the other kinds only with features."""
        if kind == VariableKind.DETECTION:
            return True
        return self.variable(kind).is_present()

    def add_incoming_link(self, key: LinkKey):
        self.incoming_links.append(key)

    def add_outgoing_link(self, key: LinkKey):
        self.outgoing_links.append(key)

    @classmethod
    def from_dict(cls, entry: Dict) -> 'SegmentationHypothesis':
        """
        Create hypothesis from a document record.

        Args:
            entry: Dict with 'id' and 'features', and optionally
                'divisionFeatures', 'appearanceFeatures', 'disappearanceFeatures'.

        Returns:
            SegmentationHypothesis instance.
        """
        if 'id' not in entry:
            raise ConfigurationError(f"Segmentation hypothesis without id: {entry}")

        return cls(
            hypothesis_id=entry['id'],
            features=entry.get('features'),
            division_features=entry.get('divisionFeatures'),
            appearance_features=entry.get('appearanceFeatures'),
            disappearance_features=entry.get('disappearanceFeatures')
        )

    def to_dict(self) -> Dict:
        data = {'id': self.id, 'features': self.detection.to_list()}
        if self.division.is_present():
            data['divisionFeatures'] = self.division.to_list()
        if self.appearance.is_present():
            data['appearanceFeatures'] = self.appearance.to_list()
        if self.disappearance.is_present():
            data['disappearanceFeatures'] = self.disappearance.to_list()
        return data

    def __repr__(self) -> str:
        optional = [
            kind.value for kind in (
                VariableKind.DIVISION, VariableKind.APPEARANCE, VariableKind.DISAPPEARANCE
            )
            if self.has_variable(kind)
        ]
        return (
            f"SegmentationHypothesis(id={self.id}, "
            f"in={len(self.incoming_links)}, out={len(self.outgoing_links)}, "
            f"optional={optional})"
        )

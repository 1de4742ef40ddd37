"""
Mutual exclusion between segmentation hypotheses.
"""

from typing import Iterable, Mapping

from utils.exceptions import ConfigurationError


class ExclusionConstraint:
    """At most one of the member detections may be active."""

    def __init__(self, member_ids: Iterable[int]):
        self.member_ids = frozenset(int(i) for i in member_ids)

    def validate(self, segmentations: Mapping):
        """
        Check that every member id is a known segmentation hypothesis.

        Raises:
            ConfigurationError: On an unknown member id.
        """
        unknown = sorted(i for i in self.member_ids if i not in segmentations)
        if unknown:
            raise ConfigurationError(
                f"Exclusion constraint references unknown segmentation hypotheses {unknown}"
            )

    def num_active(self, is_active) -> int:
        """
        Count active members.

        Args:
            is_active: Callable mapping a segmentation id to a bool.
        """
        return sum(1 for i in self.member_ids if is_active(i))

    @classmethod
    def from_list(cls, entry: Iterable[int]) -> 'ExclusionConstraint':
        return cls(entry)

    def to_list(self) -> list:
        return sorted(self.member_ids)

    def __repr__(self) -> str:
        return f"ExclusionConstraint({self.to_list()})"

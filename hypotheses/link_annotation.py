"""
Activation decisions for linking hypotheses.

Used both for sparse ground-truth annotations and for exported results.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class LinkAnnotation:
    """Decision on one linking hypothesis."""

    src: int
    dest: int
    value: bool

    @property
    def key(self) -> Tuple[int, int]:
        return (self.src, self.dest)

    @classmethod
    def from_dict(cls, entry: Dict) -> 'LinkAnnotation':
        try:
            return cls(int(entry['src']), int(entry['dest']), bool(entry['value']))
        except KeyError as exc:
            raise ConfigurationError(f"Link annotation is missing field {exc}: {entry}") from exc

    def to_dict(self) -> Dict:
        return {'src': self.src, 'dest': self.dest, 'value': self.value}


def annotations_from_dicts(entries: Iterable[Dict]) -> List[LinkAnnotation]:
    return [LinkAnnotation.from_dict(entry) for entry in entries]

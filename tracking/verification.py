"""
Read-only verification of a labeling against the model's constraints.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from hypotheses import HypothesesGraph, VariableKind
from optimization.model_builder import AssembledModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    """One violated constraint."""

    constraint: str
    """'exclusion', 'incoming', 'outgoing', 'division' or 'division_disappearance'."""

    entity: str
    """Segmentation id or exclusion index the constraint belongs to."""

    message: str


@dataclass
class VerificationResult:
    violations: List[Violation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.valid

    def summarize(self) -> str:
        if self.valid:
            return "Solution satisfies all constraints"
        lines = [f"Found {len(self.violations)} violated constraints:"]
        lines.extend(f"  {v.constraint}[{v.entity}]: {v.message}" for v in self.violations)
        return "\n".join(lines)


class SolutionVerifier:
    """
    Checks exclusion and flow-conservation constraints on a labeling.

    The rules are re-derived from the hypotheses graph rather than read from
    the assembled constraint rows. Violations are reported, never raised.
    """

    def __init__(self, graph: HypothesesGraph, model: AssembledModel):
        self.graph = graph
        self.model = model

    def verify(self, solution: Sequence[int]) -> VerificationResult:
        """
        Verify a labeling.

        Args:
            solution: Binary labeling indexed by variable id.

        Returns:
            VerificationResult listing every violated constraint.
        """
        solution = self.model.check_solution(solution)
        result = VerificationResult()

        def on(kind, key) -> int:
            return 1 if self.model.is_active(solution, kind, key) else 0

        for idx, exclusion in enumerate(self.graph.exclusions):
            num_active = exclusion.num_active(lambda i: on(VariableKind.DETECTION, i))
            if num_active > 1:
                result.violations.append(Violation(
                    'exclusion', str(idx),
                    f"{num_active} of {exclusion.to_list()} are active"
                ))

        for hyp in self.graph.sorted_segmentations():
            detection = on(VariableKind.DETECTION, hyp.id)
            division = on(VariableKind.DIVISION, hyp.id)
            appearance = on(VariableKind.APPEARANCE, hyp.id)
            disappearance = on(VariableKind.DISAPPEARANCE, hyp.id)
            num_in = sum(on(VariableKind.LINK, key) for key in hyp.incoming_links)
            num_out = sum(on(VariableKind.LINK, key) for key in hyp.outgoing_links)

            if num_in + appearance != detection:
                result.violations.append(Violation(
                    'incoming', str(hyp.id),
                    f"{num_in} active incoming links + appearance {appearance} "
                    f"!= detection {detection}"
                ))
            if num_out + disappearance != detection + division:
                result.violations.append(Violation(
                    'outgoing', str(hyp.id),
                    f"{num_out} active outgoing links + disappearance {disappearance} "
                    f"!= detection {detection} + division {division}"
                ))
            if division > detection:
                result.violations.append(Violation(
                    'division', str(hyp.id), "division is active without detection"
                ))
            if division and disappearance:
                result.violations.append(Violation(
                    'division_disappearance', str(hyp.id),
                    "dividing hypothesis also disappears"
                ))

        for violation in result.violations:
            logger.warning(
                "Found violated %s constraint at %s: %s",
                violation.constraint, violation.entity, violation.message
            )
        return result


def verify_solution(graph: HypothesesGraph, model: AssembledModel, solution: Sequence[int]) -> VerificationResult:
    """Shortcut for SolutionVerifier(graph, model).verify(solution)."""
    return SolutionVerifier(graph, model).verify(solution)

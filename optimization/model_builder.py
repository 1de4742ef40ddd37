"""
Model assembly.

Turns a hypotheses graph plus a weight-range allocation into an
`AssembledModel`: binary variables with their feature vectors and weight
ranges, and the named linear constraints that encode flow conservation,
division and exclusion. Assembly does not modify the graph, so the same
graph can be assembled again; every build numbers its variables from 0.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, List, Mapping, Sequence, Tuple

import numpy as np
from scipy import sparse

from hypotheses import HypothesesGraph, VariableKind
from hypotheses.variable import SEGMENTATION_KINDS
from utils.exceptions import ConfigurationError
from .weight_allocator import WeightRange

logger = logging.getLogger(__name__)

VariableKey = Tuple[VariableKind, Hashable]

FEASIBILITY_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ConstraintRow:
    """Linear constraint lower <= sum(coef * x[var]) <= upper."""

    name: str
    coefficients: Tuple[Tuple[int, float], ...]
    lower: float
    upper: float

    def evaluate(self, solution: Sequence[float]) -> float:
        return float(sum(coef * solution[var] for var, coef in self.coefficients))

    def is_satisfied(self, solution: Sequence[float], tol: float = FEASIBILITY_TOLERANCE) -> bool:
        value = self.evaluate(solution)
        return self.lower - tol <= value <= self.upper + tol


class AssembledModel:
    """
    Immutable description of the binary program handed to a solver.

    Variable ids are positions in `variable_keys`. Link variables come
    first, followed by the segmentation variables in hypothesis-id order.
    """

    def __init__(
        self,
        variable_keys: Sequence[VariableKey],
        features: Sequence[np.ndarray],
        weight_ranges: Mapping[VariableKind, WeightRange],
        constraints: Sequence[ConstraintRow]
    ):
        self.variable_keys: Tuple[VariableKey, ...] = tuple(variable_keys)
        self.features: Tuple[np.ndarray, ...] = tuple(features)
        self.weight_ranges: Dict[VariableKind, WeightRange] = dict(weight_ranges)
        self.constraints: Tuple[ConstraintRow, ...] = tuple(constraints)
        self._ids: Dict[VariableKey, int] = {
            key: idx for idx, key in enumerate(self.variable_keys)
        }

    @property
    def num_variables(self) -> int:
        return len(self.variable_keys)

    @property
    def num_weights(self) -> int:
        return sum(r.size for r in self.weight_ranges.values())

    def variable_id(self, kind: VariableKind, key: Hashable) -> int:
        """
        Get the optimizer variable id.

        Args:
            kind: Variable kind.
            key: Segmentation id, or (src, dest) for links.

        Returns:
            Variable id, or -1 if the variable is not part of the model.
        """
        return self._ids.get((kind, key), -1)

    def link_variable_ids(self) -> Dict[Tuple[int, int], int]:
        return {
            key: idx for (kind, key), idx in self._ids.items() if kind == VariableKind.LINK
        }

    def is_active(self, solution: Sequence[float], kind: VariableKind, key: Hashable) -> bool:
        """Check if a variable is on; absent variables are always off."""
        var = self.variable_id(kind, key)
        return var >= 0 and solution[var] > 0

    def check_weights(self, weights: Sequence[float]) -> np.ndarray:
        """
        Validate the weight-vector length.

        Raises:
            ConfigurationError: If the length does not match the allocation.
        """
        weights = np.asarray(weights, dtype=np.float64).reshape(-1)
        if weights.shape[0] != self.num_weights:
            raise ConfigurationError(
                f"Expected {self.num_weights} weights, got {weights.shape[0]}"
            )
        return weights

    def check_solution(self, solution: Sequence[float]) -> np.ndarray:
        solution = np.asarray(solution).reshape(-1)
        if solution.shape[0] != self.num_variables:
            raise ConfigurationError(
                f"Solution has {solution.shape[0]} entries, model has {self.num_variables} variables"
            )
        return solution

    def _state_slice(self, var: int, state: int) -> slice:
        kind = self.variable_keys[var][0]
        return self.weight_ranges[kind].state_slice(state)

    def energy_coefficients(self, weights: Sequence[float]) -> Tuple[np.ndarray, float]:
        """
        Linearize the energy over binary variables.

        Returns:
            (c, constant) such that energy(x) = c @ x + constant.
        """
        weights = self.check_weights(weights)
        c = np.zeros(self.num_variables)
        constant = 0.0

        for var, feats in enumerate(self.features):
            if feats.shape[0] == 0:
                continue
            off = weights[self._state_slice(var, 0)] @ feats
            on = weights[self._state_slice(var, 1)] @ feats
            c[var] = on - off
            constant += off

        return c, float(constant)

    def joint_feature_vector(self, solution: Sequence[float]) -> np.ndarray:
        """
        Feature map phi with energy(x) = weights @ phi(x).

        Each variable's features land in the "off" or "on" half of its
        class's weight range, according to its state.
        """
        solution = self.check_solution(solution)
        phi = np.zeros(self.num_weights)

        for var, feats in enumerate(self.features):
            if feats.shape[0] == 0:
                continue
            state = 1 if solution[var] > 0 else 0
            phi[self._state_slice(var, state)] += feats

        return phi

    def energy(self, solution: Sequence[float], weights: Sequence[float]) -> float:
        weights = self.check_weights(weights)
        return float(weights @ self.joint_feature_vector(solution))

    def constraint_matrix(self) -> Tuple[sparse.csr_matrix, np.ndarray, np.ndarray]:
        """
        Stack all constraint rows.

        Returns:
            (A, lower, upper) with A of shape (num_constraints, num_variables).
        """
        rows, cols, vals = [], [], []
        for r, row in enumerate(self.constraints):
            for var, coef in row.coefficients:
                rows.append(r)
                cols.append(var)
                vals.append(coef)

        A = sparse.csr_matrix(
            (vals, (rows, cols)),
            shape=(len(self.constraints), self.num_variables)
        )
        lower = np.array([row.lower for row in self.constraints], dtype=np.float64)
        upper = np.array([row.upper for row in self.constraints], dtype=np.float64)
        return A, lower, upper

    def violated_constraints(self, solution: Sequence[float]) -> List[str]:
        solution = self.check_solution(solution)
        return [row.name for row in self.constraints if not row.is_satisfied(solution)]

    def describe_variable(self, var: int) -> str:
        kind, key = self.variable_keys[var]
        if kind == VariableKind.LINK:
            return f"{kind.value}[{key[0]} -> {key[1]}]"
        return f"{kind.value}[{key}]"

    def __repr__(self) -> str:
        return (
            f"AssembledModel(variables={self.num_variables}, "
            f"constraints={len(self.constraints)}, weights={self.num_weights})"
        )


class ModelBuilder:
    """
    Inserts hypotheses and constraints into an AssembledModel.

    Link variables are created before any segmentation variable because the
    flow constraints of a segmentation refer to its incident links.
    """

    def __init__(self, graph: HypothesesGraph, weight_ranges: Mapping[VariableKind, WeightRange]):
        self.graph = graph
        self.weight_ranges = dict(weight_ranges)

    def build(self) -> AssembledModel:
        """
        Assemble the binary program.

        Returns:
            AssembledModel with fresh variable ids starting at 0.
        """
        keys: List[VariableKey] = []
        features: List[np.ndarray] = []
        ids: Dict[VariableKey, int] = {}

        def add_variable(kind: VariableKind, key: Hashable, feats: np.ndarray):
            ids[(kind, key)] = len(keys)
            keys.append((kind, key))
            features.append(feats)

        for link in self.graph.sorted_links():
            add_variable(VariableKind.LINK, link.key, link.variable.features)

        for hyp in self.graph.sorted_segmentations():
            for kind in SEGMENTATION_KINDS:
                if hyp.has_variable(kind):
                    add_variable(kind, hyp.id, hyp.variable(kind).features)

        constraints: List[ConstraintRow] = []
        for hyp in self.graph.sorted_segmentations():
            constraints.extend(self._segmentation_constraints(hyp, ids))

        for idx, exclusion in enumerate(self.graph.exclusions):
            coefficients = tuple(
                (ids[(VariableKind.DETECTION, member)], 1.0)
                for member in exclusion.to_list()
            )
            constraints.append(ConstraintRow(f"exclusion[{idx}]", coefficients, -np.inf, 1.0))

        model = AssembledModel(keys, features, self.weight_ranges, constraints)
        logger.info("Assembled %s", model)
        return model

    @staticmethod
    def _segmentation_constraints(hyp, ids: Mapping[VariableKey, int]) -> List[ConstraintRow]:
        detection = ids[(VariableKind.DETECTION, hyp.id)]
        division = ids.get((VariableKind.DIVISION, hyp.id))
        appearance = ids.get((VariableKind.APPEARANCE, hyp.id))
        disappearance = ids.get((VariableKind.DISAPPEARANCE, hyp.id))

        # sum(incoming) + appearance == detection
        incoming = [(ids[(VariableKind.LINK, key)], 1.0) for key in sorted(hyp.incoming_links)]
        if appearance is not None:
            incoming.append((appearance, 1.0))
        incoming.append((detection, -1.0))

        # sum(outgoing) + disappearance == detection + division
        outgoing = [(ids[(VariableKind.LINK, key)], 1.0) for key in sorted(hyp.outgoing_links)]
        if disappearance is not None:
            outgoing.append((disappearance, 1.0))
        outgoing.append((detection, -1.0))
        if division is not None:
            outgoing.append((division, -1.0))

        rows = [
            ConstraintRow(f"incoming[{hyp.id}]", tuple(incoming), 0.0, 0.0),
            ConstraintRow(f"outgoing[{hyp.id}]", tuple(outgoing), 0.0, 0.0),
        ]

        if division is not None:
            rows.append(ConstraintRow(
                f"division[{hyp.id}]", ((division, 1.0), (detection, -1.0)), -np.inf, 0.0
            ))
            if disappearance is not None:
                rows.append(ConstraintRow(
                    f"division_disappearance[{hyp.id}]",
                    ((division, 1.0), (disappearance, 1.0)), -np.inf, 1.0
                ))

        return rows


def assemble(graph: HypothesesGraph, weight_ranges: Mapping[VariableKind, WeightRange]) -> AssembledModel:
    """Shortcut for ModelBuilder(graph, weight_ranges).build()."""
    return ModelBuilder(graph, weight_ranges).build()

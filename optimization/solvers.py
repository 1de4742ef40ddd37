"""
Solver backends for assembled models.

Every backend minimizes a linear objective over binary variables subject to
the model's constraint rows. `Solver.solve` turns a weight vector into that
objective; the structured learner calls `minimize` directly with
loss-augmented coefficients.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

from utils.exceptions import SolverError
from .model_builder import FEASIBILITY_TOLERANCE, AssembledModel

logger = logging.getLogger(__name__)


@dataclass
class InferenceResult:
    """Binary labeling indexed by optimizer variable id, plus its energy."""

    solution: np.ndarray
    energy: float

    @property
    def score(self) -> float:
        return -self.energy


class Solver(ABC):
    """Capability interface for MAP inference on an AssembledModel."""

    @abstractmethod
    def minimize(self, model: AssembledModel, coefficients: Sequence[float]) -> Tuple[np.ndarray, float]:
        """
        Minimize coefficients @ x over feasible binary x.

        Args:
            model: Assembled model providing the constraints.
            coefficients: One coefficient per variable.

        Returns:
            (x, coefficients @ x) with x an integer 0/1 array.

        Raises:
            SolverError: If no optimal labeling is found.
        """

    def solve(self, model: AssembledModel, weights: Sequence[float]) -> InferenceResult:
        """
        Find the minimum-energy labeling for the given weights.

        Args:
            model: Assembled model.
            weights: Weight vector of length model.num_weights.

        Returns:
            InferenceResult with the labeling and its energy.
        """
        c, constant = model.energy_coefficients(weights)
        solution, value = self.minimize(model, c)
        energy = value + constant
        logger.info("Solution has energy %.6g", energy)
        return InferenceResult(solution=solution, energy=energy)


class MilpSolver(Solver):
    """Integer linear programming backend built on scipy.optimize.milp (HiGHS)."""

    def __init__(self, mip_rel_gap: float = 0.0, presolve: bool = True, verbose: bool = False):
        self.mip_rel_gap = mip_rel_gap
        self.presolve = presolve
        self.verbose = verbose

    def minimize(self, model: AssembledModel, coefficients: Sequence[float]) -> Tuple[np.ndarray, float]:
        c = np.asarray(coefficients, dtype=np.float64)
        n = model.num_variables
        if n == 0:
            return np.zeros(0, dtype=int), 0.0

        constraints = None
        if model.constraints:
            A, lower, upper = model.constraint_matrix()
            constraints = LinearConstraint(A, lower, upper)

        logger.debug("Running milp on %d variables, %d constraints", n, len(model.constraints))
        result = milp(
            c,
            integrality=np.ones(n),
            bounds=Bounds(0, 1),
            constraints=constraints,
            options={
                'disp': self.verbose,
                'presolve': self.presolve,
                'mip_rel_gap': self.mip_rel_gap,
            }
        )

        if result.status != 0 or result.x is None:
            raise SolverError(f"milp failed: {result.message}", status=result.status)

        solution = np.rint(result.x).astype(int)
        return solution, float(c @ solution)


class BruteForceSolver(Solver):
    """
    Exhaustive search over all labelings.

    Only usable for small models; ties go to the labeling that comes first
    in lexicographic order.
    """

    def __init__(self, max_variables: int = 20):
        self.max_variables = max_variables

    def minimize(self, model: AssembledModel, coefficients: Sequence[float]) -> Tuple[np.ndarray, float]:
        c = np.asarray(coefficients, dtype=np.float64)
        n = model.num_variables
        if n > self.max_variables:
            raise SolverError(
                f"Brute force search over {n} variables exceeds the limit of {self.max_variables}"
            )

        A, lower, upper = model.constraint_matrix()
        best: Optional[np.ndarray] = None
        best_value = np.inf

        for labeling in itertools.product((0, 1), repeat=n):
            x = np.array(labeling, dtype=int)
            if A.shape[0] > 0:
                row_values = A @ x
                if np.any(row_values < lower - FEASIBILITY_TOLERANCE) or \
                        np.any(row_values > upper + FEASIBILITY_TOLERANCE):
                    continue
            value = float(c @ x)
            if value < best_value - 1e-12:
                best, best_value = x, value

        if best is None:
            raise SolverError("Model is infeasible", status=2)

        return best, best_value


def create_solver(config: Any = None) -> Solver:
    """
    Create a solver from a SolverConfig (or any object with the same fields).

    Args:
        config: Object with 'backend', 'mip_rel_gap', 'presolve', 'verbose'
            and 'max_brute_force_variables'. None gives the default MILP solver.
    """
    if config is None:
        return MilpSolver()

    backend = getattr(config, 'backend', 'milp')
    if backend == 'milp':
        return MilpSolver(
            mip_rel_gap=float(getattr(config, 'mip_rel_gap', 0.0)),
            presolve=bool(getattr(config, 'presolve', True)),
            verbose=bool(getattr(config, 'verbose', False))
        )
    if backend == 'brute_force':
        return BruteForceSolver(max_variables=int(getattr(config, 'max_brute_force_variables', 20)))

    raise ValueError(f"Unknown solver backend: {backend}")

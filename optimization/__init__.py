"""Weight indexing, model assembly, solving and structured learning."""

from .weight_allocator import WeightIndexAllocator, WeightRange
from .model_builder import AssembledModel, ConstraintRow, ModelBuilder, assemble
from .solvers import Solver, MilpSolver, BruteForceSolver, InferenceResult, create_solver
from .structured_learning import StructuredMaxMarginLearner, hamming_loss

__all__ = [
    'WeightIndexAllocator',
    'WeightRange',
    'AssembledModel',
    'ConstraintRow',
    'ModelBuilder',
    'assemble',
    'Solver',
    'MilpSolver',
    'BruteForceSolver',
    'InferenceResult',
    'create_solver',
    'StructuredMaxMarginLearner',
    'hamming_loss'
]

"""Multi-hypotheses tracking: inference, learning, ground truth and verification."""

from .ground_truth import GroundTruthReconstructor, reconstruct_ground_truth
from .verification import SolutionVerifier, VerificationResult, Violation, verify_solution
from .tracking_model import TrackingModel
from .api import track, train, validate

__all__ = [
    'GroundTruthReconstructor',
    'reconstruct_ground_truth',
    'SolutionVerifier',
    'VerificationResult',
    'Violation',
    'verify_solution',
    'TrackingModel',
    'track',
    'train',
    'validate'
]

from .schedule import Unit, Schedule
from .sample import ObservedSample, ATEEstimate
from .assignment import draw_assignment, enumerate_assignments, count_assignments
from .estimators.simulation import simulate_randomization, enumerate_randomization, RandomizationDistribution
from .estimators.permutation import permutation_test, exact_permutation_test, permutation_pvalues, PermutationTestResult
from .estimators.standard_error import standard_error, standard_error_conservative
from ._exceptions import InvalidArgumentError, InvalidDomainError
from ._assumptions import Assumption

__all__ = [
    "Unit", "Schedule",
    "ObservedSample", "ATEEstimate",
    "draw_assignment", "enumerate_assignments", "count_assignments",
    "simulate_randomization", "enumerate_randomization", "RandomizationDistribution",
    "permutation_test", "exact_permutation_test", "permutation_pvalues", "PermutationTestResult",
    "standard_error", "standard_error_conservative",
    "InvalidArgumentError", "InvalidDomainError",
    "Assumption",
]

from .simulation import simulate_randomization, enumerate_randomization, RandomizationDistribution
from .permutation import permutation_test, exact_permutation_test, permutation_pvalues, PermutationTestResult
from .standard_error import standard_error, standard_error_conservative

__all__ = [
    "simulate_randomization", "enumerate_randomization", "RandomizationDistribution",
    "permutation_test", "exact_permutation_test", "permutation_pvalues", "PermutationTestResult",
    "standard_error", "standard_error_conservative",
]

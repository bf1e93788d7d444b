"""
Randomization inference on one observed experiment.

Villages 1 and 7 were treated. Under the sharp null of no effect the labels
are shuffled against the fixed outcomes to see how unusual the observed
difference in means of 6.5 is.
"""

from potential import ObservedSample, exact_permutation_test, permutation_test

sample = ObservedSample(
    outcomes=[15, 15, 20, 20, 10, 15, 30],
    treatment=[1, 0, 0, 0, 0, 0, 1],
)
observed = sample.difference_in_means()

result = permutation_test(
    sample.outcomes, sample.treatment, trials=10_000, rng_seed=1, observed_effect=observed,
)
print(result.summary())
print(result.executive_summary())

exact = exact_permutation_test(sample.outcomes, sample.treatment, observed_effect=observed)
print(f"Exact one-sided p = {exact.one_sided_p:.4f}, two-sided p = {exact.two_sided_p:.4f}")

"""
Sampling distribution of the difference-in-means estimator.

Seven villages, both potential outcomes known. Two villages are treated.
The true ATE is 5.0; the exact distribution over all 21 assignments is
unbiased and its spread matches the analytic standard error.
"""

from potential import Schedule, enumerate_randomization, simulate_randomization

villages = Schedule.from_arrays(
    y0=[10, 15, 20, 20, 10, 15, 15],
    y1=[15, 15, 30, 15, 20, 15, 30],
)
print(villages)
print()

exact = enumerate_randomization(villages, m=2)
print(exact.summary())

sampled = simulate_randomization(villages, m=2, trials=10_000, rng_seed=0)
print(sampled.executive_summary())

print(f"Analytic SE : {villages.standard_error(2):.4f}")
print(f"Simulated SE: {sampled.std_err:.4f}")

counts, edges = sampled.histogram(bins=10)
for c, lo in zip(counts, edges):
    print(f"  {lo:>7.2f}  {'#' * int(60 * c / counts.max())}")

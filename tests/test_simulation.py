import numpy as np
import pytest

from potential import (
    InvalidArgumentError,
    RandomizationDistribution,
    Unit,
    enumerate_randomization,
    simulate_randomization,
)


class TestSimulateRandomizationValidation:
    """Validation happens before any draw, so a shared generator is untouched."""

    @pytest.mark.parametrize("m", [0, 7, 9, -2])
    def test_m_out_of_range_raises(self, villages, m):
        with pytest.raises(InvalidArgumentError, match="0 < m < N"):
            simulate_randomization(villages, m, 10, 0)

    @pytest.mark.parametrize("m", [2.5, True, np.float64(2.0)])
    def test_non_integer_m_raises(self, villages, m):
        with pytest.raises(InvalidArgumentError, match="m must be an integer"):
            simulate_randomization(villages, m, 10, 0)

    def test_non_integer_m_raises_for_enumeration(self, villages):
        with pytest.raises(InvalidArgumentError, match="m must be an integer"):
            enumerate_randomization(villages, 2.5)

    def test_numpy_integer_m_accepted(self, villages):
        assert len(simulate_randomization(villages, np.int64(2), 10, 0)) == 10

    @pytest.mark.parametrize("trials", [0, -5])
    def test_non_positive_trials_raises(self, villages, trials):
        with pytest.raises(InvalidArgumentError, match="positive"):
            simulate_randomization(villages, 2, trials, 0)

    def test_empty_units_raises(self):
        with pytest.raises(InvalidArgumentError, match="at least one unit"):
            simulate_randomization([], 1, 10, 0)

    def test_generator_untouched_on_error(self, villages):
        rng = np.random.default_rng(3)
        state = rng.bit_generator.state
        with pytest.raises(InvalidArgumentError):
            simulate_randomization(villages, 0, 10, rng)
        assert rng.bit_generator.state == state


class TestSimulateRandomization:
    def test_returns_trials_values(self, villages):
        dist = simulate_randomization(villages, 2, 250, 0)
        assert isinstance(dist, RandomizationDistribution)
        assert len(dist) == 250
        assert len(list(dist)) == 250
        assert isinstance(dist[0], float)

    def test_accepts_plain_unit_sequence(self, villages):
        units = [Unit(u.id, u.y0, u.y1) for u in villages]
        a = simulate_randomization(units, 2, 100, 11)
        b = simulate_randomization(villages, 2, 100, 11)
        np.testing.assert_array_equal(a.estimates, b.estimates)

    def test_every_trial_treats_exactly_m_units(self, villages):
        # Each estimate must come from some split with exactly m treated, so it
        # must be one of the values the full enumeration produces.
        for m in (1, 2, 3):
            exact = set(np.round(enumerate_randomization(villages, m).estimates, 9))
            dist = simulate_randomization(villages, m, 500, m)
            assert set(np.round(dist.estimates, 9)) <= exact

    def test_deterministic_for_fixed_seed(self, villages):
        a = simulate_randomization(villages, 2, 500, 2024)
        b = simulate_randomization(villages, 2, 500, 2024)
        np.testing.assert_array_equal(a.estimates, b.estimates)

    def test_single_trials_reproduce_one_call(self, villages):
        rng = np.random.default_rng(7)
        one_by_one = [simulate_randomization(villages, 2, 1, rng)[0] for _ in range(50)]
        batched = simulate_randomization(villages, 2, 50, np.random.default_rng(7))
        assert one_by_one == list(batched)

    def test_mean_converges_to_true_ate(self, villages):
        dist = simulate_randomization(villages, 2, 20_000, 42)
        assert dist.true_ate == pytest.approx(5.0)
        assert abs(dist.mean - 5.0) < 0.2

    def test_spread_matches_analytic_standard_error(self, villages):
        dist = simulate_randomization(villages, 2, 20_000, 5)
        assert dist.std_err == pytest.approx(villages.standard_error(2), rel=0.05)

    def test_no_effect_schedule_still_varies(self):
        from potential import Schedule
        flat = Schedule.from_arrays([1, 2, 3, 4, 5, 6], [1, 2, 3, 4, 5, 6])
        dist = simulate_randomization(flat, 3, 500, 0)
        assert flat.true_ate == 0
        assert dist.std_err > 0

    def test_constant_outcomes_give_degenerate_distribution(self):
        from potential import Schedule
        flat = Schedule.from_arrays([2.0] * 5, [2.0] * 5)
        dist = simulate_randomization(flat, 2, 100, 0)
        assert set(dist) == {0.0}

    def test_estimates_are_read_only_copies(self, villages):
        dist = simulate_randomization(villages, 2, 10, 0)
        est = dist.estimates
        est[:] = 0
        assert dist.estimates.any()


class TestRandomizationDistribution:
    def test_statistics(self, villages):
        dist = simulate_randomization(villages, 2, 2_000, 9)
        lo, hi = dist.conf_int()
        assert lo <= dist.mean <= hi
        counts, edges = dist.histogram(bins=8)
        assert counts.sum() == 2_000
        assert len(edges) == 9
        assert dist.tail_probability(dist.mean - 100) == 1.0
        assert 0 <= dist.tail_probability(10.0, two_sided=True) <= 1

    def test_summary_and_executive_summary_run(self, villages):
        dist = simulate_randomization(villages, 2, 200, 0)
        assert "Randomization Distribution" in dist.summary()
        assert "Executive Summary" in dist.executive_summary()

    def test_assumptions_present(self, villages):
        dist = simulate_randomization(villages, 2, 10, 0)
        names = [a.name for a in dist.assumptions]
        assert any("SUTVA" in n for n in names)

    def test_invalid_level_raises(self, villages):
        dist = simulate_randomization(villages, 2, 10, 0)
        with pytest.raises(InvalidArgumentError):
            dist.conf_int(level=1.5)


class TestEnumerateRandomization:
    def test_covers_every_assignment(self, villages):
        dist = enumerate_randomization(villages, 2)
        assert len(dist) == 21

    def test_mean_equals_true_ate(self, villages):
        dist = enumerate_randomization(villages, 2)
        assert dist.mean == pytest.approx(5.0)
        assert dist.bias == pytest.approx(0.0, abs=1e-12)

    def test_spread_equals_analytic_standard_error(self, villages):
        dist = enumerate_randomization(villages, 2)
        assert dist.std_err == pytest.approx(villages.standard_error(2))

    def test_limit_raises(self, villages):
        with pytest.raises(InvalidArgumentError, match="max_assignments"):
            enumerate_randomization(villages, 2, max_assignments=20)

    def test_executive_summary_mentions_enumeration(self, villages):
        text = enumerate_randomization(villages, 3).executive_summary()
        assert "every one of the possible ways" in text

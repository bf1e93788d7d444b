import numpy as np
import pytest

from potential import ATEEstimate, InvalidArgumentError, ObservedSample, standard_error_conservative


OUTCOMES  = [15, 15, 20, 20, 10, 15, 30, 25]
TREATMENT = [1, 0, 0, 0, 0, 0, 1, 1]


class TestObservedSampleValidation:
    def test_length_mismatch_raises(self):
        with pytest.raises(InvalidArgumentError, match="same length"):
            ObservedSample([1.0, 2.0, 3.0], [0, 1])

    def test_non_binary_raises(self):
        with pytest.raises(InvalidArgumentError, match="binary"):
            ObservedSample([1.0, 2.0, 3.0], [0, 1, 2])

    def test_all_treated_raises(self):
        with pytest.raises(InvalidArgumentError, match="both 0 and 1"):
            ObservedSample([1.0, 2.0], [1, 1])

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            ObservedSample([1.0], [0, 1])

    def test_outcomes_are_copies(self):
        sample = ObservedSample(OUTCOMES, TREATMENT)
        sample.outcomes[0] = -1
        assert sample.outcomes[0] == 15


class TestFit:
    def test_effect_is_difference_in_means(self):
        sample = ObservedSample(OUTCOMES, TREATMENT)
        est = sample.fit()
        assert isinstance(est, ATEEstimate)
        assert est.effect == pytest.approx(sample.difference_in_means())

    def test_hc2_matches_neyman_standard_error(self):
        y = np.array(OUTCOMES, dtype=float)
        d = np.array(TREATMENT)
        neyman = standard_error_conservative(
            np.var(y[d == 0], ddof=1), np.var(y[d == 1], ddof=1), len(y), int(d.sum()),
        )
        assert ObservedSample(y, d).fit().std_err == pytest.approx(neyman)

    def test_result_attributes(self):
        est = ObservedSample(OUTCOMES, TREATMENT).fit()
        lo, hi = est.conf_int()
        assert lo < est.effect < hi
        assert 0 <= est.pvalue <= 1
        assert est.statsmodels_result is not None
        assert "ATE estimate" in est.summary()

    def test_singleton_arm_raises(self):
        with pytest.raises(InvalidArgumentError, match="at least two units"):
            ObservedSample([1.0, 2.0, 3.0], [1, 0, 0]).fit()

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from ._exceptions import InvalidArgumentError

DEFAULT_LEVEL = 0.95


def check_treatment(outcomes: Sequence[float], treatment: Sequence[int]) -> tuple[np.ndarray, np.ndarray]:
    """
    Validate an outcome/treatment pair and return them as numpy arrays.

    Raises
    ------
    ``InvalidArgumentError``
        If lengths differ, labels are not 0/1, or either arm is empty.
    """
    y = np.asarray(outcomes, dtype=float)
    d = np.asarray(treatment)

    if y.ndim != 1 or d.ndim != 1:
        raise InvalidArgumentError("Outcomes and treatment must be one-dimensional.")
    if len(y) != len(d):
        raise InvalidArgumentError(
            f"Outcomes and treatment must have the same length, "
            f"got {len(y)} outcomes and {len(d)} treatment labels."
        )
    if len(y) == 0:
        raise InvalidArgumentError("At least one unit is required.")
    if not np.all(np.isfinite(y)):
        raise InvalidArgumentError("Outcomes must be finite (no NaN or inf).")

    labels = set(np.unique(d).tolist())
    if not labels <= {0, 1}:
        raise InvalidArgumentError(
            f"Treatment must be binary (0/1). Found values: {sorted(labels)}"
        )
    if labels != {0, 1}:
        raise InvalidArgumentError(
            f"Treatment must contain both 0 and 1, found only {sorted(labels)}. "
            f"A contrast needs at least one unit in each arm."
        )
    return y, d.astype(int)


def difference_in_means(outcomes: np.ndarray, treatment: np.ndarray) -> float:
    """mean(outcome | treatment == 1) - mean(outcome | treatment == 0)."""
    treated = treatment == 1
    return float(outcomes[treated].mean() - outcomes[~treated].mean())


class ATEEstimate:
    """
    Difference-in-means ATE estimate from one observed sample.

    Fitted as an OLS regression of outcome on the treatment indicator. The
    slope is the difference in means; the HC2 robust standard error equals
    the conservative Neyman standard error ``sqrt(s0^2 / n0 + s1^2 / n1)``
    computed from sample variances.
    """

    def __init__(self, result, n_treated: int, n_control: int) -> None:
        self._result = result
        self._n_treated = n_treated
        self._n_control = n_control

    @property
    def effect(self) -> float:
        """Difference in mean outcomes, treated minus control."""
        return float(self._result.params["treatment"])

    @property
    def std_err(self) -> float:
        """HC2 (conservative Neyman) standard error."""
        return float(self._result.bse["treatment"])

    def conf_int(self, level: float = DEFAULT_LEVEL) -> tuple[float, float]:
        """Normal-approximation confidence interval for the ATE."""
        ci = self._result.conf_int(alpha=1.0 - level)
        return (float(ci.loc["treatment", 0]), float(ci.loc["treatment", 1]))

    @property
    def pvalue(self) -> float:
        """Large-sample p-value for ``H0: ATE = 0``."""
        return float(self._result.pvalues["treatment"])

    @property
    def statsmodels_result(self):
        """The underlying statsmodels OLS result, for full diagnostics."""
        return self._result

    def summary(self) -> str:
        lo, hi = self.conf_int()
        lines = [
            "",
            "Difference-in-means ATE estimate",
            f"  Treated / control    : {self._n_treated} / {self._n_control}",
            "─" * 50,
            f"  ATE estimate         : {self.effect:>10.4f}",
            f"  Std. error (HC2)     : {self.std_err:>10.4f}",
            f"  95% CI               : [{lo:.4f}, {hi:.4f}]",
            f"  p-value              : {self.pvalue:>10.4f}",
            "",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


class ObservedSample:
    """
    What an experimenter actually sees: one outcome per unit and the
    treatment it received. The counterfactual outcome is never stored.

    Obtain from a schedule via ``Schedule.observe(assignment)``, or build
    directly from real data.
    """

    def __init__(self, outcomes: Sequence[float], treatment: Sequence[int]) -> None:
        self._outcomes, self._treatment = check_treatment(outcomes, treatment)

    @property
    def outcomes(self) -> np.ndarray:
        return self._outcomes.copy()

    @property
    def treatment(self) -> np.ndarray:
        return self._treatment.copy()

    @property
    def n_treated(self) -> int:
        return int(self._treatment.sum())

    def __len__(self) -> int:
        return len(self._outcomes)

    def difference_in_means(self) -> float:
        return difference_in_means(self._outcomes, self._treatment)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"outcome": self._outcomes, "treatment": self._treatment})

    def fit(self) -> ATEEstimate:
        """
        Estimate the ATE via OLS of outcome on treatment with HC2 errors.

        Each arm needs at least two units for the HC2 variance to exist.
        """
        n_treated = self.n_treated
        n_control = len(self) - n_treated
        if min(n_treated, n_control) < 2:
            raise InvalidArgumentError(
                f"Each arm needs at least two units to estimate a standard error, "
                f"got {n_treated} treated and {n_control} control."
            )
        result = smf.ols("outcome ~ treatment", data=self.to_frame()).fit(cov_type="HC2")
        return ATEEstimate(result, n_treated, n_control)

    def __repr__(self) -> str:
        return f"ObservedSample(n={len(self)}, treated={self.n_treated})"

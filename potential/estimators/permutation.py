from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import scipy.stats as st

from .._assumptions import PERMUTATION_ASSUMPTIONS, Assumption
from .._exceptions import InvalidArgumentError
from ..assignment import (
    MAX_ENUMERATION,
    SeedLike,
    check_trials,
    enumerate_assignments,
    resolve_rng,
)
from ..sample import DEFAULT_LEVEL, check_treatment, difference_in_means

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 10_000

_ALTERNATIVES = ("one-sided", "two-sided")


def permutation_pvalues(null_distribution: Sequence[float], observed_effect: float) -> tuple[float, float]:
    """
    Threshold a null distribution at an observed effect ``e``.

    Returns ``(one_sided_p, two_sided_p)`` where::

        one_sided_p = share of null values >= e
        two_sided_p = share of null values with |value| >= |e|
    """
    null = np.asarray(null_distribution, dtype=float)
    if null.ndim != 1 or len(null) == 0:
        raise InvalidArgumentError("The null distribution must be a non-empty 1-D sequence.")
    if not np.isfinite(observed_effect):
        raise InvalidArgumentError(f"observed_effect must be finite, got {observed_effect}.")
    one_sided = float(np.mean(null >= observed_effect))
    two_sided = float(np.mean(np.abs(null) >= abs(observed_effect)))
    return one_sided, two_sided


class PermutationTestResult:
    """
    Result of a permutation (randomization inference) test of the sharp null.

    Unpacks as ``(null_distribution, one_sided_p, two_sided_p)``::

        null, p_one, p_two = permutation_test(y, d, 10_000, 0, observed_effect=6.5)
    """

    def __init__(
        self,
        null_distribution: np.ndarray,
        observed_effect: float,
        method: str,
    ) -> None:
        self._null = np.asarray(null_distribution, dtype=float)
        self._null.setflags(write=False)
        self._observed_effect = float(observed_effect)
        self._one_sided_p, self._two_sided_p = permutation_pvalues(self._null, observed_effect)
        self._method = method

    @property
    def null_distribution(self) -> np.ndarray:
        """Full array of per-permutation effects, in draw order."""
        return self._null.copy()

    @property
    def observed_effect(self) -> float:
        return self._observed_effect

    @property
    def one_sided_p(self) -> float:
        """Share of permuted effects at least as large as the observed one."""
        return self._one_sided_p

    @property
    def two_sided_p(self) -> float:
        """Share of permuted effects at least as large as the observed one in magnitude."""
        return self._two_sided_p

    @property
    def trials(self) -> int:
        return len(self._null)

    def pvalue_conf_int(
        self,
        alternative: str = "two-sided",
        level: float = DEFAULT_LEVEL,
    ) -> tuple[float, float]:
        """
        Exact (Clopper-Pearson) interval for the Monte Carlo p-value.

        Reflects only simulation noise from using ``trials`` draws rather
        than every assignment.
        """
        if alternative not in _ALTERNATIVES:
            raise InvalidArgumentError(
                f"alternative must be one of {_ALTERNATIVES}, got {alternative!r}."
            )
        p = self._one_sided_p if alternative == "one-sided" else self._two_sided_p
        hits = int(round(p * self.trials))
        ci = st.binomtest(hits, self.trials).proportion_ci(confidence_level=level)
        return (float(ci.low), float(ci.high))

    @property
    def assumptions(self) -> list[Assumption]:
        return list(PERMUTATION_ASSUMPTIONS)

    def __iter__(self):
        return iter((self.null_distribution, self._one_sided_p, self._two_sided_p))

    def executive_summary(self) -> str:
        """Narrative explanation of the test, assumptions, and result."""
        from .._explain import explain_permutation
        return explain_permutation(self)

    def summary(self) -> str:
        lines = [
            "",
            f"Permutation Test of the Sharp Null ({self._method})",
            "─" * 50,
            f"  Observed effect      : {self._observed_effect:>10.4f}",
            f"  Permutations         : {self.trials:>10d}",
            f"  Null mean            : {float(np.mean(self._null)):>10.4f}",
            f"  Null std. dev.       : {float(np.std(self._null)):>10.4f}",
            "",
            f"  One-sided p-value    : {self._one_sided_p:>10.4f}",
            f"  Two-sided p-value    : {self._two_sided_p:>10.4f}",
            "",
            "  Assumptions",
            "  " + "┄" * 48,
        ]
        for a in PERMUTATION_ASSUMPTIONS:
            lines.append(f"  {a.fmt_tag()}  {a.name}")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


def permutation_test(
    outcomes: Sequence[float],
    treatment: Sequence[int],
    trials: int = DEFAULT_TRIALS,
    rng_seed: SeedLike = None,
    *,
    observed_effect: float,
) -> PermutationTestResult:
    """
    Monte Carlo permutation test of the sharp null of no effect.

    Holds ``outcomes`` fixed and, for each trial, shuffles the treatment
    labels (same number treated), recording the difference in means. The
    observed effect is supplied by the caller from the real assignment and
    is not recomputed here.

    Parameters
    ----------
    outcomes : sequence of float
        Observed outcomes, one per unit.
    treatment : sequence of int
        Observed 0/1 treatment labels; both arms must be non-empty.
    trials : int
        Number of permutations, ``> 0``.
    rng_seed : int, SeedSequence or Generator, optional
        Source of randomness; one permutation is drawn per trial.
    observed_effect : float
        Effect estimated under the actual assignment.

    Raises
    ------
    ``InvalidArgumentError``
        On mismatched lengths, non-binary labels, an empty arm, or
        ``trials <= 0``. Raised before any draw.
    """
    y, d = check_treatment(outcomes, treatment)
    check_trials(trials)
    if not np.isfinite(observed_effect):
        raise InvalidArgumentError(f"observed_effect must be finite, got {observed_effect}.")

    rng = resolve_rng(rng_seed)
    logger.debug("Permuting %d labels (%d treated) %d times", len(d), int(d.sum()), trials)

    null = np.empty(trials, dtype=float)
    for t in range(trials):
        null[t] = difference_in_means(y, rng.permutation(d))

    result = PermutationTestResult(null, observed_effect, "Monte Carlo")
    logger.info(
        "Permutation test: one-sided p=%.4f, two-sided p=%.4f over %d trials",
        result.one_sided_p, result.two_sided_p, trials,
    )
    return result


def exact_permutation_test(
    outcomes: Sequence[float],
    treatment: Sequence[int],
    *,
    observed_effect: float,
    max_assignments: int = MAX_ENUMERATION,
) -> PermutationTestResult:
    """
    Exact permutation test over every assignment with the observed arm sizes.

    The null distribution has one entry per distinct assignment, in
    lexicographic order, so the p-values are the exact finite-population
    ones the Monte Carlo test converges to.
    """
    y, d = check_treatment(outcomes, treatment)
    if not np.isfinite(observed_effect):
        raise InvalidArgumentError(f"observed_effect must be finite, got {observed_effect}.")

    null = np.array([
        difference_in_means(y, a)
        for a in enumerate_assignments(len(d), int(d.sum()), max_assignments)
    ])
    logger.debug("Exact permutation test over %d assignments", len(null))
    return PermutationTestResult(null, observed_effect, "exact")

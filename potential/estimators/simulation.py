from __future__ import annotations

import logging
from collections.abc import Sequence as _SequenceABC
from typing import Sequence, Union

import numpy as np

from .._assumptions import RANDOMIZATION_ASSUMPTIONS, Assumption
from .._exceptions import InvalidArgumentError
from ..assignment import (
    MAX_ENUMERATION,
    SeedLike,
    check_design,
    check_trials,
    draw_assignment,
    enumerate_assignments,
    resolve_rng,
)
from ..sample import DEFAULT_LEVEL, difference_in_means
from ..schedule import Schedule, Unit

logger = logging.getLogger(__name__)


class RandomizationDistribution(_SequenceABC):
    """
    The sampling distribution of the difference-in-means estimator under
    repeated complete random assignment.

    Behaves as a read-only sequence of the per-trial estimates (in the order
    they were drawn), so it can be indexed, iterated and passed to plotting
    code directly. Summary statistics are computed from the full sequence.
    """

    def __init__(
        self,
        estimates: np.ndarray,
        true_ate: float,
        n_units: int,
        n_treated: int,
        method: str,
    ) -> None:
        self._estimates = np.asarray(estimates, dtype=float)
        self._estimates.setflags(write=False)
        self._true_ate = true_ate
        self._n_units = n_units
        self._n_treated = n_treated
        self._method = method

    # ── Sequence protocol ─────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._estimates)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return [float(x) for x in self._estimates[i]]
        return float(self._estimates[i])

    # ── Statistics ────────────────────────────────────────────────────────────

    @property
    def estimates(self) -> np.ndarray:
        """Full array of per-trial ATE estimates."""
        return self._estimates.copy()

    @property
    def true_ate(self) -> float:
        """ATE of the schedule the distribution was drawn from."""
        return self._true_ate

    @property
    def mean(self) -> float:
        return float(np.mean(self._estimates))

    @property
    def bias(self) -> float:
        """``mean - true_ate``; zero in expectation under random assignment."""
        return self.mean - self._true_ate

    @property
    def std_err(self) -> float:
        """Standard deviation of the estimates (``ddof=0``)."""
        return float(np.std(self._estimates))

    def conf_int(self, level: float = DEFAULT_LEVEL) -> tuple[float, float]:
        """Central percentile interval covering ``level`` of the estimates."""
        if not 0 < level < 1:
            raise InvalidArgumentError(f"level must be in (0, 1), got {level}.")
        tail = 100 * (1 - level) / 2
        return (
            float(np.percentile(self._estimates, tail)),
            float(np.percentile(self._estimates, 100 - tail)),
        )

    def histogram(self, bins: Union[int, Sequence[float]] = 10) -> tuple[np.ndarray, np.ndarray]:
        """``(counts, bin_edges)`` as returned by ``numpy.histogram``."""
        return np.histogram(self._estimates, bins=bins)

    def tail_probability(self, threshold: float, two_sided: bool = False) -> float:
        """Share of estimates ``>= threshold`` (or ``|estimate| >= |threshold|``)."""
        if two_sided:
            return float(np.mean(np.abs(self._estimates) >= abs(threshold)))
        return float(np.mean(self._estimates >= threshold))

    @property
    def assumptions(self) -> list[Assumption]:
        return list(RANDOMIZATION_ASSUMPTIONS)

    # ── Display ───────────────────────────────────────────────────────────────

    def executive_summary(self) -> str:
        """Narrative explanation of the procedure, assumptions, and result."""
        from .._explain import explain_randomization
        return explain_randomization(self)

    def summary(self) -> str:
        lo, hi = self.conf_int()
        lines = [
            "",
            f"Randomization Distribution ({self._method})",
            f"  Design: {self._n_treated} of {self._n_units} units treated",
            "─" * 50,
            f"  Trials               : {len(self):>10d}",
            f"  True ATE             : {self._true_ate:>10.4f}",
            f"  Mean estimate        : {self.mean:>10.4f}",
            f"  Bias                 : {self.bias:>+10.4f}",
            f"  Std. error           : {self.std_err:>10.4f}",
            f"  95% of estimates     : [{lo:.4f}, {hi:.4f}]",
            "",
            "  Assumptions",
            "  " + "┄" * 48,
        ]
        for a in RANDOMIZATION_ASSUMPTIONS:
            lines.append(f"  {a.fmt_tag()}  {a.name}")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


def _as_schedule(units: Union[Schedule, Sequence[Unit]]) -> Schedule:
    if isinstance(units, Schedule):
        return units
    return Schedule(units)


def simulate_randomization(
    units: Union[Schedule, Sequence[Unit]],
    m: int,
    trials: int,
    rng_seed: SeedLike = None,
) -> RandomizationDistribution:
    """
    Monte Carlo sampling distribution of the difference-in-means estimator.

    Each trial draws ``m`` of the ``N`` units uniformly without replacement
    for treatment, reveals the matching potential outcomes and records the
    difference in means. Trials are i.i.d. draws over the ``C(N, m)``
    assignments.

    Parameters
    ----------
    units : Schedule or sequence of Unit
        Units with both potential outcomes. Read-only.
    m : int
        Number of treated units, ``0 < m < N``.
    trials : int
        Number of re-randomizations, ``> 0``.
    rng_seed : int, SeedSequence or Generator, optional
        Source of randomness. A ``Generator`` is consumed in place, one
        assignment per trial, so ``k`` calls with ``trials=1`` sharing a
        generator reproduce a single call with ``trials=k``.

    Raises
    ------
    ``InvalidArgumentError``
        On empty or duplicated units, ``m`` out of range or ``trials <= 0``.
        Raised before any draw.
    """
    schedule = _as_schedule(units)
    n = len(schedule)
    check_design(n, m)
    check_trials(trials)

    rng = resolve_rng(rng_seed)
    y0, y1 = schedule.y0, schedule.y1
    logger.debug("Simulating %d randomizations of %d/%d units", trials, m, n)

    estimates = np.empty(trials, dtype=float)
    for t in range(trials):
        d = draw_assignment(n, m, rng)
        estimates[t] = difference_in_means(np.where(d == 1, y1, y0), d)

    result = RandomizationDistribution(estimates, schedule.true_ate, n, m, "Monte Carlo")
    logger.info(
        "Randomization distribution: mean=%.4f, sd=%.4f over %d trials",
        result.mean, result.std_err, trials,
    )
    return result


def enumerate_randomization(
    units: Union[Schedule, Sequence[Unit]],
    m: int,
    max_assignments: int = MAX_ENUMERATION,
) -> RandomizationDistribution:
    """
    Exact sampling distribution: the estimate under every one of the
    ``C(N, m)`` assignments, in lexicographic order.

    Its mean equals the true ATE and its standard deviation equals
    ``Schedule.standard_error(m)``.

    Raises
    ------
    ``InvalidArgumentError``
        As ``simulate_randomization``, or if ``C(N, m) > max_assignments``.
    """
    schedule = _as_schedule(units)
    n = len(schedule)
    y0, y1 = schedule.y0, schedule.y1

    estimates = np.array([
        difference_in_means(np.where(d == 1, y1, y0), d)
        for d in enumerate_assignments(n, m, max_assignments)
    ])
    logger.debug("Enumerated %d assignments of %d/%d units", len(estimates), m, n)
    return RandomizationDistribution(estimates, schedule.true_ate, n, m, "full enumeration")

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

import numpy as np
import pandas as pd

from ._exceptions import InvalidArgumentError
from .sample import ObservedSample


@dataclass(frozen=True)
class Unit:
    """
    One experimental subject, with both of its potential outcomes.

    Only one of ``y0`` / ``y1`` is ever revealed by an assignment; see
    ``Schedule.observe``.
    """

    id: int
    y0: float
    y1: float

    @property
    def tau(self) -> float:
        """Unit-level treatment effect, ``y1 - y0``."""
        return self.y1 - self.y0


class Schedule:
    """
    A schedule of potential outcomes: both ``y0`` and ``y1`` for every unit.

    Knowable only in simulation, which is exactly where it is used: to draw
    the sampling distribution of an estimator under repeated random
    assignment and compare it with the true ATE.

    Example::

        villages = Schedule.from_arrays(
            y0=[10, 15, 20, 20, 10, 15, 15],
            y1=[15, 15, 30, 15, 20, 15, 30],
        )
        villages.true_ate          # 5.0
        villages.standard_error(2)
    """

    def __init__(self, units: Iterable[Unit]) -> None:
        self._units: tuple[Unit, ...] = tuple(units)
        self._validate()
        self._y0 = np.array([u.y0 for u in self._units], dtype=float)
        self._y1 = np.array([u.y1 for u in self._units], dtype=float)

    def _validate(self) -> None:
        if not self._units:
            raise InvalidArgumentError("A schedule needs at least one unit.")
        for u in self._units:
            if not isinstance(u, Unit):
                raise InvalidArgumentError(f"Expected Unit, got {type(u).__name__}: {u!r}")
            if not (np.isfinite(u.y0) and np.isfinite(u.y1)):
                raise InvalidArgumentError(f"Unit {u.id} has a non-finite potential outcome.")
        ids = [u.id for u in self._units]
        if len(set(ids)) != len(ids):
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            raise InvalidArgumentError(f"Unit identifiers must be unique. Duplicated: {dupes}")

    # ── Construction ──────────────────────────────────────────────────────────

    @classmethod
    def from_arrays(
        cls,
        y0: Sequence[float],
        y1: Sequence[float],
        ids: Optional[Sequence[int]] = None,
    ) -> Schedule:
        """Build from parallel outcome sequences. Ids default to ``1..N``."""
        if len(y0) != len(y1):
            raise InvalidArgumentError(
                f"y0 and y1 must have the same length, got {len(y0)} and {len(y1)}."
            )
        if ids is None:
            ids = range(1, len(y0) + 1)
        elif len(ids) != len(y0):
            raise InvalidArgumentError(
                f"ids must have one entry per unit, got {len(ids)} for {len(y0)} units."
            )
        return cls(Unit(int(i), float(a), float(b)) for i, a, b in zip(ids, y0, y1))

    @classmethod
    def from_frame(
        cls,
        data: pd.DataFrame,
        y0: str = "y0",
        y1: str = "y1",
        id: Optional[str] = None,
    ) -> Schedule:
        """
        Build from a dataframe with one row per unit.

        Parameters
        ----------
        data : pd.DataFrame
            Must contain the two potential-outcome columns.
        y0, y1 : str
            Column names of the control and treated potential outcomes.
        id : str, optional
            Column holding unit identifiers. Defaults to ``1..N``.
        """
        for label, col in [("y0", y0), ("y1", y1)] + ([("id", id)] if id else []):
            if col not in data.columns:
                raise InvalidArgumentError(f"{label} column '{col}' not found in dataframe.")
        ids = data[id].tolist() if id else None
        return cls.from_arrays(data[y0].tolist(), data[y1].tolist(), ids=ids)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "id": [u.id for u in self._units],
            "y0": self._y0,
            "y1": self._y1,
            "tau": self._y1 - self._y0,
        })

    # ── Sequence protocol ─────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __getitem__(self, i: int) -> Unit:
        return self._units[i]

    # ── Potential outcomes ────────────────────────────────────────────────────

    @property
    def y0(self) -> np.ndarray:
        return self._y0.copy()

    @property
    def y1(self) -> np.ndarray:
        return self._y1.copy()

    @property
    def true_ate(self) -> float:
        """mean(y1 - y0) over all units."""
        return float(np.mean(self._y1 - self._y0))

    def variances(self) -> tuple[float, float, float]:
        """
        Population moments ``(Var(Y0), Var(Y1), Cov(Y0, Y1))``, dividing by N.

        This is the convention ``standard_error`` expects. The covariance is
        clipped to ``±sqrt(Var(Y0) * Var(Y1))`` so rounding never pushes a
        perfectly correlated schedule outside that formula's domain.
        """
        var_y0 = float(np.var(self._y0))
        var_y1 = float(np.var(self._y1))
        cov = float(np.mean((self._y0 - self._y0.mean()) * (self._y1 - self._y1.mean())))
        bound = float(np.sqrt(var_y0 * var_y1))
        return var_y0, var_y1, float(np.clip(cov, -bound, bound))

    def standard_error(self, m: int) -> float:
        """True SE of the difference-in-means estimator with ``m`` treated units."""
        from .estimators.standard_error import standard_error
        var_y0, var_y1, cov = self.variances()
        return standard_error(var_y0, var_y1, cov, len(self), m)

    def observe(self, assignment: Sequence[int]) -> ObservedSample:
        """
        Reveal ``y1`` for treated units and ``y0`` for the rest.

        ``assignment`` is a 0/1 vector aligned with the schedule's unit order.
        """
        d = np.asarray(assignment)
        if d.shape != self._y0.shape:
            raise InvalidArgumentError(
                f"Assignment must have one label per unit ({len(self)}), got shape {d.shape}."
            )
        return ObservedSample(np.where(d == 1, self._y1, self._y0), d)

    def __repr__(self) -> str:
        lines = [f"Schedule ({len(self)} units):", "     id        y0        y1"]
        for u in self._units:
            lines.append(f"  {u.id:>5}  {u.y0:>8.2f}  {u.y1:>8.2f}")
        return "\n".join(lines)

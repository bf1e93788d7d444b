"""
Complete random assignment of ``m`` of ``n`` units to treatment.

Assignments are 0/1 integer vectors aligned with the unit order of the data
they are applied to. Every function that draws takes an explicit generator;
nothing here touches numpy's global random state.
"""
from __future__ import annotations

from itertools import combinations
from math import comb
from typing import Iterator, Union

import numpy as np

from ._exceptions import InvalidArgumentError

MAX_ENUMERATION = 1_000_000

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


def resolve_rng(rng_seed: SeedLike) -> np.random.Generator:
    """
    Turn a seed, ``SeedSequence`` or ``Generator`` into a ``Generator``.

    A ``Generator`` is returned as-is, so passing the same generator to
    several calls continues one random stream across them.
    """
    return np.random.default_rng(rng_seed)


def _check_integer(label: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgumentError(f"{label} must be an integer, got {value!r}.")


def check_design(n: int, m: int) -> None:
    """Raise ``InvalidArgumentError`` unless ``n`` and ``m`` are integers with ``0 < m < n``."""
    _check_integer("N", n)
    _check_integer("m", m)
    if n <= 0:
        raise InvalidArgumentError("At least one unit is required.")
    if not 0 < m < n:
        raise InvalidArgumentError(
            f"Number of treated units m={m} must satisfy 0 < m < N={n}, "
            f"so that both the treatment and control arms are non-empty."
        )


def check_trials(trials: int) -> None:
    _check_integer("trials", trials)
    if trials <= 0:
        raise InvalidArgumentError(f"trials must be positive, got {trials}.")


def count_assignments(n: int, m: int) -> int:
    """Number of distinct complete random assignments, ``C(n, m)``."""
    check_design(n, m)
    return comb(n, m)


def draw_assignment(n: int, m: int, rng: np.random.Generator) -> np.ndarray:
    """
    Draw one assignment uniformly from the ``C(n, m)`` equal-sized splits.

    Exactly ``m`` entries of the returned vector are 1.
    """
    treated = rng.choice(n, size=m, replace=False)
    assignment = np.zeros(n, dtype=int)
    assignment[treated] = 1
    return assignment


def enumerate_assignments(
    n: int,
    m: int,
    max_assignments: int = MAX_ENUMERATION,
) -> Iterator[np.ndarray]:
    """
    Yield every assignment of ``m`` treated among ``n`` units, in
    lexicographic order of the treated index sets.

    Raises
    ------
    ``InvalidArgumentError``
        If ``C(n, m)`` exceeds ``max_assignments``. Checked eagerly, before
        the first assignment is produced.
    """
    total = count_assignments(n, m)
    if total > max_assignments:
        raise InvalidArgumentError(
            f"Full enumeration needs C({n}, {m}) = {total:,} assignments, "
            f"more than max_assignments={max_assignments:,}. "
            f"Use the Monte Carlo procedure instead, or raise the limit."
        )
    return _iter_assignments(n, m)


def _iter_assignments(n: int, m: int) -> Iterator[np.ndarray]:
    for treated in combinations(range(n), m):
        assignment = np.zeros(n, dtype=int)
        assignment[list(treated)] = 1
        yield assignment

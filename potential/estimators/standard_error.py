"""
Closed-form standard error of the difference-in-means ATE estimator under
complete random assignment of ``m`` of ``N`` units.

Two variants are exposed and the caller chooses between them:

- ``standard_error`` needs ``Cov(Y0, Y1)``, which is only known when both
  potential outcomes are (i.e. in simulation).
- ``standard_error_conservative`` assumes a correlation of 1 between the
  potential outcomes and so never understates the true SE. It is the one
  usable on real data.
"""
from __future__ import annotations

import logging

import numpy as np

from .._exceptions import InvalidArgumentError, InvalidDomainError
from ..assignment import check_design

logger = logging.getLogger(__name__)

# Slack, in units of the last place, when comparing |cov| with
# sqrt(var_y0 * var_y1); absorbs rounding in the product and square root.
_CORR_ULPS = 4


def _check_variances(var_y0: float, var_y1: float) -> None:
    for label, v in [("var_y0", var_y0), ("var_y1", var_y1)]:
        if not np.isfinite(v) or v < 0:
            raise InvalidArgumentError(f"{label} must be a finite, non-negative variance, got {v}.")


def standard_error(var_y0: float, var_y1: float, cov_y0y1: float, N: int, m: int) -> float:
    """
    SE of the ATE estimate with ``m`` treated out of ``N`` units::

        sqrt( 1/(N-1) * ( m/(N-m)*Var(Y0) + (N-m)/m*Var(Y1) + 2*Cov(Y0,Y1) ) )

    Variances and covariance are population moments (divide by ``N``).

    Raises
    ------
    ``InvalidArgumentError``
        If ``m`` is outside ``(0, N)`` or a variance is negative.
    ``InvalidDomainError``
        If ``|cov_y0y1| > sqrt(var_y0 * var_y1)`` (implied correlation
        outside [-1, 1]) or the bracketed term is negative.
    """
    check_design(N, m)
    _check_variances(var_y0, var_y1)
    if not np.isfinite(cov_y0y1):
        raise InvalidArgumentError(f"cov_y0y1 must be finite, got {cov_y0y1}.")

    bound = np.sqrt(var_y0 * var_y1)
    if abs(cov_y0y1) > bound + _CORR_ULPS * np.spacing(bound):
        raise InvalidDomainError(
            f"Covariance {cov_y0y1} is inconsistent with the variances "
            f"Var(Y0)={var_y0}, Var(Y1)={var_y1}: |Cov| must not exceed "
            f"sqrt(Var(Y0) * Var(Y1)) = {bound:.6g}, i.e. the implied "
            f"correlation must lie in [-1, 1]."
        )

    bracket = (m / (N - m)) * var_y0 + ((N - m) / m) * var_y1 + 2 * cov_y0y1
    if bracket < 0:
        raise InvalidDomainError(
            f"Variance of the estimator is negative ({bracket / (N - 1):.6g}); "
            f"check that cov_y0y1 is consistent with var_y0 and var_y1."
        )

    se = float(np.sqrt((1 / (N - 1)) * bracket))
    logger.debug("standard_error(N=%d, m=%d) = %.6g", N, m, se)
    return se


def standard_error_conservative(var_y0: float, var_y1: float, N: int, m: int) -> float:
    """
    Conservative SE assuming ``corr(Y0, Y1) = 1``::

        sqrt( Var(Y0)/(N-m) + Var(Y1)/m )

    With sample variances (``ddof=1``) of each observed arm this is the
    usual Neyman standard error.
    """
    check_design(N, m)
    _check_variances(var_y0, var_y1)
    return float(np.sqrt(var_y0 / (N - m) + var_y1 / m))

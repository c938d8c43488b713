"""Provide the least-squares fit of stress against strain.

This module supports:
- the closed-form ordinary least-squares slope used as Young's modulus,
- intercept recovery for plotting the fit line, and
- scatter diagnostics (R^2, slope standard error, 95% half-width).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.stats import t as student_t

from ..errors import DegenerateFitError, InsufficientFitDataError


@dataclass(frozen=True)
class FitResult:
    """Outcome of one straight-line fit ``y = slope * x + intercept``."""

    slope: float
    intercept: float
    n: int
    r2: float = math.nan
    se_slope: float = math.nan
    ci95_slope: float = math.nan


def least_squares_slope(x: Sequence[float], y: Sequence[float]) -> float:
    """Return the ordinary least-squares slope of ``y`` against ``x``.

    Args:
        x (Sequence[float]): Independent variable values.
        y (Sequence[float]): Dependent variable values, same length as ``x``.

    Returns:
        float: ``(N Σxy − Σx Σy) / (N Σx² − (Σx)²)``.

    Raises:
        InsufficientFitDataError: If fewer than two pairs are given.
        DegenerateFitError: If the denominator is exactly zero, i.e. all
            ``x`` values are identical.

    Note:
        Only an exactly-zero denominator is rejected. Nearly identical ``x``
        values pass through and may give a very large, unstable slope.

    References:
        Ordinary least squares linear regression, closed form.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.shape != y_arr.shape:
        raise ValueError("x and y must have the same length.")
    n = int(len(x_arr))
    if n < 2:
        raise InsufficientFitDataError("At least two points are required for a linear fit.")

    sum_x = float(np.sum(x_arr))
    sum_y = float(np.sum(y_arr))
    sum_xy = float(np.sum(x_arr * y_arr))
    sum_x2 = float(np.sum(x_arr * x_arr))

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        raise DegenerateFitError(
            "All strain values are identical; the least-squares slope is undefined."
        )
    return (n * sum_xy - sum_x * sum_y) / denominator


def fit_intercept(x: Sequence[float], y: Sequence[float], slope: float) -> float:
    """Recover the intercept ``(Σy − slope Σx) / N`` for a known slope."""
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    return float((np.sum(y_arr) - slope * np.sum(x_arr)) / len(x_arr))


def _fit_diagnostics(
    x: np.ndarray, y: np.ndarray, slope: float, intercept: float
) -> tuple[float, float, float]:
    n = int(len(x))
    resid = y - (slope * x + intercept)
    sse = float(np.sum(resid**2))
    sst = float(np.sum((y - y.mean()) ** 2))
    r2 = 1.0 - sse / sst if sst > 0 else math.nan

    dof = n - 2
    ssxx = float(np.sum((x - x.mean()) ** 2))
    if dof <= 0 or ssxx <= 0:
        return r2, math.nan, math.nan

    se_slope = float(np.sqrt(sse / dof / ssxx))
    t_crit = float(student_t.ppf(0.975, dof))
    return r2, se_slope, t_crit * se_slope


def fit_line(x: Sequence[float], y: Sequence[float]) -> FitResult:
    """Fit ``y = slope * x + intercept`` and attach scatter diagnostics.

    Raises:
        InsufficientFitDataError: If fewer than two pairs are given.
        DegenerateFitError: If all ``x`` values are identical.

    Note:
        ``r2`` and the slope standard error describe statistical scatter only.
        With exactly two points both standard error and confidence half-width
        are ``NaN``.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    slope = least_squares_slope(x_arr, y_arr)
    intercept = fit_intercept(x_arr, y_arr, slope)
    r2, se_slope, ci95_slope = _fit_diagnostics(x_arr, y_arr, slope, intercept)
    return FitResult(
        slope=float(slope),
        intercept=float(intercept),
        n=int(len(x_arr)),
        r2=float(r2),
        se_slope=se_slope,
        ci95_slope=ci95_slope,
    )


def fit_stress_strain(points) -> FitResult:
    """Fit stress against strain for a sequence of stress-strain points.

    Args:
        points: Objects exposing ``strain`` and ``stress_pa`` attributes, such
            as :class:`youngs.analysis.StressStrainPoint`.

    Returns:
        FitResult: Slope in Pa (the Young's modulus estimate) and intercept.
    """
    strains = [p.strain for p in points]
    stresses = [p.stress_pa for p in points]
    return fit_line(strains, stresses)

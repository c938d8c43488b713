import math

import numpy as np
import pytest

from youngs.errors import DegenerateFitError, InsufficientFitDataError
from youngs.stats.regression import fit_intercept, fit_line, least_squares_slope


def test_exact_line_recovered():
    x = np.array([1e-4, 2e-4, 3e-4, 4e-4])
    y = 2.0e11 * x + 5.0e5
    fit = fit_line(x, y)
    assert math.isclose(fit.slope, 2.0e11, rel_tol=1e-9)
    assert math.isclose(fit.intercept, 5.0e5, rel_tol=1e-6)
    assert math.isclose(fit.r2, 1.0, rel_tol=1e-9)
    assert fit.n == 4


def test_slope_invariant_under_reordering():
    x = [0.1, 0.4, 0.2, 0.9, 0.5]
    y = [1.1, 3.9, 2.3, 8.7, 5.2]
    order = [3, 0, 4, 2, 1]
    forward = least_squares_slope(x, y)
    shuffled = least_squares_slope([x[i] for i in order], [y[i] for i in order])
    assert math.isclose(forward, shuffled, rel_tol=1e-12)
    assert math.isclose(forward, np.polyfit(x, y, 1)[0], rel_tol=1e-9)


def test_intercept_from_sums():
    x = [1.0, 2.0, 3.0]
    y = [2.0, 4.5, 5.5]
    slope = least_squares_slope(x, y)
    assert math.isclose(fit_intercept(x, y, slope), (12.0 - slope * 6.0) / 3.0)


def test_identical_strains_are_degenerate():
    with pytest.raises(DegenerateFitError):
        least_squares_slope([0.5, 0.5, 0.5, 0.5], [1.0, 2.0, 3.0, 4.0])


def test_single_point_rejected():
    with pytest.raises(InsufficientFitDataError):
        least_squares_slope([1.0], [2.0])


def test_length_mismatch_rejected():
    with pytest.raises(ValueError):
        least_squares_slope([1.0, 2.0], [1.0, 2.0, 3.0])


def test_two_points_have_no_confidence_interval():
    fit = fit_line([1.0, 2.0], [3.0, 5.0])
    assert math.isclose(fit.slope, 2.0)
    assert math.isnan(fit.se_slope)
    assert math.isnan(fit.ci95_slope)


def test_confidence_interval_with_scatter():
    x = [1.0, 2.0, 3.0, 4.0, 5.0]
    y = [2.1, 3.9, 6.2, 7.8, 10.1]
    fit = fit_line(x, y)
    assert fit.se_slope > 0
    assert fit.ci95_slope > fit.se_slope

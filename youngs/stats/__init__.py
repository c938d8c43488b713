"""
Statistical utilities for the optical-lever analysis.

This subpackage provides numerical routines for the linear fit and for
uncertainty propagation. All functions operate on arrays and primitive types;
no experiment-specific intake or reporting logic is included.

Modules:
    regression:
        Closed-form ordinary least-squares slope with exact-zero degeneracy
        check, intercept recovery, and scatter diagnostics.

    uncertainty:
        Type-A and type-B standard uncertainties, quadrature combination,
        propagation onto the fitted modulus, and rounding utilities.

Design Principle:
    This subpackage has no dependencies on plotting/ or reporting modules.
    It provides pure numerical utilities that can be independently tested.
"""

from .regression import (
    FitResult,
    fit_intercept,
    fit_line,
    fit_stress_strain,
    least_squares_slope,
)
from .uncertainty import (
    UncertaintyResult,
    combine_quadrature,
    estimate_modulus_uncertainty,
    format_value_with_uncertainty,
    type_a_uncertainty,
    type_b_uncertainty,
)

__all__ = [
    "FitResult",
    "fit_intercept",
    "fit_line",
    "fit_stress_strain",
    "least_squares_slope",
    "UncertaintyResult",
    "combine_quadrature",
    "estimate_modulus_uncertainty",
    "format_value_with_uncertainty",
    "type_a_uncertainty",
    "type_b_uncertainty",
]

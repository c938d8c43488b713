"""
Uncertainty propagation for the optical-lever modulus (GUM-style quadrature).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..units import mm_to_m

logger = logging.getLogger(__name__)

RECTANGULAR_DIVISOR = math.sqrt(3.0)


@dataclass(frozen=True)
class UncertaintyResult:
    """Propagated uncertainty of the fitted modulus.

    All absolute uncertainties are in meters except ``u_modulus`` (Pa). The
    ``rel_*`` fields are the five squared relative terms whose sum is
    ``relative_sq``.
    """

    u_a_d: float
    u_b_d: float
    u_d: float
    u_b_length: float
    u_delta_n_avg: float
    delta_n_avg: float
    rel_d_sq: float
    rel_D_sq: float
    rel_L_sq: float
    rel_b_sq: float
    rel_delta_n_sq: float
    relative_sq: float
    relative: float
    u_modulus: float


def type_a_uncertainty(values: Sequence[float]) -> float:
    """Standard deviation of the mean, ``sqrt(Σ(xᵢ − x̄)² / (n (n − 1)))``.

    Args:
        values (Sequence[float]): Repeated readings of one quantity.

    Returns:
        float: Type-A standard uncertainty in the unit of ``values``. ``NaN``
        for fewer than two readings.
    """
    arr = np.asarray(values, dtype=float)
    n = int(len(arr))
    if n < 2:
        return math.nan
    ss = float(np.sum((arr - arr.mean()) ** 2))
    return math.sqrt(ss / (n * (n - 1)))


def type_b_uncertainty(precision: float) -> float:
    """Instrument uncertainty from a half-width, rectangular distribution."""
    return float(precision) / RECTANGULAR_DIVISOR


def combine_quadrature(terms: list[float]) -> float:
    """
    Combine independent absolute uncertainties as sqrt(sum of squares).

    Non-finite terms are not dropped; they propagate into the result.
    """
    vals = [abs(float(t)) for t in terms]
    if not vals:
        return math.nan
    return float(math.sqrt(sum(v**2 for v in vals)))


def estimate_modulus_uncertainty(
    diameters_m: Sequence[float],
    d_avg_m: float,
    D_m: float,
    L_m: float,
    b_m: float,
    sample_delta_n_m: float,
    slope: float,
    micrometer_precision_mm: float = 0.001,
    ruler_precision_mm: float = 1.0,
    delta_n_observations: int = 4,
) -> UncertaintyResult:
    """Propagate measurement uncertainties onto the fitted modulus.

    Args:
        diameters_m: Valid diameter trials in m.
        d_avg_m: Average diameter in m.
        D_m: Mirror-to-scale distance in m.
        L_m: Original wire length in m.
        b_m: Optical lever arm length in m.
        sample_delta_n_m: Reading delta of the representative point in m.
        slope: Fitted modulus in Pa.
        micrometer_precision_mm: Micrometer half-width in mm.
        ruler_precision_mm: Ruler half-width in mm.
        delta_n_observations: Number of difference observations the reported
            reading delta is averaged from.

    Returns:
        UncertaintyResult: Component and combined uncertainties.

    Note:
        The relative uncertainty squared is
        ``(2 u(d)/d̄)² + (u_B/D)² + (u_B/L)² + (u_B/b)² + (u(Δn̄)/Δn̄)²`` with
        ``Δn̄ = sample Δn / k`` and ``u(Δn̄) = u_B / √k`` for ``k``
        observations. No zero guard is applied: a vanishing sample reading
        delta yields an infinite or ``NaN`` uncertainty, which is logged but
        not raised. The absolute uncertainty uses ``|slope|``, so it stays
        non-negative when the fitted slope is negative.

    References:
        Combination of independent relative uncertainties in quadrature for a
        product of powers.
    """
    u_a_d = type_a_uncertainty(diameters_m)
    u_b_d = type_b_uncertainty(mm_to_m(micrometer_precision_mm))
    u_d = combine_quadrature([u_a_d, u_b_d])

    u_b_length = type_b_uncertainty(mm_to_m(ruler_precision_mm))
    u_delta_n_avg = u_b_length / math.sqrt(delta_n_observations)
    delta_n_avg = float(sample_delta_n_m) / delta_n_observations

    with np.errstate(divide="ignore", invalid="ignore"):
        rel_d_sq = float(np.float64(2.0 * u_d) / d_avg_m) ** 2
        rel_D_sq = float(np.float64(u_b_length) / D_m) ** 2
        rel_L_sq = float(np.float64(u_b_length) / L_m) ** 2
        rel_b_sq = float(np.float64(u_b_length) / b_m) ** 2
        rel_delta_n_sq = float(np.float64(u_delta_n_avg) / delta_n_avg) ** 2

    relative_sq = rel_d_sq + rel_D_sq + rel_L_sq + rel_b_sq + rel_delta_n_sq
    relative = math.sqrt(abs(relative_sq))
    u_modulus = abs(float(slope)) * relative

    if not math.isfinite(u_modulus):
        logger.warning(
            "Modulus uncertainty is not finite (%s); check the representative "
            "reading delta (%s m) and the length parameters.",
            u_modulus,
            sample_delta_n_m,
        )

    return UncertaintyResult(
        u_a_d=u_a_d,
        u_b_d=u_b_d,
        u_d=u_d,
        u_b_length=u_b_length,
        u_delta_n_avg=u_delta_n_avg,
        delta_n_avg=delta_n_avg,
        rel_d_sq=rel_d_sq,
        rel_D_sq=rel_D_sq,
        rel_L_sq=rel_L_sq,
        rel_b_sq=rel_b_sq,
        rel_delta_n_sq=rel_delta_n_sq,
        relative_sq=relative_sq,
        relative=relative,
        u_modulus=u_modulus,
    )


def _round_uncertainty(u: float) -> Tuple[float, int]:
    """
    Returns:
      (rounded_uncertainty, ndigits_for_rounding_value)
    where ndigits may be negative (round to tens/hundreds/etc.).
    """
    if u <= 0 or not math.isfinite(u):
        return u, 0

    u = abs(float(u))
    exponent = math.floor(math.log10(u))
    leading = u / (10**exponent)

    sig_figs = 2 if 1.0 <= leading < 2.0 else 1
    ndigits = sig_figs - 1 - exponent

    ru = round(u, ndigits)

    if ru == 0:
        ndigits = sig_figs - exponent
        ru = round(u, ndigits)

    return float(ru), int(ndigits)


def format_value_with_uncertainty(
    value: float, uncertainty: float, unit: str = ""
) -> str:
    """Format ``value ± uncertainty`` in scientific notation with a shared exponent.

    The uncertainty is rounded first; the value keeps the same decimal place.
    Large SI values such as moduli in Pa are written as
    ``(1.58 ± 0.05)e+11 Pa``.
    """
    value = float(value)
    ru, ndigits = _round_uncertainty(abs(float(uncertainty)))
    if ru == 0 or not math.isfinite(ru) or value == 0 or not math.isfinite(value):
        return f"{value:.6g} ± {float(uncertainty):.6g} {unit}".strip()

    exponent = math.floor(math.log10(abs(value)))
    scale = 10.0**exponent
    decimals = max(0, ndigits + exponent)
    v_str = f"{round(value, ndigits) / scale:.{decimals}f}"
    u_str = f"{ru / scale:.{decimals}f}"
    return f"({v_str} ± {u_str})e{exponent:+03d} {unit}".strip()

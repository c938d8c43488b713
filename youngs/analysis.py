"""
Optical-lever Young's modulus analysis.

This module turns validated raw readings into:
- derived SI quantities (average diameter, D, L, b, per-load midpoint
  readings, cross-sectional area),
- the stress-strain series relative to the base (first, lowest) load:
    sigma_i = dM_i * g / A,   epsilon_i = b * dn_i / (2 D L),
- the least-squares modulus (slope of sigma against epsilon), and
- the propagated uncertainty of that modulus.

The base load is always index 0. Points are emitted only for loads strictly
heavier than the base load, and at least two are needed for the fit.

The result is returned as one immutable LeverAnalysis bundle; reporting,
plotting and export only read from it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG, ExperimentConfig
from .data_processing import RawMeasurementSet
from .errors import InsufficientFitDataError
from .schema import COLUMNS
from .stats.regression import FitResult, fit_stress_strain
from .stats.uncertainty import UncertaintyResult, estimate_modulus_uncertainty
from .units import m_to_mm, mm_to_m

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedQuantities:
    d_avg_mm: float
    d_avg_m: float
    D_m: float
    L_m: float
    b_m: float
    midpoints_m: tuple[float, ...]
    area_m2: float


@dataclass(frozen=True)
class StressStrainPoint:
    load_index: int
    delta_m_kg: float
    delta_n_m: float
    stress_pa: float
    strain: float


@dataclass(frozen=True)
class LeverAnalysis:
    raw: RawMeasurementSet
    derived: DerivedQuantities
    points: tuple[StressStrainPoint, ...]
    fit: FitResult
    uncertainty: UncertaintyResult
    sample_point: StressStrainPoint
    config: ExperimentConfig = DEFAULT_CONFIG

    @property
    def modulus(self) -> float:
        return self.fit.slope

    @property
    def modulus_uncertainty(self) -> float:
        return self.uncertainty.u_modulus

    def delta_n_table(self) -> pd.DataFrame:
        """Successive-difference table built fresh from the midpoint readings."""
        return successive_differences(
            self.derived.midpoints_m, self.config.delta_n_observations
        )


def cross_sectional_area(diameter_m: float) -> float:
    """Circular cross-section ``π (d/2)²`` in m² for a diameter in m."""
    return math.pi * (float(diameter_m) / 2.0) ** 2


def compute_derived_quantities(raw: RawMeasurementSet) -> DerivedQuantities:
    """Convert raw millimeter readings to SI and compute midpoint readings.

    Args:
        raw (RawMeasurementSet): Validated readings from intake.

    Returns:
        DerivedQuantities: Average diameter (mm and m), ``D``, ``L``, ``b`` in
        m, the eight midpoint readings ``(n' + n'') / 2`` in m, and the
        cross-sectional area in m².
    """
    d_avg_mm = float(np.mean(raw.diameters_mm))
    d_avg_m = mm_to_m(d_avg_mm)
    midpoints = tuple(
        mm_to_m((n_p + n_pp) / 2.0)
        for n_p, n_pp in zip(raw.loading_mm, raw.unloading_mm)
    )
    return DerivedQuantities(
        d_avg_mm=d_avg_mm,
        d_avg_m=d_avg_m,
        D_m=mm_to_m(raw.D_mm),
        L_m=mm_to_m(raw.L_mm),
        b_m=mm_to_m(raw.b_mm),
        midpoints_m=midpoints,
        area_m2=cross_sectional_area(d_avg_m),
    )


def compute_stress_strain_points(
    derived: DerivedQuantities,
    loads_kg: Sequence[float],
    g: float = DEFAULT_CONFIG.g,
    min_points: int = DEFAULT_CONFIG.min_fit_points,
) -> tuple[StressStrainPoint, ...]:
    """Build the stress-strain series relative to the base load.

    Args:
        derived (DerivedQuantities): SI quantities of the experiment.
        loads_kg (Sequence[float]): Load magnitudes; index 0 is the base load.
        g (float, optional): Gravitational acceleration in m s^-2.
        min_points (int, optional): Minimum number of emitted points.

    Returns:
        tuple[StressStrainPoint, ...]: One point per load heavier than the
        base load, in load order.

    Raises:
        InsufficientFitDataError: If fewer than ``min_points`` points have a
            positive load delta.
    """
    base_load = float(loads_kg[0])
    base_reading = derived.midpoints_m[0]
    lever_factor = derived.b_m / (2.0 * derived.D_m * derived.L_m)

    points = []
    for i in range(1, len(loads_kg)):
        delta_m = float(loads_kg[i]) - base_load
        delta_n = derived.midpoints_m[i] - base_reading
        if delta_m > 0:
            points.append(
                StressStrainPoint(
                    load_index=i,
                    delta_m_kg=delta_m,
                    delta_n_m=delta_n,
                    stress_pa=delta_m * g / derived.area_m2,
                    strain=lever_factor * delta_n,
                )
            )

    if len(points) < min_points:
        raise InsufficientFitDataError(
            f"Only {len(points)} stress-strain point(s) have a positive load change; "
            f"at least {min_points} are needed for a linear fit."
        )
    return tuple(points)


def select_sample_point(
    points: Sequence[StressStrainPoint],
    preferred_index: int = DEFAULT_CONFIG.sample_point_index,
) -> StressStrainPoint:
    """Return the representative point used for the worked example.

    The point at ``preferred_index`` is used when it exists, otherwise the
    last point.
    """
    if not points:
        raise InsufficientFitDataError("No stress-strain points to choose a sample from.")
    return points[min(preferred_index, len(points) - 1)]


def successive_differences(
    midpoints_m: Sequence[float], n_pairs: int = 4
) -> pd.DataFrame:
    """Tabulate successive differences ``|n_{j+k} − n_j|`` with ``k = n_pairs``.

    With eight readings and ``n_pairs=4`` this pairs each of the first four
    readings with the one four loads later.

    Args:
        midpoints_m (Sequence[float]): Midpoint readings in m.
        n_pairs (int, optional): Pair offset and number of pairs.

    Returns:
        pandas.DataFrame: Columns for ``j``, both readings and their absolute
        difference, all in mm. Empty if too few readings are available.
    """
    records = []
    for j in range(n_pairs):
        upper = j + n_pairs
        if upper >= len(midpoints_m):
            break
        n_upper_mm = m_to_mm(midpoints_m[upper])
        n_lower_mm = m_to_mm(midpoints_m[j])
        records.append(
            {
                COLUMNS.pair_index: j,
                COLUMNS.upper_reading_mm: n_upper_mm,
                COLUMNS.lower_reading_mm: n_lower_mm,
                COLUMNS.delta_n_pair_mm: abs(n_upper_mm - n_lower_mm),
            }
        )
    return pd.DataFrame.from_records(
        records,
        columns=[
            COLUMNS.pair_index,
            COLUMNS.upper_reading_mm,
            COLUMNS.lower_reading_mm,
            COLUMNS.delta_n_pair_mm,
        ],
    )


def points_to_dataframe(points: Sequence[StressStrainPoint]) -> pd.DataFrame:
    rows = []
    for p in points:
        rows.append(
            {
                COLUMNS.load_index: p.load_index,
                COLUMNS.delta_m: p.delta_m_kg,
                COLUMNS.delta_n: p.delta_n_m,
                COLUMNS.stress: p.stress_pa,
                COLUMNS.strain: p.strain,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            COLUMNS.load_index,
            COLUMNS.delta_m,
            COLUMNS.delta_n,
            COLUMNS.stress,
            COLUMNS.strain,
        ],
    )


def analyze_measurements(
    raw: RawMeasurementSet, config: Optional[ExperimentConfig] = None
) -> LeverAnalysis:
    """Run the full numeric pipeline on one validated measurement set.

    Args:
        raw (RawMeasurementSet): Output of
            :func:`youngs.data_processing.read_measurements`.
        config (ExperimentConfig, optional): Experiment constants. Defaults to
            :data:`youngs.config.DEFAULT_CONFIG`.

    Returns:
        LeverAnalysis: Immutable result bundle.

    Raises:
        InsufficientFitDataError: If fewer than two points can be formed.
        DegenerateFitError: If every point has the same strain.
    """
    config = config or DEFAULT_CONFIG

    derived = compute_derived_quantities(raw)
    logger.info(
        "Average diameter %.4f mm, cross-sectional area %.3e m^2",
        derived.d_avg_mm,
        derived.area_m2,
    )

    points = compute_stress_strain_points(
        derived, raw.loads_kg, g=config.g, min_points=config.min_fit_points
    )
    logger.info("Built %d stress-strain points", len(points))

    fit = fit_stress_strain(points)
    logger.info("Fitted Young's modulus Y = %.3e Pa (R^2 = %.4f)", fit.slope, fit.r2)

    sample = select_sample_point(points, config.sample_point_index)
    uncertainty = estimate_modulus_uncertainty(
        diameters_m=[mm_to_m(d) for d in raw.diameters_mm],
        d_avg_m=derived.d_avg_m,
        D_m=derived.D_m,
        L_m=derived.L_m,
        b_m=derived.b_m,
        sample_delta_n_m=sample.delta_n_m,
        slope=fit.slope,
        micrometer_precision_mm=config.micrometer_precision_mm,
        ruler_precision_mm=config.ruler_precision_mm,
        delta_n_observations=config.delta_n_observations,
    )
    logger.info("Propagated uncertainty u(Y) = %.2e Pa", uncertainty.u_modulus)

    return LeverAnalysis(
        raw=raw,
        derived=derived,
        points=points,
        fit=fit,
        uncertainty=uncertainty,
        sample_point=sample,
        config=config,
    )

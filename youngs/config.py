"""Experiment constants for the optical-lever Young's modulus setup."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LOADS_KG: tuple[float, ...] = (2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0)


@dataclass(frozen=True)
class ExperimentConfig:
    """Fixed parameters of one experiment.

    Attributes:
        g: Gravitational acceleration in m s^-2. Fixed at 10 by the lab
            convention rather than measured.
        micrometer_precision_mm: Instrument half-width of the micrometer used
            for the wire diameter, in mm.
        ruler_precision_mm: Instrument half-width of the ruler/scale used for
            ``D``, ``L``, ``b`` and the lever readings, in mm.
        loads_kg: The eight load magnitudes in kg. Index 0 is the base load
            that every delta is taken relative to.
        min_diameter_trials: Minimum number of valid diameter trials.
        max_diameter_trials: Number of diameter input slots.
        min_fit_points: Minimum number of stress-strain points for a fit.
        delta_n_observations: Number of successive-difference observations
            averaged into the reported reading delta.
        sample_point_index: Preferred index of the representative point used
            in the worked example and the reading-delta uncertainty term.
    """

    g: float = 10.0
    micrometer_precision_mm: float = 0.001
    ruler_precision_mm: float = 1.0
    loads_kg: tuple[float, ...] = DEFAULT_LOADS_KG
    min_diameter_trials: int = 3
    max_diameter_trials: int = 6
    min_fit_points: int = 2
    delta_n_observations: int = 4
    sample_point_index: int = 3

    @property
    def n_loads(self) -> int:
        return len(self.loads_kg)


DEFAULT_CONFIG = ExperimentConfig()

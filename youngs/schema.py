"""Define standardized column names for result DataFrames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResultColumns:
    """Container for standardized column labels.

    These column names are used in the stress-strain and reading-delta tables
    exported to CSV and embedded in the report.

    Attributes:
        load_index: Index of the load in the loading sequence (0 is the base
            load, so exported points start at 1).

        delta_m: Added mass relative to the base load, in kg.

        delta_n: Change of the averaged lever reading relative to the base
            reading, in m. The reading is the midpoint of the loading and
            unloading readings.

        stress: Tensile stress sigma = delta_m * g / A in Pa.

        strain: Dimensionless strain epsilon = b * delta_n / (2 D L).

        pair_index: Index j of a successive-difference pair (n_{j+4}, n_j).

        delta_n_pair_mm: |n_{j+4} - n_j| in mm.
    """

    load_index: str = "Load Index"
    delta_m: str = "Added Mass (kg)"
    delta_n: str = "Reading Change (m)"
    stress: str = "Stress (Pa)"
    strain: str = "Strain"
    pair_index: str = "j"
    upper_reading_mm: str = "n_(j+4) (mm)"
    lower_reading_mm: str = "n_j (mm)"
    delta_n_pair_mm: str = "Delta n_j (mm)"


COLUMNS = ResultColumns()

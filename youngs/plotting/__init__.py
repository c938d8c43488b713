"""
Plotting utilities for the optical-lever analysis.

All plotting functions accept a precomputed LeverAnalysis and do not perform
any fitting or uncertainty calculations.

Modules:
    stress_strain_plots:
        Stress-strain scatter with the least-squares fit line, the
        ChartSession that owns the live figure, and PNG snapshots for export.

    style:
        Shared rcParams, labels, axis cleanup and multi-format save helpers.

Design Principles:
    1. No numerical calculations in plotting code. Functions receive
       precomputed values and simply render them.

    2. At most one live figure per ChartSession; re-rendering releases the
       previous figure first.

Styling:
    Uses STIX serif fonts, 300 DPI output, exponential tick labels and
    suppressed top/right spines.
"""

from .stress_strain_plots import ChartSession, plot_stress_strain
from .style import set_global_style

__all__ = ["ChartSession", "plot_stress_strain", "set_global_style"]

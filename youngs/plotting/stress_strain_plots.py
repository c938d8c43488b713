"""Render the stress-strain scatter with its least-squares fit line.

The chart is an owned resource: a ChartSession holds at most one live
figure and closes it before drawing the next one or when the session ends.
"""

from __future__ import annotations

import io
import logging
import os
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from ..analysis import LeverAnalysis
from .style import (
    DATA_ALPHA,
    DATA_COLOR,
    FIT_COLOR,
    FONT_SIZES,
    LABEL_STRAIN,
    LABEL_STRESS,
    MARKER_AREA,
    STYLE,
    TITLE_STRESS_STRAIN,
    clean_axis,
    save_figure_bundle,
    set_axis_labels,
    set_global_style,
)

logger = logging.getLogger(__name__)

FIT_LINE_MARGIN = (0.9, 1.1)


def fit_line_endpoints(
    strains: np.ndarray, slope: float, intercept: float
) -> tuple[np.ndarray, np.ndarray]:
    """Return the two endpoints of the fit line drawn over the strain range.

    The line spans ``[0.9 * min(ε), 1.1 * max(ε)]``.
    """
    x_line = np.array(
        [np.min(strains) * FIT_LINE_MARGIN[0], np.max(strains) * FIT_LINE_MARGIN[1]]
    )
    return x_line, slope * x_line + intercept


def draw_stress_strain(fig: Figure, analysis: LeverAnalysis) -> None:
    """Draw data points and fit line of ``analysis`` onto an empty figure."""
    if not analysis.points:
        raise ValueError("analysis has no stress-strain points; nothing to plot")

    strains = np.array([p.strain for p in analysis.points], dtype=float)
    stresses = np.array([p.stress_pa for p in analysis.points], dtype=float)
    x_line, y_line = fit_line_endpoints(
        strains, analysis.fit.slope, analysis.fit.intercept
    )

    ax = fig.add_subplot(1, 1, 1)
    ax.scatter(
        strains,
        stresses,
        s=MARKER_AREA,
        color=DATA_COLOR,
        alpha=DATA_ALPHA,
        zorder=3,
        label="Experimental data points",
    )
    ax.plot(
        x_line,
        y_line,
        color=FIT_COLOR,
        linestyle="--",
        linewidth=STYLE.LINEWIDTH,
        label=f"Linear fit (Y={analysis.fit.slope:.3e} Pa)",
    )
    ax.set_title(TITLE_STRESS_STRAIN, fontsize=FONT_SIZES["title"], fontweight="bold")
    set_axis_labels(ax, x=LABEL_STRAIN, y=LABEL_STRESS)
    clean_axis(ax)
    ax.legend(loc="upper left", fontsize=FONT_SIZES["legend"])


class ChartSession:
    """Own the lifecycle of the one live stress-strain chart.

    Each :meth:`render` closes the previous figure before creating a new one,
    so at most one figure is open per session. Use as a context manager to
    release the figure on exit.
    """

    def __init__(self, figsize: tuple[float, float] = STYLE.FIGSIZE_SINGLE):
        self.figsize = figsize
        self._figure: Optional[Figure] = None

    @property
    def figure(self) -> Optional[Figure]:
        return self._figure

    def render(self, analysis: LeverAnalysis) -> Figure:
        self.close()
        set_global_style()
        fig = plt.figure(figsize=self.figsize)
        try:
            draw_stress_strain(fig, analysis)
        except Exception:
            plt.close(fig)
            raise
        self._figure = fig
        return fig

    def snapshot_png(self) -> bytes:
        """Return a PNG image of the current chart."""
        if self._figure is None:
            raise RuntimeError("No chart has been rendered in this session.")
        buffer = io.BytesIO()
        self._figure.savefig(buffer, format="png", dpi=150, bbox_inches="tight")
        return buffer.getvalue()

    def save(self, png_path: str) -> str:
        """Save the current chart as a PNG/PDF/SVG bundle and return the PNG path."""
        if self._figure is None:
            raise RuntimeError("No chart has been rendered in this session.")
        return save_figure_bundle(self._figure, png_path)

    def close(self) -> None:
        if self._figure is not None:
            plt.close(self._figure)
            self._figure = None

    def __enter__(self) -> "ChartSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def plot_stress_strain(analysis: LeverAnalysis, output_dir: str = "output") -> str:
    """Render and save the stress-strain figure bundle.

    Args:
        analysis (LeverAnalysis): Result bundle from
            :func:`youngs.analysis.analyze_measurements`.
        output_dir (str, optional): Directory for the figure bundle. Defaults
            to ``"output"``.

    Returns:
        str: Path of the saved ``stress_strain.png``; PDF and SVG copies share
        its basename.
    """
    os.makedirs(output_dir, exist_ok=True)
    with ChartSession() as session:
        session.render(analysis)
        path = session.save(os.path.join(output_dir, "stress_strain.png"))
    logger.info("Saved stress-strain chart to %s", path)
    return path

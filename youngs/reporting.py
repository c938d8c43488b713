"""Build the lab-report document tree from an analysis result.

This module is used after numerical analysis. It turns a LeverAnalysis into
a list of ReportSection objects (headings, paragraphs, display formulas and
tables) that the text writer and the Word exporter both consume. Numbers are
formatted only through the named NumberFormat policies defined here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .analysis import LeverAnalysis
from .schema import COLUMNS
from .units import m_to_mm


@dataclass(frozen=True)
class NumberFormat:
    """A named numeric formatting rule.

    Attributes:
        style: ``"fixed"`` for fixed-point or ``"exp"`` for scientific
            notation.
        digits: Decimal places (fixed) or digits after the point (exp).
    """

    style: str
    digits: int

    def __call__(self, value: float) -> str:
        value = float(value)
        if self.style == "fixed":
            return f"{value:.{self.digits}f}"
        if self.style == "exp":
            return f"{value:.{self.digits}e}"
        raise ValueError(f"Unknown number format style '{self.style}'")


DIAMETER_MM = NumberFormat("fixed", 3)
LENGTH_MM = NumberFormat("fixed", 1)
READING_MM = NumberFormat("fixed", 1)
DELTA_MM = NumberFormat("fixed", 2)
MASS_KG = NumberFormat("fixed", 2)
SI_VALUE = NumberFormat("exp", 3)
RESULT_VALUE = NumberFormat("exp", 2)
PERCENT = NumberFormat("fixed", 2)
SCRIPT_LITERAL = NumberFormat("exp", 6)


@dataclass(frozen=True, eq=False)
class ReportBlock:
    """One renderable element: ``paragraph``, ``formula`` or ``table``."""

    kind: str
    text: str = ""
    table: Optional[pd.DataFrame] = None


@dataclass(frozen=True)
class ReportSection:
    key: str
    title: str
    blocks: tuple[ReportBlock, ...] = ()
    subsections: tuple["ReportSection", ...] = ()


def _paragraph(text: str) -> ReportBlock:
    return ReportBlock(kind="paragraph", text=text)


def _formula(text: str) -> ReportBlock:
    return ReportBlock(kind="formula", text=text)


def _table(df: pd.DataFrame) -> ReportBlock:
    return ReportBlock(kind="table", table=df)


def uncertainty_forms(value: float, uncertainty: float) -> tuple[float, float]:
    """Return fractional and percentage uncertainty forms.

    Args:
        value (float): Measured or calculated quantity (any unit).
        uncertainty (float): Absolute uncertainty associated with ``value`` in
            the same unit.

    Returns:
        tuple[float, float]: Pair ``(fractional_uncertainty,
        percentage_uncertainty)`` where the first term is dimensionless and the
        second is in percent.

    Note:
        Returns ``(nan, nan)`` when ``value`` is zero or either input is non-finite.
    """
    v = float(value)
    u = float(uncertainty)
    if not np.isfinite(v) or not np.isfinite(u) or v == 0:
        return np.nan, np.nan
    frac = abs(u / v)
    return float(frac), float(frac * 100.0)


def _parameter_section(analysis: LeverAnalysis) -> ReportSection:
    derived = analysis.derived
    raw = analysis.raw
    lines = [
        (
            "Average wire diameter d̄",
            f"{DIAMETER_MM(derived.d_avg_mm)} mm (≈ {SI_VALUE(derived.d_avg_m)} m)",
        ),
        (
            "Mirror-to-scale distance D",
            f"{LENGTH_MM(raw.D_mm)} mm (≈ {SI_VALUE(derived.D_m)} m)",
        ),
        (
            "Original wire length L",
            f"{LENGTH_MM(raw.L_mm)} mm (≈ {SI_VALUE(derived.L_m)} m)",
        ),
        (
            "Optical lever arm b",
            f"{LENGTH_MM(raw.b_mm)} mm (≈ {SI_VALUE(derived.b_m)} m)",
        ),
    ]
    return ReportSection(
        key="parameters",
        title="1.1 Measured parameter averages (SI unit: m)",
        blocks=tuple(_paragraph(f"{label}: {value}") for label, value in lines),
    )


def _sample_section(analysis: LeverAnalysis) -> ReportSection:
    derived = analysis.derived
    sample = analysis.sample_point
    g = analysis.config.g
    n_k_mm = m_to_mm(derived.midpoints_m[sample.load_index])
    n_0_mm = m_to_mm(derived.midpoints_m[0])
    delta_m = MASS_KG(sample.delta_m_kg)
    return ReportSection(
        key="sample_calculation",
        title=f"1.2 Sample calculation of stress σ and strain ε (ΔM = {delta_m} kg)",
        blocks=(
            _formula(f"ΔM = {delta_m} kg"),
            _formula(
                f"Cross-sectional area A = π d̄²/4 = π ({SI_VALUE(derived.d_avg_m)})²/4 "
                f"≈ {SI_VALUE(derived.area_m2)} m²"
            ),
            _formula(
                f"Average reading change Δn = n_{sample.load_index} − n_0 = "
                f"{READING_MM(n_k_mm)} mm − {READING_MM(n_0_mm)} mm = "
                f"{DELTA_MM(m_to_mm(sample.delta_n_m))} mm ≈ {SI_VALUE(sample.delta_n_m)} m"
            ),
            _formula(
                f"Stress σ = F/A = ΔM·g/A = ({delta_m} · {g:g})/{SI_VALUE(derived.area_m2)} "
                f"≈ {SI_VALUE(sample.stress_pa)} Pa"
            ),
            _formula(
                f"Strain ε = ΔL/L = b·Δn/(2DL) = ({SI_VALUE(derived.b_m)} · "
                f"{SI_VALUE(sample.delta_n_m)})/(2 · {SI_VALUE(derived.D_m)} · "
                f"{SI_VALUE(derived.L_m)}) ≈ {SI_VALUE(sample.strain)}"
            ),
        ),
    )


def _delta_n_section(analysis: LeverAnalysis) -> ReportSection:
    table = analysis.delta_n_table()
    k = analysis.config.delta_n_observations
    loads = analysis.raw.loads_kg
    step = loads[k] - loads[0] if len(loads) > k else float("nan")
    title = (
        f"1.3 Mean reading change Δn̄ (ΔM = {MASS_KG(step)} kg, "
        f"Δn_j = |n_(j+{k}) − n_j|)"
    )
    if table.empty:
        return ReportSection(
            key="delta_n_table",
            title=title,
            blocks=(_paragraph("Not enough readings to compute Δn̄."),),
        )

    display = pd.DataFrame(
        {
            COLUMNS.pair_index: table[COLUMNS.pair_index] + 1,
            "ΔM (kg)": [MASS_KG(step)] * len(table),
            f"|n_(j+{k}) − n_j| (mm)": [
                f"|{READING_MM(u)} − {READING_MM(lo)}|"
                for u, lo in zip(
                    table[COLUMNS.upper_reading_mm], table[COLUMNS.lower_reading_mm]
                )
            ],
            COLUMNS.delta_n_pair_mm: [DELTA_MM(v) for v in table[COLUMNS.delta_n_pair_mm]],
        }
    )
    total = float(table[COLUMNS.delta_n_pair_mm].sum())
    n = len(table)
    return ReportSection(
        key="delta_n_table",
        title=title,
        blocks=(
            _table(display),
            _formula(
                f"Δn̄ = (1/{n}) Σ Δn_j = (1/{n})({DELTA_MM(total)}) "
                f"≈ {DELTA_MM(total / n)} mm"
            ),
        ),
    )


def _fit_section(analysis: LeverAnalysis) -> ReportSection:
    fit = analysis.fit
    blocks = [
        _paragraph("Fit model: σ = Y·ε + C"),
        _formula("Y = (N Σ εᵢσᵢ − Σ εᵢ Σ σᵢ) / (N Σ εᵢ² − (Σ εᵢ)²)"),
        _formula(f"Result: Y ≈ {SI_VALUE(fit.slope)} Pa (N = {fit.n})"),
    ]
    if np.isfinite(fit.r2):
        blocks.append(_paragraph(f"Coefficient of determination R² = {fit.r2:.5f}"))
    if np.isfinite(fit.se_slope):
        blocks.append(
            _paragraph(
                f"Slope standard error s(Y) ≈ {SI_VALUE(fit.se_slope)} Pa; "
                f"95 % half-width (Student t, N − 2 = {fit.n - 2}) "
                f"≈ {SI_VALUE(fit.ci95_slope)} Pa"
            )
        )
    return ReportSection(
        key="linear_fit",
        title="1.4 Least-squares fit of Young's modulus Y",
        blocks=tuple(blocks),
    )


def _uncertainty_section(analysis: LeverAnalysis) -> ReportSection:
    unc = analysis.uncertainty
    y_num = RESULT_VALUE(analysis.modulus)
    u_num = RESULT_VALUE(unc.u_modulus)
    _, pct = uncertainty_forms(analysis.modulus, unc.u_modulus)
    blocks = [
        _formula(f"Combined diameter uncertainty u(d) = √(u_A²(d) + u_B²(d)) ≈ {SI_VALUE(unc.u_d)} m"),
        _formula(
            "Relative uncertainty squared: (u(Y)/Y)² ≈ (2u(d)/d̄)² + (u_B(D)/D)² "
            "+ (u_B(L)/L)² + (u_B(b)/b)² + (u(Δn̄)/Δn̄)²"
        ),
        _formula(f"Final Young's modulus: Y = ({y_num} ± {u_num}) Pa"),
    ]
    if np.isfinite(pct):
        blocks.append(_paragraph(f"Relative uncertainty: {PERCENT(pct)} %"))
    return ReportSection(
        key="uncertainty",
        title="1.5 Uncertainty analysis (combined uncertainty u(Y))",
        blocks=tuple(blocks),
    )


def abstract_text(y_num: str) -> str:
    return (
        "This experiment used the optical lever method to determine the Young's "
        "modulus (Y) of a steel wire. Linear regression of the stress (σ) against "
        "the strain (ε) recorded under controlled loading quantified the elastic "
        "property of the material. The resulting Young's modulus of the wire is "
        f"approximately {y_num} Pa, consistent with the typical range for steel "
        "reported in the literature."
    )


def conclusion_text(y_num: str, u_num: str) -> str:
    return (
        "Least-squares fitting gives a final Young's modulus of the wire of "
        f"Y = ({y_num} ± {u_num}) Pa. The stress-strain data confirm the linear "
        "range of Hooke's law, and the optical lever resolves the small "
        "elongations involved. The uncertainty analysis shows that the wire "
        "diameter (d̄) and the mirror-to-scale distance (D) dominate the "
        "uncertainty of the result, which points to where the method can be "
        "improved."
    )


def build_report(analysis: LeverAnalysis) -> list[ReportSection]:
    """Build the report sections for one analysis result.

    Args:
        analysis (LeverAnalysis): Output of
            :func:`youngs.analysis.analyze_measurements`.

    Returns:
        list[ReportSection]: ``calculations`` (with five subsections),
        ``abstract`` and ``conclusion``, in that order.

    Note:
        The analysis bundle is only read; no computation happens here beyond
        unit conversion for display.
    """
    y_num = RESULT_VALUE(analysis.modulus)
    u_num = RESULT_VALUE(analysis.modulus_uncertainty)

    calculations = ReportSection(
        key="calculations",
        title="1. Data processing and calculations",
        subsections=(
            _parameter_section(analysis),
            _sample_section(analysis),
            _delta_n_section(analysis),
            _fit_section(analysis),
            _uncertainty_section(analysis),
        ),
    )
    abstract = ReportSection(
        key="abstract",
        title="2. Abstract",
        blocks=(_paragraph(abstract_text(y_num)),),
    )
    conclusion = ReportSection(
        key="conclusion",
        title="3. Conclusion",
        blocks=(_paragraph(conclusion_text(y_num, u_num)),),
    )
    return [calculations, abstract, conclusion]


def iter_sections(sections: Iterable[ReportSection], depth: int = 1):
    """Yield ``(depth, section)`` pairs in document order."""
    for section in sections:
        yield depth, section
        yield from iter_sections(section.subsections, depth + 1)


def render_report_text(sections: Iterable[ReportSection]) -> str:
    """Render the document tree as plain text."""
    lines: list[str] = []
    for depth, section in iter_sections(sections):
        underline = "=" if depth == 1 else "-"
        lines.append(section.title)
        lines.append(underline * len(section.title))
        for block in section.blocks:
            if block.kind == "table" and block.table is not None:
                lines.append(block.table.to_string(index=False))
            elif block.kind == "formula":
                lines.append(f"    {block.text}")
            else:
                lines.append(block.text)
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def write_report_text(sections: Iterable[ReportSection], output_dir: str) -> str:
    """Write the plain-text report to ``youngs_modulus_report.txt``."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "youngs_modulus_report.txt")
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(render_report_text(sections))
    return path

"""Write analysis outputs to CSV tables and the exported Word report.

This module is the output boundary between the in-memory analysis bundle and
downloadable artifacts. It only serializes; nothing is computed here.
"""

from __future__ import annotations

import logging
import os
from io import BytesIO
from typing import Iterable, Optional, Tuple

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from .analysis import LeverAnalysis, points_to_dataframe
from .reporting import ReportSection, iter_sections

logger = logging.getLogger(__name__)

REPORT_FILENAME = "Youngs_Modulus_Report.docx"
REPORT_TITLE = "Young's Modulus Lab Report"
REPORT_FOOTER = "This document was generated by the lab assistant tool and is for reference only."


def save_points_to_csv(
    analysis: LeverAnalysis, output_dir: str = "output"
) -> Tuple[str, str]:
    """Save the stress-strain points and the reading-delta table to CSV files.

    Args:
        analysis (LeverAnalysis): Output of ``analyze_measurements``.
        output_dir (str): Directory where CSV outputs are written.

    Returns:
        tuple[str, str]: Paths to ``stress_strain_points.csv`` and
        ``delta_n_table.csv``.
    """
    os.makedirs(output_dir, exist_ok=True)

    points_path = os.path.join(output_dir, "stress_strain_points.csv")
    delta_n_path = os.path.join(output_dir, "delta_n_table.csv")

    points_to_dataframe(analysis.points).to_csv(points_path, index=False)
    analysis.delta_n_table().to_csv(delta_n_path, index=False)

    logger.info("Saved stress-strain points to %s", points_path)
    logger.info("Saved reading-change table to %s", delta_n_path)
    return points_path, delta_n_path


def _add_section(doc, section: ReportSection, depth: int) -> None:
    doc.add_heading(section.title, level=min(depth, 9))
    for block in section.blocks:
        if block.kind == "table" and block.table is not None:
            df = block.table
            table = doc.add_table(rows=1, cols=len(df.columns))
            table.style = "Table Grid"
            for cell, name in zip(table.rows[0].cells, df.columns):
                cell.text = str(name)
            for row in df.itertuples(index=False):
                cells = table.add_row().cells
                for cell, value in zip(cells, row):
                    cell.text = str(value)
            doc.add_paragraph()
        elif block.kind == "formula":
            p = doc.add_paragraph()
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER
            run = p.add_run(block.text)
            run.italic = True
        else:
            doc.add_paragraph(block.text)


def build_report_document(
    sections: Iterable[ReportSection],
    chart_png: Optional[bytes] = None,
    script_text: Optional[str] = None,
):
    """Assemble the Word document from report sections and artifacts.

    The order follows the printed report: abstract, calculations, chart,
    plotting script, conclusion.
    """
    sections = list(sections)
    leading_keys = ("abstract", "calculations")
    ordered = [s for k in leading_keys for s in sections if s.key == k]
    ordered += [
        s for s in sections if s.key not in leading_keys and s.key != "conclusion"
    ]
    trailing = [s for s in sections if s.key == "conclusion"]

    doc = Document()
    title = doc.add_heading(REPORT_TITLE, 0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    for depth, section in iter_sections(ordered):
        _add_section(doc, section, depth)

    if chart_png:
        doc.add_page_break()
        doc.add_heading("4. Stress-strain (σ-ε) relationship chart", level=1)
        doc.add_picture(BytesIO(chart_png), width=Inches(5.5))
        doc.paragraphs[-1].alignment = WD_ALIGN_PARAGRAPH.CENTER

    if script_text:
        doc.add_heading("5. MATLAB plotting code", level=1)
        doc.add_paragraph(
            "Copy the following code into MATLAB to reproduce the σ-ε plot and fit line."
        )
        code = doc.add_paragraph()
        run = code.add_run(script_text.strip())
        run.font.name = "Courier New"
        run.font.size = Pt(9)

    for depth, section in iter_sections(trailing):
        _add_section(doc, section, depth)

    footer = doc.add_paragraph()
    footer.alignment = WD_ALIGN_PARAGRAPH.CENTER
    footer_run = footer.add_run(REPORT_FOOTER)
    footer_run.italic = True
    return doc


def export_report_docx(
    sections: Iterable[ReportSection],
    chart_png: Optional[bytes] = None,
    script_text: Optional[str] = None,
    output_dir: str = "output",
) -> str:
    """Serialize the report, chart snapshot and script into one Word file.

    Args:
        sections (Iterable[ReportSection]): Output of
            :func:`youngs.reporting.build_report`.
        chart_png (bytes, optional): PNG snapshot of the stress-strain chart.
        script_text (str, optional): Generated plotting script.
        output_dir (str): Directory for the document.

    Returns:
        str: Path of ``Youngs_Modulus_Report.docx``.
    """
    os.makedirs(output_dir, exist_ok=True)
    doc = build_report_document(sections, chart_png=chart_png, script_text=script_text)
    path = os.path.join(output_dir, REPORT_FILENAME)
    doc.save(path)
    logger.info("Saved Word report to %s", path)
    return path

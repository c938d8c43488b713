import os

import pandas as pd
from docx import Document

from youngs.output import export_report_docx, save_points_to_csv
from youngs.plotting import ChartSession
from youngs.reporting import build_report
from youngs.schema import COLUMNS
from youngs.script_export import generate_matlab_script


def test_save_points_to_csv(default_analysis, tmp_path):
    points_path, delta_path = save_points_to_csv(default_analysis, str(tmp_path))
    points = pd.read_csv(points_path)
    delta = pd.read_csv(delta_path)
    assert len(points) == 7
    assert list(points[COLUMNS.load_index]) == list(range(1, 8))
    assert len(delta) == 4
    assert COLUMNS.delta_n_pair_mm in delta.columns


def test_export_report_docx(default_analysis, tmp_path):
    sections = build_report(default_analysis)
    with ChartSession() as chart:
        chart.render(default_analysis)
        png = chart.snapshot_png()

    path = export_report_docx(
        sections,
        chart_png=png,
        script_text=generate_matlab_script(default_analysis),
        output_dir=str(tmp_path),
    )
    assert os.path.basename(path) == "Youngs_Modulus_Report.docx"

    doc = Document(path)
    texts = [p.text for p in doc.paragraphs]
    headings = [p.text for p in doc.paragraphs if p.style.name.startswith("Heading")]
    assert headings.index("2. Abstract") < headings.index(
        "1. Data processing and calculations"
    )
    assert headings[-1] == "3. Conclusion"
    assert "5. MATLAB plotting code" in headings
    assert any("polyfit(Epsilon, Sigma, 1)" in t for t in texts)
    assert len(doc.inline_shapes) == 1
    assert len(doc.tables) == 1
    assert len(doc.tables[0].rows) == 5


def test_export_without_artifacts(default_analysis, tmp_path):
    path = export_report_docx(build_report(default_analysis), output_dir=str(tmp_path))
    doc = Document(path)
    headings = [p.text for p in doc.paragraphs if p.style.name.startswith("Heading")]
    assert "5. MATLAB plotting code" not in headings
    assert len(doc.inline_shapes) == 0

import math

import pytest

from youngs.reporting import (
    DELTA_MM,
    DIAMETER_MM,
    RESULT_VALUE,
    SCRIPT_LITERAL,
    SI_VALUE,
    NumberFormat,
    build_report,
    iter_sections,
    render_report_text,
    uncertainty_forms,
    write_report_text,
)


def test_number_format_policies():
    assert DIAMETER_MM(0.5778333) == "0.578"
    assert DELTA_MM(36.95) == "36.95"
    assert SI_VALUE(1.905) == "1.905e+00"
    assert RESULT_VALUE(1.5791e11) == "1.58e+11"
    assert SCRIPT_LITERAL(0.0841) == "8.410000e-02"


def test_unknown_format_style():
    with pytest.raises(ValueError):
        NumberFormat("engineering", 2)(1.0)


def test_uncertainty_forms():
    frac, pct = uncertainty_forms(200.0, 5.0)
    assert math.isclose(frac, 0.025)
    assert math.isclose(pct, 2.5)
    assert all(math.isnan(v) for v in uncertainty_forms(0.0, 1.0))


def test_report_structure(default_analysis):
    sections = build_report(default_analysis)
    assert [s.key for s in sections] == ["calculations", "abstract", "conclusion"]
    keys = [s.key for s in sections[0].subsections]
    assert keys == [
        "parameters",
        "sample_calculation",
        "delta_n_table",
        "linear_fit",
        "uncertainty",
    ]
    depths = {s.key: d for d, s in iter_sections(sections)}
    assert depths["calculations"] == 1
    assert depths["linear_fit"] == 2


def test_delta_n_table_block(default_analysis):
    sections = build_report(default_analysis)
    delta = next(s for _, s in iter_sections(sections) if s.key == "delta_n_table")
    table = next(b.table for b in delta.blocks if b.kind == "table")
    assert list(table["j"]) == [1, 2, 3, 4]
    assert "ΔM = 4.00 kg" in delta.title
    formula = [b.text for b in delta.blocks if b.kind == "formula"][0]
    assert "(1/4)(140.30)" in formula


def test_conclusion_quotes_result(default_analysis):
    sections = build_report(default_analysis)
    y_num = RESULT_VALUE(default_analysis.modulus)
    u_num = RESULT_VALUE(default_analysis.modulus_uncertainty)
    conclusion = sections[-1].blocks[0].text
    assert f"Y = ({y_num} ± {u_num}) Pa" in conclusion
    assert y_num in sections[1].blocks[0].text


def test_render_and_write_text(default_analysis, tmp_path):
    sections = build_report(default_analysis)
    text = render_report_text(sections)
    assert text.startswith("1. Data processing and calculations\n")
    assert "1.4 Least-squares fit of Young's modulus Y" in text
    assert "Average wire diameter d̄: 0.578 mm" in text
    path = write_report_text(sections, str(tmp_path))
    with open(path, encoding="utf-8") as handle:
        assert handle.read() == text


def test_fit_section_reports_slope_diagnostics(default_analysis):
    sections = build_report(default_analysis)
    fit = next(s for _, s in iter_sections(sections) if s.key == "linear_fit")
    text = "\n".join(b.text for b in fit.blocks)
    assert f"s(Y) ≈ {SI_VALUE(default_analysis.fit.se_slope)} Pa" in text
    assert f"≈ {SI_VALUE(default_analysis.fit.ci95_slope)} Pa" in text
    assert "N − 2 = 5" in text

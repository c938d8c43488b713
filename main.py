#!/usr/bin/env python3
"""
Main script for running the Young's modulus analysis.
"""

# Pipeline overview (README-style):
# 1) Read the measurement fields from a CSV (or the default dataset), with
#    optional field=value overrides from the command line.
# 2) Validate the diameter trials, D, L, b and all eight reading pairs.
# 3) Convert to SI, build the stress-strain points relative to the base load
#    and fit the modulus by least squares.
# 4) Propagate instrument and statistical uncertainties onto the modulus.
# 5) Export the report text, stress-strain CSVs, chart bundle, MATLAB script
#    and the Word report.

import argparse
import logging
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from youngs.analysis import analyze_measurements
from youngs.data_processing import (
    default_measurement_fields,
    load_measurement_fields,
    read_measurements,
)
from youngs.errors import LeverAnalysisError
from youngs.output import export_report_docx, save_points_to_csv
from youngs.plotting import ChartSession
from youngs.reporting import build_report, write_report_text
from youngs.script_export import generate_matlab_script, write_matlab_script
from youngs.stats.uncertainty import format_value_with_uncertainty

DEFAULT_OUTPUT_DIR = "output"


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for the analysis run."""
    parser = argparse.ArgumentParser(
        description="Optical-lever Young's modulus lab report calculator."
    )
    parser.add_argument(
        "--input",
        default=None,
        help="CSV with 'field' and 'value' columns (default: built-in dataset).",
    )
    parser.add_argument(
        "--outdir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Override one measurement field, e.g. --set D_1=1900. Repeatable.",
    )
    parser.add_argument(
        "--no-docx",
        action="store_true",
        help="Skip the Word report export.",
    )
    return parser


def _apply_overrides(fields, overrides):
    for item in overrides:
        if "=" not in item:
            raise ValueError(f"Override '{item}' must have the form FIELD=VALUE")
        name, value = item.split("=", 1)
        fields[name.strip()] = value
    return fields


def main(argv=None):
    """Main execution function with step timing logs."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler("youngs_analysis.log", mode="w"),
        ],
    )
    args = _build_arg_parser().parse_args(argv)

    start_time = time.time()
    logging.info("Initializing Young's modulus analysis pipeline")

    if args.input:
        try:
            fields = load_measurement_fields(args.input)
        except (FileNotFoundError, KeyError) as exc:
            logging.error("Cannot read measurement CSV %s: %s", args.input, exc)
            return 2
        logging.info("Loaded %d measurement fields from %s", len(fields), args.input)
    else:
        fields = default_measurement_fields()
        logging.info("Using the built-in default dataset")
    try:
        fields = _apply_overrides(dict(fields), args.overrides)
    except ValueError as exc:
        logging.error("%s", exc)
        return 2

    step_start = time.time()
    try:
        raw = read_measurements(fields)
        analysis = analyze_measurements(raw)
    except LeverAnalysisError as exc:
        logging.error("Analysis aborted: %s", exc)
        return 1
    logging.info(
        "Numerical pipeline completed in %.3f seconds", time.time() - step_start
    )

    os.makedirs(args.outdir, exist_ok=True)
    logging.info("Output directory ensured: %s", args.outdir)

    sections = build_report(analysis)
    report_path = write_report_text(sections, args.outdir)
    points_csv, delta_n_csv = save_points_to_csv(analysis, args.outdir)
    script_path = write_matlab_script(analysis, args.outdir)

    with ChartSession() as chart:
        chart.render(analysis)
        chart_path = chart.save(os.path.join(args.outdir, "stress_strain.png"))
        chart_png = chart.snapshot_png()

    docx_path = None
    if not args.no_docx:
        docx_path = export_report_docx(
            sections,
            chart_png=chart_png,
            script_text=generate_matlab_script(analysis),
            output_dir=args.outdir,
        )

    logging.info(
        "Young's modulus Y = %s",
        format_value_with_uncertainty(
            analysis.modulus, analysis.modulus_uncertainty, "Pa"
        ),
    )
    logging.info(
        "Fit diagnostics: R^2 = %.5f, s(Y) = %.3e Pa, 95%% half-width = %.3e Pa",
        analysis.fit.r2,
        analysis.fit.se_slope,
        analysis.fit.ci95_slope,
    )
    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    logging.info("Generated output files:")
    logging.info("  - Report text: %s", report_path)
    logging.info("  - Stress-strain points CSV: %s", points_csv)
    logging.info("  - Reading change table CSV: %s", delta_n_csv)
    logging.info("  - Stress-strain chart: %s", chart_path)
    logging.info("  - MATLAB script: %s", script_path)
    if docx_path:
        logging.info("  - Word report: %s", docx_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
A Python package for the optical-lever Young's modulus experiment.

Turns raw wire-diameter, length and lever readings into stress-strain points,
a least-squares modulus with propagated uncertainty, a chart, a MATLAB
plotting script and a Word lab report.

Modules:
    - data_processing: Reads and validates the raw measurement fields.
    - analysis: Derived quantities, stress-strain points and the full pipeline.
    - stats: Least-squares fit and uncertainty propagation.
    - reporting: Builds the report document tree with named number formats.
    - plotting: Stress-strain chart with an owned figure lifecycle.
    - script_export: MATLAB plotting-script text.
    - output: CSV tables and the Word report export.
"""

__version__ = "1.0.0"

from .analysis import (
    DerivedQuantities,
    LeverAnalysis,
    StressStrainPoint,
    analyze_measurements,
    points_to_dataframe,
)
from .config import DEFAULT_CONFIG, ExperimentConfig
from .data_processing import (
    RawMeasurementSet,
    default_measurement_fields,
    load_measurement_fields,
    read_measurements,
)
from .errors import (
    DegenerateFitError,
    InsufficientFitDataError,
    InsufficientGeometryError,
    LeverAnalysisError,
    MissingReadingError,
)
from .output import export_report_docx, save_points_to_csv
from .reporting import build_report, render_report_text
from .script_export import generate_matlab_script

__all__ = [
    # Data processing
    "RawMeasurementSet",
    "default_measurement_fields",
    "load_measurement_fields",
    "read_measurements",
    # Analysis
    "DerivedQuantities",
    "LeverAnalysis",
    "StressStrainPoint",
    "analyze_measurements",
    "points_to_dataframe",
    # Configuration
    "DEFAULT_CONFIG",
    "ExperimentConfig",
    # Errors
    "LeverAnalysisError",
    "InsufficientGeometryError",
    "MissingReadingError",
    "InsufficientFitDataError",
    "DegenerateFitError",
    # Reporting and output
    "build_report",
    "render_report_text",
    "generate_matlab_script",
    "export_report_docx",
    "save_points_to_csv",
]

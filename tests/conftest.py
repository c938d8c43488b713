"""Pytest configuration for repository-relative imports."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from youngs.analysis import analyze_measurements  # noqa: E402
from youngs.data_processing import (  # noqa: E402
    default_measurement_fields,
    read_measurements,
)


@pytest.fixture
def default_fields():
    return default_measurement_fields()


@pytest.fixture
def default_analysis():
    return analyze_measurements(read_measurements(default_measurement_fields()))

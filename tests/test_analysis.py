import math

import numpy as np
import pytest

from youngs.analysis import (
    analyze_measurements,
    compute_derived_quantities,
    compute_stress_strain_points,
    cross_sectional_area,
    points_to_dataframe,
    select_sample_point,
    successive_differences,
)
from youngs.config import ExperimentConfig
from youngs.data_processing import read_measurements
from youngs.errors import InsufficientFitDataError
from youngs.schema import COLUMNS


def test_cross_sectional_area():
    assert math.isclose(cross_sectional_area(2.0), math.pi)
    assert math.isclose(cross_sectional_area(0.5e-3), math.pi * 0.0625e-6)


def test_average_diameter_independent_of_order(default_fields):
    forward = compute_derived_quantities(read_measurements(default_fields))
    reversed_fields = dict(default_fields)
    for slot in range(1, 7):
        reversed_fields[f"d_{slot}"] = default_fields[f"d_{7 - slot}"]
    backward = compute_derived_quantities(read_measurements(reversed_fields))
    assert math.isclose(forward.d_avg_mm, backward.d_avg_mm, rel_tol=1e-12)
    assert math.isclose(forward.d_avg_m, 0.5778333333e-3, rel_tol=1e-9)


def test_derived_quantities_in_si(default_fields):
    derived = compute_derived_quantities(read_measurements(default_fields))
    assert math.isclose(derived.D_m, 1.905)
    assert math.isclose(derived.L_m, 0.7962)
    assert math.isclose(derived.b_m, 0.0841)
    assert len(derived.midpoints_m) == 8
    assert math.isclose(derived.midpoints_m[0], 0.1e-3)
    assert math.isclose(derived.midpoints_m[4], 37.05e-3)


def test_default_dataset_modulus(default_analysis):
    assert len(default_analysis.points) == 7
    assert [p.load_index for p in default_analysis.points] == list(range(1, 8))
    assert 1.0e11 < default_analysis.modulus < 2.5e11
    assert default_analysis.fit.r2 > 0.99
    u = default_analysis.modulus_uncertainty
    assert 0 < u < 0.1 * default_analysis.modulus


def test_point_formulas(default_analysis):
    derived = default_analysis.derived
    g = default_analysis.config.g
    for p in default_analysis.points:
        assert p.delta_m_kg > 0
        assert math.isclose(p.stress_pa, p.delta_m_kg * g / derived.area_m2)
        expected = derived.b_m * p.delta_n_m / (2 * derived.D_m * derived.L_m)
        assert math.isclose(p.strain, expected)


def test_fit_matches_polyfit(default_analysis):
    x = [p.strain for p in default_analysis.points]
    y = [p.stress_pa for p in default_analysis.points]
    slope, intercept = np.polyfit(x, y, 1)
    assert math.isclose(default_analysis.fit.slope, slope, rel_tol=1e-8)
    assert math.isclose(default_analysis.fit.intercept, intercept, rel_tol=1e-6, abs_tol=1e2)


def test_sample_point_is_fourth_point(default_analysis):
    sample = default_analysis.sample_point
    assert sample is default_analysis.points[3]
    assert sample.load_index == 4
    assert math.isclose(sample.delta_n_m, 36.95e-3, rel_tol=1e-9)
    assert math.isclose(
        default_analysis.uncertainty.delta_n_avg, 36.95e-3 / 4, rel_tol=1e-9
    )


def test_select_sample_point_falls_back_to_last(default_analysis):
    points = default_analysis.points[:2]
    assert select_sample_point(points) is points[-1]
    with pytest.raises(InsufficientFitDataError):
        select_sample_point(())


def test_equal_loads_produce_no_points(default_fields):
    raw = read_measurements(default_fields, loads_kg=[2.0] * 8)
    derived = compute_derived_quantities(raw)
    with pytest.raises(InsufficientFitDataError):
        compute_stress_strain_points(derived, raw.loads_kg)


def test_single_heavier_load_is_not_enough(default_fields):
    raw = read_measurements(default_fields, loads_kg=[2, 2, 2, 2, 2, 2, 2, 3])
    with pytest.raises(InsufficientFitDataError):
        analyze_measurements(raw)


def test_lighter_loads_are_skipped(default_fields):
    raw = read_measurements(default_fields, loads_kg=[2, 1, 3, 4, 5, 6, 7, 8])
    analysis = analyze_measurements(raw)
    assert [p.load_index for p in analysis.points] == [2, 3, 4, 5, 6, 7]


def test_custom_gravity_scales_modulus(default_fields):
    raw = read_measurements(default_fields)
    base = analyze_measurements(raw)
    scaled = analyze_measurements(raw, ExperimentConfig(g=9.8))
    assert math.isclose(scaled.modulus, base.modulus * 0.98, rel_tol=1e-9)


def test_successive_differences_table(default_analysis):
    table = default_analysis.delta_n_table()
    assert list(table[COLUMNS.pair_index]) == [0, 1, 2, 3]
    expected = [36.95, 35.95, 34.25, 33.15]
    for got, want in zip(table[COLUMNS.delta_n_pair_mm], expected):
        assert math.isclose(got, want, rel_tol=1e-9)


def test_successive_differences_short_series():
    table = successive_differences([0.0, 1e-3, 2e-3], n_pairs=4)
    assert table.empty
    assert COLUMNS.delta_n_pair_mm in table.columns


def test_points_to_dataframe(default_analysis):
    df = points_to_dataframe(default_analysis.points)
    assert len(df) == 7
    assert list(df.columns) == [
        COLUMNS.load_index,
        COLUMNS.delta_m,
        COLUMNS.delta_n,
        COLUMNS.stress,
        COLUMNS.strain,
    ]
    assert df[COLUMNS.stress].is_monotonic_increasing

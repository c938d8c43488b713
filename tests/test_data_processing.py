import math

import pytest

from youngs.data_processing import (
    load_measurement_fields,
    parse_field,
    read_measurements,
)
from youngs.errors import (
    InsufficientGeometryError,
    LeverAnalysisError,
    MissingReadingError,
)


def test_parse_field_handles_blank_and_garbage():
    assert parse_field(" 1.5 ") == 1.5
    assert parse_field(2) == 2.0
    assert math.isnan(parse_field(""))
    assert math.isnan(parse_field("   "))
    assert math.isnan(parse_field(None))
    assert math.isnan(parse_field("abc"))
    assert math.isnan(parse_field("inf"))
    assert math.isnan(parse_field("-inf"))
    assert math.isnan(parse_field(float("inf")))


def test_read_default_dataset(default_fields):
    raw = read_measurements(default_fields)
    assert len(raw.diameters_mm) == 6
    assert raw.D_mm == 1905.0
    assert raw.L_mm == 796.2
    assert raw.b_mm == 84.1
    assert raw.loads_kg == (2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0)
    assert len(raw.loading_mm) == 8
    assert len(raw.unloading_mm) == 8
    assert math.isclose(raw.d_avg_mm, 0.5778333333, rel_tol=1e-9)


def test_missing_diameter_slots_are_skipped(default_fields):
    default_fields["d_2"] = ""
    default_fields["d_6"] = "n/a"
    raw = read_measurements(default_fields)
    assert raw.diameters_mm == (0.576, 0.577, 0.577, 0.580)


def test_fewer_than_three_diameters_rejected(default_fields):
    for slot in (3, 4, 5, 6):
        default_fields[f"d_{slot}"] = ""
    with pytest.raises(InsufficientGeometryError):
        read_measurements(default_fields)


@pytest.mark.parametrize("name,value", [("D_1", "0"), ("L_1", "-2"), ("b_1", "")])
def test_non_positive_lengths_rejected(default_fields, name, value):
    default_fields[name] = value
    with pytest.raises(InsufficientGeometryError):
        read_measurements(default_fields)


def test_single_missing_reading_rejects_table(default_fields):
    default_fields["n_pp_5"] = ""
    with pytest.raises(MissingReadingError, match="n_pp_5"):
        read_measurements(default_fields)


def test_infinite_reading_rejects_table(default_fields):
    default_fields["n_p_3"] = "inf"
    with pytest.raises(MissingReadingError, match="n_p_3"):
        read_measurements(default_fields)


def test_infinite_length_rejected(default_fields):
    default_fields["L_1"] = "inf"
    with pytest.raises(InsufficientGeometryError):
        read_measurements(default_fields)


def test_geometry_checked_before_readings(default_fields):
    default_fields["D_1"] = ""
    default_fields["n_p_0"] = ""
    with pytest.raises(InsufficientGeometryError):
        read_measurements(default_fields)


def test_intake_errors_are_value_errors(default_fields):
    default_fields["n_p_7"] = None
    with pytest.raises(ValueError):
        read_measurements(default_fields)
    assert issubclass(MissingReadingError, LeverAnalysisError)


def test_custom_load_table_length(default_fields):
    raw = read_measurements(default_fields, loads_kg=[1.0, 2.0, 3.0])
    assert raw.loads_kg == (1.0, 2.0, 3.0)
    assert raw.loading_mm == (0.0, 9.8, 19.0)


def test_load_measurement_fields_from_csv(tmp_path):
    path = tmp_path / "fields.csv"
    path.write_text("field,value\nd_1,0.576\n D_1 ,1905\nd_6,\n", encoding="utf-8")
    fields = load_measurement_fields(str(path))
    assert fields["d_1"] == "0.576"
    assert fields["D_1"] == "1905"
    assert fields["d_6"] == ""


def test_load_measurement_fields_requires_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("name,reading\nd_1,0.576\n", encoding="utf-8")
    with pytest.raises(KeyError):
        load_measurement_fields(str(path))

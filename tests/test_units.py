import math

from youngs.units import m_to_mm, mm_to_m


def test_mm_to_m():
    assert math.isclose(mm_to_m(1905.0), 1.905)
    assert math.isclose(mm_to_m(0.577), 0.577e-3)


def test_round_trip():
    for value in (0.576, 84.1, 796.2, 61.2):
        assert math.isclose(m_to_mm(mm_to_m(value)), value, rel_tol=1e-12)


def test_nan_passes_through():
    assert math.isnan(mm_to_m(float("nan")))

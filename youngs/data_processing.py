"""
Reads raw measurement fields and validates their presence and shape.
"""

# Field layout: six diameter slots d_1..d_6, single-instance D_1, L_1 and b_1,
# and eight loading/unloading reading pairs n_p_i / n_pp_i for i = 0..7. All
# values are in millimeters. A missing or non-numeric field becomes NaN.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG, ExperimentConfig
from .errors import InsufficientGeometryError, MissingReadingError

logger = logging.getLogger(__name__)

DEFAULT_DATA = {
    "d_values": [0.576, 0.579, 0.577, 0.577, 0.580, 0.578],
    "D": 1905.0,
    "L": 796.2,
    "b": 84.1,
    "n_prime": [0.0, 9.8, 19.0, 27.9, 36.8, 45.8, 53.2, 61.2],
    "n_double_prime": [0.2, 9.9, 19.1, 28.0, 37.3, 45.8, 53.4, 61.0],
}


@dataclass(frozen=True)
class RawMeasurementSet:
    """Validated raw readings of one experiment, all lengths in mm."""

    diameters_mm: tuple[float, ...]
    D_mm: float
    L_mm: float
    b_mm: float
    loads_kg: tuple[float, ...]
    loading_mm: tuple[float, ...]
    unloading_mm: tuple[float, ...]

    @property
    def d_avg_mm(self) -> float:
        if not self.diameters_mm:
            return math.nan
        return float(np.mean(self.diameters_mm))


def diameter_field(slot: int) -> str:
    return f"d_{slot}"


def loading_field(index: int) -> str:
    return f"n_p_{index}"


def unloading_field(index: int) -> str:
    return f"n_pp_{index}"


def parse_field(value) -> float:
    """Convert one raw field value into a float, or ``NaN`` if it is missing.

    Blank strings, ``None``, infinities and anything that does not parse as a
    number are treated as missing.
    """
    if value is None:
        return math.nan
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return math.nan
    parsed = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
    if pd.isna(parsed) or not math.isfinite(float(parsed)):
        return math.nan
    return float(parsed)


def _get(fields: Mapping[str, object], name: str) -> float:
    return parse_field(fields.get(name))


def _validate_geometry(
    diameters_mm: Sequence[float],
    D_mm: float,
    L_mm: float,
    b_mm: float,
    config: ExperimentConfig,
) -> None:
    d_avg = float(np.mean(diameters_mm)) if len(diameters_mm) else math.nan
    if len(diameters_mm) < config.min_diameter_trials:
        raise InsufficientGeometryError(
            f"At least {config.min_diameter_trials} diameter values are required; "
            f"got {len(diameters_mm)}."
        )
    for label, value in (("d (average)", d_avg), ("D", D_mm), ("L", L_mm), ("b", b_mm)):
        if not math.isfinite(value) or value <= 0:
            raise InsufficientGeometryError(
                f"Length parameter {label} must be a number greater than zero; got {value!r}."
            )


def read_measurements(
    fields: Mapping[str, object],
    loads_kg: Optional[Sequence[float]] = None,
    config: ExperimentConfig = DEFAULT_CONFIG,
) -> RawMeasurementSet:
    """Collect and validate the raw measurement fields of one experiment.

    Diameter trials are gathered in slot order and missing slots are skipped.
    The load table is accepted only if every loading and unloading reading is
    present; a single gap rejects the whole table.

    Args:
        fields: Mapping from field name (``d_1``, ``D_1``, ``n_p_0``, ...) to
            the raw value, typically a string from a form or CSV cell.
        loads_kg: Load magnitudes in kg. Defaults to ``config.loads_kg``.
        config: Experiment constants.

    Returns:
        RawMeasurementSet: The validated raw readings.

    Raises:
        InsufficientGeometryError: If fewer than the minimum number of
            diameter values are valid, or the average diameter, ``D``, ``L``
            or ``b`` is missing or not positive.
        MissingReadingError: If any reading of the load table is missing.
    """
    loads = tuple(float(m) for m in (loads_kg if loads_kg is not None else config.loads_kg))

    diameters = []
    for slot in range(1, config.max_diameter_trials + 1):
        value = _get(fields, diameter_field(slot))
        if not math.isnan(value):
            diameters.append(value)

    D_mm = _get(fields, "D_1")
    L_mm = _get(fields, "L_1")
    b_mm = _get(fields, "b_1")

    _validate_geometry(diameters, D_mm, L_mm, b_mm, config)
    logger.info("Read %d valid diameter trials", len(diameters))

    loading = []
    unloading = []
    for i in range(len(loads)):
        n_p = _get(fields, loading_field(i))
        n_pp = _get(fields, unloading_field(i))
        if math.isnan(n_p) or math.isnan(n_pp):
            raise MissingReadingError(
                f"Reading pair {i} ({loading_field(i)}, {unloading_field(i)}) is "
                "missing or not numeric; every loading and unloading reading is required."
            )
        loading.append(n_p)
        unloading.append(n_pp)

    return RawMeasurementSet(
        diameters_mm=tuple(diameters),
        D_mm=D_mm,
        L_mm=L_mm,
        b_mm=b_mm,
        loads_kg=loads,
        loading_mm=tuple(loading),
        unloading_mm=tuple(unloading),
    )


def default_measurement_fields() -> dict[str, float]:
    """Return the documented default dataset as a field mapping."""
    fields: dict[str, float] = {}
    for slot, d in enumerate(DEFAULT_DATA["d_values"], start=1):
        fields[diameter_field(slot)] = d
    fields["D_1"] = DEFAULT_DATA["D"]
    fields["L_1"] = DEFAULT_DATA["L"]
    fields["b_1"] = DEFAULT_DATA["b"]
    for i, (n_p, n_pp) in enumerate(
        zip(DEFAULT_DATA["n_prime"], DEFAULT_DATA["n_double_prime"])
    ):
        fields[loading_field(i)] = n_p
        fields[unloading_field(i)] = n_pp
    return fields


def load_measurement_fields(filepath) -> dict[str, str]:
    """
    Load measurement fields from a two-column CSV file.

    The file must have a ``field`` and a ``value`` column. Blank values are
    kept as empty strings so intake can treat them as missing.

    Args:
        filepath (str): Path to the CSV file.

    Returns:
        dict[str, str]: Field name to raw value.
    """
    df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
    missing = {"field", "value"} - set(df.columns)
    if missing:
        raise KeyError(f"Measurement CSV {filepath} is missing columns: {sorted(missing)}")
    df["field"] = df["field"].str.strip()
    return dict(zip(df["field"], df["value"]))

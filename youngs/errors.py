"""Error taxonomy for the optical-lever analysis pipeline.

All errors are terminal for the current run: the pipeline stops at the first
one and no partial results are produced.
"""

from __future__ import annotations


class LeverAnalysisError(ValueError):
    """Base class for invalid-input conditions that abort an analysis run."""


class InsufficientGeometryError(LeverAnalysisError):
    """Diameter trials or the D/L/b lengths are missing, invalid or non-positive."""


class MissingReadingError(LeverAnalysisError):
    """At least one loading/unloading reading in the load table is missing."""


class InsufficientFitDataError(LeverAnalysisError):
    """Fewer than two stress-strain points are available for the linear fit."""


class DegenerateFitError(LeverAnalysisError):
    """All strain values are identical, so the least-squares slope is undefined."""

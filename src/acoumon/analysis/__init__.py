"""Spectrum analysis: display windows, peak detection, and fault classification.

Modules here operate on NumPy arrays of 8-bit magnitudes and stay free of
Qt and audio I/O so they can be reused by the GUI, the headless report
tool, and automated tests alike.
"""

from .classify import Classification, HealthStatus, classify
from .spectrum import (
    DisplayMode,
    PeakResult,
    TransformParameters,
    bin_to_hz,
    find_peak,
    window_size,
)

__all__ = [
    "Classification",
    "HealthStatus",
    "classify",
    "DisplayMode",
    "PeakResult",
    "TransformParameters",
    "bin_to_hz",
    "find_peak",
    "window_size",
]

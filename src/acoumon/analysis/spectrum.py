"""Display window selection, bin→Hz conversion, and peak detection.

All helpers operate on a single magnitude frame (unsigned 8-bit values,
index = frequency bin) and are total: degenerate input such as an empty
buffer, ``None``, NaNs, or a zero transform size yields a valid result
instead of an exception.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

import numpy as np

DEFAULT_BUFFER_CAPACITY = 2048
SIMULATED_HZ_PER_BIN = 10.7
FALLBACK_HZ_PER_BIN = 10
PEAK_GUARD_BAND = 5  # bins with index <= this never win the peak

MagnitudeFrame = Union[np.ndarray, Sequence[int], None]


class DisplayMode(enum.Enum):
    """Zoom presets; the value is the default number of leading bins shown."""

    ALL = 150
    ELEC = 40
    MECH = 300

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @classmethod
    def parse(cls, value: "str | DisplayMode | None", default: "DisplayMode | None" = None) -> "DisplayMode":
        """Resolve a mode from its name (case-insensitive), falling back to ``default`` or ALL."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().upper()
        try:
            return cls[key]
        except KeyError:
            return default if default is not None else cls.ALL


_MODE_LABELS = {
    DisplayMode.ALL: "ALL",
    DisplayMode.ELEC: "ELEC",
    DisplayMode.MECH: "MECH",
}


@dataclass(frozen=True, slots=True)
class TransformParameters:
    """Sampling rate and transform size that produced a magnitude frame."""

    sample_rate: float
    transform_size: int

    @property
    def hz_per_bin(self) -> Optional[float]:
        """Return the bin spacing, or ``None`` when the parameters are unusable."""
        try:
            rate = float(self.sample_rate)
            size = float(self.transform_size)
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(rate) and math.isfinite(size)) or rate <= 0.0 or size <= 0.0:
            return None
        return rate / size


@dataclass(frozen=True, slots=True)
class PeakResult:
    index: int = 0
    magnitude: int = 0


def window_size(mode: DisplayMode, overrides: Mapping[DisplayMode, int] | None = None) -> int:
    """Number of leading bins examined and rendered for ``mode``."""
    if overrides and mode in overrides:
        return max(0, int(overrides[mode]))
    return int(mode.value)


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; the display rounds .5 upwards.
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def _spacing(value: object) -> Optional[float]:
    try:
        step = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(step) or step < 0.0:
        return None
    return step


def bin_to_hz(
    index: int,
    is_simulating: bool,
    transform: Optional[TransformParameters],
    *,
    simulated_hz_per_bin: float = SIMULATED_HZ_PER_BIN,
    fallback_hz_per_bin: float = FALLBACK_HZ_PER_BIN,
) -> int:
    """
    Convert a bin index to a whole number of Hz.

    Simulation uses the fixed synthetic spacing, live frames use
    ``sample_rate / transform_size``. Without usable transform parameters
    the degraded linear conversion ``index * fallback_hz_per_bin`` applies.
    The result is never negative, and values that do not fit a float map to 0.
    """
    try:
        idx = max(0, int(index))
    except (TypeError, ValueError, OverflowError):
        idx = 0
    if is_simulating:
        step = _spacing(simulated_hz_per_bin)
    elif transform is not None:
        step = _spacing(transform.hz_per_bin)
    else:
        step = None
    if step is None:
        step = _spacing(fallback_hz_per_bin)
        if step is None:
            step = float(FALLBACK_HZ_PER_BIN)
    try:
        hz = idx * step
    except OverflowError:
        return 0
    return max(0, _round_half_up(hz))


def as_magnitudes(buffer: MagnitudeFrame) -> np.ndarray:
    """Coerce any frame-like input into a 1-D ``uint8`` array."""
    if buffer is None:
        return np.zeros(0, dtype=np.uint8)
    arr = np.asarray(buffer)
    if arr.dtype == np.uint8:
        return arr.reshape(-1)
    try:
        values = np.asarray(arr, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError):
        return np.zeros(0, dtype=np.uint8)
    values = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(values, 0.0, 255.0).astype(np.uint8)


def windowed(buffer: MagnitudeFrame, size: int) -> np.ndarray:
    """
    Return exactly ``size`` leading bins of ``buffer``.

    A short buffer is padded with zeros (buffer underrun is not an error).
    """
    size = max(0, int(size))
    arr = as_magnitudes(buffer)
    if arr.size >= size:
        return arr[:size]
    out = np.zeros(size, dtype=np.uint8)
    out[: arr.size] = arr
    return out


def find_peak(
    buffer: MagnitudeFrame,
    size: int,
    *,
    guard_band: int = PEAK_GUARD_BAND,
) -> PeakResult:
    """
    Locate the dominant bin among ``[0, size)``.

    Bins with index ``<= guard_band`` are skipped so DC and low rumble
    cannot dominate. On ties the lowest index wins. When every candidate
    is zero the result is ``PeakResult(0, 0)``.
    """
    bins = windowed(buffer, size)
    first = max(0, int(guard_band) + 1)
    candidates = bins[first:]
    if candidates.size == 0:
        return PeakResult()
    offset = int(np.argmax(candidates))
    magnitude = int(candidates[offset])
    if magnitude == 0:
        return PeakResult()
    return PeakResult(index=first + offset, magnitude=magnitude)


__all__ = [
    "DEFAULT_BUFFER_CAPACITY",
    "SIMULATED_HZ_PER_BIN",
    "FALLBACK_HZ_PER_BIN",
    "PEAK_GUARD_BAND",
    "DisplayMode",
    "TransformParameters",
    "PeakResult",
    "window_size",
    "bin_to_hz",
    "as_magnitudes",
    "windowed",
    "find_peak",
]

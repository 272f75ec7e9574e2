"""Per-frame spectrum pipeline and the sinks that receive its output."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Mapping, Optional, Protocol

from ..analysis.classify import SILENCE_THRESHOLD, classify
from ..analysis.spectrum import (
    FALLBACK_HZ_PER_BIN,
    PEAK_GUARD_BAND,
    SIMULATED_HZ_PER_BIN,
    DisplayMode,
    MagnitudeFrame,
    TransformParameters,
    bin_to_hz,
    find_peak,
    window_size,
)
from ..config.runtime import MonitorConfig
from .models import FrameResult
from .series import build_series

__all__ = [
    "FrameSink",
    "LatestFrameSink",
    "CallbackSink",
    "FrameProcessor",
]


class FrameSink(Protocol):
    """Common interface for anything that consumes published frames."""

    def publish(self, frame: FrameResult) -> None:  # pragma: no cover - protocol
        ...


@dataclass(slots=True)
class LatestFrameSink:
    """Keeps the most recent frame for pull-style readers such as snapshot export."""

    _latest: Optional[FrameResult] = field(init=False, default=None, repr=False)

    def publish(self, frame: FrameResult) -> None:
        self._latest = frame

    def latest(self) -> Optional[FrameResult]:
        return self._latest


@dataclass(slots=True)
class CallbackSink:
    """Forward frames to a plain callable (e.g. a Qt signal's ``emit``)."""

    callback: Callable[[FrameResult], None]

    def publish(self, frame: FrameResult) -> None:
        self.callback(frame)


@dataclass(slots=True)
class FrameProcessor:
    """
    Window → peak → classify → series, as one pure call per frame.

    Holds only immutable tuning constants; identical inputs always produce
    identical :class:`FrameResult` values.
    """

    guard_band: int = PEAK_GUARD_BAND
    silence_threshold: int = SILENCE_THRESHOLD
    simulated_hz_per_bin: float = SIMULATED_HZ_PER_BIN
    fallback_hz_per_bin: float = FALLBACK_HZ_PER_BIN
    window_overrides: Mapping[DisplayMode, int] | None = None

    @classmethod
    def from_config(cls, cfg: MonitorConfig) -> FrameProcessor:
        normalized = cfg.sanitized()
        return cls(
            guard_band=normalized.guard_band_max_index,
            silence_threshold=normalized.silence_threshold,
            simulated_hz_per_bin=normalized.simulated_hz_per_bin,
            fallback_hz_per_bin=normalized.fallback_hz_per_bin,
            window_overrides=normalized.window_sizes(),
        )

    def window_size(self, mode: DisplayMode) -> int:
        return window_size(mode, self.window_overrides)

    def hz_converter(
        self,
        simulating: bool,
        transform: Optional[TransformParameters],
    ) -> Callable[[int], int]:
        return partial(
            bin_to_hz,
            is_simulating=simulating,
            transform=transform,
            simulated_hz_per_bin=self.simulated_hz_per_bin,
            fallback_hz_per_bin=self.fallback_hz_per_bin,
        )

    def process(
        self,
        buffer: MagnitudeFrame,
        mode: DisplayMode,
        *,
        simulating: bool = False,
        transform: Optional[TransformParameters] = None,
        frame_index: int = 0,
    ) -> FrameResult:
        size = self.window_size(mode)
        to_hz = self.hz_converter(simulating, transform)
        peak = find_peak(buffer, size, guard_band=self.guard_band)
        dominant_hz = to_hz(peak.index)
        classification = classify(peak, dominant_hz, silence_threshold=self.silence_threshold)
        series = build_series(buffer, size, to_hz, classification)
        return FrameResult(
            frame_index=frame_index,
            mode=mode,
            simulating=simulating,
            peak=peak,
            dominant_hz=dominant_hz,
            classification=classification,
            series=series,
            transform=transform,
        )

"""Shared value types passed between the spectrum pipeline stages.

Everything here is immutable and rebuilt every frame; nothing is cached
across ticks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..analysis.classify import Classification
from ..analysis.spectrum import DisplayMode, PeakResult, TransformParameters


@dataclass(frozen=True, slots=True)
class RenderSeries:
    """Chart-ready series: Hz labels, magnitudes, and the colour hint."""

    labels: tuple[int, ...]
    values: tuple[int, ...]
    fault_color: bool = False

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self.labels)


@dataclass(frozen=True, slots=True)
class FrameResult:
    """Everything one tick publishes to the chart and the status display."""

    frame_index: int
    mode: DisplayMode
    simulating: bool
    peak: PeakResult
    dominant_hz: int
    classification: Classification
    series: RenderSeries
    transform: Optional[TransformParameters] = field(default=None, compare=False)

    @property
    def window_size(self) -> int:
        return len(self.series.labels)

    def summary(self) -> str:
        """Compact, deterministic human-readable summary for logging."""
        return (
            f"#{self.frame_index} mode={self.mode.name} "
            f"sim={'on' if self.simulating else 'off'} "
            f"peak=bin{self.peak.index}/{self.peak.magnitude} "
            f"hz={self.dominant_hz} status={self.classification.status.name}"
        )


__all__ = [
    "DisplayMode",
    "PeakResult",
    "TransformParameters",
    "Classification",
    "RenderSeries",
    "FrameResult",
]

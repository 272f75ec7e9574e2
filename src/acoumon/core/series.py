"""Assemble the chart series for one frame."""

from __future__ import annotations

from typing import Callable

from ..analysis.classify import Classification
from ..analysis.spectrum import MagnitudeFrame, windowed
from .models import RenderSeries


def build_series(
    buffer: MagnitudeFrame,
    window_size: int,
    bin_to_hz_fn: Callable[[int], int],
    classification: Classification,
) -> RenderSeries:
    """
    Pair each of the first ``window_size`` bins with its Hz label.

    Bins beyond the end of ``buffer`` are rendered as 0. ``fault_color``
    only selects the chart colour band.
    """
    values = windowed(buffer, window_size)
    labels = tuple(int(bin_to_hz_fn(i)) for i in range(values.size))
    return RenderSeries(
        labels=labels,
        values=tuple(int(v) for v in values),
        fault_color=classification.status.is_fault,
    )

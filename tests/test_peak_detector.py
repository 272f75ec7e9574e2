from __future__ import annotations

import numpy as np

from acoumon.analysis.spectrum import PeakResult, find_peak


def _frame(size: int = 2048, **bins: int) -> np.ndarray:
    frame = np.zeros(size, dtype=np.uint8)
    for key, value in bins.items():
        frame[int(key.lstrip("b"))] = value
    return frame


def test_peak_picks_maximum_inside_window() -> None:
    frame = _frame(b20=80, b90=200, b140=120)
    assert find_peak(frame, 150) == PeakResult(index=90, magnitude=200)


def test_peak_outside_window_is_ignored() -> None:
    frame = _frame(b20=80, b200=250)
    assert find_peak(frame, 150) == PeakResult(index=20, magnitude=80)


def test_guard_band_excludes_low_bins() -> None:
    frame = _frame(b3=255, b6=1)
    assert find_peak(frame, 40) == PeakResult(index=6, magnitude=1)


def test_guard_band_boundary_is_inclusive() -> None:
    frame = _frame(b5=255)
    assert find_peak(frame, 40) == PeakResult(0, 0)


def test_ties_keep_first_index() -> None:
    frame = _frame(b10=99, b30=99, b31=99)
    assert find_peak(frame, 150) == PeakResult(index=10, magnitude=99)


def test_all_zero_candidates_return_origin() -> None:
    assert find_peak(np.zeros(2048, dtype=np.uint8), 150) == PeakResult(0, 0)


def test_degenerate_buffers() -> None:
    assert find_peak(None, 150) == PeakResult(0, 0)
    assert find_peak([], 150) == PeakResult(0, 0)
    assert find_peak([1, 2, 3], 0) == PeakResult(0, 0)


def test_short_buffer_is_zero_padded() -> None:
    frame = [0] * 10 + [77]
    assert find_peak(frame, 300) == PeakResult(index=10, magnitude=77)


def test_custom_guard_band() -> None:
    frame = _frame(b8=90, b12=60)
    assert find_peak(frame, 40, guard_band=10) == PeakResult(index=12, magnitude=60)

from __future__ import annotations

import numpy as np
import pytest

from acoumon.analysis.classify import Classification, HealthStatus
from acoumon.analysis.spectrum import DisplayMode, TransformParameters
from acoumon.core.pipeline import FrameProcessor
from acoumon.core.series import build_series

OPERATING = Classification.for_status(HealthStatus.OPERATING)


def test_series_pairs_labels_and_values() -> None:
    buffer = np.arange(10, dtype=np.uint8)
    series = build_series(buffer, 4, lambda i: i * 10, OPERATING)
    assert series.labels == (0, 10, 20, 30)
    assert series.values == (0, 1, 2, 3)
    assert series.fault_color is False


def test_series_pads_missing_bins() -> None:
    series = build_series([9, 9], 5, lambda i: i, OPERATING)
    assert series.values == (9, 9, 0, 0, 0)
    assert len(series.labels) == 5


@pytest.mark.parametrize(
    ("status", "fault"),
    [
        (HealthStatus.HIGH_FREQ_FAULT, True),
        (HealthStatus.MECHANICAL_ISSUE, True),
        (HealthStatus.MAINS_HUM, False),
        (HealthStatus.OPERATING, False),
        (HealthStatus.SILENCE, False),
    ],
)
def test_fault_color_follows_status(status: HealthStatus, fault: bool) -> None:
    series = build_series([1] * 8, 8, lambda i: i, Classification.for_status(status))
    assert series.fault_color is fault


@pytest.mark.parametrize("mode", list(DisplayMode))
@pytest.mark.parametrize("length", [0, 12, 2048])
def test_series_length_matches_window_for_every_mode(mode: DisplayMode, length: int) -> None:
    processor = FrameProcessor()
    frame = processor.process(np.full(length, 60, dtype=np.uint8), mode)
    assert len(frame.series.labels) == len(frame.series.values) == mode.value


def test_pipeline_output_is_bit_identical_for_identical_input() -> None:
    rng = np.random.default_rng(7)
    buffer = rng.integers(0, 256, size=2048, dtype=np.uint8)
    params = TransformParameters(sample_rate=44100.0, transform_size=4096)
    processor = FrameProcessor()
    first = processor.process(buffer, DisplayMode.MECH, transform=params)
    second = processor.process(buffer.copy(), DisplayMode.MECH, transform=params)
    assert first == second
    assert first.series == second.series


def test_pipeline_uses_peak_bin_for_dominant_frequency() -> None:
    buffer = np.zeros(2048, dtype=np.uint8)
    buffer[120] = 180
    params = TransformParameters(sample_rate=48000.0, transform_size=4096)
    frame = FrameProcessor().process(buffer, DisplayMode.ALL, transform=params)
    assert frame.peak.index == 120
    assert frame.dominant_hz == 1406  # 120 * 11.71875 = 1406.25
    assert frame.classification.status is HealthStatus.MECHANICAL_ISSUE
    assert frame.series.fault_color is True
    assert frame.series.labels[120] == 1406


def test_pipeline_without_device_context_uses_linear_fallback() -> None:
    buffer = np.zeros(2048, dtype=np.uint8)
    buffer[8] = 200
    frame = FrameProcessor().process(buffer, DisplayMode.ELEC)
    assert frame.dominant_hz == 80
    assert frame.classification.status is HealthStatus.MAINS_HUM
    assert frame.series.labels[:3] == (0, 10, 20)


def test_pipeline_survives_empty_buffer() -> None:
    frame = FrameProcessor().process(None, DisplayMode.ALL)
    assert frame.classification.status is HealthStatus.SILENCE
    assert frame.series.values == (0,) * 150


@pytest.mark.parametrize("fallback", [float("inf"), float("nan")])
def test_pipeline_survives_unusable_fallback_spacing(fallback: float) -> None:
    buffer = np.zeros(10, dtype=np.uint8)
    buffer[8] = 200
    frame = FrameProcessor(fallback_hz_per_bin=fallback).process(buffer, DisplayMode.ELEC)
    assert frame.dominant_hz == 80
    assert frame.classification.status is HealthStatus.MAINS_HUM
    assert len(frame.series.labels) == 40

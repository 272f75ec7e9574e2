from __future__ import annotations

import numpy as np
import pytest

from acoumon.analysis.fft import ByteSpectrumAnalyser


def _tone(bin_index: int, fft_size: int, amplitude: float = 0.5) -> np.ndarray:
    n = np.arange(fft_size)
    return amplitude * np.sin(2.0 * np.pi * bin_index * n / fft_size)


def test_bin_count_is_half_fft_size() -> None:
    assert ByteSpectrumAnalyser(4096).bin_count == 2048
    assert ByteSpectrumAnalyser(256).bin_count == 128


def test_silence_maps_to_zero() -> None:
    out = ByteSpectrumAnalyser(1024).byte_frequency_data(np.zeros(1024))
    assert out.dtype == np.uint8
    assert out.size == 512
    assert not out.any()


def test_tone_peaks_at_its_bin() -> None:
    analyser = ByteSpectrumAnalyser(4096, smoothing=0.0)
    out = analyser.byte_frequency_data(_tone(100, 4096))
    assert int(np.argmax(out)) == 100
    assert out[100] == 255
    assert out[400] < out[100]


def test_smoothing_ramps_up_over_calls() -> None:
    analyser = ByteSpectrumAnalyser(4096, smoothing=0.8)
    tone = _tone(300, 4096, amplitude=0.01)
    first = int(analyser.byte_frequency_data(tone)[300])
    second = int(analyser.byte_frequency_data(tone)[300])
    assert second > first

    analyser.reset()
    assert int(analyser.byte_frequency_data(tone)[300]) == first


def test_short_input_is_padded() -> None:
    out = ByteSpectrumAnalyser(512).byte_frequency_data(_tone(20, 512)[:100])
    assert out.size == 256


def test_non_finite_samples_are_ignored() -> None:
    block = np.zeros(256)
    block[3] = np.nan
    block[7] = np.inf
    out = ByteSpectrumAnalyser(256).byte_frequency_data(block)
    assert not out.any()


@pytest.mark.parametrize("fft_size", [0, 16, 1000, 4095])
def test_rejects_bad_fft_size(fft_size: int) -> None:
    with pytest.raises(ValueError):
        ByteSpectrumAnalyser(fft_size)


def test_rejects_bad_decibel_range() -> None:
    with pytest.raises(ValueError):
        ByteSpectrumAnalyser(1024, min_decibels=-30, max_decibels=-100)
    with pytest.raises(ValueError):
        ByteSpectrumAnalyser(1024, smoothing=1.5)

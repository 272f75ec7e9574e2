"""FFT helpers used by the live microphone source."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

DEFAULT_FFT_SIZE = 4096
DEFAULT_SMOOTHING = 0.8
DEFAULT_MIN_DECIBELS = -100.0
DEFAULT_MAX_DECIBELS = -30.0


class ByteSpectrumAnalyser:
    """
    Turn the latest block of audio samples into 0-255 magnitude bins.

    Behaves like a browser ``AnalyserNode``: Blackman window, magnitudes
    normalised by the FFT size, exponential smoothing across successive
    calls, then a linear map of ``[min_decibels, max_decibels]`` onto
    ``[0, 255]``. ``fft_size`` samples produce ``fft_size // 2`` bins.
    """

    def __init__(
        self,
        fft_size: int = DEFAULT_FFT_SIZE,
        *,
        smoothing: float = DEFAULT_SMOOTHING,
        min_decibels: float = DEFAULT_MIN_DECIBELS,
        max_decibels: float = DEFAULT_MAX_DECIBELS,
    ) -> None:
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if not 0.0 <= smoothing <= 1.0:
            raise ValueError(f"smoothing must be within [0, 1], got {smoothing}")
        if max_decibels <= min_decibels:
            raise ValueError("max_decibels must be greater than min_decibels")
        self.fft_size = int(fft_size)
        self.smoothing = float(smoothing)
        self.min_decibels = float(min_decibels)
        self.max_decibels = float(max_decibels)
        self._window = np.blackman(self.fft_size)
        self._smoothed: Optional[np.ndarray] = None

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2

    def reset(self) -> None:
        self._smoothed = None

    def byte_frequency_data(self, samples: ArrayLike) -> np.ndarray:
        """Analyse the most recent ``fft_size`` samples (zero-padded at the front if short)."""
        block = np.asarray(samples, dtype=np.float64).reshape(-1)[-self.fft_size :]
        if block.size < self.fft_size:
            block = np.concatenate([np.zeros(self.fft_size - block.size), block])
        block = np.nan_to_num(block, nan=0.0, posinf=0.0, neginf=0.0)

        spectrum = np.abs(np.fft.rfft(block * self._window))[: self.bin_count]
        spectrum /= float(self.fft_size)
        if self._smoothed is None:
            self._smoothed = (1.0 - self.smoothing) * spectrum
        else:
            self._smoothed = self.smoothing * self._smoothed + (1.0 - self.smoothing) * spectrum

        with np.errstate(divide="ignore"):
            decibels = 20.0 * np.log10(self._smoothed)
        span = self.max_decibels - self.min_decibels
        scaled = np.floor((255.0 / span) * (decibels - self.min_decibels))
        scaled = np.nan_to_num(scaled, nan=0.0, posinf=255.0, neginf=0.0)
        return np.clip(scaled, 0.0, 255.0).astype(np.uint8)


__all__ = ["ByteSpectrumAnalyser", "DEFAULT_FFT_SIZE"]

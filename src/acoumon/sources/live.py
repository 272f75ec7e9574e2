"""Microphone-backed spectrum source built on ``sounddevice`` (PortAudio)."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

import numpy as np

from ..analysis.fft import DEFAULT_FFT_SIZE, ByteSpectrumAnalyser
from ..analysis.spectrum import TransformParameters
from .base import DeviceUnavailable

logger = logging.getLogger(__name__)

StreamFactory = Callable[..., Any]


def _sounddevice_stream(**kwargs: Any) -> Any:
    """Create a ``sounddevice.InputStream``; PortAudio is loaded on first use."""
    try:
        import sounddevice as sd
    except (ImportError, OSError) as exc:
        raise DeviceUnavailable(f"Audio backend not available: {exc}") from exc
    return sd.InputStream(**kwargs)


class LiveSource:
    """
    Capture audio from an input device and expose it as 8-bit magnitude frames.

    PortAudio delivers blocks on its own thread; the callback only copies
    them into a ring buffer. :meth:`capture` analyses a snapshot of the
    latest ``fft_size`` samples and never waits for the device, so calling
    it faster than audio arrives simply repeats the current spectrum.
    """

    def __init__(
        self,
        fft_size: int = DEFAULT_FFT_SIZE,
        sample_rate_hz: Optional[float] = None,
        *,
        device: Optional[int | str] = None,
        analyser: Optional[ByteSpectrumAnalyser] = None,
        stream_factory: Optional[StreamFactory] = None,
    ) -> None:
        self._analyser = analyser or ByteSpectrumAnalyser(fft_size)
        self.fft_size = self._analyser.fft_size
        self._requested_rate = sample_rate_hz
        self._device = device
        self._stream_factory = stream_factory or _sounddevice_stream
        self._stream: Any = None
        self._lock = threading.Lock()
        self._ring = np.zeros(self.fft_size, dtype=np.float32)
        self._write_idx = 0
        self.transform: Optional[TransformParameters] = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    # ------------------------------------------------------------------ lifecycle
    def open(self) -> None:
        if self._stream is not None:
            return
        kwargs: dict[str, Any] = {
            "channels": 1,
            "dtype": "float32",
            "callback": self._on_audio,
        }
        if self._requested_rate:
            kwargs["samplerate"] = float(self._requested_rate)
        if self._device is not None:
            kwargs["device"] = self._device

        stream = None
        try:
            stream = self._stream_factory(**kwargs)
            stream.start()
        except DeviceUnavailable:
            raise
        except Exception as exc:  # PortAudioError, permission or device errors
            if stream is not None:
                try:
                    stream.close()
                except Exception:  # pragma: no cover - best-effort cleanup
                    logger.debug("Ignoring error while closing failed stream", exc_info=True)
            logger.warning("Microphone unavailable: %s", exc)
            raise DeviceUnavailable(f"Cannot open audio input: {exc}") from exc

        rate = float(getattr(stream, "samplerate", 0.0) or self._requested_rate or 0.0)
        with self._lock:
            self._ring[:] = 0.0
            self._write_idx = 0
        self._analyser.reset()
        self._stream = stream
        self.transform = TransformParameters(sample_rate=rate, transform_size=self.fft_size)
        logger.info("Microphone opened at %.0f Hz, fft_size=%d", rate, self.fft_size)

    def close(self) -> None:
        stream, self._stream = self._stream, None
        self.transform = None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()
            logger.info("Microphone closed")

    # ------------------------------------------------------------------ data path
    def _on_audio(self, indata: np.ndarray, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("Audio callback status: %s", status)
        block = np.asarray(indata, dtype=np.float32)
        if block.ndim > 1:
            block = block[:, 0]
        block = block[-self.fft_size :]
        n = block.size
        if n == 0:
            return
        with self._lock:
            end = self._write_idx + n
            if end <= self.fft_size:
                self._ring[self._write_idx : end] = block
            else:
                first = self.fft_size - self._write_idx
                self._ring[self._write_idx :] = block[:first]
                self._ring[: n - first] = block[first:]
            self._write_idx = end % self.fft_size

    def snapshot(self) -> np.ndarray:
        """Return the latest ``fft_size`` samples, oldest first."""
        with self._lock:
            return np.concatenate([self._ring[self._write_idx :], self._ring[: self._write_idx]])

    def capture(self) -> np.ndarray:
        if self._stream is None:
            return np.zeros(self._analyser.bin_count, dtype=np.uint8)
        return self._analyser.byte_frequency_data(self.snapshot())

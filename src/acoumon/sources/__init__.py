"""Spectrum sources: the live microphone analyser and the synthetic fault generator."""

from .base import AcoumonError, DeviceUnavailable, SpectrumSource
from .live import LiveSource
from .simulated import SimulatedSource

__all__ = [
    "AcoumonError",
    "DeviceUnavailable",
    "SpectrumSource",
    "LiveSource",
    "SimulatedSource",
]

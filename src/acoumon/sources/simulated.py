"""Deterministic synthetic spectrum used for demos and fault drills."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..analysis.spectrum import (
    DEFAULT_BUFFER_CAPACITY,
    SIMULATED_HZ_PER_BIN,
    TransformParameters,
)

logger = logging.getLogger(__name__)

NOISE_BINS = 200
NOISE_CEILING = 30
BASELINE_LEVEL = 10
FAULT_BIN = 240
FAULT_LEVEL_RANGE = (200, 250)
FAULT_SHOULDER_LEVEL = 150

# 10.7 Hz per bin; the bin→Hz conversion uses the constant directly when simulating.
SIMULATED_TRANSFORM = TransformParameters(
    sample_rate=SIMULATED_HZ_PER_BIN * 4096,
    transform_size=4096,
)


class SimulatedSource:
    """
    Synthetic frame generator that mimics a bearing fault near 2.5 kHz.

    Bins ``[0, 200)`` carry uniform noise in ``[0, 30)``, every other bin
    sits at 10, and bin 240 holds a random level in ``[200, 250)`` flanked
    by two bins at 150. Pass ``seed`` for reproducible frames.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_BUFFER_CAPACITY,
        seed: Optional[int] = None,
    ) -> None:
        self.capacity = max(int(capacity), FAULT_BIN + 2)
        self._rng = np.random.default_rng(seed)
        self._open = False
        self.transform: Optional[TransformParameters] = SIMULATED_TRANSFORM

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        if not self._open:
            logger.info("Simulated source enabled (fault injected at bin %d)", FAULT_BIN)
        self._open = True

    def close(self) -> None:
        self._open = False

    def capture(self) -> np.ndarray:
        frame = np.full(self.capacity, BASELINE_LEVEL, dtype=np.uint8)
        noise = self._rng.random(NOISE_BINS) * NOISE_CEILING
        frame[:NOISE_BINS] = noise.astype(np.uint8)
        low, high = FAULT_LEVEL_RANGE
        frame[FAULT_BIN] = int(low + self._rng.random() * (high - low))
        frame[FAULT_BIN - 1] = FAULT_SHOULDER_LEVEL
        frame[FAULT_BIN + 1] = FAULT_SHOULDER_LEVEL
        return frame

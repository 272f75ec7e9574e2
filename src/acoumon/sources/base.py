"""Contract shared by every spectrum source and the errors they raise."""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

from ..analysis.spectrum import TransformParameters


class AcoumonError(Exception):
    """Base class for errors raised by acoumon."""


class DeviceUnavailable(AcoumonError):
    """No capture permission, no input device, or no audio backend."""


class SpectrumSource(Protocol):
    """
    Pull-based magnitude frame provider.

    ``capture()`` must not block: it returns the most recent frame and may
    repeat the previous one if nothing new arrived. ``transform`` is
    ``None`` until a device context exists.
    """

    transform: Optional[TransformParameters]

    def open(self) -> None:  # pragma: no cover - protocol
        ...

    def close(self) -> None:  # pragma: no cover - protocol
        ...

    def capture(self) -> np.ndarray:  # pragma: no cover - protocol
        ...

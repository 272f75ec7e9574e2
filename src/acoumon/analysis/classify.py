"""Band rules that turn a spectral peak into a machine-health status."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .spectrum import PeakResult

SILENCE_THRESHOLD = 50  # peak magnitude at or below this counts as silence

MAINS_HUM_MIN_HZ = 45
MAINS_HUM_MAX_HZ = 110
MECHANICAL_MIN_HZ = 1000  # exclusive
HIGH_FREQ_MIN_HZ = 2000  # exclusive


class HealthStatus(enum.Enum):
    STANDBY = "STANDBY"
    SILENCE = "SILENCE"
    MAINS_HUM = "MAINS HUM (NORMAL)"
    OPERATING = "OPERATING"
    MECHANICAL_ISSUE = "MECHANICAL ISSUE"
    HIGH_FREQ_FAULT = "HIGH FREQ FAULT"

    @property
    def label(self) -> str:
        return self.value

    @property
    def is_fault(self) -> bool:
        return self in _FAULT_STATUSES


_FAULT_STATUSES = frozenset({HealthStatus.MECHANICAL_ISSUE, HealthStatus.HIGH_FREQ_FAULT})

ADVISORIES = {
    HealthStatus.STANDBY: "-",
    HealthStatus.SILENCE: "waiting for signal",
    HealthStatus.MAINS_HUM: "normal: mains/magnetic hum",
    HealthStatus.OPERATING: "general machine operation",
    HealthStatus.MECHANICAL_ISSUE: "check part looseness",
    HealthStatus.HIGH_FREQ_FAULT: "check bearings / metal friction",
}


@dataclass(frozen=True, slots=True)
class Classification:
    status: HealthStatus
    advisory: str

    @classmethod
    def for_status(cls, status: HealthStatus) -> "Classification":
        return cls(status=status, advisory=ADVISORIES[status])


STANDBY = Classification.for_status(HealthStatus.STANDBY)


def classify(
    peak: PeakResult,
    dominant_hz: int,
    *,
    silence_threshold: int = SILENCE_THRESHOLD,
) -> Classification:
    """
    Map the current frame's peak onto a status and advisory.

    The decision uses only this frame: a single noisy frame can flip the
    status. Bands are checked in order and the first match wins.
    """
    if peak.magnitude <= silence_threshold:
        return Classification.for_status(HealthStatus.SILENCE)
    if MAINS_HUM_MIN_HZ <= dominant_hz <= MAINS_HUM_MAX_HZ:
        status = HealthStatus.MAINS_HUM
    elif dominant_hz > HIGH_FREQ_MIN_HZ:
        status = HealthStatus.HIGH_FREQ_FAULT
    elif MECHANICAL_MIN_HZ < dominant_hz <= HIGH_FREQ_MIN_HZ:
        status = HealthStatus.MECHANICAL_ISSUE
    else:
        status = HealthStatus.OPERATING
    return Classification.for_status(status)


__all__ = [
    "SILENCE_THRESHOLD",
    "HealthStatus",
    "Classification",
    "ADVISORIES",
    "STANDBY",
    "classify",
]

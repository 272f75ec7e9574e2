"""Runtime configuration for the spectrum monitor."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

import yaml

from ..analysis.spectrum import DisplayMode


def _finite(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def _positive_int(value: Any, fallback: int) -> int:
    number = _finite(value, float(fallback))
    return max(1, int(number))


@dataclass(slots=True)
class MonitorConfig:
    """
    Tuning knobs for capture, peak detection, classification, and refresh.

    The defaults reproduce the field-tested behaviour: a 4096-point
    transform (2048 bins), a 5-bin guard band, and a silence cutoff of 50.
    """

    buffer_capacity: int = 2048
    fft_size: int = 4096
    sample_rate_hz: Optional[float] = None  # None: use the device default
    input_device: Optional[int | str] = None

    simulated_hz_per_bin: float = 10.7
    fallback_hz_per_bin: float = 10.0
    simulation_seed: Optional[int] = None

    guard_band_max_index: int = 5
    silence_threshold: int = 50

    window_all: int = 150
    window_elec: int = 40
    window_mech: int = 300
    default_mode: str = "ALL"

    # Analyser shaping for the live source
    smoothing_time_constant: float = 0.8
    min_decibels: float = -100.0
    max_decibels: float = -30.0

    refresh_hz: float = 60.0

    def sanitized(self) -> MonitorConfig:
        """Return a copy with derived limits applied."""
        fft_size = _positive_int(self.fft_size, 4096)
        if fft_size < 32 or fft_size & (fft_size - 1):
            fft_size = 4096
        min_db = _finite(self.min_decibels, -100.0)
        max_db = _finite(self.max_decibels, -30.0)
        if max_db <= min_db:
            min_db, max_db = -100.0, -30.0
        rate = self.sample_rate_hz
        if rate is not None:
            rate = _finite(rate, 0.0)
            rate = rate if rate > 0.0 else None
        seed = self.simulation_seed
        if seed is not None:
            seed = int(_finite(seed, 0.0))
        return MonitorConfig(
            buffer_capacity=_positive_int(self.buffer_capacity, 2048),
            fft_size=fft_size,
            sample_rate_hz=rate,
            input_device=self.input_device,
            simulated_hz_per_bin=max(0.0, _finite(self.simulated_hz_per_bin, 10.7)),
            fallback_hz_per_bin=max(0.0, _finite(self.fallback_hz_per_bin, 10.0)),
            simulation_seed=seed,
            guard_band_max_index=max(0, int(_finite(self.guard_band_max_index, 5.0))),
            silence_threshold=max(0, min(255, int(_finite(self.silence_threshold, 50.0)))),
            window_all=_positive_int(self.window_all, 150),
            window_elec=_positive_int(self.window_elec, 40),
            window_mech=_positive_int(self.window_mech, 300),
            default_mode=DisplayMode.parse(self.default_mode).name,
            smoothing_time_constant=max(0.0, min(1.0, _finite(self.smoothing_time_constant, 0.8))),
            min_decibels=min_db,
            max_decibels=max_db,
            refresh_hz=max(1.0, _finite(self.refresh_hz, 60.0)),
        )

    def window_sizes(self) -> dict[DisplayMode, int]:
        return {
            DisplayMode.ALL: int(self.window_all),
            DisplayMode.ELEC: int(self.window_elec),
            DisplayMode.MECH: int(self.window_mech),
        }

    def initial_mode(self) -> DisplayMode:
        return DisplayMode.parse(self.default_mode)

    def refresh_interval_ms(self) -> int:
        """Return the timer interval that corresponds to ``refresh_hz``."""
        hz = _finite(self.refresh_hz, 0.0)
        if hz <= 0.0:
            return 16
        return max(1, int(round(1000.0 / hz)))


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`MonitorConfig`."""
    return {f.name for f in fields(MonitorConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``monitor`` block into the root mapping."""
    if "monitor" in data and isinstance(data["monitor"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "monitor":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> MonitorConfig:
    """Build :class:`MonitorConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return MonitorConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return MonitorConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> MonitorConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`MonitorConfig`.
    """
    if path is None:
        return MonitorConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return MonitorConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["MonitorConfig", "config_from_mapping", "load_config"]

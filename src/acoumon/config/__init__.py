"""Configuration objects and helpers for acoumon.

:mod:`runtime` loads the YAML file that tunes the spectrum pipeline
(guard band, silence cutoff, window lengths, analyser shaping, refresh
rate); :mod:`app_config` resolves where reports are written.
"""

from .app_config import AppPaths
from .runtime import MonitorConfig, config_from_mapping, load_config

__all__ = ["AppPaths", "MonitorConfig", "config_from_mapping", "load_config"]

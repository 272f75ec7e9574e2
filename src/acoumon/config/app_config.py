"""Default application paths."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class AppPaths:
    """
    Commonly used paths for the desktop application.

    ``ACOUMON_REPORT_DIR`` overrides the default ``reports`` folder relative
    to the repository root so packaged installs can store snapshots elsewhere.
    """

    # repo_root points at the project root (one level above src/)
    repo_root: Path = Path(__file__).resolve().parents[3]
    reports: Path = field(init=False)
    config_file: Path = field(init=False)

    def __post_init__(self) -> None:
        env_reports = os.environ.get("ACOUMON_REPORT_DIR")
        if env_reports:
            self.reports = Path(env_reports).expanduser()
        else:
            self.reports = self.repo_root / "reports"
        self.config_file = self.repo_root / "acoumon.yaml"

    def ensure(self) -> None:
        """Create directories if they do not yet exist."""
        self.reports.mkdir(parents=True, exist_ok=True)

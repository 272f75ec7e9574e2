"""
Headless engineering report exporter.

Renders a :class:`~acoumon.core.models.FrameResult` into a PNG with
Matplotlib's Agg backend (no Qt required) so snapshots can be produced on
servers or in CI. Launched as ``acoumon-report`` it runs a short monitoring
session, either against the synthetic fault generator (default) or the
microphone (``--live``), and writes the final frame to
``Engineering-Report-HH-MM-SS.png``.
"""

from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from matplotlib.figure import Figure

from ..analysis.spectrum import DisplayMode
from ..config.app_config import AppPaths
from ..config.runtime import load_config
from ..core.models import FrameResult
from ..core.monitor import MonitorSession
from ..core.pipeline import LatestFrameSink
from ..sources.base import DeviceUnavailable

logger = logging.getLogger(__name__)

FAULT_COLOR = "#ff3366"
NORMAL_COLOR = "#00ffcc"
BACKGROUND_COLOR = "#1e1e2f"


def report_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%H-%M-%S")
    return f"Engineering-Report-{stamp}.png"


def build_report_figure(frame: FrameResult) -> Figure:
    """Create a figure showing the frame's spectrum, status, and advisory."""
    series = frame.series
    color = FAULT_COLOR if series.fault_color else NORMAL_COLOR
    x = np.asarray(series.labels, dtype=float)
    y = np.asarray(series.values, dtype=float)

    fig = Figure(figsize=(9, 3.5))
    ax = fig.subplots()
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax.set_facecolor("black")
    if x.size:
        ax.plot(x, y, color=color, linewidth=2)
        ax.fill_between(x, y, 0, color=color, alpha=0.35)
        ax.set_xlim(float(x[0]), float(x[-1]) if x.size > 1 else float(x[0]) + 1.0)
    ax.set_ylim(0, 255)
    ax.set_xlabel("Frequency [Hz]", color="#aaaaaa")
    ax.set_ylabel("Signal strength", color="#aaaaaa")
    ax.tick_params(colors="#666666")
    ax.grid(color="#333333")

    status = "SIMULATION MODE" if frame.simulating else frame.classification.status.label
    ax.set_title(
        f"{status} | {frame.dominant_hz} Hz | {frame.mode.label}",
        color=color,
        fontweight="bold",
    )
    fig.text(0.01, 0.01, frame.classification.advisory, color="white", fontsize=9)
    fig.tight_layout(rect=(0, 0.05, 1, 1))
    return fig


def render_report(frame: FrameResult, path: Path) -> Path:
    """Write ``frame`` as a PNG at ``path`` and return the resolved path."""
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_report_figure(frame)
    fig.savefig(path, format="png", facecolor=fig.get_facecolor())
    logger.info("Report written to %s", path)
    return path


def _status_line(frame: FrameResult) -> str:
    return (
        f"{frame.classification.status.label}: {frame.dominant_hz} Hz "
        f"(peak bin {frame.peak.index}, magnitude {frame.peak.magnitude}) - "
        f"{frame.classification.advisory}"
    )


# --------------------------------------------------------------------------- # CLI
def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Capture a few frames and export an engineering report PNG."
    )
    parser.add_argument(
        "--live",
        action="store_true",
        help="Use the microphone instead of the synthetic fault generator.",
    )
    parser.add_argument(
        "--mode",
        choices=[m.name for m in DisplayMode],
        default=None,
        help="Display window (default: from config, usually ALL).",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=30,
        help="Number of ticks to run before exporting (default: 30).",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between ticks (default: 1 / refresh_hz from config).",
    )
    parser.add_argument("--config", type=Path, help="Optional YAML config file.")
    parser.add_argument("-o", "--output", type=Path, help="Output PNG path.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    paths = AppPaths()
    cfg = load_config(args.config if args.config else paths.config_file)
    latest = LatestFrameSink()
    session = MonitorSession(cfg, sinks=[latest])
    if args.mode:
        session.set_display_mode(args.mode)
    session.set_simulating(not args.live)

    interval_s = args.interval
    if interval_s is None:
        interval_s = session.config.refresh_interval_ms() / 1000.0
    frames = max(1, int(args.frames))

    try:
        session.start()
    except DeviceUnavailable as exc:
        print(f"[ERROR] {exc}")
        return 2

    try:
        for _ in range(frames):
            session.tick()
            if interval_s > 0:
                time.sleep(interval_s)
    except KeyboardInterrupt:
        pass
    finally:
        session.stop()

    frame: Optional[FrameResult] = latest.latest()
    if frame is None:
        print("[ERROR] No frame captured")
        return 1

    output = args.output
    if output is None:
        paths.ensure()
        output = paths.reports / report_filename()
    render_report(frame, output)
    print(_status_line(frame))
    print(f"[INFO] Report saved to {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

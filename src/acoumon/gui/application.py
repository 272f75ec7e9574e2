"""Qt application entry point for the acoumon desktop GUI.

This module wires up argument parsing and logging, builds the
:class:`~acoumon.gui.main_window.MainWindow`, and starts the Qt event loop.
All GUI launches, whether through ``python main.py``, the ``acoumon``
console script or ``python -m acoumon.gui.application``, flow through
``main()`` here.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Tuple

from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication, QMainWindow

from ..analysis.spectrum import DisplayMode
from ..config.app_config import AppPaths
from ..config.runtime import MonitorConfig, load_config
from .main_window import MainWindow

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Acoustic machine-health monitor")
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Start immediately with the synthetic fault generator (no microphone)",
    )
    parser.add_argument(
        "--mode",
        choices=[m.name for m in DisplayMode],
        default=None,
        help="Initial display window (default: from config, usually ALL)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with monitor settings (default: acoumon.yaml in the project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser


def _parse_cli_args(
    argv: list[str],
) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def create_app(
    argv: list[str] | None = None,
    *,
    config: MonitorConfig | None = None,
) -> Tuple[QApplication, QMainWindow]:
    """
    Create the QApplication and main window.

    Parameters
    ----------
    argv:
        Optional argument list to pass to :class:`QApplication`.
    config:
        Monitor settings; defaults are used when omitted.

    Returns
    -------
    app:
        The QApplication instance (owned by caller).
    window:
        The main window, not yet shown.
    """
    qt_args = argv if argv is not None else sys.argv
    app = QApplication.instance() or QApplication(qt_args)

    # Suppress noisy QObject::connect warnings from QStyleHints and similar internals
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")

    window = MainWindow(config)
    return app, window


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = args.config if args.config is not None else AppPaths().config_file
    config = load_config(config_path)
    if args.mode:
        config.default_mode = args.mode
    logger.info("Loaded monitor config from %s", config_path)

    app, win = create_app(qt_argv, config=config)
    win.resize(960, 720)
    win.show()
    if args.simulate:
        win.controller.toggle_simulation()
    raise SystemExit(app.exec())


if __name__ == "__main__":
    main()

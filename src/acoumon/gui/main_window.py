"""Main window for the acoumon GUI."""

from __future__ import annotations

import logging
from datetime import datetime

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QButtonGroup,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..analysis.classify import STANDBY, HealthStatus
from ..analysis.spectrum import DisplayMode
from ..config.app_config import AppPaths
from ..config.runtime import MonitorConfig
from ..core.models import FrameResult
from ..core.monitor import MonitorState
from ..tools.report import report_filename
from .monitor_controller import MonitorController
from .spectrum_view import SpectrumPlotWidget

BADGE_STYLES = {
    "fault": "background:#ff3366; color:#fff;",
    "silence": "background:#333; color:#000;",
    "normal": "background:#00ffcc; color:#000;",
}


class MainWindow(QMainWindow):
    """Live spectrum, status badge, advisory text, and the operator controls."""

    def __init__(
        self,
        config: MonitorConfig | None = None,
        *,
        controller: MonitorController | None = None,
        paths: AppPaths | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("AI Engineering Assistant")
        self._logger = logging.getLogger(__name__)
        self._paths = paths or AppPaths()
        self.controller = controller or MonitorController(config, parent=self)

        self._build_ui()
        self._wire()
        self._show_classification_text(STANDBY.status.label, STANDBY.advisory, "silence")
        self._on_state_changed(self.controller.session.state.value)
        self._on_mode_changed(self.controller.session.display_mode.name)

    def closeEvent(self, event: QCloseEvent) -> None:
        try:
            self.controller.stop()
        except Exception:  # pragma: no cover - best-effort shutdown
            self._logger.exception("Failed to stop monitoring on close")
        super().closeEvent(event)

    # ------------------------------------------------------------------ layout
    def _build_ui(self) -> None:
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setAlignment(Qt.AlignHCenter)

        title = QLabel("AI ENGINEERING ASSISTANT")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 24pt; font-weight: bold; letter-spacing: 2px;")
        layout.addWidget(title)

        # Idle: start buttons
        self._idle_panel = QWidget()
        idle_row = QHBoxLayout(self._idle_panel)
        self.start_button = QPushButton("START DIAGNOSIS")
        self.simulate_button = QPushButton("SIMULATE FAULT")
        idle_row.addStretch()
        idle_row.addWidget(self.start_button)
        idle_row.addWidget(self.simulate_button)
        idle_row.addStretch()
        layout.addWidget(self._idle_panel)

        # Active: readout, badge, advisory, controls
        self._live_panel = QWidget()
        live = QVBoxLayout(self._live_panel)
        self.peak_label = QLabel("0 Hz")
        self.peak_label.setAlignment(Qt.AlignCenter)
        self.peak_label.setStyleSheet("font-size: 36pt; font-weight: bold;")
        live.addWidget(self.peak_label)

        self.status_badge = QLabel()
        self.status_badge.setAlignment(Qt.AlignCenter)
        live.addWidget(self.status_badge, alignment=Qt.AlignHCenter)

        self.advisory_label = QLabel()
        self.advisory_label.setFrameShape(QFrame.StyledPanel)
        self.advisory_label.setWordWrap(True)
        self.advisory_label.setStyleSheet(
            "background: rgba(255,255,255,0.1); padding: 8px; border-left: 4px solid #fff;"
        )
        live.addWidget(self.advisory_label)

        controls = QHBoxLayout()
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        self._mode_buttons: dict[str, QPushButton] = {}
        for mode in DisplayMode:
            button = QPushButton(mode.label)
            button.setCheckable(True)
            self._mode_group.addButton(button)
            self._mode_buttons[mode.name] = button
            controls.addWidget(button)
        controls.addSpacing(12)
        self.pause_button = QPushButton("Pause")
        self.test_button = QPushButton("TEST")
        self.test_button.setCheckable(True)
        self.save_button = QPushButton("SAVE")
        controls.addWidget(self.pause_button)
        controls.addWidget(self.test_button)
        controls.addWidget(self.save_button)
        live.addLayout(controls)
        layout.addWidget(self._live_panel)

        self.plot = SpectrumPlotWidget(self)
        self.plot.setMinimumHeight(260)
        layout.addWidget(self.plot, stretch=1)

        footer = QLabel("Designed for Industrial Predictive Maintenance")
        footer.setAlignment(Qt.AlignCenter)
        footer.setStyleSheet("color: #666; font-size: 8pt;")
        layout.addWidget(footer)

        self.setCentralWidget(container)

    def _wire(self) -> None:
        c = self.controller
        self.start_button.clicked.connect(c.start)
        self.simulate_button.clicked.connect(c.toggle_simulation)
        self.test_button.clicked.connect(c.toggle_simulation)
        self.pause_button.clicked.connect(c.toggle_pause)
        self.save_button.clicked.connect(self._on_save_clicked)
        for name, button in self._mode_buttons.items():
            button.clicked.connect(lambda _checked=False, n=name: c.set_display_mode(n))

        c.frame_ready.connect(self._on_frame)
        c.state_changed.connect(self._on_state_changed)
        c.mode_changed.connect(self._on_mode_changed)
        c.simulation_changed.connect(self._on_simulation_changed)
        c.error_reported.connect(self._on_error)

    # ------------------------------------------------------------------ slots
    @Slot(object)
    def _on_frame(self, frame: FrameResult) -> None:
        status = frame.classification.status
        # The readout holds the last non-silent frequency.
        if status is not HealthStatus.SILENCE:
            self.peak_label.setText(f"{frame.dominant_hz} Hz")
        if status.is_fault:
            style = "fault"
        elif status is HealthStatus.SILENCE:
            style = "silence"
        else:
            style = "normal"
        text = "SIMULATION MODE" if frame.simulating else status.label
        self._show_classification_text(text, frame.classification.advisory, style)
        self.plot.set_series(frame.series)

    def _show_classification_text(self, badge: str, advisory: str, style: str) -> None:
        self.status_badge.setText(badge)
        self.status_badge.setStyleSheet(
            BADGE_STYLES[style] + " padding: 4px 18px; border-radius: 12px; font-weight: bold;"
        )
        self.advisory_label.setText(advisory)

    @Slot(str)
    def _on_state_changed(self, state: str) -> None:
        active = state != MonitorState.STOPPED.value
        self._idle_panel.setVisible(not active)
        self._live_panel.setVisible(active)
        self.pause_button.setText("Resume" if state == MonitorState.PAUSED.value else "Pause")

    @Slot(str)
    def _on_mode_changed(self, mode: str) -> None:
        button = self._mode_buttons.get(mode)
        if button is not None:
            button.setChecked(True)

    @Slot(bool)
    def _on_simulation_changed(self, simulating: bool) -> None:
        self.test_button.setChecked(simulating)
        self.test_button.setText("STOP" if simulating else "TEST")

    @Slot(str)
    def _on_error(self, message: str) -> None:
        QMessageBox.warning(self, "Microphone", message)

    @Slot()
    def _on_save_clicked(self) -> None:
        self._paths.ensure()
        target = self._paths.reports / report_filename(datetime.now())
        try:
            self.plot.export_png(target)
        except Exception as exc:
            self._logger.exception("Failed to export chart snapshot")
            QMessageBox.warning(self, "Save report", f"Could not save snapshot: {exc}")
            return
        self.statusBar().showMessage(f"Saved {target}", 5000)

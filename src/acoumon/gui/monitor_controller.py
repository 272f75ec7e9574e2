from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Qt, Signal, Slot

from ..config.runtime import MonitorConfig
from ..core.models import FrameResult
from ..core.monitor import MonitorSession, MonitorState
from ..core.pipeline import CallbackSink
from ..sources.base import DeviceUnavailable

logger = logging.getLogger(__name__)

DEVICE_PERMISSION_HINT = "Allow microphone access to start the diagnosis."


class MonitorController(QObject):
    """
    Non-visual controller that drives a :class:`MonitorSession` from a QTimer.

    The timer is the render cadence: every timeout runs one session tick on
    the Qt main thread. Paused sessions keep ticking but publish nothing new.
    """

    frame_ready = Signal(object)
    state_changed = Signal(str)
    simulation_changed = Signal(bool)
    mode_changed = Signal(str)
    error_reported = Signal(str)

    def __init__(
        self,
        config: MonitorConfig | None = None,
        *,
        session: MonitorSession | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session or MonitorSession(config)
        self._session.add_sink(CallbackSink(self.frame_ready.emit))

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(self._session.config.refresh_interval_ms())
        self._timer.timeout.connect(self._on_tick)

    # --------------------------------------------------------------- queries
    @property
    def session(self) -> MonitorSession:
        return self._session

    def last_frame(self) -> FrameResult | None:
        return self._session.last_frame

    def report_error(self, message: str) -> None:
        logger.error("MonitorController error: %s", message)
        self.error_reported.emit(str(message))

    # --------------------------------------------------------------- commands
    @Slot()
    def start(self) -> bool:
        try:
            self._session.start()
        except DeviceUnavailable as exc:
            self.report_error(f"{DEVICE_PERMISSION_HINT} ({exc})")
            self._emit_state()
            return False
        if not self._timer.isActive():
            self._timer.start()
        self._emit_state()
        return True

    @Slot()
    def stop(self) -> None:
        self._timer.stop()
        self._session.stop()
        self._emit_state()

    @Slot()
    def toggle_pause(self) -> None:
        self._session.toggle_pause()
        self._emit_state()

    @Slot()
    def toggle_simulation(self) -> None:
        try:
            self._session.toggle_simulation()
        except DeviceUnavailable as exc:
            self.report_error(f"{DEVICE_PERMISSION_HINT} ({exc})")
        if self._session.state is not MonitorState.STOPPED and not self._timer.isActive():
            self._timer.start()
        self.simulation_changed.emit(self._session.simulating)
        self._emit_state()

    @Slot(str)
    def set_display_mode(self, mode: str) -> None:
        self._session.set_display_mode(mode)
        self.mode_changed.emit(self._session.display_mode.name)

    # --------------------------------------------------------------- timer
    @Slot()
    def _on_tick(self) -> None:
        try:
            self._session.tick()
        except Exception:
            logger.exception("Spectrum tick failed")

    def _emit_state(self) -> None:
        self.state_changed.emit(self._session.state.value)

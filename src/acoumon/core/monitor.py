"""Monitoring session: source lifecycle, run state, and the per-tick update.

The session is driven from outside (a Qt timer in the GUI, a plain loop in
the report tool). Each :meth:`MonitorSession.tick` reads the externally set
flags once, then runs capture → window → peak → classify → series →
publish. Nothing blocks, so no threads or timeouts are involved.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Iterable, List, Optional

from ..analysis.fft import ByteSpectrumAnalyser
from ..analysis.spectrum import DisplayMode
from ..config.runtime import MonitorConfig
from ..sources.base import DeviceUnavailable, SpectrumSource
from ..sources.live import LiveSource
from ..sources.simulated import SimulatedSource
from ..tools.debug import time_block
from .models import FrameResult
from .pipeline import FrameProcessor, FrameSink

logger = logging.getLogger(__name__)

SourceFactory = Callable[[], SpectrumSource]


class MonitorState(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


def default_live_factory(cfg: MonitorConfig) -> SourceFactory:
    def _factory() -> SpectrumSource:
        analyser = ByteSpectrumAnalyser(
            cfg.fft_size,
            smoothing=cfg.smoothing_time_constant,
            min_decibels=cfg.min_decibels,
            max_decibels=cfg.max_decibels,
        )
        return LiveSource(
            sample_rate_hz=cfg.sample_rate_hz,
            device=cfg.input_device,
            analyser=analyser,
        )

    return _factory


def default_simulated_factory(cfg: MonitorConfig) -> SourceFactory:
    def _factory() -> SpectrumSource:
        return SimulatedSource(capacity=cfg.buffer_capacity, seed=cfg.simulation_seed)

    return _factory


class MonitorSession:
    """
    Owns the active spectrum source and turns its frames into published results.

    State machine: STOPPED → RUNNING via :meth:`start`, RUNNING ↔ PAUSED via
    :meth:`pause`/:meth:`resume`, any → STOPPED via :meth:`stop`. While
    paused, ticks keep arriving but the last published frame stays as is.
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        *,
        live_factory: SourceFactory | None = None,
        simulated_factory: SourceFactory | None = None,
        sinks: Iterable[FrameSink] = (),
    ) -> None:
        self._config = (config or MonitorConfig()).sanitized()
        self._processor = FrameProcessor.from_config(self._config)
        self._live_factory = live_factory or default_live_factory(self._config)
        self._simulated_factory = simulated_factory or default_simulated_factory(self._config)
        self._sinks: List[FrameSink] = list(sinks)

        self._state = MonitorState.STOPPED
        self._source: Optional[SpectrumSource] = None
        self._source_is_simulated = False
        self._mode = self._config.initial_mode()
        self._simulating = False
        self._frame_index = 0
        self._last_frame: Optional[FrameResult] = None

    # ------------------------------------------------------------------ properties
    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def processor(self) -> FrameProcessor:
        return self._processor

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is MonitorState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._state is MonitorState.PAUSED

    @property
    def display_mode(self) -> DisplayMode:
        return self._mode

    @property
    def simulating(self) -> bool:
        return self._simulating

    @property
    def last_frame(self) -> Optional[FrameResult]:
        return self._last_frame

    # ------------------------------------------------------------------ sinks
    def add_sink(self, sink: FrameSink) -> None:
        self._sinks.append(sink)

    def remove_sink(self, sink: FrameSink) -> None:
        try:
            self._sinks.remove(sink)
        except ValueError:
            pass

    # ------------------------------------------------------------------ inputs
    def set_display_mode(self, mode: DisplayMode | str) -> None:
        """Change the zoom preset; the next tick uses the new window length."""
        resolved = DisplayMode.parse(mode, default=self._mode)
        if resolved is not self._mode:
            logger.info("Display mode %s -> %s", self._mode.name, resolved.name)
        self._mode = resolved

    def set_simulating(self, enabled: bool) -> None:
        """
        Switch between the synthetic generator and the microphone.

        While a session is active the sources are swapped immediately. If the
        microphone cannot be opened, :class:`DeviceUnavailable` propagates and
        the session keeps simulating.
        """
        enabled = bool(enabled)
        if enabled == self._simulating:
            return
        if self._state is not MonitorState.STOPPED:
            new_source = self._open_source(enabled)
            self._release_source()
            self._source = new_source
            self._source_is_simulated = enabled
        self._simulating = enabled
        logger.info("Simulation %s", "enabled" if enabled else "disabled")

    def toggle_simulation(self) -> None:
        """Flip simulation; a stopped session starts right away."""
        self.set_simulating(not self._simulating)
        if self._state is MonitorState.STOPPED:
            self.start()

    # ------------------------------------------------------------------ lifecycle
    def start(self) -> None:
        """
        Acquire the source and begin processing ticks.

        Raises :class:`DeviceUnavailable` if the microphone cannot be opened;
        the session then stays STOPPED.
        """
        if self._state is not MonitorState.STOPPED:
            return
        self._source = self._open_source(self._simulating)
        self._source_is_simulated = self._simulating
        self._state = MonitorState.RUNNING
        logger.info(
            "Monitoring started (%s, mode=%s)",
            "simulated" if self._simulating else "live",
            self._mode.name,
        )

    def pause(self) -> None:
        if self._state is MonitorState.RUNNING:
            self._state = MonitorState.PAUSED
            logger.info("Monitoring paused")

    def resume(self) -> None:
        if self._state is MonitorState.PAUSED:
            self._state = MonitorState.RUNNING
            logger.info("Monitoring resumed")

    def toggle_pause(self) -> None:
        if self._state is MonitorState.RUNNING:
            self.pause()
        elif self._state is MonitorState.PAUSED:
            self.resume()

    def stop(self) -> None:
        """Release the source. Safe to call repeatedly and from inside a sink."""
        was_active = self._state is not MonitorState.STOPPED
        self._state = MonitorState.STOPPED
        self._release_source()
        if was_active:
            logger.info("Monitoring stopped")

    def close(self) -> None:
        self.stop()

    def __enter__(self) -> MonitorSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # ------------------------------------------------------------------ update cycle
    def tick(self) -> Optional[FrameResult]:
        """
        Run one update and return the frame currently on display.

        Only a RUNNING session recomputes; paused or stopped sessions return
        the last published frame untouched.
        """
        state = self._state
        mode = self._mode
        simulating = self._source_is_simulated
        source = self._source
        if state is not MonitorState.RUNNING or source is None:
            return self._last_frame

        with time_block("acoumon tick", emitter=logger.debug):
            buffer = source.capture()
            frame = self._processor.process(
                buffer,
                mode,
                simulating=simulating,
                transform=source.transform,
                frame_index=self._frame_index,
            )
        self._frame_index += 1
        self._last_frame = frame
        logger.debug("Frame %s", frame.summary())
        self._publish(frame)
        return frame

    def _publish(self, frame: FrameResult) -> None:
        for sink in list(self._sinks):
            try:
                sink.publish(frame)
            except Exception:
                logger.exception("Frame sink %r failed", sink)

    # ------------------------------------------------------------------ helpers
    def _open_source(self, simulated: bool) -> SpectrumSource:
        factory = self._simulated_factory if simulated else self._live_factory
        source = factory()
        try:
            source.open()
        except DeviceUnavailable:
            logger.error("Cannot start %s source: device unavailable", "simulated" if simulated else "live")
            raise
        return source

    def _release_source(self) -> None:
        source, self._source = self._source, None
        if source is None:
            return
        try:
            source.close()
        except Exception:
            logger.exception("Failed to close spectrum source")
